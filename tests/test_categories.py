class TestCategoryReads:
    def test_list_is_sorted_by_name(self, client_api, make_category):
        make_category("Monitors")
        make_category("Laptops")
        resp = client_api.get("/api/categories")
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 2
        assert [c["name"] for c in body["data"]] == ["Laptops", "Monitors"]

    def test_show_includes_product_count(self, client_api, make_category, make_equipment):
        cat = make_category("Laptops")
        make_equipment(cat.id)
        make_equipment(cat.id)
        resp = client_api.get(f"/api/categories?id={cat.id}")
        assert resp.status_code == 200
        assert resp.json()["data"]["product_count"] == 2

    def test_show_missing_is_404(self, client_api):
        resp = client_api.get("/api/categories?id=999")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Category not found."}


class TestCategoryWrites:
    def test_create(self, admin_api):
        resp = admin_api.post(
            "/api/categories",
            json={"name": "  Phones  ", "description": "Mobile <devices>"},
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == "Category created."
        assert body["data"]["name"] == "Phones"
        assert body["data"]["description"] == "Mobile &lt;devices&gt;"

    def test_create_requires_name(self, admin_api):
        resp = admin_api.post("/api/categories", json={"name": "   "})
        assert resp.status_code == 422
        assert resp.json() == {"error": "name is required."}

    def test_duplicate_name_is_409(self, admin_api, make_category):
        make_category("Laptops")
        resp = admin_api.post("/api/categories", json={"name": "Laptops"})
        assert resp.status_code == 409
        assert resp.json() == {"error": "Category name already exists."}

    def test_update_only_touches_sent_fields(self, admin_api, make_category):
        cat = make_category("Laptops", "Portable computers")
        resp = admin_api.put(f"/api/categories?id={cat.id}", json={"name": "Notebooks"})
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["name"] == "Notebooks"
        assert data["description"] == "Portable computers"

    def test_rename_onto_existing_is_409(self, admin_api, make_category):
        make_category("Laptops")
        other = make_category("Monitors")
        resp = admin_api.put(f"/api/categories?id={other.id}", json={"name": "Laptops"})
        assert resp.status_code == 409

    def test_update_missing_is_404(self, admin_api):
        resp = admin_api.put("/api/categories?id=999", json={"name": "X"})
        assert resp.status_code == 404

    def test_delete_empty_category(self, admin_api, make_category, client_api):
        cat = make_category("Laptops")
        resp = admin_api.delete(f"/api/categories?id={cat.id}")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Category deleted."}
        assert client_api.get(f"/api/categories?id={cat.id}").status_code == 404

    def test_delete_in_use_is_409_with_count(self, admin_api, make_category, make_equipment):
        cat = make_category("Laptops")
        for _ in range(3):
            make_equipment(cat.id)

        resp = admin_api.delete(f"/api/categories?id={cat.id}")
        assert resp.status_code == 409
        assert "3" in resp.json()["error"]
        assert resp.json() == {
            "error": "Cannot delete category with 3 product(s). "
            "Reassign or delete products first."
        }
        assert admin_api.get(f"/api/categories?id={cat.id}").status_code == 200

import pytest
from sqlmodel import select

from inventory.models.cart import CartItem
from inventory.schemas.cart import MAX_CART_QUANTITY


@pytest.fixture
def laptop(make_category, make_equipment):
    return make_equipment(make_category("Laptops").id, name="ThinkPad")


class TestAddToCart:
    def test_adding_twice_merges_into_one_row(self, client_api, client_user, laptop, db):
        for _ in range(2):
            resp = client_api.post("/api/cart", json={"product_id": laptop.id, "quantity": 1})
            assert resp.status_code == 200

        assert resp.json() == {"message": "Product added to cart.", "cart_count": 2}

        with db() as session:
            rows = session.exec(select(CartItem).where(CartItem.user_id == client_user.id)).all()
            assert len(rows) == 1
            assert rows[0].quantity == 2

    def test_quantity_defaults_to_one(self, client_api, laptop):
        client_api.post("/api/cart", json={"product_id": laptop.id})
        assert client_api.get("/api/cart?action=count").json() == {"count": 1}

    def test_unknown_product_is_404(self, client_api):
        resp = client_api.post("/api/cart", json={"product_id": 999})
        assert resp.status_code == 404
        assert resp.json() == {"error": "Product not found."}

    def test_unavailable_product_is_409(self, client_api, make_category, make_equipment):
        item = make_equipment(make_category().id, status="Under Maintenance")
        resp = client_api.post("/api/cart", json={"product_id": item.id})
        assert resp.status_code == 409
        assert "not available" in resp.json()["error"]

    @pytest.mark.parametrize(
        "body",
        [{}, {"product_id": "abc"}, {"product_id": 1, "quantity": 0}],
    )
    def test_invalid_body_is_422(self, client_api, body):
        resp = client_api.post("/api/cart", json=body)
        assert resp.status_code == 422

    @pytest.mark.parametrize("quantity", [MAX_CART_QUANTITY + 1, 10**20])
    def test_oversized_quantity_is_422(self, client_api, laptop, quantity):
        resp = client_api.post("/api/cart", json={"product_id": laptop.id, "quantity": quantity})
        assert resp.status_code == 422
        assert resp.json() == {"error": f"quantity must be at most {MAX_CART_QUANTITY}."}

    def test_oversized_product_id_is_422(self, client_api):
        resp = client_api.post("/api/cart", json={"product_id": 10**20})
        assert resp.status_code == 422
        assert resp.json() == {"error": "product_id must be a positive integer."}

    def test_merged_quantity_is_capped(self, client_api, client_user, laptop, db):
        half = MAX_CART_QUANTITY // 2 + 1
        assert client_api.post(
            "/api/cart", json={"product_id": laptop.id, "quantity": half}
        ).status_code == 200

        resp = client_api.post("/api/cart", json={"product_id": laptop.id, "quantity": half})
        assert resp.status_code == 422
        assert "cannot exceed" in resp.json()["error"]

        with db() as session:
            line = session.exec(select(CartItem).where(CartItem.user_id == client_user.id)).one()
            assert line.quantity == half

    def test_merging_up_to_the_cap_is_allowed(self, client_api, laptop):
        client_api.post("/api/cart", json={"product_id": laptop.id, "quantity": MAX_CART_QUANTITY - 1})
        resp = client_api.post("/api/cart", json={"product_id": laptop.id})
        assert resp.status_code == 200
        assert resp.json()["cart_count"] == MAX_CART_QUANTITY


class TestCartReads:
    def test_list_includes_product_details(self, client_api, laptop):
        client_api.post("/api/cart", json={"product_id": laptop.id, "quantity": 3})

        resp = client_api.get("/api/cart")
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 1
        line = body["items"][0]
        assert line["product_id"] == laptop.id
        assert line["name"] == "ThinkPad"
        assert line["quantity"] == 3
        assert line["category_name"] == "Laptops"
        assert line["primary_image"] is None

    def test_count_sums_quantities(self, client_api, laptop, make_equipment):
        other = make_equipment(laptop.category_id)
        client_api.post("/api/cart", json={"product_id": laptop.id, "quantity": 2})
        client_api.post("/api/cart", json={"product_id": other.id, "quantity": 3})
        assert client_api.get("/api/cart?action=count").json() == {"count": 5}


class TestCartChanges:
    def _line_id(self, api):
        return api.get("/api/cart").json()["items"][0]["cart_id"]

    def test_update_quantity(self, client_api, laptop):
        client_api.post("/api/cart", json={"product_id": laptop.id})
        cart_id = self._line_id(client_api)

        resp = client_api.put(f"/api/cart?id={cart_id}", json={"quantity": 4})
        assert resp.status_code == 200
        assert resp.json() == {"message": "Cart updated.", "cart_count": 4}

    def test_update_rejects_zero(self, client_api, laptop):
        client_api.post("/api/cart", json={"product_id": laptop.id})
        cart_id = self._line_id(client_api)
        resp = client_api.put(f"/api/cart?id={cart_id}", json={"quantity": 0})
        assert resp.status_code == 422

    def test_update_rejects_oversized_quantity(self, client_api, laptop):
        client_api.post("/api/cart", json={"product_id": laptop.id})
        cart_id = self._line_id(client_api)
        resp = client_api.put(f"/api/cart?id={cart_id}", json={"quantity": 10**20})
        assert resp.status_code == 422
        assert client_api.get("/api/cart?action=count").json() == {"count": 1}

    def test_cannot_touch_another_users_line(self, client_api, laptop, other_client, db):
        with db() as session:
            line = CartItem(user_id=other_client.id, product_id=laptop.id, quantity=1)
            session.add(line)
            session.commit()
            session.refresh(line)
            line_id = line.id

        assert client_api.put(f"/api/cart?id={line_id}", json={"quantity": 9}).status_code == 404
        assert client_api.delete(f"/api/cart?id={line_id}").status_code == 404

        with db() as session:
            assert session.get(CartItem, line_id).quantity == 1

    def test_remove_line(self, client_api, laptop):
        client_api.post("/api/cart", json={"product_id": laptop.id})
        cart_id = self._line_id(client_api)

        resp = client_api.delete(f"/api/cart?id={cart_id}")
        assert resp.status_code == 200
        assert resp.json() == {"message": "Item removed from cart.", "cart_count": 0}

    def test_clear(self, client_api, laptop, make_equipment):
        other = make_equipment(laptop.category_id)
        client_api.post("/api/cart", json={"product_id": laptop.id})
        client_api.post("/api/cart", json={"product_id": other.id})

        resp = client_api.delete("/api/cart?action=clear")
        assert resp.status_code == 200
        assert resp.json()["cart_count"] == 0
        assert client_api.get("/api/cart").json() == {"items": [], "count": 0}

    def test_deleting_product_removes_cart_lines(self, client_api, admin_api, laptop):
        client_api.post("/api/cart", json={"product_id": laptop.id})
        assert admin_api.delete(f"/api/equipment?id={laptop.id}").status_code == 200
        assert client_api.get("/api/cart?action=count").json() == {"count": 0}

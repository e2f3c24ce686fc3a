from inventory.models.cart import CartItem
from inventory.models.equipment import Equipment
from inventory.models.user import User


class TestUserReads:
    def test_list_never_exposes_hashes(self, admin_api, client_user):
        resp = admin_api.get("/api/users")
        assert resp.status_code == 200
        body = resp.json()
        assert body["count"] == 2
        assert all("password_hash" not in u for u in body["data"])
        assert "$2" not in resp.text

    def test_clients_only(self, admin_api, client_user, other_client):
        body = admin_api.get("/api/users?clients=1").json()
        assert sorted(u["username"] for u in body["data"]) == ["alice", "bob"]

    def test_show(self, admin_api, client_user):
        data = admin_api.get(f"/api/users?id={client_user.id}").json()["data"]
        assert data["username"] == "alice"
        assert data["email"] == "alice@company.com"

    def test_show_missing_is_404(self, admin_api):
        resp = admin_api.get("/api/users?id=999")
        assert resp.status_code == 404
        assert resp.json() == {"error": "User not found."}


class TestUserWrites:
    def test_admin_can_create_admin(self, admin_api):
        resp = admin_api.post(
            "/api/users",
            json={"username": "second_admin", "password": "secret1", "role": "admin"},
        )
        assert resp.status_code == 201
        assert resp.json()["message"] == "User created."
        assert resp.json()["data"]["role"] == "admin"

    def test_invalid_role_is_422(self, admin_api):
        resp = admin_api.post(
            "/api/users",
            json={"username": "eve", "password": "secret1", "role": "root"},
        )
        assert resp.status_code == 422
        assert resp.json() == {"error": 'role must be either "admin" or "client".'}

    def test_duplicate_username_is_409(self, admin_api, client_user):
        resp = admin_api.post("/api/users", json={"username": "alice", "password": "secret1"})
        assert resp.status_code == 409

    def test_update_without_password_keeps_hash(self, admin_api, client_user, db):
        resp = admin_api.put(
            f"/api/users?id={client_user.id}",
            json={"full_name": "Alice Smith", "password": ""},
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["full_name"] == "Alice Smith"

        with db() as session:
            assert session.get(User, client_user.id).password_hash == client_user.password_hash

    def test_update_with_password_rehashes(self, admin_api, anon_api, client_user):
        resp = admin_api.put(f"/api/users?id={client_user.id}", json={"password": "brand-new"})
        assert resp.status_code == 200

        login = anon_api.post(
            "/api/auth?action=login", json={"username": "alice", "password": "brand-new"}
        )
        assert login.status_code == 200

    def test_rename_onto_existing_is_409(self, admin_api, client_user, other_client):
        resp = admin_api.put(f"/api/users?id={other_client.id}", json={"username": "alice"})
        assert resp.status_code == 409
        assert resp.json() == {"error": "Username already exists on another user."}


class TestUserDelete:
    def test_admin_cannot_delete_self(self, admin_api, admin_user, db):
        resp = admin_api.delete(f"/api/users?id={admin_user.id}")
        assert resp.status_code == 409
        assert resp.json() == {"error": "Cannot delete your own account."}

        with db() as session:
            assert session.get(User, admin_user.id) is not None

    def test_delete_cleans_up_cart_and_assignments(
        self, admin_api, client_api, client_user, make_category, make_equipment, db
    ):
        item = make_equipment(make_category().id, assigned_to=client_user.id)
        client_api.post("/api/cart", json={"product_id": item.id})

        resp = admin_api.delete(f"/api/users?id={client_user.id}")
        assert resp.status_code == 200
        assert resp.json() == {"message": "User deleted."}

        with db() as session:
            assert session.get(User, client_user.id) is None
            assert session.get(Equipment, item.id).assigned_to is None
            assert session.get(CartItem, 1) is None

    def test_delete_missing_is_404(self, admin_api):
        assert admin_api.delete("/api/users?id=999").status_code == 404

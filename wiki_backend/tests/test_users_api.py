BASE = "/api/v1/users/"


class TestUsersAPI:
    def test_create_and_fetch(self, client):
        res = client.post(BASE, json={"username": "ann", "password": "secret"})
        assert res.status_code == 201
        user = res.json()
        assert user["username"] == "ann"
        assert "password" not in user

        by_id = client.get(f"{BASE}{user['id']}")
        assert by_id.status_code == 200
        assert by_id.json() == user

        by_name = client.get(BASE, params={"username": "ann"})
        assert by_name.status_code == 200
        assert by_name.json()["id"] == user["id"]

    def test_duplicate_username_conflict(self, client):
        assert client.post(BASE, json={"username": "ann", "password": "a"}).status_code == 201
        res = client.post(BASE, json={"username": "ann", "password": "b"})
        assert res.status_code == 409
        assert res.json()["detail"] == "Username already exists"

    def test_not_found(self, client):
        assert client.get(f"{BASE}missing").status_code == 404
        res = client.get(BASE, params={"username": "ghost"})
        assert res.status_code == 404
        assert res.json()["detail"] == "User not found"

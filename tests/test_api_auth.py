"""Tests for authentication, profile and admin user routes."""

from conftest import auth_headers

REGISTRATION = {
    "first_name": "Noa",
    "last_name": "Cohen",
    "email": "Noa.Cohen@Mail.com",
    "password": "hunter22",
    "phone": "0521112233",
}


class TestRegisterAndLogin:
    def test_register_returns_token(self, client):
        response = client.post("/api/auth/register", json=REGISTRATION)
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["token"]
        assert data["user"]["email"] == "noa.cohen@mail.com"
        assert data["user"]["role"] == "customer"
        assert "password_hash" not in data["user"]

    def test_duplicate_email(self, client):
        client.post("/api/auth/register", json=REGISTRATION)
        response = client.post(
            "/api/auth/register", json={**REGISTRATION, "email": "noa.cohen@mail.com"}
        )
        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_short_password(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "password": "123"})
        assert response.status_code == 400
        assert any("password" in e for e in response.json()["errors"])

    def test_login_and_use_token(self, client):
        client.post("/api/auth/register", json=REGISTRATION)
        response = client.post(
            "/api/auth/login",
            json={"email": "noa.cohen@mail.com", "password": "hunter22"},
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["last_login"] is not None

        headers = {"Authorization": f"Bearer {data['token']}"}
        verify = client.get("/api/auth/verify-token", headers=headers)
        assert verify.status_code == 200
        assert verify.json()["data"]["email"] == "noa.cohen@mail.com"

    def test_wrong_password(self, client, customer):
        response = client.post(
            "/api/auth/login", json={"email": customer.email, "password": "wrong-one"}
        )
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    def test_disabled_account_cannot_login(self, client, make_user):
        user = make_user(is_active=False)
        response = client.post(
            "/api/auth/login", json={"email": user.email, "password": "secret123"}
        )
        assert response.status_code == 401

    def test_logout(self, client, customer_headers):
        response = client.post("/api/auth/logout", headers=customer_headers)
        assert response.status_code == 200
        assert response.json()["success"] is True


class TestProfile:
    def test_profile_requires_auth(self, client):
        assert client.get("/api/auth/profile").status_code == 401

    def test_update_profile(self, client, customer_headers):
        response = client.put(
            "/api/auth/profile",
            json={
                "first_name": "Maya",
                "address": {"street": "5 Dizengoff", "city": "Tel Aviv", "zip_code": "6433222"},
            },
            headers=customer_headers,
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["first_name"] == "Maya"
        assert data["address"]["country"] == "Israel"

    def test_email_and_role_not_editable(self, client, customer_headers):
        response = client.put(
            "/api/auth/profile", json={"role": "admin"}, headers=customer_headers
        )
        assert response.status_code == 400

    def test_change_password(self, client, customer, customer_headers):
        response = client.put(
            "/api/auth/change-password",
            json={"current_password": "secret123", "new_password": "brand-new"},
            headers=customer_headers,
        )
        assert response.status_code == 200

        login = client.post(
            "/api/auth/login", json={"email": customer.email, "password": "brand-new"}
        )
        assert login.status_code == 200

    def test_change_password_wrong_current(self, client, customer_headers):
        response = client.put(
            "/api/auth/change-password",
            json={"current_password": "nope", "new_password": "brand-new"},
            headers=customer_headers,
        )
        assert response.status_code == 400


class TestAdminUsers:
    def test_customer_cannot_list_users(self, client, customer_headers):
        assert client.get("/api/users", headers=customer_headers).status_code == 403

    def test_admin_lists_users(self, client, admin_headers, customer):
        response = client.get("/api/users", headers=admin_headers)
        assert response.status_code == 200
        emails = {u["email"] for u in response.json()["data"]}
        assert customer.email in emails

    def test_promote_user(self, client, admin_headers, customer):
        response = client.patch(
            f"/api/users/{customer.id}/role", json={"role": "admin"}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["data"]["role"] == "admin"

    def test_disabled_user_token_rejected(self, client, admin_headers, customer):
        headers = auth_headers(customer)
        response = client.patch(
            f"/api/users/{customer.id}/active", json={"is_active": False}, headers=admin_headers
        )
        assert response.status_code == 200

        rejected = client.get("/api/auth/profile", headers=headers)
        assert rejected.status_code == 401
        assert rejected.json()["message"] == "Account is disabled"

    def test_unknown_user(self, client, admin_headers):
        response = client.get(
            "/api/users/00000000-0000-0000-0000-000000000000", headers=admin_headers
        )
        assert response.status_code == 404

"""
Integration tests for /api/v1/auth and permission checks
"""
from gestion.core.auth import create_refresh_token


API = "/api/v1"


class TestAuthEndpoints:

    def test_login_returns_tokens_and_profile(self, client):
        # Act
        response = client.post(f"{API}/auth/login", json={"email": "admin@example.com", "password": "admin123"})

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["accessToken"]
        assert body["refreshToken"]
        assert body["user"]["role"]["name"] == "admin"
        assert "approve_orders" in body["user"]["permissions"]

    def test_login_wrong_password(self, client):
        response = client.post(f"{API}/auth/login", json={"email": "admin@example.com", "password": "incorrecta"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Credenciales inválidas"

    def test_register_uses_default_role(self, client):
        response = client.post(
            f"{API}/auth/register",
            json={"email": "Nuevo@Example.com", "password": "secreto1", "firstName": "Nuevo"},
        )

        assert response.status_code == 201
        user = response.json()["user"]
        assert user["email"] == "nuevo@example.com"
        assert user["role"]["name"] == "user"

    def test_register_duplicate_email(self, client):
        response = client.post(f"{API}/auth/register", json={"email": "user@example.com", "password": "secreto1"})

        assert response.status_code == 400

    def test_refresh_and_logout(self, client):
        login = client.post(f"{API}/auth/login", json={"email": "user@example.com", "password": "user123"}).json()
        headers = {"Authorization": f"Bearer {login['accessToken']}"}

        refreshed = client.post(f"{API}/auth/refresh", json={"refreshToken": login["refreshToken"]})
        assert refreshed.status_code == 200
        new_refresh = refreshed.json()["refreshToken"]

        logout = client.post(f"{API}/auth/logout", headers=headers)
        assert logout.json()["message"] == "Sesión cerrada correctamente"

        after_logout = client.post(f"{API}/auth/refresh", json={"refreshToken": new_refresh})
        assert after_logout.status_code == 401

    def test_refresh_token_not_issued_by_login(self, client, regular_user):
        response = client.post(f"{API}/auth/refresh", json={"refreshToken": create_refresh_token(regular_user)})

        assert response.status_code == 401

    def test_access_token_rejected_as_refresh(self, client, user_headers):
        token = user_headers["Authorization"].split(" ")[1]

        response = client.post(f"{API}/auth/refresh", json={"refreshToken": token})

        assert response.status_code == 401

    def test_me(self, client, user_headers):
        response = client.get(f"{API}/auth/me", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "user@example.com"


class TestPermissions:

    def test_missing_token(self, client):
        response = client.get(f"{API}/orders")

        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"

    def test_invalid_token(self, client):
        response = client.get(f"{API}/orders", headers={"Authorization": "Bearer basura"})

        assert response.status_code == 401

    def test_missing_permission(self, client, user_headers):
        response = client.delete(f"{API}/areas/00000000-0000-0000-0000-000000000000", headers=user_headers)

        assert response.status_code == 403
        assert response.json()["detail"] == "Missing required permissions: delete_areas"


class TestHealth:

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "online"

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

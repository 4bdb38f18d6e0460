"""Unit Tests for the JobTracker API"""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import patch


APP_DATA = {
    "jobTitle": "Backend Engineer",
    "company": "TechCorp",
    "location": "Berlin",
    "date": "2024-03-05",
    "status": "applied",
    "notes": "Referral",
}


@pytest.fixture
def token(register):
    return register()["token"]


@pytest.fixture
def headers(token, auth_header):
    return auth_header(token)


class TestHealth:
    """Test health and root endpoints"""

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready(self, client):
        assert client.get("/ready").json() == {"status": "ready"}

    def test_root(self, client):
        data = client.get("/").json()
        assert data["name"] == "JobTracker"


class TestRegisterAndLogin:
    """Test account creation and login"""

    def test_register_returns_token_and_user(self, register):
        body = register()
        assert body["token"]
        assert body["user"]["email"] == "ada@example.com"
        assert body["user"]["id"].startswith("user_")
        assert "password" not in body["user"]
        assert "passwordHash" not in body["user"]

    def test_duplicate_email(self, client, register, password):
        register()
        response = client.post(
            "/api/auth/register",
            json={"name": "Other", "email": "ADA@example.com", "password": password},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "User already exists with this email"

    def test_register_validation_errors(self, client):
        response = client.post(
            "/api/auth/register", json={"name": "A", "email": "nope", "password": "123"}
        )
        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation failed"
        fields = {e["field"] for e in body["errors"]}
        assert fields == {"name", "email", "password"}
        messages = {e["message"] for e in body["errors"]}
        assert "Name must be at least 2 characters" in messages

    def test_login(self, client, register, password):
        register()
        response = client.post(
            "/api/auth/login", json={"email": "ada@example.com", "password": password}
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Login successful"

    @pytest.mark.parametrize("email,use_real_password", [
        ("ada@example.com", False),
        ("nobody@example.com", True),
    ])
    def test_login_wrong_credentials(self, client, register, password, email, use_real_password):
        register()
        attempt = password if use_real_password else "wrong-password"
        response = client.post("/api/auth/login", json={"email": email, "password": attempt})
        assert response.status_code == 400
        assert response.json()["message"] == "Wrong email or password"


class TestCurrentUser:
    """Test bearer credential handling"""

    def test_me(self, client, headers):
        response = client.get("/api/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Ada Lovelace"

    def test_missing_token(self, client):
        response = client.get("/api/auth/me")
        assert response.status_code == 401
        assert response.json()["message"] == "No token, authorization denied"

    def test_garbage_token(self, client, auth_header):
        response = client.get("/api/auth/me", headers=auth_header("not.a.jwt"))
        assert response.status_code == 401
        assert response.json()["message"] == "Token is not valid"

    def test_token_for_deleted_user(self, client, db, headers):
        db.delete_user_by_email("ada@example.com")
        assert client.get("/api/auth/me", headers=headers).status_code == 401

    def test_logout(self, client):
        assert client.post("/api/auth/logout").json()["message"] == "Logged out successfully"


class TestPasswordReset:
    """Test the forgot/reset password flow"""

    def test_unknown_email(self, client):
        response = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})
        assert response.status_code == 404

    def test_reset_flow(self, client, db, register):
        register()
        with patch("jobtracker.ui.api.services.auth_service.generate_reset_token", return_value="a" * 40):
            response = client.post("/api/auth/forgot-password", json={"email": "ada@example.com"})
        assert response.status_code == 200
        assert "server log" in response.json()["message"]

        response = client.post(f"/api/auth/reset-password/{'a' * 40}", json={"password": "brand-new"})
        assert response.status_code == 200
        assert response.json()["message"] == "Password has been updated successfully."

        # Token is single use
        response = client.post(f"/api/auth/reset-password/{'a' * 40}", json={"password": "again-new"})
        assert response.status_code == 400

        response = client.post(
            "/api/auth/login", json={"email": "ada@example.com", "password": "brand-new"}
        )
        assert response.status_code == 200

    def test_expired_token(self, client, db, register):
        user_id = register()["user"]["id"]
        db.set_reset_token(user_id, "b" * 40, datetime.now(timezone.utc) - timedelta(minutes=1))
        response = client.post(f"/api/auth/reset-password/{'b' * 40}", json={"password": "brand-new"})
        assert response.status_code == 400
        assert response.json()["message"] == "Password reset token is invalid or has expired."

    def test_mail_sent_when_configured(self, client, auth_service, register):
        register()
        with patch.object(auth_service.mail, "send_reset_link", return_value=True) as send:
            response = client.post("/api/auth/forgot-password", json={"email": "ada@example.com"})
        assert response.json()["message"] == "Password reset instructions have been sent to your email."
        recipient, url = send.call_args[0]
        assert recipient == "ada@example.com"
        assert url.startswith("http://testserver/#reset/")


class TestApplications:
    """Test owner-scoped application CRUD"""

    def test_requires_auth(self, client):
        assert client.get("/api/applications").status_code == 401

    def test_create_and_list(self, client, headers):
        response = client.post("/api/applications", json=APP_DATA, headers=headers)
        assert response.status_code == 201
        created = response.json()
        assert created["id"].startswith("app_")
        assert created["jobTitle"] == "Backend Engineer"
        assert created["user"].startswith("user_")
        assert "createdAt" in created

        listed = client.get("/api/applications", headers=headers).json()
        assert [a["id"] for a in listed] == [created["id"]]

    def test_list_newest_date_first(self, client, headers):
        for day in ["2024-01-10", "2024-03-01", "2024-02-15"]:
            client.post("/api/applications", json={**APP_DATA, "date": day}, headers=headers)
        dates = [a["date"] for a in client.get("/api/applications", headers=headers).json()]
        assert dates == ["2024-03-01", "2024-02-15", "2024-01-10"]

    def test_status_query(self, client, headers):
        client.post("/api/applications", json=APP_DATA, headers=headers)
        client.post("/api/applications", json={**APP_DATA, "status": "offer"}, headers=headers)

        offers = client.get("/api/applications?status=offer", headers=headers).json()
        assert [a["status"] for a in offers] == ["offer"]
        assert len(client.get("/api/applications?status=all", headers=headers).json()) == 2
        assert client.get("/api/applications?status=ghosted", headers=headers).status_code == 400

    def test_create_validation(self, client, headers):
        response = client.post(
            "/api/applications", json={**APP_DATA, "jobTitle": "", "company": " "}, headers=headers
        )
        assert response.status_code == 400
        messages = {e["message"] for e in response.json()["errors"]}
        assert messages == {"Job title is required", "Company name is required"}

    def test_update(self, client, headers):
        app_id = client.post("/api/applications", json=APP_DATA, headers=headers).json()["id"]
        response = client.put(
            f"/api/applications/{app_id}", json={**APP_DATA, "status": "interview"}, headers=headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "interview"

    def test_delete(self, client, headers):
        app_id = client.post("/api/applications", json=APP_DATA, headers=headers).json()["id"]
        response = client.delete(f"/api/applications/{app_id}", headers=headers)
        assert response.json()["message"] == "Application deleted successfully"
        assert client.get("/api/applications", headers=headers).json() == []

    def test_invalid_id(self, client, headers):
        response = client.put("/api/applications/123", json=APP_DATA, headers=headers)
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid application ID"
        assert client.delete("/api/applications/xyz", headers=headers).status_code == 400

    def test_unknown_id(self, client, headers):
        response = client.delete("/api/applications/app_000000000000", headers=headers)
        assert response.status_code == 404

    def test_other_users_records_are_invisible(self, client, register, auth_header, headers):
        app_id = client.post("/api/applications", json=APP_DATA, headers=headers).json()["id"]
        other = auth_header(register(email="bob@example.com", name="Bob")["token"])

        assert client.get("/api/applications", headers=other).json() == []
        assert client.get(f"/api/applications/{app_id}", headers=other).status_code == 404

        response = client.put(f"/api/applications/{app_id}", json=APP_DATA, headers=other)
        assert response.status_code == 404
        assert response.json()["message"] == "Application not found or you are not authorized to update it"

        response = client.delete(f"/api/applications/{app_id}", headers=other)
        assert response.status_code == 404
        assert response.json()["message"] == "Application not found or you are not authorized to delete it"

        # Owner still has it
        assert len(client.get("/api/applications", headers=headers).json()) == 1

    def test_delete_user_cascades(self, client, db, headers):
        client.post("/api/applications", json=APP_DATA, headers=headers)
        user_id = client.get("/api/auth/me", headers=headers).json()["id"]
        assert db.delete_user_by_email("ada@example.com")
        assert db.get_applications(user_id) == []

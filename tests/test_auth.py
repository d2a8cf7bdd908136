"""Tests for bearer token verification and profile resolution."""

from jose import jwt

from crewhub.models import UserProfile

from .conftest import JWT_SECRET, auth_headers, make_token


class TestTokenVerification:
    def test_missing_header_is_rejected(self, client):
        response = client.get("/profile/me")
        assert response.status_code in (401, 403)
        assert response.json()["success"] is False

    def test_malformed_token(self, client):
        response = client.get("/profile/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token format. Expected a valid JWT token."

    def test_expired_token_sets_header(self, client):
        token = make_token("auth-expired", "late@example.com", expires_in=-60)
        response = client.get("/profile/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.headers["X-Token-Expired"] == "true"

    def test_wrong_signature(self, client):
        token = jwt.encode({"sub": "x", "aud": "authenticated"}, "other-secret", algorithm="HS256")
        response = client.get("/profile/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_wrong_audience(self, client):
        token = jwt.encode({"sub": "x", "aud": "anon"}, JWT_SECRET, algorithm="HS256")
        response = client.get("/profile/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_missing_subject(self, client):
        token = jwt.encode({"aud": "authenticated"}, JWT_SECRET, algorithm="HS256")
        response = client.get("/profile/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token claims"


class TestProfileResolution:
    def test_first_request_creates_profile(self, client, db_session):
        headers = auth_headers(
            "auth-new", "New.Person@Example.com", user_metadata={"full_name": "New Person"}
        )
        response = client.get("/profile/me", headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["email"] == "new.person@example.com"
        assert data["full_name"] == "New Person"
        assert data["profileCompletion"] == 0
        assert data["isComplete"] is False
        assert db_session.query(UserProfile).count() == 1

    def test_same_subject_reuses_profile(self, client, db_session):
        headers = auth_headers("auth-same", "same@example.com")
        first = client.get("/profile/me", headers=headers).json()["data"]
        second = client.get("/profile/me", headers=headers).json()["data"]
        assert first["id"] == second["id"]
        assert db_session.query(UserProfile).count() == 1

    def test_profile_migrates_to_new_subject_by_email(self, client, make_member, db_session):
        member = make_member()
        response = client.get("/profile/me", headers=auth_headers("auth-oauth", member.email))

        assert response.status_code == 200
        assert response.json()["data"]["id"] == member.id
        db_session.expire_all()
        assert db_session.get(UserProfile, member.id).auth_uid == "auth-oauth"

    def test_token_without_email_gets_placeholder(self, client):
        response = client.get("/profile/me", headers=auth_headers("auth-noemail"))
        assert response.json()["data"]["email"] == "auth-noemail@users.invalid"

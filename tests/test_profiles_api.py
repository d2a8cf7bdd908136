"""API tests for the current user's profile."""

from .conftest import auth_headers

FULL_PROFILE = {
    "full_name": "Jane Doe",
    "handle": "jane",
    "primary_role": "Colorist",
    "bio": "Grading features and music videos.",
    "location": "Abu Dhabi",
    "avatar_url": "https://cdn.example.com/jane.png",
    "resume_url": "https://cdn.example.com/jane.pdf",
    "portfolio_url": "https://jane.example.com",
}


class TestProfileUpdate:
    def test_update_recomputes_completion(self, client):
        headers = auth_headers("auth-jane", "jane@example.com")
        response = client.patch("/profile/me", json=FULL_PROFILE, headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["handle"] == "@jane"
        assert data["profileCompletion"] == 90
        assert data["isComplete"] is True

        completeness = client.get("/profile/me/completeness", headers=headers).json()["data"]
        assert completeness == {"isComplete": True, "percentage": 90}

    def test_partial_update_keeps_other_fields(self, client):
        headers = auth_headers("auth-jane", "jane@example.com")
        client.patch("/profile/me", json=FULL_PROFILE, headers=headers)

        data = client.patch("/profile/me", json={"day_rate": 1500}, headers=headers).json()["data"]
        assert data["full_name"] == "Jane Doe"
        assert data["day_rate"] == 1500
        assert data["profileCompletion"] == 95

    def test_taken_handle_is_rejected(self, client, make_member):
        make_member()  # owns @member1
        headers = auth_headers("auth-jane", "jane@example.com")

        response = client.patch("/profile/me", json={"handle": "member1"}, headers=headers)
        assert response.status_code == 409
        assert response.json() == {"success": False, "error": "This handle is already taken"}

    def test_invalid_fields_return_422(self, client):
        headers = auth_headers("auth-jane", "jane@example.com")
        response = client.patch(
            "/profile/me",
            json={"portfolio_url": "javascript:alert(1)", "experience_level": "guru"},
            headers=headers,
        )

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Validation failed"
        assert {d["field"] for d in body["details"]} == {"portfolio_url", "experience_level"}

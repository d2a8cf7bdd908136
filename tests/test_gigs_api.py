"""API tests for gigs, applications and the notifications they raise."""

import pytest

GIG_PAYLOAD = {
    "title": "4 Video Editors for Shortfilm",
    "description": "Editing a 20 minute short.",
    "budget_amount": 12500,
    "currency": "aed",
    "dates": [
        {"month": "September 2025", "days": "10, 1-5"},
        {"month": "Oct 2025", "days": "2"},
    ],
    "locations": ["Dubai", " Dubai ", "Remote"],
}


@pytest.fixture
def gig(client, creator):
    response = client.post("/gigs", json=GIG_PAYLOAD, headers=creator.headers)
    assert response.status_code == 201
    return response.json()["data"]


class TestCreateGig:
    def test_created_gig_is_normalized(self, gig, creator):
        assert gig["slug"] == "4-video-editors-for-shortfilm"
        assert gig["currency"] == "AED"
        assert gig["budgetLabel"] == "AED 12,500"
        assert gig["dates"][0] == {"month": "Sep 2025", "days": "1-5, 10", "label": None}
        assert gig["calendarMonths"] == [
            {"month": 8, "year": 2025, "highlightedDays": [1, 2, 3, 4, 5, 10]},
            {"month": 9, "year": 2025, "highlightedDays": [2]},
        ]
        assert gig["locations"] == ["Dubai", "Remote"]
        assert gig["creator"]["id"] == creator.id

    def test_duplicate_title_gets_unique_slug(self, client, gig, creator):
        second = client.post("/gigs", json=GIG_PAYLOAD, headers=creator.headers).json()["data"]
        assert second["slug"].startswith("4-video-editors-for-shortfilm-")
        assert second["slug"] != gig["slug"]

    def test_incomplete_profile_is_blocked(self, client, make_member):
        newcomer = make_member(complete=False)
        response = client.post("/gigs", json=GIG_PAYLOAD, headers=newcomer.headers)
        assert response.status_code == 403
        assert response.headers["X-Profile-Incomplete"] == "true"

    @pytest.mark.parametrize(
        "dates",
        [
            [],
            [{"month": "Smarch 2025", "days": "1"}],
            [{"month": "Sep 0", "days": "1-2"}],
            [{"month": "Feb 2025", "days": "30, 31"}],
        ],
    )
    def test_invalid_dates_are_rejected(self, client, creator, dates):
        response = client.post("/gigs", json={**GIG_PAYLOAD, "dates": dates}, headers=creator.headers)
        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_request_quote_label(self, client, creator):
        payload = {**GIG_PAYLOAD, "budget_amount": None, "request_quote": True}
        data = client.post("/gigs", json=payload, headers=creator.headers).json()["data"]
        assert data["budgetLabel"] == "Request quote"


class TestReadGigs:
    def test_get_by_slug_or_id(self, client, gig):
        by_slug = client.get(f"/gigs/{gig['slug']}").json()["data"]
        by_id = client.get(f"/gigs/{gig['id']}").json()["data"]
        assert by_slug["id"] == by_id["id"] == gig["id"]

    def test_unknown_gig_is_404(self, client):
        response = client.get("/gigs/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Gig not found"}

    def test_public_feed_paginates_active_gigs(self, client, creator):
        for i in range(3):
            client.post("/gigs", json={**GIG_PAYLOAD, "title": f"Gig number {i}"}, headers=creator.headers)
        client.post(
            "/gigs", json={**GIG_PAYLOAD, "title": "Draft gig", "status": "draft"}, headers=creator.headers
        )

        data = client.get("/gigs", params={"page": 1, "limit": 2}).json()["data"]
        assert len(data["gigs"]) == 2
        assert data["gigs"][0]["title"] == "Gig number 2"
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    def test_my_gigs_include_drafts_and_application_counts(self, client, creator, gig):
        client.post(
            "/gigs", json={**GIG_PAYLOAD, "title": "Draft gig", "status": "draft"}, headers=creator.headers
        )
        data = client.get("/gigs/my", headers=creator.headers).json()["data"]
        assert {g["status"] for g in data} == {"active", "draft"}
        assert all(g["applicationCount"] == 0 for g in data)


class TestUpdateGig:
    def test_creator_can_update(self, client, creator, gig):
        response = client.patch(
            f"/gigs/{gig['id']}",
            json={"title": "Three Editors", "dates": [{"month": "Nov 2025", "days": "7"}]},
            headers=creator.headers,
        )
        data = response.json()["data"]
        assert data["title"] == "Three Editors"
        assert data["slug"] == gig["slug"]
        assert data["calendarMonths"] == [{"month": 10, "year": 2025, "highlightedDays": [7]}]

    def test_other_users_cannot_update_or_delete(self, client, crew, gig):
        assert client.patch(f"/gigs/{gig['id']}", json={"title": "Mine now"}, headers=crew.headers).status_code == 403
        assert client.delete(f"/gigs/{gig['id']}", headers=crew.headers).status_code == 403

    def test_delete(self, client, creator, gig):
        assert client.delete(f"/gigs/{gig['id']}", headers=creator.headers).status_code == 200
        assert client.get(f"/gigs/{gig['id']}").status_code == 404


class TestApplications:
    def test_apply_notifies_creator(self, client, creator, crew, gig):
        response = client.post(
            f"/gigs/{gig['id']}/apply", json={"cover_note": "I cut two festival shorts."}, headers=crew.headers
        )
        assert response.status_code == 201
        application = response.json()["data"]
        assert application["status"] == "pending"
        assert application["portfolio_url"] == "https://portfolio.example.com"

        inbox = client.get("/notifications", headers=creator.headers).json()["data"]
        assert inbox["unreadCount"] == 1
        assert inbox["notifications"][0]["type"] == "application_received"

    def test_cannot_apply_to_own_gig(self, client, creator, gig):
        response = client.post(f"/gigs/{gig['id']}/apply", json={}, headers=creator.headers)
        assert response.status_code == 400

    def test_cannot_apply_twice(self, client, crew, gig):
        client.post(f"/gigs/{gig['id']}/apply", json={}, headers=crew.headers)
        response = client.post(f"/gigs/{gig['id']}/apply", json={}, headers=crew.headers)
        assert response.status_code == 409

    def test_cannot_apply_to_closed_gig(self, client, creator, crew, gig):
        client.patch(f"/gigs/{gig['id']}", json={"status": "closed"}, headers=creator.headers)
        response = client.post(f"/gigs/{gig['id']}/apply", json={}, headers=crew.headers)
        assert response.status_code == 400

    def test_incomplete_profile_cannot_apply(self, client, make_member, gig):
        newcomer = make_member(complete=False)
        response = client.post(f"/gigs/{gig['id']}/apply", json={}, headers=newcomer.headers)
        assert response.status_code == 403

    def test_status_change_notifies_applicant(self, client, creator, crew, gig):
        application = client.post(f"/gigs/{gig['id']}/apply", json={}, headers=crew.headers).json()["data"]

        response = client.patch(
            f"/gigs/{gig['id']}/applications/{application['id']}/status",
            json={"status": "shortlisted"},
            headers=creator.headers,
        )
        assert response.json()["data"]["status"] == "shortlisted"

        inbox = client.get("/notifications", headers=crew.headers).json()["data"]
        assert [n["type"] for n in inbox["notifications"]] == ["status_changed"]

    def test_invalid_status_is_rejected(self, client, creator, crew, gig):
        application = client.post(f"/gigs/{gig['id']}/apply", json={}, headers=crew.headers).json()["data"]
        response = client.patch(
            f"/gigs/{gig['id']}/applications/{application['id']}/status",
            json={"status": "hired"},
            headers=creator.headers,
        )
        assert response.status_code == 422

    def test_application_visibility(self, client, creator, crew, make_member, gig):
        application = client.post(f"/gigs/{gig['id']}/apply", json={}, headers=crew.headers).json()["data"]
        outsider = make_member()

        received = client.get(f"/gigs/{gig['id']}/applications", headers=creator.headers).json()["data"]
        assert [a["id"] for a in received] == [application["id"]]
        assert client.get(f"/gigs/{gig['id']}/applications", headers=crew.headers).status_code == 403

        mine = client.get("/applications/my", headers=crew.headers).json()["data"]
        assert mine[0]["gig"]["budgetLabel"] == "AED 12,500"

        url = f"/applications/{application['id']}"
        assert client.get(url, headers=crew.headers).status_code == 200
        assert client.get(url, headers=creator.headers).status_code == 200
        assert client.get(url, headers=outsider.headers).status_code == 403

"""API tests for crew availability calendars."""


class TestAvailability:
    def test_upsert_single_date(self, client, crew):
        first = client.post(
            "/availability", json={"date": "2025-10-03", "status": "available"}, headers=crew.headers
        )
        assert first.status_code == 200

        second = client.post(
            "/availability",
            json={"date": "2025-10-03", "status": "HOLD", "note": "Pencilled for a TVC"},
            headers=crew.headers,
        )
        assert second.json()["data"] == {"date": "2025-10-03", "status": "hold", "note": "Pencilled for a TVC"}

        entries = client.get("/availability", headers=crew.headers).json()["data"]["entries"]
        assert len(entries) == 1

    def test_invalid_status(self, client, crew):
        response = client.post(
            "/availability", json={"date": "2025-10-03", "status": "busy"}, headers=crew.headers
        )
        assert response.status_code == 422

    def test_bulk_month(self, client, crew):
        response = client.post(
            "/availability/bulk",
            json={"month": "Sep 2025", "days": "1-3, 10", "status": "na"},
            headers=crew.headers,
        )
        assert response.json()["data"]["updated"] == 4

        data = client.get(
            "/availability", params={"start": "2025-09-01", "end": "2025-09-30"}, headers=crew.headers
        ).json()["data"]
        assert [e["date"] for e in data["entries"]] == ["2025-09-01", "2025-09-02", "2025-09-03", "2025-09-10"]
        assert data["calendarMonths"] == [{"month": 8, "year": 2025, "highlightedDays": [1, 2, 3, 10]}]
        assert list(data["calendarMonthsByStatus"]) == ["na"]

    def test_bulk_rejects_bad_input(self, client, crew):
        bad_month = client.post(
            "/availability/bulk", json={"month": "Smarch 2025", "days": "1", "status": "na"}, headers=crew.headers
        )
        no_days = client.post(
            "/availability/bulk", json={"month": "Feb 2025", "days": "30, 31", "status": "na"}, headers=crew.headers
        )
        year_zero = client.post(
            "/availability/bulk", json={"month": "Sep 0", "days": "1-2", "status": "hold"}, headers=crew.headers
        )
        assert bad_month.status_code == 400
        assert no_days.status_code == 400
        assert year_zero.status_code == 400
        assert year_zero.json()["success"] is False

    def test_range_filter(self, client, crew):
        client.post("/availability/bulk", json={"month": "Sep 2025", "days": "29-30", "status": "hold"}, headers=crew.headers)
        client.post("/availability", json={"date": "2025-10-01", "status": "hold"}, headers=crew.headers)

        data = client.get("/availability", params={"start": "2025-09-30"}, headers=crew.headers).json()["data"]
        assert [e["date"] for e in data["entries"]] == ["2025-09-30", "2025-10-01"]
        assert client.get(
            "/availability", params={"start": "2025-10-01", "end": "2025-09-01"}, headers=crew.headers
        ).status_code == 400

    def test_conflict_check(self, client, crew):
        client.post("/availability", json={"date": "2025-09-02", "status": "hold"}, headers=crew.headers)
        client.post("/availability", json={"date": "2025-09-03", "status": "available"}, headers=crew.headers)

        def check(day):
            return client.get("/availability/check", params={"date": day}, headers=crew.headers).json()["data"]

        assert check("2025-09-02") == {"date": "2025-09-02", "hasConflict": True, "status": "hold"}
        assert check("2025-09-03")["hasConflict"] is False
        assert check("2025-09-04") == {"date": "2025-09-04", "hasConflict": False, "status": None}

    def test_entries_are_private(self, client, crew, creator):
        client.post("/availability", json={"date": "2025-09-02", "status": "na"}, headers=crew.headers)
        assert client.get("/availability", headers=creator.headers).json()["data"]["entries"] == []

    def test_delete(self, client, crew):
        client.post("/availability", json={"date": "2025-09-02", "status": "na"}, headers=crew.headers)
        assert client.delete("/availability/2025-09-02", headers=crew.headers).status_code == 200
        assert client.delete("/availability/2025-09-02", headers=crew.headers).status_code == 404
        assert client.delete("/availability/not-a-date", headers=crew.headers).status_code == 422

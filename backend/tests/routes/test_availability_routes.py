# backend/tests/routes/test_availability_routes.py
"""HTTP tests for /api/availability."""


def _slot(day=1, start="09:00", end="12:00"):
    return {"dayOfWeek": day, "startTime": start, "endTime": end}


class TestOwnSlots:
    def test_crud(self, client, auth_headers_teacher):
        created = client.post("/api/availability", json=_slot(), headers=auth_headers_teacher)
        assert created.status_code == 201
        slot = created.json()
        assert slot["startTime"] == "09:00"
        assert slot["isAvailable"] is True

        grouped = client.get("/api/availability", headers=auth_headers_teacher).json()
        assert sorted(grouped) == [str(day) for day in range(7)]
        assert [s["id"] for s in grouped["1"]] == [slot["id"]]

        updated = client.put(
            f"/api/availability/{slot['id']}",
            json={"endTime": "13:30", "isAvailable": False},
            headers=auth_headers_teacher,
        )
        assert updated.status_code == 200
        assert updated.json()["endTime"] == "13:30"
        assert updated.json()["isAvailable"] is False

        deleted = client.delete(f"/api/availability/{slot['id']}", headers=auth_headers_teacher)
        assert deleted.status_code == 200
        assert deleted.json()["message"] == "Availability slot deleted"
        assert client.delete(f"/api/availability/{slot['id']}", headers=auth_headers_teacher).status_code == 404

    def test_duplicate_and_unordered(self, client, auth_headers_teacher):
        client.post("/api/availability", json=_slot(), headers=auth_headers_teacher)
        duplicate = client.post("/api/availability", json=_slot(), headers=auth_headers_teacher)
        assert duplicate.status_code == 400
        assert duplicate.json()["code"] == "DUPLICATE_SLOT"

        unordered = client.post("/api/availability", json=_slot(start="12:00", end="09:00"), headers=auth_headers_teacher)
        assert unordered.status_code == 400
        assert unordered.json()["code"] == "INVALID_TIME_RANGE"

    def test_bad_day_of_week(self, client, auth_headers_teacher):
        response = client.post("/api/availability", json=_slot(day=7), headers=auth_headers_teacher)
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "dayOfWeek"

    def test_students_cannot_manage_slots(self, client, auth_headers_student):
        assert client.post("/api/availability", json=_slot(), headers=auth_headers_student).status_code == 403

    def test_other_teachers_slot_is_forbidden(self, client, monday_slot, make_teacher):
        from tutorly.auth import create_access_token

        other = make_teacher(email="other.teacher@example.com", name="Other Teacher")
        headers = {"Authorization": f"Bearer {create_access_token({'sub': other.id, 'role': other.role})}"}
        response = client.delete(f"/api/availability/{monday_slot.id}", headers=headers)
        assert response.status_code == 403

    def test_bulk_replace(self, client, monday_slot, auth_headers_teacher):
        response = client.post(
            "/api/availability/bulk",
            json={"slots": [_slot(day=2, start="08:00", end="10:00"), _slot(day=4, start="15:00", end="18:00")]},
            headers=auth_headers_teacher,
        )
        assert response.status_code == 200
        grouped = response.json()
        assert grouped["1"] == []
        assert [s["startTime"] for s in grouped["2"]] == ["08:00"]
        assert [s["endTime"] for s in grouped["4"]] == ["18:00"]


def test_public_teacher_slots(client, test_teacher, monday_slot, auth_headers_teacher):
    client.post("/api/availability", json=_slot(day=3, start="14:00", end="15:00"), headers=auth_headers_teacher)

    everything = client.get(f"/api/availability/teacher/{test_teacher.id}")
    assert everything.status_code == 200
    assert [s["dayOfWeek"] for s in everything.json()] == [1, 3]

    wednesday = client.get(f"/api/availability/teacher/{test_teacher.id}?dayOfWeek=3").json()
    assert [s["startTime"] for s in wednesday] == ["14:00"]

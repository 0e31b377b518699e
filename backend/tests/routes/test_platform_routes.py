# backend/tests/routes/test_platform_routes.py
"""HTTP tests for admin stats, health and metrics."""


def test_overview_is_admin_only(client, test_student, test_teacher, auth_headers_student, auth_headers_admin):
    assert client.get("/api/users/stats/overview", headers=auth_headers_student).status_code == 403

    response = client.get("/api/users/stats/overview", headers=auth_headers_admin)
    assert response.status_code == 200
    body = response.json()
    assert body["totalUsers"] == 3
    assert body["totalStudents"] == 1
    assert body["totalTeachers"] == 1
    assert set(body["bookingsByStatus"]) == {"pending", "confirmed", "completed", "cancelled", "no-show"}


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["service"] == "tutorly-api"


def test_metrics_exposition(client):
    client.get("/api/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "tutorly_http_requests_total" in response.text


def test_unknown_route_uses_problem_envelope(client):
    response = client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json()["title"] == "Not Found"

"""Tests for the HTTP routes and error translation."""


def create_task(client, **overrides):
    payload = {"title": "Write tests", **overrides}
    response = client.post("/api/tasks", json=payload)
    assert response.status_code == 201
    return response.json()


def test_health(client):
    """Test the health endpoint."""
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.json()["timestamp"].endswith("Z")


def test_task_lifecycle(client):
    """Test create, read, update and delete over HTTP."""
    task = create_task(client, dueDate="2024-06-01T12:00:00Z", priority="HIGH")

    assert task["status"] == "TODO"
    assert task["dueDate"] == "2024-06-01T12:00:00Z"
    assert "createdAt" in task and "updatedAt" in task

    assert client.get(f"/api/tasks/{task['id']}").json()["title"] == "Write tests"

    response = client.patch(f"/api/tasks/{task['id']}", json={"status": "IN_PROGRESS"})
    assert response.status_code == 200
    assert response.json()["status"] == "IN_PROGRESS"
    assert response.json()["priority"] == "HIGH"

    response = client.put(f"/api/tasks/{task['id']}", json={"title": "Renamed"})
    assert response.json()["title"] == "Renamed"

    response = client.delete(f"/api/tasks/{task['id']}")
    assert response.status_code == 204
    assert response.content == b""

    assert client.get("/api/tasks").json() == []


def test_unknown_id_is_404_with_error_body(client):
    """Test the shape of a not-found error."""
    response = client.get("/api/tasks/missing")

    assert response.status_code == 404
    assert response.json() == {
        "error": {"message": "Task not found", "code": "NOT_FOUND", "details": {"id": "missing"}}
    }


def test_delete_twice_is_404(client):
    """Test that deleting the same task twice fails the second time."""
    task = create_task(client)

    assert client.delete(f"/api/tasks/{task['id']}").status_code == 204
    assert client.delete(f"/api/tasks/{task['id']}").status_code == 404


def test_invalid_enum_is_400(client):
    """Test that an out-of-enum status is rejected with field details."""
    response = client.post("/api/tasks", json={"title": "Bad", "status": "BLOCKED"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "status"


def test_empty_title_is_400(client):
    """Test that required strings must be non-empty."""
    response = client.post("/api/tasks", json={"title": "   "})

    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["field"] == "title"


def test_null_title_update_is_400(client):
    """Test that required fields cannot be nulled by an update."""
    task = create_task(client)

    response = client.patch(f"/api/tasks/{task['id']}", json={"title": None})

    assert response.status_code == 400


def test_unknown_route_uses_error_body(client):
    """Test that framework 404s share the error shape."""
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_inventory_routes(client):
    """Test inventory CRUD, bulk and low-stock endpoints."""
    response = client.post(
        "/api/inventory/bulk",
        json=[
            {"name": "Bolt", "quantity": 1, "minQuantity": 5, "price": 0.1, "category": "parts"},
            {"name": "Nut", "quantity": 50, "minQuantity": 5, "price": 0.05, "category": "parts"},
        ],
    )
    assert response.status_code == 201
    bolt, nut = response.json()
    assert bolt["minQuantity"] == 5

    low = client.get("/api/inventory/low-stock").json()
    assert [i["name"] for i in low] == ["Bolt"]

    response = client.patch("/api/inventory/bulk", json=[{"id": bolt["id"], "data": {"quantity": 20}}])
    assert response.status_code == 200
    assert response.json()[0]["quantity"] == 20

    response = client.put(f"/api/inventory/{nut['id']}", json={"quantity": -1})
    assert response.status_code == 400

    response = client.delete(f"/api/inventory/{nut['id']}")
    assert response.json() == {"success": True}

    response = client.request("DELETE", "/api/inventory/bulk", json={"ids": [bolt["id"], "missing"]})
    assert response.status_code == 404
    assert len(client.get("/api/inventory").json()) == 1


def test_finance_routes(client):
    """Test transaction creation, validation and stats."""
    response = client.post(
        "/api/finance",
        json={"type": "expense", "amount": 50, "category": "food", "date": "2024-01-01T00:00:00Z"},
    )
    assert response.status_code == 201
    transaction = response.json()

    response = client.post(
        "/api/finance",
        json={"type": "expense", "amount": 5, "category": "salary", "date": "2024-01-01T00:00:00Z"},
    )
    assert response.status_code == 400

    response = client.post(
        "/api/finance/stats",
        json={"startDate": "2024-01-01T00:00:00Z", "endDate": "2024-01-31T23:59:59Z"},
    )
    assert response.status_code == 200
    assert response.json() == {
        "totalIncome": 0.0,
        "totalExpenses": 50.0,
        "balance": -50.0,
        "byCategory": {"food": 50.0},
    }

    response = client.post(
        "/api/finance/stats",
        json={"startDate": "2024-02-01T00:00:00Z", "endDate": "2024-01-01T00:00:00Z"},
    )
    assert response.status_code == 400

    assert client.delete(f"/api/finance/{transaction['id']}").json() == {"success": True}


def test_focus_routes(client):
    """Test sessions, completion, stats and presets."""
    response = client.post(
        "/api/focus", json={"duration": 25, "startTime": "2024-01-02T09:00:00Z", "type": "focus"}
    )
    assert response.status_code == 201
    session = response.json()
    assert session["completed"] is False
    assert session["endTime"] is None

    response = client.post(f"/api/focus/{session['id']}/complete")
    assert response.status_code == 200
    assert response.json()["completed"] is True

    stats = client.post(
        "/api/focus/stats",
        json={"startDate": "2024-01-01T00:00:00Z", "endDate": "2024-01-31T00:00:00Z"},
    ).json()
    assert stats["totalSessions"] == 1
    assert stats["totalFocusTime"] == 25

    response = client.post("/api/focus/presets", json={"name": "Pomodoro", "duration": 25})
    assert response.status_code == 201
    preset = response.json()
    assert client.get("/api/focus/presets").json()[0]["name"] == "Pomodoro"
    assert client.get(f"/api/focus/presets/{preset['id']}").status_code == 200
    assert client.delete(f"/api/focus/presets/{preset['id']}").json() == {"success": True}
    assert client.get(f"/api/focus/presets/{preset['id']}").status_code == 404


def test_zero_duration_session_is_400(client):
    """Test that session durations must be positive."""
    response = client.post("/api/focus", json={"duration": 0, "startTime": "2024-01-02T09:00:00Z"})

    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["field"] == "duration"


def test_docs_served_outside_production(client):
    """Test that API docs are available in development."""
    assert client.get("/documentation").status_code == 200

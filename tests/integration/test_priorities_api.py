"""Integration tests for priorities API endpoints."""

import pytest


@pytest.fixture
def priority_data(initiative):
    return {
        "title": "Cerrar contrato con cliente",
        "description": "Revisión legal incluida",
        "initiativeId": initiative.id,
        "weekStart": "2025-10-15T09:00:00",
        "completionPercentage": 20,
        "status": "EN_TIEMPO",
    }


@pytest.fixture
def own_priority(client, user_headers, priority_data):
    return client.post("/api/priorities", json=priority_data, headers=user_headers).json()


@pytest.fixture
def foreign_priority(client, other_headers, priority_data):
    return client.post("/api/priorities", json=priority_data, headers=other_headers).json()


def test_create_priority(client, user_headers, regular_user, priority_data):
    """Test creating a priority for the caller."""
    response = client.post("/api/priorities", json=priority_data, headers=user_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == priority_data["title"]
    assert data["userId"] == regular_user.id
    assert data["weekStart"] == "2025-10-13T00:00:00"
    assert data["weekEnd"] == "2025-10-17T23:59:59.999000"
    assert data["wasEdited"] is False
    assert data["lastEditedAt"] is None
    assert data["isCarriedOver"] is False


def test_create_then_fetch_round_trip(client, user_headers, priority_data):
    created = client.post("/api/priorities", json=priority_data, headers=user_headers).json()

    fetched = client.get(f"/api/priorities/{created['id']}", headers=user_headers).json()

    assert fetched == created
    assert fetched["wasEdited"] is False


def test_create_percentage_out_of_range(client, user_headers, priority_data):
    """Values above 100 are rejected at the boundary."""
    priority_data["completionPercentage"] = 150

    response = client.post("/api/priorities", json=priority_data, headers=user_headers)

    assert response.status_code == 400
    assert "completionPercentage" in response.json()["error"]


def test_create_title_too_long(client, user_headers, priority_data):
    priority_data["title"] = "x" * 151

    response = client.post("/api/priorities", json=priority_data, headers=user_headers)
    assert response.status_code == 400


def test_create_unknown_initiative(client, user_headers, priority_data):
    priority_data["initiativeId"] = 9999

    response = client.post("/api/priorities", json=priority_data, headers=user_headers)

    assert response.status_code == 400
    assert response.json() == {"error": "Initiative 9999 does not exist"}


def test_create_for_other_user_forbidden(client, user_headers, other_user, priority_data):
    priority_data["userId"] = other_user.id

    response = client.post("/api/priorities", json=priority_data, headers=user_headers)
    assert response.status_code == 403


def test_admin_creates_for_user(client, admin_headers, other_user, priority_data):
    priority_data["userId"] = other_user.id

    response = client.post("/api/priorities", json=priority_data, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["userId"] == other_user.id


def test_list_own_priorities(client, user_headers, own_priority, foreign_priority):
    response = client.get("/api/priorities", headers=user_headers)

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [own_priority["id"]]


def test_list_other_users_priorities_forbidden(client, user_headers, other_user, foreign_priority):
    response = client.get("/api/priorities", params={"userId": other_user.id}, headers=user_headers)

    assert response.status_code == 403


def test_admin_lists_all(client, admin_headers, own_priority, foreign_priority):
    response = client.get("/api/priorities", headers=admin_headers)

    # Newest first within the same week
    assert [p["id"] for p in response.json()] == [foreign_priority["id"], own_priority["id"]]


def test_list_filtered_by_week(client, user_headers, priority_data, own_priority):
    priority_data["weekStart"] = "2025-10-22T09:00:00"
    later = client.post("/api/priorities", json=priority_data, headers=user_headers).json()

    response = client.get(
        "/api/priorities",
        params={"weekStart": "2025-10-20T00:00:00", "weekEnd": "2025-10-24T23:59:59"},
        headers=user_headers,
    )

    assert [p["id"] for p in response.json()] == [later["id"]]


def test_get_foreign_priority_forbidden(client, user_headers, foreign_priority):
    response = client.get(f"/api/priorities/{foreign_priority['id']}", headers=user_headers)

    assert response.status_code == 403
    assert response.json() == {"error": "You can only access your own priorities"}


def test_update_priority(client, user_headers, own_priority):
    response = client.put(
        f"/api/priorities/{own_priority['id']}",
        json={"completionPercentage": 100, "status": "COMPLETADO"},
        headers=user_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["completionPercentage"] == 100
    assert data["status"] == "COMPLETADO"
    assert data["title"] == own_priority["title"]
    assert data["wasEdited"] is True
    assert data["lastEditedAt"] is not None


def test_update_foreign_priority_forbidden(client, user_headers, foreign_priority):
    response = client.put(
        f"/api/priorities/{foreign_priority['id']}", json={"title": "Mine"}, headers=user_headers
    )
    assert response.status_code == 403


def test_update_invalid_status(client, user_headers, own_priority):
    response = client.put(
        f"/api/priorities/{own_priority['id']}", json={"status": "DONE"}, headers=user_headers
    )
    assert response.status_code == 400


def test_update_missing_priority(client, user_headers):
    response = client.put("/api/priorities/9999", json={"title": "Ghost"}, headers=user_headers)
    assert response.status_code == 404


def test_delete_priority(client, user_headers, own_priority):
    response = client.delete(f"/api/priorities/{own_priority['id']}", headers=user_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Priority deleted"}
    assert client.get(f"/api/priorities/{own_priority['id']}", headers=user_headers).status_code == 404


def test_delete_foreign_priority_forbidden(client, user_headers, foreign_priority):
    response = client.delete(f"/api/priorities/{foreign_priority['id']}", headers=user_headers)
    assert response.status_code == 403


def test_offsets_are_converted_before_picking_the_week(client, user_headers, priority_data):
    """The same instant sent with different offsets lands in the same week."""
    priority_data["weekStart"] = "2025-10-13T00:00:00+02:00"
    plus_two = client.post("/api/priorities", json=priority_data, headers=user_headers).json()
    priority_data["weekStart"] = "2025-10-12T22:00:00Z"
    utc = client.post("/api/priorities", json=priority_data, headers=user_headers).json()

    assert plus_two["weekStart"] == utc["weekStart"] == "2025-10-06T00:00:00"


def test_list_with_client_week_bounds(client, user_headers, priority_data):
    """A UTC-6 client's Monday-Friday bounds find the priority it created."""
    priority_data["weekStart"] = "2025-10-13T06:00:00.000Z"
    created = client.post("/api/priorities", json=priority_data, headers=user_headers).json()

    response = client.get(
        "/api/priorities",
        params={"weekStart": "2025-10-13T06:00:00.000Z", "weekEnd": "2025-10-18T05:59:59.999Z"},
        headers=user_headers,
    )

    assert [p["id"] for p in response.json()] == [created["id"]]


def test_weeks_follow_configured_timezone(client, user_headers, priority_data, test_config):
    test_config.dashboard.timezone = "America/Mexico_City"
    # Sunday 21:00 in Mexico City
    priority_data["weekStart"] = "2025-10-13T03:00:00Z"

    response = client.post("/api/priorities", json=priority_data, headers=user_headers)

    assert response.json()["weekStart"] == "2025-10-06T00:00:00"


def test_clear_description_with_null(client, user_headers, own_priority):
    response = client.put(
        f"/api/priorities/{own_priority['id']}", json={"description": None}, headers=user_headers
    )

    assert response.status_code == 200
    assert response.json()["description"] is None
    assert response.json()["title"] == own_priority["title"]


def test_omitted_description_is_kept(client, user_headers, own_priority):
    response = client.put(
        f"/api/priorities/{own_priority['id']}", json={"status": "EN_RIESGO"}, headers=user_headers
    )

    assert response.json()["description"] == own_priority["description"]

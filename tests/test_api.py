"""Tests for the HTTP boundary."""

from lesson_api.errors import StorageError


def _seed(client) -> dict:
    assert client.post("/api/seed").json() == {"inserted": 5}
    return {lesson["title"]: lesson for lesson in client.get("/api/lessons").json()}


def _order_body(lesson_ids, **overrides) -> dict:
    body = {
        "name": "Ada Lovelace",
        "phoneNumber": "07700900123",
        "address": "12 Analytical Row",
        "city": "London",
        "state": "Greater London",
        "zip": "NW1 6XE",
        "lessonIDs": lesson_ids,
        "numberOfSpaces": len(lesson_ids),
    }
    body.update(overrides)
    return body


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_and_get_lessons(client):
    lessons = _seed(client)
    spanish = lessons["Spanish"]

    response = client.get(f"/api/lessons/{spanish['id']}")

    # Assertions
    assert response.status_code == 200
    assert response.json()["availableInventory"] == 7
    assert response.json()["location"] == "MADRID"


def test_get_unknown_lesson_is_404(client):
    response = client.get("/api/lessons/missing")

    assert response.status_code == 404
    assert response.json() == {"error": "Lesson not found", "category": "not_found"}


def test_search(client):
    _seed(client)

    first = client.get("/api/search", params={"q": "Spanish"}).json()
    second = client.get("/api/search", params={"q": "Spanish"}).json()

    assert first == second
    assert [lesson["title"] for lesson in first] == ["Spanish"]
    assert len(client.get("/api/search").json()) == 5
    assert [lesson["title"] for lesson in client.get("/api/search", params={"q": "1500"}).json()] == ["Mauritian Creole"]


def test_place_order_and_read_it_back(client):
    lessons = _seed(client)
    french = lessons["French"]

    response = client.post("/api/orders", json=_order_body([french["id"]] * 3))

    # Assertions
    assert response.status_code == 201
    assert response.json()["message"] == "Order saved and inventory updated."
    order_id = response.json()["orderId"]
    assert client.get(f"/api/lessons/{french['id']}").json()["availableInventory"] == 2

    order = client.get(f"/api/orders/{order_id}").json()
    assert order["lessonNames"] == ["French", "French", "French"]
    assert order["lessonIDs"] == [french["id"]]
    assert order["numberOfSpaces"] == 3
    assert "createdAt" in order


def test_order_missing_zip_is_400(client):
    lessons = _seed(client)
    body = _order_body([lessons["French"]["id"]])
    del body["zip"]

    response = client.post("/api/orders", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "All fields are required.", "category": "validation"}


def test_order_with_wrong_types_is_400(client):
    response = client.post("/api/orders", json=_order_body(["x"], numberOfSpaces="many"))

    assert response.status_code == 400
    assert response.json()["category"] == "validation"
    assert response.json()["details"]


def test_order_over_capacity_is_400_and_changes_nothing(client):
    lessons = _seed(client)
    english, french = lessons["English Language"], lessons["French"]

    response = client.post("/api/orders", json=_order_body([english["id"]] * 3 + [french["id"]] * 6))

    assert response.status_code == 400
    assert response.json() == {
        "error": "Not enough spaces for 'French'. Needed: 6, Available: 5",
        "category": "insufficient_inventory",
    }
    assert client.get(f"/api/lessons/{english['id']}").json()["availableInventory"] == 7
    assert client.get(f"/api/lessons/{french['id']}").json()["availableInventory"] == 5


def test_order_for_unknown_lesson_is_400(client):
    response = client.post("/api/orders", json=_order_body(["missing"]))

    assert response.status_code == 400
    assert response.json()["category"] == "insufficient_inventory"


def test_get_unknown_order_is_404(client):
    assert client.get("/api/orders/missing").status_code == 404


def test_update_lesson(client):
    spanish = _seed(client)["Spanish"]

    response = client.put(f"/api/lessons/{spanish['id']}", json={"title": "Spanish II", "price": 1900})

    assert response.status_code == 200
    assert response.json()["message"] == "Lesson updated."
    assert response.json()["lesson"]["title"] == "Spanish II"
    assert response.json()["lesson"]["availableInventory"] == 7


def test_update_cannot_set_available_inventory(client):
    spanish = _seed(client)["Spanish"]

    response = client.put(f"/api/lessons/{spanish['id']}", json={"availableInventory": 100})

    assert response.status_code == 400
    assert client.get(f"/api/lessons/{spanish['id']}").json()["availableInventory"] == 7


def test_update_unknown_lesson_is_404(client):
    response = client.put("/api/lessons/missing", json={"title": "Nope"})

    assert response.status_code == 404


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"Request-ID": "req-123"})
    assert response.headers["Request-ID"] == "req-123"

    generated = client.get("/health").headers["Request-ID"]
    assert generated


def test_storage_errors_are_redacted(client, monkeypatch):
    def broken():
        raise StorageError("no such table: lessons at /var/db/lessons.db")

    monkeypatch.setattr(client.app.state.inventory, "list_lessons", broken)

    response = client.get("/api/lessons")

    assert response.status_code == 500
    assert response.json() == {"error": "Internal Server Error", "category": "storage"}

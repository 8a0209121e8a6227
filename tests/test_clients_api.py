def test_create_client(auth_client):
    resp = auth_client.post(
        "/api/clients",
        json={
            "name": "Maria Silva",
            "phone": "(11) 98765-4321",
            "email": "Maria@Example.com",
            "address": "Rua das Flores, 10",
        },
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["id"]
    assert body["email"] == "maria@example.com"
    assert body["createdAt"].endswith("Z")


def test_create_client_validation(auth_client):
    resp = auth_client.post("/api/clients", json={"name": "", "phone": "abc", "email": "nope"})
    assert resp.status_code == 400
    fields = {d["field"] for d in resp.json()["details"]}
    assert fields == {"name", "phone", "email"}


def test_duplicate_email_conflicts(auth_client, make_client):
    make_client(email="ana@example.com")
    resp = auth_client.post("/api/clients", json={"name": "Ana 2", "email": "ana@example.com"})
    assert resp.status_code == 409
    assert resp.json() == {"error": "Email already exists"}


def test_get_client_and_404(auth_client, make_client):
    created = make_client(name="Carlos")
    resp = auth_client.get(f"/api/clients/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Carlos"

    resp = auth_client.get("/api/clients/does-not-exist")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Client not found"}


def test_list_clients_search_and_sort(auth_client, make_client):
    make_client(name="Beatriz", email="bia@example.com")
    make_client(name="Ana", phone="11 3333-4444")
    make_client(name="Carla")

    resp = auth_client.get("/api/clients", params={"sortBy": "name", "sortOrder": "asc"})
    assert resp.status_code == 200
    body = resp.json()
    assert [c["name"] for c in body["items"]] == ["Ana", "Beatriz", "Carla"]
    assert body["pagination"]["total"] == 3

    resp = auth_client.get("/api/clients", params={"search": "BIA"})
    assert [c["name"] for c in resp.json()["items"]] == ["Beatriz"]

    resp = auth_client.get("/api/clients", params={"search": "3333"})
    assert [c["name"] for c in resp.json()["items"]] == ["Ana"]


def test_list_clients_rejects_unknown_sort(auth_client):
    resp = auth_client.get("/api/clients", params={"sortBy": "password"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid query parameters"


def test_update_client_put_and_patch(auth_client, make_client):
    created = make_client(name="Old Name")

    resp = auth_client.put(f"/api/clients/{created['id']}", json={"name": "New Name"})
    assert resp.status_code == 200
    assert resp.json()["name"] == "New Name"
    assert resp.json()["phone"] == created["phone"]

    resp = auth_client.patch(f"/api/clients/{created['id']}", json={"notes": "VIP"})
    assert resp.status_code == 200
    assert resp.json()["notes"] == "VIP"
    assert resp.json()["name"] == "New Name"


def test_update_client_email_conflict(auth_client, make_client):
    make_client(email="taken@example.com")
    other = make_client(email="mine@example.com")

    resp = auth_client.put(f"/api/clients/{other['id']}", json={"email": "taken@example.com"})
    assert resp.status_code == 409

    # Re-sending its own email is not a conflict
    resp = auth_client.put(f"/api/clients/{other['id']}", json={"email": "mine@example.com"})
    assert resp.status_code == 200


def test_update_client_rejects_null_name(auth_client, make_client):
    created = make_client()
    resp = auth_client.put(f"/api/clients/{created['id']}", json={"name": None})
    assert resp.status_code == 400


def test_update_missing_client(auth_client):
    resp = auth_client.put("/api/clients/missing", json={"name": "X"})
    assert resp.status_code == 404


def test_delete_client(auth_client, make_client):
    created = make_client()
    resp = auth_client.delete(f"/api/clients/{created['id']}")
    assert resp.status_code == 204
    assert resp.content == b""

    assert auth_client.get(f"/api/clients/{created['id']}").status_code == 404
    assert auth_client.delete(f"/api/clients/{created['id']}").status_code == 404


def test_delete_client_with_events_conflicts(auth_client, make_event):
    event = make_event()
    resp = auth_client.delete(f"/api/clients/{event['clientId']}")
    assert resp.status_code == 409

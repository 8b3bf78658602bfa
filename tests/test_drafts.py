from decimal import Decimal


def _lines(draft):
    return {line["id"]: line["quantity"] for line in draft["items"]}


def test_first_load_creates_single_active_session(client):
    response = client.get("/drafts")

    assert response.status_code == 200
    body = response.json()
    assert len(body["drafts"]) == 1
    assert body["drafts"][0]["name"] == "Sesi 1"
    assert body["active_draft_id"] == body["drafts"][0]["id"]

    # Reloading does not create another one
    assert len(client.get("/drafts").json()["drafts"]) == 1


def test_create_draft_activates_it(client):
    first_id = client.get("/drafts").json()["active_draft_id"]

    response = client.post("/drafts", json={})
    assert response.status_code == 201
    second = response.json()
    assert second["name"] == "Sesi 2"
    assert second["is_active"] is True

    listing = client.get("/drafts").json()
    assert listing["active_draft_id"] == second["id"]
    assert [d["id"] for d in listing["drafts"]] == [first_id, second["id"]]


def test_create_named_draft(client):
    response = client.post("/drafts", json={"name": "Meja 7"})

    assert response.json()["name"] == "Meja 7"


def test_rename_draft(client, draft_id):
    response = client.patch(f"/drafts/{draft_id}", json={"name": "Take away"})

    assert response.status_code == 200
    assert response.json()["name"] == "Take away"


def test_add_same_product_twice_increments_quantity(client, draft_id):
    client.post(f"/drafts/{draft_id}/items", json={"product_id": 1})
    response = client.post(f"/drafts/{draft_id}/items", json={"product_id": 1})

    assert response.status_code == 200
    draft = response.json()
    assert len(draft["items"]) == 1
    assert draft["items"][0]["quantity"] == 2
    assert draft["item_count"] == 2
    assert Decimal(draft["total"]) == Decimal("50000")


def test_add_unknown_product(client, draft_id):
    response = client.post(f"/drafts/{draft_id}/items", json={"product_id": 999})

    assert response.status_code == 404


def test_add_to_unknown_draft(client, catalog):
    response = client.post("/drafts/nope/items", json={"product_id": 1})

    assert response.status_code == 404


def test_add_to_active_cart_without_session_is_refused(client, catalog):
    response = client.post("/drafts/active/items", json={"product_id": 1})

    assert response.status_code == 409
    assert response.json()["detail"] == "No active cart session"


def test_add_to_active_cart(client, draft_id):
    other = client.post("/drafts", json={}).json()

    response = client.post("/drafts/active/items", json={"product_id": 2})

    assert response.json()["id"] == other["id"]
    assert _lines(response.json()) == {2: 1}
    assert client.get(f"/drafts/{draft_id}").json()["items"] == []


def test_set_quantity(client, draft_id):
    client.post(f"/drafts/{draft_id}/items", json={"product_id": 1})

    response = client.put(f"/drafts/{draft_id}/items/1", json={"quantity": 5})

    assert _lines(response.json()) == {1: 5}


def test_zero_and_negative_quantity_remove_line(client, draft_id):
    client.post(f"/drafts/{draft_id}/items", json={"product_id": 1})
    client.post(f"/drafts/{draft_id}/items", json={"product_id": 2})

    response = client.put(f"/drafts/{draft_id}/items/1", json={"quantity": 0})
    assert _lines(response.json()) == {2: 1}

    response = client.put(f"/drafts/{draft_id}/items/2", json={"quantity": -3})
    assert response.json()["items"] == []


def test_set_quantity_on_missing_line(client, draft_id):
    response = client.put(f"/drafts/{draft_id}/items/1", json={"quantity": 2})

    assert response.status_code == 404


def test_remove_and_clear(client, draft_id):
    for product_id in (1, 2, 3):
        client.post(f"/drafts/{draft_id}/items", json={"product_id": product_id})

    response = client.delete(f"/drafts/{draft_id}/items/2")
    assert list(_lines(response.json())) == [1, 3]

    response = client.delete(f"/drafts/{draft_id}/items")
    assert response.json()["items"] == []
    assert Decimal(response.json()["total"]) == 0


def test_scan_barcode_adds_item(client, draft_id):
    response = client.post(f"/drafts/{draft_id}/scan", json={"code": " 8991234567890 "})

    assert response.status_code == 200
    assert _lines(response.json()) == {1: 1}

    response = client.post(f"/drafts/{draft_id}/scan", json={"code": "cf-001"})
    assert _lines(response.json()) == {1: 2}


def test_scan_unknown_barcode(client, draft_id):
    response = client.post(f"/drafts/{draft_id}/scan", json={"code": "XX-404"})

    assert response.status_code == 404
    assert "XX-404" in response.json()["detail"]
    assert client.get(f"/drafts/{draft_id}").json()["items"] == []


def test_switch_draft(client, draft_id):
    client.post("/drafts", json={})

    response = client.post(f"/drafts/{draft_id}/activate")

    assert response.status_code == 200
    body = response.json()
    assert body["active_draft_id"] == draft_id
    assert sum(d["is_active"] for d in body["drafts"]) == 1


def test_delete_only_draft_leaves_fresh_session(client, draft_id):
    client.post(f"/drafts/{draft_id}/items", json={"product_id": 1})

    response = client.delete(f"/drafts/{draft_id}")

    assert response.status_code == 200
    body = response.json()
    assert len(body["drafts"]) == 1
    fresh = body["drafts"][0]
    assert fresh["id"] != draft_id
    assert fresh["items"] == []
    assert body["active_draft_id"] == fresh["id"]


def test_delete_active_draft_falls_back_to_first(client, draft_id):
    client.post("/drafts", json={})
    third = client.post("/drafts", json={}).json()

    body = client.delete(f"/drafts/{third['id']}").json()

    assert body["active_draft_id"] == draft_id
    assert len(body["drafts"]) == 2


def test_drafts_keep_independent_items(client, draft_id):
    other = client.post("/drafts", json={}).json()

    client.post(f"/drafts/{draft_id}/items", json={"product_id": 1})
    client.post(f"/drafts/{other['id']}/items", json={"product_id": 4})

    assert _lines(client.get(f"/drafts/{draft_id}").json()) == {1: 1}
    assert _lines(client.get(f"/drafts/{other['id']}").json()) == {4: 1}

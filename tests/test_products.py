from decimal import Decimal


NEW_ITEM = {
    "name": "Teh Tarik",
    "category": "Minuman",
    "price": "21000",
    "barcodes": ["BV-010", " BV-010 ", "8990000000001"],
    "stock": 30,
}


def test_list_products(client, catalog):
    products = client.get("/products").json()

    assert len(products) == 12
    assert [p["id"] for p in products] == sorted(p["id"] for p in products)


def test_search_by_name_is_case_insensitive(client, catalog):
    products = client.get("/products", params={"search": "LATTE"}).json()

    assert [p["name"] for p in products] == ["Latte"]


def test_search_by_barcode_fragment(client, catalog):
    products = client.get("/products", params={"search": "cf-00"}).json()

    assert {p["category"] for p in products} == {"Kopi"}
    assert len(products) == 5


def test_search_without_match_returns_empty_list(client, catalog):
    response = client.get("/products", params={"search": "ZZ-999"})

    assert response.status_code == 200
    assert response.json() == []


def test_filter_by_category(client, catalog):
    products = client.get("/products", params={"category": "Roti"}).json()

    assert {p["name"] for p in products} == {"Croissant", "Muffin", "Kue Danish", "Roti Kayu Manis"}


def test_categories(client, catalog):
    assert client.get("/products/categories").json() == ["Kopi", "Minuman", "Roti"]


def test_lookup_by_barcode(client, catalog):
    response = client.get("/products/barcode/8991234567891")

    assert response.json()["name"] == "Croissant"
    assert client.get("/products/barcode/none").status_code == 404


def test_create_product(client, catalog):
    response = client.post("/products", json=NEW_ITEM)

    assert response.status_code == 201
    product = response.json()
    assert product["id"] > 12
    assert product["barcodes"] == ["BV-010", "8990000000001"]
    assert Decimal(product["price"]) == Decimal("21000")
    assert product["image"] == ""

    assert client.get(f"/products/{product['id']}").json()["name"] == "Teh Tarik"


def test_create_product_with_explicit_id(client, catalog):
    response = client.post("/products", json={**NEW_ITEM, "id": 500})

    assert response.status_code == 201
    assert response.json()["id"] == 500


def test_create_product_with_taken_id(client, catalog):
    response = client.post("/products", json={**NEW_ITEM, "id": 1})

    assert response.status_code == 409


def test_barcode_must_not_belong_to_another_product(client, catalog):
    response = client.post("/products", json={**NEW_ITEM, "barcodes": ["cf-001"]})

    assert response.status_code == 409
    assert "Espresso" in response.json()["detail"]


def test_validation_errors(client, catalog):
    assert client.post("/products", json={**NEW_ITEM, "name": "   "}).status_code == 422
    assert client.post("/products", json={**NEW_ITEM, "category": ""}).status_code == 422
    assert client.post("/products", json={**NEW_ITEM, "price": "-1"}).status_code == 422
    assert client.post("/products", json={**NEW_ITEM, "stock": -1}).status_code == 422
    assert client.post("/products", json={**NEW_ITEM, "barcodes": []}).status_code == 422
    assert client.post("/products", json={**NEW_ITEM, "barcodes": ["  "]}).status_code == 422


def test_free_item_is_allowed(client, catalog):
    response = client.post("/products", json={**NEW_ITEM, "price": "0"})

    assert response.status_code == 201


def test_update_product(client, catalog):
    espresso = client.get("/products/1").json()

    response = client.put(
        "/products/1",
        json={**espresso, "name": "Double Espresso", "barcodes": ["CF-001"]},
    )

    assert response.status_code == 200
    assert response.json()["name"] == "Double Espresso"
    assert response.json()["barcodes"] == ["CF-001"]

    # The dropped barcode is free again
    assert client.post("/products", json={**NEW_ITEM, "barcodes": ["8991234567890"]}).status_code == 201


def test_upsert_unknown_id_creates(client, catalog):
    response = client.put("/products/77", json=NEW_ITEM)

    assert response.status_code == 200
    assert client.get("/products/77").json()["name"] == "Teh Tarik"


def test_delete_product(client, catalog):
    assert client.delete("/products/3").status_code == 204
    assert client.get("/products/3").status_code == 404
    assert client.delete("/products/3").status_code == 404


def test_deleted_product_stays_in_open_carts(client, draft_id):
    client.post(f"/drafts/{draft_id}/items", json={"product_id": 3})

    client.delete("/products/3")

    items = client.get(f"/drafts/{draft_id}").json()["items"]
    assert [i["name"] for i in items] == ["Cappuccino"]


def test_upsert_rejects_non_positive_id(client, catalog):
    assert client.put("/products/0", json=NEW_ITEM).status_code == 422
    assert client.put("/products/-5", json=NEW_ITEM).status_code == 422
    assert client.get("/products/0").status_code == 404


def test_barcodes_differing_only_in_case_are_one_code(client, catalog):
    response = client.post("/products", json={**NEW_ITEM, "barcodes": ["ab-1", "AB-1", " Ab-1 "]})

    assert response.status_code == 201
    assert response.json()["barcodes"] == ["ab-1"]

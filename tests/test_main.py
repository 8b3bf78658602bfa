from kasir.seed import SAMPLE_PRODUCTS, seed_products


def test_health_check(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["database"] == "available"


def test_seed_only_fills_empty_catalog(db):
    assert seed_products(db) == len(SAMPLE_PRODUCTS)
    assert seed_products(db) == 0

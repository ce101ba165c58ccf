import pytest


def test_product_crud(client):
    created = client.post("/api/admin/products", json={
        "name": "Aviator", "price": 120.5, "quantity": 4,
        "parent_category": "sunglasses", "subcategory": "man",
    })
    assert created.status_code == 201
    pid = created.json()["id"]

    assert client.get(f"/api/admin/products/{pid}").json()["quantity"] == 4

    updated = client.put(f"/api/admin/products/{pid}", json={"name": "Aviator", "price": 99, "quantity": 7})
    assert updated.json()["price"] == 99
    assert updated.json()["parent_category"] is None

    assert client.delete(f"/api/admin/products/{pid}").json() == {"success": True}
    assert client.get(f"/api/admin/products/{pid}").status_code == 404


@pytest.mark.parametrize("payload", [
    {"price": 10, "quantity": 1},
    {"name": "x", "price": -1, "quantity": 1},
    {"name": "x", "price": 1, "quantity": -1},
    {"name": "x", "quantity": 1},
])
def test_product_validation(client, payload):
    assert client.post("/api/admin/products", json=payload).status_code == 400


def test_list_products_filter(client, make_product):
    make_product(parent_category="sunglasses")
    make_product(parent_category="optical_glasses")

    assert len(client.get("/api/admin/products").json()) == 2
    rows = client.get("/api/admin/products", params={"parent_category": "optical_glasses"}).json()
    assert [r["parent_category"] for r in rows] == ["optical_glasses"]


def test_update_missing_product_is_404(client):
    res = client.put("/api/admin/products/missing", json={"name": "x", "price": 1, "quantity": 1})

    assert res.status_code == 404
    assert res.json() == {"error": "المنتج غير موجود"}


def test_product_price_must_be_finite(client, con):
    res = client.post(
        "/api/admin/products",
        content=b'{"name": "x", "price": 1e999, "quantity": 1}',
        headers={"content-type": "application/json"},
    )

    assert res.status_code == 400
    assert con.execute("SELECT COUNT(*) FROM products").fetchone()[0] == 0

import sqlite3

import pytest

import routers.sell


def test_sell_exact_stock_empties_product(client, make_product, stock_of):
    product = make_product(quantity=3)

    res = client.post("/api/admin/sell", json={"productId": product["id"], "quantity": 3})

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["product"]["quantity"] == 0
    assert stock_of(product["id"]) == 0


def test_sell_more_than_stock_is_rejected_and_stock_unchanged(client, make_product, stock_of):
    product = make_product(quantity=3)

    res = client.post("/api/admin/sell", json={"productId": product["id"], "quantity": 5})

    assert res.status_code == 400
    assert res.json() == {"error": "الكمية غير متوفرة في المخزون"}
    assert stock_of(product["id"]) == 3


@pytest.mark.parametrize("stock,qty", [(10, 1), (10, 4), (10, 10), (2, 3), (0, 1)])
def test_sell_succeeds_iff_quantity_within_stock(client, make_product, stock_of, stock, qty):
    product = make_product(quantity=stock)

    res = client.post("/api/admin/sell", json={"productId": product["id"], "quantity": qty})

    if qty <= stock:
        assert res.status_code == 200
        assert stock_of(product["id"]) == stock - qty
    else:
        assert res.status_code == 400
        assert stock_of(product["id"]) == stock


@pytest.mark.parametrize("payload", [
    {},
    {"productId": "abc"},
    {"quantity": 2},
    {"productId": "abc", "quantity": 0},
    {"productId": "abc", "quantity": -4},
    {"productId": "", "quantity": 1},
    {"productId": "abc", "quantity": "many"},
])
def test_sell_rejects_invalid_payload(client, payload):
    res = client.post("/api/admin/sell", json=payload)

    assert res.status_code == 400
    assert res.json() == {"error": "بيانات غير صالحة"}


def test_sell_unknown_product_is_404(client):
    res = client.post("/api/admin/sell", json={"productId": "missing", "quantity": 1})

    assert res.status_code == 404
    assert res.json() == {"error": "المنتج غير موجود"}


def test_sell_returns_500_when_decrement_is_rejected(client, make_product, stock_of, monkeypatch):
    product = make_product(quantity=5)
    # một request khác đã lấy hết hàng giữa lúc kiểm tra và lúc trừ
    monkeypatch.setattr(routers.sell, "decrement_inventory", lambda con, pid, qty: False)

    res = client.post("/api/admin/sell", json={"productId": product["id"], "quantity": 2})

    assert res.status_code == 500
    assert res.json() == {"error": "تعذر تحديث المخزون"}
    assert stock_of(product["id"]) == 5


def test_sell_store_error_during_decrement_is_500(client, make_product, stock_of, monkeypatch):
    product = make_product(quantity=5)

    def boom(con, pid, qty):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(routers.sell, "decrement_inventory", boom)

    res = client.post("/api/admin/sell", json={"productId": product["id"], "quantity": 2})

    assert res.status_code == 500
    assert res.json() == {"error": "تعذر تحديث المخزون"}
    assert stock_of(product["id"]) == 5


def test_sell_read_back_failure_still_succeeds(client, make_product, stock_of, monkeypatch):
    product = make_product(quantity=5)

    def failing_read(con, pid):
        raise sqlite3.OperationalError("connection reset")

    monkeypatch.setattr(routers.sell, "product_by_id", failing_read)

    res = client.post("/api/admin/sell", json={"productId": product["id"], "quantity": 2})

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["product"] is None
    assert body["error"] == "تم التحديث لكن تعذر جلب البيانات"
    assert stock_of(product["id"]) == 3

import sqlite3
import threading

import pytest

from core.stats import category_breakdown, price_summary
from db import (
    connect, decrement_inventory, fetch_all, generate_order_number, increment_inventory,
    seed_category_displays, update_row, upsert_row,
)


def test_decrement_inventory_is_conditional(con, make_product, stock_of):
    product = make_product(quantity=3)

    assert decrement_inventory(con, product["id"], 2) is True
    assert decrement_inventory(con, product["id"], 2) is False
    con.commit()

    assert stock_of(product["id"]) == 1


def test_decrement_inventory_unknown_product(con):
    assert decrement_inventory(con, "nope", 1) is False


def test_increment_inventory(con, make_product, stock_of):
    product = make_product(quantity=1)

    assert increment_inventory(con, product["id"], 4) is True
    con.commit()

    assert stock_of(product["id"]) == 5


def test_quantity_cannot_go_negative_at_store_level(con, make_product):
    product = make_product(quantity=1)

    with pytest.raises(sqlite3.IntegrityError):
        con.execute("UPDATE products SET quantity = -1 WHERE id = ?", (product["id"],))


def test_concurrent_decrements_never_oversell(db_path, make_product, stock_of):
    product = make_product(quantity=5)
    results = []
    lock = threading.Lock()

    def worker():
        c = connect(db_path)
        try:
            ok = decrement_inventory(c, product["id"], 1)
            c.commit()
        finally:
            c.close()
        with lock:
            results.append(ok)

    threads = [threading.Thread(target=worker) for _ in range(12)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count(True) == 5
    assert stock_of(product["id"]) == 0


def test_upsert_replaces_on_composite_key(con):
    first = upsert_row(con, "subcategory_displays", {
        "parent_category": "sunglasses", "subcategory_key": "man", "image_url": "a.png", "sort_order": 1,
    }, conflict=("parent_category", "subcategory_key"))
    second = upsert_row(con, "subcategory_displays", {
        "parent_category": "sunglasses", "subcategory_key": "man", "image_url": "b.png", "sort_order": 2,
    }, conflict=("parent_category", "subcategory_key"))

    rows = fetch_all(con, "subcategory_displays", "sort_order ASC")
    assert len(rows) == 1
    assert second["id"] == first["id"]
    assert rows[0]["image_url"] == "b.png"
    assert rows[0]["sort_order"] == 2


def test_update_row_without_match_returns_none(con):
    assert update_row(con, "categories", "missing", {"name": "x"}) is None


def test_seed_category_displays_is_idempotent(con):
    seed_category_displays(con)
    assert seed_category_displays(con) == 0

    keys = [r["category_key"] for r in fetch_all(con, "category_displays", "sort_order ASC")]
    assert keys == ["sunglasses", "optical_glasses"]


def test_generate_order_number_format(con):
    number = generate_order_number(con)

    prefix, day, suffix = number.split("-")
    assert prefix == "ORD"
    assert len(day) == 8 and day.isdigit()
    assert len(suffix) == 6


def test_price_summary_empty():
    assert price_summary([]) == {"count": 0, "avg": 0, "min": 0, "max": 0}


def test_price_summary_values():
    assert price_summary([10, 30, "20", None]) == {"count": 4, "avg": 15.0, "min": 0, "max": 30}


def test_category_breakdown_groups_and_sorts():
    pairs = [("A", "X"), ("A", "X"), ("B", "Y")]

    assert category_breakdown(pairs) == [
        {"category": "A_X", "count": 2},
        {"category": "B_Y", "count": 1},
    ]


def test_category_breakdown_ties_keep_encounter_order():
    pairs = [("C", "Z"), ("B", "Y"), ("A", "X"), ("A", "X"), ("B", "Y"), ("D", "W")]

    assert [g["category"] for g in category_breakdown(pairs)] == ["B_Y", "A_X", "C_Z", "D_W"]

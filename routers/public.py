import sqlite3

from fastapi import APIRouter, Depends

from core.errors import store_errors
from db import fetch_all
from .deps import get_db
from .shipping import normalize_city

router = APIRouter(prefix="/api", tags=["public"])


@router.get("/carousel")
def active_slides(con: sqlite3.Connection = Depends(get_db)):
    with store_errors("Failed to fetch carousel slides"):
        return fetch_all(con, "carousel_slides", "sort_order ASC, created_at DESC", where={"is_active": 1})


@router.get("/category-displays")
def visible_category_displays(con: sqlite3.Connection = Depends(get_db)):
    with store_errors("Failed to fetch category displays"):
        return fetch_all(con, "category_displays", "sort_order ASC", where={"is_visible": 1})


@router.get("/subcategory-displays")
def subcategory_displays(con: sqlite3.Connection = Depends(get_db)):
    with store_errors("Failed to fetch subcategory displays"):
        return fetch_all(con, "subcategory_displays", "sort_order ASC, created_at DESC")


@router.get("/shipping-cities")
def active_shipping_cities(con: sqlite3.Connection = Depends(get_db)):
    with store_errors("تعذر تحميل مدن الشحن"):
        rows = fetch_all(
            con, "shipping_cities", "sort_order ASC, name_en ASC",
            where={"is_active": 1}, columns="id, name_en, name_ar, shipping_fee, sort_order",
        )
    return {"cities": [normalize_city(c) for c in rows]}

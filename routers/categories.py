import logging
import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from core.errors import NotFoundError, ValidationError, store_errors
from db import delete_row, fetch_all, fetch_one, insert_row, update_row
from .deps import clean, get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


class CategoryIn(BaseModel):
    name: Optional[str] = None
    name_ar: Optional[str] = None
    description: Optional[str] = None
    description_ar: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None


class SubcategoryIn(CategoryIn):
    category_id: Optional[str] = None


def _category_values(body: CategoryIn, default_color: str) -> dict:
    return {
        "name": body.name,
        "name_ar": clean(body.name_ar),
        "description": clean(body.description),
        "description_ar": clean(body.description_ar),
        "icon": clean(body.icon),
        "color": clean(body.color) or default_color,
    }


def _subcategory_values(con: sqlite3.Connection, body: SubcategoryIn, default_color: str) -> dict:
    if not body.name or not body.category_id:
        raise ValidationError("اسم التصنيف الفرعي والتصنيف الرئيسي مطلوبان")
    if fetch_one(con, "categories", body.category_id) is None:
        raise ValidationError("التصنيف الرئيسي غير موجود")
    return {**_category_values(body, default_color), "category_id": body.category_id}


# ---- categories ----

@router.get("/categories")
def list_categories(con: sqlite3.Connection = Depends(get_db)):
    with store_errors("تعذر جلب التصنيفات"):
        categories = fetch_all(con, "categories", "created_at DESC")
        subs = fetch_all(con, "subcategories", "created_at DESC")
    by_parent: dict[str, list] = {}
    for s in subs:
        by_parent.setdefault(s["category_id"], []).append(s)
    return [{**c, "subcategories": by_parent.get(c["id"], [])} for c in categories]


@router.post("/categories")
def create_category(body: CategoryIn, request: Request, con: sqlite3.Connection = Depends(get_db)):
    if not body.name:
        raise ValidationError("اسم التصنيف مطلوب")
    with store_errors("تعذر إنشاء التصنيف"):
        row = insert_row(con, "categories", _category_values(body, request.app.state.default_color))
    logger.info("category created: %s", row["id"])
    return row


@router.put("/categories/{category_id}")
def update_category(category_id: str, body: CategoryIn, request: Request,
                    con: sqlite3.Connection = Depends(get_db)):
    if not body.name:
        raise ValidationError("اسم التصنيف مطلوب")
    with store_errors("تعذر تحديث التصنيف"):
        row = update_row(con, "categories", category_id, _category_values(body, request.app.state.default_color))
    if row is None:
        raise NotFoundError("التصنيف غير موجود")
    return row


@router.delete("/categories/{category_id}")
def delete_category(category_id: str, con: sqlite3.Connection = Depends(get_db)):
    with store_errors("تعذر حذف التصنيف"):
        delete_row(con, "categories", category_id)
    return {"success": True}


# ---- subcategories ----

@router.get("/subcategories")
def list_subcategories(con: sqlite3.Connection = Depends(get_db)):
    with store_errors("تعذر جلب التصنيفات الفرعية"):
        subs = fetch_all(con, "subcategories", "created_at DESC")
        parents = {
            c["id"]: c
            for c in fetch_all(con, "categories", "created_at DESC", columns="id, name, name_ar")
        }
    return [{**s, "categories": parents.get(s["category_id"])} for s in subs]


@router.post("/subcategories")
def create_subcategory(body: SubcategoryIn, request: Request, con: sqlite3.Connection = Depends(get_db)):
    with store_errors("تعذر إنشاء التصنيف الفرعي"):
        values = _subcategory_values(con, body, request.app.state.default_color)
        row = insert_row(con, "subcategories", values)
    logger.info("subcategory created: %s (category %s)", row["id"], row["category_id"])
    return row


@router.put("/subcategories/{subcategory_id}")
def update_subcategory(subcategory_id: str, body: SubcategoryIn, request: Request,
                       con: sqlite3.Connection = Depends(get_db)):
    with store_errors("تعذر تحديث التصنيف الفرعي"):
        values = _subcategory_values(con, body, request.app.state.default_color)
        row = update_row(con, "subcategories", subcategory_id, values)
    if row is None:
        raise NotFoundError("التصنيف الفرعي غير موجود")
    return row


@router.delete("/subcategories/{subcategory_id}")
def delete_subcategory(subcategory_id: str, con: sqlite3.Connection = Depends(get_db)):
    with store_errors("تعذر حذف التصنيف الفرعي"):
        delete_row(con, "subcategories", subcategory_id)
    return {"success": True}

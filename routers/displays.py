import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.errors import NotFoundError, ValidationError, store_errors
from db import delete_row, fetch_all, insert_row, update_row, upsert_row
from .deps import clean, get_db

router = APIRouter(prefix="/api/admin", tags=["admin"])

BACKGROUND_REQUIRED = "مطلوب رفع صورة خلفية"
FETCH_FAILED = "فشل في جلب البيانات"
UPDATE_FAILED = "فشل في التحديث"


class CategoryDisplayIn(BaseModel):
    category_key: Optional[str] = None
    title_ar: Optional[str] = None
    title_en: Optional[str] = None
    slogan_ar: Optional[str] = None
    slogan_en: Optional[str] = None
    background_image: Optional[str] = None
    mobile_background_image: Optional[str] = None
    is_visible: Optional[bool] = None
    sort_order: Optional[int] = None


class SubcategoryDisplayIn(BaseModel):
    parent_category: Optional[str] = None
    subcategory_key: Optional[str] = None
    image_url: Optional[str] = None
    mobile_image_url: Optional[str] = None
    sort_order: Optional[int] = None


def _display_values(body: CategoryDisplayIn) -> dict:
    return {
        "title_ar": body.title_ar,
        "title_en": clean(body.title_en),
        "slogan_ar": clean(body.slogan_ar),
        "slogan_en": clean(body.slogan_en),
        "background_image": body.background_image,
        "mobile_background_image": clean(body.mobile_background_image),
        "is_visible": body.is_visible if body.is_visible is not None else True,
        "sort_order": body.sort_order or 0,
    }


# ---- category displays ----

@router.get("/category-displays")
def list_category_displays(con: sqlite3.Connection = Depends(get_db)):
    with store_errors(FETCH_FAILED):
        return fetch_all(con, "category_displays", "sort_order ASC")


@router.post("/category-displays", status_code=201)
def create_category_display(body: CategoryDisplayIn, con: sqlite3.Connection = Depends(get_db)):
    if not body.background_image:
        raise ValidationError(BACKGROUND_REQUIRED)
    if not body.category_key:
        raise ValidationError("مفتاح التصنيف مطلوب")
    with store_errors("فشل في الحفظ"):
        return insert_row(con, "category_displays", {"category_key": body.category_key, **_display_values(body)})


@router.put("/category-displays/{display_id}")
def update_category_display(display_id: str, body: CategoryDisplayIn, con: sqlite3.Connection = Depends(get_db)):
    if not body.background_image:
        raise ValidationError(BACKGROUND_REQUIRED)
    values = _display_values(body)
    with store_errors(UPDATE_FAILED):
        row = update_row(con, "category_displays", display_id, values)
        # id không khớp (vd. client giữ id cũ) -> thử lại theo category_key
        if row is None and body.category_key:
            row = update_row(con, "category_displays", body.category_key, values, key="category_key")
    if row is None:
        raise NotFoundError("العرض غير موجود")
    return row


@router.delete("/category-displays/{display_id}")
def delete_category_display(display_id: str, con: sqlite3.Connection = Depends(get_db)):
    with store_errors("فشل في الحذف"):
        delete_row(con, "category_displays", display_id)
    return {"success": True}


# ---- subcategory displays ----

@router.get("/subcategory-displays")
def list_subcategory_displays(con: sqlite3.Connection = Depends(get_db)):
    with store_errors("فشل في جلب بيانات الفئات الفرعية"):
        return fetch_all(con, "subcategory_displays", "sort_order ASC, created_at DESC")


@router.post("/subcategory-displays")
def save_subcategory_display(body: SubcategoryDisplayIn, con: sqlite3.Connection = Depends(get_db)):
    """Thêm hoặc ghi đè theo cặp (parent_category, subcategory_key)."""
    if not body.parent_category or not body.subcategory_key or not body.image_url:
        raise ValidationError("الرجاء تزويد جميع الحقول المطلوبة")
    values = {
        "parent_category": body.parent_category,
        "subcategory_key": body.subcategory_key,
        "image_url": body.image_url,
        "mobile_image_url": clean(body.mobile_image_url),
        "sort_order": body.sort_order or 0,
    }
    with store_errors("فشل في الحفظ"):
        return upsert_row(con, "subcategory_displays", values, conflict=("parent_category", "subcategory_key"))


@router.delete("/subcategory-displays/{display_id}")
def delete_subcategory_display(display_id: str, con: sqlite3.Connection = Depends(get_db)):
    with store_errors("فشل في الحذف"):
        delete_row(con, "subcategory_displays", display_id)
    return {"success": True}

import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.errors import NotFoundError, ValidationError, store_errors
from db import delete_row, fetch_all, insert_row, update_row
from .deps import clean, get_db

router = APIRouter(prefix="/api/admin", tags=["admin"])

IMAGE_REQUIRED = "مطلوب رفع صورة"


class SlideIn(BaseModel):
    image_url: Optional[str] = None
    mobile_image_url: Optional[str] = None
    headline: Optional[str] = None
    slogan: Optional[str] = None
    cta_label: Optional[str] = None
    cta_link: Optional[str] = None
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


def _slide_values(body: SlideIn) -> dict:
    return {
        "image_url": body.image_url,
        "mobile_image_url": clean(body.mobile_image_url),
        "headline": clean(body.headline),
        "slogan": clean(body.slogan),
        "cta_label": clean(body.cta_label) or "Shop Now",
        "cta_link": clean(body.cta_link) or "/categories",
        "sort_order": body.sort_order or 0,
        "is_active": body.is_active if body.is_active is not None else True,
    }


@router.get("/slider")
def list_slides(con: sqlite3.Connection = Depends(get_db)):
    with store_errors("فشل في جلب الشرائح"):
        return fetch_all(con, "carousel_slides", "sort_order ASC, created_at DESC")


@router.post("/slider")
def create_slide(body: SlideIn, con: sqlite3.Connection = Depends(get_db)):
    if not body.image_url:
        raise ValidationError(IMAGE_REQUIRED)
    with store_errors("فشل في إنشاء الشريحة"):
        return insert_row(con, "carousel_slides", _slide_values(body))


@router.put("/slider/{slide_id}")
def update_slide(slide_id: str, body: SlideIn, con: sqlite3.Connection = Depends(get_db)):
    if not body.image_url:
        raise ValidationError(IMAGE_REQUIRED)
    with store_errors("فشل في تحديث الشريحة"):
        row = update_row(con, "carousel_slides", slide_id, _slide_values(body))
    if row is None:
        raise NotFoundError("الشريحة غير موجودة")
    return row


@router.delete("/slider/{slide_id}")
def delete_slide(slide_id: str, con: sqlite3.Connection = Depends(get_db)):
    with store_errors("فشل في حذف الشريحة"):
        delete_row(con, "carousel_slides", slide_id)
    return {"success": True}

import logging
import sqlite3
import uuid
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.errors import INVALID_DATA, NotFoundError, ValidationError, store_errors
from core.time import now_iso
from db import delete_row, fetch_all, fetch_one, insert_row, update_row
from .deps import clean, get_db, is_number

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

INVALID_ID = "معرّف غير صالح"
CITY_NOT_FOUND = "المدينة غير موجودة"


class ShippingCityIn(BaseModel):
    # shippingFee để Any: kiểm tra kiểu thủ công, "12" dạng chuỗi cũng bị từ chối
    nameEn: Optional[str] = None
    nameAr: Optional[str] = None
    shippingFee: Any = None
    sortOrder: Any = None
    isActive: Any = None


def normalize_city(city: dict) -> dict:
    return {**city, "shipping_fee": float(city["shipping_fee"])}


def _valid_fee(value) -> bool:
    return is_number(value) and value >= 0


def _check_id(raw: str) -> str:
    raw = (raw or "").strip()
    try:
        uuid.UUID(raw)
    except ValueError:
        raise ValidationError(INVALID_ID)
    return raw


@router.get("/shipping-cities")
def list_shipping_cities(con: sqlite3.Connection = Depends(get_db)):
    with store_errors("فشل في تحميل مدن الشحن"):
        rows = fetch_all(con, "shipping_cities", "sort_order ASC, name_en ASC")
    return {"cities": [normalize_city(c) for c in rows]}


@router.post("/shipping-cities", status_code=201)
def create_shipping_city(body: ShippingCityIn, con: sqlite3.Connection = Depends(get_db)):
    if not body.nameEn or not _valid_fee(body.shippingFee):
        raise ValidationError(INVALID_DATA)
    values = {
        "name_en": body.nameEn,
        "name_ar": clean(body.nameAr),
        "shipping_fee": body.shippingFee,
        "sort_order": body.sortOrder if is_number(body.sortOrder) else 0,
        "is_active": body.isActive if isinstance(body.isActive, bool) else True,
        "updated_at": now_iso(),
    }
    with store_errors("فشل في إنشاء مدينة الشحن"):
        row = insert_row(con, "shipping_cities", values)
    logger.info("shipping city created: %s (%s)", row["id"], row["name_en"])
    return {"city": normalize_city(row)}


@router.patch("/shipping-cities/{city_id}")
def update_shipping_city(city_id: str, body: ShippingCityIn, con: sqlite3.Connection = Depends(get_db)):
    """Cập nhật một phần: chỉ các trường client gửi lên."""
    city_id = _check_id(city_id)
    sent = body.model_fields_set
    values: dict = {}
    if "nameEn" in sent:
        if not body.nameEn:
            raise ValidationError(INVALID_DATA)
        values["name_en"] = body.nameEn
    if "nameAr" in sent:
        values["name_ar"] = clean(body.nameAr)
    if "shippingFee" in sent:
        if not _valid_fee(body.shippingFee):
            raise ValidationError("قيمة الشحن غير صالحة")
        values["shipping_fee"] = body.shippingFee
    if "sortOrder" in sent:
        if not is_number(body.sortOrder):
            raise ValidationError(INVALID_DATA)
        values["sort_order"] = int(body.sortOrder)
    if "isActive" in sent:
        if not isinstance(body.isActive, bool):
            raise ValidationError(INVALID_DATA)
        values["is_active"] = body.isActive

    with store_errors("فشل في تحديث مدينة الشحن"):
        if not values:
            row = fetch_one(con, "shipping_cities", city_id)
        else:
            row = update_row(con, "shipping_cities", city_id, values)
    if row is None:
        raise NotFoundError(CITY_NOT_FOUND)
    return {"city": normalize_city(row), "success": True}


@router.delete("/shipping-cities/{city_id}")
def delete_shipping_city(city_id: str, con: sqlite3.Connection = Depends(get_db)):
    city_id = _check_id(city_id)
    with store_errors("فشل في حذف مدينة الشحن"):
        delete_row(con, "shipping_cities", city_id)
    return {"success": True}

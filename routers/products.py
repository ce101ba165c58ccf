import logging
import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from core.errors import NotFoundError, ValidationError, store_errors
from db import delete_row, fetch_all, fetch_one, insert_row, update_row
from .deps import clean, get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

PRODUCT_NOT_FOUND = "المنتج غير موجود"


class ProductIn(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    quantity: Optional[int] = None
    parent_category: Optional[str] = None
    subcategory: Optional[str] = None
    image: Optional[str] = None


def _product_values(body: ProductIn) -> dict:
    if not body.name:
        raise ValidationError("اسم المنتج مطلوب")
    if body.price is None or body.price < 0:
        raise ValidationError("السعر غير صالح")
    if body.quantity is None or body.quantity < 0:
        raise ValidationError("الكمية غير صالحة")
    return {
        "name": body.name,
        "description": clean(body.description),
        "price": body.price,
        "quantity": body.quantity,
        "parent_category": clean(body.parent_category),
        "subcategory": clean(body.subcategory),
        "image": clean(body.image),
    }


@router.get("/products")
def list_products(parent_category: Optional[str] = None, con: sqlite3.Connection = Depends(get_db)):
    where = {"parent_category": parent_category} if parent_category else None
    with store_errors("تعذر جلب المنتجات"):
        return fetch_all(con, "products", "created_at DESC", where=where)


@router.get("/products/{product_id}")
def get_product(product_id: str, con: sqlite3.Connection = Depends(get_db)):
    with store_errors("تعذر جلب المنتج"):
        row = fetch_one(con, "products", product_id)
    if row is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return row


@router.post("/products", status_code=201)
def create_product(body: ProductIn, con: sqlite3.Connection = Depends(get_db)):
    values = _product_values(body)
    with store_errors("تعذر إنشاء المنتج"):
        row = insert_row(con, "products", values)
    logger.info("product created: %s qty=%s", row["id"], row["quantity"])
    return row


@router.put("/products/{product_id}")
def update_product(product_id: str, body: ProductIn, con: sqlite3.Connection = Depends(get_db)):
    values = _product_values(body)
    with store_errors("تعذر تحديث المنتج"):
        row = update_row(con, "products", product_id, values)
    if row is None:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return row


@router.delete("/products/{product_id}")
def delete_product(product_id: str, con: sqlite3.Connection = Depends(get_db)):
    with store_errors("تعذر حذف المنتج"):
        delete_row(con, "products", product_id)
    return {"success": True}

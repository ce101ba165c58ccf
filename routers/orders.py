import logging
import re
import sqlite3
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from core.catalog import ORDER_STATUSES
from core.errors import INVALID_DATA, NotFoundError, StoreError, ValidationError, store_errors
from db import (
    as_dict, decrement_inventory, delete_row, fetch_one, generate_order_number,
    increment_inventory, insert_row, product_stock, update_row,
)
from .deps import clean, get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["orders"])

WHATSAPP_RE = re.compile(r"^[+]?[0-9]{10,15}$")
ORDER_NOT_FOUND = "الطلب غير موجود"


class OrderItemIn(BaseModel):
    productId: str
    productName: Optional[str] = None
    productImage: Optional[str] = None
    quantity: int
    unitPrice: float = Field(allow_inf_nan=False)


class OrderIn(BaseModel):
    customerName: Optional[str] = None
    customerWhatsapp: Optional[str] = None
    customerEmail: Optional[str] = None
    customerAddress: Optional[str] = None
    items: List[OrderItemIn] = []
    notes: Optional[str] = None


class OrderUpdate(BaseModel):
    status: Optional[str] = None
    notes: Optional[str] = None


def _with_items(con: sqlite3.Connection, orders: list[dict]) -> list[dict]:
    """Gắn order_items (kèm tên/ảnh sản phẩm hiện tại) vào từng đơn."""
    if not orders:
        return orders
    ids = [o["id"] for o in orders]
    marks = ", ".join("?" for _ in ids)
    rows = con.execute(
        f"""
        SELECT oi.*, p.name AS current_name, p.image AS current_image
        FROM order_items oi
        LEFT JOIN products p ON p.id = oi.product_id
        WHERE oi.order_id IN ({marks})
        ORDER BY oi.rowid ASC
        """,
        ids,
    ).fetchall()
    by_order: dict[str, list] = {}
    for r in rows:
        item = dict(r)
        name, image = item.pop("current_name"), item.pop("current_image")
        item["products"] = {"name": name, "image": image} if item["product_id"] else None
        by_order.setdefault(item["order_id"], []).append(item)
    return [{**o, "order_items": by_order.get(o["id"], [])} for o in orders]


@router.get("/orders")
def list_orders(status: Optional[str] = None, con: sqlite3.Connection = Depends(get_db)):
    sql = "SELECT * FROM orders"
    params: list = []
    if status and status != "all":
        sql += " WHERE status = ?"
        params.append(status)
    sql += " ORDER BY created_at DESC, rowid DESC"
    with store_errors("تعذر جلب الطلبات"):
        orders = [as_dict(r) for r in con.execute(sql, params).fetchall()]
        return {"orders": _with_items(con, orders)}


@router.post("/orders", status_code=201)
def create_order(body: OrderIn, con: sqlite3.Connection = Depends(get_db)):
    if not body.customerName or not body.customerWhatsapp or not body.items:
        raise ValidationError("بعض الحقول الإلزامية مفقودة")
    if not WHATSAPP_RE.match(re.sub(r"\s", "", body.customerWhatsapp)):
        raise ValidationError("صيغة رقم واتساب غير صحيحة")
    if any(item.quantity <= 0 or item.unitPrice < 0 for item in body.items):
        raise ValidationError(INVALID_DATA)

    # Cùng một sản phẩm có thể nằm ở nhiều dòng: so tồn kho với tổng số lượng
    wanted: dict[str, int] = {}
    labels: dict[str, str] = {}
    for item in body.items:
        wanted[item.productId] = wanted.get(item.productId, 0) + item.quantity
        labels.setdefault(item.productId, item.productName or item.productId)

    with store_errors("خطأ داخلي في الخادم"):
        for product_id, quantity in wanted.items():
            product = product_stock(con, product_id)
            if not product:
                raise NotFoundError(f"المنتج غير موجود: {labels[product_id]}")
            if product["quantity"] < quantity:
                raise ValidationError(f"الكمية غير متوفرة للمنتج: {labels[product_id]}")

    total = sum(item.unitPrice * item.quantity for item in body.items)

    # Đơn, dòng hàng và trừ kho commit cùng nhau (get_db rollback nếu có lỗi)
    with store_errors("تعذر إنشاء الطلب"):
        order = insert_row(con, "orders", {
            "order_number": generate_order_number(con),
            "customer_name": body.customerName,
            "customer_whatsapp": body.customerWhatsapp,
            "customer_email": clean(body.customerEmail),
            "customer_address": clean(body.customerAddress),
            "total_amount": total,
            "notes": clean(body.notes),
            "status": "pending",
        })
        items = [
            insert_row(con, "order_items", {
                "order_id": order["id"],
                "product_id": item.productId,
                "product_name": item.productName,
                "product_image": item.productImage,
                "quantity": item.quantity,
                "unit_price": item.unitPrice,
                "total_price": item.unitPrice * item.quantity,
            })
            for item in body.items
        ]
    with store_errors("تعذر تحديث المخزون"):
        for item in body.items:
            if not decrement_inventory(con, item.productId, item.quantity):
                raise StoreError("تعذر تحديث المخزون")

    logger.info("order %s created: %d items, total=%s", order["order_number"], len(items), total)
    return {"success": True, "order": {**order, "items": items}}


@router.get("/orders/{order_id}")
def get_order(order_id: str, con: sqlite3.Connection = Depends(get_db)):
    with store_errors("خطأ داخلي في الخادم"):
        order = fetch_one(con, "orders", order_id)
        if order is None:
            raise NotFoundError(ORDER_NOT_FOUND)
        return {"order": _with_items(con, [order])[0]}


@router.patch("/orders/{order_id}")
def update_order(order_id: str, body: OrderUpdate, con: sqlite3.Connection = Depends(get_db)):
    values: dict = {}
    if body.status:
        if body.status not in ORDER_STATUSES:
            raise ValidationError("حالة الطلب غير صالحة")
        values["status"] = body.status
    if "notes" in body.model_fields_set:
        values["notes"] = body.notes
    with store_errors("تعذر تحديث الطلب"):
        if values:
            order = update_row(con, "orders", order_id, values)
        else:
            order = fetch_one(con, "orders", order_id)
    if order is None:
        raise NotFoundError(ORDER_NOT_FOUND)
    return {"order": order}


@router.delete("/orders/{order_id}")
def delete_order(order_id: str, con: sqlite3.Connection = Depends(get_db)):
    """Xóa đơn và trả lại tồn kho cho các sản phẩm còn tồn tại."""
    with store_errors("تعذر حذف الطلب"):
        items = con.execute(
            "SELECT product_id, quantity FROM order_items WHERE order_id = ?", (order_id,)
        ).fetchall()
        delete_row(con, "orders", order_id)
        for item in items:
            if item["product_id"]:
                increment_inventory(con, item["product_id"], item["quantity"])
    if items:
        logger.info("order %s deleted, restocked %d items", order_id, len(items))
    return {"success": True}

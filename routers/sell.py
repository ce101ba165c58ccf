import logging
import sqlite3
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from core.errors import INTERNAL_ERROR, INVALID_DATA, NotFoundError, StoreError, ValidationError, store_errors
from db import decrement_inventory, product_by_id, product_stock
from .deps import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

PRODUCT_NOT_FOUND = "المنتج غير موجود"
OUT_OF_STOCK = "الكمية غير متوفرة في المخزون"
DECREMENT_FAILED = "تعذر تحديث المخزون"
READ_BACK_FAILED = "تم التحديث لكن تعذر جلب البيانات"


class SellRequest(BaseModel):
    productId: Optional[str] = None
    quantity: Optional[int] = None
    note: Optional[str] = None


@router.post("/sell")
def sell(payload: SellRequest, con: sqlite3.Connection = Depends(get_db)):
    if not payload.productId or not payload.quantity or payload.quantity <= 0:
        raise ValidationError(INVALID_DATA)

    with store_errors(INTERNAL_ERROR):
        product = product_stock(con, payload.productId)
    if not product:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    if product["quantity"] < payload.quantity:
        raise ValidationError(OUT_OF_STOCK)

    # Kiểm tra + trừ nằm trong cùng một UPDATE; hai bước đọc ở trên chỉ để báo lỗi rõ ràng
    with store_errors(DECREMENT_FAILED):
        applied = decrement_inventory(con, payload.productId, payload.quantity)
    if not applied:
        logger.warning("decrement_inventory rejected: product=%s qty=%s", payload.productId, payload.quantity)
        raise StoreError(DECREMENT_FAILED)
    logger.info("sold %s x %s%s", payload.quantity, payload.productId,
                f" ({payload.note})" if payload.note else "")

    # Ghi đã thành công: đọc lại lỗi thì vẫn 200, chỉ thiếu dữ liệu sản phẩm
    try:
        updated = product_by_id(con, payload.productId)
    except sqlite3.Error:
        logger.exception("read-back after sell failed: product=%s", payload.productId)
        return {"success": True, "product": None, "error": READ_BACK_FAILED}
    return {"success": True, "product": updated}

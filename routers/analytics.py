import sqlite3

from fastapi import APIRouter, Depends, Request

from core.stats import category_breakdown, price_summary
from core.errors import store_errors
from .deps import get_db

router = APIRouter(prefix="/api/admin", tags=["admin"])

ANALYTICS_FAILED = "تعذر جلب بيانات التحليلات"


@router.get("/analytics")
def analytics(request: Request, con: sqlite3.Connection = Depends(get_db)):
    # Lỗi ở bất kỳ lần đọc nào -> 500, không trả kết quả dở dang
    with store_errors(ANALYTICS_FAILED):
        prices = [r["price"] for r in con.execute("SELECT price FROM products ORDER BY rowid").fetchall()]
        pairs = [
            (r["parent_category"], r["subcategory"])
            for r in con.execute("SELECT parent_category, subcategory FROM products ORDER BY rowid").fetchall()
        ]

    stats = price_summary(prices)
    return {
        "totalProducts": stats["count"],
        "totalCategories": request.app.state.total_categories,
        "avgPrice": stats["avg"],
        "minPrice": stats["min"],
        "maxPrice": stats["max"],
        "categoryBreakdown": category_breakdown(pairs),
    }

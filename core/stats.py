from typing import Iterable


def price_summary(prices: Iterable) -> dict:
    """
    Đếm, trung bình, min, max của danh sách giá.
    Danh sách rỗng -> tất cả bằng 0. Giá không đọc được tính là 0.
    """
    values = [_to_number(p) for p in prices]
    if not values:
        return {"count": 0, "avg": 0, "min": 0, "max": 0}
    return {
        "count": len(values),
        "avg": sum(values) / len(values),
        "min": min(values),
        "max": max(values),
    }


def category_breakdown(pairs: Iterable[tuple]) -> list[dict]:
    """
    Gộp theo khóa "<parent_category>_<subcategory>", đếm số sản phẩm mỗi nhóm,
    sắp giảm dần theo count. sorted() ổn định nên nhóm bằng count giữ thứ tự gặp đầu tiên.
    """
    counts: dict[str, int] = {}
    for parent, sub in pairs:
        key = f"{parent}_{sub}"
        counts[key] = counts.get(key, 0) + 1
    groups = [{"category": k, "count": c} for k, c in counts.items()]
    return sorted(groups, key=lambda g: g["count"], reverse=True)


def _to_number(v) -> float:
    try:
        return float(v) if v is not None else 0
    except (TypeError, ValueError):
        return 0

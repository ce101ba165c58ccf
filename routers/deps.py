import math

from fastapi import Request

from db import Bucket, connect


def get_db(request: Request):
    """Mỗi request một kết nối: commit khi thành công, rollback khi có lỗi."""
    db = connect(request.app.state.db_path)
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_bucket(request: Request) -> Bucket:
    return request.app.state.bucket


def clean(value):
    """Chuỗi rỗng / None -> None (cột tùy chọn lưu NULL)."""
    if isinstance(value, str) and not value.strip():
        return None
    return value if value else None


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


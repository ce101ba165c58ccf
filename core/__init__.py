from .config import (
    BASE, DB_PATH, STORAGE_DIR, PRODUCT_IMAGES_BUCKET, PUBLIC_BASE_URL,
    LOG_LEVEL, CORS_ORIGINS, TOTAL_CATEGORIES, DEFAULT_COLOR, MAX_IMAGE_BYTES,
)
from .errors import (
    ApiError, ValidationError, NotFoundError, StoreError,
    store_errors, install_handlers, INVALID_DATA, INTERNAL_ERROR,
)
from .stats import price_summary, category_breakdown
from .time import now_iso, today_stamp

__all__ = [
    "BASE", "DB_PATH", "STORAGE_DIR", "PRODUCT_IMAGES_BUCKET", "PUBLIC_BASE_URL",
    "LOG_LEVEL", "CORS_ORIGINS", "TOTAL_CATEGORIES", "DEFAULT_COLOR", "MAX_IMAGE_BYTES",
    "ApiError", "ValidationError", "NotFoundError", "StoreError",
    "store_errors", "install_handlers", "INVALID_DATA", "INTERNAL_ERROR",
    "price_summary", "category_breakdown",
    "now_iso", "today_stamp",
]

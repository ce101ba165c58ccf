from .db import (
    connect,
    init,
    new_id,
    seed_category_displays,
    product_by_id,
    product_stock,
    decrement_inventory,
    increment_inventory,
    generate_order_number,
)
from .repo import (
    as_dict,
    fetch_one,
    fetch_all,
    insert_row,
    update_row,
    delete_row,
    upsert_row,
)
from .storage import Bucket, StorageError, ALLOWED_IMAGE_TYPES, IMAGE_EXTENSIONS, image_extension

__all__ = [
    # low-level
    "connect", "init", "new_id", "seed_category_displays",
    "product_by_id", "product_stock",
    # store procedures
    "decrement_inventory", "increment_inventory", "generate_order_number",
    # table helpers
    "as_dict", "fetch_one", "fetch_all", "insert_row", "update_row", "delete_row", "upsert_row",
    # blob storage
    "Bucket", "StorageError", "ALLOWED_IMAGE_TYPES", "IMAGE_EXTENSIONS", "image_extension",
]

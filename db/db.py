import logging
import os
import secrets
import sqlite3
import uuid
from pathlib import Path

from core.catalog import PARENT_CATEGORIES
from core.time import now_iso, today_stamp

logger = logging.getLogger(__name__)

# created_at/updated_at mặc định: ISO-8601 UTC có mili-giây
_TS = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"

SCHEMA = f"""
PRAGMA journal_mode=WAL;
PRAGMA foreign_keys=ON;

CREATE TABLE IF NOT EXISTS products (
  id              TEXT PRIMARY KEY,
  name            TEXT NOT NULL,
  description     TEXT,
  price           REAL NOT NULL DEFAULT 0 CHECK (price >= 0),
  quantity        INTEGER NOT NULL DEFAULT 0 CHECK (quantity >= 0),
  parent_category TEXT,
  subcategory     TEXT,
  image           TEXT,
  created_at      TEXT NOT NULL DEFAULT {_TS},
  updated_at      TEXT NOT NULL DEFAULT {_TS}
);

CREATE TABLE IF NOT EXISTS categories (
  id             TEXT PRIMARY KEY,
  name           TEXT NOT NULL,
  name_ar        TEXT,
  description    TEXT,
  description_ar TEXT,
  icon           TEXT,
  color          TEXT NOT NULL DEFAULT '#3b82f6',
  created_at     TEXT NOT NULL DEFAULT {_TS},
  updated_at     TEXT NOT NULL DEFAULT {_TS}
);

CREATE TABLE IF NOT EXISTS subcategories (
  id             TEXT PRIMARY KEY,
  category_id    TEXT NOT NULL REFERENCES categories(id) ON DELETE CASCADE,
  name           TEXT NOT NULL,
  name_ar        TEXT,
  description    TEXT,
  description_ar TEXT,
  icon           TEXT,
  color          TEXT NOT NULL DEFAULT '#3b82f6',
  created_at     TEXT NOT NULL DEFAULT {_TS},
  updated_at     TEXT NOT NULL DEFAULT {_TS}
);

CREATE TABLE IF NOT EXISTS category_displays (
  id                      TEXT PRIMARY KEY,
  category_key            TEXT NOT NULL UNIQUE,       -- sunglasses | optical_glasses
  title_ar                TEXT,
  title_en                TEXT,
  slogan_ar               TEXT,
  slogan_en               TEXT,
  background_image        TEXT NOT NULL,
  mobile_background_image TEXT,
  is_visible              INTEGER NOT NULL DEFAULT 1,
  sort_order              INTEGER NOT NULL DEFAULT 0,
  created_at              TEXT NOT NULL DEFAULT {_TS},
  updated_at              TEXT NOT NULL DEFAULT {_TS}
);

CREATE TABLE IF NOT EXISTS subcategory_displays (
  id               TEXT PRIMARY KEY,
  parent_category  TEXT NOT NULL,
  subcategory_key  TEXT NOT NULL,
  image_url        TEXT NOT NULL,
  mobile_image_url TEXT,
  sort_order       INTEGER NOT NULL DEFAULT 0,
  created_at       TEXT NOT NULL DEFAULT {_TS},
  updated_at       TEXT NOT NULL DEFAULT {_TS},
  UNIQUE(parent_category, subcategory_key)       -- upsert theo cặp khóa này
);

CREATE TABLE IF NOT EXISTS shipping_cities (
  id           TEXT PRIMARY KEY,
  name_en      TEXT NOT NULL,
  name_ar      TEXT,
  shipping_fee REAL NOT NULL CHECK (shipping_fee >= 0),
  sort_order   INTEGER NOT NULL DEFAULT 0,
  is_active    INTEGER NOT NULL DEFAULT 1,
  created_at   TEXT NOT NULL DEFAULT {_TS},
  updated_at   TEXT NOT NULL DEFAULT {_TS}
);

CREATE TABLE IF NOT EXISTS carousel_slides (
  id               TEXT PRIMARY KEY,
  image_url        TEXT NOT NULL,
  mobile_image_url TEXT,
  headline         TEXT,
  slogan           TEXT,
  cta_label        TEXT NOT NULL DEFAULT 'Shop Now',
  cta_link         TEXT NOT NULL DEFAULT '/categories',
  sort_order       INTEGER NOT NULL DEFAULT 0,
  is_active        INTEGER NOT NULL DEFAULT 1,
  created_at       TEXT NOT NULL DEFAULT {_TS},
  updated_at       TEXT NOT NULL DEFAULT {_TS}
);

CREATE TABLE IF NOT EXISTS orders (
  id                TEXT PRIMARY KEY,
  order_number      TEXT NOT NULL UNIQUE,        -- ví dụ 'ORD-20250101-A1B2C3'
  customer_name     TEXT NOT NULL,
  customer_whatsapp TEXT NOT NULL,
  customer_email    TEXT,
  customer_address  TEXT,
  total_amount      REAL NOT NULL DEFAULT 0,
  notes             TEXT,
  status            TEXT NOT NULL DEFAULT 'pending',
  created_at        TEXT NOT NULL DEFAULT {_TS},
  updated_at        TEXT NOT NULL DEFAULT {_TS}
);

CREATE TABLE IF NOT EXISTS order_items (
  id            TEXT PRIMARY KEY,
  order_id      TEXT NOT NULL REFERENCES orders(id) ON DELETE CASCADE,
  product_id    TEXT REFERENCES products(id) ON DELETE SET NULL,
  product_name  TEXT,
  product_image TEXT,
  quantity      INTEGER NOT NULL CHECK (quantity > 0),
  unit_price    REAL NOT NULL,
  total_price   REAL NOT NULL,
  created_at    TEXT NOT NULL DEFAULT {_TS},
  updated_at    TEXT NOT NULL DEFAULT {_TS}
);
"""

def connect(db_path: str | None = None) -> sqlite3.Connection:
    """Mở kết nối SQLite, bật WAL + foreign_keys, row_factory=Row."""
    path = db_path or os.getenv("DB_PATH", "data/store.db")
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    con = sqlite3.connect(path, check_same_thread=False)
    con.row_factory = sqlite3.Row
    # đảm bảo PRAGMA có hiệu lực cả khi schema đã tạo
    con.execute("PRAGMA journal_mode=WAL;")
    con.execute("PRAGMA foreign_keys=ON;")
    return con

def init(con: sqlite3.Connection) -> None:
    """Tạo bảng nếu chưa có."""
    con.executescript(SCHEMA)
    con.commit()

def seed_category_displays(con: sqlite3.Connection) -> int:
    """
    Mỗi danh mục cha có đúng một dòng category_displays (khóa category_key).
    INSERT OR IGNORE nên chạy lại không đè dữ liệu admin đã sửa. Trả về số dòng thêm mới.
    """
    before = con.total_changes
    for order, (key, info) in enumerate(PARENT_CATEGORIES.items()):
        con.execute(
            """
            INSERT OR IGNORE INTO category_displays(
              id, category_key, title_ar, title_en, slogan_ar, slogan_en, background_image, sort_order
            ) VALUES(?, ?, ?, ?, ?, ?, '', ?)
            """,
            (new_id(), key, info["name_ar"], info["name_en"],
             info["description_ar"], info["description_en"], order),
        )
    con.commit()
    inserted = con.total_changes - before
    logger.info("seeded %d/%d category displays", inserted, len(PARENT_CATEGORIES))
    return inserted

def product_by_id(con: sqlite3.Connection, pid: str):
    row = con.execute("SELECT * FROM products WHERE id = ?;", (pid,)).fetchone()
    return dict(row) if row else None

def product_stock(con: sqlite3.Connection, pid: str):
    row = con.execute("SELECT id, quantity FROM products WHERE id = ?;", (pid,)).fetchone()
    return dict(row) if row else None

def decrement_inventory(con: sqlite3.Connection, product_id: str, quantity: int) -> bool:
    """
    Trừ tồn kho trong MỘT câu UPDATE có điều kiện (kiểm tra + trừ nguyên tử).
    Không đủ hàng hoặc không có sản phẩm -> không đổi gì, trả về False.
    """
    cur = con.execute(
        """
        UPDATE products
        SET quantity = quantity - ?, updated_at = ?
        WHERE id = ? AND quantity >= ?
        """,
        (quantity, now_iso(), product_id, quantity),
    )
    return cur.rowcount == 1

def increment_inventory(con: sqlite3.Connection, product_id: str, quantity: int) -> bool:
    cur = con.execute(
        "UPDATE products SET quantity = quantity + ?, updated_at = ? WHERE id = ?",
        (quantity, now_iso(), product_id),
    )
    return cur.rowcount == 1

def generate_order_number(con: sqlite3.Connection) -> str:
    """Mã đơn dạng ORD-YYYYMMDD-XXXXXX, sinh lại nếu trùng."""
    while True:
        number = f"ORD-{today_stamp()}-{secrets.token_hex(3).upper()}"
        taken = con.execute("SELECT 1 FROM orders WHERE order_number = ?", (number,)).fetchone()
        if not taken:
            return number

def new_id() -> str:
    return str(uuid.uuid4())

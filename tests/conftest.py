"""Fixture dùng chung cho test API cửa hàng."""

import io
import os
import tempfile

# app.py dựng app ở mức module; trỏ DB/storage mặc định vào thư mục tạm trước khi import
_SCRATCH = tempfile.mkdtemp(prefix="store-tests-")
os.environ.setdefault("DB_PATH", os.path.join(_SCRATCH, "default.db"))
os.environ.setdefault("STORAGE_DIR", os.path.join(_SCRATCH, "storage"))

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from app import create_app
from db import connect, init, insert_row


@pytest.fixture
def db_path(tmp_path) -> str:
    return str(tmp_path / "store.db")


@pytest.fixture
def app(db_path, tmp_path):
    return create_app(db_path=db_path, storage_dir=tmp_path / "storage")


@pytest.fixture(name="client")
def client_fixture(app):
    """TestClient trên app dựng với DB tạm."""
    return TestClient(app)


@pytest.fixture
def con(db_path):
    con = connect(db_path)
    init(con)
    yield con
    con.close()


@pytest.fixture
def make_product(con):
    def _make(quantity=10, price=100.0, parent_category="sunglasses", subcategory="man", name="Aviator"):
        row = insert_row(con, "products", {
            "name": name,
            "price": price,
            "quantity": quantity,
            "parent_category": parent_category,
            "subcategory": subcategory,
        })
        con.commit()
        return row
    return _make


@pytest.fixture
def stock_of(con):
    def _stock(product_id: str) -> int:
        return con.execute("SELECT quantity FROM products WHERE id = ?", (product_id,)).fetchone()[0]
    return _stock


@pytest.fixture
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), (255, 0, 0)).save(buf, format="PNG")
    return buf.getvalue()


import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from core.config import (
    CORS_ORIGINS, DB_PATH, DEFAULT_COLOR, LOG_LEVEL, MAX_IMAGE_BYTES,
    PRODUCT_IMAGES_BUCKET, PUBLIC_BASE_URL, STORAGE_DIR, TOTAL_CATEGORIES,
)
from core.errors import install_handlers
from db import Bucket, connect, init, seed_category_displays
from routers import ROUTERS


def create_app(db_path: str | None = None, storage_dir: str | Path | None = None) -> FastAPI:
    """
    Dựng app với đường dẫn DB / thư mục lưu ảnh truyền vào (mặc định lấy từ env).
    Router nhận kết nối qua dependency get_db, không dùng biến toàn cục.
    """
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    db_path = str(db_path or DB_PATH)
    storage_root = Path(storage_dir or STORAGE_DIR)
    storage_root.mkdir(parents=True, exist_ok=True)

    con = connect(db_path)
    try:
        init(con)
        seed_category_displays(con)
    finally:
        con.close()

    app = FastAPI(title="Eyewear Store API", version="1.0")
    app.state.db_path = db_path
    app.state.bucket = Bucket(storage_root, PRODUCT_IMAGES_BUCKET)
    app.state.public_base_url = PUBLIC_BASE_URL
    app.state.total_categories = TOTAL_CATEGORIES
    app.state.default_color = DEFAULT_COLOR
    app.state.max_image_bytes = MAX_IMAGE_BYTES

    app.add_middleware(CORSMiddleware, allow_origins=CORS_ORIGINS, allow_credentials=True,
                       allow_methods=["*"], allow_headers=["*"])
    install_handlers(app)

    for router in ROUTERS:
        app.include_router(router)
    app.mount("/media", StaticFiles(directory=storage_root, check_dir=False), name="media")
    return app


app = create_app()

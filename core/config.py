from pathlib import Path
import os
from dotenv import load_dotenv
load_dotenv()

BASE = Path(__file__).resolve().parents[1]
DB_PATH = os.getenv("DB_PATH", str(BASE / "data/store.db"))
STORAGE_DIR = Path(os.getenv("STORAGE_DIR", "storage")).resolve()
PRODUCT_IMAGES_BUCKET = os.getenv("PRODUCT_IMAGES_BUCKET", "product-images")
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "").rstrip("/")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

# Số danh mục cha (sunglasses, optical_glasses); cấu hình, không đếm từ DB
TOTAL_CATEGORIES = int(os.getenv("TOTAL_CATEGORIES", "2"))
DEFAULT_COLOR = os.getenv("DEFAULT_COLOR", "#3b82f6")
MAX_IMAGE_BYTES = int(os.getenv("MAX_IMAGE_BYTES", str(5 * 1024 * 1024)))

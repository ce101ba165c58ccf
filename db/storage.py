import io
import logging
import secrets
import time
from pathlib import Path

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp", "image/gif")


class StorageError(Exception):
    pass


class Bucket:
    """Thư mục lưu ảnh sản phẩm; tên file là khóa duy nhất (giống object storage)."""

    def __init__(self, root: Path, name: str):
        self.root = Path(root) / name
        self.name = name

    def _path(self, file_name: str) -> Path:
        # chỉ chấp nhận tên phẳng, không cho thoát khỏi thư mục bucket
        if not file_name or Path(file_name).name != file_name or file_name in (".", ".."):
            raise StorageError(f"invalid object name: {file_name!r}")
        return self.root / file_name

    def upload(self, raw: bytes, ext: str) -> str:
        self.root.mkdir(parents=True, exist_ok=True)
        ext = "".join(ch for ch in (ext or "") if ch.isalnum()).lower() or "bin"
        name = f"{secrets.token_hex(6)}-{int(time.time() * 1000)}.{ext}"
        self._path(name).write_bytes(raw)
        logger.info("stored %s/%s (%d bytes)", self.name, name, len(raw))
        return name

    def remove(self, names: list[str]) -> list[str]:
        """Xóa theo tên; tên không tồn tại bỏ qua. Trả về các tên đã xóa thật."""
        removed = []
        for name in names:
            path = self._path(name)
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise StorageError(str(e)) from e
            removed.append(name)
        logger.info("removed %d/%d objects from %s", len(removed), len(names), self.name)
        return removed


# Định dạng Pillow nhận ra -> đuôi file lưu trữ (StaticFiles suy content-type từ đuôi)
IMAGE_EXTENSIONS = {"JPEG": "jpg", "PNG": "png", "WEBP": "webp", "GIF": "gif"}


def image_extension(raw: bytes) -> str | None:
    """Đuôi file theo định dạng ảnh thật của dữ liệu; không phải ảnh được hỗ trợ -> None."""
    try:
        with Image.open(io.BytesIO(raw)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        return None
    return IMAGE_EXTENSIONS.get(fmt)

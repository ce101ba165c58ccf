import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from pydantic import BaseModel

from core.errors import StoreError, ValidationError
from db import ALLOWED_IMAGE_TYPES, Bucket, StorageError, image_extension
from .deps import get_bucket

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["media"])


class DeleteImageRequest(BaseModel):
    fileName: Optional[str] = None


def public_url(request: Request, bucket: Bucket, name: str) -> str:
    base = request.app.state.public_base_url or str(request.base_url).rstrip("/")
    return f"{base}/media/{bucket.name}/{name}"


@router.post("/upload-product-image")
async def upload_product_image(
        request: Request,
        file: Optional[UploadFile] = File(None),
        bucket: Bucket = Depends(get_bucket),
):
    if file is None:
        raise ValidationError("لم يتم رفع أي ملف")
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("نوع الملف غير مدعوم. يسمح فقط بالصور.")

    raw = await file.read()
    if len(raw) > request.app.state.max_image_bytes:
        raise ValidationError("حجم الملف كبير جدًا. الحد الأقصى ٥ ميجابايت.")
    ext = image_extension(raw)
    if ext is None:
        raise ValidationError("نوع الملف غير مدعوم. يسمح فقط بالصور.")

    # đuôi lấy từ nội dung ảnh, bỏ qua tên file client gửi
    try:
        name = bucket.upload(raw, ext)
    except OSError:
        logger.exception("upload to %s failed", bucket.name)
        raise StoreError("تعذر رفع الصورة")
    return {"url": public_url(request, bucket, name), "path": name}


@router.post("/delete-product-image")
def delete_product_image(body: DeleteImageRequest, bucket: Bucket = Depends(get_bucket)):
    if not body.fileName:
        raise ValidationError("لم يتم تحديد اسم الملف")
    try:
        bucket.remove([body.fileName])
    except StorageError:
        logger.exception("remove %s from %s failed", body.fileName, bucket.name)
        raise StoreError("تعذر حذف الصورة")
    return {"success": True}


@router.post("/generate-tryon")
def generate_tryon():
    # Endpoint đã ngừng; giữ lại để client cũ nhận thông báo thay vì 404
    return {
        "message": "Virtual try-on requests should use the server action at `/app/actions/try-on.ts`.",
        "status": "deprecated",
    }

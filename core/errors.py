import logging
import sqlite3
from contextlib import contextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INVALID_DATA = "بيانات غير صالحة"
INTERNAL_ERROR = "خطأ داخلي في الخادم"


class ApiError(Exception):
    """Lỗi trả về client dạng {"error": message} với status tương ứng."""
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class NotFoundError(ApiError):
    status_code = 404


class StoreError(ApiError):
    status_code = 500


@contextmanager
def store_errors(message: str):
    """Đổi mọi sqlite3.Error thành StoreError(message); ghi log lỗi gốc."""
    try:
        yield
    except sqlite3.Error:
        logger.exception("store error: %s", message)
        raise StoreError(message)


def install_handlers(app: FastAPI) -> None:
    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError):
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _bad_request(request: Request, exc: RequestValidationError):
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.errors())
        return JSONResponse({"error": INVALID_DATA}, status_code=400)

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        logger.exception("unhandled error in %s %s", request.method, request.url.path)
        return JSONResponse({"error": INTERNAL_ERROR}, status_code=500)

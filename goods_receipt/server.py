"""FastAPI application entry point - 收货单参考后端"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from .api import api_router
from .config import get_settings
from .storage import ReceiptStore

logger = logging.getLogger(__name__)

# 配置日志
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)


def _error_body(status_code: int, detail: Any) -> dict:
    """错误信封 ``{"success": false, "code", "message", "data": null}``"""
    if isinstance(detail, dict):
        code = detail.get("code", status_code)
        message = detail.get("message") or "An error occurred"
    else:
        code = status_code
        message = str(detail) if detail else "An error occurred"
    return {"success": False, "code": code, "message": message, "data": None}


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=_error_body(exc.status_code, exc.detail))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{location}: {first.get('msg')}" if location else str(first.get("msg", "Invalid request"))
    logger.warning(f"[参考后端] 请求校验失败 {request.url.path}: {message}")
    return JSONResponse(
        status_code=422,
        content={"success": False, "code": "VALIDATION_ERROR", "message": message, "data": None},
    )


def create_app(store: Optional[ReceiptStore] = None) -> FastAPI:
    """创建参考后端应用

    Args:
        store: 收货单存储，默认按配置（GR_DATA_FILE）创建
    """
    app = FastAPI(title="Goods Receipt API")
    app.state.store = store if store is not None else ReceiptStore(get_settings().data_file or None)

    # Allow local frontend development by enabling CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(api_router)

    @app.get("/")
    def root() -> dict[str, str]:
        return {"message": "Goods Receipt API is running"}

    return app


app = create_app()

__all__ = ["app", "create_app"]

"""httpx 异步客户端封装，统一收货单后端的请求和异常处理。"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import Settings, get_settings
from ..errors import CONNECTION_ERROR_MESSAGE, GENERIC_ERROR_MESSAGE, TransportError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json, text/plain, */*",
}


def _normalise_base_url(base_url: str) -> str:
    """确保 base_url 以 `/` 结尾，避免路径连接异常。"""
    return base_url if base_url.endswith("/") else f"{base_url}/"


def _extract_error_message(body: Any) -> tuple[str, Optional[Any]]:
    """从后端错误响应中提取提示信息和错误码"""
    if isinstance(body, dict):
        error = body.get("error") if isinstance(body.get("error"), dict) else {}
        message = body.get("message") or error.get("message")
        if not message and isinstance(body.get("detail"), str):
            message = body["detail"]
        code = body.get("code") or error.get("code")
        return (str(message) if message else GENERIC_ERROR_MESSAGE), code
    return GENERIC_ERROR_MESSAGE, None


def _wrap_http_error(response: httpx.Response) -> TransportError:
    """将HTTP错误响应转换为自定义异常，便于统一处理。"""
    try:
        body = response.json()
    except ValueError:
        body = response.text
    message, code = _extract_error_message(body)
    return TransportError(
        status=response.status_code,
        message=message,
        code=code,
        details=body,
    )


def create_client(
    settings: Optional[Settings] = None,
    *,
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """根据配置初始化异步 httpx 客户端。

    Parameters
    ----------
    settings:
        配置对象，默认读取环境变量。
    base_url, timeout:
        覆盖配置中的后端地址和超时时间。
    transport:
        自定义传输层（例如测试中的 ``httpx.ASGITransport``）。
    """
    settings = settings or get_settings()
    resolved_base_url = _normalise_base_url(base_url or settings.api_base_url)
    resolved_timeout = timeout if timeout is not None else settings.http_timeout

    headers = dict(DEFAULT_HEADERS)
    if settings.has_token:
        headers["Authorization"] = f"Bearer {settings.api_token}"

    client_kwargs: Dict[str, Any] = {
        "base_url": resolved_base_url,
        "timeout": resolved_timeout,
        "headers": headers,
    }
    if transport is not None:
        client_kwargs["transport"] = transport
    return httpx.AsyncClient(**client_kwargs)


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    /,
    **kwargs: Any,
) -> Any:
    """
    发送请求并返回解析后的响应体。

    Parameters
    ----------
    client:
        ``create_client`` 创建的客户端。
    method, path:
        HTTP 方法和相对路径（不以 ``/`` 开头）。
    kwargs:
        透传给 ``httpx.AsyncClient.request``，如 ``params``、``json``、``files``。

    Raises
    ------
    TransportError
        网络不可达或后端返回错误状态码。
    """
    logger.debug(f"[HTTP] {method.upper()} {path}")
    try:
        response = await client.request(method, path.lstrip("/"), **kwargs)
    except httpx.RequestError as exc:
        raise TransportError(status=0, message=CONNECTION_ERROR_MESSAGE, details=str(exc)) from exc

    if response.is_error:
        error = _wrap_http_error(response)
        logger.error(f"[HTTP] {method.upper()} {path} 失败: {error}")
        raise error

    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


__all__ = ["DEFAULT_HEADERS", "create_client", "request_json"]

"""收货单后端的 HTTP 传输层。"""

from __future__ import annotations

from ..errors import TransportError
from .client import create_client, request_json

__all__ = ["TransportError", "create_client", "request_json"]

"""Configuration utilities for environment-based settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_env(dotenv_path: Optional[str] = None) -> None:
    """Load environment variables from a .env file without overriding existing values."""
    path = Path(dotenv_path or ".env")
    load_dotenv(dotenv_path=str(path), override=False)


# 默认HTTP超时时间（秒）
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_BASE_URL = "http://localhost:8080/"
DEFAULT_LIST_PAGE_SIZE = 100
DEFAULT_SEARCH_DEBOUNCE_MS = 500


@dataclass(frozen=True)
class Settings:
    """Structured configuration values for the goods-receipt backend."""

    api_base_url: str = DEFAULT_BASE_URL
    api_token: str = ""
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    list_page_size: int = DEFAULT_LIST_PAGE_SIZE
    search_debounce_ms: int = DEFAULT_SEARCH_DEBOUNCE_MS
    # 参考后端的JSON持久化文件（为空则仅保存在内存中）
    data_file: str = ""

    @property
    def has_token(self) -> bool:
        return bool(self.api_token)

    @property
    def search_debounce_seconds(self) -> float:
        return self.search_debounce_ms / 1000.0


def _positive_number(raw: str, default, cast):
    """解析正数环境变量，非法值回退到默认值"""
    if not raw:
        return default
    try:
        parsed = cast(raw)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@lru_cache(maxsize=1)
def get_settings(dotenv_path: Optional[str] = None) -> Settings:
    """Return cached settings, ensuring environment variables are loaded once."""
    load_env(dotenv_path)
    return Settings(
        api_base_url=os.getenv("GR_API_BASE_URL", DEFAULT_BASE_URL),
        api_token=os.getenv("GR_API_TOKEN", ""),
        http_timeout=_positive_number(
            os.getenv("GR_HTTP_TIMEOUT", ""), DEFAULT_HTTP_TIMEOUT, float
        ),
        list_page_size=_positive_number(
            os.getenv("GR_LIST_PAGE_SIZE", ""), DEFAULT_LIST_PAGE_SIZE, int
        ),
        search_debounce_ms=_positive_number(
            os.getenv("GR_SEARCH_DEBOUNCE_MS", ""), DEFAULT_SEARCH_DEBOUNCE_MS, int
        ),
        data_file=os.getenv("GR_DATA_FILE", ""),
    )


__all__ = ["Settings", "get_settings", "load_env"]

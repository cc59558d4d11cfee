from __future__ import annotations

import os

import pytest

from goods_receipt import config
from goods_receipt.config import Settings, get_settings

ENV_KEYS = [
    "GR_API_BASE_URL",
    "GR_API_TOKEN",
    "GR_HTTP_TIMEOUT",
    "GR_LIST_PAGE_SIZE",
    "GR_SEARCH_DEBOUNCE_MS",
    "GR_DATA_FILE",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    saved = {key: os.environ.pop(key, None) for key in ENV_KEYS}
    # 不读取工作目录中的 .env
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield monkeypatch
    get_settings.cache_clear()
    # .env 加载的值直接写入 os.environ，需要手动还原
    for key, value in saved.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


def test_defaults(clean_env):
    settings = get_settings()
    assert settings.api_base_url == config.DEFAULT_BASE_URL
    assert settings.http_timeout == 30.0
    assert settings.list_page_size == 100
    assert settings.search_debounce_seconds == 0.5
    assert not settings.has_token


def test_environment_overrides(clean_env):
    clean_env.setenv("GR_API_BASE_URL", "https://erp.example/")
    clean_env.setenv("GR_API_TOKEN", "secret")
    clean_env.setenv("GR_HTTP_TIMEOUT", "5")
    clean_env.setenv("GR_SEARCH_DEBOUNCE_MS", "250")
    settings = get_settings()
    assert settings.api_base_url == "https://erp.example/"
    assert settings.has_token
    assert settings.http_timeout == 5.0
    assert settings.search_debounce_seconds == 0.25


@pytest.mark.parametrize("raw", ["abc", "0", "-3"])
def test_invalid_numbers_fall_back(clean_env, raw):
    clean_env.setenv("GR_LIST_PAGE_SIZE", raw)
    assert get_settings().list_page_size == 100


def test_dotenv_does_not_override_environment(clean_env, tmp_path):
    (tmp_path / ".env").write_text("GR_API_TOKEN=from-file\nGR_LIST_PAGE_SIZE=25\n", encoding="utf-8")
    clean_env.setenv("GR_API_TOKEN", "from-env")
    settings = get_settings()
    assert settings.api_token == "from-env"
    assert settings.list_page_size == 25


def test_settings_are_frozen():
    with pytest.raises(AttributeError):
        Settings().api_token = "x"

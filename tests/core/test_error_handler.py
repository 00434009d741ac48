import pytest

from Jellyfin_Source.core.error_handler import ErrorCategory, ErrorHandler
from Jellyfin_Source.web.exceptions import (
    AuthError,
    AuthErrorKind,
    ConfigError,
    NetworkError,
    WebsiteError,
)


@pytest.mark.parametrize(
    "error,category",
    [
        (ConfigError("缺少", "Please configure API key in settings"), ErrorCategory.CONFIG_ERROR),
        (AuthError(AuthErrorKind.INVALID_KEY, "无效", "Invalid API key", 401), ErrorCategory.CREDENTIAL_ERROR),
        (AuthError(AuthErrorKind.INSUFFICIENT_SCOPE, "权限", "perm", 403), ErrorCategory.PERMISSION_ERROR),
        (AuthError(AuthErrorKind.CONNECTION, "连接", "conn"), ErrorCategory.NETWORK_ERROR),
        (NetworkError("连接错误: x"), ErrorCategory.NETWORK_ERROR),
        (WebsiteError("服务器错误", "Server error: HTTP 502", http_status=502), ErrorCategory.SITE_ERROR),
        (WebsiteError("服务器错误", "Server error: HTTP 404", http_status=404), ErrorCategory.NOT_FOUND),
        (ValueError("bad page"), ErrorCategory.INVALID_INPUT),
        (RuntimeError("boom"), ErrorCategory.UNKNOWN),
    ],
)
def test_categorize(error, category):
    handler = ErrorHandler({})
    assert handler.handle_exception(error, "jellyfin", "popular").category == category


def test_structured_error_keeps_both_messages():
    handler = ErrorHandler({"network": {"proxy_server": None}})
    error = handler.handle_exception(
        AuthError(AuthErrorKind.INVALID_KEY, "API 密钥无效", "Invalid API key", 401),
        "jellyfin",
        "popular",
    )

    data = error.to_dict()
    assert data["category"] == "credential_error"
    assert data["message"] == {"zh": "API 密钥无效", "en": "Invalid API key"}
    assert data["http_status"] == 401
    assert data["suggestions"]["en"]


def test_network_suggestions_mention_proxy():
    handler = ErrorHandler({"network": {"proxy_server": "http://127.0.0.1:7890"}})
    error = handler.handle_exception(NetworkError("连接错误: x"), "jellyfin", "chapters")
    assert "http://127.0.0.1:7890" in error.suggestions_en[0]

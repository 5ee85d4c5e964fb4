"""网络工具 - 下载地址校验"""

from __future__ import annotations

from urllib.parse import urlparse

from depsupply.core.exceptions import ValidationError

_REMOTE_SCHEMES = frozenset(("http", "https"))


def is_remote(uri: str) -> bool:
    """是否为需要下载的远程地址"""
    return urlparse(uri).scheme in _REMOTE_SCHEMES


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验下载地址仅使用 http/https

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _REMOTE_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )

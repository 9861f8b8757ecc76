"""이 파일은 .py 페이지 목록 모듈로 URL 검증과 하위 페이지 URL 합성을 담당합니다."""

from __future__ import annotations

from typing import List
from urllib.parse import urlparse

from app.core.errors import InvalidUrlError

# 0번은 기준 URL 자신을 뜻한다.
COMMON_PATHS = (
    "",
    "/about",
    "/services",
    "/contact",
    "/blog",
    "/products",
    "/team",
    "/pricing",
    "/support",
    "/careers",
)


def is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse((url or "").strip())
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_url(url: str) -> str:
    # 비어 있으면 별도 메시지로 거부한다.
    if not url or not url.strip():
        raise InvalidUrlError("Please enter a valid URL")
    if not is_valid_url(url):
        raise InvalidUrlError("Please enter a valid URL (including http:// or https://)")
    return url.strip()


def origin_of(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def expand_pages(base_url: str, max_pages: int) -> List[str]:
    # 호출 전에 validate_url을 통과한 URL이어야 한다.
    pages = [base_url]
    origin = origin_of(base_url)
    for index in range(1, min(max_pages, len(COMMON_PATHS))):
        path = COMMON_PATHS[index]
        if path:
            pages.append(origin + path)
    return pages

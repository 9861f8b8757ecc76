"""이 파일은 .py 테스트 모듈로 URL 검증과 페이지 목록 합성을 검증합니다."""

from app.core.errors import InvalidUrlError
from app.services.pages import COMMON_PATHS, expand_pages, validate_url


def test_expand_three_pages() -> None:
    assert expand_pages("https://example.com", 3) == [
        "https://example.com",
        "https://example.com/about",
        "https://example.com/services",
    ]


def test_expand_is_deterministic() -> None:
    first = expand_pages("https://example.com/shop?x=1", 6)
    assert first == expand_pages("https://example.com/shop?x=1", 6)
    assert first[0] == "https://example.com/shop?x=1"
    assert first[1] == "https://example.com/about"


def test_expand_is_capped_by_path_table() -> None:
    pages = expand_pages("https://example.com", 50)
    assert len(pages) == len(COMMON_PATHS)
    assert pages[-1] == "https://example.com/careers"
    assert expand_pages("https://example.com", 1) == ["https://example.com"]


def test_validate_url_rejects_bad_input() -> None:
    for value in ("", "   ", "not a url", "ftp://example.com"):
        try:
            validate_url(value)
        except InvalidUrlError:
            continue
        raise AssertionError(f"InvalidUrlError not raised for {value!r}")


def test_validate_url_strips_whitespace() -> None:
    assert validate_url("  http://example.com ") == "http://example.com"

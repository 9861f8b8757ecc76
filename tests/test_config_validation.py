"""이 파일은 .py 테스트 모듈로 관리자 설정 스키마를 검증합니다."""

from app.core.config_validation import apply_config_schema, load_config_schemas
from app.core.errors import AdminConfigError


def test_apply_config_schema_defaults() -> None:
    schema = {
        "properties": {
            "fromName": {"type": "string", "default": "AccessScan"},
        }
    }
    result = apply_config_schema(schema, {})
    assert result["fromName"] == "AccessScan"


def test_apply_config_schema_type_error() -> None:
    schema = {"properties": {"port": {"type": "integer"}}}
    try:
        apply_config_schema(schema, {"port": "not-int"})
    except AdminConfigError as exc:
        assert "port" in str(exc)
    else:
        raise AssertionError("AdminConfigError not raised")


def test_apply_config_schema_rejects_bool_for_integer() -> None:
    schema = {"properties": {"port": {"type": "integer"}}}
    try:
        apply_config_schema(schema, {"port": True})
    except AdminConfigError as exc:
        assert "port" in str(exc)
    else:
        raise AssertionError("AdminConfigError not raised")


def test_apply_config_schema_min_validation() -> None:
    schema = {"properties": {"taxRate": {"type": "number", "min": 0}}}
    try:
        apply_config_schema(schema, {"taxRate": -1})
    except AdminConfigError as exc:
        assert "taxRate" in str(exc)
    else:
        raise AssertionError("AdminConfigError not raised")


def test_email_schema_requires_from_email() -> None:
    schemas = load_config_schemas()
    try:
        apply_config_schema(schemas["email"], {"host": "smtp.example.com"})
    except AdminConfigError as exc:
        assert "fromEmail" in str(exc)
    else:
        raise AssertionError("AdminConfigError not raised")


def test_payments_schema_fills_defaults() -> None:
    schemas = load_config_schemas()
    result = apply_config_schema(schemas["payments"], {"provider": "stripe"})
    assert result["currency"] == "USD"
    assert result["taxRate"] == 0

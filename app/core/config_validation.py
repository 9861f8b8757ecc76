"""이 파일은 .py 관리자 설정 스키마 검증 모듈입니다.

카테고리(email, payments 등)마다 admin_config_schemas.yml에 정의된 스키마로
관리자가 저장하려는 config_data를 검사하고 기본값을 채웁니다.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .config import ADMIN_CONFIG_SCHEMA_FILE
from .errors import AdminConfigError

_TYPE_MAP = {
    "string": str,
    "integer": int,
    "number": (int, float),
    "boolean": bool,
    "object": dict,
    "array": list,
}


def load_config_schemas(path: Optional[Path] = None) -> Dict[str, Dict[str, Any]]:
    # 카테고리 이름 -> 스키마 딕셔너리를 읽는다.
    schema_path = Path(path or ADMIN_CONFIG_SCHEMA_FILE)
    if not schema_path.exists():
        return {}
    return yaml.safe_load(schema_path.read_text(encoding="utf-8")) or {}


def _type_errors(key: str, value: Any, expected: str) -> List[str]:
    expected_type = _TYPE_MAP.get(expected)
    if expected_type is None:
        return [f"Unsupported type in schema: {expected}"]
    # bool은 int의 하위 타입이라 숫자 필드에는 허용하지 않는다.
    if expected in ("integer", "number") and isinstance(value, bool):
        return [f"Config '{key}' must be {expected}"]
    if not isinstance(value, expected_type):
        return [f"Config '{key}' must be {expected}"]
    return []


def _range_errors(key: str, value: Any, spec: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if "min" in spec and value < spec["min"]:
            errors.append(f"Config '{key}' must be >= {spec['min']}")
        if "max" in spec and value > spec["max"]:
            errors.append(f"Config '{key}' must be <= {spec['max']}")
    elif isinstance(value, str):
        if "min_length" in spec and len(value) < spec["min_length"]:
            errors.append(f"Config '{key}' length must be >= {spec['min_length']}")
        if "max_length" in spec and len(value) > spec["max_length"]:
            errors.append(f"Config '{key}' length must be <= {spec['max_length']}")
        if "pattern" in spec and not re.search(spec["pattern"], value):
            errors.append(f"Config '{key}' does not match pattern")
    return errors


def field_errors(key: str, value: Any, spec: Dict[str, Any]) -> List[str]:
    # 필드 하나에 대해 타입, 허용 값, 범위/길이/패턴 순으로 검사한다.
    errors: List[str] = []
    if spec.get("type"):
        errors.extend(_type_errors(key, value, spec["type"]))
    if "enum" in spec and value not in spec["enum"]:
        errors.append(f"Config '{key}' must be one of {spec['enum']}")
    errors.extend(_range_errors(key, value, spec))
    return errors


def apply_config_schema(schema: Optional[Dict[str, Any]], config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if not schema:
        return dict(config or {})
    if config is None:
        config = {}
    if not isinstance(config, dict):
        raise AdminConfigError("Config data must be an object")

    props: Dict[str, Dict[str, Any]] = schema.get("properties", {})
    result = dict(config)

    # 빠진 필드에 기본값을 먼저 채운 뒤 필수 필드를 확인한다.
    for key, spec in props.items():
        if key not in result and spec.get("default") is not None:
            result[key] = spec["default"]
    errors = [f"Missing required config: {key}" for key in schema.get("required", []) if key not in result]

    for key, value in result.items():
        if key in props:
            errors.extend(field_errors(key, value, props[key]))

    if errors:
        raise AdminConfigError("; ".join(errors))
    return result

"""이 파일은 .py 테스트 모듈로 규칙 테이블 로딩과 조회/샘플링을 검증합니다."""

import random

from app.core.errors import RuleTableError
from app.core.rules import RuleTable


def test_default_rules_are_usable() -> None:
    table = RuleTable.from_default()
    assert len(table) == 15
    for rule in table:
        assert rule.is_usable
        assert rule.severity in ("critical", "serious", "moderate", "minor")
        assert rule.wcag_level in ("A", "AA", "AAA")


def test_query_by_category_and_severity() -> None:
    table = RuleTable.from_default()
    critical = table.by_severity("critical")
    assert {rule.id for rule in critical} == {"color-contrast", "keyboard-trap"}
    assert all(rule.category == "navigation" for rule in table.by_category("navigation"))
    assert table.get("color-contrast").wcag_criterion == "1.4.3"
    assert table.get("unknown") is None


def test_sample_returns_distinct_prefix() -> None:
    table = RuleTable.from_default()
    sample = table.sample(4, random.Random(3))
    assert len(sample) == 4
    assert len({rule.id for rule in sample}) == 4


def test_sample_larger_than_table_returns_everything() -> None:
    table = RuleTable.from_default()
    sample = table.sample(100, random.Random(3))
    assert sorted(rule.id for rule in sample) == sorted(rule.id for rule in table)


def test_missing_field_raises(tmp_path) -> None:
    path = tmp_path / "rules.yml"
    path.write_text("rules:\n  - id: broken\n    title: Broken\n", encoding="utf-8")
    try:
        RuleTable.from_file(path)
    except RuleTableError as exc:
        assert "rule" in str(exc)
    else:
        raise AssertionError("RuleTableError not raised")

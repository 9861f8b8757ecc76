"""이 파일은 .py 테스트 모듈로 점수 계산과 WCAG 준수율을 검증합니다."""

import random

from app.core.types import Issue
from app.services.scoring import SCORE_FLOOR, calculate_score, count_by_severity, score_rating, wcag_compliance


def _issue(severity: str, level: str = "A", index: int = 0) -> Issue:
    return Issue(
        id=f"0-rule-{index}",
        severity=severity,
        rule="rule",
        title="Rule",
        description="desc",
        element="div",
        page="https://example.com",
        fix="fix",
        wcag_level=level,
    )


def test_no_issues_scores_near_ceiling() -> None:
    for seed in range(100):
        score = calculate_score([], random.Random(seed))
        assert isinstance(score, int)
        assert 95 <= score <= 100


def test_heavy_deductions_stop_at_floor() -> None:
    issues = [_issue("critical", index=i) for i in range(20)]
    for seed in range(100):
        score = calculate_score(issues, random.Random(seed))
        assert SCORE_FLOOR - 5 <= score <= SCORE_FLOOR + 5
        assert score >= 0


def test_score_always_in_range() -> None:
    rng = random.Random(5)
    for _ in range(200):
        issues = [_issue(rng.choice(["critical", "serious", "moderate", "minor"]), index=i) for i in range(rng.randint(0, 30))]
        score = calculate_score(issues, rng)
        assert 0 <= score <= 100


def test_count_by_severity_covers_all_levels() -> None:
    counts = count_by_severity([_issue("serious"), _issue("serious", index=1), _issue("minor", index=2)])
    assert counts == {"critical": 0, "serious": 2, "moderate": 0, "minor": 1}


def test_wcag_compliance_per_level() -> None:
    issues = [_issue("minor", "A", i) for i in range(3)] + [_issue("minor", "AA", 10)]
    compliance = wcag_compliance(issues)
    assert compliance == {"A": 90, "AA": 95, "AAA": 100}


def test_score_rating_text() -> None:
    assert score_rating(95) == "Excellent accessibility"
    assert score_rating(70) == "Good accessibility with room for improvement"
    assert score_rating(55) == "Fair accessibility, needs attention"
    assert score_rating(10) == "Poor accessibility, immediate action required"

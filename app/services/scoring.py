"""이 파일은 .py 점수 계산 모듈로 심각도 가중치 기반 점수와 WCAG 준수율을 계산합니다."""

from __future__ import annotations

import random
from typing import Dict, Iterable, List, Optional

from app.core.types import SEVERITIES, WCAG_LEVELS, Issue

SEVERITY_WEIGHTS: Dict[str, int] = {
    "critical": 15,
    "serious": 8,
    "moderate": 4,
    "minor": 2,
}
SCORE_FLOOR = 20
SCORE_JITTER = 5

# 레벨별로 가정하는 WCAG 2.1 성공 기준 수
WCAG_CRITERIA_TOTALS: Dict[str, int] = {"A": 30, "AA": 20, "AAA": 28}


def calculate_score(issues: Iterable[Issue], rng: Optional[random.Random] = None) -> int:
    # 100에서 가중치 합을 빼고 하한을 적용한 뒤 ±SCORE_JITTER 만큼 흔든다.
    rng = rng or random.Random()
    deductions = sum(SEVERITY_WEIGHTS.get(issue.severity, 0) for issue in issues)
    base = max(SCORE_FLOOR, 100 - deductions)
    jitter = rng.randint(-SCORE_JITTER, SCORE_JITTER)
    return int(round(max(0, min(100, base + jitter))))


def count_by_severity(issues: Iterable[Issue]) -> Dict[str, int]:
    counts = {severity: 0 for severity in SEVERITIES}
    for issue in issues:
        if issue.severity in counts:
            counts[issue.severity] += 1
    return counts


def wcag_compliance(issues: List[Issue]) -> Dict[str, int]:
    # 레벨별 이슈 수를 가정한 기준 수에 대비해 백분율로 환산한다.
    compliance: Dict[str, int] = {}
    for level in WCAG_LEVELS:
        total = WCAG_CRITERIA_TOTALS[level]
        failing = sum(1 for issue in issues if issue.wcag_level == level)
        compliance[level] = max(0, int(round(100 * (total - failing) / total)))
    return compliance


def score_rating(score: int) -> str:
    if score >= 90:
        return "Excellent accessibility"
    if score >= 70:
        return "Good accessibility with room for improvement"
    if score >= 50:
        return "Fair accessibility, needs attention"
    return "Poor accessibility, immediate action required"

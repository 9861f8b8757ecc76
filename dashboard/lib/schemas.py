"""대시보드 표시를 위한 간단한 결과 보조 모듈."""

from __future__ import annotations

from typing import Any, Dict, List

SEVERITY_ORDER = ["critical", "serious", "moderate", "minor"]
SEVERITY_LABELS = {
    "critical": "치명적",
    "serious": "심각",
    "moderate": "보통",
    "minor": "경미",
}
ACTIVE_STATUSES = {"PENDING", "RUNNING"}


def group_issues(result: Dict[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    # ScanResult 문서의 이슈를 심각도별로 묶는다.
    groups: Dict[str, List[Dict[str, Any]]] = {severity: [] for severity in SEVERITY_ORDER}
    for issue in result.get("issues") or []:
        groups.setdefault(issue.get("severity", "minor"), []).append(issue)
    return groups


def score_label(score: int) -> str:
    if score >= 90:
        return "우수"
    if score >= 70:
        return "양호"
    if score >= 50:
        return "보통"
    return "미흡"


def is_active(status: Dict[str, Any]) -> bool:
    return status.get("status") in ACTIVE_STATUSES

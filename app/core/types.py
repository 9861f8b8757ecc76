"""이 파일은 .py 타입 정의 모듈로 규칙, 이슈, 스캔 결과 모델을 제공합니다."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

SEVERITIES = ("critical", "serious", "moderate", "minor")
WCAG_LEVELS = ("A", "AA", "AAA")


class PlanTier(str, Enum):
    # 요금제 등급이다. 비로그인 사용자는 GUEST로 취급한다.
    GUEST = "guest"
    FREE = "free"
    PRO = "pro"
    AGENCY = "agency"


@dataclass(frozen=True)
class RuleDescriptor:
    # 규칙 테이블의 한 항목으로 프로세스 시작 시 고정된다.
    id: str
    rule: str
    title: str
    description: str
    severity: str
    wcag_level: str
    wcag_criterion: str
    category: str
    # 후보 수정 문구와 후보 요소 문자열은 생성기가 무작위로 고른다.
    fixes: Tuple[str, ...]
    elements: Tuple[str, ...]
    impact: str = ""
    help_url: str = ""
    test_method: str = "automated"

    @property
    def is_usable(self) -> bool:
        # 두 후보 목록이 모두 비어 있지 않아야 이슈를 만들 수 있다.
        return bool(self.fixes) and bool(self.elements)


@dataclass
class Issue:
    # 스캔 1회 안에서만 존재하는 가상의 접근성 이슈이다.
    id: str
    severity: str
    rule: str
    title: str
    description: str
    element: str
    page: str
    fix: str
    wcag_level: str
    wcag_criterion: str = ""
    category: str = ""
    impact: str = ""
    help_url: str = ""

    def to_dict(self) -> Dict:
        # 보고서/대시보드가 기대하는 camelCase 키로 직렬화한다.
        return {
            "id": self.id,
            "severity": self.severity,
            "rule": self.rule,
            "title": self.title,
            "description": self.description,
            "element": self.element,
            "page": self.page,
            "fix": self.fix,
            "wcagLevel": self.wcag_level,
            "wcagCriterion": self.wcag_criterion,
            "category": self.category,
            "impact": self.impact,
            "helpUrl": self.help_url,
        }


@dataclass
class ScanOptions:
    max_pages: int
    plan_tier: PlanTier = PlanTier.GUEST


@dataclass(frozen=True)
class ScanProgress:
    percent: int
    status: str


@dataclass
class ScanResult:
    # 오케스트레이터 1회 실행의 집계 결과이다.
    url: str
    score: int
    total_issues: int
    critical: int
    serious: int
    moderate: int
    minor: int
    pages_scanned: int
    issues: List[Issue]
    timestamp: str
    wcag_compliance: Dict[str, int] = field(default_factory=dict)
    scan_id: Optional[str] = None

    @property
    def average_issues_per_page(self) -> float:
        if not self.pages_scanned:
            return 0.0
        return round(self.total_issues / self.pages_scanned, 1)

    def severity_counts(self) -> Dict[str, int]:
        return {
            "critical": self.critical,
            "serious": self.serious,
            "moderate": self.moderate,
            "minor": self.minor,
        }

    def to_dict(self) -> Dict:
        payload = {
            "url": self.url,
            "score": self.score,
            "totalIssues": self.total_issues,
            "critical": self.critical,
            "serious": self.serious,
            "moderate": self.moderate,
            "minor": self.minor,
            "pagesScanned": self.pages_scanned,
            "issues": [issue.to_dict() for issue in self.issues],
            "timestamp": self.timestamp,
            "wcagCompliance": dict(self.wcag_compliance),
        }
        if self.scan_id is not None:
            payload["scanId"] = self.scan_id
        return payload

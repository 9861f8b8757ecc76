"""이 파일은 .py 코어 패키지 초기화 모듈로 주요 심볼을 재노출합니다."""

from .config import DEFAULT_RULES_FILE, DEFAULT_SEED_FILE
from .logging import setup_logging
from .rules import RuleTable
from .types import Issue, PlanTier, RuleDescriptor, ScanOptions, ScanProgress, ScanResult

__all__ = [
    "DEFAULT_RULES_FILE",
    "DEFAULT_SEED_FILE",
    "Issue",
    "PlanTier",
    "RuleDescriptor",
    "RuleTable",
    "ScanOptions",
    "ScanProgress",
    "ScanResult",
    "setup_logging",
]

"""이 파일은 .py 규칙 테이블 모듈로 접근성 규칙 로딩과 조회/샘플링을 담당합니다."""

import random
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import yaml

from .config import DEFAULT_RULES_FILE
from .errors import RuleTableError
from .types import SEVERITIES, WCAG_LEVELS, RuleDescriptor

REQUIRED_FIELDS = ("id", "rule", "title", "description", "severity", "wcag_level")


def _as_tuple(value) -> Tuple[str, ...]:
    # None/단일 문자열도 튜플로 맞춘다.
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


class RuleTable:
    def __init__(self, rules: List[RuleDescriptor]):
        # 생성 이후에는 변경하지 않는 규칙 목록이다.
        self._rules: Tuple[RuleDescriptor, ...] = tuple(rules)
        self._by_id: Dict[str, RuleDescriptor] = {rule.id: rule for rule in self._rules}

    @classmethod
    def from_file(cls, path: Path) -> "RuleTable":
        # YAML 파일을 읽어 RuleDescriptor 목록을 구성한다.
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        rules: List[RuleDescriptor] = []

        for index, item in enumerate(data.get("rules", [])):
            for field in REQUIRED_FIELDS:
                if field not in item:
                    raise RuleTableError(f"Missing required field {field} in rule #{index} of {path}")
            severity = str(item["severity"]).strip().lower()
            if severity not in SEVERITIES:
                raise RuleTableError(f"Unknown severity {severity!r} in rule {item['id']}")
            level = str(item["wcag_level"]).strip().upper()
            if level not in WCAG_LEVELS:
                raise RuleTableError(f"Unknown WCAG level {level!r} in rule {item['id']}")

            rules.append(
                RuleDescriptor(
                    id=str(item["id"]),
                    rule=str(item["rule"]),
                    title=str(item["title"]),
                    description=str(item["description"]),
                    severity=severity,
                    wcag_level=level,
                    wcag_criterion=str(item.get("wcag_criterion", "")),
                    category=str(item.get("category", "")),
                    fixes=_as_tuple(item.get("fixes")),
                    elements=_as_tuple(item.get("elements")),
                    impact=str(item.get("impact", "")),
                    help_url=str(item.get("help_url", "")),
                    test_method=str(item.get("test_method", "automated")),
                )
            )

        return cls(rules)

    @classmethod
    def from_default(cls) -> "RuleTable":
        # 기본 규칙 파일이 있으면 로드하고 없으면 빈 테이블을 사용한다.
        if DEFAULT_RULES_FILE.exists():
            return cls.from_file(DEFAULT_RULES_FILE)
        return cls([])

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[RuleDescriptor]:
        return iter(self._rules)

    def all(self) -> List[RuleDescriptor]:
        return list(self._rules)

    def get(self, rule_id: str) -> Optional[RuleDescriptor]:
        return self._by_id.get(rule_id)

    def by_category(self, category: str) -> List[RuleDescriptor]:
        return [rule for rule in self._rules if rule.category == category]

    def by_severity(self, severity: str) -> List[RuleDescriptor]:
        normalized = severity.strip().lower()
        return [rule for rule in self._rules if rule.severity == normalized]

    def sample(self, count: int, rng: Optional[random.Random] = None) -> List[RuleDescriptor]:
        # 전체를 균등하게 섞은 뒤 앞에서 count개를 자른다.
        # 요청 수가 테이블보다 크면 섞인 전체를 그대로 돌려준다.
        rng = rng or random.Random()
        shuffled = list(self._rules)
        rng.shuffle(shuffled)
        return shuffled[: max(0, count)]

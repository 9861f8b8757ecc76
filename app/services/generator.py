"""이 파일은 .py 이슈 생성 모듈로 규칙 테이블에서 가상 이슈를 무작위로 만듭니다."""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Set

from app.core.rules import RuleTable
from app.core.types import Issue, PlanTier, RuleDescriptor

# 같은 페이지에서 규칙 중복을 피하려고 다시 뽑는 최대 횟수이다.
MAX_RULE_ATTEMPTS = 10

# 요금제별 페이지당 최대 이슈 수
ISSUE_CAPS: Dict[PlanTier, int] = {
    PlanTier.GUEST: 3,
    PlanTier.FREE: 4,
    PlanTier.PRO: 6,
    PlanTier.AGENCY: 6,
}


def issue_cap_for(tier: PlanTier) -> int:
    return ISSUE_CAPS.get(tier, ISSUE_CAPS[PlanTier.GUEST])


class IssueGenerator:
    def __init__(self, rules: RuleTable, rng: Optional[random.Random] = None) -> None:
        self.rules = rules
        self.rng = rng or random.Random()

    def generate(self, page_url: str, page_index: int, cap: int) -> List[Issue]:
        # 1) 목표 이슈 수를 [1, cap]에서 균등하게 고른다.
        if cap < 1:
            return []
        count = self.rng.randint(1, cap)

        # 2) 중복 제거 여지를 두기 위해 약 2배수 후보를 뽑는다.
        pool = [rule for rule in self.rules.sample(count * 2, self.rng) if rule.is_usable]
        if not pool:
            return []

        issues: List[Issue] = []
        used: Set[str] = set()
        for slot in range(count):
            # 3) 이미 쓴 규칙이면 다시 뽑고, 한도를 넘기면 중복을 그대로 받아들인다.
            rule = self.rng.choice(pool)
            attempts = 1
            while rule.id in used and attempts < MAX_RULE_ATTEMPTS:
                rule = self.rng.choice(pool)
                attempts += 1
            used.add(rule.id)

            # 4) 요소/수정 문구는 규칙의 후보 목록에서 고른다.
            issues.append(self._build_issue(rule, page_url, page_index, slot))

        return issues

    def _build_issue(self, rule: RuleDescriptor, page_url: str, page_index: int, slot: int) -> Issue:
        # 5) 식별자는 페이지 인덱스-규칙 ID-슬롯 번호로 만든다.
        return Issue(
            id=f"{page_index}-{rule.id}-{slot}",
            severity=rule.severity,
            rule=rule.rule,
            title=rule.title,
            description=rule.description,
            element=self.rng.choice(rule.elements),
            page=page_url,
            fix=self.rng.choice(rule.fixes),
            wcag_level=rule.wcag_level,
            wcag_criterion=rule.wcag_criterion,
            category=rule.category,
            impact=rule.impact,
            help_url=rule.help_url,
        )

"""이 파일은 .py 인증 세션 모듈로 로그인한 사용자의 세션 정보를 담습니다."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from app.core.types import PlanTier

from .base import AuthBackend, plan_tier_of


@dataclass
class AuthSession:
    token: Optional[str]
    profile: Dict[str, Any] = field(default_factory=dict)
    backend: str = "remote"
    is_admin: bool = False
    is_demo: bool = False
    plan_tier: PlanTier = PlanTier.GUEST

    @property
    def profile_id(self) -> Optional[str]:
        return self.profile.get("id")

    @classmethod
    def from_profile(cls, token: Optional[str], profile: Dict[str, Any], backend: AuthBackend) -> "AuthSession":
        tier_name = plan_tier_of(profile.get("plan"))
        try:
            tier = PlanTier(tier_name)
        except ValueError:
            tier = PlanTier.FREE
        return cls(
            token=token,
            profile=profile,
            backend=backend.name,
            is_admin=profile.get("role") == "admin",
            is_demo=backend.is_demo,
            plan_tier=tier,
        )

"""이 파일은 .py 계정 백엔드 베이스 모듈로 인증/계정 저장소 인터페이스를 제공합니다."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from app.core.config_validation import apply_config_schema, load_config_schemas

# 본인이 직접 수정할 수 있는 프로필 필드
PROFILE_FIELDS = ("full_name", "avatar_url")
# 관리자가 수정할 수 있는 사용자 필드
USER_ADMIN_FIELDS = ("full_name", "email", "plan", "plan_status", "role")
PLAN_FIELDS = ("name", "price", "scans_per_month", "pages_per_scan", "features", "stripe_price_id", "is_active")
CONTENT_FIELDS = ("title", "content", "is_active")

PLAN_STATUSES = ("active", "suspended", "cancelled")
ROLES = ("user", "admin")


def pick_fields(updates: Dict[str, Any], allowed) -> Dict[str, Any]:
    # 허용된 키만 남기고 None 값은 제외한다.
    return {key: value for key, value in updates.items() if key in allowed and value is not None}


def plan_tier_of(plan_name: Optional[str]) -> str:
    return (plan_name or "free").strip().lower()


class AuthBackend(ABC):
    name: str = ""

    def __init__(self) -> None:
        self._config_schemas = load_config_schemas()

    # ── 인증/프로필 ─────────────────────────────
    @abstractmethod
    def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def get_profile(self, profile_id: str) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def update_profile(self, profile_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def record_scan(self, profile_id: str) -> Dict[str, Any]:
        raise NotImplementedError

    # ── 관리자 데이터 ───────────────────────────
    @abstractmethod
    def list_users(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def update_user(self, user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def toggle_user_status(self, user_id: str) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def list_plans(self, active_only: bool = False) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def update_plan(self, plan_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def list_configs(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def save_config(self, config_id: str, config_data: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def list_content(self, page: Optional[str] = None) -> List[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def update_content(self, content_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        raise NotImplementedError

    # ── 공통 보조 ───────────────────────────────
    @property
    def is_demo(self) -> bool:
        return False

    def get_plan_for_tier(self, tier: str) -> Optional[Dict[str, Any]]:
        # 요금제 이름(소문자)이 등급 이름과 같은 항목을 찾는다.
        for plan in self.list_plans():
            if plan_tier_of(plan.get("name")) == tier:
                return plan
        return None

    def validate_config(self, category: str, config_data: Dict[str, Any]) -> Dict[str, Any]:
        return apply_config_schema(self._config_schemas.get(category), config_data)

    @staticmethod
    def summarize_users(users: List[Dict[str, Any]]) -> Dict[str, Any]:
        # 사용자 목록에서 가입/매출/전환율 지표를 계산한다.
        total_users = len(users)
        active_users = sum(1 for user in users if user.get("plan_status") == "active")
        total_revenue = sum(float(user.get("total_spent") or 0) for user in users)
        total_scans = sum(int(user.get("scans_used") or 0) for user in users)
        paid_users = sum(1 for user in users if plan_tier_of(user.get("plan")) != "free")
        conversion = (paid_users / total_users * 100) if total_users else 0.0
        return {
            "totalUsers": total_users,
            "activeUsers": active_users,
            "totalRevenue": round(total_revenue, 2),
            "totalScans": total_scans,
            "conversionRate": round(conversion, 1),
        }

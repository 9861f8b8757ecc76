"""이 파일은 .py 데모 계정 백엔드 모듈로 하드코딩된 데모 계정을 메모리에서 처리합니다.

데모 모드에서의 수정은 프로세스 메모리에만 반영되고 DB에는 저장되지 않습니다.
"""

from __future__ import annotations

import copy
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from app.core.errors import AuthError, NotFoundError
from app.db.seed import load_seed_data

from .base import (
    CONTENT_FIELDS,
    PLAN_FIELDS,
    PROFILE_FIELDS,
    USER_ADMIN_FIELDS,
    AuthBackend,
    pick_fields,
)

logger = logging.getLogger(__name__)

DEMO_AVG_SCORE = 82


def _now_iso() -> str:
    return datetime.utcnow().isoformat()


def _build_profile(item: Dict[str, Any], now: datetime) -> Dict[str, Any]:
    # seed의 상대 시간을 실제 시각으로 바꾸고 비밀번호는 제외한다.
    return {
        "id": item["id"],
        "email": item["email"],
        "full_name": item.get("full_name"),
        "avatar_url": item.get("avatar_url"),
        "role": item.get("role", "user"),
        "plan": item.get("plan", "free"),
        "plan_status": item.get("plan_status", "active"),
        "subscription_id": item.get("subscription_id"),
        "customer_id": item.get("customer_id"),
        "scans_used": int(item.get("scans_used", 0)),
        "total_spent": float(item.get("total_spent", 0.0)),
        "created_at": (now - timedelta(days=item.get("created_days_ago", 0))).isoformat(),
        "updated_at": now.isoformat(),
        "last_login": (now - timedelta(hours=item.get("last_login_hours_ago", 0))).isoformat(),
    }


class DemoStore:
    def __init__(self, seed: Optional[Dict[str, Any]] = None) -> None:
        seed = seed if seed is not None else load_seed_data()
        now = datetime.utcnow()
        self.credentials: Dict[str, str] = {}
        self.profiles: Dict[str, Dict[str, Any]] = {}

        for item in seed.get("demo_accounts", []):
            self.credentials[item["email"]] = str(item["password"])
            self.profiles[item["id"]] = _build_profile(item, now)
        for item in seed.get("mock_users", []):
            self.profiles[item["id"]] = _build_profile(item, now)

        self.plans: Dict[str, Dict[str, Any]] = {
            item["id"]: copy.deepcopy(item) for item in seed.get("plans", [])
        }
        self.configs: Dict[str, Dict[str, Any]] = {
            item["id"]: copy.deepcopy(item) for item in seed.get("admin_configs", [])
        }
        self.content: Dict[str, Dict[str, Any]] = {
            item["id"]: copy.deepcopy(item) for item in seed.get("website_content", [])
        }

    @property
    def emails(self) -> List[str]:
        return list(self.credentials)


class DemoBackend(AuthBackend):
    name = "demo"

    def __init__(self, store: Optional[DemoStore] = None) -> None:
        super().__init__()
        self.store = store or DemoStore()

    @property
    def is_demo(self) -> bool:
        return True

    def handles(self, email: str) -> bool:
        return email.strip().lower() in self.store.credentials

    def _profile(self, profile_id: str) -> Dict[str, Any]:
        profile = self.store.profiles.get(profile_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    def authenticate(self, email: str, password: str) -> Dict[str, Any]:
        normalized = email.strip().lower()
        expected = self.store.credentials.get(normalized)
        if expected is None or expected != password:
            raise AuthError("Invalid email or password")
        for profile in self.store.profiles.values():
            if profile["email"] == normalized:
                logger.info("Demo session started for %s", normalized)
                return dict(profile)
        raise NotFoundError("Profile not found")

    def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> Dict[str, Any]:
        raise AuthError("Demo accounts cannot be registered")

    def get_profile(self, profile_id: str) -> Dict[str, Any]:
        return dict(self._profile(profile_id))

    def update_profile(self, profile_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._apply(self._profile(profile_id), pick_fields(updates, PROFILE_FIELDS))

    def record_scan(self, profile_id: str) -> Dict[str, Any]:
        profile = self._profile(profile_id)
        return self._apply(profile, {"scans_used": profile["scans_used"] + 1})

    def list_users(self) -> List[Dict[str, Any]]:
        users = [dict(profile) for profile in self.store.profiles.values()]
        return sorted(users, key=lambda item: item["created_at"], reverse=True)

    def update_user(self, user_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._apply(self._profile(user_id), pick_fields(updates, USER_ADMIN_FIELDS))

    def toggle_user_status(self, user_id: str) -> Dict[str, Any]:
        profile = self._profile(user_id)
        status = "active" if profile["plan_status"] == "suspended" else "suspended"
        return self._apply(profile, {"plan_status": status})

    def list_plans(self, active_only: bool = False) -> List[Dict[str, Any]]:
        plans = [copy.deepcopy(plan) for plan in self.store.plans.values()]
        if active_only:
            plans = [plan for plan in plans if plan.get("is_active")]
        return sorted(plans, key=lambda item: item.get("price") or 0)

    def update_plan(self, plan_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        plan = self.store.plans.get(plan_id)
        if plan is None:
            raise NotFoundError("Plan not found")
        plan.update(pick_fields(updates, PLAN_FIELDS))
        return copy.deepcopy(plan)

    def list_configs(self) -> List[Dict[str, Any]]:
        return [copy.deepcopy(config) for config in self.store.configs.values()]

    def save_config(self, config_id: str, config_data: Dict[str, Any]) -> Dict[str, Any]:
        config = self.store.configs.get(config_id)
        if config is None:
            raise NotFoundError("Config not found")
        config["config_data"] = self.validate_config(config["category"], config_data)
        return copy.deepcopy(config)

    def list_content(self, page: Optional[str] = None) -> List[Dict[str, Any]]:
        items = [copy.deepcopy(item) for item in self.store.content.values()]
        if page:
            items = [item for item in items if item.get("page") == page]
        return sorted(items, key=lambda item: item.get("page") or "")

    def update_content(self, content_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        item = self.store.content.get(content_id)
        if item is None:
            raise NotFoundError("Content not found")
        item.update(pick_fields(updates, CONTENT_FIELDS))
        return copy.deepcopy(item)

    def get_stats(self) -> Dict[str, Any]:
        stats = self.summarize_users(self.list_users())
        stats["monthlyRevenue"] = round(stats["totalRevenue"] * 0.6, 2)
        stats["avgScore"] = DEMO_AVG_SCORE
        stats["churnRate"] = 3.2
        return stats

    def _apply(self, profile: Dict[str, Any], fields: Dict[str, Any]) -> Dict[str, Any]:
        profile.update(fields)
        profile["updated_at"] = _now_iso()
        return dict(profile)

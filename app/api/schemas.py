"""이 파일은 .py API 스키마 모듈로 요청/응답 모델을 정의합니다."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.adapters.base import PLAN_STATUSES, ROLES


class LoginRequest(BaseModel):
    email: str
    password: str


class SignUpRequest(BaseModel):
    email: str
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        # 형식만 간단히 확인하고 소문자로 정규화한다.
        value = value.strip().lower()
        if "@" not in value or value.startswith("@") or value.endswith("@"):
            raise ValueError("A valid email address is required")
        return value


class ProfileResponse(BaseModel):
    id: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str = "user"
    plan: str = "free"
    plan_status: str = "active"
    scans_used: int = 0
    total_spent: float = 0.0
    created_at: Optional[str] = None
    last_login: Optional[str] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None


class SessionResponse(BaseModel):
    # 로그인/가입 응답이며 이후 요청은 access_token을 Bearer로 보낸다.
    access_token: str
    token_type: str = "bearer"
    backend: str
    is_admin: bool
    is_demo: bool
    plan_tier: str
    profile: ProfileResponse


class MeResponse(BaseModel):
    backend: str
    is_admin: bool
    is_demo: bool
    plan_tier: str
    profile: ProfileResponse


class PlanResponse(BaseModel):
    id: str
    name: str
    price: float
    scans_per_month: int
    pages_per_scan: int
    features: List[str] = Field(default_factory=list)
    stripe_price_id: Optional[str] = None
    is_active: bool = True


class ContentResponse(BaseModel):
    id: str
    page: str
    section: str
    title: Optional[str] = None
    content: Optional[str] = None
    is_active: bool = True


class RuleResponse(BaseModel):
    id: str
    rule: str
    title: str
    description: str
    severity: str
    wcag_level: str
    wcag_criterion: str
    category: str
    impact: str = ""
    help_url: str = ""
    test_method: str = "automated"

    model_config = ConfigDict(from_attributes=True)


class ScanCreate(BaseModel):
    # URL 형식은 서비스에서 검증하며 실패 시 400으로 응답한다.
    url: str
    max_pages: Optional[int] = Field(default=None, ge=1)


class ScanResponse(BaseModel):
    id: int
    url: str
    status: str
    plan_tier: str
    max_pages: int
    progress: int = 0
    status_text: str = ""
    score: Optional[int] = None
    total_issues: Optional[int] = None
    pages_scanned: Optional[int] = None
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ScanDetailResponse(ScanResponse):
    # result는 camelCase 키의 ScanResult 문서이다.
    result: Optional[Dict[str, Any]] = None


class ScanStatusResponse(BaseModel):
    status: str
    progress: int
    status_text: str = ""
    error_message: Optional[str] = None


class ReportCreate(BaseModel):
    format: str = "json"


class ReportResponse(BaseModel):
    id: int
    scan_id: int
    format: str
    file_path: str
    generated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    full_name: Optional[str] = None
    email: Optional[str] = None
    plan: Optional[str] = None
    plan_status: Optional[str] = None
    role: Optional[str] = None

    @field_validator("plan_status")
    @classmethod
    def validate_plan_status(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in PLAN_STATUSES:
            raise ValueError(f"plan_status must be one of {', '.join(PLAN_STATUSES)}")
        return value

    @field_validator("role")
    @classmethod
    def validate_role(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in ROLES:
            raise ValueError(f"role must be one of {', '.join(ROLES)}")
        return value


class PlanUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    scans_per_month: Optional[int] = Field(default=None, ge=-1)
    pages_per_scan: Optional[int] = Field(default=None, ge=-1)
    features: Optional[List[str]] = None
    stripe_price_id: Optional[str] = None
    is_active: Optional[bool] = None


class ConfigUpdate(BaseModel):
    config_data: Dict[str, Any]


class ContentUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    is_active: Optional[bool] = None


class AdminItemsResponse(BaseModel):
    # 데모 계정의 수정은 메모리에만 반영되므로 demo_mode로 알려 준다.
    demo_mode: bool
    items: List[Dict[str, Any]]


class AdminItemResponse(BaseModel):
    demo_mode: bool
    item: Dict[str, Any]


class StatsResponse(BaseModel):
    demo_mode: bool
    stats: Dict[str, Any]

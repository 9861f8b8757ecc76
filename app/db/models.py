"""이 파일은 .py DB 모델 정의 모듈로 Profile/Plan/AdminConfig/WebsiteContent/Scan/Report를 제공합니다."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from .base import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True, default=_uuid)
    email = Column(String, nullable=False, unique=True, index=True)
    full_name = Column(String, nullable=True)
    password_hash = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    role = Column(String, default="user")
    plan = Column(String, default="free")
    plan_status = Column(String, default="active")
    subscription_id = Column(String, nullable=True)
    customer_id = Column(String, nullable=True)
    scans_used = Column(Integer, default=0)
    total_spent = Column(Float, default=0.0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)


class Plan(Base):
    __tablename__ = "plans"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    price = Column(Float, default=0.0)
    scans_per_month = Column(Integer, default=1)
    pages_per_scan = Column(Integer, default=3)
    features = Column(JSON, default=list)
    stripe_price_id = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)
    updated_at = Column(DateTime, default=datetime.utcnow)


class AdminConfig(Base):
    __tablename__ = "admin_configs"

    id = Column(String, primary_key=True)
    category = Column(String, nullable=False)
    config_data = Column(JSON, default=dict)
    is_enabled = Column(Boolean, default=True)
    updated_at = Column(DateTime, default=datetime.utcnow)


class WebsiteContent(Base):
    __tablename__ = "website_content"

    id = Column(String, primary_key=True, default=_uuid)
    page = Column(String, nullable=False, index=True)
    section = Column(String, nullable=False)
    title = Column(String, nullable=True)
    content = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True)
    updated_at = Column(DateTime, default=datetime.utcnow)


class Scan(Base):
    __tablename__ = "scans"

    id = Column(Integer, primary_key=True, index=True)
    # 동시 실행 방지 기준이다. 로그인 계정은 profile id, 게스트는 클라이언트 주소를 쓴다.
    owner_key = Column(String, nullable=False, index=True)
    profile_id = Column(String, nullable=True, index=True)
    backend = Column(String, nullable=True)
    url = Column(String, nullable=False)
    plan_tier = Column(String, default="guest")
    max_pages = Column(Integer, default=5)
    status = Column(String, default="PENDING")
    progress = Column(Integer, default=0)
    status_text = Column(String, default="")
    score = Column(Integer, nullable=True)
    total_issues = Column(Integer, nullable=True)
    pages_scanned = Column(Integer, nullable=True)
    result = Column(JSON, nullable=True)
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    completed_at = Column(DateTime, nullable=True)

    reports = relationship("Report", back_populates="scan")


class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True)
    scan_id = Column(Integer, ForeignKey("scans.id"))
    format = Column(String)
    file_path = Column(String)
    generated_at = Column(DateTime, default=datetime.utcnow)

    scan = relationship("Scan", back_populates="reports")

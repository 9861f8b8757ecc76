"""이 파일은 .py DB 세션 모듈로 엔진/세션 생성과 초기화를 담당합니다."""

from __future__ import annotations

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import DATABASE_URL
from app.core.storage import ensure_storage_dir
from .base import Base

_engine_kwargs = {}
if DATABASE_URL.startswith("sqlite"):
    _engine_kwargs["connect_args"] = {"check_same_thread": False}
    if DATABASE_URL in ("sqlite://", "sqlite:///:memory:"):
        # 메모리 DB는 모든 세션이 같은 연결을 공유해야 한다.
        _engine_kwargs["poolclass"] = StaticPool
    else:
        ensure_storage_dir()

engine = create_engine(DATABASE_URL, **_engine_kwargs)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)


def get_session() -> Generator[Session, None, None]:
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

"""이 파일은 .py 시드 모듈로 seed.yml 로딩과 기본 요금제/문구 적재를 담당합니다."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml
from sqlalchemy.orm import Session

from app.core.config import DEFAULT_SEED_FILE

from . import models

logger = logging.getLogger(__name__)


def load_seed_data(path: Optional[Path] = None) -> Dict[str, Any]:
    seed_path = Path(path or DEFAULT_SEED_FILE)
    if not seed_path.exists():
        return {}
    return yaml.safe_load(seed_path.read_text(encoding="utf-8")) or {}


def seed_defaults(session_factory: Callable[[], Session], path: Optional[Path] = None) -> None:
    # 테이블이 비어 있을 때만 기본 요금제, 관리자 설정, 마케팅 문구를 넣는다.
    data = load_seed_data(path)
    session = session_factory()
    try:
        if session.query(models.Plan).count() == 0:
            for item in data.get("plans", []):
                session.add(models.Plan(**item))
            logger.info("Seeded %d plans", len(data.get("plans", [])))
        if session.query(models.AdminConfig).count() == 0:
            for item in data.get("admin_configs", []):
                session.add(models.AdminConfig(**item))
        if session.query(models.WebsiteContent).count() == 0:
            for item in data.get("website_content", []):
                session.add(models.WebsiteContent(**item))
        session.commit()
    finally:
        session.close()

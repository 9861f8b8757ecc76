"""이 파일은 .py 저장 경로 모듈로 보고서 디렉터리를 관리합니다."""

from __future__ import annotations

from pathlib import Path

from .config import REPORTS_DIR, STORAGE_DIR


def ensure_storage_dir() -> Path:
    STORAGE_DIR.mkdir(parents=True, exist_ok=True)
    return STORAGE_DIR


def ensure_reports_dir(scan_id: int) -> Path:
    # 스캔별 보고서 저장 경로를 생성하고 반환한다.
    path = REPORTS_DIR / str(scan_id)
    path.mkdir(parents=True, exist_ok=True)
    return path

"""이 파일은 .py 설정 모듈로 경로와 기본 위치, 스캔 파라미터를 정의합니다."""

import os
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[2]
APP_DIR = REPO_ROOT / "app"
DATA_DIR = APP_DIR / "data"
DEFAULT_RULES_FILE = DATA_DIR / "rules" / "wcag_rules.yml"
DEFAULT_SEED_FILE = DATA_DIR / "demo" / "seed.yml"
ADMIN_CONFIG_SCHEMA_FILE = DATA_DIR / "admin_config_schemas.yml"
STORAGE_DIR = Path(os.getenv("STORAGE_DIR", str(REPO_ROOT / "storage")))
REPORTS_DIR = STORAGE_DIR / "reports"
DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"sqlite:///{(STORAGE_DIR / 'access_scan.db').as_posix()}",
)
API_PREFIX = "/api/v1"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# 세션 토큰(JWT) 설정
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "access-scan-dev-secret-change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# 인위적 지연 배율이다. 0이면 지연 없이 즉시 진행한다.
SCAN_DELAY_SCALE = float(os.getenv("SCAN_DELAY_SCALE", "1.0"))
DEFAULT_MAX_PAGES = 5

"""이 파일은 .py 테스트 설정 모듈로 경로와 테스트용 환경 변수를 초기화합니다."""

import os
import sys
import tempfile
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

# app 모듈을 import 하기 전에 메모리 DB와 임시 저장소, 지연 없음으로 고정한다.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="access-scan-tests-"))
os.environ.setdefault("SCAN_DELAY_SCALE", "0")

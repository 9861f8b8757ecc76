"""이 파일은 .py 엔트리포인트로 API 서버 기본 실행을 제공합니다."""

import os

import uvicorn

from app.core.logging import setup_logging


def main() -> None:
    setup_logging()
    uvicorn.run(
        "app.api.app:app",
        host=os.getenv("API_HOST", "127.0.0.1"),
        port=int(os.getenv("API_PORT", "8000")),
    )


if __name__ == "__main__":
    main()

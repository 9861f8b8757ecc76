"""이 파일은 .py 계정 백엔드 패키지 초기화 모듈로 공통 백엔드를 노출합니다."""

from .base import AuthBackend
from .demo import DemoBackend, DemoStore
from .registry import BackendRegistry, build_default_registry
from .remote import RemoteBackend
from .session import AuthSession

__all__ = [
    "AuthBackend",
    "AuthSession",
    "BackendRegistry",
    "DemoBackend",
    "DemoStore",
    "RemoteBackend",
    "build_default_registry",
]

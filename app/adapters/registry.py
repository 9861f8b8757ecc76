"""이 파일은 .py 계정 백엔드 레지스트리 모듈로 이메일에 맞는 백엔드를 선택합니다."""

import logging
from typing import Callable, Dict, List

from sqlalchemy.orm import Session

from .base import AuthBackend
from .demo import DemoBackend
from .remote import RemoteBackend

logger = logging.getLogger(__name__)


class BackendRegistry:
    def __init__(self, default: str = "remote") -> None:
        self._backends: Dict[str, AuthBackend] = {}
        self.default = default

    def register(self, backend: AuthBackend) -> None:
        if backend.name in self._backends:
            raise KeyError(f"Backend already registered: {backend.name}")
        self._backends[backend.name] = backend

    def get(self, name: str) -> AuthBackend:
        if name not in self._backends:
            raise KeyError(f"Backend not registered: {name}")
        return self._backends[name]

    def names(self) -> List[str]:
        return sorted(self._backends)

    def select(self, email: str) -> AuthBackend:
        # 데모 계정 이메일이면 데모 백엔드, 나머지는 기본 백엔드로 보낸다.
        for backend in self._backends.values():
            handles = getattr(backend, "handles", None)
            if handles is not None and handles(email):
                return backend
        return self.get(self.default)


def build_default_registry(session_factory: Callable[[], Session]) -> BackendRegistry:
    registry = BackendRegistry(default=RemoteBackend.name)
    registry.register(RemoteBackend(session_factory))
    registry.register(DemoBackend())
    logger.info("Auth backends ready: %s", ", ".join(registry.names()))
    return registry

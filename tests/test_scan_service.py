"""이 파일은 .py 테스트 모듈로 요금제 한도, 동시 실행 방지, 스캔 실행 기록을 검증합니다."""

import random

from app.adapters.demo import DemoBackend
from app.adapters.registry import BackendRegistry
from app.adapters.remote import RemoteBackend
from app.adapters.session import AuthSession
from app.core.errors import InvalidUrlError, QuotaExceededError, ScanConflictError
from app.core.rules import RuleTable
from app.core.types import PlanTier
from app.db import models
from app.services.orchestrator import RETRY_MESSAGE
from app.services.scan_service import ScanService

from helpers import make_session_factory


def _service():
    factory = make_session_factory()
    registry = BackendRegistry(default="remote")
    registry.register(RemoteBackend(factory))
    registry.register(DemoBackend())
    service = ScanService(factory, registry, delay_scale=0, rng=random.Random(9))
    return service, factory, registry


def _demo_session(registry: BackendRegistry, email: str, password: str) -> AuthSession:
    backend = registry.get("demo")
    return AuthSession.from_profile(None, backend.authenticate(email, password), backend)


def test_guest_pages_are_limited() -> None:
    service, _, _ = _service()
    options = service.resolve_options(None, 10)
    assert options.plan_tier == PlanTier.GUEST
    assert options.max_pages == 3


def test_paid_plans_use_plan_limits() -> None:
    service, _, registry = _service()
    pro = _demo_session(registry, "user@example.com", "user123")
    assert service.resolve_options(pro, 40).max_pages == 25
    assert service.resolve_options(pro, None).max_pages == 5
    agency = _demo_session(registry, "admin@accessscan.com", "admin123")
    assert service.resolve_options(agency, 40).max_pages == 40


def test_quota_and_suspension_are_enforced() -> None:
    service, _, registry = _service()
    backend = registry.get("remote")
    profile = backend.sign_up("quota@example.com", "secret123")
    session = AuthSession.from_profile(None, profile, backend)
    service.check_quota(session)

    used = backend.record_scan(profile["id"])
    try:
        service.check_quota(AuthSession.from_profile(None, used, backend))
    except QuotaExceededError as exc:
        assert "limit" in str(exc)
    else:
        raise AssertionError("QuotaExceededError not raised")

    demo = registry.get("demo")
    suspended = demo.toggle_user_status("demo-user-id")
    try:
        service.check_quota(AuthSession.from_profile(None, suspended, demo))
    except QuotaExceededError as exc:
        assert "suspended" in str(exc)
    else:
        raise AssertionError("QuotaExceededError not raised")


def test_second_scan_for_same_owner_conflicts() -> None:
    service, factory, _ = _service()
    session = factory()
    try:
        service.create_scan(session, None, "guest:1", "https://example.com")
        try:
            service.create_scan(session, None, "guest:1", "https://example.org")
        except ScanConflictError:
            pass
        else:
            raise AssertionError("ScanConflictError not raised")
        other = service.create_scan(session, None, "guest:2", "https://example.org")
        assert other.status == "PENDING"
    finally:
        session.close()


def test_invalid_url_creates_no_record() -> None:
    service, factory, _ = _service()
    session = factory()
    try:
        try:
            service.create_scan(session, None, "guest:1", "ftp://example.com")
        except InvalidUrlError:
            pass
        else:
            raise AssertionError("InvalidUrlError not raised")
        assert service.list_history(session, None, "guest:1") == []
    finally:
        session.close()


def test_execute_scan_stores_result_and_counts_usage() -> None:
    service, factory, registry = _service()
    auth = _demo_session(registry, "user@example.com", "user123")
    before = auth.profile["scans_used"]

    session = factory()
    try:
        scan = service.create_scan(session, auth, "demo:demo-user-id", "https://example.com", 4)
        scan_id = scan.id
    finally:
        session.close()

    service.execute_scan(scan_id)

    session = factory()
    try:
        stored = service.get_scan(session, scan_id)
        assert stored.status == "COMPLETED"
        assert stored.progress == 100
        assert stored.pages_scanned == 4
        assert stored.result["scanId"] == str(scan_id)
        assert stored.result["totalIssues"] == len(stored.result["issues"])
        assert [item.id for item in service.list_history(session, auth, "ignored")] == [scan_id]
    finally:
        session.close()
    assert registry.get("demo").get_profile("demo-user-id")["scans_used"] == before + 1


class _BrokenRules(RuleTable):
    def sample(self, count, rng=None):
        raise RuntimeError("rule table unavailable")


def test_failed_scan_is_marked_failed() -> None:
    factory = make_session_factory()
    registry = BackendRegistry(default="remote")
    registry.register(RemoteBackend(factory))
    service = ScanService(factory, registry, rules=_BrokenRules([]), delay_scale=0)

    session = factory()
    try:
        scan_id = service.create_scan(session, None, "guest:broken", "https://example.com").id
    finally:
        session.close()

    service.execute_scan(scan_id)

    session = factory()
    try:
        stored = service.get_scan(session, scan_id)
        assert stored.status == "FAILED"
        assert stored.error_message == RETRY_MESSAGE
        assert "unavailable" not in stored.status_text
        assert stored.result is None
    finally:
        session.close()


def test_interrupted_scan_does_not_lock_owner() -> None:
    service, factory, _ = _service()
    session = factory()
    try:
        scan = service.create_scan(session, None, "guest:restart", "https://example.com")
        # 서버가 실행 도중 재시작된 상태를 만든다.
        scan.status = "RUNNING"
        session.commit()

        assert service.recover_stale_scans(session) == 1
        session.refresh(scan)
        assert scan.status == "FAILED"
        assert scan.error_message == RETRY_MESSAGE

        again = service.create_scan(session, None, "guest:restart", "https://example.com")
        assert again.status == "PENDING"
    finally:
        session.close()


def test_unexpected_error_marks_scan_failed() -> None:
    service, factory, _ = _service()
    session = factory()
    try:
        scan_id = service.create_scan(session, None, "guest:bad-tier", "https://example.com").id
        # 알 수 없는 요금제 값은 오케스트레이터 실행 전에 ValueError를 일으킨다.
        session.get(models.Scan, scan_id).plan_tier = "platinum"
        session.commit()
    finally:
        session.close()

    service.execute_scan(scan_id)

    session = factory()
    try:
        stored = service.get_scan(session, scan_id)
        assert stored.status == "FAILED"
        assert stored.error_message == RETRY_MESSAGE
        retry = service.create_scan(session, None, "guest:bad-tier", "https://example.com")
        assert retry.status == "PENDING"
    finally:
        session.close()

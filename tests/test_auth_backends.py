"""이 파일은 .py 테스트 모듈로 원격/데모 계정 백엔드와 레지스트리를 검증합니다."""

from datetime import timedelta

from app.adapters.demo import DemoBackend
from app.adapters.registry import BackendRegistry
from app.adapters.remote import RemoteBackend
from app.adapters.security import create_access_token, decode_access_token
from app.adapters.session import AuthSession
from app.core.errors import AdminConfigError, AuthError, NotFoundError
from app.core.types import PlanTier

from helpers import make_session_factory


def _registry() -> BackendRegistry:
    registry = BackendRegistry(default="remote")
    registry.register(RemoteBackend(make_session_factory()))
    registry.register(DemoBackend())
    return registry


def test_registry_selects_backend_by_email() -> None:
    registry = _registry()
    assert registry.select("admin@accessscan.com").name == "demo"
    assert registry.select(" USER@example.com ").name == "demo"
    assert registry.select("someone@else.com").name == "remote"


def test_registry_rejects_duplicate_names() -> None:
    registry = _registry()
    try:
        registry.register(DemoBackend())
    except KeyError as exc:
        assert "demo" in str(exc)
    else:
        raise AssertionError("KeyError not raised")


def test_demo_login_and_session() -> None:
    backend = DemoBackend()
    profile = backend.authenticate("admin@accessscan.com", "admin123")
    session = AuthSession.from_profile("token", profile, backend)
    assert session.is_admin
    assert session.is_demo
    assert session.plan_tier == PlanTier.AGENCY
    assert "password" not in profile

    try:
        backend.authenticate("admin@accessscan.com", "wrong")
    except AuthError:
        pass
    else:
        raise AssertionError("AuthError not raised")


def test_demo_sign_up_is_rejected() -> None:
    try:
        DemoBackend().sign_up("user@example.com", "secret123")
    except AuthError:
        pass
    else:
        raise AssertionError("AuthError not raised")


def test_demo_edits_stay_in_memory() -> None:
    backend = DemoBackend()
    before = backend.get_profile("demo-user-id")["scans_used"]
    backend.record_scan("demo-user-id")
    assert backend.get_profile("demo-user-id")["scans_used"] == before + 1
    assert backend.toggle_user_status("user-003")["plan_status"] == "suspended"
    assert backend.toggle_user_status("user-003")["plan_status"] == "active"
    assert DemoBackend().get_profile("demo-user-id")["scans_used"] == before


def test_demo_config_is_validated() -> None:
    backend = DemoBackend()
    try:
        backend.save_config("smtp", {"host": "smtp.example.com", "port": 0, "fromEmail": "a@b.c"})
    except AdminConfigError as exc:
        assert "port" in str(exc)
    else:
        raise AssertionError("AdminConfigError not raised")
    saved = backend.save_config("billing", {"provider": "stripe", "currency": "EUR"})
    assert saved["config_data"]["currency"] == "EUR"


def test_demo_stats() -> None:
    stats = DemoBackend().get_stats()
    assert stats["totalUsers"] == 3
    assert stats["totalRevenue"] == 166.0
    assert stats["monthlyRevenue"] == 99.6
    assert stats["avgScore"] == 82
    assert stats["conversionRate"] == 66.7


def test_remote_sign_up_and_login() -> None:
    backend = RemoteBackend(make_session_factory())
    created = backend.sign_up("New@Example.com", "secret123", "New User")
    assert created["email"] == "new@example.com"
    assert created["plan"] == "free"
    assert created["last_login"] is None

    profile = backend.authenticate("new@example.com", "secret123")
    assert profile["last_login"] is not None

    try:
        backend.authenticate("new@example.com", "nope")
    except AuthError:
        pass
    else:
        raise AssertionError("AuthError not raised")

    try:
        backend.sign_up("new@example.com", "secret123")
    except AuthError as exc:
        assert "already" in str(exc)
    else:
        raise AssertionError("AuthError not raised")


def test_remote_profile_updates_are_filtered() -> None:
    backend = RemoteBackend(make_session_factory())
    created = backend.sign_up("filter@example.com", "secret123")
    updated = backend.update_profile(created["id"], {"full_name": "Renamed", "role": "admin"})
    assert updated["full_name"] == "Renamed"
    assert updated["role"] == "user"
    assert backend.record_scan(created["id"])["scans_used"] == 1

    try:
        backend.get_profile("missing")
    except NotFoundError:
        pass
    else:
        raise AssertionError("NotFoundError not raised")


def test_admin_email_edit_keeps_login_working() -> None:
    backend = RemoteBackend(make_session_factory())
    created = backend.sign_up("moved@example.com", "secret123")
    updated = backend.update_user(created["id"], {"email": "  Moved.Again@Example.COM "})
    assert updated["email"] == "moved.again@example.com"
    assert backend.authenticate("Moved.Again@example.com", "secret123")["id"] == created["id"]


def test_remote_plans_are_seeded() -> None:
    backend = RemoteBackend(make_session_factory())
    assert [plan["name"] for plan in backend.list_plans()] == ["Free", "Pro", "Agency"]
    assert backend.get_plan_for_tier("pro")["pages_per_scan"] == 25
    assert backend.get_plan_for_tier("guest") is None


def test_access_token_round_trip() -> None:
    token = create_access_token("profile-1", "remote")
    payload = decode_access_token(token)
    assert payload["sub"] == "profile-1"
    assert payload["backend"] == "remote"

    expired = create_access_token("profile-1", "remote", expires_delta=timedelta(seconds=-5))
    try:
        decode_access_token(expired)
    except AuthError:
        pass
    else:
        raise AssertionError("AuthError not raised")

"""이 파일은 .py FastAPI 앱 모듈로 REST 엔드포인트를 제공합니다."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Request
from fastapi.responses import FileResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.adapters.base import AuthBackend
from app.adapters.registry import BackendRegistry, build_default_registry
from app.adapters.security import create_access_token, decode_access_token
from app.adapters.session import AuthSession
from app.core.config import API_PREFIX
from app.core.errors import (
    AdminConfigError,
    AuthError,
    InvalidUrlError,
    NotFoundError,
    PermissionDeniedError,
    QuotaExceededError,
    ScanConflictError,
    ScanExecutionError,
)
from app.db import models
from app.db.seed import seed_defaults
from app.db.session import SessionLocal, get_session, init_db
from app.services.reporting import generate_report
from app.services.scan_service import ScanService

from .schemas import (
    AdminItemResponse,
    AdminItemsResponse,
    ConfigUpdate,
    ContentResponse,
    ContentUpdate,
    LoginRequest,
    MeResponse,
    PlanResponse,
    PlanUpdate,
    ProfileResponse,
    ProfileUpdate,
    ReportCreate,
    ReportResponse,
    RuleResponse,
    ScanCreate,
    ScanDetailResponse,
    ScanResponse,
    ScanStatusResponse,
    SessionResponse,
    SignUpRequest,
    StatsResponse,
    UserUpdate,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="access-scan")
_bearer = HTTPBearer(auto_error=False)

# 예외 유형 -> HTTP 상태 코드. 하위 클래스를 먼저 둔다.
_ERROR_STATUS = (
    (PermissionDeniedError, 403),
    (AuthError, 401),
    (QuotaExceededError, 403),
    (ScanConflictError, 409),
    (InvalidUrlError, 400),
    (AdminConfigError, 400),
    (ScanExecutionError, 500),
    (NotFoundError, 404),
    (ValueError, 400),
)


def _http_error(exc: Exception) -> HTTPException:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            detail = exc.args[0] if exc.args else str(exc)
            return HTTPException(status_code=status_code, detail=detail)
    return HTTPException(status_code=500, detail="Internal error")


_HANDLED = tuple(error_type for error_type, _ in _ERROR_STATUS)


@app.on_event("startup")
def _startup() -> None:
    init_db()
    seed_defaults(SessionLocal)
    registry = build_default_registry(SessionLocal)
    app.state.registry = registry
    service = ScanService(SessionLocal, registry)
    session = SessionLocal()
    try:
        service.recover_stale_scans(session)
    finally:
        session.close()
    app.state.scan_service = service


def get_registry(request: Request) -> BackendRegistry:
    return request.app.state.registry


def get_scan_service(request: Request) -> ScanService:
    return request.app.state.scan_service


def get_optional_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    registry: BackendRegistry = Depends(get_registry),
) -> Optional[AuthSession]:
    # 토큰이 없으면 게스트로 취급하고, 있는데 잘못되었으면 401로 응답한다.
    if credentials is None:
        return None
    try:
        payload = decode_access_token(credentials.credentials)
        backend = registry.get(payload["backend"])
        profile = backend.get_profile(payload["sub"])
    except (AuthError, NotFoundError, KeyError) as exc:
        raise HTTPException(status_code=401, detail="Invalid session token") from exc
    return AuthSession.from_profile(credentials.credentials, profile, backend)


def get_auth(auth: Optional[AuthSession] = Depends(get_optional_auth)) -> AuthSession:
    if auth is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return auth


def get_admin(auth: AuthSession = Depends(get_auth)) -> AuthSession:
    if not auth.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return auth


def _owner_key(request: Request, auth: Optional[AuthSession]) -> str:
    # 로그인 계정은 프로필 ID, 게스트는 클라이언트 주소를 기준으로 동시 실행을 막는다.
    if auth is not None:
        return f"{auth.backend}:{auth.profile_id}"
    host = request.client.host if request.client else "unknown"
    return f"guest:{host}"


def _session_response(token: str, auth: AuthSession) -> SessionResponse:
    return SessionResponse(
        access_token=token,
        backend=auth.backend,
        is_admin=auth.is_admin,
        is_demo=auth.is_demo,
        plan_tier=auth.plan_tier.value,
        profile=ProfileResponse(**auth.profile),
    )


def _start_session(backend: AuthBackend, profile: dict) -> SessionResponse:
    token = create_access_token(profile["id"], backend.name)
    return _session_response(token, AuthSession.from_profile(token, profile, backend))


def _get_visible_scan(
    session: Session,
    service: ScanService,
    scan_id: int,
    request: Request,
    auth: Optional[AuthSession],
) -> models.Scan:
    try:
        scan = service.get_scan(session, scan_id)
    except NotFoundError as exc:
        raise _http_error(exc) from exc
    if auth is not None and auth.is_admin:
        return scan
    # 다른 소유자의 스캔은 존재 여부도 노출하지 않는다.
    if scan.owner_key != _owner_key(request, auth):
        raise HTTPException(status_code=404, detail="Scan not found")
    return scan


def _get_visible_report(
    session: Session,
    service: ScanService,
    report_id: int,
    request: Request,
    auth: Optional[AuthSession],
) -> models.Report:
    # 보고서는 원본 스캔과 같은 소유자 규칙을 따른다.
    report = session.get(models.Report, report_id)
    if report is None:
        raise HTTPException(status_code=404, detail="Report not found")
    try:
        _get_visible_scan(session, service, report.scan_id, request, auth)
    except HTTPException as exc:
        raise HTTPException(status_code=404, detail="Report not found") from exc
    return report


# ── 인증/프로필 ─────────────────────────────
@app.post(f"{API_PREFIX}/auth/login", response_model=SessionResponse)
def login(
    payload: LoginRequest,
    registry: BackendRegistry = Depends(get_registry),
) -> SessionResponse:
    backend = registry.select(payload.email)
    try:
        profile = backend.authenticate(payload.email, payload.password)
    except (AuthError, NotFoundError) as exc:
        logger.warning("Login failed for %s via %s", payload.email, backend.name)
        raise HTTPException(status_code=401, detail="Invalid email or password") from exc
    return _start_session(backend, profile)


@app.post(f"{API_PREFIX}/auth/signup", response_model=SessionResponse, status_code=201)
def signup(
    payload: SignUpRequest,
    registry: BackendRegistry = Depends(get_registry),
) -> SessionResponse:
    backend = registry.select(payload.email)
    try:
        profile = backend.sign_up(payload.email, payload.password, payload.full_name)
    except AuthError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _start_session(backend, profile)


@app.get(f"{API_PREFIX}/me", response_model=MeResponse)
def get_me(auth: AuthSession = Depends(get_auth)) -> MeResponse:
    return MeResponse(
        backend=auth.backend,
        is_admin=auth.is_admin,
        is_demo=auth.is_demo,
        plan_tier=auth.plan_tier.value,
        profile=ProfileResponse(**auth.profile),
    )


@app.patch(f"{API_PREFIX}/me", response_model=ProfileResponse)
def update_me(
    payload: ProfileUpdate,
    auth: AuthSession = Depends(get_auth),
    registry: BackendRegistry = Depends(get_registry),
) -> ProfileResponse:
    try:
        profile = registry.get(auth.backend).update_profile(auth.profile_id, payload.model_dump(exclude_none=True))
    except _HANDLED as exc:
        raise _http_error(exc) from exc
    return ProfileResponse(**profile)


# ── 공개 데이터 ─────────────────────────────
@app.get(f"{API_PREFIX}/plans", response_model=List[PlanResponse])
def list_plans(registry: BackendRegistry = Depends(get_registry)) -> List[PlanResponse]:
    plans = registry.get(registry.default).list_plans(active_only=True)
    return [PlanResponse(**plan) for plan in plans]


@app.get(f"{API_PREFIX}/content", response_model=List[ContentResponse])
def list_content(
    page: Optional[str] = None,
    registry: BackendRegistry = Depends(get_registry),
) -> List[ContentResponse]:
    items = registry.get(registry.default).list_content(page)
    return [ContentResponse(**item) for item in items if item.get("is_active", True)]


@app.get(f"{API_PREFIX}/rules", response_model=List[RuleResponse])
def list_rules(
    category: Optional[str] = None,
    severity: Optional[str] = None,
    service: ScanService = Depends(get_scan_service),
) -> List[RuleResponse]:
    rules = service.rules.all()
    if category:
        rules = service.rules.by_category(category)
    if severity:
        matching = {rule.id for rule in service.rules.by_severity(severity)}
        rules = [rule for rule in rules if rule.id in matching]
    return [RuleResponse.model_validate(rule) for rule in rules]


# ── 스캔 ────────────────────────────────────
@app.post(f"{API_PREFIX}/scans", response_model=ScanResponse, status_code=202)
def create_scan(
    payload: ScanCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    auth: Optional[AuthSession] = Depends(get_optional_auth),
    service: ScanService = Depends(get_scan_service),
    session: Session = Depends(get_session),
) -> ScanResponse:
    try:
        scan = service.create_scan(session, auth, _owner_key(request, auth), payload.url, payload.max_pages)
    except _HANDLED as exc:
        raise _http_error(exc) from exc
    # 실제 스캔은 응답 이후 백그라운드에서 진행되며 진행률은 /status로 조회한다.
    background_tasks.add_task(service.execute_scan, scan.id)
    return ScanResponse.model_validate(scan)


@app.get(f"{API_PREFIX}/scans", response_model=List[ScanResponse])
def list_scans(
    request: Request,
    auth: Optional[AuthSession] = Depends(get_optional_auth),
    service: ScanService = Depends(get_scan_service),
    session: Session = Depends(get_session),
) -> List[ScanResponse]:
    records = service.list_history(session, auth, _owner_key(request, auth))
    return [ScanResponse.model_validate(record) for record in records]


@app.get(f"{API_PREFIX}/scans/{{scan_id}}", response_model=ScanDetailResponse)
def get_scan(
    scan_id: int,
    request: Request,
    auth: Optional[AuthSession] = Depends(get_optional_auth),
    service: ScanService = Depends(get_scan_service),
    session: Session = Depends(get_session),
) -> ScanDetailResponse:
    scan = _get_visible_scan(session, service, scan_id, request, auth)
    return ScanDetailResponse.model_validate(scan)


@app.get(f"{API_PREFIX}/scans/{{scan_id}}/status", response_model=ScanStatusResponse)
def get_scan_status(
    scan_id: int,
    request: Request,
    auth: Optional[AuthSession] = Depends(get_optional_auth),
    service: ScanService = Depends(get_scan_service),
    session: Session = Depends(get_session),
) -> ScanStatusResponse:
    scan = _get_visible_scan(session, service, scan_id, request, auth)
    return ScanStatusResponse(
        status=scan.status,
        progress=scan.progress or 0,
        status_text=scan.status_text or "",
        error_message=scan.error_message,
    )


# ── 보고서 ──────────────────────────────────
@app.post(f"{API_PREFIX}/scans/{{scan_id}}/report", response_model=ReportResponse, status_code=201)
def create_report(
    scan_id: int,
    payload: ReportCreate,
    request: Request,
    auth: Optional[AuthSession] = Depends(get_optional_auth),
    service: ScanService = Depends(get_scan_service),
    session: Session = Depends(get_session),
) -> ReportResponse:
    scan = _get_visible_scan(session, service, scan_id, request, auth)
    if scan.status != "COMPLETED":
        raise HTTPException(status_code=409, detail="Scan not completed")
    try:
        report = generate_report(session, scan_id, payload.format)
    except _HANDLED as exc:
        raise _http_error(exc) from exc
    return ReportResponse.model_validate(report)


@app.get(f"{API_PREFIX}/reports/{{report_id}}", response_model=ReportResponse)
def get_report(
    report_id: int,
    request: Request,
    auth: Optional[AuthSession] = Depends(get_optional_auth),
    service: ScanService = Depends(get_scan_service),
    session: Session = Depends(get_session),
) -> ReportResponse:
    report = _get_visible_report(session, service, report_id, request, auth)
    return ReportResponse.model_validate(report)


@app.get(f"{API_PREFIX}/reports/{{report_id}}/file")
def download_report_file(
    report_id: int,
    request: Request,
    auth: Optional[AuthSession] = Depends(get_optional_auth),
    service: ScanService = Depends(get_scan_service),
    session: Session = Depends(get_session),
) -> FileResponse:
    report = _get_visible_report(session, service, report_id, request, auth)
    file_path = Path(report.file_path)
    if not file_path.exists():
        raise HTTPException(status_code=404, detail="Report file not found")
    return FileResponse(path=str(file_path), filename=file_path.name)


# ── 관리자 ──────────────────────────────────
def _admin_backend(auth: AuthSession, registry: BackendRegistry) -> AuthBackend:
    return registry.get(auth.backend)


@app.get(f"{API_PREFIX}/admin/stats", response_model=StatsResponse)
def admin_stats(
    auth: AuthSession = Depends(get_admin),
    registry: BackendRegistry = Depends(get_registry),
) -> StatsResponse:
    backend = _admin_backend(auth, registry)
    return StatsResponse(demo_mode=backend.is_demo, stats=backend.get_stats())


@app.get(f"{API_PREFIX}/admin/users", response_model=AdminItemsResponse)
def admin_list_users(
    auth: AuthSession = Depends(get_admin),
    registry: BackendRegistry = Depends(get_registry),
) -> AdminItemsResponse:
    backend = _admin_backend(auth, registry)
    return AdminItemsResponse(demo_mode=backend.is_demo, items=backend.list_users())


@app.put(f"{API_PREFIX}/admin/users/{{user_id}}", response_model=AdminItemResponse)
def admin_update_user(
    user_id: str,
    payload: UserUpdate,
    auth: AuthSession = Depends(get_admin),
    registry: BackendRegistry = Depends(get_registry),
) -> AdminItemResponse:
    backend = _admin_backend(auth, registry)
    try:
        item = backend.update_user(user_id, payload.model_dump(exclude_none=True))
    except _HANDLED as exc:
        raise _http_error(exc) from exc
    return AdminItemResponse(demo_mode=backend.is_demo, item=item)


@app.post(f"{API_PREFIX}/admin/users/{{user_id}}/toggle-status", response_model=AdminItemResponse)
def admin_toggle_user(
    user_id: str,
    auth: AuthSession = Depends(get_admin),
    registry: BackendRegistry = Depends(get_registry),
) -> AdminItemResponse:
    backend = _admin_backend(auth, registry)
    try:
        item = backend.toggle_user_status(user_id)
    except _HANDLED as exc:
        raise _http_error(exc) from exc
    return AdminItemResponse(demo_mode=backend.is_demo, item=item)


@app.get(f"{API_PREFIX}/admin/plans", response_model=AdminItemsResponse)
def admin_list_plans(
    auth: AuthSession = Depends(get_admin),
    registry: BackendRegistry = Depends(get_registry),
) -> AdminItemsResponse:
    backend = _admin_backend(auth, registry)
    return AdminItemsResponse(demo_mode=backend.is_demo, items=backend.list_plans())


@app.put(f"{API_PREFIX}/admin/plans/{{plan_id}}", response_model=AdminItemResponse)
def admin_update_plan(
    plan_id: str,
    payload: PlanUpdate,
    auth: AuthSession = Depends(get_admin),
    registry: BackendRegistry = Depends(get_registry),
) -> AdminItemResponse:
    backend = _admin_backend(auth, registry)
    try:
        item = backend.update_plan(plan_id, payload.model_dump(exclude_none=True))
    except _HANDLED as exc:
        raise _http_error(exc) from exc
    return AdminItemResponse(demo_mode=backend.is_demo, item=item)


@app.get(f"{API_PREFIX}/admin/configs", response_model=AdminItemsResponse)
def admin_list_configs(
    auth: AuthSession = Depends(get_admin),
    registry: BackendRegistry = Depends(get_registry),
) -> AdminItemsResponse:
    backend = _admin_backend(auth, registry)
    return AdminItemsResponse(demo_mode=backend.is_demo, items=backend.list_configs())


@app.put(f"{API_PREFIX}/admin/configs/{{config_id}}", response_model=AdminItemResponse)
def admin_save_config(
    config_id: str,
    payload: ConfigUpdate,
    auth: AuthSession = Depends(get_admin),
    registry: BackendRegistry = Depends(get_registry),
) -> AdminItemResponse:
    backend = _admin_backend(auth, registry)
    try:
        item = backend.save_config(config_id, payload.config_data)
    except _HANDLED as exc:
        raise _http_error(exc) from exc
    return AdminItemResponse(demo_mode=backend.is_demo, item=item)


@app.get(f"{API_PREFIX}/admin/content", response_model=AdminItemsResponse)
def admin_list_content(
    page: Optional[str] = None,
    auth: AuthSession = Depends(get_admin),
    registry: BackendRegistry = Depends(get_registry),
) -> AdminItemsResponse:
    backend = _admin_backend(auth, registry)
    return AdminItemsResponse(demo_mode=backend.is_demo, items=backend.list_content(page))


@app.put(f"{API_PREFIX}/admin/content/{{content_id}}", response_model=AdminItemResponse)
def admin_update_content(
    content_id: str,
    payload: ContentUpdate,
    auth: AuthSession = Depends(get_admin),
    registry: BackendRegistry = Depends(get_registry),
) -> AdminItemResponse:
    backend = _admin_backend(auth, registry)
    try:
        item = backend.update_content(content_id, payload.model_dump(exclude_none=True))
    except _HANDLED as exc:
        raise _http_error(exc) from exc
    return AdminItemResponse(demo_mode=backend.is_demo, item=item)

"""이 파일은 .py 스캔 서비스 모듈로 요금제 한도 적용, 스캔 기록, 실행을 담당합니다."""

from __future__ import annotations

import asyncio
import logging
import random
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from app.adapters.registry import BackendRegistry
from app.adapters.session import AuthSession
from app.core.config import DEFAULT_MAX_PAGES
from app.core.errors import NotFoundError, QuotaExceededError, ScanConflictError
from app.core.rules import RuleTable
from app.core.types import PlanTier, ScanOptions, ScanProgress, ScanResult
from app.db import models

from .orchestrator import RETRY_MESSAGE, ScanOrchestrator
from .pages import validate_url

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = ("PENDING", "RUNNING")
# 게스트는 무료 요금제의 페이지 한도를 따른다.
GUEST_PAGE_LIMIT = 3
UNLIMITED = -1


class ScanService:
    def __init__(
        self,
        session_factory: Callable[[], Session],
        registry: BackendRegistry,
        rules: Optional[RuleTable] = None,
        delay_scale: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.session_factory = session_factory
        self.registry = registry
        self.rules = rules if rules is not None else RuleTable.from_default()
        self.delay_scale = delay_scale
        self.rng = rng

    def resolve_options(self, auth: Optional[AuthSession], requested_max_pages: Optional[int] = None) -> ScanOptions:
        tier = auth.plan_tier if auth is not None else PlanTier.GUEST
        limit = self._page_limit(auth, tier)
        max_pages = requested_max_pages or DEFAULT_MAX_PAGES
        if limit != UNLIMITED:
            max_pages = min(max_pages, limit)
        return ScanOptions(max_pages=max(1, max_pages), plan_tier=tier)

    def check_quota(self, auth: Optional[AuthSession]) -> None:
        if auth is None:
            return
        profile = auth.profile
        if profile.get("plan_status") == "suspended":
            raise QuotaExceededError("Account is suspended")
        plan = self.registry.get(auth.backend).get_plan_for_tier(auth.plan_tier.value)
        if plan is None:
            return
        allowed = plan.get("scans_per_month", UNLIMITED)
        if allowed != UNLIMITED and int(profile.get("scans_used") or 0) >= allowed:
            raise QuotaExceededError("Monthly scan limit reached. Please upgrade your plan.")

    def create_scan(
        self,
        session: Session,
        auth: Optional[AuthSession],
        owner_key: str,
        url: str,
        requested_max_pages: Optional[int] = None,
    ) -> models.Scan:
        # URL 검증은 백그라운드 실행 전에 동기적으로 끝낸다.
        target = validate_url(url)
        self.check_quota(auth)

        running = (
            session.query(models.Scan)
            .filter(models.Scan.owner_key == owner_key, models.Scan.status.in_(ACTIVE_STATUSES))
            .first()
        )
        if running is not None:
            logger.warning("Scan trigger ignored for owner=%s (scan %s active)", owner_key, running.id)
            raise ScanConflictError("A scan is already running")

        options = self.resolve_options(auth, requested_max_pages)
        scan = models.Scan(
            owner_key=owner_key,
            profile_id=auth.profile_id if auth is not None else None,
            backend=auth.backend if auth is not None else None,
            url=target,
            plan_tier=options.plan_tier.value,
            max_pages=options.max_pages,
            status="PENDING",
            progress=0,
            status_text="Initializing scan...",
        )
        session.add(scan)
        session.commit()
        session.refresh(scan)
        logger.info("Scan %s queued url=%s pages=%d", scan.id, target, options.max_pages)
        return scan

    def execute_scan(self, scan_id: int) -> None:
        # 백그라운드 작업은 요청 세션과 별도의 세션을 쓰며 스레드풀에서 실행된다.
        session = self.session_factory()
        try:
            scan = session.get(models.Scan, scan_id)
            if scan is None:
                raise NotFoundError("Scan not found")
            try:
                result = self._run_scan(session, scan)
            except Exception:
                # 상세 원인은 로그에만 남기고 클라이언트에는 재시도 문구만 보낸다.
                logger.exception("Scan %s failed", scan_id)
                session.rollback()
                self._mark_failed(scan)
                session.commit()
                return

            if scan.profile_id and scan.backend:
                self.registry.get(scan.backend).record_scan(scan.profile_id)
            logger.info("Scan %s stored score=%d", scan_id, result.score)
        finally:
            session.close()

    def recover_stale_scans(self, session: Session) -> int:
        # 재시작 전에 끝나지 못한 스캔은 실패로 닫아 소유자 잠금을 푼다.
        stale = session.query(models.Scan).filter(models.Scan.status.in_(ACTIVE_STATUSES)).all()
        for scan in stale:
            self._mark_failed(scan)
        session.commit()
        if stale:
            logger.warning("Marked %d interrupted scans as failed", len(stale))
        return len(stale)

    def _run_scan(self, session: Session, scan: models.Scan) -> ScanResult:
        scan.status = "RUNNING"
        session.commit()

        def on_progress(progress: ScanProgress) -> None:
            scan.progress = progress.percent
            scan.status_text = progress.status
            session.commit()

        orchestrator = ScanOrchestrator(
            rules=self.rules,
            rng=self.rng,
            delay_scale=self.delay_scale,
        )
        options = ScanOptions(max_pages=scan.max_pages, plan_tier=PlanTier(scan.plan_tier))
        result = asyncio.run(orchestrator.run_scan(scan.url, options, on_progress=on_progress))

        result.scan_id = str(scan.id)
        scan.status = "COMPLETED"
        scan.score = result.score
        scan.total_issues = result.total_issues
        scan.pages_scanned = result.pages_scanned
        scan.result = result.to_dict()
        scan.error_message = None
        scan.completed_at = datetime.utcnow()
        session.commit()
        return result

    @staticmethod
    def _mark_failed(scan: models.Scan) -> None:
        scan.status = "FAILED"
        scan.error_message = RETRY_MESSAGE
        scan.status_text = RETRY_MESSAGE
        scan.completed_at = datetime.utcnow()

    def list_history(self, session: Session, auth: Optional[AuthSession], owner_key: str) -> List[models.Scan]:
        query = session.query(models.Scan)
        if auth is not None:
            query = query.filter(models.Scan.profile_id == auth.profile_id)
        else:
            query = query.filter(models.Scan.owner_key == owner_key)
        return query.order_by(models.Scan.created_at.desc(), models.Scan.id.desc()).all()

    def get_scan(self, session: Session, scan_id: int) -> models.Scan:
        scan = session.get(models.Scan, scan_id)
        if scan is None:
            raise NotFoundError("Scan not found")
        return scan

    def _page_limit(self, auth: Optional[AuthSession], tier: PlanTier) -> int:
        if auth is None:
            return GUEST_PAGE_LIMIT
        plan = self.registry.get(auth.backend).get_plan_for_tier(tier.value)
        if plan is None:
            return GUEST_PAGE_LIMIT
        return int(plan.get("pages_per_scan", UNLIMITED))

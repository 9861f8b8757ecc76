"""이 파일은 .py 오케스트레이터 서비스 모듈로 가상 스캔 실행 흐름을 제공합니다.

스캔은 하나의 코루틴으로 진행되며 단계마다 인위적 지연 뒤에 진행률을 보고합니다.
상태 흐름: IDLE -> VALIDATING -> DISCOVERING_PAGES -> SCANNING_PAGE(i) -> AGGREGATING -> COMPLETE
어느 단계에서든 예외가 발생하면 FAILED를 거쳐 표시 지연 후 IDLE로 돌아갑니다.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from app.core.config import SCAN_DELAY_SCALE
from app.core.errors import InvalidUrlError, ScanExecutionError
from app.core.rules import RuleTable
from app.core.types import Issue, ScanOptions, ScanProgress, ScanResult

from .generator import IssueGenerator, issue_cap_for
from .pages import expand_pages, validate_url
from .scoring import calculate_score, count_by_severity, wcag_compliance

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ScanProgress], None]
CompleteCallback = Callable[[ScanResult], None]
# (level, message) 형태의 알림(토스트) 출력 함수이다.
Notifier = Callable[[str, str], None]
Sleeper = Callable[[float], Awaitable[None]]

RETRY_MESSAGE = "An error occurred during scanning. Please try again."


class ScanState(str, Enum):
    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    DISCOVERING_PAGES = "DISCOVERING_PAGES"
    SCANNING_PAGE = "SCANNING_PAGE"
    AGGREGATING = "AGGREGATING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"


# 새 스캔을 받을 수 있는 상태
READY_STATES = {ScanState.IDLE, ScanState.COMPLETE, ScanState.FAILED}


@dataclass(frozen=True)
class ScanTimings:
    # 단위는 초이며 scale을 곱해 사용한다.
    discovery: float = 0.8
    page_min: float = 0.8
    page_max: float = 2.3
    aggregation: float = 1.0
    reset: float = 3.0


def _log_notification(level: str, message: str) -> None:
    logger.info("[%s] %s", level, message)


class ScanOrchestrator:
    def __init__(
        self,
        rules: Optional[RuleTable] = None,
        rng: Optional[random.Random] = None,
        notifier: Optional[Notifier] = None,
        delay_scale: Optional[float] = None,
        timings: Optional[ScanTimings] = None,
        sleep: Optional[Sleeper] = None,
    ) -> None:
        self.rules = rules if rules is not None else RuleTable.from_default()
        self.rng = rng or random.Random()
        self.generator = IssueGenerator(self.rules, self.rng)
        self.notifier = notifier or _log_notification
        self.delay_scale = SCAN_DELAY_SCALE if delay_scale is None else delay_scale
        self.timings = timings or ScanTimings()
        self._sleep = sleep or asyncio.sleep
        self.state = ScanState.IDLE
        self.current_page: Optional[int] = None
        self.progress = ScanProgress(percent=0, status="")

    @property
    def is_busy(self) -> bool:
        # 완료/실패 전까지는 트리거를 받지 않는다.
        return self.state not in READY_STATES

    async def run_scan(
        self,
        url: str,
        options: ScanOptions,
        on_progress: Optional[ProgressCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ) -> Optional[ScanResult]:
        if self.is_busy:
            # 진행 중인 스캔이 있으면 아무 일도 하지 않는다.
            logger.warning("Scan trigger ignored while state=%s", self.state.value)
            return None

        self._set_state(ScanState.VALIDATING)
        try:
            target = validate_url(url)
        except InvalidUrlError as exc:
            # 검증 실패는 상태 변화 없이 IDLE로 되돌린다.
            logger.warning("Rejected scan url %r: %s", url, exc)
            self._set_state(ScanState.IDLE)
            self.notifier("error", str(exc))
            raise

        logger.info("Scan started url=%s max_pages=%d tier=%s", target, options.max_pages, options.plan_tier.value)
        try:
            result = await self._run(target, options, on_progress)
            if on_complete is not None:
                on_complete(result)
        except Exception as exc:
            logger.exception("Scan failed url=%s", target)
            self._set_state(ScanState.FAILED)
            self.notifier("error", RETRY_MESSAGE)
            await self._delay(self.timings.reset)
            if self.state == ScanState.FAILED:
                # 표시 지연 동안 새 스캔이 시작되지 않았을 때만 되돌린다.
                self._set_state(ScanState.IDLE)
                self.progress = ScanProgress(percent=0, status="")
            raise ScanExecutionError(str(exc) or exc.__class__.__name__) from exc

        self.notifier(
            "success",
            f"Scan completed! Found {result.total_issues} accessibility issues across {result.pages_scanned} pages.",
        )
        logger.info("Scan completed url=%s score=%d issues=%d", target, result.score, result.total_issues)
        return result

    async def _run(
        self,
        target: str,
        options: ScanOptions,
        on_progress: Optional[ProgressCallback],
    ) -> ScanResult:
        self._report(on_progress, 0, "Initializing scan...")

        # 1) 페이지 목록 합성
        self._set_state(ScanState.DISCOVERING_PAGES)
        self._report(on_progress, 10, "Discovering pages...")
        await self._delay(self.timings.discovery)
        pages = expand_pages(target, options.max_pages)

        # 2) 페이지별 가상 스캔
        cap = issue_cap_for(options.plan_tier)
        all_issues: List[Issue] = []
        for index, page in enumerate(pages):
            self._set_state(ScanState.SCANNING_PAGE)
            self.current_page = index
            percent = 20 + int(index / len(pages) * 70)
            self._report(on_progress, percent, f"Scanning page {index + 1} of {len(pages)}: {page}")
            await self._delay(self.rng.uniform(self.timings.page_min, self.timings.page_max))
            all_issues.extend(self.generator.generate(page, index, cap))

        # 3) 집계
        self._set_state(ScanState.AGGREGATING)
        self.current_page = None
        self._report(on_progress, 95, "Analyzing results and generating report...")
        await self._delay(self.timings.aggregation)
        result = self._aggregate(target, pages, all_issues)

        self._set_state(ScanState.COMPLETE)
        self._report(on_progress, 100, "Scan completed!")
        return result

    def _aggregate(self, target: str, pages: List[str], issues: List[Issue]) -> ScanResult:
        counts = count_by_severity(issues)
        return ScanResult(
            url=target,
            score=calculate_score(issues, self.rng),
            total_issues=len(issues),
            critical=counts["critical"],
            serious=counts["serious"],
            moderate=counts["moderate"],
            minor=counts["minor"],
            pages_scanned=len(pages),
            issues=issues,
            timestamp=_utc_timestamp(),
            wcag_compliance=wcag_compliance(issues),
        )

    def _report(self, on_progress: Optional[ProgressCallback], percent: int, status: str) -> None:
        self.progress = ScanProgress(percent=percent, status=status)
        if on_progress is not None:
            on_progress(self.progress)

    def _set_state(self, state: ScanState) -> None:
        logger.debug("Scan state %s -> %s", self.state.value, state.value)
        self.state = state

    async def _delay(self, seconds: float) -> None:
        await self._sleep(max(0.0, seconds * self.delay_scale))


def _utc_timestamp() -> str:
    # 2024-01-15T10:00:00.000Z 형태의 ISO 문자열을 만든다.
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"

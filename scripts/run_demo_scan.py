"""이 파일은 .py 데모 스캔 실행 스크립트로 명령줄에서 가상 스캔 1회를 수행합니다."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

from app.core.logging import setup_logging
from app.core.types import PlanTier, ScanOptions, ScanProgress
from app.services.orchestrator import ScanOrchestrator
from app.services.scoring import score_rating


def _print_progress(progress: ScanProgress) -> None:
    print(f"[{progress.percent:3d}%] {progress.status}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run one simulated accessibility scan")
    parser.add_argument("url", nargs="?", default="https://example.com")
    parser.add_argument("--max-pages", type=int, default=5)
    parser.add_argument("--tier", choices=[tier.value for tier in PlanTier], default=PlanTier.GUEST.value)
    parser.add_argument("--delay-scale", type=float, default=0.2)
    args = parser.parse_args()

    setup_logging()
    orchestrator = ScanOrchestrator(delay_scale=args.delay_scale)
    options = ScanOptions(max_pages=args.max_pages, plan_tier=PlanTier(args.tier))
    result = asyncio.run(orchestrator.run_scan(args.url, options, on_progress=_print_progress))

    print(f"Score: {result.score}/100 ({score_rating(result.score)})")
    print(f"Pages: {result.pages_scanned}, issues: {result.total_issues}, avg/page: {result.average_issues_per_page}")
    print("Severity: " + ", ".join(f"{key}={value}" for key, value in result.severity_counts().items()))
    print("WCAG compliance: " + ", ".join(f"{level}={value}%" for level, value in result.wcag_compliance.items()))
    for issue in result.issues:
        print(f"- [{issue.severity}] {issue.title} | {issue.page} | {issue.element}")


if __name__ == "__main__":
    main()

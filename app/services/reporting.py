"""이 파일은 .py 리포팅 모듈로 스캔 결과 요약과 보고서 파일 생성을 제공합니다."""

from __future__ import annotations

import csv
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List
from urllib.parse import urlparse

from sqlalchemy.orm import Session

from app.core.errors import NotFoundError
from app.core.storage import ensure_reports_dir
from app.core.types import SEVERITIES
from app.db import models

from .scoring import score_rating

SUPPORTED_FORMATS = {"json", "csv"}

RECOMMENDATIONS = [
    "Test your website with screen readers like NVDA or JAWS",
    "Verify keyboard navigation works properly throughout the site",
    "Consider hiring an accessibility expert for a manual audit",
    "Set up regular automated scans to catch new issues",
    "Train your development team on accessibility best practices",
    "Create an accessibility statement for your website",
]

CSV_FIELDS = [
    "id",
    "severity",
    "rule",
    "title",
    "wcagLevel",
    "wcagCriterion",
    "category",
    "page",
    "element",
    "description",
    "fix",
    "helpUrl",
]


def summarize_result(result: Dict[str, Any]) -> Dict[str, Any]:
    # 점수 등급 문구, 페이지당 평균 이슈 수, 권장 사항을 묶는다.
    score = int(result.get("score") or 0)
    pages = int(result.get("pagesScanned") or 0)
    total = int(result.get("totalIssues") or 0)
    return {
        "score": score,
        "rating": score_rating(score),
        "totalIssues": total,
        "pagesScanned": pages,
        "averageIssuesPerPage": round(total / pages, 1) if pages else 0.0,
        "severity": {severity: int(result.get(severity) or 0) for severity in SEVERITIES},
        "wcagCompliance": dict(result.get("wcagCompliance") or {}),
        "recommendations": list(RECOMMENDATIONS),
    }


def report_filename(url: str, generated_at: datetime, extension: str) -> str:
    domain = (urlparse(url).hostname or "site").replace("www.", "", 1)
    return f"accessibility-report-{domain}-{generated_at.strftime('%Y-%m-%d')}.{extension}"


def generate_report(session: Session, scan_id: int, report_format: str) -> models.Report:
    # 지원 여부를 확인하고 형식을 정규화한다.
    normalized = report_format.strip().lower()
    if normalized not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported format: {report_format}")

    scan = session.get(models.Scan, scan_id)
    if scan is None:
        raise NotFoundError("Scan not found")
    if scan.status != "COMPLETED" or not scan.result:
        raise ValueError("Scan has not completed yet")

    generated_at = datetime.utcnow()
    report_dir = ensure_reports_dir(scan_id)
    file_path = report_dir / report_filename(scan.url, generated_at, normalized)

    if normalized == "json":
        _write_json(file_path, _build_json_payload(scan, generated_at))
    else:
        _write_csv(file_path, scan.result.get("issues") or [])

    # 보고서 메타데이터를 DB에 저장한다.
    report = models.Report(
        scan_id=scan_id,
        format=normalized.upper(),
        file_path=str(file_path),
        generated_at=generated_at,
    )
    session.add(report)
    session.commit()
    session.refresh(report)
    return report


def _build_json_payload(scan: models.Scan, generated_at: datetime) -> Dict[str, Any]:
    return {
        "scan": {
            "id": scan.id,
            "url": scan.url,
            "planTier": scan.plan_tier,
            "maxPages": scan.max_pages,
            "createdAt": _format_dt(scan.created_at),
            "completedAt": _format_dt(scan.completed_at),
        },
        "summary": summarize_result(scan.result),
        "result": scan.result,
        "generatedAt": _format_dt(generated_at),
    }


def _write_json(file_path: Path, payload: Dict[str, Any]) -> None:
    file_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")


def _write_csv(file_path: Path, issues: List[Dict[str, Any]]) -> None:
    # 이슈 한 건당 한 행을 기록한다.
    with file_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.DictWriter(handle, fieldnames=CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for issue in issues:
            writer.writerow(issue)


def _format_dt(value: datetime | None) -> str | None:
    if value is None:
        return None
    return value.isoformat()

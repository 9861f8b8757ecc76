"""접근성 스캔 실행/결과 페이지."""

from __future__ import annotations

import os
import time
from typing import Optional

import streamlit as st

from lib.api_client import APIClient
from lib.schemas import SEVERITY_LABELS, SEVERITY_ORDER, group_issues, is_active, score_label

POLL_INTERVAL = 1.0
FAILED_MESSAGE = "An error occurred during scanning. Please try again."


def _poll(client: APIClient, scan_id: int) -> dict:
    # 스캔이 끝날 때까지 상태를 조회하며 진행률을 갱신한다.
    bar = st.progress(0, text="Initializing scan...")
    status = client.get_scan_status(scan_id)
    while is_active(status):
        bar.progress(int(status.get("progress") or 0), text=status.get("status_text") or "")
        time.sleep(POLL_INTERVAL)
        status = client.get_scan_status(scan_id)
    bar.progress(int(status.get("progress") or 0), text=status.get("status_text") or "")
    return status


def _render_result(client: APIClient, scan: dict) -> None:
    result = scan.get("result") or {}
    score = int(result.get("score") or 0)

    cols = st.columns(4)
    cols[0].metric("점수", f"{score}/100", score_label(score))
    cols[1].metric("전체 이슈", result.get("totalIssues", 0))
    cols[2].metric("스캔한 페이지", result.get("pagesScanned", 0))
    cols[3].metric("치명적 이슈", result.get("critical", 0))

    compliance = result.get("wcagCompliance") or {}
    if compliance:
        st.subheader("WCAG 준수율")
        level_cols = st.columns(len(compliance))
        for col, (level, value) in zip(level_cols, compliance.items()):
            col.metric(f"Level {level}", f"{value}%")

    st.subheader("이슈 목록")
    groups = group_issues(result)
    tabs = st.tabs([f"{SEVERITY_LABELS[severity]} ({len(groups[severity])})" for severity in SEVERITY_ORDER])
    for tab, severity in zip(tabs, SEVERITY_ORDER):
        with tab:
            if not groups[severity]:
                st.write("해당 심각도의 이슈가 없습니다.")
            for issue in groups[severity]:
                with st.expander(f"{issue.get('title')} (WCAG {issue.get('wcagLevel')})"):
                    st.write(issue.get("description"))
                    st.code(issue.get("element") or "", language="html")
                    st.write(f"페이지: {issue.get('page')}")
                    st.write(f"수정 방법: {issue.get('fix')}")
                    if issue.get("helpUrl"):
                        st.markdown(f"[참고 문서]({issue.get('helpUrl')})")

    st.subheader("보고서 다운로드")
    report_format = st.selectbox("포맷", ["json", "csv"])
    if st.button("보고서 생성"):
        try:
            report = client.create_report(int(scan["id"]), report_format)
            data = client.download_report(int(report["id"]))
            st.download_button(
                "다운로드",
                data=data,
                file_name=os.path.basename(report.get("file_path") or f"report.{report_format}"),
            )
        except Exception as exc:
            st.error(str(exc))


def _request_scan() -> None:
    # 제출 콜백은 다음 실행 전에 호출되므로 그 실행부터 버튼이 비활성화된다.
    st.session_state["scan_running"] = True


def _finish_scan(error: Optional[str] = None) -> None:
    st.session_state["scan_running"] = False
    if error:
        st.session_state["scan_error"] = error
    st.rerun()


def main() -> None:
    st.header("접근성 스캐너")

    api_base_url = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
    client = APIClient(api_base_url, token=st.session_state.get("access_token"))
    running = bool(st.session_state.get("scan_running"))

    error = st.session_state.pop("scan_error", None)
    if error:
        st.error(error)

    with st.form("create_scan"):
        url = st.text_input("웹사이트 URL", value="https://example.com")
        max_pages = st.number_input("최대 페이지 수", min_value=1, max_value=10, value=5, step=1)
        # 진행 중인 스캔이 있으면 버튼을 비활성화한다.
        submitted = st.form_submit_button("스캔 시작", disabled=running, on_click=_request_scan)

    if submitted:
        try:
            scan = client.create_scan(url.strip(), int(max_pages))
        except Exception as exc:
            _finish_scan(str(exc))
        st.session_state["scan_id"] = scan["id"]

    scan_id = st.session_state.get("scan_id")
    if not scan_id:
        return

    try:
        status = _poll(client, int(scan_id))
    except Exception as exc:
        _finish_scan(str(exc))
    if st.session_state.get("scan_running"):
        # 스캔이 끝났으므로 버튼을 다시 활성화한 화면으로 갱신한다.
        _finish_scan()

    if status.get("status") == "FAILED":
        st.error(FAILED_MESSAGE)
        return

    scan = client.get_scan(int(scan_id))
    result = scan.get("result") or {}
    st.success(
        f"Scan completed! Found {result.get('totalIssues', 0)} accessibility issues "
        f"across {result.get('pagesScanned', 0)} pages."
    )
    _render_result(client, scan)


if __name__ == "__main__":
    main()

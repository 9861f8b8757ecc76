"""Streamlit 대시보드 진입점."""

from __future__ import annotations

import os

import streamlit as st

from lib.api_client import APIClient


def main() -> None:
    # 랜딩 페이지로 마케팅 문구와 API URL 안내를 제공한다.
    st.set_page_config(page_title="AccessScan", layout="wide")

    api_base_url = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
    client = APIClient(api_base_url, token=st.session_state.get("access_token"))

    try:
        content = client.list_content(page="home")
    except Exception as exc:
        content = []
        st.warning(str(exc))

    hero = next((item for item in content if item.get("section") == "hero"), None)
    if hero:
        st.title(hero.get("title") or "AccessScan")
        st.write(hero.get("content") or "")
    else:
        st.title("AccessScan")
        st.write("웹사이트의 WCAG 접근성 이슈를 몇 초 만에 점검해 보세요.")

    st.caption(f"API_BASE_URL = {api_base_url}")
    st.markdown(
        """
        - **스캐너** 페이지에서 URL을 입력하면 여러 페이지를 점검한 결과 보고서를 보여 줍니다.
        - **계정** 페이지에서 로그인하면 요금제 한도와 스캔 기록을 확인할 수 있습니다.
        - **요금제** 페이지에서 플랜별 페이지/스캔 한도를 비교합니다.
        - 데모 계정: `admin@accessscan.com / admin123`, `user@example.com / user123`
        """
    )


if __name__ == "__main__":
    main()

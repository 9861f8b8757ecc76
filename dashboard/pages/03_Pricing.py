"""요금제 비교 페이지."""

from __future__ import annotations

import os

import streamlit as st

from lib.api_client import APIClient


def _limit(value: int) -> str:
    return "무제한" if value == -1 else str(value)


def main() -> None:
    st.header("요금제")

    api_base_url = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
    client = APIClient(api_base_url)

    try:
        plans = client.list_plans()
    except Exception as exc:
        st.error(str(exc))
        return

    cols = st.columns(max(1, len(plans)))
    for col, plan in zip(cols, plans):
        with col:
            st.subheader(plan["name"])
            st.metric("월 요금", f"${plan['price']:.0f}")
            st.write(f"월 스캔: {_limit(plan['scans_per_month'])}")
            st.write(f"스캔당 페이지: {_limit(plan['pages_per_scan'])}")
            for feature in plan.get("features") or []:
                st.write(f"- {feature}")


if __name__ == "__main__":
    main()

"""로그인/프로필/스캔 기록 페이지."""

from __future__ import annotations

import os

import streamlit as st

from lib.api_client import APIClient


def _login_form(client: APIClient) -> None:
    st.subheader("로그인")
    with st.form("login"):
        email = st.text_input("이메일")
        password = st.text_input("비밀번호", type="password")
        submitted = st.form_submit_button("로그인")
    if submitted:
        try:
            session = client.login(email.strip(), password)
            st.session_state["access_token"] = session["access_token"]
            st.rerun()
        except Exception as exc:
            st.error(str(exc))

    st.subheader("회원가입")
    with st.form("signup"):
        full_name = st.text_input("이름")
        email = st.text_input("이메일", key="signup_email")
        password = st.text_input("비밀번호 (6자 이상)", type="password", key="signup_password")
        submitted = st.form_submit_button("가입")
    if submitted:
        try:
            session = client.signup(email.strip(), password, full_name.strip() or None)
            st.session_state["access_token"] = session["access_token"]
            st.rerun()
        except Exception as exc:
            st.error(str(exc))


def main() -> None:
    st.header("계정")

    api_base_url = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
    client = APIClient(api_base_url, token=st.session_state.get("access_token"))

    if not client.token:
        _login_form(client)
        return

    try:
        me = client.get_me()
    except Exception as exc:
        # 만료된 토큰이면 세션을 비우고 다시 로그인하게 한다.
        st.session_state.pop("access_token", None)
        st.error(str(exc))
        return

    profile = me["profile"]
    if me.get("is_demo"):
        st.info("데모 계정입니다. 변경 사항은 서버 메모리에만 반영됩니다.")

    cols = st.columns(3)
    cols[0].metric("요금제", me.get("plan_tier", "free"))
    cols[1].metric("사용한 스캔", profile.get("scans_used", 0))
    cols[2].metric("상태", profile.get("plan_status", "active"))

    st.subheader("프로필")
    with st.form("profile"):
        full_name = st.text_input("이름", value=profile.get("full_name") or "")
        avatar_url = st.text_input("아바타 URL", value=profile.get("avatar_url") or "")
        submitted = st.form_submit_button("저장")
    if submitted:
        try:
            client.update_me({"full_name": full_name or None, "avatar_url": avatar_url or None})
            st.success("저장되었습니다.")
        except Exception as exc:
            st.error(str(exc))

    st.subheader("스캔 기록")
    try:
        history = client.list_scans()
        if history:
            st.dataframe(history, use_container_width=True)
        else:
            st.write("스캔 기록이 없습니다.")
    except Exception as exc:
        st.error(str(exc))

    if st.button("로그아웃"):
        st.session_state.pop("access_token", None)
        st.rerun()


if __name__ == "__main__":
    main()

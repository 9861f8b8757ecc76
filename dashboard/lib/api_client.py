"""API 호출을 담당하는 간단한 클라이언트."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests


@dataclass
class APIClient:
    base_url: str
    token: Optional[str] = None
    timeout: int = 10

    def _url(self, path: str) -> str:
        # 상대 경로를 API_BASE_URL에 결합한다.
        return f"{self.base_url.rstrip('/')}{path}"

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _send(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        # 공통 요청 래퍼(오류 메시지 포함).
        url = self._url(path)
        try:
            response = requests.request(
                method,
                url,
                json=payload,
                params=params,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise RuntimeError(f"API 연결 실패: {exc}") from exc

        if response.status_code >= 400:
            detail = _safe_json(response.text)
            raise RuntimeError(f"API 오류 {response.status_code}: {detail}")
        return response

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        response = self._send(method, path, payload, params)
        if not response.text:
            return {}
        return response.json()

    def _build_params(self, **kwargs: Any) -> Dict[str, Any]:
        # None 값은 제외하고 쿼리스트링을 구성한다.
        return {key: value for key, value in kwargs.items() if value is not None}

    def login(self, email: str, password: str) -> Dict[str, Any]:
        return self._request("POST", "/api/v1/auth/login", {"email": email, "password": password})

    def signup(self, email: str, password: str, full_name: Optional[str] = None) -> Dict[str, Any]:
        payload = {"email": email, "password": password, "full_name": full_name}
        return self._request("POST", "/api/v1/auth/signup", payload)

    def get_me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/v1/me")

    def update_me(self, updates: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", "/api/v1/me", updates)

    def list_plans(self) -> Any:
        return self._request("GET", "/api/v1/plans")

    def list_content(self, page: Optional[str] = None) -> Any:
        return self._request("GET", "/api/v1/content", params=self._build_params(page=page))

    def list_rules(self, category: Optional[str] = None, severity: Optional[str] = None) -> Any:
        params = self._build_params(category=category, severity=severity)
        return self._request("GET", "/api/v1/rules", params=params)

    def create_scan(self, url: str, max_pages: Optional[int] = None) -> Dict[str, Any]:
        payload = {"url": url, "max_pages": max_pages}
        return self._request("POST", "/api/v1/scans", payload)

    def list_scans(self) -> Any:
        return self._request("GET", "/api/v1/scans")

    def get_scan(self, scan_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/v1/scans/{scan_id}")

    def get_scan_status(self, scan_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/v1/scans/{scan_id}/status")

    def create_report(self, scan_id: int, report_format: str) -> Dict[str, Any]:
        return self._request("POST", f"/api/v1/scans/{scan_id}/report", {"format": report_format})

    def get_report(self, report_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/v1/reports/{report_id}")

    def download_report(self, report_id: int) -> bytes:
        return self._send("GET", f"/api/v1/reports/{report_id}/file").content


def _safe_json(text: str) -> str:
    # 응답이 JSON이면 detail만 추출하고 아니면 원문을 반환한다.
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return text
    if not isinstance(data, dict):
        return str(data)
    return str(data.get("detail", data))

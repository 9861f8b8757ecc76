"""이 파일은 .py 테스트 모듈로 REST API 흐름을 검증합니다."""

from fastapi.testclient import TestClient

from app.api.app import app

PREFIX = "/api/v1"


def _login(client: TestClient, email: str, password: str) -> dict:
    response = client.post(f"{PREFIX}/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def test_public_marketing_data() -> None:
    with TestClient(app) as client:
        plans = client.get(f"{PREFIX}/plans").json()
        assert [plan["name"] for plan in plans] == ["Free", "Pro", "Agency"]

        content = client.get(f"{PREFIX}/content", params={"page": "home"}).json()
        assert content[0]["section"] == "hero"

        rules = client.get(f"{PREFIX}/rules", params={"severity": "critical"}).json()
        assert {rule["id"] for rule in rules} == {"color-contrast", "keyboard-trap"}
        mixed_case = client.get(f"{PREFIX}/rules", params={"severity": "Critical"}).json()
        assert {rule["id"] for rule in mixed_case} == {"color-contrast", "keyboard-trap"}


def test_guest_scan_runs_to_completion() -> None:
    with TestClient(app) as client:
        response = client.post(f"{PREFIX}/scans", json={"url": "https://example.com", "max_pages": 8})
        assert response.status_code == 202, response.text
        scan = response.json()
        assert scan["max_pages"] == 3
        assert scan["plan_tier"] == "guest"

        status = client.get(f"{PREFIX}/scans/{scan['id']}/status").json()
        assert status["status"] == "COMPLETED"
        assert status["progress"] == 100

        detail = client.get(f"{PREFIX}/scans/{scan['id']}").json()
        result = detail["result"]
        assert result["scanId"] == str(scan["id"])
        assert result["pagesScanned"] == 3
        assert result["totalIssues"] == len(result["issues"])
        assert 0 <= result["score"] <= 100


def test_invalid_url_is_rejected() -> None:
    with TestClient(app) as client:
        response = client.post(f"{PREFIX}/scans", json={"url": "ftp://example.com"})
        assert response.status_code == 400
        assert "http://" in response.json()["detail"]


def test_report_download() -> None:
    with TestClient(app) as client:
        scan = client.post(f"{PREFIX}/scans", json={"url": "https://www.example.com"}).json()
        response = client.post(f"{PREFIX}/scans/{scan['id']}/report", json={"format": "json"})
        assert response.status_code == 201, response.text
        report = response.json()
        assert report["scan_id"] == scan["id"]

        assert client.get(f"{PREFIX}/reports/{report['id']}").status_code == 200
        download = client.get(f"{PREFIX}/reports/{report['id']}/file")
        assert download.status_code == 200
        assert download.json()["summary"]["recommendations"]

        bad = client.post(f"{PREFIX}/scans/{scan['id']}/report", json={"format": "pdf"})
        assert bad.status_code == 400


def test_demo_login_and_profile() -> None:
    with TestClient(app) as client:
        headers = _login(client, "user@example.com", "user123")
        me = client.get(f"{PREFIX}/me", headers=headers).json()
        assert me["is_demo"] is True
        assert me["plan_tier"] == "pro"

        updated = client.patch(f"{PREFIX}/me", json={"full_name": "Renamed"}, headers=headers).json()
        assert updated["full_name"] == "Renamed"

        scan = client.post(f"{PREFIX}/scans", json={"url": "https://example.com", "max_pages": 7}, headers=headers)
        assert scan.status_code == 202
        assert scan.json()["max_pages"] == 7
        history = client.get(f"{PREFIX}/scans", headers=headers).json()
        assert scan.json()["id"] in [item["id"] for item in history]
        assert all(item["plan_tier"] == "pro" for item in history)

        bad = client.post(f"{PREFIX}/auth/login", json={"email": "user@example.com", "password": "nope"})
        assert bad.status_code == 401


def test_signup_creates_remote_account() -> None:
    with TestClient(app) as client:
        payload = {"email": "api-user@example.com", "password": "secret123", "full_name": "API User"}
        response = client.post(f"{PREFIX}/auth/signup", json=payload)
        assert response.status_code == 201, response.text
        session = response.json()
        assert session["backend"] == "remote"
        assert session["plan_tier"] == "free"

        duplicate = client.post(f"{PREFIX}/auth/signup", json=payload)
        assert duplicate.status_code == 400

        demo = client.post(f"{PREFIX}/auth/signup", json={"email": "user@example.com", "password": "secret123"})
        assert demo.status_code == 400

        headers = _login(client, "api-user@example.com", "secret123")
        assert client.get(f"{PREFIX}/me", headers=headers).json()["backend"] == "remote"

        # 무료 요금제는 월 1회만 스캔할 수 있다.
        first = client.post(f"{PREFIX}/scans", json={"url": "https://example.com"}, headers=headers)
        assert first.status_code == 202
        second = client.post(f"{PREFIX}/scans", json={"url": "https://example.com"}, headers=headers)
        assert second.status_code == 403


def test_scans_are_private_to_owner() -> None:
    with TestClient(app) as client:
        headers = _login(client, "user@example.com", "user123")
        scan = client.post(f"{PREFIX}/scans", json={"url": "https://example.com"}, headers=headers).json()
        assert client.get(f"{PREFIX}/scans/{scan['id']}").status_code == 404
        assert client.get(f"{PREFIX}/scans/{scan['id']}", headers=headers).status_code == 200


def test_admin_endpoints_require_admin() -> None:
    with TestClient(app) as client:
        assert client.get(f"{PREFIX}/admin/stats").status_code == 401
        user_headers = _login(client, "user@example.com", "user123")
        assert client.get(f"{PREFIX}/admin/stats", headers=user_headers).status_code == 403
        bad_token = {"Authorization": "Bearer not-a-token"}
        assert client.get(f"{PREFIX}/me", headers=bad_token).status_code == 401

        headers = _login(client, "admin@accessscan.com", "admin123")
        stats = client.get(f"{PREFIX}/admin/stats", headers=headers).json()
        assert stats["demo_mode"] is True
        assert stats["stats"]["totalUsers"] == 3

        users = client.get(f"{PREFIX}/admin/users", headers=headers).json()["items"]
        assert len(users) == 3
        toggled = client.post(f"{PREFIX}/admin/users/user-003/toggle-status", headers=headers).json()
        assert toggled["item"]["plan_status"] == "suspended"
        missing = client.post(f"{PREFIX}/admin/users/nobody/toggle-status", headers=headers)
        assert missing.status_code == 404

        plan = client.put(f"{PREFIX}/admin/plans/plan-pro", json={"price": 29}, headers=headers).json()
        assert plan["item"]["price"] == 29

        invalid = client.put(
            f"{PREFIX}/admin/configs/smtp",
            json={"config_data": {"host": "smtp.example.com", "port": 70000, "fromEmail": "a@b.c"}},
            headers=headers,
        )
        assert invalid.status_code == 400

        content = client.put(
            f"{PREFIX}/admin/content/content-1", json={"title": "New headline"}, headers=headers
        ).json()
        assert content["item"]["title"] == "New headline"
        # 데모 수정은 공개 문구(원격 DB)에 반영되지 않는다.
        public = client.get(f"{PREFIX}/content", params={"page": "home"}).json()
        assert public[0]["title"] != "New headline"


def test_reports_are_private_to_owner() -> None:
    with TestClient(app) as client:
        headers = _login(client, "user@example.com", "user123")
        scan = client.post(
            f"{PREFIX}/scans", json={"url": "https://private.example.com"}, headers=headers
        ).json()
        report = client.post(
            f"{PREFIX}/scans/{scan['id']}/report", json={"format": "json"}, headers=headers
        ).json()

        assert client.get(f"{PREFIX}/reports/{report['id']}").status_code == 404
        assert client.get(f"{PREFIX}/reports/{report['id']}/file").status_code == 404

        owner = client.get(f"{PREFIX}/reports/{report['id']}/file", headers=headers)
        assert owner.status_code == 200
        assert owner.json()["scan"]["url"] == "https://private.example.com"

        admin = _login(client, "admin@accessscan.com", "admin123")
        assert client.get(f"{PREFIX}/reports/{report['id']}", headers=admin).status_code == 200

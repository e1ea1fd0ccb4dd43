import pytest
from werkzeug.security import generate_password_hash

from generus_attendance.main import create_app


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def guru(teachers_repo):
    return teachers_repo.add("Guru Budi", email="budi@example.com", password_hash=generate_password_hash("rahasia1"))


def _login_teacher(client):
    resp = client.post("/api/auth/teachers/login", json={"email": "budi@example.com", "password": "rahasia1"})
    assert resp.status_code == 200
    return resp


def test_endpoints_require_login(client):
    resp = client.get("/api/dashboard")
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "AUTHENTICATION_FAILED"


def test_wrong_password_is_401(client, guru):
    resp = client.post("/api/auth/teachers/login", json={"email": "budi@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_generus_login_cannot_open_dashboard(client, ahmad):
    resp = client.post("/api/auth/generus/login", json={"full_name": "Ahmad", "level": "remaja", "sambung_group": "A1"})
    assert resp.status_code == 200

    resp = client.get("/api/dashboard")
    assert resp.status_code == 403
    assert resp.get_json()["error"] == "FORBIDDEN"


def test_dashboard_on_empty_store(client, guru):
    _login_teacher(client)

    body = client.get("/api/dashboard").get_json()

    assert body["success"] is True
    assert body["data"]["total_reports"] == 0
    assert body["data"]["average_attendance"] == 0


def test_kbm_report_then_stats_over_http(client, guru, ahmad):
    _login_teacher(client)

    resp = client.post(
        "/api/kbm",
        json={
            "session_date": "2024-01-15",
            "sambung_group": "A1",
            "level": "remaja",
            "material": "Tajwid",
            "attendance": [{"member_id": ahmad.member_id, "status": "present"}],
        },
    )
    assert resp.status_code == 201
    data = resp.get_json()["data"]
    assert data["session"]["session_date"] == "2024-01-15"
    assert data["session"]["teacher_id"] == guru.teacher_id
    assert data["attendance"][0]["status"] == "present"

    stats = client.get(f"/api/attendance/generus/{ahmad.member_id}/stats").get_json()["data"]
    assert stats["attendance_percentage"] == 100

    bad = client.post("/api/kbm", json={"session_date": "2024-01-15", "sambung_group": "A1", "level": "x", "material": "m"})
    assert bad.status_code == 400
    assert bad.get_json()["error"] == "VALIDATION_ERROR"


def test_scan_flow_maps_errors_to_status_codes(client, container, guru, ahmad):
    barcode = container.member_service.assign_barcode(ahmad.member_id).data.barcode
    _login_teacher(client)

    first = client.post("/api/checkins/scan", json={"barcode": barcode})
    assert first.status_code == 201
    assert first.get_json()["data"]["member"]["full_name"] == "Ahmad"

    again = client.post("/api/checkins/scan", json={"barcode": barcode})
    assert again.status_code == 409
    assert again.get_json()["error"] == "DUPLICATE_CHECKIN_TODAY"

    unknown = client.post("/api/checkins/scan", json={"barcode": "GEN999_1"})
    assert unknown.status_code == 404
    assert unknown.get_json()["error"] == "MEMBER_NOT_FOUND_OR_INACTIVE"

    assert client.post("/api/checkins/scan", json={}).status_code == 400


def test_teacher_listing_never_exposes_password_hash(client, guru):
    _login_teacher(client)

    teachers = client.get("/api/teachers").get_json()["data"]

    assert [t["email"] for t in teachers] == ["budi@example.com"]
    assert "password_hash" not in teachers[0]


def test_kbm_export_is_a_csv_attachment(client, guru):
    _login_teacher(client)

    resp = client.get("/api/kbm/export?start=2024-01-01&end=2024-01-31")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attachment" in resp.headers["Content-Disposition"]
    assert client.get("/api/kbm/export?start=01-01-2024").status_code == 400


def test_unexpected_error_is_logged_and_generic(client, container, guru, monkeypatch, caplog):
    _login_teacher(client)

    def boom():
        raise RuntimeError("database unreachable")

    monkeypatch.setattr(container.statistics_service, "dashboard_stats", boom)
    resp = client.get("/api/dashboard")

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Internal server error"}
    assert "unhandled error" in caplog.text


def test_logout_clears_session(client, guru):
    _login_teacher(client)
    assert client.get("/api/auth/me").get_json()["data"]["role"] == "teacher"

    client.post("/api/auth/logout")

    assert client.get("/api/auth/me").status_code == 401


def test_generus_can_only_print_their_own_card(client, ahmad, members_repo):
    siti = members_repo.add("Siti", "A1")
    client.post("/api/auth/generus/login", json={"full_name": "Ahmad", "level": "remaja", "sambung_group": "A1"})

    own = client.post(f"/api/id-cards/generus/{ahmad.member_id}")
    assert own.status_code == 200
    assert own.get_json()["data"]["card_number"] == f"GEN{ahmad.member_id:06d}"

    other = client.post(f"/api/id-cards/generus/{siti.member_id}")
    assert other.status_code == 403
    assert other.get_json()["error"] == "FORBIDDEN"


def test_card_validation_over_http(client, container, guru, ahmad):
    payload = container.id_card_service.generate(ahmad.member_id).data.payload
    _login_teacher(client)

    body = client.post("/api/id-cards/validate", json={"card_data": payload}).get_json()

    assert body["data"]["valid"] is True
    assert body["data"]["member"]["full_name"] == "Ahmad"


def test_teacher_edits_own_profile_and_changes_password(client, guru, teachers_repo):
    other = teachers_repo.add("Guru Sari")
    _login_teacher(client)

    resp = client.patch(f"/api/teachers/{guru.teacher_id}", json={"full_name": "Budi Santoso"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["full_name"] == "Budi Santoso"
    assert "password_hash" not in resp.get_json()["data"]
    assert client.patch(f"/api/teachers/{other.teacher_id}", json={"full_name": "X"}).status_code == 403

    wrong = client.post("/api/auth/teachers/password", json={"current_password": "nope", "new_password": "baru1234"})
    assert wrong.status_code == 401
    ok = client.post("/api/auth/teachers/password", json={"current_password": "rahasia1", "new_password": "baru1234"})
    assert ok.status_code == 200

import pytest

from gradebook.schemas.auth import Role
from gradebook.services.security import create_access_token

from conftest import make_student


def _student_headers(student_id):
    return {"Authorization": f"Bearer {create_access_token(student_id, Role.STUDENT)}"}


# --- auth ---


def test_teacher_login(client):
    resp = client.post("/auth/teacher", json={"password": "admin"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["role"] == "TEACHER"
    assert body["token_type"] == "bearer"
    assert body["access_token"]


def test_teacher_login_wrong_password(client):
    resp = client.post("/auth/teacher", json={"password": "guess"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "authentication_failed"


def test_student_login(client):
    resp = client.post("/auth/student", json={"student_id": " 665001 "})
    assert resp.status_code == 200
    token = resp.json()["access_token"]
    me = client.get("/students/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["student_id"] == "665001"


def test_student_login_unknown_id(client):
    resp = client.post("/auth/student", json={"student_id": "000000"})
    assert resp.status_code == 404
    body = resp.json()
    assert body["error"] == "student_not_found"
    assert body["detail"]["message"]


def test_student_login_when_store_is_down(client, fake_repo):
    fake_repo.rosters = []
    resp = client.post("/auth/student", json={"student_id": "665001"})
    assert resp.status_code == 404


def test_missing_and_invalid_tokens(client):
    assert client.get("/classes").status_code == 401
    resp = client.get("/classes", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["error"] == "authentication_failed"
    assert client.get("/classes", headers={"Authorization": "Token abc"}).status_code == 401


def test_role_separation(client, teacher_headers, student_headers):
    assert client.get("/classes", headers=student_headers).status_code == 403
    resp = client.get("/students/me", headers=teacher_headers)
    assert resp.status_code == 403
    assert resp.json()["error"] == "permission_denied"


# --- teacher views ---


def test_list_classes(client, teacher_headers):
    resp = client.get("/classes", headers=teacher_headers)
    assert resp.status_code == 200
    assert resp.json() == [
        {"id": "M5_History", "name": "ม.5 ประวัติศาสตร์", "student_count": 3},
        {"id": "M5_Social", "name": "ม.5 สังคมศึกษา", "student_count": 1},
    ]


def test_empty_store_is_unavailable(client, fake_repo, teacher_headers):
    fake_repo.rosters = []
    resp = client.get("/classes", headers=teacher_headers)
    assert resp.status_code == 503
    assert resp.json()["error"] == "roster_store_unavailable"


def test_class_report_cards(client, teacher_headers):
    resp = client.get("/classes/M5_History", headers=teacher_headers)
    assert resp.status_code == 200
    cards = {card["student_id"]: card for card in resp.json()}

    top = cards["665001"]
    assert top["collected_sum"] == 60
    assert top["grade"] == {"total_score": 80, "grade": 4, "is_pass": True}
    assert top["rank"]["rank_index"] == 5
    assert top["rank"]["current"]["tier"] == "Chieftain"
    assert top["rank"]["next"]["tier"] == "Jungle King"
    assert top["rank"]["progress"] == 0
    assert top["tickets"] == {"earned": 5, "available": 3, "redeemed": 2}

    special = cards["665003"]
    assert special["grade"] == {"total_score": 0, "grade": "มส.", "is_pass": False}
    assert special["rank"]["rank_index"] == 0
    assert special["tickets"]["available"] == 0


def test_unknown_class(client, teacher_headers):
    resp = client.get("/classes/M9_Unknown", headers=teacher_headers)
    assert resp.status_code == 404
    assert resp.json()["error"] == "class_not_found"


def test_replace_students(client, fake_repo, teacher_headers):
    payload = [
        make_student("665001", "ด.ญ. มานี ใจดี", [10] * 6, 15, 15, redeemed=2).to_store(),
        {"id": 665004, "name": "นักเรียนใหม่", "scores": {"collected": [12, 5], "midterm": "", "final": None}},
    ]
    resp = client.put("/classes/M5_History/students", json=payload, headers=teacher_headers)
    assert resp.status_code == 200
    assert resp.json()["ok"] is True
    assert resp.json()["student_count"] == 2

    class_id, saved = fake_repo.saved[-1]
    assert class_id == "M5_History"
    assert saved[1].id == "665004"
    assert saved[1].scores.collected == [10, 5, 0, 0, 0, 0]

    cards = client.get("/classes/M5_History", headers=teacher_headers).json()
    assert cards[0]["grade"]["total_score"] == 90
    assert cards[0]["rank"]["current"]["tier"] == "Ancient Guardian"
    assert cards[0]["rank"]["progress"] == 100


def test_replace_students_store_failure(client, fake_repo, teacher_headers):
    fake_repo.save_result = False
    resp = client.put("/classes/M5_History/students", json=[{"id": "1"}], headers=teacher_headers)
    assert resp.status_code == 503
    assert resp.json()["detail"]["class_id"] == "M5_History"


def test_replace_students_rejects_bad_payload(client, teacher_headers):
    resp = client.put("/classes/M5_History/students", json=[{"name": "no id"}], headers=teacher_headers)
    assert resp.status_code == 422


def test_class_stats(client, teacher_headers):
    resp = client.get("/classes/M5_History/stats", headers=teacher_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["class_id"] == "M5_History"
    assert body["average"] == 60
    assert body["special"]["มส."] == 1


def test_export_csv(client, teacher_headers):
    resp = client.get("/classes/M5_History/export.csv", headers=teacher_headers)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/csv")
    assert 'filename="M5_History_grades.csv"' in resp.headers["content-disposition"]
    lines = resp.text.splitlines()
    assert lines[0].startswith("ID,Name,C1")
    assert len(lines) == 4


# --- student portal ---


def test_student_report_lists_every_enrolled_class(client, student_headers):
    resp = client.get("/students/me", headers=student_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "ด.ญ. มานี ใจดี"
    classes = {c["class_id"]: c for c in body["classes"]}
    assert set(classes) == {"M5_History", "M5_Social"}
    assert classes["M5_Social"]["grade"]["grade"] == 3.5
    assert classes["M5_Social"]["rank"]["current"]["tier"] == "Druid"
    assert classes["M5_Social"]["rank"]["progress"] == pytest.approx(80.0)
    assert classes["M5_Social"]["tickets"]["available"] == 4
    assert classes["M5_Social"]["rank"]["avatar_url"].startswith("https://api.dicebear.com/")
    assert classes["M5_Social"]["rank"]["gender"] == "female"


def test_redeem_confirmed(client, fake_repo, student_headers):
    resp = client.post("/students/me/classes/M5_History/redeem", json={"confirmed": True}, headers=student_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["state"] == "confirmed"
    assert body["success"] is True
    assert body["redeemed"] == 3
    assert body["available"] == 2
    assert fake_repo.rosters[0].find_student("665001").redeemed_draws == 3

    me = client.get("/students/me", headers=student_headers).json()
    history = next(c for c in me["classes"] if c["class_id"] == "M5_History")
    assert history["tickets"]["available"] == 2


def test_redeem_not_confirmed(client, fake_repo, student_headers):
    resp = client.post("/students/me/classes/M5_History/redeem", json={}, headers=student_headers)
    assert resp.status_code == 200
    assert resp.json()["state"] == "idle"
    assert resp.json()["available"] == 3
    assert fake_repo.saved == []


def test_redeem_store_failure_rolls_back(client, fake_repo, student_headers):
    fake_repo.save_result = False
    resp = client.post("/students/me/classes/M5_History/redeem", json={"confirmed": True}, headers=student_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["state"] == "rolled_back"
    assert body["success"] is False
    assert body["available"] == 3


def test_redeem_without_tickets(client):
    resp = client.post(
        "/students/me/classes/M5_History/redeem", json={"confirmed": True}, headers=_student_headers("665002")
    )
    assert resp.status_code == 409
    assert resp.json()["error"] == "no_tickets_available"


def test_redeem_in_class_not_enrolled(client, student_headers):
    resp = client.post("/students/me/classes/M1_History/redeem", json={"confirmed": True}, headers=student_headers)
    assert resp.status_code == 404


def test_refresh_picks_up_teacher_edits(client, fake_repo, student_headers, teacher_headers):
    client.get("/students/me", headers=student_headers)
    roster = fake_repo.rosters[0]
    edited = [s.model_copy(update={"redeemed_draws": 5}) if s.id == "665001" else s for s in roster.students]
    client.put(
        "/classes/M5_History/students",
        json=[s.to_store() for s in edited],
        headers=teacher_headers,
    )

    stale = client.get("/students/me", headers=student_headers).json()
    assert next(c for c in stale["classes"] if c["class_id"] == "M5_History")["tickets"]["available"] == 3

    fresh = client.post("/students/me/refresh", headers=student_headers).json()
    assert next(c for c in fresh["classes"] if c["class_id"] == "M5_History")["tickets"]["available"] == 0


# --- service endpoints ---


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "healthy"
    assert body["environment"] == "test"
    assert body["roster_store"]["mode"] in {"mock", "http"}


def test_correlation_id_is_echoed(client, teacher_headers):
    resp = client.get("/classes/M9_Unknown", headers={**teacher_headers, "X-Correlation-ID": "req-42"})
    assert resp.headers["X-Correlation-ID"] == "req-42"

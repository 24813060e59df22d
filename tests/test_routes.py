import pytest

pytest.importorskip("httpx")
from fastapi.testclient import TestClient

import app.api as api_module
import worker.main as worker_main
from app.routes import account, admin, alerts, auth, jobs, public
from core.database import hash_password


@pytest.fixture
def client():
    return TestClient(api_module.app)


def _page(items, page=1, page_size=20):
    return {"items": items, "page": page, "pageSize": page_size, "total": len(items), "totalPages": 1 if items else 0}


def _login_as(monkeypatch, module, role="user"):
    user = {"id": "3f1c0000-0000-4000-8000-000000000001", "email": "me@example.com", "role": role}
    monkeypatch.setattr(module, "get_current_user", lambda request: (user, "tok"))
    return user


# -------- search --------

def test_job_search_parses_query(monkeypatch, client):
    captured = {}

    def _search(filters):
        captured["filters"] = filters
        return _page([{"id": 1, "title": "Designer"}], page_size=filters.page_size)

    monkeypatch.setattr(jobs, "search_jobs", _search)

    resp = client.get(
        "/api/jobs",
        params=[("category", "design"), ("category", "marketing"), ("job_type", "contract,bogus"), ("limit", "-5")],
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["jobs"] == [{"id": 1, "title": "Designer"}]
    assert body["pageSize"] == 20
    assert captured["filters"].categories == ["design", "marketing"]
    assert captured["filters"].job_types == ["contract"]


def test_job_search_store_failure_degrades(monkeypatch, client):
    def _boom(filters):
        raise RuntimeError("database unreachable")

    monkeypatch.setattr(jobs, "search_jobs", _boom)

    resp = client.get("/api/jobs")

    assert resp.status_code == 500
    body = resp.json()
    assert body["jobs"] == []
    assert body["total"] == 0
    assert "error" in body


def test_optimised_requires_login(monkeypatch, client):
    monkeypatch.setattr(jobs, "get_current_user", lambda request: (None, None))
    assert client.get("/api/jobs/optimised").status_code == 401


def test_optimised_uses_stored_answers(monkeypatch, client):
    _login_as(monkeypatch, jobs)
    captured = {}
    monkeypatch.setattr(
        jobs,
        "get_preferences",
        lambda user_id: {"answersByQuestionId": {"0": ["Design"], "5": ["$90k–$110k"]}, "selectedCategory": None},
    )

    def _search(filters):
        captured["filters"] = filters
        return _page([])

    monkeypatch.setattr(jobs, "search_jobs", _search)

    body = client.get("/api/jobs/optimised").json()

    assert body["optimised"] is True
    assert body["filters"] == {"category": ["design"], "min_salary": "90000"}
    assert captured["filters"].categories == ["design"]


def test_optimised_without_usable_answers_falls_back(monkeypatch, client):
    _login_as(monkeypatch, jobs)
    captured = {}
    monkeypatch.setattr(jobs, "get_preferences", lambda user_id: {"answersByQuestionId": {"0": ["Astronaut"]}})

    def _search(filters):
        captured["filters"] = filters
        return _page([])

    monkeypatch.setattr(jobs, "search_jobs", _search)

    body = client.get("/api/jobs/optimised?page=2").json()

    assert body["optimised"] is False
    assert body["filters"] == {}
    assert not captured["filters"].has_constraints()
    assert captured["filters"].page == 2


def test_job_detail_with_similar(monkeypatch, client):
    job = {"id": 5, "slug": "backend-engineer-a1b2c3", "title": "Backend Engineer", "category_id": 1}
    calls = []
    monkeypatch.setattr(jobs, "get_job_by_slug", lambda slug: job if slug == job["slug"] else None)

    def _similar(category_id, exclude_slug):
        calls.append((category_id, exclude_slug))
        return [{"id": 6, "slug": "api-engineer-d4e5f6", "title": "API Engineer"}]

    monkeypatch.setattr(jobs, "get_similar_jobs", _similar)

    resp = client.get("/api/jobs/backend-engineer-a1b2c3")

    assert resp.status_code == 200
    assert resp.json()["job"]["title"] == "Backend Engineer"
    assert [s["slug"] for s in resp.json()["similar"]] == ["api-engineer-d4e5f6"]
    assert calls == [(1, "backend-engineer-a1b2c3")]


def test_job_detail_unknown_slug(monkeypatch, client):
    monkeypatch.setattr(jobs, "get_job_by_slug", lambda slug: None)
    resp = client.get("/api/jobs/missing")
    assert resp.status_code == 404
    assert resp.json() == {"error": "Not found"}


def test_optimised_route_is_not_taken_as_a_slug(monkeypatch, client):
    monkeypatch.setattr(jobs, "get_current_user", lambda request: (None, None))
    monkeypatch.setattr(jobs, "get_job_by_slug", lambda slug: pytest.fail("detail route matched"))
    assert client.get("/api/jobs/optimised").status_code == 401


def test_company_lookup(monkeypatch, client):
    monkeypatch.setattr(jobs, "find_companies_by_name", lambda q: [{"id": 1, "name": "Acme"}] if q == "ac" else [])
    assert client.get("/api/companies/search?q=ac").json() == {"companies": [{"id": 1, "name": "Acme"}]}


def test_company_list_uses_large_ceiling(monkeypatch, client):
    captured = {}

    def _search(filters):
        captured["filters"] = filters
        return _page([], page_size=filters.page_size)

    monkeypatch.setattr(jobs, "search_companies", _search)

    body = client.get("/api/companies?limit=1000").json()

    assert body["pageSize"] == 1000
    assert body["companies"] == []


# -------- alerts --------

def test_create_alert(monkeypatch, client):
    created = {}
    sent = []
    monkeypatch.setattr(alerts, "get_or_create_user", lambda email: {"id": "u1", "email": email})
    monkeypatch.setattr(alerts, "send_html_email", lambda to, subject, html: sent.append((to, subject)))

    def _add(email, keyword, frequency="daily", user_id=None):
        created.update(email=email, keyword=keyword, frequency=frequency, user_id=user_id)
        return {"id": 7, **created}

    monkeypatch.setattr(alerts, "add_subscription", _add)

    resp = client.post("/api/alerts", json={"email": "Me@Example.com", "keyword": " react ", "frequency": "weekly"})

    assert resp.status_code == 201
    assert created == {"email": "me@example.com", "keyword": "react", "frequency": "weekly", "user_id": "u1"}
    assert sent == [("me@example.com", 'Your weekly alert for "react" is active')]


def test_create_alert_survives_confirmation_failure(monkeypatch, client):
    monkeypatch.setattr(alerts, "get_or_create_user", lambda email: None)
    monkeypatch.setattr(
        alerts, "add_subscription", lambda email, keyword, frequency="daily", user_id=None: {"id": 8, "frequency": frequency}
    )

    def _boom(to, subject, html):
        raise RuntimeError("smtp down")

    monkeypatch.setattr(alerts, "send_html_email", _boom)

    resp = client.post("/api/alerts", json={"email": "me@example.com", "keyword": "python"})

    assert resp.status_code == 201
    assert resp.json()["alert"]["id"] == 8



@pytest.mark.parametrize(
    "payload",
    [
        {"email": "me@example.com", "keyword": "a"},
        {"email": "me@example.com", "keyword": "  a  "},
        {"email": "not-an-email", "keyword": "react"},
        {"email": "me@example.com", "keyword": "react", "frequency": "hourly"},
    ],
)
def test_create_alert_rejects_bad_payload(monkeypatch, client, payload):
    monkeypatch.setattr(alerts, "add_subscription", lambda *a, **kw: pytest.fail("should not store"))
    resp = client.post("/api/alerts", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid request"


def test_list_alerts_requires_email(client):
    assert client.get("/api/alerts").status_code == 400


def test_delete_alert_checks_owner(monkeypatch, client):
    removed = []
    monkeypatch.setattr(alerts, "get_subscriptions_for_email", lambda email: [{"id": 3}] if email == "a@x.com" else [])
    monkeypatch.setattr(alerts, "deactivate_subscription", removed.append)

    assert client.delete("/api/alerts/3?email=b@x.com").status_code == 404
    assert client.delete("/api/alerts/3?email=a@x.com").status_code == 200
    assert removed == [3]


# -------- cron --------

def test_cron_rejects_wrong_secret(monkeypatch, client):
    monkeypatch.setenv("CRON_SECRET", "s3cret")
    assert client.get("/api/cron/alerts?secret=nope").status_code == 401
    assert client.get("/api/cron/alerts").status_code == 401


def test_cron_rejects_when_secret_unset(monkeypatch, client):
    monkeypatch.delenv("CRON_SECRET", raising=False)
    assert client.get("/api/cron/alerts?secret=").status_code == 401


def test_cron_runs_alerts(monkeypatch, client):
    monkeypatch.setenv("CRON_SECRET", "s3cret")

    async def _run_once():
        return 4

    monkeypatch.setattr(worker_main, "run_once", _run_once)

    resp = client.get("/api/cron/alerts?secret=s3cret")

    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "sent": 4}


def test_cron_reports_systemic_failure(monkeypatch, client):
    monkeypatch.setenv("CRON_SECRET", "s3cret")

    async def _run_once():
        raise RuntimeError("database unreachable")

    monkeypatch.setattr(worker_main, "run_once", _run_once)

    resp = client.get("/api/cron/alerts?secret=s3cret")

    assert resp.status_code == 500
    assert resp.json()["ok"] is False


# -------- preferences / role --------

def test_preferences_replace_whole_record(monkeypatch, client):
    user = _login_as(monkeypatch, account)
    saved = {}
    monkeypatch.setattr(account, "save_preferences", lambda user_id, record: saved.update({user_id: record}))

    resp = client.post(
        "/api/user/preferences",
        json={"answersByQuestionId": {"0": ["Design"], "2": [" Figma ", ""]}, "selectedCategory": "Design"},
    )

    assert resp.status_code == 200
    assert saved[user["id"]] == {
        "answersByQuestionId": {"0": ["Design"], "2": ["Figma"]},
        "selectedCategory": "Design",
    }


def test_preferences_need_login(monkeypatch, client):
    monkeypatch.setattr(account, "get_current_user", lambda request: (None, None))
    assert client.get("/api/user/preferences").status_code == 401


def test_role_choice(monkeypatch, client):
    user = _login_as(monkeypatch, account)
    roles = []
    monkeypatch.setattr(account, "set_user_role", lambda user_id, role: roles.append((user_id, role)) or True)

    assert client.post("/api/user/role", json={"role": "employer"}).status_code == 200
    assert client.post("/api/user/role", json={"role": "admin"}).status_code == 400
    assert roles == [(user["id"], "employer")]


# -------- auth --------

def test_sign_in_sets_session_cookie(monkeypatch, client):
    user = {"id": "u1", "email": "me@example.com", "name": None, "role": "user", "password_hash": hash_password("Passw0rd1")}
    monkeypatch.setattr(auth, "get_user_by_email", lambda email: user)
    monkeypatch.setattr(auth, "create_session", lambda user_id: "session-token")

    resp = client.post("/api/auth/sign-in", json={"email": "me@example.com", "password": "Passw0rd1"})

    assert resp.status_code == 200
    assert resp.json()["user"]["id"] == "u1"
    assert "password_hash" not in resp.json()["user"]
    assert "session_id=session-token" in resp.headers.get("set-cookie", "")


def test_sign_in_rate_limited(monkeypatch, client):
    monkeypatch.setattr(auth, "get_user_by_email", lambda email: None)
    statuses = [
        client.post("/api/auth/sign-in", json={"email": "me@example.com", "password": "wrong"}).status_code
        for _ in range(6)
    ]
    assert statuses[:5] == [401] * 5
    assert statuses[5] == 429


def test_sign_up_rejects_weak_password(monkeypatch, client):
    monkeypatch.setattr(auth, "create_user", lambda *a, **kw: pytest.fail("should not create"))
    resp = client.post("/api/auth/sign-up", json={"email": "me@example.com", "password": "short"})
    assert resp.status_code == 400


def test_sign_up_conflict(monkeypatch, client):
    monkeypatch.setattr(
        auth, "get_user_by_email", lambda email: {"id": "u1", "email": email, "password_hash": hash_password("Passw0rd1")}
    )
    monkeypatch.setattr(auth, "set_user_password", lambda *a: pytest.fail("should not overwrite"))
    resp = client.post("/api/auth/sign-up", json={"email": "me@example.com", "password": "Passw0rd1"})
    assert resp.status_code == 409


def test_sign_up_claims_alert_only_account(monkeypatch, client):
    row = {"id": "u1", "email": "me@example.com", "name": "me", "role": "user", "password_hash": None}
    calls = []
    monkeypatch.setattr(auth, "get_user_by_email", lambda email: row)
    monkeypatch.setattr(auth, "get_user_by_id", lambda user_id: row)
    monkeypatch.setattr(auth, "create_user", lambda *a, **kw: pytest.fail("should reuse the existing row"))
    monkeypatch.setattr(auth, "set_user_password", lambda user_id, pw: calls.append(("password", user_id)))
    monkeypatch.setattr(auth, "set_user_role", lambda user_id, role: calls.append(("role", role)) or True)
    monkeypatch.setattr(auth, "create_session", lambda user_id: "session-token")

    resp = client.post(
        "/api/auth/sign-up", json={"email": "me@example.com", "password": "Passw0rd1", "role": "employer"}
    )

    assert resp.status_code == 201
    assert resp.json()["user"]["id"] == "u1"
    assert calls == [("password", "u1"), ("role", "employer")]
    assert "session_id=session-token" in resp.headers.get("set-cookie", "")


# -------- admin publish --------

def _job_payload(**overrides):
    payload = {
        "title": "Backend Engineer",
        "companyName": "Acme",
        "categorySlug": "software-development",
        "applyUrl": "https://acme.example/jobs/1",
        "descriptionHtml": "<p>Build things</p>",
        "jobType": "full_time",
        "remoteScope": "europe",
        "tags": ["python"],
    }
    payload.update(overrides)
    return payload


def test_publish_requires_admin(monkeypatch, client):
    _login_as(monkeypatch, admin, role="employer")
    assert client.post("/api/admin/jobs", json=_job_payload()).status_code == 403


def test_publish_notifies_subscribers(monkeypatch, client):
    _login_as(monkeypatch, admin, role="admin")
    notified = []
    monkeypatch.setattr(admin, "get_category_by_slug", lambda slug: {"id": 1, "slug": slug})
    monkeypatch.setattr(admin, "create_job", lambda **kw: {"id": 11, "title": kw["title"], "tags": kw["tags"]})

    async def _notify(job):
        notified.append(job["id"])
        return 1

    monkeypatch.setattr(worker_main, "notify_new_job", _notify)

    resp = client.post("/api/admin/jobs", json=_job_payload())

    assert resp.status_code == 201
    assert resp.json()["job"]["id"] == 11
    assert notified == [11]


def test_publish_survives_notify_failure(monkeypatch, client):
    _login_as(monkeypatch, admin, role="admin")
    monkeypatch.setattr(admin, "get_category_by_slug", lambda slug: {"id": 1, "slug": slug})
    monkeypatch.setattr(admin, "create_job", lambda **kw: {"id": 12, "title": kw["title"], "tags": []})

    async def _notify(job):
        raise RuntimeError("smtp down")

    monkeypatch.setattr(worker_main, "notify_new_job", _notify)

    assert client.post("/api/admin/jobs", json=_job_payload()).status_code == 201


def test_publish_validates_enums_and_category(monkeypatch, client):
    _login_as(monkeypatch, admin, role="admin")
    monkeypatch.setattr(admin, "get_category_by_slug", lambda slug: None)

    assert client.post("/api/admin/jobs", json=_job_payload(jobType="gig")).status_code == 400
    assert client.post("/api/admin/jobs", json=_job_payload()).status_code == 400


# -------- public --------

def test_health_reports_stats(monkeypatch, client):
    monkeypatch.setattr(public, "get_stats", lambda: {"jobs": 3, "companies": 2, "active_alerts": 1})
    assert client.get("/health").json() == {"status": "ok", "jobs": 3, "companies": 2, "active_alerts": 1}


def test_join_questions(client):
    questions = client.get("/api/join/questions?category=Design").json()["questions"]
    assert [q["id"] for q in questions] == list(range(9))

"""
Console web shell tests (TestClient over the app, fake backend behind httpx).

Tests:
1. Gate: anonymous requests go to /login (HX-Redirect for HTMX)
2. Login / logout and role authorization through the form
3. Queue pages, list fragments, filters, pager
4. Actions: HTMX fragments vs redirect-after-POST, modal errors
5. Expired session mid-use drops the cookie and redirects
6. Latency metrics are written per request
"""
import json

import pytest
from fastapi.testclient import TestClient

from admin_console.config import Settings
from admin_console.web.app import create_app

from .fake_backend import ADMIN_EMAIL, ADMIN_TOKEN, BASE_URL, PASSWORD, USER_EMAIL, USER_TOKEN

HTMX = {"HX-Request": "true"}


# ════════════════════════════════════════════════════════════════════════════
# Gate and login
# ════════════════════════════════════════════════════════════════════════════
def test_anonymous_page_redirects_to_login(client, backend):
    response = client.get("/", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert backend.calls == [], "No stored token means no backend call"


def test_anonymous_fragment_gets_hx_redirect(client):
    response = client.get("/reports/list", headers=HTMX, follow_redirects=False)

    assert response.status_code == 200
    assert response.headers["HX-Redirect"] == "/login"


def test_login_page_renders(client):
    response = client.get("/login")

    assert response.status_code == 200
    assert 'name="email"' in response.text
    assert 'name="password"' in response.text


def test_admin_login_sets_cookie(client):
    response = client.post("/login", data={"email": ADMIN_EMAIL, "password": PASSWORD}, follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"
    assert client.cookies.get("admin_token") == ADMIN_TOKEN


def test_non_admin_login_is_refused(client):
    response = client.post("/login", data={"email": USER_EMAIL, "password": PASSWORD})

    assert response.status_code == 200
    assert "not an administrator" in response.text
    assert client.cookies.get("admin_token") is None


def test_wrong_password_is_refused(client):
    response = client.post("/login", data={"email": ADMIN_EMAIL, "password": "nope"})

    assert "Invalid credentials" in response.text
    assert client.cookies.get("admin_token") is None


def test_missing_credentials(client, backend):
    response = client.post("/login", data={"email": "", "password": ""})

    assert "required" in response.text
    assert backend.calls == []


def test_login_page_skipped_when_authenticated(admin_client):
    response = admin_client.get("/login", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/"


def test_dashboard_shows_user_and_navigation(admin_client, backend):
    response = admin_client.get("/")

    assert response.status_code == 200
    assert ADMIN_EMAIL in response.text
    for path in ("/reports", "/chat-reports", "/receipt-reviews", "/restaurants", "/gatherings", "/refunds"):
        assert f'href="{path}"' in response.text
    assert 'hx-get="/stats"' in response.text
    assert backend.count("GET", "/users/me") == 1, "Session resolved once at login"


def test_stats_fragment(admin_client):
    response = admin_client.get("/stats", headers=HTMX)

    assert response.status_code == 200
    assert "Pending reports" in response.text
    assert ">15<" in response.text


def test_logout(admin_client, backend):
    calls_before = len(backend.calls)

    response = admin_client.post("/logout", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert len(backend.calls) == calls_before, "Logout is local only"
    assert admin_client.get("/", follow_redirects=False).headers["location"] == "/login"


# ════════════════════════════════════════════════════════════════════════════
# Queues
# ════════════════════════════════════════════════════════════════════════════
@pytest.mark.parametrize("path, title", [
    ("/reports", "Review reports"),
    ("/chat-reports", "Chat reports"),
    ("/receipt-reviews", "Receipt verification"),
    ("/restaurants", "Restaurant approval"),
    ("/gatherings", "Gatherings"),
    ("/refunds", "Failed refunds"),
])
def test_queue_pages_render(admin_client, path, title):
    response = admin_client.get(path)

    assert response.status_code == 200
    assert title in response.text
    assert f'hx-get="{path}/list?' in response.text


def test_reports_page_defaults_to_pending(admin_client):
    response = admin_client.get("/reports")

    assert "/reports/list?status=PENDING&amp;page=0" in response.text


def test_reports_list_fragment(admin_client):
    response = admin_client.get("/reports/list", headers=HTMX)

    assert response.status_code == 200
    assert 'id="queue"' in response.text
    assert "#1<" in response.text
    assert "1 / 2" in response.text
    assert "Spam / advertising" in response.text


def test_reports_list_all_last_page(admin_client):
    response = admin_client.get("/reports/list?status=ALL&page=2", headers=HTMX)

    assert "3 / 3" in response.text
    assert "#25<" in response.text
    assert "#1<" not in response.text


def test_report_modal(admin_client):
    response = admin_client.get("/reports/1/modal?status=PENDING&page=0", headers=HTMX)

    assert "Report #1" in response.text
    assert 'hx-post="/reports/1/process"' in response.text
    assert "Review text 1" in response.text


def test_processed_report_modal_has_no_actions(admin_client, backend):
    resolved = next(r for r in backend.reports if r["status"] != "PENDING")

    response = admin_client.get(f"/reports/{resolved['id']}/modal", headers=HTMX)

    assert "/process" not in response.text


def test_process_report_via_htmx(admin_client, backend):
    admin_client.get("/reports/list", headers=HTMX)

    response = admin_client.post(
        "/reports/1/process",
        data={"action": "RESOLVE", "admin_note": "spam", "delete_review": "true", "status": "PENDING", "page": "0"},
        headers=HTMX,
    )

    assert response.status_code == 200
    assert response.text == ""
    assert response.headers["HX-Trigger"] == "queue-changed"
    assert backend.reports[0]["status"] == "RESOLVED"
    assert backend.bodies["/admin/reports/1/process"]["deleteReview"] is True

    refreshed = admin_client.get("/reports/list?status=PENDING&page=0", headers=HTMX)
    assert "14 total" in refreshed.text


def test_process_report_plain_form_redirects(admin_client):
    response = admin_client.post(
        "/reports/2/process",
        data={"action": "REJECT", "status": "PENDING", "page": "1"},
        follow_redirects=False,
    )

    assert response.status_code == 303
    assert response.headers["location"] == "/reports?status=PENDING&page=1"


def test_process_failure_keeps_modal_open(admin_client, backend):
    backend.force("POST", "/admin/reports/3/process", 500)

    response = admin_client.post("/reports/3/process", data={"action": "RESOLVE"}, headers=HTMX)

    assert response.status_code == 200
    assert "Forced 500" in response.text
    assert 'hx-post="/reports/3/process"' in response.text, "Modal re-rendered for retry"
    assert backend.reports[2]["status"] == "PENDING"


def test_process_failure_plain_form_redirects_with_error(admin_client, backend):
    backend.force("POST", "/admin/reports/3/process", 500)

    response = admin_client.post("/reports/3/process", data={"action": "RESOLVE"}, follow_redirects=False)

    assert response.status_code == 303
    assert "error=Forced+500" in response.headers["location"]


def test_chat_report_flow(admin_client, backend):
    listing = admin_client.get("/chat-reports/list", headers=HTMX)
    assert "Bad message 1" in listing.text

    modal = admin_client.get("/chat-reports/1/modal", headers=HTMX)
    assert "Chat report #1" in modal.text

    response = admin_client.post("/chat-reports/1/process", data={"action": "REJECT"}, headers=HTMX)
    assert response.headers["HX-Trigger"] == "queue-changed"
    assert backend.chat_reports[0]["status"] == "REJECTED"


def test_receipt_review_flow(admin_client, backend):
    listing = admin_client.get("/receipt-reviews/list", headers=HTMX)
    assert "Great rice cakes 1" in listing.text

    modal = admin_client.get("/receipt-reviews/1/modal?page=0", headers=HTMX)
    assert 'hx-post="/receipt-reviews/1/approve"' in modal.text

    response = admin_client.post("/receipt-reviews/1/approve", data={"page": "0"}, headers=HTMX)
    assert response.headers["HX-Trigger"] == "queue-changed"
    assert [r["id"] for r in backend.receipt_reviews] == [2, 3]

    gone = admin_client.get("/receipt-reviews/1/modal?page=0", headers=HTMX)
    assert "no longer in the queue" in gone.text


def test_restaurant_reject_requires_reason(admin_client, backend):
    modal = admin_client.get("/restaurants/1/reject-modal?page=0", headers=HTMX)
    assert 'name="reason"' in modal.text

    response = admin_client.post("/restaurants/1/reject", data={"reason": "   ", "page": "0"}, headers=HTMX)

    assert response.status_code == 200
    assert "Rejection reason is required" in response.text
    assert backend.count("POST", "/admin/restaurants/1/reject") == 0
    assert len(backend.restaurants) == 2


def test_restaurant_reject_with_reason(admin_client, backend):
    response = admin_client.post("/restaurants/1/reject", data={"reason": "Duplicate", "page": "0"}, headers=HTMX)

    assert response.headers["HX-Trigger"] == "queue-changed"
    assert backend.bodies["/admin/restaurants/1/reject"] == {"reason": "Duplicate"}


def test_restaurant_approve_plain_form(admin_client, backend):
    response = admin_client.post("/restaurants/2/approve", data={"page": "0"}, follow_redirects=False)

    assert response.headers["location"] == "/restaurants?status=ALL&page=0"
    assert [r["id"] for r in backend.restaurants] == [1]


def test_gatherings_filter(admin_client):
    response = admin_client.get("/gatherings/list?status=CONFIRMED", headers=HTMX)

    assert "Dinner 2" in response.text
    assert "Dinner 1" not in response.text
    assert "10,000 KRW" in response.text


def test_unknown_gathering_status_renders(admin_client, backend):
    backend.gatherings[0]["status"] = "POSTPONED"

    response = admin_client.get("/gatherings/list", headers=HTMX)

    assert response.status_code == 200
    assert "POSTPONED" in response.text
    assert "Dinner 1" in response.text


def test_gathering_modal(admin_client):
    response = admin_client.get("/gatherings/3/modal", headers=HTMX)

    assert "Dinner 3" in response.text
    assert "g-3" in response.text


def test_refund_completion(admin_client, backend):
    listing = admin_client.get("/refunds/list", headers=HTMX)
    assert "Participant 1" in listing.text

    response = admin_client.post("/refunds/1/complete", data={"page": "0"}, headers=HTMX)

    assert response.headers["HX-Trigger"] == "queue-changed"
    assert [r["id"] for r in backend.refunds] == [2]
    assert "Participant 1" not in admin_client.get("/refunds/list", headers=HTMX).text


def test_refund_failure_shows_error_modal(admin_client, backend):
    backend.force("POST", "/admin/refunds/2/complete", 500)

    response = admin_client.post("/refunds/2/complete", data={"page": "0"}, headers=HTMX)

    assert "Forced 500" in response.text
    assert len(backend.refunds) == 2


def test_list_backend_error_is_shown(admin_client, backend):
    backend.force("GET", "/admin/gatherings", 500)

    response = admin_client.get("/gatherings/list", headers=HTMX)

    assert response.status_code == 200
    assert "Forced 500" in response.text
    assert "Retry" in response.text


# ════════════════════════════════════════════════════════════════════════════
# Session expiry and metrics
# ════════════════════════════════════════════════════════════════════════════
def test_expired_session_redirects_and_drops_cookie(admin_client, backend, app):
    del backend.users[ADMIN_TOKEN]

    response = admin_client.get("/stats", follow_redirects=False)

    assert response.status_code == 303
    assert response.headers["location"] == "/login"
    assert admin_client.cookies.get("admin_token") is None
    assert ADMIN_TOKEN not in app.state.sessions
    assert admin_client.get("/", follow_redirects=False).headers["location"] == "/login"


def test_expired_session_htmx(admin_client, backend):
    del backend.users[ADMIN_TOKEN]

    response = admin_client.get("/reports/list", headers=HTMX, follow_redirects=False)

    assert response.headers["HX-Redirect"] == "/login"


def test_request_metrics_written(admin_client, tmp_path):
    admin_client.get("/reports/list", headers=HTMX)

    files = list((tmp_path / "logs" / "metrics").glob("*/console.jsonl"))
    assert files, "metrics JSONL not written"
    events = [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]
    kinds = {e["kind"] for e in events}
    assert "http.reports" in kinds
    assert "auth.login" in kinds
    assert all("latency_ms" in e for e in events if e["kind"] == "http.reports")


def test_metrics_follow_configured_logs_dir(backend, tmp_path, monkeypatch):
    monkeypatch.delenv("LOGS_DIR")
    configured = tmp_path / "configured"
    settings = Settings(_env_file=None, API_BASE_URL=BASE_URL, LOGS_DIR=str(configured))

    with TestClient(create_app(settings, transport=backend.transport())) as c:
        c.get("/login")

    assert list((configured / "metrics").glob("*/console.jsonl"))
    assert not (tmp_path / "logs").exists()


def test_login_page_drops_non_admin_session(client, app):
    client.cookies.set("admin_token", USER_TOKEN)

    response = client.get("/login")

    assert response.status_code == 200
    assert USER_TOKEN not in app.state.sessions
    assert len(app.state.sessions) == 0

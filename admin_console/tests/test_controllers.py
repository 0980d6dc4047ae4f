"""
Queue controller tests - list, filter, act, re-fetch.

Tests:
1. Status filter normalization and defaults
2. Lists are cached until a mutation invalidates them
3. Processing a report refreshes both the queue and the dashboard counts
4. Failed actions leave cache and records untouched
5. Approval queues, gatherings, refunds
"""
import pytest

from admin_console.controllers import (
    ChatReportsController,
    DashboardController,
    FailedRefundsController,
    GatheringsController,
    PendingRestaurantsController,
    ReceiptReviewsController,
    ReportsController,
)
from admin_console.controllers.base import QueueController
from admin_console.errors import AuthenticationError
from admin_console.invalidation import REPORTS
from admin_console.schemas import ProcessAction, ReportStatus


@pytest.fixture
def reports(admin_api, queries):
    return ReportsController(admin_api, queries)


@pytest.fixture
def dashboard(admin_api, queries):
    return DashboardController(admin_api, queries)


@pytest.mark.parametrize("raw, expected", [
    (None, "PENDING"),
    ("", None),
    ("ALL", None),
    ("resolved", "RESOLVED"),
    ("bogus", None),
])
def test_report_status_normalization(reports, raw, expected):
    assert reports.normalize_status(raw) == expected


@pytest.mark.anyio
async def test_default_filter_is_pending(reports, backend):
    view = await reports.load()

    assert view.status == "PENDING"
    assert view.total_elements == 15
    assert len(view.items) == 10
    assert view.pager.has_next
    assert backend.params("GET", "/admin/reports")[0]["status"] == "PENDING"


@pytest.mark.anyio
async def test_all_filter_last_page(reports):
    view = await reports.load(page=2, status="")

    assert view.status is None
    assert len(view.items) == 5
    assert not view.pager.has_next
    assert view.pager.label == "3 / 3"


@pytest.mark.anyio
async def test_list_is_cached(reports, backend):
    await reports.load()
    await reports.load()

    assert backend.count("GET", "/admin/reports") == 1


@pytest.mark.anyio
async def test_process_refreshes_queue_and_stats(reports, dashboard, backend):
    await reports.load()
    stats = (await dashboard.load()).data
    assert stats.pending_reports == 15

    result = await reports.process(1, ProcessAction.RESOLVE, admin_note="  spam  ", delete_review=True)

    assert result.ok
    assert backend.bodies["/admin/reports/1/process"] == {
        "action": "RESOLVE",
        "adminNote": "spam",
        "deleteReview": True,
    }
    view = await reports.load()
    assert view.total_elements == 14
    assert 1 not in [r.id for r in view.items]
    assert (await dashboard.load()).data.pending_reports == 14
    assert backend.count("GET", "/admin/reports") == 2
    assert backend.count("GET", "/admin/stats") == 2


@pytest.mark.anyio
async def test_reject_never_sends_delete_review(reports, backend):
    result = await reports.process(2, "REJECT", admin_note="", delete_review=True)

    assert result.ok
    assert backend.bodies["/admin/reports/2/process"] == {"action": "REJECT"}


@pytest.mark.anyio
async def test_failed_process_keeps_cache(reports, backend, queries):
    await reports.load(status="RESOLVED")
    resolved = next(r for r in backend.reports if r["status"] == "RESOLVED")

    result = await reports.process(resolved["id"], ProcessAction.REJECT)

    assert not result.ok
    assert result.error == "Report already processed"
    assert not queries.is_stale((REPORTS, 0, "RESOLVED"))
    assert resolved["status"] == "RESOLVED"


@pytest.mark.anyio
async def test_detail_cached_until_processed(reports, backend):
    first = await reports.detail(3)
    again = await reports.detail(3)

    assert first.data.status == ReportStatus.PENDING
    assert again.from_cache
    assert backend.count("GET", "/admin/reports/3") == 1

    await reports.process(3, ProcessAction.REJECT)
    after = await reports.detail(3)

    assert after.data.status == ReportStatus.REJECTED
    assert backend.count("GET", "/admin/reports/3") == 2


@pytest.mark.anyio
async def test_list_error_keeps_last_page(reports, backend, queries):
    await reports.load()
    queries.invalidate(REPORTS)
    backend.force("GET", "/admin/reports", 500)

    view = await reports.load()

    assert view.error == "Forced 500"
    assert len(view.items) == 10, "Last good page stays visible"


@pytest.mark.anyio
async def test_expired_session_propagates(reports, storage):
    storage.set("expired")

    with pytest.raises(AuthenticationError):
        await reports.load()


@pytest.mark.anyio
async def test_chat_report_processing(admin_api, queries, backend):
    ctrl = ChatReportsController(admin_api, queries)
    view = await ctrl.load()
    assert view.total_elements == 3

    result = await ctrl.process(1, "RESOLVE", admin_note="warned")

    assert result.ok
    assert backend.bodies["/admin/chat-reports/1/process"] == {"action": "RESOLVE", "adminNote": "warned"}
    assert (await ctrl.load()).total_elements == 2


@pytest.mark.anyio
async def test_receipt_approval_and_lookup(admin_api, queries, backend):
    ctrl = ReceiptReviewsController(admin_api, queries)

    found = await ctrl.find(2)
    assert found.restaurant_name == "Tteok House"

    assert (await ctrl.approve(2)).ok
    assert (await ctrl.reject(3)).ok

    view = await ctrl.load()
    assert [r.id for r in view.items] == [1]
    assert await ctrl.find(2) is None


@pytest.mark.anyio
async def test_restaurant_rejection_requires_reason(admin_api, queries, backend):
    ctrl = PendingRestaurantsController(admin_api, queries)
    await ctrl.load()

    result = await ctrl.reject(1, "   ")

    assert result.invalid
    assert result.error == "Rejection reason is required"
    assert backend.count("POST", "/admin/restaurants/1/reject") == 0
    assert not queries.is_stale((ctrl.root, 0, None))

    assert (await ctrl.reject(1, "Closed permanently")).ok
    assert (await ctrl.approve(2)).ok
    assert (await ctrl.load()).is_empty


@pytest.mark.anyio
async def test_gatherings_filter(admin_api, queries):
    ctrl = GatheringsController(admin_api, queries)

    everything = await ctrl.load()
    confirmed = await ctrl.load(status="confirmed")

    assert everything.status is None
    assert everything.total_elements == 4
    assert [g.id for g in confirmed.items] == [2]


@pytest.mark.anyio
async def test_refund_completion(admin_api, queries, dashboard):
    ctrl = FailedRefundsController(admin_api, queries)
    await ctrl.load()
    assert (await dashboard.load()).data.failed_refunds == 2

    result = await ctrl.mark_completed(1)

    assert result.ok
    assert [r.id for r in (await ctrl.load()).items] == [2]
    assert (await dashboard.load()).data.failed_refunds == 1


@pytest.mark.anyio
async def test_dashboard_cards(dashboard):
    result = await dashboard.load()
    cards = DashboardController.cards(result.data)

    by_label = {c.label: c for c in cards}
    assert by_label["Pending reports"].value == 15
    assert by_label["Pending reports"].link == "/reports"
    assert by_label["Failed refunds"].link == "/refunds"
    assert by_label["Total users"].link is None


def test_dashboard_cards_without_stats():
    assert all(card.value == 0 for card in DashboardController.cards(None))


def test_queue_controller_requires_fetch_page(admin_api, queries):
    with pytest.raises(TypeError):
        QueueController(admin_api, queries)


@pytest.mark.anyio
async def test_chat_report_reject(admin_api, queries, backend):
    result = await ChatReportsController(admin_api, queries).process(2, ProcessAction.REJECT)

    assert result.ok
    assert backend.bodies["/admin/chat-reports/2/process"] == {"action": "REJECT"}


@pytest.mark.anyio
async def test_non_json_list_is_a_view_error(reports, backend):
    backend.garble("GET", "/admin/reports")

    view = await reports.load()

    assert view.error == "Malformed backend response"
    assert view.items == []


@pytest.mark.anyio
async def test_unknown_reason_and_status_still_load(admin_api, queries, backend):
    backend.reports[0]["reason"] = "DOXXING"
    backend.gatherings[0]["status"] = "POSTPONED"

    report = (await ReportsController(admin_api, queries).detail(1)).data
    gatherings = await GatheringsController(admin_api, queries).load()

    assert report.reason == "DOXXING"
    assert gatherings.error is None
    assert gatherings.items[0].status_code == "POSTPONED"
    assert gatherings.items[1].status_code == "CONFIRMED"

from datetime import date, datetime

import pytest

from subtracker.domain import BillingPeriod, Subscription
from subtracker.errors import StoreError
from subtracker.events import EventBus, register_default_handlers
from subtracker.insights import high_spending_rule
from subtracker.services import DashboardService
from subtracker.store import InMemoryStore

NOW = datetime(2025, 6, 1)


def make_service(seed=None, **kwargs):
    return DashboardService(
        InMemoryStore(seed),
        bus=register_default_handlers(EventBus()),
        now=lambda: NOW,
        **kwargs,
    )


def form(name="Netflix", cost="15.99", period="monthly", start="2025-05-01"):
    return {"name": name, "cost": cost, "billing_period": period, "start_date": start, "notes": ""}


def test_dashboard_for_empty_user():
    view = make_service().dashboard("u1")

    assert view["subscriptions"] == ()
    assert view["totals"].total_yearly_spend == 0
    assert view["breakdown"] == ()
    assert view["stats"] == {
        "count": 0,
        "average_per_service": 0,
        "most_expensive": None,
        "total_monthly_equivalent": 0,
    }
    assert view["insights"] == []


def test_dashboard_with_subscriptions():
    seed = {"u1": (
        Subscription("1", "Netflix", 15.99, BillingPeriod.MONTHLY, date(2024, 1, 15)),
        Subscription("2", "Spotify", 9.99, BillingPeriod.MONTHLY, date(2025, 1, 1)),
        Subscription("3", "Microsoft 365", 99.99, BillingPeriod.YEARLY, date(2025, 3, 1)),
    )}
    view = make_service(seed).dashboard("u1")

    assert view["totals"].total_yearly_spend == pytest.approx(411.75)
    assert view["stats"]["count"] == 3
    assert view["stats"]["most_expensive"] == "Netflix"
    assert view["stats"]["average_per_service"] == pytest.approx(411.75 / 3 / 12)
    assert [i.title for i in view["insights"]] == ["Long-term Subscription Review"]
    assert "16 months" in view["insights"][0].message


def test_add_subscription_success_publishes_notice():
    svc = make_service()
    result = svc.add_subscription("u1", form())

    assert result.is_right()
    sub = result.get_or_else(None)
    assert svc.store.list("u1") == (sub,)
    assert svc.drain_notices() == ["Added Netflix"]
    assert svc.drain_notices() == []


def test_add_subscription_invalid_form_leaves_store_untouched():
    svc = make_service()
    result = svc.add_subscription("u1", form(cost=""))

    assert result.is_left()
    assert result.get_error()["error"] == "missing_fields"
    assert svc.store.list("u1") == ()
    assert svc.drain_notices() == []


def test_spending_alert_when_crossing_threshold():
    svc = make_service(alert_threshold=500)
    svc.add_subscription("u1", form("Adobe", "30"))       # 360/year
    svc.add_subscription("u1", form("Cloud", "20"))       # 600/year, crosses
    svc.add_subscription("u1", form("Music", "10"))       # still above, no repeat

    notices = svc.drain_notices()
    assert notices[:2] == ["Added Adobe", "Added Cloud"]
    assert notices[2].startswith("Yearly subscription spend is now $600.00")
    assert notices[3:] == ["Added Music"]


def test_delete_subscription_publishes_name():
    svc = make_service()
    sub = svc.add_subscription("u1", form()).get_or_else(None)
    svc.drain_notices()

    svc.delete_subscription("u1", sub.id)

    assert svc.store.list("u1") == ()
    assert svc.drain_notices() == ["Removed Netflix"]


def test_custom_rules_and_currency_flow_through():
    seed = {"u1": (Subscription("1", "Adobe", 1500.0, BillingPeriod.YEARLY, date(2025, 5, 1)),)}
    view = make_service(seed, rules=(high_spending_rule,), currency="€").dashboard("u1")

    assert len(view["insights"]) == 1
    assert "€1500.00" in view["insights"][0].message


class BrokenStore(InMemoryStore):
    def list(self, user_id):
        raise StoreError("backend unavailable")


def test_store_errors_propagate():
    svc = DashboardService(BrokenStore(), bus=EventBus())
    with pytest.raises(StoreError):
        svc.dashboard("u1")

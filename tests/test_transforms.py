from datetime import date
from pathlib import Path

from subtracker.domain import BillingPeriod, Subscription
from subtracker.filters import by_billing_period, name_contains_any
from subtracker.transforms import (
    add_subscription,
    load_seed,
    monthly_subscriptions,
    remove_subscription,
    subscription_costs,
    yearly_subscriptions,
)

SEED = Path(__file__).resolve().parent.parent / "data" / "seed.json"


def make_sub(id, name, cost, period="monthly", start="2024-01-01"):
    return Subscription(id, name, cost, BillingPeriod(period), date.fromisoformat(start))


def test_add_subscription_returns_new_tuple():
    s1 = make_sub("s1", "Netflix", 15.99)
    s2 = make_sub("s2", "Hulu", 7.99)
    subs = (s1,)
    new_subs = add_subscription(subs, s2)

    assert new_subs is not subs
    assert new_subs == (s1, s2)
    assert subs == (s1,)


def test_remove_subscription_by_id():
    subs = (make_sub("s1", "Netflix", 15.99), make_sub("s2", "Hulu", 7.99))
    assert [s.id for s in remove_subscription(subs, "s1")] == ["s2"]
    assert remove_subscription(subs, "missing") == subs


def test_period_split_preserves_order():
    subs = (
        make_sub("s1", "A", 1, "monthly"),
        make_sub("s2", "B", 2, "yearly"),
        make_sub("s3", "C", 3, "monthly"),
    )
    assert [s.id for s in monthly_subscriptions(subs)] == ["s1", "s3"]
    assert [s.id for s in yearly_subscriptions(subs)] == ["s2"]
    assert subscription_costs(subs) == (1, 2, 3)


def test_name_contains_any_is_case_insensitive_substring():
    match = name_contains_any(("netflix", "disney", "prime"))
    assert match(make_sub("s1", "Amazon Prime Video", 8.99))
    assert match(make_sub("s2", "Disney+", 10.99))
    assert match(make_sub("s3", "NETFLIX Premium", 22.99))
    assert not match(make_sub("s4", "Spotify", 9.99))


def test_by_billing_period():
    yearly = by_billing_period(BillingPeriod.YEARLY)
    assert yearly(make_sub("s1", "A", 1, "yearly"))
    assert not yearly(make_sub("s2", "B", 1, "monthly"))


def test_load_seed():
    seed = load_seed(str(SEED))

    assert "demo" in seed
    assert len(seed["demo"]) == 5
    assert seed["demo"][0].name == "Netflix"

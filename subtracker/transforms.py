import json
from typing import Dict, Tuple

from subtracker.domain import BillingPeriod, Subscription
from subtracker.filters import by_billing_period


def load_seed(path: str) -> Dict[str, Tuple[Subscription, ...]]:
    """Read seed subscriptions grouped by user id.

    The file holds ``{"users": {"<user_id>": [row, ...]}}``.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return {
        user_id: tuple(Subscription.from_dict(row) for row in rows)
        for user_id, rows in data.get("users", {}).items()
    }


def add_subscription(
    subs: Tuple[Subscription, ...], s: Subscription
) -> Tuple[Subscription, ...]:
    return subs + (s,)


def remove_subscription(
    subs: Tuple[Subscription, ...], sub_id: str
) -> Tuple[Subscription, ...]:
    return tuple(s for s in subs if s.id != sub_id)


def monthly_subscriptions(subs: Tuple[Subscription, ...]) -> Tuple[Subscription, ...]:
    return tuple(filter(by_billing_period(BillingPeriod.MONTHLY), subs))


def yearly_subscriptions(subs: Tuple[Subscription, ...]) -> Tuple[Subscription, ...]:
    return tuple(filter(by_billing_period(BillingPeriod.YEARLY), subs))


def subscription_costs(subs: Tuple[Subscription, ...]) -> Tuple[float, ...]:
    return tuple(map(lambda s: s.cost, subs))

from typing import Iterable

from subtracker.domain import BillingPeriod, Subscription


def by_billing_period(period: BillingPeriod):
    def _filter(s: Subscription) -> bool:
        return s.billing_period == period

    return _filter


def name_contains_any(keywords: Iterable[str]):
    # case-insensitive substring match, no word boundaries
    lowered = tuple(k.lower() for k in keywords)

    def _filter(s: Subscription) -> bool:
        name = s.name.lower()
        return any(k in name for k in lowered)

    return _filter

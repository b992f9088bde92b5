"""Spend aggregation over a snapshot of subscriptions.

Everything here is a pure function of its input. Nothing is rounded; the
dashboard rounds to cents when it renders.
"""
from functools import reduce
from typing import Optional, Sequence, Tuple

from subtracker.domain import AggregateTotals, BillingPeriod, SpendingItem, Subscription
from subtracker.functional import Maybe, Nothing, Some, pipe
from subtracker.transforms import monthly_subscriptions, subscription_costs, yearly_subscriptions

MONTHS_PER_YEAR = 12


def _sum(costs: Tuple[float, ...]) -> float:
    return reduce(lambda acc, c: acc + c, costs, 0.0)


def monthly_equivalent(s: Subscription) -> float:
    if s.billing_period == BillingPeriod.MONTHLY:
        return s.cost
    return s.cost / MONTHS_PER_YEAR


def aggregate(subs: Sequence[Subscription]) -> AggregateTotals:
    subs = tuple(subs)
    monthly_total = pipe(subs, monthly_subscriptions, subscription_costs, _sum)
    yearly_total = pipe(subs, yearly_subscriptions, subscription_costs, _sum)

    return AggregateTotals(
        monthly_total=monthly_total,
        yearly_total_direct=yearly_total,
        total_yearly_spend=monthly_total * MONTHS_PER_YEAR + yearly_total,
        monthly_equivalents=tuple(map(monthly_equivalent, subs)),
    )


def spending_breakdown(subs: Sequence[Subscription]) -> Tuple[SpendingItem, ...]:
    return tuple(
        SpendingItem(
            name=s.name,
            monthly_equivalent=monthly_equivalent(s),
            original_cost=s.cost,
            billing_period=s.billing_period,
        )
        for s in subs
    )


def total_monthly_equivalent(subs: Sequence[Subscription]) -> float:
    return sum((monthly_equivalent(s) for s in subs), 0.0)


def most_expensive(subs: Sequence[Subscription]) -> Maybe[Subscription]:
    """Subscription with the highest monthly equivalent; first one wins ties."""
    if not subs:
        return Nothing()
    return Some(reduce(
        lambda best, s: s if monthly_equivalent(s) > monthly_equivalent(best) else best,
        subs,
    ))


def average_per_service(
    subs: Sequence[Subscription], totals: Optional[AggregateTotals] = None
) -> float:
    """Average monthly cost per tracked service, 0 when nothing is tracked."""
    if not subs:
        return 0.0
    if totals is None:
        totals = aggregate(subs)
    return totals.total_yearly_spend / len(subs) / MONTHS_PER_YEAR

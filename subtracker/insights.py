"""Rule-based spending advice.

Each rule looks at the subscription snapshot and the aggregate totals and
returns at most one ``Insight``. ``generate_insights`` runs the rules in
declaration order, which is also the order the dashboard shows them in.
"""
import logging
from datetime import datetime, time, timedelta
from functools import reduce
from typing import Callable, List, Optional, Sequence

from subtracker.domain import AggregateTotals, Insight, InsightKind, Subscription
from subtracker.filters import name_contains_any
from subtracker.transforms import monthly_subscriptions

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
Rule = Callable[[Sequence[Subscription], AggregateTotals, datetime, str], Optional[Insight]]

HIGH_SPENDING_THRESHOLD = 1000
STREAMING_KEYWORDS = ("netflix", "hulu", "disney", "prime")
STREAMING_LIMIT = 2
MONTHLY_BILLING_LIMIT = 2
# flat guess of yearly savings per service moved to annual billing
ANNUAL_SAVINGS_PER_SERVICE = 2
TENURE_REVIEW_MONTHS = 12
APPROX_MONTH = timedelta(days=30)


def tenure_months(s: Subscription, now: datetime) -> int:
    """Whole 30-day periods between the start date (at midnight) and ``now``.

    Midnight is taken in ``now``'s own timezone. A naive clock therefore
    counts from local midnight, and an aware UTC clock from UTC midnight.
    """
    started = datetime.combine(s.start_date, time.min, tzinfo=now.tzinfo)
    return (now - started) // APPROX_MONTH


def oldest_subscription(subs: Sequence[Subscription]) -> Optional[Subscription]:
    if not subs:
        return None
    return reduce(lambda oldest, s: s if s.start_date < oldest.start_date else oldest, subs)


def high_spending_rule(subs, totals, now, currency="$") -> Optional[Insight]:
    if totals.total_yearly_spend > HIGH_SPENDING_THRESHOLD:
        return Insight(
            kind=InsightKind.WARNING,
            title="High Annual Spending",
            message=(
                f"You're spending {currency}{totals.total_yearly_spend:.2f} per year on "
                "subscriptions. Consider reviewing unused services."
            ),
            suggested_action="Review Subscriptions",
        )
    return None


def streaming_overlap_rule(subs, totals, now, currency="$") -> Optional[Insight]:
    streaming = tuple(filter(name_contains_any(STREAMING_KEYWORDS), subs))
    if len(streaming) > STREAMING_LIMIT:
        return Insight(
            kind=InsightKind.SUGGESTION,
            title="Multiple Streaming Services",
            message=(
                f"You have {len(streaming)} streaming services. "
                "You could save money by consolidating."
            ),
            suggested_action="Compare Services",
        )
    return None


def annual_billing_rule(subs, totals, now, currency="$") -> Optional[Insight]:
    count = len(monthly_subscriptions(tuple(subs)))
    if count > MONTHLY_BILLING_LIMIT:
        savings = count * ANNUAL_SAVINGS_PER_SERVICE
        return Insight(
            kind=InsightKind.TIP,
            title="Switch to Annual Billing",
            message=(
                f"Consider switching {count} monthly subscriptions to annual billing "
                f"to save ~{currency}{savings}/year."
            ),
            suggested_action="Calculate Savings",
        )
    return None


def long_tenure_rule(subs, totals, now, currency="$") -> Optional[Insight]:
    oldest = oldest_subscription(subs)
    if oldest is None:
        return None
    months = tenure_months(oldest, now)
    if months > TENURE_REVIEW_MONTHS:
        return Insight(
            kind=InsightKind.TIP,
            title="Long-term Subscription Review",
            message=(
                f"Your {oldest.name} subscription has been active for {months} months. "
                "Check if you're still getting value."
            ),
            suggested_action="Review Usage",
        )
    return None


DEFAULT_RULES: tuple[Rule, ...] = (
    high_spending_rule,
    streaming_overlap_rule,
    annual_billing_rule,
    long_tenure_rule,
)


def generate_insights(
    subs: Sequence[Subscription],
    totals: AggregateTotals,
    now: Optional[Clock] = None,
    rules: Sequence[Rule] = DEFAULT_RULES,
    currency: str = "$",
) -> List[Insight]:
    clock = now or datetime.now
    current = clock()
    subs = tuple(subs)

    insights = []
    for rule in rules:
        insight = rule(subs, totals, current, currency)
        if insight is not None:
            logger.debug("rule %s fired: %s", getattr(rule, "__name__", rule), insight.title)
            insights.append(insight)
    return insights

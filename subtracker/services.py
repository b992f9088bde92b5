import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence

from subtracker.aggregator import (
    aggregate,
    average_per_service,
    most_expensive,
    spending_breakdown,
    total_monthly_equivalent,
)
from subtracker.domain import Subscription
from subtracker.events import (
    SPENDING_ALERT,
    SUBSCRIPTION_ADDED,
    SUBSCRIPTION_DELETED,
    EventBus,
    event_bus,
)
from subtracker.functional import Either, Right, safe_subscription, validate_draft
from subtracker.insights import DEFAULT_RULES, Rule, generate_insights
from subtracker.store import SubscriptionStore

logger = logging.getLogger(__name__)


class DashboardService:
    """Facade the dashboard talks to: store access plus the pure computations.

    store: any SubscriptionStore; its errors propagate to the caller.
    bus: event bus used for user notices (defaults to the module-level bus).
    now: clock passed to the insight rules, datetime.now when omitted.
    """

    def __init__(
        self,
        store: SubscriptionStore,
        bus: Optional[EventBus] = None,
        now: Optional[Callable[[], datetime]] = None,
        rules: Sequence[Rule] = DEFAULT_RULES,
        currency: str = "$",
        alert_threshold: float = 1000,
    ):
        self.store = store
        self.bus = bus if bus is not None else event_bus
        self.now = now
        self.rules = rules
        self.currency = currency
        self.alert_threshold = alert_threshold
        self._notices: List[str] = []

    def dashboard(self, user_id: str) -> Dict[str, Any]:
        """Snapshot the user's subscriptions and derive everything the view shows."""
        subs = self.store.list(user_id)
        totals = aggregate(subs)
        return {
            "user_id": user_id,
            "subscriptions": subs,
            "totals": totals,
            "breakdown": spending_breakdown(subs),
            "stats": {
                "count": len(subs),
                "average_per_service": average_per_service(subs, totals),
                "most_expensive": most_expensive(subs).map(lambda s: s.name).get_or_else(None),
                "total_monthly_equivalent": total_monthly_equivalent(subs),
            },
            "insights": generate_insights(
                subs, totals, now=self.now, rules=self.rules, currency=self.currency
            ),
        }

    def add_subscription(self, user_id: str, form: dict) -> Either[dict, Subscription]:
        result = validate_draft(form)
        if result.is_left():
            logger.info("rejected subscription form: %s", result.get_error()["error"])
            return result

        before = aggregate(self.store.list(user_id)).total_yearly_spend
        sub = self.store.create(user_id, result.get_or_else(None))
        self._collect(self.bus.publish(SUBSCRIPTION_ADDED, {"id": sub.id, "name": sub.name}))

        after = aggregate(self.store.list(user_id)).total_yearly_spend
        if before <= self.alert_threshold < after:
            self._collect(self.bus.publish(SPENDING_ALERT, {
                "total_yearly_spend": after,
                "threshold": self.alert_threshold,
                "currency": self.currency,
            }))
        return Right(sub)

    def delete_subscription(self, user_id: str, subscription_id: str) -> None:
        name = safe_subscription(self.store.list(user_id), subscription_id) \
            .map(lambda s: s.name).get_or_else(None)
        self.store.delete(subscription_id)
        self._collect(self.bus.publish(SUBSCRIPTION_DELETED, {"id": subscription_id, "name": name}))

    def _collect(self, results: List[dict]) -> None:
        for out in results:
            if isinstance(out, dict) and out.get("notice"):
                self._notices.append(out["notice"])

    def drain_notices(self) -> List[str]:
        notices, self._notices = self._notices, []
        return notices

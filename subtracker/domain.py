import math
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from subtracker.errors import InvalidSubscription


class BillingPeriod(str, Enum):
    MONTHLY = "monthly"
    YEARLY = "yearly"


class InsightKind(str, Enum):
    WARNING = "warning"
    SUGGESTION = "suggestion"
    TIP = "tip"


def _check_fields(name, cost, billing_period, start_date) -> None:
    if not isinstance(name, str) or not name.strip():
        raise InvalidSubscription("name must be a non-empty string")
    if isinstance(cost, bool) or not isinstance(cost, (int, float)):
        raise InvalidSubscription(f"cost must be a number, got {cost!r}")
    if (isinstance(cost, float) and not math.isfinite(cost)) or cost <= 0:
        raise InvalidSubscription(f"cost must be a positive finite amount, got {cost}")
    if not isinstance(billing_period, BillingPeriod):
        raise InvalidSubscription(f"unknown billing period {billing_period!r}")
    if not isinstance(start_date, date):
        raise InvalidSubscription(f"start_date must be a date, got {start_date!r}")


@dataclass(frozen=True)
class SubscriptionDraft:
    name: str
    cost: float
    billing_period: BillingPeriod
    start_date: date
    notes: str = ""

    def __post_init__(self):
        _check_fields(self.name, self.cost, self.billing_period, self.start_date)


@dataclass(frozen=True)
class Subscription:
    id: str            # assigned by the store
    name: str
    cost: float        # per billing period
    billing_period: BillingPeriod
    start_date: date
    notes: str = ""

    def __post_init__(self):
        if not self.id:
            raise InvalidSubscription("subscription id is required")
        _check_fields(self.name, self.cost, self.billing_period, self.start_date)

    @classmethod
    def from_draft(cls, sub_id: str, draft: SubscriptionDraft) -> "Subscription":
        return cls(
            id=sub_id,
            name=draft.name,
            cost=draft.cost,
            billing_period=draft.billing_period,
            start_date=draft.start_date,
            notes=draft.notes,
        )

    @classmethod
    def from_dict(cls, row: dict) -> "Subscription":
        """Build a subscription from a stored row (ISO date, period as text)."""
        try:
            period = BillingPeriod(row["billing_period"])
            start = row["start_date"]
            if not isinstance(start, date):
                start = date.fromisoformat(str(start))
            return cls(
                id=str(row["id"]),
                name=row["name"],
                cost=row["cost"],
                billing_period=period,
                start_date=start,
                notes=row.get("notes") or "",
            )
        except KeyError as e:
            raise InvalidSubscription(f"missing field {e.args[0]!r} in {row!r}") from e
        except ValueError as e:
            raise InvalidSubscription(str(e)) from e

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "cost": self.cost,
            "billing_period": self.billing_period.value,
            "start_date": self.start_date.isoformat(),
            "notes": self.notes,
        }


@dataclass(frozen=True)
class AggregateTotals:
    monthly_total: float = 0.0
    yearly_total_direct: float = 0.0
    total_yearly_spend: float = 0.0
    monthly_equivalents: tuple[float, ...] = field(default_factory=tuple)


# One row of the spending breakdown chart
@dataclass(frozen=True)
class SpendingItem:
    name: str
    monthly_equivalent: float
    original_cost: float
    billing_period: BillingPeriod


@dataclass(frozen=True)
class Insight:
    kind: InsightKind
    title: str
    message: str
    suggested_action: Optional[str] = None

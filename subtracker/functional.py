import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Generic, Iterable, TypeVar

from subtracker.domain import BillingPeriod, Subscription, SubscriptionDraft

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return not self.is_some()


@dataclass(frozen=True)
class Some(Maybe[T]):
    value: T

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self.value))

    def get_or_else(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default


class Either(Generic[E, T], ABC):

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def get_error(self) -> E:
        pass

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()


@dataclass(frozen=True)
class Right(Either[E, T]):
    value: T

    def get_or_else(self, default: T) -> T:
        return self.value

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")


@dataclass(frozen=True)
class Left(Either[E, T]):
    error: E

    def get_or_else(self, default: T) -> T:
        return default

    def get_error(self) -> E:
        return self.error


def safe_subscription(subs: Iterable[Subscription], sub_id: str) -> Maybe[Subscription]:
    for sub in subs:
        if sub.id == sub_id:
            return Some(sub)
    return Nothing()


REQUIRED_FIELDS = ("name", "cost", "start_date")


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_draft(form: dict) -> Either[dict, SubscriptionDraft]:
    """Check raw form input and turn it into a draft ready for the store.

    Accepts strings straight from the form widgets as well as already typed
    values (float cost, ``date`` start date).
    """
    missing = [f for f in REQUIRED_FIELDS if _blank(form.get(f))]
    if missing:
        return Left({
            "error": "missing_fields",
            "message": "Please fill in all required fields",
            "fields": missing,
        })

    raw_cost = form["cost"]
    try:
        cost = float(raw_cost)
    except (TypeError, ValueError):
        return Left({
            "error": "invalid_cost",
            "message": f"Cost {raw_cost!r} is not a number",
            "cost": raw_cost,
        })
    if not math.isfinite(cost) or cost <= 0:
        return Left({
            "error": "invalid_cost",
            "message": "Cost must be a finite amount greater than zero",
            "cost": cost,
        })

    raw_period = form.get("billing_period") or BillingPeriod.MONTHLY.value
    try:
        period = BillingPeriod(raw_period)
    except ValueError:
        return Left({
            "error": "invalid_billing_period",
            "message": f"Billing period must be monthly or yearly, got {raw_period!r}",
            "billing_period": raw_period,
        })

    raw_start = form["start_date"]
    if isinstance(raw_start, date):
        start = raw_start
    else:
        try:
            start = date.fromisoformat(str(raw_start).strip())
        except ValueError:
            return Left({
                "error": "invalid_date",
                "message": f"Start date {raw_start!r} is not a valid date",
                "start_date": raw_start,
            })

    return Right(SubscriptionDraft(
        name=str(form["name"]).strip(),
        cost=cost,
        billing_period=period,
        start_date=start,
        notes=(form.get("notes") or "").strip(),
    ))


def pipe(x, *funcs):
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res

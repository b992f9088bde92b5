from typing import Callable, Dict, List, NamedTuple
from datetime import datetime

__all__ = [
    'event_bus', 'SUBSCRIPTION_ADDED', 'SUBSCRIPTION_DELETED', 'SPENDING_ALERT',
    'Event', 'EventBus', 'register_default_handlers',
]


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name, [])
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in handlers]

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if handler in self._subscribers.get(name, []):
            self._subscribers[name].remove(handler)


SUBSCRIPTION_ADDED = "SUBSCRIPTION_ADDED"
SUBSCRIPTION_DELETED = "SUBSCRIPTION_DELETED"
SPENDING_ALERT = "SPENDING_ALERT"


def subscription_added_handler(event: Event, payload: dict) -> dict:
    name = payload.get("name", "Subscription")
    return {"notice": f"Added {name}"}


def subscription_deleted_handler(event: Event, payload: dict) -> dict:
    name = payload.get("name")
    if name:
        return {"notice": f"Removed {name}"}
    return {"notice": "Subscription removed"}


def spending_alert_handler(event: Event, payload: dict) -> dict:
    total = payload.get("total_yearly_spend", 0)
    threshold = payload.get("threshold", 0)
    currency = payload.get("currency", "$")

    if threshold > 0 and total > threshold:
        return {
            "notice": (
                f"Yearly subscription spend is now {currency}{total:,.2f}, "
                f"above your {currency}{threshold:,.2f} limit"
            ),
            "total_yearly_spend": total,
            "threshold": threshold,
        }
    return {}


def register_default_handlers(bus: "EventBus") -> "EventBus":
    bus.subscribe(SUBSCRIPTION_ADDED, subscription_added_handler)
    bus.subscribe(SUBSCRIPTION_DELETED, subscription_deleted_handler)
    bus.subscribe(SPENDING_ALERT, spending_alert_handler)
    return bus


event_bus = register_default_handlers(EventBus())

"""Persistence for subscriptions, keyed by user.

The dashboard only ever talks to ``SubscriptionStore``. Ids are assigned
here, never by the aggregation or insight code.
"""
import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Tuple
from uuid import uuid4

from subtracker.domain import Subscription, SubscriptionDraft
from subtracker.errors import ConfigurationError, InvalidSubscription, StoreError
from subtracker.transforms import add_subscription, load_seed, remove_subscription

logger = logging.getLogger(__name__)


def new_subscription_id() -> str:
    return uuid4().hex


class SubscriptionStore(ABC):

    @abstractmethod
    def list(self, user_id: str) -> Tuple[Subscription, ...]:
        pass

    @abstractmethod
    def create(self, user_id: str, draft: SubscriptionDraft) -> Subscription:
        pass

    @abstractmethod
    def delete(self, subscription_id: str) -> None:
        pass


class InMemoryStore(SubscriptionStore):
    """Keeps subscriptions in process memory; nothing survives a restart."""

    def __init__(self, seed: Optional[Dict[str, Tuple[Subscription, ...]]] = None):
        self._by_user: Dict[str, Tuple[Subscription, ...]] = dict(seed or {})

    def list(self, user_id: str) -> Tuple[Subscription, ...]:
        return self._by_user.get(user_id, ())

    def create(self, user_id: str, draft: SubscriptionDraft) -> Subscription:
        sub = Subscription.from_draft(new_subscription_id(), draft)
        self._by_user[user_id] = add_subscription(self.list(user_id), sub)
        logger.info("created subscription %s for user %s", sub.id, user_id)
        return sub

    def delete(self, subscription_id: str) -> None:
        for user_id, subs in self._by_user.items():
            remaining = remove_subscription(subs, subscription_id)
            if len(remaining) != len(subs):
                self._by_user[user_id] = remaining
                logger.info("deleted subscription %s", subscription_id)
                return
        logger.debug("delete of unknown subscription %s ignored", subscription_id)


class JsonFileStore(SubscriptionStore):
    """Stores every user's subscriptions in one JSON document.

    Layout: ``{"subscriptions": [{"user_id": ..., "id": ..., ...}, ...]}``.
    A missing file is an empty store. Each write replaces the whole file.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def _read_rows(self) -> list:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"cannot read {self.path}: {e}") from e
        rows = data.get("subscriptions") if isinstance(data, dict) else None
        if not isinstance(rows, list):
            raise StoreError(f"{self.path} has no 'subscriptions' list")
        if not all(isinstance(row, dict) for row in rows):
            raise StoreError(f"{self.path} has subscription rows that are not objects")
        return rows

    def _write_rows(self, rows: list) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump({"subscriptions": rows}, f, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise StoreError(f"cannot write {self.path}: {e}") from e

    def list(self, user_id: str) -> Tuple[Subscription, ...]:
        try:
            return tuple(
                Subscription.from_dict(row)
                for row in self._read_rows()
                if row.get("user_id") == user_id
            )
        except InvalidSubscription as e:
            raise StoreError(f"bad subscription row in {self.path}: {e}") from e

    def create(self, user_id: str, draft: SubscriptionDraft) -> Subscription:
        sub = Subscription.from_draft(new_subscription_id(), draft)
        rows = self._read_rows()
        rows.append({"user_id": user_id, **sub.to_dict()})
        self._write_rows(rows)
        logger.info("created subscription %s for user %s in %s", sub.id, user_id, self.path)
        return sub

    def delete(self, subscription_id: str) -> None:
        rows = self._read_rows()
        remaining = [row for row in rows if row.get("id") != subscription_id]
        if len(remaining) == len(rows):
            logger.debug("delete of unknown subscription %s ignored", subscription_id)
            return
        self._write_rows(remaining)
        logger.info("deleted subscription %s from %s", subscription_id, self.path)


def build_store(settings) -> SubscriptionStore:
    if settings.store == "json":
        logger.info("using JSON file store at %s", settings.data_path)
        return JsonFileStore(settings.data_path)
    if settings.store == "memory":
        seed = {}
        if settings.seed_path and Path(settings.seed_path).exists():
            try:
                seed = load_seed(settings.seed_path)
            except (OSError, ValueError, InvalidSubscription) as e:
                raise StoreError(f"cannot load seed {settings.seed_path}: {e}") from e
            logger.info("seeded memory store from %s", settings.seed_path)
        return InMemoryStore(seed)
    raise ConfigurationError(f"Unknown store type: {settings.store}")

import json
import os
from abc import ABC, abstractmethod
from typing import Optional

import structlog
from pymongo.errors import PyMongoError

from microservices.cart_microservice import PersistenceUnavailable

logger = structlog.get_logger(__name__)

DEFAULT_SLOT = "cartItems"


class PersistenceAdapter(ABC):
    """A single durable key-value slot holding the serialized cart."""

    @abstractmethod
    def load(self) -> Optional[str]:
        """Return the raw stored value, or None when the slot was never written."""

    @abstractmethod
    def save(self, raw: str) -> None:
        """Overwrite the slot with raw."""


class MemoryPersistence(PersistenceAdapter):
    def __init__(self, raw: Optional[str] = None):
        self.raw = raw

    def load(self):
        return self.raw

    def save(self, raw):
        self.raw = raw


class FilePersistence(PersistenceAdapter):
    """Slots kept in one JSON document on disk, keyed by slot name.

    Several carts can share a file, each under its own key, the same way
    browser local storage holds many keys for one origin.
    """

    def __init__(self, path: str, key: str = DEFAULT_SLOT):
        self.path = path
        self.key = key

    def _read_all(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as file:
                content = file.read()
        except OSError as e:
            raise PersistenceUnavailable(f"Could not read {self.path}: {e}") from e
        if not content.strip():
            return {}
        # a corrupt file still holds other carts, saving over it would lose them
        try:
            slots = json.loads(content)
        except ValueError as e:
            logger.warning("Storage file is corrupt", path=self.path)
            raise PersistenceUnavailable(f"Storage file {self.path} is corrupt: {e}") from e
        if not isinstance(slots, dict):
            logger.warning("Storage file is not a slot mapping", path=self.path)
            raise PersistenceUnavailable(f"Storage file {self.path} is not a slot mapping")
        return slots

    def load(self):
        return self._read_all().get(self.key)

    def save(self, raw):
        slots = self._read_all()
        slots[self.key] = raw
        try:
            with open(self.path, "w", encoding="utf-8") as file:
                json.dump(slots, file)
        except OSError as e:
            raise PersistenceUnavailable(f"Could not write {self.path}: {e}") from e


class MongoSlotPersistence(PersistenceAdapter):
    # collection is a synchronous pymongo collection, the cart store never awaits
    def __init__(self, collection, key: str = DEFAULT_SLOT):
        self.collection = collection
        self.key = key

    def load(self):
        try:
            document = self.collection.find_one({"_id": self.key})
        except PyMongoError as e:
            raise PersistenceUnavailable(f"Could not read cart slot {self.key}: {e}") from e
        if document is None:
            return None
        return document.get("value")

    def save(self, raw):
        try:
            self.collection.replace_one(
                {"_id": self.key},
                {"_id": self.key, "value": raw},
                upsert=True  # create the slot on first write
            )
        except PyMongoError as e:
            raise PersistenceUnavailable(f"Could not write cart slot {self.key}: {e}") from e

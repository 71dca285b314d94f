"""
Ordered key-value stores backing the entity repositories.
"""

import copy
import json
import logging
import threading
from typing import Any, Dict, List, Optional

from ..core.exceptions import ConfigurationError, PersistenceError
from ..core.interfaces import OrderedStore
from .database import DatabaseManager

logger = logging.getLogger(__name__)


class MemoryStore(OrderedStore):
    """In-process ordered map.

    Records are deep-copied on the way in and on the way out, so nothing a
    caller holds can alias stored state.
    """

    def __init__(self, collection: str = ""):
        self._collection = collection
        self._records: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.RLock()

    def store(self, key: str, value: Dict[str, Any]) -> None:
        with self._lock:
            self._records[key] = copy.deepcopy(value)

    def fetch(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self._records.get(key)
            return copy.deepcopy(record) if record is not None else None

    def remove(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._records.pop(key, None)

    def values(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [copy.deepcopy(self._records[key]) for key in sorted(self._records)]

    def __len__(self) -> int:
        return len(self._records)


class SQLiteStore(OrderedStore):
    """One named collection inside the shared ``records`` table."""

    def __init__(self, database: DatabaseManager, collection: str):
        self._database = database
        self._collection = collection
        self._lock = threading.RLock()

    @property
    def collection(self) -> str:
        return self._collection

    def store(self, key: str, value: Dict[str, Any]) -> None:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Record for {self._collection} is not serializable: {e}")

        query = """
            INSERT INTO records (collection, id, data) VALUES (?, ?, ?)
            ON CONFLICT (collection, id) DO UPDATE SET data = excluded.data
        """
        with self._lock:
            self._database.execute_update(query, (self._collection, key, payload))
        logger.debug("Stored %s/%s", self._collection, key)

    def fetch(self, key: str) -> Optional[Dict[str, Any]]:
        query = "SELECT data FROM records WHERE collection = ? AND id = ?"
        with self._lock:
            results = self._database.execute_query(query, (self._collection, key))
        if not results:
            return None
        return json.loads(results[0]["data"])

    def remove(self, key: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            record = self.fetch(key)
            if record is None:
                return None
            self._database.execute_update(
                "DELETE FROM records WHERE collection = ? AND id = ?",
                (self._collection, key)
            )
        logger.debug("Removed %s/%s", self._collection, key)
        return record

    def values(self) -> List[Dict[str, Any]]:
        query = "SELECT data FROM records WHERE collection = ? ORDER BY id"
        with self._lock:
            results = self._database.execute_query(query, (self._collection,))
        return [json.loads(row["data"]) for row in results]

    def __len__(self) -> int:
        query = "SELECT COUNT(*) AS count FROM records WHERE collection = ?"
        results = self._database.execute_query(query, (self._collection,))
        return results[0]["count"] if results else 0


class StoreFactory:
    """Factory for creating store instances."""

    @staticmethod
    def create_store(store_type: str, collection: str,
                     database: Optional[DatabaseManager] = None) -> OrderedStore:
        """Create a store for one collection based on type."""
        if store_type.lower() == "memory":
            return MemoryStore(collection)
        elif store_type.lower() == "sqlite":
            if database is None:
                raise ConfigurationError("SQLite store requires a database")
            return SQLiteStore(database, collection)
        else:
            raise ConfigurationError(f"Unsupported store type: {store_type}")

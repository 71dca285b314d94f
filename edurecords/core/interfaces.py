"""
Abstract interfaces for the capabilities the repositories depend on.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional


# Zero-argument callable returning a globally unique opaque string.
IdFactory = Callable[[], str]


class OrderedStore(ABC):
    """Persistent ordered map from identifier to serialized record."""

    @abstractmethod
    def store(self, key: str, value: Dict[str, Any]) -> None:
        """Insert or replace the record stored under key."""
        pass

    @abstractmethod
    def fetch(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the record stored under key, or None."""
        pass

    @abstractmethod
    def remove(self, key: str) -> Optional[Dict[str, Any]]:
        """Remove and return the record stored under key, or None."""
        pass

    @abstractmethod
    def values(self) -> List[Dict[str, Any]]:
        """Return every stored record in key order."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.fetch(key) is not None


class Clock(ABC):
    """Source of unsigned 64-bit timestamps that never go backwards."""

    @abstractmethod
    def now(self) -> int:
        """Return the current timestamp."""
        pass

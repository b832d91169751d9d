"""Thread-safe building blocks for the shared ingestion state."""

from __future__ import annotations

from contextlib import contextmanager
from threading import Lock
from typing import Hashable, Iterable, Iterator


class StripedLock:
    """Fixed set of locks selected by key hash.

    Callers holding several keys always acquire their stripes in ascending
    index order, so two threads can never wait on each other in a cycle.
    """

    def __init__(self, stripes: int = 64) -> None:
        if stripes < 1:
            raise ValueError("StripedLock needs at least one stripe")
        self._locks = [Lock() for _ in range(stripes)]

    def stripe_of(self, key: Hashable) -> int:
        return hash(key) % len(self._locks)

    @contextmanager
    def hold(self, keys: Iterable[Hashable]) -> Iterator[None]:
        indexes = sorted({self.stripe_of(key) for key in keys})
        acquired: list[Lock] = []
        try:
            for index in indexes:
                lock = self._locks[index]
                lock.acquire()
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()


class AtomicCounter:
    """Integer counter safe under concurrent increments."""

    def __init__(self, value: int = 0) -> None:
        self._value = value
        self._lock = Lock()

    def add(self, delta: int = 1) -> int:
        with self._lock:
            self._value += delta
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class ConcurrentCounter:
    """Key to count mapping that forgets keys once they drop to zero."""

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._lock = Lock()

    def increment(self, key: str) -> None:
        with self._lock:
            self._counts[key] = self._counts.get(key, 0) + 1

    def decrement(self, key: str) -> None:
        with self._lock:
            current = self._counts.get(key)
            if current is None:
                return
            if current <= 1:
                del self._counts[key]
            else:
                self._counts[key] = current - 1

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)


class ConcurrentSetIndex:
    """Key to member-set mapping with atomic add/discard."""

    def __init__(self) -> None:
        self._members: dict[str, set[str]] = {}
        self._lock = Lock()

    def add(self, key: str, member: str) -> None:
        with self._lock:
            self._members.setdefault(key, set()).add(member)

    def discard(self, key: str, member: str) -> None:
        with self._lock:
            members = self._members.get(key)
            if members is None:
                return
            members.discard(member)
            if not members:
                del self._members[key]

    def snapshot(self) -> dict[str, frozenset[str]]:
        with self._lock:
            return {key: frozenset(values) for key, values in self._members.items() if values}


__all__ = ["AtomicCounter", "ConcurrentCounter", "ConcurrentSetIndex", "StripedLock"]

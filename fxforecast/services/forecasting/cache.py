from __future__ import annotations

"""In-memory forecast cache.

Purpose:
    Remember single-pair forecasts keyed on request shape so identical requests
    skip the upstream fetch.

Design:
    - Plain dict guarded by a reader/writer lock: lookups share the lock,
      store/clear hold it exclusively. The lock is only ever held around dict
      access, never across an upstream call.
    - Values are deep copies on the way in and on the way out so callers can
      mutate what they get back without touching the cached entry.
    - No eviction; entries live until clear().
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from fxforecast.models.forecast import ForecastResponse

# Currency codes are alphabetic and model names come from a closed set, so the
# underscore-joined key cannot collide across distinct requests.
_KEY_SEPARATOR = "_"


def make_cache_key(
    base_currency: str,
    target_currency: str,
    forecast_type: str,
    amount: float,
    periods: int,
) -> str:
    """Deterministic cache key; amount is truncated toward zero, not rounded."""
    return _KEY_SEPARATOR.join(
        [base_currency, target_currency, forecast_type, str(int(amount)), str(periods)]
    )


class ReadWriteLock:
    """Many concurrent readers or one writer."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._readers:
                self._cond.wait()
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ForecastCache:
    def __init__(self):
        self._lock = ReadWriteLock()
        self._entries: Dict[str, ForecastResponse] = {}

    def lookup(self, key: str) -> Optional[ForecastResponse]:
        with self._lock.read():
            entry = self._entries.get(key)
        return entry.model_copy(deep=True) if entry is not None else None

    def store(self, key: str, value: ForecastResponse) -> None:
        snapshot = value.model_copy(deep=True)
        with self._lock.write():
            self._entries[key] = snapshot

    def clear(self) -> None:
        with self._lock.write():
            self._entries = {}

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock.read():
            return key in self._entries

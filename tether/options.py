"""Per-call transport settings and per-operation overrides."""

from __future__ import annotations

import threading
import uuid
from datetime import timedelta
from enum import Enum


class TimeUnit(Enum):
    NANOSECONDS = 1e-9
    MICROSECONDS = 1e-6
    MILLISECONDS = 1e-3
    SECONDS = 1.0
    MINUTES = 60.0
    HOURS = 3600.0
    DAYS = 86400.0

    def to_seconds(self, value: float) -> float:
        return value * self.value

    def to_millis(self, value: float) -> int:
        return int(round(value * self.value * 1000))


class Options:
    """
    Settings every transport is expected to honour.

    Args:
        connect_timeout: Connection timeout value, 0 means no timeout (default: 10)
        connect_timeout_unit: Unit of ``connect_timeout`` (default: seconds)
        read_timeout: Read timeout value, 0 means no timeout (default: 60)
        read_timeout_unit: Unit of ``read_timeout`` (default: seconds)
        follow_redirects: Whether 3xx responses should be followed (default: True)

    Instances are shared across calls. Temporary per-operation settings are
    registered against a ``CallContext`` instead of mutating the instance.
    """

    def __init__(
        self,
        connect_timeout: float = 10,
        connect_timeout_unit: TimeUnit = TimeUnit.SECONDS,
        read_timeout: float = 60,
        read_timeout_unit: TimeUnit = TimeUnit.SECONDS,
        follow_redirects: bool = True,
    ) -> None:
        if connect_timeout < 0 or read_timeout < 0:
            raise ValueError("timeouts must be non-negative")
        self._connect_timeout = connect_timeout
        self._connect_timeout_unit = connect_timeout_unit
        self._read_timeout = read_timeout
        self._read_timeout_unit = read_timeout_unit
        self._follow_redirects = follow_redirects

    @classmethod
    def from_timedelta(
        cls,
        connect_timeout: timedelta,
        read_timeout: timedelta,
        follow_redirects: bool = True,
    ) -> Options:
        return cls(
            connect_timeout.total_seconds() * 1000,
            TimeUnit.MILLISECONDS,
            read_timeout.total_seconds() * 1000,
            TimeUnit.MILLISECONDS,
            follow_redirects,
        )

    @property
    def connect_timeout(self) -> float:
        return self._connect_timeout

    @property
    def connect_timeout_unit(self) -> TimeUnit:
        return self._connect_timeout_unit

    @property
    def read_timeout(self) -> float:
        return self._read_timeout

    @property
    def read_timeout_unit(self) -> TimeUnit:
        return self._read_timeout_unit

    @property
    def follow_redirects(self) -> bool:
        return self._follow_redirects

    @property
    def connect_timeout_millis(self) -> int:
        return self._connect_timeout_unit.to_millis(self._connect_timeout)

    @property
    def read_timeout_millis(self) -> int:
        return self._read_timeout_unit.to_millis(self._read_timeout)

    @property
    def connect_timeout_seconds(self) -> float:
        return self._connect_timeout_unit.to_seconds(self._connect_timeout)

    @property
    def read_timeout_seconds(self) -> float:
        return self._read_timeout_unit.to_seconds(self._read_timeout)

    def method_options(self, method_name: str, context: CallContext | None = None) -> Options:
        """
        Options for ``method_name`` within ``context``.

        Falls back to this instance when no context is given or nothing was
        registered for the operation.
        """
        if context is None:
            return self
        return context.lookup(self, method_name) or self

    def set_method_options(self, method_name: str, options: Options, context: CallContext) -> None:
        """Register ``options`` for ``method_name`` for the lifetime of ``context``."""
        context.register(self, method_name, options)

    def __repr__(self) -> str:
        return (
            f"<Options connect={self._connect_timeout}{_unit_suffix(self._connect_timeout_unit)} "
            f"read={self._read_timeout}{_unit_suffix(self._read_timeout_unit)} "
            f"follow_redirects={self._follow_redirects}>"
        )


def _unit_suffix(unit: TimeUnit) -> str:
    return {
        TimeUnit.NANOSECONDS: "ns",
        TimeUnit.MICROSECONDS: "us",
        TimeUnit.MILLISECONDS: "ms",
        TimeUnit.SECONDS: "s",
        TimeUnit.MINUTES: "m",
        TimeUnit.HOURS: "h",
        TimeUnit.DAYS: "d",
    }[unit]


class CallContext:
    """
    Scope of one logical call (or a group of calls) carrying Options overrides.

    Overrides are keyed by the base ``Options`` instance and the operation
    name, so one context can hold overrides for several clients. Clear the
    context when the scope ends; used as a context manager it clears itself
    on exit.
    """

    def __init__(self, name: str | None = None) -> None:
        self.id = name or uuid.uuid4().hex
        self._overrides: dict[tuple[int, str], tuple[Options, Options]] = {}
        self._lock = threading.Lock()

    def register(self, base: Options, method_name: str, options: Options) -> None:
        with self._lock:
            # The base is stored alongside its override to pin its id().
            self._overrides[(id(base), method_name)] = (base, options)

    def lookup(self, base: Options, method_name: str) -> Options | None:
        with self._lock:
            entry = self._overrides.get((id(base), method_name))
        return entry[1] if entry is not None else None

    def clear(self) -> None:
        with self._lock:
            self._overrides.clear()

    def __len__(self) -> int:
        return len(self._overrides)

    def __enter__(self) -> CallContext:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    def __repr__(self) -> str:
        return f"<CallContext {self.id} overrides={len(self._overrides)}>"

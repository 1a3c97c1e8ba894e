"""Timing instrumentation for table operations.

``@profile_operation(name, describe=...)`` times a call with
``perf_counter_ns``, tags it with what *describe* reports about the
arguments (usually the table shape) and with its outcome: ``"ok"``, or the
name of the exception raised, e.g. ``"Different"`` for a failed diff.  The
timing is logged at DEBUG and appended to the process-wide
:class:`OperationLog`.

Usage::

    from table_engine.telemetry.profiling import OperationLog

    table.diff(other)
    for timing in OperationLog.instance().timings("table.diff"):
        print(timing.duration_ms, timing.outcome, timing.metadata)
"""

from __future__ import annotations

import functools
import logging
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

OUTCOME_OK = "ok"


@dataclass(frozen=True)
class OperationTiming:
    """One timed call of a table operation."""

    operation: str
    duration_ms: float
    outcome: str = OUTCOME_OK
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.outcome != OUTCOME_OK


class OperationLog:
    """Bounded, thread-safe log of the most recent operation timings.

    Parameters
    ----------
    max_entries:
        Oldest timings are dropped once this many are held.
    """

    _instance: OperationLog | None = None
    _instance_lock = threading.Lock()

    def __init__(self, max_entries: int = 256) -> None:
        self._entries: deque[OperationTiming] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    @classmethod
    def instance(cls) -> OperationLog:
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = OperationLog()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the shared log (for testing)."""
        with cls._instance_lock:
            cls._instance = None

    def record(self, timing: OperationTiming) -> None:
        with self._lock:
            self._entries.append(timing)

    def timings(self, operation: str | None = None) -> list[OperationTiming]:
        """Recorded timings, oldest first, optionally only those of *operation*."""
        with self._lock:
            entries = list(self._entries)
        if operation is None:
            return entries
        return [timing for timing in entries if timing.operation == operation]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


def table_shape(table: Any, *_args: Any, **_kwargs: Any) -> dict[str, Any]:
    """``describe`` hook for operations whose first argument is a table."""
    return {"height": table.height, "width": table.width}


def profile_operation(name: str, describe: Callable[..., dict[str, Any]] | None = None) -> Callable[[F], F]:
    """Decorator that times every call of the wrapped function.

    Parameters
    ----------
    name:
        Operation name the timing is recorded under (e.g. ``"table.diff"``).
    describe:
        Called with the wrapped function's arguments before it runs; the
        returned dict becomes the timing's ``metadata``.

    Exceptions propagate unchanged; the timing records their class name as
    the outcome.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            metadata = describe(*args, **kwargs) if describe is not None else {}
            outcome = OUTCOME_OK
            start_ns = time.perf_counter_ns()
            try:
                return func(*args, **kwargs)
            except BaseException as exc:
                outcome = type(exc).__name__
                raise
            finally:
                duration_ms = (time.perf_counter_ns() - start_ns) / 1_000_000
                OperationLog.instance().record(
                    OperationTiming(name, round(duration_ms, 3), outcome, metadata)
                )
                logger.debug("PROFILE %s: %.3f ms outcome=%s %s", name, duration_ms, outcome, metadata)

        return wrapper  # type: ignore[return-value]

    return decorator

"""Timing records behind the ``--stats`` flag."""

from __future__ import annotations

import contextlib
import time
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Dict, Iterator, List, Optional

from tinyyaml.logging_utils import get_logger

logger = get_logger(__name__)


@dataclass
class TelemetryEvent:
    name: str
    status: str
    duration_ms: float
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def failed(self) -> bool:
        return self.status == "error"

    def describe(self) -> str:
        parts = [self.name, self.status, f"{self.duration_ms:.2f}ms"]
        parts.extend(f"{key}={value}" for key, value in sorted(self.details.items()))
        line = " ".join(parts)
        if self.error:
            line += f" ({self.error})"
        return line


class TelemetryCollector:
    """Collect timings for a command and for each file it touches."""

    def __init__(self) -> None:
        self.events: List[TelemetryEvent] = []

    @contextlib.contextmanager
    def track(self, name: str) -> Iterator[Dict[str, Any]]:
        """Time the enclosed block and record it as one event.

        The yielded dict becomes the event's ``details``; callers fill it in
        once they know, for example, how many documents a file held.
        """

        details: Dict[str, Any] = {}
        start = time.perf_counter()
        try:
            yield details
        except Exception as exc:
            self._finish(name, start, details, exc)
            raise
        self._finish(name, start, details)

    def _finish(
        self,
        name: str,
        start: float,
        details: Dict[str, Any],
        error: Exception | None = None,
    ) -> TelemetryEvent:
        event = TelemetryEvent(
            name=name,
            status="success" if error is None else "error",
            duration_ms=(time.perf_counter() - start) * 1000,
            error=None if error is None else str(error),
            details=details,
        )
        self.events.append(event)
        logger.debug("Telemetry recorded %s", event.describe())
        return event

    @property
    def failures(self) -> List[TelemetryEvent]:
        return [event for event in self.events if event.failed]

    def summary(self) -> List[str]:
        lines = [event.describe() for event in self.events]
        if lines:
            lines.append(f"{len(self.events)} event(s), {len(self.failures)} failed")
        return lines


def telemetry_event(name: str):
    """Decorator timing a click command on ``ctx.obj.telemetry``."""

    def decorator(func):
        @wraps(func)
        def wrapper(ctx, *args, **kwargs):
            collector = getattr(getattr(ctx, "obj", None), "telemetry", None)
            if collector is None:
                return func(ctx, *args, **kwargs)
            with collector.track(name):
                return func(ctx, *args, **kwargs)

        return wrapper

    return decorator

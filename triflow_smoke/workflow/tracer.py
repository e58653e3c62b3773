"""Step tracer — append-only log of what a run did."""

from __future__ import annotations

import logging

logger = logging.getLogger("triflow_smoke.workflow")


class StepTracer:
    """
    Ordered, append-only list of human-readable step labels.

    One tracer belongs to exactly one run. ``snapshot()`` hands out copies so
    callers can never reorder or prune the recorded steps.
    """

    def __init__(self) -> None:
        self._steps: list[str] = []

    def record(self, label: str) -> None:
        self._steps.append(label)
        logger.info("step %d: %s", len(self._steps), label)

    def snapshot(self) -> list[str]:
        return list(self._steps)

    @property
    def last(self) -> str | None:
        return self._steps[-1] if self._steps else None

    def __len__(self) -> int:
        return len(self._steps)

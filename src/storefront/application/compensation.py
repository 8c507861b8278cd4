"""Compensation list for multi-step use cases.

Each successful step that changed another resource registers an undo
action.  If a later step fails, the actions run in reverse order before
the original error propagates.  A failing undo is logged for operator
reconciliation and does not stop the remaining undos.
"""

from __future__ import annotations

from typing import Callable

import structlog

logger = structlog.get_logger(__name__)


class Compensations:

    def __init__(self, operation: str) -> None:
        self._operation = operation
        self._actions: list[tuple[str, Callable[[], None]]] = []

    def push(self, description: str, action: Callable[[], None]) -> None:
        self._actions.append((description, action))

    def unwind(self) -> tuple[int, int]:
        """Run recorded actions in reverse. Returns (run, failed)."""
        run = failed = 0
        while self._actions:
            description, action = self._actions.pop()
            try:
                action()
                run += 1
                logger.info("Compensation applied", operation=self._operation, step=description)
            except Exception:
                failed += 1
                logger.exception(
                    "Compensation failed",
                    operation=self._operation,
                    step=description,
                    reconcile=True,
                )
        return run, failed

    def __enter__(self) -> Compensations:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if exc_type is not None:
            self.unwind()
        return False

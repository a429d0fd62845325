"""Cooperative cancellation and bounded thread-pool fan-out."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TypeVar

from vaultdigest.errors import ProcessingCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


class CancellationToken:
    """Thread-safe cancellation flag checked at processing checkpoints."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ProcessingCancelled("Processing was cancelled")


def run_bounded(
    func: Callable[[T], R],
    items: Iterable[T],
    *,
    max_workers: int,
    token: CancellationToken,
) -> list[R]:
    """Apply ``func`` to every item with at most ``max_workers`` running at once.

    Results come back in completion order. The token is checked before the
    batch and before each job starts. The first exception cancels jobs that
    have not started yet and is re-raised.
    """
    pending = list(items)
    if not pending:
        return []

    token.raise_if_cancelled()

    def _job(item: T) -> R:
        token.raise_if_cancelled()
        return func(item)

    workers = max(1, min(len(pending), max_workers))
    results: list[R] = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_job, item) for item in pending]
        try:
            for future in as_completed(futures):
                results.append(future.result())
        except BaseException:
            for future in futures:
                future.cancel()
            raise

    logger.debug("Completed %d job(s) with %d worker(s)", len(results), workers)
    return results

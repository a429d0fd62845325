"""Base class for the daily, weekly and backlog processors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date, datetime, timezone
from pathlib import Path

from vaultdigest.concurrency import CancellationToken, run_bounded
from vaultdigest.config import VaultDigestConfig
from vaultdigest.summarizer import Summarizer
from vaultdigest.vault import VaultLayout, read_lines

Clock = Callable[[], date]


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


class Processor(ABC):
    """One independent processing run over the vault.

    Each ``process`` call is self-contained: it reads the vault, talks to the
    summarizer, and writes its output at the end. Callers must not run two
    processors against the same vault concurrently.
    """

    name: str = "processor"

    def __init__(
        self,
        config: VaultDigestConfig,
        summarizer: Summarizer,
        *,
        clock: Clock | None = None,
    ) -> None:
        if not config.vault.path.strip():
            raise ValueError("vault path must not be empty")
        self._config = config
        self._summarizer = summarizer
        self._clock = clock or utc_today
        self._layout = VaultLayout(config.vault)

    @property
    def layout(self) -> VaultLayout:
        return self._layout

    def today(self) -> date:
        return self._clock()

    def is_weekly_day(self, day: date) -> bool:
        return day.weekday() == self._config.schedule.weekly_day

    def read_files(
        self,
        paths: list[Path],
        token: CancellationToken,
        *,
        max_workers: int | None = None,
    ) -> list[list[str]]:
        """Read several files in parallel; per-file line lists, unordered."""
        return run_bounded(
            read_lines,
            paths,
            max_workers=max_workers or self._config.concurrency.file_workers,
            token=token,
        )

    @abstractmethod
    def process(self, token: CancellationToken) -> None:
        """Run once. Raises on I/O or summarizer failure."""

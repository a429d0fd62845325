"""Vault file layout and line-oriented Markdown I/O.

Layout (relative to the vault root)::

    <input_file>
    <archive_path>/<year>/Week_<week>/<archive_prefix><yyyy-mm-dd>.md
    <focus_path>/<year>/<focus_prefix><week>.md
    <focus_path>/<year>/<focus_prefix><week>_Summary.md

Years and weeks are ISO-8601 year/week numbers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

from vaultdigest.config import VaultConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class IsoWeek:
    """An ISO-8601 (year, week) pair."""

    year: int
    week: int

    @classmethod
    def of(cls, day: date) -> IsoWeek:
        iso = day.isocalendar()
        return cls(iso.year, iso.week)

    @property
    def monday(self) -> date:
        return date.fromisocalendar(self.year, self.week, 1)

    def previous(self) -> IsoWeek:
        return IsoWeek.of(self.monday - timedelta(weeks=1))

    def recent(self, count: int) -> list[IsoWeek]:
        """This week and the ``count - 1`` weeks before it, oldest first."""
        return [IsoWeek.of(self.monday - timedelta(weeks=n)) for n in range(count - 1, -1, -1)]

    def __str__(self) -> str:
        return f"{self.year}-W{self.week:02d}"


class VaultLayout:
    """Resolves every file path the processors read or write."""

    def __init__(self, config: VaultConfig) -> None:
        self._config = config
        self.root = config.root

    @property
    def inbox(self) -> Path:
        return self.root / self._config.input_file

    def archive_dir(self, week: IsoWeek) -> Path:
        return self.root / self._config.archive_path / str(week.year) / f"Week_{week.week}"

    def archive_file(self, day: date) -> Path:
        name = f"{self._config.archive_prefix}{day.isoformat()}.md"
        return self.archive_dir(IsoWeek.of(day)) / name

    def focus_file(self, week: IsoWeek) -> Path:
        return self._focus_dir(week) / f"{self._config.focus_prefix}{week.week}.md"

    def summary_file(self, week: IsoWeek) -> Path:
        return self._focus_dir(week) / f"{self._config.focus_prefix}{week.week}_Summary.md"

    def _focus_dir(self, week: IsoWeek) -> Path:
        return self.root / self._config.focus_path / str(week.year)


def read_lines(path: Path) -> list[str]:
    """Read a text file as a list of lines without line terminators."""
    return path.read_text(encoding="utf-8").splitlines()


def write_lines(path: Path, lines: list[str], *, append: bool = False) -> None:
    """Write lines, each terminated by a newline, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = "a" if append else "w"
    with open(path, mode, encoding="utf-8") as f:
        for line in lines:
            f.write(line)
            f.write("\n")
    logger.debug("%s %d line(s) to %s", "Appended" if append else "Wrote", len(lines), path)


def markdown_files(directory: Path) -> list[Path]:
    """Top-level ``*.md`` files in a directory, sorted by name."""
    return sorted(p for p in directory.glob("*.md") if p.is_file())

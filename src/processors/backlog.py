"""Backlog review of open tasks from the last four ISO weeks."""

from __future__ import annotations

import logging

from vaultdigest.concurrency import CancellationToken, run_bounded
from vaultdigest.processors.base import Processor
from vaultdigest.tags import TASK_TAG, hashtag, is_completed_task
from vaultdigest.vault import IsoWeek, markdown_files, write_lines

logger = logging.getLogger(__name__)

BACKLOG_WEEKS = 4
FILES_PER_WEEK_WORKERS = 4


def open_task_lines(lines: list[str]) -> list[str]:
    """Lines carrying ``#task`` that are not checked off."""
    needle = hashtag(TASK_TAG)
    return [
        line
        for line in lines
        if line.strip() and needle in line.casefold() and not is_completed_task(line)
    ]


def dedupe_casefold(lines: list[str]) -> list[str]:
    """Drop lines equal to an earlier one ignoring case; whitespace is significant."""
    seen: set[str] = set()
    unique: list[str] = []
    for line in lines:
        key = line.casefold()
        if key not in seen:
            seen.add(key)
            unique.append(line)
    return unique


class BacklogProcessor(Processor):
    """Appends a backlog review to the current week's focus file."""

    name = "backlog"

    def process(self, token: CancellationToken) -> None:
        logger.info("Starting backlog review")

        today = self.today()
        if not self.is_weekly_day(today):
            logger.info("Today is not the weekly review day, skipping backlog review")
            return

        current = IsoWeek.of(today)
        weeks = current.recent(BACKLOG_WEEKS)
        logger.info("Reviewing backlog from week %s to %s", weeks[0], weeks[-1])

        output_path = self.layout.focus_file(current)
        if not output_path.exists():
            logger.info("Weekly focus file not found: %s", output_path)
            return

        per_week = run_bounded(
            lambda week: self._week_tasks(week, token),
            weeks,
            max_workers=min(len(weeks), self._config.concurrency.file_workers),
            token=token,
        )
        tasks = dedupe_casefold([line for lines in per_week for line in lines])

        if not tasks:
            logger.info("No backlog tasks found")
            return

        logger.info("Found %d backlog tasks", len(tasks))

        token.raise_if_cancelled()

        review = self._summarizer.summarize_patterns(
            self._config.prompts.backlog_review,
            "\n".join(tasks),
        )

        write_lines(output_path, ["---\n", "## 📋 Task Backlog Review", review], append=True)
        logger.info("Backlog review completed, appended to %s", output_path)

    def _week_tasks(self, week: IsoWeek, token: CancellationToken) -> list[str]:
        archive_dir = self.layout.archive_dir(week)
        if not archive_dir.is_dir():
            logger.debug("Archive directory not found for week %s: %s", week, archive_dir)
            return []

        files = markdown_files(archive_dir)
        logger.debug("Processing %d files for week %s", len(files), week)

        found: list[str] = []
        for lines in self.read_files(files, token, max_workers=FILES_PER_WEEK_WORKERS):
            found.extend(open_task_lines(lines))
        return found

"""Daily inbox processing.

Turns the day's inbox into a summarized section of the week's focus file,
archives what was processed, and prunes the inbox down to ignored lines.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date

from vaultdigest.concurrency import CancellationToken, run_bounded
from vaultdigest.config import VaultDigestConfig
from vaultdigest.processors.base import Clock, Processor
from vaultdigest.summarizer import Summarizer
from vaultdigest.tags import (
    LOOKUP_TAG,
    TASK_TAG,
    TaskClassification,
    classify_tasks,
    extract_tagged_sections,
    find_group,
    hashtag,
    is_completed_task,
    new_tag_groups,
)
from vaultdigest.vault import IsoWeek, read_lines, write_lines

logger = logging.getLogger(__name__)


@dataclass
class InboxSplit:
    """Inbox lines partitioned by the ignore prefix."""

    ignored: list[str] = field(default_factory=list)
    to_process: list[str] = field(default_factory=list)


def split_inbox(lines: list[str], ignore_prefix: str) -> InboxSplit:
    """Separate lines starting (after indentation) with the ignore prefix."""
    split = InboxSplit()
    prefix = ignore_prefix.casefold()
    for line in lines:
        if line.lstrip().casefold().startswith(prefix):
            split.ignored.append(line)
        else:
            split.to_process.append(line)
    return split


def general_content(lines: list[str]) -> list[str]:
    """Lines worth a general summary: no blanks, done tasks, or lookups."""
    lookup = hashtag(LOOKUP_TAG)
    return [
        line
        for line in lines
        if line.strip()
        and not is_completed_task(line)
        and lookup not in line.casefold()
    ]


def format_daily_section(
    day: date,
    week: IsoWeek,
    *,
    summary: str,
    groups: dict[str, list[str]],
    tasks: TaskClassification,
    lookups: list[tuple[str, str]],
    new_file: bool,
) -> list[str]:
    """Build the Markdown lines appended to the weekly focus file."""
    output: list[str] = []
    if new_file:
        output.append(f"# 📝 Weekly Focus - {week.week}")

    output.append("")
    output.append(f"# 🔥 Day - {day.isoformat()}")

    if summary:
        output.append(f"\n## Summary\n{summary}")

    for tag, lines in groups.items():
        if lines:
            output.append(f"\n## {tag} Notes")
            output.extend(lines)

    if tasks:
        output.append("\n## Task Summary")
        if tasks.completed:
            output.append("**Completed:**")
            output.extend(tasks.completed)
        if tasks.pending:
            output.append("\n**Pending:**")
            output.extend(tasks.pending)

    if lookups:
        output.append("\n## Lookup Results")
        for query, response in lookups:
            output.append(f"{query}:> {response}")
            output.append("")

    output.append("")
    return output


class DailyProcessor(Processor):
    """Processes the inbox file once per run."""

    name = "daily"

    def __init__(
        self,
        config: VaultDigestConfig,
        summarizer: Summarizer,
        *,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(config, summarizer, clock=clock)
        if not config.vault.input_file.strip():
            raise ValueError("input file must not be empty")
        logger.debug(
            "DailyProcessor initialized with vault: %s, input: %s",
            self.layout.root,
            config.vault.input_file,
        )

    def process(self, token: CancellationToken) -> None:
        logger.info("Starting daily processing")
        inbox = self.layout.inbox

        if not inbox.exists():
            logger.info("Inbox file does not exist, nothing to process")
            return

        all_lines = read_lines(inbox)
        if not all_lines:
            logger.info("Inbox is empty, nothing to process")
            return

        logger.info("Processing %d lines from inbox", len(all_lines))

        today = self.today()
        week = IsoWeek.of(today)

        split = split_inbox(all_lines, self._config.vault.ignore_prefix)
        logger.debug(
            "Ignored %d lines with prefix %s", len(split.ignored), self._config.vault.ignore_prefix
        )

        groups = extract_tagged_sections(new_tag_groups(self._config.tags), split.to_process)
        for tag, lines in groups.items():
            if lines:
                logger.info("Found %d lines with tag #%s", len(lines), tag)

        content = general_content(split.to_process)

        token.raise_if_cancelled()

        summary = self._summarizer.summarize("\n".join(content)) if content else ""

        lookups = self._run_lookups(find_group(groups, LOOKUP_TAG) or [], token)

        tasks = classify_tasks(find_group(groups, TASK_TAG) or [])
        if find_group(groups, TASK_TAG) is not None:
            logger.info(
                "Tasks: %d completed, %d pending", len(tasks.completed), len(tasks.pending)
            )

        focus_path = self.layout.focus_file(week)
        output = format_daily_section(
            today,
            week,
            summary=summary,
            groups=groups,
            tasks=tasks,
            lookups=lookups,
            new_file=not focus_path.exists(),
        )

        token.raise_if_cancelled()

        write_lines(focus_path, output, append=True)
        logger.info("Wrote daily summary to %s", focus_path)

        write_lines(self.layout.archive_file(today), split.to_process)
        write_lines(inbox, split.ignored)

        logger.info(
            "Daily processing completed successfully. Archived %d lines", len(split.to_process)
        )

    def _run_lookups(
        self, queries: list[str], token: CancellationToken
    ) -> list[tuple[str, str]]:
        if not queries:
            return []

        logger.info("Processing %d lookup queries", len(queries))

        def _lookup(query: str) -> tuple[str, str]:
            return query, self._summarizer.lookup(query)

        return run_bounded(
            _lookup,
            queries,
            max_workers=self._config.concurrency.lookup_workers,
            token=token,
        )

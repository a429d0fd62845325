"""Weekly digest of the previous ISO week's archive."""

from __future__ import annotations

import logging

from vaultdigest.concurrency import CancellationToken, run_bounded
from vaultdigest.processors.base import Processor
from vaultdigest.tags import (
    TASK_TAG,
    extract_tagged_sections,
    find_group,
    is_pending_task,
    new_tag_groups,
)
from vaultdigest.vault import IsoWeek, markdown_files, write_lines

logger = logging.getLogger(__name__)


class WeeklyProcessor(Processor):
    """Summarizes last week's archived days into a ``_Summary`` file.

    Only runs on the configured weekly day. Output is written once at the
    end, so a failed summarizer call leaves the summary file untouched.
    """

    name = "weekly"

    def process(self, token: CancellationToken) -> None:
        logger.info("Starting weekly processing")

        today = self.today()
        if not self.is_weekly_day(today):
            logger.info("Today is not the weekly review day, skipping weekly summary")
            return

        week = IsoWeek.of(today).previous()
        archive_dir = self.layout.archive_dir(week)
        if not archive_dir.is_dir():
            logger.info("Archive directory not found: %s", archive_dir)
            return

        files = markdown_files(archive_dir)
        logger.info("Processing %d files for week %d", len(files), week.week)
        if not files:
            logger.info("No markdown files found in %s", archive_dir)
            return

        all_lines = [line for lines in self.read_files(files, token) for line in lines]
        if not any(line.strip() for line in all_lines):
            logger.info("Archive for week %s has no content, skipping weekly summary", week)
            return

        grouped = extract_tagged_sections(new_tag_groups(self._config.tags), all_lines)

        tag_summaries = self._summarize_tags(grouped, token)

        output = ["## 🧠 Weekly Tag Summaries"]
        for tag in sorted(tag_summaries, key=str.casefold):
            output.append(f"\n### {tag} Summary\n{tag_summaries[tag]}")

        token.raise_if_cancelled()

        logger.info("Generating weekly coaching reflection")
        reflection = self._summarizer.summarize_patterns(
            self._config.prompts.weekly_coach,
            "\n".join(all_lines),
        )
        output.append("\n## 🎓 Weekly Coaching Reflection\n")
        output.append(reflection)

        task_lines = find_group(grouped, TASK_TAG) if self._config.find_tag(TASK_TAG) else None
        unfinished = [line for line in task_lines or [] if is_pending_task(line)]
        if unfinished:
            token.raise_if_cancelled()
            logger.info("Generating intentions from %d unfinished tasks", len(unfinished))
            intentions = self._summarizer.summarize_patterns(
                self._config.prompts.weekly_intentions,
                "\n".join(unfinished),
            )
            output.append("\n## 🔭 Intentions for Next Week")
            output.append(intentions)

        output_path = self.layout.summary_file(week)
        write_lines(output_path, output, append=True)

        logger.info("Weekly processing completed, wrote %s", output_path)

    def _summarize_tags(
        self, grouped: dict[str, list[str]], token: CancellationToken
    ) -> dict[str, str]:
        """One pattern summary per non-empty tag group, at most 3 in flight."""
        to_process = [(tag, lines) for tag, lines in grouped.items() if lines]

        def _summarize(item: tuple[str, list[str]]) -> tuple[str, str]:
            tag, lines = item
            logger.info("Summarizing %d lines for tag #%s", len(lines), tag)
            tag_config = self._config.find_tag(tag)
            prompt = (tag_config.prompt if tag_config else None) or (
                self._config.prompts.weekly_default
            )
            return tag, self._summarizer.summarize_patterns(prompt, "\n".join(lines))

        results = run_bounded(
            _summarize,
            to_process,
            max_workers=min(self._config.concurrency.tag_summary_workers, 3),
            token=token,
        )
        return dict(results)

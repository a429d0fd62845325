"""Tests for the weekly digest processor."""

from datetime import date, timedelta
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from vaultdigest.concurrency import CancellationToken
from vaultdigest.config import TagConfig
from vaultdigest.errors import LLMError
from vaultdigest.processors.daily import DailyProcessor
from vaultdigest.processors.weekly import WeeklyProcessor
from vaultdigest.summarizer import LLMSummarizer

MONDAY = date(2026, 10, 19)  # ISO week 43, so the digest covers week 42


def _archive_dir(root: Path, year: int = 2026, week: int = 42) -> Path:
    path = root / "Archive" / str(year) / f"Week_{week}"
    path.mkdir(parents=True, exist_ok=True)
    return path


def _summary_file(root: Path, year: int = 2026, week: int = 42) -> Path:
    return root / "Focuses" / str(year) / f"Weekly Focus - {week}_Summary.md"


def _run(config, summarizer, day: date = MONDAY) -> None:
    WeeklyProcessor(config, summarizer, clock=lambda: day).process(CancellationToken())


class TestWeeklyProcessor:
    @pytest.mark.parametrize("offset", range(1, 7))
    def test_noop_on_other_weekdays(self, config, summarizer, tmp_path, offset):
        archive = _archive_dir(tmp_path)
        (archive / "day.md").write_text("- [ ] thing #task\n")

        _run(config, summarizer, MONDAY + timedelta(days=offset))

        assert summarizer.calls == []
        assert not (tmp_path / "Focuses").exists()

    def test_noop_without_archive_dir(self, config, summarizer, tmp_path):
        _run(config, summarizer)

        assert summarizer.calls == []
        assert not _summary_file(tmp_path).exists()

    def test_noop_with_empty_archive_dir(self, config, summarizer, tmp_path):
        archive = _archive_dir(tmp_path)
        (archive / "notes.txt").write_text("not markdown #task")

        _run(config, summarizer)

        assert summarizer.calls == []
        assert not _summary_file(tmp_path).exists()

    def test_aggregates_two_days(self, config, summarizer, tmp_path):
        archive = _archive_dir(tmp_path)
        (archive / "Memory Archive - 2026-10-12.md").write_text("Buy milk #task\n")
        (archive / "Memory Archive - 2026-10-13.md").write_text("Call bank #task\nrandom\n")

        _run(config, summarizer)

        text = _summary_file(tmp_path).read_text(encoding="utf-8")
        assert text.startswith("## 🧠 Weekly Tag Summaries\n")
        assert "\n### task Summary\npattern summary\n" in text
        assert "\n## 🎓 Weekly Coaching Reflection\n" in text

        task_call = [c for c in summarizer.calls_of("patterns") if c[1] == "weekly-prompt"]
        assert len(task_call) == 1
        assert sorted(task_call[0][2].split("\n")) == ["Buy milk #task", "Call bank #task"]

        coach = [c for c in summarizer.calls_of("patterns") if c[1] == "coach-prompt"]
        assert len(coach) == 1
        assert sorted(coach[0][2].split("\n")) == ["Buy milk #task", "Call bank #task", "random"]

    def test_coaching_reflection_without_tags(self, config, summarizer, tmp_path):
        (_archive_dir(tmp_path) / "day.md").write_text("just a note\n")

        _run(config, summarizer)

        text = _summary_file(tmp_path).read_text(encoding="utf-8")
        assert "### " not in text
        assert "## 🎓 Weekly Coaching Reflection" in text
        assert [c[1] for c in summarizer.calls_of("patterns")] == ["coach-prompt"]

    def test_tag_prompt_and_alphabetical_order(self, config, summarizer, tmp_path):
        config.tags = [
            TagConfig(name="zeta"),
            TagConfig(name="Alpha", prompt="alpha-prompt"),
            TagConfig(name="beta"),
        ]
        (_archive_dir(tmp_path) / "day.md").write_text("z #zeta\na #alpha\nb #beta\n")

        _run(config, summarizer)

        text = _summary_file(tmp_path).read_text(encoding="utf-8")
        positions = [text.index(f"### {tag} Summary") for tag in ("Alpha", "beta", "zeta")]
        assert positions == sorted(positions)

        prompts = sorted(c[1] for c in summarizer.calls_of("patterns"))
        assert prompts == ["alpha-prompt", "coach-prompt", "weekly-prompt", "weekly-prompt"]

    def test_intentions_for_unfinished_tasks(self, config, summarizer, tmp_path):
        (_archive_dir(tmp_path) / "day.md").write_text(
            "- [ ] Write report #task\n- [x] Paid rent #task\nplain #task\n"
        )

        _run(config, summarizer)

        intentions = [c for c in summarizer.calls_of("patterns") if c[1] == "intentions-prompt"]
        assert intentions == [("patterns", "intentions-prompt", "- [ ] Write report #task")]
        assert "\n## 🔭 Intentions for Next Week\n" in _summary_file(tmp_path).read_text(
            encoding="utf-8"
        )

    def test_no_intentions_when_all_done(self, config, summarizer, tmp_path):
        (_archive_dir(tmp_path) / "day.md").write_text("- [x] Paid rent #task\n")

        _run(config, summarizer)

        assert "Intentions" not in _summary_file(tmp_path).read_text(encoding="utf-8")

    def test_no_intentions_without_task_tag(self, config, summarizer, tmp_path):
        config.tags = [TagConfig(name="idea")]
        (_archive_dir(tmp_path) / "day.md").write_text("- [ ] Write report #task\n")

        _run(config, summarizer)

        assert "intentions-prompt" not in [c[1] for c in summarizer.calls_of("patterns")]

    def test_appends_to_existing_summary(self, config, summarizer, tmp_path):
        (_archive_dir(tmp_path) / "day.md").write_text("note\n")
        summary = _summary_file(tmp_path)
        summary.parent.mkdir(parents=True)
        summary.write_text("earlier\n")

        _run(config, summarizer)

        assert summary.read_text(encoding="utf-8").startswith("earlier\n## 🧠 Weekly Tag Summaries")

    def test_failure_writes_nothing(self, config, make_summarizer, tmp_path):
        summarizer = make_summarizer(fail_with=LLMError("api down"))
        (_archive_dir(tmp_path) / "day.md").write_text("a #task\n")

        with pytest.raises(LLMError):
            _run(config, summarizer)

        assert not _summary_file(tmp_path).exists()

    def test_previous_week_across_year_boundary(self, config, summarizer, tmp_path):
        # Monday 2026-01-05 is 2026-W02; Monday 2025-12-29 is 2026-W01
        archive = _archive_dir(tmp_path, year=2026, week=1)
        (archive / "day.md").write_text("note\n")

        _run(config, summarizer, date(2026, 1, 5))

        assert _summary_file(tmp_path, year=2026, week=1).exists()

    def test_week_one_digests_last_week_of_previous_year(self, config, summarizer, tmp_path):
        archive = _archive_dir(tmp_path, year=2025, week=52)
        (archive / "day.md").write_text("note\n")

        _run(config, summarizer, date(2025, 12, 29))

        assert _summary_file(tmp_path, year=2025, week=52).exists()

    def test_blank_archive_is_noop(self, config, summarizer, tmp_path):
        archive = _archive_dir(tmp_path)
        (archive / "Memory Archive - 2026-10-13.md").write_text("")
        (archive / "Memory Archive - 2026-10-14.md").write_text("\n   \n")

        _run(config, summarizer)

        assert summarizer.calls == []
        assert not _summary_file(tmp_path).exists()

    @patch("vaultdigest.summarizer.call_llm", return_value="response")
    def test_after_ignore_only_day(self, mock_call: MagicMock, config, tmp_path):
        (tmp_path / "Inbox.md").write_text("@ignore only\n")
        summarizer = LLMSummarizer(config)

        DailyProcessor(config, summarizer, clock=lambda: date(2026, 10, 13)).process(
            CancellationToken()
        )
        assert (tmp_path / "Archive" / "2026" / "Week_42").is_dir()

        _run(config, summarizer)

        mock_call.assert_not_called()
        assert not _summary_file(tmp_path).exists()

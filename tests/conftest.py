"""Shared fixtures: a recording fake summarizer and a temp vault config."""

from __future__ import annotations

import threading

import pytest

from vaultdigest.config import VaultDigestConfig


class FakeSummarizer:
    """Summarizer double that records every call."""

    def __init__(
        self,
        *,
        summary: str = "daily summary",
        patterns: str = "pattern summary",
        lookups: dict[str, str] | None = None,
        fail_with: Exception | None = None,
    ) -> None:
        self.summary = summary
        self.patterns = patterns
        self.lookups = lookups or {}
        self.fail_with = fail_with
        self.calls: list[tuple[str, ...]] = []
        self._lock = threading.Lock()

    def _record(self, *call: str) -> None:
        with self._lock:
            self.calls.append(call)
        if self.fail_with is not None:
            raise self.fail_with

    def summarize(self, content: str) -> str:
        self._record("summarize", content)
        return self.summary

    def lookup(self, query: str) -> str:
        self._record("lookup", query)
        return self.lookups.get(query, f"[lookup: {query}]")

    def summarize_patterns(self, system_prompt: str, content: str) -> str:
        self._record("patterns", system_prompt, content)
        return self.patterns

    def calls_of(self, kind: str) -> list[tuple[str, ...]]:
        return [c for c in self.calls if c[0] == kind]


@pytest.fixture
def summarizer() -> FakeSummarizer:
    return FakeSummarizer()


@pytest.fixture
def make_summarizer() -> type[FakeSummarizer]:
    """The fake class itself, for tests that need custom responses."""
    return FakeSummarizer


@pytest.fixture
def config(tmp_path) -> VaultDigestConfig:
    """A valid config rooted at a temporary vault."""
    return VaultDigestConfig.model_validate(
        {
            "vault": {"path": str(tmp_path), "input_file": "Inbox.md"},
            "user": {"name": "TestUser"},
            "tags": [{"name": "task"}, {"name": "lookup"}, {"name": "idea"}],
            "prompts": {
                "daily": "daily-prompt",
                "weekly_default": "weekly-prompt",
                "weekly_coach": "coach-prompt",
                "weekly_intentions": "intentions-prompt",
                "backlog_review": "backlog-prompt",
            },
        }
    )

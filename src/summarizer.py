"""Summarizer contract and the Claude-backed implementation.

Processors only depend on the :class:`Summarizer` protocol; tests pass a
fake, the CLI passes :class:`LLMSummarizer`.
"""

from __future__ import annotations

import logging
import re
from typing import Protocol

from vaultdigest.config import VaultDigestConfig
from vaultdigest.llm import call_llm
from vaultdigest.prompts import LOOKUP_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

_USER_NAME_RE = re.compile(re.escape("{userName}"), re.IGNORECASE)


class Summarizer(Protocol):
    """Request/response text generation used by the processors.

    Single attempt per call; failures propagate as exceptions.
    """

    def summarize(self, content: str) -> str:
        """General daily summary of inbox content."""
        ...

    def lookup(self, query: str) -> str:
        """Expand or explain a single query."""
        ...

    def summarize_patterns(self, system_prompt: str, content: str) -> str:
        """Summarize content under a caller-supplied system prompt."""
        ...


def replace_user_name(text: str, name: str) -> str:
    """Replace ``{userName}`` (any casing) with ``name``."""
    if not text or not name:
        return text
    return _USER_NAME_RE.sub(lambda _m: name, text)


def _require_text(value: str, what: str) -> None:
    if not value or not value.strip():
        raise ValueError(f"{what} must not be blank")


class LLMSummarizer:
    """Summarizer that calls Claude through :func:`vaultdigest.llm.call_llm`."""

    def __init__(self, config: VaultDigestConfig) -> None:
        self._config = config
        self._user_name = config.user.name

    def summarize(self, content: str) -> str:
        _require_text(content, "content")
        logger.info("Summarizing inbox content (%d characters)", len(content))
        content = replace_user_name(content, self._user_name)
        result = self._call(
            self._config.prompts.daily,
            f"Here is the vault inbox content:\n\n{content}",
            label="daily summary",
        )
        logger.info("Summary complete (%d characters)", len(result))
        return result

    def lookup(self, query: str) -> str:
        _require_text(query, "query")
        logger.info("Performing lookup: %s", query)
        query = replace_user_name(query, self._user_name)
        return self._call(
            LOOKUP_SYSTEM_PROMPT,
            f"Please expand or explain: {query}",
            label="lookup",
        )

    def summarize_patterns(self, system_prompt: str, content: str) -> str:
        _require_text(system_prompt, "system prompt")
        _require_text(content, "content")
        logger.info("Summarizing patterns (%d characters)", len(content))
        return self._call(
            system_prompt,
            replace_user_name(content, self._user_name),
            label="patterns",
        )

    def _call(self, system_prompt: str, user_prompt: str, *, label: str) -> str:
        llm = self._config.llm
        return call_llm(
            replace_user_name(system_prompt, self._user_name),
            user_prompt,
            model=llm.model,
            api_key=llm.api_key,
            timeout=llm.timeout,
            label=label,
        )

"""Exception hierarchy for vaultdigest.

Precondition misses (no inbox, wrong weekday, empty archive) are not errors;
processors log them and return. Everything here propagates to the CLI.
"""

from __future__ import annotations


class VaultDigestError(Exception):
    """Base error for vaultdigest."""


class ConfigError(VaultDigestError):
    """Raised when required configuration is missing or invalid."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("Invalid configuration: " + "; ".join(problems))


class LLMError(VaultDigestError):
    """Raised when an LLM call fails."""


class ProcessingCancelled(VaultDigestError):
    """Raised at a cancellation checkpoint once cancellation was requested."""

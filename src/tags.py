"""Hashtag extraction and task-checkbox classification.

Tags are a runtime-configured list, so tag groups are a plain dict keyed by
the configured tag name, in configuration order. Key comparison is
case-insensitive everywhere.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from vaultdigest.config import TagConfig

TASK_TAG = "task"
LOOKUP_TAG = "lookup"

COMPLETED_MARKERS = ("- [x]", "- [X]")
PENDING_MARKER = "- [ ]"


def hashtag(name: str) -> str:
    """Return the ``#name`` form of a tag, lower-cased."""
    if not name or not name.strip():
        raise ValueError("tag name must not be blank")
    return f"#{name.lower()}"


def new_tag_groups(tags: Iterable[TagConfig]) -> dict[str, list[str]]:
    """Build empty groups for every configured tag, keeping config order."""
    return {tag.name: [] for tag in tags}


def find_group(groups: dict[str, list[str]], name: str) -> list[str] | None:
    """Case-insensitive lookup of a tag group."""
    key = name.casefold()
    for tag_name, lines in groups.items():
        if tag_name.casefold() == key:
            return lines
    return None


def extract_tagged_sections(
    groups: dict[str, list[str]],
    lines: Iterable[str],
) -> dict[str, list[str]]:
    """Route tagged lines into their tag group.

    A line goes to the first tag (in ``groups`` order) whose ``#name`` occurs
    anywhere in it, compared case-insensitively. Matching is a plain
    substring test, so ``#tasks`` also lands in ``task``. Blank lines are
    skipped and matched lines are stored stripped.

    Mutates and returns ``groups``, so callers can accumulate several
    batches into one mapping.
    """
    needles = [(hashtag(name).casefold(), name) for name in groups]

    for line in lines:
        if not line.strip():
            continue
        folded = line.casefold()
        for needle, name in needles:
            if needle in folded:
                groups[name].append(line.strip())
                break

    return groups


def is_completed_task(line: str) -> bool:
    """True for ``- [x]`` / ``- [X]`` checkbox lines."""
    return line.lstrip().startswith(COMPLETED_MARKERS)


def is_pending_task(line: str) -> bool:
    """True for unchecked ``- [ ]`` checkbox lines."""
    return line.lstrip().startswith(PENDING_MARKER)


@dataclass
class TaskClassification:
    """Partition of task lines by checkbox state."""

    completed: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.completed or self.pending)


def classify_tasks(lines: Iterable[str]) -> TaskClassification:
    """Split task lines into completed and pending.

    Anything that is not a checked checkbox counts as pending, including
    plain ``#task`` lines without a checkbox.
    """
    result = TaskClassification()
    for line in lines:
        if is_completed_task(line):
            result.completed.append(line)
        else:
            result.pending.append(line)
    return result

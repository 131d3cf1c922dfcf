"""Conventional-commit helpers.

Parsing of ``git diff --name-status`` summaries, the local fallback message,
and the rewrite of free-form suggestions into ``type(scope): description``.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple

__all__ = [
    "COMMIT_TYPES",
    "DEFAULT_TYPE",
    "CONVENTIONAL_PATTERN",
    "TYPE_RULES",
    "ChangedFile",
    "parse_diff_summary",
    "extract_changed_files",
    "fallback_message",
    "is_conventional",
    "determine_commit_type",
    "extract_description",
    "enforce_conventional_commit",
    "clean_suggestion",
]

COMMIT_TYPES: Tuple[str, ...] = (
    "feat", "fix", "docs", "style", "refactor", "test",
    "chore", "perf", "ci", "build", "revert",
)

DEFAULT_TYPE = "chore"

CONVENTIONAL_PATTERN = re.compile(
    r"^(" + "|".join(COMMIT_TYPES) + r")(\([a-z0-9-]+\))?: .+$"
)

FALLBACK_FILE_LIMIT = 5

Rule = Tuple[Callable[[str], bool], str]


def _contains_any(*keywords: str) -> Callable[[str], bool]:
    def predicate(text: str) -> bool:
        return any(keyword in text for keyword in keywords)
    return predicate


# Evaluated in order against the lower-cased diff summary; first match wins.
TYPE_RULES: List[Rule] = [
    (_contains_any("test", "_test."), "test"),
    (_contains_any("fix", "bug"), "fix"),
    (_contains_any("feat", "add", "new"), "feat"),
    (_contains_any("doc", "readme"), "docs"),
    (_contains_any("refactor"), "refactor"),
    (_contains_any("style", "format"), "style"),
]


STATUS_LABELS = {
    "A": "Added",
    "M": "Modified",
    "D": "Deleted",
    "R": "Renamed",
    "C": "Copied",
    "T": "Type changed",
    "U": "Unmerged",
}


@dataclass
class ChangedFile:
    status: str
    path: str

    @property
    def label(self) -> str:
        # Renames and copies carry a similarity score, e.g. R100
        return STATUS_LABELS.get(self.status[:1], self.status)


def parse_diff_summary(changes: str) -> List[ChangedFile]:
    """Parse ``<status>\\t<path>`` records, skipping blank and malformed lines."""
    files = []
    for line in changes.split("\n"):
        if not line:
            continue
        parts = line.split("\t")
        if len(parts) >= 2:
            files.append(ChangedFile(status=parts[0], path=parts[1]))
    return files


def extract_changed_files(changes: str) -> List[str]:
    return [changed.path for changed in parse_diff_summary(changes)]


def fallback_message(changes: str, limit: int = FALLBACK_FILE_LIMIT) -> str:
    """Build a ``chore`` message listing at most ``limit`` changed paths."""
    files = extract_changed_files(changes)
    return f"chore: changes to {', '.join(files[:limit])}"


def is_conventional(message: str) -> bool:
    return CONVENTIONAL_PATTERN.match(message) is not None


def determine_commit_type(changes: str, rules: Sequence[Rule] = TYPE_RULES) -> str:
    """Pick a commit type from keywords found in the diff summary."""
    lowered = changes.lower()
    for predicate, commit_type in rules:
        if predicate(lowered):
            return commit_type
    return DEFAULT_TYPE


def extract_description(message: str) -> str:
    """Use the first sentence of ``message`` with a lower-case first letter."""
    description = message
    idx = message.find(".")
    if idx > 0:
        description = message[:idx]
    description = description.strip()
    if description:
        description = description[0].lower() + description[1:]
    return description


def enforce_conventional_commit(message: str, changes: str) -> str:
    """Return ``message`` if it is already conventional, else rewrite it.

    The rewritten form is ``<type>: <description>`` where the type comes from
    :func:`determine_commit_type`; no scope is added.
    """
    if is_conventional(message):
        return message

    commit_type = determine_commit_type(changes)
    return f"{commit_type}: {extract_description(message)}"


def clean_suggestion(text: str) -> str:
    """Reduce an oracle answer to its first non-empty line.

    A line wrapped in a matching pair of quotes or backticks is unwrapped;
    quotes inside the message are kept.
    """
    for line in text.splitlines():
        line = line.strip()
        while len(line) >= 2 and line[0] == line[-1] and line[0] in "`'\"":
            line = line[1:-1].strip()
        if line:
            return line
    return ""

"""Parsing contract over maven output.

The staging repository id and the "already published" outcomes are only
reported as text in the build tool's log. Each marker has exactly one
function here, matched literally against the phrases below. A wording
change upstream makes these functions stop matching; it is surfaced as a
failure rather than absorbed by looser matching.

Pinned examples:

    [INFO]  * Closing staging repository with ID "comexample-1042".
    [ERROR] ... Repository with ID='releases' does not allow updating artifact='/com/example/lib/1.0/lib-1.0.pom'
    [ERROR] ... status code: 409, reason phrase: Conflict (409)
"""

from __future__ import annotations

import re

__all__ = [
    "CLOSING_PHRASE",
    "UPDATE_REJECTED_PHRASE",
    "extract_staging_repository_id",
    "is_already_published",
    "is_conflict",
    "synthesize_closing_line",
]

CLOSING_PHRASE = 'Closing staging repository with ID "'
UPDATE_REJECTED_PHRASE = "does not allow updating artifact"
_CONFLICT_STATUS = re.compile(
    r"(?:status code: 409|return code is: 409|(?<![\d.])409 conflict|conflict \(409\))(?!\d)",
    re.IGNORECASE,
)


def extract_staging_repository_id(text: str) -> str | None:
    """Return the id from the first closing line, or None.

    The id is everything between the opening and closing quote; an empty
    or unterminated id does not count as a match.
    """
    for line in text.splitlines():
        start = line.find(CLOSING_PHRASE)
        if start < 0:
            continue
        rest = line[start + len(CLOSING_PHRASE) :]
        end = rest.find('"')
        if end <= 0:
            continue
        repo_id = rest[:end].strip()
        if repo_id:
            return repo_id
    return None


def synthesize_closing_line(repo_id: str) -> str:
    """Closing line as the staging plugin prints it (used by dry runs)."""
    return f'[INFO]  * {CLOSING_PHRASE}{repo_id}".'


def is_already_published(text: str) -> bool:
    """True if a release failed because a POM version already exists."""
    return any(
        UPDATE_REJECTED_PHRASE in line and ".pom" in line for line in text.splitlines()
    )


def is_conflict(text: str) -> bool:
    """True if a direct deploy was rejected with HTTP 409 Conflict.

    The 409 must be the status itself: ``status code: 409``,
    ``Return code is: 409``, ``409 Conflict`` or ``Conflict (409)``. A 409
    elsewhere on the line (a version such as ``1.0.409``) does not count.
    """
    return any(_CONFLICT_STATUS.search(line) for line in text.splitlines())

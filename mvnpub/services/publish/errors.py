from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PublishErrorKind = Literal[
    "configuration",
    "key_import",
    "signing",
    "protocol_extraction",
    "remote_fatal",
    "bundle_invalid",
    "io",
    "internal",
]


@dataclass(frozen=True, slots=True)
class PublishError:
    """Fatal publish failure.

    "Already published" is not an error: it is reported as an
    ``AlreadyPublished`` outcome and the run still succeeds.
    """

    kind: PublishErrorKind
    message: str
    hint: str | None = None


def last_lines(text: str, count: int = 5) -> str | None:
    """Tail of a subprocess log, used as an error hint."""
    lines = [line for line in text.strip().splitlines() if line.strip()]
    if not lines:
        return None
    return "\n".join(lines[-count:])

"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mvnpub.core.errors import ErrorCode
from mvnpub.output.console import Style
from mvnpub.services.publish.errors import PublishError

if TYPE_CHECKING:
    from mvnpub.output.console import ConsoleProtocol

__all__ = ["print_publish_error", "publish_error_exit_code"]


def print_publish_error(error: PublishError, console: ConsoleProtocol) -> None:
    """Print the single ``error:`` line, plus a dim hint when there is one."""
    console.error(error.message)
    if error.hint:
        for line in error.hint.splitlines():
            console.print(f"  hint: {line}", Style.DIM)


def publish_error_exit_code(error: PublishError) -> int:
    match error.kind:
        case "configuration":
            return int(ErrorCode.CONFIG_ERROR)
        case "key_import":
            return int(ErrorCode.KEY_IMPORT_ERROR)
        case "signing":
            return int(ErrorCode.SIGNING_ERROR)
        case "protocol_extraction" | "remote_fatal":
            return int(ErrorCode.REMOTE_ERROR)
        case "bundle_invalid" | "io":
            return int(ErrorCode.IO_ERROR)
        case "internal":
            return int(ErrorCode.INTERNAL_ERROR)
    return int(ErrorCode.INTERNAL_ERROR)

"""Process exit codes.

Each fatal failure class of a publish run maps to one stable exit code so CI
jobs can tell a bad configuration apart from a rejected upload.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the ``mvnpub`` CLI.

    - 0: Success (including "already published" skips)
    - 1: Configuration error (missing or contradictory settings)
    - 2: Key import error (signing key could not be imported)
    - 3: Signing error (a bundle failed to sign or stage)
    - 4: Remote error (deploy/release rejected, protocol marker missing)
    - 5: I/O error (bundle directory unreadable or incomplete)
    - 6: Internal error (unexpected workflow state)
    - 130: Interrupted (Ctrl-C)
    """

    OK = 0
    CONFIG_ERROR = 1
    KEY_IMPORT_ERROR = 2
    SIGNING_ERROR = 3
    REMOTE_ERROR = 4
    IO_ERROR = 5
    INTERNAL_ERROR = 6
    INTERRUPTED = 130

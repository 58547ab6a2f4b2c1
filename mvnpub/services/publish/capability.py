"""Signing backend capabilities.

GnuPG 2.1 and later ask for passphrases through pinentry; a headless run
would hang on that prompt unless gpg is told to accept the passphrase on
its loopback channel. Whether that is needed is decided once per run from
the installed gpg, never from the operating system name.
"""

from __future__ import annotations

import shlex
from pathlib import Path

from mvnpub.core.result import Err
from mvnpub.platform.files import atomic_write_text
from mvnpub.platform.process import run as run_process
from mvnpub.services.publish.timeouts import GPG_TIMEOUT_SECONDS

LOOPBACK_WRAPPER = "gpg-loopback"
_LOOPBACK_MIN_VERSION = (2, 1)


def parse_gpg_version(text: str) -> tuple[int, int] | None:
    """Parse ``gpg (GnuPG) 2.4.5`` from the first line of ``gpg --version``."""
    lines = text.strip().splitlines()
    if not lines:
        return None
    token = lines[0].split()[-1]
    parts = token.split(".")
    if len(parts) < 2 or not parts[0].isdigit() or not parts[1].isdigit():
        return None
    return (int(parts[0]), int(parts[1]))


def needs_loopback(*, gpg: str, cwd: Path, override: bool | None) -> bool:
    if override is not None:
        return override
    result = run_process([gpg, "--version"], cwd=cwd, timeout=GPG_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return False
    version = parse_gpg_version(result.value)
    return version is not None and version >= _LOOPBACK_MIN_VERSION


def write_loopback_wrapper(*, work: Path, gpg: str) -> Path:
    """Write an executable that runs gpg in loopback pinentry mode.

    The gpg plugin only takes an executable path, so the mode flag is
    carried by this wrapper.
    """
    path = work / LOOPBACK_WRAPPER
    script = f'#!/bin/sh\nexec {shlex.quote(gpg)} --pinentry-mode loopback "$@"\n'
    atomic_write_text(path, script, mode=0o700)
    return path

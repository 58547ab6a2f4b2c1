"""Subprocess execution with Result-based error handling.

All ``mvn`` and ``gpg`` invocations go through this module. Failures come
back as ``ProcessError`` values carrying the captured output, because the
publish workflow classifies remote outcomes by reading that output.

Usage:
    result = run_logged(cmd, cwd=work, log_path=work / "deploy.log", env=env)
    match result:
        case Ok(output):
            ...
        case Err(error):
            print(error.output)
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

from mvnpub.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "run_logged"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 when the process could not run.
        stdout: Standard output (merged with stderr for logged runs).
        stderr: Standard error, or the reason the process could not run.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        """All captured text, for marker scanning."""
        if self.stderr and self.stdout:
            return f"{self.stdout}\n{self.stderr}"
        return self.stdout or self.stderr

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def _timeout_text(value: str | bytes | None) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value or ""


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command and return stdout or error.

    Args:
        cmd: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Environment variables (uses current env if None).
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(stdout) on success, Err(ProcessError) on failure.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=_timeout_text(e.stdout),
                stderr=f"Command timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout="", stderr=str(e)))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(proc.stdout)


def run_logged(
    cmd: list[str],
    cwd: Path,
    log_path: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Execute a command with stdout and stderr merged into one log file.

    The log is written whatever the exit status: on success the caller
    still needs the text (e.g. to read the staging repository id), and on
    failure it is the only diagnostic left after the run.

    Returns:
        Ok(output) on exit 0, Err(ProcessError) with ``stdout`` holding the
        merged output otherwise.
    """
    output = ""
    returncode = -1
    stderr = ""
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
            check=False,
        )
        output = proc.stdout or ""
        returncode = proc.returncode
    except subprocess.TimeoutExpired as e:
        output = _timeout_text(e.stdout)
        stderr = f"Command timed out after {timeout}s"
    except OSError as e:
        stderr = str(e)

    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_path.write_text(output + (f"\n{stderr}\n" if stderr else ""), encoding="utf-8")

    if returncode != 0:
        return Err(
            ProcessError(command=tuple(cmd), returncode=returncode, stdout=output, stderr=stderr)
        )
    return Ok(output)

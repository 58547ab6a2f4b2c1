from __future__ import annotations

from pathlib import Path

from mvnpub.core.result import Err, Ok, Result
from mvnpub.output.console import Style
from mvnpub.platform.process import run_logged
from mvnpub.services.publish.errors import PublishError, last_lines
from mvnpub.services.publish.maven import describe, sign_and_stage_cmd
from mvnpub.services.publish.model import ArtifactBundle, PublishContext
from mvnpub.services.publish.timeouts import SIGN_TIMEOUT_SECONDS


def sign_log_name(index: int) -> str:
    return f"sign-{index}.log"


def sign_and_stage(
    *,
    ctx: PublishContext,
    bundles: tuple[ArtifactBundle, ...],
    gpg_executable: Path | None,
) -> Result[None, PublishError]:
    """Sign every bundle into the staging directory, stopping at the first failure.

    Staging is local (``file://``), so this runs in dry-run mode too. A
    partially staged directory is never handed on to the release step.
    """
    if ctx.keyring is None:
        return Err(PublishError(kind="signing", message="no keyring: the signing key was not imported"))

    for index, bundle in enumerate(bundles, start=1):
        cmd = sign_and_stage_cmd(ctx, bundle, gpg_executable=gpg_executable)
        ctx.console.print(f"{describe(cmd)} {bundle.pom.name}", Style.DIM)
        result = run_logged(
            cmd,
            cwd=ctx.dirs.work,
            log_path=ctx.dirs.work / sign_log_name(index),
            env=ctx.env,
            timeout=SIGN_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            return Err(
                PublishError(
                    kind="signing",
                    message=f"failed to sign {bundle.name} (exit {result.error.returncode})",
                    hint=last_lines(result.error.output),
                )
            )
        ctx.console.success(f"signed {bundle.name}")

    return Ok(None)

from __future__ import annotations

from mvnpub.core.result import Err, Ok, Result
from mvnpub.output.console import Style
from mvnpub.platform.process import run_logged
from mvnpub.services.publish.errors import PublishError, last_lines
from mvnpub.services.publish.markers import is_conflict
from mvnpub.services.publish.maven import deploy_file_cmd, describe
from mvnpub.services.publish.model import (
    AlreadyPublished,
    ArtifactBundle,
    PublishContext,
    Published,
    ReleaseOutcome,
)
from mvnpub.services.publish.timeouts import MVN_NETWORK_TIMEOUT_SECONDS


def deploy_log_name(index: int) -> str:
    return f"deploy-{index}.log"


def deploy_direct(
    *,
    ctx: PublishContext,
    bundles: tuple[ArtifactBundle, ...],
) -> Result[tuple[ReleaseOutcome, ...], PublishError]:
    """Deploy bundles one at a time to the configured repository URL.

    A 409 Conflict means the version is already there: warn and move on.
    Any other failure stops the run; remaining bundles are not attempted.
    """
    outcomes: list[ReleaseOutcome] = []
    for index, bundle in enumerate(bundles, start=1):
        cmd = deploy_file_cmd(ctx, bundle)
        ctx.console.print(f"{describe(cmd)} {bundle.pom.name}", Style.DIM)
        if ctx.mode.dry_run:
            outcomes.append(Published("dry-run"))
            continue

        log_path = ctx.dirs.work / deploy_log_name(index)
        result = run_logged(
            cmd,
            cwd=ctx.dirs.work,
            log_path=log_path,
            env=ctx.env,
            timeout=MVN_NETWORK_TIMEOUT_SECONDS,
        )
        if isinstance(result, Ok):
            ctx.console.success(f"deployed {bundle.name}")
            outcomes.append(Published(bundle.name))
            continue

        if is_conflict(result.error.output):
            ctx.console.warning(f"{bundle.name}: already published (409 Conflict), skipping")
            outcomes.append(AlreadyPublished(bundle.name))
            continue

        return Err(
            PublishError(
                kind="remote_fatal",
                message=f"deploy of {bundle.name} failed (exit {result.error.returncode})",
                hint=last_lines(result.error.output) or f"see {log_path}",
            )
        )

    return Ok(tuple(outcomes))

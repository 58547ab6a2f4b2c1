from __future__ import annotations

from pathlib import Path

import typer

from mvnpub.cli.commands._helpers import exit_on_error, exit_with_code
from mvnpub.cli.context import build_context
from mvnpub.core.errors import ErrorCode
from mvnpub.services.publish.config import DEFAULT_BUNDLE_ROOT
from mvnpub.services.publish.model import AlreadyPublished, PublishReport
from mvnpub.services.publish.service import publish as run_publish


def _summary(report: PublishReport) -> str:
    target = "central" if report.mode.central else "repository"
    prefix = "(dry-run) " if report.mode.dry_run else ""
    if report.staging_repository_id is not None:
        target = f"central ({report.staging_repository_id})"
    if report.outcomes and all(isinstance(o, AlreadyPublished) for o in report.outcomes):
        return f"{prefix}nothing new to publish to {target}"
    count = len(report.bundles)
    return f"{prefix}published {count} bundle(s) to {target}"


def publish(
    root: Path = typer.Argument(
        Path(DEFAULT_BUNDLE_ROOT),
        help="Directory holding the bundles (<name>.pom, .jar, -sources.jar, -javadoc.jar)",
    ),
    dry_run: bool | None = typer.Option(
        None,
        "--dry-run/--live",
        help="Skip remote calls (overrides DRY_RUN)",
    ),
) -> None:
    """Sign and publish Maven bundles to central or a direct repository."""
    ctx = build_context()
    try:
        result = run_publish(root=root, env=ctx.env, console=ctx.console, dry_run=dry_run)
    except KeyboardInterrupt:
        ctx.console.error("interrupted")
        exit_with_code(int(ErrorCode.INTERRUPTED))

    report = exit_on_error(result, ctx)
    if report.skipped:
        ctx.console.warning(f"{report.skipped} item(s) were already published")
    ctx.console.success(_summary(report))

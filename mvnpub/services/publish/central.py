"""Central repository release: deploy-staged, close, release.

States::

    idle -> deploying -> closed -> releasing -> done
                                            -> already_published
    (any step) -> failed   (returned as Err)

The staging repository id is assigned remotely and only appears in the
deploy log, so the transition to ``closed`` is gated on reading it back
from that text. Nothing is retried: a release that was partially applied
is not safely repeatable.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal

from mvnpub.core.result import Err, Ok, Result
from mvnpub.output.console import Style
from mvnpub.platform.process import run_logged
from mvnpub.services.publish import config
from mvnpub.services.publish.errors import PublishError, last_lines
from mvnpub.services.publish.fsm import StepOutcome, advance, finish, run_state_machine
from mvnpub.services.publish.markers import (
    extract_staging_repository_id,
    is_already_published,
    synthesize_closing_line,
)
from mvnpub.services.publish.maven import deploy_staged_cmd, describe, release_cmd
from mvnpub.services.publish.model import (
    AlreadyPublished,
    PublishContext,
    Published,
    ReleaseOutcome,
)
from mvnpub.services.publish.timeouts import MVN_NETWORK_TIMEOUT_SECONDS

CentralPhase = Literal["idle", "deploying", "closed", "releasing", "done", "already_published"]

DRY_RUN_REPOSITORY_ID = "dry-run-0000"


@dataclass(frozen=True, slots=True)
class CentralState:
    phase: CentralPhase
    repository_id: str | None = None
    outcome: ReleaseOutcome | None = None


type _Step = Result[StepOutcome[CentralState], PublishError]


def _start(state: CentralState) -> _Step:
    return Ok(advance(replace(state, phase="deploying")))


def _deploy(ctx: PublishContext, state: CentralState) -> _Step:
    cmd = deploy_staged_cmd(ctx)
    log_path = ctx.dirs.work / config.DEPLOY_LOG
    ctx.console.print(describe(cmd), Style.DIM)

    failed_exit: int | None = None
    if ctx.mode.dry_run:
        output = synthesize_closing_line(DRY_RUN_REPOSITORY_ID) + "\n"
        log_path.write_text(output, encoding="utf-8")
        ctx.console.print("(dry-run) deploy skipped, placeholder output written", Style.DIM)
    else:
        result = run_logged(
            cmd,
            cwd=ctx.dirs.work,
            log_path=log_path,
            env=ctx.env,
            timeout=MVN_NETWORK_TIMEOUT_SECONDS,
        )
        if isinstance(result, Err):
            output = result.error.output
            failed_exit = result.error.returncode
        else:
            output = result.value

    repository_id = extract_staging_repository_id(output)
    if repository_id is None:
        detail = f" (deploy exit {failed_exit})" if failed_exit is not None else ""
        return Err(
            PublishError(
                kind="protocol_extraction",
                message=f"no staging repository id in deploy output{detail}",
                hint="\n".join(
                    part
                    for part in (last_lines(output), f"the upload may be partial; inspect {log_path}")
                    if part
                ),
            )
        )
    if failed_exit is not None:
        return Err(
            PublishError(
                kind="remote_fatal",
                message=f"closing staging repository {repository_id} failed (exit {failed_exit})",
                hint=last_lines(output),
            )
        )

    return Ok(advance(replace(state, phase="closed", repository_id=repository_id)))


def _closed(state: CentralState) -> _Step:
    return Ok(advance(replace(state, phase="releasing")))


def _release(ctx: PublishContext, state: CentralState) -> _Step:
    if state.repository_id is None:
        return Err(PublishError(kind="internal", message="release requested without repository id"))

    cmd = release_cmd(ctx, state.repository_id)
    ctx.console.print(f"{describe(cmd)} {state.repository_id}", Style.DIM)
    if ctx.mode.dry_run:
        return Ok(finish(replace(state, phase="done", outcome=Published("dry-run"))))

    log_path = ctx.dirs.work / config.RELEASE_LOG
    result = run_logged(
        cmd,
        cwd=ctx.dirs.work,
        log_path=log_path,
        env=ctx.env,
        timeout=MVN_NETWORK_TIMEOUT_SECONDS,
    )
    if isinstance(result, Ok):
        return Ok(finish(replace(state, phase="done", outcome=Published(state.repository_id))))

    if is_already_published(result.error.output):
        ctx.console.warning(
            f"staging repository {state.repository_id}: version already published, skipping"
        )
        return Ok(
            finish(
                replace(
                    state,
                    phase="already_published",
                    outcome=AlreadyPublished(state.repository_id),
                )
            )
        )

    return Err(
        PublishError(
            kind="remote_fatal",
            message=f"release of {state.repository_id} failed (exit {result.error.returncode})",
            hint=last_lines(result.error.output) or f"see {log_path}",
        )
    )


def release_to_central(ctx: PublishContext) -> Result[CentralState, PublishError]:
    """Deploy the staging directory, close it and release it."""

    def on_transition(old: CentralState, new: CentralState) -> None:
        if old.phase != new.phase:
            ctx.console.print(f"central: {old.phase} -> {new.phase}", Style.DIM)

    return run_state_machine(
        initial_state=CentralState(phase="idle"),
        get_step=lambda s: s.phase,
        handlers={
            "idle": _start,
            "deploying": lambda s: _deploy(ctx, s),
            "closed": _closed,
            "releasing": lambda s: _release(ctx, s),
        },
        on_transition=on_transition,
    )

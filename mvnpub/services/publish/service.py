from __future__ import annotations

import tempfile
from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path

from mvnpub.core.result import Err, Ok, Result
from mvnpub.output.console import ConsoleProtocol, Style
from mvnpub.platform.files import make_private_dir, remove_tree
from mvnpub.services.publish.bundles import discover_bundles
from mvnpub.services.publish.capability import needs_loopback, write_loopback_wrapper
from mvnpub.services.publish.central import release_to_central
from mvnpub.services.publish.credentials import subprocess_env, write_settings
from mvnpub.services.publish.direct import deploy_direct
from mvnpub.services.publish.errors import PublishError
from mvnpub.services.publish.keyring import INLINE_KEY_FILE, KEYRING_DIR, import_key
from mvnpub.services.publish.model import (
    ArtifactBundle,
    PublishContext,
    PublishReport,
    PublishSettings,
    WorkDirs,
)
from mvnpub.services.publish.resolve import resolve_settings
from mvnpub.services.publish.signer import sign_and_stage


def create_work_dirs(base: Path | None = None) -> Result[WorkDirs, PublishError]:
    """Fresh staging and work directories under a unique private parent."""
    try:
        root = Path(tempfile.mkdtemp(prefix="mvnpub-", dir=str(base) if base else None))
        staging = make_private_dir(root / "staging")
        work = make_private_dir(root / "work")
    except OSError as e:
        return Err(PublishError(kind="io", message=f"cannot create work directories: {e}"))
    return Ok(WorkDirs(root=root, staging=staging, work=work))


def cleanup(*, dirs: WorkDirs, keep: bool, console: ConsoleProtocol) -> None:
    """Remove the run's directories; the keyring goes even when keeping logs."""
    remove_tree(dirs.work / KEYRING_DIR)
    (dirs.work / INLINE_KEY_FILE).unlink(missing_ok=True)
    if keep:
        console.print(f"work directory kept: {dirs.work}", Style.DIM)
        return
    remove_tree(dirs.root)


def _run(
    *,
    ctx: PublishContext,
    bundles: tuple[ArtifactBundle, ...],
) -> Result[PublishReport, PublishError]:
    mode = ctx.mode

    if mode.signed:
        signing = ctx.credentials.signing
        if signing is None:
            return Err(PublishError(kind="internal", message="signed mode without a signing key"))

        ctx.console.banner("Importing signing key")
        loopback = needs_loopback(
            gpg=ctx.settings.gpg,
            cwd=ctx.dirs.work,
            override=ctx.settings.loopback_override,
        )
        keyring = import_key(
            source=signing,
            work=ctx.dirs.work,
            gpg=ctx.settings.gpg,
            console=ctx.console,
        )
        if isinstance(keyring, Err):
            return keyring
        ctx = replace(ctx, keyring=keyring.value, loopback=loopback)
        ctx.console.info(f"key {keyring.value.key_id}")

        wrapper = None
        if ctx.loopback:
            try:
                wrapper = write_loopback_wrapper(work=ctx.dirs.work, gpg=ctx.settings.gpg)
            except OSError as e:
                return Err(PublishError(kind="io", message=f"cannot write gpg wrapper: {e}"))
            ctx.console.print("gpg: loopback pinentry", Style.DIM)

        ctx.console.banner(f"Signing {len(bundles)} bundle(s)")
        signed = sign_and_stage(ctx=ctx, bundles=bundles, gpg_executable=wrapper)
        if isinstance(signed, Err):
            return signed

    if mode.central:
        ctx.console.banner("Releasing to central")
        central = release_to_central(ctx)
        if isinstance(central, Err):
            return central
        state = central.value
        outcomes = (state.outcome,) if state.outcome is not None else ()
        return Ok(
            PublishReport(
                mode=mode,
                bundles=bundles,
                outcomes=outcomes,
                key_id=ctx.keyring.key_id if ctx.keyring else None,
                staging_repository_id=state.repository_id,
            )
        )

    ctx.console.banner(f"Deploying {len(bundles)} bundle(s) to {ctx.credentials.repository_url}")
    deployed = deploy_direct(ctx=ctx, bundles=bundles)
    if isinstance(deployed, Err):
        return deployed
    return Ok(PublishReport(mode=mode, bundles=bundles, outcomes=deployed.value))


def _run_in_dirs(
    *,
    dirs: WorkDirs,
    bundles: tuple[ArtifactBundle, ...],
    settings: PublishSettings,
    base_env: Mapping[str, str],
    console: ConsoleProtocol,
) -> Result[PublishReport, PublishError]:
    settings_xml = write_settings(work=dirs.work, credentials=settings.credentials)
    if isinstance(settings_xml, Err):
        return settings_xml

    ctx = PublishContext(
        settings=settings,
        dirs=dirs,
        settings_xml=settings_xml.value,
        env=subprocess_env(base_env, settings.credentials),
        console=console,
    )
    return _run(ctx=ctx, bundles=bundles)


def publish_with_settings(
    *,
    root: Path,
    settings: PublishSettings,
    base_env: Mapping[str, str],
    console: ConsoleProtocol,
    tmp_base: Path | None = None,
) -> Result[PublishReport, PublishError]:
    """Publish every bundle under ``root`` with already-resolved settings.

    A failed run keeps its work directory so the logs named in the error
    hint are still there; the keyring is removed either way.
    """
    bundles = discover_bundles(root)
    if isinstance(bundles, Err):
        return bundles
    console.info(f"{len(bundles.value)} bundle(s) under {root}")

    dirs = create_work_dirs(tmp_base)
    if isinstance(dirs, Err):
        return dirs

    try:
        result = _run_in_dirs(
            dirs=dirs.value,
            bundles=bundles.value,
            settings=settings,
            base_env=base_env,
            console=console,
        )
    except BaseException:
        cleanup(dirs=dirs.value, keep=settings.keep_workdir, console=console)
        raise

    keep = settings.keep_workdir or isinstance(result, Err)
    cleanup(dirs=dirs.value, keep=keep, console=console)
    return result


def publish(
    *,
    root: Path,
    env: Mapping[str, str],
    console: ConsoleProtocol,
    dry_run: bool | None = None,
    tmp_base: Path | None = None,
) -> Result[PublishReport, PublishError]:
    """Resolve settings from ``env`` and publish the bundles under ``root``.

    Configuration is validated completely before any directory is created
    or any process is started.
    """
    console.banner("Resolving configuration")
    settings = resolve_settings(env, dry_run=dry_run)
    if isinstance(settings, Err):
        return settings
    console.info(f"mode: {settings.value.mode.describe()}")

    return publish_with_settings(
        root=root,
        settings=settings.value,
        base_env=env,
        console=console,
        tmp_base=tmp_base,
    )

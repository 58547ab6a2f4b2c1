from __future__ import annotations

from pathlib import Path

from mvnpub.services.publish import config
from mvnpub.services.publish.model import ArtifactBundle, PublishContext


def _base(ctx: PublishContext) -> list[str]:
    return [
        ctx.settings.mvn,
        "-B",
        "--no-transfer-progress",
        "--settings",
        str(ctx.settings_xml),
    ]


def _bundle_args(bundle: ArtifactBundle) -> list[str]:
    return [
        f"-DpomFile={bundle.pom}",
        f"-Dfile={bundle.binary}",
        f"-Dsources={bundle.sources}",
        f"-Djavadoc={bundle.javadoc}",
    ]


def sign_and_stage_cmd(
    ctx: PublishContext,
    bundle: ArtifactBundle,
    *,
    gpg_executable: Path | None,
) -> list[str]:
    """Sign a bundle and deploy it into the local staging directory."""
    if ctx.keyring is None:
        raise ValueError("sign_and_stage_cmd requires an imported keyring")
    cmd = _base(ctx) + [
        f"{config.GPG_PLUGIN}:sign-and-deploy-file",
        f"-Durl={ctx.dirs.staging_url}",
        f"-DrepositoryId={ctx.credentials.server_id}",
        *_bundle_args(bundle),
        f"-Dgpg.keyname={ctx.keyring.key_id}",
        f"-Dgpg.homedir={ctx.keyring.home}",
        f"-Dgpg.passphraseServerId={config.PASSPHRASE_SERVER_ID}",
    ]
    if gpg_executable is not None:
        cmd.append(f"-Dgpg.executable={gpg_executable}")
    return cmd


def deploy_file_cmd(ctx: PublishContext, bundle: ArtifactBundle) -> list[str]:
    """Deploy one bundle straight to the configured repository URL."""
    url = ctx.credentials.repository_url
    if url is None:
        raise ValueError("deploy_file_cmd requires a repository URL")
    return _base(ctx) + [
        f"{config.DEPLOY_PLUGIN}:deploy-file",
        f"-Durl={url}",
        f"-DrepositoryId={ctx.credentials.server_id}",
        *_bundle_args(bundle),
    ]


def deploy_staged_cmd(ctx: PublishContext) -> list[str]:
    """Upload the staging directory and close the staging repository.

    ``autoReleaseAfterClose`` is requested off; the release is always
    issued explicitly afterwards.
    """
    return _base(ctx) + [
        f"{config.NEXUS_STAGING_PLUGIN}:deploy-staged-repository",
        f"-DrepositoryDirectory={ctx.dirs.staging}",
        f"-DnexusUrl={ctx.settings.nexus_url}",
        f"-DserverId={ctx.credentials.server_id}",
        f"-DstagingProfileId={ctx.credentials.staging_profile_id}",
        "-DautoReleaseAfterClose=false",
    ]


def release_cmd(ctx: PublishContext, staging_repository_id: str) -> list[str]:
    """Release a closed staging repository."""
    return _base(ctx) + [
        f"{config.NEXUS_STAGING_PLUGIN}:rc-release",
        f"-DstagingRepositoryId={staging_repository_id}",
        f"-DnexusUrl={ctx.settings.nexus_url}",
        f"-DserverId={ctx.credentials.server_id}",
    ]


def describe(cmd: list[str]) -> str:
    """Short form of a maven command for progress output."""
    args = iter(cmd[1:])
    for arg in args:
        if arg == "--settings":
            next(args, None)
            continue
        if ":" in arg and not arg.startswith("-"):
            return f"mvn {arg.rsplit(':', 1)[-1]}"
    return "mvn"

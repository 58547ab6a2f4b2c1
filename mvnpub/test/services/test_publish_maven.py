from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from mvnpub.services.publish import maven
from mvnpub.services.publish.model import ArtifactBundle, PublishContext


def test_sign_and_stage_cmd(
    make_ctx: Callable[..., PublishContext], make_bundle: Callable[[str], ArtifactBundle]
) -> None:
    ctx = make_ctx()
    bundle = make_bundle("lib-1.0.0")

    cmd = maven.sign_and_stage_cmd(ctx, bundle, gpg_executable=None)

    assert cmd[:5] == ["mvn", "-B", "--no-transfer-progress", "--settings", str(ctx.settings_xml)]
    assert cmd[5].endswith(":sign-and-deploy-file")
    assert f"-Durl={ctx.dirs.staging.resolve().as_uri()}" in cmd
    assert "-DrepositoryId=ossrh" in cmd
    assert f"-DpomFile={bundle.pom}" in cmd
    assert f"-Dfile={bundle.binary}" in cmd
    assert f"-Dsources={bundle.sources}" in cmd
    assert f"-Djavadoc={bundle.javadoc}" in cmd
    assert ctx.keyring is not None
    assert f"-Dgpg.keyname={ctx.keyring.key_id}" in cmd
    assert f"-Dgpg.homedir={ctx.keyring.home}" in cmd
    assert "-Dgpg.passphraseServerId=gpg.passphrase" in cmd
    assert not any(arg.startswith("-Dgpg.executable=") for arg in cmd)


def test_sign_and_stage_cmd_with_wrapper(
    make_ctx: Callable[..., PublishContext], make_bundle: Callable[[str], ArtifactBundle]
) -> None:
    ctx = make_ctx()
    wrapper = Path("/tmp/work/gpg-loopback")

    cmd = maven.sign_and_stage_cmd(ctx, make_bundle("lib-1.0.0"), gpg_executable=wrapper)

    assert f"-Dgpg.executable={wrapper}" in cmd


def test_sign_and_stage_cmd_requires_keyring(
    make_ctx: Callable[..., PublishContext], make_bundle: Callable[[str], ArtifactBundle]
) -> None:
    ctx = make_ctx(keyring=False)
    with pytest.raises(ValueError):
        maven.sign_and_stage_cmd(ctx, make_bundle("lib-1.0.0"), gpg_executable=None)


def test_deploy_staged_cmd(make_ctx: Callable[..., PublishContext]) -> None:
    ctx = make_ctx()

    cmd = maven.deploy_staged_cmd(ctx)

    assert cmd[5].endswith(":deploy-staged-repository")
    assert f"-DrepositoryDirectory={ctx.dirs.staging}" in cmd
    assert "-DnexusUrl=https://oss.sonatype.org/" in cmd
    assert "-DserverId=ossrh" in cmd
    assert "-DstagingProfileId=1a2b3c" in cmd
    assert "-DautoReleaseAfterClose=false" in cmd


def test_release_cmd(make_ctx: Callable[..., PublishContext]) -> None:
    cmd = maven.release_cmd(make_ctx(), "comexample-1042")

    assert cmd[5].endswith(":rc-release")
    assert "-DstagingRepositoryId=comexample-1042" in cmd


def test_deploy_file_cmd(
    make_ctx: Callable[..., PublishContext], make_bundle: Callable[[str], ArtifactBundle]
) -> None:
    ctx = make_ctx(central=False)
    bundle = make_bundle("lib-1.0.0")

    cmd = maven.deploy_file_cmd(ctx, bundle)

    assert cmd[5].endswith(":deploy-file")
    assert "-Durl=https://repo.example.com/releases" in cmd
    assert "-DrepositoryId=internal" in cmd
    assert f"-DpomFile={bundle.pom}" in cmd


def test_describe() -> None:
    cmd = ["/opt/mvn", "-B", "org.sonatype.plugins:nexus-staging-maven-plugin:1.7.0:rc-release"]
    assert maven.describe(cmd) == "mvn rc-release"
    assert maven.describe(["mvn", "-v"]) == "mvn"

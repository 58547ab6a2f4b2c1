from __future__ import annotations

from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import pytest

from mvnpub.core.result import Err, Ok
from mvnpub.output.console import MockConsole
from mvnpub.platform.process import ProcessError
from mvnpub.services.publish import capability as capability_mod
from mvnpub.services.publish import central as central_mod
from mvnpub.services.publish import direct as direct_mod
from mvnpub.services.publish import keyring as keyring_mod
from mvnpub.services.publish import signer as signer_mod
from mvnpub.services.publish.model import AlreadyPublished, Published
from mvnpub.services.publish.service import publish

FINGERPRINT = "AABBCCDDEEFF00112233445566778899AABBCCDD"
COLONS = (
    "pub:-:4096:1:AABBCCDDEEFF0011:1700000000:::-:::scESC::::::23::0:\n"
    f"fpr:::::::::{FINGERPRINT}:\n"
    "uid:-::::1700000000::HASH::Release Bot <release@example.com>::::::::::0:\n"
)
DEPLOY_OK = '[INFO]  * Closing staging repository with ID "comexample-1042".\n'
RELEASE_DUPLICATE = (
    "[ERROR] Repository with ID='releases' does not allow updating "
    "artifact='/com/example/lib/1.0.0/lib-1.0.0.pom'\n"
)


class FakeToolchain:
    """Stands in for gpg and mvn across every publish module."""

    def __init__(self, maven: dict[str, object] | None = None) -> None:
        self.maven = maven or {}
        self.gpg_calls: list[list[str]] = []
        self.mvn_calls: list[list[str]] = []
        self.staged_before_release: list[str] = []

    def install(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(keyring_mod, "run_process", self.run_process)
        monkeypatch.setattr(capability_mod, "run_process", self.run_process)
        for module in (signer_mod, central_mod, direct_mod):
            monkeypatch.setattr(module, "run_logged", self.run_logged)

    def run_process(self, cmd, *, cwd, env=None, timeout=None):
        del cwd, env, timeout
        self.gpg_calls.append(list(cmd))
        if "--list-keys" in cmd:
            return Ok(COLONS)
        if "--version" in cmd:
            return Ok("gpg (GnuPG) 2.4.5\nlibgcrypt 1.10.3\n")
        return Ok("")

    def run_logged(self, cmd, *, cwd, log_path, env=None, timeout=None):
        del cwd, timeout
        assert env is not None
        assert env["MAVEN_PASSWORD"] == "s3cret-pw"
        assert "MAVEN_GPG_KEY" not in env
        self.mvn_calls.append(list(cmd))
        goal = cmd[5].rsplit(":", 1)[-1]

        if goal == "sign-and-deploy-file":
            url = next(a for a in cmd if a.startswith("-Durl=")).removeprefix("-Durl=")
            staging = Path(url2pathname(urlparse(url).path))
            pom = Path(next(a for a in cmd if a.startswith("-DpomFile=")).removeprefix("-DpomFile="))
            (staging / pom.name).write_text("<project/>", encoding="utf-8")
            (staging / f"{pom.name}.asc").write_text("sig", encoding="utf-8")
            response: object = Ok("[INFO] BUILD SUCCESS")
        elif goal == "deploy-staged-repository":
            staging = Path(next(a for a in cmd if a.startswith("-DrepositoryDirectory=")).split("=", 1)[1])
            self.staged_before_release = sorted(p.name for p in staging.iterdir())
            response = self.maven.get(goal, Ok(DEPLOY_OK))
        else:
            response = self.maven.get(goal, Ok("[INFO] BUILD SUCCESS"))

        text = response.error.output if isinstance(response, Err) else response.value
        log_path.write_text(text, encoding="utf-8")
        return response

    def goals(self) -> list[str]:
        return [c[5].rsplit(":", 1)[-1] for c in self.mvn_calls]


@pytest.fixture
def dist(tmp_path: Path) -> Path:
    root = tmp_path / "java" / "dist"
    for base in ("lib-1.0.0", "lib-extra-1.0.0"):
        (root / "lib").mkdir(parents=True, exist_ok=True)
        (root / "lib" / f"{base}.pom").write_text("<project/>", encoding="utf-8")
        for suffix in (".jar", "-sources.jar", "-javadoc.jar"):
            (root / "lib" / f"{base}{suffix}").write_bytes(b"PK")
    return root


@pytest.fixture
def tmp_base(tmp_path: Path) -> Path:
    base = tmp_path / "tmp"
    base.mkdir()
    return base


def test_central_signed_release(
    monkeypatch: pytest.MonkeyPatch,
    central_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    tools = FakeToolchain()
    tools.install(monkeypatch)
    console = MockConsole()

    result = publish(root=dist, env=central_env, console=console, tmp_base=tmp_base)

    assert isinstance(result, Ok)
    report = result.value
    assert report.key_id == FINGERPRINT
    assert report.staging_repository_id == "comexample-1042"
    assert report.outcomes == (Published("comexample-1042"),)
    assert tools.goals() == [
        "sign-and-deploy-file",
        "sign-and-deploy-file",
        "deploy-staged-repository",
        "rc-release",
    ]
    assert all(f"-Dgpg.keyname={FINGERPRINT}" in c for c in tools.mvn_calls[:2])
    assert "lib-1.0.0.pom" in tools.staged_before_release
    assert "lib-1.0.0.pom.asc" in tools.staged_before_release
    assert "-DstagingRepositoryId=comexample-1042" in tools.mvn_calls[3]
    assert list(tmp_base.iterdir()) == []


def test_import_uses_one_keyring_for_every_call(
    monkeypatch: pytest.MonkeyPatch,
    central_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    tools = FakeToolchain()
    tools.install(monkeypatch)

    publish(root=dist, env=central_env, console=MockConsole(), tmp_base=tmp_base)

    homes = {c[c.index("--homedir") + 1] for c in tools.gpg_calls if "--homedir" in c}
    assert len(homes) == 1
    home = homes.pop()
    assert all(f"-Dgpg.homedir={home}" in c for c in tools.mvn_calls[:2])


def test_loopback_wrapper_is_used_when_forced(
    monkeypatch: pytest.MonkeyPatch,
    central_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    tools = FakeToolchain()
    tools.install(monkeypatch)
    central_env["MVNPUB_GPG_LOOPBACK"] = "1"

    result = publish(root=dist, env=central_env, console=MockConsole(), tmp_base=tmp_base)

    assert isinstance(result, Ok)
    sign_cmd = tools.mvn_calls[0]
    assert any(a.startswith("-Dgpg.executable=") and a.endswith("gpg-loopback") for a in sign_cmd)
    assert not any("--version" in c for c in tools.gpg_calls)


def test_already_published_central_is_success(
    monkeypatch: pytest.MonkeyPatch,
    central_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    tools = FakeToolchain({"rc-release": Err(ProcessError(("mvn",), 1, RELEASE_DUPLICATE, ""))})
    tools.install(monkeypatch)
    console = MockConsole()

    result = publish(root=dist, env=central_env, console=console, tmp_base=tmp_base)

    assert isinstance(result, Ok)
    assert result.value.skipped == 1
    assert isinstance(result.value.outcomes[0], AlreadyPublished)
    assert console.has_warning()
    assert not console.has_error()


def test_direct_unsigned_deploy(
    monkeypatch: pytest.MonkeyPatch,
    direct_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    tools = FakeToolchain()
    tools.install(monkeypatch)

    result = publish(root=dist, env=direct_env, console=MockConsole(), tmp_base=tmp_base)

    assert isinstance(result, Ok)
    assert tools.goals() == ["deploy-file", "deploy-file"]
    assert tools.gpg_calls == []
    assert result.value.key_id is None
    assert all("-Durl=https://repo.example.com/releases" in c for c in tools.mvn_calls)


def test_direct_with_signing_key_is_rejected_before_any_process(
    monkeypatch: pytest.MonkeyPatch,
    direct_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    tools = FakeToolchain()
    tools.install(monkeypatch)
    direct_env["MAVEN_GPG_KEY"] = "KEY"
    direct_env["MAVEN_GPG_PASSPHRASE"] = "pp"

    result = publish(root=dist, env=direct_env, console=MockConsole(), tmp_base=tmp_base)

    assert isinstance(result, Err)
    assert result.error.kind == "configuration"
    assert tools.gpg_calls == []
    assert tools.mvn_calls == []
    assert list(tmp_base.iterdir()) == []


def test_missing_password_is_reported_first(
    monkeypatch: pytest.MonkeyPatch,
    central_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    tools = FakeToolchain()
    tools.install(monkeypatch)
    del central_env["MAVEN_PASSWORD"]
    del central_env["MAVEN_CENTRAL_STAGING_PROFILE_ID"]

    result = publish(root=dist, env=central_env, console=MockConsole(), tmp_base=tmp_base)

    assert isinstance(result, Err)
    assert "MAVEN_PASSWORD" in result.error.message
    assert tools.mvn_calls == []


def test_dry_run_signs_but_does_not_deploy(
    monkeypatch: pytest.MonkeyPatch,
    central_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    tools = FakeToolchain()
    tools.install(monkeypatch)
    console = MockConsole()

    result = publish(root=dist, env=central_env, console=console, dry_run=True, tmp_base=tmp_base)

    assert isinstance(result, Ok)
    assert result.value.mode.dry_run
    assert tools.goals() == ["sign-and-deploy-file", "sign-and-deploy-file"]
    assert result.value.staging_repository_id == central_mod.DRY_RUN_REPOSITORY_ID
    assert console.find("rc-release")


def test_signing_failure_stops_before_release(
    monkeypatch: pytest.MonkeyPatch,
    central_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    tools = FakeToolchain()
    tools.install(monkeypatch)
    calls: list[str] = []

    def failing_sign(cmd, *, cwd, log_path, env=None, timeout=None):
        calls.append(cmd[5])
        return Err(ProcessError(tuple(cmd), 1, "gpg: signing failed: Bad passphrase", ""))

    monkeypatch.setattr(signer_mod, "run_logged", failing_sign)

    result = publish(root=dist, env=central_env, console=MockConsole(), tmp_base=tmp_base)

    assert isinstance(result, Err)
    assert result.error.kind == "signing"
    assert len(calls) == 1
    assert tools.mvn_calls == []
    (kept,) = list(tmp_base.iterdir())
    assert not (kept / "work" / "gnupg").exists()
    assert not (kept / "work" / "signing-key.asc").exists()


def test_keep_workdir_keeps_logs_but_not_the_keyring(
    monkeypatch: pytest.MonkeyPatch,
    central_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    tools = FakeToolchain()
    tools.install(monkeypatch)
    central_env["MVNPUB_KEEP_WORKDIR"] = "1"

    result = publish(root=dist, env=central_env, console=MockConsole(), tmp_base=tmp_base)

    assert isinstance(result, Ok)
    (kept,) = list(tmp_base.iterdir())
    work = kept / "work"
    assert (work / "deploy.log").read_text(encoding="utf-8") == DEPLOY_OK
    assert (work / "settings.xml").is_file()
    assert not (work / "gnupg").exists()
    assert not (work / "signing-key.asc").exists()


def test_failed_deploy_hint_carries_output_and_an_existing_log(
    monkeypatch: pytest.MonkeyPatch,
    central_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    output = "[ERROR] Failed to execute goal deploy-staged-repository\n[ERROR] 401 Unauthorized\n"
    tools = FakeToolchain({"deploy-staged-repository": Err(ProcessError(("mvn",), 1, output, ""))})
    tools.install(monkeypatch)

    result = publish(root=dist, env=central_env, console=MockConsole(), tmp_base=tmp_base)

    assert isinstance(result, Err)
    assert result.error.kind == "protocol_extraction"
    assert result.error.hint is not None
    assert "[ERROR] 401 Unauthorized" in result.error.hint
    log = Path(result.error.hint.rsplit("inspect ", 1)[-1])
    assert log.name == "deploy.log"
    assert log.read_text(encoding="utf-8") == output
    assert "rc-release" not in tools.goals()


def test_failed_direct_deploy_keeps_the_log_it_names(
    monkeypatch: pytest.MonkeyPatch,
    direct_env: dict[str, str],
    dist: Path,
    tmp_base: Path,
) -> None:
    failure = (
        "[ERROR] Failed to deploy artifacts: Could not transfer artifact "
        "com.example:lib:jar:1.0.409 from/to internal (https://repo.example.com/releases): "
        "status code: 401, reason phrase: Unauthorized (401)"
    )
    tools = FakeToolchain({"deploy-file": Err(ProcessError(("mvn",), 1, failure, ""))})
    tools.install(monkeypatch)
    console = MockConsole()

    result = publish(root=dist, env=direct_env, console=console, tmp_base=tmp_base)

    assert isinstance(result, Err)
    assert result.error.kind == "remote_fatal"
    assert tools.goals() == ["deploy-file"]
    assert not console.has_warning()
    (kept,) = list(tmp_base.iterdir())
    assert (kept / "work" / "deploy-1.log").read_text(encoding="utf-8") == failure

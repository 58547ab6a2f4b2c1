from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from mvnpub.output.console import ConsoleProtocol


@dataclass(frozen=True, slots=True)
class PublishMode:
    """Operating mode, resolved once per invocation.

    ``signed`` without ``central`` never reaches this type: the resolver
    rejects it first.
    """

    central: bool
    signed: bool
    dry_run: bool

    def describe(self) -> str:
        target = "central" if self.central else "direct"
        signing = "signed" if self.signed else "unsigned"
        run = "dry-run" if self.dry_run else "live"
        return f"{target}, {signing}, {run}"


@dataclass(frozen=True, slots=True)
class SigningKey:
    """Where the private key comes from. Exactly one of the two is set."""

    inline_key: str | None = field(default=None, repr=False)
    key_file: Path | None = None
    passphrase: str = field(default="", repr=False)


@dataclass(frozen=True, slots=True)
class Credentials:
    username: str
    password: str = field(repr=False)
    server_id: str
    staging_profile_id: str | None = None  # central only
    repository_url: str | None = None  # direct only
    signing: SigningKey | None = None


@dataclass(frozen=True, slots=True)
class PublishSettings:
    """Everything the resolver derives from the environment."""

    mode: PublishMode
    credentials: Credentials
    nexus_url: str
    mvn: str = "mvn"
    gpg: str = "gpg"
    # None: decide from the installed gpg version
    loopback_override: bool | None = None
    keep_workdir: bool = False


@dataclass(frozen=True, slots=True)
class Keyring:
    """Ephemeral GnuPG home holding exactly one imported private key."""

    home: Path
    key_id: str


@dataclass(frozen=True, slots=True)
class ArtifactBundle:
    """Descriptor plus its three companions, always handled together."""

    pom: Path
    binary: Path
    sources: Path
    javadoc: Path

    @property
    def name(self) -> str:
        return self.pom.stem

    def files(self) -> tuple[Path, Path, Path, Path]:
        return (self.pom, self.binary, self.sources, self.javadoc)


@dataclass(frozen=True, slots=True)
class WorkDirs:
    """Per-invocation directories, never reused across runs."""

    root: Path
    staging: Path
    work: Path

    @property
    def staging_url(self) -> str:
        return self.staging.resolve().as_uri()


@dataclass(frozen=True, slots=True)
class Published:
    detail: str = ""


@dataclass(frozen=True, slots=True)
class AlreadyPublished:
    detail: str = ""


ReleaseOutcome = Published | AlreadyPublished


@dataclass(frozen=True, slots=True)
class PublishContext:
    """Immutable value threaded through every publish component."""

    settings: PublishSettings
    dirs: WorkDirs
    settings_xml: Path
    env: dict[str, str] = field(repr=False)
    console: ConsoleProtocol
    keyring: Keyring | None = None
    loopback: bool = False

    @property
    def mode(self) -> PublishMode:
        return self.settings.mode

    @property
    def credentials(self) -> Credentials:
        return self.settings.credentials


@dataclass(frozen=True, slots=True)
class PublishReport:
    mode: PublishMode
    bundles: tuple[ArtifactBundle, ...]
    outcomes: tuple[ReleaseOutcome, ...]
    key_id: str | None = None
    staging_repository_id: str | None = None

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if isinstance(o, AlreadyPublished))

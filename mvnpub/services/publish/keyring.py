from __future__ import annotations

from pathlib import Path

from mvnpub.core.result import Err, Ok, Result
from mvnpub.output.console import ConsoleProtocol, Style
from mvnpub.platform.files import atomic_write_text, make_private_dir
from mvnpub.platform.process import run as run_process
from mvnpub.services.publish.errors import PublishError
from mvnpub.services.publish.model import Keyring, SigningKey
from mvnpub.services.publish.timeouts import GPG_TIMEOUT_SECONDS

KEYRING_DIR = "gnupg"
INLINE_KEY_FILE = "signing-key.asc"


def parse_fingerprint(colons: str) -> Result[str, PublishError]:
    """Extract the primary key fingerprint from ``--with-colons`` output.

    The keyring must hold exactly one primary key; its fingerprint is the
    first ``fpr`` record after the ``pub`` record (later ``fpr`` records
    belong to subkeys).
    """
    primaries = 0
    fingerprint: str | None = None
    expect_fpr = False
    for line in colons.splitlines():
        fields = line.split(":")
        record = fields[0]
        if record == "pub":
            primaries += 1
            expect_fpr = True
            continue
        if record == "fpr" and expect_fpr:
            expect_fpr = False
            if primaries == 1 and len(fields) > 9:
                fingerprint = fields[9].strip().upper()
            continue
        if record == "sub":
            expect_fpr = False

    if primaries != 1:
        return Err(
            PublishError(
                kind="key_import",
                message=f"expected exactly one key in the keyring, found {primaries}",
                hint="MAVEN_GPG_KEY must contain a single private key",
            )
        )
    if not fingerprint:
        return Err(PublishError(kind="key_import", message="imported key has no fingerprint"))
    return Ok(fingerprint)


def _key_file(source: SigningKey, work: Path) -> Result[Path, PublishError]:
    if source.inline_key is not None:
        path = work / INLINE_KEY_FILE
        text = source.inline_key if source.inline_key.endswith("\n") else source.inline_key + "\n"
        try:
            atomic_write_text(path, text, mode=0o600)
        except OSError as e:
            return Err(PublishError(kind="io", message=f"cannot write key material: {e}"))
        return Ok(path)

    if source.key_file is None:
        return Err(PublishError(kind="key_import", message="no signing key source"))
    if not source.key_file.is_file():
        return Err(
            PublishError(
                kind="key_import",
                message=f"key file not found: {source.key_file}",
                hint="check MAVEN_GPG_KEY_FILE",
            )
        )
    return Ok(source.key_file)


def import_key(
    *,
    source: SigningKey,
    work: Path,
    gpg: str,
    console: ConsoleProtocol,
) -> Result[Keyring, PublishError]:
    """Import the signing key into a fresh keyring under ``work``.

    Called once per invocation. Every later signing call must pass the
    returned ``Keyring.home`` so it sees the same key.
    """
    key_path = _key_file(source, work)
    if isinstance(key_path, Err):
        return key_path

    try:
        home = make_private_dir(work / KEYRING_DIR)
    except OSError as e:
        return Err(PublishError(kind="io", message=f"cannot create keyring: {e}"))

    cmd = [gpg, "--homedir", str(home), "--batch", "--yes", "--import", str(key_path.value)]
    console.print("gpg --import ...", Style.DIM)
    imported = run_process(cmd, cwd=work, timeout=GPG_TIMEOUT_SECONDS)
    if isinstance(imported, Err):
        return Err(
            PublishError(
                kind="key_import",
                message="gpg failed to import the signing key",
                hint=imported.error.stderr.strip() or None,
            )
        )

    listing = run_process(
        [gpg, "--homedir", str(home), "--batch", "--with-colons", "--fingerprint", "--list-keys"],
        cwd=work,
        timeout=GPG_TIMEOUT_SECONDS,
    )
    if isinstance(listing, Err):
        return Err(
            PublishError(
                kind="key_import",
                message="gpg failed to list the imported key",
                hint=listing.error.stderr.strip() or None,
            )
        )

    fingerprint = parse_fingerprint(listing.value)
    if isinstance(fingerprint, Err):
        return fingerprint

    return Ok(Keyring(home=home, key_id=fingerprint.value))

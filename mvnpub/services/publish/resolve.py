"""Resolve the publish mode and credentials from environment settings.

Validation is strictly ordered and stops at the first unmet requirement, so
the reported error is always the most fundamental one. Nothing here touches
the filesystem or spawns a process.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from mvnpub.core.result import Err, Ok, Result
from mvnpub.services.publish import config
from mvnpub.services.publish.errors import PublishError
from mvnpub.services.publish.model import Credentials, PublishMode, PublishSettings, SigningKey

__all__ = ["get_setting", "parse_flag", "resolve_settings"]

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


def get_setting(env: Mapping[str, str], key: str) -> str | None:
    """Return a stripped value, or None if missing or blank."""
    value = env.get(key)
    if value is None:
        return None
    s = value.strip()
    return s or None


def parse_flag(value: str | None) -> bool | None:
    """Parse a boolean toggle. None when unset or unrecognized."""
    if value is None:
        return None
    v = value.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    return None


def _missing(key: str, why: str) -> Err[PublishError]:
    return Err(
        PublishError(
            kind="configuration",
            message=f"{key} is required {why}",
            hint=f"export {key}=...",
        )
    )


def resolve_settings(
    env: Mapping[str, str],
    *,
    dry_run: bool | None = None,
) -> Result[PublishSettings, PublishError]:
    """Derive ``PublishSettings`` or fail on the first missing requirement.

    Args:
        env: Environment-style mapping (usually ``os.environ``).
        dry_run: Explicit override of the ``DRY_RUN`` toggle.
    """
    explicit_server_id = get_setting(env, config.ENV_SERVER_ID)
    server_id = explicit_server_id or config.CENTRAL_SERVER_ID
    username = get_setting(env, config.ENV_USERNAME)
    password = get_setting(env, config.ENV_PASSWORD)
    profile_id = get_setting(env, config.ENV_STAGING_PROFILE_ID)
    repository_url = get_setting(env, config.ENV_REPOSITORY_URL)
    inline_key = get_setting(env, config.ENV_GPG_KEY)
    key_file = get_setting(env, config.ENV_GPG_KEY_FILE)
    passphrase = get_setting(env, config.ENV_GPG_PASSPHRASE)

    is_central = server_id == config.CENTRAL_SERVER_ID
    is_signed = inline_key is not None or key_file is not None

    if username is None:
        return _missing(config.ENV_USERNAME, "for every target")
    if password is None:
        return _missing(config.ENV_PASSWORD, "for every target")

    if is_central:
        if profile_id is None:
            return _missing(config.ENV_STAGING_PROFILE_ID, "when publishing to central")
    else:
        if explicit_server_id is None:
            return _missing(config.ENV_SERVER_ID, "when not publishing to central")
        if repository_url is None:
            return _missing(config.ENV_REPOSITORY_URL, "when not publishing to central")

    if is_signed and not is_central:
        return Err(
            PublishError(
                kind="configuration",
                message=f"signing is only supported for central (server id {server_id!r})",
                hint=f"unset {config.ENV_GPG_KEY} and {config.ENV_GPG_KEY_FILE}",
            )
        )

    signing: SigningKey | None = None
    if is_signed or is_central:
        if passphrase is None:
            return _missing(config.ENV_GPG_PASSPHRASE, "when signing")
        if inline_key is not None and key_file is not None:
            return Err(
                PublishError(
                    kind="configuration",
                    message=f"{config.ENV_GPG_KEY} and {config.ENV_GPG_KEY_FILE} are mutually exclusive",
                    hint="provide the key inline or as a file, not both",
                )
            )
        if inline_key is None and key_file is None:
            return Err(
                PublishError(
                    kind="configuration",
                    message=f"a signing key is required: set {config.ENV_GPG_KEY} or {config.ENV_GPG_KEY_FILE}",
                )
            )
        signing = SigningKey(
            inline_key=inline_key,
            key_file=Path(key_file).expanduser() if key_file is not None else None,
            passphrase=passphrase,
        )

    if dry_run is None:
        dry_run = parse_flag(env.get(config.ENV_DRY_RUN)) or False

    return Ok(
        PublishSettings(
            mode=PublishMode(central=is_central, signed=signing is not None, dry_run=dry_run),
            credentials=Credentials(
                username=username,
                password=password,
                server_id=server_id,
                staging_profile_id=profile_id if is_central else None,
                repository_url=None if is_central else repository_url,
                signing=signing,
            ),
            nexus_url=get_setting(env, config.ENV_NEXUS_URL) or config.CENTRAL_NEXUS_URL,
            mvn=get_setting(env, config.ENV_MVN) or "mvn",
            gpg=get_setting(env, config.ENV_GPG) or "gpg",
            loopback_override=parse_flag(env.get(config.ENV_GPG_LOOPBACK)),
            keep_workdir=parse_flag(env.get(config.ENV_KEEP_WORKDIR)) or False,
        )
    )

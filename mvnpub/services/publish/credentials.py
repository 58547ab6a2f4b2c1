"""Maven settings with indirect credential references.

The rendered ``settings.xml`` only holds ``${env.NAME}`` placeholders; maven
resolves them from the subprocess environment at execution time. The file
can therefore be logged or cached by the build tool without leaking secrets.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from xml.sax.saxutils import escape

from mvnpub.core.result import Err, Ok, Result
from mvnpub.platform.files import atomic_write_text
from mvnpub.services.publish import config
from mvnpub.services.publish.errors import PublishError
from mvnpub.services.publish.model import Credentials

__all__ = ["placeholder", "render_settings_xml", "subprocess_env", "write_settings"]


def placeholder(env_key: str) -> str:
    return "${env." + env_key + "}"


def render_settings_xml(*, server_id: str, signed: bool) -> str:
    servers = [
        "    <server>\n"
        f"      <id>{escape(server_id)}</id>\n"
        f"      <username>{placeholder(config.ENV_USERNAME)}</username>\n"
        f"      <password>{placeholder(config.ENV_PASSWORD)}</password>\n"
        "    </server>\n"
    ]
    if signed:
        servers.append(
            "    <server>\n"
            f"      <id>{config.PASSPHRASE_SERVER_ID}</id>\n"
            f"      <passphrase>{placeholder(config.ENV_GPG_PASSPHRASE)}</passphrase>\n"
            "    </server>\n"
        )
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<settings xmlns="http://maven.apache.org/SETTINGS/1.0.0">\n'
        "  <servers>\n" + "".join(servers) + "  </servers>\n"
        "</settings>\n"
    )


def write_settings(*, work: Path, credentials: Credentials) -> Result[Path, PublishError]:
    path = work / config.SETTINGS_FILE
    text = render_settings_xml(
        server_id=credentials.server_id,
        signed=credentials.signing is not None,
    )
    try:
        atomic_write_text(path, text, mode=0o600)
    except OSError as e:
        return Err(PublishError(kind="io", message=f"cannot write {path}: {e}"))
    return Ok(path)


def subprocess_env(base: Mapping[str, str], credentials: Credentials) -> dict[str, str]:
    """Environment for maven: ``base`` plus the values the placeholders name.

    Key material itself is never exported; signing uses the imported keyring.
    """
    env = dict(base)
    env[config.ENV_USERNAME] = credentials.username
    env[config.ENV_PASSWORD] = credentials.password
    if credentials.signing is not None:
        env[config.ENV_GPG_PASSPHRASE] = credentials.signing.passphrase
    env.pop(config.ENV_GPG_KEY, None)
    return env

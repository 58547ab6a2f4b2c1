"""Release orchestration for Maven bundles.

resolve -> keyring/credentials -> signer -> central | direct, wired
together by ``service.publish``.
"""

from mvnpub.services.publish.errors import PublishError
from mvnpub.services.publish.model import (
    AlreadyPublished,
    ArtifactBundle,
    PublishMode,
    PublishReport,
    Published,
    ReleaseOutcome,
)
from mvnpub.services.publish.service import publish

__all__ = [
    "AlreadyPublished",
    "ArtifactBundle",
    "PublishError",
    "PublishMode",
    "PublishReport",
    "Published",
    "ReleaseOutcome",
    "publish",
]

from __future__ import annotations

from pathlib import Path

from mvnpub.core.result import Err, Ok, Result
from mvnpub.services.publish.errors import PublishError
from mvnpub.services.publish.model import ArtifactBundle


def bundle_for_pom(pom: Path) -> Result[ArtifactBundle, PublishError]:
    """Resolve the three companions of ``<base>.pom`` next to it."""
    base = pom.with_suffix("")
    bundle = ArtifactBundle(
        pom=pom,
        binary=base.with_name(f"{base.name}.jar"),
        sources=base.with_name(f"{base.name}-sources.jar"),
        javadoc=base.with_name(f"{base.name}-javadoc.jar"),
    )
    missing = [p.name for p in bundle.files() if not p.is_file()]
    if missing:
        return Err(
            PublishError(
                kind="bundle_invalid",
                message=f"incomplete bundle {pom.name}: missing {', '.join(missing)}",
                hint=str(pom.parent),
            )
        )
    return Ok(bundle)


def discover_bundles(root: Path) -> Result[tuple[ArtifactBundle, ...], PublishError]:
    if not root.is_dir():
        return Err(
            PublishError(
                kind="bundle_invalid",
                message=f"bundle directory not found: {root}",
            )
        )

    poms = sorted(p for p in root.rglob("*.pom") if p.is_file())
    if not poms:
        return Err(
            PublishError(
                kind="bundle_invalid",
                message=f"no .pom files under {root}",
            )
        )

    bundles: list[ArtifactBundle] = []
    for pom in poms:
        bundle = bundle_for_pom(pom)
        if isinstance(bundle, Err):
            return bundle
        bundles.append(bundle.value)
    return Ok(tuple(bundles))

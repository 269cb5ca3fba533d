"""Build artifact guard for ``helix start``.

A production start needs both the compiled backend entrypoint and the
compiled frontend index.  If either is missing the start is refused and the
user is told which build script produces it; nothing is rebuilt
automatically.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from helix.config import BuildArtifact, HelixConfig
from helix.scaffolder.collaborators import Collaborator, ExitStatus, start_collaborator
from helix.scaffolder.errors import MissingBuildArtifactError


def check_build_artifacts(
    project_root: str | Path,
    artifacts: Sequence[BuildArtifact],
) -> list[BuildArtifact]:
    """Return the artifacts that do not exist under *project_root*."""
    root = Path(project_root)
    return [artifact for artifact in artifacts if not (root / artifact.path).is_file()]


def ensure_build_artifacts(
    project_root: str | Path,
    artifacts: Sequence[BuildArtifact],
) -> None:
    """Raise ``MissingBuildArtifactError`` unless every artifact exists."""
    missing = check_build_artifacts(project_root, artifacts)
    if missing:
        raise MissingBuildArtifactError(missing)


async def start_project(
    project_root: str | Path,
    config: HelixConfig,
    starter: Collaborator | None = None,
) -> ExitStatus:
    """Check the build output, then run the production start script.

    Returns the exit status of the start script.  The script is never invoked
    when an artifact is missing.
    """
    root = Path(project_root)
    ensure_build_artifacts(root, config.artifacts)
    runner = starter if starter is not None else start_collaborator(config)
    return await runner.run(cwd=root)

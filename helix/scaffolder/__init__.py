"""Helix scaffolder -- generates fullstack FBCA projects.

Runs the UIKit and AppKit generators, merges the fullstack ``package.json``
template into their output and overlays the Helix template files.

Quick usage::

    from helix.config import GenerationContext, HelixConfig
    from helix.scaffolder import ProjectGenerator

    context = GenerationContext.for_target("my-app", template="basicapp")
    result = await ProjectGenerator(HelixConfig()).generate(context)
"""

from helix.scaffolder.generator import GenerationResult, ProjectGenerator
from helix.scaffolder.guard import check_build_artifacts, ensure_build_artifacts, start_project
from helix.scaffolder.manifest import merge_manifests

__all__ = [
    "GenerationResult",
    "ProjectGenerator",
    "check_build_artifacts",
    "ensure_build_artifacts",
    "merge_manifests",
    "start_project",
]

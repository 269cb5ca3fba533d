"""Main generation orchestrator.

Drives one ``helix create`` run from input validation to cleanup:

1. validate the template and the destination,
2. run the UIKit and AppKit generators,
3. merge the fullstack ``package.json``,
4. install dependencies,
5. overlay the Helix template files (after install, so nothing resets them),
6. add ``VITE_API_URL`` to ``.env`` and remove leftover scaffold directories.

There are no retries: every step leaves files behind, so repeating one
blindly could corrupt the project.  The first failure aborts the run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from helix.config import GenerationContext, HelixConfig
from helix.scaffolder.collaborators import Collaborators, run_checked
from helix.scaffolder.errors import (
    DestinationError,
    DestinationExistsError,
    InvalidTemplateError,
    MissingProjectNameError,
    TemplateUnavailableError,
)
from helix.scaffolder.manifest import MergeReport, merge_manifest_files
from helix.scaffolder.templates import (
    CopyReport,
    copy_template_tree,
    list_templates,
    resolve_tokens,
)
from helix.utils import print_debug, print_step, print_success, print_warning

VITE_API_URL_KEY = "VITE_API_URL"

# Directories the upstream generators leave empty for a given template.
CLEANUP_DIRS: dict[str, list[str]] = {
    "basicapp": ["src/utils"],
}


@dataclass
class GenerationResult:
    """Outcome of a successful generation."""

    project_root: Path
    template: str
    merge: MergeReport
    copy: CopyReport
    env_updated: bool = False
    removed_dirs: list[Path] | None = None


class ProjectGenerator:
    """Generation orchestrator.

    Collaborators default to the commands configured in ``HelixConfig`` and
    can be replaced (e.g. in tests) with any object exposing ``run``.
    """

    def __init__(
        self,
        config: HelixConfig,
        collaborators: Collaborators | None = None,
    ) -> None:
        self.config = config
        self.collaborators = collaborators or Collaborators.from_config(config)

    # -- Validation --------------------------------------------------------

    def validate(self, context: GenerationContext) -> None:
        """Check inputs before anything touches the filesystem.

        Raises:
            MissingProjectNameError: If no project name was given.
            InvalidTemplateError: If the template name is unknown.
            TemplateUnavailableError: If the template is not packaged yet.
            DestinationExistsError: If the named target directory exists.
        """
        if not context.project_name.strip():
            raise MissingProjectNameError()

        if context.template not in self.config.available_templates:
            raise InvalidTemplateError(context.template, self.config.available_templates)

        if not self.config.template_path(context.template).is_dir():
            packaged = [
                name
                for name in list_templates(self.config.templates_dir)
                if name in self.config.available_templates
            ]
            raise TemplateUnavailableError(context.template, packaged)

        if not context.in_place and context.project_root.exists():
            raise DestinationExistsError(context.project_name)

    # -- Public API --------------------------------------------------------

    async def generate(self, context: GenerationContext) -> GenerationResult:
        """Generate the project described by *context*.

        Returns:
            A ``GenerationResult`` for the finished project.

        Raises:
            HelixError: On the first failing step.  Files written by earlier
                steps are left in place.
        """
        self.validate(context)
        root = context.project_root

        if context.in_place:
            print_step(f"Installing Helix {context.template} in current directory")
            if (root / "package.json").exists():
                print_step("Found existing package.json - will merge with Helix configuration")
        else:
            print_step(f"Creating Helix {context.template} project: {context.project_name}")
            try:
                root.mkdir(parents=True)
            except OSError as exc:
                raise DestinationError(context.project_name, exc.strerror or str(exc)) from exc
            print_debug(context, f"Created project directory: {root}")

        print_step("Setting up frontend (UIKit)...")
        await run_checked(self.collaborators.frontend, cwd=root, context=context)

        print_step("Setting up backend (AppKit)...")
        await run_checked(self.collaborators.backend, cwd=root, context=context)

        print_step("Configuring fullstack integration...")
        merge = await merge_manifest_files(
            root / "package.json", self.config.manifest_template_path, context
        )

        print_step("Installing dependencies...")
        await run_checked(self.collaborators.installer, cwd=root, context=context)

        copy = await copy_template_tree(
            self.config.template_path(context.template),
            root,
            resolve_tokens(context, self.config),
            context,
        )
        print_success("Applied Helix template files")

        env_updated = add_vite_api_url(root, self.config.api_url, context)
        removed = cleanup_scaffold(root, context.template, context)

        return GenerationResult(
            project_root=root,
            template=context.template,
            merge=merge,
            copy=copy,
            env_updated=env_updated,
            removed_dirs=removed,
        )


# ---------------------------------------------------------------------------
# Post-generation steps
# ---------------------------------------------------------------------------


def add_vite_api_url(
    project_root: Path,
    api_url: str,
    context: GenerationContext | None = None,
) -> bool:
    """Append ``VITE_API_URL`` to ``.env`` if the file exists without it.

    Failure is not fatal: a warning is printed and ``False`` returned.
    """
    env_path = project_root / ".env"
    if not env_path.exists():
        print_debug(context, "No .env file found, skipping VITE_API_URL")
        return False
    try:
        content = env_path.read_text(encoding="utf-8")
        if VITE_API_URL_KEY in content:
            return False
        if content and not content.endswith("\n"):
            content += "\n"
        content += f"\n# Frontend API Configuration\n{VITE_API_URL_KEY}={api_url}\n"
        env_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        print_warning(f"Could not add {VITE_API_URL_KEY} to .env: {exc}")
        return False
    print_debug(context, f"Added {VITE_API_URL_KEY}={api_url} to .env")
    return True


def cleanup_scaffold(
    project_root: Path,
    template: str,
    context: GenerationContext | None = None,
) -> list[Path]:
    """Remove empty directories the upstream generators left behind."""
    removed: list[Path] = []
    for relative in CLEANUP_DIRS.get(template, []):
        target = project_root / relative
        try:
            if target.is_dir() and not any(target.iterdir()):
                target.rmdir()
                removed.append(target)
                print_debug(context, f"Removed empty {relative} directory")
        except OSError as exc:
            print_debug(context, f"Cleanup of {relative} skipped: {exc}")
    return removed

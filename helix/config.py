"""Helix configuration.

Centralised, typed configuration for the generator. All settings use Pydantic
v2 models so they are validated at construction time and can be overridden
from environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

_DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "scaffolder" / "templates"

# Sentinel project name meaning "generate into the working directory".
CURRENT_DIR_SENTINEL = "."

TEMPLATE_NAMES: tuple[str, ...] = ("basicapp", "welcomeapp", "userapp", "todoapp")


class BuildArtifact(BaseModel):
    """A build output that must exist before a production start."""

    path: str = Field(..., description="Path relative to the project root")
    label: str = Field(..., description="Human readable name of the artifact")
    rebuild_command: str = Field(..., description="Command that produces the artifact")


def _default_artifacts() -> list[BuildArtifact]:
    return [
        BuildArtifact(
            path="dist/api/server.js",
            label="compiled backend entrypoint",
            rebuild_command="npm run build:api",
        ),
        BuildArtifact(
            path="dist/index.html",
            label="compiled frontend index",
            rebuild_command="npm run build:web",
        ),
    ]


class CommandConfig(BaseModel):
    """Argument vectors for every external collaborator."""

    frontend: list[str] = Field(
        default_factory=lambda: [
            "npx", "@voilajsx/uikit@latest", "create", ".", "--fbca", "--theme", "base",
        ]
    )
    backend: list[str] = Field(
        default_factory=lambda: ["npx", "@voilajsx/appkit@latest", "generate", "app"]
    )
    install: list[str] = Field(default_factory=lambda: ["npm", "install"])
    start: list[str] = Field(default_factory=lambda: ["npm", "run", "start"])

    @field_validator("frontend", "backend", "install", "start")
    @classmethod
    def _not_empty(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("command must contain at least the executable")
        return value


class HelixConfig(BaseModel):
    """Global Helix configuration.

    Created once by the CLI entry point and passed to the generator and the
    build guard.
    """

    templates_dir: Path = Field(default=_DEFAULT_TEMPLATES_DIR)
    available_templates: list[str] = Field(default_factory=lambda: list(TEMPLATE_NAMES))
    default_template: str = Field(default="basicapp")
    default_theme: str = Field(default="base")
    default_mode: str = Field(default="light")
    api_url: str = Field(default="http://localhost:3000")
    command_timeout: int = Field(
        default=900, ge=30, description="Per-collaborator timeout in seconds"
    )
    commands: CommandConfig = Field(default_factory=CommandConfig)
    artifacts: list[BuildArtifact] = Field(default_factory=_default_artifacts)

    @property
    def manifest_template_path(self) -> Path:
        """Path to the fullstack ``package.json`` template."""
        return self.templates_dir / "package.json"

    def template_path(self, template: str) -> Path:
        """Directory holding the files of *template*."""
        return self.templates_dir / template

    @classmethod
    def from_env(cls) -> "HelixConfig":
        """Build a ``HelixConfig`` from environment variables.

        Recognised variables (all optional):
            HELIX_TEMPLATES_DIR, HELIX_API_URL, HELIX_DEFAULT_THEME,
            HELIX_DEFAULT_MODE, HELIX_COMMAND_TIMEOUT, HELIX_NPX, HELIX_NPM.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("HELIX_TEMPLATES_DIR"):
            kwargs["templates_dir"] = Path(os.environ["HELIX_TEMPLATES_DIR"])
        if os.environ.get("HELIX_API_URL"):
            kwargs["api_url"] = os.environ["HELIX_API_URL"]
        if os.environ.get("HELIX_DEFAULT_THEME"):
            kwargs["default_theme"] = os.environ["HELIX_DEFAULT_THEME"]
        if os.environ.get("HELIX_DEFAULT_MODE"):
            kwargs["default_mode"] = os.environ["HELIX_DEFAULT_MODE"]
        if os.environ.get("HELIX_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = int(os.environ["HELIX_COMMAND_TIMEOUT"])

        commands = CommandConfig()
        npx = os.environ.get("HELIX_NPX")
        if npx:
            commands.frontend = [npx, *commands.frontend[1:]]
            commands.backend = [npx, *commands.backend[1:]]
        npm = os.environ.get("HELIX_NPM")
        if npm:
            commands.install = [npm, *commands.install[1:]]
            commands.start = [npm, *commands.start[1:]]
        kwargs["commands"] = commands

        return cls(**kwargs)


class GenerationContext(BaseModel):
    """Ephemeral state of a single ``create`` run.

    Passed explicitly to every component instead of a global verbose flag.
    """

    project_root: Path
    project_name: str
    template: str = Field(default="basicapp")
    verbose: bool = Field(default=False)

    @property
    def in_place(self) -> bool:
        """``True`` when generating into the working directory."""
        return self.project_name == CURRENT_DIR_SENTINEL

    @property
    def effective_name(self) -> str:
        """Project name with the ``.`` sentinel resolved to the directory name."""
        if self.in_place:
            return self.project_root.resolve().name
        return Path(self.project_name).name

    @classmethod
    def for_target(
        cls,
        project_name: str,
        template: str = "basicapp",
        verbose: bool = False,
        cwd: Path | None = None,
    ) -> "GenerationContext":
        """Resolve the project root for *project_name* relative to *cwd*."""
        base = Path(cwd) if cwd is not None else Path.cwd()
        if project_name == CURRENT_DIR_SENTINEL:
            root = base
        else:
            root = base / project_name
        return cls(
            project_root=root.resolve(),
            project_name=project_name,
            template=template,
            verbose=verbose,
        )

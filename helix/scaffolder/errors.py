"""Exceptions raised by the generation engine.

Every fatal condition derives from ``HelixError``; the CLI catches it, prints
the message and exits with status 1.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from helix.config import BuildArtifact


class HelixError(Exception):
    """Base class for every fatal Helix error."""


class MissingProjectNameError(HelixError):
    """Raised when ``create`` is invoked without a target."""

    def __init__(self) -> None:
        super().__init__(
            'Please provide a project name or "." for current directory: '
            "helix create <project-name>"
        )


class InvalidTemplateError(HelixError):
    """Raised when the template identifier is not one of the known names."""

    def __init__(self, template: str, available: Sequence[str]) -> None:
        self.template = template
        self.available = list(available)
        super().__init__(
            f'Invalid template "{template}". '
            f"Available templates: {', '.join(self.available)}"
        )


class TemplateUnavailableError(HelixError):
    """Raised when a known template is not packaged yet."""

    def __init__(self, template: str, packaged: Sequence[str]) -> None:
        self.template = template
        self.packaged = list(packaged)
        super().__init__(
            f'Template "{template}" is not yet available. '
            f"Currently available: {', '.join(self.packaged) or 'none'}"
        )


class DestinationExistsError(HelixError):
    """Raised when the named project directory already exists."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Directory {path} already exists")


class DestinationError(HelixError):
    """Raised when the project directory cannot be created."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot create directory {path}: {reason}")


class CollaboratorError(HelixError):
    """Raised when an external generator or the package manager fails."""

    def __init__(self, name: str, command: str, returncode: int, stderr: str = "") -> None:
        self.name = name
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        message = f"{name} failed (exit {returncode}): {command}"
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(message)


class TemplateError(HelixError):
    """Raised when a template file cannot be read or written."""


class ManifestError(HelixError):
    """Raised when a ``package.json`` is missing or cannot be parsed."""


class MissingBuildArtifactError(HelixError):
    """Raised by the build guard when build output is missing."""

    def __init__(self, missing: Sequence[BuildArtifact]) -> None:
        self.missing = list(missing)
        lines = ["Build artifacts missing, cannot start:"]
        for artifact in self.missing:
            lines.append(
                f"  - {artifact.path} ({artifact.label}): run `{artifact.rebuild_command}`"
            )
        super().__init__("\n".join(lines))

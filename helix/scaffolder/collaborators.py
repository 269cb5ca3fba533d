"""External collaborators: generators, package manager and start script.

Each collaborator is opaque to the engine.  All it exposes is ``run(args)``,
which executes the child process to completion and returns an ``ExitStatus``.
Any equivalent generator can be swapped in by providing another object with
the same method.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from helix.config import GenerationContext, HelixConfig
from helix.scaffolder.errors import CollaboratorError
from helix.utils import format_command, print_debug, run_command


@dataclass(frozen=True)
class ExitStatus:
    """Outcome of a collaborator run."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Collaborator(Protocol):
    """Anything that can be run as a black-box step."""

    name: str

    async def run(
        self,
        args: Sequence[str] = (),
        *,
        cwd: Path | None = None,
        context: GenerationContext | None = None,
    ) -> ExitStatus:
        ...


@dataclass
class CommandCollaborator:
    """Collaborator backed by a child process.

    Output is captured unless the context is verbose, in which case the child
    inherits the terminal so the user sees the generator's own progress.
    """

    name: str
    command: list[str]
    timeout: float | None = 900
    env: dict[str, str] = field(default_factory=dict)
    inherit_output: bool = False

    async def run(
        self,
        args: Sequence[str] = (),
        *,
        cwd: Path | None = None,
        context: GenerationContext | None = None,
    ) -> ExitStatus:
        argv = [*self.command, *args]
        print_debug(context, f"Running: {format_command(argv)}")
        inherit = self.inherit_output or (context is not None and context.verbose)
        returncode, stdout, stderr = await run_command(
            argv,
            cwd=cwd,
            timeout=self.timeout,
            capture=not inherit,
            env=self.env or None,
        )
        print_debug(context, f"{self.name} exited with {returncode}")
        return ExitStatus(returncode=returncode, stdout=stdout, stderr=stderr)


@dataclass
class Collaborators:
    """The set of collaborators a generation run depends on."""

    frontend: Collaborator
    backend: Collaborator
    installer: Collaborator

    @classmethod
    def from_config(cls, config: HelixConfig) -> "Collaborators":
        timeout = config.command_timeout
        return cls(
            frontend=CommandCollaborator("Frontend generator (UIKit)", config.commands.frontend, timeout),
            backend=CommandCollaborator("Backend generator (AppKit)", config.commands.backend, timeout),
            installer=CommandCollaborator("Package install", config.commands.install, timeout),
        )


def start_collaborator(config: HelixConfig) -> CommandCollaborator:
    """Collaborator that runs the packaged production start script."""
    return CommandCollaborator(
        "Production start",
        config.commands.start,
        timeout=None,
        env={"NODE_ENV": "production"},
        inherit_output=True,
    )


async def run_checked(
    collaborator: Collaborator,
    *,
    cwd: Path,
    context: GenerationContext | None = None,
    args: Sequence[str] = (),
) -> ExitStatus:
    """Run *collaborator* and raise ``CollaboratorError`` on a non-zero exit."""
    status = await collaborator.run(args, cwd=cwd, context=context)
    if not status.ok:
        command = getattr(collaborator, "command", None)
        shown = format_command([*command, *args]) if command else collaborator.name
        raise CollaboratorError(collaborator.name, shown, status.returncode, status.stderr)
    return status

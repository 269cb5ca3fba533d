"""Shared pytest fixtures for the Helix test suite.

Provides reusable fixtures for:
- A small synthetic template tree and a config pointing at it
- Recording fake collaborators that emulate UIKit, AppKit and npm
- Mock asyncio subprocess helpers
"""

from __future__ import annotations

import json
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from helix.config import GenerationContext, HelixConfig
from helix.scaffolder.collaborators import Collaborators, ExitStatus


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------

UPSTREAM_MANIFEST: dict[str, Any] = {
    "name": "generated-app",
    "version": "0.1.0",
    "type": "commonjs",
    "description": "UIKit starter",
    "scripts": {"dev": "vite", "build": "vite build"},
    "dependencies": {"react": "^18.3.1", "@voilajsx/uikit": "^1.0.0"},
    "devDependencies": {"vite": "^5.4.0"},
    "keywords": ["uikit"],
}

TEMPLATE_MANIFEST: dict[str, Any] = {
    "scripts": {"dev": "concurrently api web", "build": "npm run build:web", "build:api": "tsc"},
    "dependencies": {"react": "^17.0.0", "express": "^4.21.0"},
    "devDependencies": {"tsx": "^4.16.0", "vite": "^4.0.0"},
}


@pytest.fixture
def upstream_manifest() -> dict[str, Any]:
    """A manifest as the UIKit/AppKit generators would leave it."""
    return json.loads(json.dumps(UPSTREAM_MANIFEST))


@pytest.fixture
def template_manifest() -> dict[str, Any]:
    """A reduced Helix fullstack manifest."""
    return json.loads(json.dumps(TEMPLATE_MANIFEST))


# ---------------------------------------------------------------------------
# Template tree
# ---------------------------------------------------------------------------

@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    """A templates root with a ``basicapp`` tree and the fullstack manifest.

    Layout::

        templates/
            package.json
            basicapp/
                README.md.template
                package.json          (must never be copied)
                src/api/welcome.ts
                src/web/config.ts.template
                src/web/empty/
    """
    root = tmp_path / "templates"
    app = root / "basicapp"
    (app / "src" / "api").mkdir(parents=True)
    (app / "src" / "web" / "empty").mkdir(parents=True)
    (app / "README.md.template").write_text(
        "# {{projectName}}\n\nTheme {{defaultTheme}} in {{defaultMode}} mode.\n",
        encoding="utf-8",
    )
    (app / "package.json").write_text('{"name": "template-owned"}\n', encoding="utf-8")
    (app / "src" / "api" / "welcome.ts").write_text(
        "export const greeting = 'hello';\n", encoding="utf-8"
    )
    (app / "src" / "web" / "config.ts.template").write_text(
        "export const name = '{{projectName}}';\nexport const style = {{ color: 'red' }};\n",
        encoding="utf-8",
    )
    (root / "package.json").write_text(json.dumps(TEMPLATE_MANIFEST, indent=2), encoding="utf-8")
    return root


@pytest.fixture
def helix_config(templates_dir: Path) -> HelixConfig:
    """Config pointing at the synthetic templates."""
    return HelixConfig(templates_dir=templates_dir)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Working directory in which projects are generated."""
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def context_factory(workspace: Path) -> Callable[..., GenerationContext]:
    """Build a ``GenerationContext`` rooted in the workspace."""
    def factory(
        project_name: str = "my-app",
        template: str = "basicapp",
        verbose: bool = False,
    ) -> GenerationContext:
        return GenerationContext.for_target(
            project_name, template=template, verbose=verbose, cwd=workspace
        )

    return factory


# ---------------------------------------------------------------------------
# Fake collaborators
# ---------------------------------------------------------------------------

class FakeCollaborator:
    """Collaborator double that records calls and optionally writes files.

    ``files`` maps a path relative to the working directory to the text that
    is written when the collaborator runs successfully; ``dirs`` are created
    empty.
    """

    def __init__(
        self,
        name: str,
        returncode: int = 0,
        files: dict[str, str] | None = None,
        stderr: str = "",
        log: list[str] | None = None,
        dirs: list[str] | None = None,
    ) -> None:
        self.name = name
        self.dirs = dirs or []
        self.returncode = returncode
        self.files = files or {}
        self.stderr = stderr
        self.calls: list[dict[str, Any]] = []
        self.log = log if log is not None else []

    async def run(
        self,
        args: Sequence[str] = (),
        *,
        cwd: Path | None = None,
        context: GenerationContext | None = None,
    ) -> ExitStatus:
        self.calls.append({"args": list(args), "cwd": cwd, "context": context})
        self.log.append(self.name)
        if self.returncode == 0 and cwd is not None:
            for relative, content in self.files.items():
                target = Path(cwd) / relative
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
            for relative in self.dirs:
                (Path(cwd) / relative).mkdir(parents=True, exist_ok=True)
        return ExitStatus(returncode=self.returncode, stderr=self.stderr)


@pytest.fixture
def collaborator_factory() -> type[FakeCollaborator]:
    """The ``FakeCollaborator`` class, for tests that build their own set."""
    return FakeCollaborator


@pytest.fixture
def call_log() -> list[str]:
    """Shared ordered record of collaborator invocations."""
    return []


@pytest.fixture
def fake_collaborators(call_log: list[str]) -> Collaborators:
    """Collaborators emulating UIKit, AppKit and npm install."""
    return Collaborators(
        frontend=FakeCollaborator(
            "frontend",
            files={
                "package.json": json.dumps(UPSTREAM_MANIFEST, indent=2),
                "src/web/main.tsx": "// uikit entry\n",
            },
            log=call_log,
        ),
        backend=FakeCollaborator(
            "backend",
            files={
                ".env": "PORT=3000",
                "src/api/server.ts": "// appkit server\n",
            },
            dirs=["src/utils"],
            log=call_log,
        ),
        installer=FakeCollaborator("installer", log=call_log),
    )


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory

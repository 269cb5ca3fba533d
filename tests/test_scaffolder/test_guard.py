"""Tests for the build artifact guard (helix.scaffolder.guard)."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from helix.config import BuildArtifact, HelixConfig
from helix.scaffolder.collaborators import ExitStatus
from helix.scaffolder.errors import MissingBuildArtifactError
from helix.scaffolder.guard import (
    check_build_artifacts,
    ensure_build_artifacts,
    start_project,
)

pytestmark = pytest.mark.unit


def _build(root: Path, *paths: str) -> None:
    for relative in paths:
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("built\n", encoding="utf-8")


@pytest.fixture
def starter() -> AsyncMock:
    mock = AsyncMock()
    mock.name = "Production start"
    mock.run = AsyncMock(return_value=ExitStatus(0))
    return mock


class TestCheckBuildArtifacts:
    def test_all_present(self, tmp_path: Path):
        _build(tmp_path, "dist/api/server.js", "dist/index.html")
        assert check_build_artifacts(tmp_path, HelixConfig().artifacts) == []

    def test_reports_missing_backend(self, tmp_path: Path):
        _build(tmp_path, "dist/index.html")
        missing = check_build_artifacts(tmp_path, HelixConfig().artifacts)
        assert [a.path for a in missing] == ["dist/api/server.js"]
        assert missing[0].rebuild_command == "npm run build:api"

    def test_nothing_built(self, tmp_path: Path):
        missing = check_build_artifacts(tmp_path, HelixConfig().artifacts)
        assert [a.path for a in missing] == ["dist/api/server.js", "dist/index.html"]

    def test_directory_does_not_count(self, tmp_path: Path):
        (tmp_path / "dist" / "index.html").mkdir(parents=True)
        artifacts = [BuildArtifact(path="dist/index.html", label="web", rebuild_command="x")]
        assert len(check_build_artifacts(tmp_path, artifacts)) == 1

    def test_has_no_side_effects(self, tmp_path: Path):
        check_build_artifacts(tmp_path, HelixConfig().artifacts)
        assert list(tmp_path.iterdir()) == []


class TestEnsureBuildArtifacts:
    def test_message_names_artifact_and_command(self, tmp_path: Path):
        _build(tmp_path, "dist/index.html")
        with pytest.raises(MissingBuildArtifactError) as exc_info:
            ensure_build_artifacts(tmp_path, HelixConfig().artifacts)
        message = str(exc_info.value)
        assert "dist/api/server.js" in message
        assert "npm run build:api" in message
        assert "dist/index.html" not in message

    def test_passes_when_built(self, tmp_path: Path):
        _build(tmp_path, "dist/api/server.js", "dist/index.html")
        ensure_build_artifacts(tmp_path, HelixConfig().artifacts)

    def test_exported_from_package(self):
        import helix.scaffolder as scaffolder

        assert scaffolder.ensure_build_artifacts is ensure_build_artifacts
        assert "ensure_build_artifacts" in scaffolder.__all__


class TestStartProject:
    @pytest.mark.asyncio
    async def test_missing_backend_never_starts(self, tmp_path: Path, starter: AsyncMock):
        _build(tmp_path, "dist/index.html")
        with pytest.raises(MissingBuildArtifactError):
            await start_project(tmp_path, HelixConfig(), starter)
        starter.run.assert_not_called()

    @pytest.mark.asyncio
    async def test_starts_when_built(self, tmp_path: Path, starter: AsyncMock):
        _build(tmp_path, "dist/api/server.js", "dist/index.html")
        status = await start_project(tmp_path, HelixConfig(), starter)
        assert status.ok
        starter.run.assert_awaited_once_with(cwd=tmp_path)

    @pytest.mark.asyncio
    async def test_start_exit_status_propagates(self, tmp_path: Path, starter: AsyncMock):
        _build(tmp_path, "dist/api/server.js", "dist/index.html")
        starter.run.return_value = ExitStatus(1)
        status = await start_project(tmp_path, HelixConfig(), starter)
        assert status.returncode == 1

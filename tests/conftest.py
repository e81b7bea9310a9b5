"""Shared pytest fixtures for the next-fhi-cli test suite.

Provides reusable fixtures for:
- A ``ScaffoldConfig`` rooted in a temporary directory
- A fake ``create-next-app`` output directory with a ``package.json``
- A fake external-command runner that records every argv and simulates
  the side effects of ``create-next-app`` and ``husky init``
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from next_fhi_cli.config import ScaffoldConfig
from next_fhi_cli.utils import CommandError


NEXT_APP_PACKAGE_JSON: dict[str, Any] = {
    "name": "patient-portal",
    "version": "0.1.0",
    "private": True,
    "scripts": {
        "dev": "next dev --turbopack",
        "build": "next build",
        "start": "next start",
        "lint": "next lint",
    },
    "dependencies": {"next": "15.3.1", "react": "^19.0.0", "react-dom": "^19.0.0"},
}


def write_next_app(project_path: Path) -> None:
    """Create the minimal files ``create-next-app`` leaves behind."""
    (project_path / "src" / "app").mkdir(parents=True, exist_ok=True)
    (project_path / "package.json").write_text(
        json.dumps(NEXT_APP_PACKAGE_JSON, indent=2), encoding="utf-8"
    )


# ---------------------------------------------------------------------------
# Config & directories
# ---------------------------------------------------------------------------


@pytest.fixture
def scaffold_config(tmp_path: Path) -> ScaffoldConfig:
    """Config for ``patient-portal`` under a temp dir, with no waiting."""
    return ScaffoldConfig(
        project_name="patient-portal",
        base_dir=tmp_path,
        settle_delay=0,
        skip_preflight=True,
    )


@pytest.fixture
def next_app(scaffold_config: ScaffoldConfig) -> Path:
    """A project directory as produced by ``create-next-app``."""
    project_path = scaffold_config.project_path
    write_next_app(project_path)
    return project_path


# ---------------------------------------------------------------------------
# Fake external commands
# ---------------------------------------------------------------------------


class FakeRunner:
    """Stand-in for ``run_command`` / ``run_checked`` in the pipeline module.

    Every call is recorded in :attr:`calls` as ``(argv, cwd)`` and its extra
    environment in :attr:`envs`.  Commands
    whose argv contains a string listed in :attr:`failing` exit with 1.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], Path | None]] = []
        self.failing: set[str] = set()
        self.versions: dict[str, str] = {"node": "v20.11.1", "pnpm": "9.1.0"}
        self.envs: list[dict[str, str] | None] = []

    @property
    def commands(self) -> list[list[str]]:
        return [argv for argv, _ in self.calls]

    async def run_command(
        self,
        cmd: list[str],
        cwd: str | Path | None = None,
        timeout: int = 120,
        capture: bool = True,
        env: dict[str, str] | None = None,
    ) -> tuple[int, str, str]:
        workdir = Path(cwd) if cwd else None
        self.calls.append((list(cmd), workdir))
        self.envs.append(env)

        if any(marker in cmd for marker in self.failing):
            return (1, "", f"{cmd[0]}: simulated failure")

        if cmd[1:] == ["--version"]:
            return (0, self.versions.get(cmd[0], "1.0.0"), "")
        if "next-app@latest" in cmd and workdir is not None:
            write_next_app(workdir / cmd[3])
        if "husky@latest" in cmd and workdir is not None:
            (workdir / ".husky").mkdir(parents=True, exist_ok=True)
            (workdir / ".husky" / "pre-commit").write_text("npm test\n", encoding="utf-8")
        return (0, "", "")

    async def run_checked(
        self,
        cmd: list[str],
        cwd: str | Path | None = None,
        timeout: int = 120,
        capture: bool = True,
        env: dict[str, str] | None = None,
    ) -> str:
        returncode, stdout, stderr = await self.run_command(
            cmd, cwd=cwd, timeout=timeout, capture=capture, env=env
        )
        if returncode != 0:
            raise CommandError(cmd, returncode, stderr)
        return stdout


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Patch the pipeline's command runners with a :class:`FakeRunner`."""
    runner = FakeRunner()
    with patch("next_fhi_cli.pipeline.run_command", new=runner.run_command), \
         patch("next_fhi_cli.pipeline.run_checked", new=runner.run_checked):
        yield runner

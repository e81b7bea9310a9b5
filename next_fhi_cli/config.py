"""next-fhi-cli configuration.

Typed configuration for a single scaffold run.  Settings use Pydantic v2
models so an invalid project name or timeout is rejected at construction
time, before any external command is started.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

KEBAB_CASE_RE = re.compile(r"^[a-z0-9-]+$")


def is_kebab_case(name: str) -> bool:
    """Return ``True`` if *name* is lowercase letters, digits and dashes only."""
    return bool(KEBAB_CASE_RE.match(name))


def project_name_error(name: str) -> str | None:
    """Return a human-readable problem with *name*, or ``None`` if it is valid."""
    if not name:
        return "Project name is required!"
    if not is_kebab_case(name):
        return "Project name must be kebab-case (lowercase with dashes)!"
    return None


class ScaffoldConfig(BaseModel):
    """Settings for one ``init`` run.

    The project is created at ``base_dir / project_name``; the directory must
    not exist yet.
    """

    project_name: str
    base_dir: Path = Field(default=Path("."))
    package_manager: str = Field(default="pnpm")
    datasource_provider: str = Field(default="sqlserver")
    app_url: str = Field(default="http://localhost:3000")
    command_timeout: int = Field(
        default=900, ge=30, description="Per-command timeout in seconds"
    )
    settle_delay: float = Field(
        default=1.0, ge=0, description="Pause after create-next-app before checking the directory"
    )
    min_node_major: int = Field(default=18, ge=1)
    min_pnpm_major: int = Field(default=8, ge=1)
    npm_registry: str = Field(default="https://registry.npmjs.org/")
    skip_preflight: bool = Field(default=False)

    @field_validator("project_name")
    @classmethod
    def _check_project_name(cls, value: str) -> str:
        problem = project_name_error(value)
        if problem:
            raise ValueError(problem)
        return value

    @property
    def project_path(self) -> Path:
        """Absolute path of the project directory to be created."""
        return (self.base_dir / self.project_name).resolve()

    @classmethod
    def from_env(cls, project_name: str, **overrides: Any) -> "ScaffoldConfig":
        """Build a ``ScaffoldConfig`` from environment variables.

        Recognised variables (all optional):
            NEXT_FHI_BASE_DIR, NEXT_FHI_PACKAGE_MANAGER,
            NEXT_FHI_DATASOURCE_PROVIDER, NEXT_FHI_APP_URL,
            NEXT_FHI_COMMAND_TIMEOUT, NEXT_FHI_REGISTRY.

        Keyword *overrides* (typically CLI flags) win over the environment.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("NEXT_FHI_BASE_DIR"):
            kwargs["base_dir"] = Path(os.environ["NEXT_FHI_BASE_DIR"])
        if os.environ.get("NEXT_FHI_PACKAGE_MANAGER"):
            kwargs["package_manager"] = os.environ["NEXT_FHI_PACKAGE_MANAGER"]
        if os.environ.get("NEXT_FHI_DATASOURCE_PROVIDER"):
            kwargs["datasource_provider"] = os.environ["NEXT_FHI_DATASOURCE_PROVIDER"]
        if os.environ.get("NEXT_FHI_APP_URL"):
            kwargs["app_url"] = os.environ["NEXT_FHI_APP_URL"]
        if os.environ.get("NEXT_FHI_COMMAND_TIMEOUT"):
            kwargs["command_timeout"] = int(os.environ["NEXT_FHI_COMMAND_TIMEOUT"])
        if os.environ.get("NEXT_FHI_REGISTRY"):
            kwargs["npm_registry"] = os.environ["NEXT_FHI_REGISTRY"]

        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        return cls(project_name=project_name, **kwargs)

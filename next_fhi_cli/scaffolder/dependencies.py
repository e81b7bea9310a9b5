"""npm dependency groups installed into every generated project.

Packages are installed in separate batches, one ``pnpm add`` per group, so
a resolution conflict in one group does not hide which batch caused it.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class DependencyGroup(BaseModel):
    """A batch of npm packages installed with a single command."""

    name: str
    packages: list[str] = Field(default_factory=list)
    dev: bool = Field(default=False, description="Install as devDependencies")


DEPENDENCY_GROUPS: list[DependencyGroup] = [
    DependencyGroup(
        name="auth",
        packages=[
            "next-auth@^4.24.5",
            "bcryptjs",
            "jsonwebtoken",
            "clsx",
            "tailwind-merge",
        ],
    ),
    DependencyGroup(
        name="form",
        packages=["react-hook-form", "zod", "@hookform/resolvers"],
    ),
    DependencyGroup(name="state", packages=["zustand"]),
    DependencyGroup(name="database", packages=["@prisma/client@^6.7.0"]),
    DependencyGroup(
        name="dev",
        dev=True,
        packages=[
            "prisma@^6.7.0",
            "@types/bcryptjs",
            "@types/jsonwebtoken",
            "vitest",
            "@vitejs/plugin-react",
            "@testing-library/jest-dom",
            "jsdom",
            "@playwright/test",
            "husky",
            "lint-staged",
            "prettier",
            "ts-node",
        ],
    ),
]


def install_command(group: DependencyGroup, package_manager: str = "pnpm") -> list[str]:
    """Return the argv that installs *group* with *package_manager*."""
    cmd = [package_manager, "add"]
    if group.dev:
        cmd.append("-D")
    return [*cmd, *group.packages]

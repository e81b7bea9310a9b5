"""File-writing half of the scaffold.

Takes a ``ScaffoldConfig`` and writes the folder tree, configuration files,
example code, git hook files and Prisma setup into a project directory that
``create-next-app`` has already created.  External commands are not run
here; see ``next_fhi_cli.pipeline`` for the ordering and the commands.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from pathlib import Path
from typing import Any

from next_fhi_cli.config import ScaffoldConfig
from next_fhi_cli.naming import hook_context
from next_fhi_cli.utils import load_json, make_executable, save_json, write_file

from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Static project data
# ---------------------------------------------------------------------------

PROJECT_FOLDERS: list[str] = [
    "src/app/api/auth/[...nextauth]",
    "src/components/ui",
    "src/components/forms",
    "src/components/layouts",
    "src/lib/actions",
    "src/lib/api",
    "src/lib/utils",
    "src/lib/validations",
    "src/lib/hooks",
    "src/store",
    "src/types",
    "src/utils",
    "prisma",
    "public/images",
    "public/icons",
    "__tests__/unit",
    "__tests__/e2e",
]

GITKEEP_FOLDERS: list[str] = [
    "src/components/forms",
    "src/components/layouts",
]

# Root-level templates rendered in the CONFIGURE step: template -> output.
_CONFIG_FILES: dict[str, str] = {
    "vitest.config.ts.j2": "vitest.config.ts",
    "playwright.config.ts.j2": "playwright.config.ts",
    ".prettierrc.j2": ".prettierrc",
    "__tests__/setup.ts.j2": "__tests__/setup.ts",
}

# ``src/`` templates owned by other steps.
_SRC_SKIP_PATTERNS: list[str] = ["utils/check-db", "lib/db.ts"]

LINT_STAGED: dict[str, list[str]] = {
    "*.{js,jsx,ts,tsx}": ["eslint --fix", "prettier --write"],
    "*.{json,css,md}": ["prettier --write"],
}


def package_scripts(package_manager: str = "pnpm") -> dict[str, str]:
    """npm scripts merged into the generated ``package.json``."""
    return {
        "test": "vitest",
        "checkdb": "ts-node src/utils/check-db.ts",
        "dev": f"{package_manager} run checkdb && next dev",
        "test:ui": "vitest --ui",
        "test:e2e": "playwright test",
        "test:e2e:ui": "playwright test --ui",
        "lint:fix": "eslint . --fix",
        "format": "prettier --write .",
        "prepare": "husky",
    }


def shadcn_config() -> dict[str, Any]:
    """Contents of ``components.json`` for the shadcn/ui CLI."""
    return {
        "$schema": "https://ui.shadcn.com/schema.json",
        "style": "default",
        "rsc": True,
        "tsx": True,
        "tailwind": {
            "config": "tailwind.config.ts",
            "css": "src/app/globals.css",
            "baseColor": "slate",
            "cssVariables": True,
            "prefix": "",
        },
        "aliases": {
            "components": "@/components",
            "utils": "@/lib/utils",
            "ui": "@/components/ui",
        },
    }


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Writes the FHI project layout on top of a fresh Next.js app.

    Every public method returns the list of paths it wrote so the pipeline
    can report them.  Methods are safe to call on a directory that already
    contains the files; existing files are overwritten.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()

    @property
    def root(self) -> Path:
        return self.config.project_path

    def context(self) -> dict[str, Any]:
        """Template context shared by every template."""
        return {
            "project_name": self.config.project_name,
            "package_manager": self.config.package_manager,
            "datasource_provider": self.config.datasource_provider,
            "app_url": self.config.app_url,
            **hook_context(),
        }

    # -- STRUCTURE ---------------------------------------------------------

    async def create_structure(self) -> list[Path]:
        """Create the folder tree, ``.gitkeep`` markers and the DB check script."""
        root = self.root

        def _mkdirs() -> None:
            for folder in PROJECT_FOLDERS:
                (root / folder).mkdir(parents=True, exist_ok=True)

        await asyncio.to_thread(_mkdirs)

        written: list[Path] = []
        for folder in GITKEEP_FOLDERS:
            marker = root / folder / ".gitkeep"
            await asyncio.to_thread(write_file, marker, "")
            written.append(marker)

        written.append(
            await self.renderer.render_to_file(
                "src/utils/check-db.ts.j2",
                root / "src" / "utils" / "check-db.ts",
                self.context(),
            )
        )
        return written

    # -- CONFIGURE ---------------------------------------------------------

    async def create_config_files(self) -> list[Path]:
        """Render tool configs and the example store/utils/validation/auth code."""
        ctx = self.context()
        written: list[Path] = []
        for template_name, output_name in _CONFIG_FILES.items():
            written.append(
                await self.renderer.render_to_file(
                    template_name, self.root / output_name, ctx
                )
            )
        written.extend(
            await self.renderer.render_tree(
                "src", self.root / "src", ctx, skip_patterns=_SRC_SKIP_PATTERNS
            )
        )
        return written

    async def update_package_scripts(self) -> Path:
        """Merge the project scripts into ``package.json``.

        Scripts created by ``create-next-app`` are kept unless a script of
        the same name is defined here.
        """
        return await self._update_package_json(
            lambda pkg: pkg.update(
                scripts={**(pkg.get("scripts") or {}), **package_scripts(self.config.package_manager)}
            )
        )

    # -- UI ----------------------------------------------------------------

    async def write_shadcn_config(self) -> Path:
        """Write ``components.json`` so ``shadcn add`` runs non-interactively."""
        return await save_json(shadcn_config(), self.root / "components.json")

    # -- HOOKS -------------------------------------------------------------

    async def write_husky_files(self) -> list[Path]:
        """Write the pre-commit hook, naming validator and lint-staged config.

        Expects ``husky init`` to have created ``.husky/`` already.
        """
        ctx = self.context()
        husky_dir = self.root / ".husky"

        validator = await self.renderer.render_to_file(
            "husky/validate-naming.js.j2", husky_dir / "validate-naming.js", ctx
        )
        pre_commit = await self.renderer.render_to_file(
            "husky/pre-commit.j2",
            husky_dir / "pre-commit",
            ctx,
        )
        await asyncio.to_thread(make_executable, pre_commit)

        package_json = await self._update_package_json(
            lambda pkg: pkg.update({"lint-staged": LINT_STAGED})
        )
        return [pre_commit, validator, package_json]

    # -- DATABASE ----------------------------------------------------------

    async def write_prisma_files(self) -> list[Path]:
        """Write the Prisma schema, the shared client module and ``.env.example``.

        Overwrites whatever ``prisma init`` produced, so the result is the
        same whether or not that command succeeded.
        """
        ctx = self.context()
        targets = [
            ("prisma/schema.prisma.j2", self.root / "prisma" / "schema.prisma"),
            ("src/lib/db.ts.j2", self.root / "src" / "lib" / "db.ts"),
            (".env.example.j2", self.root / ".env.example"),
        ]
        return [
            await self.renderer.render_to_file(template, output, ctx)
            for template, output in targets
        ]

    # -- Internal ----------------------------------------------------------

    async def _update_package_json(
        self, mutate: Callable[[dict[str, Any]], None]
    ) -> Path:
        path = self.root / "package.json"
        pkg = await asyncio.to_thread(load_json, path)
        mutate(pkg)
        return await save_json(pkg, path)

"""next-fhi-cli scaffold pipeline.

Runs the ``init`` workflow as a sequence of numbered steps:

Step 1: CREATE     -- ``create-next-app`` with the FHI flags.
Step 2: INSTALL    -- dependency batches (auth, form, state, database, dev).
Step 3: STRUCTURE  -- folder tree, ``.gitkeep`` markers, DB check script.
Step 4: CONFIGURE  -- tool configs, example code, ``package.json`` scripts.
Step 5: UI         -- shadcn/ui config and base components (best effort).
Step 6: HOOKS      -- husky, lint-staged and the naming check (best effort).
Step 7: DATABASE   -- ``prisma init`` (best effort) plus schema/client/env files.

The first failure of a required step stops the run.  Best-effort steps only
print a warning.
"""

from __future__ import annotations

import asyncio
import shutil
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from rich.markup import escape
from rich.panel import Panel

from next_fhi_cli.config import ScaffoldConfig
from next_fhi_cli.scaffolder import DEPENDENCY_GROUPS, ProjectGenerator, install_command
from next_fhi_cli.utils import (
    STEP_NAMES,
    CommandError,
    check_url_reachable,
    console,
    format_duration,
    parse_major_version,
    print_error,
    print_step_header,
    print_success,
    print_summary_table,
    print_warning,
    run_checked,
    run_command,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PipelineError(Exception):
    """Raised when a scaffold step fails irrecoverably.

    Step ``0`` is the preflight check.
    """

    def __init__(self, step: int, message: str) -> None:
        self.step = step
        name = STEP_NAMES.get(step, "PREFLIGHT")
        super().__init__(f"Step {step} ({name}): {message}")


# ---------------------------------------------------------------------------
# External commands
# ---------------------------------------------------------------------------


def create_app_command(config: ScaffoldConfig) -> list[str]:
    """Argv for ``create-next-app`` with the FHI stack flags."""
    return [
        config.package_manager,
        "create",
        "next-app@latest",
        config.project_name,
        "--typescript",
        "--tailwind",
        "--eslint",
        "--app",
        "--src-dir",
        "--import-alias",
        "@/*",
        "--turbopack",
        "--no-git",
    ]


def shadcn_add_command(config: ScaffoldConfig) -> list[str]:
    return [config.package_manager, "dlx", "shadcn@latest", "add", "button", "input", "label", "--yes"]


def husky_init_command(config: ScaffoldConfig) -> list[str]:
    return [config.package_manager, "dlx", "husky@latest", "init"]


def prisma_init_command(config: ScaffoldConfig) -> list[str]:
    return [
        config.package_manager,
        "exec",
        "prisma",
        "init",
        "--datasource-provider",
        config.datasource_provider,
    ]


def next_steps(config: ScaffoldConfig) -> list[str]:
    """Commands the user should run after a successful scaffold."""
    pm = config.package_manager
    return [
        f"cd {config.project_name}",
        "cp .env.example .env",
        "# Edit .env with your database connection string",
        f"{pm} exec prisma generate",
        f"{pm} exec prisma migrate dev",
        f"{pm} run dev",
    ]


TROUBLESHOOTING_TIPS: list[str] = [
    "Make sure Node.js >= 18 and pnpm >= 8 are installed",
    "Try deleting node_modules and installing again",
    "Check your internet connection for downloading dependencies",
]


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class ScaffoldPipeline:
    """Drives the seven scaffold steps for one project.

    Attributes:
        config: Settings for this run.
        generator: Writes the template files into the project.
        state: Accumulates per-step results, warnings and the final
            ``success`` flag.
    """

    def __init__(
        self,
        config: ScaffoldConfig,
        generator: ProjectGenerator | None = None,
    ) -> None:
        self.config = config
        self.generator = generator or ProjectGenerator(config)
        self.state: dict[str, Any] = {
            "project_name": config.project_name,
            "project_path": str(config.project_path),
            "steps_completed": [],
            "steps_failed": [],
            "warnings": [],
            "success": False,
        }

    _STEP_METHODS: dict[int, str] = {
        1: "step_create",
        2: "step_install",
        3: "step_structure",
        4: "step_configure",
        5: "step_ui",
        6: "step_hooks",
        7: "step_database",
    }

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self) -> dict[str, Any]:
        """Run preflight and every step in order.

        Returns:
            The final state dictionary, including a top-level ``success``
            boolean and the ``error`` message on failure.
        """
        start = time.monotonic()
        console.print(
            Panel(
                f"[bold bright_cyan]Scaffolding Next.js project[/bold bright_cyan]\n"
                f"Project : {self.config.project_name}\n"
                f"Path    : {self.config.project_path}",
                title="[bold]next-fhi-cli[/bold]",
                border_style="bright_cyan",
            )
        )

        try:
            await self._preflight()
            for step_num, method_name in self._STEP_METHODS.items():
                await self._run_step(step_num, getattr(self, method_name))
        except PipelineError as exc:
            self.state["error"] = str(exc)
        else:
            self.state["success"] = True

        elapsed = time.monotonic() - start
        self.state["total_duration"] = format_duration(elapsed)
        self._print_final_summary()
        return self.state

    async def _run_step(
        self,
        step_num: int,
        method: Callable[[], Awaitable[dict[str, Any]]],
    ) -> None:
        name = STEP_NAMES[step_num]
        print_step_header(step_num, name)
        step_start = time.monotonic()
        try:
            result = await method()
        except (PipelineError, CommandError, OSError, ValueError) as exc:
            self.state["steps_failed"].append(step_num)
            print_error(
                f"Step {step_num} ({name}) FAILED after "
                f"{format_duration(time.monotonic() - step_start)}"
            )
            if isinstance(exc, PipelineError):
                raise
            raise PipelineError(step_num, str(exc)) from exc

        self.state[f"step{step_num}"] = result
        self.state["steps_completed"].append(step_num)
        print_success(
            f"Step {step_num} ({name}) completed in "
            f"{format_duration(time.monotonic() - step_start)}"
        )

    # ------------------------------------------------------------------
    # Preflight
    # ------------------------------------------------------------------

    async def _preflight(self) -> None:
        """Check the toolchain and the target directory before touching disk.

        * The target directory must not exist.
        * ``node`` and the package manager must be on ``PATH``; old major
          versions only warn.
        * An unreachable npm registry only warns.
        """
        if self.config.project_path.exists():
            raise PipelineError(0, f"Folder {self.config.project_name} already exists!")

        if self.config.skip_preflight:
            return

        console.print("[bold]Running pre-flight checks...[/bold]")
        tools = [
            ("node", self.config.min_node_major),
            (self.config.package_manager, self.config.min_pnpm_major),
        ]
        for tool, min_major in tools:
            if shutil.which(tool) is None:
                raise PipelineError(0, f"'{tool}' was not found on PATH")
            _, stdout, _ = await run_command([tool, "--version"], timeout=30)
            major = parse_major_version(stdout)
            if major is not None and major < min_major:
                self._warn(f"{tool} {stdout} is older than the supported {min_major}.x")
            else:
                console.print(f"  [green]+[/green] {tool} {stdout}")

        if await check_url_reachable(self.config.npm_registry):
            console.print("  [green]+[/green] npm registry reachable")
        else:
            self._warn(f"npm registry {self.config.npm_registry} is not reachable")

    # ------------------------------------------------------------------
    # Step 1: CREATE
    # ------------------------------------------------------------------

    async def step_create(self) -> dict[str, Any]:
        """Run ``create-next-app`` in the base directory.

        Output is streamed to the terminal so the user sees the generator's
        own progress.
        """
        base_dir = self.config.project_path.parent
        cmd = create_app_command(self.config)
        await run_checked(
            cmd,
            cwd=base_dir,
            timeout=self.config.command_timeout,
            capture=False,
            env=self._registry_env(),
        )
        # create-next-app can return before its last writes are visible.
        await asyncio.sleep(self.config.settle_delay)

        if not self.config.project_path.is_dir():
            raise PipelineError(
                1,
                f"Folder {self.config.project_name} not found. "
                "Make sure create-next-app succeeded.",
            )
        return {"command": " ".join(cmd)}

    # ------------------------------------------------------------------
    # Step 2: INSTALL
    # ------------------------------------------------------------------

    async def step_install(self) -> dict[str, Any]:
        """Install each dependency group with its own command."""
        installed: dict[str, list[str]] = {}
        for group in DEPENDENCY_GROUPS:
            console.print(f"  Installing [bold]{group.name}[/bold] dependencies...")
            await run_checked(
                install_command(group, self.config.package_manager),
                cwd=self.config.project_path,
                timeout=self.config.command_timeout,
                capture=False,
                env=self._registry_env(),
            )
            installed[group.name] = list(group.packages)
        return {"installed": installed}

    # ------------------------------------------------------------------
    # Step 3: STRUCTURE
    # ------------------------------------------------------------------

    async def step_structure(self) -> dict[str, Any]:
        written = await self.generator.create_structure()
        return {"files": self._relative(written)}

    # ------------------------------------------------------------------
    # Step 4: CONFIGURE
    # ------------------------------------------------------------------

    async def step_configure(self) -> dict[str, Any]:
        written = await self.generator.create_config_files()
        written.append(await self.generator.update_package_scripts())
        return {"files": self._relative(written)}

    # ------------------------------------------------------------------
    # Step 5: UI (best effort)
    # ------------------------------------------------------------------

    async def step_ui(self) -> dict[str, Any]:
        """Write the shadcn/ui config, then try to add the base components."""
        config_path = await self.generator.write_shadcn_config()
        components_added = await self._best_effort(
            shadcn_add_command(self.config),
            "shadcn components were not installed; add them manually",
        )
        return {
            "files": self._relative([config_path]),
            "components_added": components_added,
        }

    # ------------------------------------------------------------------
    # Step 6: HOOKS (best effort)
    # ------------------------------------------------------------------

    async def step_hooks(self) -> dict[str, Any]:
        """Initialise husky and install the pre-commit checks.

        Hook files are only written when ``husky init`` succeeded.  A failure
        while writing them is a warning, like a failed ``husky init``.
        """
        initialised = await self._best_effort(
            husky_init_command(self.config),
            "Husky setup failed; set it up manually if needed",
        )
        if not initialised:
            return {"husky": False, "files": []}
        try:
            written = await self.generator.write_husky_files()
        except (OSError, ValueError) as exc:
            self._warn(f"Husky hook files could not be written: {exc}")
            return {"husky": False, "files": []}
        return {"husky": True, "files": self._relative(written)}

    # ------------------------------------------------------------------
    # Step 7: DATABASE
    # ------------------------------------------------------------------

    async def step_database(self) -> dict[str, Any]:
        """Run ``prisma init`` and write the Prisma files either way."""
        initialised = await self._best_effort(
            prisma_init_command(self.config),
            "prisma init failed; Prisma files were written without it",
        )
        written = await self.generator.write_prisma_files()
        return {"prisma_init": initialised, "files": self._relative(written)}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _best_effort(self, cmd: list[str], warning: str) -> bool:
        """Run *cmd* quietly; warn and return ``False`` if it fails."""
        with console.status(f"Running {' '.join(cmd)}..."):
            returncode, _, stderr = await run_command(
                cmd, cwd=self.config.project_path, timeout=self.config.command_timeout
            )
        if returncode != 0:
            self._warn(warning)
            if stderr:
                console.print(f"[dim]{escape(stderr.splitlines()[-1])}[/dim]")
            return False
        return True

    def _registry_env(self) -> dict[str, str]:
        """Point pnpm/npm at the registry checked during preflight."""
        return {"npm_config_registry": self.config.npm_registry}

    def _warn(self, message: str) -> None:
        self.state["warnings"].append(message)
        print_warning(f"  {message}")

    def _relative(self, paths: list[Path]) -> list[str]:
        root = self.config.project_path
        return [p.relative_to(root).as_posix() for p in paths]

    def _print_final_summary(self) -> None:
        """Print the result panel: next steps on success, tips on failure."""
        console.print()
        if self.state["success"]:
            print_summary_table(
                {
                    "Project": self.config.project_name,
                    "Path": str(self.config.project_path),
                    "Duration": self.state["total_duration"],
                    "Warnings": str(len(self.state["warnings"])),
                },
                title="Scaffold Results",
            )
            console.print(
                Panel(
                    "\n".join(f"  {line}" for line in next_steps(self.config)),
                    title="[bold green]Project created! Next steps[/bold green]",
                    border_style="bold green",
                )
            )
            return

        print_error(f"Error: {self.state.get('error', 'unknown error')}")
        console.print(
            Panel(
                "\n".join(
                    f"  {i}. {tip}" for i, tip in enumerate(TROUBLESHOOTING_TIPS, 1)
                ),
                title="[bold yellow]Troubleshooting tips[/bold yellow]",
                border_style="yellow",
            )
        )

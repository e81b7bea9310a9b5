"""Command-line entry point.

Usage::

    next-fhi-cli init patient-portal
    next-fhi-cli init                      # asks for the project name
    next-fhi-cli check-naming src/components/user-card.tsx
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.prompt import Prompt

from next_fhi_cli import __version__
from next_fhi_cli.config import ScaffoldConfig, project_name_error
from next_fhi_cli.naming import rules_summary, validate_paths
from next_fhi_cli.pipeline import ScaffoldPipeline
from next_fhi_cli.utils import console, print_error, print_success


def prompt_project_name() -> str:
    """Ask for a project name until a valid kebab-case name is entered."""
    while True:
        name = Prompt.ask("Project name (kebab-case)", console=console).strip()
        problem = project_name_error(name)
        if problem is None:
            return name
        print_error(problem)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="next-fhi-cli",
        description="CLI for scaffolding Next.js projects - Fullerton Health Indonesia",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  next-fhi-cli init patient-portal\n"
            "  next-fhi-cli init --cwd ~/projects\n"
            "  next-fhi-cli check-naming $(git diff --cached --name-only)\n"
        ),
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command")

    init = subparsers.add_parser(
        "init", help="Initialise a new Next.js project with the FHI tech stack"
    )
    init.add_argument(
        "project_name",
        nargs="?",
        metavar="project-name",
        help="Project name (asked for interactively if omitted)",
    )
    init.add_argument(
        "--cwd",
        type=Path,
        default=None,
        help="Directory to create the project in (default: current directory)",
    )
    init.add_argument(
        "--skip-preflight",
        action="store_true",
        help="Skip the node/pnpm/registry checks",
    )

    check = subparsers.add_parser(
        "check-naming", help="Check file and folder naming conventions"
    )
    check.add_argument("files", nargs="*", help="Files to check (paths under src/)")
    check.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Project root the paths are relative to (default: current directory)",
    )
    return parser


def run_init(args: argparse.Namespace) -> int:
    name = args.project_name or prompt_project_name()
    try:
        config = ScaffoldConfig.from_env(
            name,
            base_dir=args.cwd,
            skip_preflight=args.skip_preflight or None,
        )
    except ValidationError as exc:
        print_error(f"Error: {exc.errors()[0]['msg']}")
        return 1
    except ValueError as exc:
        print_error(f"Error: invalid environment setting: {exc}")
        return 1

    result = asyncio.run(ScaffoldPipeline(config).run())
    return 0 if result.get("success") else 1


def run_check_naming(args: argparse.Namespace) -> int:
    violations = validate_paths(args.files, root=args.root)
    if not violations:
        print_success("Naming convention valid!")
        return 0

    for violation in violations:
        print_error(f"Error: {violation.message}")
        console.print(f"   Correct examples: {violation.example}")

    print_error("\nCommit aborted! Fix the naming convention first.\n")
    console.print("Naming convention rules:")
    for rule in rules_summary():
        console.print(f"   - {rule}")
    return 1


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``next-fhi-cli`` and ``python -m next_fhi_cli``."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        sys.exit(run_init(args))
    if args.command == "check-naming":
        sys.exit(run_check_naming(args))

    parser.print_help()
    sys.exit(2)

"""File and folder naming-convention checks for Next.js sources.

The rules enforced by the generated pre-commit hook:

* React components (``.tsx`` / ``.jsx``) use PascalCase: ``UserProfile.tsx``.
* Every other file uses kebab-case: ``user-service.ts``.
* Folders use kebab-case: ``user-profile/``.
* Next.js routing files (``page``, ``layout``, ...) and framework folders
  (``app``, ``lib``, ...) are exempt, as are ``_private``, ``[dynamic]``
  and ``(group)`` folders.

Only paths under ``src/`` are checked.  The same rule data is rendered into
``.husky/validate-naming.js`` via :func:`hook_context`, so the Python check
and the Node.js hook never disagree.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

from next_fhi_cli.config import KEBAB_CASE_RE

PASCAL_CASE_RE = re.compile(r"^[A-Z][a-zA-Z0-9]*$")

COMPONENT_EXTENSIONS: tuple[str, ...] = (".tsx", ".jsx")

SPECIAL_FILES: frozenset[str] = frozenset({
    "route",
    "layout",
    "page",
    "loading",
    "error",
    "not-found",
    "default",
    "template",
})

SPECIAL_FOLDERS: frozenset[str] = frozenset({
    "api",
    "ui",
    "app",
    "lib",
    "components",
    "utils",
    "actions",
    "hooks",
    "validations",
    "store",
    "types",
    "forms",
    "layouts",
})

SKIPPED_FOLDER_PREFIXES: tuple[str, ...] = ("_", "[", "(")

IGNORED_SEGMENTS: frozenset[str] = frozenset({"node_modules", ".next", "dist", ".git"})

SOURCE_ROOT = "src"

_EXAMPLES: dict[str, str] = {
    "component": "UserProfile.tsx, LoginForm.tsx, ButtonPrimary.tsx",
    "file": "user-service.ts, auth-utils.ts, api-config.ts",
    "folder": "user-profile/, auth-forms/, admin-dashboard/",
}


@dataclass(frozen=True)
class NamingViolation:
    """A single file or folder that breaks the naming rules."""

    kind: str  # "component", "file" or "folder"
    path: str
    message: str

    @property
    def example(self) -> str:
        """Correctly named examples for this kind of entry."""
        return _EXAMPLES[self.kind]


def is_component_file(filename: str) -> bool:
    """Return ``True`` for React component files."""
    return filename.endswith(COMPONENT_EXTENSIONS)


def file_stem(filename: str) -> str:
    """Return the name up to the first dot (``page.test.tsx`` -> ``page``)."""
    return filename.split(".")[0]


def validate_file_name(filename: str, path: str) -> NamingViolation | None:
    """Check one file name; *path* is only used in the message."""
    if filename.startswith("."):
        return None

    stem = file_stem(filename)
    if stem in SPECIAL_FILES:
        return None

    if is_component_file(filename):
        if not PASCAL_CASE_RE.match(stem):
            return NamingViolation(
                kind="component",
                path=path,
                message=f'Component "{path}" must use PascalCase!',
            )
    elif not KEBAB_CASE_RE.match(stem):
        return NamingViolation(
            kind="file",
            path=path,
            message=f'File "{path}" must use kebab-case!',
        )
    return None


def validate_folder_name(folder: str, path: str) -> NamingViolation | None:
    """Check one folder name; *path* is only used in the message."""
    if folder.startswith(SKIPPED_FOLDER_PREFIXES):
        return None
    if folder in SPECIAL_FOLDERS:
        return None
    if not KEBAB_CASE_RE.match(folder):
        return NamingViolation(
            kind="folder",
            path=path,
            message=f'Folder "{path}" must use kebab-case!',
        )
    return None


def validate_path(relative_path: str) -> list[NamingViolation]:
    """Check a project-relative, ``/``-separated path.

    Paths outside ``src/`` or inside build/vendor directories produce no
    violations.  The file name is checked first, then every folder between
    ``src`` and the file.
    """
    parts = PurePosixPath(relative_path).parts
    if any(part in IGNORED_SEGMENTS for part in parts):
        return []
    if len(parts) < 2 or parts[0] != SOURCE_ROOT:
        return []

    violations: list[NamingViolation] = []
    file_violation = validate_file_name(parts[-1], relative_path)
    if file_violation:
        violations.append(file_violation)

    for index in range(1, len(parts) - 1):
        folder_path = "/".join(parts[: index + 1])
        folder_violation = validate_folder_name(parts[index], folder_path)
        if folder_violation:
            violations.append(folder_violation)

    return violations


def validate_paths(
    paths: Iterable[str | Path],
    root: str | Path | None = None,
) -> list[NamingViolation]:
    """Check every path in *paths*, resolved relative to *root*.

    *root* defaults to the current directory, which is where git runs the
    pre-commit hook.  Absolute paths are made relative to *root*.
    """
    base = Path(root) if root is not None else Path.cwd()
    violations: list[NamingViolation] = []
    for raw in paths:
        candidate = Path(raw)
        if candidate.is_absolute():
            relative = os.path.relpath(candidate, base)
        else:
            relative = os.path.normpath(candidate)
        violations.extend(validate_path(Path(relative).as_posix()))
    return violations


def rules_summary() -> list[str]:
    """Human-readable rule list printed when a check fails."""
    special = ", ".join(f"{name}.tsx" for name in ("layout", "page", "loading", "error"))
    return [
        "React Components (.tsx/.jsx): PascalCase (e.g. UserProfile.tsx)",
        "Other files: kebab-case (e.g. user-service.ts)",
        "Folders: kebab-case (e.g. user-profile/)",
        f"Next.js files: route.ts, {special}",
    ]


def hook_context() -> dict[str, Any]:
    """Template variables for rendering ``.husky/validate-naming.js``."""
    return {
        "kebab_pattern": KEBAB_CASE_RE.pattern,
        "pascal_pattern": PASCAL_CASE_RE.pattern,
        "component_extensions": list(COMPONENT_EXTENSIONS),
        "special_files": sorted(SPECIAL_FILES),
        "special_folders": sorted(SPECIAL_FOLDERS),
        "skipped_folder_prefixes": list(SKIPPED_FOLDER_PREFIXES),
        "ignored_segments": sorted(IGNORED_SEGMENTS),
        "source_root": SOURCE_ROOT,
        "examples": dict(_EXAMPLES),
        "rules": rules_summary(),
    }

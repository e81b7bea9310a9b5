"""next-fhi-cli scaffolder -- writes the FHI layout into a Next.js app.

Quick usage::

    from next_fhi_cli.config import ScaffoldConfig
    from next_fhi_cli.scaffolder import ProjectGenerator

    config = ScaffoldConfig(project_name="patient-portal")
    generator = ProjectGenerator(config)
    await generator.create_structure()
    await generator.create_config_files()
"""

from next_fhi_cli.scaffolder.dependencies import (
    DEPENDENCY_GROUPS,
    DependencyGroup,
    install_command,
)
from next_fhi_cli.scaffolder.generator import ProjectGenerator
from next_fhi_cli.scaffolder.templates import TemplateRenderer

__all__ = [
    "DEPENDENCY_GROUPS",
    "DependencyGroup",
    "ProjectGenerator",
    "TemplateRenderer",
    "install_command",
]

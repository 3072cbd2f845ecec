"""Text renderers for project and solution descriptors."""

from .layout import ProjectLayout
from .project import (
    ProjectOptions,
    ProjectRenderContext,
    generate_asset_project_parts,
    render_project,
)
from .solution import render_solution

__all__ = [
    "ProjectLayout",
    "ProjectOptions",
    "ProjectRenderContext",
    "generate_asset_project_parts",
    "render_project",
    "render_solution",
]

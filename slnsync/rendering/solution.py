"""Renders the Visual Studio solution descriptor."""

from __future__ import annotations

from typing import Iterable

from ..classifier import relevant_assemblies
from ..models import Assembly
from ..utils import file_name, file_name_without_extension
from .layout import ProjectLayout
from .project import CRLF

FILE_FORMAT_VERSION = "11.00"
VISUAL_STUDIO_VERSION = "2010"


def _tabbed(*lines: str) -> str:
    return CRLF.join(lines).replace("    ", "\t")


_SOLUTION_TEMPLATE = _tabbed(
    "",
    "Microsoft Visual Studio Solution File, Format Version {0}",
    "# Visual Studio {1}",
    "{2}",
    "Global",
    "    GlobalSection(SolutionConfigurationPlatforms) = preSolution",
    "        Debug|Any CPU = Debug|Any CPU",
    "        Release|Any CPU = Release|Any CPU",
    "    EndGlobalSection",
    "    GlobalSection(ProjectConfigurationPlatforms) = postSolution",
    "{3}",
    "    EndGlobalSection",
    "    GlobalSection(SolutionProperties) = preSolution",
    "        HideSolutionNode = FALSE",
    "    EndGlobalSection",
    "EndGlobal",
    "",
)

_PROJECT_ENTRY_TEMPLATE = _tabbed(
    'Project("{{{0}}}") = "{1}", "{2}", "{{{3}}}"',
    "EndProject",
)

_PROJECT_CONFIGURATION_TEMPLATE = _tabbed(
    "        {{{0}}}.Debug|Any CPU.ActiveCfg = Debug|Any CPU",
    "        {{{0}}}.Debug|Any CPU.Build.0 = Debug|Any CPU",
    "        {{{0}}}.Release|Any CPU.ActiveCfg = Release|Any CPU",
    "        {{{0}}}.Release|Any CPU.Build.0 = Release|Any CPU",
)


def render_solution(assemblies: Iterable[Assembly], layout: ProjectLayout) -> str:
    """Return the solution text listing every relevant assembly in host order."""
    relevant = relevant_assemblies(assemblies)
    project_entries = CRLF.join(project_entry(assembly, layout) for assembly in relevant)
    configurations = CRLF.join(
        project_active_configurations(layout.project_guid(assembly.output_path))
        for assembly in relevant
    )
    return _SOLUTION_TEMPLATE.format(
        FILE_FORMAT_VERSION,
        VISUAL_STUDIO_VERSION,
        project_entries,
        configurations,
    )


def project_entry(assembly: Assembly, layout: ProjectLayout) -> str:
    """``Project("{type}") = "name", "name.csproj", "{guid}"`` plus ``EndProject``."""
    return _PROJECT_ENTRY_TEMPLATE.format(
        layout.solution_guid(assembly),
        file_name_without_extension(assembly.output_path),
        file_name(layout.project_file(assembly)),
        layout.project_guid(assembly.output_path),
    )


def project_active_configurations(project_guid: str) -> str:
    return _PROJECT_CONFIGURATION_TEMPLATE.format(project_guid)


__all__ = [
    "FILE_FORMAT_VERSION",
    "VISUAL_STUDIO_VERSION",
    "project_active_configurations",
    "project_entry",
    "render_solution",
]

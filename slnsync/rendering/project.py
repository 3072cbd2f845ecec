"""Renders the MSBuild project descriptor for one assembly."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Sequence, Tuple

from ..classifier import PROJECT_EXTENSION
from ..models import Assembly, ResponseFileData
from ..relevance import RelevanceFilter
from ..utils import (
    escape_xml,
    extension_of,
    file_name,
    file_name_without_extension,
    join_path,
    unique,
)
from .layout import ProjectLayout

CRLF = "\r\n"

MSBUILD_NAMESPACE_URI = "http://schemas.microsoft.com/developer/msbuild/2003"
TOOLS_VERSION = "4.0"
PRODUCT_VERSION = "10.0.20506"
BASE_DIRECTORY = "."
BASE_DEFINES = ("DEBUG", "TRACE")

# Engine and editor assemblies are referenced from the header; any other
# mention of them is dropped.
IMPLICIT_REFERENCES = ("UnityEngine.dll", "UnityEditor.dll")

SCRIPT_REFERENCE_PATTERN = re.compile(
    r"^Library.ScriptAssemblies.(?P<dllname>(?P<project>.*)\.dll$)",
    re.IGNORECASE,
)

_PROJECT_FOOTER = CRLF.join(
    [
        "  </ItemGroup>",
        '  <Import Project="$(MSBuildToolsPath)\\Microsoft.CSharp.targets" />',
        "  <!-- To modify your build process, add your task inside one of the targets below and uncomment it. ",
        "       Other similar extension points exist, see Microsoft.Common.targets.",
        '  <Target Name="BeforeBuild">',
        "  </Target>",
        '  <Target Name="AfterBuild">',
        "  </Target>",
        "  -->",
        "</Project>",
        "",
    ]
)


@dataclass(frozen=True)
class ProjectOptions:
    """Header values that are the same for every project in a pass."""

    root_namespace: str = ""
    lang_version: str = "latest"
    target_framework_version: str = "v4.7.1"
    engine_assembly_path: str = ""
    editor_assembly_path: str = ""
    active_defines: Tuple[str, ...] = ()


@dataclass
class ProjectRenderContext:
    """Everything a project render needs beyond the assembly itself."""

    layout: ProjectLayout
    relevance: RelevanceFilter
    options: ProjectOptions = field(default_factory=ProjectOptions)
    asset_project_parts: Mapping[str, str] = field(default_factory=dict)
    relevant_assemblies: Sequence[Assembly] = ()


def render_project(
    assembly: Assembly,
    context: ProjectRenderContext,
    response_files: Sequence[ResponseFileData] = (),
) -> str:
    """Return the complete project text for ``assembly``."""
    layout = context.layout
    parts: List[str] = [render_project_header(assembly, context, response_files)]
    references: List[str] = []
    project_references: List[str] = []

    for source in assembly.source_files:
        if not context.relevance.should_file_be_part_of_solution(source):
            continue
        escaped = layout.escaped_relative_path_for(source)
        if extension_of(source).lower() == ".dll":
            references.append(escaped)
        else:
            parts.append(f'     <Compile Include="{escaped}" />{CRLF}')

    assembly_name = file_name_without_extension(assembly.output_path)
    additional_assets = context.asset_project_parts.get(assembly_name)
    if additional_assets:
        parts.append(additional_assets)

    output_names = {file_name(item.output_path) for item in context.relevant_assemblies}
    for reference in unique([*references, *assembly.all_references]):
        if _is_implicit_reference(reference):
            continue
        match = SCRIPT_REFERENCE_PATTERN.match(reference)
        if match and match.group("dllname") in output_names:
            project_references.append(match.group("project"))
            continue
        parts.append(_reference_entry(join_path(layout.project_directory, reference)))

    for data in response_files:
        for reference in data.full_path_references:
            parts.append(_reference_entry(reference))

    if project_references:
        parts.append(f"  </ItemGroup>{CRLF}")
        parts.append(f"  <ItemGroup>{CRLF}")
        for project in project_references:
            parts.append(_project_reference_entry(project, layout))

    parts.append(_PROJECT_FOOTER)
    return "".join(parts)


def render_project_header(
    assembly: Assembly,
    context: ProjectRenderContext,
    response_files: Sequence[ResponseFileData] = (),
) -> str:
    options = context.options
    define_constants = ";".join(merge_defines(assembly, options.active_defines, response_files))
    allow_unsafe = _format_bool(
        assembly.compiler_options.allow_unsafe_code or any(data.unsafe for data in response_files)
    )
    project_guid = context.layout.project_guid(assembly.output_path)
    assembly_name = file_name_without_extension(assembly.output_path)

    lines = [
        '<?xml version="1.0" encoding="utf-8"?>',
        f'<Project ToolsVersion="{TOOLS_VERSION}" DefaultTargets="Build" xmlns="{MSBUILD_NAMESPACE_URI}">',
        "  <PropertyGroup>",
        f"    <LangVersion>{options.lang_version}</LangVersion>",
        "  </PropertyGroup>",
        "  <PropertyGroup>",
        "    <Configuration Condition=\" '$(Configuration)' == '' \">Debug</Configuration>",
        "    <Platform Condition=\" '$(Platform)' == '' \">AnyCPU</Platform>",
        f"    <ProductVersion>{PRODUCT_VERSION}</ProductVersion>",
        "    <SchemaVersion>2.0</SchemaVersion>",
        f"    <RootNamespace>{escape_xml(options.root_namespace)}</RootNamespace>",
        f"    <ProjectGuid>{{{project_guid}}}</ProjectGuid>",
        "    <OutputType>Library</OutputType>",
        "    <AppDesignerFolder>Properties</AppDesignerFolder>",
        f"    <AssemblyName>{assembly_name}</AssemblyName>",
        f"    <TargetFrameworkVersion>{options.target_framework_version}</TargetFrameworkVersion>",
        "    <FileAlignment>512</FileAlignment>",
        f"    <BaseDirectory>{BASE_DIRECTORY}</BaseDirectory>",
        "  </PropertyGroup>",
        "  <PropertyGroup Condition=\" '$(Configuration)|$(Platform)' == 'Debug|AnyCPU' \">",
        "    <DebugSymbols>true</DebugSymbols>",
        "    <DebugType>full</DebugType>",
        "    <Optimize>false</Optimize>",
        "    <OutputPath>Temp\\bin\\Debug\\</OutputPath>",
        f"    <DefineConstants>{escape_xml(define_constants)}</DefineConstants>",
        "    <ErrorReport>prompt</ErrorReport>",
        "    <WarningLevel>4</WarningLevel>",
        "    <NoWarn>0169</NoWarn>",
        f"    <AllowUnsafeBlocks>{allow_unsafe}</AllowUnsafeBlocks>",
        "  </PropertyGroup>",
        "  <PropertyGroup Condition=\" '$(Configuration)|$(Platform)' == 'Release|AnyCPU' \">",
        "    <DebugType>pdbonly</DebugType>",
        "    <Optimize>true</Optimize>",
        "    <OutputPath>Temp\\bin\\Release\\</OutputPath>",
        "    <ErrorReport>prompt</ErrorReport>",
        "    <WarningLevel>4</WarningLevel>",
        "    <NoWarn>0169</NoWarn>",
        f"    <AllowUnsafeBlocks>{allow_unsafe}</AllowUnsafeBlocks>",
        "  </PropertyGroup>",
        "  <PropertyGroup>",
        "    <NoConfig>true</NoConfig>",
        "    <NoStdLib>true</NoStdLib>",
        "    <AddAdditionalExplicitAssemblyReferences>false</AddAdditionalExplicitAssemblyReferences>",
        "    <ImplicitlyExpandNETStandardFacades>false</ImplicitlyExpandNETStandardFacades>",
        "    <ImplicitlyExpandDesignTimeFacades>false</ImplicitlyExpandDesignTimeFacades>",
        "  </PropertyGroup>",
        "  <ItemGroup>",
        '    <Reference Include="UnityEngine">',
        f"      <HintPath>{escape_xml(options.engine_assembly_path)}</HintPath>",
        "    </Reference>",
        '    <Reference Include="UnityEditor">',
        f"      <HintPath>{escape_xml(options.editor_assembly_path)}</HintPath>",
        "    </Reference>",
        "  </ItemGroup>",
        "  <ItemGroup>",
        "",
        "",
    ]
    return CRLF.join(lines)


def merge_defines(
    assembly: Assembly,
    active_defines: Iterable[str],
    response_files: Sequence[ResponseFileData] = (),
) -> List[str]:
    """Union of base, host, assembly and response-file defines in first-seen order."""
    response_defines = [define for data in response_files for define in data.defines]
    return unique(
        define
        for define in (*BASE_DEFINES, *active_defines, *assembly.defines, *response_defines)
        if define
    )


def generate_asset_project_parts(
    asset_paths: Iterable[str],
    layout: ProjectLayout,
    relevance: RelevanceFilter,
    assembly_name_for: Callable[[str], str],
) -> Dict[str, str]:
    """Group non-compiled assets into ``<None>`` items keyed by assembly stem.

    ``assembly_name_for`` receives the asset path with a ``.cs`` suffix so the
    host resolves it the way it resolves a script in the same folder.
    """
    parts: Dict[str, List[str]] = {}
    for asset in asset_paths:
        if not relevance.is_asset_project_part(asset):
            continue
        assembly_name = assembly_name_for(f"{asset}.cs")
        if not assembly_name:
            continue
        key = file_name_without_extension(assembly_name)
        parts.setdefault(key, []).append(
            f'     <None Include="{layout.escaped_relative_path_for(asset)}" />{CRLF}'
        )
    return {key: "".join(entries) for key, entries in parts.items()}


def _is_implicit_reference(reference: str) -> bool:
    return any(
        reference.endswith(f"/{name}") or reference.endswith(f"\\{name}")
        for name in IMPLICIT_REFERENCES
    )


def _reference_entry(full_reference: str) -> str:
    escaped = escape_xml(full_reference).replace("\\\\", "/").replace("\\", "/")
    return (
        f' <Reference Include="{file_name_without_extension(escaped)}">{CRLF}'
        f" <HintPath>{escaped}</HintPath>{CRLF}"
        f" </Reference>{CRLF}"
    )


def _project_reference_entry(project: str, layout: ProjectLayout) -> str:
    return (
        f'    <ProjectReference Include="{project}{PROJECT_EXTENSION}">{CRLF}'
        f"      <Project>{{{layout.project_guid(f'{project}.dll')}}}</Project>{CRLF}"
        f"      <Name>{project}</Name>{CRLF}"
        f"    </ProjectReference>{CRLF}"
    )


def _format_bool(value: bool) -> str:
    return "True" if value else "False"


__all__ = [
    "CRLF",
    "IMPLICIT_REFERENCES",
    "ProjectOptions",
    "ProjectRenderContext",
    "SCRIPT_REFERENCE_PATTERN",
    "generate_asset_project_parts",
    "merge_defines",
    "render_project",
    "render_project_header",
]

"""Project directory layout: file locations, relative paths and GUID keys."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, Optional

from ..classifier import PROJECT_EXTENSION, extension_of_source_files
from ..guids import guid_for_project, guid_for_solution
from ..models import Assembly, PackageInfo
from ..utils import (
    escape_xml,
    file_name,
    file_name_without_extension,
    normalize_path,
    skip_path_prefix,
)


def _no_package(path: str) -> Optional[PackageInfo]:
    return None


@dataclass(frozen=True)
class ProjectLayout:
    """Where generated files live and how paths inside them are written."""

    project_directory: str
    find_package: Callable[[str], Optional[PackageInfo]] = _no_package

    def __post_init__(self) -> None:
        object.__setattr__(self, "project_directory", self.project_directory.replace("\\", "/"))

    @property
    def project_name(self) -> str:
        return file_name(self.project_directory.rstrip("/"))

    def solution_file(self) -> str:
        return os.path.join(self.project_directory, f"{self.project_name}.sln")

    def project_file(self, assembly: Assembly) -> str:
        stem = file_name_without_extension(assembly.output_path)
        return os.path.join(self.project_directory, f"{stem}{PROJECT_EXTENSION}")

    def project_guid(self, assembly_output: str) -> str:
        """GUID for the project built from ``assembly_output`` (path or bare name)."""
        return guid_for_project(self.project_name + file_name_without_extension(assembly_output))

    def solution_guid(self, assembly: Assembly) -> str:
        return guid_for_solution(self.project_name, extension_of_source_files(assembly.source_files))

    def escaped_relative_path_for(self, path: str) -> str:
        """Return ``path`` relative to the project, with ``\\`` separators, XML escaped."""
        project_dir = self.project_directory.replace("/", "\\")
        relative = skip_path_prefix(path.replace("/", "\\"), project_dir)

        if self.find_package(relative.replace("\\", "/")) is not None:
            # Package paths are resolved against the project directory first.
            absolute = os.path.normpath(
                os.path.join(normalize_path(self.project_directory), normalize_path(relative))
            ).replace("/", "\\")
            relative = skip_path_prefix(absolute, project_dir)

        return escape_xml(relative)


__all__ = ["ProjectLayout"]

"""Full and incremental generation of solution and project files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from .changes import ChangeDetector
from .classifier import relevant_assemblies
from .config import SlnSyncConfig
from .hooks import HookRegistry, default_registry
from .host import AssemblyNameProvider
from .logging import get_logger
from .models import Assembly, GenerationSettings, ResponseFileData
from .relevance import RelevanceFilter
from .rendering import (
    ProjectLayout,
    ProjectOptions,
    ProjectRenderContext,
    generate_asset_project_parts,
    render_project,
    render_solution,
)
from .writer import SyncWriter


class ProjectGeneration:
    """Keeps ``<project>.sln`` and one ``.csproj`` per assembly in sync with the host.

    Generation is stateless between calls: the only memory of a previous
    run is what is on disk, and files are rewritten only when their content
    changes.
    """

    def __init__(
        self,
        project_directory: str,
        provider: AssemblyNameProvider,
        *,
        config: Optional[SlnSyncConfig] = None,
        hooks: Optional[HookRegistry] = None,
        settings: Optional[GenerationSettings] = None,
    ) -> None:
        self.provider = provider
        self.config = config or SlnSyncConfig(root=Path(project_directory))
        self.layout = ProjectLayout(project_directory, provider.find_for_asset_path)
        self.relevance = RelevanceFilter(
            provider.find_for_asset_path,
            self.config.user_extensions,
            generate_all=self.config.generate_all,
        )
        self.changes = ChangeDetector(self.relevance, provider.get_assembly_name_from_script_path)
        self.hooks = hooks if hooks is not None else default_registry()
        self.writer = SyncWriter(settings)
        self.logger = get_logger("generator")

    @property
    def project_directory(self) -> str:
        return self.layout.project_directory

    @property
    def settings(self) -> GenerationSettings:
        return self.writer.settings

    @settings.setter
    def settings(self, value: GenerationSettings) -> None:
        self.writer.settings = value

    def generate_all(self, generate_all: bool) -> None:
        """Include files from external packages (normally excluded)."""
        self.relevance.generate_all = generate_all

    def solution_file(self) -> str:
        return self.layout.solution_file()

    def project_file(self, assembly: Assembly) -> str:
        return self.layout.project_file(assembly)

    def has_solution_been_generated(self) -> bool:
        return Path(self.solution_file()).exists()

    def sync_if_needed(self, affected_files: Iterable[str], reimported_files: Iterable[str]) -> bool:
        """Regenerate the projects touched by a change set.

        Nothing happens until a solution has been generated once. Returns
        True when the change set warranted a resync.
        """
        affected = list(affected_files)
        reimported = list(reimported_files)
        if not self.has_solution_been_generated():
            self.logger.debug("No solution at %s yet; ignoring change notification", self.solution_file())
            return False
        if not self.changes.has_files_been_modified(affected, reimported):
            self.logger.debug("None of %d changed file(s) affect generated projects", len(affected) + len(reimported))
            return False

        assemblies = list(self.provider.get_all_assemblies(self.relevance.should_file_be_part_of_solution))
        relevant = relevant_assemblies(assemblies)
        asset_parts = self._generate_asset_project_parts()

        names = self.changes.affected_assembly_names([*affected, *reimported])
        necessary = self.changes.select_assemblies(assemblies, names)
        self.logger.info(
            "Resyncing %d project(s): %s",
            len(necessary),
            ", ".join(assembly.name for assembly in necessary) or "none",
        )
        for assembly in necessary:
            self._sync_project(assembly, asset_parts, self._parse_response_file_data(assembly), relevant)
        return True

    def sync(self) -> None:
        """Regenerate the solution and every project unless a hook already did."""
        self.logger.info("Starting sync for %s", self.project_directory)
        if self.hooks.run_pre_generate():
            self.logger.info("A pre-generation hook produced the project files; skipping generation")
        else:
            self.generate_and_write_solution_and_projects()
        self.hooks.run_post_generate()

    def generate_and_write_solution_and_projects(self) -> None:
        assemblies = list(self.provider.get_all_assemblies(self.relevance.should_file_be_part_of_solution))
        asset_parts = self._generate_asset_project_parts()

        written = int(self._sync_solution(assemblies))
        relevant = relevant_assemblies(assemblies)
        self.logger.debug("%d of %d assemblies are relevant", len(relevant), len(assemblies))
        for assembly in relevant:
            response_files = self._parse_response_file_data(assembly)
            written += int(self._sync_project(assembly, asset_parts, response_files, relevant))
        self.logger.info("Sync finished: %d of %d file(s) changed", written, len(relevant) + 1)

    def solution_text(self, assemblies: Iterable[Assembly]) -> str:
        return render_solution(assemblies, self.layout)

    def project_text(
        self,
        assembly: Assembly,
        asset_parts: Dict[str, str],
        response_files: Sequence[ResponseFileData],
        relevant: Sequence[Assembly],
    ) -> str:
        context = ProjectRenderContext(
            layout=self.layout,
            relevance=self.relevance,
            options=self._project_options(),
            asset_project_parts=asset_parts,
            relevant_assemblies=relevant,
        )
        return render_project(assembly, context, response_files)

    def _sync_solution(self, assemblies: Sequence[Assembly]) -> bool:
        path = self.solution_file()
        content = self.hooks.transform_solution(path, self.solution_text(assemblies))
        return self.writer.write_if_changed(path, content)

    def _sync_project(
        self,
        assembly: Assembly,
        asset_parts: Dict[str, str],
        response_files: Sequence[ResponseFileData],
        relevant: Sequence[Assembly],
    ) -> bool:
        path = self.project_file(assembly)
        content = self.project_text(assembly, asset_parts, response_files, relevant)
        content = self.hooks.transform_project(path, content)
        return self.writer.write_if_changed(path, content)

    def _generate_asset_project_parts(self) -> Dict[str, str]:
        return generate_asset_project_parts(
            self.provider.get_all_asset_paths(),
            self.layout,
            self.relevance,
            self.provider.get_assembly_name_from_script_path,
        )

    def _parse_response_file_data(self, assembly: Assembly) -> List[ResponseFileData]:
        options = assembly.compiler_options
        if not options.response_files:
            return []
        system_directories = self.provider.get_system_assembly_directories(options.api_compatibility_level)
        parsed: List[ResponseFileData] = []
        for response_file in options.response_files:
            data = self.provider.parse_response_file(
                response_file, self.project_directory, system_directories
            )
            for error in data.errors:
                self.logger.error("%s Parse Error : %s", response_file, error)
            parsed.append(data)
        return parsed

    def _project_options(self) -> ProjectOptions:
        project = self.config.project
        return ProjectOptions(
            root_namespace=project.root_namespace,
            lang_version=project.lang_version,
            target_framework_version=project.target_framework_version,
            engine_assembly_path=self.provider.engine_assembly_path(),
            editor_assembly_path=self.provider.editor_assembly_path(),
            active_defines=tuple(self.provider.active_compilation_defines()),
        )


__all__ = ["ProjectGeneration"]

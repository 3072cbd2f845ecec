"""Host environment adapters: the provider protocol and a YAML-manifest provider."""

from __future__ import annotations

import posixpath
import re
import shlex
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Protocol, Sequence

import yaml

from .logging import get_logger
from .models import Assembly, CompilerOptions, PackageInfo, PackageSource, ResponseFileData
from .utils import as_bool, file_name, is_rooted, skip_path_prefix

logger = get_logger("host")

DEFAULT_MANIFEST = Path(".slnsync") / "assemblies.yml"

_REFERENCE_OPTIONS = ("-r:", "/r:", "-reference:", "/reference:")
_DEFINE_OPTIONS = ("-d:", "/d:", "-define:", "/define:")
_UNSAFE_ON = {"-unsafe", "/unsafe", "-unsafe+", "/unsafe+"}
_UNSAFE_OFF = {"-unsafe-", "/unsafe-"}
_LIST_SEPARATORS = re.compile(r"[,;]")


class AssemblyNameProvider(Protocol):
    """What the generator needs from the host build environment."""

    def get_all_assemblies(self, should_file_be_part_of_solution: Callable[[str], bool]) -> Iterable[Assembly]:
        """Assemblies with at least one source file accepted by the predicate."""

    def get_all_asset_paths(self) -> Iterable[str]:
        """Every asset path the host knows about."""

    def get_assembly_name_from_script_path(self, path: str) -> str:
        """Output file name (``Game.dll``) of the assembly owning ``path``, or ``""``."""

    def find_for_asset_path(self, path: str) -> Optional[PackageInfo]:
        """Package owning ``path``, or None for project files."""

    def parse_response_file(
        self, path: str, project_directory: str, system_reference_directories: Sequence[str]
    ) -> ResponseFileData:
        """Parse one compiler response file."""

    def get_system_assembly_directories(self, api_compatibility_level: str) -> List[str]:
        """Directories searched for framework references."""

    def active_compilation_defines(self) -> List[str]:
        """Defines active for the current build target."""

    def engine_assembly_path(self) -> str:
        """Location of the engine runtime assembly."""

    def editor_assembly_path(self) -> str:
        """Location of the editor assembly."""


class ManifestError(RuntimeError):
    """Raised when an assembly manifest cannot be loaded."""


def parse_response_file(
    path: str,
    project_directory: str,
    system_reference_directories: Sequence[str] = (),
) -> ResponseFileData:
    """Parse compiler options from a response (``.rsp``) file.

    Problems are collected in ``ResponseFileData.errors``; whatever could be
    parsed is still returned.
    """
    data = ResponseFileData()
    response_path = Path(path) if is_rooted(path) else Path(project_directory) / path
    try:
        raw = response_path.read_bytes()
    except FileNotFoundError:
        data.errors.append(f"Response file not found: {path}")
        return data
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        data.errors.append(f"Response file is not valid UTF-8: {path} (byte {exc.start})")
        text = raw.decode("utf-8-sig", errors="replace")

    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        try:
            tokens = _split_arguments(stripped)
        except ValueError as exc:
            data.errors.append(f"line {line_number}: {exc}")
            continue
        for token in tokens:
            _apply_option(token, data, project_directory, system_reference_directories)
    return data


def _split_arguments(line: str) -> List[str]:
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.escape = ""
    lexer.commenters = ""
    return list(lexer)


def _apply_option(
    token: str,
    data: ResponseFileData,
    project_directory: str,
    system_reference_directories: Sequence[str],
) -> None:
    lowered = token.lower()
    if lowered in _UNSAFE_ON:
        data.unsafe = True
        return
    if lowered in _UNSAFE_OFF:
        data.unsafe = False
        return

    for prefix in _REFERENCE_OPTIONS:
        if lowered.startswith(prefix):
            for reference in _split_list(token[len(prefix) :]):
                resolved = _resolve_reference(reference, project_directory, system_reference_directories)
                if resolved is None:
                    data.errors.append(f"Reference not found: {reference}")
                    resolved = reference
                data.full_path_references.append(resolved)
            return

    for prefix in _DEFINE_OPTIONS:
        if lowered.startswith(prefix):
            data.defines.extend(_split_list(token[len(prefix) :]))
            return

    data.errors.append(f"Unsupported option: {token}")


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in _LIST_SEPARATORS.split(value) if item.strip()]


def _resolve_reference(
    reference: str, project_directory: str, system_reference_directories: Sequence[str]
) -> Optional[str]:
    if is_rooted(reference):
        return reference if Path(reference).exists() else None
    for base in (project_directory, *system_reference_directories):
        candidate = Path(base) / reference
        if candidate.exists():
            return candidate.as_posix()
    return None


class ManifestAssemblyProvider:
    """Serves the assembly graph described by a YAML manifest.

    Stands in for an editor process when generation is driven from the
    command line. Paths in the manifest are relative to the project directory
    unless rooted.
    """

    def __init__(
        self,
        project_directory: str,
        assemblies: Sequence[Assembly],
        *,
        asset_paths: Sequence[str] = (),
        packages: Sequence[PackageInfo] = (),
        defines: Sequence[str] = (),
        engine_assembly_path: str = "",
        editor_assembly_path: str = "",
        system_reference_directories: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        self.project_directory = project_directory.replace("\\", "/")
        self._assemblies = list(assemblies)
        self._asset_paths = list(asset_paths)
        self._packages = sorted(
            packages, key=lambda package: len(package.resolved_path), reverse=True
        )
        self._defines = list(defines)
        self._engine_assembly_path = engine_assembly_path
        self._editor_assembly_path = editor_assembly_path
        self._system_directories = {
            key: list(value) for key, value in (system_reference_directories or {}).items()
        }

    @classmethod
    def from_file(cls, manifest_path: Path, project_directory: Path) -> "ManifestAssemblyProvider":
        """Load a provider from ``manifest_path``."""
        try:
            text = manifest_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ManifestError(f"Assembly manifest not found: {manifest_path}") from exc
        except UnicodeDecodeError as exc:
            raise ManifestError(f"{manifest_path.name} is not valid UTF-8: {exc}") from exc
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ManifestError(f"Failed to parse {manifest_path.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError(f"{manifest_path.name} must contain a mapping at the root")
        return cls.from_dict(data, str(project_directory))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], project_directory: str) -> "ManifestAssemblyProvider":
        raw_assemblies = data.get("assemblies") or []
        if not isinstance(raw_assemblies, list):
            raise ManifestError("'assemblies' must be a list")
        assemblies = [_assembly_from_dict(entry, index) for index, entry in enumerate(raw_assemblies)]

        packages = [_package_from_dict(entry) for entry in _as_list(data.get("packages"))]
        system_dirs = data.get("system_reference_directories") or {}
        if not isinstance(system_dirs, dict):
            raise ManifestError("'system_reference_directories' must be a mapping")

        logger.debug("Manifest describes %d assemblies", len(assemblies))
        return cls(
            project_directory,
            assemblies,
            asset_paths=_as_str_list(data.get("asset_paths")),
            packages=packages,
            defines=_as_str_list(data.get("defines")),
            engine_assembly_path=str(data.get("engine_assembly_path") or ""),
            editor_assembly_path=str(data.get("editor_assembly_path") or ""),
            system_reference_directories={
                str(key): _as_str_list(value) for key, value in system_dirs.items()
            },
        )

    # ------------------------------------------------------------------
    # AssemblyNameProvider

    def get_all_assemblies(self, should_file_be_part_of_solution: Callable[[str], bool]) -> List[Assembly]:
        return [
            assembly
            for assembly in self._assemblies
            if assembly.source_files
            and any(should_file_be_part_of_solution(source) for source in assembly.source_files)
        ]

    def get_all_asset_paths(self) -> List[str]:
        return list(self._asset_paths)

    def get_assembly_name_from_script_path(self, path: str) -> str:
        target = self._relative(path)
        best: Optional[Assembly] = None
        best_depth = -1
        for assembly in self._assemblies:
            for source in assembly.source_files:
                source_path = self._relative(source)
                if source_path == target:
                    return file_name(assembly.output_path)
                directory = posixpath.dirname(source_path)
                if directory and not target.startswith(f"{directory}/"):
                    continue
                if not directory and is_rooted(target):
                    continue
                depth = len(directory)
                if depth > best_depth:
                    best, best_depth = assembly, depth
        return file_name(best.output_path) if best is not None else ""

    def find_for_asset_path(self, path: str) -> Optional[PackageInfo]:
        target = self._relative(path)
        for package in self._packages:
            prefix = self._relative(package.resolved_path).rstrip("/")
            if target == prefix or target.startswith(f"{prefix}/"):
                return package
        return None

    def parse_response_file(
        self, path: str, project_directory: str, system_reference_directories: Sequence[str]
    ) -> ResponseFileData:
        return parse_response_file(path, project_directory, system_reference_directories)

    def get_system_assembly_directories(self, api_compatibility_level: str) -> List[str]:
        directories = self._system_directories.get(api_compatibility_level)
        if directories is None:
            directories = self._system_directories.get("default", [])
        return list(directories)

    def active_compilation_defines(self) -> List[str]:
        return list(self._defines)

    def engine_assembly_path(self) -> str:
        return self._engine_assembly_path

    def editor_assembly_path(self) -> str:
        return self._editor_assembly_path

    def _relative(self, path: str) -> str:
        return skip_path_prefix(path.replace("\\", "/"), self.project_directory)


def _assembly_from_dict(entry: Any, index: int) -> Assembly:
    if not isinstance(entry, dict):
        raise ManifestError(f"Assembly #{index} must be a mapping")
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise ManifestError(f"Assembly #{index} is missing a name")
    output_path = str(entry.get("output_path") or f"Library/ScriptAssemblies/{name}.dll")
    options = CompilerOptions(
        allow_unsafe_code=as_bool(entry.get("allow_unsafe_code")) or False,
        response_files=tuple(_as_str_list(entry.get("response_files"))),
        api_compatibility_level=str(entry.get("api_compatibility_level") or "default"),
    )
    return Assembly(
        name=name,
        output_path=output_path,
        source_files=tuple(_as_str_list(entry.get("source_files"))),
        all_references=tuple(_as_str_list(entry.get("references"))),
        defines=tuple(_as_str_list(entry.get("defines"))),
        compiler_options=options,
    )


def _package_from_dict(entry: Any) -> PackageInfo:
    if not isinstance(entry, dict) or not entry.get("path"):
        raise ManifestError("Each package needs at least a 'path'")
    path = str(entry["path"])
    raw_source = str(entry.get("source") or PackageSource.UNKNOWN.value).lower()
    try:
        source = PackageSource(raw_source)
    except ValueError as exc:
        raise ManifestError(f"Unknown package source '{raw_source}' for {path}") from exc
    return PackageInfo(name=str(entry.get("name") or file_name(path.rstrip("/"))), source=source, resolved_path=path)


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    raise ManifestError(f"Expected a list, got {type(value).__name__}")


def _as_str_list(value: Any) -> List[str]:
    return [str(item) for item in _as_list(value) if isinstance(item, (str, int, float))]


__all__ = [
    "AssemblyNameProvider",
    "DEFAULT_MANIFEST",
    "ManifestAssemblyProvider",
    "ManifestError",
    "parse_response_file",
]

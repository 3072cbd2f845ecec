"""Maps file change notifications to the projects that need regenerating."""

from __future__ import annotations

from typing import Callable, Iterable, List, Sequence, Set

from .models import Assembly
from .relevance import RelevanceFilter
from .utils import extension_of, file_name_without_extension

# Reimporting these always warrants a resync, whatever the relevance rules say.
REIMPORT_SYNC_EXTENSIONS = (".dll", ".asmdef")

_BINARY_SUFFIX = ".dll"


def should_sync_on_reimported_asset(path: str) -> bool:
    return extension_of(path).lower() in REIMPORT_SYNC_EXTENSIONS


class ChangeDetector:
    """Decides whether a change set warrants resynchronizing projects."""

    def __init__(
        self,
        relevance: RelevanceFilter,
        assembly_name_for: Callable[[str], str],
    ) -> None:
        self.relevance = relevance
        self._assembly_name_for = assembly_name_for

    def has_files_been_modified(
        self, affected: Sequence[str], reimported: Sequence[str]
    ) -> bool:
        """True when any affected file is relevant or any reimport is a binary/manifest."""
        return any(
            self.relevance.should_file_be_part_of_solution(path) for path in affected
        ) or any(should_sync_on_reimported_asset(path) for path in reimported)

    def affected_assembly_names(self, paths: Iterable[str]) -> Set[str]:
        """Return output stems of the assemblies owning ``paths``.

        Paths the host cannot attribute to an assembly are ignored.
        """
        names: Set[str] = set()
        for path in paths:
            name = self._assembly_name_for(f"{path}.cs")
            if not name:
                continue
            if name.lower().endswith(_BINARY_SUFFIX):
                name = name[: -len(_BINARY_SUFFIX)]
            names.add(name)
        return names

    @staticmethod
    def select_assemblies(assemblies: Iterable[Assembly], names: Set[str]) -> List[Assembly]:
        """Keep assemblies whose output stem is in ``names``, in host order."""
        return [
            assembly
            for assembly in assemblies
            if file_name_without_extension(assembly.output_path) in names
        ]


__all__ = ["ChangeDetector", "REIMPORT_SYNC_EXTENSIONS", "should_sync_on_reimported_asset"]

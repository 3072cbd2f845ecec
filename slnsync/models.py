"""Core data models shared across slnsync components."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class PackageSource(str, Enum):
    """Where a package's files come from."""

    EMBEDDED = "embedded"
    LOCAL = "local"
    REGISTRY = "registry"
    GIT = "git"
    BUILTIN = "builtin"
    LOCAL_TARBALL = "local_tarball"
    UNKNOWN = "unknown"

    @property
    def internalized(self) -> bool:
        """True when the package lives inside the project rather than a cache."""
        return self in (PackageSource.EMBEDDED, PackageSource.LOCAL)


@dataclass(frozen=True)
class PackageInfo:
    """Origin information for a path that belongs to a package."""

    name: str
    source: PackageSource
    resolved_path: str = ""


@dataclass(frozen=True)
class CompilerOptions:
    """Compiler switches attached to an assembly."""

    allow_unsafe_code: bool = False
    response_files: Tuple[str, ...] = ()
    api_compatibility_level: str = "default"


@dataclass(frozen=True)
class Assembly:
    """A build unit supplied by the host: sources, references and options."""

    name: str
    output_path: str
    source_files: Tuple[str, ...] = ()
    all_references: Tuple[str, ...] = ()
    defines: Tuple[str, ...] = ()
    compiler_options: CompilerOptions = field(default_factory=CompilerOptions)


@dataclass
class ResponseFileData:
    """Parsed content of one compiler response file."""

    defines: List[str] = field(default_factory=list)
    full_path_references: List[str] = field(default_factory=list)
    unsafe: bool = False
    errors: List[str] = field(default_factory=list)


@dataclass
class GenerationSettings:
    """Controls whether generated files hit the disk or are captured in memory."""

    should_sync: bool = True
    sync_path: Optional[Dict[str, str]] = None


__all__ = [
    "Assembly",
    "CompilerOptions",
    "GenerationSettings",
    "PackageInfo",
    "PackageSource",
    "ResponseFileData",
]

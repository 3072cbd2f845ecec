"""Generate IDE solution and project files from a host assembly graph."""

from .generator import ProjectGeneration
from .hooks import HookRegistry, default_registry
from .host import AssemblyNameProvider, ManifestAssemblyProvider
from .models import (
    Assembly,
    CompilerOptions,
    GenerationSettings,
    PackageInfo,
    PackageSource,
    ResponseFileData,
)

__version__ = "0.1.0"

__all__ = [
    "Assembly",
    "AssemblyNameProvider",
    "CompilerOptions",
    "GenerationSettings",
    "HookRegistry",
    "ManifestAssemblyProvider",
    "PackageInfo",
    "PackageSource",
    "ProjectGeneration",
    "ResponseFileData",
    "default_registry",
]

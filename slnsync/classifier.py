"""Language classification for source files and assemblies."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Sequence

from .models import Assembly
from .utils import extension_of


class ScriptingLanguage(Enum):
    """Language categories an assembly can be classified as."""

    NONE = "none"
    CSHARP = "csharp"


# Extensions recognized without configuration. Only ``cs`` is compiled; the
# rest are surfaced in projects as non-compiled items.
BUILTIN_SUPPORTED_EXTENSIONS = {
    "cs": ScriptingLanguage.CSHARP,
    "uxml": ScriptingLanguage.NONE,
    "uss": ScriptingLanguage.NONE,
    "shader": ScriptingLanguage.NONE,
    "compute": ScriptingLanguage.NONE,
    "cginc": ScriptingLanguage.NONE,
    "hlsl": ScriptingLanguage.NONE,
    "glslinc": ScriptingLanguage.NONE,
}

TARGET_LANGUAGE = ScriptingLanguage.CSHARP
PROJECT_EXTENSION = ".csproj"


def normalize_extension(extension: str) -> str:
    """Lower-case ``extension`` and strip leading dots."""
    return extension.lstrip(".").lower()


def extension_of_source_file(path: str) -> str:
    """Return the dot-less, lower-cased extension of ``path``."""
    return normalize_extension(extension_of(path))


def extension_of_source_files(files: Sequence[str]) -> str:
    """Return the extension of the first file, or ``NA`` for an empty list."""
    return extension_of_source_file(files[0]) if files else "NA"


def language_for_extension(extension: str) -> ScriptingLanguage:
    """Map an extension (with or without dot) to its language category."""
    return BUILTIN_SUPPORTED_EXTENSIONS.get(
        normalize_extension(extension), ScriptingLanguage.NONE
    )


def language_for_assembly(assembly: Assembly) -> ScriptingLanguage:
    """Classify an assembly by the extension of its first source file."""
    return language_for_extension(extension_of_source_files(assembly.source_files))


def is_supported_extension(extension: str, user_extensions: Iterable[str] = ()) -> bool:
    """Return True for built-in extensions and configured user extensions."""
    normalized = normalize_extension(extension)
    if not normalized:
        return False
    if normalized in BUILTIN_SUPPORTED_EXTENSIONS:
        return True
    return normalized in {normalize_extension(item) for item in user_extensions}


def relevant_assemblies(assemblies: Iterable[Assembly]) -> List[Assembly]:
    """Keep assemblies of the target language, preserving host order."""
    return [
        assembly
        for assembly in assemblies
        if language_for_assembly(assembly) is TARGET_LANGUAGE
    ]


__all__ = [
    "BUILTIN_SUPPORTED_EXTENSIONS",
    "PROJECT_EXTENSION",
    "ScriptingLanguage",
    "TARGET_LANGUAGE",
    "extension_of_source_file",
    "extension_of_source_files",
    "is_supported_extension",
    "language_for_assembly",
    "language_for_extension",
    "normalize_extension",
    "relevant_assemblies",
]

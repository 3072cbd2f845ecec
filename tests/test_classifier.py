"""Tests for slnsync.classifier."""

from __future__ import annotations

from slnsync.classifier import (
    ScriptingLanguage,
    extension_of_source_files,
    is_supported_extension,
    language_for_assembly,
    language_for_extension,
    relevant_assemblies,
)
from slnsync.models import Assembly


def _assembly(name: str, *sources: str) -> Assembly:
    return Assembly(name=name, output_path=f"Library/ScriptAssemblies/{name}.dll", source_files=sources)


def test_language_for_extension_is_case_insensitive() -> None:
    assert language_for_extension(".CS") is ScriptingLanguage.CSHARP
    assert language_for_extension("cs") is ScriptingLanguage.CSHARP
    assert language_for_extension(".shader") is ScriptingLanguage.NONE
    assert language_for_extension(".txt") is ScriptingLanguage.NONE


def test_is_supported_extension_honours_user_extensions() -> None:
    assert is_supported_extension(".hlsl")
    assert not is_supported_extension(".txt")
    assert is_supported_extension(".txt", ["txt"])
    assert is_supported_extension(".TXT", [".txt"])
    assert not is_supported_extension("", ["txt"])


def test_assembly_language_comes_from_first_source_file() -> None:
    assert language_for_assembly(_assembly("Game", "Assets/a.cs", "Assets/b.shader")) is ScriptingLanguage.CSHARP
    assert language_for_assembly(_assembly("Shaders", "Assets/b.shader", "Assets/a.cs")) is ScriptingLanguage.NONE
    assert language_for_assembly(_assembly("Empty")) is ScriptingLanguage.NONE
    assert extension_of_source_files([]) == "NA"


def test_relevant_assemblies_preserves_host_order() -> None:
    zeta = _assembly("Zeta", "Assets/z.cs")
    shader = _assembly("Shaders", "Assets/s.shader")
    alpha = _assembly("Alpha", "Assets/A.CS")

    relevant = relevant_assemblies([zeta, shader, alpha, _assembly("Empty")])

    assert [assembly.name for assembly in relevant] == ["Zeta", "Alpha"]

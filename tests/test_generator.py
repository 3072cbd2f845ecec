"""End-to-end tests for ProjectGeneration against an in-memory host."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Dict, List

import pytest

from slnsync.config import ProjectConfig, SlnSyncConfig
from slnsync.generator import ProjectGeneration
from slnsync.hooks import HookRegistry
from slnsync.models import PackageSource, ResponseFileData
from tests._fixtures.host_builder import FakeAssemblyProvider

GUID_A = "FEBDBDBD-A798-8369-CD65-6C2F6E008E6F"


def _read(path: Path) -> str:
    return path.read_bytes().decode("utf-8")


def _count_writes(generator: ProjectGeneration) -> List[bool]:
    results: List[bool] = []
    original = generator.writer.write_if_changed

    def recording(path: str, content: str) -> bool:
        written = original(path, content)
        results.append(written)
        return written

    generator.writer.write_if_changed = recording  # type: ignore[method-assign]
    return results


def test_sync_writes_solution_and_projects(
    generator: ProjectGeneration, provider: FakeAssemblyProvider, project_dir: Path
) -> None:
    provider.add_assembly("A", ["Assets/a.cs"])
    provider.add_assembly("B", ["Assets/b.cs"], references=["Library/ScriptAssemblies/A.dll"])

    generator.sync()

    solution = _read(project_dir / "Proj.sln")
    assert solution.index('"A", "A.csproj"') < solution.index('"B", "B.csproj"')
    project_b = _read(project_dir / "B.csproj")
    assert '<ProjectReference Include="A.csproj">' in project_b
    assert f"<Project>{{{GUID_A}}}</Project>" in project_b
    assert generator.has_solution_been_generated()


def test_sync_is_idempotent(generator: ProjectGeneration, provider: FakeAssemblyProvider) -> None:
    provider.add_assembly("A", ["Assets/a.cs"])
    provider.add_assembly("B", ["Assets/b.cs"])
    generator.sync()

    results = _count_writes(generator)
    generator.sync()

    assert results == [False, False, False]


def test_non_csharp_assemblies_get_no_project(
    generator: ProjectGeneration, provider: FakeAssemblyProvider, project_dir: Path
) -> None:
    provider.add_assembly("A", ["Assets/a.cs"])
    provider.add_assembly("Shaders", ["Assets/water.shader"])

    generator.sync()

    assert (project_dir / "A.csproj").exists()
    assert not (project_dir / "Shaders.csproj").exists()
    assert '"Shaders"' not in _read(project_dir / "Proj.sln")


def test_defines_and_response_files_are_merged(
    generator: ProjectGeneration,
    provider: FakeAssemblyProvider,
    project_dir: Path,
) -> None:
    provider.defines = ["UNITY_EDITOR", "GAME"]
    provider.add_assembly("A", ["Assets/a.cs"], defines=["GAME"], response_files=["Assets/csc.rsp"])
    provider.response_files["Assets/csc.rsp"] = ResponseFileData(defines=["RSP_DEFINE", "game"], unsafe=True)

    generator.sync()

    text = _read(project_dir / "A.csproj")
    assert "<DefineConstants>DEBUG;TRACE;UNITY_EDITOR;GAME;RSP_DEFINE;game</DefineConstants>" in text
    assert "<AllowUnsafeBlocks>True</AllowUnsafeBlocks>" in text
    assert provider.parsed_response_files == ["Assets/csc.rsp"]


def test_response_file_errors_are_logged(
    generator: ProjectGeneration,
    provider: FakeAssemblyProvider,
    project_dir: Path,
    caplog: pytest.LogCaptureFixture,
) -> None:
    provider.add_assembly("A", ["Assets/a.cs"], response_files=["Assets/missing.rsp"])
    caplog.set_level(logging.ERROR, logger="slnsync")

    generator.sync()

    assert "Assets/missing.rsp Parse Error : missing Assets/missing.rsp" in caplog.text
    assert (project_dir / "A.csproj").exists()


def test_asset_parts_are_listed_in_owning_project(
    generator: ProjectGeneration, provider: FakeAssemblyProvider, project_dir: Path
) -> None:
    provider.add_assembly("A", ["Assets/a.cs"])
    provider.asset_paths = ["Assets/UI/Main.uxml", "Assets/readme.txt"]
    provider.script_assemblies["Assets/UI/Main.uxml.cs"] = "A.dll"
    provider.script_assemblies["Assets/readme.txt.cs"] = "A.dll"

    generator.sync()

    text = _read(project_dir / "A.csproj")
    assert '     <None Include="Assets\\UI\\Main.uxml" />\r\n' in text
    assert "readme.txt" not in text


def test_user_extensions_from_config(
    project_dir: Path, provider: FakeAssemblyProvider, hooks: HookRegistry
) -> None:
    config = SlnSyncConfig(
        root=project_dir,
        user_extensions=["txt"],
        project=ProjectConfig(root_namespace="Studio", lang_version="9.0"),
    )
    generator = ProjectGeneration(str(project_dir), provider, config=config, hooks=hooks)
    provider.add_assembly("A", ["Assets/a.cs"])
    provider.asset_paths = ["Assets/readme.txt"]
    provider.script_assemblies["Assets/readme.txt.cs"] = "A.dll"

    generator.sync()

    text = _read(project_dir / "A.csproj")
    assert '<None Include="Assets\\readme.txt" />' in text
    assert "<RootNamespace>Studio</RootNamespace>" in text
    assert "<LangVersion>9.0</LangVersion>" in text


def test_external_packages_need_generate_all(
    generator: ProjectGeneration, provider: FakeAssemblyProvider, project_dir: Path
) -> None:
    provider.add_package("Packages/com.vendor.tools", PackageSource.REGISTRY)
    provider.add_assembly("A", ["Assets/a.cs"])
    provider.add_assembly("Vendor", ["Packages/com.vendor.tools/Runtime/v.cs"])

    generator.sync()
    assert not (project_dir / "Vendor.csproj").exists()

    generator.generate_all(True)
    generator.sync()
    assert '<Compile Include="Packages\\com.vendor.tools\\Runtime\\v.cs" />' in _read(project_dir / "Vendor.csproj")
    assert '"Vendor", "Vendor.csproj"' in _read(project_dir / "Proj.sln")


def test_capture_mode_writes_nothing(
    generator: ProjectGeneration,
    provider: FakeAssemblyProvider,
    project_dir: Path,
    captured: Dict[str, str],
) -> None:
    provider.add_assembly("A", ["Assets/a.cs"])

    generator.sync()

    assert sorted(Path(path).name for path in captured) == ["A.csproj", "Proj.sln"]
    assert not (project_dir / "Proj.sln").exists()
    assert captured[generator.project_file(provider.assemblies[0])].startswith("<?xml")


def test_pre_generate_hook_can_take_over(
    generator: ProjectGeneration,
    provider: FakeAssemblyProvider,
    hooks: HookRegistry,
    project_dir: Path,
) -> None:
    calls: List[str] = []
    hooks.register_pre_generate(lambda: True)
    hooks.register_post_generate(lambda: calls.append("post"))
    provider.add_assembly("A", ["Assets/a.cs"])

    generator.sync()

    assert not (project_dir / "Proj.sln").exists()
    assert calls == ["post"]


def test_transform_hooks_rewrite_output(
    generator: ProjectGeneration,
    provider: FakeAssemblyProvider,
    hooks: HookRegistry,
    project_dir: Path,
) -> None:
    hooks.register_project_transform(lambda path, content: content.replace("<Optimize>false</Optimize>", "<Optimize>true</Optimize>"))
    hooks.register_solution_transform(lambda path, content: "# generated\r\n" + content)
    provider.add_assembly("A", ["Assets/a.cs"])

    generator.sync()

    assert "<Optimize>false</Optimize>" not in _read(project_dir / "A.csproj")
    assert _read(project_dir / "Proj.sln").startswith("# generated\r\n")


def test_sync_if_needed_before_first_sync_does_nothing(
    generator: ProjectGeneration, provider: FakeAssemblyProvider, project_dir: Path
) -> None:
    provider.add_assembly("A", ["Assets/a.cs"])

    assert not generator.sync_if_needed(["Assets/a.cs"], [])
    assert not (project_dir / "A.csproj").exists()


def test_sync_if_needed_ignores_unrelated_files(
    generator: ProjectGeneration, provider: FakeAssemblyProvider
) -> None:
    provider.add_assembly("A", ["Assets/a.cs"])
    generator.sync()

    assert not generator.sync_if_needed(["Assets/notes.txt"], ["Assets/a.cs"])


def test_sync_if_needed_regenerates_only_affected_projects(
    generator: ProjectGeneration, provider: FakeAssemblyProvider, project_dir: Path
) -> None:
    provider.add_assembly("A", ["Assets/a.cs"])
    provider.add_assembly("B", ["Assets/b.cs"])
    generator.sync()
    (project_dir / "A.csproj").write_text("stale", encoding="utf-8")
    (project_dir / "B.csproj").write_text("stale", encoding="utf-8")

    assert generator.sync_if_needed(["Assets/a.cs"], [])

    assert _read(project_dir / "A.csproj").startswith("<?xml")
    assert _read(project_dir / "B.csproj") == "stale"


def test_sync_if_needed_picks_up_new_sources(
    generator: ProjectGeneration, provider: FakeAssemblyProvider, project_dir: Path
) -> None:
    assembly = provider.add_assembly("A", ["Assets/a.cs"])
    generator.sync()

    provider.replace_assembly(replace(assembly, source_files=("Assets/a.cs", "Assets/new.cs")))
    provider.script_assemblies["Assets/new.cs.cs"] = "A.dll"

    assert generator.sync_if_needed(["Assets/new.cs"], [])
    assert '<Compile Include="Assets\\new.cs" />' in _read(project_dir / "A.csproj")


def test_reimported_dll_triggers_sync(
    generator: ProjectGeneration, provider: FakeAssemblyProvider
) -> None:
    provider.add_assembly("A", ["Assets/a.cs"])
    generator.sync()

    assert generator.sync_if_needed([], ["Assets/Plugins/Native.dll"])


def test_sync_replaces_project_files_with_invalid_encoding(
    generator: ProjectGeneration, provider: FakeAssemblyProvider, project_dir: Path
) -> None:
    provider.add_assembly("A", ["Assets/a.cs"])
    (project_dir / "A.csproj").write_bytes(b"legacy \xff\xfe content")

    generator.sync()

    assert _read(project_dir / "A.csproj").startswith("<?xml")

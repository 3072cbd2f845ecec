"""Tests for the generation hook registry."""

from __future__ import annotations

from types import SimpleNamespace
from typing import List

import pytest

from slnsync import hooks as hooks_module
from slnsync.hooks import HookRegistry, discover_hooks


def test_content_hooks_are_threaded_in_order() -> None:
    registry = HookRegistry()
    registry.register_project_transform(lambda path, content: content + "|first")
    registry.register_project_transform(lambda path, content: None)
    registry.register_project_transform(lambda path, content: f"{content}|{path}")

    assert registry.transform_project("Game.csproj", "body") == "body|first|Game.csproj"
    assert registry.transform_solution("Proj.sln", "untouched") == "untouched"


def test_pre_generate_reports_handled_when_any_hook_returns_true() -> None:
    registry = HookRegistry()
    assert not registry.run_pre_generate()

    registry.register_pre_generate(lambda: False)
    registry.register_pre_generate(lambda: "yes")
    assert not registry.run_pre_generate()

    registry.register_pre_generate(lambda: True)
    assert registry.run_pre_generate()


def test_post_generate_hooks_run_in_order() -> None:
    calls: List[str] = []
    registry = HookRegistry()
    registry.register_post_generate(lambda: calls.append("a"))
    registry.register_post_generate(lambda: calls.append("b"))

    registry.run_post_generate()

    assert calls == ["a", "b"]
    assert len(registry) == 2


def test_register_object_picks_up_known_attributes() -> None:
    class Plugin:
        def on_generated_solution(self, path: str, content: str) -> str:
            return content.upper()

        def on_generated_project_files(self) -> None:
            pass

    registry = HookRegistry()

    assert registry.register_object(Plugin()) == 2
    assert registry.register_object(object()) == 0
    assert registry.transform_solution("Proj.sln", "abc") == "ABC"


class _FakeEntryPoint:
    def __init__(self, name: str, target: object) -> None:
        self.name = name
        self._target = target

    def load(self) -> object:
        if isinstance(self._target, Exception):
            raise self._target
        return self._target


class _ProjectStamp:
    def on_generated_project(self, path: str, content: str) -> str:
        return content + "<!-- stamped -->"


def test_discover_hooks_instantiates_classes(monkeypatch: pytest.MonkeyPatch) -> None:
    entries = [
        _FakeEntryPoint("stamp", _ProjectStamp),
        _FakeEntryPoint("empty", SimpleNamespace()),
    ]
    monkeypatch.setattr(hooks_module, "_iter_entry_points", lambda: entries)

    registry = discover_hooks(HookRegistry())

    assert len(registry) == 1
    assert registry.transform_project("A.csproj", "x") == "x<!-- stamped -->"


def test_discover_hooks_reports_broken_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    entries = [_FakeEntryPoint("broken", ImportError("no module named plugin"))]
    monkeypatch.setattr(hooks_module, "_iter_entry_points", lambda: entries)

    with pytest.raises(RuntimeError, match="broken"):
        discover_hooks(HookRegistry())

"""Extension hooks invoked around project and solution generation."""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata
from typing import Callable, Iterable, List

from .logging import get_logger

_ENTRY_POINT_GROUP = "slnsync.hooks"

PreGenerateHook = Callable[[], bool]
ContentHook = Callable[[str, str], str]
PostGenerateHook = Callable[[], None]

# Attribute names looked up on objects published through entry points.
_PRE_GENERATE_ATTR = "on_pre_generating_project_files"
_PROJECT_ATTR = "on_generated_project"
_SOLUTION_ATTR = "on_generated_solution"
_POST_GENERATE_ATTR = "on_generated_project_files"

logger = get_logger("hooks")


class HookRegistry:
    """Ordered collections of generation hooks.

    Hooks run in registration order. Content hooks receive the output of the
    previous hook; results that are not strings are ignored.
    """

    def __init__(self) -> None:
        self._pre_generate: List[PreGenerateHook] = []
        self._project: List[ContentHook] = []
        self._solution: List[ContentHook] = []
        self._post_generate: List[PostGenerateHook] = []

    def register_pre_generate(self, hook: PreGenerateHook) -> PreGenerateHook:
        self._pre_generate.append(hook)
        return hook

    def register_project_transform(self, hook: ContentHook) -> ContentHook:
        self._project.append(hook)
        return hook

    def register_solution_transform(self, hook: ContentHook) -> ContentHook:
        self._solution.append(hook)
        return hook

    def register_post_generate(self, hook: PostGenerateHook) -> PostGenerateHook:
        self._post_generate.append(hook)
        return hook

    def register_object(self, obj: object) -> int:
        """Register whichever hook attributes ``obj`` exposes.

        Returns the number of hooks registered; objects without any of the
        known attributes register nothing.
        """
        registered = 0
        for attr, register in (
            (_PRE_GENERATE_ATTR, self.register_pre_generate),
            (_PROJECT_ATTR, self.register_project_transform),
            (_SOLUTION_ATTR, self.register_solution_transform),
            (_POST_GENERATE_ATTR, self.register_post_generate),
        ):
            candidate = getattr(obj, attr, None)
            if callable(candidate):
                register(candidate)
                registered += 1
        return registered

    def run_pre_generate(self) -> bool:
        """Return True when any hook reports it generated the files itself."""
        handled = False
        for hook in self._pre_generate:
            result = hook()
            if isinstance(result, bool):
                handled |= result
        return handled

    def transform_project(self, path: str, content: str) -> str:
        return _thread_content(self._project, path, content)

    def transform_solution(self, path: str, content: str) -> str:
        return _thread_content(self._solution, path, content)

    def run_post_generate(self) -> None:
        for hook in self._post_generate:
            hook()

    def __len__(self) -> int:
        return (
            len(self._pre_generate)
            + len(self._project)
            + len(self._solution)
            + len(self._post_generate)
        )


def _thread_content(hooks: Iterable[ContentHook], path: str, content: str) -> str:
    for hook in hooks:
        result = hook(path, content)
        if isinstance(result, str):
            content = result
    return content


def discover_hooks(registry: HookRegistry) -> HookRegistry:
    """Add hooks published under the ``slnsync.hooks`` entry point group."""
    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Failed to load hook entry point '{entry.name}': {exc}") from exc

        target = loaded() if isinstance(loaded, type) else loaded
        count = registry.register_object(target)
        if count == 0:
            logger.debug("Entry point %s exposes no generation hooks; skipping", entry.name)
        else:
            logger.debug("Registered %d hook(s) from entry point %s", count, entry.name)
    return registry


@lru_cache(maxsize=1)
def default_registry() -> HookRegistry:
    """Return the process-wide registry, populated from entry points once."""
    return discover_hooks(HookRegistry())


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover
        return []

    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]

    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "ContentHook",
    "HookRegistry",
    "PostGenerateHook",
    "PreGenerateHook",
    "default_registry",
    "discover_hooks",
]

"""Path and text helpers used while rendering descriptors."""

from __future__ import annotations

import os
import re
from typing import Any, Iterable, List, Optional

_XML_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&apos;",
}
_XML_ESCAPE_PATTERN = re.compile("[&<>\"']")
_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")


def file_name_without_extension(path: str) -> str:
    """Return the final path component without its last extension.

    Both ``/`` and ``\\`` count as separators regardless of the platform, so
    host paths recorded on Windows produce the same stem everywhere.
    """
    if not path:
        return ""
    slash = max(path.rfind("/"), path.rfind("\\"))
    name = path[slash + 1 :]
    dot = name.rfind(".")
    if dot == -1:
        return name
    return name[:dot]


def file_name(path: str) -> str:
    """Return the final path component, treating both separators alike."""
    slash = max(path.rfind("/"), path.rfind("\\"))
    return path[slash + 1 :]


def extension_of(path: str) -> str:
    """Return the extension of ``path`` including the dot, or ``""``."""
    name = file_name(path)
    dot = name.rfind(".")
    if dot == -1 or dot == len(name) - 1:
        return ""
    return name[dot:]


def is_rooted(path: str) -> bool:
    """True for ``/x``, ``\\x`` and ``C:...`` paths."""
    if not path:
        return False
    return path[0] in "/\\" or bool(_DRIVE_PATTERN.match(path))


def escape_xml(text: str) -> str:
    """Escape the five XML special characters."""
    return _XML_ESCAPE_PATTERN.sub(lambda match: _XML_ESCAPES[match.group(0)], text)


def skip_path_prefix(path: str, prefix: str) -> str:
    """Strip ``prefix`` plus one separator from ``path`` when it is a parent.

    The comparison ignores separator style; the returned remainder keeps the
    separators it had in ``path``.
    """
    normalized_path = path.replace("\\", "/")
    normalized_prefix = prefix.replace("\\", "/").rstrip("/")
    if normalized_prefix and normalized_path.startswith(f"{normalized_prefix}/"):
        return path[len(normalized_prefix) + 1 :]
    return path


def normalize_path(path: str) -> str:
    """Convert any separator style to the host OS separator."""
    if os.sep == "\\":
        return path.replace("/", os.sep)
    return path.replace("\\", os.sep)


def join_path(directory: str, path: str) -> str:
    """Join with ``/`` unless ``path`` is already rooted."""
    if is_rooted(path):
        return path
    if not directory:
        return path
    return f"{directory.rstrip('/')}/{path}"


def unique(values: Iterable[str]) -> List[str]:
    """Drop duplicates while keeping the first occurrence of each value."""
    seen: set[str] = set()
    result: List[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result


def as_bool(value: Any) -> Optional[bool]:
    """Coerce YAML-ish truth values (``yes``, ``"false"``, ``1``); None when unclear."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "as_bool",
    "escape_xml",
    "extension_of",
    "file_name",
    "file_name_without_extension",
    "is_rooted",
    "join_path",
    "normalize_path",
    "skip_path_prefix",
    "unique",
]

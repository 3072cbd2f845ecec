"""Deterministic GUIDs for projects and solution entries."""

from __future__ import annotations

import hashlib

# Visual Studio project type GUID for C# class libraries.
CSHARP_PROJECT_TYPE_GUID = "FAE04EC0-301F-11D3-BF4B-00C04F79EFBC"

_PROJECT_SALT = "salt"


def guid_for_project(project_name: str) -> str:
    """Return the GUID identifying one generated project."""
    return compute_guid_hash_for(project_name + _PROJECT_SALT)


def guid_for_solution(project_name: str, source_file_extension: str) -> str:
    """Return the project-type GUID used for a solution entry."""
    if source_file_extension.lower() == "cs":
        return CSHARP_PROJECT_TYPE_GUID
    return compute_guid_hash_for(project_name)


def compute_guid_hash_for(value: str) -> str:
    digest = hashlib.md5(value.encode("utf-8")).hexdigest()
    return hash_as_guid(digest)


def hash_as_guid(digest: str) -> str:
    """Format 32 hex characters as an upper-case 8-4-4-4-12 GUID."""
    guid = "-".join(
        (digest[0:8], digest[8:12], digest[12:16], digest[16:20], digest[20:32])
    )
    return guid.upper()


__all__ = [
    "CSHARP_PROJECT_TYPE_GUID",
    "compute_guid_hash_for",
    "guid_for_project",
    "guid_for_solution",
    "hash_as_guid",
]

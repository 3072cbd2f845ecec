"""Decides which files take part in generated projects."""

from __future__ import annotations

from typing import Callable, Iterable, Optional, Tuple

from .classifier import ScriptingLanguage, is_supported_extension, language_for_extension
from .models import PackageInfo
from .utils import extension_of

PackageLookup = Callable[[str], Optional[PackageInfo]]

# Compiled output and assembly manifests are not sources but must stay visible.
_ALWAYS_INCLUDED_EXTENSIONS = (".dll", ".asmdef")


class RelevanceFilter:
    """Combines extension rules with package-origin rules.

    Files that live in packages fetched from outside the project (registry,
    git, built-in, tarballs) are excluded unless ``generate_all`` is set.
    Embedded and local packages are treated like project files.
    """

    def __init__(
        self,
        find_package: PackageLookup,
        user_extensions: Iterable[str] = (),
        *,
        generate_all: bool = False,
    ) -> None:
        self._find_package = find_package
        self.user_extensions: Tuple[str, ...] = tuple(user_extensions)
        self.generate_all = generate_all

    def is_external_package_path(self, path: str) -> bool:
        """True when ``path`` belongs to a package that is not internalized."""
        if not path or not path.strip():
            return False
        package = self._find_package(path)
        if package is None:
            return False
        return not package.source.internalized

    def is_excluded_package_path(self, path: str) -> bool:
        return not self.generate_all and self.is_external_package_path(path)

    def is_supported_extension(self, extension: str) -> bool:
        return is_supported_extension(extension, self.user_extensions)

    def should_file_be_part_of_solution(self, path: str) -> bool:
        """Return True when ``path`` should appear in generated output."""
        if self.is_excluded_package_path(path):
            return False

        extension = extension_of(path).lower()
        if extension in _ALWAYS_INCLUDED_EXTENSIONS:
            return True

        return self.is_supported_extension(extension)

    def is_asset_project_part(self, path: str) -> bool:
        """True for recognized, non-compiled assets that should be listed as items."""
        if self.is_excluded_package_path(path):
            return False
        extension = extension_of(path)
        return (
            self.is_supported_extension(extension)
            and language_for_extension(extension) is ScriptingLanguage.NONE
        )


__all__ = ["PackageLookup", "RelevanceFilter"]

"""Write-if-changed persistence for generated descriptors."""

from __future__ import annotations

import codecs
from pathlib import Path

from .logging import get_logger
from .models import GenerationSettings

_ENCODING = "utf-8"


class SyncWriter:
    """Persists generated text only when it differs from what is on disk.

    With ``settings.should_sync`` disabled nothing is written; the content is
    recorded in ``settings.sync_path`` instead so callers can inspect it.
    """

    def __init__(self, settings: GenerationSettings | None = None) -> None:
        self.settings = settings or GenerationSettings()
        self.logger = get_logger("writer")

    def write_if_changed(self, path: str, content: str) -> bool:
        """Return True when ``content`` was written or captured."""
        target = Path(path)
        if target.exists() and self._matches(target, content):
            self.logger.debug("%s is up to date; skipping write", path)
            return False

        if self.settings.should_sync:
            with target.open("w", encoding=_ENCODING, newline="") as handle:
                handle.write(content)
            self.logger.debug("Wrote %s", path)
            return True

        if self.settings.sync_path is None:
            self.settings.sync_path = {}
        encoded = content.encode(_ENCODING, errors="replace")
        self.settings.sync_path[path] = encoded.decode(_ENCODING)
        self.logger.debug("Captured %s (%d bytes)", path, len(encoded))
        return True

    @staticmethod
    def _matches(path: Path, content: str) -> bool:
        existing = path.read_bytes()
        # Files saved with a BOM by other tools still count as unchanged.
        if existing.startswith(codecs.BOM_UTF8):
            existing = existing[len(codecs.BOM_UTF8) :]
        return existing == content.encode(_ENCODING, errors="replace")


__all__ = ["SyncWriter"]

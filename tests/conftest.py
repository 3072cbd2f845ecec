from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator

import pytest

from slnsync.generator import ProjectGeneration
from slnsync.hooks import HookRegistry
from slnsync.models import GenerationSettings
from tests._fixtures.host_builder import FakeAssemblyProvider


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Project root named ``Proj`` so GUIDs are predictable."""
    root = tmp_path / "Proj"
    root.mkdir()
    return root


@pytest.fixture
def provider() -> FakeAssemblyProvider:
    return FakeAssemblyProvider()


@pytest.fixture
def hooks() -> HookRegistry:
    return HookRegistry()


@pytest.fixture
def generator(project_dir: Path, provider: FakeAssemblyProvider, hooks: HookRegistry) -> ProjectGeneration:
    return ProjectGeneration(str(project_dir), provider, hooks=hooks)


@pytest.fixture
def captured(generator: ProjectGeneration) -> Dict[str, str]:
    """Switch the generator to capture mode and return the capture map."""
    sync_path: Dict[str, str] = {}
    generator.settings = GenerationSettings(should_sync=False, sync_path=sync_path)
    return sync_path


@pytest.fixture(autouse=True)
def _reset_slnsync_logger() -> Iterator[None]:
    """Undo CLI logging configuration so caplog sees records in later tests."""
    yield
    logger = logging.getLogger("slnsync")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)

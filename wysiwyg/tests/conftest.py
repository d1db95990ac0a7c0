"""Shared test fixtures and utilities."""

import pytest
from pathlib import Path
from typing import Any, Dict

from ..config import get_config
from ..controller import ProjectController
from ..state import AppState
from .utils import FakeCargo


@pytest.fixture(autouse=True)
def isolate_cwd(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep stray .env files out of the loaded configuration."""
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config() -> Dict[str, Any]:
    return get_config()


@pytest.fixture
def cargo() -> FakeCargo:
    return FakeCargo()


@pytest.fixture
def controller(config: Dict[str, Any], cargo: FakeCargo) -> ProjectController:
    return ProjectController(config=config, runner=cargo)


@pytest.fixture
def state() -> AppState:
    return AppState()

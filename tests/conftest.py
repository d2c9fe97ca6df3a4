"""Pytest fixtures shared by all test modules.

Settings are loaded lazily by orchestrators and retry helpers, so every test
gets config/data dirs under its own tmp_path and a fresh settings singleton.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from agent_orchestrator.config import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path):
	reset_settings()
	with patch.dict(os.environ, {
		"AGENT_ORCHESTRATOR_CONFIG_DIR": str(tmp_path / "config"),
		"AGENT_ORCHESTRATOR_DATA_DIR": str(tmp_path / "data"),
	}):
		yield
	reset_settings()

import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path for CI environments where
# Python might not automatically include it (e.g., some GitHub
# Actions runners invoking pytest differently).
PROJECT_ROOT = Path(__file__).parent.parent.resolve()
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import ConfigStore


@pytest.fixture(autouse=True)
def reset_config_store(monkeypatch):
    """Start every test from an empty store with no CONFIG_PATH override."""
    monkeypatch.delenv("CONFIG_PATH", raising=False)
    ConfigStore.reset()
    yield
    ConfigStore.reset()


@pytest.fixture
def missing_config_path(tmp_path) -> str:
    return str(tmp_path / "does-not-exist" / "config.yaml")

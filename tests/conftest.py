# tests/conftest.py
import pytest

from logic.config import CONFIG_ENV_VAR, reset_config


@pytest.fixture(autouse=True)
def default_engine_config(tmp_path, monkeypatch):
    """
    Every test starts from built-in defaults.

    Points LOGIC_ENGINE_CONFIG at a file that does not exist so a local
    config/engine.yaml never leaks into test expectations.
    """
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.yaml"))
    reset_config()
    yield
    reset_config()

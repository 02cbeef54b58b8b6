import pytest

from command_router.actions.registry import ActionRegistry
from command_router.config.config import ENV_MAPPINGS, Config


def _env_names():
    for env_info in ENV_MAPPINGS.values():
        yield env_info if isinstance(env_info, str) else env_info["env"]


@pytest.fixture(autouse=True)
def setup_test_env(monkeypatch, tmp_path):
    """Isolate every test from the real environment and reset singletons"""
    for name in _env_names():
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("COMMAND_ROUTER_CONFIG", str(tmp_path / "nonexistent_config.yml"))

    Config.reset()
    ActionRegistry._instance = None

    yield

    Config.reset()
    ActionRegistry._instance = None


@pytest.fixture
def registry():
    """Fresh command registry"""
    registry = ActionRegistry()
    registry.initialize()
    return registry

"""Root test configuration."""

import logging

import pytest
import structlog

from mcpconfig.config.settings import get_settings
from mcpconfig.distribution.registry import ClientRegistry

SERVER_NAME = "test-server"


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def home(tmp_path):
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def project_root(tmp_path):
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def isolated_env(home, project_root, monkeypatch):
    """Point HOME, XDG_CONFIG_HOME and cwd at temporary directories."""
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.delenv("USERPROFILE", raising=False)
    monkeypatch.delenv("APPDATA", raising=False)
    for name in (
        "MCPCONFIG_SERVER_NAME",
        "MCPCONFIG_REGISTRY_PATH",
        "MCPCONFIG_LOCAL_DIR",
        "MCPCONFIG_DISTRIBUTION_SCOPE",
        "MCPCONFIG_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("mcpconfig.paths.current_platform", lambda: "linux")
    monkeypatch.setattr("mcpconfig.distribution.registry.current_platform", lambda: "linux")
    monkeypatch.chdir(project_root)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def registry_path(tmp_path):
    return tmp_path / "registry" / "client-mappings.json"


@pytest.fixture
def registry(registry_path, project_root):
    return ClientRegistry(server_name=SERVER_NAME, path=registry_path, project_root=project_root)

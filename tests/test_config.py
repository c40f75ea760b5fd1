"""Tests for Settings loading."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from shipyard.config import EngineConfig, LoggingConfig, get_settings
from shipyard.engine import DockerEngine


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for var in (
        "SHIPYARD_ENGINE__SOCKET_PATH",
        "SHIPYARD_ENGINE__BASE_URL",
        "SHIPYARD_ENGINE__API_VERSION",
        "SHIPYARD_LOGGING__LEVEL",
    ):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    s = get_settings()
    assert s.engine.socket_path == "/var/run/docker.sock"
    assert s.engine.base_url is None
    assert s.engine.api_version == "v1.43"
    assert s.engine.timeout_s is None
    assert s.logging.level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SHIPYARD_ENGINE__SOCKET_PATH", "/run/user/1000/podman/podman.sock")
    monkeypatch.setenv("SHIPYARD_LOGGING__LEVEL", "debug")
    s = get_settings()
    assert s.engine.socket_path == "/run/user/1000/podman/podman.sock"
    assert s.logging.level == "DEBUG"


def test_dotenv_file(tmp_path):
    (tmp_path / ".env").write_text("SHIPYARD_ENGINE__BASE_URL=http://127.0.0.1:2375/\n")
    assert get_settings().engine.base_url == "http://127.0.0.1:2375"


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_api_version_gets_prefix():
    assert EngineConfig(api_version="1.41").api_version == "v1.41"
    assert EngineConfig(api_version="v1.44").api_version == "v1.44"


def test_unknown_keys_rejected():
    with pytest.raises(ValidationError):
        EngineConfig(sockt_path="/tmp/x")  # type: ignore[call-arg]
    with pytest.raises(ValidationError):
        LoggingConfig(lvl="INFO")  # type: ignore[call-arg]


def test_engine_from_settings(monkeypatch):
    monkeypatch.setenv("SHIPYARD_ENGINE__BASE_URL", "http://docker.internal:2375")
    engine = DockerEngine.from_settings()
    assert engine.config.base_url == "http://docker.internal:2375"

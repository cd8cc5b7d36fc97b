"""Pytest configuration and fixtures."""

import json
import os
from pathlib import Path
from typing import Any

import pytest
from fastapi.testclient import TestClient

from extraction_bridge import config as bridge_config
from extraction_bridge.app import create_app
from extraction_bridge.bridge import reset_bridge
from extraction_bridge.services import SERVICE_TYPE, ExtractionService, ServiceRegistry


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep tests away from the user's config file and the shared bridge."""
    monkeypatch.setattr(bridge_config, "DEFAULT_CONFIG_PATH", tmp_path / "config" / "config.json")
    monkeypatch.setattr(bridge_config, "_settings", None)
    reset_bridge()
    yield
    reset_bridge()


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(create_app())


@pytest.fixture
def test_video_path():
    """Path to test video file.

    Set TEST_VIDEO_PATH environment variable to use a custom test video.
    """
    path = os.environ.get("TEST_VIDEO_PATH")
    if path and Path(path).exists():
        return path
    pytest.skip("TEST_VIDEO_PATH not set or file not found")


# =============================================================================
# Stubs
# =============================================================================


class StubService(ExtractionService):
    """Service returning canned output."""

    def __init__(self, key: str, output: Any = None, fail: bool = False, calls: list[str] | None = None):
        super().__init__()
        self.key = key
        self._output = output
        self._fail = fail
        self._calls = calls

    def _extract(self, file_path: str) -> Any:
        if self._calls is not None:
            self._calls.append(self.key)
        if self._fail:
            raise RuntimeError(f"{self.key} exploded")
        return self._output


class StubFile:
    """In-memory FileDescriptor."""

    def __init__(self, extension: str, path: str = "/data/stub", missing: bool = False):
        self.extension = extension
        self.path = path
        self.missing = missing

    def get_property(self, name: str) -> Any:
        if name == "extension":
            return self.extension
        raise KeyError(name)

    def get_for_local_processing(self, writable: bool = True) -> str:
        if self.missing:
            raise FileNotFoundError(self.path)
        return f"{self.path}.{self.extension}"


class CountingRegistry(ServiceRegistry):
    """Registry counting availability probes and instantiations."""

    def __init__(self) -> None:
        super().__init__()
        self.probes = 0
        self.instances: list[str] = []

    def has_service(self, service_type: str, subtype: str) -> bool:
        self.probes += 1
        return super().has_service(service_type, subtype)

    def add(self, key: str, subtypes: list[str], output: Any = None, priority: int = 50, **kwargs) -> None:
        def factory() -> StubService:
            self.instances.append(key)
            return StubService(key, output, **kwargs)

        self.register(SERVICE_TYPE, key, factory, subtypes, priority=priority)


@pytest.fixture
def registry() -> CountingRegistry:
    return CountingRegistry()


@pytest.fixture
def mapping_dir(tmp_path) -> Path:
    path = tmp_path / "mappings"
    path.mkdir()
    return path


def write_mapping(mapping_dir: Path, service_key: str, name: str, rules: Any) -> Path:
    """Write a mapping document; rules may be a list or raw text."""
    directory = mapping_dir / service_key
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.json"
    path.write_text(rules if isinstance(rules, str) else json.dumps(rules))
    return path

from pathlib import Path

import platformdirs
import pytest
import requests

from releasepick.catalog import Asset, Release
from releasepick.config import AppConfig

_NETWORK_BLOCK_MSG = (
    "Network access is blocked during tests. Mock requests.* or Session.request."
)


def _block_network(*_args, **_kwargs):
    """
    Prevent network calls in tests by raising a RuntimeError.

    Raises:
        RuntimeError: with `_NETWORK_BLOCK_MSG` indicating that network access is blocked during tests.
    """
    raise RuntimeError(_NETWORK_BLOCK_MSG)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "user_interface: tests for the interactive session and its view"
    )


@pytest.fixture(autouse=True)
def _isolate_test_environment(tmp_path_factory, monkeypatch):
    """
    Point platformdirs at temporary directories and clear releasepick environment variables.

    File logging is disabled so tests never write into the real user log directory.
    """
    base = tmp_path_factory.mktemp("releasepick")
    cache_dir = base / "cache"
    log_dir = base / "log"
    for path in (cache_dir, log_dir):
        path.mkdir(parents=True, exist_ok=True)

    monkeypatch.setattr(
        platformdirs, "user_cache_dir", lambda *_args, **_kwargs: str(cache_dir)
    )
    monkeypatch.setattr(
        platformdirs, "user_log_dir", lambda *_args, **_kwargs: str(log_dir)
    )

    for name in (
        "GH_ACCESS_TOKEN",
        "GH_OWNER",
        "GH_REPO",
        "RELEASEPICK_ADB_HOST",
        "RELEASEPICK_ADB_PORT",
        "RELEASEPICK_DEVICE_SERIAL",
        "RELEASEPICK_ADB_PATH",
        "RELEASEPICK_SCRATCH_PATH",
        "RELEASEPICK_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("RELEASEPICK_DISABLE_FILE_LOGGING", "1")


def pytest_runtest_setup():
    """Prevent real network requests during tests by replacing HTTP entry points with blocking callables."""
    requests.get = _block_network
    requests.post = _block_network
    requests.Session.request = _block_network


@pytest.fixture
def app_config(tmp_path) -> AppConfig:
    return AppConfig(
        github_token="test-token",  # noqa: S106
        owner="acme",
        repo="app",
        scratch_path=Path(tmp_path) / "scratch" / "app.apk",
    )


@pytest.fixture
def sample_releases():
    """
    Two releases: v1.0 ships an APK next to a checksum file, v1.1 ships no APK.

    Returns:
        list[Release]: [v1.0, v1.1] in registry order.
    """
    return [
        Release(
            tag="v1.0",
            notes="First public build.",
            display_name="Version 1.0",
            assets=(
                Asset(name="checksums.txt", remote_id=10),
                Asset(name="app.apk", remote_id=11, size=4),
            ),
        ),
        Release(
            tag="v1.1",
            notes="Source only.",
            assets=(Asset(name="source.zip", remote_id=20),),
        ),
    ]

"""
Process configuration.

All settings come from the environment and are read exactly once at startup
into an immutable AppConfig that is handed to the registry client and the
deployment pipeline.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

import platformdirs

from releasepick.constants import (
    ACCESS_TOKEN_ENV_VAR,
    ADB_HOST_ENV_VAR,
    ADB_PATH_ENV_VAR,
    ADB_PORT_ENV_VAR,
    DEFAULT_ADB_EXECUTABLE,
    DEFAULT_ADB_HOST,
    DEFAULT_ADB_PORT,
    DEVICE_SERIAL_ENV_VAR,
    OWNER_ENV_VAR,
    REMOTE_APK_PATH,
    REPO_ENV_VAR,
    REQUIRED_ENV_VARS,
    SCRATCH_DIR_NAME,
    SCRATCH_FILE_NAME,
    SCRATCH_PATH_ENV_VAR,
)
from releasepick.exceptions import StartupConfigError
from releasepick.log_utils import logger


def default_scratch_path() -> Path:
    """Return the well-known local path the package is downloaded to."""
    return Path(platformdirs.user_cache_dir(SCRATCH_DIR_NAME)) / SCRATCH_FILE_NAME


@dataclass(frozen=True)
class AppConfig:
    """Immutable runtime configuration."""

    github_token: str
    owner: str
    repo: str
    adb_host: str = DEFAULT_ADB_HOST
    adb_port: int = DEFAULT_ADB_PORT
    device_serial: Optional[str] = None
    adb_executable: str = DEFAULT_ADB_EXECUTABLE
    scratch_path: Path = Path(SCRATCH_FILE_NAME)
    remote_path: str = REMOTE_APK_PATH

    def __repr__(self) -> str:
        # Keep the token out of logs and tracebacks
        return (
            f"AppConfig(owner={self.owner!r}, repo={self.repo!r}, "
            f"adb={self.adb_host}:{self.adb_port}, serial={self.device_serial!r}, "
            f"scratch_path={str(self.scratch_path)!r})"
        )


def _parse_port(raw: str) -> int:
    try:
        port = int(raw)
    except ValueError:
        raise StartupConfigError(
            f"{ADB_PORT_ENV_VAR} must be an integer", details=f"got {raw!r}"
        ) from None
    if not 0 < port < 65536:
        raise StartupConfigError(
            f"{ADB_PORT_ENV_VAR} must be between 1 and 65535", details=f"got {port}"
        )
    return port


def load_config(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """
    Build the AppConfig from environment variables.

    Parameters:
        environ: Mapping to read from; defaults to os.environ.

    Returns:
        AppConfig: The validated configuration.

    Raises:
        StartupConfigError: If any of GH_ACCESS_TOKEN, GH_OWNER or GH_REPO is
            missing or blank, or an optional setting has an invalid value.
    """
    env = os.environ if environ is None else environ

    values = {name: (env.get(name) or "").strip() for name in REQUIRED_ENV_VARS}
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise StartupConfigError(
            "Missing required configuration: " + ", ".join(missing),
            missing=missing,
        )

    host = (env.get(ADB_HOST_ENV_VAR) or "").strip() or DEFAULT_ADB_HOST
    raw_port = (env.get(ADB_PORT_ENV_VAR) or "").strip()
    port = _parse_port(raw_port) if raw_port else DEFAULT_ADB_PORT
    serial = (env.get(DEVICE_SERIAL_ENV_VAR) or "").strip() or None
    adb_executable = (env.get(ADB_PATH_ENV_VAR) or "").strip() or DEFAULT_ADB_EXECUTABLE
    raw_scratch = (env.get(SCRATCH_PATH_ENV_VAR) or "").strip()
    if raw_scratch:
        scratch_path = Path(raw_scratch).expanduser()
    else:
        scratch_path = default_scratch_path()

    config = AppConfig(
        github_token=values[ACCESS_TOKEN_ENV_VAR],
        owner=values[OWNER_ENV_VAR],
        repo=values[REPO_ENV_VAR],
        adb_host=host,
        adb_port=port,
        device_serial=serial,
        adb_executable=adb_executable,
        scratch_path=scratch_path,
    )
    logger.debug("Loaded configuration: %r", config)
    return config

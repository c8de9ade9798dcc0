"""
Device protocol client.

Talks to an Android device through the `adb` command line client, which in
turn talks to the adb server listening on host:port. The three operations
mirror what the deployment pipeline needs: open a connection, push a file and
run a shell command.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from releasepick.constants import (
    ADB_FAILURE_MARKER,
    DEFAULT_ADB_EXECUTABLE,
    DEFAULT_ADB_HOST,
    DEFAULT_ADB_PORT,
)
from releasepick.exceptions import (
    DeviceCommandError,
    DeviceConnectionError,
    DeviceTransferError,
)
from releasepick.log_utils import logger


@dataclass(frozen=True)
class AdbConnection:
    """Handle for a device reachable through the adb server."""

    host: str
    port: int
    serial: Optional[str] = None

    def describe(self) -> str:
        target = self.serial or "default device"
        return f"{target} via {self.host}:{self.port}"


def _output_of(result: subprocess.CompletedProcess) -> str:
    return "\n".join(
        part.strip() for part in (result.stdout, result.stderr) if part and part.strip()
    )


class AdbClient:
    """
    Thin wrapper around the adb executable.

    Each call is one `adb -H host -P port [-s serial] ...` invocation. Nothing is
    retried and no timeout is applied.
    """

    def __init__(
        self,
        host: str = DEFAULT_ADB_HOST,
        port: int = DEFAULT_ADB_PORT,
        serial: Optional[str] = None,
        executable: str = DEFAULT_ADB_EXECUTABLE,
    ) -> None:
        self.host = host
        self.port = port
        self.serial = serial
        self.executable = executable

    def _base_command(self, serial: Optional[str]) -> List[str]:
        command = [self.executable, "-H", self.host, "-P", str(self.port)]
        if serial:
            command += ["-s", serial]
        return command

    def _run(
        self, serial: Optional[str], args: Sequence[str]
    ) -> subprocess.CompletedProcess:
        command = self._base_command(serial) + list(args)
        logger.debug("Running: %s", " ".join(command))
        # adb relays device output verbatim, which is not always valid UTF-8
        return subprocess.run(
            command,
            capture_output=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )

    def connect(self) -> AdbConnection:
        """
        Check that exactly one usable device is reachable and return a handle to it.

        Raises:
            DeviceConnectionError: If adb is missing, the server cannot be
                reached or the device is not in the `device` state.
        """
        try:
            result = self._run(self.serial, ["get-state"])
        except OSError as exc:
            raise DeviceConnectionError(
                f"Could not run {self.executable}", details=str(exc)
            ) from exc

        state = (result.stdout or "").strip()
        if result.returncode != 0 or state != "device":
            raise DeviceConnectionError(
                f"No device available at {self.host}:{self.port}",
                details=_output_of(result) or f"state: {state or 'unknown'}",
            )

        connection = AdbConnection(self.host, self.port, self.serial)
        logger.debug("Connected to %s", connection.describe())
        return connection

    def push(
        self,
        connection: AdbConnection,
        local_path: Union[str, Path],
        remote_path: str,
    ) -> None:
        """
        Copy a local file to the device.

        Raises:
            DeviceTransferError: If adb cannot be run or reports a failure.
        """
        try:
            result = self._run(connection.serial, ["push", str(local_path), remote_path])
        except OSError as exc:
            raise DeviceTransferError(
                f"Could not run {self.executable}", details=str(exc)
            ) from exc

        if result.returncode != 0:
            raise DeviceTransferError(
                f"Could not push {local_path} to {remote_path}",
                details=_output_of(result),
            )
        logger.debug("Pushed %s to %s", local_path, remote_path)

    def run_shell_command(self, connection: AdbConnection, argv: Sequence[str]) -> str:
        """
        Run a command in the device shell and return its output.

        Older adb servers always exit 0 for shell commands, so output carrying the
        package manager's `Failure` marker is treated as a failure as well.

        Raises:
            DeviceCommandError: On a non-zero exit status or a reported failure.
        """
        try:
            result = self._run(connection.serial, ["shell", *argv])
        except OSError as exc:
            raise DeviceCommandError(
                f"Could not run {self.executable}", details=str(exc)
            ) from exc

        output = _output_of(result)
        if result.returncode != 0 or ADB_FAILURE_MARKER in output:
            raise DeviceCommandError(
                f"Command failed on device: {' '.join(argv)}",
                output=output,
                details=output or f"exit status {result.returncode}",
            )
        return output

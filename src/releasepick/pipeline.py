"""
Deployment pipeline.

One run takes a ReleaseItem through four ordered stages:

1. resolve  - the item must have an installable asset
2. download - stream the asset into the local scratch file
3. transfer - push the scratch file to the device
4. install  - run the package manager on the pushed file

The first failing stage stops the run. Nothing is retried and nothing is
rolled back. The run never changes the item's status; the session does that
once the result has been collected.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from releasepick.config import AppConfig
from releasepick.constants import INSTALL_COMMAND, MSG_INSTALL_SUCCEEDED
from releasepick.device import AdbClient, AdbConnection
from releasepick.exceptions import (
    DeviceError,
    DownloadFailed,
    InstallFailed,
    NoInstallableAsset,
    PipelineError,
    RegistryError,
    TransferFailed,
)
from releasepick.github import GithubReleaseClient
from releasepick.list_model import ReleaseItem
from releasepick.log_utils import logger


@dataclass
class PipelineResult:
    """Outcome of one pipeline run."""

    success: bool
    """Whether every stage completed"""

    release_tag: str
    """Tag of the release that was deployed"""

    stage: str
    """Last stage reached: resolve, download, transfer or install"""

    message: str
    """Operator-facing report"""

    bytes_written: Optional[int] = None
    """Size of the downloaded package, when the download stage completed"""

    error: Optional[PipelineError] = None
    """The stage failure, if any"""


class DeploymentPipeline:
    """Runs download, transfer and install for one release item at a time."""

    def __init__(
        self,
        config: AppConfig,
        registry: GithubReleaseClient,
        device: AdbClient,
    ) -> None:
        self.config = config
        self.registry = registry
        self.device = device

    @property
    def scratch_path(self) -> Path:
        return Path(self.config.scratch_path)

    def run(self, item: ReleaseItem) -> PipelineResult:
        """
        Deploy the installable asset of `item` to the device.

        Stage failures are logged and returned, never raised.
        """
        logger.info(f"Starting deployment of {item.tag}")
        bytes_written: Optional[int] = None
        try:
            asset_id = self.resolve(item)
            bytes_written = self.download(item, asset_id)
            connection = self.transfer(item)
            self.install(item, connection)
        except PipelineError as exc:
            logger.error(f"Deployment of {item.tag} failed at {exc.stage}: {exc}")
            return PipelineResult(
                success=False,
                release_tag=item.tag,
                stage=exc.stage,
                message=str(exc),
                bytes_written=bytes_written,
                error=exc,
            )

        message = MSG_INSTALL_SUCCEEDED.format(tag=item.tag)
        logger.info(message)
        return PipelineResult(
            success=True,
            release_tag=item.tag,
            stage=InstallFailed.stage,
            message=message,
            bytes_written=bytes_written,
        )

    def resolve(self, item: ReleaseItem) -> int:
        if item.resolved_asset_id is None:
            raise NoInstallableAsset(
                f"No APK asset found in release {item.tag}", release_tag=item.tag
            )
        return item.resolved_asset_id

    def download(self, item: ReleaseItem, asset_id: int) -> int:
        """Write the asset to the scratch file and return the number of bytes written."""
        target = self.scratch_path
        written = 0
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            # The request is sent only once the scratch file is writable
            with open(target, "wb") as file:
                for chunk in self.registry.fetch_asset_bytes(asset_id):
                    file.write(chunk)
                    written += len(chunk)
        except (RegistryError, OSError) as exc:
            raise DownloadFailed(
                f"Could not download the APK of {item.tag}",
                release_tag=item.tag,
                cause=exc,
            ) from exc

        logger.debug(f"Downloaded asset {asset_id} ({written} bytes) to {target}")
        return written

    def transfer(self, item: ReleaseItem) -> AdbConnection:
        try:
            connection = self.device.connect()
            self.device.push(connection, self.scratch_path, self.config.remote_path)
        except DeviceError as exc:
            raise TransferFailed(
                f"Could not send the APK of {item.tag} to the device",
                release_tag=item.tag,
                cause=exc,
            ) from exc
        return connection

    def install(self, item: ReleaseItem, connection: AdbConnection) -> str:
        argv = [*INSTALL_COMMAND, self.config.remote_path]
        try:
            output = self.device.run_shell_command(connection, argv)
        except DeviceError as exc:
            raise InstallFailed(
                f"Could not install {item.tag} on the device",
                release_tag=item.tag,
                cause=exc,
            ) from exc
        logger.debug(f"Install output for {item.tag}: {output}")
        return output

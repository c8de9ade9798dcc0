"""
Custom exceptions for the releasepick application.

This module defines the domain-specific exceptions raised by the configuration
layer, the two external collaborators (release registry and device) and the
deployment pipeline.
"""

from typing import Optional


class ReleasePickError(Exception):
    """
    Base exception for all releasepick errors.

    All custom exceptions in releasepick inherit from this class so callers can
    catch every application-specific error in one place.
    """

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ReleasePickError):
    """Exception raised when configuration is invalid or missing."""

    pass


class StartupConfigError(ConfigurationError):
    """
    Exception raised when required process configuration is absent or invalid.

    This is fatal: the process aborts before the interactive session starts.

    Attributes:
        missing: Names of the required settings that were not provided.
    """

    def __init__(
        self,
        message: str,
        missing: Optional[list] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.missing = list(missing or [])


# =============================================================================
# Registry Errors
# =============================================================================


class RegistryError(ReleasePickError):
    """
    Exception raised when the release registry cannot be listed or an asset fetched.

    Attributes:
        endpoint: The API endpoint that was accessed.
        status_code: The HTTP status code returned, if any.
    """

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


# =============================================================================
# Device Errors
# =============================================================================


class DeviceError(ReleasePickError):
    """Base exception for failures reported by the device protocol client."""

    pass


class DeviceConnectionError(DeviceError):
    """Exception raised when no connection to the target device can be opened."""

    pass


class DeviceTransferError(DeviceError):
    """Exception raised when pushing a file to the device fails."""

    pass


class DeviceCommandError(DeviceError):
    """
    Exception raised when a remote shell command fails.

    Attributes:
        output: Whatever the command printed before failing.
    """

    def __init__(
        self,
        message: str,
        output: str = "",
        details: Optional[str] = None,
    ) -> None:
        super().__init__(message, details)
        self.output = output


# =============================================================================
# Pipeline Errors
# =============================================================================


class PipelineError(ReleasePickError):
    """
    Base exception for a failed deployment pipeline stage.

    Attributes:
        release_tag: Tag of the release being deployed.
        cause: The collaborator exception that stopped the stage, if any.
    """

    stage = "pipeline"

    def __init__(
        self,
        message: str,
        release_tag: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, str(cause) if cause is not None else None)
        self.release_tag = release_tag
        self.cause = cause


class NoInstallableAsset(PipelineError):
    """Raised when the selected release has no installable package attached."""

    stage = "resolve"


class DownloadFailed(PipelineError):
    """Raised when the package could not be downloaded to the scratch file."""

    stage = "download"


class TransferFailed(PipelineError):
    """Raised when the package could not be pushed to the device."""

    stage = "transfer"


class InstallFailed(PipelineError):
    """Raised when the device rejected or failed the package install."""

    stage = "install"

"""
Tests for the releasepick exception hierarchy.

Covers message formatting on the base error, the attributes carried by the
configuration and registry errors, and the stage labels of pipeline errors.
"""

import pytest

from releasepick.exceptions import (
    ConfigurationError,
    DeviceCommandError,
    DeviceConnectionError,
    DeviceError,
    DeviceTransferError,
    DownloadFailed,
    InstallFailed,
    NoInstallableAsset,
    PipelineError,
    RegistryError,
    ReleasePickError,
    StartupConfigError,
    TransferFailed,
)


class TestReleasePickError:
    def test_message_only(self):
        error = ReleasePickError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.details is None

    def test_message_with_details(self):
        error = ReleasePickError("Something went wrong", "more context")
        assert str(error) == "Something went wrong - more context"


class TestConfigurationErrors:
    def test_startup_config_error_records_missing_names(self):
        error = StartupConfigError("Missing", missing=("GH_OWNER",))

        assert isinstance(error, ConfigurationError)
        assert error.missing == ["GH_OWNER"]

    def test_startup_config_error_defaults(self):
        assert StartupConfigError("bad").missing == []


def test_registry_error_attributes():
    error = RegistryError(
        "Failed to list releases",
        endpoint="https://api.github.com/repos/a/b/releases",
        status_code=404,
        details="not found",
    )

    assert error.status_code == 404
    assert error.endpoint.endswith("/releases")
    assert str(error) == "Failed to list releases - not found"


@pytest.mark.parametrize(
    "error_cls", [DeviceConnectionError, DeviceTransferError, DeviceCommandError]
)
def test_device_errors_share_base(error_cls):
    assert issubclass(error_cls, DeviceError)
    assert issubclass(error_cls, ReleasePickError)


def test_device_command_error_keeps_output():
    error = DeviceCommandError("install failed", output="Failure [INSTALL_FAILED]")
    assert error.output == "Failure [INSTALL_FAILED]"


@pytest.mark.parametrize(
    "error_cls, stage",
    [
        (NoInstallableAsset, "resolve"),
        (DownloadFailed, "download"),
        (TransferFailed, "transfer"),
        (InstallFailed, "install"),
    ],
)
def test_pipeline_error_stages(error_cls, stage):
    cause = DeviceError("boom")
    error = error_cls("stage failed", release_tag="v1.0", cause=cause)

    assert isinstance(error, PipelineError)
    assert error.stage == stage
    assert error.release_tag == "v1.0"
    assert error.cause is cause
    assert str(error) == "stage failed - boom"


def test_pipeline_error_without_cause():
    error = NoInstallableAsset("No APK asset found in release v1.1", release_tag="v1.1")
    assert error.details is None
    assert str(error) == "No APK asset found in release v1.1"

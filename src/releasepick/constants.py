"""
Constants and configuration values for releasepick.

This module contains all hardcoded values, URLs, paths, environment variable
names and other constants used throughout the application.
"""

# GitHub API
GITHUB_API_BASE = "https://api.github.com/repos"
GITHUB_RELEASES_URL_TEMPLATE = GITHUB_API_BASE + "/{owner}/{repo}/releases"
GITHUB_ASSET_URL_TEMPLATE = GITHUB_API_BASE + "/{owner}/{repo}/releases/assets/{asset_id}"
GITHUB_API_VERSION = "2022-11-28"
GITHUB_JSON_ACCEPT = "application/vnd.github+json"
GITHUB_BINARY_ACCEPT = "application/octet-stream"
GITHUB_MAX_PER_PAGE = 100

# Network timeouts (in seconds). Only the startup listing call is bounded.
GITHUB_API_TIMEOUT = 10
DEFAULT_CHUNK_SIZE = 8192

# File extensions
APK_EXTENSION = ".apk"

# Local scratch file for the downloaded package
SCRATCH_DIR_NAME = "releasepick"
SCRATCH_FILE_NAME = "app.apk"

# Device (adb server) defaults
DEFAULT_ADB_HOST = "127.0.0.1"
DEFAULT_ADB_PORT = 5037
DEFAULT_ADB_EXECUTABLE = "adb"
REMOTE_APK_PATH = "/data/local/tmp/app.apk"
INSTALL_COMMAND = ("pm", "install", "-r")
ADB_FAILURE_MARKER = "Failure"

# Environment variable names
ACCESS_TOKEN_ENV_VAR = "GH_ACCESS_TOKEN"
OWNER_ENV_VAR = "GH_OWNER"
REPO_ENV_VAR = "GH_REPO"
ADB_HOST_ENV_VAR = "RELEASEPICK_ADB_HOST"
ADB_PORT_ENV_VAR = "RELEASEPICK_ADB_PORT"
DEVICE_SERIAL_ENV_VAR = "RELEASEPICK_DEVICE_SERIAL"
ADB_PATH_ENV_VAR = "RELEASEPICK_ADB_PATH"
SCRATCH_PATH_ENV_VAR = "RELEASEPICK_SCRATCH_PATH"
LOG_LEVEL_ENV_VAR = "RELEASEPICK_LOG_LEVEL"
DISABLE_FILE_LOGGING_ENV_VAR = "RELEASEPICK_DISABLE_FILE_LOGGING"

REQUIRED_ENV_VARS = (ACCESS_TOKEN_ENV_VAR, OWNER_ENV_VAR, REPO_ENV_VAR)

# Logging configuration
LOGGER_NAME = "releasepick"
LOG_FILE_NAME = "releasepick.log"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
INFO_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"
DEBUG_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s: %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024  # 10 MB
LOG_FILE_BACKUP_COUNT = 5

# Interactive session
INPUT_POLL_INTERVAL_MS = 100
EMPTY_DETAIL_TEXT = "Select a release on the left side to see its description here..."
NO_RELEASES_TEXT = "No releases found."
HELP_TEXT = "j/k move  h unselect  l/Enter install  g/G top/bottom  q quit"

# Operator-facing messages
MSG_READY = "Ready."
MSG_INSTALL_STARTED = "Installing {tag}..."
MSG_INSTALL_SUCCEEDED = "Installed {tag} on the device."
MSG_ACTIVATION_REJECTED = "An install is already running for {tag}."
MSG_QUIT_REJECTED = "An install is running for {tag}; quit when it has finished."

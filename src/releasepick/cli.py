# src/releasepick/cli.py

import argparse
import curses
import sys
from typing import List, Optional

from releasepick import log_utils
from releasepick.catalog import Catalog
from releasepick.config import AppConfig, load_config
from releasepick.device import AdbClient
from releasepick.exceptions import RegistryError, StartupConfigError
from releasepick.github import GithubReleaseClient
from releasepick.list_model import ReleaseListModel
from releasepick.pipeline import DeploymentPipeline
from releasepick.session import InstallerSession
from releasepick.tui import CursesView


def build_pipeline(
    config: AppConfig, registry: GithubReleaseClient
) -> DeploymentPipeline:
    device = AdbClient(
        host=config.adb_host,
        port=config.adb_port,
        serial=config.device_serial,
        executable=config.adb_executable,
    )
    return DeploymentPipeline(config, registry, device)


def run_session(catalog: Catalog, pipeline: DeploymentPipeline) -> int:
    """
    Run the full-screen session until the operator quits.

    Console logging is silenced while curses owns the terminal; the rotating
    log file keeps recording.

    Returns:
        int: The session's exit code.
    """
    model = ReleaseListModel.from_releases(catalog)

    def _curses_main(stdscr) -> int:
        return InstallerSession(model, pipeline, CursesView(stdscr)).run()

    with log_utils.console_logging_suspended():
        return curses.wrapper(_curses_main)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point for the releasepick command-line interface.

    Reads configuration from the environment, lists the repository's releases
    and opens the interactive session. There are no subcommands or options.

    Returns:
        int: 0 after a clean quit, 1 when startup fails.
    """
    # Logging is automatically initialized by importing log_utils
    parser = argparse.ArgumentParser(
        description="releasepick - browse GitHub releases and install their APK on a device"
    )
    parser.parse_args(argv)

    try:
        config = load_config()
    except StartupConfigError as error:
        log_utils.logger.error(f"{error}")
        return 1

    log_file = log_utils.add_file_logging()
    if log_file:
        log_utils.logger.info(f"Logging to {log_file}")

    registry = GithubReleaseClient(config.owner, config.repo, config.github_token)
    try:
        catalog = registry.list_releases()
    except RegistryError as error:
        log_utils.logger.error(f"Could not fetch releases: {error}")
        return 1

    pipeline = build_pipeline(config, registry)
    try:
        return run_session(catalog, pipeline)
    except curses.error as error:
        log_utils.logger.error(f"Could not start the terminal session: {error}")
        return 1
    except KeyboardInterrupt:
        log_utils.logger.info("Interrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())

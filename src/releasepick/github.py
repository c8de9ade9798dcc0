"""
GitHub release registry client.

Lists the releases of one repository and streams the bytes of a release
asset. Both calls raise RegistryError on any transport, HTTP or payload
problem.
"""

import importlib.metadata
from typing import Any, Dict, Iterator, List, Optional

import requests

from releasepick.catalog import Asset, Catalog, Release
from releasepick.constants import (
    DEFAULT_CHUNK_SIZE,
    GITHUB_API_TIMEOUT,
    GITHUB_API_VERSION,
    GITHUB_ASSET_URL_TEMPLATE,
    GITHUB_BINARY_ACCEPT,
    GITHUB_JSON_ACCEPT,
    GITHUB_MAX_PER_PAGE,
    GITHUB_RELEASES_URL_TEMPLATE,
)
from releasepick.exceptions import RegistryError
from releasepick.log_utils import logger

# Cache for the User-Agent string to avoid repeated metadata lookups
_USER_AGENT_CACHE: Optional[str] = None


def get_user_agent() -> str:
    """
    Get the User-Agent string used for HTTP requests.

    Returns:
        The string `releasepick/{version}`, where `{version}` is the installed
        package version or `unknown` if it cannot be determined.
    """
    global _USER_AGENT_CACHE

    if _USER_AGENT_CACHE is None:
        try:
            app_version = importlib.metadata.version("releasepick")
        except importlib.metadata.PackageNotFoundError:
            app_version = "unknown"

        _USER_AGENT_CACHE = f"releasepick/{app_version}"

    return _USER_AGENT_CACHE


def _describe_http_error(response: Optional[requests.Response]) -> str:
    if response is None:
        return "GitHub API request failed"
    status = response.status_code
    if status == 401:
        return "GitHub token was rejected (401 Unauthorized)"
    if status == 403:
        if str(response.headers.get("X-RateLimit-Remaining", "")) == "0":
            return "GitHub API rate limit exceeded"
        return "GitHub API access forbidden (403)"
    if status == 404:
        return "Repository or asset not found (404); check owner, repo and token scope"
    return f"GitHub API returned HTTP {status}"


def parse_release(release_data: Dict[str, Any]) -> Release:
    """
    Convert one raw GitHub release payload into a Release.

    Raises:
        KeyError, TypeError, ValueError: If required fields are missing or malformed.
    """
    tag = release_data["tag_name"]
    if not isinstance(tag, str) or not tag:
        raise ValueError("release has no tag_name")

    assets: List[Asset] = []
    for asset_data in release_data.get("assets") or []:
        assets.append(
            Asset(
                name=str(asset_data["name"]),
                remote_id=int(asset_data["id"]),
                download_ref=str(asset_data.get("browser_download_url") or ""),
                size=int(asset_data.get("size") or 0),
            )
        )

    return Release(
        tag=tag,
        notes=release_data.get("body") or "",
        display_name=release_data.get("name") or None,
        assets=tuple(assets),
    )


class GithubReleaseClient:
    """
    Release registry backed by the GitHub REST API.

    Usage:
        client = GithubReleaseClient(owner="acme", repo="app", token="...")
        catalog = client.list_releases()
        for chunk in client.fetch_asset_bytes(catalog[0].assets[0].remote_id):
            ...
    """

    def __init__(
        self,
        owner: str,
        repo: str,
        token: str,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self._token = token
        self._session = session or requests.Session()

    @property
    def releases_url(self) -> str:
        return GITHUB_RELEASES_URL_TEMPLATE.format(owner=self.owner, repo=self.repo)

    def asset_url(self, asset_id: int) -> str:
        return GITHUB_ASSET_URL_TEMPLATE.format(
            owner=self.owner, repo=self.repo, asset_id=asset_id
        )

    def _headers(self, accept: str) -> Dict[str, str]:
        return {
            "Accept": accept,
            "Authorization": f"Bearer {self._token}",
            "User-Agent": get_user_agent(),
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }

    def list_releases(self) -> Catalog:
        """
        Fetch the repository's releases, newest first as GitHub returns them.

        Malformed release entries are skipped with a warning.

        Returns:
            Catalog: Immutable snapshot of the parsed releases.

        Raises:
            RegistryError: On network failure, HTTP error or a non-list payload.
        """
        url = self.releases_url
        logger.debug(f"Making GitHub API request: {url}")
        try:
            response = self._session.get(
                url,
                headers=self._headers(GITHUB_JSON_ACCEPT),
                params={"per_page": GITHUB_MAX_PER_PAGE},
                timeout=GITHUB_API_TIMEOUT,
            )
            response.raise_for_status()
            releases_data = response.json()
        except requests.HTTPError as exc:
            raise RegistryError(
                _describe_http_error(exc.response),
                endpoint=url,
                status_code=getattr(exc.response, "status_code", None),
            ) from exc
        except ValueError as exc:
            raise RegistryError(
                "GitHub API returned invalid JSON", endpoint=url, details=str(exc)
            ) from exc
        except requests.RequestException as exc:
            raise RegistryError(
                "Could not reach the GitHub API", endpoint=url, details=str(exc)
            ) from exc

        if not isinstance(releases_data, list):
            raise RegistryError(
                "Invalid releases data received from GitHub API",
                endpoint=url,
                details=f"expected list, got {type(releases_data).__name__}",
            )

        releases: List[Release] = []
        for release_data in releases_data:
            if not isinstance(release_data, dict):
                logger.warning(
                    "Skipping malformed release entry from %s: expected dict, got %s",
                    url,
                    type(release_data).__name__,
                )
                continue
            try:
                releases.append(parse_release(release_data))
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping malformed release entry from %s: %s", url, exc)

        logger.info(f"Fetched {len(releases)} releases from {self.owner}/{self.repo}")
        return Catalog(releases)

    def fetch_asset_bytes(self, asset_id: int) -> Iterator[bytes]:
        """
        Stream the content of a release asset.

        The request is sent immediately; the returned iterator yields the body in
        chunks. No timeout is applied, a stalled transfer blocks the caller.

        Raises:
            RegistryError: On network failure or HTTP error, either when the
                request is sent or while the body is being read.
        """
        url = self.asset_url(asset_id)
        logger.debug(f"Requesting asset {asset_id}: {url}")
        try:
            response = self._session.get(
                url, headers=self._headers(GITHUB_BINARY_ACCEPT), stream=True
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise RegistryError(
                _describe_http_error(exc.response),
                endpoint=url,
                status_code=getattr(exc.response, "status_code", None),
            ) from exc
        except requests.RequestException as exc:
            raise RegistryError(
                "Could not reach the GitHub API", endpoint=url, details=str(exc)
            ) from exc

        return self._iter_body(response, url)

    @staticmethod
    def _iter_body(response: requests.Response, url: str) -> Iterator[bytes]:
        try:
            for chunk in response.iter_content(chunk_size=DEFAULT_CHUNK_SIZE):
                if chunk:
                    yield chunk
        except requests.RequestException as exc:
            raise RegistryError(
                "Asset download interrupted", endpoint=url, details=str(exc)
            ) from exc
        finally:
            response.close()

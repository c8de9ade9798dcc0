import pytest
import requests

from releasepick import github
from releasepick.exceptions import RegistryError
from releasepick.github import GithubReleaseClient, parse_release


@pytest.fixture
def mock_session(mocker):
    return mocker.MagicMock()


@pytest.fixture
def client(mock_session):
    return GithubReleaseClient("acme", "app", "secret-token", session=mock_session)


@pytest.fixture
def releases_payload():
    """
    Raw GitHub API releases payload with one APK release, one release without assets
    and one malformed entry.
    """
    return [
        {
            "tag_name": "v2.0",
            "name": "Two",
            "body": "Notes for two",
            "assets": [
                {
                    "id": 7,
                    "name": "app-release.APK",
                    "browser_download_url": "https://example.invalid/app.apk",
                    "size": 2048,
                }
            ],
        },
        {"tag_name": "v1.9", "name": None, "body": None, "assets": []},
        {"name": "missing tag"},
        "not-a-dict",
    ]


def _response(mocker, payload=None, status_code=200, headers=None):
    response = mocker.MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    return response


def test_parse_release_reads_assets():
    release = parse_release(
        {
            "tag_name": "v1",
            "body": "text",
            "assets": [{"id": "3", "name": "a.apk"}],
        }
    )

    assert release.tag == "v1"
    assert release.notes == "text"
    assert release.display_name is None
    assert release.assets[0].remote_id == 3
    assert release.installable_asset().name == "a.apk"


def test_list_releases_parses_and_skips_malformed(
    mocker, client, mock_session, releases_payload
):
    mock_session.get.return_value = _response(mocker, releases_payload)

    catalog = client.list_releases()

    assert [release.tag for release in catalog] == ["v2.0", "v1.9"]
    assert catalog[0].display_name == "Two"
    assert catalog[0].installable_asset().remote_id == 7
    assert catalog[1].notes == ""
    assert catalog[1].installable_asset() is None


def test_list_releases_sends_auth_headers(mocker, client, mock_session):
    mock_session.get.return_value = _response(mocker, [])

    client.list_releases()

    args, kwargs = mock_session.get.call_args
    assert args[0] == "https://api.github.com/repos/acme/app/releases"
    assert kwargs["headers"]["Authorization"] == "Bearer secret-token"
    assert kwargs["headers"]["User-Agent"].startswith("releasepick/")
    assert kwargs["headers"]["X-GitHub-Api-Version"] == "2022-11-28"
    assert kwargs["params"] == {"per_page": 100}


@pytest.mark.parametrize(
    "status_code, headers, fragment",
    [
        (401, {}, "401"),
        (403, {"X-RateLimit-Remaining": "0"}, "rate limit"),
        (403, {}, "forbidden"),
        (404, {}, "not found"),
        (500, {}, "HTTP 500"),
    ],
)
def test_list_releases_http_errors(
    mocker, client, mock_session, status_code, headers, fragment
):
    mock_session.get.return_value = _response(
        mocker, status_code=status_code, headers=headers
    )

    with pytest.raises(RegistryError) as excinfo:
        client.list_releases()

    assert fragment in str(excinfo.value)
    assert excinfo.value.status_code == status_code
    assert excinfo.value.endpoint.endswith("/acme/app/releases")


def test_list_releases_network_error(client, mock_session):
    mock_session.get.side_effect = requests.ConnectionError("dns failure")

    with pytest.raises(RegistryError, match="Could not reach"):
        client.list_releases()


def test_list_releases_invalid_json(mocker, client, mock_session):
    response = _response(mocker)
    response.json.side_effect = ValueError("Expecting value")
    mock_session.get.return_value = response

    with pytest.raises(RegistryError, match="invalid JSON"):
        client.list_releases()


def test_list_releases_non_list_payload(mocker, client, mock_session):
    mock_session.get.return_value = _response(mocker, {"message": "Not Found"})

    with pytest.raises(RegistryError, match="Invalid releases data"):
        client.list_releases()


def test_fetch_asset_bytes_streams_chunks(mocker, client, mock_session):
    response = _response(mocker)
    response.iter_content.return_value = iter([b"ab", b"", b"cd"])
    mock_session.get.return_value = response

    chunks = list(client.fetch_asset_bytes(42))

    assert chunks == [b"ab", b"cd"]
    args, kwargs = mock_session.get.call_args
    assert args[0] == "https://api.github.com/repos/acme/app/releases/assets/42"
    assert kwargs["headers"]["Accept"] == "application/octet-stream"
    assert kwargs["stream"] is True
    assert "timeout" not in kwargs
    response.close.assert_called_once()


def test_fetch_asset_bytes_http_error(mocker, client, mock_session):
    mock_session.get.return_value = _response(mocker, status_code=404)

    with pytest.raises(RegistryError) as excinfo:
        client.fetch_asset_bytes(42)

    assert excinfo.value.status_code == 404


def test_fetch_asset_bytes_interrupted_stream(mocker, client, mock_session):
    def _chunks(**_kwargs):
        yield b"ab"
        raise requests.ConnectionError("reset by peer")

    response = _response(mocker)
    response.iter_content.side_effect = _chunks
    mock_session.get.return_value = response

    stream = client.fetch_asset_bytes(42)
    assert next(stream) == b"ab"
    with pytest.raises(RegistryError, match="interrupted"):
        next(stream)
    response.close.assert_called_once()


def test_user_agent_falls_back_to_unknown(mocker, monkeypatch):
    monkeypatch.setattr(github, "_USER_AGENT_CACHE", None)
    mocker.patch(
        "releasepick.github.importlib.metadata.version",
        side_effect=github.importlib.metadata.PackageNotFoundError,
    )

    assert github.get_user_agent() == "releasepick/unknown"

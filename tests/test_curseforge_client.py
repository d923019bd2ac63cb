"""Tests for the CurseForge API client."""

from unittest.mock import Mock

import pytest
import requests

from wow_renovate_datasource import __version__
from wow_renovate_datasource.curseforge_client import CurseForgeClient
from wow_renovate_datasource.errors import UpstreamFetchError


def _response(body=None, status_code=200, json_error=None):
    response = Mock()
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(response=response)
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return Mock()


@pytest.fixture
def client(session):
    return CurseForgeClient("test-api-key", session=session)


class TestCurseForgeClientInit:
    def test_defaults(self, client):
        assert client.api_key == "test-api-key"
        assert client.base_url == "https://api.curseforge.com/v1"
        assert client.wow_game_id == 1
        assert client.user_agent == f"wow-renovate-datasource/{__version__}"


class TestFetchVersionGroups:
    def test_returns_data_list(self, client, session):
        groups = [{"type": 517, "versions": ["11.2.0"]}]
        session.get.return_value = _response({"data": groups})

        assert client.fetch_version_groups() == groups

        session.get.assert_called_once_with(
            "https://api.curseforge.com/v1/games/1/versions",
            headers={
                "Accept": "application/json",
                "x-api-key": "test-api-key",
                "User-Agent": client.user_agent,
            },
            params=None,
            timeout=30,
        )

    def test_http_error(self, client, session):
        session.get.return_value = _response(status_code=403)

        with pytest.raises(UpstreamFetchError, match="HTTP 403"):
            client.fetch_version_groups()

    def test_connection_error(self, client, session):
        session.get.side_effect = requests.ConnectionError("boom")

        with pytest.raises(UpstreamFetchError, match="Failed to reach CurseForge"):
            client.fetch_version_groups()

    def test_connection_error_does_not_expose_api_key(self, client, session):
        session.get.side_effect = requests.ConnectionError(
            "Max retries exceeded with url: /api/game/versions?token=test-api-key"
        )

        with pytest.raises(UpstreamFetchError) as excinfo:
            client.fetch_version_ids()

        assert "test-api-key" not in str(excinfo.value)
        assert "token=***" in str(excinfo.value)
        assert "ConnectionError" in str(excinfo.value)

    def test_url_encoded_api_key_is_hidden(self, session):
        client = CurseForgeClient("key with/slash", session=session)
        session.get.side_effect = requests.ConnectionError("url: /api/game/versions?token=key+with%2Fslash")

        with pytest.raises(UpstreamFetchError) as excinfo:
            client.fetch_version_ids()

        assert "key+with%2Fslash" not in str(excinfo.value)

    def test_invalid_json(self, client, session):
        session.get.return_value = _response(json_error=ValueError("bad json"))

        with pytest.raises(UpstreamFetchError, match="Invalid JSON"):
            client.fetch_version_groups()

    def test_missing_data_key(self, client, session):
        session.get.return_value = _response({"error": "nope"})

        with pytest.raises(UpstreamFetchError):
            client.fetch_version_groups()


class TestGetAllWowVersions:
    def test_flattens_groups(self, client, session, catalog):
        session.get.return_value = _response({"data": [
            {"type": 67408, "versions": ["1.15.3", "1.15.2"]},
            {"type": 517, "versions": ["11.2.0"]},
        ]})

        versions = client.get_all_wow_versions(catalog)

        assert len(versions) == 3
        assert versions[0] == {
            "name": "1.15.3",
            "type": 67408,
            "variant": "classic_era",
            "versionTypeName": "WoW Classic Era",
            "versionTypeSlug": "wow-classic-era",
        }
        assert versions[2]["variant"] == "retail"

    def test_keeps_unknown_types_as_unknown(self, client, session, catalog):
        session.get.return_value = _response({"data": [{"type": 12345, "versions": ["9.9.9"]}]})

        assert client.get_all_wow_versions(catalog) == [
            {"name": "9.9.9", "type": 12345, "variant": "unknown"},
        ]

    def test_skips_groups_without_versions_list(self, client, session, catalog):
        session.get.return_value = _response({"data": [
            {"type": 517},
            {"type": 517, "versions": None},
            {"type": 517, "versions": ["11.2.0"]},
        ]})

        versions = client.get_all_wow_versions(catalog)

        assert [version["name"] for version in versions] == ["11.2.0"]

    def test_empty_groups(self, client, session, catalog):
        session.get.return_value = _response({"data": []})
        assert client.get_all_wow_versions(catalog) == []


class TestFetchVersionIds:
    def test_returns_list_with_short_timeout(self, client, session):
        ids = [{"id": 13433, "name": "11.2.0", "gameVersionTypeID": 517}]
        session.get.return_value = _response(ids)

        assert client.fetch_version_ids() == ids

        session.get.assert_called_once_with(
            "https://wow.curseforge.com/api/game/versions",
            headers={"Accept": "application/json", "User-Agent": client.user_agent},
            params={"token": "test-api-key"},
            timeout=5,
        )

    def test_timeout(self, client, session):
        session.get.side_effect = requests.Timeout("timed out")

        with pytest.raises(UpstreamFetchError):
            client.fetch_version_ids()

    def test_non_list_body(self, client, session):
        session.get.return_value = _response({"data": []})

        with pytest.raises(UpstreamFetchError, match="expected a list"):
            client.fetch_version_ids()

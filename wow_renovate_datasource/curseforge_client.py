"""
CurseForge API client for querying WoW game versions.

Two endpoints are used:
    - Core API /games/1/versions: version names grouped by version type
    - Upload API /game/versions: game version ids used when uploading files

Both require a CurseForge API key.
"""

import sys
from urllib.parse import quote, quote_plus

import requests

from . import __title__, __version__
from .config import DEFAULT_API_URL, DEFAULT_UPLOAD_API_URL
from .errors import UpstreamFetchError


WOW_GAME_ID = 1

CORE_API_TIMEOUT = 30
UPLOAD_API_TIMEOUT = 5


class CurseForgeClient:
    """Thin authenticated GET wrapper around the CurseForge APIs."""

    def __init__(self, api_key, base_url=DEFAULT_API_URL, upload_url=DEFAULT_UPLOAD_API_URL, session=None):
        self.api_key = api_key
        self.base_url = base_url
        self.upload_url = upload_url
        self.wow_game_id = WOW_GAME_ID
        self.user_agent = f"{__title__}/{__version__}"
        self.session = session or requests.Session()

    def _redact(self, error):
        # Upload API errors carry the request URL, which holds the key as ?token=
        message = str(error)
        if self.api_key:
            for secret in (self.api_key, quote_plus(self.api_key), quote(self.api_key, safe="")):
                message = message.replace(secret, "***")
        return message

    def _get_json(self, url, description, headers=None, params=None, timeout=CORE_API_TIMEOUT):
        print(f"[curseforge] GET {url}", file=sys.stderr)

        try:
            response = self.session.get(url, headers=headers, params=params, timeout=timeout)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise UpstreamFetchError(f"HTTP {status} when fetching {description}") from e
        except requests.RequestException as e:
            raise UpstreamFetchError(
                f"Failed to reach CurseForge when fetching {description}: {type(e).__name__}: {self._redact(e)}"
            ) from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamFetchError(f"Invalid JSON in {description} response: {e}") from e

    def fetch_version_groups(self):
        """
        Fetch game version groups from the Core API.

        Returns:
            List of {"type": <gameVersionTypeId>, "versions": [<name>, ...]}

        Raises:
            UpstreamFetchError: on network, HTTP or decoding errors
        """
        url = f"{self.base_url}/games/{self.wow_game_id}/versions"
        headers = {
            "Accept": "application/json",
            "x-api-key": self.api_key,
            "User-Agent": self.user_agent,
        }

        body = self._get_json(url, "game versions", headers=headers)

        if not isinstance(body, dict) or not isinstance(body.get("data"), list):
            raise UpstreamFetchError("Unexpected game versions response: missing 'data' list")

        return body["data"]

    def fetch_version_ids(self):
        """
        Fetch game version ids from the Upload API.

        Returns:
            List of {"id": ..., "name": ..., "gameVersionTypeID": ...}

        Raises:
            UpstreamFetchError: on network, HTTP, timeout or decoding errors
        """
        url = f"{self.upload_url}/game/versions"
        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

        body = self._get_json(
            url,
            "game version IDs",
            headers=headers,
            params={"token": self.api_key},
            timeout=UPLOAD_API_TIMEOUT,
        )

        if not isinstance(body, list):
            raise UpstreamFetchError("Unexpected game version IDs response: expected a list")

        return body

    def get_all_wow_versions(self, catalog):
        """
        Fetch all WoW versions and flatten them into one record per name.

        Groups whose type is not in the catalog are kept with the
        "unknown" variant. Groups without a versions list are skipped.

        Returns:
            List of {"name", "type", "variant", "versionTypeName", "versionTypeSlug"}
            (the last two only for known types)
        """
        all_versions = []

        for group in self.fetch_version_groups():
            version_names = group.get("versions") if isinstance(group, dict) else None
            if not isinstance(version_names, list):
                continue

            type_id = group.get("type")
            version_type = catalog.lookup(type_id)

            for version_name in version_names:
                record = {
                    "name": version_name,
                    "type": type_id,
                    "variant": catalog.variant_for(type_id),
                }
                if version_type:
                    record["versionTypeName"] = version_type.name
                    record["versionTypeSlug"] = version_type.slug
                all_versions.append(record)

        return all_versions

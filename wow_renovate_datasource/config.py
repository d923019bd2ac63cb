"""
Runtime configuration from the environment.

A .env file in the working directory is loaded first; variables already
set in the environment take precedence over it.
"""

import os

from dotenv import find_dotenv, load_dotenv

from .errors import ConfigurationError


API_KEY_ENV = "CURSEFORGE_API_KEY"

DEFAULT_API_URL = "https://api.curseforge.com/v1"
DEFAULT_UPLOAD_API_URL = "https://wow.curseforge.com/api"

VERSIONS_FILE = "versions.json"
GAME_VERSIONS_FILE = "game-versions.json"
GAME_VERSIONS_MAPPING_FILE = "game-versions-mapping.json"


def load_environment():
    """Load a local .env file into os.environ, if one exists."""
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path, override=False)


def get_api_key():
    """
    Return the CurseForge API key.

    Raises:
        ConfigurationError: if CURSEFORGE_API_KEY is unset or empty
    """
    api_key = os.environ.get(API_KEY_ENV, "").strip()
    if not api_key:
        raise ConfigurationError(
            f"{API_KEY_ENV} environment variable is not set. "
            "Please create a .env file with your CurseForge API key"
        )
    return api_key


def get_api_url():
    return os.environ.get("CURSEFORGE_API_URL", DEFAULT_API_URL).rstrip("/")


def get_upload_api_url():
    return os.environ.get("CURSEFORGE_UPLOAD_API_URL", DEFAULT_UPLOAD_API_URL).rstrip("/")

"""Errors that abort a datasource update run."""


class DatasourceError(Exception):
    """Base class for fatal errors. The CLI exits with status 1 on these."""


class ConfigurationError(DatasourceError):
    """Required configuration (e.g. the CurseForge API key) is missing."""


class UpstreamFetchError(DatasourceError):
    """The CurseForge API request failed or returned an unusable body."""


class EmptyResultError(DatasourceError):
    """The API answered but yielded no usable records."""

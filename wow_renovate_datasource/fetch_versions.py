#!/usr/bin/env python3
"""
Fetch WoW interface versions from CurseForge and save them to versions.json.

versions.json is rewritten on every run. lastUpdated only moves forward
when the list of versions actually changed.
"""

import argparse
import sys

from .config import VERSIONS_FILE, get_api_key, get_api_url, load_environment
from .curseforge_client import CurseForgeClient
from .datasource import (
    UNCHANGED_REWRITE,
    DatasourcePublisher,
    canonical_json,
    group_by_variant,
    iso_timestamp,
    utc_now,
)
from .errors import DatasourceError, EmptyResultError
from .version_parser import parse_versions
from .version_types import VARIANTS, WOW_VERSION_TYPES


TAG = "fetch-versions"

VARIANT_LABELS = {
    "classic_era": "Classic Era",
    "tbc_classic": "TBC Classic",
    "wotlk_classic": "WotLK Classic",
    "cata_classic": "Cataclysm Classic",
    "mop_classic": "MoP Classic",
    "retail": "Retail",
}


def group_versions_by_variant(parsed_versions):
    """Group parsed versions by variant, newest interface version first."""
    return group_by_variant(parsed_versions, lambda version: int(version["version"]))


def create_output_document(parsed_versions, versions_by_variant, catalog, now):
    summary = {variant: len(versions_by_variant.get(variant, [])) for variant in VARIANTS}

    return {
        "lastUpdated": iso_timestamp(now),
        "versions": parsed_versions,
        "versionsByVariant": versions_by_variant,
        "versionTypes": catalog.to_dict(),
        "summary": summary,
    }


def versions_changed(previous, candidate):
    """Compare the versions arrays only; other fields are derived from them."""
    if not previous:
        return True

    return canonical_json(previous.get("versions")) != canonical_json(candidate.get("versions"))


def print_version_summary(document):
    print("\nSummary:")
    for variant in VARIANTS:
        print(f"- {VARIANT_LABELS[variant]} versions: {document['summary'][variant]}")

    print("\nLatest versions:")
    for variant, versions in document["versionsByVariant"].items():
        if versions:
            print(f"- {variant}: {versions[0]['name']} (Interface: {versions[0]['version']})")


def update_versions(client, catalog, output_path, now=None):
    """
    Fetch, parse and publish WoW interface versions.

    Args:
        client: CurseForgeClient (or anything with get_all_wow_versions)
        catalog: VersionTypeCatalog used to resolve variants
        output_path: where versions.json lives
        now: run timestamp (defaults to the current UTC time)

    Returns:
        PublishResult

    Raises:
        UpstreamFetchError: if the API request fails
        EmptyResultError: if no version could be parsed
    """
    now = now or utc_now()

    print(f"[{TAG}] Fetching WoW versions from CurseForge...")
    wow_versions = client.get_all_wow_versions(catalog)
    print(f"[{TAG}] Found {len(wow_versions)} WoW versions")

    print(f"[{TAG}] Parsing interface versions...")
    parsed_versions = parse_versions(wow_versions)
    print(f"[{TAG}] Parsed {len(parsed_versions)} valid WoW versions")

    if not parsed_versions:
        raise EmptyResultError("No valid WoW versions found in the API response")

    versions_by_variant = group_versions_by_variant(parsed_versions)
    document = create_output_document(parsed_versions, versions_by_variant, catalog, now)

    publisher = DatasourcePublisher(output_path, versions_changed, UNCHANGED_REWRITE, tag=TAG)
    return publisher.publish(document)


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Fetch WoW interface versions from CurseForge into versions.json"
    )
    parser.add_argument(
        "--output",
        default=VERSIONS_FILE,
        help=f"Path of the versions file (default: {VERSIONS_FILE})"
    )

    args = parser.parse_args(argv)

    load_environment()

    try:
        api_key = get_api_key()
        client = CurseForgeClient(api_key, base_url=get_api_url())
        result = update_versions(client, WOW_VERSION_TYPES, args.output)

    except DatasourceError as e:
        print(f"::error ::Error fetching versions: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"::error ::Unexpected error fetching versions: {e!r}", file=sys.stderr)
        return 1

    print_version_summary(result.document)
    return 0


if __name__ == "__main__":
    sys.exit(main())

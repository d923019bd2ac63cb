#!/usr/bin/env python3
"""
Fetch CurseForge game version IDs and save them as a Renovate datasource.

Writes game-versions.json ({"lastUpdated", "releases"}) and, next to it,
game-versions-mapping.json for debugging. Both files are left untouched
when the set of game version IDs has not changed.

Each release uses the CurseForge game version ID as its "version", which
is what addon upload configs reference. Release timestamps are synthetic
(see assign_release_timestamps) and are not real release dates.
"""

import argparse
import sys
from collections import Counter

from .config import (
    GAME_VERSIONS_FILE,
    GAME_VERSIONS_MAPPING_FILE,
    get_api_key,
    get_upload_api_url,
    load_environment,
)
from .curseforge_client import CurseForgeClient
from .datasource import (
    UNCHANGED_SKIP,
    DatasourcePublisher,
    assign_release_timestamps,
    canonical_json,
    group_by_variant,
    iso_timestamp,
    utc_now,
    write_document,
)
from .errors import DatasourceError, EmptyResultError
from .version_parser import parse_version_to_number
from .version_types import WOW_VERSION_TYPES


TAG = "fetch-game-versions"


def process_game_version_data(data, catalog):
    """
    Turn the Upload API response into game version records.

    Entries missing an id, name or gameVersionTypeID are dropped. Entries
    with a type id the catalog does not know are kept as "unknown".

    Returns:
        List of {"id", "name", "variant"} in API order
    """
    records = []

    if not isinstance(data, list):
        return records

    for entry in data:
        if not isinstance(entry, dict):
            continue
        if not (entry.get("name") and entry.get("id") and entry.get("gameVersionTypeID")):
            continue

        records.append({
            "id": entry["id"],
            "name": entry["name"],
            "variant": catalog.variant_for(entry["gameVersionTypeID"]),
        })

    return records


def build_releases(records, now):
    """
    Build Renovate releases, grouped by variant and newest first.

    Variants appear in the order they first occur in the records.
    """
    releases = []
    versions_by_variant = group_by_variant(records, lambda record: parse_version_to_number(record["name"]))

    for variant, variant_records in versions_by_variant.items():
        timestamps = assign_release_timestamps(variant_records, now)
        for record, timestamp in zip(variant_records, timestamps):
            releases.append({
                "version": str(record["id"]),
                "originalVersion": record["name"],
                "variant": variant,
                "releaseTimestamp": timestamp,
            })

    return releases


def create_datasource_document(records, now):
    return {
        "lastUpdated": iso_timestamp(now),
        "releases": build_releases(records, now),
    }


def create_mapping_document(records, now):
    """Flat version -> game version ID list, sorted by variant then newest first."""
    mappings = [
        {"version": record["name"], "gameVersionId": record["id"], "variant": record["variant"]}
        for record in records
    ]
    # Two stable passes: newest first, then by variant name
    mappings.sort(key=lambda mapping: parse_version_to_number(mapping["version"]), reverse=True)
    mappings.sort(key=lambda mapping: mapping["variant"])

    return {
        "lastUpdated": iso_timestamp(now),
        "mappings": mappings,
    }


def _releases_by_id(releases):
    # Duplicate ids collapse to the last one seen
    return {
        str(release.get("version")): {
            "originalVersion": release.get("originalVersion"),
            "variant": release.get("variant"),
        }
        for release in releases
    }


def game_versions_changed(previous, candidate):
    """Compare id -> (originalVersion, variant); order and timestamps are ignored."""
    if not previous or not isinstance(previous.get("releases"), list):
        return True

    old_versions = _releases_by_id(previous["releases"])
    new_versions = _releases_by_id(candidate["releases"])

    return canonical_json(old_versions) != canonical_json(new_versions)


def print_summary(records):
    variant_counts = Counter(record["variant"] for record in records)

    print("\nSummary:")
    print(f"Total gameVersion IDs: {len(records)}")
    for variant, count in variant_counts.items():
        print(f"- {variant}: {count} versions")


def update_game_versions(client, catalog, output_path, mapping_path=None, now=None):
    """
    Fetch game version IDs and publish them.

    Args:
        client: CurseForgeClient (or anything with fetch_version_ids)
        catalog: VersionTypeCatalog used to resolve variants
        output_path: where game-versions.json lives
        mapping_path: where to write the mapping file (skipped if None)
        now: run timestamp (defaults to the current UTC time)

    Returns:
        (records, PublishResult)

    Raises:
        UpstreamFetchError: if the API request fails
        EmptyResultError: if the response holds no usable game version
    """
    now = now or utc_now()

    print(f"[{TAG}] Fetching game version IDs from CurseForge Upload API...")
    data = client.fetch_version_ids()

    print(f"[{TAG}] Processing game version IDs...")
    records = process_game_version_data(data, catalog)

    if not records:
        raise EmptyResultError("No game version IDs found in the API response")

    print(f"[{TAG}] Found {len(records)} game version IDs")

    def write_mapping(document):
        if mapping_path is not None:
            write_document(mapping_path, create_mapping_document(records, now))
            print(f"[{TAG}] Saved version mappings to {mapping_path}")

    document = create_datasource_document(records, now)
    publisher = DatasourcePublisher(output_path, game_versions_changed, UNCHANGED_SKIP, tag=TAG)
    result = publisher.publish(document, on_write=write_mapping)

    return records, result


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Fetch CurseForge game version IDs into a Renovate datasource file"
    )
    parser.add_argument(
        "--output",
        default=GAME_VERSIONS_FILE,
        help=f"Path of the datasource file (default: {GAME_VERSIONS_FILE})"
    )
    parser.add_argument(
        "--mapping-output",
        default=GAME_VERSIONS_MAPPING_FILE,
        help=f"Path of the mapping file (default: {GAME_VERSIONS_MAPPING_FILE})"
    )

    args = parser.parse_args(argv)

    load_environment()

    try:
        api_key = get_api_key()
        client = CurseForgeClient(api_key, upload_url=get_upload_api_url())
        records, _ = update_game_versions(
            client,
            WOW_VERSION_TYPES,
            args.output,
            mapping_path=args.mapping_output,
        )

    except DatasourceError as e:
        print(f"::error ::Error fetching game versions: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"::error ::Unexpected error fetching game versions: {e!r}", file=sys.stderr)
        return 1

    print_summary(records)
    return 0


if __name__ == "__main__":
    sys.exit(main())

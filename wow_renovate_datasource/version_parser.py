"""
Parse CurseForge version names into WoW Interface versions.

Interface versions are what addons declare in their TOC file:
    1.15.3  -> 11503   (Classic Era)
    3.4.3   -> 30403   (WotLK Classic)
    4.4.0   -> 40400   (Cata Classic)
    11.2.0  -> 110200  (Retail)
"""

import math
import re


# A single trailing letter is allowed (hotfix builds like "4.0.3a")
VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)\.(\d+)[A-Za-z]?", re.ASCII)

LEADING_INT_PATTERN = re.compile(r"^\s*([+-]?\d+)", re.ASCII)


def parse_interface_version(version_name):
    """
    Convert a version name to an Interface version.

    Format: Major (unpadded) + Minor + Patch (each zero-padded to 2 digits)

    Examples:
        "1.15.3"  -> "11503"
        "11.2.0"  -> "110200"
        "4.0.3a"  -> "40003"

    Returns:
        Interface version string, or None if the name is not a plain
        Major.Minor.Patch version (optionally followed by one letter).
    """
    if not isinstance(version_name, str):
        return None

    match = VERSION_PATTERN.fullmatch(version_name)
    if not match:
        return None

    major, minor, patch = match.groups()
    return f"{major}{minor.zfill(2)}{patch.zfill(2)}"


def parse_version(curseforge_version):
    """
    Parse a flattened CurseForge version record.

    Args:
        curseforge_version: dict with "name" and "variant", and optionally
            "type", "versionTypeName" and "versionTypeSlug"

    Returns:
        Parsed version dict, or None if the name cannot be parsed.
        Optional fields are only present when present on the input.
    """
    interface_version = parse_interface_version(curseforge_version.get("name"))

    if interface_version is None:
        return None

    parsed = {
        "version": interface_version,
        "name": curseforge_version["name"],
        "variant": curseforge_version.get("variant"),
    }

    if "type" in curseforge_version:
        parsed["gameVersionTypeId"] = curseforge_version["type"]
    if "versionTypeName" in curseforge_version:
        parsed["versionTypeName"] = curseforge_version["versionTypeName"]
    if "versionTypeSlug" in curseforge_version:
        parsed["versionTypeSlug"] = curseforge_version["versionTypeSlug"]

    return parsed


def parse_versions(curseforge_versions):
    """Parse a list of version records, dropping the ones that fail to parse."""
    parsed_versions = []
    for curseforge_version in curseforge_versions:
        parsed = parse_version(curseforge_version)
        if parsed is not None:
            parsed_versions.append(parsed)
    return parsed_versions


def _leading_int(segment):
    if segment == "":
        return 0
    match = LEADING_INT_PATTERN.match(segment)
    if not match:
        return math.nan
    return int(match.group(1))


def parse_version_to_number(version_string):
    """
    Convert a version string to a number for sorting.

    Computes major*10000 + minor*100 + patch. Missing parts count as 0.
    No validation is done: a part without leading digits makes the
    whole result NaN, which does not compare meaningfully.

    Examples:
        "1.15.3" -> 11503
        "1.2"    -> 10200
        "a.b.c"  -> nan
    """
    parts = version_string.split(".")
    parts += [""] * (3 - len(parts))

    major = _leading_int(parts[0])
    minor = _leading_int(parts[1])
    patch = _leading_int(parts[2])

    return major * 10000 + minor * 100 + patch

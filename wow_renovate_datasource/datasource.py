"""
Shared datasource logic: grouping, ordering, change detection and publishing.

Both update flows build a candidate document, compare it to the document
already on disk and then decide what to write:

    UNCHANGED_REWRITE - always write, but keep the previous lastUpdated
                        when nothing meaningful changed (versions.json)
    UNCHANGED_SKIP    - leave the existing file untouched when nothing
                        meaningful changed (game-versions.json)
"""

import json
import os
import stat
import sys
import tempfile
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional


UNCHANGED_REWRITE = "rewrite"
UNCHANGED_SKIP = "skip"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """Format as ISO-8601 UTC with milliseconds, e.g. 2025-01-01T00:00:00.000Z"""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def group_by_variant(entries: List[Dict], sort_key: Callable[[Dict], float]) -> Dict[str, List[Dict]]:
    """
    Group entries by their "variant" and sort each group newest first.

    Variants keep the order in which they first appear. The sort is
    stable, so entries with equal keys keep their input order.
    """
    groups: Dict[str, List[Dict]] = {}
    for entry in entries:
        groups.setdefault(entry["variant"], []).append(entry)

    for variant, variant_entries in groups.items():
        groups[variant] = sorted(variant_entries, key=sort_key, reverse=True)

    return groups


def assign_release_timestamps(entries: List[Dict], now: datetime) -> List[str]:
    """
    Build synthetic release timestamps for a newest-first list.

    The entry at index i of n gets now - (n - i - 1) days: the last entry
    is stamped with the run time and each earlier entry one day before
    the one after it. CurseForge has no release dates for game versions,
    so these are an ordering device only, not real release dates.
    """
    count = len(entries)
    return [iso_timestamp(now - timedelta(days=count - index - 1)) for index in range(count)]


def canonical_json(value) -> str:
    """Serialize for comparison. Key order is ignored, list order is not."""
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def read_document(path) -> Optional[Dict]:
    """
    Read a previously published document.

    Returns None if the file is missing or is not a JSON object, so the
    caller treats it as a first run.
    """
    path = Path(path)
    if not path.exists():
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError) as e:
        print(f"::warning ::Could not read existing {path.name}, it will be replaced: {e}", file=sys.stderr)
        return None

    if not isinstance(document, dict):
        print(f"::warning ::Existing {path.name} is not a JSON object, it will be replaced", file=sys.stderr)
        return None

    return document


def _file_mode(path: Path) -> int:
    """Mode for the published file: the existing one, else 0666 minus the umask."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def write_document(path, document: Dict):
    """
    Write a document as indented JSON.

    The content goes to a temporary file next to the target which then
    replaces it, so readers never see a partially written document.
    An existing file keeps its mode; a new one gets the umask default.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    mode = _file_mode(path)

    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False)
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise


@dataclass
class PublishResult:
    document: Dict
    changed: bool
    written: bool


class DatasourcePublisher:
    """
    Compare a candidate document against the published one and write it.

    Args:
        path: published document location
        has_changed: callable(previous_document_or_None, candidate) -> bool
        unchanged_policy: UNCHANGED_REWRITE or UNCHANGED_SKIP
        tag: prefix for console output
    """

    def __init__(self, path, has_changed, unchanged_policy, tag="datasource"):
        if unchanged_policy not in (UNCHANGED_REWRITE, UNCHANGED_SKIP):
            raise ValueError(f"Unknown unchanged policy: {unchanged_policy!r}")

        self.path = Path(path)
        self.has_changed = has_changed
        self.unchanged_policy = unchanged_policy
        self.tag = tag

    def publish(self, candidate: Dict, on_write=None) -> PublishResult:
        """
        Publish the candidate document.

        Args:
            candidate: freshly built document (must have "lastUpdated")
            on_write: optional callable(document) invoked after writing,
                for companion files that follow the main document

        Returns:
            PublishResult with the document as written (or as kept)
        """
        previous = read_document(self.path)

        changed = self.has_changed(previous, candidate)

        if changed:
            return self._write(candidate, changed=True, on_write=on_write)

        if self.unchanged_policy == UNCHANGED_SKIP:
            print(f"[{self.tag}] No changes detected, keeping existing file")
            return PublishResult(document=previous, changed=False, written=False)

        candidate["lastUpdated"] = previous.get("lastUpdated", candidate["lastUpdated"])
        print(f"[{self.tag}] No changes detected, keeping existing lastUpdated timestamp")
        return self._write(candidate, changed=False, on_write=on_write)

    def _write(self, document, changed, on_write):
        write_document(self.path, document)
        print(f"[{self.tag}] Saved {self.path}")
        if on_write is not None:
            on_write(document)
        return PublishResult(document=document, changed=changed, written=True)

# src/publish_pipeline/versioning/versions.py
# versions.txt: one "name:fingerprint" per line, no escaping of ':' inside names

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import MutableMapping, Optional

from publish_pipeline.errors import ErrorKind


@dataclass
class VersionLoad:
    versions: Optional[MutableMapping[str, str]]
    skipped_lines: int = 0
    error: Optional[ErrorKind] = None
    missing: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


def load_versions(path: Path, versions: Optional[MutableMapping[str, str]]) -> VersionLoad:
    """
    Read versions.txt into `versions`.

    - versions is None -> VersionLoad(error=INVALID_ARGUMENT), nothing is read
    - missing file     -> first publish, `versions` left untouched
    - lines are split on the first ':'; lines without one are skipped
      and counted in skipped_lines
    - repeated names: the later line wins
    """
    if versions is None:
        return VersionLoad(versions=None, error=ErrorKind.INVALID_ARGUMENT)
    if not path.exists():
        return VersionLoad(versions=versions, missing=True)

    skipped = 0
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.rstrip("\r\n")
            if not line:
                continue
            name, sep, fingerprint = line.partition(":")
            if not sep:
                skipped += 1
                continue
            versions[name] = fingerprint

    if skipped:
        print(f"[VERSIONS] skipped {skipped} malformed line(s) in {path}")
    return VersionLoad(versions=versions, skipped_lines=skipped)


def save_versions(path: Path, record: MutableMapping[str, str]) -> None:
    """Replace versions.txt with `record`, one entry per line in iteration order."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as f:
        for name, fingerprint in record.items():
            f.write(f"{name}:{fingerprint}\n")
        f.flush()

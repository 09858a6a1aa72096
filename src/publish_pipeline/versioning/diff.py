from __future__ import annotations

from typing import List, Mapping


def diff_versions(previous: Mapping[str, str], current: Mapping[str, str]) -> List[str]:
    """
    Names in `current` that are new or whose fingerprint differs from `previous`,
    in `current` order. Names only present in `previous` are not reported.
    """
    changed: List[str] = []
    for name, fingerprint in current.items():
        if name not in previous or previous[name] != fingerprint:
            changed.append(name)
    return changed

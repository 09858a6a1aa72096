from __future__ import annotations

from pathlib import Path
from typing import AbstractSet, List

from publish_pipeline.stores.base import Store
from publish_pipeline.stores.filesystem import FilesystemStore


def find_orphans(
    store: Store,
    current_bundle_names: AbstractSet[str],
    protected_names: AbstractSet[str],
    *,
    side_suffix: str = ".manifest",
) -> List[str]:
    """
    Relative paths that belong to no current bundle and are not protected.
    Side-files (`side_suffix`) are never candidates on their own.
    """
    out: List[str] = []
    for rel in store.list(""):
        rel = rel.replace("\\", "/")
        if rel.endswith(side_suffix):
            continue
        if rel in protected_names:
            continue
        if rel in current_bundle_names:
            continue
        out.append(rel)
    return out


def reclaim_orphans(
    output_dir: Path,
    current_bundle_names: AbstractSet[str],
    protected_names: AbstractSet[str],
    *,
    side_suffix: str = ".manifest",
    store: Store | None = None,
) -> List[str]:
    """
    Delete orphaned files under output_dir together with their side-files.

    A candidate already gone at delete time is skipped. A missing side-file
    is not an error. Returns the deleted primary paths (relative, POSIX).
    """
    store = store or FilesystemStore(output_dir)
    candidates = find_orphans(store, current_bundle_names, protected_names, side_suffix=side_suffix)

    deleted: List[str] = []
    for rel in candidates:
        if not store.exists(rel):
            continue
        if store.delete(rel):
            deleted.append(rel)
        store.delete(rel + side_suffix)

    if deleted:
        print(f"[RECLAIM] deleted {len(deleted)} orphan(s) under {output_dir}: {deleted}")
    else:
        print(f"[RECLAIM] no orphans under {output_dir}")
    return deleted

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from publish_pipeline.settings import SettingsDict, resolve_path


class BundleRegistry:
    """
    Bundle names in registration order plus item -> bundle assignments.

    Items are keyed by bundle name. Indices only exist once a manifest is
    built from the registry.
    """

    def __init__(self) -> None:
        self._items: Dict[str, List[str]] = {}
        self._owner: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._items)

    def register(self, name: str) -> None:
        if not name:
            raise ValueError("bundle name must be non-empty")
        self._items.setdefault(name, [])

    def assign(self, item_path: str, name: str) -> None:
        """Put item_path into bundle `name`, moving it out of any previous bundle."""
        self.register(name)
        prev = self._owner.get(item_path)
        if prev == name:
            return
        if prev is not None:
            self._items[prev].remove(item_path)
        self._items[name].append(item_path)
        self._owner[item_path] = name

    def remove_unused(self) -> List[str]:
        removed = [n for n, items in self._items.items() if not items]
        for n in removed:
            del self._items[n]
        return removed

    def names(self) -> List[str]:
        return list(self._items)

    def items_of(self, name: str) -> List[str]:
        return list(self._items[name])

    @classmethod
    def from_settings(cls, s: SettingsDict) -> "BundleRegistry":
        """
        bundles:
          - name: ui
            items: ["ui/**/*.png", "ui/atlas.json"]

        Patterns are globbed under assets.root; matches are files only.
        """
        root = resolve_path(s, s["assets"]["root"])
        reg = cls()
        for b in s.get("bundles", []):
            name = str(b["name"])
            reg.register(name)
            for pattern in b.get("items", []):
                for rel in _glob_files(root, str(pattern)):
                    reg.assign(rel, name)
        return reg


def _glob_files(root: Path, pattern: str) -> List[str]:
    if not root.exists():
        return []
    out: List[str] = []
    for p in sorted(root.glob(pattern)):
        if p.is_file():
            out.append(p.relative_to(root).as_posix())
    return out

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from publish_pipeline.stores.base import Store


class FilesystemStore(Store):
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _p(self, path: str) -> Path:
        # treat 'path' as POSIX-like relative path under root
        return self.root / Path(path)

    def exists(self, path: str) -> bool:
        return self._p(path).is_file()

    def list(self, prefix: str = "") -> Iterable[str]:
        base = self._p(prefix)
        if not base.exists():
            return []
        if base.is_file():
            return [prefix]
        out: list[str] = []
        for p in sorted(base.rglob("*")):
            if p.is_file():
                out.append(p.relative_to(self.root).as_posix().replace("\\", "/"))
        return out

    def delete(self, path: str) -> bool:
        """Remove a file. Returns False if it was already gone."""
        p = self._p(path)
        try:
            p.unlink()
        except FileNotFoundError:
            return False
        return True

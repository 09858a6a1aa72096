# src/publish_pipeline/versioning/update_log.py
# updates.txt: append-only; each batch is "<timestamp>:" followed by one bundle name per line

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

_HEADER_RE = re.compile(r"^(\d+):$")


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class UpdateBatch:
    timestamp: int
    names: List[str] = field(default_factory=list)

    @classmethod
    def now(cls, names: List[str]) -> "UpdateBatch":
        return cls(timestamp=_now_ms(), names=list(names))


def append_update_batch(path: Path, batch: UpdateBatch) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8", newline="\n") as f:
        f.write(f"{batch.timestamp}:\n")
        for name in batch.names:
            f.write(f"{name}\n")
        f.flush()
    print(f"[UPDATES] appended batch ts={batch.timestamp} names={len(batch.names)} path={path}")


def read_update_log(path: Path) -> List[UpdateBatch]:
    """Parse updates.txt back into batches (oldest first). Names before any header are ignored."""
    if not path.exists():
        return []
    batches: List[UpdateBatch] = []
    cur: Optional[UpdateBatch] = None
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line:
            continue
        m = _HEADER_RE.match(line)
        if m:
            cur = UpdateBatch(timestamp=int(m.group(1)))
            batches.append(cur)
        elif cur is not None:
            cur.names.append(line)
    return batches

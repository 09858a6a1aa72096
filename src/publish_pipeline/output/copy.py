from __future__ import annotations

import shutil
from pathlib import Path
from typing import Optional


def copy_output(output_root: Path, platform: str, destination: Path) -> Optional[Path]:
    """
    Copy <output_root>/<platform> to <destination>/<platform>, replacing
    whatever a previous copy left there. Returns None if nothing was built yet.
    """
    source = output_root / platform
    if not source.is_dir():
        print(f"[COPY] no output folder at {source}, build the bundles first")
        return None

    destination.mkdir(parents=True, exist_ok=True)
    target = destination / platform
    if target.is_dir():
        shutil.rmtree(target)
    elif target.exists():
        target.unlink()
    shutil.copytree(source, target)
    print(f"[COPY] {source} -> {target}")
    return target

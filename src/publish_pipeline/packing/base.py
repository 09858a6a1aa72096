from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping


@dataclass
class PackResult:
    # bundle name -> opaque content fingerprint, in pack order
    fingerprints: Dict[str, str] = field(default_factory=dict)
    # bundle name -> files written for it, relative to the output dir (summary "files")
    files: Dict[str, List[str]] = field(default_factory=dict)


class BundlePacker(ABC):
    @abstractmethod
    def pack(self, output_dir: Path, bundles: Mapping[str, List[str]]) -> PackResult:
        """Write one artifact per bundle under output_dir and fingerprint it."""
        ...

# src/publish_pipeline/packing/zip_packer.py
# bundle items (under assets root) -> <out>/<bundle> zip + <bundle>.manifest side-file
# -> <out>/<platform> index listing every bundle hash

from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Dict, List, Mapping

import orjson

from publish_pipeline.common.hashing import sha256_file
from publish_pipeline.packing.base import BundlePacker, PackResult

# fixed entry metadata so identical content packs to identical bytes
_EPOCH = (1980, 1, 1, 0, 0, 0)
_FILE_MODE = 0o644 << 16

_COMPRESSION = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


class ZipBundlePacker(BundlePacker):
    def __init__(
        self,
        assets_root: str | Path,
        platform: str,
        *,
        compression: str = "deflated",
        side_suffix: str = ".manifest",
    ) -> None:
        if compression not in _COMPRESSION:
            raise ValueError(f"compression must be one of {sorted(_COMPRESSION)}, got {compression!r}")
        self.assets_root = Path(assets_root)
        self.platform = platform
        self.compression = compression
        self.side_suffix = side_suffix

    def pack(self, output_dir: Path, bundles: Mapping[str, List[str]]) -> PackResult:
        output_dir.mkdir(parents=True, exist_ok=True)
        res = PackResult()

        for name, items in bundles.items():
            target = output_dir / name
            self._write_zip(target, items)
            fingerprint = sha256_file(target)

            side = target.with_name(target.name + self.side_suffix)
            self._write_json(side, {"name": name, "hash": fingerprint, "items": list(items)})

            res.fingerprints[name] = fingerprint
            res.files[name] = [name, name + self.side_suffix]

        index_path = output_dir / self.platform
        index = {"bundles": [{"name": n, "hash": h} for n, h in res.fingerprints.items()]}
        self._write_json(index_path, index)
        self._write_json(index_path.with_name(index_path.name + self.side_suffix), {"name": self.platform, **index})

        print(f"[PACK] platform={self.platform} bundles={len(res.fingerprints)} out={output_dir}")
        return res

    def _write_zip(self, target: Path, items: List[str]) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        method = _COMPRESSION[self.compression]
        with zipfile.ZipFile(target, "w", compression=method) as zf:
            for rel in items:
                data = (self.assets_root / rel).read_bytes()
                info = zipfile.ZipInfo(filename=rel, date_time=_EPOCH)
                info.compress_type = method
                info.external_attr = _FILE_MODE
                info.create_system = 3
                zf.writestr(info, data)

    @staticmethod
    def _write_json(path: Path, obj: Dict) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(orjson.dumps(obj, option=orjson.OPT_INDENT_2) + b"\n")

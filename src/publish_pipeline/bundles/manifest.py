# src/publish_pipeline/bundles/manifest.py
# registry -> Manifest (bundle index = enumeration position) -> manifest.json (overwrite)

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

import orjson
from pydantic import BaseModel, ConfigDict, Field, model_validator

from publish_pipeline.bundles.registry import BundleRegistry


@dataclass(frozen=True)
class Bundle:
    name: str
    index: int


@dataclass(frozen=True)
class Item:
    path: str
    bundle_index: int


@dataclass(frozen=True)
class Manifest:
    bundles: List[Bundle]
    items: List[Item]
    download_url: str

    def bundle_names(self) -> List[str]:
        return [b.name for b in self.bundles]

    def bundle_items(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {b.name: [] for b in self.bundles}
        for it in self.items:
            out[self.bundles[it.bundle_index].name].append(it.path)
        return out

    def to_document(self) -> "ManifestDocument":
        return ManifestDocument(
            bundles=self.bundle_names(),
            items=[ManifestItem(name=it.path, bundle=it.bundle_index) for it in self.items],
            download_url=self.download_url,
        )


# -----------------------------
# Persisted document schema
# -----------------------------

class ManifestItem(BaseModel):
    name: str
    bundle: int = Field(ge=0)


class ManifestDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    bundles: List[str]
    items: List[ManifestItem]
    download_url: str = Field(alias="downloadURL")

    @model_validator(mode="after")
    def check_bundle_indices(self) -> "ManifestDocument":
        n = len(self.bundles)
        for it in self.items:
            if it.bundle >= n:
                raise ValueError(f"item {it.name!r} points at bundle {it.bundle}, only {n} bundles")
        return self

    def to_manifest(self) -> Manifest:
        return Manifest(
            bundles=[Bundle(name=b, index=i) for i, b in enumerate(self.bundles)],
            items=[Item(path=it.name, bundle_index=it.bundle) for it in self.items],
            download_url=self.download_url,
        )


# -----------------------------
# Build / persist
# -----------------------------

def build_manifest(registry: BundleRegistry, download_url: str) -> Manifest:
    """
    Enumerate every bundle that still owns items, in registration order.
    Bundles without items are dropped from the registry first.
    """
    registry.remove_unused()

    bundles: List[Bundle] = []
    items: List[Item] = []
    for i, name in enumerate(registry.names()):
        bundles.append(Bundle(name=name, index=i))
        items.extend(Item(path=p, bundle_index=i) for p in registry.items_of(name))

    return Manifest(bundles=bundles, items=items, download_url=download_url)


def save_manifest(path: Path, manifest: Manifest) -> None:
    # serialize fully before touching the file
    blob = orjson.dumps(manifest.to_document().model_dump(by_alias=True), option=orjson.OPT_INDENT_2)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(blob + b"\n")
    print(f"[MANIFEST] bundles={len(manifest.bundles)} items={len(manifest.items)} path={path}")


def load_manifest(path: Path) -> Manifest:
    return ManifestDocument.model_validate_json(path.read_bytes()).to_manifest()

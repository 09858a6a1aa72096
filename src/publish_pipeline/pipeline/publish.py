# src/publish_pipeline/pipeline/publish.py
# config -> bundle registry -> manifest.json -> pack -> diff vs versions.txt
# -> (changed) append updates.txt + rewrite versions.txt -> reclaim orphans

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from publish_pipeline.bundles.manifest import Manifest, build_manifest, save_manifest
from publish_pipeline.bundles.registry import BundleRegistry
from publish_pipeline.errors import ErrorKind, PublishError
from publish_pipeline.output.reclaim import reclaim_orphans
from publish_pipeline.packing.base import BundlePacker
from publish_pipeline.packing.zip_packer import ZipBundlePacker
from publish_pipeline.resolve.download_url import resolve_download_url
from publish_pipeline.resolve.target import platform_name, supported_targets
from publish_pipeline.settings import SettingsDict, bundle_names, resolve_path
from publish_pipeline.versioning.diff import diff_versions
from publish_pipeline.versioning.update_log import UpdateBatch, append_update_batch
from publish_pipeline.versioning.versions import load_versions, save_versions

# never reclaimed, whatever the bundle set says
RESERVED_MANIFEST_NAME = "manifest"


@dataclass(frozen=True)
class PublishPaths:
    platform: str
    assets_root: Path
    manifest_path: Path
    output_root: Path
    output_dir: Path
    versions_path: Path
    updates_path: Path

    @classmethod
    def from_settings(cls, cfg: SettingsDict) -> "PublishPaths":
        target = str(cfg["project"]["target"])
        platform = platform_name(target)
        if platform is None:
            raise PublishError(
                ErrorKind.UNKNOWN_TARGET,
                f"no output folder for build target {target!r} (supported: {supported_targets()})",
            )
        # the platform index file lives at <output_dir>/<platform>
        for name in bundle_names(cfg):
            if name.split("/", 1)[0] == platform:
                raise PublishError(
                    ErrorKind.INVALID_ARGUMENT,
                    f"bundle {name!r} collides with the platform index file {platform!r}",
                )

        assets_root = resolve_path(cfg, cfg["assets"]["root"])
        output_root = resolve_path(cfg, cfg["output"]["root"])
        output_dir = output_root / platform
        return cls(
            platform=platform,
            assets_root=assets_root,
            manifest_path=assets_root / cfg["manifest"]["path"],
            output_root=output_root,
            output_dir=output_dir,
            versions_path=output_dir / cfg["output"]["versions_file"],
            updates_path=output_dir / cfg["output"]["updates_file"],
        )


def protected_names(cfg: SettingsDict, platform: str) -> set[str]:
    out = cfg["output"]
    return {platform, str(out["versions_file"]), str(out["updates_file"]), RESERVED_MANIFEST_NAME}


def run_manifest_stage(cfg: SettingsDict, paths: Optional[PublishPaths] = None) -> Optional[Manifest]:
    """
    Build and persist the manifest. Returns None (and writes nothing) when
    no configured bundle owns any item.
    """
    paths = paths or PublishPaths.from_settings(cfg)

    registry = BundleRegistry.from_settings(cfg)
    dropped = registry.remove_unused()
    if dropped:
        print(f"[MANIFEST] dropped bundles without items: {dropped}")
    if len(registry) == 0:
        print("[PUBLISH] nothing to build.")
        return None

    # the manifest document ships as its own bundle
    man_cfg = cfg["manifest"]
    manifest_rel = paths.manifest_path.relative_to(paths.assets_root).as_posix()
    registry.assign(manifest_rel, str(man_cfg["bundle_name"]))

    download_url = resolve_download_url(man_cfg.get("download_url") or None, int(man_cfg["server_port"]))
    manifest = build_manifest(registry, download_url)
    save_manifest(paths.manifest_path, manifest)
    return manifest


def run_publish(cfg: SettingsDict, *, packer: Optional[BundlePacker] = None) -> Dict[str, Any]:
    """
    One publish, run to completion. Returns a summary dict for the CLI.

    versions.txt and updates.txt are only written when at least one bundle
    changed; an interrupted run leaves versions.txt older than the output
    folder, which the next run simply re-detects as changes.
    """
    paths = PublishPaths.from_settings(cfg)

    summary: Dict[str, Any] = {
        "status": "noop",
        "platform": paths.platform,
        "output_dir": str(paths.output_dir),
    }

    # -------------------------
    # 1) Manifest
    # -------------------------
    manifest = run_manifest_stage(cfg, paths)
    if manifest is None:
        summary["reason"] = ErrorKind.NOTHING_TO_BUILD.value
        return summary

    summary["manifest"] = {
        "path": str(paths.manifest_path),
        "bundles": len(manifest.bundles),
        "items": len(manifest.items),
        "download_url": manifest.download_url,
    }

    # -------------------------
    # 2) Pack
    # -------------------------
    if packer is None:
        packer = ZipBundlePacker(
            paths.assets_root,
            paths.platform,
            compression=str(cfg["packer"]["compression"]),
            side_suffix=str(cfg["output"]["side_suffix"]),
        )
    packed = packer.pack(paths.output_dir, manifest.bundle_items())
    if not packed.fingerprints:
        print("[PUBLISH] nothing to build.")
        summary["reason"] = ErrorKind.NOTHING_TO_BUILD.value
        return summary

    # -------------------------
    # 3) Diff vs last publish
    # -------------------------
    loaded = load_versions(paths.versions_path, {})
    if not loaded.ok:
        raise PublishError(loaded.error or ErrorKind.INVALID_ARGUMENT, f"cannot load {paths.versions_path}")
    previous = loaded.versions or {}

    changed = diff_versions(previous, packed.fingerprints)

    # -------------------------
    # 4) Persist (only on change)
    # -------------------------
    if changed:
        append_update_batch(paths.updates_path, UpdateBatch.now(changed))
        save_versions(paths.versions_path, packed.fingerprints)
        print(f"[VERSIONS] {len(changed)} changed bundle(s): {changed}")
        summary["status"] = "published"
    else:
        print("[PUBLISH] nothing to update.")
        summary["status"] = "unchanged"

    # -------------------------
    # 5) Reclaim
    # -------------------------
    deleted = reclaim_orphans(
        paths.output_dir,
        set(packed.fingerprints),
        protected_names(cfg, paths.platform),
        side_suffix=str(cfg["output"]["side_suffix"]),
    )

    summary.update(
        {
            "bundles": _bundle_sizes(manifest),
            "files": packed.files,
            "changed": changed,
            "skipped_version_lines": loaded.skipped_lines,
            "first_publish": loaded.missing,
            "deleted": deleted,
        }
    )
    return summary


def _bundle_sizes(manifest: Manifest) -> Dict[str, int]:
    return {name: len(items) for name, items in manifest.bundle_items().items()}

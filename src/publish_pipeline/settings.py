# src/publish_pipeline/settings.py
from __future__ import annotations

import hashlib
import json
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Optional, Set

import yaml

SettingsDict = Dict[str, Any]


# =========================
# Public API
# =========================
def load_settings(path: str | Path) -> SettingsDict:
    """
    Load publish YAML -> normalized nested dict settings.

    Guarantees:
    - defaults are applied (so required nested maps exist)
    - validation is executed (ValueError with clear messages)
    - runtime metadata is attached into settings["_meta"]

    Relative paths in the config are resolved against the directory that
    holds the config file (see resolve_path).
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError("publish config root must be a mapping (YAML dict)")

    s = apply_defaults(raw)
    validate_settings(s)

    s.setdefault("_meta", {})
    s["_meta"]["config_path"] = str(path)
    s["_meta"]["base_dir"] = str(path.resolve().parent)
    s["_meta"]["config_hash"] = hash_settings(s, exclude_keys={"_meta"})
    return s


def apply_defaults(raw: SettingsDict) -> SettingsDict:
    s: SettingsDict = _deep_copy_dict(raw)

    # ---- project ----
    s.setdefault("project", {})
    _must_be_mapping(s["project"], "project")
    s["project"].setdefault("target", "")

    # ---- assets ----
    s.setdefault("assets", {})
    _must_be_mapping(s["assets"], "assets")
    s["assets"].setdefault("root", "assets")

    # ---- bundles ----
    if s.get("bundles") is None:
        s["bundles"] = []
    if not isinstance(s["bundles"], list):
        raise ValueError("bundles must be a list")
    for i, b in enumerate(s["bundles"]):
        _must_be_mapping(b, f"bundles[{i}]")
        if b.get("items") is None:
            b["items"] = []

    # ---- manifest ----
    s.setdefault("manifest", {})
    _must_be_mapping(s["manifest"], "manifest")
    man = s["manifest"]
    man.setdefault("path", "manifest.json")  # relative to assets.root
    man.setdefault("bundle_name", "manifest")
    man.setdefault("download_url", "")  # empty -> resolve from local address
    man.setdefault("server_port", 7888)

    # ---- output ----
    s.setdefault("output", {})
    _must_be_mapping(s["output"], "output")
    out = s["output"]
    out.setdefault("root", "AssetBundles")
    out.setdefault("versions_file", "versions.txt")
    out.setdefault("updates_file", "updates.txt")
    out.setdefault("side_suffix", ".manifest")

    # ---- packer ----
    s.setdefault("packer", {})
    _must_be_mapping(s["packer"], "packer")
    s["packer"].setdefault("compression", "deflated")  # deflated | stored

    return s


def validate_settings(s: SettingsDict) -> None:
    """
    Validate normalized settings dict (after apply_defaults).
    Raises ValueError with explicit messages.
    """
    _require_nonempty_str(s["project"].get("target"), "project.target")
    _require_nonempty_str(s["assets"].get("root"), "assets.root")

    out = s["output"]
    _require_nonempty_str(out.get("root"), "output.root")
    versions_file = _require_nonempty_str(out.get("versions_file"), "output.versions_file")
    updates_file = _require_nonempty_str(out.get("updates_file"), "output.updates_file")
    if versions_file == updates_file:
        raise ValueError("output.versions_file and output.updates_file must differ")
    suffix = _require_nonempty_str(out.get("side_suffix"), "output.side_suffix")
    if not suffix.startswith("."):
        raise ValueError(f"output.side_suffix must start with '.', got {suffix!r}")
    reserved = {versions_file, updates_file}

    # repeated names are allowed; the registry merges them into one bundle
    for i, b in enumerate(s["bundles"]):
        name = _require_nonempty_str(b.get("name"), f"bundles[{i}].name")
        _check_bundle_name(name, f"bundles[{i}].name", reserved, suffix)
        if not isinstance(b.get("items"), list):
            raise ValueError(f"bundles[{i}].items must be a list of glob patterns")
        for j, pattern in enumerate(b["items"]):
            _require_nonempty_str(pattern, f"bundles[{i}].items[{j}]")

    man = s["manifest"]
    man_path = _require_nonempty_str(man.get("path"), "manifest.path")
    if Path(man_path).is_absolute() or ".." in Path(man_path).parts:
        raise ValueError(f"manifest.path must be relative to assets.root, got {man_path!r}")
    man_bundle = _require_nonempty_str(man.get("bundle_name"), "manifest.bundle_name")
    _check_bundle_name(man_bundle, "manifest.bundle_name", reserved, suffix)
    if man.get("download_url") is not None and not isinstance(man.get("download_url"), str):
        raise ValueError("manifest.download_url must be a string")
    _as_int(man.get("server_port"), "manifest.server_port", min_value=1, max_value=65535)

    _validate_enum(str(s["packer"].get("compression")), {"deflated", "stored"}, "packer.compression")


def bundle_names(s: SettingsDict) -> List[str]:
    """Every bundle name the config can produce, the manifest bundle included."""
    names = [str(b["name"]) for b in s.get("bundles", [])]
    names.append(str(s["manifest"]["bundle_name"]))
    return names


def resolve_path(s: SettingsDict, p: str | Path) -> Path:
    """Resolve a possibly-relative config path against the config file directory."""
    pp = Path(p)
    if pp.is_absolute():
        return pp
    base = s.get("_meta", {}).get("base_dir")
    return (Path(base) / pp) if base else pp


def hash_settings(s: SettingsDict, *, exclude_keys: Optional[Set[str]] = None) -> str:
    """
    Stable hash for settings dict (used as config fingerprint).
    """
    exclude_keys = exclude_keys or set()
    filtered = {k: v for k, v in s.items() if k not in exclude_keys}
    blob = json.dumps(filtered, sort_keys=True, ensure_ascii=False).encode("utf-8")
    return hashlib.sha256(blob).hexdigest()


# =========================
# Internal helpers
# =========================
def _deep_copy_dict(d: SettingsDict) -> SettingsDict:
    # yaml-safe types -> json roundtrip keeps it simple
    return json.loads(json.dumps(d, ensure_ascii=False))


def _must_be_mapping(v: Any, path: str) -> None:
    if not isinstance(v, dict):
        raise ValueError(f"{path} must be a mapping (YAML dict)")


def _require_nonempty_str(v: Any, path: str) -> str:
    vv = str(v or "")
    if not vv.strip():
        raise ValueError(f"{path} is required")
    return vv


def _check_bundle_name(name: str, path: str, reserved: Set[str], side_suffix: str) -> None:
    # a bundle name is a file path under the platform output dir
    if ":" in name:
        # versions.txt has no escaping for the delimiter
        raise ValueError(f"{path} must not contain ':', got {name!r}")
    if "\\" in name:
        raise ValueError(f"{path} must use '/' as separator, got {name!r}")
    pp = PurePosixPath(name)
    if not pp.parts or pp.is_absolute() or ".." in pp.parts or pp.as_posix() != name:
        raise ValueError(f"{path} must be a normalized relative path, got {name!r}")
    if pp.parts[0] in reserved:
        raise ValueError(f"{path} collides with output file {pp.parts[0]!r}")
    if name.endswith(side_suffix):
        raise ValueError(f"{path} must not end with output.side_suffix {side_suffix!r}, got {name!r}")


def _validate_enum(v: str, allowed: Set[str], path: str) -> None:
    if v not in allowed:
        raise ValueError(f"{path} must be one of {sorted(allowed)}, got {v!r}")


def _as_int(v: Any, path: str, *, min_value: Optional[int] = None, max_value: Optional[int] = None) -> int:
    try:
        x = int(v)
    except Exception as e:
        raise ValueError(f"{path} must be int-like, got {v!r}") from e
    if min_value is not None and x < min_value:
        raise ValueError(f"{path} must be >= {min_value}, got {x}")
    if max_value is not None and x > max_value:
        raise ValueError(f"{path} must be <= {max_value}, got {x}")
    return x

from __future__ import annotations

from pathlib import Path

from publish_pipeline.bundles.registry import BundleRegistry


def test_register_is_order_stable_and_deduplicated() -> None:
    reg = BundleRegistry()
    for name in ["ui", "levels", "ui", "audio", "levels"]:
        reg.register(name)

    assert reg.names() == ["ui", "levels", "audio"]
    assert len(reg) == 3


def test_assign_moves_item_between_bundles() -> None:
    reg = BundleRegistry()
    reg.assign("a.png", "ui")
    reg.assign("b.png", "ui")
    reg.assign("a.png", "icons")

    assert reg.items_of("ui") == ["b.png"]
    assert reg.items_of("icons") == ["a.png"]


def test_assign_same_bundle_twice_keeps_one_entry() -> None:
    reg = BundleRegistry()
    reg.assign("a.png", "ui")
    reg.assign("a.png", "ui")
    assert reg.items_of("ui") == ["a.png"]


def test_remove_unused_drops_empty_bundles() -> None:
    reg = BundleRegistry()
    reg.register("empty")
    reg.assign("a.png", "ui")
    reg.assign("b.png", "moved")
    reg.assign("b.png", "ui")

    removed = reg.remove_unused()

    assert removed == ["empty", "moved"]
    assert reg.names() == ["ui"]


def test_from_settings_globs_files_under_assets_root(tmp_path: Path) -> None:
    root = tmp_path / "assets"
    for rel in ["ui/a.png", "ui/sub/b.png", "ui/readme.txt", "levels/1.json"]:
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(b"x")

    cfg = {
        "assets": {"root": str(root)},
        "bundles": [
            {"name": "ui", "items": ["ui/**/*.png"]},
            {"name": "levels", "items": ["levels/*.json"]},
            {"name": "nothing", "items": ["missing/*"]},
        ],
    }
    reg = BundleRegistry.from_settings(cfg)

    assert reg.names() == ["ui", "levels", "nothing"]
    assert reg.items_of("ui") == ["ui/a.png", "ui/sub/b.png"]
    assert reg.items_of("levels") == ["levels/1.json"]
    assert reg.items_of("nothing") == []


def test_from_settings_merges_repeated_names(tmp_path: Path) -> None:
    root = tmp_path / "assets"
    root.mkdir()
    (root / "a.txt").write_text("a", encoding="utf-8")
    (root / "b.txt").write_text("b", encoding="utf-8")

    cfg = {
        "assets": {"root": str(root)},
        "bundles": [
            {"name": "x", "items": ["a.txt"]},
            {"name": "y", "items": ["b.txt"]},
            {"name": "x", "items": ["b.txt"]},
        ],
    }
    reg = BundleRegistry.from_settings(cfg)

    assert reg.names() == ["x", "y"]
    assert reg.items_of("x") == ["a.txt", "b.txt"]
    assert reg.items_of("y") == []

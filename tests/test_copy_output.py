from __future__ import annotations

from pathlib import Path

from publish_pipeline.output.copy import copy_output


def test_copy_replaces_previous_copy(tmp_path: Path) -> None:
    src = tmp_path / "AssetBundles" / "Android"
    src.mkdir(parents=True)
    (src / "ui").write_bytes(b"new")
    (src / "versions.txt").write_text("ui:h\n", encoding="utf-8")

    dest = tmp_path / "StreamingAssets"
    stale = dest / "Android"
    stale.mkdir(parents=True)
    (stale / "old").write_bytes(b"old")

    target = copy_output(tmp_path / "AssetBundles", "Android", dest)

    assert target == dest / "Android"
    assert sorted(p.name for p in target.iterdir()) == ["ui", "versions.txt"]
    assert (target / "ui").read_bytes() == b"new"


def test_copy_without_build_output_is_noop(tmp_path: Path, capsys) -> None:
    assert copy_output(tmp_path / "AssetBundles", "Android", tmp_path / "dest") is None
    assert not (tmp_path / "dest").exists()
    assert "build the bundles first" in capsys.readouterr().out

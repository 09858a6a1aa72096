from __future__ import annotations

import json
from pathlib import Path

import pytest

from publish_pipeline.cli import build_parser, main


def _project(tmp_path: Path) -> Path:
    (tmp_path / "assets" / "ui").mkdir(parents=True)
    (tmp_path / "assets" / "ui" / "a.png").write_bytes(b"png")
    cfg = tmp_path / "publish.yaml"
    cfg.write_text(
        """
project:
  target: android
bundles:
  - name: ui
    items: ["ui/*.png"]
manifest:
  download_url: "http://cdn.test/"
output:
  root: out
""".strip(),
        encoding="utf-8",
    )
    return cfg


def _run(argv, capsys):
    with pytest.raises(SystemExit) as ei:
        main(argv)
    return ei.value.code, capsys.readouterr()


def test_parser_requires_command() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_build_then_history(tmp_path: Path, capsys) -> None:
    cfg = _project(tmp_path)

    code, captured = _run(["--config", str(cfg), "build"], capsys)
    assert code == 0
    summary = json.loads(captured.out[captured.out.index("{\n"):])
    assert summary["status"] == "published"
    assert summary["platform"] == "Android"

    code, captured = _run(["--config", str(cfg), "history"], capsys)
    assert code == 0
    history = json.loads(captured.out)
    assert history["batches"][0]["names"] == ["ui", "manifest"]


def test_manifest_command(tmp_path: Path, capsys) -> None:
    cfg = _project(tmp_path)

    code, captured = _run(["--config", str(cfg), "manifest"], capsys)

    assert code == 0
    assert (tmp_path / "assets" / "manifest.json").exists()
    assert '"bundles"' in captured.out


def test_copy_command(tmp_path: Path, capsys) -> None:
    cfg = _project(tmp_path)
    _run(["--config", str(cfg), "build"], capsys)

    code, _ = _run(["--config", str(cfg), "copy", "--dest", str(tmp_path / "dest")], capsys)

    assert code == 0
    assert (tmp_path / "dest" / "Android" / "ui").exists()


def test_errors_exit_with_code_2(tmp_path: Path, capsys) -> None:
    cfg = tmp_path / "publish.yaml"
    cfg.write_text("project:\n  target: ps2\n", encoding="utf-8")

    code, captured = _run(["--config", str(cfg), "build"], capsys)

    assert code == 2
    assert "[ERROR] PublishError" in captured.err

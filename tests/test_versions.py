from __future__ import annotations

from pathlib import Path

from publish_pipeline.errors import ErrorKind
from publish_pipeline.versioning.versions import load_versions, save_versions


def test_missing_file_is_first_publish(tmp_path: Path) -> None:
    res = load_versions(tmp_path / "versions.txt", {})
    assert res.ok
    assert res.missing is True
    assert res.versions == {}


def test_none_destination_returns_invalid_argument(tmp_path: Path) -> None:
    p = tmp_path / "versions.txt"
    p.write_text("a:h1\n", encoding="utf-8")

    res = load_versions(p, None)

    assert not res.ok
    assert res.error is ErrorKind.INVALID_ARGUMENT
    assert res.versions is None


def test_save_then_load_roundtrip(tmp_path: Path) -> None:
    p = tmp_path / "versions.txt"
    record = {"ui": "9f1c", "audio/music": "aa00", "levels": "0b7e"}

    save_versions(p, record)
    res = load_versions(p, {})

    assert res.versions == record
    assert list(res.versions) == list(record)
    assert res.skipped_lines == 0


def test_file_format_is_one_pair_per_line(tmp_path: Path) -> None:
    p = tmp_path / "versions.txt"
    save_versions(p, {"a": "h1", "b": "h2"})
    assert p.read_text(encoding="utf-8") == "a:h1\nb:h2\n"


def test_malformed_lines_are_skipped_and_counted(tmp_path: Path) -> None:
    p = tmp_path / "versions.txt"
    p.write_text("a:h1\ngarbage\n", encoding="utf-8")

    res = load_versions(p, {})

    assert res.ok
    assert res.versions == {"a": "h1"}
    assert res.skipped_lines == 1


def test_empty_lines_are_ignored(tmp_path: Path) -> None:
    p = tmp_path / "versions.txt"
    p.write_text("\na:h1\n\n\nb:h2\n", encoding="utf-8")

    res = load_versions(p, {})
    assert res.versions == {"a": "h1", "b": "h2"}
    assert res.skipped_lines == 0


def test_split_on_first_delimiter_only(tmp_path: Path) -> None:
    p = tmp_path / "versions.txt"
    p.write_text("a:h1:extra\n", encoding="utf-8")

    res = load_versions(p, {})
    assert res.versions == {"a": "h1:extra"}


def test_duplicate_names_last_line_wins(tmp_path: Path) -> None:
    p = tmp_path / "versions.txt"
    p.write_text("a:h1\nb:h2\na:h3\n", encoding="utf-8")

    res = load_versions(p, {})
    assert res.versions == {"a": "h3", "b": "h2"}


def test_load_fills_given_mapping(tmp_path: Path) -> None:
    p = tmp_path / "versions.txt"
    p.write_text("a:h1\n", encoding="utf-8")
    dest: dict[str, str] = {}

    res = load_versions(p, dest)

    assert res.versions is dest
    assert dest == {"a": "h1"}


def test_save_truncates_previous_content(tmp_path: Path) -> None:
    p = tmp_path / "versions.txt"
    save_versions(p, {"old1": "x", "old2": "y", "old3": "z"})
    save_versions(p, {"new": "h"})

    assert p.read_text(encoding="utf-8") == "new:h\n"


def test_save_creates_parent_dir(tmp_path: Path) -> None:
    p = tmp_path / "out" / "Windows" / "versions.txt"
    save_versions(p, {"a": "h1"})
    assert p.exists()


def test_crlf_lines_are_read(tmp_path: Path) -> None:
    p = tmp_path / "versions.txt"
    p.write_bytes(b"a:h1\r\nb:h2\r\n")

    res = load_versions(p, {})
    assert res.versions == {"a": "h1", "b": "h2"}

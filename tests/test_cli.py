"""
Tests for main.py - the pack inspector command line.
"""

from pathlib import Path

from huespack.core.persistence import CatalogFile
from main import main


def test_lists_pack(sample_pack: Path, tmp_path: Path, capsys) -> None:
    code = main([str(sample_pack), "--settings", str(tmp_path / "settings.json")])
    out = capsys.readouterr().out

    assert code == 0
    assert "=== Test Pack ===" in out
    assert "Songs (2):" in out
    assert "buildup=build_Alpha" in out
    assert "bg1 align=right" in out


def test_decode_and_snapshot(sample_pack: Path, tmp_path: Path, capsys) -> None:
    snapshot = tmp_path / "out.hcat"
    code = main([str(sample_pack), "--decode", "--snapshot", str(snapshot),
                 "--settings", str(tmp_path / "settings.json")])
    out = capsys.readouterr().out

    assert code == 0
    assert "loop 0.10s 2ch 22050Hz" in out
    assert "4x3 RGBA" in out
    assert len(CatalogFile.load(snapshot).songs) == 2


def test_decode_failure_exit_code(sample_pack: Path, tmp_path: Path, capsys) -> None:
    (sample_pack / "Images" / "bg2.png").write_bytes(b"broken")
    code = main([str(sample_pack), "--decode", "--settings", str(tmp_path / "settings.json")])
    assert code == 2
    assert "FAILED" in capsys.readouterr().out


def test_init_failure_exit_code(tmp_path: Path, capsys) -> None:
    code = main([str(tmp_path / "missing"), "--settings", str(tmp_path / "settings.json")])
    assert code == 1
    assert "file_not_found" in capsys.readouterr().err

import io
import sys
from unittest.mock import patch

import pytest

from tools import bufcat


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("GROWBUF_UNIT", "GROWBUF_MAX_CAPACITY", "GROWBUF_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)


def test_parse_args_defaults():
    args = bufcat.parse_args([])
    assert args.path is None
    assert args.unit is None
    assert args.quiet is False


def test_reads_file(tmp_path, capsys):
    path = tmp_path / "in.txt"
    path.write_bytes(b"hello\n")
    assert bufcat.main([str(path), "--unit", "4"]) == 0
    captured = capsys.readouterr()
    assert captured.out == "hello\n"
    assert "size=6 capacity=12 unit=4" in captured.err


def test_reads_stdin(monkeypatch, capsys):
    fake_stdin = io.TextIOWrapper(io.BytesIO(b"piped"))
    monkeypatch.setattr(sys, "stdin", fake_stdin)
    assert bufcat.main(["--quiet", "--expect", "piped"]) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "size=5" in captured.err


def test_expect_mismatch(tmp_path, capsys):
    path = tmp_path / "in.txt"
    path.write_bytes(b"abc")
    assert bufcat.main([str(path), "--quiet", "--expect", "abd"]) == 1
    assert "--expect" in capsys.readouterr().err


def test_prefix(tmp_path, capsys):
    path = tmp_path / "in.md"
    path.write_bytes(b"# Title\n")
    assert bufcat.main([str(path), "--quiet", "--prefix", "# "]) == 0
    assert bufcat.main([str(path), "--quiet", "--prefix", "Title"]) == 1


def test_missing_file(tmp_path, capsys):
    assert bufcat.main([str(tmp_path / "absent")]) == 1
    assert "[error]" in capsys.readouterr().err


def test_capacity_ceiling(tmp_path, capsys):
    path = tmp_path / "big.bin"
    path.write_bytes(b"x" * 100)
    assert bufcat.main([str(path), "--unit", "16", "--max-capacity", "32", "--quiet"]) == 1
    assert "kept 32 bytes" in capsys.readouterr().err


def test_rejects_bad_unit(capsys):
    assert bufcat.main(["--unit", "0"]) == 1
    assert "--unit" in capsys.readouterr().err


def test_unreadable_path_reports_error(tmp_path, capsys):
    assert bufcat.main([str(tmp_path)]) == 1
    assert "[error]" in capsys.readouterr().err


def test_bad_log_level_does_not_crash(tmp_path, monkeypatch, capsys):
    path = tmp_path / "in.txt"
    path.write_bytes(b"abc")
    monkeypatch.setenv("GROWBUF_LOG_LEVEL", "loud")
    with patch("logging.basicConfig") as basic_config:
        assert bufcat.main([str(path), "--quiet"]) == 0
    assert basic_config.call_args.kwargs["level"] == "WARNING"

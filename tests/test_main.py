"""Test the inline-calc command-line entrypoint."""
from pathlib import Path

import pytest

from inline_calc import main as cli
from inline_calc.host import watcher as watcher_module


def test_parse_args_defaults(tmp_path: Path) -> None:
    """Arguments are validated into CliArgs."""
    path = tmp_path / "notes.txt"
    path.write_text("")

    args = cli.parse_args([str(path)])

    assert args.file_path == path
    assert args.start is None and args.end is None
    assert not args.watch
    assert args.max_depth == 32


def test_parse_args_cursor(tmp_path: Path) -> None:
    """--cursor accepts a caret or a selection."""
    path = tmp_path / "notes.txt"
    path.write_text("")

    args = cli.parse_args([str(path), "--cursor", "3", "7"])

    assert (args.start, args.end) == (3, 7)


@pytest.mark.parametrize("extra", [
    ["--cursor", "1", "2", "3"],
    ["--interval", "0"],
    ["--max-depth", "0"],
])
def test_parse_args_rejects_invalid_values(tmp_path: Path, extra) -> None:
    """Invalid values end in an argparse error."""
    path = tmp_path / "notes.txt"
    path.write_text("")

    with pytest.raises(SystemExit):
        cli.parse_args([str(path), *extra])


def test_parse_args_rejects_missing_file(tmp_path: Path) -> None:
    """The document must exist."""
    with pytest.raises(SystemExit):
        cli.parse_args([str(tmp_path / "missing.txt")])


def test_parse_args_rejects_output_in_watch_mode(tmp_path: Path) -> None:
    """Watch mode rewrites the watched file, so --output is refused."""
    path = tmp_path / "notes.txt"
    path.write_text("")

    with pytest.raises(SystemExit):
        cli.parse_args([str(path), "--watch", "--output", str(tmp_path / "out.txt")])


def test_main_rewrites_file_and_prints_caret(tmp_path: Path, capsys) -> None:
    """main evaluates the file in place and prints the new caret."""
    path = tmp_path / "notes.txt"
    path.write_text("a =(6*7) b")

    assert cli.main([str(path), "--cursor", "4", "10"]) == 0

    assert path.read_text() == "a 42 b"
    assert capsys.readouterr().out.strip() == "4 6"


def test_main_without_expressions_leaves_file(tmp_path: Path, capsys) -> None:
    """A file without expressions is not rewritten."""
    path = tmp_path / "notes.txt"
    path.write_text("plain")
    before = path.stat().st_mtime_ns

    assert cli.main([str(path), "--cursor", "2"]) == 0

    assert path.stat().st_mtime_ns == before
    assert capsys.readouterr().out.strip() == "2 2"


def test_main_output_option(tmp_path: Path) -> None:
    """--output redirects the result."""
    path = tmp_path / "notes.txt"
    path.write_text("=(9/3)")
    output = tmp_path / "out.txt"

    assert cli.main([str(path), "--output", str(output)]) == 0

    assert output.read_text() == "3"
    assert path.read_text() == "=(9/3)"


def test_main_reports_unreadable_document(tmp_path: Path) -> None:
    """A document that is not UTF-8 ends with exit status 1."""
    path = tmp_path / "notes.txt"
    path.write_bytes(b"\xff=(1+1)")

    assert cli.main([str(path)]) == 1


def test_main_watch_mode(tmp_path: Path) -> None:
    """--watch hands the file to a FileWatcher."""
    path = tmp_path / "notes.txt"
    path.write_text("=(2*2)")

    assert cli.main([str(path), "--watch", "--max-events", "1", "--interval", "0.01"]) == 0

    assert path.read_text() == "4"


def test_main_watch_mode_reports_deleted_file(tmp_path: Path, monkeypatch) -> None:
    """A file removed while being watched ends with exit status 1 instead of a traceback."""
    path = tmp_path / "notes.txt"
    path.write_text("=(2*2)")

    monkeypatch.setattr(watcher_module.time, "sleep", lambda seconds: path.unlink())

    assert cli.main([str(path), "--watch", "--max-events", "2"]) == 1

import io
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from selectcheck.cli import main, EXIT_OK, EXIT_PROBLEMS, EXIT_INPUT_ERROR


def test_problems_exit_code(tmp_path, capsys):
    path = tmp_path / "form.html"
    path.write_text("<select><hr></select>", encoding="utf-8")
    assert main([str(path), "--profile", "strict"]) == EXIT_PROBLEMS
    out = capsys.readouterr().out
    assert "[CRITICAL]" in out
    assert "Select #1: label=none" in out


def test_clean_markup_exit_code(tmp_path, capsys):
    path = tmp_path / "form.html"
    path.write_text(
        '<label for="x">Color</label><select id="x" name="c"><option value="1">Red</option></select>',
        encoding="utf-8")
    assert main([str(path), "--profile", "standard"]) == EXIT_OK
    assert "[SUCCESS]" in capsys.readouterr().out


def test_empty_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("   "))
    assert main([]) == EXIT_INPUT_ERROR
    assert "Please enter HTML code." in capsys.readouterr().err


def test_html_output(tmp_path, capsys):
    path = tmp_path / "form.html"
    path.write_text('<select id="a" name="a" aria-label="A"><option value="1">1</option></select>',
                    encoding="utf-8")
    main([str(path), "--html"])
    assert "<!DOCTYPE html>" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.html")]) == EXIT_INPUT_ERROR
    assert "Cannot read" in capsys.readouterr().err


def test_undecodable_file(tmp_path, capsys):
    path = tmp_path / "form.html"
    path.write_bytes(b"\xff\xfe<select></select>")
    assert main([str(path)]) == EXIT_INPUT_ERROR
    assert "Cannot read" in capsys.readouterr().err

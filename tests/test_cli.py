import json

import pytest

import javy.javy_cli as cli


def feed(monkeypatch, lines):
    it = iter(lines)

    def fake_read_line(prompt: str) -> str:
        return next(it)
    monkeypatch.setattr(cli, "read_line", fake_read_line)


def test_repl_exit_immediately(monkeypatch, capsys):
    feed(monkeypatch, ["exit"])
    cli.main([])
    out = capsys.readouterr().out
    assert "Javy REPL v0.1" in out
    assert "Type 'exit' or press Ctrl+D to quit." in out


def test_repl_prints_changed_bindings(monkeypatch, capsys):
    feed(monkeypatch, [
        "var x = 2 + 3;\n",
        "var y = x;\n",
        "x = x * 2;\n",
        "\n",
        "exit\n",
    ])
    cli.repl()
    out, err = capsys.readouterr()
    assert "var x = 5;" in out
    assert "var y = 5;" in out
    assert "var x = 10;" in out
    # `y` did not change on the third line
    assert out.count("var y = 5;") == 1
    assert err == ""


def test_repl_errors_print_to_stderr(monkeypatch, capsys):
    feed(monkeypatch, ["y = 1;", "var y = 1;", "exit"])
    cli.repl()
    out, err = capsys.readouterr()
    assert "NameError: [1:1] No variable with name y" in err
    assert "> 1 | y = 1;" in err
    assert "var y = 1;" in out


def test_repl_eof(monkeypatch, capsys):
    feed(monkeypatch, [""])
    cli.repl()
    assert "Exiting." in capsys.readouterr().out


def test_repl_eof_error(monkeypatch, capsys):
    def raise_eof(prompt: str) -> str:
        raise EOFError
    monkeypatch.setattr(cli, "read_line", raise_eof)
    cli.repl()
    assert "Exiting." in capsys.readouterr().out


@pytest.fixture
def script(tmp_path):
    path = tmp_path / "prog.javy"
    path.write_text('var x = 2 + 3 * 4;\nvar s = "ab" + 1;\n', encoding="utf-8")
    return path


def test_run_script_prints_bindings(script, capsys):
    cli.main([str(script)])
    assert capsys.readouterr().out == 'var x = 14;\nvar s = "ab1";\n'


def test_run_script_yaml(script, capsys):
    cli.main([str(script), "--yaml"])
    assert capsys.readouterr().out == "x: 14\ns: ab1\n"


def test_run_script_json(script, capsys):
    cli.main(["--json", str(script)])
    assert json.loads(capsys.readouterr().out) == {"x": 14, "s": "ab1"}


def test_run_script_without_bindings_prints_nothing(tmp_path, capsys):
    path = tmp_path / "empty.javy"
    path.write_text(";", encoding="utf-8")
    cli.main([str(path)])
    assert capsys.readouterr().out == ""


def test_run_script_error_exits_1(tmp_path, capsys):
    path = tmp_path / "bad.javy"
    path.write_text("var x = ;", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        cli.main([str(path)])
    assert exc.value.code == 1
    assert "SyntaxError: [1:9]" in capsys.readouterr().err


def test_missing_file_exits_1(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main([str(tmp_path / "nope.javy")])
    assert exc.value.code == 1
    assert "file not found" in capsys.readouterr().err


def test_unknown_option_exits_2(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--toml"])
    assert exc.value.code == 2
    assert "unknown option: --toml" in capsys.readouterr().err

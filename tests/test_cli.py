import io
import json

from minilang.__main__ import main


def test_compiles_file_to_code(tmp_path, capsys, factorial_source):
    path = tmp_path / "fact.ml"
    path.write_text(factorial_source)

    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("// Generated JavaScript code")
    assert "function computeFactorial(n) {" in out


def test_emit_tokens_as_json(tmp_path, capsys):
    path = tmp_path / "one.ml"
    path.write_text("var x = 1;")

    assert main([str(path), "--emit", "tokens"]) == 0
    tokens = json.loads(capsys.readouterr().out)
    assert [t["kind"] for t in tokens] == ["VAR", "IDENTIFIER", "EQUAL", "NUMBER", "SEMICOLON", "EOF"]


def test_emit_optimized_ir(tmp_path, capsys):
    path = tmp_path / "one.ml"
    path.write_text("var x = 1 + 2;")

    assert main([str(path), "--emit", "optimized"]) == 0
    assert json.loads(capsys.readouterr().out) == [{"op": "STORE", "args": [{"value": 3.0}, "x"]}]


def test_reads_stdin_and_reports_diagnostics(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("var x; var x;"))

    assert main([]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[Semantic Analysis] Variable 'x' already declared in this scope" in captured.err

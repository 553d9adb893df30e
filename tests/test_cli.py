import sys

import pytest

from treelox.__main__ import EX_DATAERR, EX_SOFTWARE, EX_USAGE, main


@pytest.fixture(autouse=True)
def restore_recursion_limit():
    limit = sys.getrecursionlimit()
    yield
    sys.setrecursionlimit(limit)


@pytest.fixture
def script(tmp_path):
    def write(source: str) -> str:
        path = tmp_path / "script.lox"
        path.write_text(source, encoding="utf-8")
        return str(path)
    return write


def test_runs_a_file(script, capsys):
    assert main([script('print "hello";')]) == 0

    captured = capsys.readouterr()
    assert captured.out == "hello\n"
    assert captured.err == ""


def test_compile_error_exit_code(script, capsys):
    assert main([script("print ;")]) == EX_DATAERR

    assert capsys.readouterr().err == "[line 1] Error at ';': Expect expression.\n"


def test_runtime_error_exit_code(script, capsys):
    assert main([script("print 1;\nprint -nil;")]) == EX_SOFTWARE

    captured = capsys.readouterr()
    assert captured.out == "1\n"
    assert captured.err == "Operand must be a number.\n[line 2]\n"


def test_too_many_arguments_is_a_usage_error(capsys):
    assert main(["one.lox", "two.lox"]) == EX_USAGE


def test_ast_flag_prints_instead_of_running(script, capsys):
    assert main(["--ast", script("print 1 + 2;")]) == 0

    assert capsys.readouterr().out == "(print (+ 1 2))\n"


def test_ast_flag_needs_a_script(capsys):
    assert main(["--ast"]) == EX_USAGE

    assert "--ast needs a script" in capsys.readouterr().err


def test_prompt_keeps_state_and_forgets_errors(monkeypatch, capsys):
    lines = iter(["var a = 1;", "print ;", "print a + 1;"])

    def fake_input(prompt):
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)

    assert main([]) == 0

    captured = capsys.readouterr()
    assert captured.out == "2\n\n"
    assert captured.err == "[line 1] Error at ';': Expect expression.\n"

import io
import sys

from pylox.cli import main, run_file, run_prompt
from pylox.evaluator import EvalOptions
from pylox.lox import ExitStatus


def write_script(tmp_path, source):
    path = tmp_path / "script.lox"
    path.write_text(source, encoding="utf-8")
    return str(path)


def test_run_file_success(tmp_path, capsys):
    path = write_script(tmp_path, 'print "hello";')
    assert run_file(path, EvalOptions()) == ExitStatus.OK
    assert capsys.readouterr().out == "hello\n"


def test_run_file_static_error(tmp_path, capsys):
    path = write_script(tmp_path, "print ;")
    assert run_file(path, EvalOptions()) == 65
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "[line 1] Error at ';': Expect expression." in captured.err


def test_run_file_runtime_error(tmp_path, capsys):
    path = write_script(tmp_path, 'print 1;\nprint "a" * 2;')
    assert run_file(path, EvalOptions()) == 70
    captured = capsys.readouterr()
    assert captured.out == "1\n"
    assert "Operands must be numbers.\n[line 2]" in captured.err


def test_run_file_missing(tmp_path, capsys):
    assert run_file(str(tmp_path / "nope.lox"), EvalOptions()) == ExitStatus.USAGE
    assert "Could not read script" in capsys.readouterr().err


def test_prompt_keeps_state_and_survives_errors(capsys):
    stdin = io.StringIO("var a = 1;\nprint a + b;\nprint a;\n")
    assert run_prompt(EvalOptions(), stdin=stdin) == ExitStatus.OK
    captured = capsys.readouterr()
    assert captured.out.count("> ") == 4
    assert "1\n" in captured.out
    assert "Undefined variable 'b'." in captured.err


def test_prompt_stops_on_empty_line(capsys):
    stdin = io.StringIO('print "shown";\n\nprint "hidden";\n')
    run_prompt(EvalOptions(), stdin=stdin)
    out = capsys.readouterr().out
    assert "shown" in out
    assert "hidden" not in out


def test_main_runs_script(tmp_path, capsys):
    path = write_script(tmp_path, "print 6 * 7;")
    status = main([path, "--recursion-limit", str(sys.getrecursionlimit())])
    assert status == 0
    assert capsys.readouterr().out == "42\n"


def test_main_sets_recursion_limit(tmp_path, capsys):
    path = write_script(tmp_path, "print 1;")
    previous = sys.getrecursionlimit()
    try:
        assert main([path, "--recursion-limit", str(previous + 500)]) == 0
        assert sys.getrecursionlimit() == previous + 500
    finally:
        sys.setrecursionlimit(previous)

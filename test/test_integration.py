"""
Integration tests for Lispy using real script files
"""

import sys
import builtins
import pytest
from pathlib import Path

import main
from interpreter import create_interpreter
from main import (
  run_script_file, parse_file, create_arg_parser, run_interactive_mode,
  RECURSION_LIMIT, RECURSION_MESSAGE,
)
from values import render


PRELUDE = """
; Prelude style definitions
(def {fun} (\\ {args body} {def (head args) (\\ (tail args) body)}))
(fun {len l} {if (== l {}) {0} {+ 1 (len (tail l))}})
(fun {reverse l} {if (== l {}) {{}} {join (reverse (tail l)) (head l)}})
(fun {unpack f xs} {eval (join (list f) xs)})
(len {1 2 3 4})
(reverse {1 2 3})
(unpack + {5 6 7})
"""


class TestScriptExecution:
  """Run whole programs through the interpreter"""

  @pytest.fixture
  def script(self, tmp_path):
    def write(text: str, name: str = "script.lspy") -> Path:
      path = tmp_path / name
      path.write_text(text, encoding="utf-8")
      return path
    return write

  def test_run_string_evaluates_each_expression(self):
    interpreter = create_interpreter()
    results = interpreter.run_string("(def {x} 5)\n(+ x 1)\n{x}")
    assert [render(result) for result in results] == ["()", "6", "{x}"]

  def test_prelude_functions(self):
    interpreter = create_interpreter()
    results = interpreter.run_string(PRELUDE)
    assert [render(result) for result in results[-3:]] == ["4", "{3 2 1}", "18"]

  def test_run_file(self, script):
    path = script("(def {double} (\\ {x} {* 2 x}))\n(double 21)\n")
    results = create_interpreter().run_file(str(path))
    assert render(results[-1]) == "42"

  def test_run_script_file_prints_results(self, script, capsys):
    path = script("(def {a} 1)\n(+ a 2) ; three\n")
    status = run_script_file(create_interpreter(), str(path))
    assert status == 0
    assert capsys.readouterr().out == "()\n3\n"

  def test_error_result_sets_status(self, script, capsys):
    path = script("(/ 1 0)\n")
    assert run_script_file(create_interpreter(), str(path)) == 1
    assert "Error: Division by zero." in capsys.readouterr().out

  def test_parse_error_reported(self, script, capsys):
    path = script("(+ 1 2\n")
    assert run_script_file(create_interpreter(), str(path)) == 1
    assert "Parse error in" in capsys.readouterr().out

  def test_runaway_recursion_reported(self, script, capsys):
    path = script("(def {loop} (\\ {n} {loop n}))\n(loop 1)\n")
    assert run_script_file(create_interpreter(), str(path)) == 1
    assert "maximum recursion depth" in capsys.readouterr().out

  def test_parse_file_prints_tree(self, script, capsys):
    path = script("(+ 1 2)")
    parse_file(str(path))
    output = capsys.readouterr().out
    assert output.splitlines()[0] == ">"
    assert "expr|number|regex '2'" in output


class TestCommandLine:

  def test_arguments(self):
    args = create_arg_parser().parse_args(["--debug", "-i", "prog.lspy"])
    assert args.debug
    assert args.interactive
    assert args.script == "prog.lspy"

  def test_defaults(self):
    args = create_arg_parser().parse_args([])
    assert args.script is None
    assert not args.parse

  def test_parse_without_script_rejected(self, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["lispy", "--parse"])
    with pytest.raises(SystemExit) as excinfo:
      main.main()
    assert excinfo.value.code == 2
    assert "--parse requires a script file" in capsys.readouterr().err


class TestUnreadableScripts:

  def test_directory_as_script(self, tmp_path, capsys):
    assert run_script_file(create_interpreter(), str(tmp_path)) == 1
    assert f"Cannot read '{tmp_path}'" in capsys.readouterr().out

  def test_parse_directory_exits(self, tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
      parse_file(str(tmp_path))
    assert excinfo.value.code == 1
    assert "Cannot read" in capsys.readouterr().out


class TestDeepRecursion:

  @pytest.fixture
  def raised_limit(self):
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(RECURSION_LIMIT)
    yield
    sys.setrecursionlimit(previous)

  def test_long_list_length(self, raised_limit):
    interpreter = create_interpreter()
    items = " ".join(["1"] * 300)
    results = interpreter.run_string(PRELUDE + f"(len {{{items}}})\n")
    assert render(results[-1]) == "300"


class TestInteractiveMode:
  """Drive the REPL loop with scripted input lines"""

  @pytest.fixture
  def repl(self, monkeypatch, capsys):
    monkeypatch.setattr(main, "setup_readline", lambda: None)

    def run(*lines):
      pending = list(lines)

      def fake_input(prompt=""):
        if not pending:
          raise EOFError
        return pending.pop(0)

      monkeypatch.setattr(builtins, "input", fake_input)
      run_interactive_mode(create_interpreter())
      return capsys.readouterr().out

    return run

  def test_banner(self, repl):
    output = repl("exit")
    assert output.startswith("Lispy Version 0.0.0.0.2\nPress Ctrl+c to Exit\n")

  def test_session(self, repl):
    output = repl("def {x} 1", ":env", "(+ 1", ":parse (+ 1 2)", "x", "exit")
    lines = output.splitlines()
    assert "  x = 1" in lines
    assert "<stdin>: Parse error at line 1" in output
    assert "    expr|symbol|regex '+'" in lines
    assert lines[-1] == "1"

  def test_line_is_one_expression(self, repl):
    output = repl("+ 2 3", "exit")
    assert output.splitlines()[-1] == "5"

  def test_env_without_bindings(self, repl):
    assert "  (no user-defined bindings)" in repl(":env", "exit")

  def test_help(self, repl):
    output = repl(":help", "exit")
    assert "REPL Commands:" in output
    assert ":parse <expr>" in output

  def test_recursion_aborts_only_the_line(self, repl):
    output = repl("def {loop} (\\ {n} {loop n})", "loop 1", "+ 1 1", "exit")
    lines = output.splitlines()
    assert RECURSION_MESSAGE in lines
    assert lines[-1] == "2"

  def test_end_of_input_says_goodbye(self, repl):
    assert repl("+ 1 1").splitlines()[-1] == "Goodbye!"

  def test_exit_stops_reading(self, repl):
    output = repl("exit", "+ 40 2")
    assert "42" not in output

"""
Tests for the command line entry points
"""

import pytest

from error_handling import CalcIOError
from main import create_arg_parser, settings_from_args, read_script, run_script_file, parse_file, terminate
from settings import CalcSettings


class TestScripts:
  """Running script files"""

  @pytest.fixture
  def script(self, tmp_path):
    path = tmp_path / "demo.calc"
    path.write_text("a = 2;\nf(x) = x * a;\nf(21);\nb;\n")
    return path

  def test_run_script(self, script, capsys):
    status = run_script_file(str(script), CalcSettings())
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["2", "Defined function: f(x)", "42", 'ERROR: Name not found: "b"']
    assert status == 1

  def test_clean_script_status(self, tmp_path, capsys):
    path = tmp_path / "ok.calc"
    path.write_text("1 + 1;")
    assert run_script_file(str(path), CalcSettings()) == 0
    assert capsys.readouterr().out.strip() == "2"

  def test_script_parse_error(self, tmp_path, capsys):
    path = tmp_path / "bad.calc"
    path.write_text("1 + ;")
    assert run_script_file(str(path), CalcSettings()) == 1
    assert "ERROR: Parsing error" in capsys.readouterr().out

  def test_missing_file(self, tmp_path, capsys):
    missing = str(tmp_path / "missing.calc")
    with pytest.raises(CalcIOError):
      read_script(missing)
    assert run_script_file(missing, CalcSettings()) == 1
    assert capsys.readouterr().out.startswith("ERROR: IO error")

  def test_recursion_does_not_stop_script(self, tmp_path, capsys):
    path = tmp_path / "loop.calc"
    path.write_text("f(x) = f(x);\nf(1);\n3;\n")
    assert run_script_file(str(path), CalcSettings()) == 1
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["Defined function: f(x)", "ERROR: Recursion limit reached", "3"]

  def test_parse_file(self, script, capsys):
    assert parse_file(str(script), CalcSettings()) == 0
    out = capsys.readouterr().out
    assert "Parsed 4 statements:" in out
    assert "FunctionDefinition(f(x))" in out


class TestArguments:
  """Argument handling"""

  def test_settings_from_args(self):
    args = create_arg_parser().parse_args(["--digits", "5", "--precision", "64", "x.calc"])
    settings = settings_from_args(args)
    assert settings.display_digits == 5
    assert settings.precision_bits == 64
    assert args.script == "x.calc"

  def test_defaults(self):
    assert settings_from_args(create_arg_parser().parse_args([])) == CalcSettings()

  def test_invalid_args(self):
    args = create_arg_parser().parse_args(["--digits", "0"])
    with pytest.raises(ValueError):
      settings_from_args(args)

  def test_terminate(self):
    assert terminate("1 + 2") == "1 + 2;"
    assert terminate("1 + 2; ") == "1 + 2;"

import runpy
import sys


def _run_module(argv: list[str]) -> int:
    original_argv = sys.argv[:]
    original_cli_module = sys.modules.pop("director_bot.cli", None)
    try:
        sys.argv = argv[:]
        try:
            runpy.run_module("director_bot.cli", run_name="__main__")
        except SystemExit as exc:
            code = exc.code if isinstance(exc.code, int) else 0
        else:
            code = 0
        return code
    finally:
        sys.argv = original_argv
        if original_cli_module is not None:
            sys.modules["director_bot.cli"] = original_cli_module


def test_python_m_director_bot_cli_help_prints_output(capsys):
    code = _run_module(["python -m director_bot.cli", "--help"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Usage:" in captured.out
    assert "start" in captured.out
    assert "check-config" in captured.out


def test_python_m_director_bot_cli_version_prints_output(capsys):
    code = _run_module(["python -m director_bot.cli", "--version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.startswith("director-bot ")

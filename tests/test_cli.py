import sys
import types

import pytest

from timed_quiz import cli
from timed_quiz.core import config_templates


@pytest.fixture(autouse=True)
def reset_metadata(monkeypatch):
    """Ensure metadata.version is controllable during tests."""

    def fake_version(name: str) -> str:
        assert name == "timed-quiz"
        return "0.0-test"

    monkeypatch.setattr(cli.metadata, "version", fake_version)
    yield


def test_version_command_handles_missing_package(monkeypatch, capsys):
    monkeypatch.setattr(
        cli.metadata,
        "version",
        lambda name: (_ for _ in ()).throw(cli.metadata.PackageNotFoundError()),
    )
    code = cli.main(["version"])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "unknown"


def test_no_args_prints_usage_and_returns_error(capsys):
    code = cli.main([])
    captured = capsys.readouterr()
    assert code == 2
    assert "Usage: timed-quiz" in captured.out
    assert "Available commands:" in captured.out


@pytest.mark.parametrize("argv", [["--help"], ["-h"], ["help"]])
def test_help_shows_usage(argv, capsys):
    code = cli.main(argv)
    captured = capsys.readouterr()
    assert code == 0
    assert "Usage: timed-quiz" in captured.out


def test_list_outputs_command_table(capsys):
    code = cli.main(["list"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Available commands:" in captured.out
    assert "init" in captured.out
    assert "quiz" in captured.out
    assert "(TUI)" in captured.out


def test_help_known_command(capsys):
    code = cli.main(["help", "quiz"])
    captured = capsys.readouterr()
    assert code == 0
    assert "Run `timed-quiz quiz --help`" in captured.out


def test_help_unknown_command(capsys):
    code = cli.main(["help", "does-not-exist"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command" in captured.err
    assert "Available commands:" in captured.err


@pytest.mark.parametrize("flag", ["version", "--version", "-V"])
def test_version_variants(flag, capsys):
    code = cli.main([flag])
    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "0.0-test"


def test_unknown_command_errors(capsys):
    code = cli.main(["bogus"])
    captured = capsys.readouterr()
    assert code == 2
    assert "Unknown command" in captured.err


def _stub_import(expected: str, main):
    def fake_import(module_name: str):
        assert module_name == expected
        return types.SimpleNamespace(main=main)

    return fake_import


def test_dispatch_passes_argv_to_module_main(monkeypatch):
    before = list(sys.argv)
    captured: dict[str, list[str]] = {}

    def stub_main(argv):
        captured["argv"] = argv
        return 7

    monkeypatch.setattr(
        cli, "import_module", _stub_import("timed_quiz.quiz._main", stub_main)
    )
    code = cli.main(["quiz", "start", "--minutes", "10"])
    assert code == 7
    assert captured["argv"] == ["start", "--minutes", "10"]
    assert list(sys.argv) == before


def test_init_dispatches_to_workspace_cli(monkeypatch):
    calls: list[list[str]] = []

    def stub_main(argv):
        calls.append(argv)
        return 0

    monkeypatch.setattr(
        cli, "import_module", _stub_import("timed_quiz.workspace.cli", stub_main)
    )
    assert cli.main(["init", "--quiet"]) == 0
    assert calls == [["--quiet"]]


@pytest.mark.parametrize(
    "exit_value, expected", [(5, 5), (None, 0), ("boom", 1)]
)
def test_dispatch_normalizes_system_exit(
    monkeypatch, capsys, exit_value, expected
):
    def stub_main(argv):
        raise SystemExit(exit_value)

    monkeypatch.setattr(
        cli, "import_module", _stub_import("timed_quiz.quiz._main", stub_main)
    )
    assert cli.main(["quiz"]) == expected
    if exit_value == "boom":
        assert capsys.readouterr().err.strip() == "boom"


def test_dispatch_normalizes_non_int_return(monkeypatch):
    monkeypatch.setattr(
        cli,
        "import_module",
        _stub_import("timed_quiz.quiz._main", lambda argv: "done"),
    )
    assert cli.main(["quiz"]) == 0


def test_cli_runs_init_end_to_end(tmp_path, capsys):
    target = tmp_path / "workspace-root"

    code = cli.main(["init", "--path", str(target)])

    captured = capsys.readouterr()
    assert code == 0
    assert "Workspace ready" in captured.out
    for entry in ("config", "logs"):
        assert (target / entry).is_dir()


def test_cli_runs_quiz_config_init(tmp_path, capsys):
    code = cli.main(["quiz", "config", "init", "--workspace", str(tmp_path)])

    assert code == 0
    target = tmp_path / "config" / "quiz.toml"
    template = config_templates.get_template("quiz")
    assert target.read_text(encoding="utf-8") == template.read_text()
    assert str(target) in capsys.readouterr().out


def test_cli_quiz_rejects_bad_minutes(capsys):
    code = cli.main(["quiz", "start", "--minutes", "7"])
    assert code == 2
    assert "invalid choice" in capsys.readouterr().err

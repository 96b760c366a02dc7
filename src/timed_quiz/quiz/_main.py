"""Command-line entry point for ``timed-quiz quiz``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console

from timed_quiz.core import config_templates
from timed_quiz.core import workspace as workspace_mod
from timed_quiz.core.config_templates import ConfigTemplateError
from timed_quiz.core.logging import configure_logger
from timed_quiz.core.workspace import WorkspaceError

from .bank import load_bank, load_sample_bank
from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    LoadResult,
    QuizConfigError,
    load_config,
)
from .console import run_console_session
from .models import (
    ALLOWED_TIME_LIMITS,
    EmptyBankError,
    Question,
    QuestionBankError,
)

LOGGER_NAME = "timed_quiz.quiz"


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a quiz.toml (defaults to the workspace config dir).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root used for config and logs.",
    )
    parser.add_argument(
        "--bank",
        type=Path,
        help="JSON or JSONL question bank (defaults to the sample bank).",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="timed-quiz quiz",
        description="Run timed multiple-choice quiz sessions",
    )
    sub = p.add_subparsers(dest="command", required=True)

    sp_config = sub.add_parser("config", help="Manage quiz.toml")
    config_sub = sp_config.add_subparsers(dest="action", required=True)
    sp_c_init = config_sub.add_parser(
        "init", help="Write the default quiz.toml template"
    )
    sp_c_init.add_argument(
        "--path",
        type=Path,
        help="Destination (defaults to the workspace config directory).",
    )
    sp_c_init.add_argument("--workspace", type=Path)
    sp_c_init.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config.",
    )

    sp_questions = sub.add_parser("questions", help="List the question bank")
    _add_common_options(sp_questions)

    sp_start = sub.add_parser("start", help="Start a timed quiz session")
    _add_common_options(sp_start)
    sp_start.add_argument(
        "--minutes",
        type=int,
        choices=ALLOWED_TIME_LIMITS,
        help="Countdown length in minutes.",
    )
    sp_start.add_argument(
        "--random",
        dest="randomize",
        action="store_true",
        default=None,
        help="Shuffle the question order.",
    )
    sp_start.add_argument(
        "--in-order",
        dest="randomize",
        action="store_false",
        help="Keep the bank's question order.",
    )
    sp_start.add_argument(
        "--ui",
        choices=["console", "tui"],
        default="console",
        help="Line-mode Rich console or full-screen Textual app.",
    )
    sp_start.add_argument("--log-level", help="Log level (default INFO).")
    sp_start.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror debug logs to stderr.",
    )
    return p


def _load(args: argparse.Namespace) -> LoadResult:
    return load_config(
        config_path=args.config,
        workspace_path=args.workspace,
        overrides=ConfigOverrides(
            time_limit_minutes=getattr(args, "minutes", None),
            randomize=getattr(args, "randomize", None),
            bank_path=args.bank,
            log_level=getattr(args, "log_level", None),
        ),
    )


def _read_bank(bank_path: Optional[Path]) -> tuple[Question, ...]:
    if bank_path is None:
        return load_sample_bank()
    return load_bank(bank_path)


def _cmd_config_init(args: argparse.Namespace) -> int:
    if args.path is not None:
        target = args.path.expanduser()
        if not target.is_absolute():
            target = (Path.cwd() / target).resolve()
    else:
        try:
            layout = workspace_mod.ensure_workspace(path=args.workspace)
        except WorkspaceError as exc:
            sys.stderr.write(str(exc) + "\n")
            return 1
        target = layout.path_for("config") / CONFIG_FILENAME

    template = config_templates.get_template("quiz")
    try:
        written = template.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1
    print(f"Wrote quiz config to {written}")
    return 0


def _cmd_questions(args: argparse.Namespace) -> int:
    try:
        settings = _load(args).settings
        bank = _read_bank(settings.bank_path)
    except (QuizConfigError, WorkspaceError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2
    except QuestionBankError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1
    if not bank:
        print("No questions available.")
        return 1
    for number, question in enumerate(bank, start=1):
        keys = ", ".join(question.option_keys())
        print(f"{number}. {question.question_text[:100]} [{keys}]")
    print(f"{len(bank)} question(s)")
    return 0


def _cmd_start(args: argparse.Namespace) -> int:
    try:
        load_result = _load(args)
    except (QuizConfigError, WorkspaceError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2
    settings = load_result.settings

    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=load_result.layout.path_for("logs"),
        level=settings.log_level,
        verbose=bool(getattr(args, "verbose", False)),
    )
    logger.debug(
        "quiz start invoked",
        extra={
            "ui": args.ui,
            "config_path": load_result.config_path,
            "bank_path": settings.bank_path,
        },
    )

    try:
        bank = _read_bank(settings.bank_path)
    except QuestionBankError as exc:
        logger.error("Question bank rejected", extra={"error": str(exc)})
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    try:
        if args.ui == "tui":
            from .view import QuizApp

            QuizApp(bank, settings.quiz).run()
        else:
            run_console_session(
                bank,
                settings.quiz,
                Console(),
                input,
            )
    except EmptyBankError as exc:
        logger.warning("Session not started", extra={"error": str(exc)})
        sys.stderr.write(f"{exc}\n")
        return 1
    logger.info("Quiz command finished", extra={"log_path": log_path})
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.command == "config" and args.action == "init":
        return _cmd_config_init(args)
    if args.command == "questions":
        return _cmd_questions(args)
    if args.command == "start":
        return _cmd_start(args)
    parser.print_help()  # pragma: no cover - argparse enforces choices
    return 2


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())

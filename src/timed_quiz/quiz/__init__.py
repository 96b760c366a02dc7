from ._main import build_arg_parser
from .bank import load_bank, load_sample_bank, parse_question
from .config import (
    ConfigOverrides,
    LoadResult,
    QuizConfigError,
    QuizSettings,
    load_config,
)
from .countdown import ElapsedTicker, format_remaining
from .models import (
    ALLOWED_TIME_LIMITS,
    EmptyBankError,
    Feedback,
    InvalidConfigurationError,
    InvalidOptionError,
    Phase,
    Question,
    QuestionBankError,
    QuizConfiguration,
    QuizError,
)
from .sequence import build_sequence
from .session import QuizSession
from .console import ConsoleRunResult, run_console_session

__all__ = [
    "build_arg_parser",
    "load_bank",
    "load_sample_bank",
    "parse_question",
    "ConfigOverrides",
    "LoadResult",
    "QuizConfigError",
    "QuizSettings",
    "load_config",
    "ElapsedTicker",
    "format_remaining",
    "ALLOWED_TIME_LIMITS",
    "EmptyBankError",
    "Feedback",
    "InvalidConfigurationError",
    "InvalidOptionError",
    "Phase",
    "Question",
    "QuestionBankError",
    "QuizConfiguration",
    "QuizError",
    "build_sequence",
    "QuizSession",
    "ConsoleRunResult",
    "run_console_session",
]

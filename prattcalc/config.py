"""REPL and logging settings"""
import os
from typing import Mapping

PROMPT = ">> "
EXIT_COMMAND = "exit"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
DEFAULT_LOG_LEVEL = "WARNING"


def log_level_from_env(environ: Mapping[str, str] = os.environ) -> str:
    level = environ.get("PRATTCALC_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    return level if level in LOG_LEVELS else DEFAULT_LOG_LEVEL


LOG_LEVEL = log_level_from_env()

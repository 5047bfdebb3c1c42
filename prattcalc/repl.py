import argparse
import logging
import sys
from typing import Optional, TextIO

from prattcalc import config
from prattcalc.parser import ParserError, parse
from prattcalc.runtime import CalcRuntimeError, detect_assignment, evaluate

logger = logging.getLogger(__name__)


def process_line(line: str, variables: dict[str, float]) -> Optional[float]:
    """Parses and runs one line; returns its value, or None for blank lines and assignments"""
    code = line.strip()
    if not code:
        return None
    expression = parse(code)
    assignment = detect_assignment(expression)
    if assignment is not None:
        name, rhs = assignment
        variables[name] = evaluate(rhs, variables)
        logger.debug("%s = %s", name, variables[name])
        return None
    value = evaluate(expression, variables)
    logger.debug("%s => %s", expression, value)
    return value


def run_repl(
    variables: dict[str, float], stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None
) -> None:
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    while True:
        stdout.write(config.PROMPT)
        stdout.flush()
        line = stdin.readline()
        if not line or line.strip() == config.EXIT_COMMAND:
            break

        try:
            value = process_line(line, variables)
        except (ParserError, CalcRuntimeError) as e:
            print(e, file=stdout)
            continue

        if value is not None:
            print(value, file=stdout)


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Single-letter-variable calculator")
    parser.add_argument(
        "expressions",
        nargs="*",
        help="Lines to evaluate in order instead of starting the interactive loop",
    )
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        choices=config.LOG_LEVELS,
        type=str.upper,
        help="Logging level",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level, format=config.LOG_FORMAT)

    variables: dict[str, float] = dict()
    if not args.expressions:
        run_repl(variables)
        return 0

    exit_code = 0
    for code in args.expressions:
        try:
            value = process_line(code, variables)
        except (ParserError, CalcRuntimeError) as e:
            print(e)
            exit_code = 1
            continue
        if value is not None:
            print(value)
    return exit_code


if __name__ == "__main__":
    sys.exit(main())

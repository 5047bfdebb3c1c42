import logging
import math
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from prattcalc.parser import Atom, Expression, Operation, fold

logger = logging.getLogger(__name__)


@dataclass
class CalcRuntimeError(Exception):
    errmsg: str

    def __str__(self) -> str:
        return f"[Runtime error] {self.errmsg}"


def _is_variable_name(c: str) -> bool:
    return c.isascii() and c.isalpha()


def _divide(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


def _is_odd_integer(x: float) -> bool:
    return x.is_integer() and x % 2 == 1


def _power(base: float, exponent: float) -> float:
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -math.inf
        return math.inf
    except ValueError:
        # math.pow rejects 0 ** negative and negative ** fractional
        if base == 0:
            if _is_odd_integer(exponent):
                return math.copysign(math.inf, base)
            return math.inf
        return math.nan


def _root(radicand: float, degree: float) -> float:
    return _power(radicand, _divide(1.0, degree))


OPERATOR_IMPLS: dict[str, Callable[[float, float], float]] = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
    "^": _power,
    "√": _root,
}


def evaluate(expression: Expression, variables: Mapping[str, float]) -> float:
    def eval_atom(atom: Atom) -> float:
        c = atom.char
        if c.isascii() and c.isdigit():
            return float(c)
        if c not in variables:
            raise CalcRuntimeError(f"Undefined variable {c}")
        return variables[c]

    def eval_operation(operation: Operation, lhs: float, rhs: float) -> float:
        impl = OPERATOR_IMPLS.get(operation.operator)
        if impl is None:
            raise CalcRuntimeError(f"Bad operator: {operation.operator}")
        return impl(lhs, rhs)

    return fold(expression, eval_atom, eval_operation)


def detect_assignment(expression: Expression) -> Optional[tuple[str, Expression]]:
    """Returns the target variable and the right-hand side if the root of the tree is ``=``.

    Only the root is inspected, nested assignments are left for ``evaluate`` to reject.
    """
    if not isinstance(expression, Operation) or expression.operator != "=":
        return None
    target = expression.left
    if not isinstance(target, Atom) or not _is_variable_name(target.char):
        raise CalcRuntimeError(f"Not a variable name: {target}")
    logger.debug("Assignment to %s of %s", target.char, expression.right)
    return target.char, expression.right

import logging
from dataclasses import dataclass
from typing import Any, Callable, Union

from prattcalc.tokenizer import Lexer, Token, TokenType, tokenize

logger = logging.getLogger(__name__)


@dataclass
class ParserError(Exception):
    errmsg: str
    code: str
    error_char_idx: int

    def __str__(self) -> str:
        print_start_idx = max(0, self.error_char_idx - 10)
        print_ellipsis_pre = print_start_idx > 0
        print_end_idx = min(len(self.code), self.error_char_idx + 10)
        print_ellipsis_post = print_end_idx < len(self.code)
        return "\n".join(
            [
                f"[Parser error] {self.errmsg}",
                (
                    ("..." if print_ellipsis_pre else "")
                    + f"{self.code[print_start_idx:print_end_idx]}"
                    + ("..." if print_ellipsis_post else "")
                ),
                " " * (self.error_char_idx - print_start_idx + (3 if print_ellipsis_pre else 0)) + "^",
            ]
        )


@dataclass(frozen=True)
class Atom:
    char: str

    def __str__(self) -> str:
        return self.char


@dataclass(frozen=True)
class Operation:
    operator: str
    left: "Expression"
    right: "Expression"

    @property
    def operands(self) -> tuple["Expression", "Expression"]:
        return self.left, self.right

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Operation):
            return NotImplemented
        pairs: list[tuple[Expression, Expression]] = [(self, other)]
        while pairs:
            a, b = pairs.pop()
            if isinstance(a, Operation) and isinstance(b, Operation):
                if a.operator != b.operator:
                    return False
                pairs.append((a.right, b.right))
                pairs.append((a.left, b.left))
            elif a != b:
                return False
        return True

    def __hash__(self) -> int:
        return hash(str(self))

    def __str__(self) -> str:
        return fold(self, str, lambda op, lhs, rhs: f"({op.operator} {lhs} {rhs})")


Expression = Union[Atom, Operation]


def fold(
    expression: Expression,
    on_atom: Callable[[Atom], Any],
    on_operation: Callable[[Operation, Any, Any], Any],
) -> Any:
    """Bottom-up walk of the tree with an explicit stack, so left-deep chains of any length are fine.

    The left subtree is always folded before the right one.
    """
    stack: list[tuple[Expression, bool]] = [(expression, False)]
    results: list[Any] = []
    while stack:
        node, children_done = stack.pop()
        if isinstance(node, Atom):
            results.append(on_atom(node))
        elif not isinstance(node, Operation):
            raise TypeError(f"Unexpected expression type: {node!r}")
        elif children_done:
            rhs = results.pop()
            lhs = results.pop()
            results.append(on_operation(node, lhs, rhs))
        else:
            stack.append((node, True))
            stack.append((node.right, False))
            stack.append((node.left, False))
    return results.pop()


# (left, right); right > left chains to the left, right < left chains to the right
BINDING_POWERS: dict[str, tuple[float, float]] = {
    "=": (0.2, 0.1),
    "+": (1.0, 1.1),
    "-": (1.0, 1.1),
    "*": (2.0, 2.1),
    "/": (2.0, 2.1),
    "^": (3.1, 3.0),
    "√": (3.1, 3.0),
    ".": (4.0, 4.1),
}


def _error(errmsg: str, lexer: Lexer, token: Token) -> ParserError:
    return ParserError(errmsg, code=lexer.code, error_char_idx=token.pos)


def infix_binding_power(op_token: Token, lexer: Lexer) -> tuple[float, float]:
    try:
        return BINDING_POWERS[op_token.lexeme]
    except KeyError:
        raise _error(f"Unknown operator: {op_token.lexeme!r}", lexer, op_token) from None


def parse(code: str) -> Expression:
    lexer = tokenize(code)
    try:
        expression = parse_expression(lexer, 0.0)
    except RecursionError:
        raise _error("Expression is nested too deeply", lexer, lexer.peek()) from None
    logger.debug("Parsed %r as %s", code, expression)
    return expression


def parse_expression(lexer: Lexer, min_bp: float) -> Expression:
    token = lexer.next()
    if token.type is TokenType.ATOM:
        lhs: Expression = Atom(token.lexeme)
    elif token.type is TokenType.OPERATOR and token.lexeme == "(":
        lhs = parse_expression(lexer, 0.0)
        closing = lexer.next()
        if closing.type is not TokenType.OPERATOR or closing.lexeme != ")":
            raise _error("Expected ')'", lexer, closing)
    else:
        raise _error(f"Unexpected token: {token}", lexer, token)

    while True:
        op_token = lexer.peek()
        if op_token.type is TokenType.END:
            break
        if op_token.type is not TokenType.OPERATOR:
            raise _error(f"Operator expected, found {op_token}", lexer, op_token)
        if op_token.lexeme == ")":
            break

        l_bp, r_bp = infix_binding_power(op_token, lexer)
        if l_bp < min_bp:
            break

        # only consume the operator once it is known to belong to this call
        lexer.next()
        rhs = parse_expression(lexer, r_bp)
        lhs = Operation(op_token.lexeme, lhs, rhs)

    return lhs


def parse_canonical(code: str) -> Expression:
    """Reads back the prefix form produced by ``str(expression)``, e.g. ``(+ 1 (* 2 3))``."""
    lexer = tokenize(code)
    try:
        expression = _consume_canonical(lexer)
    except RecursionError:
        raise _error("Expression is nested too deeply", lexer, lexer.peek()) from None
    if not lexer.is_exhausted():
        trailing = lexer.peek()
        raise _error(f"Unexpected trailing token: {trailing}", lexer, trailing)
    return expression


def _consume_canonical(lexer: Lexer) -> Expression:
    token = lexer.next()
    if token.type is TokenType.ATOM:
        return Atom(token.lexeme)
    if token.type is not TokenType.OPERATOR or token.lexeme != "(":
        raise _error(f"Unexpected token: {token}", lexer, token)

    operator = lexer.next()
    if operator.type is not TokenType.OPERATOR or operator.lexeme not in BINDING_POWERS:
        raise _error(f"Operator expected, found {operator}", lexer, operator)
    left = _consume_canonical(lexer)
    right = _consume_canonical(lexer)

    closing = lexer.next()
    if closing.type is not TokenType.OPERATOR or closing.lexeme != ")":
        raise _error("Expected ')'", lexer, closing)
    return Operation(operator.lexeme, left, right)


def to_infix(expression: Expression) -> str:
    """Fully parenthesized infix form, ``(1 + (2 * 3))``; ``parse`` maps it back to the same tree."""
    return fold(expression, str, lambda op, lhs, rhs: f"({lhs} {op.operator} {rhs})")

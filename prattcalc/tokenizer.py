import enum
from dataclasses import dataclass


class PrintableEnum(enum.Enum):
    def __str__(self) -> str:
        return self.name

    __repr__ = __str__


class TokenType(PrintableEnum):
    ATOM = enum.auto()
    OPERATOR = enum.auto()
    END = enum.auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    lexeme: str
    pos: int

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


WHITESPACE = " \t\n\r\f"


def _is_atom_char(c: str) -> bool:
    return c.isascii() and c.isalnum()


class Lexer:
    """Token stream over a single line of input.

    Tokens are stored in reverse order so that taking the next one is a plain ``list.pop()``.
    Once the stream runs dry every call to ``next``/``peek`` returns a fresh END token.
    """

    def __init__(self, code: str, tokens: list[Token]) -> None:
        self.code = code
        self._tokens = list(reversed(tokens))

    def _end(self) -> Token:
        return Token(type=TokenType.END, lexeme="", pos=len(self.code))

    def next(self) -> Token:
        if self._tokens:
            return self._tokens.pop()
        return self._end()

    def peek(self) -> Token:
        if self._tokens:
            return self._tokens[-1]
        return self._end()

    def is_exhausted(self) -> bool:
        return not self._tokens

    def __len__(self) -> int:
        return len(self._tokens)


def tokenize(code: str) -> Lexer:
    tokens: list[Token] = []
    for i, c in enumerate(code):
        if c in WHITESPACE:
            continue
        if _is_atom_char(c):
            tokens.append(Token(type=TokenType.ATOM, lexeme=c, pos=i))
        else:
            tokens.append(Token(type=TokenType.OPERATOR, lexeme=c, pos=i))
    return Lexer(code, tokens)

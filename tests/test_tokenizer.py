import pytest

from prattcalc.tokenizer import Token, TokenType, tokenize


def _drain(code: str) -> list[Token]:
    lexer = tokenize(code)
    tokens = []
    while lexer.peek().type is not TokenType.END:
        tokens.append(lexer.next())
    return tokens


@pytest.mark.parametrize(
    "code, expected_tokens",
    [
        pytest.param("1", "<ATOM>1"),
        pytest.param("a + 1", "<ATOM>a <OPERATOR>+ <ATOM>1"),
        pytest.param("(Z*9)", "<OPERATOR>( <ATOM>Z <OPERATOR>* <ATOM>9 <OPERATOR>)"),
        pytest.param("\t2√x\n", "<ATOM>2 <OPERATOR>√ <ATOM>x"),
        pytest.param("12", "<ATOM>1 <ATOM>2"),
        pytest.param("ab", "<ATOM>a <ATOM>b"),
        pytest.param("é % ²", "<OPERATOR>é <OPERATOR>% <OPERATOR>²"),
        pytest.param(" \r\n\t\f ", ""),
        pytest.param("1\v+", "<ATOM>1 <OPERATOR>\v <OPERATOR>+"),
    ],
)
def test_tokenize(code: str, expected_tokens: str) -> None:
    assert " ".join(str(t) for t in _drain(code)) == expected_tokens


def test_tokens_keep_source_positions() -> None:
    assert [t.pos for t in _drain(" a +  1")] == [1, 3, 6]


def test_peek_does_not_consume() -> None:
    lexer = tokenize("a+")
    assert lexer.peek() == Token(TokenType.ATOM, "a", 0)
    assert lexer.peek() == Token(TokenType.ATOM, "a", 0)
    assert len(lexer) == 2
    assert lexer.next() == Token(TokenType.ATOM, "a", 0)
    assert lexer.next() == Token(TokenType.OPERATOR, "+", 1)


def test_end_of_input_is_repeated() -> None:
    lexer = tokenize("7 ")
    lexer.next()
    assert lexer.is_exhausted()
    for _ in range(3):
        assert lexer.peek() == Token(TokenType.END, "", 2)
        assert lexer.next() == Token(TokenType.END, "", 2)
    assert len(lexer) == 0

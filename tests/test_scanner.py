import pytest

from treelox.scanner import Scanner
from treelox.tokens import TokenType as TT


def scan(source, lox):
    return Scanner(source, lox).scan_tokens()


def types(tokens):
    return [token.type for token in tokens]


def test_arithmetic_expression(lox):
    tokens = scan("1 + 2 * 3", lox)

    assert types(tokens) == [TT.NUMBER, TT.PLUS, TT.NUMBER, TT.STAR, TT.NUMBER, TT.EOF]
    assert [t.literal for t in tokens if t.type == TT.NUMBER] == [1.0, 2.0, 3.0]
    assert not lox.had_error


def test_two_character_operators_take_longest_match(lox):
    tokens = scan("!= ! == = <= < >= >", lox)

    assert types(tokens) == [
        TT.BANG_EQUAL, TT.BANG, TT.EQUAL_EQUAL, TT.EQUAL,
        TT.LESS_EQUAL, TT.LESS, TT.GREATER_EQUAL, TT.GREATER, TT.EOF,
    ]


def test_single_character_tokens(lox):
    tokens = scan("(){},.-+;/*", lox)

    assert [t.lexeme for t in tokens[:-1]] == list("(){},.-+;/*")
    assert tokens[-1].type == TT.EOF


def test_keywords_are_case_sensitive_exact_matches(lox):
    tokens = scan("and andy class Class _x1 nil", lox)

    assert types(tokens) == [
        TT.AND, TT.IDENTIFIER, TT.CLASS, TT.IDENTIFIER, TT.IDENTIFIER, TT.NIL, TT.EOF,
    ]
    assert tokens[4].lexeme == "_x1"


def test_numbers_need_digits_on_both_sides_of_the_dot(lox):
    tokens = scan("12.5 3. .5", lox)

    assert types(tokens) == [TT.NUMBER, TT.NUMBER, TT.DOT, TT.DOT, TT.NUMBER, TT.EOF]
    assert tokens[0].literal == 12.5
    assert tokens[1].literal == 3.0
    assert tokens[4].literal == 5.0


def test_string_may_span_lines(lox):
    tokens = scan('"a\nb" x', lox)

    assert tokens[0].type == TT.STRING
    assert tokens[0].literal == "a\nb"
    assert tokens[0].lexeme == '"a\nb"'
    assert tokens[1].type == TT.IDENTIFIER
    assert tokens[1].line == 2


def test_unterminated_string_reports_starting_line(lox):
    tokens = scan('\n"ab\ncd', lox)

    assert types(tokens) == [TT.EOF]
    assert lox.had_error
    assert lox.stderr.getvalue() == "[line 2] Error: Unterminated string.\n"


def test_comments_and_whitespace_are_skipped(lox):
    tokens = scan("// a comment\n\tprint // another\r\n", lox)

    assert types(tokens) == [TT.PRINT, TT.EOF]
    assert tokens[0].line == 2
    assert tokens[1].line == 3


def test_slash_alone_is_division(lox):
    assert types(scan("4 / 2", lox)) == [TT.NUMBER, TT.SLASH, TT.NUMBER, TT.EOF]


def test_unexpected_characters_do_not_stop_the_scan(lox):
    tokens = scan("@ 1\n# 2", lox)

    assert types(tokens) == [TT.NUMBER, TT.NUMBER, TT.EOF]
    assert lox.had_error
    assert lox.stderr.getvalue() == (
        "[line 1] Error: Unexpected character.\n"
        "[line 2] Error: Unexpected character.\n"
    )


def test_tokens_are_immutable(lox):
    token = scan("x", lox)[0]

    with pytest.raises(AttributeError):
        token.lexeme = "y"

import pytest

from minilang import LexicalError, Token, TokenKind, tokenize


def kinds(source):
    return [t.kind for t in tokenize(source)]


def test_decimal_number_is_single_token():
    assert tokenize("3.14") == [
        Token(TokenKind.NUMBER, "3.14", 1, 1),
        Token(TokenKind.EOF, "", 1, 5),
    ]


def test_keyword_gets_its_own_kind():
    assert kinds("while") == [TokenKind.WHILE, TokenKind.EOF]
    assert kinds("whilex") == [TokenKind.IDENTIFIER, TokenKind.EOF]


def test_string_keyword_and_string_literal_are_distinct():
    tokens = tokenize('string "string"')
    assert tokens[0].kind == TokenKind.STRING
    assert tokens[1].kind == TokenKind.STRING_LITERAL
    assert tokens[1].text == "string"


def test_empty_source_is_only_eof():
    assert tokenize("") == [Token(TokenKind.EOF, "", 1, 1)]


def test_two_character_operators():
    assert kinds("== != <= >= && || = ! < >")[:-1] == [
        TokenKind.EQUAL_EQUAL,
        TokenKind.BANG_EQUAL,
        TokenKind.LESS_EQUAL,
        TokenKind.GREATER_EQUAL,
        TokenKind.AND,
        TokenKind.OR,
        TokenKind.EQUAL,
        TokenKind.BANG,
        TokenKind.LESS,
        TokenKind.GREATER,
    ]
    assert [t.text for t in tokenize("a==b")] == ["a", "==", "b", ""]


def test_columns_point_at_lexeme_start():
    tokens = tokenize("var total = 10;")
    assert [(t.text, t.column) for t in tokens] == [
        ("var", 1), ("total", 5), ("=", 11), ("10", 13), (";", 15), ("", 16),
    ]


def test_newline_advances_line_and_resets_column():
    tokens = tokenize("var a;\n  a = 1;")
    a = tokens[3]
    assert (a.text, a.line, a.column) == ("a", 2, 3)


def test_comments_are_discarded():
    tokens = tokenize("// a comment\nx / y")
    assert [(t.kind, t.line) for t in tokens] == [
        (TokenKind.IDENTIFIER, 2),
        (TokenKind.SLASH, 2),
        (TokenKind.IDENTIFIER, 2),
        (TokenKind.EOF, 2),
    ]


def test_string_literal_excludes_quotes():
    tokens = tokenize('var s = "hi there";')
    assert tokens[3] == Token(TokenKind.STRING_LITERAL, "hi there", 1, 9)


def test_string_may_span_lines():
    tokens = tokenize('"a\nb" x')
    assert tokens[0].text == "a\nb"
    assert (tokens[1].text, tokens[1].line, tokens[1].column) == ("x", 2, 4)


def test_number_without_fraction_digits_leaves_dot():
    assert kinds("1.") == [TokenKind.NUMBER, TokenKind.DOT, TokenKind.EOF]


def test_digit_prefixed_name_splits():
    tokens = tokenize("1x")
    assert [(t.kind, t.text) for t in tokens[:2]] == [
        (TokenKind.NUMBER, "1"),
        (TokenKind.IDENTIFIER, "x"),
    ]


def test_unexpected_character():
    with pytest.raises(LexicalError) as exc:
        tokenize("var x = @;")
    assert exc.value.message == "Unexpected character: @"
    assert (exc.value.line, exc.value.column) == (1, 9)


def test_single_ampersand_is_rejected():
    with pytest.raises(LexicalError):
        tokenize("a & b")


def test_unterminated_string_reports_opening_quote():
    with pytest.raises(LexicalError) as exc:
        tokenize('x;\nvar s = "abc')
    assert exc.value.message == "Unterminated string"
    assert (exc.value.line, exc.value.column) == (2, 9)

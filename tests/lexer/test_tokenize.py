import pytest

from plotscript.exceptions import ErrorCode, LexError
from plotscript.lexer import TokenKind, tokenize


def kinds_and_texts(source):
    return [(t.kind, t.text) for t in tokenize(source)[:-1]]


def test_tokenizes_a_simple_assignment():
    tokens = tokenize("x = 10;")
    assert [(t.kind, t.text) for t in tokens] == [
        (TokenKind.IDENTIFIER, "x"),
        (TokenKind.OPERATOR, "="),
        (TokenKind.NUMBER, "10"),
        (TokenKind.PUNCTUATION, ";"),
        (TokenKind.EOF, ""),
    ]


def test_token_positions_are_one_based():
    tokens = tokenize("a\n  bb = 1")
    assert (tokens[0].line, tokens[0].column) == (1, 1)
    assert (tokens[1].line, tokens[1].column) == (2, 3)
    assert (tokens[1].end_line, tokens[1].end_column) == (2, 5)


def test_single_eof_token_terminates_the_stream():
    tokens = tokenize("")
    assert len(tokens) == 1
    assert tokens[0].kind is TokenKind.EOF


@pytest.mark.parametrize(
    "word, kind",
    [
        pytest.param("if", TokenKind.KEYWORD, id="kw_if"),
        pytest.param("while", TokenKind.KEYWORD, id="kw_while"),
        pytest.param("func", TokenKind.KEYWORD, id="kw_func"),
        pytest.param("global", TokenKind.KEYWORD, id="kw_global"),
        pytest.param("true", TokenKind.KEYWORD, id="kw_true"),
        pytest.param("iffy", TokenKind.IDENTIFIER, id="id_keyword_prefix"),
        pytest.param("_hero2", TokenKind.IDENTIFIER, id="id_underscore"),
    ],
)
def test_keywords_are_distinguished_from_identifiers(word, kind):
    assert tokenize(word)[0].kind is kind


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param("42", 42, id="integer"),
        pytest.param("3.25", 3.25, id="float"),
        pytest.param("0", 0, id="zero"),
    ],
)
def test_number_literals_are_decoded(source, expected):
    token = tokenize(source)[0]
    assert token.value == expected
    assert type(token.value) is type(expected)


@pytest.mark.parametrize(
    "source, expected",
    [
        pytest.param(r'"hello"', "hello", id="plain"),
        pytest.param(r'"line\nbreak"', "line\nbreak", id="newline"),
        pytest.param(r'"tab\there"', "tab\there", id="tab"),
        pytest.param(r'"say \"hi\""', 'say "hi"', id="quote"),
        pytest.param(r'"back\\slash"', "back\\slash", id="backslash"),
        pytest.param('""', "", id="empty"),
    ],
)
def test_string_escapes_are_decoded(source, expected):
    token = tokenize(source)[0]
    assert token.kind is TokenKind.STRING
    assert token.value == expected


def test_two_character_operators_are_single_tokens():
    assert kinds_and_texts("a <= b && c != d || !e") == [
        (TokenKind.IDENTIFIER, "a"),
        (TokenKind.OPERATOR, "<="),
        (TokenKind.IDENTIFIER, "b"),
        (TokenKind.OPERATOR, "&&"),
        (TokenKind.IDENTIFIER, "c"),
        (TokenKind.OPERATOR, "!="),
        (TokenKind.IDENTIFIER, "d"),
        (TokenKind.OPERATOR, "||"),
        (TokenKind.OPERATOR, "!"),
        (TokenKind.IDENTIFIER, "e"),
    ]


def test_comments_and_whitespace_are_dropped():
    source = """
    // opening scene
    x = 1 // trailing comment
    """
    assert kinds_and_texts(source) == [(TokenKind.IDENTIFIER, "x"), (TokenKind.OPERATOR, "="), (TokenKind.NUMBER, "1")]


def test_division_is_not_mistaken_for_a_comment():
    assert kinds_and_texts("a / b") == [(TokenKind.IDENTIFIER, "a"), (TokenKind.OPERATOR, "/"), (TokenKind.IDENTIFIER, "b")]


@pytest.mark.parametrize(
    "source, error_code",
    [
        pytest.param("x = @", ErrorCode.LEX_INVALID_CHARACTER, id="invalid_char"),
        pytest.param("a & b", ErrorCode.LEX_INVALID_CHARACTER, id="single_ampersand"),
        pytest.param('x = "unterminated', ErrorCode.LEX_UNTERMINATED_STRING, id="unterminated_string"),
        pytest.param('x = "two\nlines"', ErrorCode.LEX_UNTERMINATED_STRING, id="newline_in_string"),
        pytest.param("x = 1.2.3", ErrorCode.LEX_MALFORMED_NUMBER, id="two_dots"),
        pytest.param("x = 12abc", ErrorCode.LEX_MALFORMED_NUMBER, id="letters_in_number"),
        pytest.param("x = 5.", ErrorCode.LEX_MALFORMED_NUMBER, id="trailing_dot"),
        pytest.param(r'x = "bad \q"', ErrorCode.LEX_INVALID_ESCAPE, id="unknown_escape"),
    ],
)
def test_lexical_errors(source, error_code):
    with pytest.raises(LexError) as excinfo:
        tokenize(source)
    assert excinfo.value.code == error_code


def test_lex_error_reports_the_position():
    with pytest.raises(LexError) as excinfo:
        tokenize("x = 1\ny = #")
    assert excinfo.value.line == 2
    assert excinfo.value.column == 5

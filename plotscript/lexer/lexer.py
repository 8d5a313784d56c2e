import re
from importlib.resources import files as pkg_files
from typing import List

from lark import Lark
from lark import Token as LarkToken
from lark.exceptions import UnexpectedCharacters

from plotscript.config.config import ESCAPE_SEQUENCES, RESERVED_KEYWORDS
from plotscript.exceptions import ErrorCode, LexError
from plotscript.parser.classes import Span

from .tokens import Token, TokenKind

INTEGER_REGEX = re.compile(r"[0-9]+")
FLOAT_REGEX = re.compile(r"[0-9]+\.[0-9]+")

# The path is relative to the 'plotscript.lexer' subpackage
plotscript_grammar = (pkg_files("plotscript.lexer") / "plotscript.lark").read_text()

# parser="lalr" with the basic lexer is what makes Lark.lex() available;
# the generated parser itself is never used.
LARK_LEXER = Lark(plotscript_grammar, start="start", parser="lalr", lexer="basic")

_KIND_FOR_TERMINAL = {
    "NAME": TokenKind.IDENTIFIER,
    "NUMBER": TokenKind.NUMBER,
    "STRING": TokenKind.STRING,
    "OPERATOR": TokenKind.OPERATOR,
    "PUNCT": TokenKind.PUNCTUATION,
}


def _span_of(token: LarkToken) -> Span:
    return Span(s_line=token.line, s_col=token.column, e_line=token.end_line, e_col=token.end_column)


def _decode_string(token: LarkToken) -> str:
    raw = token.value[1:-1]
    out = []
    i = 0
    while i < len(raw):
        char = raw[i]
        if char != "\\":
            out.append(char)
            i += 1
            continue
        escaped = raw[i + 1]
        if escaped not in ESCAPE_SEQUENCES:
            span = Span(s_line=token.line, s_col=token.column + i + 1, e_line=token.line, e_col=token.column + i + 3)
            raise LexError(ErrorCode.LEX_INVALID_ESCAPE, span=span, char=escaped)
        out.append(ESCAPE_SEQUENCES[escaped])
        i += 2
    return "".join(out)


def _decode_number(token: LarkToken):
    text = token.value
    if INTEGER_REGEX.fullmatch(text):
        return int(text)
    if FLOAT_REGEX.fullmatch(text):
        return float(text)
    raise LexError(ErrorCode.LEX_MALFORMED_NUMBER, span=_span_of(token), text=text)


def _convert(token: LarkToken) -> Token:
    kind = _KIND_FOR_TERMINAL[token.type]
    value = token.value
    if kind is TokenKind.IDENTIFIER and value in RESERVED_KEYWORDS:
        kind = TokenKind.KEYWORD
    elif kind is TokenKind.NUMBER:
        value = _decode_number(token)
    elif kind is TokenKind.STRING:
        value = _decode_string(token)
    return Token(
        kind=kind,
        text=token.value,
        value=value,
        line=token.line,
        column=token.column,
        end_line=token.end_line,
        end_column=token.end_column,
    )


def _end_of_input(source: str) -> Token:
    lines = source.split("\n")
    line, column = len(lines), len(lines[-1]) + 1
    return Token(kind=TokenKind.EOF, text="", value="", line=line, column=column, end_line=line, end_column=column)


def tokenize(source: str) -> List[Token]:
    """
    Turns script source text into a token list terminated by a single EOF token.
    Whitespace and `//` comments are dropped; every token keeps its 1-based
    line and column so later stages can point at the offending code.
    """
    tokens: List[Token] = []
    try:
        for lark_token in LARK_LEXER.lex(source):
            tokens.append(_convert(lark_token))
    except UnexpectedCharacters as e:
        span = Span(s_line=e.line, s_col=e.column, e_line=e.line, e_col=e.column + 1)
        if e.char == '"':
            raise LexError(ErrorCode.LEX_UNTERMINATED_STRING, span=span) from e
        raise LexError(ErrorCode.LEX_INVALID_CHARACTER, span=span, char=e.char) from e
    tokens.append(_end_of_input(source))
    return tokens

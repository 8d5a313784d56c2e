from dataclasses import dataclass
from enum import Enum
from typing import Union


class TokenKind(Enum):
    IDENTIFIER = "IDENTIFIER"
    KEYWORD = "KEYWORD"
    NUMBER = "NUMBER"
    STRING = "STRING"
    OPERATOR = "OPERATOR"
    PUNCTUATION = "PUNCTUATION"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A single lexeme. `value` holds the decoded literal for numbers and strings."""

    kind: TokenKind
    text: str
    value: Union[int, float, str]
    line: int
    column: int
    end_line: int
    end_column: int

    def is_a(self, kind: TokenKind, text: str = None) -> bool:
        return self.kind is kind and (text is None or self.text == text)

    def describe(self) -> str:
        if self.kind is TokenKind.EOF:
            return "the end of the script"
        return f"'{self.text}'"

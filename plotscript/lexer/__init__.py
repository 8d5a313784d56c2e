from .lexer import tokenize
from .tokens import Token, TokenKind

__all__ = ["tokenize", "Token", "TokenKind"]

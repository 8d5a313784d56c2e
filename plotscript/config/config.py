"""
Static configuration data for the PlotScript engine.
This includes reserved words, operator tables, token names and the
runtime limits a host can tune through `EngineConfig`.
Builtin signatures are loaded from the 'plotscript.functions' package.
"""

import json
from typing import Optional

from pydantic import BaseModel, Field

RESERVED_KEYWORDS = {"if", "else", "while", "break", "continue", "return", "global", "func", "true", "false"}

# Binary operator precedence levels, lowest first. Assignment and the
# conditional operator sit below these and are handled by the parser directly.
BINARY_PRECEDENCE = [
    ("||",),
    ("&&",),
    ("==", "!="),
    ("<", "<=", ">", ">="),
    ("+", "-"),
    ("*", "/", "%"),
]

UNARY_OPERATORS = {"-", "!"}
ARITHMETIC_OPERATORS = {"+", "-", "*", "/", "%"}
RELATIONAL_OPERATORS = {"<", "<=", ">", ">="}
EQUALITY_OPERATORS = {"==", "!="}
LOGICAL_OPERATORS = {"&&", "||"}

# Combined depth of nested blocks, brackets and unary operators the parser accepts.
MAX_NESTING_DEPTH = 48

BRACKET_PAIRS = {"(": ")", "[": "]", "{": "}"}

ESCAPE_SEQUENCES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", '"': '"', "\\": "\\"}

# A mapping from token kinds and lexemes to friendly, human-readable names.
FRIENDLY_TOKEN_NAMES = {
    "IDENTIFIER": "a variable or function name",
    "NUMBER": "a number",
    "STRING": "a string literal",
    "EOF": "the end of the script",
    "expression": "a value or expression",
    "(": "an opening parenthesis '('",
    ")": "a closing parenthesis ')'",
    "[": "an opening bracket '['",
    "]": "a closing bracket ']'",
    "{": "an opening brace '{'",
    "}": "a closing brace '}'",
    ",": "a comma ','",
    ";": "a semicolon ';'",
    "=": "an equals sign '='",
    ":": "a colon ':'",
}


class EngineConfig(BaseModel):
    """Runtime limits and behaviour switches for a `ScriptEngine`."""

    max_call_depth: int = Field(default=256, ge=1)
    default_step_budget: Optional[int] = Field(default=10_000, ge=1)
    strict_variables: bool = True
    random_seed: Optional[int] = None

    @classmethod
    def from_file(cls, path: str) -> "EngineConfig":
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate(json.load(f))

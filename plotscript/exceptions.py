"""
Custom exception types for the PlotScript engine.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from plotscript.parser.classes import Span


class ErrorCode(Enum):

    # --- Lexical Errors ---
    LEX_INVALID_CHARACTER = "Invalid character '{char}' found."
    LEX_UNTERMINATED_STRING = "Unterminated string literal."
    LEX_MALFORMED_NUMBER = "Malformed numeric literal '{text}'."
    LEX_INVALID_ESCAPE = "Invalid escape sequence '\\{char}' in string literal."

    # --- Syntax Errors ---
    SYNTAX_UNEXPECTED_TOKEN = "Syntax Error: Expected {expected}, but found {found}."
    SYNTAX_UNMATCHED_BRACKET = "Syntax Error: Unmatched bracket '{char}'."
    SYNTAX_INVALID_ASSIGNMENT_TARGET = "Syntax Error: Cannot assign to this expression."
    SYNTAX_BREAK_OUTSIDE_LOOP = "Syntax Error: '{keyword}' used outside of a loop."
    SYNTAX_NESTED_FUNCTION = "Syntax Error: Function '{name}' must be defined at the top level of a script."
    SYNTAX_NESTING_TOO_DEEP = "Syntax Error: Code is nested more than {limit} levels deep."
    SYNTAX_AMBIGUOUS_LINE_BREAK = "Syntax Error: A line starting with '{token}' would continue the expression on the line above. End the previous statement with ';' or join the lines."
    DUPLICATE_PARAMETER = "Parameter '{name}' is declared more than once in function '{func_name}'."
    DUPLICATE_FUNCTION = "Function '{name}' is defined more than once."
    REDEFINE_BUILTIN_FUNCTION = "Cannot redefine built-in function '{name}'."

    # --- Runtime Errors ---
    TYPE_MISMATCH = "{details}"
    DIVIDE_BY_ZERO = "Division by zero in '{op}'."
    NUMERIC_OVERFLOW = "Numeric overflow: {details}"
    INDEX_OUT_OF_RANGE = "Index {index} is out of range for an array of length {length}."
    UNKNOWN_FUNCTION = "Unknown function '{name}'."
    ARITY_MISMATCH = "Function '{name}' expects {expected} argument(s), but got {provided}."
    UNDEFINED_VARIABLE = "Variable '{name}' is not defined."
    STACK_OVERFLOW = "Maximum call depth of {limit} exceeded while calling '{name}'."
    BUILTIN_FAILURE = "Built-in '{name}' failed: {message}"

    # --- Host Errors ---
    UNKNOWN_SCRIPT = "No script named '{name}' is loaded."
    UNKNOWN_INSTANCE = "No script instance with id {instance_id}."
    INVALID_BUILTIN_SIGNATURE = "Invalid signature for built-in '{name}': {details}"


class PlotScriptError(Exception):
    def __init__(
        self,
        code: ErrorCode,
        span: Optional["Span"] = None,
        script_name: Optional[str] = None,
        **kwargs,
    ):
        self.code = code
        self.span = span
        self.script_name = script_name
        self.details = kwargs
        self.core_message = code.value.format(**kwargs)
        super().__init__(self._format())

    @property
    def line(self) -> int:
        return self.span.s_line if self.span else -1

    @property
    def column(self) -> int:
        return self.span.s_col if self.span else -1

    def _format(self) -> str:
        location_prefix = ""
        if self.span and self.script_name:
            location_prefix = f"Error in '{self.script_name}' (Line: {self.span.s_line}, Column: {self.span.s_col}):\n"
        elif self.span:
            location_prefix = f"Error at Line: {self.span.s_line}, Column: {self.span.s_col}:\n"
        elif self.script_name:
            location_prefix = f"Error in '{self.script_name}': "
        return location_prefix + self.core_message

    @property
    def message(self) -> str:
        return self._format()

    def locate(self, span: Optional["Span"], script_name: Optional[str]) -> "PlotScriptError":
        """Fills in location data the raising code did not know about."""
        if self.span is None:
            self.span = span
        if self.script_name is None:
            self.script_name = script_name
        self.args = (self._format(),)
        return self


class LexError(PlotScriptError):
    """Malformed source text. Surfaced at load time."""


class ParseError(PlotScriptError):
    """Structural grammar violation. Surfaced at load time."""

    def __init__(self, code: ErrorCode, span: Optional["Span"] = None, script_name: Optional[str] = None, expected: str = "", found: str = "", **kwargs):
        self.expected = expected
        self.found = found
        if code is ErrorCode.SYNTAX_UNEXPECTED_TOKEN:
            kwargs.update(expected=expected, found=found)
        super().__init__(code, span, script_name, **kwargs)


class ScriptRuntimeError(PlotScriptError):
    """Aborts the offending script instance only."""

    @property
    def kind(self) -> ErrorCode:
        return self.code


class BuiltinError(Exception):
    """Raised by host collaborators when a builtin request cannot be honoured."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class EngineError(PlotScriptError):
    """Host-side misuse of the engine API (unknown script or instance)."""

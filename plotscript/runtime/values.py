"""
Dynamically-typed runtime values.

`Value` is a closed tagged union: every operator and builtin checks the tag
explicitly instead of relying on Python's own duck typing (in particular,
Python's `bool` is an `int`, which must never leak into script semantics).
Arrays are stored as tuples, so they behave as values: binding, passing and
element assignment never share storage between two variables.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple

from plotscript.exceptions import ErrorCode, ScriptRuntimeError


class ValueType(Enum):
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"
    ARRAY = "array"
    VOID = "void"


NUMERIC_TYPES = (ValueType.INTEGER, ValueType.FLOAT)


@dataclass(frozen=True)
class Value:
    type: ValueType
    data: Any = None

    # --- Constructors ---
    @staticmethod
    def integer(n: int) -> "Value":
        return Value(ValueType.INTEGER, int(n))

    @staticmethod
    def float_(x: float) -> "Value":
        return Value(ValueType.FLOAT, float(x))

    @staticmethod
    def string(s: str) -> "Value":
        return Value(ValueType.STRING, str(s))

    @staticmethod
    def boolean(b: bool) -> "Value":
        return TRUE if b else FALSE

    @staticmethod
    def array(items) -> "Value":
        return Value(ValueType.ARRAY, tuple(items))

    @staticmethod
    def of(obj: Any) -> "Value":
        """Wraps a plain Python object. `None` becomes void; lists and tuples become arrays."""
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return VOID
        if isinstance(obj, bool):
            return Value.boolean(obj)
        if isinstance(obj, int):
            return Value.integer(obj)
        if isinstance(obj, float):
            return Value.float_(obj)
        if isinstance(obj, str):
            return Value.string(obj)
        if isinstance(obj, (list, tuple)):
            return Value.array(Value.of(item) for item in obj)
        raise TypeError(f"Cannot convert {type(obj).__name__} to a script value")

    # --- Inspection ---
    @property
    def is_numeric(self) -> bool:
        return self.type in NUMERIC_TYPES

    @property
    def items(self) -> Tuple["Value", ...]:
        return self.data

    def to_python(self) -> Any:
        if self.type is ValueType.ARRAY:
            return [item.to_python() for item in self.data]
        return self.data

    def stringify(self) -> str:
        """The fixed stringification rule used by `+` concatenation and `str()`."""
        if self.type is ValueType.BOOL:
            return "true" if self.data else "false"
        if self.type is ValueType.VOID:
            return ""
        if self.type is ValueType.FLOAT:
            return repr(self.data)
        if self.type is ValueType.ARRAY:
            return "[" + ", ".join(item.stringify() for item in self.data) + "]"
        try:
            return str(self.data)
        except ValueError:
            # Python caps int-to-str conversion at a fixed number of digits.
            raise ScriptRuntimeError(ErrorCode.NUMERIC_OVERFLOW, details="the integer has too many digits to convert to a string.")

    def __repr__(self) -> str:
        return f"Value({self.type.value}, {self.data!r})"


VOID = Value(ValueType.VOID)
TRUE = Value(ValueType.BOOL, True)
FALSE = Value(ValueType.BOOL, False)


def type_name(value: Value) -> str:
    return value.type.value

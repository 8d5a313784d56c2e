"""
Signatures for core arithmetic, conversion, string and array builtins.
These never touch the host and never suspend.
"""

from plotscript.exceptions import BuiltinError
from plotscript.runtime.values import Value


def _random(ctx, low, high):
    if low > high:
        raise BuiltinError(f"lower bound {low} is greater than upper bound {high}")
    if isinstance(low, int) and isinstance(high, int):
        return ctx.rng.randint(low, high)
    return ctx.rng.uniform(low, high)


def _to_int(ctx, value):
    if isinstance(value, bool) or isinstance(value, list):
        raise BuiltinError(f"cannot convert a {Value.of(value).type.value} to an integer")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise BuiltinError(f"'{value}' is not a whole number")
    if value is None:
        raise BuiltinError("cannot convert void to an integer")
    return int(value)


def _to_float(ctx, value):
    if isinstance(value, bool) or isinstance(value, list):
        raise BuiltinError(f"cannot convert a {Value.of(value).type.value} to a float")
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise BuiltinError(f"'{value}' is not a number")
    if value is None:
        raise BuiltinError("cannot convert void to a float")
    return float(value)


def _substring(ctx, text, start, length):
    if start < 0 or length < 0 or start + length > len(text):
        raise BuiltinError(f"range [{start}, {start + length}) is outside a string of length {len(text)}")
    return text[start : start + length]


def _make_array(ctx, size, fill):
    if size < 0:
        raise BuiltinError(f"array size cannot be negative (got {size})")
    return [fill] * size


SIGNATURES = {
    "random": {
        "variadic": False,
        "arg_types": ["number", "number"],
        "return_type": "number",
        "handler": _random,
        "doc": {
            "summary": "Draws a random number between two bounds, inclusive. Integers give an integer; any float bound gives a float.",
            "params": [{"name": "min", "desc": "The lower bound."}, {"name": "max", "desc": "The upper bound."}],
            "returns": "A random number in [min, max].",
        },
    },
    "abs": {
        "variadic": False,
        "arg_types": ["number"],
        "return_type": "number",
        "handler": lambda ctx, x: abs(x),
        "doc": {"summary": "Absolute value of a number.", "params": [{"name": "x", "desc": "The number."}], "returns": "|x|, keeping its type."},
    },
    "min": {
        "variadic": True,
        "min_args": 1,
        "arg_types": ["number"],
        "return_type": "number",
        "handler": lambda ctx, *xs: min(xs),
        "doc": {"summary": "The smallest of one or more numbers.", "params": [{"name": "values", "desc": "Numbers to compare."}], "returns": "The smallest value."},
    },
    "max": {
        "variadic": True,
        "min_args": 1,
        "arg_types": ["number"],
        "return_type": "number",
        "handler": lambda ctx, *xs: max(xs),
        "doc": {"summary": "The largest of one or more numbers.", "params": [{"name": "values", "desc": "Numbers to compare."}], "returns": "The largest value."},
    },
    "int": {
        "variadic": False,
        "arg_types": ["any"],
        "return_type": "integer",
        "handler": _to_int,
        "doc": {
            "summary": "Converts a number (truncating toward zero) or a numeric string to an integer.",
            "params": [{"name": "value", "desc": "A number or a string holding a whole number."}],
            "returns": "An integer.",
        },
    },
    "float": {
        "variadic": False,
        "arg_types": ["any"],
        "return_type": "float",
        "handler": _to_float,
        "doc": {
            "summary": "Converts a number or a numeric string to a float.",
            "params": [{"name": "value", "desc": "A number or a string holding a number."}],
            "returns": "A float.",
        },
    },
    "str": {
        "variadic": False,
        "arg_types": ["any"],
        "return_type": "string",
        "handler": lambda ctx, value: Value.of(value).stringify(),
        "doc": {"summary": "Converts any value to its display string.", "params": [{"name": "value", "desc": "The value to convert."}], "returns": "A string."},
    },
    "string_length": {
        "variadic": False,
        "arg_types": ["string"],
        "return_type": "integer",
        "handler": lambda ctx, text: len(text),
        "doc": {"summary": "Number of characters in a string.", "params": [{"name": "text", "desc": "The string."}], "returns": "Its length."},
    },
    "substring": {
        "variadic": False,
        "arg_types": ["string", "integer", "integer"],
        "return_type": "string",
        "handler": _substring,
        "doc": {
            "summary": "Extracts part of a string.",
            "params": [
                {"name": "text", "desc": "The source string."},
                {"name": "start", "desc": "Zero-based index of the first character."},
                {"name": "length", "desc": "Number of characters to take."},
            ],
            "returns": "The extracted string.",
        },
    },
    "string_equals": {
        "variadic": False,
        "arg_types": ["string", "string"],
        "return_type": "bool",
        "handler": lambda ctx, a, b: a.casefold() == b.casefold(),
        "doc": {
            "summary": "Compares two strings, ignoring case.",
            "params": [{"name": "a", "desc": "The first string."}, {"name": "b", "desc": "The second string."}],
            "returns": "true when the strings match.",
        },
    },
    "concatenate": {
        "variadic": True,
        "min_args": 0,
        "arg_types": ["any"],
        "return_type": "string",
        "handler": lambda ctx, *parts: "".join(Value.of(p).stringify() for p in parts),
        "doc": {"summary": "Joins the display strings of all arguments.", "params": [{"name": "values", "desc": "Values to join."}], "returns": "A single string."},
    },
    "len": {
        "variadic": False,
        "arg_types": ["array"],
        "return_type": "integer",
        "handler": lambda ctx, items: len(items),
        "doc": {"summary": "Number of elements in an array.", "params": [{"name": "items", "desc": "The array."}], "returns": "Its length."},
    },
    "append": {
        "variadic": False,
        "arg_types": ["array", "any"],
        "return_type": "array",
        "handler": lambda ctx, items, value: items + [value],
        "doc": {
            "summary": "Returns a copy of an array with one more element at the end.",
            "params": [{"name": "items", "desc": "The array."}, {"name": "value", "desc": "The element to add."}],
            "returns": "The new array. The original is unchanged.",
        },
    },
    "array": {
        "variadic": False,
        "arg_types": ["integer", "any"],
        "return_type": "array",
        "handler": _make_array,
        "doc": {
            "summary": "Creates an array of a given size.",
            "params": [{"name": "size", "desc": "Number of elements."}, {"name": "fill", "desc": "The value every element starts with."}],
            "returns": "The new array.",
        },
    },
}

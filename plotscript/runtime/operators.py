"""
Operator semantics for script values.

Every operator checks operand tags first and raises `TYPE_MISMATCH` instead of
coercing. The only implicit conversions are integer-to-float promotion in
mixed arithmetic and stringification when `+` has a string operand. A
number that cannot be represented after promotion raises `NUMERIC_OVERFLOW`.
"""

import math
import operator

from plotscript.exceptions import ErrorCode, ScriptRuntimeError

from .values import FALSE, TRUE, Value, ValueType, type_name


def _type_error(details: str) -> ScriptRuntimeError:
    return ScriptRuntimeError(ErrorCode.TYPE_MISMATCH, details=details)


def _overflow_error(details: str) -> ScriptRuntimeError:
    return ScriptRuntimeError(ErrorCode.NUMERIC_OVERFLOW, details=details)


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return quotient if (a < 0) == (b < 0) else -quotient


def _trunc_mod(a: int, b: int) -> int:
    return a - b * _trunc_div(a, b)


_INT_OPS = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": _trunc_div,
    "%": _trunc_mod,
}

_FLOAT_OPS = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "%": math.fmod,
}

_COMPARISONS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def arithmetic(op: str, left: Value, right: Value) -> Value:
    if op == "+" and (left.type is ValueType.STRING or right.type is ValueType.STRING):
        return Value.string(left.stringify() + right.stringify())

    if not (left.is_numeric and right.is_numeric):
        raise _type_error(f"The '{op}' operator cannot be used with '{type_name(left)}' and '{type_name(right)}'.")

    if op in ("/", "%") and right.data == 0:
        raise ScriptRuntimeError(ErrorCode.DIVIDE_BY_ZERO, op=op)

    if left.type is ValueType.INTEGER and right.type is ValueType.INTEGER:
        return Value.integer(_INT_OPS[op](left.data, right.data))

    try:
        a, b = float(left.data), float(right.data)
        result = _FLOAT_OPS[op](a, b)
    except OverflowError:
        raise _overflow_error(f"an operand of '{op}' is too large to use as a float.")
    if math.isinf(result) and math.isfinite(a) and math.isfinite(b):
        raise _overflow_error(f"the result of '{op}' is too large to represent as a float.")
    return Value.float_(result)


def values_equal(left: Value, right: Value) -> bool:
    """Numbers compare after promotion; any other pair of different tags is unequal."""
    if left.is_numeric and right.is_numeric:
        return left.data == right.data
    if left.type is not right.type:
        return False
    if left.type is ValueType.ARRAY:
        return len(left.data) == len(right.data) and all(values_equal(a, b) for a, b in zip(left.data, right.data))
    return left.data == right.data


def compare(op: str, left: Value, right: Value) -> Value:
    if op == "==":
        return Value.boolean(values_equal(left, right))
    if op == "!=":
        return Value.boolean(not values_equal(left, right))

    comparable = (left.is_numeric and right.is_numeric) or (left.type is ValueType.STRING and right.type is ValueType.STRING)
    if not comparable:
        raise _type_error(f"The '{op}' operator cannot be used to compare a '{type_name(left)}' and a '{type_name(right)}'.")
    return Value.boolean(_COMPARISONS[op](left.data, right.data))


def binary_op(op: str, left: Value, right: Value) -> Value:
    """Evaluates a non-short-circuit binary operator."""
    if op in _INT_OPS:
        return arithmetic(op, left, right)
    if op in ("==", "!=") or op in _COMPARISONS:
        return compare(op, left, right)
    if op in ("&&", "||"):
        require_bool(left, op)
        require_bool(right, op)
        return Value.boolean(left.data and right.data if op == "&&" else left.data or right.data)
    raise _type_error(f"Unknown operator '{op}'.")


def unary_op(op: str, operand: Value) -> Value:
    if op == "-":
        if not operand.is_numeric:
            raise _type_error(f"The unary '-' operator cannot be used with a '{type_name(operand)}'.")
        return Value(operand.type, -operand.data)
    if op == "!":
        require_bool(operand, "!")
        return FALSE if operand.data else TRUE
    raise _type_error(f"Unknown operator '{op}'.")


def require_bool(value: Value, context: str) -> bool:
    if value.type is not ValueType.BOOL:
        raise _type_error(f"The condition for '{context}' must be a bool (true/false) value, but got a '{type_name(value)}'.")
    return value.data


def check_index(array: Value, index: Value) -> int:
    if array.type is not ValueType.ARRAY:
        raise _type_error(f"Cannot index into a '{type_name(array)}'; only arrays support '[...]'.")
    if index.type is not ValueType.INTEGER:
        raise _type_error(f"Array indices must be integers, but got a '{type_name(index)}'.")
    if not 0 <= index.data < len(array.data):
        raise ScriptRuntimeError(ErrorCode.INDEX_OUT_OF_RANGE, index=index.data, length=len(array.data))
    return index.data


def element_at(array: Value, index: Value) -> Value:
    return array.data[check_index(array, index)]


def replace_element(array: Value, indices, new_value: Value) -> Value:
    """Returns a copy of `array` with the element at the nested `indices` path replaced."""
    if not indices:
        return new_value
    position = check_index(array, indices[0])
    items = list(array.data)
    items[position] = replace_element(items[position], indices[1:], new_value)
    return Value.array(items)

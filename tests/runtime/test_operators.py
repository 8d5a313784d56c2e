import pytest

from plotscript.exceptions import ErrorCode, ScriptRuntimeError
from plotscript.runtime.operators import binary_op, element_at, replace_element, unary_op
from plotscript.runtime.values import FALSE, TRUE, VOID, Value, ValueType

i = Value.integer
f = Value.float_
s = Value.string
arr = lambda *items: Value.array(items)


@pytest.mark.parametrize(
    "op, left, right, expected",
    [
        pytest.param("+", i(2), i(3), i(5), id="int_add"),
        pytest.param("-", i(2), i(3), i(-1), id="int_sub"),
        pytest.param("*", i(4), i(3), i(12), id="int_mul"),
        pytest.param("/", i(7), i(2), i(3), id="int_div_truncates"),
        pytest.param("/", i(-7), i(2), i(-3), id="int_div_truncates_toward_zero"),
        pytest.param("%", i(7), i(3), i(1), id="int_mod"),
        pytest.param("%", i(-7), i(3), i(-1), id="int_mod_sign_of_dividend"),
        pytest.param("+", i(1), f(0.5), f(1.5), id="mixed_promotes"),
        pytest.param("/", f(1.0), i(4), f(0.25), id="float_div"),
        pytest.param("+", s("HP: "), i(10), s("HP: 10"), id="concat_int"),
        pytest.param("+", s("ok? "), TRUE, s("ok? true"), id="concat_bool"),
        pytest.param("+", f(1.5), s("x"), s("1.5x"), id="concat_float_left"),
        pytest.param("+", s("a"), arr(i(1), i(2)), s("a[1, 2]"), id="concat_array"),
    ],
)
def test_arithmetic(op, left, right, expected):
    assert binary_op(op, left, right) == expected


@pytest.mark.parametrize(
    "op, left, right, expected",
    [
        pytest.param("==", i(1), f(1.0), TRUE, id="eq_promotes"),
        pytest.param("==", i(1), s("1"), FALSE, id="eq_different_tags"),
        pytest.param("!=", s("a"), s("b"), TRUE, id="neq_strings"),
        pytest.param("==", arr(i(1), s("a")), arr(i(1), s("a")), TRUE, id="eq_arrays"),
        pytest.param("==", TRUE, i(1), FALSE, id="bool_is_not_int"),
        pytest.param("==", VOID, VOID, TRUE, id="eq_void"),
        pytest.param("<", i(1), f(1.5), TRUE, id="lt_mixed"),
        pytest.param(">=", i(2), i(2), TRUE, id="ge_equal"),
        pytest.param("<", s("apple"), s("banana"), TRUE, id="lt_strings"),
        pytest.param("&&", TRUE, FALSE, FALSE, id="and"),
        pytest.param("||", FALSE, TRUE, TRUE, id="or"),
    ],
)
def test_comparison_and_logic(op, left, right, expected):
    assert binary_op(op, left, right) is expected


@pytest.mark.parametrize(
    "op, left, right",
    [
        pytest.param("-", s("a"), i(1), id="sub_string"),
        pytest.param("*", TRUE, i(2), id="mul_bool"),
        pytest.param("+", arr(i(1)), i(1), id="add_array_int"),
        pytest.param("<", s("a"), i(1), id="lt_string_int"),
        pytest.param("<", TRUE, FALSE, id="lt_bools"),
        pytest.param("&&", i(1), TRUE, id="and_int"),
        pytest.param("-", VOID, i(1), id="sub_void"),
    ],
)
def test_type_mismatches(op, left, right):
    with pytest.raises(ScriptRuntimeError) as excinfo:
        binary_op(op, left, right)
    assert excinfo.value.code == ErrorCode.TYPE_MISMATCH


@pytest.mark.parametrize(
    "op, left, right",
    [
        pytest.param("/", i(1), i(0), id="int_div"),
        pytest.param("%", i(1), i(0), id="int_mod"),
        pytest.param("/", f(1.0), f(0.0), id="float_div"),
        pytest.param("/", i(1), f(0.0), id="mixed_div"),
        pytest.param("%", f(2.5), i(0), id="float_mod"),
    ],
)
def test_division_by_zero(op, left, right):
    with pytest.raises(ScriptRuntimeError) as excinfo:
        binary_op(op, left, right)
    assert excinfo.value.kind == ErrorCode.DIVIDE_BY_ZERO


@pytest.mark.parametrize(
    "op, left, right",
    [
        pytest.param("+", i(10**400), f(0.5), id="int_too_large_for_float"),
        pytest.param("/", f(1.0), i(-(10**400)), id="int_too_large_on_the_right"),
        pytest.param("*", f(1e308), f(10.0), id="float_mul"),
        pytest.param("+", f(1e308), i(10**308), id="float_add"),
    ],
)
def test_numeric_overflow(op, left, right):
    with pytest.raises(ScriptRuntimeError) as excinfo:
        binary_op(op, left, right)
    assert excinfo.value.code == ErrorCode.NUMERIC_OVERFLOW


def test_integer_arithmetic_is_unbounded():
    assert binary_op("*", i(10**400), i(10)) == i(10**401)


def test_unary_operators():
    assert unary_op("-", i(3)) == i(-3)
    assert unary_op("-", f(2.5)) == f(-2.5)
    assert unary_op("!", TRUE) is FALSE
    with pytest.raises(ScriptRuntimeError) as excinfo:
        unary_op("!", i(0))
    assert excinfo.value.code == ErrorCode.TYPE_MISMATCH
    with pytest.raises(ScriptRuntimeError):
        unary_op("-", s("x"))


def test_element_access_bounds():
    items = arr(i(10), i(20), i(30))
    assert element_at(items, i(2)) == i(30)
    for bad in (i(3), i(-1)):
        with pytest.raises(ScriptRuntimeError) as excinfo:
            element_at(items, bad)
        assert excinfo.value.code == ErrorCode.INDEX_OUT_OF_RANGE
    with pytest.raises(ScriptRuntimeError) as excinfo:
        element_at(items, f(1.0))
    assert excinfo.value.code == ErrorCode.TYPE_MISMATCH
    with pytest.raises(ScriptRuntimeError) as excinfo:
        element_at(s("abc"), i(0))
    assert excinfo.value.code == ErrorCode.TYPE_MISMATCH


def test_replace_element_copies_instead_of_mutating():
    grid = arr(arr(i(1), i(2)), arr(i(3), i(4)))
    updated = replace_element(grid, [i(1), i(0)], s("x"))
    assert updated == arr(arr(i(1), i(2)), arr(s("x"), i(4)))
    assert grid == arr(arr(i(1), i(2)), arr(i(3), i(4)))


def test_value_wrapping_keeps_bool_and_int_apart():
    assert Value.of(True).type is ValueType.BOOL
    assert Value.of(1).type is ValueType.INTEGER
    assert Value.of(1.0).type is ValueType.FLOAT
    assert Value.of(None) is VOID
    assert Value.of([1, [True]]) == arr(i(1), arr(TRUE))
    with pytest.raises(TypeError):
        Value.of({"a": 1})


@pytest.mark.parametrize(
    "value, text",
    [
        pytest.param(i(-4), "-4", id="int"),
        pytest.param(f(0.1), "0.1", id="float"),
        pytest.param(f(2.0), "2.0", id="whole_float"),
        pytest.param(TRUE, "true", id="bool"),
        pytest.param(VOID, "", id="void"),
        pytest.param(arr(i(1), s("a"), arr()), "[1, a, []]", id="array"),
    ],
)
def test_stringify(value, text):
    assert value.stringify() == text


def test_stringify_rejects_integers_with_too_many_digits():
    with pytest.raises(ScriptRuntimeError) as excinfo:
        i(10**5000).stringify()
    assert excinfo.value.code == ErrorCode.NUMERIC_OVERFLOW
    with pytest.raises(ScriptRuntimeError):
        binary_op("+", s("v"), i(10**5000))

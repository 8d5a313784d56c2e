"""
Signatures for game state builtins: plot variables, hero stats and the inventory.

Plot variables live in the shared global environment, so `set_variable("gold", 5)`
and a script-level `global gold = 5` address the same slot.
"""

from plotscript.exceptions import BuiltinError
from plotscript.runtime.values import Value


def _set_variable(ctx, name, value):
    if not name.isidentifier():
        raise BuiltinError(f"'{name}' is not a valid variable name")
    ctx.globals.set(name, Value.of(value))


def _get_variable(ctx, name):
    value = ctx.globals.get(name)
    # Unset plot variables read as 0.
    return value if value is not None else 0


def _check_count(count):
    if count < 0:
        raise BuiltinError(f"item count cannot be negative (got {count})")


def _give_item(ctx, item, count):
    _check_count(count)
    ctx.host.give_item(item, count)


def _take_item(ctx, item, count):
    _check_count(count)
    ctx.host.take_item(item, count)


def _set_item_count(ctx, item, count):
    _check_count(count)
    ctx.host.set_item_count(item, count)


SIGNATURES = {
    "set_variable": {
        "variadic": False,
        "arg_types": ["string", "any"],
        "return_type": "void",
        "handler": _set_variable,
        "doc": {
            "summary": "Sets a global plot variable by name.",
            "params": [{"name": "name", "desc": "The variable name."}, {"name": "value", "desc": "The value to store."}],
            "returns": "Nothing.",
        },
    },
    "get_variable": {
        "variadic": False,
        "arg_types": ["string"],
        "return_type": "any",
        "handler": _get_variable,
        "doc": {
            "summary": "Reads a global plot variable by name.",
            "params": [{"name": "name", "desc": "The variable name."}],
            "returns": "The stored value, or 0 when it was never set.",
        },
    },
    "set_hero_stat": {
        "variadic": False,
        "arg_types": ["integer", "string", "integer"],
        "return_type": "void",
        "handler": lambda ctx, hero, stat, value: ctx.host.set_hero_stat(hero, stat, value),
        "doc": {
            "summary": "Changes one of a hero's stats.",
            "params": [
                {"name": "hero", "desc": "The hero's party slot."},
                {"name": "stat", "desc": "The stat name, e.g. \"hp\"."},
                {"name": "value", "desc": "The new value."},
            ],
            "returns": "Nothing.",
        },
    },
    "get_hero_stat": {
        "variadic": False,
        "arg_types": ["integer", "string"],
        "return_type": "integer",
        "handler": lambda ctx, hero, stat: ctx.host.get_hero_stat(hero, stat),
        "doc": {
            "summary": "Reads one of a hero's stats.",
            "params": [{"name": "hero", "desc": "The hero's party slot."}, {"name": "stat", "desc": "The stat name."}],
            "returns": "The stat value.",
        },
    },
    "give_item": {
        "variadic": False,
        "arg_types": ["integer", "integer"],
        "return_type": "void",
        "handler": _give_item,
        "doc": {
            "summary": "Adds items to the party inventory.",
            "params": [{"name": "item", "desc": "The item id."}, {"name": "count", "desc": "How many to add."}],
            "returns": "Nothing.",
        },
    },
    "take_item": {
        "variadic": False,
        "arg_types": ["integer", "integer"],
        "return_type": "void",
        "handler": _take_item,
        "doc": {
            "summary": "Removes items from the party inventory. The count never drops below zero.",
            "params": [{"name": "item", "desc": "The item id."}, {"name": "count", "desc": "How many to remove."}],
            "returns": "Nothing.",
        },
    },
    "check_item": {
        "variadic": False,
        "arg_types": ["integer"],
        "return_type": "integer",
        "handler": lambda ctx, item: ctx.host.item_count(item),
        "doc": {"summary": "Counts how many of an item the party holds.", "params": [{"name": "item", "desc": "The item id."}], "returns": "The count."},
    },
    "set_item_count": {
        "variadic": False,
        "arg_types": ["integer", "integer"],
        "return_type": "void",
        "handler": _set_item_count,
        "doc": {
            "summary": "Sets the exact count of an item in the inventory.",
            "params": [{"name": "item", "desc": "The item id."}, {"name": "count", "desc": "The new count."}],
            "returns": "Nothing.",
        },
    },
}

"""
Signatures for map transfer and hero movement builtins.
"""

from plotscript.exceptions import BuiltinError
from plotscript.runtime.instance import hero_moved

from .registry import Suspend

DIRECTIONS = ("up", "down", "left", "right")


def _check_direction(direction):
    if direction.lower() not in DIRECTIONS:
        raise BuiltinError(f"unknown direction '{direction}', expected one of {', '.join(DIRECTIONS)}")
    return direction.lower()


def _move_hero(ctx, direction, distance):
    if distance < 0:
        raise BuiltinError(f"distance cannot be negative (got {distance})")
    ctx.host.move_hero(_check_direction(direction), distance)


SIGNATURES = {
    "teleport_to_map": {
        "variadic": False,
        "arg_types": ["integer", "integer", "integer"],
        "return_type": "void",
        "handler": lambda ctx, map_id, x, y: ctx.host.teleport_to_map(map_id, x, y),
        "doc": {
            "summary": "Moves the party to a position on another map.",
            "params": [{"name": "map", "desc": "The destination map id."}, {"name": "x", "desc": "Tile column."}, {"name": "y", "desc": "Tile row."}],
            "returns": "Nothing.",
        },
    },
    "teleport_to_position": {
        "variadic": False,
        "arg_types": ["integer", "integer"],
        "return_type": "void",
        "handler": lambda ctx, x, y: ctx.host.teleport_to_position(x, y),
        "doc": {
            "summary": "Moves the party to a position on the current map.",
            "params": [{"name": "x", "desc": "Tile column."}, {"name": "y", "desc": "Tile row."}],
            "returns": "Nothing.",
        },
    },
    "move_hero": {
        "variadic": False,
        "arg_types": ["string", "integer"],
        "return_type": "void",
        "handler": _move_hero,
        "doc": {
            "summary": "Starts walking the hero. Use wait_for_hero() to pause until the walk ends.",
            "params": [{"name": "direction", "desc": "\"up\", \"down\", \"left\" or \"right\"."}, {"name": "distance", "desc": "Number of tiles."}],
            "returns": "Nothing.",
        },
    },
    "set_hero_direction": {
        "variadic": False,
        "arg_types": ["string"],
        "return_type": "void",
        "handler": lambda ctx, direction: ctx.host.set_hero_direction(_check_direction(direction)),
        "doc": {"summary": "Turns the hero to face a direction.", "params": [{"name": "direction", "desc": "\"up\", \"down\", \"left\" or \"right\"."}], "returns": "Nothing."},
    },
    "wait_for_hero": {
        "variadic": False,
        "arg_types": ["integer"],
        "return_type": "void",
        "can_suspend": True,
        "handler": lambda ctx, hero: Suspend(hero_moved(hero)),
        "doc": {"summary": "Pauses the script until a hero finishes moving.", "params": [{"name": "hero", "desc": "The hero's party slot."}], "returns": "Nothing."},
    },
}

"""
Signatures for battle builtins.
"""

from plotscript.runtime.instance import battle_finished

from .registry import Suspend


def _start_battle(ctx, formation):
    ctx.host.start_battle(formation)
    return Suspend(battle_finished())


SIGNATURES = {
    "start_battle": {
        "variadic": False,
        "arg_types": ["integer"],
        "return_type": "any",
        "can_suspend": True,
        "handler": _start_battle,
        "doc": {
            "summary": "Starts a battle and pauses the script until it ends.",
            "params": [{"name": "formation", "desc": "The enemy formation id."}],
            "returns": "The battle result reported by the game, e.g. \"victory\".",
        },
    },
    "end_battle": {
        "variadic": False,
        "arg_types": [],
        "return_type": "void",
        "handler": lambda ctx: ctx.host.end_battle(),
        "doc": {"summary": "Ends the current battle immediately.", "params": [], "returns": "Nothing."},
    },
    "set_enemy_stat": {
        "variadic": False,
        "arg_types": ["integer", "string", "integer"],
        "return_type": "void",
        "handler": lambda ctx, enemy, stat, value: ctx.host.set_enemy_stat(enemy, stat, value),
        "doc": {
            "summary": "Changes one of an enemy's stats during battle.",
            "params": [{"name": "enemy", "desc": "The enemy's slot."}, {"name": "stat", "desc": "The stat name."}, {"name": "value", "desc": "The new value."}],
            "returns": "Nothing.",
        },
    },
    "change_enemy_sprite": {
        "variadic": False,
        "arg_types": ["integer", "integer"],
        "return_type": "void",
        "handler": lambda ctx, enemy, sprite: ctx.host.change_enemy_sprite(enemy, sprite),
        "doc": {
            "summary": "Swaps the picture used for an enemy.",
            "params": [{"name": "enemy", "desc": "The enemy's slot."}, {"name": "sprite", "desc": "The sprite id."}],
            "returns": "Nothing.",
        },
    },
}

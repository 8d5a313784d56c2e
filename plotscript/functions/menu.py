"""
Signatures for menu builtins.
"""

from plotscript.runtime.instance import menu_closed

from .registry import Suspend


def _show_menu(ctx, menu):
    ctx.host.show_menu(menu)
    return Suspend(menu_closed(menu))


SIGNATURES = {
    "show_menu": {
        "variadic": False,
        "arg_types": ["integer"],
        "return_type": "any",
        "can_suspend": True,
        "handler": _show_menu,
        "doc": {
            "summary": "Opens a menu and pauses the script until the player closes it.",
            "params": [{"name": "menu", "desc": "The menu id."}],
            "returns": "The option the player picked, as reported by the game.",
        },
    },
    "hide_menu": {
        "variadic": False,
        "arg_types": [],
        "return_type": "void",
        "handler": lambda ctx: ctx.host.hide_menu(),
        "doc": {"summary": "Closes the open menu.", "params": [], "returns": "Nothing."},
    },
    "set_menu_option": {
        "variadic": False,
        "arg_types": ["integer", "integer", "bool"],
        "return_type": "void",
        "handler": lambda ctx, menu, option, enabled: ctx.host.set_menu_option(menu, option, enabled),
        "doc": {
            "summary": "Enables or disables a menu option.",
            "params": [{"name": "menu", "desc": "The menu id."}, {"name": "option", "desc": "The option index."}, {"name": "enabled", "desc": "true to enable."}],
            "returns": "Nothing.",
        },
    },
}

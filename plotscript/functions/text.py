"""
Signatures for text box and on-screen string builtins.
"""

from plotscript.runtime.instance import text_box_closed

from .registry import Suspend


def _wait_for_text_box(ctx):
    return Suspend(text_box_closed())


SIGNATURES = {
    "show_text_box": {
        "variadic": False,
        "arg_types": ["integer"],
        "return_type": "void",
        "handler": lambda ctx, box_id: ctx.host.show_text_box(box_id),
        "doc": {
            "summary": "Opens a dialogue text box.",
            "params": [{"name": "id", "desc": "Identifier of the text box content."}],
            "returns": "Nothing. Use wait_for_text_box() to pause until the player closes it.",
        },
    },
    "hide_text_box": {
        "variadic": False,
        "arg_types": [],
        "return_type": "void",
        "handler": lambda ctx: ctx.host.hide_text_box(),
        "doc": {"summary": "Closes the current text box.", "params": [], "returns": "Nothing."},
    },
    "wait_for_text_box": {
        "variadic": False,
        "arg_types": [],
        "return_type": "void",
        "can_suspend": True,
        "handler": _wait_for_text_box,
        "doc": {"summary": "Pauses the script until the open text box is closed.", "params": [], "returns": "Nothing."},
    },
    "show_string": {
        "variadic": False,
        "arg_types": ["string"],
        "return_type": "void",
        "handler": lambda ctx, text: ctx.host.show_string(text),
        "doc": {"summary": "Displays a line of text on screen.", "params": [{"name": "text", "desc": "The text to show."}], "returns": "Nothing."},
    },
    "hide_string": {
        "variadic": False,
        "arg_types": [],
        "return_type": "void",
        "handler": lambda ctx: ctx.host.hide_string(),
        "doc": {"summary": "Removes the on-screen text.", "params": [], "returns": "Nothing."},
    },
}

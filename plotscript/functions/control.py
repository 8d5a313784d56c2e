"""
Signatures for flow control builtins: timed waits, event waits and spawning
other scripts as independent instances.
"""

from plotscript.runtime.instance import event, wait_frames
from plotscript.runtime.values import Value

from .registry import Suspend


def _wait(ctx, frames):
    if frames <= 0:
        return None
    return Suspend(wait_frames(frames))


def _run_script(ctx, name, *args):
    return ctx.engine.invoke_script(name, [Value.of(arg) for arg in args])


SIGNATURES = {
    "wait": {
        "variadic": False,
        "arg_types": ["integer"],
        "return_type": "void",
        "can_suspend": True,
        "handler": _wait,
        "doc": {
            "summary": "Pauses the script for a number of game frames. A count of zero or less does not pause.",
            "params": [{"name": "frames", "desc": "How many frames to wait."}],
            "returns": "Nothing.",
        },
    },
    "wait_for_event": {
        "variadic": False,
        "arg_types": ["string"],
        "return_type": "any",
        "can_suspend": True,
        "handler": lambda ctx, name: Suspend(event(name)),
        "doc": {
            "summary": "Pauses the script until the game raises a named event.",
            "params": [{"name": "name", "desc": "The event name."}],
            "returns": "The value the game attached to the event, if any.",
        },
    },
    "run_script": {
        "variadic": True,
        "min_args": 1,
        "arg_types": ["string", "any"],
        "return_type": "integer",
        "handler": _run_script,
        "doc": {
            "summary": "Starts another loaded script as an independent instance. It begins running on the next tick.",
            "params": [{"name": "name", "desc": "The script name."}, {"name": "args", "desc": "Arguments for the script."}],
            "returns": "The new instance id.",
        },
    },
}

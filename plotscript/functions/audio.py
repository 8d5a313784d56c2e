"""
Signatures for music and sound effect builtins.
"""

from plotscript.exceptions import BuiltinError


def _set_volume(ctx, channel, volume):
    if not 0 <= volume <= 100:
        raise BuiltinError(f"volume must be between 0 and 100 (got {volume})")
    ctx.host.set_volume(channel, volume)


SIGNATURES = {
    "play_music": {
        "variadic": False,
        "arg_types": ["integer"],
        "return_type": "void",
        "handler": lambda ctx, track: ctx.host.play_music(track),
        "doc": {"summary": "Starts a music track, replacing the current one.", "params": [{"name": "track", "desc": "The track id."}], "returns": "Nothing."},
    },
    "stop_music": {
        "variadic": False,
        "arg_types": [],
        "return_type": "void",
        "handler": lambda ctx: ctx.host.stop_music(),
        "doc": {"summary": "Stops the current music track.", "params": [], "returns": "Nothing."},
    },
    "play_sound": {
        "variadic": False,
        "arg_types": ["integer"],
        "return_type": "void",
        "handler": lambda ctx, sound: ctx.host.play_sound(sound),
        "doc": {"summary": "Plays a sound effect once.", "params": [{"name": "sound", "desc": "The sound id."}], "returns": "Nothing."},
    },
    "set_volume": {
        "variadic": False,
        "arg_types": ["string", "integer"],
        "return_type": "void",
        "handler": _set_volume,
        "doc": {
            "summary": "Sets the volume of an audio channel.",
            "params": [{"name": "channel", "desc": "\"music\" or \"sound\"."}, {"name": "volume", "desc": "0 to 100."}],
            "returns": "Nothing.",
        },
    },
}

from . import audio, battle, control, core, menu, movement, state, text

CATEGORIES = {
    "core": core.SIGNATURES,
    "text": text.SIGNATURES,
    "state": state.SIGNATURES,
    "movement": movement.SIGNATURES,
    "battle": battle.SIGNATURES,
    "audio": audio.SIGNATURES,
    "menu": menu.SIGNATURES,
    "control": control.SIGNATURES,
}

FUNCTION_SIGNATURES = {name: {**signature, "category": category} for category, table in CATEGORIES.items() for name, signature in table.items()}

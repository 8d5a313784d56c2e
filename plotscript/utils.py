"""
Utility functions for the PlotScript engine, including terminal coloring,
and a JSON serializer for tokens, syntax trees and runtime values.
"""

import dataclasses
import json
from enum import Enum

from pydantic import BaseModel

from plotscript.runtime.values import Value


class TerminalColors:
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    RESET = "\033[0m"


class ArtifactEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, BaseModel):
            return {"node": type(o).__name__, **{name: getattr(o, name) for name in type(o).model_fields}}
        if isinstance(o, Value):
            return o.to_python()
        if isinstance(o, Enum):
            return o.value
        if dataclasses.is_dataclass(o) and not isinstance(o, type):
            return {f.name: getattr(o, f.name) for f in dataclasses.fields(o)}
        if isinstance(o, (set, tuple)):
            return list(o)
        return super().default(o)

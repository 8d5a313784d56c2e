from .config import EngineConfig
from .engine import ScriptEngine
from .exceptions import BuiltinError, EngineError, ErrorCode, LexError, ParseError, PlotScriptError, ScriptRuntimeError
from .functions.registry import BuiltinContext, BuiltinDescriptor, BuiltinRegistry, Suspend
from .host import GameHost, RecordingHost
from .runtime.instance import Script, ScriptStatus, StepOutcome, WakeCondition, WakeKind
from .runtime.values import Value, ValueType

__all__ = [
    "EngineConfig",
    "ScriptEngine",
    "BuiltinError",
    "EngineError",
    "ErrorCode",
    "LexError",
    "ParseError",
    "PlotScriptError",
    "ScriptRuntimeError",
    "BuiltinContext",
    "BuiltinDescriptor",
    "BuiltinRegistry",
    "Suspend",
    "GameHost",
    "RecordingHost",
    "Script",
    "ScriptStatus",
    "StepOutcome",
    "WakeCondition",
    "WakeKind",
    "Value",
    "ValueType",
]

"""
The capability registry that binds builtin names to host handlers.

Each category module in this package exposes a `SIGNATURES` table; every entry
describes one builtin's arity, argument tags, whether it may suspend the
calling script, its handler and its documentation. The registry validates
calls against those descriptors before the handler ever runs, so handlers
only see well-typed, unwrapped Python arguments.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from plotscript.config import RESERVED_KEYWORDS
from plotscript.exceptions import BuiltinError, EngineError, ErrorCode, PlotScriptError, ScriptRuntimeError
from plotscript.runtime.instance import WakeCondition
from plotscript.runtime.values import VOID, Value, ValueType, type_name

logger = logging.getLogger(__name__)


ARG_TYPE_CHECKS: Dict[str, Callable[[Value], bool]] = {
    "any": lambda v: True,
    "integer": lambda v: v.type is ValueType.INTEGER,
    "number": lambda v: v.is_numeric,
    "string": lambda v: v.type is ValueType.STRING,
    "bool": lambda v: v.type is ValueType.BOOL,
    "array": lambda v: v.type is ValueType.ARRAY,
}


@dataclass(frozen=True)
class Suspend:
    """Returned by a handler to park the calling script until `condition` is met."""

    condition: WakeCondition
    result: Any = VOID


@dataclass
class BuiltinContext:
    instance_id: int
    script_name: str
    globals: Any
    host: Any
    engine: Any
    rng: random.Random


@dataclass(frozen=True)
class BuiltinDescriptor:
    name: str
    handler: Callable[..., Any]
    arg_types: Tuple[str, ...] = ()
    min_args: int = 0
    max_args: Optional[int] = 0
    return_type: str = "void"
    can_suspend: bool = False
    category: str = "core"
    doc: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_signature(cls, name: str, signature: Dict[str, Any], category: str = "core") -> "BuiltinDescriptor":
        arg_types = tuple(signature.get("arg_types", ()))
        variadic = signature.get("variadic", False)
        min_args = signature.get("min_args", len(arg_types))
        return cls(
            name=name,
            handler=signature["handler"],
            arg_types=arg_types,
            min_args=min_args,
            max_args=None if variadic else len(arg_types),
            return_type=signature.get("return_type", "void"),
            can_suspend=signature.get("can_suspend", False),
            category=category,
            doc=signature.get("doc", {}),
        )

    @property
    def variadic(self) -> bool:
        return self.max_args is None

    def accepts(self, count: int) -> bool:
        return count >= self.min_args and (self.max_args is None or count <= self.max_args)

    def expected_arity(self) -> str:
        if self.max_args is None:
            return f"at least {self.min_args}"
        if self.min_args == self.max_args:
            return str(self.min_args)
        return f"{self.min_args} to {self.max_args}"

    def type_at(self, position: int) -> str:
        if position < len(self.arg_types):
            return self.arg_types[position]
        return self.arg_types[-1] if self.arg_types else "any"

    def signature_text(self) -> str:
        params = self.doc.get("params", [])
        parts = []
        for i, arg_type in enumerate(self.arg_types):
            label = params[i]["name"] if i < len(params) else f"arg{i + 1}"
            parts.append(f"{label}: {arg_type}")
        if self.variadic:
            parts.append("...")
        return f"{self.name}({', '.join(parts)}) -> {self.return_type}"


class BuiltinRegistry:
    def __init__(self, signatures: Optional[Dict[str, Dict[str, Any]]] = None):
        self._builtins: Dict[str, BuiltinDescriptor] = {}
        for name, signature in (signatures or {}).items():
            self.register(BuiltinDescriptor.from_signature(name, signature, signature.get("category", "core")))

    @classmethod
    def default(cls) -> "BuiltinRegistry":
        """A registry holding every builtin from the category modules."""
        from plotscript.functions import FUNCTION_SIGNATURES

        return cls(FUNCTION_SIGNATURES)

    def register(self, descriptor: BuiltinDescriptor, replace: bool = False):
        self._validate(descriptor)
        if descriptor.name in self._builtins and not replace:
            raise EngineError(ErrorCode.INVALID_BUILTIN_SIGNATURE, name=descriptor.name, details="a builtin with this name is already registered.")
        self._builtins[descriptor.name] = descriptor
        logger.debug("Registered builtin '%s' (%s)", descriptor.name, descriptor.category)

    def unregister(self, name: str):
        self._builtins.pop(name, None)

    def get(self, name: str) -> Optional[BuiltinDescriptor]:
        return self._builtins.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._builtins

    def __iter__(self) -> Iterator[BuiltinDescriptor]:
        return iter(self._builtins.values())

    def __len__(self) -> int:
        return len(self._builtins)

    def names(self) -> List[str]:
        return sorted(self._builtins)

    def _validate(self, descriptor: BuiltinDescriptor):
        def invalid(details):
            return EngineError(ErrorCode.INVALID_BUILTIN_SIGNATURE, name=descriptor.name, details=details)

        if not descriptor.name.isidentifier() or descriptor.name in RESERVED_KEYWORDS:
            raise invalid("the name must be a valid, non-reserved identifier.")
        if not callable(descriptor.handler):
            raise invalid("the handler is not callable.")
        if descriptor.min_args < 0 or (descriptor.max_args is not None and descriptor.max_args < descriptor.min_args):
            raise invalid("the argument count range is empty.")
        unknown = [t for t in descriptor.arg_types if t not in ARG_TYPE_CHECKS]
        if unknown:
            raise invalid(f"unknown argument type(s) {', '.join(unknown)}.")

    def invoke(self, name: str, args: List[Value], context: BuiltinContext) -> Union[Value, Suspend]:
        """
        Checks arity and argument tags, then runs the handler.
        Collaborator failures are reported as `BUILTIN_FAILURE` so that only the
        calling script instance is affected.
        """
        descriptor = self._builtins.get(name)
        if descriptor is None:
            raise ScriptRuntimeError(ErrorCode.UNKNOWN_FUNCTION, name=name)
        if not descriptor.accepts(len(args)):
            raise ScriptRuntimeError(ErrorCode.ARITY_MISMATCH, name=name, expected=descriptor.expected_arity(), provided=len(args))
        for i, arg in enumerate(args):
            expected = descriptor.type_at(i)
            if not ARG_TYPE_CHECKS[expected](arg):
                raise ScriptRuntimeError(
                    ErrorCode.TYPE_MISMATCH,
                    details=f"Argument {i + 1} of '{name}' must be a '{expected}', but got a '{type_name(arg)}'.",
                )

        try:
            outcome = descriptor.handler(context, *(arg.to_python() for arg in args))
            if isinstance(outcome, Suspend):
                return Suspend(outcome.condition, Value.of(outcome.result))
            return Value.of(outcome)
        except ScriptRuntimeError:
            raise
        except BuiltinError as e:
            raise ScriptRuntimeError(ErrorCode.BUILTIN_FAILURE, name=name, message=e.message)
        except PlotScriptError as e:
            raise ScriptRuntimeError(ErrorCode.BUILTIN_FAILURE, name=name, message=e.core_message)
        except Exception as e:
            logger.exception("Builtin '%s' raised an unexpected error", name)
            raise ScriptRuntimeError(ErrorCode.BUILTIN_FAILURE, name=name, message=str(e))

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional

from .values import Value, ValueType

if TYPE_CHECKING:
    from plotscript.parser.classes import Span

    from .instance import Script


def value_to_json(value: Value) -> Dict[str, Any]:
    if value.type is ValueType.ARRAY:
        return {"type": value.type.value, "data": [value_to_json(item) for item in value.data]}
    return {"type": value.type.value, "data": value.data}


def value_from_json(payload: Dict[str, Any]) -> Value:
    value_type = ValueType(payload["type"])
    if value_type is ValueType.ARRAY:
        return Value.array(value_from_json(item) for item in payload["data"])
    return Value(value_type, payload.get("data"))


class GlobalEnvironment:
    """
    The process-wide variable table shared by every script instance.
    Its lifetime is the game session: hosts call `reset()` on new game and
    `restore()` on load game.
    """

    def __init__(self):
        self._variables: Dict[str, Value] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._variables

    def __iter__(self) -> Iterator[str]:
        return iter(self._variables)

    def __len__(self) -> int:
        return len(self._variables)

    def get(self, name: str) -> Optional[Value]:
        return self._variables.get(name)

    def set(self, name: str, value: Value):
        self._variables[name] = value

    def reset(self):
        self._variables.clear()

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """A JSON-friendly copy of every global, for the host's save system."""
        return {name: value_to_json(value) for name, value in self._variables.items()}

    def restore(self, snapshot: Dict[str, Dict[str, Any]]):
        self._variables = {name: value_from_json(payload) for name, payload in snapshot.items()}


@dataclass
class Task:
    """
    One pending AST node and how far its evaluation got.
    The task stack of a frame is its resume cursor.
    """

    node: Any
    stage: int = 0


@dataclass
class LoopMarker:
    task_depth: int  # index of the loop's own task in `CallFrame.tasks`
    value_depth: int


@dataclass
class CallFrame:
    function_name: str
    script: "Script"
    locals: Dict[str, Value] = field(default_factory=dict)
    tasks: List[Task] = field(default_factory=list)
    values: List[Value] = field(default_factory=list)
    loop_markers: List[LoopMarker] = field(default_factory=list)
    call_span: Optional["Span"] = None

    def push(self, node: Any):
        self.tasks.append(Task(node))

    def pop_values(self, count: int) -> List[Value]:
        if count == 0:
            return []
        popped = self.values[-count:]
        del self.values[-count:]
        return popped

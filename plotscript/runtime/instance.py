from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from plotscript.exceptions import ScriptRuntimeError
from plotscript.parser.classes import Block, FunctionCall, FunctionDefinition, Program, ReturnStatement, VariableRef

from .environment import CallFrame, GlobalEnvironment
from .values import VOID, Value


class ScriptStatus(Enum):
    RUNNING = "running"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    FAULTED = "faulted"
    CANCELLED = "cancelled"


FINISHED_STATUSES = (ScriptStatus.COMPLETED, ScriptStatus.FAULTED, ScriptStatus.CANCELLED)


class WakeKind(Enum):
    FRAMES = "frames"
    TEXT_BOX_CLOSED = "text_box_closed"
    MENU_CLOSED = "menu_closed"
    BATTLE_FINISHED = "battle_finished"
    HERO_MOVED = "hero_moved"
    EVENT = "event"


class WakeCondition(BaseModel):
    """
    What a suspended instance is waiting for. Plain data, so a host can
    serialize it alongside its own save state.
    """

    model_config = ConfigDict(frozen=True)

    kind: WakeKind
    frames: Optional[int] = None
    key: Optional[Union[int, str]] = None

    def matches(self, other: "WakeCondition") -> bool:
        """A missing key on either side matches any key of the same kind."""
        if self.kind is not other.kind:
            return False
        return self.key is None or other.key is None or self.key == other.key


def wait_frames(frames: int) -> WakeCondition:
    return WakeCondition(kind=WakeKind.FRAMES, frames=frames)


def text_box_closed(box_id: Optional[int] = None) -> WakeCondition:
    return WakeCondition(kind=WakeKind.TEXT_BOX_CLOSED, key=box_id)


def menu_closed(menu: Optional[Union[int, str]] = None) -> WakeCondition:
    return WakeCondition(kind=WakeKind.MENU_CLOSED, key=menu)


def battle_finished() -> WakeCondition:
    return WakeCondition(kind=WakeKind.BATTLE_FINISHED)


def hero_moved(hero: Optional[int] = None) -> WakeCondition:
    return WakeCondition(kind=WakeKind.HERO_MOVED, key=hero)


def event(name: str) -> WakeCondition:
    return WakeCondition(kind=WakeKind.EVENT, key=name)


@dataclass
class Script:
    """A parsed, immutable plot script, cached by name."""

    name: str
    source: str
    program: Program
    functions: Dict[str, FunctionDefinition]
    params: List[str]
    body: Block

    @classmethod
    def from_program(cls, name: str, source: str, program: Program) -> "Script":
        """
        When the script defines a function named after itself, that function is
        its entry point: its parameters become the script's parameters, the
        top-level statements run first with the arguments bound as locals, and
        the entry call's result is the script's result.
        """
        functions = {f.name: f for f in program.functions}
        entry = functions.get(name)
        if entry is None:
            return cls(name, source, program, functions, [], program.body)

        params = [p.name for p in entry.params]
        span = entry.span
        call = FunctionCall(function=name, args=[VariableRef(name=p, span=span) for p in params], span=span)
        body = Block(statements=list(program.body.statements) + [ReturnStatement(value=call, span=span)], span=program.body.span)
        return cls(name, source, program, functions, params, body)


@dataclass
class StepOutcome:
    instance_id: int
    script_name: str
    status: ScriptStatus
    result: Optional[Value] = None
    error: Optional[ScriptRuntimeError] = None
    wake_condition: Optional[WakeCondition] = None
    work_done: int = 0


@dataclass
class ScriptInstance:
    instance_id: int
    script: Script
    globals: GlobalEnvironment
    frames: List[CallFrame] = field(default_factory=list)
    status: ScriptStatus = ScriptStatus.RUNNING
    wake_condition: Optional[WakeCondition] = None
    frames_remaining: int = 0
    pending_result: Value = VOID
    result: Optional[Value] = None
    error: Optional[ScriptRuntimeError] = None

    @property
    def is_finished(self) -> bool:
        return self.status in FINISHED_STATUSES

    @property
    def depth(self) -> int:
        return len(self.frames)

    def suspend(self, condition: WakeCondition, result: Value = VOID):
        self.status = ScriptStatus.SUSPENDED
        self.wake_condition = condition
        self.pending_result = result
        self.frames_remaining = condition.frames or 0

    def resume(self, result: Optional[Value] = None):
        """Binds the suspended call's result at its call site and marks the instance runnable."""
        value = self.pending_result if result is None else result
        self.frames[-1].values.append(value)
        self.status = ScriptStatus.RUNNING
        self.wake_condition = None
        self.pending_result = VOID
        self.frames_remaining = 0

    def complete(self, result: Value):
        self.frames.clear()
        self.status = ScriptStatus.COMPLETED
        self.result = result

    def fault(self, error: ScriptRuntimeError):
        self.frames.clear()
        self.status = ScriptStatus.FAULTED
        self.error = error
        self.wake_condition = None

    def cancel(self):
        self.frames.clear()
        self.status = ScriptStatus.CANCELLED
        self.wake_condition = None
        self.pending_result = VOID

    def outcome(self, work_done: int = 0) -> StepOutcome:
        return StepOutcome(
            instance_id=self.instance_id,
            script_name=self.script.name,
            status=self.status,
            result=self.result,
            error=self.error,
            wake_condition=self.wake_condition,
            work_done=work_done,
        )

import logging
import os
import random
from typing import Any, Dict, List, Optional, Sequence

from plotscript.config import EngineConfig
from plotscript.exceptions import EngineError, ErrorCode, ParseError
from plotscript.functions.registry import BuiltinContext, BuiltinRegistry
from plotscript.host import GameHost
from plotscript.parser.classes import Program
from plotscript.parser.parser import parse_plotscript
from plotscript.runtime.environment import GlobalEnvironment
from plotscript.runtime.instance import Script, ScriptInstance, ScriptStatus, StepOutcome, WakeCondition, WakeKind
from plotscript.runtime.interpreter import Interpreter
from plotscript.runtime.scheduler import Scheduler
from plotscript.runtime.values import Value

logger = logging.getLogger(__name__)


class ScriptEngine:
    """
    The host-facing entry point: loads and caches scripts, spawns instances,
    drives them frame by frame, and routes wake-ups from the game back to the
    scripts waiting on them.

    A `budget` of `None` in `step()` and `tick()` falls back to
    `EngineConfig.default_step_budget`; configure that as `None` for
    unbounded steps.
    """

    def __init__(self, host: Optional[GameHost] = None, config: Optional[EngineConfig] = None, registry: Optional[BuiltinRegistry] = None):
        self.config = config or EngineConfig()
        self.host = host if host is not None else GameHost()
        self.registry = registry if registry is not None else BuiltinRegistry.default()
        self.globals = GlobalEnvironment()
        self.rng = random.Random(self.config.random_seed)
        self._scripts: Dict[str, Script] = {}
        self._next_instance_id = 1
        self.interpreter = Interpreter(self.registry, self.config, self._scripts.get, self._builtin_context)
        self.scheduler = Scheduler(self.interpreter)

    # --- Script cache ---

    def load_script(self, name: str, source: str) -> Script:
        """
        Lexes and parses `source` and caches it under `name`, replacing any
        previous version. Instances already running keep the version they
        started with. Raises `LexError` or `ParseError`; a failed load leaves
        the cache untouched.
        """
        program = parse_plotscript(source, name)
        self._check_builtin_names(program)
        script = Script.from_program(name, source, program)
        self._scripts[name] = script
        logger.info("Loaded script '%s' (%d function(s), %d parameter(s))", name, len(script.functions), len(script.params))
        return script

    def load_script_file(self, path: str, name: Optional[str] = None) -> Script:
        with open(path, "r", encoding="utf-8") as f:
            source = f.read()
        return self.load_script(name or os.path.splitext(os.path.basename(path))[0], source)

    def _check_builtin_names(self, program: Program):
        for function in program.functions:
            if function.name in self.registry:
                raise ParseError(ErrorCode.REDEFINE_BUILTIN_FUNCTION, span=function.span, script_name=program.script_name, name=function.name)

    def unload_script(self, name: str):
        self.get_script(name)
        del self._scripts[name]
        logger.info("Unloaded script '%s'", name)

    def get_script(self, name: str) -> Script:
        script = self._scripts.get(name)
        if script is None:
            raise EngineError(ErrorCode.UNKNOWN_SCRIPT, name=name)
        return script

    @property
    def script_names(self) -> List[str]:
        return list(self._scripts)

    # --- Instances ---

    def invoke_script(self, name: str, args: Sequence[Any] = ()) -> int:
        """Creates a runnable instance of a loaded script and returns its id. It runs on the next step or tick."""
        script = self.get_script(name)
        instance = ScriptInstance(instance_id=self._next_instance_id, script=script, globals=self.globals)
        self.interpreter.start(instance, [Value.of(arg) for arg in args])
        self._next_instance_id += 1
        self.scheduler.add(instance)
        logger.info("Invoked script '%s' as instance %d", name, instance.instance_id)
        return instance.instance_id

    def get_instance(self, instance_id: int) -> ScriptInstance:
        return self.scheduler.get(instance_id)

    @property
    def instance_ids(self) -> List[int]:
        return self.scheduler.instance_ids

    def step(self, instance_id: int, budget: Optional[int] = None) -> StepOutcome:
        return self.scheduler.step(instance_id, self._budget(budget))

    def tick(self, budget: Optional[int] = None) -> List[StepOutcome]:
        return self.scheduler.tick(self._budget(budget))

    def _budget(self, budget: Optional[int]) -> Optional[int]:
        return budget if budget is not None else self.config.default_step_budget

    def cancel(self, instance_id: int) -> bool:
        cancelled = self.scheduler.cancel(instance_id)
        if cancelled:
            logger.info("Cancelled instance %d", instance_id)
        return cancelled

    def cancel_all(self) -> int:
        return self.scheduler.cancel_all()

    def notify_wake(self, condition: WakeCondition, result: Any = None) -> int:
        return self.scheduler.notify_wake(condition, None if result is None else Value.of(result))

    def reap(self) -> List[StepOutcome]:
        return self.scheduler.reap()

    def reset_session(self):
        """Drops every instance and every global. Loaded scripts stay cached."""
        self.scheduler.clear()
        self.globals.reset()
        logger.info("Session reset")

    def execute_script(self, source: str, name: str = "<inline>", args: Sequence[Any] = (), max_ticks: int = 1000) -> StepOutcome:
        """
        Loads and invokes `source`, then steps the new instance until it is no
        longer running. Frame waits are stepped through; any other suspension
        is returned to the caller.
        """
        self.load_script(name, source)
        instance_id = self.invoke_script(name, args)
        outcome = None
        for _ in range(max_ticks):
            outcome = self.step(instance_id)
            waiting_on_frames = outcome.status is ScriptStatus.SUSPENDED and outcome.wake_condition.kind is WakeKind.FRAMES
            if outcome.status is not ScriptStatus.RUNNING and not waiting_on_frames:
                break
        return outcome

    def _builtin_context(self, instance: ScriptInstance) -> BuiltinContext:
        return BuiltinContext(
            instance_id=instance.instance_id,
            script_name=instance.frames[-1].script.name,
            globals=instance.globals,
            host=self.host,
            engine=self,
            rng=self.rng,
        )

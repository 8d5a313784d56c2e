import logging
from typing import Dict, List, Optional

from plotscript.exceptions import EngineError, ErrorCode

from .instance import ScriptInstance, ScriptStatus, StepOutcome, WakeCondition, WakeKind
from .interpreter import Interpreter
from .values import Value

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Owns the live script instances and drives them once per game frame.

    Instances are kept in invocation order, and that order is the only
    ordering guarantee between scripts sharing globals. Finished instances
    leave the live set as soon as they finish; their final outcome stays
    available until `reap()` hands it to the host.
    """

    def __init__(self, interpreter: Interpreter):
        self.interpreter = interpreter
        self._instances: Dict[int, ScriptInstance] = {}
        self._waiting: Dict[int, WakeCondition] = {}
        self._finished: Dict[int, StepOutcome] = {}

    def __contains__(self, instance_id: int) -> bool:
        return instance_id in self._instances

    def __len__(self) -> int:
        return len(self._instances)

    @property
    def instance_ids(self) -> List[int]:
        return list(self._instances)

    def add(self, instance: ScriptInstance):
        self._instances[instance.instance_id] = instance

    def get(self, instance_id: int) -> ScriptInstance:
        instance = self._instances.get(instance_id)
        if instance is None:
            raise EngineError(ErrorCode.UNKNOWN_INSTANCE, instance_id=instance_id)
        return instance

    def step(self, instance_id: int, budget: Optional[int] = None) -> StepOutcome:
        if instance_id in self._finished:
            return self._finished[instance_id]
        outcome = self.interpreter.step(self.get(instance_id), budget)
        self._after_step(outcome)
        return outcome

    def tick(self, budget: Optional[int] = None) -> List[StepOutcome]:
        """Steps every live instance once. Instances spawned during the tick start on the next one."""
        outcomes = []
        for instance in list(self._instances.values()):
            if instance.instance_id not in self._instances:
                continue
            outcome = self.interpreter.step(instance, budget)
            self._after_step(outcome)
            outcomes.append(outcome)
        return outcomes

    def _after_step(self, outcome: StepOutcome):
        instance_id = outcome.instance_id
        if outcome.status is ScriptStatus.SUSPENDED and outcome.wake_condition.kind is not WakeKind.FRAMES:
            self._waiting[instance_id] = outcome.wake_condition
        elif outcome.status in (ScriptStatus.COMPLETED, ScriptStatus.FAULTED):
            self._retire(instance_id, outcome)

    def _retire(self, instance_id: int, outcome: StepOutcome):
        self._instances.pop(instance_id, None)
        self._waiting.pop(instance_id, None)
        self._finished[instance_id] = outcome
        logger.info("Instance %d of '%s' finished: %s", instance_id, outcome.script_name, outcome.status.value)

    def cancel(self, instance_id: int) -> bool:
        instance = self._instances.get(instance_id)
        if instance is None:
            return False
        instance.cancel()
        self._retire(instance_id, instance.outcome())
        return True

    def cancel_all(self) -> int:
        cancelled = 0
        for instance_id in list(self._instances):
            cancelled += self.cancel(instance_id)
        return cancelled

    def notify_wake(self, condition: WakeCondition, result: Optional[Value] = None) -> int:
        """
        Marks every instance waiting on a matching condition as runnable and
        binds `result` (or the value the builtin chose) at its call site. The
        resumed instances continue on their next step.
        """
        woken = 0
        for instance_id in list(self._instances):
            waiting_on = self._waiting.get(instance_id)
            if waiting_on is None or not waiting_on.matches(condition):
                continue
            del self._waiting[instance_id]
            self._instances[instance_id].resume(result)
            woken += 1
        if woken:
            logger.debug("Wake %s resumed %d instance(s)", condition, woken)
        return woken

    def reap(self) -> List[StepOutcome]:
        """Returns and forgets the outcomes of every finished instance."""
        finished = list(self._finished.values())
        self._finished.clear()
        return finished

    def clear(self):
        self.cancel_all()
        self._finished.clear()

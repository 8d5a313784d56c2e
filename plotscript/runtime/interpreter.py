"""
The suspendable tree-walking interpreter.

Execution state is never held on the Python call stack. Each `CallFrame` keeps
an explicit stack of `Task`s (an AST node plus how far its evaluation got)
and a stack of intermediate values. One dispatch advances the topmost task by
one stage, so a script can stop after any dispatch (budget exhausted or a
builtin asked to suspend) and pick up exactly where it left off on a later
step. Nested script-function calls push frames instead of recursing, which is
what lets a `wait()` deep inside a call chain suspend the whole instance.
"""

import logging
from typing import Callable, List, Optional, Sequence

from plotscript.config import EngineConfig
from plotscript.exceptions import ErrorCode, ScriptRuntimeError
from plotscript.functions.registry import BuiltinContext, BuiltinRegistry, Suspend
from plotscript.parser.classes import (
    ArrayLiteral,
    Assignment,
    BinaryOp,
    Block,
    BooleanLiteral,
    BreakStatement,
    ConditionalExpression,
    ContinueStatement,
    ElementAccess,
    ExpressionStatement,
    FunctionCall,
    IfStatement,
    NumberLiteral,
    ReturnStatement,
    StringLiteral,
    UnaryOp,
    VariableRef,
    WhileStatement,
)

from .environment import CallFrame, LoopMarker, Task
from .instance import Script, ScriptInstance, ScriptStatus, StepOutcome, WakeKind
from .operators import binary_op, element_at, replace_element, require_bool, unary_op
from .values import VOID, Value

logger = logging.getLogger(__name__)


class Interpreter:
    def __init__(
        self,
        registry: BuiltinRegistry,
        config: EngineConfig,
        script_lookup: Callable[[str], Optional[Script]],
        context_factory: Callable[[ScriptInstance], BuiltinContext],
    ):
        self.registry = registry
        self.config = config
        self.script_lookup = script_lookup
        self.context_factory = context_factory
        self._handlers = {
            Block: self._exec_block,
            ExpressionStatement: self._exec_expression_statement,
            IfStatement: self._exec_if,
            WhileStatement: self._exec_while,
            BreakStatement: self._exec_break,
            ContinueStatement: self._exec_continue,
            ReturnStatement: self._exec_return,
            NumberLiteral: self._exec_literal,
            StringLiteral: self._exec_literal,
            BooleanLiteral: self._exec_literal,
            ArrayLiteral: self._exec_array_literal,
            VariableRef: self._exec_variable,
            BinaryOp: self._exec_binary,
            UnaryOp: self._exec_unary,
            ConditionalExpression: self._exec_conditional,
            ElementAccess: self._exec_element_access,
            Assignment: self._exec_assignment,
            FunctionCall: self._exec_call,
        }

    # --- Lifecycle ---

    def start(self, instance: ScriptInstance, args: Sequence[Value]):
        """Pushes the root frame of a fresh instance."""
        script = instance.script
        if len(args) != len(script.params):
            raise ScriptRuntimeError(ErrorCode.ARITY_MISMATCH, script_name=script.name, name=script.name, expected=len(script.params), provided=len(args))
        instance.frames.append(self._script_frame(script, args))

    def step(self, instance: ScriptInstance, budget: Optional[int] = None) -> StepOutcome:
        """
        Advances one instance until it completes, suspends, faults, or has spent
        `budget` dispatches (`None` means no limit).
        """
        if instance.status is ScriptStatus.SUSPENDED:
            self._count_down(instance)
        if instance.status is not ScriptStatus.RUNNING:
            return instance.outcome()

        work = 0
        frame: Optional[CallFrame] = None
        task: Optional[Task] = None
        try:
            while instance.status is ScriptStatus.RUNNING:
                if budget is not None and work >= budget:
                    break
                frame = instance.frames[-1]
                if not frame.tasks:
                    self._return(instance, VOID)
                    continue
                task = frame.tasks[-1]
                work += 1
                self._handlers[type(task.node)](instance, frame, task)
        except ScriptRuntimeError as e:
            script_name = frame.script.name if frame is not None else instance.script.name
            e.locate(task.node.span if task is not None else None, script_name)
            logger.warning("Instance %d of '%s' faulted%s: %s", instance.instance_id, instance.script.name, self._backtrace(instance), e.message)
            instance.fault(e)
        return instance.outcome(work)

    def _count_down(self, instance: ScriptInstance):
        condition = instance.wake_condition
        if condition is None or condition.kind is not WakeKind.FRAMES:
            return
        instance.frames_remaining -= 1
        if instance.frames_remaining <= 0:
            logger.debug("Instance %d finished waiting %d frame(s)", instance.instance_id, condition.frames)
            instance.resume()

    @staticmethod
    def _backtrace(instance: ScriptInstance) -> str:
        calls = [f"{frame.function_name} (line {frame.call_span.s_line})" for frame in instance.frames if frame.call_span is not None]
        return " in " + " <- ".join(reversed(calls)) if calls else ""

    # --- Frames ---

    def _script_frame(self, script: Script, args: Sequence[Value], call_span=None) -> CallFrame:
        frame = CallFrame(function_name=script.name, script=script, locals=dict(zip(script.params, args)), call_span=call_span)
        frame.push(script.body)
        return frame

    def _push_frame(self, instance: ScriptInstance, frame: CallFrame):
        if instance.depth >= self.config.max_call_depth:
            raise ScriptRuntimeError(ErrorCode.STACK_OVERFLOW, limit=self.config.max_call_depth, name=frame.function_name)
        instance.frames.append(frame)

    def _return(self, instance: ScriptInstance, value: Value):
        instance.frames.pop()
        if instance.frames:
            instance.frames[-1].values.append(value)
        else:
            logger.debug("Instance %d of '%s' completed with %r", instance.instance_id, instance.script.name, value)
            instance.complete(value)

    # --- Variables ---

    def _lookup(self, instance: ScriptInstance, frame: CallFrame, name: str) -> Value:
        value = frame.locals.get(name)
        if value is None:
            value = instance.globals.get(name)
        if value is None:
            if self.config.strict_variables:
                raise ScriptRuntimeError(ErrorCode.UNDEFINED_VARIABLE, name=name)
            return Value.integer(0)
        return value

    def _store(self, instance: ScriptInstance, frame: CallFrame, name: str, value: Value, is_global: bool):
        if is_global or (name not in frame.locals and name in instance.globals):
            instance.globals.set(name, value)
        else:
            frame.locals[name] = value

    # --- Statements ---

    def _exec_block(self, instance, frame, task):
        statements = task.node.statements
        if task.stage < len(statements):
            task.stage += 1
            frame.push(statements[task.stage - 1])
        else:
            frame.tasks.pop()

    def _exec_expression_statement(self, instance, frame, task):
        if task.stage == 0:
            task.stage = 1
            frame.push(task.node.expression)
        else:
            frame.values.pop()
            frame.tasks.pop()

    def _exec_if(self, instance, frame, task):
        node = task.node
        if task.stage == 0:
            task.stage = 1
            frame.push(node.condition)
            return
        taken = require_bool(frame.values.pop(), "if")
        frame.tasks.pop()
        branch = node.then_branch if taken else node.else_branch
        if branch is not None:
            frame.push(branch)

    def _exec_while(self, instance, frame, task):
        # stage 0: entering, 1: evaluate the condition, 2: act on it
        node = task.node
        if task.stage == 0:
            frame.loop_markers.append(LoopMarker(task_depth=len(frame.tasks) - 1, value_depth=len(frame.values)))
            task.stage = 1
        if task.stage == 1:
            task.stage = 2
            frame.push(node.condition)
            return
        if require_bool(frame.values.pop(), "while"):
            task.stage = 1
            frame.push(node.body)
        else:
            frame.loop_markers.pop()
            frame.tasks.pop()

    def _exec_break(self, instance, frame, task):
        marker = frame.loop_markers.pop()
        del frame.tasks[marker.task_depth :]
        del frame.values[marker.value_depth :]

    def _exec_continue(self, instance, frame, task):
        marker = frame.loop_markers[-1]
        del frame.tasks[marker.task_depth + 1 :]
        del frame.values[marker.value_depth :]
        frame.tasks[-1].stage = 1

    def _exec_return(self, instance, frame, task):
        node = task.node
        if node.value is None:
            self._return(instance, VOID)
        elif task.stage == 0:
            task.stage = 1
            frame.push(node.value)
        else:
            self._return(instance, frame.values.pop())

    # --- Expressions ---

    def _exec_literal(self, instance, frame, task):
        frame.tasks.pop()
        frame.values.append(Value.of(task.node.value))

    def _exec_array_literal(self, instance, frame, task):
        items = task.node.items
        if task.stage < len(items):
            task.stage += 1
            frame.push(items[task.stage - 1])
            return
        frame.tasks.pop()
        frame.values.append(Value.array(frame.pop_values(len(items))))

    def _exec_variable(self, instance, frame, task):
        frame.tasks.pop()
        frame.values.append(self._lookup(instance, frame, task.node.name))

    def _exec_binary(self, instance, frame, task):
        # stage 1: left is on the stack, 2: both operands are, 3: right of a logical operator is
        node = task.node
        if task.stage == 0:
            task.stage = 1
            frame.push(node.left)
            return
        if task.stage == 1:
            if node.op in ("&&", "||"):
                left = require_bool(frame.values[-1], node.op)
                if left == (node.op == "||"):
                    frame.tasks.pop()
                    return
                frame.values.pop()
                task.stage = 3
            else:
                task.stage = 2
            frame.push(node.right)
            return
        if task.stage == 3:
            require_bool(frame.values[-1], node.op)
            frame.tasks.pop()
            return
        right = frame.values.pop()
        left = frame.values.pop()
        frame.tasks.pop()
        frame.values.append(binary_op(node.op, left, right))

    def _exec_unary(self, instance, frame, task):
        if task.stage == 0:
            task.stage = 1
            frame.push(task.node.operand)
            return
        frame.tasks.pop()
        frame.values.append(unary_op(task.node.op, frame.values.pop()))

    def _exec_conditional(self, instance, frame, task):
        node = task.node
        if task.stage == 0:
            task.stage = 1
            frame.push(node.condition)
            return
        taken = require_bool(frame.values.pop(), "?:")
        frame.tasks[-1] = Task(node.then_expr if taken else node.else_expr)

    def _exec_element_access(self, instance, frame, task):
        node = task.node
        if task.stage == 0:
            task.stage = 1
            frame.push(node.target)
            return
        if task.stage == 1:
            task.stage = 2
            frame.push(node.index)
            return
        index = frame.values.pop()
        target = frame.values.pop()
        frame.tasks.pop()
        frame.values.append(element_at(target, index))

    def _exec_assignment(self, instance, frame, task):
        node = task.node
        indices = node.indices
        if task.stage < len(indices):
            task.stage += 1
            frame.push(indices[task.stage - 1])
            return
        if task.stage == len(indices):
            task.stage += 1
            frame.push(node.value)
            return
        value = frame.values.pop()
        index_values = frame.pop_values(len(indices))
        frame.tasks.pop()
        stored = value
        if index_values:
            stored = replace_element(self._assignment_base(instance, frame, node), index_values, value)
        self._store(instance, frame, node.target, stored, node.is_global)
        frame.values.append(value)

    def _assignment_base(self, instance, frame, node: Assignment) -> Value:
        if not node.is_global:
            return self._lookup(instance, frame, node.target)
        current = instance.globals.get(node.target)
        if current is None:
            raise ScriptRuntimeError(ErrorCode.UNDEFINED_VARIABLE, name=node.target)
        return current

    def _exec_call(self, instance, frame, task):
        node = task.node
        if task.stage < len(node.args):
            task.stage += 1
            frame.push(node.args[task.stage - 1])
            return
        args = frame.pop_values(len(node.args))
        frame.tasks.pop()
        self._call(instance, frame, node, args)

    def _call(self, instance: ScriptInstance, frame: CallFrame, node: FunctionCall, args: List[Value]):
        """Resolves a call against the calling script's functions, then builtins, then other loaded scripts."""
        name = node.function

        function = frame.script.functions.get(name)
        if function is not None:
            if len(args) != len(function.params):
                raise ScriptRuntimeError(ErrorCode.ARITY_MISMATCH, name=name, expected=len(function.params), provided=len(args))
            callee = CallFrame(function_name=name, script=frame.script, locals={p.name: a for p, a in zip(function.params, args)}, call_span=node.span)
            callee.push(function.body)
            self._push_frame(instance, callee)
            return

        if name in self.registry:
            outcome = self.registry.invoke(name, args, self.context_factory(instance))
            if isinstance(outcome, Suspend):
                logger.debug("Instance %d suspended in '%s' on %s", instance.instance_id, name, outcome.condition)
                instance.suspend(outcome.condition, outcome.result)
            else:
                frame.values.append(outcome)
            return

        script = self.script_lookup(name)
        if script is not None:
            if len(args) != len(script.params):
                raise ScriptRuntimeError(ErrorCode.ARITY_MISMATCH, name=name, expected=len(script.params), provided=len(args))
            self._push_frame(instance, self._script_frame(script, args, node.span))
            return

        raise ScriptRuntimeError(ErrorCode.UNKNOWN_FUNCTION, name=name)

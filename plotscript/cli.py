import argparse
import json
import logging
import os
import sys
import time

from .config import EngineConfig
from .engine import ScriptEngine
from .exceptions import PlotScriptError
from .host import RecordingHost
from .lexer import tokenize
from .parser.parser import parse_plotscript
from .runtime.instance import ScriptStatus, WakeKind
from .utils import ArtifactEncoder, TerminalColors


def _parse_script_arg(text: str):
    """Script arguments are JSON literals; anything else is passed as a plain string."""
    try:
        value = json.loads(text)
    except ValueError:
        return text
    return text if isinstance(value, dict) or value is None else value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="plotscript", description="Run and inspect PlotScript event scripts.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine and host activity to stderr.")
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("run", help="Run a script headlessly against an in-memory game.")
    run.add_argument("input_file", help="The path to the script file.")
    run.add_argument("--arg", dest="script_args", action="append", default=[], help="A script argument as a JSON literal. Repeat for each parameter.")
    run.add_argument("--max-ticks", type=int, default=10_000, help="Give up after this many game frames.")
    run.add_argument("--budget", type=int, default=None, help="Dispatch budget per instance per frame.")
    run.add_argument("--seed", type=int, default=None, help="Seed for random().")
    run.add_argument("--config", dest="config_file", default=None, help="A JSON file with engine settings.")

    for name, help_text in (
        ("check", "Lex and parse a script, reporting the first error."),
        ("tokens", "Print the token stream of a script as JSON."),
        ("ast", "Print the syntax tree of a script as JSON."),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument("input_file", help="The path to the script file.")
    return parser


def _read_source(path: str) -> str:
    with open(os.path.abspath(path), "r", encoding="utf-8") as f:
        return f.read()


def _script_name(path: str) -> str:
    return os.path.splitext(os.path.basename(path))[0]


def _run(args) -> int:
    config = EngineConfig.from_file(args.config_file) if args.config_file else EngineConfig()
    overrides = {}
    if args.budget is not None:
        overrides["default_step_budget"] = args.budget
    if args.seed is not None:
        overrides["random_seed"] = args.seed
    if overrides:
        config = config.model_copy(update=overrides)

    host = RecordingHost()
    engine = ScriptEngine(host=host, config=config)
    script = engine.load_script_file(args.input_file)
    main_id = engine.invoke_script(script.name, [_parse_script_arg(a) for a in args.script_args])

    print(f"--- Running {args.input_file} ---")
    ticks = 0
    while engine.instance_ids and ticks < args.max_ticks:
        ticks += 1
        for outcome in engine.tick():
            if outcome.status is ScriptStatus.SUSPENDED and outcome.wake_condition.kind is not WakeKind.FRAMES:
                engine.notify_wake(outcome.wake_condition, host.resolve(outcome.wake_condition))

    outcomes = {outcome.instance_id: outcome for outcome in engine.reap()}
    main = outcomes.get(main_id)
    if main is None:
        print(f"{TerminalColors.YELLOW}--- Script still running after {ticks} frame(s) ---{TerminalColors.RESET}", file=sys.stderr)
        return 1
    if main.status is ScriptStatus.FAULTED:
        print(f"\n{TerminalColors.RED}--- SCRIPT ERROR ---\n{main.error}{TerminalColors.RESET}", file=sys.stderr)
        return 1

    print(f"{len(host.calls)} host request(s) over {ticks} frame(s)")
    print(f"\n{TerminalColors.GREEN}--- Script completed ---{TerminalColors.RESET}")
    print(f"Result: {main.result.stringify() if main.result is not None else ''}")
    return 0


def main(argv=None):
    start_time = time.perf_counter()
    args = _build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    exit_code = 0
    try:
        if args.command == "run":
            exit_code = _run(args)
        elif args.command == "check":
            ScriptEngine().load_script(_script_name(args.input_file), _read_source(args.input_file))
            print(f"{TerminalColors.GREEN}--- {args.input_file}: no errors found ---{TerminalColors.RESET}")
        elif args.command == "tokens":
            print(json.dumps(tokenize(_read_source(args.input_file)), indent=2, cls=ArtifactEncoder))
        elif args.command == "ast":
            program = parse_plotscript(_read_source(args.input_file), _script_name(args.input_file))
            print(json.dumps(program, indent=2, cls=ArtifactEncoder))

    # --- Error Handling ---
    except PlotScriptError as e:
        print(f"\n{TerminalColors.RED}--- SCRIPT ERROR ---\n{e}{TerminalColors.RESET}", file=sys.stderr)
        exit_code = 1
    except FileNotFoundError:
        print(f"{TerminalColors.RED}ERROR: Script file '{args.input_file}' not found.{TerminalColors.RESET}", file=sys.stderr)
        exit_code = 1

    if args.command == "run":
        duration = time.perf_counter() - start_time
        print(f"\n{TerminalColors.CYAN}--- Total Execution Time: {duration:.4f} seconds ---{TerminalColors.RESET}")
    if exit_code:
        sys.exit(exit_code)


if __name__ == "__main__":
    main()

from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import Optional, TextIO

from .evaluator import evaluate
from .lexer_rd import Lexer
from .parser_rd import ParseError, Parser, parse_source
from .types import Environment, MkObject, is_error
from .utils import debug_py_trace_enabled, format_parse_errors, render_value

PROMPT = ">> "

def run(src: str, env: Optional[Environment] = None) -> Optional[MkObject]:
    """Parse (strictly) and evaluate a whole program."""
    program = parse_source(src, strict=True)

    if env is None:
        env = Environment()

    return evaluate(program, env)

def eval_line(line: str, env: Environment) -> tuple[Optional[MkObject], list[str]]:
    """Parse one input against a persistent environment.

    Returns (value, parse_errors); a program with parse errors is not evaluated.
    """
    parser = Parser(Lexer(line))
    program = parser.parse_program()

    if parser.errors:
        return None, parser.errors

    return evaluate(program, env), []

def start(in_stream: TextIO, out_stream: TextIO, env: Optional[Environment] = None, prompt: str = PROMPT) -> Environment:
    """Line-buffered read-eval-print loop over plain streams.

    Every line is evaluated against the same environment, so bindings and
    closures persist between lines. Returns that environment at EOF.
    """
    if env is None:
        env = Environment()

    while True:
        out_stream.write(prompt)
        out_stream.flush()

        line = in_stream.readline()
        if not line:
            return env

        try:
            value, errors = eval_line(line, env)
        except RecursionError:
            out_stream.write("ERROR: maximum recursion depth exceeded\n")
            continue

        if errors:
            for msg in format_parse_errors(errors):
                out_stream.write(msg + "\n")
            continue

        rendered = render_value(value)
        if rendered is not None:
            out_stream.write(rendered + "\n")

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if candidate.exists():
        return candidate.read_text(encoding="utf-8")

    return arg

def _print_ast(source: str) -> int:
    parser = Parser(Lexer(source))
    program = parser.parse_program()

    if parser.errors:
        for msg in format_parse_errors(parser.errors):
            print(msg, file=sys.stderr)
        return 1

    print(program.to_tree().pretty(), end="")
    return 0

def _run_source(source: str) -> int:
    try:
        result = run(source)
    except ParseError as exc:
        for msg in format_parse_errors(exc.errors):
            print(msg, file=sys.stderr)
        return 1
    except RecursionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exc()
        return 1

    rendered = render_value(result)
    if rendered is not None:
        print(rendered)

    return 1 if is_error(result) else 0

def main(argv: Optional[list[str]] = None) -> None:
    show_ast = False
    arg = None
    args = sys.argv[1:] if argv is None else argv

    for token in args:
        if token == "--ast":
            show_ast = True
            continue

        if token in ("-h", "--help"):
            print("usage: monkey [--ast] [FILE | - | CODE]")
            raise SystemExit(0)

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if arg is None and not show_ast:
        if sys.stdin.isatty():
            from .repl import repl
            repl()
        else:
            start(sys.stdin, sys.stdout, prompt="")
        return

    source = _load_source(arg)
    code = _print_ast(source) if show_ast else _run_source(source)
    raise SystemExit(code)

if __name__ == "__main__":
    main()

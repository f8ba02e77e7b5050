"""Interactive Monkey shell on prompt_toolkit.

Multi-line input stays open while any ( or { is unclosed. Lines starting with
'/' are shell commands rather than Monkey source.
"""

from __future__ import annotations

import sys
import traceback
from typing import Callable, Dict

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .evaluator import evaluate
from .lexer_rd import Lexer, tokenize
from .parser_rd import Parser
from .repl_highlight import MonkeyLexer
from .runner import PROMPT
from .token_types import TT
from .types import Environment
from .utils import debug_py_trace_enabled, format_parse_errors, render_value, set_debug_py_trace

# Characters pasted in from browsers and editors that the lexer would reject.
_STRIP_CHARS = dict.fromkeys(map(ord, "\u200b\u200c\u200d\ufeff\u00a0\r"))

_ENABLE_WORDS = {"on", "1", "true", "yes"}
_DISABLE_WORDS = {"off", "0", "false", "no"}

_NESTING = {TT.LPAREN: 1, TT.LBRACE: 1, TT.RPAREN: -1, TT.RBRACE: -1}


class ReplState:
    """What slash commands can change: the live environment and display flags."""

    def __init__(self) -> None:
        self.env = Environment()
        self.show_ast = False


def open_depth(text: str) -> int:
    depth = 0
    for tok in tokenize(text):
        depth = max(depth + _NESTING.get(tok.type, 0), 0)
    return depth


def _normalize(text: str) -> str:
    return text.translate(_STRIP_CHARS)


# ---------------- Slash commands ----------------

def _cmd_ast(state: ReplState, arg: str) -> None:
    state.show_ast = not state.show_ast
    print(f"AST display: {'on' if state.show_ast else 'off'}")


def _cmd_clear(state: ReplState, arg: str) -> None:
    clear()


def _cmd_py_traceback(state: ReplState, arg: str) -> None:
    word = arg.lower()
    if word in _ENABLE_WORDS:
        set_debug_py_trace(True)
    elif word in _DISABLE_WORDS:
        set_debug_py_trace(False)
    elif not word:
        set_debug_py_trace(not debug_py_trace_enabled())
    else:
        print("Usage: /py-traceback [on|off]", file=sys.stderr)
        return

    print(f"Python traceback: {'on' if debug_py_trace_enabled() else 'off'}")


def _cmd_reset(state: ReplState, arg: str) -> None:
    state.env = Environment()
    print("Environment reset.")


SlashHandler = Callable[[ReplState, str], None]

# name => (handler, help text)
SLASH_COMMANDS: Dict[str, tuple[SlashHandler, str]] = {
    "/ast": (_cmd_ast, "toggle the parse tree dump before each result"),
    "/clear": (_cmd_clear, "clear the screen"),
    "/py-traceback": (_cmd_py_traceback, "[on|off] show Python tracebacks for internal failures"),
    "/reset": (_cmd_reset, "drop every binding and start a fresh environment"),
}


def _handle_slash(line: str, state: ReplState) -> bool:
    """Run a slash command. False means the line is Monkey source."""
    name, _, arg = line.strip().partition(" ")
    if not name.startswith("/"):
        return False

    entry = SLASH_COMMANDS.get(name)
    if entry is None:
        print(f"Unknown command: {name}", file=sys.stderr)
        return True

    handler, _ = entry
    handler(state, arg.strip())
    return True


class _SlashCompleter(Completer):
    def get_completions(self, document, complete_event):
        prefix = document.text_before_cursor
        if not prefix.startswith("/") or " " in prefix:
            return

        for name in sorted(SLASH_COMMANDS):
            if name.startswith(prefix):
                yield Completion(name, start_position=-len(prefix), display_meta=SLASH_COMMANDS[name][1])


# ---------------- Evaluation ----------------

def evaluate_input(text: str, state: ReplState) -> None:
    parser = Parser(Lexer(text))
    program = parser.parse_program()

    if parser.errors:
        print("\n".join(format_parse_errors(parser.errors)), file=sys.stderr)
        return

    if state.show_ast:
        print(program.to_tree().pretty(), end="")

    try:
        value = evaluate(program, state.env)
    except RecursionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        if debug_py_trace_enabled():
            traceback.print_exception(exc, file=sys.stderr)
        return

    shown = render_value(value)
    if shown is not None:
        print(shown)


def _key_bindings() -> KeyBindings:
    kb = KeyBindings()

    @kb.add("enter")
    def _submit_or_continue(event):
        buf = event.app.current_buffer
        depth = 0 if buf.text.startswith("/") else open_depth(buf.text)

        if depth:
            buf.insert_text("\n" + "    " * depth)
        else:
            buf.validate_and_handle()

    return kb


def repl() -> None:
    state = ReplState()
    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=MonkeyLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=_key_bindings(),
        multiline=True,
        prompt_continuation=".. ",
    )

    print("monkey repl: Ctrl-D to exit, / for commands")

    while True:
        try:
            text = _normalize(session.prompt(PROMPT))
        except KeyboardInterrupt:
            continue
        except EOFError:
            print()
            return

        if not text.strip() or _handle_slash(text, state):
            continue

        evaluate_input(text, state)

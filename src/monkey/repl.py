"""Interactive REPL for monkey, powered by prompt_toolkit."""

from __future__ import annotations

import re
import sys
import traceback
from dataclasses import dataclass, field
from typing import List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.shortcuts import clear

from .lexer import tokenize
from .parser import parse
from .repl_highlight import MonkeyLexer
from .runner import repl_eval
from .runtime import Environment, MonkeyRuntimeError, init_stdlib
from .token_types import TT
from .tree import to_lark
from .utils import debug_py_trace_enabled, set_debug_py_trace

PROMPT = ">> "

MONKEY_FACE = "\n".join([
    "            __,__",
    "   .--.  .-\"     \"-.  .--.",
    "  / .. \\/  .-. .-.  \\/ .. \\",
    " | |  '|  /   Y   \\  |'  | |",
    " | \\   \\  \\ 0 | 0 /  /   / |",
    "  \\ '- ,\\.-\"\"\"\"\"\"\"-./, -' /",
    "   ''-' /_   ^ ^   _\\ '-''",
    "       |  \\._   _./  |",
    "       \\   \\ '~' /   /",
    "        '._ '-=-' _.'",
    "           '-----'",
    "",
])

# Zero-width, non-breaking and carriage-return characters picked up from pastes.
_INVISIBLE_RE = re.compile("[\u200b\u200c\u200d\ufeff\u00a0\r]")

# name -> (help text, argument hint) for the completer.
_SLASH_CMDS = {
    "/ast": ("Toggle printing the syntax tree of each entry", "[on|off]"),
    "/clear": ("Clear the terminal screen", ""),
    "/py-traceback": ("Toggle Python traceback on errors", "[on|off]"),
    "/reset": ("Reset the REPL environment", ""),
}

_DEPTH_OPEN = {TT.LPAREN, TT.LBRACKET, TT.LBRACE}
_DEPTH_CLOSE = {TT.RPAREN, TT.RBRACKET, TT.RBRACE}


def _open_depth(text: str) -> int:
    """Count brackets still open at the end of *text* (never negative)."""
    depth = 0
    for tok in tokenize(text):
        if tok.type in _DEPTH_OPEN:
            depth += 1
        elif tok.type in _DEPTH_CLOSE:
            depth = max(depth - 1, 0)
    return depth


def print_parser_errors(errors: List[str], out=None) -> None:
    out = out if out is not None else sys.stderr
    print(MONKEY_FACE, file=out, end="")
    print("Woops! We ran into some monkey business here!", file=out)
    print(" parser errors:", file=out)
    for msg in errors:
        print(f"\t{msg}", file=out)


class _SlashCompleter(Completer):
    """Offer slash-command names once the line starts with a slash."""

    def get_completions(self, document, complete_event):
        text = document.text_before_cursor
        if not text.startswith("/"):
            return

        for cmd, (desc, hint) in _SLASH_CMDS.items():
            if cmd.startswith(text):
                yield Completion(
                    cmd,
                    start_position=-len(text),
                    display_meta=desc,
                )


@dataclass
class ReplState:
    """Mutable session state so slash commands can swap it out."""
    env: Environment = field(default_factory=Environment)
    show_ast: bool = False


def _toggle(arg: str, current: bool) -> Optional[bool]:
    """Resolve an [on|off] argument; empty toggles, None means unrecognised."""
    if arg.lower() in ("on", "1", "true", "yes"):
        return True
    if arg.lower() in ("off", "0", "false", "no"):
        return False
    if arg == "":
        return not current
    return None


def _handle_slash(line: str, state: ReplState) -> bool:
    """Run a REPL command line. Returns False when the line is monkey source."""
    stripped = line.strip()
    if not stripped.startswith("/"):
        return False

    parts = stripped.split(None, 1)
    cmd = parts[0]
    arg = parts[1] if len(parts) > 1 else ""

    if cmd == "/clear":
        clear()
        return True

    if cmd == "/py-traceback":
        enabled = _toggle(arg, debug_py_trace_enabled())
        if enabled is None:
            print("Usage: /py-traceback [on|off]", file=sys.stderr)
            return True

        set_debug_py_trace(enabled)
        print(f"Python traceback: {'on' if enabled else 'off'}")
        return True

    if cmd == "/ast":
        enabled = _toggle(arg, state.show_ast)
        if enabled is None:
            print("Usage: /ast [on|off]", file=sys.stderr)
            return True

        state.show_ast = enabled
        print(f"AST dump: {'on' if enabled else 'off'}")
        return True

    if cmd == "/reset":
        state.env = Environment()
        print("Environment reset.")
        return True

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return True


def _normalize(text: str) -> str:
    """Drop zero-width and non-breaking characters pasted in with the source."""
    return _INVISIBLE_RE.sub("", text)


def eval_line(text: str, state: ReplState) -> None:
    """Evaluate one submitted entry and report its outcome."""
    if state.show_ast:
        program, errors = parse(text)
        if not errors:
            print(to_lark(program).pretty(), end="")

    try:
        result, errors = repl_eval(text, state.env)
    except (MonkeyRuntimeError, RecursionError) as exc:
        msg = "maximum recursion depth exceeded" if isinstance(exc, RecursionError) else str(exc)
        print(f"Error: {msg}", file=sys.stderr)
        if debug_py_trace_enabled():
            print("\nPython traceback:", file=sys.stderr)
            print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")
        return

    if errors:
        print_parser_errors(errors)
        return

    if result is not None:
        print(result.inspect())


def repl() -> None:
    """Read lines until EOF, evaluating each against one persistent environment."""
    init_stdlib()
    state = ReplState()

    bindings = KeyBindings()

    @bindings.add("backspace")
    def _backspace(event):
        buf = event.app.current_buffer
        buf.delete_before_cursor(1)
        if buf.text.startswith("/"):
            buf.start_completion()

    @bindings.add("enter")
    def _enter(event):
        buf = event.app.current_buffer
        text = buf.text

        # Unbalanced brackets => keep reading, indented by depth.
        depth = 0 if text.startswith("/") else _open_depth(text)
        if depth > 0:
            buf.insert_text("\n" + "    " * depth)
            return

        buf.validate_and_handle()

    session: PromptSession[str] = PromptSession(
        history=InMemoryHistory(),
        lexer=MonkeyLexer(),
        completer=_SlashCompleter(),
        complete_while_typing=True,
        key_bindings=bindings,
        multiline=True,
        prompt_continuation=".. ",
    )

    print("This is the Monkey programming language! Ctrl-D to exit, / for commands")

    while True:
        try:
            text = session.prompt(PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print("KeyboardInterrupt")
            continue

        text = _normalize(text)
        if not text.strip():
            continue

        if _handle_slash(text, state):
            continue

        eval_line(text, state)


def main() -> None:
    repl()


if __name__ == "__main__":
    main()

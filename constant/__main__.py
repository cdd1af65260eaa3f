"""CLI entry point for the Constant interpreter.

Usage:
    python -m constant [-v|-vv|-vvv|-vvvv] [--stack] <program_file>
    python -m constant [-v...]

Options:
  -v            Increase debug verbosity (can be repeated)
  --debug-file  Where debug information goes (default: debug.txt)
  --stack       Print the final operand stack after running a file

With a program file the interpreter runs it once and exits with status 1
on any lexer, parser or runtime error. Without one it starts an
interactive session: every line is run against the same stack and
variables, and the stack is echoed after each successful line.
"""

import argparse
import sys
from pathlib import Path
from typing import Callable

from .interpreter import Interpreter
from .types import format_stack

PROMPT = '> '
EXIT_WORDS = ('exit', 'quit')


def repl(interpreter: Interpreter, read_line: Callable[[str], str] = input) -> None:
    """Read, run and echo lines until end of input or an exit word."""
    while True:
        try:
            line = read_line(PROMPT)
        except EOFError:
            print()
            return
        if line.strip() in EXIT_WORDS:
            return
        if not line.strip():
            continue
        result = interpreter.run_source(line)
        if result.ok:
            print(format_stack(result.stack))
        else:
            print(f"Error: {result.error}", file=sys.stderr)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Constant language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--debug-file', default='debug.txt', help='file that receives debug output')
    parser.add_argument('--stack', action='store_true', help='print the final stack after running a file')
    parser.add_argument('program', nargs='?', help='Constant program file to execute; omit for interactive mode')
    args = parser.parse_args(argv)

    interpreter = Interpreter(debug_level=args.v, debug_file=args.debug_file)
    with interpreter:
        if not args.program:
            repl(interpreter)
            return
        program_file = Path(args.program)
        if not program_file.exists():
            print(f"Error: could not find source file '{program_file}'", file=sys.stderr)
            sys.exit(1)
        with open(program_file, 'r', encoding='utf-8') as f:
            source = f.read()
        result = interpreter.run_source(source)
        if not result.ok:
            print(f"Error: {result.error}", file=sys.stderr)
            sys.exit(1)
        if args.stack:
            print(format_stack(result.stack))


if __name__ == '__main__':
    main()

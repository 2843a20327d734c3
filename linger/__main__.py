"""CLI entry point for the Linger interpreter.

Usage:
    python -m linger [-v|-vv|-vvv|-vvvv] [--max-depth N] <program_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --max-depth   Maximum procedure call depth (default 1000)

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero. Program output goes to stdout; errors are
reported on stderr and end the process with status 1.
"""

import argparse
import sys
from pathlib import Path

from .errors import LingerError
from .interpreter import run_program
from .std.io import StreamSink
from .types import VOID, to_string


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(prog='linger', description="Linger language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    parser.add_argument('--max-depth', type=int, default=1000, metavar='N',
                        help='maximum procedure call depth')
    parser.add_argument('program', help='Linger program file to execute')
    args = parser.parse_args(argv)

    program_file = Path(args.program)
    if not program_file.is_file():
        print(f"error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        source = f.read()

    sink = StreamSink()
    try:
        result = run_program(source, sink=sink, debug_level=args.v, max_call_depth=args.max_depth)
    except LingerError as e:
        if not sink.at_line_start:
            sink.write('\n')
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    if not sink.at_line_start:
        sink.write('\n')
    if result is not VOID:
        sink.write(to_string(result) + '\n')


if __name__ == '__main__':
    main()

"""
Rewrite ``input.py`` in the working directory and print the result:

    python -m tailloop > output.py

A file that does not parse aborts with its SyntaxError and prints nothing.
"""

import sys
from pathlib import Path

from tailloop.recursive.tail_loop import TailLoopRewriter

INPUT_FILE = 'input.py'


def main(path: str = INPUT_FILE) -> int:
    source = Path(path).read_text(encoding='utf-8')
    output = TailLoopRewriter().transform_source(source, filename=path)
    sys.stdout.write(output)
    return 0


if __name__ == '__main__':
    sys.exit(main())

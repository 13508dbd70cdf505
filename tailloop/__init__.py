"""
tailloop: Tail-Recursion-to-Loop Rewriting for Python
=====================================================

tailloop recognizes self tail-recursive functions of a fixed shape, a
leading base-case guard and a final ``return f(...)``, and rewrites them
into equivalent ``while`` loops at the syntax-tree level.

Core Components:
    - recursive: tail-call detection, guard negation, staged parameter
      updates and body reassembly
    - compiler: source splicing and recompilation of rewritten functions

Usage:
    >>> import tailloop
    >>> @tailloop.tail_loop
    ... def total(n, acc):
    ...     if n == 0:
    ...         return acc
    ...     return total(n - 1, acc + n)
    >>> total(100000, 0)
    5000050000

    >>> print(tailloop.transform_source(open('input.py').read()))
"""

__version__ = "1.0.0"

from tailloop.recursive import (
    TailLoopRewriter,
    transform_source,
    tail_loop,
    tail_loop_optimize,
    TailCall,
    find_tail_call,
    extract_guard,
    extract_base_return,
    negate_condition,
    stage_parameters,
    rebuild_body,
)
from tailloop.compiler.source_printer import render_source, unparse_module

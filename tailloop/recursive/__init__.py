"""
Tail-Recursion Elimination
==========================

Five small passes, applied in order to each function declaration:

1. **Tail-Call Detector**: finds the ``return f(...)`` calling the function
   itself.
2. **Base-Case Extractor**: takes the leading ``if`` as the guard and its
   first ``return`` as the base case.
3. **Condition Negator**: turns ``==`` into ``!=`` and back, giving the loop
   condition.
4. **Parameter Updater**: stages the call's arguments through temporaries
   and assigns all parameters at once, so swapped arguments stay correct.
5. **Body Reassembler**: emits ``while cond: <update> <rest>`` followed by
   the base-case return.

The driver, ``TailLoopRewriter``, leaves every function that does not fit
this shape untouched.
"""

from tailloop.recursive.tail_call_detector import (
    TailCall,
    find_tail_call,
    is_self_call,
)
from tailloop.recursive.base_case import (
    extract_guard,
    extract_base_return,
)
from tailloop.recursive.negation import (
    negate_condition,
    is_negatable,
)
from tailloop.recursive.staging import (
    StagedUpdate,
    pair_arguments,
    stage_parameters,
)
from tailloop.recursive.reassembly import (
    rebuild_body,
)
from tailloop.recursive.tail_loop import (
    TailLoopRewriter,
    transform_source,
    tail_loop,
    tail_loop_optimize,
)

__all__ = [
    'TailCall',
    'find_tail_call',
    'is_self_call',
    'extract_guard',
    'extract_base_return',
    'negate_condition',
    'is_negatable',
    'StagedUpdate',
    'pair_arguments',
    'stage_parameters',
    'rebuild_body',
    'TailLoopRewriter',
    'transform_source',
    'tail_loop',
    'tail_loop_optimize',
]

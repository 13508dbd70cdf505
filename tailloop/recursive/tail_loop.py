"""
Tail-Loop Rewriter
==================

Rewrites self tail-recursive functions into ``while`` loops:

    def total(n, acc):                  def total(n, acc):
        if n == 0:                          while n != 0:
            return acc           ->             _tmp_n = n - 1
        return total(n - 1, acc + n)            _tmp_acc = acc + n
                                                n, acc = _tmp_n, _tmp_acc
                                            return acc

A function is rewritten only when all of the following hold:
    1. some ``return`` in its body returns a direct call to itself
    2. its first statement is an ``if`` whose then-branch opens with a
       ``return`` (the base case)

Anything else is left exactly as parsed. The shape is matched
syntactically: no termination, type or data-flow reasoning is done, and a
guard other than ``==``/``!=`` is carried into the loop unnegated.
"""

import ast
import inspect
import logging
import textwrap
import types
from collections import defaultdict
from typing import Callable, List, Optional

from .base_case import extract_base_return, extract_guard
from .negation import is_negatable, negate_condition
from .reassembly import rebuild_body
from .staging import DEFAULT_TEMP_PREFIX, stage_parameters
from .tail_call_detector import find_tail_call
from ..compiler.function_compiler import compile_function
from ..compiler.source_printer import render_source, unparse_function
from ..utils.helpers import collect_identifiers

logger = logging.getLogger(__name__)


class TailLoopRewriter:
    """
    Tail-recursion elimination over Python syntax trees.

    Usage:
        >>> rewriter = TailLoopRewriter()
        >>> print(rewriter.transform_source(source))

        >>> def total(n, acc):
        ...     if n == 0:
        ...         return acc
        ...     return total(n - 1, acc + n)
        >>> fast = rewriter.optimize(total)
        >>> fast(100000, 0)
        5000050000
    """

    def __init__(self, temp_prefix: str = DEFAULT_TEMP_PREFIX, enable_logging: bool = False):
        self.temp_prefix = temp_prefix
        self.stats = defaultdict(int)

        if enable_logging:
            logging.basicConfig(level=logging.DEBUG)

    # ---- Single function ----

    def rewrite_function(self, node: ast.FunctionDef) -> bool:
        """
        Rewrite *node* in place. Returns True if its body was replaced.

        Nothing under *node* is touched unless every step succeeds.
        """
        self.stats['functions_seen'] += 1
        if not node.body:
            return False

        tail = find_tail_call(node)
        if tail is None:
            self.stats['skipped_no_tail_call'] += 1
            logger.debug("%s: no tail self-call", node.name)
            return False

        guard = extract_guard(node.body)
        if guard is None:
            self.stats['skipped_no_guard'] += 1
            logger.debug("%s: first statement is not a guard 'if'", node.name)
            return False

        base_return = extract_base_return(guard)
        if base_return is None:
            self.stats['skipped_no_base_return'] += 1
            logger.debug("%s: guard does not open with a return", node.name)
            return False

        if is_negatable(guard.test):
            self.stats['conditions_negated'] += 1
        condition = negate_condition(guard.test)

        reserved = collect_identifiers(node)
        staging = stage_parameters(node.args, tail.call, reserved, self.temp_prefix)
        # the combined tuple assignment is not a staged parameter
        self.stats['parameters_staged'] += max(len(staging) - 1, 0)

        node.body = rebuild_body(
            node.body, guard, condition, staging, tail.ret, base_return,
        )
        self.stats['functions_rewritten'] += 1
        logger.debug("%s: rewritten as a loop", node.name)
        return True

    # ---- Source unit ----

    def rewrite_module(self, tree: ast.Module) -> List[ast.FunctionDef]:
        """
        Rewrite every top-level function of *tree* in source order.

        Returns the functions that were rewritten. Each declaration is
        handled on its own; one function's outcome never affects another.
        """
        rewritten = []
        for node in tree.body:
            if isinstance(node, ast.FunctionDef) and self.rewrite_function(node):
                rewritten.append(node)
        return rewritten

    def transform_source(self, source: str, filename: str = '<unknown>') -> str:
        """
        Parse *source*, rewrite it and return the resulting text.

        Raises SyntaxError if *source* does not parse. Functions that are not
        rewritten keep their original text byte for byte.
        """
        tree = ast.parse(source, filename=filename)
        rewritten = self.rewrite_module(tree)
        return render_source(source, rewritten)

    # ---- Live functions ----

    def optimize(self, func: Callable) -> Callable:
        """
        Return an iterative version of *func*.

        *func* is returned unchanged when its source is unavailable or does
        not have the tail-recursive shape.
        """
        if not callable(func):
            raise TypeError(f"Expected callable, got {type(func).__name__}")
        if not isinstance(func, types.FunctionType):
            raise TypeError(f"Expected a Python function, got {type(func).__name__}")

        node = self._parse_function(func)
        if node is None or not self.rewrite_function(node):
            return func

        optimized = compile_function(node, func)
        optimized.__tailloop_original__ = func
        optimized.__tailloop_rewritten__ = True
        optimized.__tailloop_source__ = unparse_function(node)
        return optimized

    def get_rewritten_source(self, func: Callable) -> Optional[str]:
        """Return the rewritten source of *func*, or None if it does not match."""
        node = self._parse_function(func)
        if node is None or not self.rewrite_function(node):
            return None
        return unparse_function(node)

    @staticmethod
    def _parse_function(func: Callable) -> Optional[ast.FunctionDef]:
        try:
            source = textwrap.dedent(inspect.getsource(func))
        except (OSError, TypeError):
            # Source not available (builtins, exec'd code)
            return None

        tree = ast.parse(source)
        for node in tree.body:
            if isinstance(node, ast.FunctionDef) and node.name == func.__name__:
                return node
        return None


# ---- Convenience API ----

def transform_source(source: str, filename: str = '<unknown>', **kwargs) -> str:
    """Functional interface: rewrite every matching function in *source*."""
    return TailLoopRewriter(**kwargs).transform_source(source, filename)


def tail_loop(func: Optional[Callable] = None, **kwargs):
    """
    Decorator replacing a tail-recursive function with its loop form.

    Usage:
        @tail_loop
        def gcd(a, b):
            if b == 0:
                return a
            return gcd(b, a % b)

        @tail_loop(temp_prefix='_next_')
        def count_down(n):
            ...
    """
    if func is not None:
        return TailLoopRewriter().optimize(func)

    def decorator(f):
        return TailLoopRewriter(**kwargs).optimize(f)
    return decorator


def tail_loop_optimize(func: Callable, **kwargs) -> Callable:
    """
    Functional interface for the decorator.

    Usage:
        fast_gcd = tail_loop_optimize(gcd)
    """
    return TailLoopRewriter(**kwargs).optimize(func)

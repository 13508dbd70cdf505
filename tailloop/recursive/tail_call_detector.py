"""
Tail-Call Detector
==================

Locates the return statement of a function whose single result is a direct
call to the function itself:

    def gcd(a, b):
        if b == 0:
            return a
        return gcd(b, a % b)      # <- found

The search is a pre-order depth-first walk over every statement reachable
from the body (nested ``if``/``while``/``for``/``try``/``with``/``match``
blocks included). Nested scopes are not entered, since a ``return`` inside
an inner ``def``, ``class`` or ``lambda`` leaves a different function.

The walk is a pure function of the tree: it returns an explicit optional
result on the first match and never mutates anything.
"""

import ast
from dataclasses import dataclass
from typing import Iterable, Optional


_NESTED_SCOPES = (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef, ast.Lambda)


@dataclass(frozen=True)
class TailCall:
    """The tail-recursive ``return`` and the self-call it returns."""
    ret: ast.Return
    call: ast.Call


def is_self_call(node: Optional[ast.AST], func_name: str) -> bool:
    """True if *node* is ``func_name(...)`` called through a plain name."""
    return (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id == func_name
    )


def _single_result(ret: ast.Return) -> Optional[ast.expr]:
    # ``return`` has no result, ``return a, b`` has several.
    if ret.value is None or isinstance(ret.value, ast.Tuple):
        return None
    return ret.value


def _search(nodes: Iterable[ast.AST], func_name: str) -> Optional[TailCall]:
    for node in nodes:
        if isinstance(node, _NESTED_SCOPES):
            continue
        if isinstance(node, ast.Return):
            result = _single_result(node)
            if is_self_call(result, func_name):
                return TailCall(ret=node, call=result)
        found = _search(ast.iter_child_nodes(node), func_name)
        if found is not None:
            return found
    return None


def find_tail_call(func: ast.FunctionDef) -> Optional[TailCall]:
    """
    Find the first ``return func(...)`` in *func*'s body.

    Returns None when the function never returns a direct self-call. When
    several tail-recursive returns exist only the first one in traversal
    order is reported.
    """
    return _search(func.body, func.name)

"""
Body Reassembler
================

Composes the iterative body of a rewritten function:

    while <negated guard>:
        <staged parameter update>
        <remaining statements>
    <base-case return>

The remaining statements are the rest of the original body, minus the
whole guard (its ``else`` branch included) and the tail-recursive
``return``. The base-case return is placed after the loop unconditionally:
the loop only exits once the guard holds.
"""

import ast
from typing import List


def remainder(
    body: List[ast.stmt],
    guard: ast.If,
    tail_return: ast.Return,
) -> List[ast.stmt]:
    """Statements that run on every iteration after the parameter update."""
    return [
        stmt for stmt in body
        if stmt is not guard and stmt is not tail_return
    ]


def rebuild_body(
    body: List[ast.stmt],
    guard: ast.If,
    condition: ast.expr,
    staging: List[ast.stmt],
    tail_return: ast.Return,
    base_return: ast.Return,
) -> List[ast.stmt]:
    """Return the two-statement body: the loop, then the base-case return."""
    loop_body = staging + remainder(body, guard, tail_return)
    loop = ast.While(
        test=condition,
        body=loop_body or [ast.Pass()],
        orelse=[],
    )
    return [loop, base_return]

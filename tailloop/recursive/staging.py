"""
Parameter Updater
=================

Converts the arguments of a tail self-call into a simultaneous update of
the function's parameters. The update is staged through temporaries so that
every new value is computed from the pre-update state:

    return f(b, a)

becomes

    _tmp_a = b
    _tmp_b = a
    a, b = _tmp_a, _tmp_b

A direct ``a = b; b = a`` would leave both parameters holding ``b``.

Pairing rules:
    - positional arguments pair with ``posonlyargs + args`` by position; the
      longer side is truncated to the shorter one
    - a starred argument (``f(*rest)``) ends the positional pairing
    - keyword arguments bind to the parameter of that name unless it is
      already bound positionally; unknown names and ``**kw`` splats are
      dropped
    - ``*args`` and ``**kwargs`` parameters are never reassigned
"""

import ast
import copy
from dataclasses import dataclass
from typing import List, Set, Tuple

from ..utils.helpers import fresh_name


DEFAULT_TEMP_PREFIX = '_tmp_'


@dataclass
class StagedUpdate:
    """Parameter name, its temporary, and the argument expression it takes."""
    parameter: str
    temporary: str
    value: ast.expr


def pair_arguments(arguments: ast.arguments, call: ast.Call) -> List[Tuple[str, ast.expr]]:
    """
    Pair parameters of a signature with the argument expressions of a call.

    Returns ``(parameter_name, argument)`` pairs, positional parameters first
    in declaration order, then keyword-bound parameters in call order.
    """
    positional = [a.arg for a in arguments.posonlyargs + arguments.args]
    by_keyword = [a.arg for a in arguments.args + arguments.kwonlyargs]

    pairs = []
    bound = set()
    for name, value in zip(positional, call.args):
        if isinstance(value, ast.Starred):
            break
        pairs.append((name, value))
        bound.add(name)

    for keyword in call.keywords:
        if keyword.arg is None:
            continue
        if keyword.arg in by_keyword and keyword.arg not in bound:
            pairs.append((keyword.arg, keyword.value))
            bound.add(keyword.arg)

    return pairs


def plan_updates(
    arguments: ast.arguments,
    call: ast.Call,
    reserved: Set[str],
    temp_prefix: str = DEFAULT_TEMP_PREFIX,
) -> List[StagedUpdate]:
    """Choose a fresh temporary for every parameter the call reassigns."""
    return [
        StagedUpdate(
            parameter=name,
            temporary=fresh_name(f'{temp_prefix}{name}', reserved),
            value=value,
        )
        for name, value in pair_arguments(arguments, call)
    ]


def stage_parameters(
    arguments: ast.arguments,
    call: ast.Call,
    reserved: Set[str],
    temp_prefix: str = DEFAULT_TEMP_PREFIX,
) -> List[ast.stmt]:
    """
    Build the two-phase update for the parameters reassigned by *call*.

    *reserved* holds every identifier already used by the function; the
    temporaries chosen here are added to it. Returns an empty list when no
    parameter is reassigned.
    """
    updates = plan_updates(arguments, call, reserved, temp_prefix)
    if not updates:
        return []

    stmts: List[ast.stmt] = [
        ast.Assign(
            targets=[ast.Name(id=u.temporary, ctx=ast.Store())],
            value=copy.deepcopy(u.value),
        )
        for u in updates
    ]

    stmts.append(
        ast.Assign(
            targets=[ast.Tuple(
                elts=[ast.Name(id=u.parameter, ctx=ast.Store()) for u in updates],
                ctx=ast.Store(),
            )],
            value=ast.Tuple(
                elts=[ast.Name(id=u.temporary, ctx=ast.Load()) for u in updates],
                ctx=ast.Load(),
            ),
        )
    )
    return stmts

"""
Condition Negator
=================

Turns a base-case guard into the condition under which the loop keeps
running. Only equality guards are handled:

    if n == 0: ...   ->   while n != 0: ...
    if n != 0: ...   ->   while n == 0: ...

Any other condition is returned as-is. For ``n < 1``, ``not done`` or a
chained comparison this yields a loop condition with the wrong polarity;
the rewriter accepts that rather than guessing at a wider negation scheme.
"""

import ast
import copy
import logging

logger = logging.getLogger(__name__)


NEGATED_OPERATORS = {
    ast.Eq: ast.NotEq,
    ast.NotEq: ast.Eq,
}


def is_negatable(test: ast.expr) -> bool:
    """True if *test* is a single ``==`` or ``!=`` comparison."""
    return (
        isinstance(test, ast.Compare)
        and len(test.ops) == 1
        and type(test.ops[0]) in NEGATED_OPERATORS
    )


def negate_condition(test: ast.expr) -> ast.expr:
    """
    Return the loop-continuation condition for guard *test*.

    A negated comparison is a new node with copied operands; an
    unsupported condition is the original node, unchanged.
    """
    if not is_negatable(test):
        logger.debug("guard %r left unnegated", ast.unparse(test))
        return test

    negated_op = NEGATED_OPERATORS[type(test.ops[0])]
    return ast.Compare(
        left=copy.deepcopy(test.left),
        ops=[negated_op()],
        comparators=[copy.deepcopy(test.comparators[0])],
    )

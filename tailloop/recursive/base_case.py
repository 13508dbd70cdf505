"""Base-case extraction: the guard ``if`` at the top of a function body."""

import ast
from typing import List, Optional


def extract_guard(body: List[ast.stmt]) -> Optional[ast.If]:
    """Return the body's first statement if it is an ``if``, else None."""
    if body and isinstance(body[0], ast.If):
        return body[0]
    return None


def extract_base_return(guard: ast.If) -> Optional[ast.Return]:
    """
    Return the base-case ``return`` opening the guard's then-branch.

    Only the first statement of the branch is considered; anything after it
    is not carried into the rewritten function. Whether the returned value
    avoids recursion is not checked.
    """
    if guard.body and isinstance(guard.body[0], ast.Return):
        return guard.body[0]
    return None

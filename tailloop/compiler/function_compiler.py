"""
Function Compiler
=================

Compiles a rewritten ``def`` back into a live function object bound to the
original function's globals.
"""

import ast
import copy
import functools
import types
from typing import Callable


def compile_function(node: ast.FunctionDef, original_func: Callable) -> Callable:
    """
    Compile *node* and return the function it defines.

    The decorators of *node* are dropped: the source was taken from a
    decorated definition and re-applying them would recurse into the
    rewriter. Functions with free variables cannot be rebuilt from source
    alone and raise TypeError.
    """
    if not isinstance(original_func, types.FunctionType):
        raise TypeError(f"Expected a Python function, got {type(original_func).__name__}")
    if original_func.__code__.co_freevars:
        raise TypeError(
            f"Cannot recompile closure {original_func.__qualname__!r} "
            f"(free variables: {', '.join(original_func.__code__.co_freevars)})"
        )

    bare = copy.copy(node)
    bare.decorator_list = []
    module = ast.fix_missing_locations(ast.Module(body=[bare], type_ignores=[]))
    code = compile(module, f'<tailloop:{original_func.__name__}>', 'exec')

    namespace = dict(original_func.__globals__)
    exec(code, namespace)

    # rebind to the live module globals so later definitions stay visible
    compiled = types.FunctionType(
        namespace[node.name].__code__,
        original_func.__globals__,
        original_func.__name__,
        original_func.__defaults__,
    )
    compiled.__kwdefaults__ = original_func.__kwdefaults__

    functools.update_wrapper(compiled, original_func)
    return compiled

"""Utility helpers for tailloop."""

import ast
from typing import Set


def collect_identifiers(node: ast.AST) -> Set[str]:
    """
    Gather every identifier bound or referenced under *node*.

    Covers plain names, parameter names, the function's own name and names
    introduced by ``global``/``nonlocal``, imports and exception handlers.
    """
    names = set()
    for child in ast.walk(node):
        if isinstance(child, ast.Name):
            names.add(child.id)
        elif isinstance(child, ast.arg):
            names.add(child.arg)
        elif isinstance(child, (ast.FunctionDef, ast.AsyncFunctionDef, ast.ClassDef)):
            names.add(child.name)
        elif isinstance(child, (ast.Global, ast.Nonlocal)):
            names.update(child.names)
        elif isinstance(child, ast.alias):
            names.add((child.asname or child.name).split('.')[0])
        elif isinstance(child, ast.ExceptHandler) and child.name:
            names.add(child.name)
    return names


def fresh_name(base: str, reserved: Set[str]) -> str:
    """
    Return *base*, or *base* with the smallest numeric suffix, that is not in
    *reserved*. The chosen name is added to *reserved*.
    """
    name = base
    counter = 0
    while name in reserved:
        counter += 1
        name = f'{base}_{counter}'
    reserved.add(name)
    return name

"""
Source Printer
==============

Serializes a module after rewriting. ``ast.unparse`` drops comments and
normalizes formatting, so only the functions that were actually rewritten
are re-emitted; every other byte of the input is copied through:

    # helper, left alone            # helper, left alone
    def keep(x):                     def keep(x):
        return x  # note      ->         return x  # note

    @trace                           @trace
    def total(n, acc):               def total(n, acc):
        if n == 0:                       while n != 0:
            return acc                       ...
        return total(n-1, acc+n)         return acc

Decorators sit above the ``def`` keyword's position and are therefore kept
verbatim too.
"""

import ast
import copy
from typing import List


def unparse_function(node: ast.FunctionDef) -> str:
    """Unparse *node* from its ``def`` keyword, without decorators."""
    bare = copy.copy(node)
    bare.decorator_list = []
    return ast.unparse(ast.fix_missing_locations(bare))


def unparse_module(tree: ast.Module) -> str:
    """Unparse a whole module."""
    return ast.unparse(ast.fix_missing_locations(tree))


def _line_offsets(data: bytes) -> List[int]:
    offsets = [0]
    for line in data.splitlines(keepends=True):
        offsets.append(offsets[-1] + len(line))
    return offsets


def _indent(text: str, prefix: str) -> str:
    lines = text.split('\n')
    return '\n'.join([lines[0]] + [prefix + line if line else line for line in lines[1:]])


def render_source(source: str, rewritten: List[ast.FunctionDef]) -> str:
    """
    Return *source* with the text of each rewritten function replaced.

    Node positions are the ones recorded when *source* was parsed; column
    offsets are UTF-8 byte offsets, so the splice works on encoded bytes.
    """
    if not rewritten:
        return source

    data = source.encode('utf-8')
    offsets = _line_offsets(data)

    for node in sorted(rewritten, key=lambda n: (n.lineno, n.col_offset), reverse=True):
        first_line = offsets[node.lineno - 1]
        last_line = offsets[node.end_lineno - 1]
        start = first_line + node.col_offset
        end = last_line + node.end_col_offset

        line_end = last_line + len(data[last_line:offsets[node.end_lineno]].rstrip(b'\r\n'))
        trailing = data[end:line_end].strip()
        if not trailing or trailing.startswith(b'#'):
            # a comment on the last line belongs to the replaced body
            end = line_end

        leading = data[first_line:start].decode('utf-8')
        prefix = leading if leading.isspace() else ''
        text = _indent(unparse_function(node), prefix)
        data = data[:start] + text.encode('utf-8') + data[end:]

    return data.decode('utf-8')

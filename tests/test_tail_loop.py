"""
Tests for the tail-loop rewriter.

Validates:
  - The accumulator rewrite and its equivalence with the recursive form
  - Swap safety of the staged update
  - Pass-through of non-matching functions, byte for byte
  - Idempotence: a rewritten function is skipped on the next run
  - Independence across declarations, truncation of argument lists
  - Statistics and debug logging
"""

import ast
import logging
import textwrap

import pytest

from tailloop.recursive.tail_loop import TailLoopRewriter, transform_source


SUM_SOURCE = textwrap.dedent("""\
    def Sum(n, acc):
        if n == 0:
            return acc
        else:
            return Sum(n - 1, acc + n)
""")

SUM_EXPECTED = textwrap.dedent("""\
    def Sum(n, acc):
        while n != 0:
            _tmp_n = n - 1
            _tmp_acc = acc + n
            n, acc = _tmp_n, _tmp_acc
        return acc
""")

SWAP_SOURCE = textwrap.dedent("""\
    def F(a, b):
        if a == 0:
            return b
        return F(b, a)
""")

COUNTED_SWAP_SOURCE = textwrap.dedent("""\
    def G(a, b, n):
        if n == 0:
            return (a, b)
        return G(b, a + b, n - 1)
""")


def same_code(actual: str, expected: str) -> bool:
    return ast.dump(ast.parse(actual)) == ast.dump(ast.parse(expected))


def load(source: str, name: str):
    namespace = {}
    exec(compile(source, '<test>', 'exec'), namespace)
    return namespace[name]


class TestRewriteSource:
    def setup_method(self):
        self.rewriter = TailLoopRewriter()

    def test_accumulator_rewrite_shape(self):
        output = self.rewriter.transform_source(SUM_SOURCE)
        assert same_code(output, SUM_EXPECTED)

    def test_accumulator_equivalence(self):
        recursive = load(SUM_SOURCE, 'Sum')
        iterative = load(self.rewriter.transform_source(SUM_SOURCE), 'Sum')
        for n0 in [0, 1, 2, 10, 100, 500]:
            assert iterative(n0, 0) == recursive(n0, 0) == n0 * (n0 + 1) // 2

    def test_accumulator_beyond_recursion_limit(self):
        iterative = load(self.rewriter.transform_source(SUM_SOURCE), 'Sum')
        assert iterative(50000, 0) == 50000 * 50001 // 2

    def test_swap_updates_simultaneously(self):
        recursive = load(SWAP_SOURCE, 'F')
        iterative = load(self.rewriter.transform_source(SWAP_SOURCE), 'F')
        for a0, b0 in [(0, 5), (7, 0), (0, 0), (-3, 0)]:
            assert iterative(a0, b0) == recursive(a0, b0)
        # a sequential update would set both parameters to 0
        assert iterative(7, 0) == 7

    def test_swap_sequence_matches_recursion(self):
        recursive = load(COUNTED_SWAP_SOURCE, 'G')
        iterative = load(self.rewriter.transform_source(COUNTED_SWAP_SOURCE), 'G')
        for a0, b0 in [(0, 1), (3, 8), (-2, 5)]:
            for n in range(12):
                assert iterative(a0, b0, n) == recursive(a0, b0, n)

    def test_inequality_guard_negated(self):
        source = textwrap.dedent("""\
            def drain(x, steps):
                if x != 0:
                    return steps
                return drain(x, steps + 1)
        """)
        tree = ast.parse(self.rewriter.transform_source(source))
        loop = tree.body[0].body[0]
        assert ast.unparse(loop.test) == 'x == 0'

    def test_other_guard_carried_unnegated(self):
        source = textwrap.dedent("""\
            def count(n):
                if n < 1:
                    return n
                return count(n - 1)
        """)
        tree = ast.parse(self.rewriter.transform_source(source))
        assert ast.unparse(tree.body[0].body[0].test) == 'n < 1'

    def test_remaining_statements_move_into_loop(self):
        source = textwrap.dedent("""\
            def collect(n, out):
                if n == 0:
                    return out
                out.append(n)
                return collect(n - 1, out)
        """)
        output = self.rewriter.transform_source(source)
        assert same_code(output, textwrap.dedent("""\
            def collect(n, out):
                while n != 0:
                    _tmp_n = n - 1
                    _tmp_out = out
                    n, out = _tmp_n, _tmp_out
                    out.append(n)
                return out
        """))

    def test_else_statements_not_moved_into_loop(self):
        source = textwrap.dedent("""\
            def f(n, acc):
                if n == 0:
                    return acc
                else:
                    acc = acc * 2
                    return f(n - 1, acc + 1)
        """)
        output = self.rewriter.transform_source(source)
        assert 'acc * 2' not in output
        loop = ast.parse(output).body[0].body[0]
        assert len(loop.body) == 3

    def test_extra_base_case_statements_dropped(self):
        source = textwrap.dedent("""\
            def f(n):
                if n == 0:
                    return n
                    n = 99
                return f(n - 1)
        """)
        output = self.rewriter.transform_source(source)
        assert '99' not in output

    def test_fewer_arguments_leave_parameter_untouched(self):
        source = textwrap.dedent("""\
            def total(n, acc, scale):
                if n == 0:
                    return acc * scale
                return total(n - 1, acc + n)
        """)
        output = self.rewriter.transform_source(source)
        assert 'n, acc = (_tmp_n, _tmp_acc)' in output or 'n, acc = _tmp_n, _tmp_acc' in output
        assert '_tmp_scale' not in output
        assert load(output, 'total')(4, 0, 2) == 20

    def test_keyword_arguments_staged(self):
        source = textwrap.dedent("""\
            def total(n, acc=0):
                if n == 0:
                    return acc
                return total(n - 1, acc=acc + n)
        """)
        assert load(self.rewriter.transform_source(source), 'total')(10) == 55


class TestPassThrough:
    def setup_method(self):
        self.rewriter = TailLoopRewriter()

    @pytest.mark.parametrize('source', [
        # first statement is not a guard
        "def f(n):\n    n = n  # keep\n    return f(n - 1)\n",
        # no self-call
        "def f(n):\n    if n == 0:\n        return 1\n    return g(n - 1)\n",
        # recursion not in tail position
        "def f(n):\n    if n == 0:\n        return 1\n    return n * f(n - 1)\n",
        # guard branch does not open with a return
        "def f(n):\n    if n == 0:\n        print(n)\n        return 1\n    return f(n - 1)\n",
        # methods and async functions are not module declarations
        "class A:\n    def f(self, n):\n        if n == 0:\n            return 1\n        return f(n - 1)\n",
        "async def f(n):\n    if n == 0:\n        return 1\n    return f(n - 1)\n",
        "",
    ])
    def test_non_matching_source_unchanged(self, source):
        assert self.rewriter.transform_source(source) == source
        assert self.rewriter.stats['functions_rewritten'] == 0

    def test_idempotent(self):
        once = self.rewriter.transform_source(SUM_SOURCE)
        twice = TailLoopRewriter().transform_source(once)
        assert twice == once

    def test_independence_across_declarations(self):
        untouched = textwrap.dedent("""\
            # helpers
            def scale(x, factor):   # odd   spacing kept
                return x*factor
        """)
        source = untouched + '\n\n' + SUM_SOURCE
        output = self.rewriter.transform_source(source)
        assert output.startswith(untouched + '\n\n')
        assert same_code(output[len(untouched) + 2:], SUM_EXPECTED)
        assert self.rewriter.stats['functions_seen'] == 2
        assert self.rewriter.stats['functions_rewritten'] == 1

    def test_each_declaration_rewritten(self):
        output = self.rewriter.transform_source(SUM_SOURCE + '\n' + SWAP_SOURCE)
        tree = ast.parse(output)
        assert [type(node.body[0]).__name__ for node in tree.body] == ['While', 'While']

    def test_syntax_error_propagates(self):
        with pytest.raises(SyntaxError):
            self.rewriter.transform_source("def broken(:\n    pass\n")


class TestRewriteFunction:
    def setup_method(self):
        self.rewriter = TailLoopRewriter()

    def test_skip_leaves_tree_untouched(self):
        source = "def f(n):\n    if n == 0:\n        print(n)\n    return f(n - 1)\n"
        tree = ast.parse(source)
        before = ast.dump(tree)
        assert self.rewriter.rewrite_function(tree.body[0]) is False
        assert ast.dump(tree) == before
        assert self.rewriter.stats['skipped_no_base_return'] == 1

    def test_rewrite_module_returns_rewritten(self):
        tree = ast.parse(SWAP_SOURCE + "\ndef other():\n    return 1\n")
        rewritten = self.rewriter.rewrite_module(tree)
        assert [node.name for node in rewritten] == ['F']

    def test_statistics(self):
        self.rewriter.transform_source(SUM_SOURCE + "\ndef plain():\n    return 1\n")
        stats = self.rewriter.stats
        assert stats['functions_seen'] == 2
        assert stats['functions_rewritten'] == 1
        assert stats['skipped_no_tail_call'] == 1
        assert stats['conditions_negated'] == 1
        assert stats['parameters_staged'] == 2

    def test_skip_reason_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger='tailloop.recursive.tail_loop'):
            self.rewriter.transform_source("def plain():\n    return 1\n")
        assert 'plain: no tail self-call' in caplog.text


class TestFunctionalInterface:
    def test_transform_source_kwargs(self):
        output = transform_source(SUM_SOURCE, temp_prefix='_next_')
        assert '_next_n = n - 1' in output

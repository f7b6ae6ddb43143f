"""Static loop-control check. A break or continue that no loop encloses is rejected before a program starts running,
so a program with a stray one produces no output at all, even if control would never reach it.
"""

from lack.core import ast
from lack.lang.error import LackRuntimeError


LOOPS = (ast.While, ast.RepeatUntil, ast.RepeatFor)


def stray_loop_control(statements, in_loop=False):
    """Yields every Break/Continue node in statements that is not inside a loop body, in source order."""
    for stmt in statements:
        if isinstance(stmt, (ast.Break, ast.Continue)):
            if not in_loop:
                yield stmt
        elif isinstance(stmt, ast.Block):
            yield from stray_loop_control(stmt.statements, in_loop)
        elif isinstance(stmt, ast.If):
            branches = [stmt.then_branch] if stmt.else_branch is None else [stmt.then_branch, stmt.else_branch]
            yield from stray_loop_control(branches, in_loop)
        elif isinstance(stmt, LOOPS):
            yield from stray_loop_control([stmt.body], True)


def check_loop_control(statements):
    """Raises LackRuntimeError at the first break/continue that is outside every loop."""
    for stmt in stray_loop_control(statements):
        keyword = stmt.token.lexeme
        raise LackRuntimeError(f"'{keyword}' must be inside a loop", token=stmt.token)

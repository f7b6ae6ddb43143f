"""Tree-walking evaluator for the lack language.

Runtime values are None (nil), bool, float and str; nothing else ever reaches a binding. Every statement executes to
a Completion: NORMAL, or BREAK/CONTINUE travelling outward through enclosing blocks until the nearest loop consumes
it. Runtime errors are LackRuntimeErrors raised at the offending token; the first one aborts the rest of the run.
"""

import enum
import math
import re
import sys

from lack.core import ast
from lack.core.check import check_loop_control
from lack.core.environment import UNDEFINED, Environment
from lack.core.tokens import TokenType
from lack.lang.error import LackRuntimeError


class Completion(enum.Enum):
    """How a statement finished."""
    NORMAL = enum.auto()
    BREAK = enum.auto()
    CONTINUE = enum.auto()


EXPR_HANDLERS = {
    ast.Literal: "visit_literal",
    ast.Grouping: "visit_grouping",
    ast.Unary: "visit_unary",
    ast.Binary: "visit_binary",
    ast.Logical: "visit_logical",
    ast.Variable: "visit_variable",
    ast.Assign: "visit_assign",
}

STMT_HANDLERS = {
    ast.Expression: "exec_expression",
    ast.Write: "exec_write",
    ast.Let: "exec_let",
    ast.Block: "exec_block",
    ast.If: "exec_if",
    ast.While: "exec_while",
    ast.RepeatUntil: "exec_repeat_until",
    ast.RepeatFor: "exec_repeat_for",
    ast.Break: "exec_break",
    ast.Continue: "exec_continue",
    ast.Read: "exec_read",
    ast.ReadNum: "exec_read_num",
}

# number text accepted by readnum: the literal forms of the scanner, with an optional sign
NUMBER_INPUT = re.compile(r"[+-]?([0-9]+(\.[0-9]+)?|\.[0-9]+)")


def unhandled(base, handlers):
    """Names of the direct subclasses of base that have no entry in handlers."""
    return [cls.__name__ for cls in base.__subclasses__() if cls not in handlers]


# an unhandled node variant is an import-time failure, not a silently ignored node
for _base, _handlers in ((ast.Expr, EXPR_HANDLERS), (ast.Stmt, STMT_HANDLERS)):
    _missing = unhandled(_base, _handlers)
    if _missing:
        raise TypeError(f"no handler for {_base.__name__} variant(s): {', '.join(_missing)}")


def is_truthy(value):
    """nil, false, the number 0.0 and the empty string are falsy; everything else is truthy. -0.0 is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return repr(value) != "0.0"
    if isinstance(value, str):
        return value != ""
    return True


def is_equal(left, right):
    """Value equality with no cross-type coercion: 1 == true and 1 == "1" are both false."""
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    return type(left) is type(right) and left == right


def stringify(value):
    """Display text of a runtime value. Whole numbers lose their trailing '.0'."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = repr(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return value


def is_number(value):
    return isinstance(value, float)


def is_integral(value):
    return is_number(value) and value % 1 == 0


class Interpreter:
    """Executes statement lists. The global scope survives between interpret calls, so a shell can keep its
    variables from one input line to the next.
    """

    def __init__(self, stdin=None, stdout=None):
        self.stdin = stdin    # None means sys.stdin at read time
        self.stdout = stdout  # None means sys.stdout at write time

        self.environment = Environment()
        self.scope = Environment.GLOBAL

        self._visitors = {cls: getattr(self, name) for cls, name in EXPR_HANDLERS.items()}
        self._executors = {cls: getattr(self, name) for cls, name in STMT_HANDLERS.items()}

    def interpret(self, statements):
        """Runs statements in the global scope. Raises LackRuntimeError on the first runtime error; output written
        before it is kept.
        """
        check_loop_control(statements)

        self.scope = Environment.GLOBAL
        for stmt in statements:
            self.execute(stmt)

    def execute(self, stmt):
        return self._executors[type(stmt)](stmt)

    def evaluate(self, expr):
        return self._visitors[type(expr)](expr)

    # --------------------------------------------------------------------------------------------------- expressions

    def visit_literal(self, expr):
        return expr.value

    def visit_grouping(self, expr):
        return self.evaluate(expr.expression)

    def visit_unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.NOT:
            return not is_truthy(right)

        self.check_number_operand(expr.operator, right)
        return -right

    def visit_binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator
        op = operator.type

        if op is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if op is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if op is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LackRuntimeError("Operands must be two numbers or two strings", token=operator)

        if op is TokenType.STAR and (isinstance(left, str) or isinstance(right, str)):
            return self.repeat_string(operator, left, right)

        self.check_number_operands(operator, left, right)

        if op is TokenType.MINUS:
            return left - right
        if op is TokenType.STAR:
            return left * right
        if op is TokenType.SLASH:
            if right == 0:
                raise LackRuntimeError("Division by zero", token=operator)
            return left / right
        if op is TokenType.MODULO:
            if right == 0:
                raise LackRuntimeError("Modulo by zero", token=operator)
            return math.fmod(left, right)
        if op is TokenType.GREATER:
            return left > right
        if op is TokenType.GREATER_EQUAL:
            return left >= right
        if op is TokenType.LESS:
            return left < right
        if op is TokenType.LESS_EQUAL:
            return left <= right

        raise LackRuntimeError(f"Unknown binary operator '{operator.lexeme}'", token=operator)

    @staticmethod
    def repeat_string(operator, left, right):
        """string * n and n * string, for a whole, non-negative number n."""
        string, count = (left, right) if isinstance(left, str) else (right, left)
        if not is_integral(count) or count < 0:
            raise LackRuntimeError("String can only be multiplied by int", token=operator)
        return string * int(count)

    def visit_logical(self, expr):
        left = self.evaluate(expr.left)
        op = expr.operator.type

        if op is TokenType.OR:
            if is_truthy(left):
                return left
            return self.evaluate(expr.right)

        if op is TokenType.AND:
            if not is_truthy(left):
                return left
            return self.evaluate(expr.right)

        # xor: same result as (left and not right) or (not left and right), each operand evaluated once
        right = self.evaluate(expr.right)
        if is_truthy(left):
            return not is_truthy(right)
        return right

    def visit_variable(self, expr):
        value = self.environment.lookup(self.scope, expr.name.lexeme)
        if value is UNDEFINED:
            raise LackRuntimeError(f"Undefined variable '{expr.name.lexeme}'", token=expr.name)
        return value

    def visit_assign(self, expr):
        value = self.evaluate(expr.value)
        self.assign(expr.name, value)
        return value

    # ---------------------------------------------------------------------------------------------------- statements

    def exec_expression(self, stmt):
        self.evaluate(stmt.expression)
        return Completion.NORMAL

    def exec_write(self, stmt):
        value = self.evaluate(stmt.expression)

        stdout = self.stdout if self.stdout is not None else sys.stdout
        stdout.write(stringify(value) + stmt.end)
        stdout.flush()
        return Completion.NORMAL

    def exec_let(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)

        self.environment.define(self.scope, stmt.name.lexeme, value)
        return Completion.NORMAL

    def exec_block(self, stmt):
        """Runs the block in a fresh scope. A break/continue skips the rest of the block and is handed outward."""
        previous = self.scope
        self.scope = self.environment.push(previous)
        try:
            for inner in stmt.statements:
                completion = self.execute(inner)
                if completion is not Completion.NORMAL:
                    return completion
            return Completion.NORMAL
        finally:
            self.environment.pop(self.scope)
            self.scope = previous

    def exec_if(self, stmt):
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        if stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return Completion.NORMAL

    def exec_while(self, stmt):
        """break leaves before the increment runs; continue still runs it before the condition is tested again."""
        while is_truthy(self.evaluate(stmt.condition)):
            if self.execute(stmt.body) is Completion.BREAK:
                break
            if stmt.increment is not None:
                self.evaluate(stmt.increment)
        return Completion.NORMAL

    def exec_repeat_until(self, stmt):
        while True:
            if self.execute(stmt.body) is Completion.BREAK:
                break
            if is_truthy(self.evaluate(stmt.condition)):
                break
        return Completion.NORMAL

    def exec_repeat_for(self, stmt):
        """The count is evaluated once, before the first iteration. A negative count runs the body zero times."""
        times = self.evaluate(stmt.times)
        if not is_integral(times):
            raise LackRuntimeError("Expected integer after 'for'", token=stmt.for_token)

        for _ in range(int(times)):
            if self.execute(stmt.body) is Completion.BREAK:
                break
        return Completion.NORMAL

    def exec_break(self, stmt):
        return Completion.BREAK

    def exec_continue(self, stmt):
        return Completion.CONTINUE

    def exec_read(self, stmt):
        self.assign(stmt.name, self.read_line(stmt.token))
        return Completion.NORMAL

    def exec_read_num(self, stmt):
        """Accepts an optionally signed number literal, surrounding whitespace ignored. Anything else is an error."""
        line = self.read_line(stmt.token)
        if line is None or not NUMBER_INPUT.fullmatch(line.strip()):
            raise LackRuntimeError("Expected a number", token=stmt.token)

        self.assign(stmt.name, float(line))
        return Completion.NORMAL

    # ------------------------------------------------------------------------------------------------------- helpers

    def assign(self, name, value):
        if not self.environment.assign(self.scope, name.lexeme, value):
            raise LackRuntimeError(f"Undefined variable '{name.lexeme}'", token=name)

    def read_line(self, token):
        """Blocks for one line of input and returns it without its line terminator, or None at end of input."""
        stdin = self.stdin if self.stdin is not None else sys.stdin
        try:
            line = stdin.readline()
        except OSError:
            raise LackRuntimeError("Invalid input", token=token)

        if not line:
            return None
        return line.rstrip("\r\n")

    @staticmethod
    def check_number_operand(operator, operand):
        if not is_number(operand):
            raise LackRuntimeError("Operand must be a number", token=operator)

    @staticmethod
    def check_number_operands(operator, left, right):
        if not (is_number(left) and is_number(right)):
            raise LackRuntimeError("Operands must be numbers", token=operator)

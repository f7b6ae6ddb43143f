"""Abstract syntax tree for the lack language.

Two closed families of node variants: expressions (`Expr`) and statements (`Stmt`). Nodes are frozen dataclasses:
they are built once by the parser and only read afterwards, possibly many times (e.g. inside a loop body).

```
<expr> ::= Literal | Grouping | Unary | Binary | Logical | Variable | Assign
<stmt> ::= Expression | Write | Let | Block | If | While | RepeatUntil | RepeatFor | Break | Continue
         | Read | ReadNum
```
"""

from dataclasses import dataclass, fields
from typing import Optional, Tuple

from lack.core.tokens import Token


class Node:
    """Superclass for every AST node."""

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(
            <field>=<Node>(...),
            <field>=[
                <Node>(...),
            ],
            <field>='<lexeme or literal>'
        )
        """
        pad = "    " * indents
        lines = []
        for field in fields(self):
            value = getattr(self, field.name)
            lines.append(f"{pad}    {field.name}={_display_value(value, indents + 1)}")

        if not lines:
            return f"{type(self).__name__}()"
        return f"{type(self).__name__}(\n" + ",\n".join(lines) + f"\n{pad})"


def _display_value(value, indents):
    if isinstance(value, Node):
        return value.display(indents)
    if isinstance(value, Token):
        return repr(value.lexeme)
    if isinstance(value, tuple):
        if not value:
            return "[]"
        pad = "    " * indents
        items = [f"{pad}    {_display_value(item, indents + 1)}" for item in value]
        return "[\n" + ",\n".join(items) + f"\n{pad}]"
    return repr(value)


def display(statements):
    """Pretty-prints a statement list, one top-level statement per paragraph."""
    return "\n".join(stmt.display() for stmt in statements)


class Expr(Node):
    """Expression node. Evaluates to a runtime value: None, bool, float or str."""


@dataclass(frozen=True)
class Literal(Expr):
    value: object


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Logical(Expr):
    """and/or short-circuit; xor always evaluates both operands, each exactly once."""
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


class Stmt(Node):
    """Statement node. Executing one yields a Completion (see evaluator.py)."""


@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Write(Stmt):
    expression: Expr
    end: str  # "" for write, "\n" for writeln


@dataclass(frozen=True)
class Let(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True)
class While(Stmt):
    """Also the target of for-loop desugaring: increment runs after each non-broken iteration."""
    condition: Expr
    body: Stmt
    increment: Optional[Expr] = None


@dataclass(frozen=True)
class RepeatUntil(Stmt):
    body: Stmt
    condition: Expr


@dataclass(frozen=True)
class RepeatFor(Stmt):
    times: Expr
    body: Stmt
    for_token: Token  # runtime errors about the count are reported here


@dataclass(frozen=True)
class Break(Stmt):
    token: Token


@dataclass(frozen=True)
class Continue(Stmt):
    token: Token


@dataclass(frozen=True)
class Read(Stmt):
    name: Token
    token: Token


@dataclass(frozen=True)
class ReadNum(Stmt):
    name: Token
    token: Token

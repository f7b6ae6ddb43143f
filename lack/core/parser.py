"""Recursive-descent parser for the lack language. Builds a list of statement trees from the scanner's tokens in one
pass.

Grammar, statements:

```
<program>   ::= <stmt>* EOF
<stmt>      ::= "write" <expr> ";" | "writeln" <expr> ";"
              | "read" IDENT ";" | "readnum" IDENT ";"
              | "let" IDENT ( "=" <expr> )? ";"
              | "{" <stmt>* "}"
              | "if" <expr> <stmt> ( "else" <stmt> )?
              | "while" <expr> <stmt>
              | "for" ( <let> | <expr> ";" | ";" ) <expr>? ";" <expr>? <stmt>
              | "repeat" <stmt> "until" <expr> ";"
              | "repeat" <stmt> "for" <expr> ";"
              | "break" ";" | "continue" ";"
              | <expr> ";"
```

Expressions, lowest to highest precedence (all binary levels associate to the left):

```
<expr>       ::= IDENT "=" <expr> | <or>             ; right-associative
<or>         ::= <xor> ( ( "or" | "nor" ) <xor> )*
<xor>        ::= <and> ( ( "xor" | "xnor" ) <and> )*
<and>        ::= <equality> ( ( "and" | "nand" ) <equality> )*
<equality>   ::= <comparison> ( ( "==" | "!=" ) <comparison> )*
<comparison> ::= <term> ( ( "<" | "<=" | ">" | ">=" ) <term> )*
<term>       ::= <factor> ( ( "+" | "-" ) <factor> )*
<factor>     ::= <unary> ( ( "*" | "/" | "%" ) <unary> )*
<unary>      ::= ( "not" | "-" ) <unary> | <primary>
<primary>    ::= NUMBER | STRING | "true" | "false" | "nil" | IDENT | "(" <expr> ")"
```

The negated connectives are desugared while parsing: `a nor b` becomes `not (a or b)`, `a nand b` becomes
`not (a and b)` and `a xnor b` becomes `not (a xor b)`. A `for` loop becomes a block holding its initializer and a
`while` loop that carries the increment.

A statement that fails to parse is reported and skipped (see synchronize), so every independent syntax error in a
source text is reported, not just the first one.
"""

from lack.core import ast
from lack.core.tokens import Token, TokenType
from lack.lang.error import LackSyntaxError


# tokens that can begin a new statement; synchronize stops in front of them
STATEMENT_STARTS = (
    TokenType.WRITE,
    TokenType.WRITELN,
    TokenType.LET,
    TokenType.IF,
    TokenType.FOR,
    TokenType.WHILE,
    TokenType.REPEAT,
    TokenType.READ,
    TokenType.READNUM,
    TokenType.BREAK,
    TokenType.CONTINUE,
    TokenType.FUN,
    TokenType.RETURN,
    TokenType.CLASS,
)

# tokens that can begin an expression
EXPRESSION_STARTS = (
    TokenType.NUMBER,
    TokenType.STRING,
    TokenType.IDENTIFIER,
    TokenType.TRUE,
    TokenType.FALSE,
    TokenType.NIL,
    TokenType.LEFT_PAREN,
    TokenType.MINUS,
    TokenType.NOT,
)


def synthetic(token, token_type):
    """Token standing in for an operator produced by desugaring; keeps token's lexeme and line for error reports."""
    return Token(token_type, token.lexeme, None, token.line)


class Parser:
    """One-shot parser over a token list ending with EOF."""

    def __init__(self, tokens, error_handler):
        self.tokens = tokens
        self.error_handler = error_handler
        self.current = 0

    def parse(self):
        """Returns the list of top-level statements that parsed. Check error_handler.had_error before running them."""
        statements = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    # ---------------------------------------------------------------------------------------------------- statements

    def declaration(self):
        """Parses a statement, or reports and skips it if it is malformed (returns None)."""
        try:
            return self.statement()
        except LackSyntaxError:
            self.synchronize()
            return None

    def statement(self):
        if self.match(TokenType.WRITE, TokenType.WRITELN):
            return self.write_statement()
        if self.match(TokenType.READ, TokenType.READNUM):
            return self.read_statement()
        if self.match(TokenType.LET):
            return self.let_declaration()
        if self.match(TokenType.LEFT_CURLY):
            return ast.Block(self.block())
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.REPEAT):
            return self.repeat_statement()
        if self.match(TokenType.BREAK):
            token = self.previous()
            self.consume(TokenType.SEMICOLON, "Expected ';' after 'break'")
            return ast.Break(token)
        if self.match(TokenType.CONTINUE):
            token = self.previous()
            self.consume(TokenType.SEMICOLON, "Expected ';' after 'continue'")
            return ast.Continue(token)
        return self.expression_statement()

    def write_statement(self):
        end = "\n" if self.previous().type is TokenType.WRITELN else ""
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expected ';' after value")
        return ast.Write(value, end)

    def read_statement(self):
        token = self.previous()
        name = self.consume(TokenType.IDENTIFIER, f"Expected variable name after '{token.lexeme}'")
        self.consume(TokenType.SEMICOLON, "Expected ';' after variable name")

        if token.type is TokenType.READ:
            return ast.Read(name, token)
        return ast.ReadNum(name, token)

    def let_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expected variable name")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expected ';' after variable declaration")
        return ast.Let(name, initializer)

    def block(self):
        statements = []
        while not self.check(TokenType.RIGHT_CURLY) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenType.RIGHT_CURLY, "Expected '}' after block")
        return tuple(statements)

    def if_statement(self):
        condition = self.expression()
        then_branch = self.statement()

        else_branch = None
        if self.match(TokenType.ELSE):  # binds to the nearest if
            else_branch = self.statement()

        return ast.If(condition, then_branch, else_branch)

    def while_statement(self):
        condition = self.expression()
        return ast.While(condition, self.statement())

    def for_statement(self):
        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.LET):
            initializer = self.let_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expected ';' after loop condition")

        # without parentheses the increment is only there if an expression starts here
        increment = None
        if self.peek().type in EXPRESSION_STARTS:
            increment = self.expression()

        body = self.statement()

        if condition is None:
            condition = ast.Literal(True)
        loop = ast.While(condition, body, increment)

        if initializer is None:
            return loop
        return ast.Block((initializer, loop))

    def repeat_statement(self):
        body = self.statement()

        if self.match(TokenType.UNTIL):
            condition = self.expression()
            self.consume(TokenType.SEMICOLON, "Expected ';' after 'until' condition")
            return ast.RepeatUntil(body, condition)

        if self.match(TokenType.FOR):
            for_token = self.previous()
            times = self.expression()
            self.consume(TokenType.SEMICOLON, "Expected ';' after repeat count")
            return ast.RepeatFor(times, body, for_token)

        raise self.error(self.peek(), "Expected 'until' or 'for' after repeat body")

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expected ';' after expression")
        return ast.Expression(expr)

    # --------------------------------------------------------------------------------------------------- expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, ast.Variable):
                return ast.Assign(expr.name, value)

            # reported, but the parser is not confused: no need to synchronize
            self.error(equals, "Invalid assignment target")

        return expr

    def logic_or(self):
        expr = self.logic_xor()
        while self.match(TokenType.OR, TokenType.NOR):
            operator = self.previous()
            right = self.logic_xor()
            expr = self.connective(expr, operator, right, TokenType.NOR, TokenType.OR)
        return expr

    def logic_xor(self):
        expr = self.logic_and()
        while self.match(TokenType.XOR, TokenType.XNOR):
            operator = self.previous()
            right = self.logic_and()
            expr = self.connective(expr, operator, right, TokenType.XNOR, TokenType.XOR)
        return expr

    def logic_and(self):
        expr = self.equality()
        while self.match(TokenType.AND, TokenType.NAND):
            operator = self.previous()
            right = self.equality()
            expr = self.connective(expr, operator, right, TokenType.NAND, TokenType.AND)
        return expr

    @staticmethod
    def connective(left, operator, right, negated, base):
        """Builds a Logical node, wrapped in a 'not' if operator is the negated form of base."""
        if operator.type is not negated:
            return ast.Logical(left, operator, right)

        logical = ast.Logical(left, synthetic(operator, base), right)
        return ast.Unary(synthetic(operator, TokenType.NOT), logical)

    def equality(self):
        return self.binary(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self.binary(self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS,
                           TokenType.LESS_EQUAL)

    def term(self):
        return self.binary(self.factor, TokenType.PLUS, TokenType.MINUS)

    def factor(self):
        return self.binary(self.unary, TokenType.STAR, TokenType.SLASH, TokenType.MODULO)

    def binary(self, operand, *operators):
        """Left-associative binary level: operand (operator operand)*."""
        expr = operand()
        while self.match(*operators):
            operator = self.previous()
            right = operand()
            expr = ast.Binary(expr, operator, right)
        return expr

    def unary(self):
        if self.match(TokenType.NOT, TokenType.MINUS):
            operator = self.previous()
            return ast.Unary(operator, self.unary())
        return self.primary()

    def primary(self):
        if self.match(TokenType.FALSE):
            return ast.Literal(False)
        if self.match(TokenType.TRUE):
            return ast.Literal(True)
        if self.match(TokenType.NIL):
            return ast.Literal(None)
        if self.match(TokenType.NUMBER, TokenType.STRING):
            return ast.Literal(self.previous().literal)
        if self.match(TokenType.IDENTIFIER):
            return ast.Variable(self.previous())
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expected ')' after expression")
            return ast.Grouping(expr)

        raise self.error(self.peek(), "Expected expression")

    # ------------------------------------------------------------------------------------------------------- helpers

    def synchronize(self):
        """Discards tokens until just after a ';' or just before a token that starts a statement."""
        self.advance()
        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in STATEMENT_STARTS:
                return
            self.advance()

    def error(self, token, msg):
        """Reports msg at token and returns the error, for callers that need to unwind."""
        return self.error_handler.token_error(token, msg)

    def consume(self, token_type, msg):
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), msg)

    def match(self, *types):
        for token_type in types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def check(self, token_type):
        if self.is_at_end():
            return False
        return self.peek().type is token_type

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]


def parse(tokens, error_handler):
    """Shorthand for Parser(tokens, error_handler).parse()."""
    return Parser(tokens, error_handler).parse()

"""Token model for the lack language.

A token is produced once by the scanner and never mutated afterwards. Its category is one of the closed set of
`TokenType` members below: symbols, keywords, literals and the end-of-input marker.
"""

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    """Lexical categories."""
    # single-character symbols
    LEFT_PAREN = enum.auto()
    RIGHT_PAREN = enum.auto()
    LEFT_CURLY = enum.auto()
    RIGHT_CURLY = enum.auto()
    COMMA = enum.auto()
    DOT = enum.auto()
    MINUS = enum.auto()
    PLUS = enum.auto()
    SEMICOLON = enum.auto()
    SLASH = enum.auto()
    STAR = enum.auto()
    MODULO = enum.auto()

    # one or two character symbols
    BANG_EQUAL = enum.auto()
    EQUAL = enum.auto()
    EQUAL_EQUAL = enum.auto()
    GREATER = enum.auto()
    GREATER_EQUAL = enum.auto()
    LESS = enum.auto()
    LESS_EQUAL = enum.auto()

    # literals
    IDENTIFIER = enum.auto()
    STRING = enum.auto()
    NUMBER = enum.auto()

    # keywords
    WRITE = enum.auto()
    WRITELN = enum.auto()
    LET = enum.auto()
    TRUE = enum.auto()
    FALSE = enum.auto()
    NIL = enum.auto()
    IF = enum.auto()
    ELSE = enum.auto()
    NOT = enum.auto()
    OR = enum.auto()
    AND = enum.auto()
    XOR = enum.auto()
    NOR = enum.auto()
    NAND = enum.auto()
    XNOR = enum.auto()
    FOR = enum.auto()
    WHILE = enum.auto()
    FUN = enum.auto()
    RETURN = enum.auto()
    CLASS = enum.auto()
    THIS = enum.auto()
    SUPER = enum.auto()
    READ = enum.auto()
    READNUM = enum.auto()
    REPEAT = enum.auto()
    UNTIL = enum.auto()
    BREAK = enum.auto()
    CONTINUE = enum.auto()

    EOF = enum.auto()


# fun, return, class, this and super are reserved: no statement rule consumes them
KEYWORDS = {
    "write": TokenType.WRITE,
    "writeln": TokenType.WRITELN,
    "let": TokenType.LET,
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "nil": TokenType.NIL,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "not": TokenType.NOT,
    "or": TokenType.OR,
    "and": TokenType.AND,
    "xor": TokenType.XOR,
    "for": TokenType.FOR,
    "while": TokenType.WHILE,
    "fun": TokenType.FUN,
    "return": TokenType.RETURN,
    "class": TokenType.CLASS,
    "this": TokenType.THIS,
    "super": TokenType.SUPER,
    "read": TokenType.READ,
    "readnum": TokenType.READNUM,
    "repeat": TokenType.REPEAT,
    "until": TokenType.UNTIL,
    "break": TokenType.BREAK,
    "continue": TokenType.CONTINUE,
    "nand": TokenType.NAND,
    "nor": TokenType.NOR,
    "xnor": TokenType.XNOR,
}


@dataclass(frozen=True)
class Token:
    """A single lexeme. literal holds the decoded value for NUMBER (float) and STRING (str) tokens, None otherwise."""
    type: TokenType
    lexeme: str
    literal: object
    line: int

    def __str__(self):
        return f"{self.type.name} {self.lexeme} {self.literal}"

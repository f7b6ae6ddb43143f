"""Lexical analysis for the lack language. Converts raw source text into a line-annotated list of tokens, terminated
by an EOF token.

The scanner never raises: an invalid character, an unterminated string or an unterminated block comment is reported
to the error handler and scanning resumes with the next character, so later tokens are still produced.
"""

from lack.core.tokens import KEYWORDS, Token, TokenType


SINGLE_CHARS = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_CURLY,
    "}": TokenType.RIGHT_CURLY,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "%": TokenType.MODULO,
}

# char: (type if followed by '=', type otherwise)
EQUAL_PAIRS = {
    "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
    "<": (TokenType.LESS_EQUAL, TokenType.LESS),
    ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
}


def is_digit(char):
    return "0" <= char <= "9"


def is_alpha(char):
    return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"


def is_alphanumeric(char):
    return is_alpha(char) or is_digit(char)


class Scanner:
    """Single-pass scanner with one-character lookahead (peek) and limited multi-character lookahead (peek(n))."""

    def __init__(self, source, error_handler):
        self.source = source
        self.error_handler = error_handler

        self.tokens = []
        self.start = 0    # first char of the lexeme being scanned
        self.current = 0  # char about to be consumed
        self.line = 1

    def scan_tokens(self):
        """Scans the whole source and returns the token list."""
        while not self.is_at_end():
            self.start = self.current
            self.scan_token()

        self.tokens.append(Token(TokenType.EOF, "", None, self.line))
        return self.tokens

    def scan_token(self):
        char = self.advance()

        if char in SINGLE_CHARS:
            self.add_token(SINGLE_CHARS[char])

        elif char in EQUAL_PAIRS:
            matched, unmatched = EQUAL_PAIRS[char]
            self.add_token(matched if self.match("=") else unmatched)

        elif char == "!":
            # '!' only exists as the first half of '!=': negation is spelled 'not'
            if self.match("="):
                self.add_token(TokenType.BANG_EQUAL)
            else:
                self.error_handler.error(self.line, f"Unexpected character {char}")

        elif char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
            elif self.match("*"):
                self.block_comment()
            else:
                self.add_token(TokenType.SLASH)

        elif char == ".":
            if is_digit(self.peek()):
                self.number(char)
            else:
                self.add_token(TokenType.DOT)

        elif char in " \r\t":
            pass
        elif char == "\n":
            self.line += 1

        elif char in "\"'":
            self.string(char)
        elif is_digit(char):
            self.number(char)
        elif is_alpha(char):
            self.identifier()
        else:
            self.error_handler.error(self.line, f"Unexpected character {char}")

    def block_comment(self):
        while not (self.peek() == "*" and self.peek(2) == "/"):
            if self.is_at_end():
                self.error_handler.error(self.line, "Unterminated block comment")
                return
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        self.advance()  # *
        self.advance()  # /

    def string(self, quote):
        """Either quote character may open a string, but the same one has to close it."""
        while self.peek() != quote and not self.is_at_end():
            if self.peek() == "\n":
                self.line += 1
            self.advance()

        if self.is_at_end():
            self.error_handler.error(self.line, "Unterminated string")
            return

        self.advance()  # closing quote
        self.add_token(TokenType.STRING, self.source[self.start + 1:self.current - 1])

    def number(self, first):
        """Numbers have no exponent and at most one '.'; a number that starts with '.' has no fractional part."""
        while is_digit(self.peek()):
            self.advance()

        if first != "." and self.peek() == "." and is_digit(self.peek(2)):
            self.advance()
            while is_digit(self.peek()):
                self.advance()

        self.add_token(TokenType.NUMBER, float("0" + self.source[self.start:self.current]))

    def identifier(self):
        while is_alphanumeric(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        self.add_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def is_at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self, step=1):
        """Returns the char step places ahead of the cursor (peek(1) is the next unconsumed char), or '\\0'."""
        idx = self.current + step - 1
        if idx >= len(self.source):
            return "\0"
        return self.source[idx]

    def add_token(self, token_type, literal=None):
        self.tokens.append(Token(token_type, self.source[self.start:self.current], literal, self.line))


def scan(source, error_handler):
    """Shorthand for Scanner(source, error_handler).scan_tokens()."""
    return Scanner(source, error_handler).scan_tokens()

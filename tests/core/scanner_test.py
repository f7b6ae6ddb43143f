import io
import unittest

from lack.core.scanner import Scanner
from lack.core.tokens import KEYWORDS, TokenType
from lack.lang.error import ErrorHandler


def scan(source):
    handler = ErrorHandler(fatal=False, stream=io.StringIO())
    return Scanner(source, handler).scan_tokens(), handler


def types(source):
    return [token.type for token in scan(source)[0]]


class ScannerTestCase(unittest.TestCase):

    def test_symbols(self):
        cases = {
            "( ) { } , . ; + - * / %": [
                TokenType.LEFT_PAREN, TokenType.RIGHT_PAREN, TokenType.LEFT_CURLY, TokenType.RIGHT_CURLY,
                TokenType.COMMA, TokenType.DOT, TokenType.SEMICOLON, TokenType.PLUS, TokenType.MINUS,
                TokenType.STAR, TokenType.SLASH, TokenType.MODULO, TokenType.EOF
            ],
            "= == != < <= > >=": [
                TokenType.EQUAL, TokenType.EQUAL_EQUAL, TokenType.BANG_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL,
                TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.EOF
            ],
            "a<=b": [TokenType.IDENTIFIER, TokenType.LESS_EQUAL, TokenType.IDENTIFIER, TokenType.EOF],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, types(case), case)

    def test_let_statement(self):
        tokens, handler = scan("let x = 1.5;")

        self.assertEqual(0, handler.error_count)
        self.assertEqual(["let", "x", "=", "1.5", ";", ""], [token.lexeme for token in tokens])
        self.assertEqual(1.5, tokens[3].literal)
        self.assertIsNone(tokens[1].literal)

    def test_numbers(self):
        should_pass = {
            "12": [12.0],
            "3.25": [3.25],
            ".5": [0.5],
            "1.2.3": [1.2, 0.3],
            ".5.5": [0.5, 0.5],
        }
        for case, expected in should_pass.items():
            tokens, handler = scan(case)
            self.assertEqual(0, handler.error_count, case)
            self.assertEqual(expected, [token.literal for token in tokens if token.type is TokenType.NUMBER], case)

        # a trailing '.' is not part of the number
        self.assertEqual([TokenType.NUMBER, TokenType.DOT, TokenType.EOF], types("1."))

    def test_strings(self):
        tokens, handler = scan("'single' \"double\" 'it\"s'")
        self.assertEqual(0, handler.error_count)
        self.assertEqual(["single", "double", 'it"s'], [token.literal for token in tokens[:-1]])

        tokens, __ = scan('"two\nlines" x')
        self.assertEqual("two\nlines", tokens[0].literal)
        self.assertEqual(2, tokens[1].line)

    def test_unterminated_string(self):
        tokens, handler = scan("write 'abc\n")

        self.assertEqual(1, handler.error_count)
        self.assertIn("Unterminated string", handler.stream.getvalue())
        self.assertEqual([TokenType.WRITE, TokenType.EOF], [token.type for token in tokens])

    def test_comments(self):
        tokens, handler = scan("// comment\nx /* block\n comment */ y // trailing")

        self.assertEqual(0, handler.error_count)
        self.assertEqual([("x", 2), ("y", 3)], [(token.lexeme, token.line) for token in tokens[:-1]])
        self.assertEqual([TokenType.SLASH, TokenType.EOF], types("/"))

    def test_unterminated_block_comment(self):
        tokens, handler = scan("x /* never\nclosed")

        self.assertEqual(1, handler.error_count)
        self.assertIn("Unterminated block comment", handler.stream.getvalue())
        self.assertEqual([TokenType.IDENTIFIER, TokenType.EOF], [token.type for token in tokens])

    def test_unexpected_characters(self):
        should_fail = ["!", "@", "#", "a ! b", "$x"]
        for case in should_fail:
            __, handler = scan(case)
            self.assertEqual(1, handler.error_count, case)
            self.assertIn("Unexpected character", handler.stream.getvalue(), case)

        # scanning goes on after an error
        tokens, handler = scan("a @ b")
        self.assertEqual(["a", "b"], [token.lexeme for token in tokens[:-1]])

    def test_keywords(self):
        for keyword, token_type in KEYWORDS.items():
            self.assertEqual([token_type, TokenType.EOF], types(keyword), keyword)

        should_be_identifiers = ["Write", "LET", "writes", "_if", "nil2", "xnor_"]
        for case in should_be_identifiers:
            self.assertEqual([TokenType.IDENTIFIER, TokenType.EOF], types(case), case)

    def test_lines(self):
        tokens, __ = scan("a\n\nb\r\n\tc")
        self.assertEqual([1, 3, 4, 4], [token.line for token in tokens])


if __name__ == '__main__':
    unittest.main()

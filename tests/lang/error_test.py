import io
import unittest

from lack.core.tokens import Token, TokenType
from lack.lang.error import ErrorHandler, LackException, LackRuntimeError, LackSyntaxError, location


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.err = io.StringIO()
        self.handler = ErrorHandler(fatal=False, stream=self.err)

    def test_location(self):
        self.assertEqual(" at end", location(Token(TokenType.EOF, "", None, 1)))
        self.assertEqual(" at 'x'", location(Token(TokenType.IDENTIFIER, "x", None, 1)))

    def test_scanner_error(self):
        self.handler.error(3, "Unexpected character @")

        self.assertEqual("<line 3> Error: Unexpected character @\n", self.err.getvalue())
        self.assertTrue(self.handler.had_error)
        self.assertFalse(self.handler.had_runtime_error)

    def test_token_error(self):
        token = Token(TokenType.SEMICOLON, ";", None, 2)
        error = self.handler.token_error(token, "Expected expression")

        self.assertIsInstance(error, LackSyntaxError)
        self.assertEqual(65, error.exit_code)
        self.assertEqual(2, error.line)
        self.assertEqual("<line 2> Error at ';': Expected expression\n", self.err.getvalue())

    def test_runtime_error(self):
        self.handler.register_source("let a = 1;\nwrite a / 0;")
        token = Token(TokenType.SLASH, "/", None, 2)
        self.handler.runtime_error(LackRuntimeError("Division by zero", token=token))

        self.assertEqual("<line 2> RuntimeError: Division by zero\n"
                         "  write a / 0;\n"
                         "          ^\n", self.err.getvalue())
        self.assertTrue(self.handler.had_runtime_error)

    def test_diagnose(self):
        self.handler.register_source("let x = y;\nwrite x;")

        self.assertEqual("  let x = y;\n          ^", self.handler.diagnose(1, "y"))
        self.assertEqual("  write x;\n  ^~~~~", self.handler.diagnose(2, "write"))
        self.assertIsNone(self.handler.diagnose(1, "z"))
        self.assertIsNone(self.handler.diagnose(1, ""))
        self.assertIsNone(self.handler.diagnose(9, "x"))

    def test_reset(self):
        self.handler.error(1, "one")
        self.handler.error(1, "two")
        self.handler.runtime_error(LackRuntimeError("three", line=1))
        self.assertEqual(2, self.handler.error_count)

        self.handler.reset()
        self.assertFalse(self.handler.had_error)
        self.assertFalse(self.handler.had_runtime_error)

    def test_context_manager(self):
        with self.handler:
            raise LackRuntimeError("boom", line=4)
        self.assertTrue(self.handler.had_runtime_error)
        self.assertIn("<line 4> RuntimeError: boom", self.err.getvalue())

        with self.assertRaises(ValueError):
            with self.handler:
                raise ValueError("oops")
        self.assertIn("[internal] error: unknown error: 'ValueError: oops'", self.err.getvalue())

        with self.handler:
            raise LackException("'x.lack' could not be opened", exit_code=66)
        self.assertIn("error: 'x.lack' could not be opened", self.err.getvalue())

    def test_internal_error_propagates_and_is_reported_once(self):
        with self.assertRaises(ValueError):
            with self.handler:
                with self.handler:
                    raise ValueError("oops")
        self.assertEqual(1, self.err.getvalue().count("unknown error"))

    def test_fatal(self):
        fatal = ErrorHandler(fatal=True, stream=self.err)

        with self.assertRaises(SystemExit) as context:
            with fatal:
                raise LackRuntimeError("boom", line=1)
        self.assertEqual(70, context.exception.code)

        with self.assertRaises(SystemExit) as context:
            with fatal:
                raise LackException("'x.lack' could not be opened", exit_code=66)
        self.assertEqual(66, context.exception.code)

        with self.assertRaises(SystemExit) as context:
            with fatal:
                raise SystemExit(3)
        self.assertEqual(3, context.exception.code)


if __name__ == '__main__':
    unittest.main()

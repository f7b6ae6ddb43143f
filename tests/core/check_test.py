import io
import unittest

from lack.core.check import check_loop_control, stray_loop_control
from lack.core.parser import Parser
from lack.core.scanner import Scanner
from lack.lang.error import ErrorHandler, LackRuntimeError


def parse(source):
    handler = ErrorHandler(fatal=False, stream=io.StringIO())
    statements = Parser(Scanner(source, handler).scan_tokens(), handler).parse()
    assert handler.error_count == 0, handler.stream.getvalue()
    return statements


class LoopControlTestCase(unittest.TestCase):

    def test_legal(self):
        should_pass = [
            "while true break;",
            "while true { if x { continue; } else { break; } }",
            "for ;; { { { break; } } }",
            "repeat { if x break; } until true;",
            "repeat continue; for 3;",
            "while a { while b break; break; }",
            "write 1;",
        ]
        for case in should_pass:
            self.assertEqual([], list(stray_loop_control(parse(case))), case)
            check_loop_control(parse(case))

    def test_stray(self):
        should_fail = {
            "break;": "'break' must be inside a loop",
            "continue;": "'continue' must be inside a loop",
            "{ break; }": "'break' must be inside a loop",
            "if true { continue; }": "'continue' must be inside a loop",
            "if true write 1; else break;": "'break' must be inside a loop",
            "while true { } break;": "'break' must be inside a loop",
        }
        for case, msg in should_fail.items():
            with self.assertRaises(LackRuntimeError, msg=case) as context:
                check_loop_control(parse(case))
            self.assertEqual(msg, context.exception.msg, case)

    def test_unreachable_stray_is_still_rejected(self):
        statements = parse("write 1;\nif false {\n  break;\n}")

        with self.assertRaises(LackRuntimeError) as context:
            check_loop_control(statements)
        self.assertEqual(3, context.exception.line)

    def test_every_stray_is_found(self):
        strays = list(stray_loop_control(parse("break; while true break; { continue; }")))
        self.assertEqual(["break", "continue"], [stmt.token.lexeme for stmt in strays])


if __name__ == '__main__':
    unittest.main()

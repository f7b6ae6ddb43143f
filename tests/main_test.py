import contextlib
import io
import os
import tempfile
import unittest

from lack.main import main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write(self, source):
        path = os.path.join(self.tmp.name, "prog.lack")
        with open(path, "w", encoding="utf-8") as file:
            file.write(source)
        return path

    def main(self, *argv):
        """Runs main and returns (exit code, stdout, stderr)."""
        out, err = io.StringIO(), io.StringIO()
        code = 0
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            try:
                main(list(argv))
            except SystemExit as exc:
                code = exc.code
        return code, out.getvalue(), err.getvalue()

    def test_success(self):
        code, out, __ = self.main(self.write("for let i = 1; i <= 3; i = i + 1 writeln i * i;"))
        self.assertEqual(0, code)
        self.assertEqual("1\n4\n9\n", out)

    def test_syntax_error(self):
        code, out, err = self.main(self.write("writeln 1;\nwrite ;\nwrite );"))
        self.assertEqual(65, code)
        self.assertEqual("", out)
        self.assertEqual(2, err.count("Expected expression"))

    def test_runtime_error(self):
        code, out, err = self.main("--no-color", self.write("write 'before';\nwrite -'x';\nwrite 'after';"))
        self.assertEqual(70, code)
        self.assertEqual("before", out)
        self.assertIn("<line 2> RuntimeError: Operand must be a number", err)

    def test_missing_file(self):
        code, __, err = self.main(os.path.join(self.tmp.name, "missing.lack"))
        self.assertEqual(66, code)
        self.assertIn("could not be opened", err)

    def test_usage_error(self):
        code, __, __ = self.main("a.lack", "b.lack")
        self.assertEqual(64, code)

    def test_debug_flags(self):
        code, out, __ = self.main("--tokens", "--ast", "--no-color", self.write("let a = 1;"))
        self.assertEqual(0, code)
        self.assertIn("LET let None", out)
        self.assertIn("Let(", out)


if __name__ == '__main__':
    unittest.main()

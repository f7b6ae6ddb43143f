"""Session control for the lack language: the front-to-back pipeline (scan, parse, check, execute) for source texts
read from a file or typed into the shell.
"""

import io

from lack.core.ast import display
from lack.core.evaluator import Interpreter
from lack.core.parser import Parser
from lack.core.scanner import Scanner
from lack.core.tokens import TokenType
from lack.lang.error import ErrorHandler, LackException, LackRuntimeError


class Session:
    """Governs a lack session. All source texts added to one session share its interpreter, and therefore its global
    scope: a variable defined by one shell line is visible to the next.
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, stdin=None, stdout=None, show_tokens=False, show_ast=False):
        self.error_handler = error_handler

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.stdout = stdout

        self.show_tokens = show_tokens  # print the token list of every added source
        self.show_ast = show_ast        # print the syntax tree of every added source

        self.interpreter = Interpreter(stdin, stdout)
        self.to_exec = []     # statement lists that parsed cleanly and are waiting for run
        self.tokens = []      # tokens of the last added source
        self.statements = []  # statements of the last added source

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except (OSError, UnicodeDecodeError):
                raise LackException(f"'{path}' could not be opened", exit_code=66)

            self.add(source)

        elif not cmd_line:
            raise LackException(f"'{Session.SH_FILE}' is a reserved filename")

    @staticmethod
    def preprocess_line(line):
        """Preprocesses a line typed into the shell. Returns the line and whether it opens more blocks than it closes,
        in which case the shell should keep reading before adding it. Braces are counted over the scanned tokens, so
        braces inside strings and comments do not count; lexical errors are left for add to report.
        """
        tokens = Scanner(line, ErrorHandler(fatal=False, stream=io.StringIO(), color=False)).scan_tokens()
        opened = sum(1 for token in tokens if token.type is TokenType.LEFT_CURLY)
        closed = sum(1 for token in tokens if token.type is TokenType.RIGHT_CURLY)
        return line, opened > closed

    def add(self, source):
        """Scans and parses source. Syntax errors are reported as they are found; if there were any, nothing from
        source is queued. Returns whether source was queued. Execution is delayed until run is called.
        """
        self.error_handler.register_source(source, None if self.cmd_line else self.path)
        errors_before = self.error_handler.error_count

        self.tokens = Scanner(source, self.error_handler).scan_tokens()
        self.statements = Parser(self.tokens, self.error_handler).parse()

        if self.show_tokens:
            for token in self.tokens:
                self._print(token)
        if self.show_ast and self.statements:
            self._print(display(self.statements))

        parsed = self.error_handler.error_count == errors_before
        if parsed:
            self.to_exec.append(self.statements)
        return parsed

    def run(self):
        """Runs the queued statement lists in order. The first runtime error is reported, aborts the rest of the
        queue and makes this method return False; output written before it is kept.
        """
        while self.to_exec:
            statements = self.to_exec.pop(0)
            try:
                self.interpreter.interpret(statements)
            except LackRuntimeError as error:
                self.to_exec.clear()
                self.error_handler.runtime_error(error)
                return False
        return True

    def execute(self, source):
        """add followed by run. Returns whether source parsed and ran without error."""
        return self.add(source) and self.run()

    def _print(self, obj):
        print(obj, file=self.stdout)

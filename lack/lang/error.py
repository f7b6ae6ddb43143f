"""Error handling for the lack language.

Two independent channels exist. Syntax errors (scanner and parser) are reported as soon as they are found and the
front end keeps going, so one run can report several of them; a program with any syntax error is never executed.
Runtime errors abort the rest of the current run and are reported once. Only LackExceptions should be encountered
during a run: anything else that makes it all the way to ErrorHandler is assumed to be an internal issue.
"""

import sys

from termcolor import colored

from lack.core.tokens import TokenType


class LackException(Exception):
    """Base lack error. exit_code is what the command-line front end exits with when the error is fatal."""
    exit_code = 1

    def __init__(self, msg, line=None, token=None, exit_code=None, internal=False):
        super().__init__(msg)
        self.msg = msg
        self.token = token
        self.line = token.line if line is None and token is not None else line
        self.internal = internal

        if exit_code is not None:
            self.exit_code = exit_code


class LackSyntaxError(LackException):
    """Lexical or grammatical error. where is the location tag: '', ' at end' or " at '<lexeme>'"."""
    exit_code = 65

    def __init__(self, msg, line=None, token=None, where=""):
        super().__init__(msg, line, token)
        self.where = where


class LackRuntimeError(LackException):
    """Error raised while evaluating a program, at the offending token."""
    exit_code = 70


def location(token):
    """Location tag used in syntax error reports."""
    if token.type is TokenType.EOF:
        return " at end"
    return f" at '{token.lexeme}'"


class ErrorHandler:
    """Collects and prints lack errors. Also a context manager that reports (and, if fatal, exits on) errors that
    escape a run.
    """
    ERROR = "red"

    def __init__(self, fatal=True, stream=None, color=None):
        self.fatal = fatal
        self.stream = stream  # None means sys.stderr at report time
        self.color = stream is None if color is None else color  # only color the real stderr by default

        self.error_count = 0            # syntax errors since last reset
        self.had_runtime_error = False  # runtime error since last reset

        self.path = None
        self.source_lines = []
        self._internal = None  # last internal exception reported

    def register_source(self, source, path=None):
        """Registers the text currently being run, so that reports can quote the offending line."""
        self.source_lines = source.splitlines()
        self.path = path

    def reset(self):
        """Clears error flags. Called between shell inputs."""
        self.error_count = 0
        self.had_runtime_error = False

    @property
    def had_error(self):
        return self.error_count > 0

    def error(self, line, msg, where=""):
        """Reports a syntax error. Never raises: the caller decides whether to recover."""
        self._report(LackSyntaxError(msg, line=line, where=where), "Error")
        self.error_count += 1

    def token_error(self, token, msg):
        """Reports a syntax error at token and returns it, so that the parser can raise it to unwind."""
        error = LackSyntaxError(msg, token=token, where=location(token))
        self._report(error, "Error")
        self.error_count += 1
        return error

    def runtime_error(self, error):
        """Reports a runtime error."""
        self._report(error, "RuntimeError")
        self.had_runtime_error = True

    def diagnose(self, line_num, lexeme):
        """Returns source line line_num with lexeme highlighted and underlined, or None if lexeme isn't in it."""
        if not lexeme or not 0 < line_num <= len(self.source_lines):
            return None

        line = self.source_lines[line_num - 1]
        start = line.find(lexeme)
        if start == -1:
            return None
        end = start + len(lexeme)

        diagnosis = "  " + line[:start]
        diagnosis += self._colored(line[start:end], self.ERROR, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += self._colored("^" + "~" * (end - start - 1), self.ERROR, attrs=["bold"])

        return diagnosis

    def throw(self, error):
        """Reports an error that escaped a run and exits if this handler is fatal."""
        msg = ""
        if error.internal:
            msg += self._colored("[internal] ", self.ERROR, attrs=["bold"])
        msg += self._colored("error: ", self.ERROR, attrs=["bold"]) + error.msg
        self._print(msg)

        if self.fatal:
            sys.exit(error.exit_code)

    def _report(self, error, kind):
        msg = ""
        if self.path is not None and error.line is not None:
            msg += f"  File '{self.path}', line {error.line}:\n"

        if error.line is not None:
            msg += self._colored(f"<line {error.line}> ", attrs=["bold"])
        msg += self._colored(kind, self.ERROR, attrs=["bold"])
        msg += f"{getattr(error, 'where', '')}: {error.msg}"
        self._print(msg)

        if error.token is not None and error.line is not None:
            diagnosis = self.diagnose(error.line, error.token.lexeme)
            if diagnosis:
                self._print(diagnosis)

    def _colored(self, text, color=None, attrs=None):
        if not self.color:
            return text
        return colored(text, color, attrs=attrs)

    def _print(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stderr)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(LackException("keyboard interrupt", exit_code=130))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(LackException("maximum recursion depth exceeded", exit_code=70))
        elif exc_type is not None and issubclass(exc_type, LackRuntimeError):
            self.runtime_error(exc_val)
            if self.fatal:
                sys.exit(exc_val.exit_code)
        elif exc_type is not None and issubclass(exc_type, LackException):
            self.throw(exc_val)
        elif exc_type is not None:
            if exc_val is not self._internal:  # nested handlers report an internal error once
                self._internal = exc_val
                self.throw(LackException(f"unknown error: '{exc_type.__name__}: {exc_val}'", exit_code=70, internal=True))
            do_exit = True

        return not do_exit

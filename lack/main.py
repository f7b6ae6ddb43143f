"""Command-line entry point for the lack interpreter: runs a .lack file, or starts the shell when no file is given.

Exit codes: 64 usage error, 65 syntax error(s), 66 unreadable file, 70 runtime error.
"""

import argparse
import sys

from lack.lang.error import ErrorHandler
from lack.lang.session import Session
from lack.lang.shell import Shell


__version__ = "0.1.0"

EX_USAGE = 64


class ArgumentParser(argparse.ArgumentParser):
    """argparse, but usage errors exit with EX_USAGE instead of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"{self.prog}: error: {message}\n")


def build_parser():
    parser = ArgumentParser(prog="lack", description="lack language interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--tokens", action="store_true", help="print the scanned tokens before running")
    parser.add_argument("--ast", action="store_true", help="print the syntax tree before running")
    parser.add_argument("--no-color", action="store_true", help="disable colored error messages")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv=None):
    """Runs lack interpreter. Called from the lack console script."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)

        if args.no_color:
            error_handler.color = False

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, show_tokens=args.tokens, show_ast=args.ast)
            if error_handler.had_error:
                sys.exit(65)

            sess.run()
            if error_handler.had_runtime_error:
                sys.exit(70)

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, show_tokens=args.tokens,
                           show_ast=args.ast)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()

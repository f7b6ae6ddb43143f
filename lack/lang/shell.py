"""Handles interactive/command-line mode for the lack interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """lack interpreter shell."""
    intro = "lack interpreter :: Python backend\nType 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""

    def default(self, line):
        """Executes an arbitrary lack statement list. Unbalanced '{' make the shell wait for more lines."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = self.sess.preprocess_line(self._tmp_line + line)

            if add_to_prev:
                self._tmp_line = line + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                self.sess.execute(line)
            finally:
                self.sess.error_handler.reset()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the lack interpreter!\n\n"
              "lack is a small imperative scripting language: variables, blocks, if/else, while,\n"
              "for, repeat...until and repeat...for loops, and console I/O.\n\n"
              "Try it out by typing 'let x = 6 * 7;'. This will bind 42 to the name 'x'. Next,\n"
              "try typing 'writeln x;'. Variables persist until you leave the shell with 'exit'.",
              file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True

"""Handles interactive/command-line mode for meowlang interpreter. Uses cmd as backend."""

import cmd

from meowlang.runtime.objects import Null


class Shell(cmd.Cmd):
    """meowlang interpreter shell."""
    intro = "meowlang interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._tmp_line_num = 0  # line the pending (continued) input started on
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary meowlang input."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._tmp_line_num = self.line_num

            source = self._tmp_line + line + "\n"

            if self.sess.needs_continuation(source):
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(source, self._tmp_line_num)
            self.sess.run()

            if self.sess.results:
                result = self.sess.pop()
                if not isinstance(result, Null):
                    print(result.inspect(), file=self.stdout)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the meowlang interpreter!\n\n"
              "Statements: 'lick x = 1' binds a variable, 'purr x' prints a value,\n"
              "'meow add(a, b) { claw a + b }' declares a function and 'claw' returns from it.\n"
              "Integers support + - * /, strings support +.\n\n"
              "Try it out by typing 'lick x = 21', then 'purr x * 2'. Blocks can span several\n"
              "lines: the prompt changes to '. ' until the closing '}' is typed.", file=self.stdout)

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

"""Handles interactive/command-line mode for the monkey interpreter. Uses cmd as backend."""

import cmd

from monkey.lang.session import Session


class Shell(cmd.Cmd):
    """Monkey interpreter shell."""
    intro = "Monkey interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = ">> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = ">> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self._first_line = 0  # line number where the current (possibly continued) input started
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary monkey source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            if not self._tmp_line:
                self._first_line = self.line_num

            line, add_to_prev = Session.preprocess_line(self._tmp_line + "\n" + line if self._tmp_line else line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.add(line, self._first_line)
            self.sess.run()

            while self.sess.results:
                print(self.sess.pop())

    def parseline(self, line):
        """Inside a line continuation every line is monkey source, even one that starts with a command name."""
        if self._tmp_line:
            return None, None, line
        return super().parseline(line)

    def do_tokens(self, arg):
        """tokens <source>: prints the tokens of source without evaluating it."""
        print(" ".join(repr(token) for token in Session.tokens(arg)))

    def do_ast(self, arg):
        """ast <source>: prints the fully-parenthesized form and the syntax tree of source without evaluating it."""
        with self.sess.error_handler:
            self.line_num += 1
            program = self.sess.tree(arg, self.line_num)
            print(program)
            print(program.display())

    def do_env(self, arg):
        """env: prints every top-level binding of this session."""
        if arg:  # e.g. "env + 1" where env is a monkey binding
            return self.default(self.lastcmd)
        for name, value in sorted(self.sess.env.bindings().items()):
            print(f"{name} = {value}")

    def do_reset(self, arg):
        """reset: discards every top-level binding of this session."""
        if arg:
            return self.default(self.lastcmd)
        self.sess.reset()

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the monkey interpreter!\n\n"
              "Monkey is a small expression-oriented language with integers, booleans, first-class \n"
              "functions and closures. Statements are 'let' bindings, 'return's and expressions.\n\n"
              "Try it out by typing 'let add = fn(x, y) { x + y };'. This will bind a function \n"
              "to the name 'add'. Next, try typing 'add(1, 2)', giving '3' as the result.\n\n"
              "Other commands: tokens <source>, ast <source>, env, reset, exit.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            return self.default(self.lastcmd)
        return True

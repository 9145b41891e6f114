"""Session control for the monkey language. Runs monkey source either in command-line mode, where every line shares one
root environment, or in file interpretation mode, where a whole file is one program.
"""

import logging

from monkey.core.evaluator import Evaluator
from monkey.core.object import Environment, Error
from monkey.core.parser import parse
from monkey.core.token import tokenize
from monkey.lang.error import EvaluationError, GenericException, ParseFailure

logger = logging.getLogger(__name__)


class Session:
    """Governs a monkey session, with control over the root environment that top-level bindings live in."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.env = Environment()
        self.evaluator = Evaluator()
        self.to_exec = {}   # dict of line num: (source, Ast) to execute
        self.results = []   # display queue of evaluated results
        self.source = None  # contents of path in file interpretation mode

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    self.source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path, diagnosis=False)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename", diagnosis=False)

    @staticmethod
    def preprocess_line(line):
        """Preprocesses a line from the command-line. Returns the line without surrounding whitespace and whether or not
        it opens more braces/parentheses than it closes, in which case a line continuation is necessary.
        """
        line = line.strip()
        unbalanced = line.count("{") > line.count("}") or line.count("(") > line.count(")")
        return line, unbalanced

    def add(self, source, line_num):
        """Parses source and queues it for execution. Evaluation is delayed until run is called. line_num is the line
        number of the first line of source, used to locate parse errors.
        """
        self.error_handler.register_line(self.path, source.strip().splitlines()[0] if source.strip() else "", line_num)

        self.to_exec[line_num] = (source, self.tree(source, line_num))
        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Runs this session's queued programs in order against the session's root environment. Raises EvaluationError
        for the first program that evaluates to an error.
        """
        for line_num, (source, program) in list(self.to_exec.items()):
            self.error_handler.register_line(self.path, source.strip(), line_num)
            logger.debug("evaluating %d statement(s) from line %d", len(program), line_num)

            try:
                result = self.evaluator.evaluate_program(program, self.env)
            finally:
                del self.to_exec[line_num]

            if isinstance(result, Error):
                raise EvaluationError(result)
            self.results.append(result)

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Returns the oldest unseen result."""
        return self.results.pop(0)

    def reset(self):
        """Discards every top-level binding."""
        self.env = Environment()

    @staticmethod
    def tokens(source):
        """Returns the token stream of source."""
        return tokenize(source)

    def tree(self, source, line_num=1):
        """Returns the Ast of source without evaluating it. Raises ParseFailure on syntax errors."""
        program, errors = parse(source)
        if errors:
            raise ParseFailure([error.locate(source, line_num) for error in errors])
        return program

"""Error handling for the monkey language. Only GenericExceptions should be encountered while running a program: if
another type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Note that evaluation-time errors are ordinary Error objects inside the evaluator (see monkey.core.object); they are
only turned into an EvaluationError once they surface as the result of a whole program.
"""

import logging
import sys

from termcolor import colored

logger = logging.getLogger(__name__)


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a monkey error. msg is a format string and exprs the
    values that fill it: exprs[0] should be the offending expr that caused the error.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False):
        """Parses args for GenericException."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = [str(expr) for expr in exprs]
        self.msg = msg.format(*self.exprs)
        self.expr = self.exprs[0] if self.exprs else ""  # source snippet shown by ErrorHandler.diagnose
        self.end = end if end != -1 else len(self.expr)   # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal
        self.line_num = None  # set when the error can be located in a source file

        super().__init__(self.msg)

    def colored_msg(self):
        """Returns self.msg with the expr snippets bolded."""
        return self.template.format(*(colored(expr, attrs=["bold"]) for expr in self.exprs))


class EvaluationError(GenericException):
    """Raised when a program evaluates to an Error object."""

    def __init__(self, error):
        super().__init__("{}", error.message, diagnosis=False)
        self.error = error


class ParseFailure(GenericException):
    """Raised when a source input has one or more parse errors. Every error is reported, not just the first."""

    def __init__(self, errors):
        super().__init__("{} parse error(s)", str(len(errors)), diagnosis=False)
        self.errors = list(errors)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report custom monkey errors."""
    ERROR = "red"

    def __init__(self, fatal=True):
        self.fatal = fatal
        self.traceback = {}

    def register_file(self, path):
        """Registers path in traceback."""
        self.traceback[path] = (None, None)

    def register_line(self, path, line, line_num):
        """Registers line in traceback given path. Should be called prior to Session add/run."""
        self.traceback[path] = (line, line_num)

    def remove_line(self, path):
        """Removes line from traceback given path. Should be called after successful Session add/run."""
        self.traceback[path] = (None, None)

    @staticmethod
    def diagnose(error):
        """Returns offending part of error.expr highlighted and bolded, with a caret underneath."""
        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], ErrorHandler.ERROR, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), ErrorHandler.ERROR, attrs=["bold"])

        return diagnosis

    def _location(self, error):
        """Returns '<file>:<line>:<col>: ' for errors that have been located in a file, else an empty string."""
        if error.line_num is None:
            return ""
        file = next(iter(self.traceback), "<in>")
        return colored(f"{file}:{error.line_num}:{error.start + 1}: ", attrs=["bold"])

    def report(self, error):
        """Prints error, which must be a GenericException, without exiting."""
        error_msg = ""
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += self._location(error)
        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.colored_msg()
        print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            print(ErrorHandler.diagnose(error))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a GenericException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        lines = []
        for file, (line, line_num) in self.traceback.items():
            if line:
                lines.append(f"  File '{file}', line {line_num}:\n    {line}")
        if len(lines) > 1:
            print("Traceback:\n" + "\n".join(lines))

        if isinstance(error, ParseFailure):
            logger.debug("reporting %d parse error(s)", len(error.errors))
            for parse_error in error.errors:
                self.report(parse_error)
        else:
            self.report(error)

        if self.fatal:
            sys.exit(1)
        self.traceback = {path: (None, None) for path in self.traceback}  # error occurred, reset traceback

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt", diagnosis=False))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded", diagnosis=False))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            logger.debug("internal error", exc_info=(exc_type, exc_val, exc_tb))
            self.throw(GenericException("unknown error: '{}'", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit

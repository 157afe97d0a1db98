"""Error handling for the meowlang language. Only MeowExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Diagnostics are written to stderr so that they never mix with the program's own printed output.
"""

import sys

from termcolor import colored


class MeowException(Exception):
    """Templates an error/warning message so that it can be used to throw a meowlang error/warning. exprs[0] should be
    the offending source line; start/end delimit the span of it to highlight.
    """

    def __init__(self, msg, exprs=None, start=0, end=-1, diagnosis=True, internal=False, line_num=None, column=None):
        """Parses args for MeowException or warning."""
        if exprs is None:
            exprs = ""
        if isinstance(exprs, str):
            exprs = [exprs]

        self.plain_msg = msg.format(*exprs)
        self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        self.expr = exprs[0]
        self.end = end if end != -1 else len(self.expr)  # needed for error display

        self.start = start
        self.diagnosis = diagnosis
        self.internal = internal
        self.line_num = line_num
        self.column = column

        super().__init__(self.plain_msg)

    @staticmethod
    def escape(text):
        """Escapes braces so that text can be used verbatim as a msg template."""
        return text.replace("{", "{{").replace("}", "}}")


class EvaluationError(MeowException):
    """Classified evaluation failure. In the default mode these are collected and the failing node evaluates to Null;
    in strict mode the first one is raised.
    """
    NAME = "name"                  # unresolved identifier
    CALL = "call"                  # call target is not a function
    TYPE = "type"                  # operand types cannot be combined
    OPERATOR = "operator"          # operator not defined for the operand types
    ZERO_DIVISION = "zero-division"
    ARITY = "arity"                # argument count differs from parameter count
    UNSUPPORTED = "unsupported"    # node the evaluator does not know

    def __init__(self, kind, msg, token=None, **kwargs):
        super().__init__(MeowException.escape(msg), **kwargs)
        self.kind = kind
        self.token = token

        if token is not None and self.line_num is None and token.line:
            self.line_num, self.column = token.line, token.column

    def __repr__(self):
        return f"EvaluationError({self.kind!r}, {self.plain_msg!r})"


class ErrorHandler:
    """Context manager that will silently suppress Python errors and raise custom meowlang errors/warnings."""
    ERROR = "red"
    WARNING = "magenta"

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.traceback = {}

    def _print(self, msg):
        print(msg, file=self.stream if self.stream is not None else sys.stderr)

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
    def diagnose(error, warning=False):
        """Returns offending part of error.expr highlighted and bolded, with a caret line underneath."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        diagnosis = "  " + error.expr[:error.start]

        end = max(error.end, error.start + 1)
        diagnosis += colored(error.expr[error.start:end], color, attrs=["bold"])
        diagnosis += error.expr[end:] + "\n"

        diagnosis += "  " + " " * error.start
        diagnosis += colored("^" + "~" * (end - error.start - 1), color, attrs=["bold"])

        return diagnosis

    def location(self, error):
        """file:line:col prefix for error, as far as it is known."""
        file = next(iter(self.traceback), "<in>")
        if error.line_num is None:
            return f"{file}: "
        if error.column is None:
            return f"{file}:{error.line_num}: "
        return f"{file}:{error.line_num}:{error.column}: "

    def warn(self, *args, **kwargs):
        """Generates and prints warning message. Accepts either a MeowException or MeowException's args."""
        if args and isinstance(args[0], MeowException):
            error = args[0]
        else:
            error = MeowException(*args, **kwargs)

        error_msg = colored(self.location(error), attrs=["bold"])
        error_msg += colored("warning: ", ErrorHandler.WARNING, attrs=["bold"]) + error.msg
        self._print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            self._print(ErrorHandler.diagnose(error, warning=True))

    def throw(self, error):
        """Throws error using error and self.traceback. error must be a MeowException, and self.traceback must be a
        dict of file: (line, line_num) representing origination of error.
        """
        error_msg = ""
        lines = 0
        for file, (line, line_num) in self.traceback.items():  # dicts are insertion-ordered
            if line:
                error_msg += f"  File '{file}', line {line_num}:\n"
                error_msg += f"    {line}\n"
                lines += 1

        if lines > 1:
            error_msg = "Traceback:\n" + error_msg

        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])
        elif error.line_num is not None:
            error_msg += colored(self.location(error), attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        self._print(error_msg)

        if not error.internal and error.expr and error.diagnosis:
            self._print(ErrorHandler.diagnose(error))

        if self.fatal:
            sys.exit(1)
        for path in self.traceback:  # if error occurred, reset traceback (no need if error is fatal)
            self.remove_line(path)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is None:
            return False

        if issubclass(exc_type, KeyboardInterrupt):
            self.throw(MeowException("keyboard interrupt"))
        elif issubclass(exc_type, SystemExit):
            do_exit = True
        elif issubclass(exc_type, RecursionError):
            self.throw(MeowException("maximum recursion depth exceeded while calling functions"))
        elif issubclass(exc_type, MeowException):
            self.throw(exc_val)
        else:
            self.throw(MeowException(f"unknown error: '{exc_type.__name__}: {exc_val}'", internal=True))
            do_exit = True

        return not do_exit

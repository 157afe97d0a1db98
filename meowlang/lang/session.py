"""Session control for meowlang. Runs the lexer/parser/evaluator pipeline either in command-line mode or file
interpretation mode, reporting diagnostics through the ErrorHandler.
"""

import sys

from meowlang.lang.error import EvaluationError, MeowException
from meowlang.runtime.environment import Environment
from meowlang.runtime.evaluator import Evaluator
from meowlang.syntax import token
from meowlang.syntax.lexer import tokenize
from meowlang.syntax.parser import Parser


class Session:
    """Governs a meowlang session. Everything added to a session runs in the same root environment, so definitions
    persist across add/run cycles.
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, strict=False, warn=False, debug=False, out=None):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.warn = warn          # whether or not evaluation errors are reported as warnings
        self.debug = debug        # whether or not tokens and statements are dumped before running
        self.out = out if out is not None else sys.stdout

        self.env = Environment()
        self.evaluator = Evaluator(self.out, strict=strict)
        self.to_exec = []  # list of (first line num, source lines, statement) waiting to be run
        self.results = []  # values of the statements executed by the last run

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    source = file.read()
            except OSError:
                raise MeowException("'{}' could not be opened", path, diagnosis=False)

            self.add(source)

        elif not cmd_line:
            raise MeowException("'<in>' is a reserved filename")

    @staticmethod
    def needs_continuation(source):
        """Whether source stops inside a block or a string, i.e. more lines are needed before it can be parsed."""
        depth = 0
        tokens = tokenize(source)
        for tok in tokens:
            if tok.kind == token.LBRACE:
                depth += 1
            elif tok.kind == token.RBRACE:
                depth -= 1

        unterminated = len(tokens) > 1 and tokens[-2].kind == token.ILLEGAL and tokens[-2].literal.startswith("\"")
        return depth > 0 or unterminated

    def add(self, source, line_num=1):
        """Parses source and queues its statements. Evaluation is delayed until run is called. line_num is the line
        source starts at, used for error messages.
        """
        lines = source.splitlines()
        self.error_handler.register_line(self.path, lines[0] if lines else "", line_num)  # in case error is raised

        tokens = tokenize(source)
        parser = Parser(tokens)
        program = parser.parse_program()

        if self.debug:
            self.dump(tokens, program)

        for msg, tok in zip(parser.errors, parser.error_tokens):
            error = MeowException(MeowException.escape(msg))
            self.error_handler.warn(self.locate(error, tok, line_num, lines))

        self.to_exec.extend((line_num, lines, stmt) for stmt in program.statements)
        self.error_handler.remove_line(self.path)  # error was not raised

    def run(self):
        """Runs queued statements in order. Evaluation errors are reported as warnings if self.warn; in strict mode the
        first one is raised.
        """
        self.results.clear()  # only values from this run are kept
        while self.to_exec:
            line_num, lines, stmt = self.to_exec.pop(0)
            stmt_line = stmt.token.line - 1
            self.error_handler.register_line(self.path, Session.line_at(lines, stmt_line), line_num + stmt_line)

            seen = len(self.evaluator.errors)
            try:
                self.results.append(self.evaluator.evaluate(stmt, self.env))
            except EvaluationError as error:
                self.to_exec.clear()
                raise self.locate(error, error.token, line_num, lines)
            except RecursionError:
                self.to_exec.clear()
                raise

            if self.warn:
                for error in self.evaluator.errors[seen:]:
                    self.error_handler.warn(self.locate(error, error.token, line_num, lines))

            self.error_handler.remove_line(self.path)

    def pop(self):
        """Removes and returns the value of the most recently executed statement."""
        return self.results.pop()

    @property
    def errors(self):
        """Evaluation errors collected so far."""
        return self.evaluator.errors

    @staticmethod
    def line_at(lines, idx):
        return lines[idx] if 0 <= idx < len(lines) else ""

    @staticmethod
    def locate(error, tok, line_num, lines):
        """Points error at tok within a chunk of source that starts at line_num."""
        if tok is None or not tok.line:
            return error

        error.line_num = line_num + tok.line - 1
        error.column = tok.column
        error.expr = Session.line_at(lines, tok.line - 1)
        error.start = min(tok.column - 1, len(error.expr))
        error.end = error.start + max(len(tok.literal), 1)
        return error

    def dump(self, tokens, program):
        """Prints tokens and parsed statements, for --debug."""
        print("== Lexing ==", file=self.out)
        print("  " + " ".join(f"{tok.kind}({tok.literal})" if tok.literal != tok.kind else tok.kind
                              for tok in tokens), file=self.out)
        print("== Parsing ==", file=self.out)
        for stmt in program.statements:
            for line in str(stmt).splitlines():
                print("  " + line, file=self.out)
        print(file=self.out)

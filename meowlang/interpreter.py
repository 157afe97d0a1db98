"""meowlang interpreter.

Basic program flow:
    1. Lexer: scans source text into a flat list of tokens ending in EOF (see meowlang/syntax/lexer.py)
        - unknown characters become ILLEGAL tokens, scanning never stops early
    2. Parser: builds a Program (AST) by recursive descent + precedence climbing (see meowlang/syntax/parser.py)
        - malformed statements are reported in Program.errors and skipped, the rest of the program is kept
    3. Evaluator: walks the AST against an Environment, writing print output to a sink (see meowlang/runtime)
        - not a compiler, so statements are executed on the fly

Session (meowlang/lang/session.py) wires these together for files and the interactive shell; interpret() below is the
bare pipeline.
"""

from meowlang.runtime.environment import Environment
from meowlang.runtime.evaluator import Evaluator
from meowlang.syntax.lexer import tokenize
from meowlang.syntax.parser import parse


def execute(source, out=None, strict=False, env=None):
    """Runs source and returns (result value, program, evaluator). The evaluator carries printed output and any
    evaluation errors, the program carries parse errors.
    """
    program = parse(tokenize(source))
    evaluator = Evaluator(out, strict=strict)
    result = evaluator.run(program, env if env is not None else Environment())
    return result, program, evaluator


def interpret(source, strict=False):
    """Runs source in a fresh root environment and returns everything it printed."""
    __, __, evaluator = execute(source, strict=strict)
    return evaluator.output()

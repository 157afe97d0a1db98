"""Tree-walking evaluator for meowlang.

evaluate(node, env) dispatches on the node's class through a table covering the closed set of AST node types.
Failures never escape as Python exceptions by default: the failing node evaluates to Null, and an EvaluationError
describing what went wrong is appended to Evaluator.errors so callers can tell a swallowed error from a legitimate
Null. With strict=True the EvaluationError is raised instead.

Semantics worth knowing about:
    - assignment always binds in the innermost scope; it never updates an outer binding
    - claw (return) does not stop the enclosing block: later statements still run, and a call's value is the value
      of the last statement of the body
    - integers are 64-bit two's complement, division truncates toward zero
"""

import io

from meowlang.lang.error import EvaluationError
from meowlang.runtime.environment import Environment
from meowlang.runtime.objects import NULL, Function, Integer, String
from meowlang.syntax import ast


def wrap_int64(value):
    """Wraps value into the signed 64-bit range."""
    return (value + 2 ** 63) % 2 ** 64 - 2 ** 63


def truncating_div(left, right):
    """Integer division rounding toward zero. right must be non-zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


INTEGER_OPERATORS = {
    "+": lambda left, right: left + right,
    "-": lambda left, right: left - right,
    "*": lambda left, right: left * right,
    "/": truncating_div,
}


class Evaluator:
    """Evaluates AST nodes against Environments. out is the sink that print statements write to (anything with a
    write method); it defaults to an in-memory buffer, readable through output().
    """

    def __init__(self, out=None, strict=False):
        self.out = out if out is not None else io.StringIO()
        self.strict = strict
        self.errors = []

        self.dispatch = {
            ast.Program: self.eval_statements,
            ast.Block: self.eval_statements,
            ast.Assignment: self.eval_assignment,
            ast.FunctionDeclaration: self.eval_function_declaration,
            ast.Return: self.eval_return,
            ast.Print: self.eval_print,
            ast.Identifier: self.eval_identifier,
            ast.IntegerLiteral: lambda node, env: Integer(node.value),
            ast.StringLiteral: lambda node, env: String(node.value),
            ast.InfixExpression: self.eval_infix,
            ast.CallExpression: self.eval_call,
        }

    def output(self):
        """Everything printed so far, if out is an in-memory buffer."""
        return self.out.getvalue()

    def fail(self, kind, msg, token=None):
        """Records an EvaluationError and returns Null in its place, or raises it in strict mode."""
        error = EvaluationError(kind, msg, token)
        self.errors.append(error)
        if self.strict:
            raise error
        return NULL

    def evaluate(self, node, env):
        handler = self.dispatch.get(type(node))
        if handler is None:
            return self.fail(EvaluationError.UNSUPPORTED, f"cannot evaluate {type(node).__name__}",
                             getattr(node, "token", None))
        return handler(node, env)

    def run(self, program, env=None):
        """Evaluates a whole Program in env (a fresh root Environment if omitted) and returns the last value."""
        return self.evaluate(program, env if env is not None else Environment())

    # ======================================
    # Statements
    # ======================================

    def eval_statements(self, node, env):
        result = NULL
        for stmt in node.statements:
            result = self.evaluate(stmt, env)
        return result

    def eval_assignment(self, node, env):
        return env.set(node.name.value, self.evaluate(node.value, env))

    def eval_function_declaration(self, node, env):
        function = Function([param.value for param in node.parameters], node.body, env)
        return env.set(node.name.value, function)

    def eval_return(self, node, env):
        if node.value is None:
            return NULL
        return self.evaluate(node.value, env)

    def eval_print(self, node, env):
        value = self.evaluate(node.value, env)
        self.out.write(value.inspect() + "\n")
        return NULL

    # ======================================
    # Expressions
    # ======================================

    def eval_identifier(self, node, env):
        value = env.get(node.value)
        if value is None:
            return self.fail(EvaluationError.NAME, f"identifier '{node.value}' is not defined", node.token)
        return value

    def eval_infix(self, node, env):
        # left-deep chains such as 1 + 2 + ... + n are folded in a loop, innermost operator first
        spine = [node]
        while isinstance(spine[-1].left, ast.InfixExpression):
            spine.append(spine[-1].left)

        left = self.evaluate(spine[-1].left, env)
        for infix in reversed(spine):
            left = self.apply_operator(infix, left, self.evaluate(infix.right, env))
        return left

    def apply_operator(self, node, left, right):
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self.eval_integer_infix(node, left.value, right.value)

        if isinstance(left, String) and isinstance(right, String):
            if node.operator != "+":
                return self.fail(EvaluationError.OPERATOR, f"operator '{node.operator}' is not defined for strings",
                                 node.token)
            return String(left.value + right.value)

        return self.fail(EvaluationError.TYPE, f"cannot apply '{node.operator}' to {left.type_name} and "
                                               f"{right.type_name}", node.token)

    def eval_integer_infix(self, node, left, right):
        operation = INTEGER_OPERATORS.get(node.operator)
        if operation is None:
            return self.fail(EvaluationError.OPERATOR, f"operator '{node.operator}' is not defined for integers",
                             node.token)
        if node.operator == "/" and right == 0:
            return self.fail(EvaluationError.ZERO_DIVISION, "integer division by zero", node.token)

        return Integer(wrap_int64(operation(left, right)))

    def eval_call(self, node, env):
        function = self.evaluate(node.function, env)
        if not isinstance(function, Function):
            return self.fail(EvaluationError.CALL, f"'{node.function}' is not a function ({function.type_name})",
                             node.token)

        args = [self.evaluate(arg, env) for arg in node.arguments]
        return self.apply_function(function, args, node)

    def apply_function(self, function, args, node=None):
        """Calls function with already-evaluated args in a new scope enclosing the function's captured scope."""
        if len(args) != len(function.parameters):
            return self.fail(EvaluationError.ARITY, f"function takes {len(function.parameters)} argument(s), "
                                                    f"got {len(args)}", node.token if node is not None else None)

        call_env = function.env.enclosed()
        for name, value in zip(function.parameters, args):
            call_env.set(name, value)

        return self.evaluate(function.body, call_env)


def evaluate(node, env, out=None):
    """One-shot evaluation with a throwaway Evaluator. Returns the resulting Value."""
    return Evaluator(out).evaluate(node, env)

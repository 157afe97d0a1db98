import io
import unittest

from meowlang.lang.error import EvaluationError
from meowlang.runtime.environment import Environment
from meowlang.runtime.evaluator import Evaluator, evaluate, truncating_div, wrap_int64
from meowlang.runtime.objects import NULL, Function, Integer, Null, String
from meowlang.syntax import ast
from meowlang.syntax.parser import parse_source
from meowlang.syntax.token import Token


def run(source, strict=False):
    """Returns (last value, printed output, evaluator) for source run in a fresh root environment."""
    evaluator = Evaluator(strict=strict)
    result = evaluator.run(parse_source(source))
    return result, evaluator.output(), evaluator


class EvaluatorTestCase(unittest.TestCase):

    def test_print(self):
        cases = {
            "purr 1 + 2": "3\n",
            "purr \"Hello\" + \" world\"": "Hello world\n",
            "lick x = 42; purr x;": "42\n",
            "purr 123": "123\n",
            "purr 1 purr 2; purr \"three\"": "1\n2\nthree\n",
            "purr undefined": "null\n",
        }
        for case, output in cases.items():
            self.assertEqual(output, run(case)[1], case)

    def test_integer_literals(self):
        for text in ["0", "7", "42", "00012", "9223372036854775807"]:
            program = parse_source(f"purr {text}")
            value = Evaluator().evaluate(program.statements[0].value, Environment())
            self.assertEqual(Integer(int(text)), value, text)

    def test_arithmetic(self):
        cases = {
            "1 + 2 * 3": 7,
            "(1 + 2) * 3": 9,
            "10 - 3 - 2": 5,
            "7 / 2": 3,
            "0 - 7 / 2": -3,
            "(0 - 7) / 2": -3,
            "(0 - 7) / (0 - 2)": 3,
            "7 / (0 - 2)": -3,
            "9223372036854775807 + 1": -9223372036854775808,
            "(0 - 9223372036854775807 - 1) / (0 - 1)": -9223372036854775808,
        }
        for case, expected in cases.items():
            self.assertEqual(Integer(expected), run(f"claw {case}")[0], case)

    def test_long_chains(self):
        self.assertEqual("1500\n", run("purr " + " + ".join(["1"] * 1500))[1])
        self.assertEqual("-998\n", run("purr " + " - ".join(["1"] * 1000))[1])
        self.assertEqual("a" * 1200 + "\n", run("purr " + " + ".join(["\"a\""] * 1200))[1])

        # errors inside a chain keep folding, with the same outcome as a short chain
        result, __, evaluator = run("claw " + " + ".join(["1"] * 1000) + " + \"x\" + 1")
        self.assertEqual(NULL, result)
        self.assertEqual([EvaluationError.TYPE, EvaluationError.TYPE], [error.kind for error in evaluator.errors])

        # operands are still evaluated left to right
        source = "meow say(x) { purr x } claw " + " + ".join(f"say({n})" for n in range(1000))
        result, output, evaluator = run(source)
        self.assertEqual("".join(f"{n}\n" for n in range(1000)), output)

        program = parse_source("purr " + " * ".join(["2"] * 1000))
        self.assertTrue(str(program).startswith("purr " + "(" * 999 + "2 * 2)"))

    def test_helpers(self):
        self.assertEqual(-3, truncating_div(-7, 2))
        self.assertEqual(3, truncating_div(-7, -2))
        self.assertEqual(0, truncating_div(1, 5))
        self.assertEqual(2 ** 63 - 1, wrap_int64(2 ** 63 - 1))
        self.assertEqual(-2 ** 63, wrap_int64(2 ** 63))

    def test_strings(self):
        self.assertEqual(String("ab"), run("claw \"a\" + \"b\"")[0])

        should_be_null = ["\"a\" - \"b\"", "\"a\" * 2", "1 + \"a\"", "\"a\" == \"a\"", "1 < 2"]
        for case in should_be_null:
            self.assertEqual(NULL, run(f"claw {case}")[0], case)

    def test_assignment(self):
        result, __, evaluator = run("lick x = 1; lick x = x + 1")
        self.assertEqual(Integer(2), result)
        self.assertEqual([], evaluator.errors)

    def test_function_call(self):
        # a bare call is not a statement: it is skipped and the declaration stays the last value
        result, output, __ = run("meow double(a) { claw a * 2 } double(5)")
        self.assertIsInstance(result, Function)
        self.assertEqual("", output)

        result, output, __ = run("""
meow double(a) {
    claw a * 2;
}
purr double(5);
lick ten = double(5)""")
        self.assertEqual("10\n", output)
        self.assertEqual(Integer(10), result)

        self.assertEqual("20\n", run("meow addTen(a) { claw a + 10 } purr addTen(10)")[1])
        self.assertEqual("6\n", run("meow add(a, b, c) { claw a + b + c } purr add(1, 2, 3)")[1])
        self.assertEqual("hi\n", run("meow greet() { claw \"hi\" } purr greet()")[1])

    def test_function_value(self):
        result, output, __ = run("meow add(a, b) { purr a\n claw a + b }\npurr add")
        self.assertIsInstance(result, Null)
        self.assertEqual("meow(a, b) {\npurr a\nclaw (a + b)\n}\n", output)

        result = run("meow f() { }")[0]
        self.assertIsInstance(result, Function)
        self.assertEqual([], result.parameters)

    def test_implicit_return(self):
        # claw does not stop the block; the call's value is the body's last statement
        cases = {
            "meow f() { claw 1; claw 2 } purr f()": "2\n",
            "meow f() { claw 1; purr \"after\" } purr f()": "after\nnull\n",
            "meow f() { lick y = 5 } purr f()": "5\n",
            "meow f() { } purr f()": "null\n",
            "meow f() { claw } purr f()": "null\n",
        }
        for case, output in cases.items():
            self.assertEqual(output, run(case)[1], case)

    def test_undeclared_call(self):
        result, output, evaluator = run("lick r = nothing(1, 2)\npurr r")
        self.assertEqual("null\n", output)
        self.assertEqual(NULL, result)
        self.assertEqual([EvaluationError.NAME, EvaluationError.CALL], [error.kind for error in evaluator.errors])

        self.assertEqual(NULL, run("lick x = 1; claw x(2)")[0])
        self.assertEqual(NULL, run("claw \"s\"()")[0])

    def test_scopes(self):
        source = """
lick x = 1
meow f() {
    lick x = 2
    lick local = 3
    claw x
}
purr f()
purr x
purr local
"""
        self.assertEqual("2\n1\nnull\n", run(source)[1])

        # parameters do not leak either
        self.assertEqual("5\nnull\n", run("meow id(a) { claw a } purr id(5) purr a")[1])

    def test_closures(self):
        source = """
meow adder(n) {
    meow add(x) {
        claw x + n
    }
}
lick addTwo = adder(2)
lick addTen = adder(10)
purr addTwo(3)
purr addTen(3)
purr n
"""
        self.assertEqual("5\n13\nnull\n", run(source)[1])

        # the captured scope is shared, not copied: later bindings in it are visible
        self.assertEqual("7\n", run("meow f() { claw later } lick later = 7 purr f()")[1])

        # a callee sees its defining scope, not the caller's
        source = """
lick who = "global"
meow show() { claw who }
meow caller() {
    lick who = "caller"
    claw show()
}
purr caller()
"""
        self.assertEqual("global\n", run(source)[1])

    def test_functions_as_values(self):
        source = "meow twice(f, x) { claw f(f(x)) } meow inc(x) { claw x + 1 } purr twice(inc, 1)"
        self.assertEqual("3\n", run(source)[1])

    def test_errors(self):
        cases = {
            "claw missing": EvaluationError.NAME,
            "claw 1(2)": EvaluationError.CALL,
            "claw 1 + \"a\"": EvaluationError.TYPE,
            "claw \"a\" - \"b\"": EvaluationError.OPERATOR,
            "claw 1 == 1": EvaluationError.OPERATOR,
            "claw 1 / 0": EvaluationError.ZERO_DIVISION,
            "meow f(a) { claw a } claw f()": EvaluationError.ARITY,
            "meow f(a) { claw a } claw f(1, 2)": EvaluationError.ARITY,
        }
        for case, kind in cases.items():
            result, __, evaluator = run(case)
            self.assertEqual(NULL, result, case)
            self.assertEqual([kind], [error.kind for error in evaluator.errors], case)

            with self.assertRaises(EvaluationError, msg=case) as context:
                run(case, strict=True)
            self.assertEqual(kind, context.exception.kind, case)

    def test_error_token(self):
        __, __, evaluator = run("lick a = 1\nlick b = a + nope")
        error, = evaluator.errors
        self.assertEqual("nope", error.token.literal)
        self.assertEqual((2, 14), (error.line_num, error.column))
        self.assertIn("nope", str(error))

    def test_arity_skips_body(self):
        result, output, __ = run("meow f(a) { purr \"ran\" } claw f()")
        self.assertEqual(NULL, result)
        self.assertEqual("", output)

    def test_intentional_null(self):
        # nulls that are not errors leave the error channel empty
        for case in ["purr 1", "meow f() { } claw f()", "claw", "meow f(a) { }\nlick n = f(1)"]:
            __, __, evaluator = run(case)
            self.assertEqual([], evaluator.errors, case)

    def test_unsupported_node(self):
        evaluator = Evaluator()
        self.assertEqual(NULL, evaluator.evaluate(object(), Environment()))
        self.assertEqual(EvaluationError.UNSUPPORTED, evaluator.errors[0].kind)

    def test_tree_not_mutated(self):
        program = parse_source("lick x = 1\nmeow f(a) { claw a + x }\npurr f(2)")
        before = str(program)
        Evaluator().run(program)
        Evaluator().run(program)
        self.assertEqual(before, str(program))

    def test_evaluate(self):
        env = Environment()
        node = ast.IntegerLiteral(Token("INT", "3"), 3)
        self.assertEqual(Integer(3), evaluate(node, env))

        out = io.StringIO()
        program = parse_source("purr \"x\"")
        evaluate(program, env, out)
        self.assertEqual("x\n", out.getvalue())


if __name__ == '__main__':
    unittest.main()

import unittest

from monkey.core.ast import Ast, Expression, Infix, IntLiteral, Operator, Ident
from monkey.core.evaluator import Evaluator, evaluate, truncating_div
from monkey.core.object import NULL, Boolean, Environment, Error, Function, Integer, ReturnValue
from monkey.core.parser import parse


def run(source, env=None):
    program, errors = parse(source)
    assert not errors, errors
    return evaluate(program, env)


class EvaluatorTestCase(unittest.TestCase):

    def assertEvaluates(self, cases):
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_integers(self):
        self.assertEvaluates({
            "5": Integer(5),
            "10": Integer(10),
            "-5": Integer(-5),
            "-10": Integer(-10),
            "5 + 5 + 5 + 5 - 10": Integer(10),
            "2 * 2 * 2 * 2 * 2": Integer(32),
            "-50 + 100 + -50": Integer(0),
            "5 * 2 + 10": Integer(20),
            "5 + 2 * 10": Integer(25),
            "20 + 2 * -10": Integer(0),
            "50 / 2 * 2 + 10": Integer(60),
            "2 * (5 + 10)": Integer(30),
            "3 * 3 * 3 + 10": Integer(37),
            "3 * (3 * 3) + 10": Integer(37),
            "(5 + 10 * 2 + 15 / 3) * 2 + -10": Integer(50),
        })

    def test_truncating_division(self):
        self.assertEvaluates({
            "7 / 2": Integer(3),
            "-7 / 2": Integer(-3),
            "7 / -2": Integer(-3),
            "-7 / -2": Integer(3),
            "0 / 5": Integer(0),
        })
        self.assertEqual(-3, truncating_div(-9, 3))

    def test_booleans(self):
        self.assertEvaluates({
            "true": Boolean(True),
            "false": Boolean(False),
            "1 < 2": Boolean(True),
            "1 > 2": Boolean(False),
            "1 < 1": Boolean(False),
            "1 > 1": Boolean(False),
            "1 == 1": Boolean(True),
            "1 != 1": Boolean(False),
            "1 == 2": Boolean(False),
            "1 != 2": Boolean(True),
            "true == true": Boolean(True),
            "false == false": Boolean(True),
            "true == false": Boolean(False),
            "true != false": Boolean(True),
            "false != true": Boolean(True),
            "(1 < 2) == true": Boolean(True),
            "(1 < 2) == false": Boolean(False),
            "(1 > 2) == true": Boolean(False),
            "(1 > 2) == false": Boolean(True),
        })

    def test_bang(self):
        self.assertEvaluates({
            "!true": Boolean(False),
            "!false": Boolean(True),
            "!!false": Boolean(False),
            "!!true": Boolean(True),
            "!5": Boolean(False),
            "!!5": Boolean(True),
            "!0": Boolean(False),
            "!if (false) { 1 }": Boolean(True),
        })

    def test_if_else(self):
        self.assertEvaluates({
            "if (true) { 10 }": Integer(10),
            "if (false) { 10 }": NULL,
            "if (1) { 10 }": Integer(10),
            "if (0) { 10 }": Integer(10),
            "if (1 < 2) { 10 }": Integer(10),
            "if (1 > 2) { 10 }": NULL,
            "if (1 > 2) { 10 } else { 20 }": Integer(20),
            "if (1 < 2) { 10 } else { 20 }": Integer(10),
            "if (if (false) { 1 }) { 10 } else { 20 }": Integer(20),
            "if (true) { }": NULL,
        })

    def test_return(self):
        self.assertEvaluates({
            "return 10;": Integer(10),
            "return 10; 9;": Integer(10),
            "return 2 * 5; 9;": Integer(10),
            "9; return 2 * 5; 9;": Integer(10),
            "if (10 > 1) { if (10 > 1) { return 10; } return 1; }": Integer(10),
            "let f = fn() { if (true) { return 1; } 2 }; f() + 10": Integer(11),
        })

    def test_errors(self):
        self.assertEvaluates({
            "5 + true;": Error("Cannot add 5 to true"),
            "5 + true; 5;": Error("Cannot add 5 to true"),
            "-true": Error("No such negative value of true"),
            "true + false;": Error("Cannot add true to false"),
            "5; true + false; 5": Error("Cannot add true to false"),
            "if (10 > 1) { true + false; }": Error("Cannot add true to false"),
            "if (10 > 1) { if (10 > 1) { return true + false; } return 1; }": Error("Cannot add true to false"),
            "foobar": Error("Identifier not found: foobar"),
            "true - 1": Error("Cannot subtract 1 from true"),
            "2 * false": Error("Cannot multiply 2 by false"),
            "false / 2": Error("Cannot divide false by 2"),
            "5 / 0": Error("Cannot divide 5 by zero"),
            "1 < true": Error("Cannot compare 1 and true with <"),
            "true > false": Error("Cannot compare true and false with >"),
            "1 == true": Error("Cannot compare 1 and true with =="),
            "if (true) { 1 } == true": Error("Cannot compare 1 and true with =="),
            "5(1)": Error("5 is not callable"),
            "let x = true; x()": Error("true is not callable"),
            "-if (false) { 1 }": Error("No such negative value of null"),
        })

    def test_error_short_circuits(self):
        self.assertEvaluates({
            "let x = missing; 5": Error("Identifier not found: missing"),
            "missing + undefined": Error("Identifier not found: missing"),
            "-(1 + true)": Error("Cannot add 1 to true"),
            "!(1 + true)": Error("Cannot add 1 to true"),
            "if (1 + true) { 1 }": Error("Cannot add 1 to true"),
            "let f = fn(x) { x }; f(1 + true, undefined)": Error("Cannot add 1 to true"),
            "undefined(1 + true)": Error("Identifier not found: undefined"),
            "return undefined; 1": Error("Identifier not found: undefined"),
        })

    def test_overflow(self):
        self.assertEvaluates({
            "9223372036854775807 + 1": Error("Integer overflow: 9223372036854775807 + 1"),
            "-9223372036854775807 - 2": Error("Integer overflow: -9223372036854775807 - 2"),
            "let min = -9223372036854775807 - 1; -min": Error("Integer overflow: --9223372036854775808"),
            "let min = -9223372036854775807 - 1; min / -1": Error(
                "Integer overflow: -9223372036854775808 / -1"),
            "4611686018427387904 * 2": Error("Integer overflow: 4611686018427387904 * 2"),
            "-9223372036854775807 - 1": Integer(-2 ** 63),
        })

    def test_let(self):
        self.assertEvaluates({
            "let a = 5; a;": Integer(5),
            "let a = 5 * 5; a;": Integer(25),
            "let a = 5; let b = a; b;": Integer(5),
            "let a = 5; let b = a; let c = a + b + 5; c;": Integer(15),
            "let a = 5;": Integer(5),
            "let a = 1; let a = a + 1; a": Integer(2),
        })

    def test_function_object(self):
        env = Environment()
        result = run("fn(x) { x + 2; };", env)

        self.assertIsInstance(result, Function)
        self.assertEqual(("x",), result.params)
        self.assertEqual("(x + 2)", str(result.body))
        self.assertIs(env, result.env)

    def test_function_body_is_shared(self):
        program, __ = parse("let f = fn(x) { x }; f")
        result = evaluate(program)
        self.assertIs(program[0].value.body, result.body)

    def test_calls(self):
        self.assertEvaluates({
            "let identity = fn(x) { x; }; identity(5);": Integer(5),
            "let identity = fn(x) { return x; }; identity(5);": Integer(5),
            "let double = fn(x) { x * 2; }; double(5);": Integer(10),
            "let add = fn(x, y) { x + y; }; add(5, 5);": Integer(10),
            "let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));": Integer(20),
            "fn(x) { x; }(5)": Integer(5),
            "fn() { }()": NULL,
            "let f = fn() { 1; 2; 3 }; f()": Integer(3),
        })

    def test_arity(self):
        self.assertEvaluates({
            "fn(x, y) { x }(1)": Error("Wrong number of arguments: expected 2, got 1"),
            "fn() { 1 }(1, 2)": Error("Wrong number of arguments: expected 0, got 2"),
        })

    def test_closures(self):
        self.assertEvaluates({
            "let newAdder = fn(x) { fn(y) { x + y }; }; let addTwo = newAdder(2); addTwo(3);": Integer(5),
            "let x = 10; let f = fn() { x }; let x = 20; f()": Integer(20),
            "let add = fn(a, b) { a + b }; let twice = fn(f, x) { f(f(x, x), x) }; twice(add, 3)": Integer(9),
            "let counter = fn(n) { fn() { n } }; let a = counter(1); let b = counter(2); a() + b()": Integer(3),
        })

    def test_call_does_not_leak_bindings(self):
        env = Environment()
        self.assertEqual(Integer(1), run("let f = fn(x) { let y = x; y }; f(1)", env))
        self.assertIsNone(env.get("x"))
        self.assertIsNone(env.get("y"))

    def test_call_frame_writes_are_local(self):
        self.assertEvaluates({
            "let x = 1; let f = fn() { let x = 2; x }; f() + x": Integer(3),
        })

    def test_recursion(self):
        self.assertEvaluates({
            "let fact = fn(n) { if (n < 2) { 1 } else { n * fact(n - 1) } }; fact(10)": Integer(3628800),
            "let fib = fn(n) { if (n < 2) { return n; } fib(n - 1) + fib(n - 2) }; fib(15)": Integer(610),
        })

    def test_evaluate_program_unwraps(self):
        evaluator = Evaluator()
        program, __ = parse("return 5;")

        self.assertEqual(ReturnValue(Integer(5)), evaluator.evaluate(program, Environment()))
        self.assertEqual(Integer(5), evaluator.evaluate_program(program, Environment()))

    def test_empty_program(self):
        self.assertEqual(NULL, evaluate(Ast()))

    def test_hand_built_tree(self):
        program = Ast((Expression(Infix(IntLiteral(2), Operator.MULT, Ident("x"))),))
        env = Environment()
        env.set("x", Integer(21))
        self.assertEqual(Integer(42), evaluate(program, env))


if __name__ == '__main__':
    unittest.main()

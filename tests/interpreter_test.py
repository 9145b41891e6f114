import unittest

from monkey.core.object import Environment, Error, Integer
from monkey.core.parser import ExpectedIdentifier, UnexpectedToken
from monkey.core.token import Token, TokenKind
from monkey.interpreter import interpret


class InterpreterTestCase(unittest.TestCase):

    def test_interpret(self):
        should_pass = {
            "let a = 5; a * 2": Integer(10),
            "let max = fn(a, b) { if (a > b) { a } else { b } }; max(3, 7)": Integer(7),
            "return 1; 2": Integer(1),
            "1 / 0": Error("Cannot divide 1 by zero"),
        }
        for case, expected in should_pass.items():
            self.assertEqual((expected, []), interpret(case), case)

    def test_parse_errors_skip_evaluation(self):
        env = Environment()
        result, errors = interpret("let a = 1; let = 5; let b a;", env)

        self.assertIsNone(result)
        self.assertEqual([
            ExpectedIdentifier(Token(TokenKind.ASSIGN)),
            UnexpectedToken(Token(TokenKind.ASSIGN), Token(TokenKind.IDENT, "a")),
        ], errors)
        self.assertEqual({}, env.bindings())

    def test_shared_environment(self):
        env = Environment()
        interpret("let add = fn(x, y) { x + y };", env)
        interpret("let three = add(1, 2);", env)

        self.assertEqual((Integer(6), []), interpret("add(three, three)", env))


if __name__ == '__main__':
    unittest.main()

"""Tree-walking evaluator for the monkey language.

Evaluation is a recursive reduction of AST nodes against an Environment. There are no Python exceptions for language
level failures: every failed lookup, operator or call produces an Error object, which short-circuits the rest of the
enclosing blocks and calls exactly like a ReturnValue does (see monkey.core.object). Deep recursion in a monkey program
consumes Python stack frames, so unbounded recursion ends in a RecursionError that is left to the caller.

Integers are signed 64-bit: division truncates toward zero, and results outside the 64-bit range are reported as
errors rather than silently widened.
"""

import logging

from monkey.core import ast
from monkey.core.object import (
    INT_MAX, INT_MIN, NULL, Boolean, Environment, Error, Function, Integer, ReturnValue, is_sentinel, is_truthy,
    native_bool
)

logger = logging.getLogger(__name__)

ARITHMETIC_ERRORS = {
    ast.Operator.PLUS: "Cannot add {0} to {1}",
    ast.Operator.MINUS: "Cannot subtract {1} from {0}",
    ast.Operator.MULT: "Cannot multiply {0} by {1}",
    ast.Operator.DIV: "Cannot divide {0} by {1}",
}


def truncating_div(left, right):
    """Integer division rounding toward zero, like machine integers (Python's // rounds toward negative infinity)."""
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


class Evaluator:
    """Reduces AST nodes to Objects. Dispatches on the node's class name, e.g. an ast.Let is evaluated by _eval_Let."""

    def evaluate(self, node, env):
        """Evaluates any AST node in env. May return a ReturnValue sentinel; see evaluate_program."""
        return getattr(self, f"_eval_{type(node).__name__}")(node, env)

    def evaluate_program(self, program, env):
        """Evaluates a whole program, unwrapping a top-level return."""
        result = self.evaluate(program, env)
        if isinstance(result, ReturnValue):
            return result.value
        return result

    # --------------------------------------------------------------------------------------------------------------- #
    # Blocks and statements

    def _eval_Ast(self, block, env):
        result = NULL
        for statement in block:
            result = self.evaluate(statement, env)
            if is_sentinel(result):
                return result
        return result

    def _eval_Let(self, statement, env):
        value = self.evaluate(statement.value, env)
        if is_sentinel(value):
            return value
        return env.set(statement.name, value)

    def _eval_Return(self, statement, env):
        value = self.evaluate(statement.value, env)
        if is_sentinel(value):
            return value
        return ReturnValue(value)

    def _eval_Expression(self, statement, env):
        return self.evaluate(statement.expr, env)

    # --------------------------------------------------------------------------------------------------------------- #
    # Expressions

    def _eval_Ident(self, expr, env):
        value = env.get(expr.name)
        if value is None:
            return Error(f"Identifier not found: {expr.name}")
        return value

    def _eval_IntLiteral(self, expr, env):
        return Integer(expr.value)

    def _eval_BooleanLiteral(self, expr, env):
        return native_bool(expr.value)

    def _eval_Prefix(self, expr, env):
        operand = self.evaluate(expr.operand, env)
        if is_sentinel(operand):
            return operand

        if expr.operator is ast.Operator.BANG:
            return native_bool(not is_truthy(operand))

        if expr.operator is ast.Operator.MINUS:
            if not isinstance(operand, Integer):
                return Error(f"No such negative value of {operand}")
            if -operand.value > INT_MAX:
                return Error(f"Integer overflow: -{operand}")
            return Integer(-operand.value)

        return Error(f"Unsupported prefix operator: {expr.operator}")

    def _eval_Infix(self, expr, env):
        left = self.evaluate(expr.left, env)
        if is_sentinel(left):
            return left
        right = self.evaluate(expr.right, env)
        if is_sentinel(right):
            return right

        operator = expr.operator
        if operator in ARITHMETIC_ERRORS:
            return self._arithmetic(operator, left, right)

        if isinstance(left, Integer) and isinstance(right, Integer):
            comparisons = {
                ast.Operator.LT: left.value < right.value,
                ast.Operator.GT: left.value > right.value,
                ast.Operator.EQ: left.value == right.value,
                ast.Operator.NOT_EQ: left.value != right.value,
            }
            if operator in comparisons:
                return native_bool(comparisons[operator])

        elif isinstance(left, Boolean) and isinstance(right, Boolean):
            if operator is ast.Operator.EQ:
                return native_bool(left.value == right.value)
            if operator is ast.Operator.NOT_EQ:
                return native_bool(left.value != right.value)

        return Error(f"Cannot compare {left} and {right} with {operator}")

    @staticmethod
    def _arithmetic(operator, left, right):
        if not isinstance(left, Integer) or not isinstance(right, Integer):
            return Error(ARITHMETIC_ERRORS[operator].format(left, right))

        a, b = left.value, right.value
        if operator is ast.Operator.PLUS:
            result = a + b
        elif operator is ast.Operator.MINUS:
            result = a - b
        elif operator is ast.Operator.MULT:
            result = a * b
        elif b == 0:
            return Error(f"Cannot divide {left} by zero")
        else:
            result = truncating_div(a, b)

        if not INT_MIN <= result <= INT_MAX:
            return Error(f"Integer overflow: {left} {operator} {right}")
        return Integer(result)

    def _eval_If(self, expr, env):
        condition = self.evaluate(expr.condition, env)
        if is_sentinel(condition):
            return condition

        if is_truthy(condition):
            return self.evaluate(expr.consequence, env)
        if expr.alternative is not None:
            return self.evaluate(expr.alternative, env)
        return NULL

    def _eval_FuncLiteral(self, expr, env):
        return Function(expr.params, expr.body, env)

    def _eval_Call(self, expr, env):
        function = self.evaluate(expr.callee, env)
        if is_sentinel(function):
            return function
        if not isinstance(function, Function):
            return Error(f"{function} is not callable")

        args = []
        for arg in expr.args:  # arguments are evaluated in the caller's environment, left to right
            value = self.evaluate(arg, env)
            if is_sentinel(value):
                return value
            args.append(value)

        if len(args) != len(function.params):
            return Error(f"Wrong number of arguments: expected {len(function.params)}, got {len(args)}")

        logger.debug("calling %s with %d argument(s)", expr.callee, len(args))
        frame = function.env.child()
        for param, value in zip(function.params, args):
            frame.set(param, value)

        result = self.evaluate(function.body, frame)
        if isinstance(result, ReturnValue):
            return result.value
        return result


def evaluate(program, env=None):
    """Evaluates program in env (a fresh root Environment if None) and returns the resulting Object."""
    if env is None:
        env = Environment()
    return Evaluator().evaluate_program(program, env)

"""Monkey language interpreter.

Basic program flow:
    1. Tokenizer: scans source text into a lazy stream of tokens (monkey/core/token.py)
        - never fails: unscannable characters become ILLEGAL tokens for the parser to reject
    2. Parser: builds an immutable AST by Pratt parsing the token stream (monkey/core/parser.py)
        - collects every syntax error instead of stopping at the first one
    3. Evaluator: walks the AST against a chain of lexical environments (monkey/core/evaluator.py)
        - only runs if parsing produced zero errors; runtime failures are Error values, not exceptions

The front end (monkey/lang) wraps this pipeline with error reporting, a persistent session and an interactive shell.
"""

from monkey.core.evaluator import Evaluator
from monkey.core.object import Environment
from monkey.core.parser import parse


def interpret(source, env=None):
    """Runs source in env (a fresh root Environment if None). Returns (result, errors): if errors is non-empty the
    program was not evaluated and result is None.
    """
    program, errors = parse(source)
    if errors:
        return None, errors

    if env is None:
        env = Environment()
    return Evaluator().evaluate_program(program, env), errors

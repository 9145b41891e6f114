"""Operator-precedence (Pratt) parser for the monkey language. Consumes the token stream of monkey.core.token and
produces a monkey.core.ast.Ast.

Expressions are parsed by precedence climbing: parse_expression(precedence) parses exactly one prefix production
selected by the current token, then keeps folding infix operators and calls into the left operand for as long as the
peeked token binds tighter than precedence. Operators bind, from loosest to tightest, as follows:

```
LOWEST < EQUALS (== !=) < LESSGREATER (< >) < SUM (+ -) < PRODUCT (* /) < PREFIX (-x !x) < CALL (f(x))
```

Parsing is best-effort: a statement that fails to parse records a ParseError in Parser.errors and parsing resumes at
the next statement, so a single pass reports every malformed statement. Callers must not evaluate an Ast whose parse
produced errors.
"""

import logging
from enum import IntEnum

from monkey.core import ast
from monkey.core.token import Token, TokenKind, Tokenizer
from monkey.lang.error import GenericException

logger = logging.getLogger(__name__)

INT_MAX = 2 ** 63 - 1  # integer literals must fit in a signed 64-bit integer


class Precedence(IntEnum):
    LOWEST = 1
    EQUALS = 2       # == or !=
    LESSGREATER = 3  # < or >
    SUM = 4          # + or -
    PRODUCT = 5      # * or /
    PREFIX = 6       # -x or !x
    CALL = 7         # my_function(x)


PRECEDENCES = {
    TokenKind.EQ: Precedence.EQUALS,
    TokenKind.NOT_EQ: Precedence.EQUALS,
    TokenKind.LT: Precedence.LESSGREATER,
    TokenKind.GT: Precedence.LESSGREATER,
    TokenKind.PLUS: Precedence.SUM,
    TokenKind.MINUS: Precedence.SUM,
    TokenKind.ASTERISK: Precedence.PRODUCT,
    TokenKind.SLASH: Precedence.PRODUCT,
    TokenKind.LPAREN: Precedence.CALL,
}

OPERATORS = {
    TokenKind.BANG: ast.Operator.BANG,
    TokenKind.PLUS: ast.Operator.PLUS,
    TokenKind.MINUS: ast.Operator.MINUS,
    TokenKind.ASTERISK: ast.Operator.MULT,
    TokenKind.SLASH: ast.Operator.DIV,
    TokenKind.GT: ast.Operator.GT,
    TokenKind.LT: ast.Operator.LT,
    TokenKind.EQ: ast.Operator.EQ,
    TokenKind.NOT_EQ: ast.Operator.NOT_EQ,
}


def precedence_of(token):
    return PRECEDENCES.get(token.kind, Precedence.LOWEST)


# ------------------------------------------------------------------------------------------------------------------- #
# Errors

class ParseError(GenericException):
    """Superclass of all syntax errors. received is the offending token; two ParseErrors are equal if they are of the
    same type and were raised for the same tokens.
    """

    def __init__(self, msg, received, *exprs):
        super().__init__(msg, [str(received), *(str(expr) for expr in exprs)])
        self.received = received

    def _key(self):
        return (self.received,)

    def locate(self, source, first_line=1):
        """Points this error at the line of source that contains the offending token. first_line is the line number of
        the first line of source.
        """
        pos = max(self.received.pos, 0)
        line_start = source.rfind("\n", 0, pos) + 1
        line_end = source.find("\n", pos)
        if line_end == -1:
            line_end = len(source)

        self.expr = source[line_start:line_end]
        self.start = min(pos - line_start, len(self.expr))
        self.end = self.start + max(len(self.received.literal), 1)
        self.line_num = first_line + source.count("\n", 0, line_start)
        return self

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__, self._key()))

    def __repr__(self):
        return f"{type(self).__name__}({', '.join(repr(field) for field in self._key())})"


class UnexpectedToken(ParseError):

    def __init__(self, expected, received):
        super().__init__("expected next token to be '{1}', got '{0}' instead", received, expected)
        self.expected = expected

    def _key(self):
        return self.expected, self.received


class ExpectedIdentifier(ParseError):

    def __init__(self, received):
        super().__init__("expected identifier, got '{}' instead", received)


class ExpectedExpression(ParseError):

    def __init__(self, received):
        super().__init__("expected expression, got '{}' instead", received)


class IntegerParseError(ParseError):

    def __init__(self, received):
        super().__init__("could not parse '{}' as a 64-bit integer", received)


class UnrecognizedOperator(ParseError):

    def __init__(self, received):
        super().__init__("'{}' is not a recognized operator", received)


# ------------------------------------------------------------------------------------------------------------------- #
# Parser

class Parser:
    """Parses a monkey program. Holds the tokenizer plus two tokens of look-ahead (current, peek)."""

    def __init__(self, source):
        self.tokenizer = Tokenizer(source)
        self.errors = []

        self.current = None
        self.peek = self.tokenizer.next_token()
        self.step()

    def step(self):
        """Advances current <- peek, peek <- next token."""
        self.current = self.peek
        self.peek = self.tokenizer.next_token()

    def expect_next(self, kind):
        """Steps if the peeked token is of the given kind, else raises UnexpectedToken."""
        if not self.peek.is_(kind):
            raise UnexpectedToken(Token(kind), self.peek)
        self.step()

    def expect_ident(self):
        """Steps if the peeked token is an identifier, else raises ExpectedIdentifier."""
        if not self.peek.is_(TokenKind.IDENT):
            raise ExpectedIdentifier(self.peek)
        self.step()

    # --------------------------------------------------------------------------------------------------------------- #
    # Statements

    def parse(self):
        """Parses statements until EOF. Errors are accumulated in self.errors."""
        statements = self._parse_statements(block=False)
        logger.debug("parsed %d statement(s) with %d error(s)", len(statements), len(self.errors))
        return ast.Ast(tuple(statements))

    def _parse_statements(self, block):
        """Parses statements starting at self.current. Top-level parsing ends at EOF; block parsing ends with
        self.current on the closing brace.
        """
        statements = []
        while not self.current.is_(TokenKind.EOF) and not (block and self.current.is_(TokenKind.RBRACE)):
            try:
                statements.append(self.parse_statement())
            except ParseError as error:
                self.errors.append(error)
                if self._synchronize(block):
                    continue
            self.step()

        if block and self.current.is_(TokenKind.EOF):
            self.errors.append(UnexpectedToken(Token(TokenKind.RBRACE), self.current))
        return statements

    def _synchronize(self, block):
        """Skips the rest of a malformed statement: up to its ';', or up to the '}' or EOF that ends the enclosing
        block. Braces opened inside the statement are skipped as a whole. Returns True if self.current is left on the
        brace closing the enclosing block, which must not be stepped over.
        """
        depth = 0
        while not self.current.is_(TokenKind.EOF):
            if self.current.is_(TokenKind.LBRACE):
                depth += 1
            elif self.current.is_(TokenKind.RBRACE):
                if block and not depth:
                    return True
                depth = max(depth - 1, 0)

            if not depth and (self.current.is_(TokenKind.SEMICOLON) or
                              self.peek.is_(TokenKind.RBRACE) or self.peek.is_(TokenKind.EOF)):
                return False
            self.step()
        return False

    def parse_statement(self):
        """Dispatches on the leading token. Leaves self.current on the last token of the statement."""
        if self.current.is_(TokenKind.LET):
            statement = self.parse_let_statement()
        elif self.current.is_(TokenKind.RETURN):
            self.step()
            statement = ast.Return(self.parse_expression(Precedence.LOWEST))
        else:
            statement = ast.Expression(self.parse_expression(Precedence.LOWEST))

        if self.peek.is_(TokenKind.SEMICOLON):
            self.step()
        return statement

    def parse_let_statement(self):
        self.expect_ident()
        name = self.current.literal

        self.expect_next(TokenKind.ASSIGN)
        self.step()

        return ast.Let(name, self.parse_expression(Precedence.LOWEST))

    def parse_block(self):
        """Parses a { ... } block. Expects self.current to be the opening brace."""
        self.step()
        return ast.Ast(tuple(self._parse_statements(block=True)))

    # --------------------------------------------------------------------------------------------------------------- #
    # Expressions

    def parse_expression(self, precedence):
        expression = self.parse_prefix()

        while not self.current.is_(TokenKind.SEMICOLON) and precedence < precedence_of(self.peek):
            self.step()
            if self.current.is_(TokenKind.LPAREN):
                expression = ast.Call(expression, self.parse_call_arguments())
            else:
                expression = self.parse_infix(expression)

        return expression

    def parse_prefix(self):
        """Parses the single primary/prefix production selected by self.current."""
        token = self.current
        kind = token.kind

        if kind is TokenKind.IDENT:
            return ast.Ident(token.literal)
        if kind is TokenKind.INT:
            digits = token.literal.lstrip("0") or "0"  # int() refuses very long digit strings
            if len(digits) > len(str(INT_MAX)) or int(digits) > INT_MAX:
                raise IntegerParseError(token)
            return ast.IntLiteral(int(digits))
        if kind in (TokenKind.TRUE, TokenKind.FALSE):
            return ast.BooleanLiteral(kind is TokenKind.TRUE)
        if kind in (TokenKind.BANG, TokenKind.MINUS):
            operator = self.parse_operator()
            self.step()
            return ast.Prefix(operator, self.parse_expression(Precedence.PREFIX))
        if kind is TokenKind.LPAREN:
            return self.parse_grouped()
        if kind is TokenKind.IF:
            return self.parse_if()
        if kind is TokenKind.FUNCTION:
            return self.parse_func_literal()

        raise ExpectedExpression(token)

    def parse_operator(self):
        # unreachable from source text: every kind in PRECEDENCES also has an entry in OPERATORS
        try:
            return OPERATORS[self.current.kind]
        except KeyError:
            raise UnrecognizedOperator(self.current)

    def parse_infix(self, left):
        """Parses the right-hand operand at the operator's own precedence, making binary operators left-associative."""
        operator = self.parse_operator()
        precedence = precedence_of(self.current)

        self.step()
        return ast.Infix(left, operator, self.parse_expression(precedence))

    def parse_grouped(self):
        self.step()
        expression = self.parse_expression(Precedence.LOWEST)
        self.expect_next(TokenKind.RPAREN)
        return expression

    def parse_if(self):
        self.expect_next(TokenKind.LPAREN)
        self.step()
        condition = self.parse_expression(Precedence.LOWEST)

        self.expect_next(TokenKind.RPAREN)
        self.expect_next(TokenKind.LBRACE)
        consequence = self.parse_block()

        alternative = None
        if self.peek.is_(TokenKind.ELSE):
            self.step()
            self.expect_next(TokenKind.LBRACE)
            alternative = self.parse_block()

        return ast.If(condition, consequence, alternative)

    def parse_func_literal(self):
        self.expect_next(TokenKind.LPAREN)
        params = self.parse_params()

        self.expect_next(TokenKind.LBRACE)
        return ast.FuncLiteral(params, self.parse_block())

    def parse_params(self):
        """Parses a comma-separated, possibly empty, identifier list. Leaves self.current on the closing paren."""
        params = []
        if self.peek.is_(TokenKind.RPAREN):
            self.step()
            return tuple(params)

        self.expect_ident()
        params.append(self.current.literal)
        while self.peek.is_(TokenKind.COMMA):
            self.step()
            self.expect_ident()
            params.append(self.current.literal)

        self.expect_next(TokenKind.RPAREN)
        return tuple(params)

    def parse_call_arguments(self):
        """Parses comma-separated argument expressions. Expects self.current to be the opening paren and leaves it on
        the closing one.
        """
        args = []
        if self.peek.is_(TokenKind.RPAREN):
            self.step()
            return tuple(args)

        self.step()
        args.append(self.parse_expression(Precedence.LOWEST))
        while self.peek.is_(TokenKind.COMMA):
            self.step()
            self.step()
            args.append(self.parse_expression(Precedence.LOWEST))

        self.expect_next(TokenKind.RPAREN)
        return tuple(args)


def parse(source):
    """Parses source. Returns (Ast, errors)."""
    parser = Parser(source)
    program = parser.parse()
    return program, parser.errors

"""Lexical analysis for the monkey language. Converts raw source text into a lazy stream of Tokens.

Formally, the lexical grammar can be defined as

```
<token> ::= <ident>                          ; maximal run of ASCII letters/underscores
                                             ; - checked against the keyword table (let, fn, if, else, ...)
          | <int>                            ; maximal run of ASCII digits (numeric parsing is left to the parser)
          | "==" | "!=" | "=" | "!"          ; one byte of look-ahead disambiguates the two-character operators
          | "+" | "-" | "*" | "/" | "<" | ">"
          | "," | ";" | "(" | ")" | "{" | "}"
```

Whitespace between tokens is skipped. Anything else is returned as an ILLEGAL token: the tokenizer never fails, and
unscannable input is left for the parser to reject.
"""

from enum import Enum


class TokenKind(Enum):
    """Every kind of token in the monkey language. The value of fixed kinds is their source text."""
    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    IDENT = "IDENT"
    INT = "INT"

    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    BANG = "!"
    ASTERISK = "*"
    SLASH = "/"
    LT = "<"
    GT = ">"
    EQ = "=="
    NOT_EQ = "!="

    COMMA = ","
    SEMICOLON = ";"
    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"

    LET = "let"
    FUNCTION = "fn"
    IF = "if"
    ELSE = "else"
    RETURN = "return"
    TRUE = "true"
    FALSE = "false"


KEYWORDS = {kind.value: kind for kind in (
    TokenKind.LET, TokenKind.FUNCTION, TokenKind.IF, TokenKind.ELSE, TokenKind.RETURN, TokenKind.TRUE, TokenKind.FALSE
)}

PUNCTUATION = {kind.value: kind for kind in (
    TokenKind.PLUS, TokenKind.MINUS, TokenKind.ASTERISK, TokenKind.SLASH, TokenKind.LT, TokenKind.GT,
    TokenKind.COMMA, TokenKind.SEMICOLON, TokenKind.LPAREN, TokenKind.RPAREN, TokenKind.LBRACE, TokenKind.RBRACE
)}

WHITESPACE = " \t\n\r\x0b\x0c"


def is_letter(char):
    return ("a" <= char <= "z") or ("A" <= char <= "Z") or char == "_"


def is_digit(char):
    return "0" <= char <= "9"


class Token:
    """A classified lexical unit. pos is the offset of the token in its source and is only used for error messages, so
    two tokens are equal if their kind and literal match.
    """
    __slots__ = ("kind", "literal", "pos")

    def __init__(self, kind, literal=None, pos=-1):
        if literal is None:
            literal = "" if kind is TokenKind.EOF else kind.value
        self.kind = kind
        self.literal = literal
        self.pos = pos

    def is_(self, kind):
        """Whether or not this token is of the given kind."""
        return self.kind is kind

    def __eq__(self, other):
        return isinstance(other, Token) and self.kind is other.kind and self.literal == other.literal

    def __hash__(self):
        return hash((self.kind, self.literal))

    def __repr__(self):
        if self.kind in (TokenKind.IDENT, TokenKind.INT, TokenKind.ILLEGAL):
            return f"{self.kind.name}({self.literal!r})"
        return self.kind.name

    def __str__(self):
        return self.literal if self.kind is not TokenKind.EOF else "<EOF>"


class Tokenizer:
    """Scans a source string into Tokens. Iterating over a Tokenizer yields every token up to and including a single EOF
    token and then stops; build a new Tokenizer to scan the same source again.
    """

    def __init__(self, source):
        self.source = source
        self.position = 0  # index of self.char
        self.char = ""     # current character, "" once the end of source is reached
        self._done = False

        self._read_char(start=True)

    def _read_char(self, start=False):
        """Moves the cursor one character forward."""
        if not start:
            self.position += 1
        self.char = self.source[self.position] if self.position < len(self.source) else ""

    def _peek_char(self):
        """Returns the character after the cursor without consuming it."""
        nxt = self.position + 1
        return self.source[nxt] if nxt < len(self.source) else ""

    def _skip_whitespace(self):
        while self.char and self.char in WHITESPACE:
            self._read_char()

    def _read_while(self, predicate):
        start = self.position
        while self.char and predicate(self.char):
            self._read_char()
        return self.source[start:self.position]

    def next_token(self):
        """Scans and returns the next token. Once the source is exhausted, EOF is returned on every call."""
        self._skip_whitespace()
        pos = self.position

        if not self.char:
            return Token(TokenKind.EOF, pos=pos)

        if is_letter(self.char):
            literal = self._read_while(is_letter)
            kind = KEYWORDS.get(literal, TokenKind.IDENT)
            return Token(kind, literal, pos)

        if is_digit(self.char):
            return Token(TokenKind.INT, self._read_while(is_digit), pos)

        if self.char in "=!":
            if self._peek_char() == "=":
                literal = self.char + "="
                self._read_char()
            else:
                literal = self.char
            kind = {"=": TokenKind.ASSIGN, "!": TokenKind.BANG, "==": TokenKind.EQ, "!=": TokenKind.NOT_EQ}[literal]
            token = Token(kind, literal, pos)
        else:
            token = Token(PUNCTUATION.get(self.char, TokenKind.ILLEGAL), self.char, pos)

        self._read_char()
        return token

    def __iter__(self):
        return self

    def __next__(self):
        if self._done:
            raise StopIteration
        token = self.next_token()
        if token.is_(TokenKind.EOF):
            self._done = True
        return token


def tokenize(source):
    """Returns the list of all tokens in source, ending with EOF."""
    return list(Tokenizer(source))

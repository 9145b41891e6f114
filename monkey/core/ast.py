"""Abstract syntax tree for the monkey language, produced by monkey.core.parser and consumed by monkey.core.evaluator.

Formally, the tree mirrors the grammar

```
<program>   ::= <statement>*
<statement> ::= "let" <ident> "=" <expr> ";"?        ; Let
              | "return" <expr> ";"?                 ; Return
              | <expr> ";"?                          ; Expression
<expr>      ::= <ident> | <int> | "true" | "false"
              | ("!" | "-") <expr>                   ; Prefix
              | <expr> <operator> <expr>             ; Infix
              | "(" <expr> ")"
              | "if" "(" <expr> ")" <block> ("else" <block>)?
              | "fn" "(" (<ident> ("," <ident>)*)? ")" <block>
              | <expr> "(" (<expr> ("," <expr>)*)? ")" ; Call
<block>     ::= "{" <statement>* "}"
```

Nodes are frozen: once the parser builds a tree, nothing mutates it. Function bodies in particular are shared, not
copied, between a FuncLiteral and every Function object created from it.

str(node) is the canonical rendering, in which every prefix/infix node is wrapped in parentheses, so that operator
precedence can be checked from text alone, e.g. str(parse("-a * b")) == "((-a) * b)".
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Tuple


class Operator(Enum):
    """Closed set of prefix/infix operators. Values are the operators' source symbols."""
    BANG = "!"
    PLUS = "+"
    MINUS = "-"
    MULT = "*"
    DIV = "/"
    GT = ">"
    LT = "<"
    EQ = "=="
    NOT_EQ = "!="

    def __str__(self):
        return self.value


class Node:
    """Superclass of every AST node."""

    def display(self, indents=0):
        """Recursively displays the tree rooted at this node in a readable format.

        Format:
        <Node>(<field>=<value>, ...)        # <-- leaf fields are shown inline
        <Node>(<field>=[
            <Node>(...),                    # <-- child nodes are shown one per line
        ])
        """
        pad = "    " * indents
        parts = []
        for field in fields(self):
            value = getattr(self, field.name)
            if isinstance(value, Node):
                children = [value]
            elif isinstance(value, tuple) and value and all(isinstance(item, Node) for item in value):
                children = list(value)
            else:
                parts.append(f"{field.name}={_display_leaf(value)}")
                continue

            nested = ",\n".join(child.display(indents + 1) for child in children)
            parts.append(f"{field.name}=[\n{nested}\n{pad}]")

        return f"{pad}{type(self).__name__}({', '.join(parts)})"


def _display_leaf(value):
    if isinstance(value, Enum):
        return repr(value.value)
    return repr(value)


# ------------------------------------------------------------------------------------------------------------------- #
# Expressions

@dataclass(frozen=True)
class Expr(Node):
    """Superclass of every expression node."""


@dataclass(frozen=True)
class Ident(Expr):
    name: str

    def __str__(self):
        return self.name


@dataclass(frozen=True)
class IntLiteral(Expr):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class BooleanLiteral(Expr):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Prefix(Expr):
    operator: Operator
    operand: Expr

    def __str__(self):
        return f"({self.operator}{self.operand})"


@dataclass(frozen=True)
class Infix(Expr):
    left: Expr
    operator: Operator
    right: Expr

    def __str__(self):
        return f"({self.left} {self.operator} {self.right})"


@dataclass(frozen=True)
class If(Expr):
    condition: Expr
    consequence: "Ast"
    alternative: Optional["Ast"] = None

    def __str__(self):
        result = f"if{self.condition} {self.consequence}"
        if self.alternative is not None:
            result += f"else {self.alternative}"
        return result


@dataclass(frozen=True)
class FuncLiteral(Expr):
    params: Tuple[str, ...]
    body: "Ast"

    def __str__(self):
        return f"fn({', '.join(self.params)}) {self.body}"


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    args: Tuple[Expr, ...]

    def __str__(self):
        return f"{self.callee}({', '.join(str(arg) for arg in self.args)})"


# ------------------------------------------------------------------------------------------------------------------- #
# Statements

@dataclass(frozen=True)
class Stmt(Node):
    """Superclass of every statement node."""


@dataclass(frozen=True)
class Let(Stmt):
    name: str
    value: Expr

    def __str__(self):
        return f"let {self.name} = {self.value};"


@dataclass(frozen=True)
class Return(Stmt):
    value: Expr

    def __str__(self):
        return f"return {self.value};"


@dataclass(frozen=True)
class Expression(Stmt):
    expr: Expr

    def __str__(self):
        return str(self.expr)


# ------------------------------------------------------------------------------------------------------------------- #
# Programs and blocks

@dataclass(frozen=True)
class Ast(Node):
    """An ordered sequence of statements: a whole program, or the contents of a { ... } block."""
    statements: Tuple[Stmt, ...] = ()

    def __iter__(self):
        return iter(self.statements)

    def __len__(self):
        return len(self.statements)

    def __getitem__(self, idx):
        return self.statements[idx]

    def __str__(self):
        return "".join(str(stmt) for stmt in self.statements)

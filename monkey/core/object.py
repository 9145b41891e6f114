"""Runtime values and lexical environments for the monkey evaluator.

ReturnValue and Error are control-flow sentinels: the evaluator stops reducing a block as soon as a statement produces
one and hands it upward unchanged. A ReturnValue is unwrapped by the nearest enclosing call (or by the program itself)
and is never observable outside evaluation; an Error that is never unwrapped becomes the result of the whole program.
"""

from dataclasses import dataclass
from typing import Tuple

from monkey.core.ast import Ast

INT_MIN = -2 ** 63
INT_MAX = 2 ** 63 - 1


class Object:
    """Superclass of every runtime value. str() is the value's display form."""


@dataclass(frozen=True)
class Integer(Object):
    value: int

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Boolean(Object):
    value: bool

    def __str__(self):
        return "true" if self.value else "false"


@dataclass(frozen=True)
class NullType(Object):

    def __str__(self):
        return "null"


@dataclass(frozen=True)
class ReturnValue(Object):
    value: Object

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Error(Object):
    message: str

    def __str__(self):
        return self.message


@dataclass(frozen=True, eq=False)
class Function(Object):
    """A function value: its parameters, its body (the very subtree of the FuncLiteral that created it), and the
    environment that was active where it was defined. Functions compare by identity.
    """
    params: Tuple[str, ...]
    body: Ast
    env: "Environment"

    def __str__(self):
        return f"fn({', '.join(self.params)}) {{{self.body}}}"


NULL = NullType()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value):
    return TRUE if value else FALSE


def is_truthy(obj):
    """Only null and false are falsy. Every other value, 0 included, is truthy."""
    if isinstance(obj, NullType):
        return False
    if isinstance(obj, Boolean):
        return obj.value
    return True


def is_sentinel(obj):
    """Whether or not obj short-circuits the evaluation of the enclosing block."""
    return isinstance(obj, (ReturnValue, Error))


class Environment:
    """A lexical scope: name -> Object bindings plus an optional parent scope.

    Environments are shared by reference: every Function defined in a scope and every call frame created from such a
    Function point at the same parent. Lookups walk from this frame out to the root and stop at the first frame that
    binds the name; writes only ever touch this frame, never an ancestor.
    """

    def __init__(self, parent=None):
        self.store = {}
        self.parent = parent

    def get(self, name):
        """Returns the Object bound to name in the closest enclosing frame, or None if name is unbound."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.parent
        return None

    def set(self, name, value):
        """Binds name in this frame (last write wins) and returns value."""
        self.store[name] = value
        return value

    def child(self):
        """Returns a new, empty frame whose parent is this frame."""
        return Environment(self)

    def bindings(self):
        """Returns this frame's own bindings, without those of its ancestors."""
        return dict(self.store)

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        depth = 0
        env = self.parent
        while env is not None:
            depth += 1
            env = env.parent
        return f"Environment(names={sorted(self.store)}, depth={depth})"

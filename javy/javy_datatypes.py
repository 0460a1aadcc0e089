"""
Defines the core runtime types for the Javy interpreter.

This module provides the error taxonomy, variable cells, methods, lexical
scopes and the environment that tracks which scope is currently active.
"""

import itertools
import os
import sys
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Tuple, TYPE_CHECKING

from javy.javy_tokens import SourceLocation

if TYPE_CHECKING:
    from javy.javy_parser import Block


def debug_enabled() -> bool:
    return bool(os.environ.get("JAVY_DEBUG"))


def dbg(*parts):
    """Prints a debug trace line to stderr when JAVY_DEBUG is set."""
    if debug_enabled():
        print("[DBG]", *parts, file=sys.stderr)


# =================================================================
# Errors
# =================================================================

class JavyError(Exception):
    """Base class for every fatal Javy error. Renders as `[line:column] message`."""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        self.message = message
        self.location = location
        super().__init__(f"{location} {message}" if location is not None else message)


class ScriptSyntaxError(JavyError, SyntaxError):
    """A required continuation token is missing or of the wrong kind."""


class ScriptNameError(JavyError, NameError):
    pass


class UndefinedNameError(ScriptNameError):
    """Reference to a variable or method that no enclosing scope declares."""


class DuplicateNameError(ScriptNameError):
    """Redeclaration of a name already bound in the same scope."""


class ScriptTypeError(JavyError, TypeError):
    pass


class ConditionTypeError(ScriptTypeError):
    """An `if` or `while` condition did not evaluate to a boolean."""


class InvalidOperationError(ScriptTypeError):
    """An operator was applied to an unsupported combination of operands."""


class StructuralError(JavyError, RuntimeError):
    """The scope stack was unwound past the root scope."""


class IterationLimitError(JavyError, RuntimeError):
    """A `while` loop ran past the configured iteration cap."""


# =================================================================
# Bindings
# =================================================================

_variable_ordinals = itertools.count()
_scope_ordinals = itertools.count()


class Variable:
    """A mutable value cell. Variables order by creation."""
    def __init__(self, name: str, value=None, ordinal: Optional[int] = None):
        self.name = name
        self.value = value
        self.ordinal = next(_variable_ordinals) if ordinal is None else ordinal

    def set(self, value):
        self.value = value

    def copy(self) -> 'Variable':
        return Variable(self.name, self.value, self.ordinal)

    def __lt__(self, other: 'Variable') -> bool:
        return self.ordinal < other.ordinal

    def __repr__(self) -> str:
        return f"Variable(name={self.name!r}, value={self.value!r})"


class Method:
    """A named, parameterised block.

    `scope` is the template body scope; its parent is the scope the method
    was declared in, which makes the method a closure over that scope.
    """
    def __init__(self, name: str, parameters: Tuple[str, ...], body: 'Block', scope: 'Scope'):
        self.name = name
        self.parameters = tuple(parameters)
        self.body = body
        self.scope = scope

    def __repr__(self) -> str:
        params = ' '.join(self.parameters)
        return f"<Method {self.name}({params}) statements={len(self.body)} scope=#{self.scope.ordinal}>"


class Scope:
    """A node in the lexical-scope tree.

    Holds the variables and methods declared in one block. Lookups walk the
    parent chain; declarations only ever touch this scope.
    """
    def __init__(self, parent: Optional['Scope'] = None):
        self.parent = parent
        self.variables: Dict[str, Variable] = {}
        self.methods: Dict[str, Method] = {}
        self.ordinal = next(_scope_ordinals)

    def declare_variable(self, name: str, value=None, location: Optional[SourceLocation] = None) -> Variable:
        self._ensure_unbound(name, location)
        variable = Variable(name, value)
        self.variables[name] = variable
        return variable

    def declare_method(self, method: Method, location: Optional[SourceLocation] = None) -> Method:
        self._ensure_unbound(method.name, location)
        self.methods[method.name] = method
        return method

    def _ensure_unbound(self, name: str, location: Optional[SourceLocation]):
        if name in self.variables:
            raise DuplicateNameError(f"Variable {name} already exists in its scope", location)
        if name in self.methods:
            raise DuplicateNameError(f"Method {name} already exists in its scope", location)

    def find_owner(self, name: str, table: str = "variables") -> Optional['Scope']:
        """Finds the nearest scope in the chain (self → parent → ...) binding `name`."""
        scope = self
        while scope is not None:
            if name in getattr(scope, table):
                return scope
            scope = scope.parent
        return None

    def resolve_variable(self, name: str) -> Optional[Variable]:
        owner = self.find_owner(name, "variables")
        return owner.variables[name] if owner else None

    def resolve_method(self, name: str) -> Optional[Method]:
        owner = self.find_owner(name, "methods")
        return owner.methods[name] if owner else None

    def copy(self) -> 'Scope':
        """Structural copy: same parent and ordinal, independent variable cells."""
        scope = Scope(self.parent)
        scope.ordinal = self.ordinal
        scope.variables = {name: variable.copy() for name, variable in self.variables.items()}
        scope.methods = dict(self.methods)
        return scope

    def snapshot(self) -> Dict[str, Any]:
        """Values of this scope's own variables, in declaration order."""
        return {v.name: v.value for v in sorted(self.variables.values())}

    def __contains__(self, name: str) -> bool:
        return self.resolve_variable(name) is not None

    def __repr__(self) -> str:
        names = ', '.join(list(self.variables) + [f"{m}()" for m in self.methods])
        parent_id = f", parent=#{self.parent.ordinal}" if self.parent else ""
        return f"<Scope #{self.ordinal} bindings=[{names}]{parent_id}>"


class Environment:
    """Owns the root scope and tracks the currently active scope."""
    def __init__(self, root: Optional[Scope] = None):
        self.root = root if root is not None else Scope()
        self.current = self.root

    def begin_scope(self) -> Scope:
        """Creates a child of the current scope and makes it current."""
        self.current = Scope(self.current)
        return self.current

    def end_scope(self, location: Optional[SourceLocation] = None) -> Scope:
        """Restores the parent of the current scope; returns the scope that ended."""
        ended = self.current
        if ended.parent is None:
            raise StructuralError("Cannot end scope when current scope is global", location)
        self.current = ended.parent
        return ended

    @contextmanager
    def activate(self, scope: Scope) -> Iterator[Scope]:
        """Makes `scope` current for the duration of the block."""
        previous = self.current
        self.current = scope
        try:
            yield scope
        finally:
            self.current = previous

"""
A pretty-printer for Javy values and expression trees.
"""
import collections.abc

from javy.javy_datatypes import Method, Scope, Variable
from javy.javy_expressions import Binary, Identifier, Literal, Logical, Unary, to_text


class Printer:
    """Formats Javy objects into readable Javy source text."""

    def __init__(self, indent_width=2):
        self._indent_char = " " * indent_width
        self._handlers = self._create_handlers()

    def pformat(self, obj, level=0):
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj, level)

    def _get_handler(self, obj):
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        if isinstance(obj, collections.abc.Mapping):
            return self._pformat_bindings
        # Default to Python's repr for unknown types
        return lambda o, l: repr(o)

    def _create_handlers(self):
        return {
            str: self._pformat_str,
            int: self._pformat_primitive,
            float: self._pformat_primitive,
            bool: self._pformat_primitive,
            type(None): self._pformat_primitive,
            Variable: self._pformat_variable,
            Method: self._pformat_method,
            Scope: self._pformat_scope,
            Literal: self._pformat_literal,
            Identifier: self._pformat_identifier,
            Unary: self._pformat_unary,
            Binary: self._pformat_infix,
            Logical: self._pformat_infix,
        }

    def _pformat_primitive(self, obj, level):
        return to_text(obj)

    def _pformat_str(self, obj, level):
        # Javy strings have no escapes, so the text is emitted verbatim
        return f'"{obj}"'

    def _pformat_variable(self, obj, level):
        return f"var {obj.name} = {self.pformat(obj.value, level)};"

    def _pformat_method(self, obj, level):
        params = " ".join(obj.parameters)
        return f"var {obj.name}({params}) {{ ... }}"

    def _pformat_bindings(self, obj, level):
        indent = self._indent_char * level
        lines = [f"{indent}var {name} = {self.pformat(value, level)};" for name, value in obj.items()]
        return "\n".join(lines)

    def _pformat_scope(self, obj, level):
        inner = level + 1
        indent = self._indent_char * inner
        lines = [indent + self._pformat_variable(v, inner) for v in sorted(obj.variables.values())]
        lines += [indent + self._pformat_method(m, inner) for m in obj.methods.values()]
        if not lines:
            return "{}"
        return "{\n" + "\n".join(lines) + "\n" + self._indent_char * level + "}"

    # Expression trees

    def _pformat_literal(self, obj, level):
        return self.pformat(obj.value, level)

    def _pformat_identifier(self, obj, level):
        return obj.name

    def _pformat_unary(self, obj, level):
        return f"{obj.operator.lexeme}{self._pformat_operand(obj.operand, level)}"

    def _pformat_infix(self, obj, level):
        left = self._pformat_operand(obj.left, level)
        right = self._pformat_operand(obj.right, level)
        return f"{left} {obj.operator.lexeme} {right}"

    def _pformat_operand(self, obj, level):
        text = self.pformat(obj, level)
        if isinstance(obj, (Binary, Logical)):
            return f"({text})"
        return text

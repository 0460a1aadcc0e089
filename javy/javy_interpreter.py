"""
The Javy statement interpreter.
"""
import os
from typing import Any, Dict, Optional

from javy.javy_tokens import Lexicon
from javy.javy_datatypes import (
    Environment, Method, Scope,
    ConditionTypeError, IterationLimitError, UndefinedNameError, dbg, debug_enabled,
)
from javy.javy_expressions import evaluate
from javy.javy_lexer import Lexer
from javy.javy_parser import (
    Assignment, Block, Call, If, MethodDeclaration, Statement, StatementParser, VarDeclaration, While,
)
from javy.javy_printer import Printer

DEFAULT_MAX_LOOP_ITERS = 100000


def _max_loop_iters() -> int:
    raw = os.environ.get("JAVY_MAX_LOOP_ITERS")
    if raw is None:
        return DEFAULT_MAX_LOOP_ITERS
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"JAVY_MAX_LOOP_ITERS must be an integer, got {raw!r}") from None


class Interpreter:
    """Runs a Javy program.

    Construction lexes, parses and executes `source` to completion; any
    failure raises and no partially executed interpreter is returned. The
    resulting state is read back through `root_scope`, `get` and `bindings`.
    """

    def __init__(self, source: str, environment: Optional[Environment] = None,
                 lexicon: Optional[Lexicon] = None):
        self.source = source
        self.environment = environment if environment is not None else Environment()

        lexer = Lexer(source, lexicon)
        tokens = lexer.tokenize()
        for binding in tokens:
            dbg("token", binding)
        self.program: Block = StatementParser(tokens, lexer.location, lexicon).parse()

        self.execute_block(self.program)

    @property
    def root_scope(self) -> Scope:
        return self.environment.root

    def get(self, name: str) -> Any:
        """Returns the value bound to `name` in the root scope."""
        variable = self.root_scope.resolve_variable(name)
        if variable is None:
            raise UndefinedNameError(f"No variable with name {name}")
        return variable.value

    def bindings(self) -> Dict[str, Any]:
        """Root variables and their values, in declaration order."""
        return self.root_scope.snapshot()

    # -----------------------------------------------------------------
    # Execution
    # -----------------------------------------------------------------

    def execute_block(self, block: Block):
        for statement in block:
            self.execute(statement)

    def execute(self, statement: Statement):
        scope = self.environment.current
        dbg("exec", type(statement).__name__, "in scope", f"#{scope.ordinal}")
        match statement:
            case VarDeclaration(name=name, initializer=initializer):
                value = evaluate(initializer, scope) if initializer is not None else None
                scope.declare_variable(name.value, value, name.location)
            case MethodDeclaration(name=name, parameters=parameters, body=body):
                self._declare_method(scope, name, parameters, body)
            case Assignment(name=name, value=value):
                variable = scope.resolve_variable(name.value)
                if variable is None:
                    raise UndefinedNameError(f"No variable with name {name.value}", name.location)
                variable.set(evaluate(value, scope))
            case Call(name=name, arguments=arguments):
                self._call(scope, name, arguments)
            case If(condition=condition, body=body):
                # A taken branch runs in the enclosing scope.
                if self._condition(statement, scope):
                    self.execute_block(body)
            case While():
                self._while(statement, scope)
            case _:
                raise TypeError(f"not a statement node: {statement!r}")

    def _declare_method(self, scope: Scope, name, parameters, body: Block):
        template = self.environment.begin_scope()
        try:
            scope.declare_method(Method(name.value, parameters, body, template), name.location)
        finally:
            self.environment.end_scope(name.location)

    def _call(self, scope: Scope, name, arguments):
        method = scope.resolve_method(name.value)
        if method is None:
            raise UndefinedNameError(f"No method with name {name.value}", name.location)
        # Arguments are evaluated for their errors only; parameters are never bound.
        for argument in arguments:
            evaluate(argument, scope)
        with self.environment.activate(method.scope.copy()):
            self.execute_block(method.body)

    def _condition(self, statement, scope: Scope) -> bool:
        value = evaluate(statement.condition, scope)
        match value:
            case bool():
                return value
        keyword = "If" if isinstance(statement, If) else "While"
        raise ConditionTypeError(f"{keyword} conditions must be true or false", statement.token.location)

    def _while(self, statement: While, scope: Scope):
        if not self._condition(statement, scope):
            return
        if debug_enabled():
            dbg("while", Printer().pformat(statement.condition))
        limit = _max_loop_iters()
        template = self.environment.begin_scope()
        try:
            iterations = 0
            while True:
                if iterations >= limit:
                    raise IterationLimitError(
                        f"while: iteration limit of {limit} exceeded", statement.token.location)
                with self.environment.activate(template.copy()):
                    self.execute_block(statement.body)
                iterations += 1
                if not self._condition(statement, scope):
                    break
        finally:
            self.environment.end_scope(statement.token.location)
        dbg("while", "finished after", iterations, "iterations")

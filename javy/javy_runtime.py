"""
Script execution: runs Javy source and reports the outcome as a structured result.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional

from javy.javy_tokens import SourceLocation
from javy.javy_datatypes import (
    Environment, JavyError,
    ScriptSyntaxError, ScriptNameError, InvalidOperationError, ScriptTypeError,
    StructuralError, IterationLimitError,
)
from javy.javy_interpreter import Interpreter


@dataclass
class ExecutionResult:
    """The structured result of a script execution."""
    status: Literal['success', 'error']
    bindings: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None
    error_location: Optional[SourceLocation] = None

    def format_error(self) -> str:
        if self.status != 'error':
            return ""
        return str(self.error_message or "Unknown error")


class ScriptRunner:
    """Lexes, parses and executes Javy code against a persistent root scope.

    Successive `handle_script` calls share the root scope, so a REPL can
    declare a variable on one line and use it on the next.
    """

    def __init__(self):
        self.environment = Environment()

    @property
    def root_scope(self):
        return self.environment.root

    def bindings(self) -> Dict[str, Any]:
        return self.root_scope.snapshot()

    def handle_script(self, source_code: str) -> ExecutionResult:
        """The main entry point to execute a script."""
        try:
            Interpreter(source_code, self.environment)
        except JavyError as e:
            return ExecutionResult(
                status='error',
                bindings=self.bindings(),
                error_message=self._format_error(e, source_code),
                error_location=e.location,
            )
        except RecursionError:
            return ExecutionResult(
                status='error',
                bindings=self.bindings(),
                error_message="RecursionError: maximum method call depth exceeded",
            )
        finally:
            # A failed run may leave a nested scope active
            self.environment.current = self.root_scope
        return ExecutionResult(status='success', bindings=self.bindings())

    def _format_error(self, e: JavyError, source: str) -> str:
        match e:
            case ScriptSyntaxError():
                kind = "SyntaxError"
            case ScriptNameError():
                kind = "NameError"
            case InvalidOperationError():
                kind = "InvalidOperationError"
            case ScriptTypeError():
                kind = "TypeError"
            case StructuralError():
                kind = "StructuralError"
            case IterationLimitError():
                kind = "IterationLimitError"
            case _:
                kind = type(e).__name__
        msg = f"{kind}: {e}"
        loc = e.location
        if loc is not None:
            context = self._source_context(source, loc.line, loc.column)
            if context:
                msg = f"{msg}\n{context}"
        return msg

    def _source_context(self, source: str, line: int, col: Optional[int], radius: int = 2) -> str:
        lines = source.splitlines()
        if not line or line < 1 or line > len(lines):
            return ""
        start = max(1, line - radius)
        end = min(len(lines), line + radius)
        width = len(str(end))
        out = []
        for i in range(start, end + 1):
            prefix = ">" if i == line else " "
            ln = str(i).rjust(width)
            content = lines[i - 1]
            out.append(f"{prefix} {ln} | {content}")
            if i == line and col is not None:
                caret = " " * max(col - 1, 0)
                out.append(f"  {' ' * width} | {caret}^")
        return "\n".join(out)

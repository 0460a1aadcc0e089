from javy.javy_tokens import Lexicon, Precedence, SourceLocation, TokenBinding, TokenKind
from javy.javy_datatypes import (
    Environment, Method, Scope, Variable,
    JavyError, ScriptSyntaxError, ScriptNameError, UndefinedNameError, DuplicateNameError,
    ScriptTypeError, ConditionTypeError, InvalidOperationError, StructuralError, IterationLimitError,
)
from javy.javy_lexer import Lexer, tokenize
from javy.javy_parser import parse_program
from javy.javy_interpreter import Interpreter
from javy.javy_runtime import ExecutionResult, ScriptRunner

"""
Builds the persistent Javy program tree from a token stream.

Expressions are parsed by precedence climbing; statements by plain
recursive descent. The tree is built once and executed as many times as
loops and method calls require.
"""
from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from javy.javy_tokens import Lexicon, Precedence, SourceLocation, TokenBinding, TokenKind
from javy.javy_datatypes import ScriptSyntaxError
from javy.javy_expressions import Binary, Expression, Identifier, Literal, Logical, Unary
from javy.javy_lexer import Lexer


# =================================================================
# Statement nodes
# =================================================================

@dataclass(frozen=True)
class VarDeclaration:
    name: TokenBinding
    initializer: Optional[Expression]


@dataclass(frozen=True)
class MethodDeclaration:
    name: TokenBinding
    parameters: Tuple[str, ...]
    body: 'Block'


@dataclass(frozen=True)
class Assignment:
    name: TokenBinding
    value: Expression


@dataclass(frozen=True)
class Call:
    name: TokenBinding
    arguments: Tuple[Expression, ...]


@dataclass(frozen=True)
class If:
    token: TokenBinding
    condition: Expression
    body: 'Block'


@dataclass(frozen=True)
class While:
    token: TokenBinding
    condition: Expression
    body: 'Block'


Statement = Union[VarDeclaration, MethodDeclaration, Assignment, Call, If, While]
Block = Tuple[Statement, ...]


# =================================================================
# Token stream
# =================================================================

class TokenStream:
    """The queue of not-yet-consumed token bindings. Each binding is consumed once."""

    def __init__(self, tokens: Iterable[TokenBinding], end: Optional[SourceLocation] = None):
        self._pending = deque(tokens)
        self.end = end or SourceLocation()

    def __len__(self) -> int:
        return len(self._pending)

    def at_end(self) -> bool:
        return not self._pending

    def peek(self) -> Optional[TokenBinding]:
        return self._pending[0] if self._pending else None

    def poll(self) -> Optional[TokenBinding]:
        return self._pending.popleft() if self._pending else None

    def match(self, *kinds: TokenKind) -> bool:
        nxt = self.peek()
        return nxt is not None and nxt.kind in kinds

    @property
    def location(self) -> SourceLocation:
        """Location of the next binding, or of the end of input."""
        nxt = self.peek()
        return nxt.location if nxt is not None else self.end

    def expect(self, kind: TokenKind, message: str) -> TokenBinding:
        if not self.match(kind):
            raise ScriptSyntaxError(message, self.location)
        return self.poll()


# =================================================================
# Expressions
# =================================================================

class ExpressionParser:
    """Precedence-climbing parser for a single expression."""

    def __init__(self, stream: TokenStream, lexicon: Optional[Lexicon] = None):
        self.stream = stream
        self.lexicon = lexicon or Lexicon.load()

    def parse(self) -> Expression:
        return self.parse_expression(Precedence.ASSIGNMENT)

    def parse_expression(self, minimum: Precedence) -> Expression:
        expr = self.parse_unary()
        while True:
            nxt = self.stream.peek()
            precedence = self.lexicon.infix_precedence(nxt.kind if nxt else None)
            if precedence <= minimum:
                return expr
            operator = self.stream.poll()
            right = self.parse_expression(precedence)
            if operator.kind in (TokenKind.AND, TokenKind.OR):
                expr = Logical(expr, operator, right)
            else:
                expr = Binary(expr, operator, right)

    def parse_unary(self) -> Expression:
        if self.stream.match(TokenKind.MINUS, TokenKind.BANG):
            operator = self.stream.poll()
            return Unary(operator, self.parse_unary())
        return self.parse_primary()

    def parse_primary(self) -> Expression:
        binding = self.stream.poll()
        if binding is None:
            raise ScriptSyntaxError("Expected expression.", self.stream.end)
        match binding.kind:
            case TokenKind.LEFT_PAREN:
                expr = self.parse()
                self.stream.expect(TokenKind.RIGHT_PAREN, ") is expected after a grouped expression")
                return expr
            case TokenKind.TRUE:
                return Literal(True)
            case TokenKind.FALSE:
                return Literal(False)
            case TokenKind.NULL:
                return Literal(None)
            case TokenKind.NUMBER | TokenKind.STRING:
                return Literal(binding.value)
            case TokenKind.IDENTIFIER:
                return Identifier(binding.value, binding)
        raise ScriptSyntaxError(f"Expected expression, found {binding.lexeme!r}", binding.location)


# =================================================================
# Statements
# =================================================================

class StatementParser:
    """Recursive-descent parser turning a token stream into a Block."""

    def __init__(self, tokens: Iterable[TokenBinding], end: Optional[SourceLocation] = None,
                 lexicon: Optional[Lexicon] = None):
        self.stream = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens, end)
        self.expressions = ExpressionParser(self.stream, lexicon)

    def parse(self) -> Block:
        """Parses the whole stream as a program."""
        statements: List[Statement] = []
        while not self.stream.at_end():
            statement = self.statement()
            if statement is not None:
                statements.append(statement)
        return tuple(statements)

    def block(self, opener: TokenBinding) -> Block:
        """Parses statements up to the `}` matching an already consumed `{`."""
        statements: List[Statement] = []
        while not self.stream.match(TokenKind.RIGHT_BRACE):
            if self.stream.at_end():
                raise ScriptSyntaxError(f"}} is expected to close the block opened at {opener.location}",
                                        self.stream.end)
            statement = self.statement()
            if statement is not None:
                statements.append(statement)
        self.stream.poll()
        return tuple(statements)

    def statement(self) -> Optional[Statement]:
        """Parses one statement; returns None for an empty statement."""
        binding = self.stream.poll()
        match binding.kind:
            case TokenKind.SEMICOLON:
                return None
            case TokenKind.VAR:
                return self._declaration()
            case TokenKind.IDENTIFIER:
                return self._identifier_statement(binding)
            case TokenKind.IF:
                condition = self.expressions.parse()
                opener = self.stream.expect(TokenKind.LEFT_BRACE, "{ is expected after an if condition")
                return If(binding, condition, self.block(opener))
            case TokenKind.WHILE:
                condition = self.expressions.parse()
                opener = self.stream.expect(TokenKind.LEFT_BRACE, "{ is expected after a while condition")
                return While(binding, condition, self.block(opener))
        raise ScriptSyntaxError(f"Unexpected token {binding.lexeme!r}", binding.location)

    def _end_statement(self):
        if self.stream.match(TokenKind.SEMICOLON):
            self.stream.poll()

    def _declaration(self) -> Statement:
        name = self.stream.expect(TokenKind.IDENTIFIER, "Variables must have an identifier")
        nxt = self.stream.poll()
        match nxt.kind if nxt else None:
            case TokenKind.LEFT_PAREN:
                parameters = []
                while self.stream.match(TokenKind.IDENTIFIER):
                    parameters.append(self.stream.poll().value)
                self.stream.expect(TokenKind.RIGHT_PAREN, ") is expected after ending method parameters")
                opener = self.stream.expect(TokenKind.LEFT_BRACE, "{ is expected after ending a method statement")
                return MethodDeclaration(name, tuple(parameters), self.block(opener))
            case TokenKind.EQUAL:
                initializer = self.expressions.parse()
                self._end_statement()
                return VarDeclaration(name, initializer)
            case TokenKind.SEMICOLON:
                return VarDeclaration(name, None)
        location = nxt.location if nxt else self.stream.end
        raise ScriptSyntaxError("Undefined variables must end with a semicolon", location)

    def _identifier_statement(self, name: TokenBinding) -> Statement:
        nxt = self.stream.poll()
        match nxt.kind if nxt else None:
            case TokenKind.EQUAL:
                value = self.expressions.parse()
                self._end_statement()
                return Assignment(name, value)
            case TokenKind.LEFT_PAREN:
                arguments = []
                while not self.stream.match(TokenKind.RIGHT_PAREN):
                    if self.stream.at_end():
                        break
                    arguments.append(self.expressions.parse())
                self.stream.expect(TokenKind.RIGHT_PAREN, ") is expected after call arguments")
                self._end_statement()
                return Call(name, tuple(arguments))
        location = nxt.location if nxt else self.stream.end
        raise ScriptSyntaxError(f"= or ( is expected after {name.value}", location)


def parse_program(source: str, lexicon: Optional[Lexicon] = None) -> Block:
    """Lexes and parses `source` into a program Block."""
    lexer = Lexer(source, lexicon)
    tokens = lexer.tokenize()
    return StatementParser(tokens, lexer.location, lexicon).parse()

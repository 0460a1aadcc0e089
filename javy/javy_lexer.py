"""
The Javy lexer: a single left-to-right pass turning source text into
classified token bindings while tracking line and column for diagnostics.
"""
from typing import Callable, List, Optional

from javy.javy_tokens import Lexicon, SourceLocation, TokenBinding, TokenKind
from javy.javy_datatypes import ScriptSyntaxError, dbg


class Lexer:
    """Scans a source string into a list of TokenBinding objects."""

    def __init__(self, source: str, lexicon: Optional[Lexicon] = None):
        self.source = source
        self.lexicon = lexicon or Lexicon.load()
        self.cursor = 0
        self.line = 1
        self.column = 1
        self.tokens: List[TokenBinding] = []

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(self.line, self.column, self.cursor)

    def at_end(self) -> bool:
        return self.cursor >= len(self.source)

    def current(self) -> str:
        return self.source[self.cursor]

    def consume(self) -> str:
        ch = self.source[self.cursor]
        self.cursor += 1
        self.column += 1
        return ch

    def tokenize(self) -> List[TokenBinding]:
        """Scans the whole source once and returns the bindings in source order."""
        while not self.at_end():
            ch = self.current()
            match ch:
                case ' ' | '\t' | '\r':
                    self.consume()
                case '\n':
                    self.consume()
                    self.line += 1
                    self.column = 1
                case '"':
                    self._scan(TokenKind.STRING, self.scan_string)
                case _ if ch.isdecimal():
                    self._scan(TokenKind.NUMBER, self.scan_number)
                case _ if ch.isalpha():
                    self._scan_word()
                case _:
                    self._scan_fixed()
        return self.tokens

    def push(self, kind: TokenKind, lexeme: str, value, location: SourceLocation) -> TokenBinding:
        binding = TokenBinding(kind, lexeme, value, location)
        self.tokens.append(binding)
        return binding

    def _scan(self, kind: TokenKind, rule: Callable[[], object]) -> TokenBinding:
        start = self.location
        value = rule()
        return self.push(kind, self.source[start.cursor:self.cursor], value, start)

    def _scan_word(self):
        binding = self._scan(TokenKind.IDENTIFIER, self.scan_identifier)
        keyword = self.lexicon.keyword(binding.value)
        if keyword is not None:
            # Retract the identifier and push the keyword in its place.
            self.tokens.pop()
            dbg("lexer: keyword", binding.lexeme, "at", binding.location)
            self.push(keyword, binding.lexeme, None, binding.location)

    def _scan_fixed(self):
        start = self.location
        for kind, lexeme in self.lexicon.fixed():
            if self.source.startswith(lexeme, self.cursor):
                for _ in lexeme:
                    self.consume()
                self.push(kind, lexeme, None, start)
                return
        # Unknown characters are skipped, never reported.
        dbg("lexer: skipping", repr(self.current()), "at", start)
        self.consume()

    # -----------------------------------------------------------------
    # Scanning rules for the variable-content kinds
    # -----------------------------------------------------------------

    def scan_identifier(self) -> str:
        start = self.cursor
        while not self.at_end() and self.current().isalpha():
            self.consume()
        return self.source[start:self.cursor]

    def scan_number(self) -> float:
        # Digits only; this is the place to add fractional or exponent parts.
        start = self.cursor
        while not self.at_end() and self.current().isdecimal():
            self.consume()
        return float(self.source[start:self.cursor])

    def scan_string(self) -> str:
        opening = self.location
        self.consume()
        start = self.cursor
        while not self.at_end() and self.current() != '"':
            if self.current() == '\n':
                self.consume()
                self.line += 1
                self.column = 1
            else:
                self.consume()
        if self.at_end():
            raise ScriptSyntaxError("Unterminated string literal", opening)
        text = self.source[start:self.cursor]
        self.consume()
        return text


def tokenize(source: str) -> List[TokenBinding]:
    return Lexer(source).tokenize()

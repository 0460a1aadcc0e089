"""
Token kinds, source locations and token bindings for the Javy lexer.

The fixed lexemes, the reserved keywords and the infix precedence table are
declared in grammar/javy_lexicon.yaml and loaded once per process.
"""
import enum
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterator, Optional, Tuple

import yaml


class TokenKind(enum.Enum):
    """The closed set of lexical categories."""
    # Delimiters
    LEFT_BRACE = "left-brace"
    RIGHT_BRACE = "right-brace"
    LEFT_BRACKET = "left-bracket"
    RIGHT_BRACKET = "right-bracket"
    LEFT_PAREN = "left-paren"
    RIGHT_PAREN = "right-paren"
    SEMICOLON = "semicolon"

    # Arithmetic and bitwise operators
    PLUS = "plus"
    MINUS = "minus"
    SLASH = "slash"
    STAR = "star"
    EQUAL = "equal"
    BANG = "bang"
    BITWISE_OR = "bitwise-or"
    BITWISE_AND = "bitwise-and"
    BITWISE_XOR = "bitwise-xor"
    BITWISE_COMPLEMENT = "bitwise-complement"

    # Comparisons
    GREATER_EQUAL = "greater-equal"
    LESS_EQUAL = "less-equal"
    GREATER = "greater"
    LESS = "less"

    # Keywords
    IS = "is"
    NOT = "not"
    IF = "if"
    WHILE = "while"
    DO = "do"
    FOR = "for"
    VAR = "var"
    RETURN = "return"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    AND = "and"
    OR = "or"

    # Variable-content kinds, produced by scanning rules
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"

    @property
    def lexeme(self) -> Optional[str]:
        """The fixed literal text of this kind in the default lexicon, or None for scanned kinds.

        A custom lexicon may spell kinds differently; ask it with `Lexicon.lexeme`.
        """
        return Lexicon.load().lexeme(self)

    @property
    def is_scanned(self) -> bool:
        return self in (TokenKind.IDENTIFIER, TokenKind.NUMBER, TokenKind.STRING)


class Precedence(enum.IntEnum):
    """Binding power ladder, lowest first."""
    NONE = 0
    ASSIGNMENT = 1
    OR = 2
    AND = 3
    EQUALITY = 4
    COMPARISON = 5
    TERM = 6
    FACTOR = 7
    UNARY = 8
    PRIMARY = 9


@dataclass(frozen=True)
class SourceLocation:
    """A position in the source: 1-based line and column, 0-based cursor."""
    line: int = 1
    column: int = 1
    cursor: int = 0

    def __str__(self) -> str:
        return f"[{self.line}:{self.column}]"


@dataclass(frozen=True)
class TokenBinding:
    """A classified lexical unit: kind, source text, literal value and start location."""
    kind: TokenKind
    lexeme: str
    value: Any
    location: SourceLocation

    def __str__(self) -> str:
        return f"{self.kind.name} {self.lexeme!r} {self.location}"


class Lexicon:
    """The lexical grammar: fixed lexemes in match order, keywords, infix precedence."""

    _default: Optional['Lexicon'] = None
    DEFAULT_PATH = Path(__file__).parent / "grammar" / "javy_lexicon.yaml"

    def __init__(self, lexemes: Dict[TokenKind, str], keywords: Dict[str, TokenKind],
                 precedence: Dict[TokenKind, Precedence]):
        self.lexemes = lexemes
        self.keywords = keywords
        self.precedence = precedence

    @classmethod
    def load(cls, path: Optional[Path] = None) -> 'Lexicon':
        """Loads a lexicon file. The default lexicon is parsed once and cached on the class."""
        if path is None:
            if cls._default is None:
                cls._default = cls.from_file(cls.DEFAULT_PATH)
            return cls._default
        return cls.from_file(path)

    @classmethod
    def from_file(cls, path: Path) -> 'Lexicon':
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(yaml.safe_load(f))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Lexicon':
        lexemes: Dict[TokenKind, str] = {}
        for name, text in (data.get("lexemes") or {}).items():
            kind = _kind_named(name)
            if kind.is_scanned:
                raise ValueError(f"{name!r} is a scanned token kind and cannot have a fixed lexeme")
            if not isinstance(text, str) or not text:
                raise ValueError(f"lexeme for {name!r} must be a non-empty string")
            lexemes[kind] = text

        keywords: Dict[str, TokenKind] = {}
        for name in data.get("keywords") or []:
            kind = _kind_named(name)
            if kind not in lexemes:
                raise ValueError(f"keyword {name!r} has no lexeme")
            keywords[lexemes[kind]] = kind

        precedence: Dict[TokenKind, Precedence] = {}
        for name, level in (data.get("precedence") or {}).items():
            try:
                precedence[_kind_named(name)] = Precedence[str(level).upper()]
            except KeyError:
                raise ValueError(f"unknown precedence level {level!r} for {name!r}") from None
        return cls(lexemes, keywords, precedence)

    def fixed(self) -> Iterator[Tuple[TokenKind, str]]:
        """Yields (kind, lexeme) pairs in match order."""
        return iter(self.lexemes.items())

    def lexeme(self, kind: TokenKind) -> Optional[str]:
        return self.lexemes.get(kind)

    def keyword(self, text: str) -> Optional[TokenKind]:
        return self.keywords.get(text)

    def infix_precedence(self, kind: Optional[TokenKind]) -> Precedence:
        if kind is None:
            return Precedence.NONE
        return self.precedence.get(kind, Precedence.NONE)


def _kind_named(name: Any) -> TokenKind:
    try:
        return TokenKind(str(name))
    except ValueError:
        raise ValueError(f"unknown token kind {name!r} in lexicon") from None

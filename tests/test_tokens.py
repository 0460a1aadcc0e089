import pytest

from javy.javy_tokens import Lexicon, Precedence, SourceLocation, TokenKind
from javy.javy_lexer import Lexer


def test_default_lexicon_is_cached():
    assert Lexicon.load() is Lexicon.load()


def test_token_kind_lexemes():
    assert TokenKind.PLUS.lexeme == "+"
    assert TokenKind.GREATER_EQUAL.lexeme == ">="
    assert TokenKind.WHILE.lexeme == "while"
    assert TokenKind.IDENTIFIER.lexeme is None
    assert TokenKind.STRING.is_scanned
    assert not TokenKind.VAR.is_scanned


def test_custom_lexicon_spells_its_own_lexemes():
    lexicon = Lexicon.from_dict({"lexemes": {"plus": "add", "while": "loop"}, "keywords": ["while"]})
    assert lexicon.lexeme(TokenKind.PLUS) == "add"
    assert lexicon.lexeme(TokenKind.MINUS) is None
    assert lexicon.keyword("loop") is TokenKind.WHILE
    # The enum property always reflects the default grammar.
    assert TokenKind.PLUS.lexeme == "+"
    assert Lexicon.load().lexeme(TokenKind.PLUS) == "+"

    tokens = Lexer("loop", lexicon).tokenize()
    assert [(t.kind, t.lexeme) for t in tokens] == [(TokenKind.WHILE, "loop")]


def test_fixed_lexemes_list_longer_comparisons_first():
    order = [kind for kind, _ in Lexicon.load().fixed()]
    assert order.index(TokenKind.GREATER_EQUAL) < order.index(TokenKind.GREATER)
    assert order.index(TokenKind.LESS_EQUAL) < order.index(TokenKind.LESS)


def test_keyword_lookup():
    lexicon = Lexicon.load()
    assert lexicon.keyword("while") is TokenKind.WHILE
    assert lexicon.keyword("null") is TokenKind.NULL
    assert lexicon.keyword("whilex") is None
    assert len(lexicon.keywords) == 13


@pytest.mark.parametrize("kind, expected", [
    (TokenKind.OR, Precedence.OR),
    (TokenKind.AND, Precedence.AND),
    (TokenKind.IS, Precedence.EQUALITY),
    (TokenKind.NOT, Precedence.EQUALITY),
    (TokenKind.LESS_EQUAL, Precedence.COMPARISON),
    (TokenKind.MINUS, Precedence.TERM),
    (TokenKind.STAR, Precedence.FACTOR),
    (TokenKind.EQUAL, Precedence.NONE),
    (TokenKind.SEMICOLON, Precedence.NONE),
    (None, Precedence.NONE),
])
def test_infix_precedence(kind, expected):
    assert Lexicon.load().infix_precedence(kind) is expected


def test_precedence_ladder_is_ordered():
    assert Precedence.NONE < Precedence.ASSIGNMENT < Precedence.OR < Precedence.AND
    assert Precedence.AND < Precedence.EQUALITY < Precedence.COMPARISON < Precedence.TERM
    assert Precedence.TERM < Precedence.FACTOR < Precedence.UNARY < Precedence.PRIMARY


@pytest.mark.parametrize("data, message", [
    ({"lexemes": {"sparkle": "*"}}, "unknown token kind"),
    ({"lexemes": {"identifier": "x"}}, "scanned token kind"),
    ({"lexemes": {"plus": ""}}, "non-empty string"),
    ({"lexemes": {}, "keywords": ["while"]}, "has no lexeme"),
    ({"lexemes": {"plus": "+"}, "precedence": {"plus": "huge"}}, "unknown precedence level"),
])
def test_invalid_lexicon_data(data, message):
    with pytest.raises(ValueError, match=message):
        Lexicon.from_dict(data)


def test_custom_lexicon_file_drives_the_lexer(tmp_path):
    path = tmp_path / "lexicon.yaml"
    path.write_text('lexemes:\n  plus: "+"\nprecedence:\n  plus: term\n', encoding="utf-8")
    lexicon = Lexicon.load(path)
    assert lexicon is not Lexicon.load()

    tokens = Lexer("var + x;", lexicon).tokenize()
    # Without keywords `var` is an identifier; `;` is unknown and skipped.
    assert [t.kind for t in tokens] == [TokenKind.IDENTIFIER, TokenKind.PLUS, TokenKind.IDENTIFIER]


def test_source_location_str():
    assert str(SourceLocation(3, 7, 40)) == "[3:7]"
    assert SourceLocation() == SourceLocation(1, 1, 0)

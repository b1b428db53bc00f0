import io

import pytest

from sbtrace.exprparser import SceneSyntaxError
from sbtrace.tokens import Symbol, Token, TokenStream, lookup_reserved_word, token_name


def _all_tokens(text):
    stream = TokenStream(text)
    tokens = []
    while True:
        token = stream.get()
        tokens.append(token)
        if token.kind is Symbol.EOFSYM:
            return tokens


def test_token_names_from_table():
    assert token_name(Symbol.SPHERE) == "sphere"
    assert token_name(Symbol.SBT_RAYTRACER) == "SBT-raytracer"
    assert token_name(Symbol.LPAREN) == "Left paren"
    assert token_name(Symbol.POLYPOINTS) == "points"


def test_unnamed_tokens_are_unknown():
    assert token_name(Symbol.FOV) == "Unknown token type"
    assert token_name(Symbol.GENNORMALS) == "Unknown token type"


@pytest.mark.parametrize(
    "word, kind",
    [
        ("colour", Symbol.COLOR),
        ("color", Symbol.COLOR),
        ("polymesh", Symbol.TRIMESH),
        ("trimesh", Symbol.TRIMESH),
        ("points", Symbol.POLYPOINTS),
        ("SBT-raytracer", Symbol.SBT_RAYTRACER),
        ("true", Symbol.SYMTRUE),
        ("look_at", Symbol.LOOK_AT),
    ],
)
def test_reserved_words(word, kind):
    assert lookup_reserved_word(word) is kind
    assert [t.kind for t in _all_tokens(word)] == [kind, Symbol.EOFSYM]


def test_unreserved_word_is_unknown():
    assert lookup_reserved_word("teapot") is Symbol.UNKNOWN
    assert lookup_reserved_word("Sphere") is Symbol.UNKNOWN


def test_header_tokens():
    tokens = _all_tokens("SBT-raytracer 1.1\n")
    assert [t.kind for t in tokens] == [Symbol.SBT_RAYTRACER, Symbol.SCALAR, Symbol.EOFSYM]
    assert tokens[1].value == pytest.approx(1.1)


def test_numbers_and_punctuation():
    tokens = _all_tokens("translate(1,-2.5,3e2);")
    assert [t.kind for t in tokens] == [
        Symbol.TRANSLATE,
        Symbol.LPAREN,
        Symbol.SCALAR,
        Symbol.COMMA,
        Symbol.SCALAR,
        Symbol.COMMA,
        Symbol.SCALAR,
        Symbol.RPAREN,
        Symbol.SEMICOLON,
        Symbol.EOFSYM,
    ]
    assert [t.value for t in tokens if t.kind is Symbol.SCALAR] == [1.0, -2.5, 3e2]


def test_identifiers_quoted_and_bare():
    tokens = _all_tokens('name = "shiny red"; foo')
    assert tokens[0].kind is Symbol.NAME
    assert tokens[2] == Token(Symbol.IDENT, ident="shiny red")
    assert tokens[4] == Token(Symbol.IDENT, ident="foo")


def test_comments_are_skipped():
    text = "// a comment\nsphere /* block\n comment */ { }"
    kinds = [t.kind for t in _all_tokens(text)]
    assert kinds == [Symbol.SPHERE, Symbol.LBRACE, Symbol.RBRACE, Symbol.EOFSYM]


def test_peek_does_not_consume():
    stream = TokenStream("box {")
    assert stream.peek().kind is Symbol.BOX
    assert stream.peek().kind is Symbol.BOX
    assert stream.get().kind is Symbol.BOX
    assert stream.get().kind is Symbol.LBRACE


def test_eof_repeats():
    stream = TokenStream(io.StringIO(""))
    assert stream.get().kind is Symbol.EOFSYM
    assert stream.get().kind is Symbol.EOFSYM


def test_read_returns_matching_token():
    stream = TokenStream("1.5 ,")
    assert stream.read(Symbol.SCALAR).value == 1.5
    assert stream.read(Symbol.COMMA).kind is Symbol.COMMA


def test_read_mismatch_raises_and_keeps_token():
    stream = TokenStream("sphere")
    with pytest.raises(SceneSyntaxError):
        stream.read(Symbol.BOX)
    assert stream.get().kind is Symbol.SPHERE


def test_cond_read():
    stream = TokenStream("; }")
    assert stream.cond_read(Symbol.SEMICOLON) is True
    assert stream.cond_read(Symbol.SEMICOLON) is False
    assert stream.get().kind is Symbol.RBRACE


def test_unexpected_character_reports_line():
    stream = TokenStream("SBT-raytracer 1.1\n@")
    stream.get()
    stream.get()
    with pytest.raises(SceneSyntaxError) as info:
        stream.get()
    assert info.value.line == 2
    assert "Line 2: syntax error:" in info.value.formatted_message


def test_unterminated_string():
    with pytest.raises(SceneSyntaxError):
        _all_tokens('"open')


def test_token_str():
    assert str(Token(Symbol.IDENT, ident="foo")) == 'Identifier: "foo"'
    assert str(Token(Symbol.CAMERA)) == "camera"
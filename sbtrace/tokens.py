"""Tokens of the scene description language and a tokenizer producing them."""

from __future__ import annotations

import enum
import io
from dataclasses import dataclass
from typing import TextIO

from .buffer import Buffer


class Symbol(enum.Enum):
    UNKNOWN = enum.auto()
    EOFSYM = enum.auto()
    SBT_RAYTRACER = enum.auto()
    IDENT = enum.auto()
    SCALAR = enum.auto()
    SYMTRUE = enum.auto()
    SYMFALSE = enum.auto()
    LPAREN = enum.auto()
    RPAREN = enum.auto()
    LBRACE = enum.auto()
    RBRACE = enum.auto()
    COMMA = enum.auto()
    EQUALS = enum.auto()
    SEMICOLON = enum.auto()
    CAMERA = enum.auto()
    AMBIENT_LIGHT = enum.auto()
    POINT_LIGHT = enum.auto()
    DIRECTIONAL_LIGHT = enum.auto()
    CONSTANT_ATTENUATION_COEFF = enum.auto()
    LINEAR_ATTENUATION_COEFF = enum.auto()
    QUADRATIC_ATTENUATION_COEFF = enum.auto()
    SPHERE = enum.auto()
    BOX = enum.auto()
    SQUARE = enum.auto()
    CYLINDER = enum.auto()
    CONE = enum.auto()
    TRIMESH = enum.auto()
    POSITION = enum.auto()
    VIEWDIR = enum.auto()
    UPDIR = enum.auto()
    ASPECTRATIO = enum.auto()
    FOV = enum.auto()
    COLOR = enum.auto()
    DIRECTION = enum.auto()
    CAPPED = enum.auto()
    HEIGHT = enum.auto()
    BOTTOM_RADIUS = enum.auto()
    TOP_RADIUS = enum.auto()
    QUATERNIAN = enum.auto()
    POLYPOINTS = enum.auto()
    NORMALS = enum.auto()
    MATERIALS = enum.auto()
    FACES = enum.auto()
    GENNORMALS = enum.auto()
    TRANSLATE = enum.auto()
    SCALE = enum.auto()
    ROTATE = enum.auto()
    TRANSFORM = enum.auto()
    MATERIAL = enum.auto()
    EMISSIVE = enum.auto()
    AMBIENT = enum.auto()
    SPECULAR = enum.auto()
    REFLECTIVE = enum.auto()
    DIFFUSE = enum.auto()
    TRANSMISSIVE = enum.auto()
    SHININESS = enum.auto()
    INDEX = enum.auto()
    NAME = enum.auto()
    MAP = enum.auto()
    LOOK_AT = enum.auto()


_TOKEN_NAMES = {
    Symbol.EOFSYM: "EOF",
    Symbol.SBT_RAYTRACER: "SBT-raytracer",
    Symbol.IDENT: "Identifier",
    Symbol.SCALAR: "Scalar",
    Symbol.SYMTRUE: "true",
    Symbol.SYMFALSE: "false",
    Symbol.LPAREN: "Left paren",
    Symbol.RPAREN: "Right paren",
    Symbol.LBRACE: "Left brace",
    Symbol.RBRACE: "Right brace",
    Symbol.COMMA: "Comma",
    Symbol.EQUALS: "Equals",
    Symbol.SEMICOLON: "Semicolon",
    Symbol.CAMERA: "camera",
    Symbol.AMBIENT_LIGHT: "ambient_light",
    Symbol.POINT_LIGHT: "point_light",
    Symbol.DIRECTIONAL_LIGHT: "directional_light",
    Symbol.CONSTANT_ATTENUATION_COEFF: "constant_attenuation_coeff",
    Symbol.LINEAR_ATTENUATION_COEFF: "linear_attenuation_coeff",
    Symbol.QUADRATIC_ATTENUATION_COEFF: "quadratic_attenuation_coeff",
    Symbol.SPHERE: "sphere",
    Symbol.BOX: "box",
    Symbol.SQUARE: "square",
    Symbol.CYLINDER: "cylinder",
    Symbol.CONE: "cone",
    Symbol.TRIMESH: "trimesh",
    Symbol.POSITION: "position",
    Symbol.VIEWDIR: "viewdir",
    Symbol.UPDIR: "updir",
    Symbol.ASPECTRATIO: "aspectratio",
    Symbol.COLOR: "color",
    Symbol.DIRECTION: "direction",
    Symbol.CAPPED: "capped",
    Symbol.HEIGHT: "height",
    Symbol.BOTTOM_RADIUS: "bottom_radius",
    Symbol.TOP_RADIUS: "top_radius",
    Symbol.QUATERNIAN: "quaternian",
    Symbol.POLYPOINTS: "points",
    Symbol.NORMALS: "normals",
    Symbol.MATERIALS: "materials",
    Symbol.FACES: "faces",
    Symbol.TRANSLATE: "translate",
    Symbol.SCALE: "scale",
    Symbol.ROTATE: "rotate",
    Symbol.TRANSFORM: "transform",
    Symbol.MATERIAL: "material",
    Symbol.EMISSIVE: "emissive",
    Symbol.AMBIENT: "ambient",
    Symbol.SPECULAR: "specular",
    Symbol.REFLECTIVE: "reflective",
    Symbol.DIFFUSE: "diffuse",
    Symbol.TRANSMISSIVE: "transmissive",
    Symbol.SHININESS: "shininess",
    Symbol.INDEX: "index",
    Symbol.NAME: "name",
    Symbol.MAP: "map",
    Symbol.LOOK_AT: "look_at",
}

_RESERVED_WORDS = {
    "ambient_light": Symbol.AMBIENT_LIGHT,
    "ambient": Symbol.AMBIENT,
    "aspectratio": Symbol.ASPECTRATIO,
    "bottom_radius": Symbol.BOTTOM_RADIUS,
    "box": Symbol.BOX,
    "camera": Symbol.CAMERA,
    "capped": Symbol.CAPPED,
    "color": Symbol.COLOR,
    "colour": Symbol.COLOR,
    "cone": Symbol.CONE,
    "constant_attenuation_coeff": Symbol.CONSTANT_ATTENUATION_COEFF,
    "cylinder": Symbol.CYLINDER,
    "diffuse": Symbol.DIFFUSE,
    "direction": Symbol.DIRECTION,
    "directional_light": Symbol.DIRECTIONAL_LIGHT,
    "emissive": Symbol.EMISSIVE,
    "faces": Symbol.FACES,
    "false": Symbol.SYMFALSE,
    "fov": Symbol.FOV,
    "gennormals": Symbol.GENNORMALS,
    "height": Symbol.HEIGHT,
    "index": Symbol.INDEX,
    "linear_attenuation_coeff": Symbol.LINEAR_ATTENUATION_COEFF,
    "material": Symbol.MATERIAL,
    "materials": Symbol.MATERIALS,
    "map": Symbol.MAP,
    "name": Symbol.NAME,
    "normals": Symbol.NORMALS,
    "point_light": Symbol.POINT_LIGHT,
    "points": Symbol.POLYPOINTS,
    "polymesh": Symbol.TRIMESH,
    "position": Symbol.POSITION,
    "quadratic_attenuation_coeff": Symbol.QUADRATIC_ATTENUATION_COEFF,
    "quaternian": Symbol.QUATERNIAN,
    "reflective": Symbol.REFLECTIVE,
    "rotate": Symbol.ROTATE,
    "SBT-raytracer": Symbol.SBT_RAYTRACER,
    "scale": Symbol.SCALE,
    "shininess": Symbol.SHININESS,
    "specular": Symbol.SPECULAR,
    "sphere": Symbol.SPHERE,
    "square": Symbol.SQUARE,
    "top_radius": Symbol.TOP_RADIUS,
    "transform": Symbol.TRANSFORM,
    "translate": Symbol.TRANSLATE,
    "transmissive": Symbol.TRANSMISSIVE,
    "trimesh": Symbol.TRIMESH,
    "true": Symbol.SYMTRUE,
    "updir": Symbol.UPDIR,
    "viewdir": Symbol.VIEWDIR,
    "look_at": Symbol.LOOK_AT,
}

_PUNCTUATION = {
    "(": Symbol.LPAREN,
    ")": Symbol.RPAREN,
    "{": Symbol.LBRACE,
    "}": Symbol.RBRACE,
    ",": Symbol.COMMA,
    "=": Symbol.EQUALS,
    ";": Symbol.SEMICOLON,
}


def token_name(kind: Symbol) -> str:
    """Human-readable name of a token kind."""
    return _TOKEN_NAMES.get(kind, "Unknown token type")


def lookup_reserved_word(ident: str) -> Symbol:
    """Symbol of a reserved word, or ``Symbol.UNKNOWN`` for any other word."""
    return _RESERVED_WORDS.get(ident, Symbol.UNKNOWN)


@dataclass(frozen=True)
class Token:
    """One token; identifiers carry ``ident`` and scalars carry ``value``."""

    kind: Symbol
    ident: str = ""
    value: float = 0.0

    def __str__(self) -> str:
        name = token_name(self.kind)
        if self.kind is Symbol.IDENT:
            return f'{name}: "{self.ident}"'
        if self.kind is Symbol.SCALAR:
            return f"{name}: {self.value:g}"
        return name


def _is_one_of(ch: str, chars: str) -> bool:
    return ch != "" and ch in chars


def _is_word_char(ch: str) -> bool:
    return ch != "" and (ch.isalnum() or ch in "_-")


class TokenStream:
    """Tokenizer over a text stream (or string) with one token of lookahead.

    ``//`` and ``/* */`` comments are skipped; quoted strings and words that
    are not reserved become identifiers.
    """

    def __init__(self, source: TextIO | str, debug: bool = False):
        if isinstance(source, str):
            source = io.StringIO(source)
        self.buffer = Buffer(source)
        self.debug = debug
        self._ch: str | None = None
        self._lookahead: Token | None = None

    def _current(self) -> str:
        if self._ch is None:
            self._ch = self.buffer.get_ch()
        return self._ch

    def _advance(self) -> None:
        self._ch = self.buffer.get_ch()

    def _error(self, message: str) -> Exception:
        from .exprparser import SceneSyntaxError

        return SceneSyntaxError(message, self)

    def _skip_blanks(self) -> None:
        while True:
            ch = self._current()
            if ch != "" and ch.isspace():
                self._advance()
            elif ch == "/":
                self._advance()
                follower = self._current()
                if follower == "/":
                    while self._current() not in ("\n", ""):
                        self._advance()
                elif follower == "*":
                    self._advance()
                    self._skip_block_comment()
                else:
                    raise self._error("Unexpected character '/'")
            else:
                return

    def _skip_block_comment(self) -> None:
        star = False
        while True:
            ch = self._current()
            if ch == "":
                raise self._error("Unterminated comment")
            self._advance()
            if star and ch == "/":
                return
            star = ch == "*"

    def _take_digits(self) -> str:
        digits = ""
        while self._current().isdigit():
            digits += self._current()
            self._advance()
        return digits

    def _scan_number(self) -> Token:
        text = ""
        if _is_one_of(self._current(), "+-"):
            text += self._current()
            self._advance()
        text += self._take_digits()
        if self._current() == ".":
            text += "."
            self._advance()
            text += self._take_digits()
        if _is_one_of(self._current(), "eE"):
            text += self._current()
            self._advance()
            if _is_one_of(self._current(), "+-"):
                text += self._current()
                self._advance()
            text += self._take_digits()
        try:
            return Token(Symbol.SCALAR, value=float(text))
        except ValueError:
            raise self._error(f"Malformed number '{text}'") from None

    def _scan_word(self) -> Token:
        word = ""
        while _is_word_char(self._current()):
            word += self._current()
            self._advance()
        kind = lookup_reserved_word(word)
        if kind is Symbol.UNKNOWN:
            return Token(Symbol.IDENT, ident=word)
        return Token(kind)

    def _scan_string(self) -> Token:
        self._advance()
        text = ""
        while self._current() != '"':
            if self._current() in ("", "\n"):
                raise self._error("Unterminated string")
            text += self._current()
            self._advance()
        self._advance()
        return Token(Symbol.IDENT, ident=text)

    def _scan(self) -> Token:
        self._skip_blanks()
        ch = self._current()
        if ch == "":
            return Token(Symbol.EOFSYM)
        if ch in _PUNCTUATION:
            self._advance()
            return Token(_PUNCTUATION[ch])
        if ch == '"':
            return self._scan_string()
        if ch.isdigit() or ch in "+-.":
            return self._scan_number()
        if ch.isalpha() or ch == "_":
            return self._scan_word()
        raise self._error(f"Unexpected character '{ch}'")

    def peek(self) -> Token:
        """The next token, left in the stream."""
        if self._lookahead is None:
            self._lookahead = self._scan()
            if self.debug:
                print(f"Token: {self._lookahead}")
        return self._lookahead

    def get(self) -> Token:
        """Remove and return the next token; at the end this is always EOF."""
        token = self.peek()
        self._lookahead = None
        return token

    def read(self, kind: Symbol) -> Token:
        """Remove the next token, which must be of ``kind``.

        Raises SceneSyntaxError when it is of another kind.
        """
        token = self.peek()
        if token.kind is not kind:
            raise self._error(f"Expected: '{token_name(kind)}', found: '{token_name(token.kind)}'")
        return self.get()

    def cond_read(self, kind: Symbol) -> bool:
        """Remove the next token if it is of ``kind``; report whether it was."""
        if self.peek().kind is kind:
            self.get()
            return True
        return False
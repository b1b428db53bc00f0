"""Parsing of values, expressions and materials in scene descriptions."""

from __future__ import annotations

import copy

from .material import Material, MaterialParameter
from .ray import TraceError, Vec3
from .tokens import Symbol, TokenStream


class ParserError(TraceError):
    """Raised when a scene description cannot be turned into a scene."""


class SceneSyntaxError(ParserError):
    """A syntax error, located at the tokenizer's current line and column."""

    def __init__(self, message: str, tokens: TokenStream | None = None):
        super().__init__(message)
        if tokens is None:
            self.line = 0
            self.column = 0
            self.formatted_message = f"syntax error: {message}\n"
            return
        buffer = tokens.buffer
        self.line = buffer.line_number
        self.column = buffer.column
        self.formatted_message = (
            f"# {buffer.line}\n"
            f"  {' ' * self.column}^\n"
            f"Line {self.line}: syntax error: {message}\n"
        )


class ExpressionParser:
    """Parses the value-level parts of a scene: scalars, vectors, materials.

    Named materials are remembered in ``materials`` for later reference.
    """

    def __init__(self, tokens: TokenStream, base_path: str):
        self.tokens = tokens
        self.base_path = base_path
        self.materials: dict[str, Material] = {}

    def _syntax_error(self, message: str) -> SceneSyntaxError:
        return SceneSyntaxError(message, self.tokens)

    def parse_scalar(self) -> float:
        return self.tokens.read(Symbol.SCALAR).value

    def parse_ident(self) -> str:
        return self.tokens.read(Symbol.IDENT).ident

    def parse_boolean(self) -> bool:
        kind = self.tokens.peek().kind
        if kind is Symbol.SYMTRUE:
            self.tokens.read(Symbol.SYMTRUE)
            return True
        if kind is Symbol.SYMFALSE:
            self.tokens.read(Symbol.SYMFALSE)
            return False
        raise self._syntax_error("Expected boolean")

    def _parse_tuple(self, count: int) -> tuple[float, ...]:
        self.tokens.read(Symbol.LPAREN)
        values = [self.parse_scalar()]
        for _ in range(count - 1):
            self.tokens.read(Symbol.COMMA)
            values.append(self.parse_scalar())
        self.tokens.read(Symbol.RPAREN)
        return tuple(values)

    def parse_vec3(self) -> Vec3:
        return Vec3(*self._parse_tuple(3))

    def parse_vec4(self) -> tuple[float, float, float, float]:
        return self._parse_tuple(4)

    def parse_scalar_list(self) -> list[float]:
        """A parenthesised, comma-separated and possibly empty list of scalars."""
        values: list[float] = []
        self.tokens.read(Symbol.LPAREN)
        if self.tokens.peek().kind is not Symbol.RPAREN:
            values.append(self.parse_scalar())
            while self.tokens.peek().kind is not Symbol.RPAREN:
                self.tokens.read(Symbol.COMMA)
                values.append(self.parse_scalar())
        self.tokens.read(Symbol.RPAREN)
        return values

    def _begin_expression(self) -> None:
        self.tokens.get()
        self.tokens.read(Symbol.EQUALS)

    def _end_expression(self) -> None:
        self.tokens.cond_read(Symbol.SEMICOLON)

    def parse_scalar_expression(self) -> float:
        """``keyword = scalar`` with an optional trailing semicolon."""
        self._begin_expression()
        value = self.parse_scalar()
        self._end_expression()
        return value

    def parse_boolean_expression(self) -> bool:
        self._begin_expression()
        value = self.parse_boolean()
        self._end_expression()
        return value

    def parse_vec3_expression(self) -> Vec3:
        self._begin_expression()
        value = self.parse_vec3()
        self._end_expression()
        return value

    def parse_vec4_expression(self) -> tuple[float, float, float, float]:
        self._begin_expression()
        value = self.parse_vec4()
        self._end_expression()
        return value

    def parse_ident_expression(self) -> str:
        self._begin_expression()
        value = self.parse_ident()
        self._end_expression()
        return value

    def parse_material_expression(self, scene, parent: Material) -> Material:
        """``material = <material>`` with an optional trailing semicolon."""
        self.tokens.read(Symbol.MATERIAL)
        self.tokens.read(Symbol.EQUALS)
        material = self.parse_material(scene, parent)
        self._end_expression()
        return material

    def parse_material(self, scene, parent: Material) -> Material:
        """A material name, or a block of attributes overriding ``parent``.

        A name never defined yields a default material. A block with a
        ``name`` registers the material; registering a name twice is an error.
        """
        token = self.tokens.peek()
        if token.kind is Symbol.IDENT:
            self.tokens.get()
            named = self.materials.get(token.ident)
            return copy.copy(named) if named is not None else Material()

        self.tokens.read(Symbol.LBRACE)
        material = copy.copy(parent)
        reflective_set = False
        name = ""
        while True:
            kind = self.tokens.peek().kind
            if kind is Symbol.EMISSIVE:
                material.emissive = self.parse_vec3_material_parameter(scene)
            elif kind is Symbol.AMBIENT:
                material.ambient = self.parse_vec3_material_parameter(scene)
            elif kind is Symbol.SPECULAR:
                specular = self.parse_vec3_material_parameter(scene)
                material.specular = specular
                if not reflective_set:
                    material.reflective = specular
            elif kind is Symbol.DIFFUSE:
                material.diffuse = self.parse_vec3_material_parameter(scene)
            elif kind is Symbol.REFLECTIVE:
                material.reflective = self.parse_vec3_material_parameter(scene)
                reflective_set = True
            elif kind is Symbol.TRANSMISSIVE:
                material.transmissive = self.parse_vec3_material_parameter(scene)
            elif kind is Symbol.INDEX:
                material.refractive_index = self.parse_scalar_material_parameter(scene)
            elif kind is Symbol.SHININESS:
                material.specular_exponent = self.parse_scalar_material_parameter(scene)
            elif kind is Symbol.NAME:
                self.tokens.read(Symbol.NAME)
                name = self.tokens.read(Symbol.IDENT).ident
                self.tokens.read(Symbol.SEMICOLON)
            elif kind is Symbol.RBRACE:
                self.tokens.read(Symbol.RBRACE)
                if name:
                    if name in self.materials:
                        raise self._syntax_error(f"Redefinition of material '{name}'.")
                    self.materials[name] = copy.copy(material)
                return material
            else:
                raise self._syntax_error("Expected: material attribute")

    def parse_vec3_material_parameter(self, scene) -> MaterialParameter:
        """``keyword = (r, g, b)`` or ``keyword = map(file)``.

        Texture file names are taken relative to the base path.
        """
        self._begin_expression()
        if self.tokens.cond_read(Symbol.MAP):
            self.tokens.read(Symbol.LPAREN)
            filename = f"{self.base_path}/{self.parse_ident()}"
            self.tokens.read(Symbol.RPAREN)
            self._end_expression()
            return MaterialParameter(scene.get_texture(filename))
        value = self.parse_vec3()
        self._end_expression()
        return MaterialParameter(value)

    def parse_scalar_material_parameter(self, scene) -> MaterialParameter:
        """``keyword = scalar`` or ``keyword = map(file)``, the file name as given."""
        self._begin_expression()
        if self.tokens.cond_read(Symbol.MAP):
            self.tokens.read(Symbol.LPAREN)
            filename = self.parse_ident()
            self.tokens.read(Symbol.RPAREN)
            self._end_expression()
            return MaterialParameter(scene.get_texture(filename))
        value = self.parse_scalar()
        self._end_expression()
        return MaterialParameter(value)
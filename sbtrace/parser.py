"""Parser turning a scene description into a populated scene."""

from __future__ import annotations

import copy

import numpy as np

from .exprparser import ExpressionParser, ParserError, SceneSyntaxError
from .light import DirectionalLight, PointLight
from .material import Material
from .ray import Vec3
from .scene import Scene, Transform, rotation, scaling, translation
from .shapes import Box, Cone, Cylinder, Sphere, Square
from .tokens import Symbol
from .trimesh import Trimesh

_GEOMETRY = frozenset(
    {
        Symbol.SPHERE,
        Symbol.BOX,
        Symbol.SQUARE,
        Symbol.CYLINDER,
        Symbol.CONE,
        Symbol.TRIMESH,
        Symbol.TRANSLATE,
        Symbol.ROTATE,
        Symbol.SCALE,
        Symbol.TRANSFORM,
    }
)
_TRANSFORMABLE = _GEOMETRY | {Symbol.LBRACE}

_HIGHEST_VERSION = 1.1


class Parser(ExpressionParser):
    """Reads a whole scene: geometry, transforms, lights, camera and materials."""

    def parse_scene(self) -> Scene:
        """Parse the header and every statement up to the end of input."""
        self.tokens.read(Symbol.SBT_RAYTRACER)
        version = self.tokens.read(Symbol.SCALAR).value
        if version > _HIGHEST_VERSION:
            raise ParserError(
                f"SBT-raytracer version number {version:g} too high; "
                f"only able to parser v{_HIGHEST_VERSION} and below."
            )

        scene = Scene()
        material = Material()
        while True:
            kind = self.tokens.peek().kind
            if kind in _TRANSFORMABLE:
                self.parse_transformable_element(scene, scene.transform_root, material)
            elif kind is Symbol.POINT_LIGHT:
                scene.add_light(self.parse_point_light(scene))
            elif kind is Symbol.DIRECTIONAL_LIGHT:
                scene.add_light(self.parse_directional_light(scene))
            elif kind is Symbol.AMBIENT_LIGHT:
                self.parse_ambient_light(scene)
            elif kind is Symbol.CAMERA:
                self.parse_camera(scene)
            elif kind is Symbol.MATERIAL:
                material = self.parse_material_expression(scene, material)
            elif kind is Symbol.SEMICOLON:
                self.tokens.read(Symbol.SEMICOLON)
            elif kind is Symbol.EOFSYM:
                return scene
            else:
                raise self._syntax_error("Expected: geometry, camera, or light information")

    def parse_camera(self, scene: Scene) -> None:
        camera = scene.camera
        view_dir = up_dir = pos = Vec3()
        has_view_dir = has_up_dir = has_look_at = has_position = False

        self.tokens.read(Symbol.CAMERA)
        self.tokens.read(Symbol.LBRACE)
        while True:
            kind = self.tokens.peek().kind
            if kind is Symbol.POSITION:
                pos = self.parse_vec3_expression()
                camera.set_eye(pos)
                has_position = True
            elif kind is Symbol.FOV:
                camera.set_fov(self.parse_scalar_expression())
            elif kind is Symbol.QUATERNIAN:
                camera.set_look_quaternion(*self.parse_vec4_expression())
            elif kind is Symbol.ASPECTRATIO:
                camera.set_aspect_ratio(self.parse_scalar_expression())
            elif kind is Symbol.VIEWDIR:
                view_dir = self.parse_vec3_expression()
                has_view_dir = True
            elif kind is Symbol.LOOK_AT:
                view_dir = self.parse_vec3_expression()
                has_look_at = True
            elif kind is Symbol.UPDIR:
                up_dir = self.parse_vec3_expression()
                has_up_dir = True
            elif kind is Symbol.RBRACE:
                if has_look_at:
                    if not has_position:
                        self._look_simple(camera, view_dir, Vec3(1.0, 0.0, 0.0))
                    else:
                        if not self._look_simple(camera, view_dir, pos):
                            raise self._syntax_error("Expected: cannot look at position of the camera")
                        if has_up_dir:
                            camera.set_look(camera.look, up_dir)
                elif has_view_dir:
                    if not has_up_dir:
                        raise self._syntax_error("Expected: 'updir'")
                    camera.set_look(view_dir, up_dir)
                elif has_up_dir:
                    raise self._syntax_error("Expected: 'viewdir'")
                self.tokens.read(Symbol.RBRACE)
                return
            else:
                raise self._syntax_error("Expected: camera attribute")

    @staticmethod
    def _look_simple(camera, target: Vec3, pos: Vec3) -> bool:
        try:
            result = camera.set_look_simple(target, pos)
        except ValueError:
            return False
        return result is not False

    def parse_transformable_element(self, scene: Scene, transform: Transform, material: Material) -> None:
        kind = self.tokens.peek().kind
        if kind in _GEOMETRY:
            self.parse_geometry(scene, transform, material)
        elif kind is Symbol.LBRACE:
            self.parse_group(scene, transform, material)
        else:
            raise self._syntax_error("Expected: transformable element")

    def parse_group(self, scene: Scene, transform: Transform, material: Material) -> None:
        """A braced block of geometry sharing one transform."""
        self.tokens.read(Symbol.LBRACE)
        while True:
            kind = self.tokens.peek().kind
            if kind in _TRANSFORMABLE:
                self.parse_transformable_element(scene, transform, material)
            elif kind is Symbol.RBRACE:
                self.tokens.read(Symbol.RBRACE)
                return
            else:
                if kind is Symbol.MATERIAL:
                    # A material is read but is not accepted inside a group.
                    self.parse_material_expression(scene, material)
                raise self._syntax_error("Expected: '}' or geometry")

    def parse_geometry(self, scene: Scene, transform: Transform, material: Material) -> None:
        handlers = {
            Symbol.SPHERE: self.parse_sphere,
            Symbol.BOX: self.parse_box,
            Symbol.SQUARE: self.parse_square,
            Symbol.CYLINDER: self.parse_cylinder,
            Symbol.CONE: self.parse_cone,
            Symbol.TRIMESH: self.parse_trimesh,
            Symbol.TRANSLATE: self.parse_translate,
            Symbol.ROTATE: self.parse_rotate,
            Symbol.SCALE: self.parse_scale,
            Symbol.TRANSFORM: self.parse_transform,
        }
        handler = handlers.get(self.tokens.peek().kind)
        if handler is None:
            raise ParserError("Unrecognized geometry type.")
        handler(scene, transform, material)

    def _parse_child(self, scene: Scene, transform: Transform, material: Material, matrix) -> None:
        self.parse_transformable_element(scene, transform.create_child(matrix), material)
        self.tokens.read(Symbol.RPAREN)
        self.tokens.cond_read(Symbol.SEMICOLON)

    def _scalar_then_comma(self) -> float:
        value = self.parse_scalar()
        self.tokens.read(Symbol.COMMA)
        return value

    def parse_translate(self, scene: Scene, transform: Transform, material: Material) -> None:
        self.tokens.read(Symbol.TRANSLATE)
        self.tokens.read(Symbol.LPAREN)
        x, y, z = (self._scalar_then_comma() for _ in range(3))
        self._parse_child(scene, transform, material, translation(x, y, z))

    def parse_rotate(self, scene: Scene, transform: Transform, material: Material) -> None:
        """``rotate(x, y, z, angle, child)`` with the angle in radians."""
        self.tokens.read(Symbol.ROTATE)
        self.tokens.read(Symbol.LPAREN)
        x, y, z, angle = (self._scalar_then_comma() for _ in range(4))
        self._parse_child(scene, transform, material, rotation(angle, x, y, z))

    def parse_scale(self, scene: Scene, transform: Transform, material: Material) -> None:
        """``scale(s, child)`` or ``scale(x, y, z, child)``."""
        self.tokens.read(Symbol.SCALE)
        self.tokens.read(Symbol.LPAREN)
        x = self._scalar_then_comma()
        if self.tokens.peek().kind is Symbol.SCALAR:
            y = self._scalar_then_comma()
            z = self._scalar_then_comma()
        else:
            y = z = x
        self._parse_child(scene, transform, material, scaling(x, y, z))

    def parse_transform(self, scene: Scene, transform: Transform, material: Material) -> None:
        """``transform(row1, row2, row3, row4, child)`` with four-component rows."""
        self.tokens.read(Symbol.TRANSFORM)
        self.tokens.read(Symbol.LPAREN)
        rows = []
        for _ in range(4):
            rows.append(self.parse_vec4())
            self.tokens.read(Symbol.COMMA)
        self._parse_child(scene, transform, material, np.array(rows, dtype=float))

    def _parse_simple_shape(self, scene, transform, material, keyword: Symbol, factory, what: str) -> None:
        self.tokens.read(keyword)
        self.tokens.read(Symbol.LBRACE)
        own_material = None
        while True:
            kind = self.tokens.peek().kind
            if kind is Symbol.MATERIAL:
                own_material = self.parse_material_expression(scene, material)
            elif kind is Symbol.NAME:
                self.parse_ident_expression()
            elif kind is Symbol.RBRACE:
                self.tokens.read(Symbol.RBRACE)
                chosen = own_material if own_material is not None else copy.copy(material)
                scene.add_object(factory(scene, chosen, transform))
                return
            else:
                raise self._syntax_error(f"Expected: {what} attributes")

    def parse_sphere(self, scene: Scene, transform: Transform, material: Material) -> None:
        self._parse_simple_shape(scene, transform, material, Symbol.SPHERE, Sphere, "sphere")

    def parse_box(self, scene: Scene, transform: Transform, material: Material) -> None:
        self._parse_simple_shape(scene, transform, material, Symbol.BOX, Box, "box")

    def parse_square(self, scene: Scene, transform: Transform, material: Material) -> None:
        self._parse_simple_shape(scene, transform, material, Symbol.SQUARE, Square, "square")

    def parse_cylinder(self, scene: Scene, transform: Transform, material: Material) -> None:
        self._parse_simple_shape(scene, transform, material, Symbol.CYLINDER, Cylinder, "cylinder")

    def parse_cone(self, scene: Scene, transform: Transform, material: Material) -> None:
        self.tokens.read(Symbol.CONE)
        self.tokens.read(Symbol.LBRACE)
        own_material = None
        bottom_radius = 1.0
        top_radius = 0.0
        height = 1.0
        capped = True
        while True:
            kind = self.tokens.peek().kind
            if kind is Symbol.MATERIAL:
                own_material = self.parse_material_expression(scene, material)
            elif kind is Symbol.NAME:
                self.parse_ident_expression()
            elif kind is Symbol.CAPPED:
                capped = self.parse_boolean_expression()
            elif kind is Symbol.BOTTOM_RADIUS:
                bottom_radius = self.parse_scalar_expression()
            elif kind is Symbol.TOP_RADIUS:
                top_radius = self.parse_scalar_expression()
            elif kind is Symbol.HEIGHT:
                height = self.parse_scalar_expression()
            elif kind is Symbol.RBRACE:
                self.tokens.read(Symbol.RBRACE)
                chosen = own_material if own_material is not None else copy.copy(material)
                cone = Cone(scene, chosen, height, bottom_radius, top_radius, capped)
                cone.transform = transform
                scene.add_object(cone)
                return
            else:
                raise self._syntax_error("Expected: cone attributes")

    def _parse_list(self, keyword: Symbol, item) -> list:
        self.tokens.read(keyword)
        self.tokens.read(Symbol.EQUALS)
        self.tokens.read(Symbol.LPAREN)
        items = []
        if self.tokens.peek().kind is not Symbol.RPAREN:
            items.append(item())
            while self.tokens.peek().kind is not Symbol.RPAREN:
                self.tokens.read(Symbol.COMMA)
                items.append(item())
        self.tokens.read(Symbol.RPAREN)
        self.tokens.read(Symbol.SEMICOLON)
        return items

    def parse_trimesh(self, scene: Scene, transform: Transform, material: Material) -> None:
        mesh = Trimesh(scene, copy.copy(material), transform)
        self.tokens.read(Symbol.TRIMESH)
        self.tokens.read(Symbol.LBRACE)
        generate_normals = False
        faces: list[tuple[float, float, float]] = []
        while True:
            kind = self.tokens.peek().kind
            if kind is Symbol.GENNORMALS:
                self.tokens.read(Symbol.GENNORMALS)
                self.tokens.read(Symbol.SEMICOLON)
                generate_normals = True
            elif kind is Symbol.MATERIAL:
                mesh.material = self.parse_material_expression(scene, material)
            elif kind is Symbol.NAME:
                self.parse_ident_expression()
            elif kind is Symbol.MATERIALS:
                for item in self._parse_list(Symbol.MATERIALS, lambda: self.parse_material(scene, mesh.material)):
                    mesh.add_material(item)
            elif kind is Symbol.NORMALS:
                for normal in self._parse_list(Symbol.NORMALS, self.parse_vec3):
                    mesh.add_normal(normal)
            elif kind is Symbol.FACES:
                for triangles in self._parse_list(Symbol.FACES, self.parse_faces):
                    faces.extend(triangles)
            elif kind is Symbol.POLYPOINTS:
                for vertex in self._parse_list(Symbol.POLYPOINTS, self.parse_vec3):
                    mesh.add_vertex(vertex)
            elif kind is Symbol.RBRACE:
                self.tokens.read(Symbol.RBRACE)
                for a, b, c in faces:
                    try:
                        mesh.add_face(int(a), int(b), int(c))
                    except IndexError:
                        raise ParserError(f"Bad face in trimesh: ({a:g}, {b:g}, {c:g})") from None
                if generate_normals:
                    mesh.generate_normals()
                try:
                    mesh.double_check()
                except ValueError as exc:
                    raise ParserError(str(exc)) from None
                scene.add_object(mesh)
                return
            else:
                raise self._syntax_error("Expected: trimesh attributes")

    def parse_faces(self) -> list[tuple[float, float, float]]:
        """One polygon as a list of vertex indices, split into a triangle fan."""
        points = self.parse_scalar_list()
        if len(points) < 3:
            raise self._syntax_error("Faces must have at least 3 vertices.")
        first = points[0]
        return [(first, b, c) for b, c in zip(points[1:], points[2:])]

    def parse_ambient_light(self, scene: Scene) -> None:
        """Ambient lights add their colour to the scene's ambient intensity."""
        self.tokens.read(Symbol.AMBIENT_LIGHT)
        self.tokens.read(Symbol.LBRACE)
        if self.tokens.peek().kind is not Symbol.COLOR:
            raise self._syntax_error("Expected color attribute")
        scene.add_ambient(self.parse_vec3_expression())
        self.tokens.read(Symbol.RBRACE)

    def parse_point_light(self, scene: Scene) -> PointLight:
        position = color = None
        constant, linear, quadratic = 0.0, 0.0, 1.0
        self.tokens.read(Symbol.POINT_LIGHT)
        self.tokens.read(Symbol.LBRACE)
        while True:
            kind = self.tokens.peek().kind
            if kind is Symbol.POSITION:
                if position is not None:
                    raise self._syntax_error("Repeated 'position' attribute")
                position = self.parse_vec3_expression()
            elif kind is Symbol.COLOR:
                if color is not None:
                    raise self._syntax_error("Repeated 'color' attribute")
                color = self.parse_vec3_expression()
            elif kind is Symbol.CONSTANT_ATTENUATION_COEFF:
                constant = self.parse_scalar_expression()
            elif kind is Symbol.LINEAR_ATTENUATION_COEFF:
                linear = self.parse_scalar_expression()
            elif kind is Symbol.QUADRATIC_ATTENUATION_COEFF:
                quadratic = self.parse_scalar_expression()
            elif kind is Symbol.RBRACE:
                if color is None:
                    raise self._syntax_error("Expected: 'color'")
                if position is None:
                    raise self._syntax_error("Expected: 'position'")
                self.tokens.read(Symbol.RBRACE)
                return PointLight(scene, position, color, constant, linear, quadratic)
            else:
                raise self._syntax_error(
                    "expecting 'position' or 'color' attribute, or 'constant_attenuation_coeff', "
                    "'linear_attenuation_coeff', or 'quadratic_attenuation_coeff'"
                )

    def parse_directional_light(self, scene: Scene) -> DirectionalLight:
        direction = color = None
        self.tokens.read(Symbol.DIRECTIONAL_LIGHT)
        self.tokens.read(Symbol.LBRACE)
        while True:
            kind = self.tokens.peek().kind
            if kind is Symbol.DIRECTION:
                if direction is not None:
                    raise self._syntax_error("Repeated 'direction' attribute")
                direction = self.parse_vec3_expression()
            elif kind is Symbol.COLOR:
                if color is not None:
                    raise self._syntax_error("Repeated 'color' attribute")
                color = self.parse_vec3_expression()
            elif kind is Symbol.RBRACE:
                if color is None:
                    raise self._syntax_error("Expected: 'color'")
                if direction is None:
                    raise self._syntax_error("Expected: 'position'")
                self.tokens.read(Symbol.RBRACE)
                return DirectionalLight(scene, direction, color)
            else:
                raise self._syntax_error("expecting 'position' or 'color' attribute")


__all__ = ["Parser", "ParserError", "SceneSyntaxError"]
import pytest

from sbtrace.exprparser import ParserError, SceneSyntaxError
from sbtrace.light import DirectionalLight, PointLight
from sbtrace.parser import Parser
from sbtrace.ray import Vec3
from sbtrace.shapes import Box, Cone, Cylinder, Sphere, Square
from sbtrace.tokens import TokenStream
from sbtrace.trimesh import Trimesh, TrimeshFace

HEADER = "SBT-raytracer 1.0\n"


def parse(body: str):
    return Parser(TokenStream(HEADER + body), ".").parse_scene()


def test_empty_scene_has_no_objects():
    scene = parse("")
    assert scene.objects == []
    assert scene.lights == []


def test_missing_header_is_syntax_error():
    with pytest.raises(SceneSyntaxError):
        Parser(TokenStream("sphere {}"), ".").parse_scene()


def test_version_too_high():
    with pytest.raises(ParserError, match="too high"):
        Parser(TokenStream("SBT-raytracer 2.0\n"), ".").parse_scene()


def test_simple_shapes_are_added_in_order():
    scene = parse("sphere {} box {} square {} cylinder {}")
    assert [type(o) for o in scene.objects] == [Sphere, Box, Square, Cylinder]


def test_unexpected_top_level_token():
    with pytest.raises(SceneSyntaxError, match="geometry, camera, or light"):
        parse("5")


def test_top_level_material_applies_to_later_objects():
    scene = parse("material = { diffuse = (1, 0, 0); }; sphere {}")
    assert scene.objects[0].material.diffuse.constant == Vec3(1.0, 0.0, 0.0)


def test_object_material_overrides():
    scene = parse("sphere { material = { emissive = (0, 1, 0); }; } box {}")
    assert scene.objects[0].material.emissive.constant == Vec3(0.0, 1.0, 0.0)
    assert scene.objects[1].material.emissive.constant == Vec3(0.0, 0.0, 0.0)


def test_named_material_reused():
    scene = parse(
        "sphere { material = { diffuse = (0, 0, 1); name shiny; }; }"
        " box { material = shiny; }"
    )
    assert scene.objects[1].material.diffuse.constant == Vec3(0.0, 0.0, 1.0)


def test_translate_moves_origin():
    scene = parse("translate(1, 2, 3, sphere {});")
    origin = scene.objects[0].transform.local_to_global(Vec3())
    assert tuple(origin) == pytest.approx((1.0, 2.0, 3.0))


def test_uniform_scale_with_single_value():
    scene = parse("scale(2, sphere {});")
    box = scene.objects[0].bounding_box()
    assert tuple(box.min) == pytest.approx((-2.0, -2.0, -2.0))
    assert tuple(box.max) == pytest.approx((2.0, 2.0, 2.0))


def test_transform_rows():
    scene = parse("transform((1,0,0,4),(0,1,0,5),(0,0,1,6),(0,0,0,1), box {});")
    origin = scene.objects[0].transform.local_to_global(Vec3())
    assert tuple(origin) == pytest.approx((4.0, 5.0, 6.0))


def test_rotate_by_zero_keeps_point():
    scene = parse("rotate(0, 0, 1, 0, box {});")
    point = scene.objects[0].transform.local_to_global(Vec3(1.0, 2.0, 3.0))
    assert tuple(point) == pytest.approx((1.0, 2.0, 3.0))


def test_group_holds_several_objects():
    scene = parse("translate(1, 0, 0, { sphere {} box {} });")
    assert len(scene.objects) == 2
    assert scene.objects[0].transform is scene.objects[1].transform


def test_material_in_group_is_rejected():
    with pytest.raises(SceneSyntaxError, match="'}' or geometry"):
        parse("{ material = { diffuse = (1,1,1); }; sphere {} }")


def test_cone_attributes():
    scene = parse("cone { height = 2; bottom_radius = 0.5; top_radius = 0.25; capped = false; }")
    cone = scene.objects[0]
    assert isinstance(cone, Cone)
    assert cone.height == 2.0
    assert cone.bottom_radius == 0.5
    assert cone.top_radius == 0.25
    assert cone.capped is False


def test_cone_capped_by_default():
    scene = parse("cone {}")
    assert scene.objects[0].capped is True


def test_bad_sphere_attribute():
    with pytest.raises(SceneSyntaxError, match="sphere attributes"):
        parse("sphere { height = 1; }")


def test_trimesh_faces_are_fanned():
    scene = parse(
        "trimesh { points = ((0,0,0),(1,0,0),(1,1,0),(0,1,0)); faces = ((0,1,2,3)); }"
    )
    faces = [o for o in scene.objects if isinstance(o, TrimeshFace)]
    meshes = [o for o in scene.objects if isinstance(o, Trimesh)]
    assert [f.ids for f in faces] == [(0, 1, 2), (0, 2, 3)]
    assert len(meshes) == 1


def test_trimesh_bad_face():
    with pytest.raises(ParserError, match=r"Bad face in trimesh: \(0, 1, 5\)"):
        parse("trimesh { points = ((0,0,0),(1,0,0),(0,1,0)); faces = ((0,1,5)); }")


def test_trimesh_face_needs_three_vertices():
    with pytest.raises(SceneSyntaxError, match="at least 3 vertices"):
        parse("trimesh { points = ((0,0,0),(1,0,0)); faces = ((0,1)); }")


def test_trimesh_wrong_normal_count():
    with pytest.raises(ParserError, match="Wrong number of normals"):
        parse("trimesh { points = ((0,0,0),(1,0,0),(0,1,0)); normals = ((0,0,1)); faces = ((0,1,2)); }")


def test_trimesh_generated_normals_are_unit():
    scene = parse(
        "polymesh { points = ((0,0,0),(1,0,0),(0,1,0)); faces = ((0,1,2)); gennormals; }"
    )
    mesh = next(o for o in scene.objects if isinstance(o, Trimesh))
    assert len(mesh.normals) == 3
    assert all(n.length() == pytest.approx(1.0) for n in mesh.normals)


def test_point_light_defaults():
    scene = parse("point_light { position = (1, 2, 3); color = (1, 1, 1); }")
    light = scene.lights[0]
    assert isinstance(light, PointLight)
    assert light.position == Vec3(1.0, 2.0, 3.0)
    assert (light.constant, light.linear, light.quadratic) == (0.0, 0.0, 1.0)


def test_point_light_missing_position():
    with pytest.raises(SceneSyntaxError, match="Expected: 'position'"):
        parse("point_light { color = (1, 1, 1); }")


def test_point_light_repeated_color():
    with pytest.raises(SceneSyntaxError, match="Repeated 'color'"):
        parse("point_light { color = (1, 1, 1); colour = (1, 1, 1); }")


def test_directional_light():
    scene = parse("directional_light { direction = (0, -1, 0); color = (0.5, 0.5, 0.5); }")
    light = scene.lights[0]
    assert isinstance(light, DirectionalLight)
    assert light.orientation == Vec3(0.0, -1.0, 0.0)


def test_directional_light_missing_color():
    with pytest.raises(SceneSyntaxError, match="Expected: 'color'"):
        parse("directional_light { direction = (0, -1, 0); }")


def test_ambient_lights_sum():
    scene = parse("ambient_light { color = (0.1, 0.2, 0.3); } ambient_light { color = (0.1, 0.2, 0.3); }")
    assert tuple(scene.ambient) == pytest.approx((0.2, 0.4, 0.6))


def test_ambient_light_requires_color():
    with pytest.raises(SceneSyntaxError, match="Expected color attribute"):
        parse("ambient_light { position = (0,0,0); }")


def test_camera_position_is_ray_origin():
    scene = parse("camera { position = (1, 2, 3); viewdir = (0, 0, -1); updir = (0, 1, 0); }")
    ray = scene.camera.ray_through(0.5, 0.5)
    assert tuple(ray.position) == pytest.approx((1.0, 2.0, 3.0))


def test_camera_viewdir_needs_updir():
    with pytest.raises(SceneSyntaxError, match="Expected: 'updir'"):
        parse("camera { viewdir = (0, 0, -1); }")


def test_camera_updir_needs_viewdir():
    with pytest.raises(SceneSyntaxError, match="Expected: 'viewdir'"):
        parse("camera { updir = (0, 1, 0); }")


def test_camera_cannot_look_at_itself():
    with pytest.raises(SceneSyntaxError, match="cannot look at position"):
        parse("camera { position = (1, 1, 1); look_at = (1, 1, 1); }")


def test_parse_faces_fan():
    parser = Parser(TokenStream("(4, 5, 6, 7, 8)"), ".")
    assert parser.parse_faces() == [(4.0, 5.0, 6.0), (4.0, 6.0, 7.0), (4.0, 7.0, 8.0)]
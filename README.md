# sbtrace

`sbtrace` is a recursive ray tracer for scenes written in the SBT-raytracer
scene description format, version 1.1 and below. It can:

- read scene descriptions with cameras, point, directional and ambient lights,
  materials (including texture maps), and nested transforms;
- intersect rays with spheres, boxes, squares, cylinders, cones and triangle
  meshes;
- shade hits with the Phong model, with shadows, and follow reflection and
  refraction up to a chosen recursion depth;
- write the rendered buffer to PNG or JPEG.

## Scene descriptions

A scene starts with a version header. Any number of elements follow it:

```
SBT-raytracer 1.0

camera {
    position = (0, 0, 4);
    viewdir = (0, 0, -1);
    updir = (0, 1, 0);
    fov = 45;
}

point_light {
    position = (2, 3, 4);
    colour = (1, 1, 1);
}

ambient_light { color = (0.2, 0.2, 0.2); }

translate(0, 0, -1,
    sphere {
        material = {
            diffuse = (0.8, 0.2, 0.2);
            specular = (0.5, 0.5, 0.5);
            shininess = 32;
        }
    })
```

Geometry can be wrapped in `translate(x, y, z, ...)`, `rotate(x, y, z, angle, ...)`
(the angle is in radians), `scale(s, ...)` or `scale(x, y, z, ...)`, and
`transform(row1, row2, row3, row4, ...)`. It can also be grouped with braces.
A top-level `material = {...}` statement sets the material that later geometry
inherits. A material block with `name = some_name;` registers the material, and
`material = some_name` uses it again. Defining the same name twice is an error.
Inside a material block, colour parameters can be read from an image with
`map("texture.png")`. That path is taken relative to the base path given when
the scene is loaded. `//` and `/* */` comments are allowed.

## Main pieces

| Module               | What it provides                                                    |
|----------------------|---------------------------------------------------------------------|
| `sbtrace.ray`        | `Vec3`, `Ray`, `RayType`, `Isect`, `TraceError`                     |
| `sbtrace.camera`     | `Camera`: eye, look direction, field of view, aspect ratio          |
| `sbtrace.scene`      | `Scene`, `Geometry`, `Transform`, `BoundingBox`, matrix helpers     |
| `sbtrace.shapes`     | `Sphere`, `Box`, `Square`, `Cylinder`, `Cone`                       |
| `sbtrace.trimesh`    | `Trimesh`, `TrimeshFace`                                            |
| `sbtrace.light`      | `PointLight`, `DirectionalLight`                                    |
| `sbtrace.material`   | `Material`, `MaterialParameter`, `TextureMap`, `TextureMapError`    |
| `sbtrace.tokens`     | `Symbol`, `Token`, `TokenStream`                                    |
| `sbtrace.exprparser` | `ExpressionParser`, `ParserError`, `SceneSyntaxError`               |
| `sbtrace.parser`     | `Parser`, which turns a token stream into a `Scene`                 |
| `sbtrace.tracer`     | `RayTracer`, which renders a loaded scene into an RGB buffer        |
| `sbtrace.imageio`    | `load_image` and `save_image` for PNG and JPEG                      |

## Rendering

```python
from sbtrace.imageio import save_image
from sbtrace.tracer import RayTracer

tracer = RayTracer(depth=3)
with open("scene.ray") as f:
    tracer.load_scene(f, base_path=".")
tracer.trace_setup(200, 200)
for j in range(200):
    for i in range(200):
        tracer.trace_pixel(i, j)
save_image("out.png", tracer.buffer, tracer.width, tracer.height, ".png")
```

`load_scene` takes a `TokenStream`, a text stream or the scene text itself. It
returns the parsed `Scene` and also keeps it as `tracer.scene`. `buffer` holds
`width * height` RGB byte triples, with the bottom row first. `save_image`
expects exactly this layout. Its `kind` is `".png"` or `".jpg"`, and for JPEG an
optional `quality` can be given (default 95). Any other kind writes nothing.

`RayTracer.trace(x, y)` gives the colour, clamped to `[0, 1]`, for normalised
window coordinates in `[0, 1]`. `RayTracer.trace_ray(ray, thresh, depth)`
follows a single ray through reflections and refractions. A ray that hits
nothing is black.

## Errors

All scene errors derive from `sbtrace.ray.TraceError`:

- `sbtrace.exprparser.SceneSyntaxError` is raised for syntax errors, including
  those the tokenizer finds. It carries `line`, `column` and `formatted_message`.
  The `formatted_message` repeats the offending line and puts a caret under the
  column.
- `sbtrace.exprparser.ParserError` covers other invalid scenes: a version
  number that is too high, a trimesh face that refers to a missing vertex, or
  the wrong number of per-vertex normals or materials.
- `sbtrace.material.TextureMapError` is raised when a texture image cannot be
  loaded.

## Working with geometry directly

```python
from sbtrace.camera import Camera
from sbtrace.ray import Vec3

camera = Camera()
camera.set_eye(Vec3(0, 0, 5))
camera.set_fov(45)
ray = camera.ray_through(0.5, 0.5)     # straight down the view axis
point = ray.at(2.0)
```

Each shape has `intersect_local(ray)`, which works in the shape's own frame and
returns an `Isect` or `None`. `Geometry.intersect(ray)` maps the ray through the
shape's `Transform` and maps the hit back. `Scene.intersect(ray)` checks every
object and returns the nearest hit. `Scene.init_bounds()` sorts objects into
bounded and unbounded and computes `scene_bounds`. Intersection still tests
every object; there is no spatial acceleration structure.

## Utilities

- `sbtrace.getopt.getopt(argv, optstring)` and `iter_options(argv, valid_opts)`:
  a small option scanner that accepts both `-x` and `/x` forms.
- `sbtrace.ruler.ruler_marks(range_min, range_max, window_length)` and
  `format_decimal(magnitude, power)`: place and label ruler ticks spaced at a
  power of ten.
- `sbtrace.buffer.Buffer`: a character reader that tracks line and column. The
  tokenizer uses it for error messages.

## What this package does not do

`sbtrace` is a library only. It installs no command-line program, and it has no
window, interactive preview or ray-debugging view. To render a scene, write a
few lines of Python like the example above.
"""
Pathforge - A Monte Carlo path tracer in Python

Renders scenes of spheres, moving spheres and participating media with:
- Diffuse, metal, dielectric and isotropic materials
- Motion blur and thin-lens depth of field
- A bounding volume hierarchy (BVH) for fast ray/scene intersection
- Reproducible multi-threaded or multi-process rendering
- PNG/JPEG (Pillow) and plain-text PPM output
"""

__version__ = "0.1.0"

from .vec3 import Vec3, Point3, Color
from .ray import Ray
from .shapes import HitRecord, Hittable, AABB, Sphere, MovingSphere, Translate, HittableList
from .materials import Material, ScatterResult, Lambertian, Metal, Dielectric, Isotropic
from .volumes import ConstantMedium, create_fog
from .bvh import BVHNode, build_bvh
from .camera import Camera
from .renderer import Renderer, RenderSettings, ray_color, sky_color
from .image import to_ldr, save_image, write_ppm
from .scenes import SCENES, three_spheres, random_scene, foggy_spheres, default_camera
from .scene_parser import SceneParser, SceneParseError, load_scene, parse_scene

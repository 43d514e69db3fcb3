"""
Scene description parser.

Reads YAML or JSON scene files with:
- Camera configuration
- Render settings
- Materials library (shared by name between objects)
- Objects, including wrappers that nest another object

Example scene file:
```yaml
camera:
  look_from: [13, 2, 3]
  look_at: [0, 0, 0]
  vfov: 20
  aperture: 0.1
  focus_dist: 10
  shutter: [0, 1]

render:
  width: 400
  height: 225
  samples: 100
  max_depth: 50
  seed: 7

materials:
  ground:
    type: lambertian
    albedo: [0.5, 0.5, 0.5]
  glass:
    type: dielectric
    ior: 1.5

objects:
  - type: sphere
    center: [0, -1000, 0]
    radius: 1000
    material: ground
  - type: moving_sphere
    center0: [0, 0.2, 2]
    center1: [0, 0.6, 2]
    radius: 0.2
    material: {type: metal, albedo: [0.9, 0.9, 0.9], fuzz: 0.1}
  - type: constant_medium
    density: 0.5
    color: [1, 1, 1]
    boundary:
      type: sphere
      center: [0, 1, 0]
      radius: 1
```
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import yaml

from .vec3 import Vec3, Color
from .camera import Camera
from .shapes import Hittable, HittableList, Sphere, MovingSphere, Translate
from .materials import Material, Lambertian, Metal, Dielectric, Isotropic
from .volumes import ConstantMedium
from .renderer import RenderSettings

logger = logging.getLogger(__name__)

SceneTuple = Tuple[HittableList, Camera, RenderSettings]


class SceneParseError(Exception):
    """Error during scene parsing."""


def _require(value: Any, kind: type, what: str) -> Any:
    """Return `value` if it is a `kind`, otherwise raise SceneParseError."""
    if not isinstance(value, kind):
        raise SceneParseError(f"{what} must be a {kind.__name__}, got {type(value).__name__}")
    return value


class SceneParser:
    """Parser for scene description files."""

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.objects: HittableList = HittableList()
        self.camera: Optional[Camera] = None
        self.settings: Optional[RenderSettings] = None

    def parse_file(self, filepath: Union[str, Path]) -> SceneTuple:
        """Parse a scene file.

        Args:
            filepath: Path to the scene file (.yaml, .yml or .json)

        Returns:
            Tuple of (scene, camera, settings)
        """
        path = Path(filepath)
        if not path.exists():
            raise SceneParseError(f"Scene file not found: {filepath}")

        content = path.read_text()

        try:
            if path.suffix == '.json':
                data = json.loads(content)
            else:
                # YAML is a superset of JSON, so it also covers unknown suffixes
                data = yaml.safe_load(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SceneParseError(f"Invalid scene file {filepath}: {e}") from e

        if not isinstance(data, dict):
            raise SceneParseError(f"Scene file {filepath} must contain a mapping")

        logger.debug("Loaded scene description from %s", path)
        return self.parse_dict(data)

    def parse_dict(self, data: Dict[str, Any]) -> SceneTuple:
        """Parse a scene from a dictionary.

        Args:
            data: Scene description dictionary

        Returns:
            Tuple of (scene, camera, settings)
        """
        # Parse settings first: the camera's default aspect ratio follows them
        if 'render' in data:
            self._parse_settings(_require(data['render'], dict, 'render'))
        else:
            self.settings = RenderSettings()

        # Materials before objects (objects reference them)
        if 'materials' in data:
            self._parse_materials(_require(data['materials'], dict, 'materials'))

        for obj_data in _require(data.get('objects') or [], list, 'objects'):
            self.objects.add(self._parse_object(obj_data))

        self._parse_camera(_require(data.get('camera') or {}, dict, 'camera'))

        logger.debug(
            "Parsed scene: %d objects, %d named materials",
            len(self.objects), len(self.materials)
        )
        return self.objects, self.camera, self.settings

    def _parse_vec3(self, data: Any) -> Vec3:
        """Parse a Vec3 from a list or an {x, y, z} mapping."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Vec3 must have 3 components, got {len(data)}")
            return Vec3(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Vec3(
                float(data.get('x', 0)),
                float(data.get('y', 0)),
                float(data.get('z', 0))
            )
        else:
            raise SceneParseError(f"Cannot parse Vec3 from: {data}")

    def _parse_color(self, data: Any) -> Color:
        """Parse a Color from a list, an {r, g, b} mapping or a hex string."""
        if isinstance(data, (list, tuple)):
            if len(data) != 3:
                raise SceneParseError(f"Color must have 3 components, got {len(data)}")
            return Color(float(data[0]), float(data[1]), float(data[2]))
        elif isinstance(data, dict):
            return Color(
                float(data.get('r', 0)),
                float(data.get('g', 0)),
                float(data.get('b', 0))
            )
        elif isinstance(data, str):
            if data.startswith('#') and len(data) == 7:
                try:
                    r, g, b = (int(data[i:i + 2], 16) / 255.0 for i in (1, 3, 5))
                except ValueError as e:
                    raise SceneParseError(f"Cannot parse color from string: {data}") from e
                return Color(r, g, b)
            raise SceneParseError(f"Cannot parse color from string: {data}")
        else:
            raise SceneParseError(f"Cannot parse Color from: {data}")

    def _parse_materials(self, materials_data: Dict[str, Any]) -> None:
        """Parse the named materials section."""
        for name, mat_data in materials_data.items():
            self.materials[name] = self._build_material(mat_data)

    def _build_material(self, mat_data: Dict[str, Any]) -> Material:
        _require(mat_data, dict, 'material')
        mat_type = str(mat_data.get('type', 'lambertian')).lower()

        try:
            if mat_type == 'lambertian':
                return Lambertian(self._parse_color(mat_data.get('albedo', [0.5, 0.5, 0.5])))

            elif mat_type == 'metal':
                albedo = self._parse_color(mat_data.get('albedo', [0.8, 0.8, 0.8]))
                return Metal(albedo, float(mat_data.get('fuzz', 0.0)))

            elif mat_type == 'dielectric':
                return Dielectric(float(mat_data.get('ior', 1.5)))

            elif mat_type == 'isotropic':
                return Isotropic(self._parse_color(mat_data.get('albedo', [1, 1, 1])))
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid {mat_type} material: {e}") from e

        raise SceneParseError(f"Unknown material type: {mat_type}")

    def _get_material(self, mat_ref: Any) -> Optional[Material]:
        """Get a material by name or inline definition."""
        if mat_ref is None:
            return None
        if isinstance(mat_ref, str):
            if mat_ref not in self.materials:
                raise SceneParseError(f"Unknown material: {mat_ref}")
            return self.materials[mat_ref]
        elif isinstance(mat_ref, dict):
            return self._build_material(mat_ref)
        else:
            raise SceneParseError(f"Invalid material reference: {mat_ref}")

    def _parse_object(self, obj_data: Dict[str, Any]) -> Hittable:
        """Parse one object; wrappers recurse into their nested object."""
        _require(obj_data, dict, 'object')
        obj_type = str(obj_data.get('type', 'sphere')).lower()

        try:
            if obj_type == 'sphere':
                return Sphere(
                    self._parse_vec3(obj_data.get('center', [0, 0, 0])),
                    float(obj_data.get('radius', 1.0)),
                    self._get_material(obj_data.get('material'))
                )

            elif obj_type == 'moving_sphere':
                return MovingSphere(
                    self._parse_vec3(obj_data['center0']),
                    self._parse_vec3(obj_data['center1']),
                    float(obj_data.get('time0', 0.0)),
                    float(obj_data.get('time1', 1.0)),
                    float(obj_data.get('radius', 1.0)),
                    self._get_material(obj_data.get('material'))
                )

            elif obj_type == 'translate':
                return Translate(
                    self._parse_object(obj_data['object']),
                    self._parse_vec3(obj_data['offset'])
                )

            elif obj_type == 'constant_medium':
                return ConstantMedium(
                    self._parse_object(obj_data['boundary']),
                    float(obj_data.get('density', 0.1)),
                    self._parse_color(obj_data.get('color', [1, 1, 1]))
                )
        except KeyError as e:
            raise SceneParseError(f"Object of type {obj_type} is missing {e}") from e
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid {obj_type}: {e}") from e

        raise SceneParseError(f"Unknown object type: {obj_type}")

    def _parse_camera(self, camera_data: Dict[str, Any]) -> None:
        """Parse camera section (every key optional)."""
        shutter = camera_data.get('shutter', [0.0, 0.0])
        if not isinstance(shutter, (list, tuple)) or len(shutter) != 2:
            raise SceneParseError(f"Camera shutter must be [open, close], got {shutter}")

        default_aspect = self.settings.width / self.settings.height
        try:
            self.camera = Camera(
                look_from=self._parse_vec3(camera_data.get('look_from', [0, 0, 5])),
                look_at=self._parse_vec3(camera_data.get('look_at', [0, 0, 0])),
                vup=self._parse_vec3(camera_data.get('vup', [0, 1, 0])),
                vfov=float(camera_data.get('vfov', 60)),
                aspect_ratio=float(camera_data.get('aspect_ratio', default_aspect)),
                aperture=float(camera_data.get('aperture', 0.0)),
                focus_dist=float(camera_data.get('focus_dist', 1.0)),
                shutter_open=float(shutter[0]),
                shutter_close=float(shutter[1])
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid camera: {e}") from e

    def _parse_settings(self, settings_data: Dict[str, Any]) -> None:
        """Parse render settings section."""
        seed = settings_data.get('seed')
        try:
            self.settings = RenderSettings(
                width=int(settings_data.get('width', 800)),
                height=int(settings_data.get('height', 600)),
                samples_per_pixel=int(settings_data.get('samples', 100)),
                max_depth=int(settings_data.get('max_depth', 50)),
                num_threads=int(settings_data.get('threads', 0)),
                use_processes=bool(settings_data.get('processes', False)),
                seed=None if seed is None else int(seed),
                gamma=float(settings_data.get('gamma', 2.0))
            )
        except (TypeError, ValueError) as e:
            raise SceneParseError(f"Invalid render settings: {e}") from e


def load_scene(filepath: Union[str, Path]) -> SceneTuple:
    """Convenience function to load a scene file.

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_file(filepath)


def parse_scene(data: Dict[str, Any]) -> SceneTuple:
    """Convenience function to parse a scene from a dictionary.

    Returns:
        Tuple of (scene, camera, settings)
    """
    parser = SceneParser()
    return parser.parse_dict(data)

"""Generation orchestration.

This module ties the algorithm catalog to the shared kernel pieces: it looks
up the requested algorithm, resolves its parameters, builds the seeded random
source and noise field, runs the generator, then applies the layer transform
and the global post-processing (smoothing and simplification).

Key components:
- transform_path: Layer transform (scale, rotation, translation) for one path
- GenerationEngine: Main orchestrator class
"""

import math
import time
from collections.abc import Mapping
from typing import Any

from plotweave.algorithms.base import AlgorithmRegistry
from plotweave.config import AlgorithmParams, KernelSettings, SimplifyMethod
from plotweave.core.geometry import count_points, simplify_rdp, simplify_visvalingam, smooth_path
from plotweave.core.image import ImageStore
from plotweave.core.noise import NoiseField
from plotweave.core.rng import SeededRng
from plotweave.domain import Bounds, Circle, GenerationResult, Path, Point, Polygon, Polyline
from plotweave.exceptions import DegenerateGeometryError
from plotweave.utils import GenerationLogger, GenerationStats


class LayerTransform:
    """Scale about the canvas centre, rotate, then translate.

    Args:
        center: Pivot for scaling and rotation
        scale_x: Horizontal scale
        scale_y: Vertical scale
        rotation: Rotation in degrees
        pos_x: Horizontal translation
        pos_y: Vertical translation
    """

    def __init__(
        self,
        center: Point,
        scale_x: float = 1.0,
        scale_y: float = 1.0,
        rotation: float = 0.0,
        pos_x: float = 0.0,
        pos_y: float = 0.0,
    ) -> None:
        self.center = center
        self.scale_x = scale_x
        self.scale_y = scale_y
        self.rotation = math.radians(rotation)
        self.pos_x = pos_x
        self.pos_y = pos_y
        self._cos = math.cos(self.rotation)
        self._sin = math.sin(self.rotation)

    @classmethod
    def from_params(cls, params: AlgorithmParams, bounds: Bounds) -> "LayerTransform":
        return cls(bounds.center, params.scale_x, params.scale_y, params.rotation, params.pos_x, params.pos_y)

    @property
    def is_identity(self) -> bool:
        return (
            self.scale_x == 1.0
            and self.scale_y == 1.0
            and self.rotation == 0.0
            and self.pos_x == 0.0
            and self.pos_y == 0.0
        )

    def point(self, pt: Point) -> Point:
        dx = (pt.x - self.center.x) * self.scale_x
        dy = (pt.y - self.center.y) * self.scale_y
        return Point(
            self.center.x + dx * self._cos - dy * self._sin + self.pos_x,
            self.center.y + dx * self._sin + dy * self._cos + self.pos_y,
        )


def transform_path(path: Path, transform: LayerTransform, segments: int = 64) -> Path:
    """Apply a layer transform, keeping circle/polygon shorthand when possible.

    A circle keeps its shorthand unless it is already rotated and the scale
    is non-uniform; a polygon keeps it only under uniform positive scale.
    Otherwise the primitive is expanded first.
    """
    if transform.is_identity:
        return path
    uniform = transform.scale_x == transform.scale_y
    if isinstance(path, Circle) and (uniform or path.rotation == 0.0):
        center = transform.point(Point(path.cx, path.cy))
        return Circle(
            cx=center.x,
            cy=center.y,
            r=path.r,
            scale_x=path.scale_x * transform.scale_x,
            scale_y=path.scale_y * transform.scale_y,
            rotation=path.rotation + transform.rotation,
            group=path.group,
            label=path.label,
        )
    if isinstance(path, Polygon) and uniform and transform.scale_x > 0:
        center = transform.point(Point(path.cx, path.cy))
        return Polygon(
            cx=center.x,
            cy=center.y,
            r=path.r * transform.scale_x,
            sides=path.sides,
            rotation=path.rotation + transform.rotation,
            group=path.group,
            label=path.label,
        )
    line = path.expand(segments)
    return line.with_points([transform.point(pt) for pt in line.points])


class GenerationEngine:
    """Runs algorithms from a registry and post-processes their output.

    Example:
        engine = GenerationEngine(build_default_registry())
        result = engine.generate("lissajous", {"freqX": 3, "freqY": 2}, Bounds(400, 400))
    """

    def __init__(
        self,
        registry: AlgorithmRegistry,
        settings: KernelSettings | None = None,
        logger: GenerationLogger | None = None,
    ) -> None:
        self.registry = registry
        self.settings = settings or KernelSettings()
        self.generation_logger = logger or GenerationLogger()

    @property
    def stats(self) -> GenerationStats:
        return self.generation_logger.stats

    def resolve(self, algorithm_id: str, params: Mapping[str, Any] | AlgorithmParams | None = None):
        """Look up an algorithm and build its parameter model.

        Raises:
            UnknownAlgorithmError: If ``algorithm_id`` is not registered
        """
        algorithm = self.registry.get(algorithm_id)
        return algorithm, algorithm.resolve_params(params)

    def formula(self, algorithm_id: str, params: Mapping[str, Any] | AlgorithmParams | None = None) -> str:
        algorithm, resolved = self.resolve(algorithm_id, params)
        return algorithm.formula(resolved)

    def generate(
        self,
        algorithm_id: str,
        params: Mapping[str, Any] | AlgorithmParams | None = None,
        bounds: Bounds | None = None,
        images: ImageStore | None = None,
    ) -> GenerationResult:
        """Generate paths for one algorithm call.

        Args:
            algorithm_id: Registered algorithm id
            params: Flat parameter mapping (camelCase or snake_case) or a model
            bounds: Canvas bounds (400 x 400 with the default margin if None)
            images: Image sources for ``image`` noise layers

        Returns:
            Transformed and post-processed paths plus helper paths

        Raises:
            UnknownAlgorithmError: If ``algorithm_id`` is not registered
            DegenerateGeometryError: If the canvas has no area
        """
        bounds = bounds or Bounds(400.0, 400.0)
        if bounds.width <= 0 or bounds.height <= 0:
            raise DegenerateGeometryError(f"Canvas must have positive size, got {bounds.width}x{bounds.height}")

        start_time = time.time()
        stats = self.stats
        if stats.start_time is None:
            stats.start_time = start_time

        try:
            algorithm, resolved = self.resolve(algorithm_id, params)
        except Exception as e:
            self.generation_logger.log_error(algorithm_id, e)
            raise

        self.generation_logger.log_start(algorithm_id, resolved.seed)
        rng = SeededRng(resolved.seed)
        noise = NoiseField.from_seed(resolved.seed, images)
        try:
            raw = algorithm.generate(resolved, rng, noise, bounds)
        except Exception as e:
            self.generation_logger.log_error(algorithm_id, e)
            raise

        output = self.post_process(algorithm_id, raw, resolved, bounds)
        stats.end_time = time.time()
        _, points = count_points(output.paths)
        self.generation_logger.log_complete(
            algorithm_id=algorithm_id,
            path_count=len(output.paths),
            point_count=points,
            helper_count=len(output.helpers),
            duration_ms=(stats.end_time - start_time) * 1000,
        )
        return output

    def post_process(
        self,
        algorithm_id: str,
        raw: GenerationResult,
        params: AlgorithmParams,
        bounds: Bounds,
    ) -> GenerationResult:
        """Transform, smooth and simplify generated paths.

        Helper paths are transformed so they stay aligned with the artwork,
        but are neither smoothed nor simplified.
        """
        render = self.settings.render
        segments = self.settings.geometry.circle_segments
        smoothing = params.smoothing if params.smoothing is not None else render.smoothing
        simplify = params.simplify if params.simplify is not None else render.simplify
        simplifier = simplify_visvalingam if render.simplify_method is SimplifyMethod.VISVALINGAM else simplify_rdp

        transform = LayerTransform.from_params(params, bounds)
        if smoothing or simplify:
            self.generation_logger.log_post_process(algorithm_id, smoothing, simplify)

        paths: list[Path] = []
        for path in raw.paths:
            moved = transform_path(path, transform, segments)
            if isinstance(moved, Polyline):
                moved = simplifier(smooth_path(moved, smoothing), simplify)
            paths.append(moved)
        helpers = [transform_path(path, transform, segments) for path in raw.helpers]
        return GenerationResult(paths=paths, helpers=helpers)

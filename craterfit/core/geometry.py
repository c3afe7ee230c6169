from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ..components.target import Target
from ..constants import (
    _CLIP_EPSILON,
    _CRATER_SCALE,
    _DEPTH_SCALE,
    _MIN_SCENE_SIZE,
    _SCENE_RADIUS,
    FloatLike,
)
from .base import DataError


@dataclass(frozen=True, slots=True)
class SceneGeometry:
    """
    Crater depth and radius in scene units, clamped to [min_size, max_crater].
    """

    depth: float
    radius: float
    max_crater: float
    min_size: float = _MIN_SCENE_SIZE

    def __str__(self) -> str:
        return f"<SceneGeometry>\nDepth: {self.depth:.4f}\nRadius: {self.radius:.4f}\nLimits: [{self.min_size}, {self.max_crater:.4f}]"

    def as_tuple(self) -> tuple[float, float]:
        return self.depth, self.radius


def max_crater_size(
    host_radius: FloatLike = _SCENE_RADIUS,
    target: Target | str | None = None,
    crater_scale: FloatLike = _CRATER_SCALE,
) -> float:
    """
    The largest crater dimension that may be drawn on the host sphere, in scene units.

    The real diameter of the target body is converted into scene units and multiplied by `crater_scale`.

    Parameters
    ----------
    host_radius : FloatLike, default 2.0
        Radius of the host sphere in scene units.
    target : Target or str, optional
        The target body. Default is Earth.
    crater_scale : FloatLike, default 0.35
        Fraction of the host diameter that bounds the crater size.

    Returns
    -------
    float
    """
    if crater_scale <= 0:
        raise ValueError("crater_scale must be positive")
    target = Target.maker(target)
    max_crater = crater_scale * target.diameter * target.scene_scale(host_radius)
    if max_crater < _MIN_SCENE_SIZE:
        raise ValueError(f"crater_scale is too small: the largest crater ({max_crater}) is below {_MIN_SCENE_SIZE}")
    return max_crater


def clamp_to_scene(
    depth: FloatLike | SceneGeometry,
    radius: FloatLike | None = None,
    host_radius: FloatLike = _SCENE_RADIUS,
    target: Target | str | None = None,
    crater_scale: FloatLike = _CRATER_SCALE,
    depth_scale: FloatLike = _DEPTH_SCALE,
) -> SceneGeometry:
    """
    Convert a predicted crater into bounded scene units.

    The depth is divided by `depth_scale` (cm to scene units), then the depth and the radius are each clamped to
    [0.01, max_crater] independently of one another.

    Parameters
    ----------
    depth : FloatLike or SceneGeometry
        The predicted depth in cm. If a SceneGeometry is passed, it is already in scene units and is only re-clamped, which
        makes the operation idempotent.
    radius : FloatLike, optional
        The predicted radius in scene units. Required unless `depth` is a SceneGeometry.
    host_radius : FloatLike, default 2.0
        Radius of the host sphere in scene units.
    target : Target or str, optional
        The target body that sets the unit conversion. Default is Earth.
    crater_scale : FloatLike, default 0.35
        Fraction of the host diameter that bounds the crater size.
    depth_scale : FloatLike, default 100.0
        Divisor converting the input depth into scene units.

    Returns
    -------
    SceneGeometry

    Raises
    ------
    DataError
        If depth or radius is NaN.
    """
    max_crater = max_crater_size(host_radius=host_radius, target=target, crater_scale=crater_scale)
    if isinstance(depth, SceneGeometry):
        radius = depth.radius
        scene_depth = depth.depth
    else:
        if radius is None:
            raise TypeError("radius is required unless a SceneGeometry is passed")
        if depth_scale <= 0:
            raise ValueError("depth_scale must be positive")
        scene_depth = depth / depth_scale

    if math.isnan(scene_depth) or math.isnan(radius):
        raise DataError("Cannot map a NaN crater size into the scene")

    return SceneGeometry(
        depth=float(np.clip(scene_depth, _MIN_SCENE_SIZE, max_crater)),
        radius=float(np.clip(radius, _MIN_SCENE_SIZE, max_crater)),
        max_crater=max_crater,
    )


@dataclass(frozen=True, slots=True)
class CraterCavity:
    """
    A half sphere carved into the host sphere.

    The flat face of the half sphere points outward along +y and its apex sits at a height of
    `host_radius - geometry.depth` on the y axis. Any part of the cavity farther than `host_radius + epsilon` from the
    host center is discarded so that it never pokes through the host sphere.
    """

    geometry: SceneGeometry
    host_radius: float = _SCENE_RADIUS
    epsilon: float = _CLIP_EPSILON

    @property
    def radius(self) -> float:
        return self.geometry.radius

    @property
    def apex(self) -> NDArray[np.float64]:
        return np.array([0.0, self.host_radius - self.geometry.depth, 0.0])

    @property
    def center(self) -> NDArray[np.float64]:
        """Center of the flat face of the half sphere."""
        return self.apex + np.array([0.0, self.radius, 0.0])

    def points(self, resolution: int = 64) -> NDArray[np.float64]:
        """
        Sample points on the curved surface of the half sphere.

        Parameters
        ----------
        resolution : int, default 64
            Number of divisions in both the azimuthal and the polar direction.

        Returns
        -------
        NDArray[np.float64]
            An (N, 3) array of points. The points are not clipped.
        """
        if resolution < 2:
            raise ValueError("resolution must be at least 2")
        azimuth = np.linspace(0.0, 2 * np.pi, resolution, endpoint=False)
        # polar angle measured from +y; the lower half faces into the host
        polar = np.linspace(0.5 * np.pi, np.pi, resolution)
        az, pol = np.meshgrid(azimuth, polar)
        xyz = np.column_stack(
            [
                self.radius * np.sin(pol).ravel() * np.cos(az).ravel(),
                self.radius * np.cos(pol).ravel(),
                self.radius * np.sin(pol).ravel() * np.sin(az).ravel(),
            ]
        )
        return xyz + self.center

    def inside_host(self, points: ArrayLike) -> NDArray[np.bool_]:
        """
        Mask of the points that are kept when the cavity is drawn.

        Parameters
        ----------
        points : ArrayLike
            An (N, 3) array of points in scene units.

        Returns
        -------
        NDArray[np.bool_]
        """
        points = np.atleast_2d(np.asarray(points, dtype=np.float64))
        return np.linalg.norm(points, axis=1) <= self.host_radius + self.epsilon

    def visible_points(self, resolution: int = 64) -> NDArray[np.float64]:
        points = self.points(resolution)
        return points[self.inside_host(points)]

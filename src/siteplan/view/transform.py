"""Homogeneous 4x4 transforms for the site-to-screen mapping.

Matrices follow the CSS transform conventions: y grows downwards, a
transform list is applied right to left, and ``perspective(d)`` puts
``-1/d`` into the w row so that points further from the viewer shrink.
"""

from __future__ import annotations

import math

import numpy as np
from pydantic import BaseModel, ConfigDict

from siteplan.core.types import Point, RotationMode


def identity() -> np.ndarray:
    return np.eye(4)


def translate(tx: float, ty: float, tz: float = 0.0) -> np.ndarray:
    m = np.eye(4)
    m[0, 3] = tx
    m[1, 3] = ty
    m[2, 3] = tz
    return m


def scale(s: float) -> np.ndarray:
    return np.diag([s, s, s, 1.0])


def rotate_x(degrees: float) -> np.ndarray:
    a = math.radians(degrees)
    c, s = math.cos(a), math.sin(a)
    return np.array(
        [
            [1.0, 0.0, 0.0, 0.0],
            [0.0, c, -s, 0.0],
            [0.0, s, c, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def rotate_z(degrees: float) -> np.ndarray:
    a = math.radians(degrees)
    c, s = math.cos(a), math.sin(a)
    return np.array(
        [
            [c, -s, 0.0, 0.0],
            [s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def perspective(distance: float) -> np.ndarray:
    m = np.eye(4)
    m[3, 2] = -1.0 / distance
    return m


def _num(value: float) -> str:
    return f"{value:g}"


class PerspectiveParams(BaseModel):
    """Parameters of the tilted 3D view."""

    model_config = ConfigDict(frozen=True)

    perspective: float
    rotate_x: float
    rotate_z: float
    scale: float = 1.0
    translate_x: float = 0.0
    translate_y: float = 0.0

    def matrix(self) -> np.ndarray:
        return (
            perspective(self.perspective)
            @ rotate_x(self.rotate_x)
            @ rotate_z(self.rotate_z)
            @ scale(self.scale)
            @ translate(self.translate_x, self.translate_y)
        )

    def css(self) -> str:
        parts = [
            f"perspective({_num(self.perspective)}px)",
            f"rotateX({_num(self.rotate_x)}deg)",
            f"rotateZ({_num(self.rotate_z)}deg)",
            f"scale({_num(self.scale)})",
        ]
        if self.translate_x or self.translate_y:
            parts.append(f"translate({_num(self.translate_x)}px, {_num(self.translate_y)}px)")
        return " ".join(parts)


TILTED = PerspectiveParams(perspective=700, rotate_x=40, rotate_z=-18)
NORTH_UP_TILTED = PerspectiveParams(
    perspective=900,
    rotate_x=42,
    rotate_z=-56,
    scale=0.82,
    translate_x=50,
    translate_y=-20,
)

ROTATION_PARAMS: dict[RotationMode, PerspectiveParams | None] = {
    RotationMode.FLAT: None,
    RotationMode.TILTED: TILTED,
    RotationMode.NORTH_UP_TILTED: NORTH_UP_TILTED,
}


class ScreenTransform:
    """Composed site-to-screen mapping.

    ``screen = T(viewport_center) . T(pan) . S(zoom) . R(rotation) . T(-site_center)``

    The rotation layer acts on site content about the site centre; pan and
    zoom act afterwards about the viewport centre, so panning and zooming
    stay screen-relative whatever the rotation.
    """

    def __init__(
        self,
        pan: Point,
        zoom: float,
        rotation: RotationMode,
        site_center: Point,
        viewport_center: Point,
    ) -> None:
        self.pan = pan
        self.zoom = zoom
        self.rotation = rotation
        self.site_center = site_center
        self.viewport_center = viewport_center
        self.params = ROTATION_PARAMS[rotation]

        rotation_matrix = self.params.matrix() if self.params else identity()
        self.matrix: np.ndarray = (
            translate(viewport_center.x, viewport_center.y)
            @ translate(pan.x, pan.y)
            @ scale(zoom)
            @ rotation_matrix
            @ translate(-site_center.x, -site_center.y)
        )

    def _homography(self) -> np.ndarray:
        # Site content lies on z = 0, so the z column and row drop out.
        return self.matrix[np.ix_([0, 1, 3], [0, 1, 3])]

    def apply(self, x: float, y: float) -> Point:
        """Map a site-space point to screen space."""
        sx, sy, w = self._homography() @ np.array([x, y, 1.0])
        return Point(x=float(sx / w), y=float(sy / w))

    def invert(self, sx: float, sy: float) -> Point | None:
        """Map a screen point back onto the site plane.

        Returns None when the point has no preimage in front of the viewer.
        """
        h = self._homography()
        try:
            inverse = np.linalg.inv(h)
        except np.linalg.LinAlgError:
            return None
        x, y, w = inverse @ np.array([sx, sy, 1.0])
        if abs(w) < 1e-12:
            return None
        site = np.array([x / w, y / w, 1.0])
        if (h @ site)[2] <= 0:
            return None
        return Point(x=float(site[0]), y=float(site[1]))

    def outer_css(self) -> str:
        return f"translate({_num(self.pan.x)}px,{_num(self.pan.y)}px) scale({_num(self.zoom)})"

    def inner_css(self) -> str:
        return self.params.css() if self.params else "none"

    def to_dict(self) -> dict:
        return {
            "matrix": self.matrix.tolist(),
            "rotation_mode": self.rotation.value,
            "outer_css": self.outer_css(),
            "inner_css": self.inner_css(),
        }

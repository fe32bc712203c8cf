from __future__ import annotations
import math
import numpy as np


def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x


def lerp(t: float, a, b):
    """Linear interpolation a→b at weight t (t=0 → a, t=1 → b)."""
    return (1.0 - t) * a + t * b


def wrap_mod(x: float, m: float) -> float:
    """
    Remainder with the sign of the dividend (C/Java '%' semantics).
    Texture offsets scrolled backwards stay negative instead of jumping to m.
    """
    return math.fmod(x, m)


def rotation_matrix(axis: tuple[float, float, float], angle: float) -> np.ndarray:
    """
    Right-handed rotation of `angle` radians about a unit `axis` (Rodrigues).
    Returns a (3, 3) float64 matrix to be applied as M @ v.
    """
    x, y, z = axis
    c = math.cos(angle)
    s = math.sin(angle)
    omc = 1.0 - c
    return np.array([
        [x*x*omc + c,   x*y*omc - z*s, x*z*omc + y*s],
        [x*y*omc + z*s, y*y*omc + c,   y*z*omc - x*s],
        [x*z*omc - y*s, y*z*omc + x*s, z*z*omc + c],
    ], dtype=np.float64)


AXIS_X = (1.0, 0.0, 0.0)
AXIS_Y = (0.0, 1.0, 0.0)
AXIS_Z = (0.0, 0.0, 1.0)

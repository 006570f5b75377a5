"""
Bilinear Sampler - color lookup at fractional coordinates

A coordinate is valid when all four integer neighbors exist:
0 <= x < W - 1 and 0 <= y < H - 1. Invalid coordinates (including NaN)
produce no color.
"""

import numpy as np
from typing import Optional, Tuple


def valid_sample_region(map_x: np.ndarray, map_y: np.ndarray, width: int, height: int) -> np.ndarray:
    """Boolean map of coordinates the sampler accepts"""
    # Written as positive comparisons so NaN ends up invalid
    return (map_x >= 0) & (map_y >= 0) & (map_x < width - 1) & (map_y < height - 1)


def sample_bilinear_map(frame: np.ndarray, map_x: np.ndarray,
                        map_y: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Bilinearly sample a frame at a grid of fractional coordinates

    Args:
        frame: Source image (H, W, C) or (H, W), uint8
        map_x: X coordinates, any shape S
        map_y: Y coordinates, same shape S

    Returns:
        (colors, valid): colors is uint8 with shape S + (C,) (or S for a
        single-channel frame), rounded to nearest and clamped to [0, 255];
        invalid entries are 0. valid is a boolean array of shape S.
    """
    height, width = frame.shape[:2]
    map_x = np.asarray(map_x, dtype=np.float32)
    map_y = np.asarray(map_y, dtype=np.float32)

    out_shape = map_x.shape + frame.shape[2:]

    if width < 2 or height < 2:
        return np.zeros(out_shape, dtype=np.uint8), np.zeros(map_x.shape, dtype=bool)

    valid = valid_sample_region(map_x, map_y, width, height)

    x = np.where(valid, map_x, np.float32(0))
    y = np.where(valid, map_y, np.float32(0))

    x0 = np.floor(x).astype(np.intp)
    y0 = np.floor(y).astype(np.intp)
    dx = x - x0
    dy = y - y0

    if frame.ndim == 3:
        dx = dx[..., np.newaxis]
        dy = dy[..., np.newaxis]

    source = frame.astype(np.float32)
    p00 = source[y0, x0]
    p01 = source[y0, x0 + 1]
    p10 = source[y0 + 1, x0]
    p11 = source[y0 + 1, x0 + 1]

    r0 = p00 * (1.0 - dx) + p01 * dx
    r1 = p10 * (1.0 - dx) + p11 * dx
    r = r0 * (1.0 - dy) + r1 * dy

    colors = np.clip(np.rint(r), 0, 255).astype(np.uint8)
    colors[~valid] = 0

    return colors, valid


def sample_bilinear(frame: np.ndarray, x: float, y: float) -> Optional[np.ndarray]:
    """
    Bilinearly sample a frame at one fractional coordinate

    Args:
        frame: Source image (H, W, 3), uint8
        x, y: Coordinates in pixels

    Returns:
        Color as a uint8 array (3,), or None if (x, y) is outside the valid
        sampling domain
    """
    colors, valid = sample_bilinear_map(frame, np.array([x], dtype=np.float32),
                                        np.array([y], dtype=np.float32))
    if not valid[0]:
        return None
    return colors[0]

"""
Frame utilities - validation and intensity conversion for frame pairs
"""

import cv2
import numpy as np
from typing import Tuple


class ContractViolation(AssertionError):
    """
    Raised when a stage receives data of the wrong layout.

    Signals a caller bug (wrong channel count, wrong dtype, mismatched sizes
    between already validated buffers) rather than bad user input.
    """


def is_empty(frame) -> bool:
    """Check whether a frame buffer is missing or has no pixels"""
    return frame is None or not isinstance(frame, np.ndarray) or frame.size == 0 or frame.ndim < 2


def validate_frame_pair(frame0: np.ndarray, frame1: np.ndarray) -> Tuple[int, int]:
    """
    Check that two frames can be compared or combined

    Args:
        frame0: First frame (H, W) or (H, W, C)
        frame1: Second frame (H, W) or (H, W, C)

    Returns:
        (height, width) shared by both frames

    Raises:
        ValueError: If a frame is empty or the sizes differ
    """
    if is_empty(frame0) or is_empty(frame1):
        raise ValueError("One or both input frames are empty")

    if frame0.shape[:2] != frame1.shape[:2]:
        raise ValueError(f"Input frames must have the same size, "
                         f"got {frame0.shape[1]}x{frame0.shape[0]} and "
                         f"{frame1.shape[1]}x{frame1.shape[0]}")

    return frame0.shape[0], frame0.shape[1]


def to_grayscale(frame: np.ndarray) -> np.ndarray:
    """
    Reduce a frame to single-channel intensity

    Color frames are expected in OpenCV BGR order and go through the
    standard luma transform. Single-channel frames are copied.

    Args:
        frame: Frame (H, W), (H, W, 1), (H, W, 3) or (H, W, 4)

    Returns:
        Intensity image (H, W) with the input dtype
    """
    if frame.ndim == 2:
        return frame.copy()

    channels = frame.shape[2]
    if channels == 1:
        return frame[:, :, 0].copy()
    if channels == 3:
        return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(frame, cv2.COLOR_BGRA2GRAY)

    raise ValueError(f"Unsupported number of channels: {channels}")


def to_grayscale_u8(frame: np.ndarray) -> np.ndarray:
    """Intensity image as uint8, as required by the OpenCV flow solvers"""
    gray = to_grayscale(frame)
    if gray.dtype != np.uint8:
        gray = np.clip(np.rint(gray), 0, 255).astype(np.uint8)
    return gray


def require_color_frame(frame: np.ndarray, name: str = "frame"):
    """Contract check for 3-channel 8-bit frames"""
    if not isinstance(frame, np.ndarray) or frame.dtype != np.uint8 \
            or frame.ndim != 3 or frame.shape[2] != 3 or frame.size == 0:
        description = getattr(frame, 'shape', type(frame).__name__)
        dtype = getattr(frame, 'dtype', None)
        raise ContractViolation(f"{name} must be a non-empty uint8 (H, W, 3) array, "
                                f"got {description} {dtype}")

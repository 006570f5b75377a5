"""
Occlusion Detector - forward/backward flow consistency check

A pixel is trusted when the forward flow and the negated backward flow agree
to within a threshold. Pixels that fail the check are usually occluded or
disoccluded between the two frames.
"""

import cv2
import numpy as np
from typing import Optional, Tuple

from processing.frame_utils import ContractViolation
from processing.flow_fields import ForwardFlow, BackwardFlow, require_flow
from processing.base_flow_estimator import BaseFlowEstimator
from processing.farneback_estimator import FarnebackFlowEstimator


DEFAULT_THRESHOLD = 1.0


class OcclusionMask:
    """
    Per-pixel consistency mask (H, W), float32

    1.0 marks pixels whose forward and backward flow agree, 0.0 marks
    inconsistent (occluded) pixels. The buffer is read-only.
    """

    def __init__(self, data: np.ndarray):
        data = np.asarray(data)
        if data.ndim != 2 or data.size == 0:
            raise ContractViolation(f"Occlusion mask must be a non-empty (H, W) array, got {data.shape}")

        data = np.array(data, dtype=np.float32)
        data.flags.writeable = False
        self.data = data

    @property
    def shape(self) -> Tuple[int, int]:
        return self.data.shape

    @property
    def size(self) -> Tuple[int, int]:
        return self.data.shape

    def consistent(self) -> np.ndarray:
        """Boolean map of trusted pixels"""
        return self.data >= 0.5

    def valid_fraction(self) -> float:
        """Fraction of pixels marked consistent"""
        return float(np.mean(self.consistent()))

    def __repr__(self):
        return f"OcclusionMask({self.data.shape[1]}x{self.data.shape[0]}, valid={self.valid_fraction():.3f})"


def _check_threshold(threshold: float):
    if threshold <= 0:
        raise ValueError(f"Occlusion threshold must be positive, got {threshold}")


def compute_occlusion_mask(forward: ForwardFlow, backward: BackwardFlow,
                           threshold: float = DEFAULT_THRESHOLD) -> OcclusionMask:
    """
    Mark pixels where forward and backward flow are consistent

    Args:
        forward: Flow frame0 -> frame1
        backward: Flow frame1 -> frame0, same size
        threshold: Maximum disagreement in pixels

    Returns:
        OcclusionMask with 1.0 where |vf - (-vb)| < threshold, else 0.0
    """
    require_flow(forward, ForwardFlow, "forward")
    require_flow(backward, BackwardFlow, "backward")
    if forward.size != backward.size:
        raise ContractViolation(f"Forward and backward flow sizes differ: "
                                f"{forward.size} vs {backward.size}")
    _check_threshold(threshold)

    neg_backward = -backward.data
    diff = cv2.absdiff(forward.data, neg_backward)

    diff_x, diff_y = cv2.split(diff)
    diff_magnitude = cv2.magnitude(diff_x, diff_y)

    mask = (diff_magnitude < threshold).astype(np.float32)
    return OcclusionMask(mask)


def compute_occlusion_mask_from_frames(frame0: np.ndarray, frame1: np.ndarray,
                                       threshold: float = DEFAULT_THRESHOLD) -> OcclusionMask:
    """
    Estimate forward/backward Farneback flow internally and check consistency

    Args:
        frame0, frame1: Frames of identical size, grayscale or BGR
        threshold: Maximum disagreement in pixels

    Returns:
        OcclusionMask

    Raises:
        ValueError: If a frame is empty or the sizes differ
    """
    return OcclusionDetector(threshold).detect_from_frames(frame0, frame1)


class OcclusionDetector:
    """Consistency-based occlusion detection with a configurable threshold"""

    def __init__(self, threshold: float = DEFAULT_THRESHOLD,
                 estimator: Optional[BaseFlowEstimator] = None):
        """
        Args:
            threshold: Maximum forward/backward disagreement in pixels
            estimator: Flow estimator for detect_from_frames (Farneback with
                       default parameters when None)
        """
        _check_threshold(threshold)
        self.threshold = threshold
        self.estimator = estimator if estimator is not None else FarnebackFlowEstimator()

    def detect(self, forward: ForwardFlow, backward: BackwardFlow) -> OcclusionMask:
        """Consistency mask from precomputed flows"""
        return compute_occlusion_mask(forward, backward, self.threshold)

    def detect_from_frames(self, frame0: np.ndarray, frame1: np.ndarray) -> OcclusionMask:
        """Consistency mask from raw frames"""
        forward, backward = self.estimator.compute_bidirectional(frame0, frame1)
        return self.detect(forward, backward)

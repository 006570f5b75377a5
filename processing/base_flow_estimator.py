"""
Base class for interchangeable optical flow estimators

Every estimator computes dense single-direction flow between two intensity
images; the base class turns that into the forward, backward and symmetric
flows the interpolation pipeline consumes.

Architecture:
- calc_flow: strategy-specific dense flow on uint8 intensity images
- compute_forward / compute_backward / compute_bidirectional: validated,
  tagged single-direction flows
- compute_symmetric: midpoint flow, half of the forward/backward consensus
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, Tuple
import numpy as np

from .frame_utils import validate_frame_pair, to_grayscale_u8
from .flow_fields import ForwardFlow, BackwardFlow, SymmetricFlow, symmetric_from_bidirectional


class BaseFlowEstimator(ABC):
    """
    Abstract base class for dense optical flow estimation

    Estimators are stateless between calls: any solver object is created per
    call, so one instance can be reused for any number of frame pairs.
    """

    name = 'base'

    def __init__(self, params=None):
        """
        Initialize estimator

        Args:
            params: Algorithm parameter object (see config module)
        """
        self.params = params

    @abstractmethod
    def calc_flow(self, gray_from: np.ndarray, gray_to: np.ndarray) -> np.ndarray:
        """
        Compute dense flow from one intensity image to another

        Args:
            gray_from: Source image (H, W), uint8
            gray_to: Target image (H, W), uint8

        Returns:
            flow: float32 array (H, W, 2), [dx, dy] such that
                  gray_from(p) ~ gray_to(p + flow(p))
        """
        pass

    def _prepare_pair(self, frame0: np.ndarray, frame1: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """Validate a frame pair and reduce both frames to intensity"""
        validate_frame_pair(frame0, frame1)
        return to_grayscale_u8(frame0), to_grayscale_u8(frame1)

    def compute_forward(self, frame0: np.ndarray, frame1: np.ndarray) -> ForwardFlow:
        """
        Compute forward flow only (frame0 -> frame1)

        Args:
            frame0, frame1: Frames of identical size, grayscale or BGR

        Returns:
            ForwardFlow (H, W, 2)

        Raises:
            ValueError: If a frame is empty or the sizes differ
        """
        gray0, gray1 = self._prepare_pair(frame0, frame1)
        return ForwardFlow(self.calc_flow(gray0, gray1))

    def compute_backward(self, frame0: np.ndarray, frame1: np.ndarray) -> BackwardFlow:
        """Compute backward flow (frame1 -> frame0) on the same pixel grid"""
        gray0, gray1 = self._prepare_pair(frame0, frame1)
        return BackwardFlow(self.calc_flow(gray1, gray0))

    def compute_bidirectional(self, frame0: np.ndarray,
                              frame1: np.ndarray) -> Tuple[ForwardFlow, BackwardFlow]:
        """
        Compute forward and backward flow independently

        Args:
            frame0, frame1: Frames of identical size, grayscale or BGR

        Returns:
            (forward, backward) flows

        Raises:
            ValueError: If a frame is empty or the sizes differ
        """
        gray0, gray1 = self._prepare_pair(frame0, frame1)
        forward = ForwardFlow(self.calc_flow(gray0, gray1))
        backward = BackwardFlow(self.calc_flow(gray1, gray0))
        return forward, backward

    def compute_symmetric(self, frame0: np.ndarray, frame1: np.ndarray,
                          regularizer=None) -> SymmetricFlow:
        """
        Compute symmetric midpoint flow

        Both directions are estimated independently and combined pointwise
        without warping (see symmetric_from_bidirectional).

        Args:
            frame0, frame1: Frames of identical size, grayscale or BGR
            regularizer: Optional flow regularizer; when given, forward flow
                         is smoothed with frame0 as guide and backward flow
                         with frame1 as guide before combination

        Returns:
            SymmetricFlow (H, W, 2)

        Raises:
            ValueError: If a frame is empty or the sizes differ
        """
        forward, backward = self.compute_bidirectional(frame0, frame1)

        if regularizer is not None:
            regularizer.smooth(frame0, forward)
            regularizer.smooth(frame1, backward)

        return symmetric_from_bidirectional(forward, backward)

    @staticmethod
    def combine_symmetric(forward: ForwardFlow, backward: BackwardFlow) -> SymmetricFlow:
        """Combine precomputed forward and backward flow into midpoint flow"""
        return symmetric_from_bidirectional(forward, backward)

    def get_info(self) -> Dict[str, Any]:
        """Get information about the estimator and its parameters"""
        params: Optional[Dict[str, Any]] = None
        if self.params is not None:
            params = self.params.to_dict()

        return {
            "algorithm": self.name,
            "estimator": self.__class__.__name__,
            "params": params
        }

    def __repr__(self):
        return f"{self.__class__.__name__}()"

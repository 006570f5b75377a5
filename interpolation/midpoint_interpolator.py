"""
Midpoint Interpolator - end-to-end frame interpolation pipeline

Estimator -> (Regularizer, Occlusion Detector) -> Synthesizer, wired from an
InterpolationConfig.
"""

import numpy as np
from typing import List, Optional, Dict, Any
from tqdm import tqdm

from config.interpolation_config import InterpolationConfig
from processing.frame_utils import validate_frame_pair
from processing.flow_fields import ForwardFlow, BackwardFlow, SymmetricFlow, symmetric_from_bidirectional
from processing.flow_estimator_factory import FlowEstimatorFactory
from filtering.flow_regularizer import create_regularizer
from occlusion.occlusion_detector import OcclusionDetector, OcclusionMask
from .frame_synthesizer import FrameSynthesizer, branch_statistics


class InterpolationResult:
    """Output frame of one frame pair plus the intermediate fields that produced it"""

    def __init__(self, frame: np.ndarray, branch_map: np.ndarray,
                 forward_flow: Optional[ForwardFlow] = None,
                 backward_flow: Optional[BackwardFlow] = None,
                 symmetric_flow: Optional[SymmetricFlow] = None,
                 occlusion_mask: Optional[OcclusionMask] = None):
        self.frame = frame
        self.branch_map = branch_map
        self.forward_flow = forward_flow
        self.backward_flow = backward_flow
        self.symmetric_flow = symmetric_flow
        self.occlusion_mask = occlusion_mask

    def get_branch_statistics(self) -> Dict[str, float]:
        """Fraction of output pixels per synthesis branch"""
        return branch_statistics(self.branch_map)

    def __repr__(self):
        height, width = self.frame.shape[:2]
        return f"InterpolationResult({width}x{height})"


class MidpointInterpolator:
    """
    Midpoint frame interpolation between two frames

    Stateless between calls: every call estimates fresh flows, and the
    components hold only their configuration.
    """

    def __init__(self, config: Optional[InterpolationConfig] = None):
        """
        Initialize pipeline components

        Args:
            config: Pipeline configuration (defaults: Farneback flow, joint
                    bilateral regularization, occlusion handling enabled)

        Raises:
            ValueError: If the configuration is invalid
        """
        self.config = config if config is not None else InterpolationConfig()
        self.config.validate()

        self.estimator = FlowEstimatorFactory.create_from_config(self.config)
        self.regularizer = create_regularizer(self.config.regularizer, self.config.regularizer_params)
        self.detector = None
        if self.config.occlusion.enabled:
            self.detector = OcclusionDetector(self.config.occlusion.threshold, self.estimator)
        self.synthesizer = FrameSynthesizer()

    def interpolate(self, frame0: np.ndarray, frame1: np.ndarray) -> InterpolationResult:
        """
        Interpolate the frame halfway between frame0 and frame1

        Args:
            frame0: First frame (H, W, 3), uint8, BGR
            frame1: Second frame, same size and type

        Returns:
            InterpolationResult

        Raises:
            ValueError: If a frame is empty or the sizes differ
        """
        validate_frame_pair(frame0, frame1)

        forward, backward = self.estimator.compute_bidirectional(frame0, frame1)

        if self.regularizer is not None:
            self.regularizer.smooth(frame0, forward)
            self.regularizer.smooth(frame1, backward)

        mask = None
        if self.detector is not None:
            mask = self.detector.detect(forward, backward)

        symmetric = symmetric_from_bidirectional(forward, backward)

        frame, branch_map = self.synthesizer.interpolate_symmetric(
            frame0, frame1, symmetric, mask, return_branches=True
        )

        return InterpolationResult(frame, branch_map, forward, backward, symmetric, mask)

    def interpolate_forward_only(self, frame0: np.ndarray, frame1: np.ndarray) -> InterpolationResult:
        """
        Cheaper interpolation from forward flow only (no backward pass)

        Args:
            frame0: First frame (H, W, 3), uint8, BGR
            frame1: Second frame, same size and type

        Returns:
            InterpolationResult without backward/symmetric flow and mask
        """
        forward = self.estimator.compute_forward(frame0, frame1)

        if self.regularizer is not None:
            self.regularizer.smooth(frame0, forward)

        frame, branch_map = self.synthesizer.interpolate_forward_only(
            frame0, frame1, forward, return_branches=True
        )

        return InterpolationResult(frame, branch_map, forward_flow=forward)

    def interpolate_sequence(self, frames: List[np.ndarray], forward_only: bool = False,
                             show_progress: bool = True) -> List[np.ndarray]:
        """
        Interpolate a midpoint between every consecutive pair of frames

        Args:
            frames: Frames in temporal order
            forward_only: Use the forward-only path
            show_progress: Show a tqdm progress bar

        Returns:
            len(frames) - 1 midpoint frames; midpoint i lies between frames
            i and i + 1
        """
        if len(frames) < 2:
            raise ValueError(f"Need at least 2 frames to interpolate, got {len(frames)}")

        interpolate_pair = self.interpolate_forward_only if forward_only else self.interpolate

        midpoints = []
        with tqdm(total=len(frames) - 1, desc="Interpolating frames", disable=not show_progress) as pbar:
            for i in range(len(frames) - 1):
                result = interpolate_pair(frames[i], frames[i + 1])
                midpoints.append(result.frame)
                pbar.update(1)

        return midpoints

    def get_info(self) -> Dict[str, Any]:
        """Describe the configured pipeline"""
        return {
            "estimator": self.estimator.get_info(),
            "regularizer": self.regularizer.get_info() if self.regularizer is not None else None,
            "occlusion_threshold": self.detector.threshold if self.detector is not None else None,
            "config": self.config.to_dict()
        }

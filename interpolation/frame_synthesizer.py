"""
Frame Synthesizer - midpoint frame from two frames and their motion

Every output pixel follows its motion trajectory back into frame0 and
forward into frame1 and is produced by exactly one branch:

- BRANCH_BLEND:    both samples valid, unweighted average
- BRANCH_FRAME0:   only the frame0 sample is used
- BRANCH_FRAME1:   only the frame1 sample is used
- BRANCH_FALLBACK: no trajectory sample, average of both frames at the
                   untranslated pixel (plain cross-dissolve)

With an occlusion mask, pixels marked inconsistent never average the two
trajectory samples: the side whose trajectory endpoint lands on the more
trusted pixel wins (frame0 on equal trust), and when neither endpoint is
trusted the pixel falls back to the cross-dissolve.
"""

import numpy as np
from typing import Optional, Tuple, Union

from processing.frame_utils import ContractViolation, require_color_frame
from processing.flow_fields import FlowField, ForwardFlow, SymmetricFlow, require_flow
from occlusion.occlusion_detector import OcclusionMask
from .bilinear_sampler import sample_bilinear_map


BRANCH_BLEND = 0
BRANCH_FRAME0 = 1
BRANCH_FRAME1 = 2
BRANCH_FALLBACK = 3

BRANCH_NAMES = {
    BRANCH_BLEND: 'blend',
    BRANCH_FRAME0: 'frame0',
    BRANCH_FRAME1: 'frame1',
    BRANCH_FALLBACK: 'fallback'
}


def average_frames(frame0: np.ndarray, frame1: np.ndarray) -> np.ndarray:
    """Per-channel truncating average of two uint8 images"""
    return ((frame0.astype(np.uint16) + frame1.astype(np.uint16)) // 2).astype(np.uint8)


def branch_statistics(branch_map: np.ndarray) -> dict:
    """Fraction of pixels produced by each branch"""
    total = branch_map.size
    return {name: float(np.count_nonzero(branch_map == code)) / total
            for code, name in BRANCH_NAMES.items()}


class FrameSynthesizer:
    """Bidirectional trajectory resampling at the temporal midpoint"""

    def __init__(self, occlusion_cutoff: float = 0.5):
        """
        Args:
            occlusion_cutoff: Mask values below this mark a pixel as occluded
        """
        self.occlusion_cutoff = occlusion_cutoff

    @staticmethod
    def _check_inputs(frame0: np.ndarray, frame1: np.ndarray, flow: FlowField, flow_type: type,
                      flow_name: str):
        require_color_frame(frame0, "frame0")
        require_color_frame(frame1, "frame1")
        if frame0.shape != frame1.shape:
            raise ContractViolation(f"Frame shapes differ: {frame0.shape} vs {frame1.shape}")

        require_flow(flow, flow_type, flow_name)
        if flow.size != frame0.shape[:2]:
            raise ContractViolation(f"Flow size {flow.size} does not match "
                                    f"frame size {frame0.shape[:2]}")

    @staticmethod
    def _pixel_grid(height: int, width: int) -> Tuple[np.ndarray, np.ndarray]:
        ys, xs = np.mgrid[0:height, 0:width]
        return xs.astype(np.float32), ys.astype(np.float32)

    @staticmethod
    def _compose(branch_map: np.ndarray, sources: dict) -> np.ndarray:
        """Pick every output pixel from the source of its branch"""
        any_source = next(iter(sources.values()))
        output = np.empty_like(any_source)
        for code, source in sources.items():
            selected = branch_map == code
            output[selected] = source[selected]
        return output

    @staticmethod
    def _endpoint_confidence(mask: np.ndarray, map_x: np.ndarray, map_y: np.ndarray) -> np.ndarray:
        """Mask value at the nearest pixel of each trajectory endpoint, 0 outside the frame"""
        height, width = mask.shape
        inside = (map_x > -0.5) & (map_y > -0.5) & (map_x < width - 0.5) & (map_y < height - 0.5)

        xi = np.clip(np.rint(np.where(inside, map_x, 0)), 0, width - 1).astype(np.intp)
        yi = np.clip(np.rint(np.where(inside, map_y, 0)), 0, height - 1).astype(np.intp)

        return np.where(inside, mask[yi, xi], np.float32(0))

    def interpolate_symmetric(self, frame0: np.ndarray, frame1: np.ndarray, flow: SymmetricFlow,
                              occlusion_mask: Optional[Union[OcclusionMask, np.ndarray]] = None,
                              return_branches: bool = False):
        """
        Synthesize the midpoint frame from symmetric flow

        Args:
            frame0: First frame (H, W, 3), uint8
            frame1: Second frame (H, W, 3), uint8
            flow: Symmetric flow (H, W, 2); frame0 is sampled at p - v and
                  frame1 at p + v
            occlusion_mask: Optional consistency mask (H, W)
            return_branches: Also return the per-pixel branch map

        Returns:
            Midpoint frame (H, W, 3) uint8, or (frame, branch_map) when
            return_branches is set

        Raises:
            ContractViolation: On wrong frame types, wrong flow type or
                               mismatched sizes
        """
        self._check_inputs(frame0, frame1, flow, SymmetricFlow, "flow")
        height, width = frame0.shape[:2]

        if occlusion_mask is not None and not isinstance(occlusion_mask, OcclusionMask):
            occlusion_mask = OcclusionMask(occlusion_mask)
        if occlusion_mask is not None and occlusion_mask.shape != (height, width):
            raise ContractViolation(f"Occlusion mask size {occlusion_mask.shape} does not match "
                                    f"frame size {(height, width)}")

        xs, ys = self._pixel_grid(height, width)
        x0, y0 = xs - flow.dx, ys - flow.dy
        x1, y1 = xs + flow.dx, ys + flow.dy

        color0, valid0 = sample_bilinear_map(frame0, x0, y0)
        color1, valid1 = sample_bilinear_map(frame1, x1, y1)

        branch_map = np.full((height, width), BRANCH_FALLBACK, dtype=np.int8)
        branch_map[valid0 & valid1] = BRANCH_BLEND
        branch_map[valid0 & ~valid1] = BRANCH_FRAME0
        branch_map[~valid0 & valid1] = BRANCH_FRAME1

        if occlusion_mask is not None:
            occluded = occlusion_mask.data < self.occlusion_cutoff
            contested = occluded & (branch_map == BRANCH_BLEND)
            if np.any(contested):
                confidence0 = self._endpoint_confidence(occlusion_mask.data, x0, y0)
                confidence1 = self._endpoint_confidence(occlusion_mask.data, x1, y1)
                trusted = np.maximum(confidence0, confidence1) >= self.occlusion_cutoff
                prefer_frame1 = confidence1 > confidence0
                branch_map[contested & trusted & prefer_frame1] = BRANCH_FRAME1
                branch_map[contested & trusted & ~prefer_frame1] = BRANCH_FRAME0
                branch_map[contested & ~trusted] = BRANCH_FALLBACK

        output = self._compose(branch_map, {
            BRANCH_BLEND: average_frames(color0, color1),
            BRANCH_FRAME0: color0,
            BRANCH_FRAME1: color1,
            BRANCH_FALLBACK: average_frames(frame0, frame1)
        })

        if return_branches:
            return output, branch_map
        return output

    def interpolate_forward_only(self, frame0: np.ndarray, frame1: np.ndarray, flow: ForwardFlow,
                                 return_branches: bool = False):
        """
        Synthesize the midpoint frame from forward flow alone

        frame0 is sampled at p - 0.5 * v; frame1 only contributes to the
        fallback average.

        Args:
            frame0: First frame (H, W, 3), uint8
            frame1: Second frame (H, W, 3), uint8
            flow: Forward flow frame0 -> frame1 (H, W, 2)
            return_branches: Also return the per-pixel branch map

        Returns:
            Midpoint frame, or (frame, branch_map) when return_branches is set
        """
        self._check_inputs(frame0, frame1, flow, ForwardFlow, "flow")
        height, width = frame0.shape[:2]

        xs, ys = self._pixel_grid(height, width)
        color0, valid0 = sample_bilinear_map(frame0, xs - 0.5 * flow.dx, ys - 0.5 * flow.dy)

        branch_map = np.where(valid0, BRANCH_FRAME0, BRANCH_FALLBACK).astype(np.int8)

        output = self._compose(branch_map, {
            BRANCH_FRAME0: color0,
            BRANCH_FALLBACK: average_frames(frame0, frame1)
        })

        if return_branches:
            return output, branch_map
        return output

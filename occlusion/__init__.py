"""
Occlusion module - forward/backward consistency masks
"""

from .occlusion_detector import (
    OcclusionMask,
    OcclusionDetector,
    compute_occlusion_mask,
    compute_occlusion_mask_from_frames
)

__all__ = [
    'OcclusionMask',
    'OcclusionDetector',
    'compute_occlusion_mask',
    'compute_occlusion_mask_from_frames'
]

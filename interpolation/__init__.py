"""
Interpolation module - midpoint frame synthesis

This module contains components for:
- Bilinear sampling at fractional coordinates
- Bidirectional (symmetric) and forward-only frame synthesis
- The end-to-end MidpointInterpolator pipeline
"""

from .bilinear_sampler import sample_bilinear, sample_bilinear_map
from .frame_synthesizer import (
    FrameSynthesizer,
    BRANCH_BLEND,
    BRANCH_FRAME0,
    BRANCH_FRAME1,
    BRANCH_FALLBACK,
    average_frames,
    branch_statistics
)
from .midpoint_interpolator import MidpointInterpolator, InterpolationResult

__all__ = [
    'sample_bilinear',
    'sample_bilinear_map',
    'FrameSynthesizer',
    'BRANCH_BLEND',
    'BRANCH_FRAME0',
    'BRANCH_FRAME1',
    'BRANCH_FALLBACK',
    'average_frames',
    'branch_statistics',
    'MidpointInterpolator',
    'InterpolationResult'
]

"""
Config module - parameter objects for flow estimation, regularization,
occlusion detection and the interpolation pipeline
"""

from .interpolation_config import (
    FarnebackParams,
    TVL1Params,
    RegularizerParams,
    OcclusionParams,
    InterpolationConfig
)

__all__ = [
    'FarnebackParams',
    'TVL1Params',
    'RegularizerParams',
    'OcclusionParams',
    'InterpolationConfig'
]

"""
Common test components for frame interpolation testing

This package contains reusable components for testing the pipeline:
- SyntheticFrameGenerator: Textured frame pairs with known translation and
  exact midpoint ground truth
- uniform_flow, gradient_frame: Small deterministic fixtures
"""

from .synthetic_frames import SyntheticFrameGenerator, uniform_flow, gradient_frame

__all__ = ['SyntheticFrameGenerator', 'uniform_flow', 'gradient_frame']

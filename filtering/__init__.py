"""
Filtering module for optical flow regularization.

This module contains components for:
- Edge-aware joint bilateral smoothing guided by the source frame
- Plain bilateral smoothing of flow channels
"""

from .flow_regularizer import (
    BaseFlowRegularizer,
    JointBilateralRegularizer,
    BilateralRegularizer,
    create_regularizer
)

__all__ = [
    'BaseFlowRegularizer',
    'JointBilateralRegularizer',
    'BilateralRegularizer',
    'create_regularizer'
]

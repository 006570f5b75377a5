"""
Processing module for optical flow computation.

This module contains components for:
- Frame pair validation and intensity conversion
- Tagged flow fields (forward, backward, symmetric)
- Dense optical flow estimation (Farneback, TV-L1)

Unified architecture:

Base classes:
- BaseFlowEstimator: Abstract base class for interchangeable flow algorithms

Estimators:
- FarnebackFlowEstimator: Pyramidal differential flow (fast)
- TVL1FlowEstimator: Iterative variational flow (accurate, slow)

Factory:
- FlowEstimatorFactory: Creates estimators by algorithm name
"""

# Frame helpers
from .frame_utils import ContractViolation, validate_frame_pair, to_grayscale

# Flow fields
from .flow_fields import (
    FlowField,
    ForwardFlow,
    BackwardFlow,
    SymmetricFlow,
    symmetric_from_bidirectional
)

# Estimators
from .base_flow_estimator import BaseFlowEstimator
from .farneback_estimator import FarnebackFlowEstimator
from .tvl1_estimator import TVL1FlowEstimator

# Factory
from .flow_estimator_factory import FlowEstimatorFactory

__all__ = [
    # Frame helpers
    'ContractViolation',
    'validate_frame_pair',
    'to_grayscale',

    # Flow fields
    'FlowField',
    'ForwardFlow',
    'BackwardFlow',
    'SymmetricFlow',
    'symmetric_from_bidirectional',

    # Estimators
    'BaseFlowEstimator',         # Abstract base class for flow algorithms
    'FarnebackFlowEstimator',    # Pyramidal differential flow
    'TVL1FlowEstimator',         # Iterative variational flow

    # Factory
    'FlowEstimatorFactory'
]

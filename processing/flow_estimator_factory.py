"""
Flow Estimator Factory - factory class for creating optical flow estimators

This module provides a factory pattern for creating flow estimators with a
unified interface and configuration management.
"""

from typing import Dict, Any, Optional
from config.interpolation_config import FarnebackParams, TVL1Params
from .base_flow_estimator import BaseFlowEstimator
from .farneback_estimator import FarnebackFlowEstimator
from .tvl1_estimator import TVL1FlowEstimator


class FlowEstimatorFactory:
    """
    Factory class for creating optical flow estimators

    Estimators are selected by algorithm name; parameters come either as a
    ready parameter object or as keyword overrides on the defaults.
    """

    SUPPORTED_ALGORITHMS = {
        'farneback': {
            'estimator': FarnebackFlowEstimator,
            'params': FarnebackParams,
            'description': 'Pyramidal polynomial-expansion differential flow',
            'latency': 'low',
            'large_displacements': False,
        },
        'tvl1': {
            'estimator': TVL1FlowEstimator,
            'params': TVL1Params,
            'description': 'Iterative dual TV-L1 variational flow (opencv-contrib)',
            'latency': 'high',
            'large_displacements': True,
        }
    }

    @staticmethod
    def _lookup(algorithm: str) -> Dict[str, Any]:
        algorithm = algorithm.lower()
        if algorithm not in FlowEstimatorFactory.SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported flow algorithm: {algorithm}. "
                             f"Supported algorithms: {list(FlowEstimatorFactory.SUPPORTED_ALGORITHMS.keys())}")
        return FlowEstimatorFactory.SUPPORTED_ALGORITHMS[algorithm]

    @staticmethod
    def create_estimator(algorithm: str = 'farneback', params=None, **overrides) -> BaseFlowEstimator:
        """
        Create a flow estimator instance

        Args:
            algorithm: Algorithm name ('farneback' or 'tvl1')
            params: Parameter object for the algorithm (defaults if None)
            **overrides: Individual parameters replacing the defaults,
                         e.g. winsize=21 for Farneback

        Returns:
            BaseFlowEstimator instance

        Raises:
            ValueError: If the algorithm is unknown or parameters are invalid
        """
        algorithm_config = FlowEstimatorFactory._lookup(algorithm)
        params_class = algorithm_config['params']

        if params is None:
            try:
                params = params_class(**overrides)
            except TypeError as e:
                raise ValueError(f"Invalid parameters for {algorithm}: {e}")
        elif overrides:
            raise ValueError("Pass either a parameter object or keyword overrides, not both")
        elif not isinstance(params, params_class):
            raise ValueError(f"{algorithm} expects {params_class.__name__}, "
                             f"got {type(params).__name__}")

        return algorithm_config['estimator'](params)

    @staticmethod
    def create_from_config(config) -> BaseFlowEstimator:
        """Create the estimator selected by an InterpolationConfig"""
        return FlowEstimatorFactory.create_estimator(config.algorithm, config.estimator_params())

    @staticmethod
    def get_algorithm_info(algorithm: Optional[str] = None) -> Dict[str, Any]:
        """
        Get information about supported algorithms

        Args:
            algorithm: Specific algorithm to get info for, or None for all

        Returns:
            Dictionary with algorithm information
        """
        if algorithm is None:
            return FlowEstimatorFactory.SUPPORTED_ALGORITHMS
        return FlowEstimatorFactory._lookup(algorithm)

    @staticmethod
    def list_supported_algorithms() -> list:
        """Get list of supported algorithm names"""
        return list(FlowEstimatorFactory.SUPPORTED_ALGORITHMS.keys())

    @staticmethod
    def validate_algorithm_config(algorithm: str, **overrides) -> bool:
        """
        Validate algorithm configuration without creating an estimator

        Returns:
            True if configuration is valid

        Raises:
            ValueError: If configuration is invalid
        """
        params_class = FlowEstimatorFactory._lookup(algorithm)['params']
        try:
            params = params_class(**overrides)
        except TypeError as e:
            raise ValueError(f"Invalid parameters for {algorithm}: {e}")
        params.validate()
        return True

"""
Interpolation Config - parameter objects for every pipeline stage

Holds the tuning constants of the flow estimators, the regularizer and the
occlusion detector so that algorithm code never hard-codes them.
"""

import numbers
from typing import Dict, Any, Optional


class FarnebackParams:
    """Parameters of the pyramidal polynomial-expansion (Farneback) flow"""

    def __init__(self, pyr_scale: float = 0.5, levels: int = 3, winsize: int = 15,
                 iterations: int = 3, poly_n: int = 5, poly_sigma: float = 1.2,
                 flags: int = 0):
        """
        Args:
            pyr_scale: Image scale between pyramid levels (< 1)
            levels: Number of pyramid levels
            winsize: Averaging window size
            iterations: Iterations per pyramid level
            poly_n: Pixel neighborhood for the polynomial expansion
            poly_sigma: Gaussian sigma smoothing the polynomial expansion
            flags: OpenCV operation flags
        """
        self.pyr_scale = pyr_scale
        self.levels = levels
        self.winsize = winsize
        self.iterations = iterations
        self.poly_n = poly_n
        self.poly_sigma = poly_sigma
        self.flags = flags

    def validate(self):
        if not 0.0 < self.pyr_scale < 1.0:
            raise ValueError(f"pyr_scale must be in (0, 1), got {self.pyr_scale}")
        if self.levels < 1:
            raise ValueError(f"levels must be >= 1, got {self.levels}")
        if self.winsize < 1:
            raise ValueError(f"winsize must be >= 1, got {self.winsize}")
        if self.iterations < 1:
            raise ValueError(f"iterations must be >= 1, got {self.iterations}")
        if self.poly_n not in (5, 7):
            raise ValueError(f"poly_n must be 5 or 7, got {self.poly_n}")
        if self.poly_sigma <= 0:
            raise ValueError(f"poly_sigma must be positive, got {self.poly_sigma}")

    def to_dict(self) -> Dict[str, Any]:
        return dict(vars(self))


class TVL1Params:
    """Parameters of the dual TV-L1 variational flow (OpenCV defaults)"""

    def __init__(self, tau: float = 0.25, lambda_: float = 0.15, theta: float = 0.3,
                 nscales: int = 5, warps: int = 5, epsilon: float = 0.01,
                 inner_iterations: int = 30, outer_iterations: int = 10,
                 scale_step: float = 0.8, gamma: float = 0.0,
                 median_filtering: int = 5):
        """
        Args:
            tau: Time step of the numerical scheme
            lambda_: Weight of the data term (smaller = smoother flow)
            theta: Tightness between the two flow variables
            nscales: Number of pyramid scales
            warps: Warpings per scale
            epsilon: Stopping criterion threshold
            inner_iterations: Inner iterations per warping
            outer_iterations: Outer iterations per warping
            scale_step: Pyramid scale step
            gamma: Weight of the illumination variation term
            median_filtering: Median filter kernel size (1 disables it)
        """
        self.tau = tau
        self.lambda_ = lambda_
        self.theta = theta
        self.nscales = nscales
        self.warps = warps
        self.epsilon = epsilon
        self.inner_iterations = inner_iterations
        self.outer_iterations = outer_iterations
        self.scale_step = scale_step
        self.gamma = gamma
        self.median_filtering = median_filtering

    def validate(self):
        if self.tau <= 0 or self.lambda_ <= 0 or self.theta <= 0:
            raise ValueError("tau, lambda_ and theta must be positive")
        if self.nscales < 1 or self.warps < 1:
            raise ValueError("nscales and warps must be >= 1")
        if self.inner_iterations < 1 or self.outer_iterations < 1:
            raise ValueError("inner_iterations and outer_iterations must be >= 1")
        if not 0.0 < self.scale_step < 1.0:
            raise ValueError(f"scale_step must be in (0, 1), got {self.scale_step}")
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if self.median_filtering < 1:
            raise ValueError(f"median_filtering must be >= 1, got {self.median_filtering}")

    def to_dict(self) -> Dict[str, Any]:
        return dict(vars(self))


class RegularizerParams:
    """Bilateral smoothing parameters for flow regularization"""

    def __init__(self, diameter: int = 5, sigma_color: float = 20.0, sigma_space: float = 20.0):
        """
        Args:
            diameter: Pixel neighborhood diameter of the filter window
            sigma_color: Intensity similarity bandwidth
            sigma_space: Spatial distance bandwidth
        """
        self.diameter = diameter
        self.sigma_color = sigma_color
        self.sigma_space = sigma_space

    def validate(self):
        if not isinstance(self.diameter, numbers.Integral) or self.diameter < 1:
            raise ValueError(f"diameter must be a positive integer, got {self.diameter}")
        if self.sigma_color <= 0:
            raise ValueError(f"sigma_color must be positive, got {self.sigma_color}")
        if self.sigma_space <= 0:
            raise ValueError(f"sigma_space must be positive, got {self.sigma_space}")

    def to_dict(self) -> Dict[str, Any]:
        return dict(vars(self))


class OcclusionParams:
    """Forward/backward consistency check parameters"""

    def __init__(self, enabled: bool = True, threshold: float = 1.0):
        """
        Args:
            enabled: Compute an occlusion mask and use it during synthesis
            threshold: Maximum forward/backward disagreement (pixels) for a
                       pixel to count as consistent
        """
        self.enabled = enabled
        self.threshold = threshold

    def validate(self):
        if self.threshold <= 0:
            raise ValueError(f"Occlusion threshold must be positive, got {self.threshold}")

    def to_dict(self) -> Dict[str, Any]:
        return dict(vars(self))


class InterpolationConfig:
    """Complete configuration of the midpoint interpolation pipeline"""

    SUPPORTED_ALGORITHMS = ['farneback', 'tvl1']
    SUPPORTED_REGULARIZERS = ['joint_bilateral', 'bilateral', 'none']

    def __init__(self, algorithm: str = 'farneback',
                 farneback: Optional[FarnebackParams] = None,
                 tvl1: Optional[TVL1Params] = None,
                 regularizer: str = 'joint_bilateral',
                 regularizer_params: Optional[RegularizerParams] = None,
                 occlusion: Optional[OcclusionParams] = None):
        """
        Args:
            algorithm: Flow estimator ('farneback' or 'tvl1')
            farneback: Farneback parameters (defaults if None)
            tvl1: TV-L1 parameters (defaults if None)
            regularizer: 'joint_bilateral', 'bilateral' or 'none'
            regularizer_params: Filter parameters (defaults if None)
            occlusion: Occlusion detection parameters (defaults if None)
        """
        self.algorithm = algorithm.lower()
        self.farneback = farneback if farneback is not None else FarnebackParams()
        self.tvl1 = tvl1 if tvl1 is not None else TVL1Params()
        self.regularizer = regularizer.lower()
        self.regularizer_params = regularizer_params if regularizer_params is not None else RegularizerParams()
        self.occlusion = occlusion if occlusion is not None else OcclusionParams()

    def estimator_params(self):
        """Parameter object of the selected flow algorithm"""
        if self.algorithm == 'tvl1':
            return self.tvl1
        return self.farneback

    def validate(self) -> bool:
        """
        Validate every parameter group

        Returns:
            True if the configuration is valid

        Raises:
            ValueError: If any value is out of range or unknown
        """
        if self.algorithm not in self.SUPPORTED_ALGORITHMS:
            raise ValueError(f"Unsupported flow algorithm: {self.algorithm}. "
                             f"Supported algorithms: {self.SUPPORTED_ALGORITHMS}")
        if self.regularizer not in self.SUPPORTED_REGULARIZERS:
            raise ValueError(f"Unsupported regularizer: {self.regularizer}. "
                             f"Supported regularizers: {self.SUPPORTED_REGULARIZERS}")

        self.farneback.validate()
        self.tvl1.validate()
        self.regularizer_params.validate()
        self.occlusion.validate()
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'algorithm': self.algorithm,
            'farneback': self.farneback.to_dict(),
            'tvl1': self.tvl1.to_dict(),
            'regularizer': self.regularizer,
            'regularizer_params': self.regularizer_params.to_dict(),
            'occlusion': self.occlusion.to_dict()
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'InterpolationConfig':
        """Build a configuration from a (possibly partial) dictionary"""
        return cls(
            algorithm=data.get('algorithm', 'farneback'),
            farneback=FarnebackParams(**data.get('farneback', {})),
            tvl1=TVL1Params(**data.get('tvl1', {})),
            regularizer=data.get('regularizer', 'joint_bilateral'),
            regularizer_params=RegularizerParams(**data.get('regularizer_params', {})),
            occlusion=OcclusionParams(**data.get('occlusion', {}))
        )

    def __repr__(self):
        return (f"InterpolationConfig(algorithm={self.algorithm!r}, "
                f"regularizer={self.regularizer!r}, "
                f"occlusion={self.occlusion.enabled})")

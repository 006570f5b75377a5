"""
Farneback Estimator - pyramidal polynomial-expansion dense flow

Coarse-to-fine differential flow. Fast, but less accurate than TV-L1 for
large displacements.
"""

import cv2
import numpy as np
from typing import Optional

from config.interpolation_config import FarnebackParams
from .base_flow_estimator import BaseFlowEstimator


class FarnebackFlowEstimator(BaseFlowEstimator):
    """Dense flow via cv2.calcOpticalFlowFarneback"""

    name = 'farneback'

    def __init__(self, params: Optional[FarnebackParams] = None):
        """
        Args:
            params: Farneback parameters (pyr_scale 0.5, 3 levels, window 15,
                    3 iterations, poly_n 5, poly_sigma 1.2 when None)
        """
        params = params if params is not None else FarnebackParams()
        params.validate()
        super().__init__(params)

    def calc_flow(self, gray_from: np.ndarray, gray_to: np.ndarray) -> np.ndarray:
        p = self.params
        flow = cv2.calcOpticalFlowFarneback(
            gray_from, gray_to, None,
            p.pyr_scale,
            p.levels,
            p.winsize,
            p.iterations,
            p.poly_n,
            p.poly_sigma,
            p.flags
        )
        return flow.astype(np.float32, copy=False)

"""
Flow Regularizer - edge-aware spatial smoothing of optical flow

Smooths each flow channel independently with a bilateral-type filter. The
joint variant takes its range weights from the intensity of the original
frame, so flow discontinuities snap to image edges instead of flow noise.

Both regularizers modify the flow buffer in place; size, channel count and
dtype never change.
"""

from abc import ABC, abstractmethod
from typing import Optional
import cv2
import numpy as np

from config.interpolation_config import RegularizerParams
from processing.frame_utils import ContractViolation, to_grayscale
from processing.flow_fields import FlowField


def _flow_buffer(flow) -> np.ndarray:
    """Return the writable (H, W, 2) float32 buffer behind a flow argument"""
    data = flow.data if isinstance(flow, FlowField) else flow

    if not isinstance(data, np.ndarray) or data.ndim != 3 or data.shape[2] != 2:
        shape = getattr(data, 'shape', None)
        raise ContractViolation(f"Flow must have exactly 2 channels, got shape {shape}")
    if data.dtype != np.float32:
        raise ContractViolation(f"Flow must be float32, got {data.dtype}")

    return data


class BaseFlowRegularizer(ABC):
    """Abstract base class for in-place flow regularization"""

    name = 'base'

    def __init__(self, params: Optional[RegularizerParams] = None):
        """
        Args:
            params: Filter diameter and sigmas (5, 20.0, 20.0 when None)
        """
        params = params if params is not None else RegularizerParams()
        params.validate()
        self.params = params

    def _resolve_params(self, diameter: Optional[int], sigma_color: Optional[float],
                        sigma_space: Optional[float]) -> RegularizerParams:
        """Merge per-call overrides with the instance defaults"""
        params = RegularizerParams(
            diameter=self.params.diameter if diameter is None else diameter,
            sigma_color=self.params.sigma_color if sigma_color is None else sigma_color,
            sigma_space=self.params.sigma_space if sigma_space is None else sigma_space
        )
        params.validate()
        return params

    @abstractmethod
    def _filter_channel(self, guide: Optional[np.ndarray], channel: np.ndarray,
                        params: RegularizerParams) -> np.ndarray:
        """Filter one float32 flow channel (H, W)"""
        pass

    def _prepare_guide(self, guide: np.ndarray, height: int, width: int) -> Optional[np.ndarray]:
        return None

    def smooth(self, guide: np.ndarray, flow, diameter: Optional[int] = None,
               sigma_color: Optional[float] = None, sigma_space: Optional[float] = None) -> None:
        """
        Regularize a flow field in place

        Args:
            guide: Original frame (grayscale or BGR) aligned with the flow
            flow: FlowField or float32 array (H, W, 2); modified in place
            diameter: Filter window diameter override
            sigma_color: Intensity bandwidth override
            sigma_space: Spatial bandwidth override

        Raises:
            ContractViolation: If the flow is not a 2-channel float32 field or
                               the guide size does not match
        """
        data = _flow_buffer(flow)
        params = self._resolve_params(diameter, sigma_color, sigma_space)
        height, width = data.shape[:2]

        guide_prepared = self._prepare_guide(guide, height, width)

        channels = cv2.split(data)
        filtered = [self._filter_channel(guide_prepared, np.ascontiguousarray(channel), params)
                    for channel in channels]

        merged = cv2.merge(filtered)
        np.copyto(data, merged.reshape(data.shape))

    def get_info(self):
        return {"regularizer": self.name, "params": self.params.to_dict()}


class JointBilateralRegularizer(BaseFlowRegularizer):
    """Joint bilateral filtering guided by the frame intensity (opencv-contrib ximgproc)"""

    name = 'joint_bilateral'

    def _prepare_guide(self, guide: np.ndarray, height: int, width: int) -> np.ndarray:
        if not isinstance(guide, np.ndarray) or guide.ndim < 2 or guide.size == 0:
            raise ContractViolation("Guide image must be a non-empty array")
        if guide.shape[:2] != (height, width):
            raise ContractViolation(f"Guide size {guide.shape[:2]} does not match "
                                    f"flow size {(height, width)}")

        # jointBilateralFilter needs guide and source of the same depth
        return to_grayscale(guide).astype(np.float32)

    def _filter_channel(self, guide: np.ndarray, channel: np.ndarray,
                        params: RegularizerParams) -> np.ndarray:
        return cv2.ximgproc.jointBilateralFilter(
            guide, channel,
            params.diameter, params.sigma_color, params.sigma_space
        )


class BilateralRegularizer(BaseFlowRegularizer):
    """
    Plain bilateral filtering of each flow channel

    Ignores the guide: range weights come from the flow values themselves.
    """

    name = 'bilateral'

    def _filter_channel(self, guide, channel: np.ndarray,
                        params: RegularizerParams) -> np.ndarray:
        return cv2.bilateralFilter(channel, params.diameter,
                                   params.sigma_color, params.sigma_space)


SUPPORTED_REGULARIZERS = {
    'joint_bilateral': JointBilateralRegularizer,
    'bilateral': BilateralRegularizer,
    'none': None
}


def create_regularizer(name: str = 'joint_bilateral',
                       params: Optional[RegularizerParams] = None) -> Optional[BaseFlowRegularizer]:
    """
    Create a flow regularizer by name

    Args:
        name: 'joint_bilateral', 'bilateral' or 'none'
        params: Filter parameters (defaults if None)

    Returns:
        Regularizer instance, or None for 'none'
    """
    name = name.lower()
    if name not in SUPPORTED_REGULARIZERS:
        raise ValueError(f"Unsupported regularizer: {name}. "
                         f"Supported regularizers: {list(SUPPORTED_REGULARIZERS.keys())}")

    regularizer_class = SUPPORTED_REGULARIZERS[name]
    if regularizer_class is None:
        return None
    return regularizer_class(params)

"""
Flow Accuracy - estimated flow against known ground truth motion
"""

import numpy as np
from typing import Dict, Any, Sequence, Union

from processing.flow_fields import FlowField


def _flow_array(flow: Union[FlowField, np.ndarray]) -> np.ndarray:
    data = flow.data if isinstance(flow, FlowField) else np.asarray(flow)
    if data.ndim != 3 or data.shape[2] != 2:
        raise ValueError(f"Flow must have shape (H, W, 2), got {data.shape}")
    return data


def endpoint_error_map(flow: Union[FlowField, np.ndarray],
                       ground_truth: Union[FlowField, np.ndarray, Sequence[float]]) -> np.ndarray:
    """
    Per-pixel Euclidean distance between estimated and true flow vectors

    Args:
        flow: Estimated flow (H, W, 2)
        ground_truth: True flow (H, W, 2) or one [dx, dy] vector for
                      uniform motion

    Returns:
        Endpoint error (H, W)
    """
    data = _flow_array(flow).astype(np.float64)

    if isinstance(ground_truth, FlowField) or np.ndim(ground_truth) == 3:
        truth = _flow_array(ground_truth).astype(np.float64)
        if truth.shape != data.shape:
            raise ValueError(f"Flow shapes differ: {data.shape} vs {truth.shape}")
    else:
        truth = np.asarray(ground_truth, dtype=np.float64).reshape(1, 1, 2)

    diff = data - truth
    return np.sqrt(diff[:, :, 0] ** 2 + diff[:, :, 1] ** 2)


def average_endpoint_error(flow, ground_truth, border: int = 0) -> float:
    """Mean endpoint error, optionally ignoring a border of pixels"""
    errors = endpoint_error_map(flow, ground_truth)
    if border > 0:
        errors = errors[border:-border, border:-border]
        if errors.size == 0:
            raise ValueError(f"Border {border} leaves no pixels to analyze")
    return float(np.mean(errors))


def analyze_uniform_flow(flow: Union[FlowField, np.ndarray], expected: Sequence[float],
                         border: int = 0) -> Dict[str, Any]:
    """
    Analyze a flow field that should show one uniform motion vector

    Args:
        flow: Estimated flow (H, W, 2)
        expected: True [dx, dy]
        border: Pixels ignored at each image edge

    Returns:
        Dictionary with mean flow, endpoint error statistics and accuracy
        percentages under 0.5 px, 1 px and 2 px
    """
    data = _flow_array(flow)
    if border > 0:
        data = data[border:-border, border:-border]
        if data.size == 0:
            raise ValueError(f"Border {border} leaves no pixels to analyze")

    errors = endpoint_error_map(data, expected)
    mean_flow = data.reshape(-1, 2).mean(axis=0)

    return {
        'expected': [float(expected[0]), float(expected[1])],
        'mean_flow': [float(mean_flow[0]), float(mean_flow[1])],
        'mean_endpoint_error': float(np.mean(errors)),
        'std_endpoint_error': float(np.std(errors)),
        'max_endpoint_error': float(np.max(errors)),
        'accuracy_threshold_0_5px': float(np.mean(errors < 0.5) * 100),
        'accuracy_threshold_1px': float(np.mean(errors < 1.0) * 100),
        'accuracy_threshold_2px': float(np.mean(errors < 2.0) * 100),
        'pixels_analyzed': int(errors.size)
    }

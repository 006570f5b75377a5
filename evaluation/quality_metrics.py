"""
Quality Metrics - comparison of an interpolated frame with ground truth

MAE, MSE, PSNR and SSIM for uint8 frames. Identical frames give MAE 0,
PSNR inf and SSIM 1.0.
"""

import math
import numpy as np
from scipy.ndimage import gaussian_filter
from typing import Dict, Any


MAX_PIXEL_VALUE = 255.0


def _check_pair(image: np.ndarray, reference: np.ndarray):
    if image is None or reference is None or image.size == 0 or reference.size == 0:
        raise ValueError("Images to compare must not be empty")
    if image.shape != reference.shape:
        raise ValueError(f"Image shapes differ: {image.shape} vs {reference.shape}")
    if image.dtype != reference.dtype:
        raise ValueError(f"Image dtypes differ: {image.dtype} vs {reference.dtype}")


def mean_absolute_error(image: np.ndarray, reference: np.ndarray) -> float:
    """Mean absolute per-channel difference"""
    _check_pair(image, reference)
    return float(np.mean(np.abs(image.astype(np.float64) - reference.astype(np.float64))))


def mean_squared_error(image: np.ndarray, reference: np.ndarray) -> float:
    """Mean squared per-channel difference"""
    _check_pair(image, reference)
    diff = image.astype(np.float64) - reference.astype(np.float64)
    return float(np.mean(diff * diff))


def psnr(image: np.ndarray, reference: np.ndarray, max_value: float = MAX_PIXEL_VALUE) -> float:
    """
    Peak signal-to-noise ratio in dB

    Returns:
        PSNR, or float('inf') when the images are identical
    """
    mse = mean_squared_error(image, reference)
    if mse == 0.0:
        return math.inf
    return 10.0 * math.log10(max_value * max_value / mse)


def _ssim_channel(x: np.ndarray, y: np.ndarray, sigma: float, c1: float, c2: float) -> float:
    mu_x = gaussian_filter(x, sigma)
    mu_y = gaussian_filter(y, sigma)

    sigma_x = gaussian_filter(x * x, sigma) - mu_x * mu_x
    sigma_y = gaussian_filter(y * y, sigma) - mu_y * mu_y
    sigma_xy = gaussian_filter(x * y, sigma) - mu_x * mu_y

    numerator = (2 * mu_x * mu_y + c1) * (2 * sigma_xy + c2)
    denominator = (mu_x * mu_x + mu_y * mu_y + c1) * (sigma_x + sigma_y + c2)

    return float(np.mean(numerator / denominator))


def ssim(image: np.ndarray, reference: np.ndarray, sigma: float = 1.5,
         k1: float = 0.01, k2: float = 0.03, max_value: float = MAX_PIXEL_VALUE) -> float:
    """
    Structural similarity (Wang et al. 2004) with a Gaussian window

    Color images are scored per channel and averaged.

    Args:
        image: Image (H, W) or (H, W, C)
        reference: Ground truth of the same shape and dtype
        sigma: Gaussian window sigma
        k1, k2: Stabilizing constants
        max_value: Dynamic range of the pixel values

    Returns:
        Mean SSIM in [-1, 1]
    """
    _check_pair(image, reference)
    c1 = (k1 * max_value) ** 2
    c2 = (k2 * max_value) ** 2

    x = image.astype(np.float64)
    y = reference.astype(np.float64)

    if x.ndim == 2:
        return _ssim_channel(x, y, sigma, c1, c2)

    scores = [_ssim_channel(x[:, :, c], y[:, :, c], sigma, c1, c2) for c in range(x.shape[2])]
    return float(np.mean(scores))


def evaluate_frame(image: np.ndarray, reference: np.ndarray) -> Dict[str, Any]:
    """
    Compute all quality metrics for one interpolated frame

    Returns:
        Dictionary with mae, mse, psnr and ssim
    """
    return {
        'mae': mean_absolute_error(image, reference),
        'mse': mean_squared_error(image, reference),
        'psnr': psnr(image, reference),
        'ssim': ssim(image, reference)
    }


def summarize_results(results: list) -> Dict[str, Any]:
    """
    Aggregate per-frame metric dictionaries

    Infinite PSNR values (perfect frames) are counted separately and left
    out of the PSNR mean.
    """
    if not results:
        return {'frames_evaluated': 0}

    finite_psnr = [r['psnr'] for r in results if math.isfinite(r['psnr'])]

    return {
        'frames_evaluated': len(results),
        'mean_mae': float(np.mean([r['mae'] for r in results])),
        'mean_mse': float(np.mean([r['mse'] for r in results])),
        'mean_psnr': float(np.mean(finite_psnr)) if finite_psnr else math.inf,
        'perfect_frames': len(results) - len(finite_psnr),
        'mean_ssim': float(np.mean([r['ssim'] for r in results]))
    }

"""
Evaluation module - quality of interpolated frames and estimated flow

This module contains components for:
- Image quality metrics against ground truth (MAE, MSE, PSNR, SSIM)
- Flow accuracy against known motion (endpoint error)
"""

from .quality_metrics import (
    mean_absolute_error,
    mean_squared_error,
    psnr,
    ssim,
    evaluate_frame,
    summarize_results
)
from .flow_accuracy import endpoint_error_map, average_endpoint_error, analyze_uniform_flow

__all__ = [
    'mean_absolute_error',
    'mean_squared_error',
    'psnr',
    'ssim',
    'evaluate_frame',
    'summarize_results',
    'endpoint_error_map',
    'average_endpoint_error',
    'analyze_uniform_flow'
]

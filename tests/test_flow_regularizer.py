"""
Tests for edge-aware flow regularization
"""

import numpy as np
import pytest

from config import RegularizerParams
from filtering import (
    JointBilateralRegularizer,
    BilateralRegularizer,
    create_regularizer
)
from processing import ForwardFlow, ContractViolation
from tests.common import uniform_flow, gradient_frame


HEIGHT, WIDTH = 32, 48
EDGE_X = 24


def step_guide() -> np.ndarray:
    """Black left half, white right half"""
    guide = np.zeros((HEIGHT, WIDTH, 3), dtype=np.uint8)
    guide[:, EDGE_X:] = 255
    return guide


def step_flow() -> np.ndarray:
    """Zero motion left of the edge, dx=4 right of it"""
    flow = np.zeros((HEIGHT, WIDTH, 2), dtype=np.float32)
    flow[:, EDGE_X:, 0] = 4.0
    return flow


@pytest.fixture(params=[JointBilateralRegularizer, BilateralRegularizer])
def regularizer(request):
    return request.param()


def test_default_parameters(regularizer):
    assert regularizer.params.diameter == 5
    assert regularizer.params.sigma_color == 20.0
    assert regularizer.params.sigma_space == 20.0


def test_shape_and_dtype_are_preserved(regularizer):
    rng = np.random.default_rng(0)
    flow = rng.normal(0, 2, size=(HEIGHT, WIDTH, 2)).astype(np.float32)

    regularizer.smooth(gradient_frame(HEIGHT, WIDTH), flow)

    assert flow.shape == (HEIGHT, WIDTH, 2)
    assert flow.dtype == np.float32


def test_flow_field_is_modified_in_place(regularizer):
    flow = ForwardFlow(step_flow())
    buffer = flow.data

    result = regularizer.smooth(step_guide(), flow)

    assert result is None
    assert flow.data is buffer
    assert isinstance(flow, ForwardFlow)


def test_constant_flow_stays_constant(regularizer):
    flow = uniform_flow(HEIGHT, WIDTH, 1.5, -0.5)

    regularizer.smooth(gradient_frame(HEIGHT, WIDTH), flow)

    np.testing.assert_allclose(flow[:, :, 0], 1.5, atol=1e-4)
    np.testing.assert_allclose(flow[:, :, 1], -0.5, atol=1e-4)


def test_joint_filter_keeps_flow_edge_at_image_edge():
    flow = step_flow()

    JointBilateralRegularizer().smooth(step_guide(), flow)

    np.testing.assert_allclose(flow[:, EDGE_X - 1, 0], 0.0, atol=1e-3)
    np.testing.assert_allclose(flow[:, EDGE_X, 0], 4.0, atol=1e-3)


def test_plain_bilateral_blurs_small_flow_steps():
    flow = step_flow()

    BilateralRegularizer().smooth(step_guide(), flow)

    assert np.all(flow[:, EDGE_X - 1, 0] > 0.5)
    assert np.all(flow[:, EDGE_X, 0] < 3.5)


def test_grayscale_guide_is_accepted():
    guide = step_guide()[:, :, 0]
    flow = step_flow()

    JointBilateralRegularizer().smooth(guide, flow)

    np.testing.assert_allclose(flow[:, EDGE_X - 1, 0], 0.0, atol=1e-3)


def test_per_call_overrides():
    flow = uniform_flow(HEIGHT, WIDTH, 1.0, 1.0)
    regularizer = JointBilateralRegularizer()

    regularizer.smooth(step_guide(), flow, diameter=9, sigma_color=10.0, sigma_space=5.0)

    assert regularizer.params.diameter == 5
    with pytest.raises(ValueError):
        regularizer.smooth(step_guide(), flow, diameter=0)


def test_three_channel_flow_is_a_contract_violation(regularizer):
    flow = np.zeros((HEIGHT, WIDTH, 3), dtype=np.float32)

    with pytest.raises(ContractViolation):
        regularizer.smooth(step_guide(), flow)


def test_non_float_flow_is_a_contract_violation(regularizer):
    flow = np.zeros((HEIGHT, WIDTH, 2), dtype=np.float64)

    with pytest.raises(ContractViolation):
        regularizer.smooth(step_guide(), flow)


def test_guide_size_mismatch_is_a_contract_violation():
    flow = step_flow()

    with pytest.raises(ContractViolation):
        JointBilateralRegularizer().smooth(step_guide()[:-2], flow)


def test_invalid_parameters_are_rejected():
    with pytest.raises(ValueError):
        JointBilateralRegularizer(RegularizerParams(diameter=0))
    with pytest.raises(ValueError):
        BilateralRegularizer(RegularizerParams(sigma_space=-1.0))


def test_create_regularizer():
    assert isinstance(create_regularizer('joint_bilateral'), JointBilateralRegularizer)
    assert isinstance(create_regularizer('Bilateral'), BilateralRegularizer)
    assert create_regularizer('none') is None

    custom = create_regularizer('bilateral', RegularizerParams(diameter=7))
    assert custom.params.diameter == 7

    with pytest.raises(ValueError, match="Unsupported regularizer"):
        create_regularizer('guided')

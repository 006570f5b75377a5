"""
Tests for tagged flow fields and symmetric combination.
"""

import numpy as np
import pytest

from processing import (
    ContractViolation,
    FlowField,
    ForwardFlow,
    BackwardFlow,
    SymmetricFlow,
    symmetric_from_bidirectional
)
from tests.common import uniform_flow


def test_flow_field_adopts_float32_buffer():
    buffer = uniform_flow(4, 6, 1.0, -2.0)
    flow = ForwardFlow(buffer)

    assert flow.data is buffer
    assert flow.size == (4, 6)
    assert flow.width == 6 and flow.height == 4
    np.testing.assert_allclose(flow.mean_vector(), [1.0, -2.0])


def test_flow_field_converts_other_dtypes():
    flow = SymmetricFlow(np.ones((3, 3, 2), dtype=np.float64))
    assert flow.data.dtype == np.float32


@pytest.mark.parametrize("shape", [(4, 4), (4, 4, 3), (4, 4, 1), (0, 4, 2)])
def test_flow_field_rejects_wrong_layout(shape):
    with pytest.raises(ContractViolation):
        FlowField(np.zeros(shape, dtype=np.float32))


def test_copy_keeps_tag_and_is_independent():
    flow = BackwardFlow(uniform_flow(2, 2, 3.0, 4.0))
    clone = flow.copy()

    assert type(clone) is BackwardFlow
    clone.data[:] = 0
    np.testing.assert_allclose(flow.magnitude(), 5.0)


def test_zeros_constructor():
    flow = SymmetricFlow.zeros(5, 7)
    assert isinstance(flow, SymmetricFlow)
    assert flow.shape == (5, 7, 2)
    assert not flow.data.any()


def test_symmetric_combination_halves_the_consensus():
    forward = ForwardFlow(uniform_flow(4, 4, 4.0, 2.0))
    backward = BackwardFlow(uniform_flow(4, 4, -4.0, -2.0))

    symmetric = symmetric_from_bidirectional(forward, backward)

    assert isinstance(symmetric, SymmetricFlow)
    assert symmetric.data.dtype == np.float32
    np.testing.assert_allclose(symmetric.data[..., 0], 2.0)
    np.testing.assert_allclose(symmetric.data[..., 1], 1.0)


def test_symmetric_combination_uses_same_pixel_without_warping():
    forward = ForwardFlow(np.zeros((2, 3, 2), dtype=np.float32))
    backward_data = np.zeros((2, 3, 2), dtype=np.float32)
    backward_data[0, 1] = [-8.0, 4.0]
    backward = BackwardFlow(backward_data)

    symmetric = symmetric_from_bidirectional(forward, backward)

    np.testing.assert_allclose(symmetric.data[0, 1], [2.0, -1.0])
    assert np.count_nonzero(symmetric.data) == 2


def test_symmetric_combination_rejects_swapped_tags():
    forward = ForwardFlow(uniform_flow(2, 2, 1.0, 0.0))
    backward = BackwardFlow(uniform_flow(2, 2, -1.0, 0.0))

    with pytest.raises(ContractViolation):
        symmetric_from_bidirectional(backward, forward)
    with pytest.raises(ContractViolation):
        symmetric_from_bidirectional(forward, ForwardFlow(uniform_flow(2, 2, 0.0, 0.0)))


def test_symmetric_combination_rejects_size_mismatch():
    with pytest.raises(ContractViolation):
        symmetric_from_bidirectional(ForwardFlow.zeros(2, 2), BackwardFlow.zeros(2, 3))

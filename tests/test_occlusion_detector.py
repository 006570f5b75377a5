"""
Tests for forward/backward consistency occlusion detection
"""

import numpy as np
import pytest

from occlusion import (
    OcclusionMask,
    OcclusionDetector,
    compute_occlusion_mask,
    compute_occlusion_mask_from_frames
)
from processing import ForwardFlow, BackwardFlow, SymmetricFlow, ContractViolation
from tests.common import SyntheticFrameGenerator, uniform_flow


HEIGHT, WIDTH = 24, 32


def flows(forward_vector, backward_vector):
    forward = ForwardFlow(uniform_flow(HEIGHT, WIDTH, *forward_vector))
    backward = BackwardFlow(uniform_flow(HEIGHT, WIDTH, *backward_vector))
    return forward, backward


def test_consistent_flows_are_fully_trusted():
    forward, backward = flows((3.0, -1.0), (-3.0, 1.0))

    mask = compute_occlusion_mask(forward, backward)

    assert mask.shape == (HEIGHT, WIDTH)
    assert mask.data.dtype == np.float32
    assert np.all(mask.data == 1.0)
    assert mask.valid_fraction() == 1.0


def test_equal_flows_are_inconsistent():
    forward, backward = flows((2.0, 0.0), (2.0, 0.0))

    mask = compute_occlusion_mask(forward, backward)

    assert np.all(mask.data == 0.0)
    assert mask.valid_fraction() == 0.0


def test_threshold_is_strict():
    # |vf + vb| == 1.0 exactly, not below the default threshold
    forward, backward = flows((1.0, 0.0), (0.0, 0.0))
    assert np.all(compute_occlusion_mask(forward, backward).data == 0.0)

    forward, backward = flows((0.75, 0.0), (0.0, 0.0))
    assert np.all(compute_occlusion_mask(forward, backward).data == 1.0)

    forward, backward = flows((1.0, 0.0), (0.0, 0.0))
    assert np.all(compute_occlusion_mask(forward, backward, threshold=1.5).data == 1.0)


def test_mask_is_binary_and_localized():
    forward, backward = flows((1.0, 1.0), (-1.0, -1.0))
    forward.data[5:10, 8:12] = [6.0, 0.0]

    mask = compute_occlusion_mask(forward, backward)

    assert set(np.unique(mask.data)) <= {0.0, 1.0}
    assert np.all(mask.data[5:10, 8:12] == 0.0)
    assert mask.data.sum() == HEIGHT * WIDTH - 20
    assert not mask.consistent()[6, 9]


def test_mask_buffer_is_read_only():
    forward, backward = flows((0.0, 0.0), (0.0, 0.0))
    mask = compute_occlusion_mask(forward, backward)

    with pytest.raises(ValueError):
        mask.data[0, 0] = 0.0


def test_mask_wraps_arrays():
    mask = OcclusionMask(np.ones((4, 6), dtype=np.uint8))

    assert mask.data.dtype == np.float32
    assert mask.size == (4, 6)
    with pytest.raises(ContractViolation):
        OcclusionMask(np.ones((4, 6, 2), dtype=np.float32))


def test_wrong_flow_tags_are_contract_violations():
    forward, backward = flows((0.0, 0.0), (0.0, 0.0))

    with pytest.raises(ContractViolation):
        compute_occlusion_mask(backward, forward)
    with pytest.raises(ContractViolation):
        compute_occlusion_mask(forward, SymmetricFlow(backward.data))


def test_size_mismatch_is_a_contract_violation():
    forward = ForwardFlow(uniform_flow(HEIGHT, WIDTH, 0.0, 0.0))
    backward = BackwardFlow(uniform_flow(HEIGHT, WIDTH + 1, 0.0, 0.0))

    with pytest.raises(ContractViolation):
        compute_occlusion_mask(forward, backward)


@pytest.mark.parametrize("threshold", [0.0, -1.0])
def test_non_positive_threshold_is_rejected(threshold):
    forward, backward = flows((0.0, 0.0), (0.0, 0.0))

    with pytest.raises(ValueError):
        compute_occlusion_mask(forward, backward, threshold)
    with pytest.raises(ValueError):
        OcclusionDetector(threshold)


def test_identical_frames_are_fully_consistent():
    frame0, frame1 = SyntheticFrameGenerator().static_pair()

    mask = compute_occlusion_mask_from_frames(frame0, frame1)

    assert mask.shape == frame0.shape[:2]
    assert mask.valid_fraction() == 1.0


def test_translation_is_mostly_consistent():
    frame0, frame1 = SyntheticFrameGenerator().translated_pair(2, 0)

    mask = OcclusionDetector().detect_from_frames(frame0, frame1)

    assert mask.data[12:-12, 12:-12].mean() > 0.9


def test_detector_rejects_bad_frames():
    generator = SyntheticFrameGenerator()

    with pytest.raises(ValueError):
        OcclusionDetector().detect_from_frames(generator.crop(0, 0), None)

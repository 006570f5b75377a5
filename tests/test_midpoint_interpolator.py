"""
End-to-end tests for the midpoint interpolation pipeline
"""

import numpy as np
import pytest

from config import InterpolationConfig, OcclusionParams
from interpolation import MidpointInterpolator, InterpolationResult, average_frames
import interpolation.midpoint_interpolator as midpoint_module
from processing import ForwardFlow, BackwardFlow, SymmetricFlow
from occlusion import OcclusionMask
from evaluation import mean_absolute_error
from tests.common import SyntheticFrameGenerator


BORDER = 8


@pytest.fixture(scope="module")
def generator():
    return SyntheticFrameGenerator()


@pytest.fixture(scope="module")
def interpolator():
    return MidpointInterpolator()


def interior(frame):
    return frame[BORDER:-BORDER, BORDER:-BORDER]


def test_default_pipeline_components(interpolator):
    info = interpolator.get_info()

    assert info['estimator']['algorithm'] == 'farneback'
    assert info['regularizer']['regularizer'] == 'joint_bilateral'
    assert info['occlusion_threshold'] == 1.0
    assert info['config']['occlusion']['enabled'] is True


def test_result_carries_intermediate_fields(interpolator, generator):
    frame0, frame1 = generator.translated_pair(2, 0)

    result = interpolator.interpolate(frame0, frame1)

    assert isinstance(result, InterpolationResult)
    assert result.frame.shape == frame0.shape
    assert result.frame.dtype == np.uint8
    assert result.branch_map.shape == frame0.shape[:2]
    assert isinstance(result.forward_flow, ForwardFlow)
    assert isinstance(result.backward_flow, BackwardFlow)
    assert isinstance(result.symmetric_flow, SymmetricFlow)
    assert isinstance(result.occlusion_mask, OcclusionMask)
    assert sum(result.get_branch_statistics().values()) == pytest.approx(1.0)


def test_zero_motion_reproduces_frame(interpolator, generator):
    frame0, frame1 = generator.static_pair()

    result = interpolator.interpolate(frame0, frame1)

    assert mean_absolute_error(result.frame, frame0) < 0.5
    assert result.occlusion_mask.valid_fraction() == 1.0


def test_translation_beats_cross_dissolve(interpolator, generator):
    frame0, midpoint, frame1 = generator.translated_triplet(4, 2)

    result = interpolator.interpolate(frame0, frame1)

    interpolated_error = mean_absolute_error(interior(result.frame), interior(midpoint))
    dissolve_error = mean_absolute_error(interior(average_frames(frame0, frame1)), interior(midpoint))

    assert interpolated_error < 6.0
    assert interpolated_error < 0.5 * dissolve_error


def test_tvl1_pipeline(generator):
    config = InterpolationConfig(algorithm='tvl1')
    frame0, midpoint, frame1 = generator.translated_triplet(4, 0)

    result = MidpointInterpolator(config).interpolate(frame0, frame1)

    assert mean_absolute_error(interior(result.frame), interior(midpoint)) < 6.0


def test_pipeline_without_regularizer_or_occlusion(generator):
    config = InterpolationConfig(regularizer='none', occlusion=OcclusionParams(enabled=False))
    interpolator = MidpointInterpolator(config)
    frame0, midpoint, frame1 = generator.translated_triplet(2, 2)

    result = interpolator.interpolate(frame0, frame1)

    assert interpolator.regularizer is None
    assert interpolator.detector is None
    assert result.occlusion_mask is None
    assert mean_absolute_error(interior(result.frame), interior(midpoint)) < 6.0


def test_forward_only_path(interpolator, generator):
    frame0, midpoint, frame1 = generator.translated_triplet(4, 0)

    result = interpolator.interpolate_forward_only(frame0, frame1)

    assert isinstance(result.forward_flow, ForwardFlow)
    assert result.backward_flow is None
    assert result.symmetric_flow is None
    assert result.occlusion_mask is None
    assert set(np.unique(result.branch_map)) <= {1, 3}
    assert mean_absolute_error(interior(result.frame), interior(midpoint)) < 8.0


def test_interpolation_is_deterministic(interpolator, generator):
    frame0, frame1 = generator.translated_pair(2, 2)

    first = interpolator.interpolate(frame0, frame1).frame
    second = interpolator.interpolate(frame0, frame1).frame

    assert np.array_equal(first, second)


def test_inputs_are_not_modified(interpolator, generator):
    frame0, frame1 = generator.translated_pair(4, 0)
    before0, before1 = frame0.copy(), frame1.copy()

    interpolator.interpolate(frame0, frame1)

    assert np.array_equal(frame0, before0)
    assert np.array_equal(frame1, before1)


def test_size_mismatch_is_rejected(interpolator, generator):
    frame = generator.crop(0, 0)

    with pytest.raises(ValueError, match="same size"):
        interpolator.interpolate(frame, frame[:, :-1])
    with pytest.raises(ValueError, match="same size"):
        interpolator.interpolate_forward_only(frame, frame[:, :-1])


def test_empty_frame_is_rejected(interpolator, generator):
    with pytest.raises(ValueError, match="empty"):
        interpolator.interpolate(np.zeros((0, 0, 3), dtype=np.uint8), generator.crop(0, 0))


def test_interpolate_sequence(interpolator, generator):
    frames = [generator.crop(-2 * i, 0) for i in range(4)]

    midpoints = interpolator.interpolate_sequence(frames, show_progress=False)

    assert len(midpoints) == 3
    for i, midpoint in enumerate(midpoints):
        assert midpoint.shape == frames[0].shape
        expected = generator.crop(-2 * i - 1, 0)
        assert mean_absolute_error(interior(midpoint), interior(expected)) < 6.0


def test_interpolate_sequence_forward_only(interpolator, generator):
    frames = [generator.crop(0, 0), generator.crop(-2, 0)]

    midpoints = interpolator.interpolate_sequence(frames, forward_only=True, show_progress=False)

    assert len(midpoints) == 1


def test_interpolate_sequence_needs_two_frames(interpolator, generator):
    with pytest.raises(ValueError):
        interpolator.interpolate_sequence([generator.crop(0, 0)], show_progress=False)


def test_invalid_config_is_rejected():
    with pytest.raises(ValueError):
        MidpointInterpolator(InterpolationConfig(algorithm='raft'))
    with pytest.raises(ValueError):
        MidpointInterpolator(InterpolationConfig(occlusion=OcclusionParams(threshold=0)))


def test_progress_bar_closed_when_a_pair_fails(interpolator, generator, monkeypatch):

    class RecordingBar:
        def __init__(self, total=None, desc=None, disable=False):
            self.total = total
            self.n = 0
            self.closed = False

        def update(self, n=1):
            self.n += n

        def close(self):
            self.closed = True

        def __enter__(self):
            return self

        def __exit__(self, *exc_info):
            self.close()
            return False

    bars = []

    def recording_tqdm(*args, **kwargs):
        bars.append(RecordingBar(*args, **kwargs))
        return bars[-1]

    monkeypatch.setattr(midpoint_module, 'tqdm', recording_tqdm)
    frames = [generator.crop(0, 0), generator.crop(-2, 0), generator.crop(-4, 0)[:, :-1]]

    with pytest.raises(ValueError, match="same size"):
        interpolator.interpolate_sequence(frames)

    assert len(bars) == 1
    assert bars[0].total == 2
    assert bars[0].n == 1
    assert bars[0].closed

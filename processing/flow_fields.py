"""
Flow fields - tagged two-component displacement fields

A flow field is a float32 array (H, W, 2) with [dx, dy] per pixel, in pixels.
The same buffer layout carries three different conventions, so each one gets
its own type:

- ForwardFlow:   displacement frame0 -> frame1, consumed as -0.5 * v
- BackwardFlow:  displacement frame1 -> frame0, on the same pixel grid
- SymmetricFlow: displacement from the temporal midpoint to each endpoint,
                 consumed as -v (toward frame0) and +v (toward frame1)
"""

import numpy as np
from typing import Tuple

from .frame_utils import ContractViolation


class FlowField:
    """Base class for a dense 2-channel displacement field"""

    kind = 'flow'

    def __init__(self, data: np.ndarray):
        """
        Wrap a flow buffer

        Args:
            data: Array (H, W, 2). Converted to contiguous float32; an array
                  that already has that layout is adopted without copying.
        """
        data = np.asarray(data)
        if data.ndim != 3 or data.shape[2] != 2:
            raise ContractViolation(f"Flow must have shape (H, W, 2), got {data.shape}")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise ContractViolation("Flow must not be empty")

        self.data = np.ascontiguousarray(data, dtype=np.float32)

    @classmethod
    def zeros(cls, height: int, width: int) -> 'FlowField':
        """Create a zero flow field"""
        return cls(np.zeros((height, width, 2), dtype=np.float32))

    @property
    def shape(self) -> Tuple[int, int, int]:
        return self.data.shape

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def size(self) -> Tuple[int, int]:
        """Spatial size as (height, width)"""
        return self.data.shape[0], self.data.shape[1]

    @property
    def dx(self) -> np.ndarray:
        return self.data[:, :, 0]

    @property
    def dy(self) -> np.ndarray:
        return self.data[:, :, 1]

    def magnitude(self) -> np.ndarray:
        """Per-pixel vector length (H, W)"""
        return np.sqrt(self.dx ** 2 + self.dy ** 2)

    def mean_vector(self) -> np.ndarray:
        """Average [dx, dy] over the field"""
        return self.data.reshape(-1, 2).mean(axis=0)

    def copy(self) -> 'FlowField':
        """Independent clone with the same tag"""
        return type(self)(self.data.copy())

    def __repr__(self):
        return f"{type(self).__name__}({self.width}x{self.height})"


class ForwardFlow(FlowField):
    """Full displacement from frame0 to frame1"""

    kind = 'forward'


class BackwardFlow(FlowField):
    """Full displacement from frame1 to frame0, sampled on the same pixel grid"""

    kind = 'backward'


class SymmetricFlow(FlowField):
    """Displacement from the temporal midpoint toward each endpoint frame"""

    kind = 'symmetric'


def require_flow(flow, flow_type: type, name: str = "flow"):
    """Contract check for a tagged flow argument"""
    if not isinstance(flow, flow_type):
        raise ContractViolation(f"{name} must be a {flow_type.__name__}, "
                                f"got {type(flow).__name__}")


def symmetric_from_bidirectional(forward: ForwardFlow, backward: BackwardFlow) -> SymmetricFlow:
    """
    Combine forward and backward flow into midpoint flow

    The bidirectional consensus 0.5 * (vf(p) - vb(p)) estimates the full
    frame0 -> frame1 displacement; the midpoint lies halfway along it, so
    vs(p) = 0.5 * consensus = 0.25 * (vf(p) - vb(p)). A uniform shift d
    gives vs = d / 2 and the synthesizer reaches both endpoints with p -/+ vs.

    Note: this is not the common vs = 0.5 * (vf - vb) scaling. That form is
    the full displacement, so p -/+ vs would overshoot both frames by half a
    shift; the extra halving is deliberate.

    Both fields are read at the same pixel p. No warping aligns the backward
    field to the forward one first, so moving edges leave some ghosting that
    regularization only partly hides.

    Args:
        forward: Flow frame0 -> frame1
        backward: Flow frame1 -> frame0

    Returns:
        Symmetric flow of the same size
    """
    require_flow(forward, ForwardFlow, "forward")
    require_flow(backward, BackwardFlow, "backward")
    if forward.size != backward.size:
        raise ContractViolation(f"Forward and backward flow sizes differ: "
                                f"{forward.size} vs {backward.size}")

    consensus = 0.5 * (forward.data - backward.data)
    return SymmetricFlow(0.5 * consensus)

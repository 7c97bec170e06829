# Interactive curve editing: pointer events -> CurveModel mutations
"""
State machine behind the curves panel.

Coordinates arrive already converted to curve space (0-255 on both axes).
The controller never talks to the history directly; it calls the
``checkpoint`` callback right before the first mutation of each gesture, so a
whole drag is a single undo step.
"""

import math
from dataclasses import dataclass, replace
from typing import Callable, Optional, Union

from ..config import settings
from ..utils.errors import EditResult
from ..utils.logger import get_logger
from .curves import CHANNELS, CurveModel, LEVEL_MAX, LEVEL_MIN, clamp_level

logger = get_logger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    channel: str
    index: int
    checkpointed: bool = False


EditorState = Union[Idle, Dragging]


def _clamp_coord(value: float) -> float:
    return max(float(LEVEL_MIN), min(float(LEVEL_MAX), float(value)))


class CurveEditorController:
    """
    Maps pointer input onto the curves of whatever image is current.

    Args:
        curves_provider: Returns the CurveModel being edited, or None when no image is selected.
        checkpoint: Called with a description before a gesture first mutates the curves.
        on_change: Called with the channel name after every mutation.
        hit_radius: Distance in curve space within which a click grabs an existing point.
    """

    def __init__(
        self,
        curves_provider: Callable[[], Optional[CurveModel]],
        checkpoint: Callable[[str], None],
        on_change: Optional[Callable[[str], None]] = None,
        hit_radius: float = settings.HIT_TEST_RADIUS,
    ):
        self._curves_provider = curves_provider
        self._checkpoint = checkpoint
        self._on_change = on_change
        self.hit_radius = hit_radius
        self.channel = 'rgb'
        self.state: EditorState = Idle()

    @property
    def curves(self) -> Optional[CurveModel]:
        return self._curves_provider()

    @property
    def is_dragging(self) -> bool:
        return isinstance(self.state, Dragging)

    def _changed(self, channel: str) -> None:
        if self._on_change:
            self._on_change(channel)

    def hit_test(self, x: float, y: float, channel: Optional[str] = None) -> Optional[int]:
        """Index of the nearest point closer than ``hit_radius``, or None."""
        curves = self._curves_provider()
        if curves is None:
            return None
        best_index, best_dist = None, self.hit_radius
        for i, (px, py) in enumerate(curves.points(channel or self.channel)):
            dist = math.hypot(px - x, py - y)
            if dist < best_dist:
                best_index, best_dist = i, dist
        return best_index

    def select_channel(self, channel: str) -> EditResult:
        """Switch the edited channel. Not an edit, so no checkpoint."""
        if channel not in CHANNELS:
            raise ValueError(f"Unknown curve channel '{channel}'")
        if self.is_dragging:
            self.pointer_up()
        self.channel = channel
        return EditResult.OK

    def pointer_down(self, x: float, y: float) -> EditResult:
        curves = self._curves_provider()
        if curves is None:
            return EditResult.NO_IMAGE
        if self.is_dragging:
            self.pointer_up()
        x, y = _clamp_coord(x), _clamp_coord(y)

        index = self.hit_test(x, y)
        if index is not None:
            self.state = Dragging(self.channel, index)
            return EditResult.OK

        if curves.is_full(self.channel):
            logger.debug("Curve '%s' full, click ignored.", self.channel)
            return EditResult.CURVE_FULL
        if any(px == clamp_level(x) for px, _ in curves.points(self.channel)):
            return EditResult.DUPLICATE_X

        self._checkpoint("add curve point")
        index = curves.add_point(self.channel, x, y)
        if index is None:
            return EditResult.CURVE_FULL
        # The insertion checkpoint covers the rest of this drag
        self.state = Dragging(self.channel, index, checkpointed=True)
        self._changed(self.channel)
        return EditResult.OK

    def pointer_move(self, x: float, y: float) -> EditResult:
        if not isinstance(self.state, Dragging):
            return EditResult.NO_POINT
        curves = self._curves_provider()
        if curves is None:
            self.state = Idle()
            return EditResult.NO_IMAGE

        if not self.state.checkpointed:
            self._checkpoint("move curve point")
            self.state = replace(self.state, checkpointed=True)
        curves.move_point(self.state.channel, self.state.index, _clamp_coord(x), _clamp_coord(y))
        self._changed(self.state.channel)
        return EditResult.OK

    def pointer_up(self) -> EditResult:
        if not isinstance(self.state, Dragging):
            return EditResult.OK
        channel = self.state.channel
        self.state = Idle()
        curves = self._curves_provider()
        if curves is not None and not curves.is_sorted(channel):
            curves.normalize(channel)
            self._changed(channel)
        return EditResult.OK

    def double_click(self, x: float, y: float) -> EditResult:
        """Delete the dragged point, or the point under the cursor when idle."""
        curves = self._curves_provider()
        if curves is None:
            return EditResult.NO_IMAGE

        if isinstance(self.state, Dragging):
            channel, index = self.state.channel, self.state.index
        else:
            channel, index = self.channel, self.hit_test(_clamp_coord(x), _clamp_coord(y))
        if index is None:
            return EditResult.NO_POINT
        if index == 0 or index == curves.point_count(channel) - 1:
            return EditResult.ENDPOINT_LOCKED

        self._checkpoint("delete curve point")
        curves.delete_point(channel, index)
        self.state = Idle()
        if not curves.is_sorted(channel):
            curves.normalize(channel)
        self._changed(channel)
        return EditResult.OK

    def reset_channel(self) -> EditResult:
        curves = self._curves_provider()
        if curves is None:
            return EditResult.NO_IMAGE
        self.state = Idle()
        if curves.is_identity(self.channel):
            return EditResult.OK
        self._checkpoint("reset curve")
        curves.reset_channel(self.channel)
        self._changed(self.channel)
        return EditResult.OK

    def cancel(self) -> None:
        """Drop any gesture in progress, e.g. when the image changes."""
        if isinstance(self.state, Dragging):
            self.pointer_up()

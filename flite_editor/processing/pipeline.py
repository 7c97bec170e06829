# Adjustment pipeline: original pixels + adjustments -> new pixels
import itertools
import threading
from dataclasses import dataclass
from typing import Optional

import cv2
import numpy as np

from ..utils.errors import ProcessingError
from ..utils.logger import get_logger
from .curves import DEFAULT_MODE, InterpolationMode
from .lut import build_lookup_tables, compose_channel_luts
from .tone import apply_tonal_adjustments

logger = get_logger(__name__)


@dataclass(frozen=True)
class PreviewTicket:
    """Identifies one requested preview pass. Higher generations are newer."""
    generation: int
    image_id: Optional[str] = None


def _check_buffer(image):
    if not isinstance(image, np.ndarray):
        raise ProcessingError(f"Expected a numpy array, got {type(image).__name__}", step="input")
    if image.dtype != np.uint8:
        raise ProcessingError(f"Expected uint8 pixels, got {image.dtype}", step="input")
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ProcessingError(f"Expected (H, W, 3|4) pixels, got shape {image.shape}", step="input")


class AdjustmentPipeline:
    """
    Applies adjustments to an immutable original buffer.

    Every pass builds the curve lookup tables once and returns a brand-new
    buffer; the last accepted result is kept as ``preview`` and replaced
    wholesale, never patched in place.
    """

    def __init__(self, mode=DEFAULT_MODE):
        self.mode = InterpolationMode.from_setting(mode)
        self._preview: Optional[np.ndarray] = None
        self._generations = itertools.count(1)
        self._latest = 0
        self._lock = threading.Lock()

    @property
    def preview(self) -> Optional[np.ndarray]:
        return self._preview

    def apply(self, original, adjustments):
        """
        Renders ``adjustments`` over ``original``.

        Args:
            original (numpy.ndarray): uint8 (H, W, 4) RGBA or (H, W, 3) RGB. Not modified.
            adjustments (Adjustments): Slider values and curves.

        Returns:
            numpy.ndarray: New uint8 buffer of the same shape. Alpha is copied unchanged.
        """
        _check_buffer(original)
        if original.size == 0:
            return original.copy()

        luts = build_lookup_tables(adjustments.curves, self.mode)
        red_lut, green_lut, blue_lut = compose_channel_luts(luts)

        toned = apply_tonal_adjustments(original[..., :3], adjustments)
        result = np.empty_like(original)
        result[..., 0] = cv2.LUT(np.ascontiguousarray(toned[..., 0]), red_lut).reshape(toned.shape[:2])
        result[..., 1] = cv2.LUT(np.ascontiguousarray(toned[..., 1]), green_lut).reshape(toned.shape[:2])
        result[..., 2] = cv2.LUT(np.ascontiguousarray(toned[..., 2]), blue_lut).reshape(toned.shape[:2])
        if original.shape[2] == 4:
            result[..., 3] = original[..., 3]
        return result

    def render(self, original, adjustments):
        """Synchronous preview pass: apply and keep the result as the current preview."""
        result = self.apply(original, adjustments)
        with self._lock:
            self._latest = next(self._generations)
            self._preview = result
        return result

    # --- Background passes ---

    def submit(self, image_id=None) -> PreviewTicket:
        """Registers a new pass; any ticket handed out earlier becomes stale."""
        with self._lock:
            self._latest = next(self._generations)
            return PreviewTicket(self._latest, image_id)

    def is_current(self, ticket: PreviewTicket) -> bool:
        with self._lock:
            return ticket.generation == self._latest

    def publish(self, ticket: PreviewTicket, result) -> bool:
        """Accepts a finished pass only if no newer pass was submitted meanwhile."""
        with self._lock:
            if ticket.generation != self._latest:
                logger.debug("Dropping stale preview (generation %d, latest %d).",
                             ticket.generation, self._latest)
                return False
            self._preview = result
            return True

    def clear(self) -> None:
        with self._lock:
            self._latest = next(self._generations)
            self._preview = None

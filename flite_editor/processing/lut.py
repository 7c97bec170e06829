# Curve lookup tables
import numpy as np

from ..utils.logger import get_logger
from .curves import CHANNELS, DEFAULT_MODE, InterpolationMode

logger = get_logger(__name__)

LUT_SIZE = 256
_LEVELS = range(LUT_SIZE)


def build_channel_lut(curve_model, channel, mode=DEFAULT_MODE):
    """
    Builds the 256-entry uint8 lookup table for one curve channel.

    Args:
        curve_model (CurveModel): The curves to sample.
        channel (str): One of 'rgb', 'r', 'g', 'b'.
        mode (InterpolationMode): Interpolation used between control points.

    Returns:
        numpy.ndarray: shape (256,), dtype uint8.
    """
    values = np.asarray(curve_model.sample(channel, _LEVELS, mode), dtype=np.float64)
    # Round half up, then clamp into the level range
    return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)


def build_lookup_tables(curve_model, mode=DEFAULT_MODE):
    """Returns {'rgb': lut, 'r': lut, 'g': lut, 'b': lut} for a CurveModel."""
    mode = InterpolationMode.from_setting(mode)
    luts = {channel: build_channel_lut(curve_model, channel, mode) for channel in CHANNELS}
    logger.debug("Built lookup tables for %d channels (%s).", len(luts), mode.value)
    return luts


def compose_channel_luts(luts):
    """
    Folds the master 'rgb' table into each colour table.

    Looking up ``composed['r'][v]`` equals ``luts['r'][luts['rgb'][v]]``,
    so the two curve passes cost a single lookup per pixel.

    Returns:
        tuple: (red_lut, green_lut, blue_lut), each uint8 of shape (256,).
    """
    master = luts['rgb']
    return tuple(luts[channel][master] for channel in ('r', 'g', 'b'))

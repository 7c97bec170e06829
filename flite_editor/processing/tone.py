# Tonal adjustments (exposure, contrast, tone bands) and curve application
"""
The tone transform applied to every pixel.

Order matters:
    1. luminance of the *original* pixel
    2. exposure
    3. contrast
    4-7. highlights, shadows, whites, blacks (additive, gated by the original luminance)
    8. clamp and round to a level
    9. master 'rgb' curve
    10. per-channel 'r' / 'g' / 'b' curves
    11. alpha passes through

``transform_pixel`` is the scalar reference; ``apply_tonal_adjustments`` is the
same arithmetic vectorized over an image for steps 1-8.
"""

import numpy as np

from ..config import settings
from ..utils.logger import get_logger
from .curves import clamp_level
from .lut import build_lookup_tables

logger = get_logger(__name__)

_W_R, _W_G, _W_B = settings.LUMINANCE_WEIGHTS
_BANDS = settings.TONE_BANDS


def compute_luminance(r, g, b):
    """Weighted brightness. Works on scalars and numpy arrays alike."""
    return _W_R * r + _W_G * g + _W_B * b


def exposure_factor(exposure):
    return 1 + (exposure / 100.0)


def contrast_factor(contrast):
    """Standard contrast-correction factor; contrast 0 gives 1.0."""
    # 259 would divide by zero; the slider range stops at 100.
    assert contrast < 259, f"contrast {contrast} outside the supported range"
    return (259.0 * (contrast + 255.0)) / (255.0 * (259.0 - contrast))


def band_shifts(luminance, adjustments):
    """
    Additive shifts for the four tone bands, in application order.

    Each entry is a scalar or an array shaped like ``luminance``; pixels outside
    a band get 0.0.
    """
    mid = _BANDS["midpoint"]
    strength = _BANDS["strength"]
    lum = np.asarray(luminance, dtype=np.float64)

    highlights = np.where(
        lum > mid,
        (adjustments.highlights / 100.0) * ((lum - mid) / _BANDS["highlight_range"]) * -strength,
        0.0,
    )
    shadows = np.where(
        lum < mid,
        (adjustments.shadows / 100.0) * ((mid - lum) / _BANDS["shadow_range"]) * strength,
        0.0,
    )
    whites_at = _BANDS["whites_threshold"]
    whites = np.where(
        lum > whites_at,
        (adjustments.whites / 100.0) * ((lum - whites_at) / _BANDS["whites_range"]) * strength,
        0.0,
    )
    blacks_at = _BANDS["blacks_threshold"]
    blacks = np.where(
        lum < blacks_at,
        (adjustments.blacks / 100.0) * ((blacks_at - lum) / _BANDS["blacks_range"]) * -strength,
        0.0,
    )
    return highlights, shadows, whites, blacks


def apply_tonal_adjustments(rgb, adjustments):
    """
    Steps 1-8 of the tone transform over an image.

    Args:
        rgb (numpy.ndarray): (..., 3) array of original 0-255 values (any dtype).
        adjustments (Adjustments): Slider values.

    Returns:
        numpy.ndarray: uint8 array of the same shape, ready for curve lookup.
    """
    original = rgb.astype(np.float64)
    luminance = compute_luminance(original[..., 0], original[..., 1], original[..., 2])

    out = original * exposure_factor(adjustments.exposure)
    factor = contrast_factor(adjustments.contrast)
    out = factor * (out - 128) + 128

    for shift in band_shifts(luminance, adjustments):
        out += shift[..., np.newaxis]

    out = np.clip(out, 0, 255)
    # Half up, same as clamp_level; np.rint would send 154.5 to 154
    return np.floor(out + 0.5).astype(np.uint8)


def transform_pixel(pixel, adjustments, luts=None):
    """
    Applies the full tone transform to one RGBA pixel.

    Args:
        pixel (tuple): (r, g, b, a) with 0-255 values.
        adjustments (Adjustments): Slider values and curves.
        luts (dict, optional): Prebuilt tables from build_lookup_tables.

    Returns:
        tuple: transformed (r, g, b, a) as ints.
    """
    if luts is None:
        luts = build_lookup_tables(adjustments.curves)
    r, g, b, a = pixel
    luminance = compute_luminance(r, g, b)

    channels = []
    exp = exposure_factor(adjustments.exposure)
    factor = contrast_factor(adjustments.contrast)
    shifts = [float(s) for s in band_shifts(luminance, adjustments)]
    for value in (r, g, b):
        value = float(value) * exp
        value = factor * (value - 128) + 128
        for shift in shifts:
            value += shift
        channels.append(clamp_level(value))

    master = luts['rgb']
    out = tuple(
        int(luts[name][master[value]])
        for name, value in zip(('r', 'g', 'b'), channels)
    )
    return out + (a,)

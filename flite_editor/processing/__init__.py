# Processing package initialization
from .curves import (
    CHANNELS, IDENTITY_POINTS, InterpolationMode, CurveModel,
    monotone_tangents, interpolate_monotone, interpolate_catmull_rom
)
from .adjustments import SLIDERS, Adjustments, clamp_slider
from .lut import build_channel_lut, build_lookup_tables, compose_channel_luts
from .tone import compute_luminance, contrast_factor, transform_pixel, apply_tonal_adjustments
from .pipeline import AdjustmentPipeline, PreviewTicket
from .curve_editor import CurveEditorController, Idle, Dragging

# Application settings
import os

import appdirs

# --- Adjustment Sliders ---
SLIDER_MIN = -100
SLIDER_MAX = 100

# --- Curves ---
CURVE_MAX_POINTS = 10
HIT_TEST_RADIUS = 15  # In curve space (0-255 on both axes)
DEFAULT_INTERPOLATION = "monotone"  # Options: monotone, catmull_rom

# --- Tone Transform ---
# Rec. 601 luma weights, evaluated on the original pixel
LUMINANCE_WEIGHTS = (0.299, 0.587, 0.114)

TONE_BANDS = {
    "midpoint": 128.0,       # Highlights above, shadows below
    "highlight_range": 127.0,
    "shadow_range": 128.0,
    "whites_threshold": 200.0,
    "whites_range": 55.0,
    "blacks_threshold": 55.0,
    "blacks_range": 55.0,
    "strength": 50.0,        # Max additive shift for a band slider at +/-100
}

# --- History ---
HISTORY_MAX_SIZE = 50

# --- Persistence ---
EDITS_FILE = os.environ.get(
    "FLITE_EDITS_FILE",
    os.path.join(appdirs.user_data_dir("Flite", "Flite"), "edits.json"),
)

# --- Images / Export ---
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".bmp", ".gif", ".tif", ".tiff", ".webp")
EXPORT_SUFFIX = "_edited"

EXPORT_DEFAULTS = {
    "png_compression": 6,
    "batch_workers": 4,
}

# --- Logging ---
LOGGING_LEVEL = os.environ.get("FLITE_LOG_LEVEL", "INFO")  # Options: DEBUG, INFO, WARNING, ERROR

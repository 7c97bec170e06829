import pytest
import numpy as np


@pytest.fixture
def sample_image_rgba():
    """Returns a simple 4x4 uint8 RGBA image covering dark, mid and bright tones."""
    img = np.zeros((4, 4, 4), dtype=np.uint8)
    img[:2, :2] = [20, 30, 40, 255]      # Deep shadows
    img[:2, 2:] = [100, 100, 100, 128]   # Shadows/midtones, half transparent
    img[2:, :2] = [180, 150, 120, 255]   # Highlights
    img[2:, 2:] = [250, 240, 230, 0]     # Whites, fully transparent
    return img


@pytest.fixture
def identity_curve():
    """Returns identity curve points."""
    return [(0, 0), (255, 255)]


@pytest.fixture
def sample_curve():
    """Returns a simple S-curve."""
    return [(0, 0), (64, 48), (128, 128), (192, 207), (255, 255)]


@pytest.fixture
def edits_file(tmp_path):
    """Path of an edits file that does not exist yet."""
    return str(tmp_path / "edits.json")

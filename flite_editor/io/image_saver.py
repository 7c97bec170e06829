# Export functionality using Pillow
import os

import numpy as np
from PIL import Image

from ..config import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


def export_filename(image_id):
    """'IMG_0001.jpg' -> 'IMG_0001_edited.png'. Exports are always PNG."""
    stem = os.path.splitext(os.path.basename(str(image_id)))[0]
    return f"{stem}{settings.EXPORT_SUFFIX}.png"


def save_image(image, file_path, png_compression=None):
    """Saves an RGB or RGBA buffer as PNG using Pillow.

    Args:
        image (numpy.ndarray): (H, W, 3) or (H, W, 4) uint8 pixels.
        file_path (str): Destination path.
        png_compression (int): Compression level for PNG (0-9).

    Returns:
        bool: True if saving was successful, False otherwise.
    """
    if image is None or image.size == 0:
        logger.error("Cannot save an empty image.")
        return False

    if not isinstance(file_path, str) or not file_path:
        logger.error("Invalid file path provided for saving.")
        return False

    if image.ndim != 3 or image.shape[2] not in (3, 4):
        logger.error("Image must have 3 or 4 channels to save, got shape %s.", image.shape)
        return False

    if image.dtype != np.uint8:
        logger.warning("Image data type is not uint8. Clipping and converting.")
        image = np.clip(image, 0, 255).astype(np.uint8)

    if png_compression is None:
        png_compression = settings.EXPORT_DEFAULTS["png_compression"]

    output_dir = os.path.dirname(file_path)
    if output_dir and not os.path.exists(output_dir):
        try:
            os.makedirs(output_dir)
            logger.info("Created output directory: %s", output_dir)
        except OSError:
            logger.exception("Could not create directory '%s'", output_dir)
            return False

    try:
        img = Image.fromarray(np.ascontiguousarray(image))
        img.save(file_path, format='PNG', compress_level=max(0, min(9, int(png_compression))))
    except (OSError, ValueError):
        logger.exception("Failed to save image to '%s'", file_path)
        return False

    logger.info("Image saved to %s", file_path)
    return True

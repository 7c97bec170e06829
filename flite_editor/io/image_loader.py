# Image import functionality using Pillow
import os
from typing import List, Optional

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from ..config import settings
from ..utils.logger import get_logger

logger = get_logger(__name__)


def is_image_file(file_name):
    """True if the file name has one of the supported image extensions."""
    return os.path.splitext(str(file_name))[1].lower() in settings.IMAGE_EXTENSIONS


def list_image_files(folder) -> List[str]:
    """
    Lists the image files directly inside ``folder``.

    Args:
        folder (str): Directory to scan.

    Returns:
        list: File names (not paths) sorted case-insensitively. Empty if the
        folder does not exist.
    """
    if not folder or not os.path.isdir(folder):
        logger.warning("Not a folder: '%s'", folder)
        return []
    names = [
        name for name in os.listdir(folder)
        if is_image_file(name) and os.path.isfile(os.path.join(folder, name))
    ]
    return sorted(names, key=str.lower)


def load_image(file_path) -> Optional[np.ndarray]:
    """Loads an image from the specified file path using Pillow.

    Applies the EXIF orientation and converts to RGBA.

    Args:
        file_path (str): The path to the image file.

    Returns:
        numpy.ndarray: (H, W, 4) uint8 RGBA, or None if loading fails.
    """
    if not isinstance(file_path, str) or not file_path:
        logger.error("Invalid file path provided.")
        return None

    if not os.path.isfile(file_path):
        logger.error("File not found at '%s'", file_path)
        return None

    try:
        with Image.open(file_path) as img:
            oriented = ImageOps.exif_transpose(img)
            if oriented.info.get('icc_profile'):
                logger.debug("Ignoring embedded ICC profile in '%s'", file_path)
            rgba = oriented if oriented.mode == 'RGBA' else oriented.convert('RGBA')
            image_np = np.array(rgba, dtype=np.uint8)
    except UnidentifiedImageError:
        logger.error("Pillow could not identify image file format or file is corrupted: '%s'", file_path)
        return None
    except OSError:
        logger.exception("Error loading image '%s'", file_path)
        return None

    if image_np.size == 0:
        logger.error("Loaded image is empty: '%s'", file_path)
        return None

    logger.debug("Loaded image '%s' (%dx%d)", file_path, image_np.shape[1], image_np.shape[0])
    return image_np

# Persistence of per-image adjustments
"""
Stores the committed adjustments of every edited image in one JSON file::

    {"IMG_0001.jpg": {"exposure": 10, ..., "curves": {"rgb": [[0, 0], [255, 255]], ...}}}
"""

import json
import os
from typing import Any, Dict, Mapping, Optional

from ..config import settings
from ..processing.adjustments import Adjustments
from ..utils.errors import ErrorCategory, handle_errors
from ..utils.logger import get_logger

logger = get_logger(__name__)


def serialize_adjustments(adjustments: Mapping[str, Adjustments]) -> Dict[str, Any]:
    return {image_id: adj.to_dict() for image_id, adj in adjustments.items()}


def deserialize_adjustments(data: Any) -> Dict[str, Adjustments]:
    """
    Rebuilds the adjustment map from JSON data.

    A malformed entry is logged and skipped; the other images still load.
    """
    if not isinstance(data, dict):
        logger.warning("Stored edits are not a JSON object (%s); ignoring them.", type(data).__name__)
        return {}
    result: Dict[str, Adjustments] = {}
    for image_id, value in data.items():
        try:
            result[str(image_id)] = Adjustments.from_dict(value)
        except (TypeError, ValueError, KeyError, IndexError, ArithmeticError) as e:
            logger.warning("Skipping corrupt edits for '%s': %s", image_id, e)
    return result


class EditStore:
    """Reads and writes the committed adjustment map."""

    def __init__(self, file_path: Optional[str] = None):
        self.file_path = file_path or settings.EDITS_FILE

    @handle_errors(fallback_value=None, category=ErrorCategory.FILE_IO, log_level="exception")
    def _read_raw(self) -> Any:
        with open(self.file_path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def load(self) -> Dict[str, Adjustments]:
        """
        Loads the stored adjustments.

        Returns:
            dict: image identifier -> Adjustments. Empty if the file is missing,
            unreadable or corrupt.
        """
        if not os.path.isfile(self.file_path):
            logger.info("No stored edits at %s", self.file_path)
            return {}
        raw = self._read_raw()
        if raw is None:
            return {}
        adjustments = deserialize_adjustments(raw)
        logger.info("Loaded edits for %d image(s) from %s", len(adjustments), self.file_path)
        return adjustments

    def save(self, adjustments: Mapping[str, Adjustments]) -> bool:
        """
        Writes the adjustments, replacing the file atomically.

        Returns:
            bool: True if successful.
        """
        tmp_path = f"{self.file_path}.tmp"
        try:
            data = serialize_adjustments(adjustments)
            directory = os.path.dirname(self.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, self.file_path)
            logger.info("Saved edits for %d image(s) to %s", len(data), self.file_path)
            return True
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save edits to %s", self.file_path)
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logger.debug("Could not remove temporary file %s", tmp_path)
            return False

# Batch export handler
import os
import concurrent.futures

from ..config import settings
from ..io.image_loader import list_image_files, load_image
from ..io.image_saver import export_filename, save_image
from ..utils.errors import format_user_error
from ..utils.logger import get_logger
from .adjustments import Adjustments
from .pipeline import AdjustmentPipeline

logger = get_logger(__name__)


def export_batch(folder, output_dir, adjustments_by_image, include_unedited=False,
                 max_workers=None, pipeline=None):
    """Export every image of a folder with its own saved adjustments.

    Args:
        folder (str): Directory holding the original images.
        output_dir (str): Directory for the ``<stem>_edited.png`` files.
        adjustments_by_image (dict): image file name -> Adjustments.
        include_unedited (bool): Also export images without (or with default) adjustments.
        max_workers (int): Thread pool size.
        pipeline (AdjustmentPipeline): Optional pipeline to render with.

    Returns:
        list: A list of tuples (file_path, success_status (bool), error_message (str or None)),
              in folder order.
    """
    pipeline = pipeline or AdjustmentPipeline()
    max_workers = max_workers or settings.EXPORT_DEFAULTS["batch_workers"]

    jobs = []
    for name in list_image_files(folder):
        adjustments = adjustments_by_image.get(name)
        if adjustments is None or adjustments.is_default():
            if not include_unedited:
                continue
            adjustments = adjustments or Adjustments.default()
        jobs.append((name, adjustments))

    if not jobs:
        logger.info("Nothing to export from %s", folder)
        return []

    if not os.path.exists(output_dir):
        try:
            os.makedirs(output_dir)
        except OSError as e:
            logger.error("Error creating output directory %s: %s", output_dir, e)
            return [(os.path.join(folder, name), False, f"Output directory creation failed: {e}")
                    for name, _ in jobs]

    def process_single_file(name, adjustments):
        """Worker function to render and save a single image."""
        file_path = os.path.join(folder, name)
        image = load_image(file_path)
        if image is None:
            return (file_path, False, "Failed to load image or image is empty")
        result = pipeline.apply(image, adjustments)
        out_path = os.path.join(output_dir, export_filename(name))
        if not save_image(result, out_path):
            return (file_path, False, f"Failed to save {out_path}")
        return (file_path, True, None)

    results = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {executor.submit(process_single_file, name, adj): name for name, adj in jobs}
        for future in concurrent.futures.as_completed(futures):
            name = futures[future]
            try:
                results[name] = future.result()
            except Exception as e:
                logger.exception("Unexpected error exporting %s", name)
                results[name] = (os.path.join(folder, name), False,
                                 format_user_error(e, f"exporting {name}"))

    ok = sum(1 for _, success, _ in results.values() if success)
    logger.info("Batch export finished: %d/%d succeeded", ok, len(jobs))
    return [results[name] for name, _ in jobs]

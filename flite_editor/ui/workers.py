from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot
from ..utils.logger import get_logger

logger = get_logger(__name__)


class PreviewWorker(QObject):
    """Worker Class for Background rendering of preview passes.

    Each request carries a PreviewTicket from ``pipeline.submit()``; a result
    is only emitted if no newer ticket was handed out while it was rendering.
    """
    finished = pyqtSignal(object, object)  # Emits (rendered image, ticket)
    error = pyqtSignal(str)                # Emits error message

    def __init__(self, pipeline):
        super().__init__()
        self.pipeline = pipeline

    @pyqtSlot(object, object, object)
    def run(self, ticket, original, adjustments):
        """Renders one pass; stale passes are skipped or discarded.

        ``adjustments`` should be a snapshot (``Adjustments.copy()``) since the
        editor keeps mutating the live value.
        """
        if not self.pipeline.is_current(ticket):
            logger.debug("Skipping superseded preview pass %d", ticket.generation)
            return
        try:
            rendered = self.pipeline.apply(original, adjustments)
        except Exception as e:
            logger.exception("Error during background preview pass")
            self.error.emit(f"Preview failed: {e}")
            return
        if self.pipeline.publish(ticket, rendered):
            self.finished.emit(rendered, ticket)

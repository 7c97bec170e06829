# Editing session state
"""
Everything one editing session owns: the image catalog and current
selection, the two tiers of adjustments (working drafts and committed saves),
the shared undo/redo history, the curve editor and the preview pipeline.
"""

import os
from typing import Callable, Dict, List, Optional

from .errors import EditResult
from .history import EditHistory
from .logger import get_logger
from ..io.edit_store import EditStore
from ..io.image_loader import list_image_files, load_image
from ..io.image_saver import export_filename, save_image
from ..processing.adjustments import Adjustments
from ..processing.curve_editor import CurveEditorController
from ..processing.pipeline import AdjustmentPipeline

logger = get_logger(__name__)


class AdjustmentStore(dict):
    """image identifier -> Adjustments, materialized from ``factory`` on first access."""

    def __init__(self, factory: Optional[Callable[[str], Adjustments]] = None):
        super().__init__()
        self._factory = factory or (lambda image_id: Adjustments.default())

    def __missing__(self, image_id: str) -> Adjustments:
        value = self._factory(image_id)
        self[image_id] = value
        return value


class EditSession:
    """
    State for one editing session.

    Working adjustments are live, unsaved drafts. Committed adjustments are
    what was last saved and are the only thing written to the edit store.
    """

    def __init__(
        self,
        edit_store: Optional[EditStore] = None,
        history: Optional[EditHistory] = None,
        pipeline: Optional[AdjustmentPipeline] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self.edit_store = edit_store or EditStore()
        self.history: EditHistory[Adjustments] = history or EditHistory()
        self.pipeline = pipeline or AdjustmentPipeline()
        self._on_change = on_change

        self.committed: Dict[str, Adjustments] = self.edit_store.load()
        self.working = AdjustmentStore(self._initial_adjustments)

        self.folder: Optional[str] = None
        self.images: List[str] = []
        self.current_index = -1

        self.curve_editor = CurveEditorController(
            curves_provider=self._current_curves,
            checkpoint=self._checkpoint,
            on_change=lambda channel: self._notify_change(),
        )

    def _initial_adjustments(self, image_id: str) -> Adjustments:
        saved = self.committed.get(image_id)
        return saved.copy() if saved is not None else Adjustments.default()

    def _notify_change(self) -> None:
        if self._on_change:
            self._on_change()

    # --- Catalog and navigation ---

    def load_images(self, image_ids, folder=None) -> int:
        """Replaces the catalog and selects the first image. Returns the image count."""
        self.curve_editor.cancel()
        self.folder = folder
        self.images = list(image_ids)
        self.current_index = -1
        logger.info("Loaded %d image(s)%s", len(self.images), f" from {folder}" if folder else "")
        if self.images:
            self.select_image(0)
        return len(self.images)

    def load_folder(self, folder) -> int:
        return self.load_images(list_image_files(folder), folder=folder)

    @property
    def current_image_id(self) -> Optional[str]:
        if 0 <= self.current_index < len(self.images):
            return self.images[self.current_index]
        return None

    def image_path(self, image_id: Optional[str] = None) -> Optional[str]:
        image_id = image_id or self.current_image_id
        if image_id is None:
            return None
        return os.path.join(self.folder, image_id) if self.folder else image_id

    def select_image(self, index: int) -> bool:
        if not 0 <= index < len(self.images):
            return False
        self.curve_editor.cancel()
        self.current_index = index
        # Materialize the working copy on first open
        self.working[self.images[index]]
        self._notify_change()
        return True

    def navigate(self, direction: int) -> bool:
        return self.select_image(self.current_index + direction)

    def select_first(self) -> bool:
        return self.select_image(0)

    def select_last(self) -> bool:
        return self.select_image(len(self.images) - 1)

    # --- Adjustments ---

    @property
    def adjustments(self) -> Optional[Adjustments]:
        image_id = self.current_image_id
        return self.working[image_id] if image_id is not None else None

    def _current_curves(self):
        adjustments = self.adjustments
        return adjustments.curves if adjustments is not None else None

    def _checkpoint(self, description: str) -> None:
        image_id = self.current_image_id
        if image_id is not None:
            self.history.checkpoint(image_id, self.working[image_id], description)

    def set_slider(self, name: str, value, checkpoint: bool = True) -> EditResult:
        """
        Changes one slider of the current image.

        Pass ``checkpoint=False`` for the continuous updates of a slider drag
        after its first event, so the drag is a single undo step.
        """
        adjustments = self.adjustments
        if adjustments is None:
            return EditResult.NO_IMAGE
        if checkpoint:
            self._checkpoint(f"set {name}")
        adjustments.set_slider(name, value)
        self._notify_change()
        return EditResult.OK

    def reset(self) -> EditResult:
        """Restores defaults for the current image, recorded in history, and saves."""
        image_id = self.current_image_id
        if image_id is None:
            return EditResult.NO_IMAGE
        self.curve_editor.cancel()
        self._checkpoint("reset")
        self.working[image_id] = Adjustments.default()
        self.committed[image_id] = Adjustments.default()
        self.edit_store.save(self.committed)
        self._notify_change()
        return EditResult.OK

    def undo(self) -> EditResult:
        image_id = self.current_image_id
        if image_id is None:
            return EditResult.NO_IMAGE
        self.curve_editor.cancel()
        result, state = self.history.undo(image_id, self.working[image_id])
        if result.ok:
            self.working[image_id] = state
            self._notify_change()
        return result

    def redo(self) -> EditResult:
        image_id = self.current_image_id
        if image_id is None:
            return EditResult.NO_IMAGE
        self.curve_editor.cancel()
        result, state = self.history.redo(image_id)
        if result.ok:
            self.working[image_id] = state
            self._notify_change()
        return result

    # --- Save / edited state ---

    def save(self) -> bool:
        """Commits the current image's working adjustments and persists all commits."""
        image_id = self.current_image_id
        if image_id is None:
            logger.warning("No image selected, nothing to save")
            return False
        self.curve_editor.cancel()
        self.committed[image_id] = self.working[image_id].copy()
        return self.edit_store.save(self.committed)

    def has_unsaved_changes(self, image_id: Optional[str] = None) -> bool:
        image_id = image_id or self.current_image_id
        if image_id is None or image_id not in self.working:
            return False
        saved = self.committed.get(image_id, Adjustments.default())
        return self.working[image_id] != saved

    def is_edited(self, image_id: str) -> bool:
        """True if saved, non-default adjustments exist for the image."""
        saved = self.committed.get(image_id)
        return saved is not None and not saved.is_default()

    def edited_identifiers(self) -> List[str]:
        return [image_id for image_id in self.images if self.is_edited(image_id)]

    # --- Rendering ---

    def render_preview(self, original):
        """Renders the current adjustments over ``original`` and keeps it as the preview."""
        adjustments = self.adjustments
        if adjustments is None:
            return None
        return self.pipeline.render(original, adjustments)

    def load_current_image(self):
        path = self.image_path()
        return load_image(path) if path else None

    def export(self, original, output_dir) -> Optional[str]:
        """Renders the current image and writes ``<stem>_edited.png`` into ``output_dir``."""
        image_id = self.current_image_id
        if image_id is None:
            return None
        pixels = self.pipeline.apply(original, self.working[image_id])
        path = os.path.join(output_dir, export_filename(image_id))
        return path if save_image(pixels, path) else None

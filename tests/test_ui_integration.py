"""
Integration tests for UI components.

These tests verify that the Qt widgets drive the curve editor and that the
preview worker respects preview tickets.
"""

import os

import numpy as np
import pytest

# Skip all tests if PyQt6 is not available
pytest.importorskip("PyQt6")

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")


@pytest.fixture
def qapp():
    """Create a QApplication for UI tests."""
    from PyQt6.QtWidgets import QApplication
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def controller():
    from flite_editor.processing.curve_editor import CurveEditorController
    from flite_editor.processing.curves import CurveModel

    model = CurveModel()
    checkpoints = []
    ctrl = CurveEditorController(lambda: model, checkpoint=checkpoints.append)
    ctrl.model = model
    ctrl.checkpoints = checkpoints
    return ctrl


class TestCurvesWidget:
    """Integration tests for CurvesWidget."""

    def test_widget_creation(self, qapp, controller):
        from flite_editor.ui.curves_widget import CurvesWidget

        widget = CurvesWidget(controller)
        assert widget.channel_combo.count() == 4
        assert widget.channel_combo.currentData() == 'rgb'

    def test_channel_combo_switches_controller(self, qapp, controller):
        from flite_editor.ui.curves_widget import CurvesWidget

        widget = CurvesWidget(controller)
        widget.channel_combo.setCurrentIndex(2)
        assert controller.channel == 'g'
        widget.select_channel('b')
        assert widget.channel_combo.currentIndex() == 3
        assert controller.checkpoints == []

    def test_coordinate_mapping(self, qapp, controller):
        from flite_editor.ui.curves_widget import CurveGraphWidget

        graph = CurveGraphWidget(controller)
        graph.resize(275, 275)
        point = graph.world_to_widget(0, 0)
        assert (point.x(), point.y()) == pytest.approx((10, 265))
        x, y = graph.widget_to_world(graph.world_to_widget(128, 64))
        assert x == pytest.approx(128)
        assert y == pytest.approx(64)

    def test_reset_button_emits_change(self, qapp, controller):
        from flite_editor.ui.curves_widget import CurvesWidget

        widget = CurvesWidget(controller)
        controller.model.add_point('rgb', 128, 40)
        changed = []
        widget.curve_changed.connect(changed.append)
        widget.reset_current_curve()
        assert changed == ['rgb']
        assert controller.model.is_identity()

    def test_paint_does_not_fail(self, qapp, controller):
        from flite_editor.ui.curves_widget import CurvesWidget

        controller.model.add_point('rgb', 100, 180)
        widget = CurvesWidget(controller)
        widget.resize(300, 300)
        image = widget.grab()
        assert not image.isNull()


class TestPreviewWorker:

    def test_current_ticket_is_published(self, qapp, sample_image_rgba):
        from flite_editor.processing.adjustments import Adjustments
        from flite_editor.processing.pipeline import AdjustmentPipeline
        from flite_editor.ui.workers import PreviewWorker

        pipeline = AdjustmentPipeline()
        worker = PreviewWorker(pipeline)
        results = []
        worker.finished.connect(lambda image, ticket: results.append((image, ticket)))

        ticket = pipeline.submit("a.jpg")
        worker.run(ticket, sample_image_rgba, Adjustments(exposure=20))
        assert len(results) == 1
        assert results[0][1] is ticket
        assert pipeline.preview is results[0][0]

    def test_stale_ticket_is_skipped(self, qapp, sample_image_rgba):
        from flite_editor.processing.adjustments import Adjustments
        from flite_editor.processing.pipeline import AdjustmentPipeline
        from flite_editor.ui.workers import PreviewWorker

        pipeline = AdjustmentPipeline()
        worker = PreviewWorker(pipeline)
        results = []
        worker.finished.connect(lambda image, ticket: results.append(ticket))

        stale = pipeline.submit()
        pipeline.submit()
        worker.run(stale, sample_image_rgba, Adjustments(exposure=20))
        assert results == []
        assert pipeline.preview is None

    def test_error_is_reported(self, qapp):
        from flite_editor.processing.adjustments import Adjustments
        from flite_editor.processing.pipeline import AdjustmentPipeline
        from flite_editor.ui.workers import PreviewWorker

        pipeline = AdjustmentPipeline()
        worker = PreviewWorker(pipeline)
        errors = []
        worker.error.connect(errors.append)
        worker.run(pipeline.submit(), np.zeros((2, 2), dtype=np.uint8), Adjustments())
        assert len(errors) == 1
        assert errors[0].startswith("Preview failed")


class TestRejectionMessage:

    def test_full_curve_shows_message(self, qapp, controller):
        from flite_editor.ui.curves_widget import CurvesWidget
        from flite_editor.utils.errors import EditResult

        widget = CurvesWidget(controller)
        widget.graph_widget.edit_rejected.emit(EditResult.CURVE_FULL)
        assert widget.status_label.text() == "Curve full"
        widget.curve_changed.emit('rgb')
        assert widget.status_label.text() == ""

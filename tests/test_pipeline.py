import numpy as np
import pytest

from flite_editor.processing.adjustments import Adjustments
from flite_editor.processing.curves import CurveModel
from flite_editor.processing.lut import build_lookup_tables
from flite_editor.processing.pipeline import AdjustmentPipeline
from flite_editor.processing.tone import transform_pixel
from flite_editor.utils.errors import ProcessingError


class TestAdjustmentPipeline:

    def test_default_adjustments_are_noop(self, sample_image_rgba):
        result = AdjustmentPipeline().apply(sample_image_rgba, Adjustments())
        assert np.array_equal(result, sample_image_rgba)
        assert result is not sample_image_rgba

    def test_original_is_never_mutated(self, sample_image_rgba):
        before = sample_image_rgba.copy()
        AdjustmentPipeline().apply(sample_image_rgba, Adjustments(exposure=80, contrast=40))
        assert np.array_equal(sample_image_rgba, before)

    def test_alpha_passes_through(self, sample_image_rgba):
        result = AdjustmentPipeline().apply(sample_image_rgba, Adjustments(exposure=-60, blacks=70))
        assert np.array_equal(result[..., 3], sample_image_rgba[..., 3])

    def test_matches_per_pixel_transform(self, sample_image_rgba, sample_curve):
        curves = CurveModel({'rgb': sample_curve, 'g': [(0, 20), (128, 100), (255, 240)]})
        adj = Adjustments(exposure=15, contrast=-25, highlights=60, shadows=45, whites=-30,
                          blacks=55, curves=curves)
        result = AdjustmentPipeline().apply(sample_image_rgba, adj)
        luts = build_lookup_tables(curves)
        for y in range(sample_image_rgba.shape[0]):
            for x in range(sample_image_rgba.shape[1]):
                pixel = tuple(int(v) for v in sample_image_rgba[y, x])
                assert tuple(int(v) for v in result[y, x]) == transform_pixel(pixel, adj, luts)

    def test_rgb_buffer_supported(self, sample_image_rgba):
        rgb = np.ascontiguousarray(sample_image_rgba[..., :3])
        result = AdjustmentPipeline().apply(rgb, Adjustments(contrast=50))
        assert result.shape == rgb.shape
        assert result.dtype == np.uint8

    def test_end_to_end_contrast(self):
        image = np.full((2, 3, 4), 200, dtype=np.uint8)
        image[..., 3] = 255
        result = AdjustmentPipeline().apply(image, Adjustments(contrast=50))
        assert np.all(result[..., :3] == 235)
        assert np.all(result[..., 3] == 255)

    def test_rejects_wrong_dtype(self):
        with pytest.raises(ProcessingError):
            AdjustmentPipeline().apply(np.zeros((2, 2, 4), dtype=np.float32), Adjustments())

    def test_rejects_wrong_shape(self):
        with pytest.raises(ProcessingError):
            AdjustmentPipeline().apply(np.zeros((2, 2), dtype=np.uint8), Adjustments())

    def test_render_replaces_preview(self, sample_image_rgba):
        pipeline = AdjustmentPipeline()
        assert pipeline.preview is None
        first = pipeline.render(sample_image_rgba, Adjustments(exposure=10))
        second = pipeline.render(sample_image_rgba, Adjustments(exposure=20))
        assert pipeline.preview is second
        assert first is not second


class TestPreviewTickets:

    def test_stale_result_is_dropped(self, sample_image_rgba):
        pipeline = AdjustmentPipeline()
        old = pipeline.submit("a.jpg")
        new = pipeline.submit("a.jpg")
        assert not pipeline.is_current(old)
        stale = pipeline.apply(sample_image_rgba, Adjustments(exposure=10))
        fresh = pipeline.apply(sample_image_rgba, Adjustments(exposure=20))
        assert pipeline.publish(new, fresh)
        assert not pipeline.publish(old, stale)
        assert pipeline.preview is fresh

    def test_tickets_increase(self):
        pipeline = AdjustmentPipeline()
        tickets = [pipeline.submit() for _ in range(3)]
        assert [t.generation for t in tickets] == sorted(t.generation for t in tickets)
        assert pipeline.is_current(tickets[-1])

    def test_clear_invalidates_tickets(self, sample_image_rgba):
        pipeline = AdjustmentPipeline()
        ticket = pipeline.submit()
        pipeline.clear()
        assert not pipeline.publish(ticket, sample_image_rgba)
        assert pipeline.preview is None

"""
Tests for the photo editor session and its history integration.
"""

import unittest

from ICS_Libs.CardModelLib.id_card import create_initial_card
from ICS_Libs.HistoryLib.history_manager import HistoryManager
from ICS_Libs.ImageEditingLib.editor_session import EditorSession
from ICS_Libs.ImageEditingLib.errors import InvalidRegion
from ICS_Libs.ImageEditingLib.image_models import CropRegion, EditParameters, RasterBuffer
from ICS_Libs.ImageEditingLib.preview_renderer import PreviewRenderer


class TestEditorSession(unittest.TestCase):
    """Test EditorSession."""

    def setUp(self):
        self.source = RasterBuffer.solid(200, 100, (100, 100, 100, 255))
        self.history = HistoryManager(create_initial_card())
        self.session = EditorSession(
            self.source,
            self.history,
            renderer=PreviewRenderer(export_scale=1.0, preview_max_dimension=64),
        )

    def test_initial_region_is_centered_square(self):
        region = self.session.region

        self.assertAlmostEqual(region.x, 0.25)
        self.assertAlmostEqual(region.y, 0.0)
        self.assertAlmostEqual(region.width, 0.5)
        self.assertAlmostEqual(region.height, 1.0)
        self.assertTrue(self.session.params.is_identity())

    def test_preview_is_bounded(self):
        preview = self.session.preview()

        self.assertEqual(preview.size, (64, 64))

    def test_update_changes_params_and_preview(self):
        preview = self.session.update(brightness_pct=50)

        self.assertEqual(self.session.params.brightness_pct, 50.0)
        self.assertEqual(preview.pixel(10, 10), (50, 50, 50, 255))

    def test_update_rejects_unknown_parameter(self):
        with self.assertRaises(ValueError):
            self.session.update(hue=10)

    def test_commit_pushes_photo(self):
        snapshot = self.session.commit()

        self.assertTrue(snapshot.can_undo)
        self.assertEqual(snapshot.present.photo.size, (100, 100))

        undone = self.history.undo()
        self.assertIsNone(undone.present.photo)

    def test_repeated_commit_is_noop(self):
        self.session.commit()
        before = self.history.state

        self.session.commit()

        self.assertIs(self.history.state, before)

    def test_reset_all(self):
        self.session.update(rotation_degrees=30, vignette_pct=40)
        self.session.set_region(CropRegion.full_frame())

        self.session.reset_all()

        self.assertEqual(self.session.params, EditParameters())
        self.assertEqual(self.session.region, self.session.initial_region)

    def test_failed_commit_leaves_history_unchanged(self):
        before = self.history.state

        preview = self.session.set_region(CropRegion(0.0, 0.0, 0.0, 0.0))
        self.assertIsNone(preview)

        with self.assertRaises(InvalidRegion):
            self.session.commit()
        self.assertIs(self.history.state, before)

    def test_rejects_non_buffer_source(self):
        with self.assertRaises(TypeError):
            EditorSession(None, self.history)


if __name__ == '__main__':
    unittest.main()

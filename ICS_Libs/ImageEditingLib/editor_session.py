"""
Photo editor session.

Holds the state of one open photo editor: the decoded source, the crop
region and the edit parameters. Every change re-renders the preview; a
commit renders the final photo and pushes it into the document history.
"""

import logging
from dataclasses import replace
from typing import Any, Optional, Tuple

from ICS_Libs.HistoryLib.history_manager import HistoryManager, HistorySnapshot
from ICS_Libs.ImageEditingLib.image_models import CropRegion, EditParameters, RasterBuffer
from ICS_Libs.ImageEditingLib.preview_renderer import PreviewRenderer

logger = logging.getLogger(__name__)


class EditorSession:
    """
    One editing session over a source photo.

    Args:
        source: Decoded source image
        history: History of the document whose `photo` field is edited
        renderer: Preview/export configuration (default: PreviewRenderer())
        displayed_size: Size the source is shown at in the crop view
                        (default: natural size)
    """

    def __init__(
        self,
        source: RasterBuffer,
        history: HistoryManager,
        renderer: Optional[PreviewRenderer] = None,
        displayed_size: Optional[Tuple[float, float]] = None,
    ):
        if not isinstance(source, RasterBuffer):
            raise TypeError(f"Expected RasterBuffer, got {type(source)}")

        self.source = source
        self.history = history
        self.renderer = renderer or PreviewRenderer()
        self.displayed_size = displayed_size or (source.width, source.height)
        self.initial_region = CropRegion.centered_square(*self.displayed_size)
        self.region = self.initial_region
        self.params = EditParameters()

    def preview(self) -> Optional[RasterBuffer]:
        return self.renderer.render_preview(self.source, self.region, self.params, self.displayed_size)

    def set_region(self, region: CropRegion) -> Optional[RasterBuffer]:
        self.region = region
        return self.preview()

    def update(self, **changes: Any) -> Optional[RasterBuffer]:
        """Change edit parameters (e.g. brightness_pct=120) and re-render the preview."""
        self.params = self.params.with_changes(**changes)
        return self.preview()

    def reset_all(self) -> Optional[RasterBuffer]:
        """Restore neutral parameters and the initial crop."""
        self.params = EditParameters()
        self.region = self.initial_region
        return self.preview()

    def commit(self) -> HistorySnapshot:
        """
        Render the final photo and store it in the document.

        Raises:
            RenderError: If the final render fails; history is left unchanged
        """
        photo = self.renderer.render_final(self.source, self.region, self.params, self.displayed_size)
        snapshot = self.history.apply(lambda card: replace(card, photo=photo))
        logger.info(f"Committed {photo.width}x{photo.height} photo to document")
        return snapshot

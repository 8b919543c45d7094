"""
Preview and final rendering for the photo editor.

`render` is a pure function of (source, crop, parameters, output scale):
CropTransformer followed by FilterPipeline, with no state kept between calls.
`PreviewRenderer` binds the two call sites the editor needs: a cheap
interactive preview recomputed on every slider change, and the final
high-resolution render triggered by a commit. `CoalescingPreviewScheduler`
keeps the interactive path responsive by rendering only the newest request.

Classes:
    RenderResult: Discriminated result of a render call
    PreviewRenderer: Preview/export render configuration
    CoalescingPreviewScheduler: Background renderer that drops superseded requests

Functions:
    render: Crop, transform and filter a source buffer
"""

import concurrent.futures
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from ICS_Libs.constants import (
    DEFAULT_EXPORT_SCALE,
    DEFAULT_PREVIEW_SCALE,
    PREVIEW_MAX_DIMENSION,
)
from ICS_Libs.ImageEditingLib.crop_transformer import compute_crop_plan
from ICS_Libs.ImageEditingLib.errors import RenderError
from ICS_Libs.ImageEditingLib.filter_pipeline import apply_filters
from ICS_Libs.ImageEditingLib.image_models import CropRegion, EditParameters, RasterBuffer

logger = logging.getLogger(__name__)

DisplayedSize = Optional[Tuple[float, float]]


def render(
    source: RasterBuffer,
    region: CropRegion,
    params: EditParameters,
    output_scale: float = 1.0,
    displayed_size: DisplayedSize = None,
) -> RasterBuffer:
    """
    Crop, rotate, zoom and filter a source buffer.

    Args:
        source: Decoded source image
        region: Crop region as fractions of the displayed size
        params: Edit parameters
        output_scale: Output density multiplier
        displayed_size: Size the source is displayed at (default: natural size)

    Returns:
        New RasterBuffer with the rendered output

    Raises:
        InvalidRegion: If the crop resolves to zero pixels
        UnsupportedBufferSize: If the output is above the safety ceiling
        RenderTargetUnavailable: If the output surface cannot be allocated
    """
    if not isinstance(source, RasterBuffer):
        raise TypeError(f"Expected RasterBuffer, got {type(source)}")

    plan = compute_crop_plan(source.size, displayed_size, region, output_scale)
    return apply_filters(source, plan, params)


@dataclass(frozen=True)
class RenderResult:
    """Either a rendered buffer or the error that prevented it."""
    buffer: Optional[RasterBuffer] = None
    error: Optional[RenderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class PreviewRenderer:
    """
    Render configuration for the interactive preview and the final export.

    Example:
        >>> renderer = PreviewRenderer()
        >>> thumb = renderer.render_preview(source, region, params)
        >>> photo = renderer.render_final(source, region, params)
    """

    def __init__(
        self,
        preview_scale: float = DEFAULT_PREVIEW_SCALE,
        export_scale: float = DEFAULT_EXPORT_SCALE,
        preview_max_dimension: int = PREVIEW_MAX_DIMENSION,
    ):
        if preview_scale <= 0 or export_scale <= 0:
            raise ValueError(
                f"Scales must be positive, got preview={preview_scale}, export={export_scale}"
            )
        if preview_max_dimension < 1:
            raise ValueError(f"preview_max_dimension must be >= 1, got {preview_max_dimension}")

        self.preview_scale = float(preview_scale)
        self.export_scale = float(export_scale)
        self.preview_max_dimension = int(preview_max_dimension)

    def preview_output_scale(
        self,
        source: RasterBuffer,
        region: CropRegion,
        displayed_size: DisplayedSize = None,
    ) -> float:
        """Scale that fits the preview inside preview_max_dimension."""
        plan = compute_crop_plan(source.size, displayed_size, region, 1.0)
        longest = max(plan.crop_width, plan.crop_height)
        return min(1.0, self.preview_max_dimension / longest) * self.preview_scale

    def try_render(
        self,
        source: RasterBuffer,
        region: CropRegion,
        params: EditParameters,
        output_scale: float,
        displayed_size: DisplayedSize = None,
    ) -> RenderResult:
        """Render and return the outcome as a RenderResult instead of raising."""
        try:
            return RenderResult(buffer=render(source, region, params, output_scale, displayed_size))
        except RenderError as exc:
            return RenderResult(error=exc)

    def render_preview(
        self,
        source: RasterBuffer,
        region: CropRegion,
        params: EditParameters,
        displayed_size: DisplayedSize = None,
    ) -> Optional[RasterBuffer]:
        """
        Cheap interactive render.

        Render failures are logged and skipped; the caller keeps showing
        the previous preview.

        Returns:
            The preview buffer, or None if this render was skipped
        """
        try:
            scale = self.preview_output_scale(source, region, displayed_size)
        except RenderError as exc:
            logger.warning(f"Skipping preview render: {exc}")
            return None

        result = self.try_render(source, region, params, scale, displayed_size)
        if not result.ok:
            logger.warning(f"Skipping preview render: {result.error}")
            return None
        return result.buffer

    def render_final(
        self,
        source: RasterBuffer,
        region: CropRegion,
        params: EditParameters,
        displayed_size: DisplayedSize = None,
    ) -> RasterBuffer:
        """
        Final high-resolution render at export_scale.

        Raises:
            RenderError: Any render failure, for the caller to surface
        """
        buffer = render(source, region, params, self.export_scale, displayed_size)
        logger.info(f"Final render complete: {buffer.width}x{buffer.height}")
        return buffer


PreviewCallback = Callable[[Optional[RasterBuffer]], None]


class CoalescingPreviewScheduler:
    """
    Renders previews on a single worker thread, newest request only.

    Each submit() supersedes every earlier request. A request that has not
    started yet is dropped; a render already running finishes but its result
    is discarded if a newer request arrived meanwhile. The callback runs on
    the worker thread with the newest preview (or None if it was skipped or failed).

    Example:
        >>> scheduler = CoalescingPreviewScheduler(source, on_preview)
        >>> for value in slider_values:
        ...     scheduler.submit(region, params.with_changes(brightness_pct=value))
        >>> scheduler.wait()
        >>> scheduler.shutdown()
    """

    def __init__(
        self,
        source: RasterBuffer,
        callback: PreviewCallback,
        renderer: Optional[PreviewRenderer] = None,
        displayed_size: DisplayedSize = None,
    ):
        if not callable(callback):
            raise ValueError(f"callback must be callable, got {type(callback)}")

        self.source = source
        self.callback = callback
        self.renderer = renderer or PreviewRenderer()
        self.displayed_size = displayed_size

        self._executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
        self._lock = threading.Lock()
        self._idle = threading.Event()
        self._idle.set()
        self._pending: Optional[Tuple[CropRegion, EditParameters]] = None
        self._generation = 0
        self._running = False
        self._rendered_count = 0

    @property
    def rendered_count(self) -> int:
        """Number of renders actually executed (superseded requests excluded)."""
        return self._rendered_count

    def submit(self, region: CropRegion, params: EditParameters) -> int:
        """
        Request a preview for the given crop and parameters.

        Returns:
            Generation number of this request

        Raises:
            RuntimeError: If the scheduler has been shut down
        """
        with self._lock:
            self._generation += 1
            self._pending = (region, params)
            generation = self._generation
            if not self._running:
                try:
                    self._executor.submit(self._drain)
                except RuntimeError:
                    self._pending = None
                    raise
                self._running = True
                self._idle.clear()
        logger.debug(f"Preview request {generation} queued")
        return generation

    def _drain(self) -> None:
        finished = False
        try:
            while True:
                with self._lock:
                    if self._pending is None:
                        self._running = False
                        self._idle.set()
                        finished = True
                        return
                    region, params = self._pending
                    self._pending = None
                    generation = self._generation

                try:
                    buffer = self.renderer.render_preview(
                        self.source, region, params, self.displayed_size
                    )
                except Exception:
                    logger.exception(f"Preview render {generation} failed")
                    buffer = None

                with self._lock:
                    self._rendered_count += 1
                    stale = generation != self._generation

                if stale:
                    logger.debug(f"Discarding stale preview {generation}")
                    continue
                try:
                    self.callback(buffer)
                except Exception:
                    logger.exception("Preview callback failed")
        finally:
            if not finished:
                with self._lock:
                    self._pending = None
                    self._running = False
                    self._idle.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until no render is running or pending."""
        return self._idle.wait(timeout)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)

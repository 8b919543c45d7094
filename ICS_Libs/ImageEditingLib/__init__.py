"""
ImageEditingLib - Core photo editing functionality

This module provides the raster models, crop mapping, filter pipeline and
preview rendering for the ID Card Studio photo editor.
"""

from ICS_Libs.ImageEditingLib.image_models import (
    CropRegion,
    EditParameters,
    RasterBuffer,
    RgbaColor,
)
from ICS_Libs.ImageEditingLib.errors import (
    InvalidRegion,
    RenderError,
    RenderTargetUnavailable,
    UnsupportedBufferSize,
)
from ICS_Libs.ImageEditingLib.crop_transformer import CropPlan, compute_crop_plan
from ICS_Libs.ImageEditingLib.filter_pipeline import apply_filters
from ICS_Libs.ImageEditingLib.preview_renderer import (
    CoalescingPreviewScheduler,
    PreviewRenderer,
    RenderResult,
    render,
)
from ICS_Libs.ImageEditingLib.editor_session import EditorSession

__all__ = [
    "CropRegion",
    "EditParameters",
    "RasterBuffer",
    "RgbaColor",
    "InvalidRegion",
    "RenderError",
    "RenderTargetUnavailable",
    "UnsupportedBufferSize",
    "CropPlan",
    "compute_crop_plan",
    "apply_filters",
    "CoalescingPreviewScheduler",
    "PreviewRenderer",
    "RenderResult",
    "render",
    "EditorSession",
]

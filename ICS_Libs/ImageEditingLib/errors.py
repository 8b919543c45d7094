"""
Render error taxonomy for the photo editing pipeline.

Classes:
    RenderError: Base class for every failure raised by a render call
    InvalidRegion: Crop resolves to a zero-area (or negative) output
    RenderTargetUnavailable: Output surface could not be allocated
    UnsupportedBufferSize: Requested output exceeds the safety ceiling
"""


class RenderError(Exception):
    """Base class for render failures."""


class InvalidRegion(RenderError, ValueError):
    """The crop region resolves to zero or negative pixels after scaling.

    Recoverable: the caller should clamp or reject the gesture that
    produced the region.
    """


class RenderTargetUnavailable(RenderError, RuntimeError):
    """The drawing surface for a render call could not be acquired.

    Fatal for that single call; retrying on the next frame is fine.
    """


class UnsupportedBufferSize(RenderError, ValueError):
    """The requested output dimensions exceed the configured ceiling.

    Recoverable by reducing the output scale or the crop size.
    """

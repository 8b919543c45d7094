"""
Constants and configuration values for ID Card Studio.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# History constants
MAX_HISTORY = 50

# Render safety ceilings
MAX_OUTPUT_DIMENSION = 8192
MAX_OUTPUT_PIXELS = 40_000_000

# Output scales
PREVIEW_MAX_DIMENSION = 256
DEFAULT_PREVIEW_SCALE = 1.0
DEFAULT_EXPORT_SCALE = 4.0

# Initial crop proposed when an image is loaded (percent of displayed width)
INITIAL_CROP_PERCENT = 90.0

# Neutral edit parameters
DEFAULT_ROTATION_DEGREES = 0.0
DEFAULT_ZOOM = 1.0
DEFAULT_BRIGHTNESS_PCT = 100.0
DEFAULT_CONTRAST_PCT = 100.0
DEFAULT_SHARPEN_PCT = 0.0
DEFAULT_VIGNETTE_PCT = 0.0

# Filter constants
SHARPEN_KERNEL = (
    (0, -1, 0),
    (-1, 5, -1),
    (0, -1, 0),
)
TONE_MIDPOINT = 128.0
TRANSPARENT = (0, 0, 0, 0)

# Tolerance for crop region bounds checks
REGION_EPSILON = 1e-9

# Default card values
EMPLOYEE_ID_PREFIX = "EMP-"
DEFAULT_PHOTO_SHAPE = "circle"
DEFAULT_ORIENTATION = "portrait"
DEFAULT_THEME = "blue-orange"
DEFAULT_THEME_COLOR_1 = "#0047AB"
DEFAULT_THEME_COLOR_2 = "#FF6F00"
DEFAULT_TEXT_COLOR = "#FFFFFF"
DEFAULT_BACKGROUND_TYPE = "gradient"
DEFAULT_BACKGROUND_COLOR = "#4a90e2"
DEFAULT_BACKGROUND_IMAGE_FIT = "cover"
DEFAULT_TERMS_COLOR = "#E0E0E0"
DEFAULT_BORDER_COLOR = "#000000"

DEFAULT_EMPLOYEE_NAME_FONT_SIZE = 17
DEFAULT_COMPANY_NAME_FONT_SIZE = 16
DEFAULT_DETAILS_FONT_SIZE = 12
DEFAULT_TERMS_FONT_SIZE = 9
DEFAULT_WEBSITE_FONT_SIZE = 10
DEFAULT_PHOTO_SIZE = 128
DEFAULT_COMPANY_LOGO_SIZE = 55
DEFAULT_PHOTO_VERTICAL_OFFSET = 45
DEFAULT_PHOTO_HORIZONTAL_OFFSET = 50
DEFAULT_QR_CODE_SIZE = 72
DEFAULT_BORDER_WIDTH = 0
DEFAULT_BORDER_RADIUS = 16

# Supported choices
PHOTO_SHAPES = {"circle", "square", "rounded", "rhombus", "hexagon", "pentagon", "octagon", "star"}
ORIENTATIONS = {"portrait", "landscape"}
BACKGROUND_TYPES = {"gradient", "solid", "image"}
BACKGROUND_IMAGE_FITS = {"cover", "contain", "tile"}

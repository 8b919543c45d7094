"""
ID card document model.

The card record is an immutable value: every edit produces a new instance
(usually via dataclasses.replace), which is what HistoryManager stores.

Classes:
    DetailField: One label/value row printed on the card
    IdCardData: Complete card configuration

Functions:
    generate_employee_id: Random EMP-NNNN identifier
    create_initial_card: Default card for a new document
"""

import datetime
import random
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple

from ICS_Libs.constants import (
    BACKGROUND_IMAGE_FITS,
    BACKGROUND_TYPES,
    DEFAULT_BACKGROUND_COLOR,
    DEFAULT_BACKGROUND_IMAGE_FIT,
    DEFAULT_BACKGROUND_TYPE,
    DEFAULT_BORDER_COLOR,
    DEFAULT_BORDER_RADIUS,
    DEFAULT_BORDER_WIDTH,
    DEFAULT_COMPANY_LOGO_SIZE,
    DEFAULT_COMPANY_NAME_FONT_SIZE,
    DEFAULT_DETAILS_FONT_SIZE,
    DEFAULT_EMPLOYEE_NAME_FONT_SIZE,
    DEFAULT_ORIENTATION,
    DEFAULT_PHOTO_HORIZONTAL_OFFSET,
    DEFAULT_PHOTO_SHAPE,
    DEFAULT_PHOTO_SIZE,
    DEFAULT_PHOTO_VERTICAL_OFFSET,
    DEFAULT_QR_CODE_SIZE,
    DEFAULT_TERMS_COLOR,
    DEFAULT_TERMS_FONT_SIZE,
    DEFAULT_TEXT_COLOR,
    DEFAULT_THEME,
    DEFAULT_THEME_COLOR_1,
    DEFAULT_THEME_COLOR_2,
    DEFAULT_WEBSITE_FONT_SIZE,
    EMPLOYEE_ID_PREFIX,
    ORIENTATIONS,
    PHOTO_SHAPES,
)
from ICS_Libs.ImageEditingLib.image_models import RasterBuffer


@dataclass(frozen=True)
class DetailField:
    id: int
    label: str
    value: str = ""


@dataclass(frozen=True)
class IdCardData:
    """Configuration of one ID card.

    `photo` holds the committed output of the photo editor. Logo, QR and
    background images are references resolved by the host application.
    """
    name: str = ""
    department: str = ""
    website: str = ""
    photo: Optional[RasterBuffer] = None
    photo_shape: str = DEFAULT_PHOTO_SHAPE
    orientation: str = DEFAULT_ORIENTATION
    company_name: str = ""
    company_logo_url: Optional[str] = None
    theme: str = DEFAULT_THEME
    theme_color_1: str = DEFAULT_THEME_COLOR_1
    theme_color_2: str = DEFAULT_THEME_COLOR_2
    employee_name_font_size: int = DEFAULT_EMPLOYEE_NAME_FONT_SIZE
    company_name_font_size: int = DEFAULT_COMPANY_NAME_FONT_SIZE
    text_color: str = DEFAULT_TEXT_COLOR
    photo_size: int = DEFAULT_PHOTO_SIZE
    details_font_size: int = DEFAULT_DETAILS_FONT_SIZE
    company_logo_size: int = DEFAULT_COMPANY_LOGO_SIZE
    photo_vertical_offset: int = DEFAULT_PHOTO_VERTICAL_OFFSET
    photo_horizontal_offset: int = DEFAULT_PHOTO_HORIZONTAL_OFFSET
    details: Tuple[DetailField, ...] = field(default_factory=tuple)
    qr_code_url: Optional[str] = None
    qr_code_size: int = DEFAULT_QR_CODE_SIZE
    background_type: str = DEFAULT_BACKGROUND_TYPE
    background_color: str = DEFAULT_BACKGROUND_COLOR
    background_image_url: Optional[str] = None
    background_image_fit: str = DEFAULT_BACKGROUND_IMAGE_FIT
    terms_and_conditions: str = ""
    terms_font_size: int = DEFAULT_TERMS_FONT_SIZE
    terms_color: str = DEFAULT_TERMS_COLOR
    website_font_size: int = DEFAULT_WEBSITE_FONT_SIZE
    border_width: int = DEFAULT_BORDER_WIDTH
    border_color: str = DEFAULT_BORDER_COLOR
    border_radius: int = DEFAULT_BORDER_RADIUS

    def __post_init__(self):
        if self.photo_shape not in PHOTO_SHAPES:
            raise ValueError(f"Unsupported photo_shape: {self.photo_shape}")
        if self.orientation not in ORIENTATIONS:
            raise ValueError(f"Unsupported orientation: {self.orientation}")
        if self.background_type not in BACKGROUND_TYPES:
            raise ValueError(f"Unsupported background_type: {self.background_type}")
        if self.background_image_fit not in BACKGROUND_IMAGE_FITS:
            raise ValueError(f"Unsupported background_image_fit: {self.background_image_fit}")
        if self.photo is not None and not isinstance(self.photo, RasterBuffer):
            raise TypeError(f"photo must be a RasterBuffer or None, got {type(self.photo)}")
        if not isinstance(self.details, tuple):
            object.__setattr__(self, "details", tuple(self.details))

    def with_detail(self, detail_id: int, **changes: Any) -> "IdCardData":
        """Return a copy with one detail row updated."""
        if not any(d.id == detail_id for d in self.details):
            raise KeyError(f"No detail row with id {detail_id}")
        details = tuple(
            replace(d, **changes) if d.id == detail_id else d
            for d in self.details
        )
        return replace(self, details=details)


def generate_employee_id(rng: Optional[random.Random] = None) -> str:
    rng = rng or random.Random()
    return f"{EMPLOYEE_ID_PREFIX}{rng.randint(1000, 9999)}"


def _one_year_later(day: datetime.date) -> datetime.date:
    try:
        return day.replace(year=day.year + 1)
    except ValueError:
        # Feb 29 -> Mar 1
        return day.replace(year=day.year + 1, month=3, day=1)


def create_initial_card(
    today: Optional[datetime.date] = None,
    rng: Optional[random.Random] = None,
) -> IdCardData:
    """
    Build the default card for a new document.

    Args:
        today: Issue date (default: today)
        rng: Random source for the employee ID (default: new Random)

    Returns:
        IdCardData with the default theme and six detail rows
    """
    today = today or datetime.date.today()
    details = (
        DetailField(1, "Post"),
        DetailField(2, "ID", generate_employee_id(rng)),
        DetailField(3, "Phone"),
        DetailField(4, "Email"),
        DetailField(5, "Issued", today.isoformat()),
        DetailField(6, "Expires", _one_year_later(today).isoformat()),
    )
    return IdCardData(details=details)

"""
Unit tests for the ID card document model.
"""

import datetime
import random
import re
from dataclasses import replace

import pytest

from ICS_Libs.CardModelLib.id_card import (
    DetailField,
    IdCardData,
    create_initial_card,
    generate_employee_id,
)
from ICS_Libs.ImageEditingLib.image_models import RasterBuffer


class TestInitialCard:
    """Tests for create_initial_card()."""

    def test_defaults(self, initial_card):
        assert initial_card.photo is None
        assert initial_card.photo_shape == "circle"
        assert initial_card.orientation == "portrait"
        assert initial_card.background_type == "gradient"
        assert initial_card.photo_size == 128

    def test_detail_rows(self, initial_card):
        labels = [detail.label for detail in initial_card.details]

        assert labels == ["Post", "ID", "Phone", "Email", "Issued", "Expires"]
        assert [detail.id for detail in initial_card.details] == [1, 2, 3, 4, 5, 6]

    def test_employee_id_format(self, initial_card):
        employee_id = initial_card.details[1].value

        assert re.fullmatch(r"EMP-\d{4}", employee_id)

    def test_issue_and_expiry_dates(self, initial_card):
        assert initial_card.details[4].value == "2024-05-17"
        assert initial_card.details[5].value == "2025-05-17"

    def test_leap_day_expiry(self):
        card = create_initial_card(today=datetime.date(2024, 2, 29), rng=random.Random(1))

        assert card.details[5].value == "2025-03-01"

    def test_seeded_ids_are_reproducible(self):
        assert generate_employee_id(random.Random(3)) == generate_employee_id(random.Random(3))


class TestIdCardData:
    """Tests for IdCardData validation and helpers."""

    def test_rejects_unknown_photo_shape(self):
        with pytest.raises(ValueError):
            IdCardData(photo_shape="triangle")

    def test_rejects_unknown_orientation(self):
        with pytest.raises(ValueError):
            IdCardData(orientation="diagonal")

    def test_rejects_non_buffer_photo(self):
        with pytest.raises(TypeError):
            IdCardData(photo=b"\x00\x00\x00\x00")

    def test_details_list_becomes_tuple(self):
        card = IdCardData(details=[DetailField(1, "Post")])

        assert card.details == (DetailField(1, "Post"),)

    def test_with_detail_updates_one_row(self, initial_card):
        updated = initial_card.with_detail(3, value="555-0100")

        assert updated.details[2].value == "555-0100"
        assert updated.details[0] == initial_card.details[0]
        assert initial_card.details[2].value == ""

    def test_with_detail_unknown_id(self, initial_card):
        with pytest.raises(KeyError):
            initial_card.with_detail(99, value="x")

    def test_equality_includes_photo_pixels(self, initial_card):
        """Cards with equal photos compare equal; any pixel change does not."""
        first = replace(initial_card, photo=RasterBuffer.solid(2, 2, (1, 2, 3, 255)))
        same = replace(initial_card, photo=RasterBuffer.solid(2, 2, (1, 2, 3, 255)))
        other = replace(initial_card, photo=RasterBuffer.solid(2, 2, (1, 2, 4, 255)))

        assert first == same
        assert first != other

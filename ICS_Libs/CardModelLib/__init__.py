"""
CardModelLib - The editable ID card document
"""

from ICS_Libs.CardModelLib.id_card import (
    DetailField,
    IdCardData,
    create_initial_card,
    generate_employee_id,
)

__all__ = [
    "DetailField",
    "IdCardData",
    "create_initial_card",
    "generate_employee_id",
]

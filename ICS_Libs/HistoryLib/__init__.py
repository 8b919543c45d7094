"""
HistoryLib - Undo/redo history for editable documents
"""

from ICS_Libs.HistoryLib.history_manager import (
    HistoryManager,
    HistorySnapshot,
    HistoryState,
)

__all__ = [
    "HistoryManager",
    "HistorySnapshot",
    "HistoryState",
]

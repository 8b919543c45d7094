"""
ICS_Libs - ID Card Studio Library Modules

This package contains core functionality for the ID Card Studio project,
organized into specialized sub-packages:

- ImageEditingLib: Photo crop/rotate/filter pipeline and preview rendering
- HistoryLib: Bounded linear undo/redo history
- CardModelLib: The editable ID card document model
"""

__version__ = "0.1.0"

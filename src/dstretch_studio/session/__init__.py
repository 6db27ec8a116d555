"""
Editing session state.

Provides the in-memory undo/redo history of rendered images.
"""

from dstretch_studio.session.history import HistoryStack

__all__ = [
    "HistoryStack",
]

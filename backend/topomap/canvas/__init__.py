"""Headless canvas side of the editor: API client, layout and interaction state."""
from .api import ApiError, TopologyApi
from .controller import CanvasController, Selection, SelectionKind
from .viewport import Viewport

__all__ = ["ApiError", "TopologyApi", "CanvasController", "Selection", "SelectionKind", "Viewport"]

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..schemas.topology import Position, TopologyNode
from .layout import NODE_HEIGHT, NODE_WIDTH


@dataclass
class Viewport:
    """Pan/zoom of the canvas: screen = flow * zoom + (x, y)."""

    width: float = 1280.0
    height: float = 800.0
    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0
    min_zoom: float = 0.5
    max_zoom: float = 2.0

    def screen_to_flow(self, sx: float, sy: float) -> Position:
        return Position(x=(sx - self.x) / self.zoom, y=(sy - self.y) / self.zoom)

    def center(self) -> Position:
        return self.screen_to_flow(self.width / 2, self.height / 2)

    def fit_view(self, nodes: Iterable[TopologyNode], padding: float = 0.1) -> None:
        nodes = list(nodes)
        if not nodes:
            return
        left = min(n.position.x for n in nodes)
        top = min(n.position.y for n in nodes)
        right = max(n.position.x for n in nodes) + NODE_WIDTH
        bottom = max(n.position.y for n in nodes) + NODE_HEIGHT

        bw, bh = right - left, bottom - top
        zoom = min(self.width / (bw * (1 + padding)), self.height / (bh * (1 + padding)))
        self.zoom = max(self.min_zoom, min(self.max_zoom, zoom))
        self.x = self.width / 2 - (left + bw / 2) * self.zoom
        self.y = self.height / 2 - (top + bh / 2) * self.zoom

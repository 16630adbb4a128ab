"""Interaction state behind the topology canvas.

The controller keeps a point-in-time copy of the graph from GET /topology and
turns user gestures into API calls. After every create/delete it reloads the
whole graph; the only local patches are the two single-field status updates
(applied once the server accepted them) and drag positions.

Every API failure ends up as a toast. Nothing here raises ApiError to the
caller.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from ..schemas.common import DeviceType, Status
from ..schemas.topology import EdgeData, Position, TopologyEdge, TopologyNode
from .api import ApiError, TopologyApi
from .layout import layout_nodes
from .toast import Toaster
from .viewport import Viewport

logger = logging.getLogger(__name__)

EDGE_COLORS = {"up": "#22c55e", "warn": "#f59e0b", "down": "#ef4444"}

ZOOM_TO_NODE_PADDING = 0.65
AFTER_LAYOUT_PADDING = 0.4


class SelectionKind(str, Enum):
    NOTHING = "nothing"
    NODE = "node"
    EDGE = "edge"


@dataclass(frozen=True)
class Selection:
    kind: SelectionKind = SelectionKind.NOTHING
    id: Optional[str] = None


@dataclass
class Modals:
    add_device: bool = False
    add_link: bool = False
    confirm_delete: bool = False


def edge_style(status: Status) -> Dict[str, object]:
    """How the canvas draws a link of the given status."""
    return {
        "type": "smoothstep",
        "animated": status != "up",
        "style": {"stroke": EDGE_COLORS.get(status, EDGE_COLORS["down"]), "strokeWidth": 2},
        "markerEnd": {"type": "arrowclosed"},
    }


class CanvasController:
    def __init__(self, api: TopologyApi, viewport: Optional[Viewport] = None,
                 toaster: Optional[Toaster] = None) -> None:
        self.api = api
        self.viewport = viewport or Viewport()
        self.toaster = toaster or Toaster()

        self.nodes: List[TopologyNode] = []
        self.edges: List[TopologyEdge] = []
        self.loading = False
        self.selection = Selection()
        self.modals = Modals()

        # add-link form defaults, refreshed on every load
        self.link_from = ""
        self.link_to = ""

        self.query = ""
        self.search_focused = False

    # --- helpers ---

    def toast(self, text: str) -> None:
        self.toaster.show(text)

    def _node(self, node_id: Optional[str]) -> Optional[TopologyNode]:
        return next((n for n in self.nodes if n.id == node_id), None)

    def _edge(self, edge_id: Optional[str]) -> Optional[TopologyEdge]:
        return next((e for e in self.edges if e.id == edge_id), None)

    @property
    def selected_node(self) -> Optional[TopologyNode]:
        if self.selection.kind is not SelectionKind.NODE:
            return None
        return self._node(self.selection.id)

    @property
    def selected_edge(self) -> Optional[TopologyEdge]:
        if self.selection.kind is not SelectionKind.EDGE:
            return None
        return self._edge(self.selection.id)

    def flow_edges(self) -> List[Dict[str, object]]:
        rendered = []
        for e in self.edges:
            item = e.model_dump(exclude_none=True)
            item.update(edge_style(e.data.status))
            rendered.append(item)
        return rendered

    def node_options(self) -> List[Tuple[str, str]]:
        return [(n.id, f"{n.data.name} ({n.data.type})") for n in self.nodes]

    # --- loading ---

    async def load(self) -> None:
        self.loading = True
        try:
            topo = await self.api.fetch_topology()
            self.nodes = list(topo.nodes)
            self.edges = list(topo.edges)
            self.link_from = self.nodes[0].id if len(self.nodes) > 0 else ""
            self.link_to = self.nodes[1].id if len(self.nodes) > 1 else ""
        except ApiError as exc:
            self.toast(f"Failed to load: {exc.message}")
        finally:
            self.loading = False

    # --- selection ---

    def on_selection_change(self, node_ids: Sequence[str] = (), edge_ids: Sequence[str] = ()) -> Selection:
        if node_ids:
            self.selection = Selection(SelectionKind.NODE, node_ids[0])
        elif edge_ids:
            self.selection = Selection(SelectionKind.EDGE, edge_ids[0])
        else:
            self.selection = Selection()
        return self.selection

    def clear_selection(self) -> None:
        self.selection = Selection()

    # --- modals ---

    def open_add_device(self) -> None:
        self.modals.add_device = True

    def open_add_link(self) -> None:
        # form defaults come from the last load; fill them if the graph has grown since
        if not self.link_from and self.nodes:
            self.link_from = self.nodes[0].id
        if not self.link_to and len(self.nodes) > 1:
            self.link_to = self.nodes[1].id
        self.modals.add_link = True

    # --- gestures ---

    async def on_node_drag_stop(self, node_id: str, x: float, y: float) -> None:
        # the drag already moved the node; it stays there even if saving fails
        self.nodes = [
            n.model_copy(update={"position": Position(x=x, y=y)}) if n.id == node_id else n
            for n in self.nodes
        ]
        try:
            await self.api.patch_device_position(node_id, x, y)
            self.toast("Position saved")
        except ApiError as exc:
            self.toast(f"Failed to save position: {exc.message}")

    async def change_node_status(self, status: Status) -> None:
        node = self.selected_node
        if node is None:
            return
        try:
            await self.api.patch_device_status(node.id, status)
        except ApiError as exc:
            self.toast(f"Failed to update: {exc.message}")
            return
        self.nodes = [
            n.model_copy(update={"data": n.data.model_copy(update={"status": status})}) if n.id == node.id else n
            for n in self.nodes
        ]
        self.toast("Device status updated")

    async def change_edge_status(self, status: Status) -> None:
        edge = self.selected_edge
        if edge is None:
            return
        try:
            await self.api.patch_link_status(edge.id, status)
        except ApiError as exc:
            self.toast(f"Failed to update link: {exc.message}")
            return
        self.edges = [
            e.model_copy(update={"data": EdgeData(status=status)}) if e.id == edge.id else e
            for e in self.edges
        ]
        self.toast("Link status updated")

    async def create_device(self, name: str, type: DeviceType, ip: Optional[str] = None,
                            position: Optional[Position] = None) -> bool:
        name = name.strip()
        if len(name) < 2:
            self.toast("Name is too short.")
            return False
        ip = (ip or "").strip() or None
        where = position or self.viewport.center()

        try:
            await self.api.create_device(name=name, type=type, ip=ip, status="up", x=where.x, y=where.y)
        except ApiError as exc:
            self.toast(f"Failed to create: {exc.message}")
            return False

        self.modals.add_device = False
        self.toast("Device created")
        await self.load()
        return True

    async def create_link(self, from_id: Optional[str] = None, to_id: Optional[str] = None,
                          label: Optional[str] = None) -> bool:
        from_id = from_id if from_id is not None else self.link_from
        to_id = to_id if to_id is not None else self.link_to
        if not from_id or not to_id:
            self.toast("Pick a source and a target.")
            return False
        if from_id == to_id:
            self.toast("Source and target must be different.")
            return False

        try:
            await self.api.create_link(from_id, to_id, status="up", label=(label or "").strip() or None)
        except ApiError as exc:
            self.toast(f"Failed to connect: {exc.message}")
            return False

        self.modals.add_link = False
        self.toast("Link created")
        await self.load()
        return True

    async def confirm_delete(self) -> bool:
        node, edge = self.selected_node, self.selected_edge
        try:
            if node is not None:
                await self.api.delete_device(node.id)
                self.toast("Device deleted")
            elif edge is not None:
                await self.api.delete_link(edge.id)
                self.toast("Link deleted")
            else:
                self.toast("Nothing selected.")
        except ApiError as exc:
            self.toast(f"Failed to delete: {exc.message}")
            return False

        self.modals.confirm_delete = False
        self.clear_selection()
        await self.load()
        return node is not None or edge is not None

    # --- search ---

    def search(self, query: Optional[str] = None) -> List[TopologyNode]:
        if query is not None:
            self.query = query
        q = self.query.strip().lower()
        if not q:
            return []
        return [
            n for n in self.nodes
            if q in n.data.name.lower()
            or q in (n.data.ip or "").lower()
            or q in n.data.type.lower()
            or q in n.id.lower()
        ]

    def zoom_to_node(self, node_id: str) -> None:
        node = self._node(node_id)
        if node is None:
            return
        self.selection = Selection(SelectionKind.NODE, node_id)
        self.viewport.fit_view([node], padding=ZOOM_TO_NODE_PADDING)

    # --- auto layout ---

    async def auto_layout_and_save(self) -> bool:
        self.nodes = layout_nodes(self.nodes, self.edges, "TB")

        results = await asyncio.gather(
            *(self.api.patch_device_position(n.id, n.position.x, n.position.y) for n in self.nodes),
            return_exceptions=True,
        )
        failures = []
        for result in results:
            if isinstance(result, ApiError):
                failures.append(result)
            elif isinstance(result, BaseException):
                raise result

        if failures:
            logger.info("Auto layout: %d of %d position saves failed", len(failures), len(results))
            self.toast(f"Layout error: {len(failures)} of {len(results)} positions not saved ({failures[0].message})")
            return False

        self.toast("Layout applied and saved")
        self.viewport.fit_view(self.nodes, padding=AFTER_LAYOUT_PADDING)
        return True

    # --- keyboard ---

    def on_key_down(self, key: str, ctrl: bool = False, meta: bool = False) -> bool:
        if key in ("Delete", "Backspace"):
            if self.selected_node is not None or self.selected_edge is not None:
                self.modals.confirm_delete = True
                return True
            return False
        if (ctrl or meta) and key.lower() == "k":
            self.search_focused = True
            return True
        return False

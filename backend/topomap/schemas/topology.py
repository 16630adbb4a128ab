from __future__ import annotations
from typing import List, Literal, Optional

from pydantic import BaseModel

from .common import DeviceType, Status


# Shapes consumed directly by the canvas (React Flow node/edge objects).

class Position(BaseModel):
    x: float
    y: float


class NodeData(BaseModel):
    name: str
    type: DeviceType
    ip: Optional[str] = None
    status: Status


class TopologyNode(BaseModel):
    id: str
    type: Literal["device"] = "device"
    position: Position
    data: NodeData


class EdgeData(BaseModel):
    status: Status = "up"


class TopologyEdge(BaseModel):
    id: str
    source: str
    target: str
    label: Optional[str] = None
    data: EdgeData = EdgeData()
    sourceHandle: Optional[str] = None
    targetHandle: Optional[str] = None


class Topology(BaseModel):
    nodes: List[TopologyNode] = []
    edges: List[TopologyEdge] = []

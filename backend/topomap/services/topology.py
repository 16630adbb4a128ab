from typing import Iterable

from ..models import Device, Link
from ..schemas.topology import EdgeData, NodeData, Position, Topology, TopologyEdge, TopologyNode


def device_to_node(d: Device) -> TopologyNode:
    return TopologyNode(
        id=str(d.id),
        position=Position(x=float(d.x), y=float(d.y)),
        data=NodeData(name=d.name, type=d.type, ip=d.ip, status=d.status),
    )


def link_to_edge(l: Link) -> TopologyEdge:
    return TopologyEdge(
        id=str(l.id),
        source=str(l.from_id),
        target=str(l.to_id),
        label=l.label,
        data=EdgeData(status=l.status),
        sourceHandle=l.from_handle,
        targetHandle=l.to_handle,
    )


def build_topology(devices: Iterable[Device], links: Iterable[Link]) -> Topology:
    """Graph view for the canvas. Input order (creation order) is kept as is."""
    return Topology(
        nodes=[device_to_node(d) for d in devices],
        edges=[link_to_edge(l) for l in links],
    )

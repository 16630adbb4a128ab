from fastapi import APIRouter, Depends

from .deps import get_repository
from ..schemas.topology import Topology
from ..services.repository import TopologyRepository
from ..services.topology import build_topology

router = APIRouter(prefix="/topology", tags=["topology"])


@router.get("", response_model=Topology, response_model_exclude_none=True)
def get_topology(repo: TopologyRepository = Depends(get_repository)):
    return build_topology(repo.list_devices(), repo.list_links())

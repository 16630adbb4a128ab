from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from .deps import get_repository
from ..schemas.link import LinkOut, LinkCreate, LinkUpdate
from ..services.repository import TopologyRepository

router = APIRouter(prefix="/links", tags=["links"])


@router.get("", response_model=list[LinkOut])
def list_links(repo: TopologyRepository = Depends(get_repository)):
    return repo.list_links()


@router.get("/{link_id}", response_model=LinkOut)
def get_link(link_id: UUID, repo: TopologyRepository = Depends(get_repository)):
    return repo.get_link(link_id)


@router.post("", response_model=LinkOut, status_code=status.HTTP_201_CREATED)
def create_link(payload: LinkCreate, repo: TopologyRepository = Depends(get_repository)):
    return repo.create_link(payload)


@router.patch("/{link_id}", response_model=LinkOut)
def update_link(link_id: UUID, payload: LinkUpdate, repo: TopologyRepository = Depends(get_repository)):
    return repo.update_link(link_id, payload.model_dump(exclude_unset=True))


@router.delete("/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_link(link_id: UUID, repo: TopologyRepository = Depends(get_repository)):
    repo.delete_link(link_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

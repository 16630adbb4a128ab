from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from .deps import get_repository
from ..schemas.device import DeviceOut, DeviceCreate, DeviceUpdate, DevicePosition
from ..services.repository import TopologyRepository

router = APIRouter(prefix="/devices", tags=["devices"])


# --- List all devices, oldest first ---
@router.get("", response_model=list[DeviceOut])
def list_devices(repo: TopologyRepository = Depends(get_repository)):
    return repo.list_devices()


# --- Get a single device by ID ---
@router.get("/{device_id}", response_model=DeviceOut)
def get_device(device_id: UUID, repo: TopologyRepository = Depends(get_repository)):
    return repo.get_device(device_id)


# --- Create a device ---
@router.post("", response_model=DeviceOut, status_code=status.HTTP_201_CREATED)
def create_device(payload: DeviceCreate, repo: TopologyRepository = Depends(get_repository)):
    return repo.create_device(payload)


# --- Partial update: only the fields present in the body ---
@router.patch("/{device_id}", response_model=DeviceOut)
def update_device(device_id: UUID, payload: DeviceUpdate, repo: TopologyRepository = Depends(get_repository)):
    return repo.update_device(device_id, payload.model_dump(exclude_unset=True))


# --- Canvas drag / auto layout ---
@router.patch("/{device_id}/position", response_model=DeviceOut)
def update_device_position(device_id: UUID, payload: DevicePosition, repo: TopologyRepository = Depends(get_repository)):
    return repo.update_device_position(device_id, payload.x, payload.y)


# --- Delete a device (its links are removed by the store) ---
@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_device(device_id: UUID, repo: TopologyRepository = Depends(get_repository)):
    repo.delete_device(device_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

from fastapi import Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..services.repository import TopologyRepository


def get_repository(db: Session = Depends(get_db)) -> TopologyRepository:
    return TopologyRepository(db)

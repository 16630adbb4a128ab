import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..db import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        ok = db.execute(text("SELECT 1 AS ok")).scalar() == 1
    except SQLAlchemyError:
        logger.warning("Health check could not reach the database", exc_info=True)
        ok = False
    return {"ok": True, "db": ok}

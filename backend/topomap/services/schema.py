"""Startup schema management.

Tables are created if missing. The one upgrade we carry is widening the
device coordinate columns from integer to double precision for databases
created by early builds.
"""
from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import Integer, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from ..models import Base

logger = logging.getLogger(__name__)

COORDINATE_COLUMNS = ("x", "y")


def ensure_schema(engine: Engine) -> None:
    """Create tables/constraints if missing and apply the coordinate upgrade.

    Errors propagate: the API must not come up against an unready store.
    """
    try:
        Base.metadata.create_all(bind=engine)
        _widen_legacy_coordinates(engine)
    except SQLAlchemyError:
        logger.exception("Schema setup failed")
        raise
    logger.info("Schema ready (%s)", engine.dialect.name)


def legacy_coordinate_columns(engine: Engine) -> list[str]:
    columns = {c["name"]: c["type"] for c in inspect(engine).get_columns("devices")}
    return [name for name in COORDINATE_COLUMNS if isinstance(columns.get(name), Integer)]


def widen_statement(columns: Iterable[str]) -> str:
    parts = [f"ALTER COLUMN {c} TYPE double precision USING {c}::double precision" for c in columns]
    return "ALTER TABLE devices " + ", ".join(parts)


def _widen_legacy_coordinates(engine: Engine) -> None:
    legacy = legacy_coordinate_columns(engine)
    if not legacy:
        return

    if engine.dialect.name != "postgresql":
        # SQLite keeps REAL values in INTEGER-affinity columns, nothing is lost
        logger.warning("devices.%s declared integer; %s cannot alter column types, leaving as is",
                       "/".join(legacy), engine.dialect.name)
        return

    logger.info("Widening devices.%s to double precision", "/".join(legacy))
    with engine.begin() as conn:
        conn.execute(text(widen_statement(legacy)))

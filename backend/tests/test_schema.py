"""Startup schema management."""
from __future__ import annotations

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import IntegrityError

from topomap.db import create_store_engine
from topomap.services.schema import ensure_schema, legacy_coordinate_columns, widen_statement


def test_creates_tables_and_unique_index():
    engine = create_store_engine("sqlite://")

    ensure_schema(engine)

    insp = inspect(engine)
    assert {"devices", "links"} <= set(insp.get_table_names())
    unique = [ix for ix in insp.get_indexes("links") if ix["name"] == "links_unique"]
    assert unique and unique[0]["unique"]
    assert unique[0]["column_names"] == ["from_id", "to_id", "from_handle", "to_handle"]


def test_is_idempotent(test_engine):
    with test_engine.begin() as conn:
        conn.execute(text(
            "INSERT INTO devices (id, name, type, status, x, y, created_at) "
            "VALUES ('0f6b9a4e2b7c4c43a0c1a3f1c2d4e5f6', 'SW1', 'switch', 'up', 1.5, 2.5, '2024-01-01 00:00:00')"
        ))

    ensure_schema(test_engine)
    ensure_schema(test_engine)

    with test_engine.connect() as conn:
        assert conn.execute(text("SELECT count(*) FROM devices")).scalar() == 1


def test_check_constraint_rejects_unknown_status(test_engine):
    with test_engine.connect() as conn, pytest.raises(IntegrityError):
        conn.execute(text(
            "INSERT INTO devices (id, name, type, status, x, y, created_at) "
            "VALUES ('aa', 'SW1', 'switch', 'degraded', 0, 0, '2024-01-01')"
        ))


def test_legacy_integer_coordinates_are_detected_and_kept():
    engine = create_store_engine("sqlite://")
    with engine.begin() as conn:
        conn.execute(text(
            "CREATE TABLE devices (id CHAR(32) PRIMARY KEY, name VARCHAR NOT NULL, type VARCHAR NOT NULL, "
            "ip VARCHAR, status VARCHAR NOT NULL DEFAULT 'up', x INTEGER NOT NULL DEFAULT 0, "
            "y INTEGER NOT NULL DEFAULT 0, created_at DATETIME NOT NULL)"
        ))
        conn.execute(text(
            "INSERT INTO devices (id, name, type, x, y, created_at) "
            "VALUES ('0f6b9a4e2b7c4c43a0c1a3f1c2d4e5f6', 'SW1', 'switch', 7, 9, '2024-01-01 00:00:00')"
        ))

    assert legacy_coordinate_columns(engine) == ["x", "y"]

    ensure_schema(engine)

    with engine.connect() as conn:
        assert conn.execute(text("SELECT x, y FROM devices")).one() == (7, 9)
    assert "links" in inspect(engine).get_table_names()


def test_widen_statement():
    sql = widen_statement(["x", "y"])
    assert sql == (
        "ALTER TABLE devices "
        "ALTER COLUMN x TYPE double precision USING x::double precision, "
        "ALTER COLUMN y TYPE double precision USING y::double precision"
    )


def test_fresh_schema_has_no_legacy_columns(test_engine):
    assert legacy_coordinate_columns(test_engine) == []

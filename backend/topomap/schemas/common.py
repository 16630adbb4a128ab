from typing import Annotated, Literal

from pydantic import Field


DeviceType = Literal["hub", "switch", "router", "ap", "server"]
Status = Literal["up", "warn", "down"]

# JSON numbers only: no "12" -> 12.0 coercion, no NaN/inf
Coordinate = Annotated[float, Field(strict=True, allow_inf_nan=False)]


def reject_null(value):
    if value is None:
        raise ValueError("may not be null")
    return value

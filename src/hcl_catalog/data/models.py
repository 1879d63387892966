from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

RawRow = dict[str, Any]

NOT_AVAILABLE = "N/A"
DEFAULT_BRAND = "Generic"
DEFAULT_TYPE = "Component"


class SheetContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    is_firmware: bool = False


class DriverEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    os: str
    ver: str = NOT_AVAILABLE


class Product(BaseModel):
    """
    One aggregated catalog entry, keyed by `model`.
    Instances are frozen; the aggregator builds them once per load.
    """

    model_config = ConfigDict(frozen=True)

    id: str = NOT_AVAILABLE
    model: str
    brand: str = DEFAULT_BRAND
    type: str = DEFAULT_TYPE
    fw: str = NOT_AVAILABLE
    drivers: tuple[DriverEntry, ...] = Field(default_factory=tuple)


class Group(BaseModel):
    """A user-defined collection of products targeting one OS."""

    id: str
    name: str
    items: list[str] = Field(default_factory=list)
    os: str
    color: str

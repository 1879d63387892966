from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from hcl_catalog.data.models import DEFAULT_BRAND, DEFAULT_TYPE


@dataclass(frozen=True)
class FillDownState:
    """
    Last valid vendor/component seen in the current sheet.
    Spreadsheets export merged cells as a value on the first row and blanks below it;
    this state carries those values forward. A fresh state is used for every sheet.
    """

    vendor: str = DEFAULT_BRAND
    component: str = DEFAULT_TYPE
    last_model: Optional[str] = None


@dataclass(frozen=True)
class EffectiveRow:
    model: Optional[str]
    vendor: str
    component: str


def observe(
    state: FillDownState,
    model: Optional[str],
    vendor: Optional[str],
    component: Optional[str],
) -> tuple[FillDownState, EffectiveRow]:
    """
    Fold one row into the state and return the row's effective values.
    Vendor/component only move forward on rows that carry a model.
    """
    if model:
        state = replace(
            state,
            vendor=vendor or state.vendor,
            component=component or state.component,
            last_model=model,
        )
        return state, EffectiveRow(model=model, vendor=state.vendor, component=state.component)

    return state, EffectiveRow(
        model=None,
        vendor=vendor or state.vendor,
        component=component or state.component,
    )

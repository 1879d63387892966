from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from hcl_catalog.data.field_mapper import FieldResolver
from hcl_catalog.data.fill_down import FillDownState, observe
from hcl_catalog.data.models import (
    NOT_AVAILABLE,
    DriverEntry,
    Product,
    SheetContext,
)
from hcl_catalog.logic.os_normalizer import clean_os_label

logger = logging.getLogger(__name__)

CONTINUATION_POLICIES = ("skip", "attach")


@dataclass
class _ProductDraft:
    id: str
    model: str
    brand: str
    type: str
    fw: str = NOT_AVAILABLE
    drivers: list[DriverEntry] = field(default_factory=list)

    def freeze(self) -> Product:
        return Product(
            id=self.id,
            model=self.model,
            brand=self.brand,
            type=self.type,
            fw=self.fw,
            drivers=tuple(self.drivers),
        )


@dataclass(frozen=True)
class AggregationResult:
    products: list[Product]
    observed_os: frozenset[str]


def build_sheet_contexts(names: Sequence[str], firmware_sheet: str = "FW") -> list[SheetContext]:
    return [SheetContext(name=name, is_firmware=(name == firmware_sheet)) for name in names]


def aggregate(
    sheets: Sequence[SheetContext],
    rows_per_sheet: Sequence[Any],
    resolver: Optional[FieldResolver] = None,
    continuation: str = "skip",
) -> AggregationResult:
    """
    Fold the rows of every sheet into one product per model.

    Sheets are processed in the given order, rows in source order. Firmware-sheet
    rows update `fw`/`id`; every other row appends a driver entry for its OS.
    Rows without a model are skipped (or, with continuation="attach", credited
    to the last model seen in the same sheet). Never raises on row data.
    """
    if continuation not in CONTINUATION_POLICIES:
        raise ValueError(f"Unknown continuation policy: {continuation}")

    resolver = resolver or FieldResolver()
    drafts: dict[str, _ProductDraft] = {}
    observed_os: set[str] = set()

    for index, sheet in enumerate(sheets):
        rows = rows_per_sheet[index] if index < len(rows_per_sheet) else None
        if not isinstance(rows, list):
            logger.warning(f"Sheet '{sheet.name}' has no row data; skipping")
            continue

        state = FillDownState()
        used = skipped = 0
        for row in rows:
            if not isinstance(row, dict):
                skipped += 1
                continue

            state, effective = observe(
                state,
                resolver.resolve(row, "model"),
                resolver.resolve(row, "vendor"),
                resolver.resolve(row, "component"),
            )
            model_key = effective.model
            if model_key is None and continuation == "attach":
                model_key = state.last_model
            if model_key is None:
                skipped += 1
                continue

            row_id = resolver.resolve(row, "id")
            draft = drafts.get(model_key)
            if draft is None:
                draft = _ProductDraft(
                    id=row_id or NOT_AVAILABLE,
                    model=model_key,
                    brand=effective.vendor,
                    type=effective.component,
                )
                drafts[model_key] = draft

            if sheet.is_firmware:
                fw = resolver.resolve(row, "firmware_version")
                if fw:
                    draft.fw = fw
                if row_id:
                    draft.id = row_id
            else:
                os_label = clean_os_label(resolver.resolve_os(row, sheet.name))
                if os_label:
                    observed_os.add(os_label)
                    draft.drivers.append(
                        DriverEntry(os=os_label, ver=resolver.resolve(row, "driver_version") or NOT_AVAILABLE)
                    )
            used += 1

        logger.debug(f"Sheet '{sheet.name}': {used} rows aggregated, {skipped} skipped")

    return AggregationResult(
        products=[draft.freeze() for draft in drafts.values()],
        observed_os=frozenset(observed_os),
    )

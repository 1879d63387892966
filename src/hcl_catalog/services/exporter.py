import csv
import io
import logging
from pathlib import Path
from typing import List, Optional

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from hcl_catalog.config import settings
from hcl_catalog.data.models import NOT_AVAILABLE, Group
from hcl_catalog.logic.commands import update_command
from hcl_catalog.services.catalog import ProductCatalog

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = [
    "Type",
    "Brand",
    "Model",
    "FW_Version",
    "Target_OS",
    "Driver_Version",
    "SWID",
    "Update_Command",
]


class GroupExporter:
    """
    Builds CSV/XLSX snapshots of a group: one record per product for the group's target OS.
    """

    def __init__(self, catalog: ProductCatalog, output_dir: Optional[Path] = None):
        self.catalog = catalog
        self.output_dir = Path(output_dir or settings.paths.output_dir)

    def rows(self, group: Group) -> List[List[str]]:
        records = []
        for model in group.items:
            product = self.catalog.find_by_model(model)
            if product is None:
                logger.warning(f"Group {group.id}: '{model}' is no longer in the catalog; skipped")
                continue
            driver = self.catalog.driver_for(product, group.os)
            records.append(
                [
                    product.type,
                    product.brand,
                    product.model,
                    product.fw,
                    group.os,
                    driver.ver if driver else NOT_AVAILABLE,
                    product.id,
                    update_command(product).replace(",", " "),
                ]
            )
        return records

    def filename(self, group: Group, suffix: str) -> str:
        safe_name = group.name.replace(" ", "_").replace("/", "-")
        safe_os = group.os.replace(" ", "_").replace("/", "-")
        return f"HCL_{safe_name}_{safe_os}.{suffix}"

    def to_csv(self, group: Group) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(EXPORT_COLUMNS)
        writer.writerows(self.rows(group))
        return buffer.getvalue()

    def to_xlsx(self, group: Group) -> bytes:
        wb = Workbook()
        ws = wb.active
        ws.title = "HCL"
        ws.append(EXPORT_COLUMNS)
        for record in self.rows(group):
            ws.append(record)
        _autosize(ws)
        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    def export(self, group: Group, fmt: str = "csv") -> Path:
        if fmt not in ("csv", "xlsx"):
            raise ValueError(f"Unsupported export format: {fmt}")
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / self.filename(group, fmt)
        if fmt == "csv":
            # BOM so spreadsheet apps detect UTF-8
            path.write_text(self.to_csv(group), encoding="utf-8-sig")
        else:
            path.write_bytes(self.to_xlsx(group))
        return path


def _autosize(ws):
    for column_cells in ws.columns:
        length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column_cells)
        ws.column_dimensions[get_column_letter(column_cells[0].column)].width = min(max(length + 2, 12), 60)

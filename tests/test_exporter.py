import csv
import io

from openpyxl import load_workbook

from hcl_catalog.data.models import DriverEntry, Group, Product
from hcl_catalog.services.catalog import ProductCatalog
from hcl_catalog.services.exporter import EXPORT_COLUMNS, GroupExporter


def _catalog():
    return ProductCatalog(
        products=(
            Product(
                id="SW-1",
                model="X710-DA2",
                brand="Intel",
                type="Network",
                fw="9.20",
                drivers=(DriverEntry(os="Windows Server 2022", ver="1.12"),),
            ),
            Product(model="Widget, Rev B", brand="Acme", fw="2.0"),
        )
    )


def _group(**overrides):
    data = {"id": "g1", "name": "Rack A", "items": ["X710-DA2", "Widget, Rev B", "Gone"], "os": "Windows Server 2022", "color": "#000"}
    data.update(overrides)
    return Group(**data)


def test_csv_rows_per_group_os(tmp_path):
    exporter = GroupExporter(_catalog(), output_dir=tmp_path)
    rows = list(csv.reader(io.StringIO(exporter.to_csv(_group()))))

    assert rows[0] == EXPORT_COLUMNS
    assert rows[1] == [
        "Network",
        "Intel",
        "X710-DA2",
        "9.20",
        "Windows Server 2022",
        "1.12",
        "SW-1",
        "nvmupdate64e -l log.txt -c nvmupdate.cfg -id SW-1",
    ]
    # No driver for the target OS -> N/A; commas in the command become spaces.
    assert rows[2][5] == "N/A"
    assert rows[2][7] == 'fw_update_tool --device "Widget  Rev B" --firmware 2.0.bin'
    # Models missing from the catalog are dropped.
    assert len(rows) == 3


def test_export_writes_files(tmp_path):
    exporter = GroupExporter(_catalog(), output_dir=tmp_path)
    group = _group(os="RHEL 9")

    csv_path = exporter.export(group, "csv")
    assert csv_path.name == "HCL_Rack_A_RHEL_9.csv"
    assert csv_path.read_text(encoding="utf-8-sig").splitlines()[0] == ",".join(EXPORT_COLUMNS)

    xlsx_path = exporter.export(group, "xlsx")
    ws = load_workbook(xlsx_path).active
    assert [c.value for c in ws[1]] == EXPORT_COLUMNS
    assert ws["C2"].value == "X710-DA2"
    assert ws["F2"].value == "N/A"

import pytest

from hcl_catalog.exceptions import DataSourceError


SHEET_ROWS = {
    "Windows": [
        {"Component": "Network", "Vendor": "Intel", "Description": "X710-DA2", "OS": "Windows Server 2022 (LTSC)", "Driver": "1.12"},
        {"Component": "", "Vendor": "", "Description": "E810-XXV", "OS": "Windows Server 2019", "Driver": "1.9"},
        {"Component": "Storage", "Vendor": "Broadcom", "Description": "MegaRAID 9560", "OS": "Windows Server 2022", "Driver": ""},
        {"Component": "", "Vendor": "", "Description": "", "OS": "Windows Server 2019", "Driver": "7.7"},
    ],
    "RHEL": [
        {"component": "Network", "vendor": "Mellanox", "Model Name": "ConnectX-6", "Operating System": "RHEL 9.2", "Version": "5.8"},
        {"component": "", "vendor": "", "Model Name": "X710-DA2", "Operating System": "RHEL 8.6", "Version": "not supported"},
    ],
    "FW": [
        {"Description": "X710-DA2", "FW Version": "9.20", "SWID": "SW-100"},
        {"Description": "ConnectX-6", "FW": "20.31"},
        {"Description": "Orphan-FW-Only", "FW Version": "1.0"},
    ],
}


class FakeRowSource:
    """Serves rows from memory; sheets listed in `failing` raise like a dead network."""

    def __init__(self, sheets=None, failing=()):
        self.sheets = sheets if sheets is not None else SHEET_ROWS
        self.failing = set(failing)
        self.calls = []

    def fetch_rows(self, sheet_name):
        self.calls.append(sheet_name)
        if sheet_name in self.failing:
            raise DataSourceError(f"network down for {sheet_name}")
        return [dict(row) for row in self.sheets.get(sheet_name, [])]


@pytest.fixture
def sheet_rows():
    return {name: [dict(r) for r in rows] for name, rows in SHEET_ROWS.items()}


@pytest.fixture
def fake_source():
    return FakeRowSource()


@pytest.fixture
def source_factory():
    return FakeRowSource

import pytest
import requests

from hcl_catalog.exceptions import ConfigError, DataSourceError
from hcl_catalog.services.loader import load_catalog
from hcl_catalog.sync.provider import (
    GoogleSheetsApiProvider,
    OpenSheetProvider,
    build_provider,
    values_to_rows,
)
from hcl_catalog.sync.service import SyncService
from hcl_catalog.config import GoogleSettings, SheetSettings


class FakeResp:
    def __init__(self, status_code: int, payload=None):
        self.status_code = status_code
        self.payload = payload

    def json(self):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def test_fetch_all_degrades_failed_sheet(source_factory):
    source = source_factory(failing={"RHEL"})
    service = SyncService(provider=source, sheet_names=["Windows", "RHEL", "FW"])
    rows = service.fetch_all()

    assert list(rows) == ["Windows", "RHEL", "FW"]
    assert rows["RHEL"] == []
    assert len(rows["Windows"]) == 4
    assert sorted(source.calls) == ["FW", "RHEL", "Windows"]

    status = service.get_status()["sheets"]
    assert status["RHEL"]["status"] == "error"
    assert "network down" in status["RHEL"]["error"]
    assert status["Windows"] == {**status["Windows"], "status": "ok", "rows": 4}


def test_missing_configuration_is_skipped():
    service = SyncService(provider=OpenSheetProvider(spreadsheet_id=""), sheet_names=["Windows"])
    assert service.fetch_all() == {"Windows": []}
    assert service.status["Windows"]["status"] == "skipped"


def test_load_catalog_with_one_sheet_down(source_factory):
    service = SyncService(provider=source_factory(failing={"FW"}), sheet_names=["Windows", "RHEL", "FW"])
    catalog = load_catalog(service, firmware_sheet="FW", continuation="skip")

    assert [p.model for p in catalog.products] == ["X710-DA2", "E810-XXV", "MegaRAID 9560", "ConnectX-6"]
    assert catalog.find_by_model("X710-DA2").fw == "N/A"
    assert catalog.os_list == ("RHEL 8.6", "RHEL 9.2", "Windows Server 2019", "Windows Server 2022")
    assert catalog.sources["FW"]["status"] == "error"


def test_load_catalog_total_failure_is_empty(source_factory):
    sheets = ["Windows", "RHEL", "FW"]
    service = SyncService(provider=source_factory(failing=set(sheets)), sheet_names=sheets)
    catalog = load_catalog(service)
    assert len(catalog) == 0
    assert catalog.os_list == ()
    assert catalog.default_os == "Windows"


def test_opensheet_provider_retries(monkeypatch):
    calls = []

    def fake_get(url, params=None, timeout=None):
        calls.append(url)
        if len(calls) == 1:
            return FakeResp(503)
        return FakeResp(200, [{"Description": "NIC-A"}])

    monkeypatch.setattr("hcl_catalog.sync.provider.requests.get", fake_get)
    provider = OpenSheetProvider(spreadsheet_id="sheet123", base_url="https://example.test/", backoff_seconds=0)

    assert provider.fetch_rows("Windows Server") == [{"Description": "NIC-A"}]
    assert calls == ["https://example.test/sheet123/Windows%20Server"] * 2


def test_opensheet_provider_network_error(monkeypatch):
    def fake_get(url, params=None, timeout=None):
        raise requests.ConnectionError("boom")

    monkeypatch.setattr("hcl_catalog.sync.provider.requests.get", fake_get)
    provider = OpenSheetProvider(spreadsheet_id="sheet123", max_retries=2, backoff_seconds=0)
    with pytest.raises(DataSourceError):
        provider.fetch_rows("RHEL")


@pytest.mark.parametrize("resp", [
    FakeResp(200, {"error": "Sheet not found"}),
    FakeResp(200, ValueError("not json")),
    FakeResp(404),
])
def test_opensheet_provider_rejects_bad_payload(monkeypatch, resp):
    monkeypatch.setattr("hcl_catalog.sync.provider.requests.get", lambda url, params=None, timeout=None: resp)
    provider = OpenSheetProvider(spreadsheet_id="sheet123", backoff_seconds=0)
    with pytest.raises(DataSourceError):
        provider.fetch_rows("FW")


def test_google_provider_with_api_key(monkeypatch):
    seen = {}

    def fake_get(url, params=None, timeout=None):
        seen["url"], seen["params"] = url, params
        return FakeResp(200, {"values": [["Description", "FW Version"], ["NIC-A", "3.0"], ["NIC-B"]]})

    monkeypatch.setattr("hcl_catalog.sync.provider.requests.get", fake_get)
    provider = GoogleSheetsApiProvider(spreadsheet_id="abc", api_key="k", backoff_seconds=0)

    rows = provider.fetch_rows("FW")
    assert rows == [{"Description": "NIC-A", "FW Version": "3.0"}, {"Description": "NIC-B", "FW Version": ""}]
    assert seen["url"].endswith("/spreadsheets/abc/values/FW")
    assert seen["params"] == {"key": "k"}


def test_google_provider_requires_credentials():
    with pytest.raises(ConfigError):
        GoogleSheetsApiProvider(spreadsheet_id="abc").fetch_rows("FW")


def test_values_to_rows_ignores_blank_headers():
    assert values_to_rows([]) == []
    assert values_to_rows([["Model", ""], ["A", "x"]]) == [{"Model": "A"}]


def test_build_provider_selection():
    assert isinstance(build_provider(SheetSettings(spreadsheet_id="x"), GoogleSettings()), OpenSheetProvider)
    google = build_provider(SheetSettings(provider="google", spreadsheet_id="x"), GoogleSettings(api_key="k"))
    assert isinstance(google, GoogleSheetsApiProvider)
    with pytest.raises(ConfigError):
        build_provider(SheetSettings.model_construct(provider="ftp"), GoogleSettings())

import logging
import time
from pathlib import Path
from typing import Any, Callable, List, Optional, Protocol
from urllib.parse import quote

import requests
from google.auth.transport.requests import AuthorizedSession
from google.oauth2 import service_account

from hcl_catalog.data.models import RawRow
from hcl_catalog.exceptions import ConfigError, DataSourceError

logger = logging.getLogger(__name__)

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class RowSource(Protocol):
    def fetch_rows(self, sheet_name: str) -> List[RawRow]:
        ...


class _RetryingProvider:
    def __init__(self, max_retries: int = 3, backoff_seconds: float = 1.0, timeout: float = 15.0):
        self.max_retries = max(1, max_retries)
        self.backoff_seconds = backoff_seconds
        self.timeout = timeout

    def _get_json(self, label: str, requester: Callable[[], Any]) -> Any:
        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries):
            try:
                resp = requester()
            except requests.RequestException as exc:  # network failure
                last_error = DataSourceError(f"Failed to fetch sheet {label}: {exc}")
                if attempt < self.max_retries - 1:
                    time.sleep(self.backoff_seconds * (2**attempt))
                    continue
                break

            if resp.status_code == 200:
                try:
                    return resp.json()
                except ValueError as exc:
                    raise DataSourceError(f"Sheet {label} returned invalid JSON: {exc}")

            last_error = DataSourceError(f"Failed to fetch sheet {label}: {resp.status_code}")
            if attempt < self.max_retries - 1 and resp.status_code in RETRYABLE_STATUS:
                time.sleep(self.backoff_seconds * (2**attempt))
                continue
            break

        raise last_error or DataSourceError(f"Failed to fetch sheet {label}")


class OpenSheetProvider(_RetryingProvider):
    """
    Reads a published spreadsheet through an opensheet-style endpoint:
    GET {base_url}/{spreadsheet_id}/{sheet} -> JSON array, one object per row.
    """

    def __init__(self, spreadsheet_id: str, base_url: str = "https://opensheet.elk.sh", **kwargs):
        super().__init__(**kwargs)
        self.spreadsheet_id = spreadsheet_id
        self.base_url = base_url.rstrip("/")

    def fetch_rows(self, sheet_name: str) -> List[RawRow]:
        if not self.spreadsheet_id:
            raise ConfigError("Spreadsheet id is not configured.")
        url = f"{self.base_url}/{self.spreadsheet_id}/{quote(sheet_name)}"
        payload = self._get_json(sheet_name, lambda: requests.get(url, timeout=self.timeout))
        if not isinstance(payload, list):
            raise DataSourceError(f"Sheet {sheet_name} did not return a row array")
        return payload


class GoogleSheetsApiProvider(_RetryingProvider):
    """
    Reads sheet values through the Google Sheets API using either a service account or API key.
    The first row is treated as the header row.
    """

    VALUES_URL = "https://sheets.googleapis.com/v4/spreadsheets/{spreadsheet_id}/values/{sheet}"

    def __init__(
        self,
        spreadsheet_id: str,
        service_account_file: Optional[Path] = None,
        api_key: Optional[str] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.spreadsheet_id = spreadsheet_id
        self.api_key = api_key
        self.session: Optional[AuthorizedSession] = None
        if service_account_file and Path(service_account_file).exists():
            creds = service_account.Credentials.from_service_account_file(
                service_account_file,
                scopes=["https://www.googleapis.com/auth/spreadsheets.readonly"],
            )
            self.session = AuthorizedSession(creds)

    def fetch_rows(self, sheet_name: str) -> List[RawRow]:
        if not self.spreadsheet_id:
            raise ConfigError("Spreadsheet id is not configured.")
        if not self.session and not self.api_key:
            raise ConfigError("No credentials or API key configured for Google Sheets.")

        url = self.VALUES_URL.format(spreadsheet_id=self.spreadsheet_id, sheet=quote(sheet_name))
        if self.session:
            session = self.session
            payload = self._get_json(sheet_name, lambda: session.get(url, timeout=self.timeout))
        else:
            params = {"key": self.api_key}
            payload = self._get_json(sheet_name, lambda: requests.get(url, params=params, timeout=self.timeout))

        if not isinstance(payload, dict):
            raise DataSourceError(f"Sheet {sheet_name} did not return a value range")
        return values_to_rows(payload.get("values") or [])


def values_to_rows(values: List[List[Any]]) -> List[RawRow]:
    """Header row + value rows -> row dicts; short rows are padded with empty strings."""
    if not values:
        return []
    header = [str(h).strip() for h in values[0]]
    rows = []
    for raw in values[1:]:
        cells = list(raw) + [""] * (len(header) - len(raw))
        rows.append({key: cells[i] for i, key in enumerate(header) if key})
    return rows


def build_provider(sheet_settings, google_settings) -> RowSource:
    common = {
        "max_retries": sheet_settings.max_retries,
        "backoff_seconds": sheet_settings.backoff_seconds,
        "timeout": sheet_settings.request_timeout,
    }
    if sheet_settings.provider == "google":
        return GoogleSheetsApiProvider(
            spreadsheet_id=sheet_settings.spreadsheet_id,
            service_account_file=google_settings.service_account_file,
            api_key=google_settings.api_key,
            **common,
        )
    if sheet_settings.provider == "opensheet":
        return OpenSheetProvider(
            spreadsheet_id=sheet_settings.spreadsheet_id,
            base_url=sheet_settings.base_url,
            **common,
        )
    raise ConfigError(f"Unknown sheet provider: {sheet_settings.provider}")

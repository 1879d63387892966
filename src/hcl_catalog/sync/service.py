import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence

from hcl_catalog.config import settings
from hcl_catalog.data.models import RawRow
from hcl_catalog.exceptions import ConfigError
from hcl_catalog.sync.provider import RowSource

logger = logging.getLogger(__name__)


class SyncService:
    """
    Fetches all configured sheets concurrently.
    A failing sheet degrades to zero rows; per-sheet outcome is kept in `status`.
    """

    def __init__(
        self,
        provider: RowSource,
        sheet_names: Optional[Sequence[str]] = None,
        max_workers: Optional[int] = None,
    ):
        self.provider = provider
        self.sheet_names = list(sheet_names if sheet_names is not None else settings.sheets.target_sheets)
        self.max_workers = max_workers or settings.sheets.max_workers
        self.status: Dict[str, dict] = {}

    def fetch_all(self) -> Dict[str, List[RawRow]]:
        """Returns rows keyed by sheet name, in configured order. Never raises for a sheet failure."""
        if not self.sheet_names:
            return {}
        workers = max(1, min(self.max_workers, len(self.sheet_names)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {name: executor.submit(self._fetch, name) for name in self.sheet_names}
            results = {name: futures[name].result() for name in self.sheet_names}

        failed = [name for name, info in self.status.items() if info["status"] != "ok"]
        if failed and len(failed) == len(self.sheet_names):
            logger.error("All sheet fetches failed; catalog will be empty")
        return results

    def get_status(self) -> dict:
        return {
            "provider": type(self.provider).__name__,
            "sheets": self.status,
        }

    def _fetch(self, sheet_name: str) -> List[RawRow]:
        start = time.perf_counter()
        try:
            rows = self.provider.fetch_rows(sheet_name)
        except ConfigError as exc:
            # Missing configuration: mark as skipped
            logger.warning(f"Skipping sheet {sheet_name}: {exc}")
            self._update_status(sheet_name, rows=0, error=str(exc), status="skipped")
            return []
        except Exception as exc:
            logger.warning(f"Failed to fetch sheet {sheet_name}: {exc}")
            self._update_status(sheet_name, rows=0, error=str(exc), status="error")
            return []

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        logger.info(f"Fetched {len(rows)} rows from sheet {sheet_name} in {duration_ms}ms")
        self._update_status(sheet_name, rows=len(rows), error=None)
        return rows

    def _update_status(self, key: str, rows: int, error: Optional[str], status: str = "ok"):
        self.status[key] = {
            "last_sync": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            "rows": rows,
            "status": status,
        }
        if error:
            self.status[key]["error"] = error

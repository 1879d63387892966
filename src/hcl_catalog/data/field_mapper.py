from typing import Any, Iterable, Optional

from hcl_catalog.config_fields import FieldConfig, field_config
from hcl_catalog.data.models import RawRow


class FieldResolver:
    """
    Config-driven resolver for logical row fields.
    Each logical field has an ordered list of accepted column spellings; the first
    spelling present with a non-blank value wins. Matching is case-sensitive.
    """

    def __init__(self, config: FieldConfig = field_config):
        self.config = config

    @staticmethod
    def clean(value: Any) -> Optional[str]:
        if value is None:
            return None
        text = value.strip() if isinstance(value, str) else str(value).strip()
        return text or None

    def extract_by_aliases(self, row: RawRow, aliases: Iterable[str]) -> Optional[str]:
        for alias in aliases:
            if alias not in row:
                continue
            value = self.clean(row[alias])
            if value is not None:
                return value
        return None

    def resolve(self, row: RawRow, field: str) -> Optional[str]:
        return self.extract_by_aliases(row, self.config.aliases_for(field))

    def resolve_os(self, row: RawRow, sheet_name: str) -> str:
        """OS label of a row, falling back to the sheet it came from."""
        return self.resolve(row, "os") or sheet_name

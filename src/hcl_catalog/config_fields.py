from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field

from hcl_catalog.config import settings

# Logical fields of a sheet row. Order inside each list is the lookup priority.
DEFAULT_ALIASES: Dict[str, List[str]] = {
    "model": ["description", "Description", "Model Name", "Model"],
    "vendor": ["vendor", "Vendor"],
    "component": ["component", "Component"],
    "id": ["swid", "SWID"],
    "firmware_version": ["FW Version", "FW"],
    "driver_version": ["driver", "Driver", "Version"],
    "os": ["Operating System", "OS", "os"],
}


class AliasConfig(BaseModel):
    aliases: List[str] = Field(default_factory=list)


class FieldConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")
    fields: Dict[str, AliasConfig] = Field(default_factory=dict)

    def aliases_for(self, field: str) -> List[str]:
        entry = self.fields.get(field)
        if entry is None:
            raise KeyError(f"Unknown logical field: {field}")
        return entry.aliases


def _default_fields() -> Dict[str, AliasConfig]:
    return {name: AliasConfig(aliases=list(aliases)) for name, aliases in DEFAULT_ALIASES.items()}


def load_field_config(path: Optional[Path] = None) -> FieldConfig:
    """
    Load the alias table from YAML with safe defaults.
    A field listed in the YAML replaces the built-in aliases for that field only.
    """
    file_path = Path(path or settings.paths.fields_config)
    if not file_path.exists():
        return FieldConfig(fields=_default_fields())

    with open(file_path, "r") as f:
        data = yaml.safe_load(f) or {}

    loaded = FieldConfig.model_validate(data)
    merged = _default_fields()
    merged.update({k: v for k, v in loaded.fields.items() if v.aliases})
    loaded.fields = merged
    return loaded


# Singleton-style loaded config for convenience
field_config = load_field_config()

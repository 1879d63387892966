from pathlib import Path
from typing import ClassVar, Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict, YamlConfigSettingsSource

class AppSettings(BaseSettings):
    name: str = "HCL Catalog"
    version: str = "1.0.0"

class PathSettings(BaseSettings):
    output_dir: Path = Path("./exports")
    fields_config: Path = Path("./config/fields.yaml")


class SheetSettings(BaseSettings):
    provider: Literal["opensheet", "google"] = "opensheet"
    spreadsheet_id: str = ""
    base_url: str = "https://opensheet.elk.sh"
    # Processing order matters: later sheets win ties on fw/id.
    target_sheets: list[str] = ["Windows", "RHEL", "Oracle", "ESXi", "FW"]
    firmware_sheet: str = "FW"
    request_timeout: float = 15.0
    max_retries: int = 3
    backoff_seconds: float = 1.0
    max_workers: int = 8
    continuation: Literal["skip", "attach"] = "skip"
    load_on_startup: bool = True


class GoogleSettings(BaseSettings):
    service_account_file: Optional[Path] = None
    api_key: Optional[str] = None


class GroupSettings(BaseSettings):
    palette: list[str] = ["#8e44ad", "#2980b9", "#27ae60", "#f39c12", "#c0392b", "#34495e"]
    default_name: str = "Default Group"
    new_group_name: str = "New Configuration"
    default_os: str = "Windows"


class LoggingSettings(BaseSettings):
    log_requests: bool = True
    level: str = "INFO"

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_nested_delimiter="__", env_file=".env", extra="ignore")
    app: AppSettings = AppSettings()
    paths: PathSettings = PathSettings()
    sheets: SheetSettings = SheetSettings()
    google: GoogleSettings = GoogleSettings()
    groups: GroupSettings = GroupSettings()
    logging: LoggingSettings = LoggingSettings()

    yaml_path: ClassVar[Optional[Path]] = None

    @classmethod
    def settings_customise_sources(cls, settings_cls, init_settings, env_settings, dotenv_settings, file_secret_settings):
        # Environment and .env beat the YAML file; YAML beats the defaults.
        sources = [init_settings, env_settings, dotenv_settings]
        if cls.yaml_path is not None:
            sources.append(YamlConfigSettingsSource(settings_cls, yaml_file=cls.yaml_path))
        sources.append(file_secret_settings)
        return tuple(sources)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        # Load from default path if exists
        default_path = Path("config/settings.yaml")
        path = config_path or (default_path if default_path.exists() else None)

        cls.yaml_path = Path(path) if path else None
        try:
            return cls()
        finally:
            cls.yaml_path = None

settings = Settings.load()

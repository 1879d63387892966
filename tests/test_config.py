import pytest
from pydantic import ValidationError

from hcl_catalog.config import Settings, SheetSettings


@pytest.fixture
def settings_yaml(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text(
        "sheets:\n"
        "  spreadsheet_id: from-yaml\n"
        "  continuation: attach\n"
        "groups:\n"
        "  default_os: RHEL\n"
    )
    return path


def test_yaml_values_load(settings_yaml, monkeypatch):
    monkeypatch.delenv("SHEETS__SPREADSHEET_ID", raising=False)
    loaded = Settings.load(settings_yaml)
    assert loaded.sheets.spreadsheet_id == "from-yaml"
    assert loaded.sheets.continuation == "attach"
    assert loaded.groups.default_os == "RHEL"
    # Untouched keys keep their defaults.
    assert loaded.sheets.firmware_sheet == "FW"


def test_environment_overrides_yaml(settings_yaml, monkeypatch):
    monkeypatch.setenv("SHEETS__SPREADSHEET_ID", "from-env")
    loaded = Settings.load(settings_yaml)
    assert loaded.sheets.spreadsheet_id == "from-env"
    assert loaded.sheets.continuation == "attach"


def test_yaml_path_does_not_leak(settings_yaml):
    Settings.load(settings_yaml)
    assert Settings.yaml_path is None


@pytest.mark.parametrize("field,value", [("continuation", "attatch"), ("provider", "ftp")])
def test_sheet_choices_are_validated(field, value):
    with pytest.raises(ValidationError):
        SheetSettings(**{field: value})

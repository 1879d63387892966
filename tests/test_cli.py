import json

from typer.testing import CliRunner

from hcl_catalog.main import cli

runner = CliRunner()


def test_version():
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.stdout


def test_classify():
    result = runner.invoke(cli, ["classify", "Red Hat Enterprise Linux 9.4 (Plow)"])
    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"family": "RHEL", "version_tag": "9.4", "badge": "badge-red"}


def test_search_uses_loaded_catalog(monkeypatch, source_factory):
    from hcl_catalog import main

    monkeypatch.setattr(main, "build_provider", lambda sheets, google: source_factory())
    monkeypatch.setattr(main.settings.sheets, "target_sheets", ["Windows", "RHEL", "FW"])
    result = runner.invoke(cli, ["search", "x710", "--os", "RHEL 8.6"])
    assert result.exit_code == 0
    assert "Network\tIntel\tX710-DA2\tFW 9.20\tRHEL 8.6: not supported" in result.stdout

"""Tests for BulkSettings source merging."""

from pathlib import Path

import click
import pytest
from pydantic import ValidationError

from bulkctl.config.settings import BulkSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("BULKCTL_CONFIG", "BULKCTL_BLOCK__SIZE", "BULKCTL_ROOT"):
        monkeypatch.delenv(var, raising=False)


class TestBulkSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = BulkSettings.from_cli(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.block.size is None
        assert settings.block.tag == "bulk"
        assert settings.log_dir == tmp_path / "."
        assert settings.sentinels.open == "{"
        assert settings.sentinels.terminator == "EOF"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = BulkSettings.from_cli(root=tmp_path)
        with pytest.raises(ValidationError):
            settings.quiet = True  # type: ignore[misc]

    def test_cli_flags(self, tmp_path: Path) -> None:
        settings = BulkSettings.from_cli(root=tmp_path, verbose=True, json_output=True)
        assert settings.verbose is True
        assert settings.json_output is True


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "bulkctl.toml").write_text(
            '[block]\nsize = 3\ntag = "ops"\n[sentinels]\nterminator = "STOP"\n'
        )
        settings = BulkSettings.from_cli(root=tmp_path)
        assert settings.block.size == 3
        assert settings.block.tag == "ops"
        assert settings.sentinels.terminator == "STOP"
        assert settings.sentinels.open == "{"  # default preserved

    def test_root_follows_discovered_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "bulkctl.toml").write_text('[block]\nlog_dir = "logs"\n')
        nested = tmp_path / "sub"
        nested.mkdir()
        monkeypatch.chdir(nested)
        settings = BulkSettings.from_cli()
        assert settings.root == tmp_path.resolve()
        assert settings.log_dir == tmp_path.resolve() / "logs"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[block]\nsize = 7\n")
        settings = BulkSettings.from_cli(config_path=str(custom), root=tmp_path)
        assert settings.block.size == 7
        assert settings.config_path == custom

    def test_missing_explicit_config_path(self, tmp_path: Path) -> None:
        missing = tmp_path / "missing.toml"
        with pytest.raises(click.ClickException, match="Config file not found") as info:
            BulkSettings.from_cli(config_path=str(missing), root=tmp_path)
        assert str(missing) in info.value.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "bulkctl.toml").write_text("[block\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            BulkSettings.from_cli(root=tmp_path)

    def test_non_positive_size_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "bulkctl.toml").write_text("[block]\nsize = 0\n")
        with pytest.raises(ValidationError):
            BulkSettings.from_cli(root=tmp_path)

    def test_duplicate_sentinels_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "bulkctl.toml").write_text('[sentinels]\nclose = "{"\n')
        with pytest.raises(ValidationError, match="distinct"):
            BulkSettings.from_cli(root=tmp_path)


class TestEnvSource:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "bulkctl.toml").write_text("[block]\nsize = 3\n")
        monkeypatch.setenv("BULKCTL_BLOCK__SIZE", "9")
        settings = BulkSettings.from_cli(root=tmp_path)
        assert settings.block.size == 9

    def test_cli_overrides_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BULKCTL_QUIET", "true")
        settings = BulkSettings.from_cli(root=tmp_path, quiet=False)
        assert settings.quiet is False

"""Resolved configuration for one bulkctl invocation.

Sources, highest priority first:

1. keyword arguments (the CLI flags)
2. ``BULKCTL_*`` environment variables, ``__`` between section and key
   (``BULKCTL_BLOCK__SIZE=50``)
3. the TOML file chosen by :func:`~bulkctl.config.discovery.resolve_config`
4. the defaults on the section models
"""

from __future__ import annotations

import tomllib
from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from bulkctl.config.discovery import resolve_config
from bulkctl.config.models import BlockConfig
from bulkctl.domain.types import Sentinels

# TOML file for the settings object currently being built.
_active_toml: ContextVar[Path | None] = ContextVar("_active_toml", default=None)


class BulkSettings(BaseSettings):
    """Everything ``run`` needs: output flags plus the ``[block]`` and
    ``[sentinels]`` sections.

    ``root`` is the directory holding the config file (or the cwd when
    there is none); a relative ``[block] log_dir`` is taken from there.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        env_prefix="BULKCTL_",
        env_nested_delimiter="__",
    )

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    block: BlockConfig = Field(default_factory=BlockConfig)
    sentinels: Sentinels = Field(default_factory=Sentinels)

    @property
    def log_dir(self) -> Path:
        return self.root / self.block.log_dir

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_file = _active_toml.get()
        if toml_file is None:
            return init_settings, env_settings
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | Path | None = None,
        root: Path | None = None,
        **flags: Any,
    ) -> BulkSettings:
        """Build settings for a CLI run.

        Raises:
            click.ClickException: the config file is missing or is not
                valid TOML.
            pydantic.ValidationError: a value fails validation.
        """
        toml_file = resolve_config(config_path, root)
        if root is None:
            root = toml_file.parent if toml_file else Path.cwd()

        token = _active_toml.set(toml_file)
        try:
            return cls(root=root, config_path=toml_file, **flags)
        except tomllib.TOMLDecodeError as exc:
            raise click.ClickException(f"Invalid TOML in {toml_file}: {exc}") from exc
        finally:
            _active_toml.reset(token)

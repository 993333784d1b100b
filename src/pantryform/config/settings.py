"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``PANTRYFORM_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``pantryform.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from pantryform.config.discovery import resolve_config_path
from pantryform.config.models import (
    BarcodeConfig,
    FormIdConfig,
    HouseholdConfig,
    OutputConfig,
    SheetsConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``pantryform.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class PantrySettings(BaseSettings):
    """Unified settings for the pantryform CLI.

    Attributes:
        root: Workspace directory (parent of ``pantryform.toml``, or CWD
            if no config found). Relative paths in ``[sheets]`` and
            ``[output]`` resolve against it.
        config_path: The config file in effect, or None.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PANTRYFORM_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    sheets: SheetsConfig = Field(default_factory=SheetsConfig)
    household: HouseholdConfig = Field(default_factory=HouseholdConfig)
    form_id: FormIdConfig = Field(default_factory=FormIdConfig)
    barcode: BarcodeConfig = Field(default_factory=BarcodeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> PantrySettings:
        """Construct settings from a CLI invocation.

        The workspace root defaults to the config file's directory, so
        ``responses.xlsx`` next to ``pantryform.toml`` is found from any
        subdirectory.
        """
        toml_path = resolve_config_path(config_path, root)

        resolved_root = root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(root=resolved_root, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    def resolve(self, relative: str) -> Path:
        """Resolve a configured path against the workspace root."""
        p = Path(relative)
        return p if p.is_absolute() else self.root / p

    @property
    def responses_path(self) -> Path:
        return self.resolve(self.sheets.responses_path)

    @property
    def guidelines_path(self) -> Path:
        return self.resolve(self.sheets.guidelines_path)

    @property
    def output_folder(self) -> Path:
        return self.resolve(self.output.folder)

    @property
    def state_dir(self) -> Path:
        """``.pantryform/`` — counter database and template overrides."""
        return self.root / ".pantryform"

"""
Questline settings.

Values are taken, first match wins, from keyword arguments, QUESTLINE_*
environment variables, the .env file named by QUESTLINE_ENV_FILE, the
project .questline/config.yaml and finally ~/.config/questline/config.yaml.

Nested fields are addressed with a double underscore:
  QUESTLINE_LOGGING__LEVEL=DEBUG
List values are given as JSON:
  QUESTLINE_SCOPES='["my_project.flows", "shared.flows"]'
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import questline.config.sources as sources
import questline.constants as constants


def _get_env_file() -> str | None:
    """The .env file named by QUESTLINE_ENV_FILE, when it exists."""
    env_file = _os.environ.get("QUESTLINE_ENV_FILE")
    return env_file if env_file and _pathlib.Path(env_file).is_file() else None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Locate the directory whose .questline/ holds project config.

    QUESTLINE_PROJECT_ROOT wins. Otherwise the nearest ancestor of start_path
    (default: cwd) with pyproject.toml, setup.cfg or .git; failing that, cwd.
    """
    if override := _os.environ.get("QUESTLINE_PROJECT_ROOT"):
        return _pathlib.Path(override)

    current = (start_path or _pathlib.Path.cwd()).resolve()
    markers = ["pyproject.toml", "setup.cfg", ".git"]
    while current != current.parent:
        if any((current / marker).exists() for marker in markers):
            return current
        current = current.parent

    return _pathlib.Path.cwd()


class LoggingConfig(_pydantic.BaseModel):
    """How the questline logger is set up by log.configure_logging."""

    model_config = _pydantic.ConfigDict(extra="forbid")

    level: str = "INFO"
    """Level for the questline logger (DEBUG, EXTENDED, INFO, VALIDATION, ...)."""

    rich: bool = True
    """Render log records with rich."""

    show_path: bool = False
    """Show source file and line in rich output."""


class Settings(_pydantic_settings.BaseSettings):
    """
    Effective questline configuration.

    Field defaults apply only when no source in settings_customise_sources
    provides a value.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix=constants.ENV_PREFIX,
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",  # QUESTLINE_LOGGING__LEVEL
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        """Keyword arguments, then env, then .env, then the YAML layers."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.YamlLayersSettingsSource(settings_cls, find_project_root()),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Build Settings while ignoring any .env file."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    scopes: list[str] = _pydantic.Field(
        default_factory=list,
        description="Modules/packages searched by variant discovery, highest priority first",
    )

    default_namespace: str = _pydantic.Field(
        default=constants.DEFAULT_NAMESPACE,
        description="Namespace returned by Storage.sub() without arguments",
    )

    hooks_file: str | None = _pydantic.Field(
        default=None,
        description="YAML file with hook declarations (default: .questline/hooks.yaml)",
    )

    scan_scopes: bool = _pydantic.Field(
        default=True,
        description="Import configured scopes before resolving variants",
    )

    logging: LoggingConfig = _pydantic.Field(default_factory=LoggingConfig)

    @_pydantic.field_validator("scopes")
    @classmethod
    def _validate_scopes(cls, value: list[str]) -> list[str]:
        """Strip blanks and reject duplicates (order is priority)."""
        cleaned = [s.strip() for s in value if s and s.strip()]
        seen: set[str] = set()
        for scope in cleaned:
            if scope in seen:
                raise ValueError(f"scope '{scope}' is listed more than once")
            seen.add(scope)
        return cleaned

    @property
    def config_dir(self) -> _pathlib.Path:
        """Directory of the user config layer."""
        return sources.get_user_config_dir()

    @property
    def project_root(self) -> _pathlib.Path:
        """See find_project_root."""
        return find_project_root()

    def get_hooks_path(self) -> _pathlib.Path:
        """Hook declaration file: hooks_file if set, else .questline/hooks.yaml."""
        if self.hooks_file:
            return _pathlib.Path(self.hooks_file).expanduser()
        return self.project_root / constants.CONFIG_DIR_NAME / constants.HOOKS_FILE_NAME

    def to_dict(self) -> dict[str, _typing.Any]:
        """Plain values as printed by `questline config show`."""
        return {
            "scopes": list(self.scopes),
            "default_namespace": self.default_namespace,
            "hooks_file": str(self.get_hooks_path()),
            "scan_scopes": self.scan_scopes,
            "logging": self.logging.model_dump(),
            "config_dir": str(self.config_dir),
            "project_root": str(self.project_root),
        }

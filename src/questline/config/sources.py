"""Custom pydantic-settings sources for Questline configuration.

YamlLayersSettingsSource loads configuration from layered YAML files:

1. User config: ~/.config/questline/config.yaml (or QUESTLINE_CONFIG_DIR)
2. Project config: .questline/config.yaml in the project root (highest)

Nested mappings are merged key by key; any other value in a higher layer
replaces the lower one.

Environment variables:
- QUESTLINE_CONFIG_DIR: Override user config directory (default: ~/.config/questline)
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

import questline.constants as constants
import questline.errors as errors

# Points the user layer at another directory
ENV_CONFIG_DIR = "QUESTLINE_CONFIG_DIR"


class ConfigFileError(errors.QuestlineError):
    """A config YAML file could not be read or is not a mapping."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def deep_merge(
    base: dict[str, _typing.Any],
    override: _typing.Mapping[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """
    Merge ``override`` into a copy of ``base``.

    Mappings present on both sides are merged recursively; everything else
    in ``override`` replaces the value in ``base``.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, _typing.Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def load_yaml_file(path: _pathlib.Path) -> dict[str, _typing.Any] | None:
    """
    Parse one config layer.

    An empty document yields None. Unreadable files, YAML syntax errors
    and top-level values other than a mapping raise ConfigFileError.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        parsed = _yaml.safe_load(content)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if parsed is None:
        return None

    if not isinstance(parsed, dict):
        type_name = type(parsed).__name__
        raise ConfigFileError(
            path,
            f"config must be a YAML mapping (dict), got {type_name}",
        )

    return parsed


class YamlLayersSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    Feeds Settings from the user and project config.yaml files.

    The project file wins over the user file; see deep_merge.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
    ) -> None:
        """
        Read both layers up front.

        Without project_root only the user layer is consulted.
        user_config_path replaces the user file location outright.
        """
        super().__init__(settings_cls)
        self._project_root = project_root
        self._user_config_path = user_config_path
        self._loaded_layers: list[tuple[str, _pathlib.Path]] = []
        self._merged = self._load_config_layers()

    def _load_config_layers(self) -> dict[str, _typing.Any]:
        merged: dict[str, _typing.Any] = {}

        # Missing files are normal: neither layer is required
        candidates: list[tuple[str, _pathlib.Path]] = [("user", self.user_config_path)]
        if self._project_root is not None:
            candidates.append(("project", get_project_config_path(self._project_root)))

        for layer_name, path in candidates:
            if not path.exists():
                continue
            content = load_yaml_file(path)
            if content:
                merged = deep_merge(merged, content)
                self._loaded_layers.append((layer_name, path))

        return merged

    @property
    def user_config_path(self) -> _pathlib.Path:
        """The user layer file, after the constructor override and QUESTLINE_CONFIG_DIR."""
        if self._user_config_path is not None:
            return self._user_config_path
        return get_user_config_path()

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """
        Non-empty layers that contributed values.

        Pairs of ('user' | 'project', path), lowest precedence first.
        """
        return list(self._loaded_layers)

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        """
        Look up one top-level key; dicts and lists are reported as complex.
        """
        value = self._merged.get(field_name)
        if value is None:
            return None, field_name, False
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        """The merged layers, handed to model validation."""
        return dict(self._merged)


def get_user_config_dir() -> _pathlib.Path:
    """
    Directory holding the user layer.

    QUESTLINE_CONFIG_DIR wins; the fallback is ~/.config/questline.
    """
    if override := _os.environ.get(ENV_CONFIG_DIR):
        return _pathlib.Path(override)
    return _pathlib.Path.home() / ".config" / "questline"


def get_user_config_path() -> _pathlib.Path:
    """config.yaml inside get_user_config_dir()."""
    return get_user_config_dir() / constants.CONFIG_FILE_NAME


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    """The project layer: <root>/.questline/config.yaml."""
    return project_root / constants.CONFIG_DIR_NAME / constants.CONFIG_FILE_NAME

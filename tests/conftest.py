"""Fixtures shared by the questline test suite."""

import importlib as _importlib
import itertools as _itertools
import os as _os
import pathlib as _pathlib
import textwrap as _textwrap
import typing as _typing
import unittest.mock as _mock

import pytest as _pytest

import questline.config as config
import questline.constants as constants
import questline.discovery as discovery
import questline.quest.holder as holder
import questline.storage as storage

_package_counter = _itertools.count()


@_pytest.fixture
def clean_env() -> dict[str, str]:
    """os.environ without any QUESTLINE_* variable."""
    return {k: v for k, v in _os.environ.items() if not k.startswith(constants.ENV_PREFIX)}


@_pytest.fixture
def isolated_env(clean_env: dict[str, str]):
    """
    An unentered patch replacing os.environ with ``clean_env``.

        with isolated_env:
            settings = config.Settings.construct_without_dotenv()
    """
    return _mock.patch.dict(_os.environ, clean_env, clear=True)


@_pytest.fixture
def isolated_workspace(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """A project root marked by pyproject.toml, next to an empty user-config dir."""
    (tmp_path / "user-config").mkdir()
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    (workspace / "pyproject.toml").write_text('[project]\nname = "scratch"\n')
    return workspace


@_pytest.fixture
def workspace_env(isolated_workspace: _pathlib.Path) -> dict[str, str]:
    """Variables pointing both config layers into the isolated workspace."""
    return {
        "QUESTLINE_PROJECT_ROOT": str(isolated_workspace),
        "QUESTLINE_CONFIG_DIR": str(isolated_workspace.parent / "user-config"),
    }


@_pytest.fixture
def make_settings(
    isolated_env,
    workspace_env: dict[str, str],
) -> _typing.Callable[..., config.Settings]:
    """Build Settings from keyword fields alone; no real env, .env or YAML leaks in."""

    def _create(**kwargs: _typing.Any) -> config.Settings:
        with isolated_env, _mock.patch.dict(_os.environ, workspace_env):
            return config.Settings.construct_without_dotenv(**kwargs)

    return _create


@_pytest.fixture
def clean_settings(make_settings: _typing.Callable[..., config.Settings]) -> config.Settings:
    """Settings with every field at its default."""
    return make_settings()


@_pytest.fixture
def catalog() -> discovery.Catalog:
    """A fresh, empty variant catalog."""
    return discovery.Catalog()


@_pytest.fixture
def make_resolver(
    catalog: discovery.Catalog,
) -> _typing.Callable[..., discovery.Resolver]:
    """Factory for resolvers over the ``catalog`` fixture."""

    def _create(*scopes: str) -> discovery.Resolver:
        return discovery.Resolver(catalog, scopes)

    return _create


@_pytest.fixture
def store() -> storage.Storage:
    """A fresh storage."""
    return storage.Storage()


@_pytest.fixture(autouse=True)
def _clear_current_quest() -> _typing.Iterator[None]:
    """No test leaks its current quest into the next one."""
    holder.clear()
    yield
    holder.clear()


@_pytest.fixture
def scope_package(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _typing.Callable[[dict[str, str]], str]:
    """
    Factory writing an importable package into tmp_path.

    Takes a mapping of relative module paths to source and returns the
    (unique) top-level package name. ``{pkg}`` in sources is replaced by it.

    Usage:
        name = scope_package({"__init__.py": "", "flows.py": "X = 1"})
    """
    monkeypatch.syspath_prepend(str(tmp_path))

    def _create(files: dict[str, str]) -> str:
        name = f"qlscope_{_os.getpid()}_{next(_package_counter)}"
        root = tmp_path / name
        root.mkdir()
        for relative, source in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_textwrap.dedent(source).replace("{pkg}", name))
        if "__init__.py" not in files:
            (root / "__init__.py").write_text("")
        _importlib.invalidate_caches()
        return name

    return _create

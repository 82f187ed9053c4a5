"""
Main CLI entry point for Questline.

Inspection commands for a project's configuration, its registered
variants and its hook declarations.
"""

import json as _json
import pathlib as _pathlib
import typing as _typing

import click as _click
import yaml as _yaml

import questline
import questline.config as config
import questline.data as data
import questline.discovery as discovery
import questline.errors as errors
import questline.hooks as hooks
import questline.log as log

# Custom Click context settings for better help formatting
CONTEXT_SETTINGS: dict[str, _typing.Any] = {
    "help_option_names": ["-h", "--help"],
    "max_content_width": 100,
}

CONTRACTS: dict[str, _typing.Any] = {
    "hook-flow": hooks.HookFlow,
    "data-forge": data.DataForge,
    "data-ripper": data.DataRipper,
    "journey": data.PreQuestJourney,
    "static-data": data.StaticDataProvider,
}
"""Command-line names of the built-in contracts."""


def _contract_alias(contract: _typing.Any) -> str:
    for alias, known in CONTRACTS.items():
        if known is contract:
            return alias
    return getattr(contract, "__qualname__", repr(contract))


def _scopes(ctx: _click.Context, extra: tuple[str, ...] = ()) -> list[str]:
    settings: config.Settings = ctx.obj["settings"]
    scopes = list(settings.scopes)
    for scope in extra:
        if scope not in scopes:
            scopes.append(scope)
    return scopes


def _scan(scopes: list[str]) -> None:
    try:
        discovery.scan(scopes)
    except errors.ScopeImportError as e:
        raise _click.ClickException(str(e)) from e


def _load_hooks(path: _pathlib.Path) -> hooks.HooksConfig:
    try:
        return hooks.load_hooks_yaml(path)
    except (FileNotFoundError, ValueError) as e:
        raise _click.ClickException(str(e)) from e


@_click.group(context_settings=CONTEXT_SETTINGS)
@_click.version_option(questline.__version__, "-V", "--version", prog_name="questline")
@_click.option(
    "-s",
    "--scope",
    "scopes",
    multiple=True,
    help="Scope to search (repeatable, appended after configured scopes)",
)
@_click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@_click.pass_context
def cli(ctx: _click.Context, scopes: tuple[str, ...], verbose: bool) -> None:
    """Questline - test orchestration core.

    Inspect configuration, registered variants and hook declarations.
    """
    try:
        settings = config.Settings()
    except (config.ConfigFileError, ValueError) as e:
        raise _click.ClickException(str(e)) from e

    if scopes:
        merged = list(settings.scopes)
        merged.extend(s for s in scopes if s not in merged)
        settings.scopes = merged

    log.configure_logging(settings, level="DEBUG" if verbose else None)

    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# =============================================================================
# Config Commands
# =============================================================================


@cli.group()
def config_cmd() -> None:
    """Configuration commands."""
    pass


# Register config_cmd with the name "config" to avoid shadowing the module
cli.add_command(config_cmd, name="config")


@config_cmd.command(name="show")
@_click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@_click.pass_context
def config_show(ctx: _click.Context, as_json: bool) -> None:
    """Show effective configuration.

    Examples:
        questline config show           # Show as YAML
        questline config show --json    # Show as JSON
    """
    settings: config.Settings = ctx.obj["settings"]
    full_config = settings.to_dict()

    if as_json:
        _click.echo(_json.dumps(full_config, indent=2))
    else:
        _click.echo(_yaml.safe_dump(full_config, default_flow_style=False, sort_keys=False))


# =============================================================================
# Catalog Commands
# =============================================================================


@cli.group()
def catalog() -> None:
    """Variant catalog commands."""
    pass


@catalog.command(name="list")
@_click.option("--scope", "extra_scopes", multiple=True, help="Additional scope to scan")
@_click.option(
    "--contract",
    type=_click.Choice(sorted(CONTRACTS)),
    default=None,
    help="Only list variants of this contract",
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def catalog_list(
    ctx: _click.Context,
    extra_scopes: tuple[str, ...],
    contract: str | None,
    json_output: bool,
) -> None:
    """List variants registered in the configured scopes."""
    scopes = _scopes(ctx, extra_scopes)
    _scan(scopes)

    entries = discovery.default_catalog().entries(CONTRACTS[contract] if contract else None)
    entries = [e for e in entries if any(e.in_scope(s) for s in scopes)]

    if json_output:
        _click.echo(_json.dumps([e.to_dict() for e in entries], indent=2))
        return

    if not entries:
        _click.echo("No variants found.")
        if not scopes:
            _click.echo("Configure scopes or pass --scope.")
        return

    _click.echo(f"{'Contract':<14} {'Name':<28} Scope")
    _click.echo("-" * 70)
    for entry in entries:
        _click.echo(f"{_contract_alias(entry.contract):<14} {entry.name:<28} {entry.scope}")


@catalog.command(name="resolve")
@_click.argument("contract", type=_click.Choice(sorted(CONTRACTS)))
@_click.argument("name")
@_click.option("--scope", "extra_scopes", multiple=True, help="Additional scope to search")
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
@_click.pass_context
def catalog_resolve(
    ctx: _click.Context,
    contract: str,
    name: str,
    extra_scopes: tuple[str, ...],
    json_output: bool,
) -> None:
    """Resolve variant NAME of CONTRACT as a test run would."""
    scopes = _scopes(ctx, extra_scopes)
    _scan(scopes)

    resolver = discovery.Resolver(discovery.default_catalog(), scopes)
    try:
        entry = resolver.resolve_entry(CONTRACTS[contract], name)
    except errors.DiscoveryError as e:
        raise _click.ClickException(str(e)) from e

    if json_output:
        _click.echo(_json.dumps(entry.to_dict(), indent=2))
    else:
        _click.echo(f"✓ {contract} '{entry.name}' -> {entry.scope}")


# =============================================================================
# Hooks Commands
# =============================================================================


@cli.group(name="hooks")
def hooks_cmd() -> None:
    """Hook declaration commands."""
    pass


@hooks_cmd.command(name="validate")
@_click.argument("path", type=_click.Path(path_type=_pathlib.Path))
def hooks_validate(path: _pathlib.Path) -> None:
    """Validate a hooks YAML file."""
    hooks_config = _load_hooks(path)
    _click.echo(f"✓ {path}: {len(hooks_config.hooks)} hook(s) valid")


@hooks_cmd.command(name="plan")
@_click.argument("path", type=_click.Path(path_type=_pathlib.Path))
@_click.option(
    "--timing",
    type=_click.Choice([t.value for t in hooks.HookTiming]),
    default=None,
    help="Only show one phase",
)
@_click.option("--json", "json_output", is_flag=True, help="JSON output")
def hooks_plan(path: _pathlib.Path, timing: str | None, json_output: bool) -> None:
    """Show the execution order of the hooks in PATH."""
    hooks_config = _load_hooks(path)
    timings = [hooks.HookTiming(timing)] if timing else list(hooks.HookTiming)
    plan = {t.value: hooks_config.for_timing(t) for t in timings}

    if json_output:
        _click.echo(_json.dumps(
            {k: [d.model_dump(mode="json") for d in v] for k, v in plan.items()},
            indent=2,
        ))
        return

    for phase, declarations in plan.items():
        _click.echo(f"{phase.upper()}:")
        if not declarations:
            _click.echo("  (none)")
        for position, declaration in enumerate(declarations, start=1):
            arguments = ", ".join(declaration.arguments)
            _click.echo(f"  {position}. {declaration.name} (order {declaration.order}) [{arguments}]")


def main() -> None:
    """Main entry point with correct program name."""
    cli(prog_name="questline")


if __name__ == "__main__":
    main()

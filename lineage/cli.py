"""Lineage CLI - Main Entry Point.

The `lineage` command inspects blueprints and the hook pipeline.

Commands:
    inspect  - Build a blueprint and show its lineage and members
    hooks    - List registered hooks in dispatch order
    config   - Show the effective configuration
"""

import importlib
import json
import logging
import sys
from typing import Any, Optional, Tuple

import click

from . import __version__
from .config import ConfigLoader, configure_logging
from .faults import ArgumentError, ConfigError, LineageFault
from .hooks import get_default_registry
from .instance import chain_members, declaration_of, lineage_of, name_of, own_members
from .resolver import DelegationResolver


def _fail(message: str) -> None:
    click.echo(click.style(f"  ✗ {message}", fg="red"), err=True)
    sys.exit(1)


def load_target(target: str) -> Any:
    """Import ``module:attr`` (dotted attribute paths allowed)."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise ArgumentError(f"Expected MODULE:ATTR, got '{target}'")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ArgumentError(f"Cannot import module '{module_name}': {e}") from e
    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise ArgumentError(f"'{module_name}' has no attribute '{attr_path}'") from e
    return obj


def _parse_args(raw: Optional[str]) -> Tuple[Any, ...]:
    if raw is None:
        return ()
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ArgumentError(f"--args is not valid JSON: {e}") from e
    if not isinstance(value, list):
        raise ArgumentError("--args must be a JSON array")
    return tuple(value)


def _section(title: str) -> None:
    click.echo(click.style(title, fg="cyan", bold=True))


def _kv(key: str, value: Any) -> None:
    click.echo(f"  {click.style(key, fg='green')}: {value}")


@click.group()
@click.version_option(version=__version__, prog_name="lineage")
@click.option('--verbose', '-v', is_flag=True, help='Verbose output')
@click.option('--quiet', '-q', is_flag=True, help='Minimal output')
@click.pass_context
def cli(ctx, verbose: bool, quiet: bool):
    """Inspect blueprints, delegation chains and hooks.

    \b
    Quick start:
      lineage inspect myapp.widgets:Toolbar --args '["title"]'
      lineage hooks --import myapp.plugins
      lineage config
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    ctx.obj['quiet'] = quiet
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


@cli.command('inspect')
@click.argument('target')
@click.option('--args', 'raw_args', type=str, help='Constructor arguments as a JSON array')
@click.pass_context
def inspect_cmd(ctx, target: str, raw_args: Optional[str]):
    """
    Build TARGET (module:attr) without running hooks and describe it.

    Examples:
      lineage inspect myapp.models:Account
      lineage inspect myapp.models:Account --args '["alice"]'
    """
    try:
        blueprint = load_target(target)
        args = _parse_args(raw_args)
        config = ConfigLoader.load().to_config()
        instance = DelegationResolver(max_depth=config.max_chain_depth).build(blueprint, args)
    except LineageFault as e:
        _fail(str(e))

    if ctx.obj['quiet']:
        click.echo(" -> ".join(name_of(link) for link in lineage_of(instance)))
        return

    _section(f"Blueprint {name_of(blueprint)}")
    _kv("Lineage", " -> ".join(name_of(link) for link in lineage_of(instance)))

    _section("Declaration")
    for key, value in declaration_of(instance).to_dict().items():
        _kv(key, value)

    _section("Members")
    for name in sorted(chain_members(instance)):
        _kv(name, type(chain_members(instance)[name]).__name__)

    own = own_members(instance)
    if own:
        _section("Own properties")
        for name in sorted(own):
            _kv(name, type(own[name]).__name__)


@cli.command('hooks')
@click.option('--import', 'imports', multiple=True, help='Module to import first (registers its hooks)')
@click.pass_context
def hooks_cmd(ctx, imports: Tuple[str, ...]):
    """
    List hooks of the process-wide registry in dispatch order.

    Examples:
      lineage hooks
      lineage hooks --import lineage.widget
    """
    for module_name in imports:
        try:
            importlib.import_module(module_name)
        except ImportError as e:
            _fail(f"Cannot import module '{module_name}': {e}")

    registry = get_default_registry()
    if not ctx.obj['quiet']:
        _section(f"Hooks ({len(registry)})")
    for position, hook in enumerate(registry):
        click.echo(f"  {position:>2}. {click.style(hook.name, fg='green')}  {hook.describe()}")


@cli.command('config')
@click.option('--file', 'paths', multiple=True, help='Config file (JSON/YAML), may repeat')
@click.option('--env-file', type=str, help='.env file to read')
@click.option('--json', 'as_json', is_flag=True, help='Print as JSON')
def config_cmd(paths: Tuple[str, ...], env_file: Optional[str], as_json: bool):
    """
    Show the effective configuration.

    Examples:
      lineage config
      lineage config --file lineage.yaml --json
    """
    try:
        config = ConfigLoader.load(paths=list(paths), env_file=env_file).to_config()
    except ConfigError as e:
        _fail(str(e))

    configure_logging(config)
    if as_json:
        click.echo(json.dumps(config.to_dict(), indent=2, sort_keys=True))
        return

    _section("Configuration")
    for key, value in config.to_dict().items():
        _kv(key, value)


def main():
    """Entry point for `lineage` command."""
    cli(obj={})


if __name__ == '__main__':
    main()

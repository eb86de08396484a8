"""
Config command group.

Commands:
    - config show [--field FIELD]     # Display configuration
    - config set KEY VALUE            # Update one field and save
    - config reset [--field FIELD]    # Reset to defaults
    - config path                     # Print the config file location
    - config restore                  # Roll back to the .bak copy
"""

import sys
from typing import Optional

import click
from pydantic import ValidationError

from wnpbridge.exceptions import WNPBridgeError, wrap_pydantic_error
from wnpbridge.models import BridgeConfig
from wnpbridge.models.config import DEFAULT_CONFIG_PATH

from .common import report_error

FIELDS = list(BridgeConfig.model_fields)


@click.group(name="config", invoke_without_command=True)
@click.pass_context
def config(ctx):
    """Configure the NeoPixel bridge."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(show_config)


@config.command(name="show")
@click.option('--field', '-f', type=click.Choice(FIELDS), default=None, help='Show a single field')
def show_config(field: Optional[str]):
    """Display configuration values."""
    try:
        cfg = BridgeConfig.load_or_default()
    except WNPBridgeError as e:
        report_error(e)
        sys.exit(1)

    values = cfg.model_dump(mode="json")
    if field:
        click.echo(f"{field}: {values[field]}")
        return

    click.echo(f"Configuration ({DEFAULT_CONFIG_PATH}):\n")
    for name in FIELDS:
        description = BridgeConfig.model_fields[name].description or ""
        click.echo(f"  {name}: {values[name]}")
        if description:
            click.echo(f"      {description}")


@config.command(name="set")
@click.argument('key', type=click.Choice(FIELDS))
@click.argument('value', type=str)
def set_config(key: str, value: str):
    """
    Set a configuration field and save.

    Use "none" to clear optional fields.

    \b
    Examples:
      wnpbridge config set host_url http://192.168.1.20
      wnpbridge config set setup_code 123-45-678
      wnpbridge config set request_timeout none
    """
    try:
        cfg = BridgeConfig.load_or_default()
        parsed = None if value.lower() in ("none", "null") else value
        updated = BridgeConfig.model_validate({**cfg.model_dump(), key: parsed})
        updated.save()
    except WNPBridgeError as e:
        report_error(e)
        sys.exit(1)
    except ValidationError as e:
        report_error(wrap_pydantic_error(e, str(DEFAULT_CONFIG_PATH)))
        sys.exit(1)

    click.echo(f"[OK] {key} = {updated.model_dump(mode='json')[key]}")


@config.command(name="reset")
@click.option('--field', '-f', type=click.Choice(FIELDS), default=None, help='Reset a single field')
@click.confirmation_option(prompt='Reset configuration to defaults?')
def reset_config(field: Optional[str]):
    """Reset configuration to defaults."""
    try:
        if field:
            cfg = BridgeConfig.load_or_default()
            default = BridgeConfig().model_dump()[field]
            cfg = BridgeConfig.model_validate({**cfg.model_dump(), field: default})
        else:
            cfg = BridgeConfig()
        cfg.save()
    except WNPBridgeError as e:
        report_error(e)
        sys.exit(1)

    click.echo(f"[OK] Reset {field or 'all fields'}")


@config.command(name="path")
def config_path():
    """Print the config file location."""
    click.echo(str(DEFAULT_CONFIG_PATH))


@config.command(name="restore")
@click.confirmation_option(prompt='Replace configuration with the last backup?')
def restore_config():
    """Restore the configuration saved before the last change."""
    store = BridgeConfig.store()
    try:
        previous = store.read_backup()
        store.write(previous, backup=False)
    except FileNotFoundError:
        click.echo(f"No backup at {store.backup_path}", err=True)
        sys.exit(1)
    except WNPBridgeError as e:
        report_error(e)
        sys.exit(1)

    click.echo(f"[OK] Restored {store.path} from {store.backup_path.name}")

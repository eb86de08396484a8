"""Helpers shared by CLI commands."""

import logging
from pathlib import Path
from typing import Optional

import click

from wnpbridge.exceptions import format_error_for_display

logger = logging.getLogger(__name__)

host_option = click.option(
    '--host',
    '-H',
    type=str,
    default=None,
    help='LED strip base URL (default: config file, then mDNS discovery)'
)


def report_error(error: Exception, log_path: Optional[Path] = None) -> None:
    """Print a formatted error without a traceback."""
    user_message, recovery_hint = format_error_for_display(error)

    click.echo("\n" + "="*70, err=True)
    click.echo(f"ERROR: {user_message}", err=True)
    click.echo("="*70, err=True)

    if recovery_hint:
        click.echo(f"\n{recovery_hint}", err=True)

    if log_path:
        click.echo(f"\nFor details, check the log file: {log_path}", err=True)
        click.echo("For logging options, run: wnpbridge --help", err=True)


def resolve_host(host: Optional[str]) -> str:
    """
    Find the strip's base URL: explicit option, then config, then mDNS.

    Raises:
        ConfigurationError: If the address is invalid or discovery fails
    """
    from wnpbridge.discovery import discover_device_url
    from wnpbridge.models import BridgeConfig

    config = BridgeConfig.load_or_default().with_overrides(host_url=host)
    if config.host_url:
        return config.host_url

    click.echo(f"Looking for a strip ({config.service_type})...", err=True)
    return discover_device_url(
        service_type=config.service_type,
        timeout=config.discovery_timeout,
        enable_ipv6=config.enable_ipv6,
    )

"""Direct LED strip commands, bypassing HomeKit."""

import logging
import sys
from typing import Optional

import click

from wnpbridge.bridge import ColorStateBridge
from wnpbridge.codec import decode_many
from wnpbridge.device import DeviceClient
from wnpbridge.exceptions import WNPBridgeError
from wnpbridge.models import Color

from .common import host_option, report_error, resolve_host

logger = logging.getLogger(__name__)


def _open_client(host: Optional[str]) -> DeviceClient:
    from wnpbridge.models import BridgeConfig

    url = resolve_host(host)
    return DeviceClient(url, timeout=BridgeConfig.load_or_default().request_timeout)


@click.group(name="device")
def device_group():
    """Inspect and drive the LED strip directly."""
    pass


@device_group.command(name="states")
@host_option
def show_states(host: Optional[str]):
    """Show every pixel's color."""
    try:
        with _open_client(host) as client:
            colors = decode_many(client.fetch_states())
    except WNPBridgeError as e:
        report_error(e)
        sys.exit(1)

    click.echo(f"{len(colors)} pixel(s):\n")
    for i, color in enumerate(colors):
        h, s, v = color.to_hsv()
        click.echo(f"  [{i}] {color.to_hex()}  hue={h:.0f} sat={s:.2f} val={v:.2f}")


@device_group.command(name="size")
@host_option
def show_size(host: Optional[str]):
    """Show the number of pixels."""
    try:
        with _open_client(host) as client:
            count = client.fetch_pixel_count()
    except WNPBridgeError as e:
        report_error(e)
        sys.exit(1)

    click.echo(str(count))


@device_group.command(name="clear")
@host_option
def clear_strip(host: Optional[str]):
    """Set every pixel black."""
    try:
        with _open_client(host) as client:
            client.clear()
    except WNPBridgeError as e:
        report_error(e)
        sys.exit(1)

    click.echo("[OK] Strip cleared")


@device_group.command(name="set")
@host_option
@click.option('--hue', type=click.FloatRange(0, 360), default=None, help='Hue in degrees')
@click.option('--sat', type=click.FloatRange(0, 1), default=1.0, help='Saturation 0..1 (default: 1)')
@click.option('--val', type=click.FloatRange(0, 1), default=1.0, help='Value 0..1 (default: 1)')
@click.option('--hex', 'hex_color', type=str, default=None, help='Color as #RRGGBB')
def set_color(
    host: Optional[str],
    hue: Optional[float],
    sat: float,
    val: float,
    hex_color: Optional[str],
):
    """
    Paint the whole strip one color.

    \b
    Examples:
      wnpbridge device set --hue 120
      wnpbridge device set --hex "#00ff00"
    """
    if (hue is None) == (hex_color is None):
        raise click.UsageError("Give exactly one of --hue or --hex")

    try:
        color = Color.from_hex(hex_color) if hex_color else Color.from_hsv(hue, sat, val)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    try:
        with _open_client(host) as client:
            bridge = ColorStateBridge(client)
            bridge.initialize()
            bridge.set_solid(color)
            count = bridge.pixel_count
    except WNPBridgeError as e:
        report_error(e)
        sys.exit(1)

    click.echo(f"[OK] {count} pixel(s) set to {color.to_hex()}")


@device_group.command(name="on")
@host_option
def turn_on(host: Optional[str]):
    """
    Light the strip.

    A lit strip is re-pushed as it is. A dark strip turns solid red: each
    run starts a fresh bridge, so colors from before an earlier "off" are
    not remembered.
    """
    try:
        with _open_client(host) as client:
            bridge = ColorStateBridge(client)
            bridge.initialize()
            bridge.turn_on()
    except WNPBridgeError as e:
        report_error(e)
        sys.exit(1)

    click.echo("[OK] Strip on")


@device_group.command(name="off")
@host_option
def turn_off(host: Optional[str]):
    """Turn the strip off."""
    try:
        with _open_client(host) as client:
            bridge = ColorStateBridge(client)
            bridge.initialize()
            bridge.turn_off()
    except WNPBridgeError as e:
        report_error(e)
        sys.exit(1)

    click.echo("[OK] Strip off")

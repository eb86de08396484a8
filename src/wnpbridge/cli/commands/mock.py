"""Run the in-memory mock strip."""

import logging

import click

from wnpbridge.mock_device import MockDevice

logger = logging.getLogger(__name__)


@click.command(name="mock-device")
@click.option('--pixels', type=click.IntRange(min=0), default=8, help='Number of pixels (default: 8)')
@click.option('--port', '-p', type=int, default=8888, help='Port to listen on (default: 8888)')
@click.option('--bind', type=str, default="127.0.0.1", help='Interface to bind (default: 127.0.0.1)')
def mock_device(pixels: int, port: int, bind: str):
    """
    Serve a fake LED strip for local testing.

    Point the bridge at it with --host. Press Ctrl+C to stop.
    """
    device = MockDevice(pixel_count=pixels, host=bind, port=port)
    click.echo(f"Mock strip with {pixels} pixel(s) at {device.url}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        device.serve_forever()
    except KeyboardInterrupt:
        click.echo("\nStopped")
    finally:
        device.close()

"""Main CLI entry point."""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

import click

from .commands import config, device_group, mock_device
from .commands.common import report_error

logger = logging.getLogger(__name__)

DEFAULT_LOG_DIR = Path.home() / ".wnpbridge" / "logs"


def resolve_log_path(debug: bool, log_file: Optional[Path]) -> Path:
    """Pick the log file for this run."""
    if debug and not log_file:
        return Path.cwd() / "wnpbridge-debug.log"
    if log_file:
        return log_file
    return DEFAULT_LOG_DIR / "wnpbridge.log"


def setup_logging(verbose: int, debug: bool, log_file: Optional[Path], log_level: str) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: Verbosity count (0 = WARNING, 1 = INFO, 2+ = DEBUG)
        debug: If True, enable debug mode with file logging
        log_file: Custom log file path (optional)
        log_level: Log level for file logging (DEBUG/INFO/WARNING/ERROR)
    """
    if debug:
        level = logging.DEBUG
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Override with explicit log level if provided
    if log_file:
        level = getattr(logging, log_level.upper())

    log_path = resolve_log_path(debug, log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Create rotating file handler (keeps last 5 files, max 10MB each)
    file_handler = logging.handlers.RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)

    # Console mirrors the log file
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logger.info(f"Logging configured: level={logging.getLevelName(level)}, file={log_path}")


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version="0.1.0", prog_name="wnpbridge")
@click.option(
    '--host',
    '-H',
    type=str,
    default=None,
    help='LED strip base URL, e.g. http://192.168.1.20 (default: discover via mDNS)'
)
@click.option(
    '--name',
    '-n',
    type=str,
    default=None,
    help='Accessory display name'
)
@click.option(
    '--code',
    type=str,
    default=None,
    help='8-digit HomeKit setup code'
)
@click.option(
    '--port',
    '-p',
    type=int,
    default=None,
    help='Accessory server port'
)
@click.option(
    '--metrics-addr',
    type=str,
    default=None,
    help='Serve metrics on host:port, e.g. :8080 (default: disabled)'
)
@click.option(
    '--config',
    'config_path',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Config file (default: ~/.wnpbridge/config.json)'
)
@click.option(
    '-v', '--verbose',
    count=True,
    help='Increase verbosity (-v: INFO, -vv: DEBUG)'
)
@click.option(
    '--debug',
    is_flag=True,
    help='Enable debug mode (DEBUG level, logs to ./wnpbridge-debug.log)'
)
@click.option(
    '--log-file',
    type=click.Path(path_type=Path),
    default=None,
    help='Custom log file path'
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
    default='INFO',
    help='Log level for file logging (default: INFO)'
)
def cli(
    ctx,
    host: Optional[str],
    name: Optional[str],
    code: Optional[str],
    port: Optional[int],
    metrics_addr: Optional[str],
    config_path: Optional[Path],
    verbose: int,
    debug: bool,
    log_file: Optional[Path],
    log_level: str
):
    """
    WiFi NeoPixel bridge - exposes an HTTP LED strip as a HomeKit lightbulb.

    Command-line options override values from the config file.

    \b
    Examples:
      # Discover the strip via mDNS and start the accessory
      wnpbridge

      # Use a known address
      wnpbridge --host http://192.168.1.20

      # Enable debug logging
      wnpbridge --debug

      # Expose metrics for Prometheus
      wnpbridge --metrics-addr :8080

      # Inspect the strip directly
      wnpbridge device states --host http://192.168.1.20

      # Run a local fake strip for testing
      wnpbridge mock-device --pixels 8
    """
    # If a subcommand was invoked, don't run the app
    if ctx.invoked_subcommand is not None:
        return

    # Lazy imports
    from wnpbridge.app import BridgeApp
    from wnpbridge.models import BridgeConfig

    setup_logging(verbose, debug, log_file, log_level)
    log_path = resolve_log_path(debug, log_file)

    logger.info("Starting WiFi NeoPixel bridge")

    app = None
    try:
        config_obj = BridgeConfig.load_or_default(config_path).with_overrides(
            host_url=host,
            accessory_name=name,
            setup_code=code,
            port=port,
            metrics_addr=metrics_addr,
        )

        app = BridgeApp(config_obj)
        app.run()

    except KeyboardInterrupt:
        logger.info("Bridge interrupted by user")
        click.echo("\nShutting down...", err=True)
    except click.Abort:
        raise
    except Exception as e:
        logger.exception("Error running bridge")
        report_error(e, log_path)
        sys.exit(1)
    finally:
        if app is not None:
            app.shutdown()


# Register utility commands
cli.add_command(device_group)
cli.add_command(mock_device)
cli.add_command(config)

if __name__ == "__main__":
    cli()

"""CLI commands for Brother Exporter."""

import logging
from pathlib import Path

import typer
from pydantic import ValidationError

from brother_exporter import __version__
from brother_exporter.config import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_LISTEN,
    ServerConfig,
    load_printers_config,
)
from brother_exporter.display import (
    console,
    display_information,
    display_printers,
    print_error,
    print_info,
    print_success,
)
from brother_exporter.errors import ConfigError, DuplicateMetricError, FetchError
from brother_exporter.fetcher import PrinterClient
from brother_exporter.publisher import publish
from brother_exporter.server import ExporterApp, create_server
from brother_exporter.targets import QueryTarget, StaticTargets, TargetResolver

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="brother-exporter",
    help="Prometheus exporter for Brother printer maintenance information.",
    add_completion=False,
)


def setup_logging(level: str) -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # One line per printer request is too chatty at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def build_resolver(config: ServerConfig) -> TargetResolver:
    """Build the target resolver for the configured mode.

    Raises:
        ConfigError: If the printer list cannot be loaded in static mode
    """
    if config.mode == "query":
        return QueryTarget("host")
    printers = load_printers_config(Path(config.config_file))
    return StaticTargets(printers.printers)


@app.command()
def serve(
    listen: str = typer.Option(
        DEFAULT_LISTEN, "--listen", "-l",
        help="Host and port to listen on"
    ),
    config_file: str = typer.Option(
        DEFAULT_CONFIG_FILE, "--config", "-c",
        help="Path to the printers.yml configuration file"
    ),
    mode: str = typer.Option(
        "static", "--mode", "-m",
        help="Target mode: static (printers from config) or query (?host=)"
    ),
    log_level: str = typer.Option(
        "INFO", "--log-level",
        help="Log level (DEBUG, INFO, WARNING, ERROR)"
    ),
):
    """Serve printer metrics on /metrics."""
    try:
        config = ServerConfig(
            listen=listen,
            config_file=config_file,
            mode=mode,
            logging={"level": log_level},
        )
    except ValidationError as e:
        print_error(f"Invalid option: {e}")
        raise typer.Exit(2)

    setup_logging(config.logging.level)

    try:
        resolver = build_resolver(config)
    except ConfigError as e:
        logger.error(f"Error loading printer IPs from {config.config_file}: {e}")
        raise typer.Exit(1)

    exporter = ExporterApp(resolver)
    try:
        server = create_server(exporter, config.listen)
    except OSError as e:
        logger.error(f"Cannot listen on {config.listen}: {e}")
        raise typer.Exit(1)

    if config.mode == "query":
        logger.info(f"Starting to listen on {config.listen} in query mode")
    else:
        logger.info(
            f"Starting to listen on {config.listen} with config file {config.config_file}"
        )

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Stopping exporter")
    finally:
        server.server_close()


@app.command()
def probe(
    host: str = typer.Argument(..., help="Printer address, host or host:port"),
):
    """Fetch one printer once and show its gauges."""
    with PrinterClient() as client:
        try:
            fields = client.fetch(host)
        except FetchError as e:
            print_error(f"Error collecting data for {host}: {e}")
            raise typer.Exit(1)

    try:
        metric_set = publish(host, fields)
    except DuplicateMetricError as e:
        print_error(f"Cannot publish {host}: {e}")
        raise typer.Exit(1)

    display_information(fields, metric_set)
    print_success(f"{len(metric_set.values)} of {len(fields)} fields are numeric")


@app.command()
def printers(
    config_file: str = typer.Option(
        DEFAULT_CONFIG_FILE, "--config", "-c",
        help="Path to the printers.yml configuration file"
    ),
):
    """List the printers polled in static mode."""
    try:
        config = load_printers_config(Path(config_file))
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(1)

    print_info(f"Loaded from {config_file}")
    display_printers(config.printers)


@app.command()
def version():
    """Show version information."""
    console.print(f"Brother Exporter v{__version__}")


if __name__ == "__main__":
    app()

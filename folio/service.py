"""folio service - serves the portfolio page and runs the now-playing widget."""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional

import click

from .config import Config


def setup_logging(log_dir: Path, log_level: str) -> logging.Logger:
    """
    Set up logging with file rotation.

    Args:
        log_dir: Directory for log files
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured logger
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "folio.log"

    logger = logging.getLogger("folio")
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # File handler with daily rotation, keep 7 days
    file_handler = TimedRotatingFileHandler(
        log_file,
        when="midnight",
        interval=1,
        backupCount=7,
    )
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    )
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    )
    logger.addHandler(console_handler)

    return logger


def run_server(config: Config, verbose: bool = False) -> None:
    """
    Serve the site until interrupted.

    Args:
        config: Configuration instance
        verbose: Enable verbose logging
    """
    import uvicorn

    from .gateway import create_app

    log_level = "DEBUG" if verbose else config.log_level
    logger = setup_logging(config.get_log_dir(), log_level)
    logger.info("folio service starting")

    if config.now_playing_source == "spotify" and not (
        config.spotify_access_token or config.has_spotify_credentials()
    ):
        logger.warning("No Spotify access token or refresh credentials configured; widget will stay hidden")

    app = create_app(config)
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level="warning",  # Reduce uvicorn noise
        access_log=False,
    )
    logger.info("folio service stopped")


def check_config(config: Config) -> bool:
    """
    Print configuration with secrets masked.

    Args:
        config: Configuration instance

    Returns:
        True if the configured now-playing source can run
    """
    for key, value in config.describe().items():
        print(f"{key}: {value}")

    if config.now_playing_source == "aggregator":
        if not config.aggregator_user_id:
            print("Aggregator user id is not set; the widget will render nothing")
            return False
        return True

    if config.has_spotify_credentials():
        print("Spotify refresh credentials: complete")
        return True
    if config.spotify_access_token:
        print("Spotify refresh credentials: incomplete, using static access token only")
        return True
    print("Spotify credentials: missing")
    return False


@click.group()
@click.version_option(version="0.1.0", prog_name="folio")
def cli():
    """folio - portfolio site with a now-playing widget."""
    pass


@cli.command()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--config", "-c", "config_file", help="Path to config file")
def run(verbose: bool, config_file: Optional[str]) -> None:
    """Run the web server in foreground."""
    config = Config.load(config_file)
    run_server(config, verbose=verbose)


@cli.command()
@click.option("--config", "-c", "config_file", help="Path to config file")
def check(config_file: Optional[str]) -> None:
    """Check configuration."""
    config = Config.load(config_file)
    if not check_config(config):
        raise SystemExit(1)


def main():
    """Entry point for folio."""
    cli()


if __name__ == "__main__":
    main()

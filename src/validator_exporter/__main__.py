"""
Validator exporter CLI entry point.

Run the exporter next to a Solana validator and point Prometheus at it.

Usage::

    python -m validator_exporter --config exporter.yaml
    python -m validator_exporter --rpc-url http://127.0.0.1:8899 \\
        --vote-account 3ZYfXHmgjzyUfQ9bZVRuT4ZSxNPzA6yiyxYfKSAHPpBj

Options:
    --config          Path to exporter YAML file
    --rpc-url         JSON-RPC endpoint of the validator node
    --vote-account    Vote account to report on (can be repeated)
    --listen-host     Address to serve metrics on (default: 0.0.0.0)
    --listen-port     Port to serve metrics on (default: 9100)
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Any

import yaml

from validator_exporter.api import ApiServer, ApiServerConfig
from validator_exporter.config import ExporterConfig
from validator_exporter.identity import IdentityInfoMap
from validator_exporter.rpc import RpcClient, fetch_identity_info
from validator_exporter.service import RefreshService, StateHolder
from validator_exporter.types import ConfigError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
"""Timestamp format for log lines."""

NOISY_LOGGERS = ("httpx", "aiohttp.access")
"""Libraries that log once per request. Held at WARNING unless verbose."""


class ColoredFormatter(logging.Formatter):
    """Log formatter that colors the level, logger name and timestamp."""

    RESET = "\x1b[0m"
    CYAN = "\x1b[38;5;51m"
    BLUE = "\x1b[38;5;39m"
    YELLOW = "\x1b[38;5;220m"

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[38;5;244m",
        logging.INFO: "\x1b[38;5;40m",
        logging.WARNING: YELLOW,
        logging.ERROR: "\x1b[38;5;196m",
        logging.CRITICAL: "\x1b[38;5;196;1m",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format one record, keeping any traceback below the message."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        line = (
            f"{self.CYAN}{self.formatTime(record, self.datefmt)}{self.RESET} "
            f"{color}{record.levelname:8}{self.RESET} "
            f"{self.BLUE}{record.name}{self.RESET}: {record.getMessage()}"
        )

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            line = f"{line}\n{record.exc_text}"
        return line


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Send exporter logs to stderr, colored unless disabled."""
    level = logging.DEBUG if verbose else logging.INFO

    formatter = (
        logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", DATE_FORMAT)
        if no_color
        else ColoredFormatter(datefmt=DATE_FORMAT)
    )
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if verbose else logging.WARNING)


def load_config(args: argparse.Namespace) -> ExporterConfig:
    """
    Build the configuration from the optional file and CLI overrides.

    Raises:
        FileNotFoundError: If the config file does not exist.
        pydantic.ValidationError: If the merged configuration is invalid.
    """
    config = ExporterConfig.from_yaml_file(args.config) if args.config else ExporterConfig()

    overrides: dict[str, Any] = {}
    if args.rpc_url is not None:
        overrides["rpc_url"] = args.rpc_url
    if args.vote_accounts:
        overrides["vote_accounts"] = args.vote_accounts
    if args.listen_host is not None:
        overrides["listen_host"] = args.listen_host
    if args.listen_port is not None:
        overrides["listen_port"] = args.listen_port

    return config.copy(**overrides) if overrides else config


def build_refresh_service(
    config: ExporterConfig, client: RpcClient, holder: StateHolder
) -> RefreshService:
    """
    Wire the refresh service for the configured metadata source.

    Raises:
        ConfigError: If the metadata file cannot be loaded.
    """
    service = RefreshService(
        client=client,
        holder=holder,
        vote_accounts=frozenset(config.vote_accounts),
        interval=config.refresh_interval,
        identity_info_interval=config.identity_info_interval,
    )

    if config.identity_info_source == "rpc":
        service.identity_info_loader = lambda: fetch_identity_info(client)
    elif config.identity_info_source == "file" and config.identity_info_file is not None:
        try:
            service.identity_info = IdentityInfoMap.from_yaml_file(config.identity_info_file)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(
                f"Cannot load identity info from {config.identity_info_file}: {e}"
            ) from e
        logger.info(
            "Loaded validator info for %d identities from %s",
            len(service.identity_info),
            config.identity_info_file,
        )

    return service


async def run_exporter(config: ExporterConfig) -> None:
    """
    Run the exporter until cancelled.

    Args:
        config: Validated exporter configuration.
    """
    if not config.vote_accounts:
        logger.warning("No vote accounts configured; only node identity metrics will be exported")

    holder = StateHolder()
    server = ApiServer(
        config=ApiServerConfig(host=config.listen_host, port=config.listen_port),
        state_getter=holder.get,
    )

    async with RpcClient(config.rpc_url, timeout=config.rpc_timeout) as client:
        try:
            service = build_refresh_service(config, client, holder)
        except ConfigError as e:
            logger.error("%s", e.message)
            return

        logger.info(
            "Exporting %d vote accounts from %s",
            len(config.vote_accounts),
            config.rpc_url,
        )
        try:
            await asyncio.gather(service.run(), server.run())
        finally:
            service.stop()
            server.stop()


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Solana validator Prometheus exporter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to exporter YAML file",
    )
    parser.add_argument(
        "--rpc-url",
        type=str,
        default=None,
        help="JSON-RPC endpoint of the validator node (default: http://127.0.0.1:8899)",
    )
    parser.add_argument(
        "--vote-account",
        action="append",
        default=[],
        dest="vote_accounts",
        help="Vote account to report on (can be repeated)",
    )
    parser.add_argument(
        "--listen-host",
        type=str,
        default=None,
        help="Address to serve metrics on (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--listen-port",
        type=int,
        default=None,
        help="Port to serve metrics on (default: 9100)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    args = parser.parse_args()

    setup_logging(args.verbose, args.no_color)

    try:
        config = load_config(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Invalid configuration: %s", e)
        raise SystemExit(1) from e

    try:
        asyncio.run(run_exporter(config))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()

"""Command line entry point: run the push server or a listener client."""

import argparse
import asyncio
import signal
import sys
from pathlib import Path
from typing import Any, Optional

import structlog

from .channel.server import SignalServer
from .client.reconnecting import ReconnectingClient
from .config.defaults import HubConfig
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .logging.config import configure_logging

logger = structlog.get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="signal-hub",
        description="Real-time trading signal push channel",
    )
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory containing settings.yaml")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")

    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the WebSocket push server")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--path", default=None, help="WebSocket endpoint path")
    serve.add_argument("--interval", type=float, default=None,
                       help="Seconds between generator ticks")
    serve.add_argument("--probability", type=float, default=None,
                       help="Chance that a tick emits a signal")
    serve.add_argument("--no-generator", action="store_true",
                       help="Disable periodic demo signals")

    listen = sub.add_parser("listen", help="Run a reconnecting listener client")
    listen.add_argument("--url", default=None, help="e.g. ws://localhost:8080")
    listen.add_argument("--name", default=None, help="Client name sent on connect")
    listen.add_argument("--reconnect-delay", type=float, default=None)
    listen.add_argument("--keepalive", type=float, default=None,
                        help="Seconds between keep-alive pings")

    return parser


def overrides_from_args(args: argparse.Namespace) -> dict[str, Any]:
    """Translate command line flags into the highest-precedence config tier."""
    overrides: dict[str, Any] = {}

    def put(section: str, key: str, value: Any) -> None:
        if value is not None:
            overrides.setdefault(section, {})[key] = value

    put("logging", "level", args.log_level)
    if args.json_logs:
        put("logging", "format_json", True)

    if args.command == "serve":
        put("server", "host", args.host)
        put("server", "port", args.port)
        put("server", "path", args.path)
        put("generator", "interval_seconds", args.interval)
        put("generator", "emit_probability", args.probability)
        if args.no_generator:
            put("generator", "enabled", False)
    elif args.command == "listen":
        put("client", "url", args.url)
        put("client", "client_name", args.name)
        put("client", "reconnect_delay_seconds", args.reconnect_delay)
        put("client", "keepalive_interval_seconds", args.keepalive)

    return overrides


def load_config(args: argparse.Namespace) -> Optional[HubConfig]:
    loader = ConfigLoader.create(args.config_dir)
    merged = loader.merge_config(overrides_from_args(args))

    errors = ConfigValidator.validate_config(merged)
    if errors:
        for error in errors:
            print(f"Invalid configuration: {error.field}: {error.message} (got: {error.value!r})",
                  file=sys.stderr)
        return None

    return loader.build_config(merged)


def _install_signal_handlers(loop: asyncio.AbstractEventLoop, callback) -> None:
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, callback)
        except NotImplementedError:
            # Windows event loops; KeyboardInterrupt still ends asyncio.run().
            pass


async def run_server(config: HubConfig) -> None:
    loop = asyncio.get_running_loop()
    stop = loop.create_future()

    def request_stop() -> None:
        logger.info("Shutdown requested")
        if not stop.done():
            stop.set_result(None)

    _install_signal_handlers(loop, request_stop)
    await SignalServer(config).serve_forever(stop)


async def run_client(config: HubConfig) -> None:
    loop = asyncio.get_running_loop()
    client = ReconnectingClient(config.client)
    pending: set[asyncio.Task] = set()

    def request_stop() -> None:
        logger.info("Shutdown requested")
        task = loop.create_task(client.shutdown())
        pending.add(task)
        task.add_done_callback(pending.discard)

    _install_signal_handlers(loop, request_stop)
    logger.info("Starting listener client", url=config.client.url)
    await client.run_forever()


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args)
    if config is None:
        return 2

    configure_logging(level=config.logging.level, format_json=config.logging.format_json)

    runner = run_server if args.command == "serve" else run_client
    try:
        asyncio.run(runner(config))
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())

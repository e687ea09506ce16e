"""Command line entry point for the HexBot controller."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml

from hexbot.config import Config, load_config
from hexbot.control import ControlContext, ControlEngine
from hexbot.errors import HexbotError, TransportError
from hexbot.frontends import BluetoothFrontend, ConsoleFrontend, LineFrontend
from hexbot.infra import configure_logging, install_exception_hook
from hexbot.sequence import GaitSequence
from hexbot.serial_io import SUPPORTED_BAUDRATES, SSC32Board, SerialLink
from hexbot.services import EventBus, SequenceFileWatcher
from hexbot.state_machine import RobotModel

logger = logging.getLogger("app.main")

FRONTENDS = ("console", "bluetooth", "none")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hexbot", description="HexBot SSC-32 walking controller.")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config/hexbot.yaml"),
        help="Path to the YAML/JSON configuration file.",
    )
    parser.add_argument(
        "--frontend",
        choices=FRONTENDS,
        default="console",
        help="Where operator commands come from.",
    )
    parser.add_argument("--port", help="Override the SSC-32 serial port.")
    parser.add_argument(
        "--baud",
        type=int,
        choices=SUPPORTED_BAUDRATES,
        help="Override the SSC-32 baud rate.",
    )
    return parser.parse_args(argv)


def build_frontend(name: str, config: Config, bus: EventBus) -> Optional[LineFrontend]:
    step = config.control.speed_step
    if name == "console":
        return ConsoleFrontend(bus, speed_step=step)
    if name == "bluetooth":
        return BluetoothFrontend(
            bus,
            config.bluetooth,
            speed_step=step,
            reconnect_delay_s=config.serial.reconnect_delay_ms / 1000.0,
        )
    return None


def bootstrap(config: Config, frontend_name: str, port: Optional[str] = None, baud: Optional[int] = None) -> None:
    bus = EventBus(maxsize=config.control.event_queue_size)
    install_exception_hook(on_fatal=lambda: bus.stop("worker thread died"))

    link = SerialLink(config.serial)
    board = SSC32Board(link)
    context = ControlContext(
        board=board,
        config=config.control,
        model=RobotModel(speed=config.control.initial_speed),
    )

    try:
        link.open(port=port, baudrate=baud)
    except TransportError as exc:
        logger.error("SSC-32 not reachable (%s); running in input-only mode.", exc)
        context.mark_unreachable()

    if context.reachable:
        try:
            logger.info("SSC-32 firmware: %s", board.get_version() or "unknown")
            context.send_startup_pose()
        except HexbotError as exc:
            logger.error("Startup pose failed: %s", exc)
            context.mark_unreachable()

    watcher = _start_sequence_watcher(config, bus, context)
    engine = ControlEngine(context, bus, reconnect_delay_s=config.serial.reconnect_delay_ms / 1000.0)
    engine.start()

    frontend = build_frontend(frontend_name, config, bus)
    if frontend is not None:
        frontend.start()

    try:
        while engine.is_running and not engine.wait_for_quit(timeout=0.5):
            pass
    except KeyboardInterrupt:
        logger.info("Interrupted by user (Ctrl+C).")
    finally:
        if frontend is not None:
            frontend.stop()
        if watcher is not None:
            watcher.stop()
        engine.stop()
        link.close()
        logger.info("Shutdown complete.")


def _start_sequence_watcher(config: Config, bus: EventBus, context: ControlContext) -> Optional[SequenceFileWatcher]:
    path = config.sequence.resolved_path()
    if path is None:
        logger.info("No sequence file configured; using the built-in gait.")
        return None

    watcher = SequenceFileWatcher(path, bus, poll_interval_s=config.sequence.poll_interval_ms / 1000.0)
    try:
        context.base_sequence = watcher.load()
    except Exception as exc:
        logger.error("Cannot load gait sequence from %s (%s); using the built-in gait.", path, exc)
        context.base_sequence = GaitSequence()
    if config.sequence.watch:
        watcher.start()
        return watcher
    return None


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    try:
        config = load_config(args.config)
    except (OSError, ValueError, TypeError, yaml.YAMLError) as exc:
        print(f"hexbot: cannot load {args.config}: {exc}", file=sys.stderr)
        return 2

    configure_logging(config.logging)
    logger.info("Loaded configuration from %s", args.config)
    bootstrap(config, args.frontend, port=args.port, baud=args.baud)
    return 0


if __name__ == "__main__":
    sys.exit(main())

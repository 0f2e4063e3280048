"""
Run a FleetView scanning session from the command line.

Usage:
    python -m fleetview [--config PATH] [--adapter NAME] [--duration SECONDS]
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Optional

from .config import load_config
from .constants import DEFAULT_DB_PATH
from .context import FleetContext
from .controller import ScanController, ScanState
from .exceptions import ConfigurationError
from .label_store import SQLiteLabelStore
from .logging import configure_logging, get_logger
from .presenter import LogPresenter
from .scan_source import BleakScanSource

logger = get_logger('fleetview.main')


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='FleetView BLE asset scanner')
    parser.add_argument('--config', help='JSON config file (default: $FLEETVIEW_CONFIG)')
    parser.add_argument('--adapter', help='Bluetooth adapter, e.g. hci0')
    parser.add_argument('--duration', type=float, default=None,
                        help='Scan duration in seconds (default: until interrupted)')
    parser.add_argument('--db', default=None,
                        help=f'Label database path (default: {DEFAULT_DB_PATH})')
    parser.add_argument('--log-level', default='INFO', help='Logging level')
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    label_store = SQLiteLabelStore(args.db or config.db_path)

    with FleetContext(config, label_store=label_store, presenter=LogPresenter()) as context:
        logger.info(f"{config.app_title} ready ({len(config.profiles)} profiles)")
        controller = ScanController(context, BleakScanSource(adapter=args.adapter))

        if await controller.start() != ScanState.ACTIVE:
            return 1

        try:
            if args.duration is None:
                await asyncio.Event().wait()
            else:
                await asyncio.sleep(args.duration)
        finally:
            await controller.stop()

        logger.info(f"Session ended with {len(context.registry)} assets")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    try:
        return asyncio.run(run(args))
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return 2
    except KeyboardInterrupt:
        return 0


if __name__ == '__main__':
    sys.exit(main())

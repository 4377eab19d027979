#!/usr/bin/env python3
"""sdr2msghub CLI entrypoint (package module)."""

from __future__ import annotations

import argparse
import signal
import sys
from typing import List, Optional

from sdr2msghub.sampling.loop import (
    DEFAULT_CEILING_DBM,
    DEFAULT_DISCOVERY_INTERVAL_S,
    DEFAULT_PUBLISH_THRESHOLD,
)
from sdr2msghub.util.duration import parse_interval_seconds
from sdr2msghub.util.logging import configure_logging


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(
        description="Sample FM stations, score audio for speech, and forward good clips to Message Hub",
        epilog=(
            "Environment: RTLSDR_ADDR, HZN_ORG_ID, HZN_DEVICE_ID, MSGHUB_API_KEY, "
            "MSGHUB_BROKER_URL, MSGHUB_TOPIC"
        ),
    )
    p.add_argument("--model", default="model.pb", help="Frozen TensorFlow graph to score clips with (default model.pb)")
    p.add_argument(
        "--ceiling-dbm",
        dest="ceiling_dbm",
        type=float,
        default=DEFAULT_CEILING_DBM,
        help=f"Power a bucket must exceed to count as a station (default {DEFAULT_CEILING_DBM})",
    )
    p.add_argument(
        "--discovery-interval",
        dest="discovery_interval",
        type=parse_interval_seconds,
        default=DEFAULT_DISCOVERY_INTERVAL_S,
        help="Minimum time between station discoveries, e.g. '300', '5m' (default 5m)",
    )
    p.add_argument(
        "--publish-threshold",
        dest="publish_threshold",
        type=float,
        default=DEFAULT_PUBLISH_THRESHOLD,
        help=f"Publish clips whose score is strictly above this (default {DEFAULT_PUBLISH_THRESHOLD})",
    )
    p.add_argument(
        "--audio-timeout",
        dest="audio_timeout",
        type=float,
        default=None,
        help="Seconds to wait on the radio service per request (default: wait forever)",
    )
    p.add_argument("--max-passes", dest="max_passes", type=int, default=None, help="Stop after N sampling passes")
    p.add_argument("--log-level", dest="log_level", default=None, help="DEBUG, INFO, WARNING, ERROR (default INFO)")
    p.add_argument("--log-json", dest="log_json", default=None, help="Also append JSON-lines logs to this file")

    args = p.parse_args(argv)
    if args.max_passes is not None and args.max_passes < 1:
        p.error("--max-passes must be >= 1")
    if args.audio_timeout is not None and args.audio_timeout <= 0:
        p.error("--audio-timeout must be > 0")
    return args


def _interrupt_on_sigterm(signum, frame) -> None:
    raise KeyboardInterrupt


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(level=args.log_level, json_file=args.log_json)
    signal.signal(signal.SIGTERM, _interrupt_on_sigterm)

    # deferred: pulls in tensorflow and kafka
    from sdr2msghub.runner import run_service

    return run_service(args)


if __name__ == "__main__":
    sys.exit(main())

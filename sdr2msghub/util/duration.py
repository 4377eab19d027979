"""Duration parsing for interval-style CLI arguments."""

from __future__ import annotations

import argparse
from typing import Any

_MULTIPLIERS = {
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}


def parse_interval_seconds(spec: Any) -> float:
    """Parse strings like '300', '90s', '5m', '1h' into positive seconds.

    Usable directly as an argparse ``type=``.
    """

    if isinstance(spec, (int, float)):
        value = float(spec)
    else:
        text = str(spec).strip().lower()
        if not text:
            raise argparse.ArgumentTypeError("Empty interval")
        unit = text[-1]
        if unit.isalpha():
            value_part = text[:-1]
        else:
            unit = "s"
            value_part = text
        if unit not in _MULTIPLIERS:
            raise argparse.ArgumentTypeError(f"Unsupported interval suffix '{unit}'")
        try:
            value = float(value_part) * _MULTIPLIERS[unit]
        except ValueError as exc:
            raise argparse.ArgumentTypeError(f"Invalid interval '{spec}'") from exc
    if value <= 0.0:
        raise argparse.ArgumentTypeError(f"Interval must be positive, got '{spec}'")
    return value

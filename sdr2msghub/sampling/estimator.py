"""Per-station goodness belief and its update rule."""

from __future__ import annotations

from typing import Dict, List

from sdr2msghub.sampling.types import Station
from sdr2msghub.util.logging import get_logger

logger = get_logger(__name__)

INITIAL_GOODNESS = 0.5
VALUE_OFFSET = 0.3
GOODNESS_FLOOR = 0.05


class GoodnessEstimator:
    """Track a goodness score for every station ever discovered.

    The score is the probability of sampling the station on a pass. It is
    updated with ``old * (value + 0.3) + 0.05``, which grows when the observed
    value is above ~0.7 and shrinks otherwise. It is not clamped: a station
    that keeps scoring high can exceed 1 and is then sampled on every pass.
    Stations are never removed.
    """

    def __init__(self) -> None:
        self._scores: Dict[Station, float] = {}

    def __len__(self) -> int:
        return len(self._scores)

    def __contains__(self, station: object) -> bool:
        return station in self._scores

    def ensure_tracked(self, station: Station) -> bool:
        if station in self._scores:
            return False
        self._scores[station] = INITIAL_GOODNESS
        logger.info("found new station: %s", station, extra={"station_hz": station.freq_hz})
        return True

    def score(self, station: Station) -> float:
        return self._scores[station]

    def update(self, station: Station, value: float) -> float:
        new_score = self._scores[station] * (value + VALUE_OFFSET) + GOODNESS_FLOOR
        self._scores[station] = new_score
        return new_score

    def stations(self) -> List[Station]:
        return list(self._scores)

    def snapshot(self) -> Dict[Station, float]:
        return dict(self._scores)

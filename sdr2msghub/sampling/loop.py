"""Adaptive station sampling loop.

Two timescales:

- discovery: at most once per ``discovery_interval_s`` the radio service is
  asked which stations are receivable; new ones start at goodness 0.5.
- sampling pass: every iteration each tracked station is sampled with
  probability equal to its goodness. A sampled station is captured, scored,
  its goodness updated, and the clip published if the score beats the
  threshold.

Every call blocks. Fatal errors propagate to the caller; only publish failures
are absorbed here.
"""

from __future__ import annotations

import random
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from sdr2msghub.config import DEFAULT_RADIO_HOST
from sdr2msghub.errors import NoStationsError, PublishError
from sdr2msghub.publish.audio_msg import OutboundMessage
from sdr2msghub.sampling.estimator import GoodnessEstimator
from sdr2msghub.sampling.interfaces import AudioSource, Publisher, Scorer
from sdr2msghub.sampling.types import PassSummary, Station
from sdr2msghub.util.logging import get_logger
from sdr2msghub.util.time import utc_now

logger = get_logger(__name__)

DEFAULT_CEILING_DBM = -8.0
DEFAULT_DISCOVERY_INTERVAL_S = 5 * 60.0
DEFAULT_PUBLISH_THRESHOLD = 0.5


@dataclass
class LoopState:
    """Mutable state of one loop instance."""

    estimator: GoodnessEstimator = field(default_factory=GoodnessEstimator)
    last_discovery: Optional[float] = None
    passes: int = 0


class SamplingLoop:
    def __init__(
        self,
        source: AudioSource,
        scorer: Scorer,
        publisher: Publisher,
        *,
        device_id: str,
        state: Optional[LoopState] = None,
        host: str = DEFAULT_RADIO_HOST,
        ceiling_dbm: float = DEFAULT_CEILING_DBM,
        discovery_interval_s: float = DEFAULT_DISCOVERY_INTERVAL_S,
        publish_threshold: float = DEFAULT_PUBLISH_THRESHOLD,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = utc_now,
    ):
        self.source = source
        self.scorer = scorer
        self.publisher = publisher
        self.device_id = device_id
        self.state = state if state is not None else LoopState()
        self.host = host
        self.ceiling_dbm = float(ceiling_dbm)
        self.discovery_interval_s = float(discovery_interval_s)
        self.publish_threshold = float(publish_threshold)
        self.rng = rng or random.Random()
        self.clock = clock
        self.wall_clock = wall_clock

    @property
    def estimator(self) -> GoodnessEstimator:
        return self.state.estimator

    def discovery_due(self) -> bool:
        last = self.state.last_discovery
        if last is None:
            return True
        return self.clock() - last > self.discovery_interval_s

    def refresh_stations(self) -> bool:
        """Run discovery if due. Returns True when discovery ran.

        Stations that disappear from the scan stay tracked.
        """
        if not self.discovery_due():
            return False
        # stamped first so a failed discovery is not retried on the next pass
        self.state.last_discovery = self.clock()
        found = self.source.discover(self.host, self.ceiling_dbm)
        for freq in found:
            self.estimator.ensure_tracked(Station.from_hz(freq))
        if len(self.estimator) < 1:
            raise NoStationsError()
        logger.info(
            "found %d stations, tracking %d",
            len(found),
            len(self.estimator),
            extra={"stations": {s.freq_hz: g for s, g in self.estimator.snapshot().items()}},
        )
        return True

    def sampling_pass(self) -> PassSummary:
        summary = PassSummary()
        for station in self.estimator.stations():
            summary.tracked += 1
            if self.rng.random() >= self.estimator.score(station):
                continue
            summary.sampled += 1
            self._sample(station, summary)
        self.state.passes += 1
        return summary

    def _sample(self, station: Station, summary: PassSummary) -> None:
        audio = self.source.capture(self.host, station.freq_hz)
        captured_at = self.wall_clock()
        value = self.scorer.score(audio)
        goodness = self.estimator.update(station, value)
        logger.info(
            "%s observed value: %.4f updated goodness: %.4f",
            station,
            value,
            goodness,
            extra={"station_hz": station.freq_hz, "value": value, "goodness": goodness},
        )
        if value <= self.publish_threshold:
            return
        msg = OutboundMessage(
            audio=audio,
            timestamp=captured_at,
            freq_hz=float(station.freq_hz),
            expected_value=value,
            dev_id=self.device_id,
        )
        try:
            self.publisher.publish(msg)
        except PublishError as exc:
            summary.publish_failures += 1
            logger.warning(
                "publish failed for %s, continuing: %s",
                station,
                exc,
                extra={"station_hz": station.freq_hz, "error_type": "publish"},
            )
            return
        summary.published += 1

    def step(self) -> PassSummary:
        self.refresh_stations()
        return self.sampling_pass()

    def run(self, max_passes: Optional[int] = None) -> None:
        """Loop until a fatal error, or for ``max_passes`` passes if given."""
        done = 0
        while max_passes is None or done < max_passes:
            summary = self.step()
            done += 1
            logger.debug(
                "pass %d: sampled %d/%d, published %d, publish failures %d",
                self.state.passes,
                summary.sampled,
                summary.tracked,
                summary.published,
                summary.publish_failures,
            )

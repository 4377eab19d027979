"""HTTP client for the companion rtl-sdr radio service.

The service exposes two endpoints on port 5427:

- ``GET /power`` returns ``{"low": Hz, "high": Hz, "dbm": [...]}``, the output
  of a power scan split into equal-width buckets across ``low..high``.
- ``GET /audio/<freq>`` tunes to ``freq`` (integer Hz), demodulates, and returns
  a raw header-less clip of ``CLIP_SECONDS`` seconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional

import numpy as np
import requests

from sdr2msghub.errors import AudioSourceError
from sdr2msghub.util.logging import get_logger

logger = get_logger(__name__)

RADIO_SERVICE_PORT = 5427
CLIP_SECONDS = 32


@dataclass
class PowerDist:
    low_hz: float
    high_hz: float
    dbm: np.ndarray

    @classmethod
    def from_json(cls, payload: Any) -> "PowerDist":
        try:
            low = float(payload["low"])
            high = float(payload["high"])
            dbm = np.asarray(payload["dbm"], dtype=np.float32)
        except (KeyError, TypeError, ValueError) as exc:
            raise AudioSourceError(f"malformed power scan: {exc}") from exc
        return cls(low_hz=low, high_hz=high, dbm=dbm)

    @property
    def bucket_hz(self) -> float:
        if self.dbm.size == 0:
            return 0.0
        return (self.high_hz - self.low_hz) / float(self.dbm.size)

    def stations_above(self, ceiling_dbm: float) -> List[float]:
        """Frequencies of buckets whose power strictly exceeds the ceiling."""
        idx = np.flatnonzero(self.dbm > ceiling_dbm)
        return [self.low_hz + float(i) * self.bucket_hz for i in idx]


class RadioServiceSource:
    """AudioSource backed by the radio service's HTTP API."""

    def __init__(
        self,
        *,
        port: int = RADIO_SERVICE_PORT,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.port = int(port)
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, host: str, path: str) -> str:
        return f"http://{host}:{self.port}{path}"

    def _get(self, url: str) -> requests.Response:
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise AudioSourceError(f"GET {url} failed: {exc}") from exc
        if resp.status_code != 200:
            raise AudioSourceError(f"GET {url} returned HTTP {resp.status_code}")
        return resp

    def power(self, host: str) -> PowerDist:
        resp = self._get(self._url(host, "/power"))
        try:
            payload = resp.json()
        except ValueError as exc:
            raise AudioSourceError(f"power scan from {host} is not JSON: {exc}") from exc
        return PowerDist.from_json(payload)

    def discover(self, host: str, ceiling_dbm: float) -> List[float]:
        dist = self.power(host)
        stations = dist.stations_above(ceiling_dbm)
        logger.debug(
            "power scan %.3f-%.3f MHz, %d buckets, %d above %.1f dBm",
            dist.low_hz / 1e6,
            dist.high_hz / 1e6,
            dist.dbm.size,
            len(stations),
            ceiling_dbm,
        )
        return stations

    def capture(self, host: str, freq_hz: int) -> bytes:
        resp = self._get(self._url(host, f"/audio/{int(freq_hz)}"))
        return resp.content

    def close(self) -> None:
        self.session.close()

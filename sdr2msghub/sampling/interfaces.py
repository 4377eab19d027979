"""Narrow interfaces the sampling loop needs from its collaborators.

Any object with matching methods works; tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import List, Protocol, Tuple

from sdr2msghub.publish.audio_msg import OutboundMessage


class AudioSource(Protocol):
    """Discovers receivable stations and captures fixed-duration clips.

    Both calls block and may raise ``AudioSourceError``.
    """

    def discover(self, host: str, ceiling_dbm: float) -> List[float]:
        ...

    def capture(self, host: str, freq_hz: int) -> bytes:
        """Return a raw clip of exactly 32 seconds tuned to ``freq_hz``."""
        ...


class Scorer(Protocol):
    def score(self, clip: bytes) -> float:
        ...


class Publisher(Protocol):
    def publish(self, msg: OutboundMessage) -> Tuple[int, int]:
        ...

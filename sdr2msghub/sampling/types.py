"""Dataclasses shared by the estimator, the loop, and the collaborators."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Station:
    """An FM station keyed by its carrier frequency rounded to whole Hz."""

    freq_hz: int

    @classmethod
    def from_hz(cls, freq_hz: float) -> "Station":
        return cls(int(round(float(freq_hz))))

    @property
    def freq_mhz(self) -> float:
        return self.freq_hz / 1e6

    def __str__(self) -> str:
        return f"{self.freq_mhz:.3f}MHz"


@dataclass
class PassSummary:
    """Counters for one sampling pass."""

    tracked: int = 0
    sampled: int = 0
    published: int = 0
    publish_failures: int = 0

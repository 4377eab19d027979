from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from sdr2msghub.errors import AudioSourceError, PublishError


class ScriptedRandom:
    """Stand-in for random.Random returning predetermined draws."""

    def __init__(self, draws: Iterable[float]):
        self.draws = list(draws)

    def random(self) -> float:
        return self.draws.pop(0)


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource:
    def __init__(self, stations: Optional[List[float]] = None, clips: Optional[Dict[int, bytes]] = None):
        self.stations = list(stations or [])
        self.clips = dict(clips or {})
        self.discover_calls: List[Tuple[str, float]] = []
        self.capture_calls: List[Tuple[str, int]] = []
        self.fail_discover = False
        self.fail_capture = False

    def discover(self, host: str, ceiling_dbm: float) -> List[float]:
        self.discover_calls.append((host, ceiling_dbm))
        if self.fail_discover:
            raise AudioSourceError("radio service unreachable")
        return list(self.stations)

    def capture(self, host: str, freq_hz: int) -> bytes:
        self.capture_calls.append((host, freq_hz))
        if self.fail_capture:
            raise AudioSourceError("capture failed")
        return self.clips.get(freq_hz, b"\x00" * 16)


class FakeScorer:
    def __init__(self, values: Dict[bytes, float], default: float = 0.0):
        self.values = values
        self.default = default
        self.calls: List[bytes] = []

    def score(self, clip: bytes) -> float:
        self.calls.append(clip)
        return self.values.get(clip, self.default)


class FakePublisher:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []

    def publish(self, msg):
        self.sent.append(msg)
        if self.fail:
            raise PublishError("broker unavailable")
        return 0, len(self.sent) - 1


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()

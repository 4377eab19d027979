import pytest

from sdr2msghub.sampling.estimator import GoodnessEstimator
from sdr2msghub.sampling.types import Station


def test_first_sighting_tracks_at_half() -> None:
    est = GoodnessEstimator()
    station = Station(88_500_000)

    assert est.ensure_tracked(station) is True
    assert est.score(station) == 0.5
    assert est.ensure_tracked(station) is False
    assert len(est) == 1


def test_ensure_tracked_does_not_reset_learned_score() -> None:
    est = GoodnessEstimator()
    station = Station(88_500_000)
    est.ensure_tracked(station)
    est.update(station, 0.1)

    est.ensure_tracked(station)

    assert est.score(station) == pytest.approx(0.25)


@pytest.mark.parametrize("old, value", [(0.5, 0.9), (0.5, 0.0), (0.8, 0.7), (1.4, 1.0)])
def test_update_applies_affine_rule(old, value) -> None:
    est = GoodnessEstimator()
    station = Station(100_000_000)
    est.ensure_tracked(station)
    est._scores[station] = old

    new = est.update(station, value)

    assert new == old * (value + 0.3) + 0.05
    assert est.score(station) == new


def test_update_example_from_half() -> None:
    est = GoodnessEstimator()
    station = Station(100_000_000)
    est.ensure_tracked(station)

    assert est.update(station, 0.9) == pytest.approx(0.65)


def test_score_is_not_clamped() -> None:
    est = GoodnessEstimator()
    station = Station(100_000_000)
    est.ensure_tracked(station)

    for _ in range(5):
        est.update(station, 1.0)

    assert est.score(station) > 1.0


def test_low_values_decay_toward_floor_fixed_point() -> None:
    est = GoodnessEstimator()
    station = Station(100_000_000)
    est.ensure_tracked(station)

    for _ in range(200):
        est.update(station, 0.0)

    # fixed point of s = 0.3 * s + 0.05
    assert est.score(station) == pytest.approx(0.05 / 0.7)


def test_station_ids_round_to_whole_hz() -> None:
    assert Station.from_hz(97_100_000.4) == Station.from_hz(97_099_999.6)
    assert Station.from_hz(97_100_000.0) != Station.from_hz(97_100_001.0)
    assert str(Station(97_100_000)) == "97.100MHz"


def test_snapshot_is_a_copy() -> None:
    est = GoodnessEstimator()
    station = Station(100_000_000)
    est.ensure_tracked(station)

    snap = est.snapshot()
    snap[station] = 9.0

    assert est.score(station) == 0.5

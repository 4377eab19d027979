import argparse

import pytest

from sdr2msghub import runner as runner_mod
from sdr2msghub.cli import parse_args
from sdr2msghub.errors import NoStationsError, UnsafeGraphError
from sdr2msghub.runner import ServiceRunner
from sdr2msghub.util.duration import parse_interval_seconds
from sdr2msghub.util.exit_codes import ExitCode


def test_defaults() -> None:
    args = parse_args([])

    assert args.model == "model.pb"
    assert args.ceiling_dbm == -8.0
    assert args.discovery_interval == 300.0
    assert args.publish_threshold == 0.5
    assert args.audio_timeout is None
    assert args.max_passes is None


def test_discovery_interval_accepts_suffixes() -> None:
    args = parse_args(["--discovery-interval", "2m", "--max-passes", "4"])

    assert args.discovery_interval == 120.0
    assert args.max_passes == 4


@pytest.mark.parametrize("spec, seconds", [("300", 300.0), ("90s", 90.0), ("5m", 300.0), ("1h", 3600.0), (45, 45.0)])
def test_parse_interval_seconds(spec, seconds) -> None:
    assert parse_interval_seconds(spec) == seconds


@pytest.mark.parametrize("spec", ["", "0", "-5m", "5x", "abc"])
def test_parse_interval_seconds_rejects(spec) -> None:
    with pytest.raises(argparse.ArgumentTypeError):
        parse_interval_seconds(spec)


def test_bad_max_passes_exits_with_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_args(["--max-passes", "0"])

    assert excinfo.value.code == ExitCode.INVALID_ARGS


def test_missing_environment_maps_to_config_exit_code() -> None:
    runner = ServiceRunner(parse_args([]), environ={})

    assert runner.run() == ExitCode.CONFIG_ERROR


ENV = {
    "HZN_ORG_ID": "myorg",
    "HZN_DEVICE_ID": "edge-1",
    "MSGHUB_API_KEY": "abcdefghijklmnopPASSWORD",
    "MSGHUB_BROKER_URL": "kafka01:9093",
    "MSGHUB_TOPIC": "sdr-audio",
}


def test_rejected_model_maps_to_model_exit_code(monkeypatch) -> None:
    def reject(path):
        raise UnsafeGraphError(["ReadFile"])

    monkeypatch.setattr(runner_mod, "load_model", reject)

    assert ServiceRunner(parse_args([]), environ=ENV).run() == ExitCode.MODEL_REJECTED


def test_fatal_loop_error_closes_resources(monkeypatch) -> None:
    closed = []

    class Closable:
        def __init__(self, name):
            self.name = name

        def close(self):
            closed.append(self.name)

    class FailingLoop:
        def __init__(self, *args, **kwargs):
            pass

        def run(self, max_passes=None):
            raise NoStationsError()

    monkeypatch.setattr(runner_mod, "load_model", lambda path: Closable("model"))
    monkeypatch.setattr(runner_mod.MsgHubPublisher, "connect", classmethod(lambda cls, s: Closable("publisher")))
    monkeypatch.setattr(runner_mod, "SamplingLoop", FailingLoop)

    code = ServiceRunner(parse_args([]), environ=ENV).run()

    assert code == ExitCode.NO_STATIONS
    assert "model" in closed and "publisher" in closed

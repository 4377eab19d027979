import json
import logging

from sdr2msghub.util.logging import ConsoleFormatter, JSONFormatter, get_logger, mask_secret


def test_json_formatter_includes_structured_fields() -> None:
    record = logging.LogRecord("sdr2msghub.loop", logging.INFO, __file__, 1, "sampled %s", ("97.100MHz",), None)
    record.station_hz = 97_100_000
    record.value = 0.9

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "sampled 97.100MHz"
    assert payload["station_hz"] == 97_100_000
    assert payload["value"] == 0.9
    assert "partition" not in payload


def test_loggers_live_under_package_namespace() -> None:
    assert get_logger("sampling.loop").name == "sdr2msghub.sampling.loop"
    assert get_logger("sdr2msghub.cli").name == "sdr2msghub.cli"
    assert get_logger("__main__").name == "sdr2msghub.main"


def test_mask_secret_hides_all_but_tail() -> None:
    assert mask_secret("abcdefghijklmnopSECRET") == "*" * 18 + "CRET"
    assert mask_secret("abc") == "***"
    assert mask_secret("") == ""


def test_console_line_tags_station_frequency() -> None:
    record = logging.LogRecord("sdr2msghub.sampling.loop", logging.INFO, __file__, 1, "value %.2f", (0.9,), None)
    record.station_hz = 97_100_000

    line = ConsoleFormatter(use_color=False).format(record)

    assert "[sampling.loop] 97.100MHz value 0.90" in line


def test_json_timestamp_comes_from_record() -> None:
    record = logging.LogRecord("sdr2msghub.cli", logging.WARNING, __file__, 1, "late", (), None)
    record.created = 1_714_566_615.25

    payload = json.loads(JSONFormatter().format(record))

    assert payload["ts"] == "2024-05-01T12:30:15.250Z"

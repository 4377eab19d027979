import pytest

from sdr2msghub.config import Settings, split_api_key
from sdr2msghub.errors import ConfigError
from sdr2msghub.util.exit_codes import ExitCode

API_KEY = "abcdefghijklmnop" + "s3cr3t-password"


def _env(**overrides):
    env = {
        "HZN_ORG_ID": "myorg",
        "HZN_DEVICE_ID": "edge-1",
        "MSGHUB_API_KEY": API_KEY,
        "MSGHUB_BROKER_URL": "kafka01:9093, kafka02:9093,",
        "MSGHUB_TOPIC": "sdr-audio",
    }
    env.update(overrides)
    return {k: v for k, v in env.items() if v is not None}


def test_settings_from_env() -> None:
    settings = Settings.from_env(_env())

    assert settings.radio_host == "sdr"
    assert settings.dev_id == "myorg/edge-1"
    assert settings.brokers == ("kafka01:9093", "kafka02:9093")
    assert settings.topic == "sdr-audio"
    assert settings.sasl_credentials == ("abcdefghijklmnop", "s3cr3t-password")


def test_radio_host_override() -> None:
    settings = Settings.from_env(_env(RTLSDR_ADDR="192.168.1.20"))

    assert settings.radio_host == "192.168.1.20"


def test_missing_values_are_all_reported() -> None:
    with pytest.raises(ConfigError) as excinfo:
        Settings.from_env(_env(HZN_ORG_ID=None, MSGHUB_TOPIC="  "))

    message = str(excinfo.value)
    assert "HZN_ORG_ID" in message
    assert "MSGHUB_TOPIC" in message
    assert excinfo.value.exit_code == ExitCode.CONFIG_ERROR


def test_short_api_key_rejected() -> None:
    with pytest.raises(ConfigError):
        Settings.from_env(_env(MSGHUB_API_KEY="tooshort"))


def test_api_key_split_keeps_remainder() -> None:
    user, password = split_api_key("0123456789abcdefXYZ")

    assert user == "0123456789abcdef"
    assert password == "XYZ"


def test_broker_list_must_name_a_broker() -> None:
    with pytest.raises(ConfigError):
        Settings.from_env(_env(MSGHUB_BROKER_URL=" , "))


def test_device_id_must_encode_as_utf8() -> None:
    # os.environ carries undecodable bytes as lone surrogates
    with pytest.raises(ConfigError) as excinfo:
        Settings.from_env(_env(HZN_DEVICE_ID="edge-\udcff"))

    assert "HZN_DEVICE_ID" in str(excinfo.value)

"""
Environment configuration for the sdr2msghub edge service.

All environment variables the service consumes are read here. Other modules
receive a ``Settings`` instance rather than reading os.environ directly.

Environment:
    RTLSDR_ADDR         Host of the radio service (optional, default "sdr")
    HZN_ORG_ID          Organization id, first half of the device identifier
    HZN_DEVICE_ID       Device id, second half of the device identifier
    MSGHUB_API_KEY      Message Hub API key (16-char SASL user + password)
    MSGHUB_BROKER_URL   Comma-separated broker list (host:port,...)
    MSGHUB_TOPIC        Topic that scored clips are published to
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from sdr2msghub.errors import ConfigError

DEFAULT_RADIO_HOST = "sdr"
"""Hostname of the radio service when RTLSDR_ADDR is not set."""

API_KEY_USER_LEN = 16
"""Length of the SASL username prefix inside MSGHUB_API_KEY."""

REQUIRED_VARS = (
    "HZN_ORG_ID",
    "HZN_DEVICE_ID",
    "MSGHUB_API_KEY",
    "MSGHUB_BROKER_URL",
    "MSGHUB_TOPIC",
)


def split_api_key(api_key: str) -> Tuple[str, str]:
    """Split an API key into its (username, password) halves."""
    if len(api_key) <= API_KEY_USER_LEN:
        raise ConfigError(f"MSGHUB_API_KEY must be longer than {API_KEY_USER_LEN} characters")
    return api_key[:API_KEY_USER_LEN], api_key[API_KEY_USER_LEN:]


def parse_brokers(raw: str) -> List[str]:
    brokers = [b.strip() for b in raw.split(",") if b.strip()]
    if not brokers:
        raise ConfigError("MSGHUB_BROKER_URL does not name any broker")
    return brokers


@dataclass(frozen=True)
class Settings:
    radio_host: str
    org_id: str
    device_id: str
    api_key: str
    brokers: Tuple[str, ...]
    topic: str

    @property
    def dev_id(self) -> str:
        """Identifier stamped on every outbound message."""
        return f"{self.org_id}/{self.device_id}"

    @property
    def sasl_credentials(self) -> Tuple[str, str]:
        return split_api_key(self.api_key)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Resolve settings, reporting every missing required variable at once."""
        env = os.environ if environ is None else environ
        values = {name: (env.get(name) or "").strip() for name in REQUIRED_VARS}
        missing = [name for name, value in values.items() if not value]
        if missing:
            raise ConfigError("missing required environment variables: " + ", ".join(missing))

        # validate eagerly so a bad key fails at startup, not at connect time
        split_api_key(values["MSGHUB_API_KEY"])
        for name in ("HZN_ORG_ID", "HZN_DEVICE_ID"):
            try:
                values[name].encode("utf-8")
            except UnicodeEncodeError as exc:
                raise ConfigError(f"{name} is not valid UTF-8 text") from exc

        return cls(
            radio_host=(env.get("RTLSDR_ADDR") or "").strip() or DEFAULT_RADIO_HOST,
            org_id=values["HZN_ORG_ID"],
            device_id=values["HZN_DEVICE_ID"],
            api_key=values["MSGHUB_API_KEY"],
            brokers=tuple(parse_brokers(values["MSGHUB_BROKER_URL"])),
            topic=values["MSGHUB_TOPIC"],
        )

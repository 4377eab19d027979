"""Synchronous Message Hub (Kafka) producer for scored clips."""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from kafka import KafkaProducer
from kafka.errors import KafkaError

from sdr2msghub.config import Settings
from sdr2msghub.errors import BusConnectError, PublishError
from sdr2msghub.publish.audio_msg import OutboundMessage
from sdr2msghub.util.logging import get_logger, mask_secret

logger = get_logger(__name__)

SEND_RETRIES = 5


def producer_config(settings: Settings) -> Dict[str, Any]:
    """Kafka producer options: TLS, SASL/PLAIN, all-replica acks, 5 retries."""
    user, password = settings.sasl_credentials
    return {
        "bootstrap_servers": list(settings.brokers),
        "client_id": settings.api_key,
        "acks": "all",
        "retries": SEND_RETRIES,
        "security_protocol": "SASL_SSL",
        "sasl_mechanism": "PLAIN",
        "sasl_plain_username": user,
        "sasl_plain_password": password,
    }


class MsgHubPublisher:
    """Publish ``OutboundMessage`` values to one topic, one blocking send each.

    A failed send raises ``PublishError``; the caller decides whether to carry
    on. Retries are left to the producer's own ``retries`` setting.
    """

    def __init__(self, producer: Any, topic: str, *, send_timeout: Optional[float] = None):
        self.producer = producer
        self.topic = topic
        self.send_timeout = send_timeout

    @classmethod
    def connect(cls, settings: Settings, **producer_overrides: Any) -> "MsgHubPublisher":
        config = producer_config(settings)
        config.update(producer_overrides)
        logger.info(
            "connecting to msghub brokers=%s topic=%s key=%s",
            ",".join(settings.brokers),
            settings.topic,
            mask_secret(settings.api_key),
        )
        try:
            producer = KafkaProducer(**config)
        except KafkaError as exc:
            raise BusConnectError(f"cannot connect to msghub: {exc}") from exc
        logger.info("connected to msghub")
        return cls(producer, settings.topic)

    def publish(self, msg: OutboundMessage) -> Tuple[int, int]:
        try:
            payload = msg.encode()
        except (ValueError, TypeError) as exc:
            logger.warning("cannot encode message: %s", exc, extra={"station_hz": msg.freq_hz})
            raise PublishError(f"cannot encode message: {exc}") from exc
        try:
            future = self.producer.send(self.topic, value=payload)
            metadata = future.get(timeout=self.send_timeout)
        except KafkaError as exc:
            logger.warning(
                "FAILED to send message: %s",
                exc,
                extra={"station_hz": msg.freq_hz, "error_type": type(exc).__name__},
            )
            raise PublishError(str(exc)) from exc
        logger.info(
            "> message sent to partition %d at offset %d",
            metadata.partition,
            metadata.offset,
            extra={"station_hz": msg.freq_hz, "partition": metadata.partition, "offset": metadata.offset},
        )
        return metadata.partition, metadata.offset

    def close(self) -> None:
        try:
            self.producer.flush()
        finally:
            self.producer.close()

"""Outbound audio message and its protobuf wire encoding.

Consumers of the topic decode ``audiolib.AudioMsg``:

    message AudioMsg {
      bytes audio = 1;
      google.protobuf.Timestamp ts = 2;
      float freq = 3;
      float expected_value = 4;
      string dev_id = 5;
    }

The descriptor is built at import time in a private pool, so no generated
``_pb2`` module has to be kept in sync with the schema above.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory, timestamp_pb2

PROTO_PACKAGE = "audiolib"
PROTO_MESSAGE = "AudioMsg"


def _build_message_class():
    fdp = descriptor_pb2.FileDescriptorProto(
        name="audiolib/audio_msg.proto",
        package=PROTO_PACKAGE,
        syntax="proto3",
        dependency=[timestamp_pb2.DESCRIPTOR.name],
    )
    msg = fdp.message_type.add(name=PROTO_MESSAGE)
    fields = descriptor_pb2.FieldDescriptorProto
    optional = fields.LABEL_OPTIONAL
    msg.field.add(name="audio", number=1, type=fields.TYPE_BYTES, label=optional)
    msg.field.add(
        name="ts",
        number=2,
        type=fields.TYPE_MESSAGE,
        label=optional,
        type_name=".google.protobuf.Timestamp",
    )
    msg.field.add(name="freq", number=3, type=fields.TYPE_FLOAT, label=optional)
    msg.field.add(name="expected_value", number=4, type=fields.TYPE_FLOAT, label=optional)
    msg.field.add(name="dev_id", number=5, type=fields.TYPE_STRING, label=optional)

    pool = descriptor_pool.DescriptorPool()
    pool.AddSerializedFile(timestamp_pb2.DESCRIPTOR.serialized_pb)
    pool.AddSerializedFile(fdp.SerializeToString())
    descriptor = pool.FindMessageTypeByName(f"{PROTO_PACKAGE}.{PROTO_MESSAGE}")
    return message_factory.GetMessageClass(descriptor)


AudioMsg = _build_message_class()


@dataclass
class OutboundMessage:
    """A scored clip worth forwarding to the bus."""

    audio: bytes
    timestamp: datetime
    freq_hz: float
    expected_value: float
    dev_id: str

    def to_proto(self):
        ts = self.timestamp
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        seconds = int(ts.timestamp())
        msg = AudioMsg(
            audio=bytes(self.audio),
            freq=float(self.freq_hz),
            expected_value=float(self.expected_value),
            dev_id=self.dev_id,
        )
        msg.ts.seconds = seconds
        msg.ts.nanos = ts.microsecond * 1000
        return msg

    def encode(self) -> bytes:
        return self.to_proto().SerializeToString()


def decode_audio_msg(data: bytes) -> OutboundMessage:
    """Parse wire bytes back into an ``OutboundMessage``."""
    msg = AudioMsg.FromString(data)
    ts = datetime.fromtimestamp(msg.ts.seconds, tz=timezone.utc).replace(microsecond=msg.ts.nanos // 1000)
    return OutboundMessage(
        audio=msg.audio,
        timestamp=ts,
        freq_hz=msg.freq,
        expected_value=msg.expected_value,
        dev_id=msg.dev_id,
    )

"""Error categories raised by the sampling service.

Fatal errors carry the exit code a supervisor sees; the loop never terminates
the process itself. ``PublishError`` is the only recoverable category.
"""

from __future__ import annotations

from typing import Iterable, List

from sdr2msghub.util.exit_codes import ExitCode


class Sdr2MsgHubError(Exception):
    """Base class for every error raised by sdr2msghub."""


class FatalError(Sdr2MsgHubError):
    """A precondition failed; the sampling loop cannot continue."""

    exit_code: int = ExitCode.GENERAL_ERROR
    category: str = "fatal"


class ConfigError(FatalError):
    exit_code = ExitCode.CONFIG_ERROR
    category = "config"


class ModelLoadError(FatalError):
    """The model file could not be read, parsed, or bound to a session."""

    exit_code = ExitCode.MODEL_REJECTED
    category = "model_load"


class UnsafeGraphError(ModelLoadError):
    """The graph uses operation types outside the whitelist."""

    category = "model_unsafe"

    def __init__(self, op_types: Iterable[str]):
        self.op_types: List[str] = sorted(set(op_types))
        super().__init__("graph contains operation types not in whitelist: " + ", ".join(self.op_types))


class MissingPortError(ModelLoadError):
    """The graph lacks the named input or output operation."""

    category = "model_port"

    def __init__(self, port: str, role: str):
        self.port = port
        self.role = role
        super().__init__(f"{role} operation '{port}' not found in graph")


class NoStationsError(FatalError):
    exit_code = ExitCode.NO_STATIONS
    category = "no_stations"

    def __init__(self, message: str = "No FM stations. Move the antenna?"):
        super().__init__(message)


class AudioSourceError(FatalError):
    """Discovery or capture against the radio service failed."""

    exit_code = ExitCode.AUDIO_SOURCE_ERROR
    category = "audio_source"


class ScoringError(FatalError):
    exit_code = ExitCode.SCORING_ERROR
    category = "scoring"


class BusConnectError(FatalError):
    """The message bus producer could not be created at startup."""

    exit_code = ExitCode.BUS_ERROR
    category = "bus_connect"


class PublishError(Sdr2MsgHubError):
    """Sending a single message failed. Logged, never fatal."""

    category = "publish"

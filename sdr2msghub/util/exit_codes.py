"""Documented exit codes for the sdr2msghub process.

Exit codes follow UNIX conventions:
- 0: Success
- 1: General/unspecified error
- 2: Invalid command-line arguments or usage
- 3-8: Fatal preconditions of the sampling service

A supervisor (systemd, the edge agent, a shell loop) can use these to decide
whether restarting is worthwhile: a rejected model will be rejected again,
while a lost radio service might come back.

Usage:
    from sdr2msghub.util.exit_codes import ExitCode
    sys.exit(ExitCode.NO_STATIONS)
"""

from __future__ import annotations


class ExitCode:
    """Exit code constants for sdr2msghub processes.

    Attributes:
        SUCCESS: Normal termination, no errors.
        GENERAL_ERROR: Unspecified runtime error.
        INVALID_ARGS: Command-line argument validation failed.
        CONFIG_ERROR: Required environment configuration missing or invalid.
        MODEL_REJECTED: Model unreadable, unsafe, or missing its ports.
        NO_STATIONS: Discovery never found a receivable station.
        AUDIO_SOURCE_ERROR: Discovery or capture against the radio service failed.
        SCORING_ERROR: Running the model on a captured clip failed.
        BUS_ERROR: The message bus producer could not be created.
    """

    SUCCESS: int = 0
    GENERAL_ERROR: int = 1
    INVALID_ARGS: int = 2
    CONFIG_ERROR: int = 3
    MODEL_REJECTED: int = 4
    NO_STATIONS: int = 5
    AUDIO_SOURCE_ERROR: int = 6
    SCORING_ERROR: int = 7
    BUS_ERROR: int = 8

    @classmethod
    def message(cls, code: int) -> str:
        """Return a human-readable message for an exit code."""
        messages = {
            cls.SUCCESS: "Success",
            cls.GENERAL_ERROR: "General error",
            cls.INVALID_ARGS: "Invalid arguments",
            cls.CONFIG_ERROR: "Configuration error",
            cls.MODEL_REJECTED: "Model rejected",
            cls.NO_STATIONS: "No stations found",
            cls.AUDIO_SOURCE_ERROR: "Audio source error",
            cls.SCORING_ERROR: "Scoring error",
            cls.BUS_ERROR: "Message bus unavailable",
        }
        return messages.get(code, f"Unknown exit code {code}")

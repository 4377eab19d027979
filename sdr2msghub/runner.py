"""Service runner binding configuration, model, radio, and bus to the loop."""

from __future__ import annotations

import argparse
from typing import Mapping, Optional

from sdr2msghub.config import DEFAULT_RADIO_HOST, Settings
from sdr2msghub.errors import FatalError
from sdr2msghub.model.loader import load_model
from sdr2msghub.publish.msghub import MsgHubPublisher
from sdr2msghub.sampling.loop import SamplingLoop
from sdr2msghub.sources.radio_service import RadioServiceSource
from sdr2msghub.util.exit_codes import ExitCode
from sdr2msghub.util.logging import get_logger, log_exception

logger = get_logger(__name__)


class ServiceRunner:
    """Bind CLI args and environment to a running sampling loop."""

    def __init__(self, args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None):
        self.args = args
        self.environ = environ
        self.settings: Optional[Settings] = None
        self.model = None
        self.source: Optional[RadioServiceSource] = None
        self.publisher: Optional[MsgHubPublisher] = None
        self.loop: Optional[SamplingLoop] = None

    def _setup(self) -> SamplingLoop:
        settings = Settings.from_env(self.environ)
        self.settings = settings
        if settings.radio_host != DEFAULT_RADIO_HOST:
            logger.info("connecting to remote rtlsdr: %s", settings.radio_host)

        self.model = load_model(self.args.model)
        logger.info("using topic %s", settings.topic)
        self.publisher = MsgHubPublisher.connect(settings)
        self.source = RadioServiceSource(timeout=self.args.audio_timeout)

        return SamplingLoop(
            self.source,
            self.model,
            self.publisher,
            device_id=settings.dev_id,
            host=settings.radio_host,
            ceiling_dbm=self.args.ceiling_dbm,
            discovery_interval_s=self.args.discovery_interval,
            publish_threshold=self.args.publish_threshold,
        )

    def _teardown(self) -> None:
        for name in ("publisher", "source", "model"):
            resource = getattr(self, name)
            if resource is None:
                continue
            try:
                resource.close()
            except Exception as exc:
                logger.warning("error closing %s: %s", name, exc)

    def run(self) -> int:
        try:
            self.loop = self._setup()
            self.loop.run(max_passes=self.args.max_passes)
        except FatalError as exc:
            logger.error("%s: %s", exc.category, exc, extra={"error_type": exc.category})
            logger.error("exiting with code %d (%s)", exc.exit_code, ExitCode.message(exc.exit_code))
            return exc.exit_code
        except KeyboardInterrupt:
            logger.info("interrupted, shutting down")
        except Exception:
            log_exception(logger, "unexpected error in sampling loop", error_type="unexpected")
            return ExitCode.GENERAL_ERROR
        finally:
            self._teardown()
        return ExitCode.SUCCESS


def run_service(args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None) -> int:
    return ServiceRunner(args, environ).run()

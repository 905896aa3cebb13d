from __future__ import annotations

import signal
import sys
import threading

from loguru import logger

from gift_claimer.claims.client import ClaimClient
from gift_claimer.config import get_settings
from gift_claimer.exceptions import ConfigLoadError, ScheduleRuleInvalid
from gift_claimer.log_setup import setup_logging
from gift_claimer.notifications.notifier import create_notifier
from gift_claimer.scheduler.runner import start_scheduler


def run(stop_event: threading.Event) -> int:
    """Load config, schedule every claim and block until ``stop_event`` is set."""
    try:
        settings = get_settings()
    except ConfigLoadError as e:
        logger.error(f"Error reading config: {e}")
        return 1

    setup_logging(settings)

    client = ClaimClient(
        settings.claim_url, settings.bearer_token, timeout=settings.claim_timeout
    )
    notifier = create_notifier(settings)

    try:
        scheduler = start_scheduler(settings, client, notifier)
    except ScheduleRuleInvalid as e:
        logger.error(f"Error scheduling claim jobs: {e}")
        notifier.close()
        return 1

    logger.warning("Engines to maximum, we're ready for launch")

    stop_event.wait()

    # In-flight claims and notifications are abandoned
    scheduler.shutdown()
    notifier.close()
    logger.info("Shutting down...")
    return 0


def main():
    stop_event = threading.Event()

    def _handle_signal(signum, frame):
        logger.info(f"Received signal {signum}")
        stop_event.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    sys.exit(run(stop_event))


if __name__ == "__main__":
    main()

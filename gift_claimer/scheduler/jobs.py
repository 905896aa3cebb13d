from __future__ import annotations

from concurrent.futures import Future
from typing import Optional

from loguru import logger

from gift_claimer.claims.base import ClaimOutcome
from gift_claimer.claims.client import ClaimClient
from gift_claimer.notifications.notifier import Notifier


def run_claim(
    bundle_id: int, client: ClaimClient, notifier: Notifier
) -> Optional[Future]:
    """One firing: claim the bundle, then hand the outcome to the notifier.

    Returns the pending notification so callers can wait on it; the firing
    itself never waits for delivery.
    """
    logger.info(f"Running claim job for bundle ID {bundle_id}")

    try:
        outcome: ClaimOutcome = client.claim(bundle_id)
    except Exception as e:
        logger.error(f"Error claiming bundle {bundle_id}: {e}")
        return None

    logger.info(f"Claim for bundle {bundle_id}: {outcome.describe()}")

    try:
        return notifier.notify_async(bundle_id, outcome.is_failure)
    except RuntimeError as e:
        # pool already shut down
        logger.error(f"Error dispatching notification for bundle {bundle_id}: {e}")
        return None

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Protocol

from loguru import logger

from gift_claimer.catalog import BundleCatalog
from gift_claimer.config import Settings
from gift_claimer.notifications.email import EmailSender
from gift_claimer.notifications.formatter import format_claim_message
from gift_claimer.notifications.webhook import WebhookSender


class Sender(Protocol):
    def send(self, text: str) -> bool:
        ...


def create_sender(settings: Settings) -> Sender:
    """Build the single channel selected by ``notification_channel``."""
    if settings.notification_channel == "email":
        return EmailSender.from_settings(settings)
    return WebhookSender(settings.slack_webhook_url)


class Notifier:
    """Turns claim outcomes into one-line messages and delivers them.

    Delivery through ``notify_async`` runs on the notifier's own thread pool,
    so a slow channel never holds up the firing that produced the outcome.
    Delivery is best effort: failures are logged and nothing is retried.
    """

    def __init__(
        self,
        sender: Sender,
        catalog: Optional[BundleCatalog] = None,
        max_workers: int = 4,
    ):
        self.sender = sender
        self.catalog = catalog if catalog is not None else BundleCatalog()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="notify"
        )

    def notify(self, bundle_id: int, is_failure: bool) -> bool:
        """Send the message for ``bundle_id`` synchronously.

        Returns:
            True if the channel accepted the message. False if the bundle has
            no label for this outcome or the channel failed.
        """
        label = self.catalog.label_for(bundle_id, is_failure)
        if label is None:
            kind = "failure" if is_failure else "success"
            logger.warning(f"Bundle ID {bundle_id} does not correspond to a known {kind}")
            return False

        message = format_claim_message(label, is_failure)
        try:
            return self.sender.send(message)
        except Exception as e:
            logger.error(f"Notification for bundle {bundle_id} failed: {e}")
            return False

    def notify_async(self, bundle_id: int, is_failure: bool) -> Future:
        """Queue ``notify`` on the pool and return immediately."""
        return self._executor.submit(self.notify, bundle_id, is_failure)

    def close(self) -> None:
        """Stop accepting work; queued deliveries are abandoned."""
        self._executor.shutdown(wait=False, cancel_futures=True)


def create_notifier(settings: Settings, catalog: Optional[BundleCatalog] = None) -> Notifier:
    return Notifier(
        create_sender(settings),
        catalog=catalog,
        max_workers=settings.notify_max_workers,
    )

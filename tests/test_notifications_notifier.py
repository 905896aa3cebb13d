import threading

import pytest

from gift_claimer.catalog import DEFAULT_BUNDLES, BundleCatalog, BundleLabels
from gift_claimer.notifications.email import EmailSender
from gift_claimer.notifications.formatter import format_claim_message
from gift_claimer.notifications.notifier import Notifier, create_notifier, create_sender
from gift_claimer.notifications.webhook import WebhookSender

DELIVERY_TIMEOUT = 5  # seconds


class FakeSender:
    def __init__(self, result=True, release=None):
        self.result = result
        self.release = release
        self.messages = []
        self.delivered = threading.Event()

    def send(self, text):
        if self.release is not None:
            self.release.wait(DELIVERY_TIMEOUT)
        self.messages.append(text)
        self.delivered.set()
        return self.result


@pytest.fixture
def sender():
    return FakeSender()


@pytest.fixture
def notifier(sender):
    notifier = Notifier(sender)
    yield notifier
    notifier.close()


FAILURE_LABELS = [(bundle_id, labels.failure_label) for bundle_id, labels in DEFAULT_BUNDLES.items()]
SUCCESS_LABELS = [
    (bundle_id, labels.success_label)
    for bundle_id, labels in DEFAULT_BUNDLES.items()
    if labels.success_label is not None
]


class TestFormatter:
    def test_success_message(self):
        assert (
            format_claim_message("✅ 4 Hours Chest Successful", is_failure=False)
            == "STFC Automation Success: ✅ 4 Hours Chest Successful"
        )

    def test_failure_message(self):
        assert (
            format_claim_message("❌ 4 Hours Chest Failed", is_failure=True)
            == "STFC Automation Error: ❌ 4 Hours Chest Failed"
        )


class TestNotifier:
    @pytest.mark.parametrize("bundle_id,label", FAILURE_LABELS)
    def test_failure_message_contains_failure_label(self, notifier, sender, bundle_id, label):
        assert notifier.notify(bundle_id, is_failure=True) is True
        assert sender.messages == [f"STFC Automation Error: {label}"]

    @pytest.mark.parametrize("bundle_id,label", SUCCESS_LABELS)
    def test_success_message_contains_success_label(self, notifier, sender, bundle_id, label):
        assert notifier.notify(bundle_id, is_failure=False) is True
        assert sender.messages == [f"STFC Automation Success: {label}"]

    @pytest.mark.parametrize("is_failure", [True, False])
    def test_unknown_bundle_is_skipped(self, notifier, sender, log_messages, is_failure):
        assert notifier.notify(99999, is_failure=is_failure) is False
        assert sender.messages == []
        assert any("Bundle ID 99999 does not correspond" in m for m in log_messages)

    def test_unknown_bundle_is_logged_as_warning(self, notifier, log_records):
        notifier.notify(99999, is_failure=True)

        assert (
            "WARNING",
            "Bundle ID 99999 does not correspond to a known failure",
        ) in log_records

    def test_bundle_without_success_label_is_skipped(self, notifier, sender):
        assert notifier.notify(1786571320, is_failure=False) is False
        assert sender.messages == []

    def test_sender_failure_returns_false(self):
        notifier = Notifier(FakeSender(result=False))
        try:
            assert notifier.notify(844758222, is_failure=False) is False
        finally:
            notifier.close()

    def test_sender_exception_is_contained(self, log_messages):
        class ExplodingSender:
            def send(self, text):
                raise RuntimeError("boom")

        notifier = Notifier(ExplodingSender())
        try:
            assert notifier.notify(844758222, is_failure=True) is False
        finally:
            notifier.close()
        assert any("boom" in m for m in log_messages)

    def test_custom_catalog(self, sender):
        notifier = Notifier(sender, catalog=BundleCatalog({5: BundleLabels("five ok", "five bad")}))
        try:
            notifier.notify(5, is_failure=True)
            notifier.notify(844758222, is_failure=True)
        finally:
            notifier.close()
        assert sender.messages == ["STFC Automation Error: five bad"]


class TestNotifyAsync:
    def test_eventual_delivery(self, notifier, sender):
        future = notifier.notify_async(844758222, is_failure=False)

        assert future.result(timeout=DELIVERY_TIMEOUT) is True
        assert sender.delivered.wait(DELIVERY_TIMEOUT)
        assert sender.messages == ["STFC Automation Success: ✅ 4 Hours Chest Successful"]

    def test_does_not_wait_for_delivery(self):
        release = threading.Event()
        sender = FakeSender(release=release)
        notifier = Notifier(sender)
        try:
            future = notifier.notify_async(844758222, is_failure=True)

            # channel is still blocked, the caller already has control back
            assert not future.done()
            assert sender.messages == []

            release.set()
            assert future.result(timeout=DELIVERY_TIMEOUT) is True
        finally:
            release.set()
            notifier.close()

    def test_closed_notifier_rejects_work(self, sender):
        notifier = Notifier(sender)
        notifier.close()

        with pytest.raises(RuntimeError):
            notifier.notify_async(844758222, is_failure=True)


class TestCreateSender:
    def test_webhook_channel(self, make_settings):
        sender = create_sender(make_settings())

        assert isinstance(sender, WebhookSender)
        assert sender.webhook_url == "https://hooks.slack.test/services/T000/B000/XXX"

    def test_email_channel(self, make_settings):
        settings = make_settings(
            notification_channel="email",
            smtp_host="smtp.test",
            smtp_from="noreply@test",
            notify_to="captain@test",
        )

        assert isinstance(create_sender(settings), EmailSender)

    def test_create_notifier(self, make_settings):
        notifier = create_notifier(make_settings())
        try:
            assert isinstance(notifier.sender, WebhookSender)
            assert 844758222 in notifier.catalog
        finally:
            notifier.close()

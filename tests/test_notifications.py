import logging

from uniscape.modules.notifications import NotificationDispatcher

from .conftest import RecordingSender


class FailingSender:
    async def send(self, kind, recipient, payload):
        raise ConnectionError("smtp down")


async def test_dispatch_delivers_in_background():
    sender = RecordingSender()
    dispatcher = NotificationDispatcher(sender)

    dispatcher.dispatch("welcome", "asha@uni.test", {"name": "Asha"})
    assert dispatcher.pending == 1
    await dispatcher.drain()

    assert dispatcher.pending == 0
    assert sender.sent == [("welcome", "asha@uni.test", {"name": "Asha"})]


async def test_missing_recipient_is_skipped():
    sender = RecordingSender()
    dispatcher = NotificationDispatcher(sender)

    dispatcher.dispatch("booking_confirmed", None, {})
    await dispatcher.drain()

    assert sender.sent == []


async def test_disabled_dispatcher_sends_nothing():
    sender = RecordingSender()
    dispatcher = NotificationDispatcher(sender, enabled=False)

    dispatcher.dispatch("welcome", "asha@uni.test", {})
    await dispatcher.drain()

    assert sender.sent == []


async def test_sender_failure_is_logged_not_raised(caplog):
    dispatcher = NotificationDispatcher(FailingSender())

    with caplog.at_level(logging.ERROR, logger="uniscape.modules.notifications.dispatcher"):
        dispatcher.dispatch("refund_approved", "asha@uni.test", {})
        await dispatcher.drain()

    assert "Failed to send refund_approved notification" in caplog.text

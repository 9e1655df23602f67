from __future__ import annotations

import pytest

import devfinder.services.notifications as notifications_module
from devfinder.services.notifications import (
    LoggingNotificationSink,
    TelegramNotificationSink,
    format_fetch_error,
)


class DummyBot:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent_messages: list[dict] = []

    async def send_message(self, chat_id, text, parse_mode=None):
        if self.fail:
            raise RuntimeError("telegram down")
        self.sent_messages.append({"chat_id": chat_id, "text": text, "parse_mode": parse_mode})


def test_format_fetch_error():
    assert format_fetch_error("timeout") == "Error fetching developers: timeout"


@pytest.mark.asyncio
async def test_telegram_sink_sends_plain_text_to_chat():
    bot = DummyBot()
    sink = TelegramNotificationSink(bot, chat_id=321)

    await sink.notify_error("Error fetching developers: timeout")

    assert bot.sent_messages == [
        {"chat_id": 321, "text": "Error fetching developers: timeout", "parse_mode": None}
    ]


@pytest.mark.asyncio
async def test_telegram_sink_swallows_delivery_failures():
    sink = TelegramNotificationSink(DummyBot(fail=True), chat_id=1)

    await sink.notify_error("Error fetching developers: boom")


class RecordingLogger:
    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict]] = []

    def __getattr__(self, level):
        def _log(event, **kwargs):
            self.records.append((level, event, kwargs))

        return _log


@pytest.mark.asyncio
async def test_logging_sink_logs_at_error_level(monkeypatch):
    recorder = RecordingLogger()
    monkeypatch.setattr(notifications_module, "logger", recorder)

    await LoggingNotificationSink().notify_error("Error fetching developers: boom")

    assert recorder.records == [
        ("error", "user_notification", {"message": "Error fetching developers: boom"})
    ]

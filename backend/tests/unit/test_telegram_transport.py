"""Tests for the Telegram Bot API transport.

Covers update parsing, inline keyboard rendering and the outbound calls.
"""

import json

import httpx
import pytest

from jobsearch_bot.adapters.telegram import (
    TelegramTransport,
    parse_update,
    render_keyboard,
)
from jobsearch_bot.core.errors import UpstreamUnavailable
from jobsearch_bot.wizard.menu import build_menu
from jobsearch_bot.wizard.state import (
    EventKind,
    LinkButton,
    OptionItem,
    SelectionToken,
)

_API_URL = "https://telegram.test"
_TOKEN = "123:abc"


def _message_update(text: str, user_id: int | None = 7, chat_id: int = 70) -> dict:
    sender = {"id": user_id, "first_name": "Ivan"} if user_id is not None else {}
    return {
        "update_id": 1,
        "message": {
            "message_id": 11,
            "from": sender,
            "chat": {"id": chat_id},
            "text": text,
        },
    }


def _callback_update(data: str, with_message: bool = True) -> dict:
    callback = {"id": "cbq-1", "from": {"id": 7, "first_name": "Ivan"}, "data": data}
    if with_message:
        callback["message"] = {"message_id": 12, "chat": {"id": 70}}
    return {"update_id": 2, "callback_query": callback}


# =============================================================================
# parse_update
# =============================================================================


class TestParseUpdate:
    """Tests for turning updates into inbound events."""

    def test_plain_text(self):
        event = parse_update(_message_update("python"))
        assert event.kind is EventKind.TEXT
        assert event.payload == "python"
        assert event.user_id == "7"
        assert event.chat_id == 70
        assert event.first_name == "Ivan"

    @pytest.mark.parametrize(
        ("text", "command"),
        [
            ("/search", "search"),
            ("/START", "start"),
            ("/search@job_bot", "search"),
            ("/help please", "help"),
        ],
    )
    def test_commands(self, text, command):
        event = parse_update(_message_update(text))
        assert event.kind is EventKind.COMMAND
        assert event.payload == command

    def test_lone_slash_is_text(self):
        assert parse_update(_message_update("/")).kind is EventKind.TEXT

    def test_missing_sender(self):
        event = parse_update(_message_update("hi", user_id=None))
        assert event.user_id is None

    def test_callback_with_token(self):
        event = parse_update(_callback_update("1:region:113"))
        assert event.kind is EventKind.MENU_SELECTION
        assert event.event_id == "cbq-1"
        assert event.chat_id == 70
        assert event.token == SelectionToken(1, "region", "113")

    def test_callback_without_token(self):
        """Non-wizard buttons keep their raw data and carry no token."""
        event = parse_update(_callback_update("start_search"))
        assert event.payload == "start_search"
        assert event.token is None

    def test_callback_with_non_ascii_digit_index(self):
        """Unicode digits in the step index are not a wizard token."""
        event = parse_update(_callback_update("²:region:1"))
        assert event.kind is EventKind.MENU_SELECTION
        assert event.token is None

    def test_callback_without_message_uses_sender_chat(self):
        event = parse_update(_callback_update("1:region:113", with_message=False))
        assert event.chat_id == 7

    @pytest.mark.parametrize(
        "update",
        [
            {"update_id": 3, "edited_message": {"text": "x"}},
            {"update_id": 4, "message": {"message_id": 1, "sticker": {}}},
            {"update_id": 5, "callback_query": {"id": "q", "from": {"id": 1}}},
            {},
        ],
    )
    def test_unsupported_updates(self, update):
        assert parse_update(update) is None


# =============================================================================
# render_keyboard
# =============================================================================


class TestRenderKeyboard:
    def test_menu_rows(self):
        menu = build_menu(
            [OptionItem("1", "A"), OptionItem("2", "B"), OptionItem("3", "C")],
            step_index=1,
            field="region",
            columns=2,
        )
        keyboard = render_keyboard(menu)
        assert keyboard == {
            "inline_keyboard": [
                [
                    {"text": "A", "callback_data": "1:region:1"},
                    {"text": "B", "callback_data": "1:region:2"},
                ],
                [{"text": "C", "callback_data": "1:region:3"}],
            ]
        }

    def test_link_button(self):
        keyboard = render_keyboard(link=LinkButton("Open", "https://hh.ru/v/1"))
        assert keyboard == {
            "inline_keyboard": [[{"text": "Open", "url": "https://hh.ru/v/1"}]]
        }

    def test_nothing_to_render(self):
        assert render_keyboard() is None


# =============================================================================
# TelegramTransport
# =============================================================================


class _Recorder:
    """MockTransport handler recording requests and answering from a queue."""

    def __init__(self, *bodies: dict) -> None:
        self.requests: list[httpx.Request] = []
        self._bodies = list(bodies) or [{"ok": True, "result": {}}]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        body = self._bodies.pop(0) if len(self._bodies) > 1 else self._bodies[0]
        return httpx.Response(200, json=body)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def recorder() -> _Recorder:
    return _Recorder()


@pytest.fixture
async def telegram(recorder):
    async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as client:
        yield TelegramTransport(client, token=_TOKEN, api_url=_API_URL + "/")


class TestTelegramTransport:
    """Tests for outbound Bot API calls."""

    async def test_send_plain_text(self, telegram, recorder):
        await telegram.send(70, "hello")

        assert str(recorder.requests[0].url) == f"{_API_URL}/bot{_TOKEN}/sendMessage"
        assert recorder.payloads[0] == {"chat_id": 70, "text": "hello"}

    async def test_send_with_menu_and_parse_mode(self, telegram, recorder):
        menu = build_menu([OptionItem("R1", "Dev")], step_index=0, field="r")
        await telegram.send(70, "<b>pick</b>", menu=menu, parse_mode="HTML")

        payload = recorder.payloads[0]
        assert payload["parse_mode"] == "HTML"
        assert payload["reply_markup"]["inline_keyboard"][0][0] == {
            "text": "Dev",
            "callback_data": "0:r:R1",
        }

    async def test_rejected_message_raises(self):
        recorder = _Recorder({"ok": False, "description": "chat not found"})
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(recorder)
        ) as client:
            telegram = TelegramTransport(client, token=_TOKEN, api_url=_API_URL)
            with pytest.raises(UpstreamUnavailable, match="chat not found"):
                await telegram.send(70, "hello")

    async def test_acknowledge(self, telegram, recorder):
        await telegram.acknowledge("cbq-1", "Выбраны все регионы")

        assert recorder.requests[0].url.path.endswith("/answerCallbackQuery")
        assert recorder.payloads[0] == {
            "callback_query_id": "cbq-1",
            "text": "Выбраны все регионы",
        }

    async def test_acknowledge_without_text(self, telegram, recorder):
        await telegram.acknowledge("cbq-1")
        assert recorder.payloads[0] == {"callback_query_id": "cbq-1"}

    async def test_acknowledge_failure_is_swallowed(self):
        """An expired callback query must not break the step."""
        recorder = _Recorder({"ok": False, "description": "query is too old"})
        async with httpx.AsyncClient(
            transport=httpx.MockTransport(recorder)
        ) as client:
            telegram = TelegramTransport(client, token=_TOKEN, api_url=_API_URL)
            await telegram.acknowledge("cbq-1")
        assert len(recorder.requests) == 1

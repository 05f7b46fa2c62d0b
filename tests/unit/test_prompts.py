"""Tests for authorization code intake"""

import asyncio
import io
import socket
from unittest.mock import patch
from urllib.parse import urlencode

import aiohttp
import pytest
from rich.console import Console

from notecal.auth import ConsoleCodePrompt, LoopbackCodeListener
from notecal.errors import AuthorizationFailedError


def consent_url(redirect_uri: str) -> str:
    return "https://accounts.google.com/o/oauth2/v2/auth?" + urlencode(
        {"client_id": "c", "redirect_uri": redirect_uri, "response_type": "code"}
    )


def free_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def quiet_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False)


class TestConsoleCodePrompt:
    async def test_returns_trimmed_code(self) -> None:
        prompt = ConsoleCodePrompt(quiet_console(), open_browser=False)

        with patch("notecal.auth.prompts.Prompt.ask", return_value="  4/code \n"):
            code = await prompt.request_authorization_code(consent_url("http://localhost"))

        assert code == "4/code"

    @pytest.mark.parametrize("error", [EOFError, KeyboardInterrupt])
    async def test_cancel_returns_none(self, error) -> None:
        prompt = ConsoleCodePrompt(quiet_console(), open_browser=False)

        with patch("notecal.auth.prompts.Prompt.ask", side_effect=error):
            code = await prompt.request_authorization_code(consent_url("http://localhost"))

        assert code is None

    async def test_opens_browser_with_consent_url(self) -> None:
        prompt = ConsoleCodePrompt(quiet_console())
        url = consent_url("http://localhost")

        with (
            patch("notecal.auth.prompts.webbrowser.open", return_value=True) as opened,
            patch("notecal.auth.prompts.Prompt.ask", return_value="x"),
        ):
            await prompt.request_authorization_code(url)

        opened.assert_called_once_with(url, new=2)


class TestLoopbackCodeListener:
    @pytest.mark.parametrize(
        "redirect_uri",
        ["http://localhost", "https://localhost:8765", "urn:ietf:wg:oauth:2.0:oob", ""],
    )
    def test_redirect_without_port_is_rejected(self, redirect_uri: str) -> None:
        with pytest.raises(AuthorizationFailedError):
            LoopbackCodeListener._redirect_address(consent_url(redirect_uri))

    def test_redirect_address(self) -> None:
        assert LoopbackCodeListener._redirect_address(
            consent_url("http://127.0.0.1:8765")
        ) == ("127.0.0.1", 8765)

    async def test_receives_code_from_redirect(self) -> None:
        port = free_port()
        listener = LoopbackCodeListener(open_browser=False, timeout=10)
        waiting = asyncio.create_task(
            listener.request_authorization_code(consent_url(f"http://127.0.0.1:{port}"))
        )

        status = None
        async with aiohttp.ClientSession() as session:
            for _ in range(50):
                try:
                    async with session.get(
                        f"http://127.0.0.1:{port}/?code=4/loopback&scope=x"
                    ) as resp:
                        status = resp.status
                        break
                except aiohttp.ClientConnectionError:
                    await asyncio.sleep(0.05)

        assert status == 200
        assert await waiting == "4/loopback"

    async def test_each_authorization_waits_for_a_new_code(self) -> None:
        listener = LoopbackCodeListener(open_browser=False, timeout=10)

        first = await self._complete_consent(listener, "4/first")
        second = await self._complete_consent(listener, "4/second")

        assert (first, second) == ("4/first", "4/second")

    @staticmethod
    async def _complete_consent(
        listener: LoopbackCodeListener, code: str
    ) -> str | None:
        port = free_port()
        waiting = asyncio.create_task(
            listener.request_authorization_code(consent_url(f"http://127.0.0.1:{port}"))
        )
        # 前回のコードが残っていれば即座に返ってしまう
        await asyncio.sleep(0.1)
        assert not waiting.done()

        async with aiohttp.ClientSession() as session:
            for _ in range(50):
                try:
                    async with session.get(f"http://127.0.0.1:{port}/?code={code}"):
                        break
                except aiohttp.ClientConnectionError:
                    await asyncio.sleep(0.05)

        return await waiting

    async def test_timeout_returns_none(self) -> None:
        listener = LoopbackCodeListener(open_browser=False, timeout=0.1)

        code = await listener.request_authorization_code(
            consent_url(f"http://127.0.0.1:{free_port()}")
        )

        assert code is None

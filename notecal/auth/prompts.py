"""
Authorization code intake

Implementations of the out-of-band step of the installed-application flow:
show the consent URL to the user and hand back the code Google issues.
Returning ``None`` means the user cancelled.
"""

import asyncio
import webbrowser
from http.server import BaseHTTPRequestHandler, HTTPServer
from threading import Event, Thread
from typing import Any, Protocol
from urllib.parse import parse_qs, urlparse

from rich.console import Console
from rich.prompt import Prompt

from notecal.errors import AuthorizationFailedError
from notecal.utils.logger import LoggerMixin


class AuthorizationCodeProvider(Protocol):
    async def request_authorization_code(self, url: str) -> str | None: ...


class ConsoleCodePrompt(LoggerMixin):
    """Open the consent page and read the pasted code from the terminal"""

    def __init__(
        self, console: Console | None = None, *, open_browser: bool = True
    ) -> None:
        self.console = console or Console(stderr=True)
        self.open_browser = open_browser

    async def request_authorization_code(self, url: str) -> str | None:
        if self.open_browser:
            opened = webbrowser.open(url, new=2)
            self.logger.debug("Browser launch attempted", opened=opened)

        self.console.print("[bold]Google OAuth code[/bold]")
        self.console.print("Open this URL, grant access, then paste the code below:")
        self.console.print(url, soft_wrap=True, highlight=False)

        try:
            # Prompt はブロッキングなのでワーカースレッドで待つ
            code = await asyncio.to_thread(
                Prompt.ask, "Paste authorization code here", console=self.console
            )
        except (EOFError, KeyboardInterrupt):
            self.logger.info("Authorization prompt cancelled")
            return None

        return code.strip()


class _CallbackHandler(BaseHTTPRequestHandler):
    """Capture ``code`` from the OAuth redirect"""

    listener: "LoopbackCodeListener"

    def do_GET(self) -> None:
        params = parse_qs(urlparse(self.path).query)
        code = params.get("code", [None])[0]
        error = params.get("error", [None])[0]

        if not code and not error:
            self._send_html(404, "<html><body><h1>Not Found</h1></body></html>")
            return

        if error:
            self.listener.logger.warning("OAuth consent denied", error=error)
            self._send_html(
                400,
                "<html><body><h1>Authorization Error</h1>"
                "<p>Access was not granted. You can close this tab.</p></body></html>",
            )
        else:
            self._send_html(
                200,
                "<html><body><h1>Authentication Code Received</h1>"
                "<p>notecal has the code. You can close this tab.</p></body></html>",
            )

        self.listener._deliver(code)

    def _send_html(self, status_code: int, html: str) -> None:
        self.send_response(status_code)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.end_headers()
        self.wfile.write(html.encode("utf-8"))

    def log_message(self, format: str, *args: Any) -> None:
        """Override to use our logger instead of stderr"""
        self.listener.logger.debug(f"Callback server: {format % args}")


class LoopbackCodeListener(LoggerMixin):
    """Receive the code on a local redirect URI such as ``http://localhost:8765``

    The redirect URI is read back from the consent URL, so it must carry an
    explicit port.
    """

    def __init__(
        self, *, open_browser: bool = True, timeout: float | None = None
    ) -> None:
        self.open_browser = open_browser
        self.timeout = timeout
        self._received = Event()
        self._code: str | None = None

    async def request_authorization_code(self, url: str) -> str | None:
        host, port = self._redirect_address(url)
        # 認可のたびに新しい待受状態から始める
        self._received = Event()
        self._code = None

        handler = type("CallbackHandler", (_CallbackHandler,), {"listener": self})
        server = HTTPServer((host, port), handler)
        thread = Thread(target=server.serve_forever, daemon=True)
        thread.start()
        self.logger.info("Waiting for OAuth redirect", host=host, port=port)

        try:
            if self.open_browser:
                webbrowser.open(url, new=2)
            received = await asyncio.to_thread(self._received.wait, self.timeout)
        finally:
            server.shutdown()
            server.server_close()
            thread.join(timeout=5.0)

        if not received:
            self.logger.warning("Timed out waiting for OAuth redirect")
            return None
        return self._code

    def _deliver(self, code: str | None) -> None:
        self._code = code
        self._received.set()

    @staticmethod
    def _redirect_address(url: str) -> tuple[str, int]:
        redirect = parse_qs(urlparse(url).query).get("redirect_uri", [""])[0]
        parsed = urlparse(redirect)
        if parsed.scheme != "http" or not parsed.hostname or parsed.port is None:
            raise AuthorizationFailedError(
                "Loopback mode needs a redirect URI like http://localhost:8765"
            )
        return parsed.hostname, parsed.port

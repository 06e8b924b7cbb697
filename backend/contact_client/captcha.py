"""Bot-verification widget lifecycle (Cloudflare Turnstile).

The challenge script is loaded once and shared by every widget; each
widget gets a token through a callback and must be reset after use, after
which a fresh token is required.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from loguru import logger

TURNSTILE_SCRIPT_URL = "https://challenges.cloudflare.com/turnstile/v0/api.js"


class ChallengeApi(Protocol):
    """What the loaded challenge script exposes."""

    def render(self, container: str, options: dict[str, Any]) -> str: ...

    def reset(self, widget_id: str) -> None: ...


class ChallengeScript:
    """Loads the challenge script lazily, at most once."""

    def __init__(
        self,
        loader: Callable[[str], Awaitable[ChallengeApi]],
        src: str = TURNSTILE_SCRIPT_URL,
    ) -> None:
        self._loader = loader
        self.src = src
        self._api: ChallengeApi | None = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._api is not None

    async def api(self) -> ChallengeApi:
        if self._api is not None:
            return self._api
        async with self._lock:
            if self._api is None:
                logger.debug(f"Loading challenge script {self.src}")
                self._api = await self._loader(self.src)
        return self._api


class CaptchaWidget:
    """One rendered widget and the token it last produced."""

    def __init__(
        self,
        sitekey: str,
        script: ChallengeScript,
        container: str = "contact-captcha",
        theme: str = "dark",
    ) -> None:
        self.sitekey = sitekey
        self.script = script
        self.container = container
        self.theme = theme
        self.token: str | None = None
        self.widget_id: str | None = None
        self._api: ChallengeApi | None = None

    def _on_token(self, token: str) -> None:
        self.token = token

    async def mount(self) -> None:
        """Load the script if needed and render the widget.

        A widget that fails to render leaves the form without a token;
        the failure is logged, not raised.
        """
        if self.widget_id is not None:
            return
        try:
            self._api = await self.script.api()
            self.widget_id = self._api.render(
                self.container,
                {"sitekey": self.sitekey, "callback": self._on_token, "theme": self.theme},
            )
        except Exception as e:
            logger.warning(f"Captcha widget failed to render: {e!r}")

    def reset(self) -> None:
        """Discard the current token and ask the widget for a new challenge."""
        self.token = None
        if self._api is None or self.widget_id is None:
            return
        try:
            self._api.reset(self.widget_id)
        except Exception as e:
            logger.warning(f"Captcha widget reset failed: {e!r}")

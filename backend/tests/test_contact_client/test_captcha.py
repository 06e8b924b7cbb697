"""Tests for the captcha widget lifecycle."""

import asyncio

import pytest

from contact_client.captcha import TURNSTILE_SCRIPT_URL, CaptchaWidget, ChallengeScript


class FakeChallengeApi:
    """Stands in for the loaded Turnstile script."""

    def __init__(self) -> None:
        self.rendered: list[tuple[str, dict]] = []
        self.resets: list[str] = []
        self.fail_render = False

    def render(self, container: str, options: dict) -> str:
        if self.fail_render:
            raise RuntimeError("render failed")
        self.rendered.append((container, options))
        return f"widget-{len(self.rendered)}"

    def reset(self, widget_id: str) -> None:
        self.resets.append(widget_id)

    def solve(self, token: str, index: int = 0) -> None:
        self.rendered[index][1]["callback"](token)


@pytest.fixture
def api() -> FakeChallengeApi:
    return FakeChallengeApi()


@pytest.fixture
def loads() -> list:
    return []


@pytest.fixture
def script(api: FakeChallengeApi, loads: list) -> ChallengeScript:
    async def loader(src: str) -> FakeChallengeApi:
        loads.append(src)
        await asyncio.sleep(0)
        return api

    return ChallengeScript(loader)


class TestChallengeScript:
    @pytest.mark.asyncio
    async def test_loaded_once(self, script: ChallengeScript, loads: list) -> None:
        assert not script.loaded

        await asyncio.gather(script.api(), script.api(), script.api())
        await script.api()

        assert loads == [TURNSTILE_SCRIPT_URL]
        assert script.loaded


class TestCaptchaWidget:
    @pytest.mark.asyncio
    async def test_mount_renders_with_sitekey(
        self, script: ChallengeScript, api: FakeChallengeApi
    ) -> None:
        widget = CaptchaWidget("site-key", script)

        await widget.mount()

        assert widget.widget_id == "widget-1"
        container, options = api.rendered[0]
        assert container == "contact-captcha"
        assert options["sitekey"] == "site-key"
        assert options["theme"] == "dark"

    @pytest.mark.asyncio
    async def test_mount_is_idempotent(
        self, script: ChallengeScript, api: FakeChallengeApi
    ) -> None:
        widget = CaptchaWidget("site-key", script)
        await widget.mount()
        await widget.mount()

        assert len(api.rendered) == 1

    @pytest.mark.asyncio
    async def test_two_widgets_share_script(
        self, script: ChallengeScript, api: FakeChallengeApi, loads: list
    ) -> None:
        await asyncio.gather(
            CaptchaWidget("k", script).mount(), CaptchaWidget("k", script).mount()
        )

        assert len(loads) == 1
        assert len(api.rendered) == 2

    @pytest.mark.asyncio
    async def test_callback_sets_token(
        self, script: ChallengeScript, api: FakeChallengeApi
    ) -> None:
        widget = CaptchaWidget("site-key", script)
        await widget.mount()

        api.solve("token-abc")

        assert widget.token == "token-abc"

    @pytest.mark.asyncio
    async def test_reset_clears_token(
        self, script: ChallengeScript, api: FakeChallengeApi
    ) -> None:
        widget = CaptchaWidget("site-key", script)
        await widget.mount()
        api.solve("token-abc")

        widget.reset()

        assert widget.token is None
        assert api.resets == ["widget-1"]

    def test_reset_before_mount(self, script: ChallengeScript) -> None:
        widget = CaptchaWidget("site-key", script)
        widget.token = "stale"

        widget.reset()

        assert widget.token is None

    @pytest.mark.asyncio
    async def test_render_failure_is_not_raised(
        self, script: ChallengeScript, api: FakeChallengeApi
    ) -> None:
        api.fail_render = True
        widget = CaptchaWidget("site-key", script)

        await widget.mount()

        assert widget.widget_id is None
        assert widget.token is None

    @pytest.mark.asyncio
    async def test_script_load_failure_is_not_raised(self) -> None:
        async def loader(src: str):
            raise OSError("blocked by extension")

        widget = CaptchaWidget("site-key", ChallengeScript(loader))
        await widget.mount()

        assert widget.widget_id is None

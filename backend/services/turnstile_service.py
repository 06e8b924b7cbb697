"""
Cloudflare Turnstile token verification.

Verification is fail-closed: a missing token, a negative answer, a non-200
reply, a timeout or any other error while talking to Cloudflare all count
as "not verified".

Documentation: https://developers.cloudflare.com/turnstile/
"""

import httpx
from loguru import logger

from models.config import Settings


class TurnstileVerifier:
    """
    Redeems Turnstile tokens against the siteverify API.

    Usage:
        verifier = TurnstileVerifier(settings)
        if verifier.enabled and not await verifier.verify(token, remote_ip):
            ...
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.secret = settings.TURNSTILE_SECRET
        self.verify_url = settings.TURNSTILE_VERIFY_URL
        self.timeout = settings.TURNSTILE_TIMEOUT_SECONDS
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self.secret)

    async def verify(self, token: str | None, remote_ip: str | None = None) -> bool:
        """
        Verify a Turnstile token.

        Args:
            token: The cf-turnstile-response value from the form
            remote_ip: Caller address, forwarded to Cloudflare when known

        Returns:
            True only if Cloudflare confirmed the token.
        """
        if not token:
            logger.warning("Turnstile: no token provided")
            return False

        if not self.secret:
            logger.error("Turnstile: TURNSTILE_SECRET not configured")
            return False

        payload = {"secret": self.secret, "response": token}
        if remote_ip and remote_ip != "unknown":
            payload["remoteip"] = remote_ip

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.verify_url, data=payload)
                response.raise_for_status()
                result = response.json()
        except httpx.TimeoutException:
            logger.error("Turnstile: verification timed out")
            return False
        except httpx.HTTPStatusError as e:
            logger.error(f"Turnstile: siteverify returned {e.response.status_code}")
            return False
        except Exception as e:
            logger.error(f"Turnstile: verification error {e!r}")
            return False

        if isinstance(result, dict) and result.get("success") is True:
            logger.info("Turnstile: token verified")
            return True

        error_codes = result.get("error-codes", []) if isinstance(result, dict) else []
        logger.warning(f"Turnstile: verification failed {error_codes}")
        return False

"""Google identity adapter.

Implements IdentityProviderPort by resolving an OAuth access token through
Google's OpenID Connect userinfo endpoint.
"""

import logging
import os

import httpx
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from domain.model.errors import ProviderError
from domain.model.identity import OAuthAssertion
from domain.model.user import GOOGLE_PROVIDER

logger = logging.getLogger(__name__)

GOOGLE_USERINFO_URL = os.getenv(
    "GOOGLE_USERINFO_URL", "https://openidconnect.googleapis.com/v1/userinfo"
)
API_TIMEOUT_SECONDS = 5.0


class GoogleIdentityAdapter:
    """Resolves Google access tokens to an OAuthAssertion."""

    provider_name = GOOGLE_PROVIDER

    def __init__(self, userinfo_url: str = GOOGLE_USERINFO_URL):
        self.userinfo_url = userinfo_url

    async def fetch_identity(self, access_token: str) -> OAuthAssertion:
        try:
            async with httpx.AsyncClient(timeout=API_TIMEOUT_SECONDS) as client:
                response = await _fetch_with_retry(client, self.userinfo_url, access_token)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Google userinfo HTTP error",
                extra={"status_code": e.response.status_code},
            )
            raise ProviderError("Google rejected the access token") from e
        except httpx.RequestError as e:
            logger.error(
                "Google userinfo request error",
                extra={"error_type": type(e).__name__},
            )
            raise ProviderError("Google identity service unavailable") from e
        except ValueError as e:
            logger.error("Google userinfo returned malformed JSON")
            raise ProviderError("Malformed response from Google") from e

        return parse_userinfo(payload)


def parse_userinfo(payload: dict) -> OAuthAssertion:
    """Map a userinfo payload to an OAuthAssertion.

    Raises:
        ProviderError: no email, or Google has not verified it
    """
    email = (payload.get("email") or "").strip()
    if not email:
        raise ProviderError("Google did not return an email address")
    if payload.get("email_verified") is False:
        raise ProviderError("Google account email is not verified")

    return OAuthAssertion(
        email=email,
        provider_name=GOOGLE_PROVIDER,
        display_name=payload.get("name") or None,
        avatar_url=payload.get("picture") or None,
    )


@retry(
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=4),
    reraise=True,
)
async def _fetch_with_retry(client: httpx.AsyncClient, url: str, access_token: str) -> httpx.Response:
    """Fetch userinfo with automatic retry on transient failures."""
    return await client.get(url, headers={"Authorization": f"Bearer {access_token}"})

"""Identity provider port: outbound interface for OAuth identity lookups."""

from typing import Protocol

from domain.model.identity import OAuthAssertion


class IdentityProviderPort(Protocol):
    """Resolves an OAuth access token to the identity it was issued for.

    Implementations raise ProviderError when the provider cannot be reached
    or returns an unusable response.
    """

    provider_name: str

    async def fetch_identity(self, access_token: str) -> OAuthAssertion: ...

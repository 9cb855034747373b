"""In-memory implementation of IdentityProviderPort for testing."""

from domain.model.errors import ProviderError
from domain.model.identity import OAuthAssertion
from domain.model.user import GOOGLE_PROVIDER


class FakeIdentityProvider:
    def __init__(self, provider_name: str = GOOGLE_PROVIDER):
        self.provider_name = provider_name
        self.identities: dict[str, OAuthAssertion] = {}

    def register(self, access_token: str, email: str,
                 display_name: str | None = None, avatar_url: str | None = None) -> None:
        self.identities[access_token] = OAuthAssertion(
            email=email,
            provider_name=self.provider_name,
            display_name=display_name,
            avatar_url=avatar_url,
        )

    async def fetch_identity(self, access_token: str) -> OAuthAssertion:
        identity = self.identities.get(access_token)
        if identity is None:
            raise ProviderError("Identity provider rejected the access token")
        return identity

"""Identity asserted by an external OAuth provider."""

from dataclasses import dataclass


@dataclass(frozen=True)
class OAuthAssertion:
    """Identity asserted by an OAuth provider after a successful flow.

    Account linkage keys on ``email`` only; provider subject ids are not used.
    """
    email: str
    provider_name: str
    display_name: str | None = None
    avatar_url: str | None = None

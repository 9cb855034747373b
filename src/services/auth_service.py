"""Auth service: registration, credentials sign-in and OAuth account reconciliation.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.

OAuth sign-in reconciles the provider identity with the stored account by
email alone:

    LOOKUP ─┬─ absent ──┬─ restricted ──────────────► REJECT(NotAllowed)
            │           └─ open ──► CREATE ─────────► AUTHENTICATED
            └─ present ─┬─ inactive ────────────────► REJECT(AccountDisabled)
                        └─ active ──► LINK ─────────► AUTHENTICATED
"""

import logging
from datetime import datetime, timezone
from typing import Any

from domain.model.errors import (
    AccountDisabledError,
    DomainError,
    InvalidCredentialsError,
    NotAllowedError,
    ProviderError,
    ValidationError,
)
from domain.model.identity import OAuthAssertion
from domain.model.settings import AppSettings
from domain.model.user import (
    CREDENTIALS_PROVIDER,
    GOOGLE_PROVIDER,
    CreateUserData,
    User,
    UserRole,
    UserSession,
)
from port.user_repository import UserRepository
from services.passwords import burn_verify, verify_password
from services.user_service import create_user, normalize_email
from utils.ids import generate_user_id

logger = logging.getLogger(__name__)

# Lowest-privilege role that is not a guest
DEFAULT_OAUTH_ROLE = UserRole.USER


def register(repo: UserRepository, data: CreateUserData, settings: AppSettings) -> UserSession:
    """Self-service sign-up with email and password.

    Raises:
        NotAllowedError: registration is switched off in global settings
        DuplicateEmailError: email already registered
        ValidationError: missing or weak password
    """
    if not settings.allow_new_user_registration:
        raise NotAllowedError("New user registration is disabled")
    if not data.password:
        raise ValidationError("Password is required")

    return create_user(repo, CreateUserData(
        email=data.email,
        first_name=data.first_name,
        last_name=data.last_name,
        password=data.password,
        display_name=data.display_name,
        providers=[CREDENTIALS_PROVIDER],
        role=UserRole.USER,
    ))


def authenticate(repo: UserRepository, email: str, password: str) -> UserSession:
    """Authenticate a user by email and password.

    Unknown emails and wrong passwords raise the same error, and both paths
    run one bcrypt check. Disabled accounts are reported as such.

    Raises:
        InvalidCredentialsError: no such user, no password on file, or wrong password
        AccountDisabledError: account is deactivated
    """
    user = repo.get_by_email(normalize_email(email))
    if not user:
        burn_verify(password)
        raise InvalidCredentialsError()

    if not user.is_active:
        raise AccountDisabledError()

    if not user.password_hash:
        burn_verify(password)
        raise InvalidCredentialsError()

    if not verify_password(password, user.password_hash):
        raise InvalidCredentialsError()

    return _record_sign_in(repo, user, {}).to_session()


def sign_in_with_credentials(repo: UserRepository, email: str, password: str) -> UserSession:
    """Credentials sign-in with store failures surfaced as ProviderError."""
    session = _guard_provider_errors(lambda: authenticate(repo, email, password), email)
    logger.info("User signed in", extra={"userId": session.id, "provider": CREDENTIALS_PROVIDER})
    return session


def ensure_provider_enabled(provider_name: str, settings: AppSettings) -> None:
    """Raises NotAllowedError when settings turn the provider off."""
    if provider_name == GOOGLE_PROVIDER and not settings.allow_google_auth:
        raise NotAllowedError("Google sign-in is disabled")


def sign_in_with_oauth(
    repo: UserRepository, assertion: OAuthAssertion, settings: AppSettings,
) -> UserSession:
    """Sign in with an identity asserted by an OAuth provider.

    Creates the account on first sign-in unless settings restrict OAuth to
    existing users; otherwise links the provider to the account with the
    same email. Linking only fills profile fields that are still empty.

    Raises:
        NotAllowedError: provider disabled, or unknown email while restricted
        AccountDisabledError: account is deactivated
        ProviderError: malformed assertion or store failure
    """
    email = normalize_email(assertion.email or '')
    if not email:
        raise ProviderError("Identity provider did not supply an email address")
    ensure_provider_enabled(assertion.provider_name, settings)

    def reconcile() -> UserSession:
        user = repo.get_by_email(email)
        if user is None:
            if settings.restrict_google_to_existing_users:
                logger.warning("OAuth sign-in rejected for unknown email", extra={
                    "provider": assertion.provider_name,
                })
                raise NotAllowedError("Sign-in is restricted to existing users")
            user = _create_oauth_user(repo, email, assertion)
            return _record_sign_in(repo, user, {}).to_session()

        if not user.is_active:
            raise AccountDisabledError()

        return _record_sign_in(repo, user, _link_changes(user, assertion)).to_session()

    session = _guard_provider_errors(reconcile, email)
    logger.info("User signed in", extra={"userId": session.id, "provider": assertion.provider_name})
    return session


# ── helpers ──────────────────────────────────────────────────


def _guard_provider_errors(action, email: str):
    try:
        return action()
    except DomainError:
        raise
    except Exception as e:
        logger.exception("Sign-in failed unexpectedly", extra={"email": email})
        raise ProviderError("Sign-in is temporarily unavailable") from e


def _split_name(display_name: str) -> tuple[str, str]:
    first, _, last = display_name.strip().partition(' ')
    return first, last.strip()


def _create_oauth_user(repo: UserRepository, email: str, assertion: OAuthAssertion) -> User:
    display_name = (assertion.display_name or '').strip()
    first_name, last_name = _split_name(display_name)
    now = datetime.now(timezone.utc)

    user = repo.create(User(
        id=generate_user_id(),
        email=email,
        first_name=first_name,
        last_name=last_name,
        display_name=display_name,
        created_at=now,
        updated_at=now,
        role=DEFAULT_OAUTH_ROLE,
        providers=[assertion.provider_name],
        is_active=True,
        # The provider has already verified ownership of the address
        email_verified=True,
        photo_url=assertion.avatar_url or '',
    ))
    logger.info("OAuth user created", extra={"userId": user.id, "provider": assertion.provider_name})
    return user


def _link_changes(user: User, assertion: OAuthAssertion) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    if not user.has_provider(assertion.provider_name):
        changes['providers'] = [*user.providers, assertion.provider_name]
        logger.info("Linking provider to existing account", extra={
            "userId": user.id, "provider": assertion.provider_name,
        })
    if not user.photo_url and assertion.avatar_url:
        changes['photo_url'] = assertion.avatar_url
    if not user.display_name and assertion.display_name:
        changes['display_name'] = assertion.display_name
    return changes


def _record_sign_in(repo: UserRepository, user: User, changes: dict[str, Any]) -> User:
    updated = repo.update(user.id, {**changes, 'last_sign_in_at': datetime.now(timezone.utc)})
    if updated is None:
        raise ProviderError("User disappeared during sign-in")
    return updated

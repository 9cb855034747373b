"""Authentication routes (signup, login, Google sign-in, current user)."""

import logging

from fastapi import APIRouter, Depends, status

from api.dependencies import get_google_identity, get_settings_service, get_user_repo
from api.models import (
    AuthResponse,
    LoginRequest,
    OAuthSignInRequest,
    SessionUserResponse,
    SignupRequest,
    UserResponse,
)
from api.security import create_access_token, get_current_user_required
from domain.model.user import GOOGLE_PROVIDER, CreateUserData, User, UserSession
from port.identity_provider import IdentityProviderPort
from port.user_repository import UserRepository
from services import auth_service
from services.settings_service import SettingsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _auth_response(session: UserSession) -> AuthResponse:
    return AuthResponse(
        token=create_access_token(session),
        user=SessionUserResponse.from_session(session),
    )


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    request: SignupRequest,
    repo: UserRepository = Depends(get_user_repo),
    settings_service: SettingsService = Depends(get_settings_service),
):
    """Register a new account with the default "user" role.

    Raises:
        403 when registration is disabled, 409 if the email is taken,
        400 if the password is too weak
    """
    session = auth_service.register(
        repo,
        CreateUserData(
            email=request.email,
            first_name=request.first_name,
            last_name=request.last_name,
            password=request.password,
            display_name=request.display_name,
        ),
        settings_service.load(),
    )
    logger.info("User registered", extra={"userId": session.id})
    return _auth_response(session)


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest, repo: UserRepository = Depends(get_user_repo)):
    """Sign in with email and password.

    Unknown email and wrong password both return the same 401.
    """
    session = auth_service.sign_in_with_credentials(repo, request.email, request.password)
    return _auth_response(session)


@router.post("/oauth/google", response_model=AuthResponse)
async def google_sign_in(
    request: OAuthSignInRequest,
    repo: UserRepository = Depends(get_user_repo),
    identity: IdentityProviderPort = Depends(get_google_identity),
    settings_service: SettingsService = Depends(get_settings_service),
):
    """Sign in with a Google access token, creating or linking the account by email."""
    settings = settings_service.load()
    # Reject before spending a round trip to Google
    auth_service.ensure_provider_enabled(GOOGLE_PROVIDER, settings)
    assertion = await identity.fetch_identity(request.access_token)
    session = auth_service.sign_in_with_oauth(repo, assertion, settings)
    return _auth_response(session)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user_required)):
    """Get current authenticated user info."""
    return UserResponse.from_domain(current_user)

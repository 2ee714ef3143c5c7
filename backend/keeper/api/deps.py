from fastapi import HTTPException, Request, status

from keeper.core.config import Settings
from keeper.core.errors import InvalidToken
from keeper.db.repository import SecretRepository
from keeper.services.auth import AuthService, TokenAuthority
from keeper.services.vault import VaultService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_authority(request: Request) -> TokenAuthority:
    return request.app.state.token_authority


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_vault_service(request: Request) -> VaultService:
    return request.app.state.vault_service


def get_secret_repository(request: Request) -> SecretRepository:
    return request.app.state.secret_repository


def get_current_owner(request: Request) -> str:
    """Resolve the owner id from the session cookie or reject the request."""
    settings = get_app_settings(request)
    token = request.cookies.get(settings.COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        return get_token_authority(request).validate(token)
    except InvalidToken:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token")

import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from keeper.api.deps import get_auth_service, get_app_settings
from keeper.core.config import Settings
from keeper.core.errors import InvalidCredentials, LoginExists, StorageError, UserNotFound
from keeper.schemas.auth import Token, UserCreate, UserLogin
from keeper.services.auth import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


def _set_token_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


@router.post("/register", response_model=Token, status_code=201)
def register(
    user_data: UserCreate,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
):
    try:
        token = auth.register(user_data.login, user_data.password)
    except LoginExists:
        raise HTTPException(status_code=409, detail="Login already exists")
    except StorageError:
        logger.exception("error to add user to db")
        raise HTTPException(status_code=503, detail="Storage unavailable")
    _set_token_cookie(response, token, settings)
    return Token(access_token=token)


@router.post("/auth", response_model=Token)
def login(
    credentials: UserLogin,
    response: Response,
    auth: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_app_settings),
):
    try:
        token = auth.login(credentials.login, credentials.password)
    except (UserNotFound, InvalidCredentials):
        # same answer for both so logins cannot be enumerated
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    except StorageError:
        logger.exception("error to check user exist")
        raise HTTPException(status_code=503, detail="Storage unavailable")
    _set_token_cookie(response, token, settings)
    return Token(access_token=token)

from datetime import timedelta
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from keeper import __version__
from keeper.api.v1.router import api_router
from keeper.core.config import Settings, get_settings
from keeper.core.logging import configure_logging
from keeper.crypto.envelope import EnvelopeCipher
from keeper.db.base import make_engine, make_session_factory
from keeper.db.init_db import init_db
from keeper.db.repository import SecretRepository, UserRepository
from keeper.services.auth import AuthService, TokenAuthority
from keeper.services.vault import VaultService


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, json_output=settings.LOG_JSON)

    app = FastAPI(
        title="Secret Keeper",
        description="Stores small typed secrets encrypted at rest, isolated per owner.",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # keys are read once here and never again for the life of the process
    engine = make_engine(settings.DATABASE_URL)
    session_factory = make_session_factory(engine)
    token_authority = TokenAuthority(
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        ttl=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    secret_repository = SecretRepository(session_factory)

    app.state.settings = settings
    app.state.engine = engine
    app.state.token_authority = token_authority
    app.state.secret_repository = secret_repository
    app.state.auth_service = AuthService(UserRepository(session_factory), token_authority)
    app.state.vault_service = VaultService(secret_repository, EnvelopeCipher(settings.data_key))

    @app.on_event("startup")
    def startup():
        init_db(engine)

    @app.on_event("shutdown")
    def shutdown():
        engine.dispose()

    app.include_router(api_router, prefix="/api/v1")

    @app.get("/")
    def root():
        return {"message": "Secret Keeper", "docs": "/docs"}

    @app.get("/health")
    def health_check():
        return {"message": "healthy"}

    return app

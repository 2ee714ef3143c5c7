import logging

from fastapi import APIRouter, Depends, HTTPException

from keeper.api.deps import get_secret_repository
from keeper.core.errors import StorageError
from keeper.db.repository import SecretRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/ping")
def ping(repository: SecretRepository = Depends(get_secret_repository)):
    try:
        repository.ping()
    except StorageError:
        logger.exception("database ping failed")
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"status": "ok"}

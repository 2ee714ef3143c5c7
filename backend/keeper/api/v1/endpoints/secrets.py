import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status

from keeper.api.deps import get_current_owner, get_vault_service
from keeper.core.errors import CryptoError, KeeperError, NotFound, StorageError, ValidationError
from keeper.schemas import secrets as registry
from keeper.schemas.vault import SecretResponse, SecretWrite
from keeper.services.vault import SecretRecord, VaultService

logger = logging.getLogger(__name__)

router = APIRouter()


def _http_error(exc: KeeperError) -> HTTPException:
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Data not found")
    if isinstance(exc, StorageError):
        logger.error("storage failure: %s", exc)
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Storage unavailable")
    if isinstance(exc, CryptoError):
        logger.error("stored secret failed to decrypt: %s", exc)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to process secret")


def _response(record: SecretRecord) -> SecretResponse:
    return SecretResponse(id=record.id, type=record.type, data=record.data.model_dump(), meta=record.meta)


@router.post("/{secret_type}", response_model=SecretResponse, status_code=201)
def add_secret(
    secret_type: str,
    body: SecretWrite,
    owner_id: str = Depends(get_current_owner),
    vault: VaultService = Depends(get_vault_service),
):
    try:
        payload = registry.validate_payload(secret_type, body.data)
        secret_id = vault.add(owner_id, secret_type, payload, body.meta)
    except KeeperError as exc:
        raise _http_error(exc)
    return SecretResponse(id=secret_id, type=secret_type, data=payload.model_dump(), meta=body.meta)


@router.get("/{secret_type}", response_model=list[SecretResponse])
def list_secrets(
    secret_type: str,
    owner_id: str = Depends(get_current_owner),
    vault: VaultService = Depends(get_vault_service),
):
    try:
        records = vault.get_all(owner_id, secret_type)
    except KeeperError as exc:
        raise _http_error(exc)
    return [_response(record) for record in records]


@router.get("/{secret_type}/{secret_id}", response_model=SecretResponse)
def get_secret(
    secret_type: str,
    secret_id: uuid.UUID,
    owner_id: str = Depends(get_current_owner),
    vault: VaultService = Depends(get_vault_service),
):
    try:
        record = vault.get_by_id(owner_id, str(secret_id), secret_type)
    except KeeperError as exc:
        raise _http_error(exc)
    return _response(record)


@router.put("/{secret_type}/{secret_id}", response_model=SecretResponse)
def update_secret(
    secret_type: str,
    secret_id: uuid.UUID,
    body: SecretWrite,
    owner_id: str = Depends(get_current_owner),
    vault: VaultService = Depends(get_vault_service),
):
    try:
        payload = registry.validate_payload(secret_type, body.data)
        vault.update(owner_id, str(secret_id), secret_type, payload, body.meta)
    except KeeperError as exc:
        raise _http_error(exc)
    return SecretResponse(id=str(secret_id), type=secret_type, data=payload.model_dump(), meta=body.meta)


@router.delete("/{secret_type}/{secret_id}", status_code=204)
def delete_secret(
    secret_type: str,
    secret_id: uuid.UUID,
    owner_id: str = Depends(get_current_owner),
    vault: VaultService = Depends(get_vault_service),
):
    try:
        vault.delete_by_id(owner_id, str(secret_id), secret_type)
    except KeeperError as exc:
        raise _http_error(exc)

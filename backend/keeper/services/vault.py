"""
Vault service: typed secrets in, ciphertext to storage, typed secrets out.

Every operation is scoped by the owner id resolved from the session token and
by the secret type tag; a record of another owner or another type behaves
exactly like a missing one.
"""
import logging
from dataclasses import dataclass

from keeper.core.errors import CryptoError, InvalidPayload, KeeperError, MalformedPayload
from keeper.crypto.envelope import EnvelopeCipher
from keeper.db.repository import SecretRepository, StoredSecret
from keeper.schemas import secrets as registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SecretRecord:
    id: str
    type: str
    data: registry.AnySecret
    meta: str


class VaultService:
    def __init__(self, repository: SecretRepository, cipher: EnvelopeCipher):
        self._repository = repository
        self._cipher = cipher

    def add(self, owner_id: str, secret_type: str, payload: registry.SecretPayload, meta: str) -> str:
        """Encrypt payload and store it for owner_id.

        Returns:
            The id assigned by storage.
        """
        sealed = self._seal(secret_type, payload)
        try:
            secret_id = self._repository.add_data(owner_id, secret_type, sealed, meta)
        except KeeperError:
            logger.error("error to add data to db", extra={"owner_id": owner_id, "secret_type": secret_type})
            raise
        logger.info("Secret added", extra={"owner_id": owner_id, "secret_type": secret_type, "secret_id": secret_id})
        return secret_id

    def get_all(self, owner_id: str, secret_type: str) -> list[SecretRecord]:
        """All live secrets of one type for owner_id.

        One record that fails to decrypt or parse fails the whole call.
        """
        registry.get_model(secret_type)
        stored = self._repository.get_all_by_owner(owner_id, secret_type)
        return [self._open(owner_id, row) for row in stored]

    def get_by_id(self, owner_id: str, secret_id: str, secret_type: str) -> SecretRecord:
        registry.get_model(secret_type)
        row = self._repository.get_by_owner_and_id(owner_id, secret_id, secret_type)
        return self._open(owner_id, row)

    def update(
        self,
        owner_id: str,
        secret_id: str,
        secret_type: str,
        payload: registry.SecretPayload,
        meta: str,
    ) -> None:
        sealed = self._seal(secret_type, payload)
        self._repository.update_data(owner_id, secret_id, secret_type, sealed, meta)
        logger.info("Secret updated", extra={"owner_id": owner_id, "secret_type": secret_type, "secret_id": secret_id})

    def delete_by_id(self, owner_id: str, secret_id: str, secret_type: str) -> None:
        registry.get_model(secret_type)
        self._repository.delete_by_id(owner_id, secret_id, secret_type)
        logger.info("Secret deleted", extra={"owner_id": owner_id, "secret_type": secret_type, "secret_id": secret_id})

    def _seal(self, secret_type: str, payload: registry.SecretPayload) -> str:
        model = registry.get_model(secret_type)
        if not isinstance(payload, model):
            raise InvalidPayload(f"payload is not a {secret_type} secret")
        if not payload.is_valid():
            raise InvalidPayload(f"{secret_type} payload has empty required fields")
        return self._cipher.encrypt(registry.serialize(payload))

    def _open(self, owner_id: str, row: StoredSecret) -> SecretRecord:
        log_extra = {"owner_id": owner_id, "secret_type": row.secret_type, "secret_id": row.id}
        try:
            plaintext = self._cipher.decrypt(row.ciphertext)
            data = registry.parse(plaintext, row.secret_type)
        except MalformedPayload as exc:
            # authentic ciphertext that does not parse means corrupted storage
            logger.error("stored secret does not parse", extra=log_extra)
            raise CryptoError(f"stored {row.secret_type} secret is corrupted") from exc
        except KeeperError:
            logger.error("error to open stored secret", extra=log_extra)
            raise
        return SecretRecord(id=row.id, type=row.secret_type, data=data, meta=row.meta)

"""Error taxonomy shared by the vault core.

Services raise these; the HTTP layer maps them onto status codes.
"""


class KeeperError(Exception):
    pass


class ValidationError(KeeperError):
    """Payload or type tag rejected before any storage or crypto work."""


class UnknownType(ValidationError):
    def __init__(self, secret_type: str):
        super().__init__(f"unknown secret type: {secret_type!r}")
        self.secret_type = secret_type


class MalformedPayload(ValidationError):
    pass


class InvalidPayload(ValidationError):
    pass


class NotFound(KeeperError):
    pass


class UserNotFound(NotFound):
    pass


class LoginExists(KeeperError):
    pass


class InvalidCredentials(KeeperError):
    pass


class InvalidToken(KeeperError):
    pass


class CryptoError(KeeperError):
    pass


class StorageError(KeeperError):
    pass

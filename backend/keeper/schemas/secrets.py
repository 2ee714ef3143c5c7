"""
Secret type registry.

The four payload shapes a record can hold, keyed by their type tag. This is
the only place that knows what a credential, card, text or file looks like:
request bodies are validated here and decrypted blobs are parsed back here.
"""
import base64
import binascii
from abc import abstractmethod
from typing import ClassVar, Mapping, Union

from pydantic import BaseModel, ValidationError, field_serializer, field_validator

from keeper.core.errors import InvalidPayload, MalformedPayload, UnknownType


class SecretPayload(BaseModel):
    """Abstract base of the registered payload shapes."""

    secret_type: ClassVar[str]

    @abstractmethod
    def is_valid(self) -> bool:
        """Validity predicate checked before a payload is ever stored."""


class CredentialSecret(SecretPayload):
    secret_type: ClassVar[str] = "logpass"

    login: str
    password: str

    def is_valid(self) -> bool:
        return bool(self.login and self.password)


class CardSecret(SecretPayload):
    secret_type: ClassVar[str] = "card"

    number: str
    expired_at: str
    cvv: str

    def is_valid(self) -> bool:
        return bool(self.number and self.expired_at and self.cvv)


class TextSecret(SecretPayload):
    secret_type: ClassVar[str] = "text"

    text: str

    def is_valid(self) -> bool:
        return bool(self.text)


class FileSecret(SecretPayload):
    secret_type: ClassVar[str] = "file"

    name: str
    content: bytes  # base64 in JSON

    @field_validator("content", mode="before")
    @classmethod
    def decode_content(cls, v):
        if isinstance(v, str):
            try:
                return base64.b64decode(v, validate=True)
            except binascii.Error as exc:
                raise ValueError("content must be base64 encoded") from exc
        return v

    @field_serializer("content")
    def encode_content(self, v: bytes) -> str:
        return base64.b64encode(v).decode("ascii")

    def is_valid(self) -> bool:
        return bool(self.name and self.content)


AnySecret = Union[CredentialSecret, CardSecret, TextSecret, FileSecret]

SECRET_TYPES: dict[str, type[SecretPayload]] = {
    model.secret_type: model for model in (CredentialSecret, CardSecret, TextSecret, FileSecret)
}


def get_model(secret_type: str) -> type[SecretPayload]:
    try:
        return SECRET_TYPES[secret_type]
    except KeyError:
        raise UnknownType(secret_type) from None


def validate_payload(secret_type: str, data: Mapping) -> AnySecret:
    """Build a typed payload from a request body and check its predicate.

    Raises:
        UnknownType: If secret_type is not registered.
        MalformedPayload: If the fields have the wrong shape.
        InvalidPayload: If the payload fails its validity predicate.
    """
    model = get_model(secret_type)
    try:
        payload = model.model_validate(data)
    except ValidationError as exc:
        raise MalformedPayload(f"malformed {secret_type} payload: {exc.error_count()} error(s)") from exc
    if not payload.is_valid():
        raise InvalidPayload(f"{secret_type} payload has empty required fields")
    return payload


def serialize(payload: SecretPayload) -> bytes:
    """Canonical JSON bytes; field order is fixed by the model."""
    return payload.model_dump_json().encode("utf-8")


def parse(data: bytes, secret_type: str) -> AnySecret:
    """Re-hydrate bytes produced by :func:`serialize`."""
    model = get_model(secret_type)
    try:
        return model.model_validate_json(data)
    except ValidationError as exc:
        raise MalformedPayload(f"stored {secret_type} payload does not parse") from exc

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

from jose import JWTError, jwt
from passlib.context import CryptContext

from keeper.core.errors import InvalidCredentials, InvalidToken, LoginExists, UserNotFound
from keeper.db.repository import UserRepository

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

DEFAULT_TOKEN_TTL = timedelta(hours=3)


def _prehash(password: str) -> str:
    # bcrypt only looks at the first 72 bytes
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def hash_password(password: str) -> str:
    return pwd_context.hash(_prehash(password))


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return pwd_context.verify(_prehash(plain), hashed)
    except ValueError:
        # unrecognised or corrupted hash
        return False


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenAuthority:
    """Issues and checks signed, time-bounded owner tokens.

    Validation needs only the signing secret, never a storage lookup.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        ttl: timedelta = DEFAULT_TOKEN_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        if not secret_key:
            raise ValueError("token signing key must not be empty")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._ttl = ttl
        self._clock = clock

    def issue(self, owner_id: str) -> str:
        issued_at = self._clock().timestamp()
        # exp stays fractional so the token lives the full ttl from the exact issue time
        claims = {
            "sub": owner_id,
            "iat": int(issued_at),
            "exp": issued_at + self._ttl.total_seconds(),
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)

    def validate(self, token: str) -> str:
        """Return the owner id carried by token.

        Raises:
            InvalidToken: Bad signature, malformed token, missing claims or expired.
        """
        try:
            # claims and expiry are checked below against the injected clock;
            # any require_* option would re-enable jose's wall-clock exp check
            claims = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise InvalidToken("token could not be verified") from exc

        owner_id = claims.get("sub")
        expires_at = claims.get("exp")
        if not owner_id or isinstance(expires_at, bool) or not isinstance(expires_at, (int, float)):
            raise InvalidToken("token is missing required claims")
        if self._clock().timestamp() >= expires_at:
            raise InvalidToken("token has expired")
        return owner_id


class AuthService:
    def __init__(self, users: UserRepository, tokens: TokenAuthority):
        self._users = users
        self._tokens = tokens

    def register(self, login: str, password: str) -> str:
        """Create a user and return a fresh token for it."""
        try:
            self._users.get_by_login(login)
        except UserNotFound:
            pass
        else:
            logger.warning("Registration rejected: login already exists")
            raise LoginExists(f"login {login!r} already exists")

        owner_id = self._users.create_user(login, hash_password(password))
        logger.info("User registered", extra={"owner_id": owner_id})
        return self._tokens.issue(owner_id)

    def login(self, login: str, password: str) -> str:
        user = self._users.get_by_login(login)
        if not verify_password(password, user.password_hash):
            logger.warning("Failed login attempt", extra={"owner_id": user.id})
            raise InvalidCredentials("invalid credentials")
        return self._tokens.issue(user.id)

"""Admin credential checks and JWT issuance/verification."""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Iterable

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JWTError

from inventory_api.core.errors import Unauthorized

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


@dataclass(frozen=True)
class AdminCredential:
    username: str
    password: str = field(repr=False)
    is_admin: bool = True


@dataclass(frozen=True)
class Identity:
    """Decoded token subject attached to authenticated requests."""

    username: str
    is_admin: bool


@dataclass(frozen=True)
class IssuedToken:
    access_token: str
    username: str


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


class CredentialStore:
    """Fixed list of admin accounts loaded from settings at startup."""

    def __init__(self, credentials: Iterable[AdminCredential]) -> None:
        self._credentials = tuple(credentials)
        unusable = [c.username for c in self._credentials if not c.password]
        if unusable:
            logger.error(
                f"Admin credentials not properly configured for: {', '.join(unusable)}"
            )

    def validate(self, username: str, password: str) -> AdminCredential:
        """Return the matching credential or raise ``Unauthorized``.

        Passwords are compared as plaintext (constant-time). Unknown user and
        wrong password produce the same error.
        """
        logger.info(f"Attempting to validate user: {username}")
        for credential in self._credentials:
            if not credential.password:
                continue
            if _same(credential.username, username) and _same(
                credential.password, password
            ):
                logger.info(f"User authenticated successfully: {username}")
                return credential

        logger.warning(f"Authentication failed for user: {username}")
        raise Unauthorized(INVALID_CREDENTIALS)


class TokenService:
    """Signs and verifies stateless bearer tokens."""

    def __init__(
        self,
        secret: str,
        lifetime: timedelta,
        algorithm: str = "HS256",
    ) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        self._secret = secret
        self._lifetime = lifetime
        self._algorithm = algorithm

    def issue(self, credential: AdminCredential) -> IssuedToken:
        now = datetime.now(timezone.utc)
        claims = {
            "username": credential.username,
            "isAdmin": credential.is_admin,
            "iat": int(now.timestamp()),
            "exp": int((now + self._lifetime).timestamp()),
        }
        token = jwt.encode(claims, self._secret, algorithm=self._algorithm)
        logger.info(f"JWT token generated for user: {credential.username}")
        return IssuedToken(access_token=token, username=credential.username)

    def verify(self, token: str) -> Identity:
        """Decode ``token`` or raise ``Unauthorized`` without saying why."""
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm])
        except ExpiredSignatureError:
            logger.info("Rejected expired token")
            raise Unauthorized("Unauthorized") from None
        except JWTError as e:
            logger.info(f"Rejected invalid token: {e}")
            raise Unauthorized("Unauthorized") from None

        username = claims.get("username")
        if not isinstance(username, str) or not username:
            logger.info("Rejected token without a username claim")
            raise Unauthorized("Unauthorized")
        return Identity(username=username, is_admin=bool(claims.get("isAdmin")))


class AuthService:
    """Login flow: validate credentials, then issue a token."""

    def __init__(self, credentials: CredentialStore, tokens: TokenService) -> None:
        self._credentials = credentials
        self._tokens = tokens

    def login(self, username: str, password: str) -> IssuedToken:
        logger.info(f"Login attempt for user: {username}")
        try:
            credential = self._credentials.validate(username, password)
        except Unauthorized as e:
            logger.warning(f"Login failed for user {username}: {e.message}")
            raise
        return self._tokens.issue(credential)

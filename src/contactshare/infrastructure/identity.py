"""Identity layer: resolve a bearer credential to a stable principal.

Credentials are Fernet tokens whose payload is the principal. The resolver only
verifies them; issuing tokens belongs to the identity provider, and mint_token
exists for local development and tests.
"""

import logging

from cryptography.fernet import Fernet, InvalidToken

logger = logging.getLogger(__name__)


def generate_key() -> str:
    """Return a new Fernet key (URL-safe base64) for IDENTITY_TOKEN_KEY."""
    return Fernet.generate_key().decode()


def _fernet(key: str | bytes) -> Fernet:
    return Fernet(key.encode() if isinstance(key, str) else key)


def mint_token(key: str | bytes, principal: str) -> str:
    """Return a credential for principal signed with key."""
    principal = (principal or "").strip()
    if not principal:
        raise ValueError("principal must be non-empty")
    return _fernet(key).encrypt(principal.encode("utf-8")).decode()


class TokenIdentityResolver:
    """Verifies Fernet credentials. Never invents or substitutes a principal."""

    def __init__(self, key: str | bytes, *, max_age: int | None = None) -> None:
        self._fernet = _fernet(key)
        self._max_age = max_age

    async def resolve(self, credential: str) -> str | None:
        """Return the principal inside a valid, unexpired token, or None."""
        if not credential:
            return None
        try:
            payload = self._fernet.decrypt(credential.encode(), ttl=self._max_age)
            principal = payload.decode("utf-8").strip()
        except (InvalidToken, UnicodeDecodeError):
            logger.warning("Rejected credential: invalid or expired token")
            return None
        return principal or None

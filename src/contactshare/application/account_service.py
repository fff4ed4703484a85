"""Account registry: bind principals to usernames, whoami, and username lookup."""

import logging

from contactshare.application.dto import (
    AccountCreated,
    AlreadyRegistered,
    Invalid,
    Unauthenticated,
    UsernameNotFound,
    UsernameTaken,
    WhoAmI,
)
from contactshare.application.ports import AccountRepository, BindOutcome
from contactshare.application.session import Session
from contactshare.domain import Account, clean_username

logger = logging.getLogger(__name__)


class AccountService:
    """Usernames are chosen once per principal and are unique across all accounts."""

    def __init__(self, repository: AccountRepository) -> None:
        self._repo = repository

    def create_account(
        self, session: Session, username: str
    ) -> AccountCreated | AlreadyRegistered | UsernameTaken | Invalid | Unauthenticated:
        """Bind the caller to username. Re-submitting the same pair is a no-op."""
        principal = session.require_principal()
        if isinstance(principal, Unauthenticated):
            return principal
        try:
            account = Account(principal=principal, username=username)
        except ValueError as e:
            return Invalid(reason=str(e))
        username = account.username

        outcome = self._repo.bind_username(principal, username)
        if outcome is BindOutcome.PRINCIPAL_BOUND:
            existing = self._repo.username_for(principal) or ""
            return AlreadyRegistered(principal=principal, username=existing)
        if outcome is BindOutcome.USERNAME_BOUND:
            return UsernameTaken(username=username)

        created = outcome is BindOutcome.CREATED
        if created:
            logger.info("Account created: %s -> %s", principal, username)
        return AccountCreated(principal=principal, username=username, created=created)

    def whoami(self, session: Session) -> WhoAmI | Unauthenticated:
        """Return the caller's principal and username (None when unregistered)."""
        principal = session.require_principal()
        if isinstance(principal, Unauthenticated):
            return principal
        return WhoAmI(principal=principal, username=self._repo.username_for(principal))

    def resolve(self, username: str) -> str | UsernameNotFound:
        """Return the principal bound to username. Malformed usernames are never bound."""
        try:
            cleaned = clean_username(username)
        except ValueError:
            return UsernameNotFound(username=(username or "").strip())
        principal = self._repo.principal_for(cleaned)
        if principal is None:
            return UsernameNotFound(username=cleaned)
        return principal

"""Sharing ledger use cases: grant and revoke read access to single contacts."""

import logging

from contactshare.application.account_service import AccountService
from contactshare.application.authorization import AuthorizationGate
from contactshare.application.dto import (
    Authorized,
    ContactNotFound,
    ContactShared,
    Grantees,
    InvalidGrant,
    NotOwner,
    ShareRevoked,
    Unauthenticated,
    UsernameNotFound,
)
from contactshare.application.ports import Repository
from contactshare.application.session import Session
from contactshare.domain import Operation, clean_username

logger = logging.getLogger(__name__)


class SharingService:
    """Owners share contacts with usernames. Grantees get read access only."""

    def __init__(
        self,
        repository: Repository,
        *,
        gate: AuthorizationGate | None = None,
        accounts: AccountService | None = None,
    ) -> None:
        self._repo = repository
        self._accounts = accounts or AccountService(repository)
        self._gate = gate or AuthorizationGate(repository, repository, repository)

    def share_contact(
        self, session: Session, contact_id: int, username: str
    ) -> (
        ContactShared
        | ContactNotFound
        | NotOwner
        | UsernameNotFound
        | InvalidGrant
        | Unauthenticated
    ):
        """Grant username read access. Sharing the same pair again changes nothing."""
        principal = session.require_principal()
        if isinstance(principal, Unauthenticated):
            return principal
        verdict = self._gate.check(principal, contact_id, Operation.SHARE)
        if not isinstance(verdict, Authorized):
            return verdict

        grantee = self._accounts.resolve(username)
        if isinstance(grantee, UsernameNotFound):
            return grantee
        username = clean_username(username)
        if grantee == principal:
            return InvalidGrant(
                contact_id=contact_id, reason="Cannot share a contact with its owner."
            )

        if not self._repo.add_grant(contact_id, principal, username):
            return ContactNotFound(contact_id=contact_id)
        logger.info("Contact %s shared with %s", contact_id, username)
        return ContactShared(contact_id=contact_id, username=username)

    def revoke_shared_contact(
        self, session: Session, contact_id: int, username: str
    ) -> ShareRevoked | NotOwner | Unauthenticated:
        """Remove username's grant. Revoking a grant that does not exist is a no-op."""
        principal = session.require_principal()
        if isinstance(principal, Unauthenticated):
            return principal
        verdict = self._gate.check(principal, contact_id, Operation.REVOKE)
        if isinstance(verdict, ContactNotFound):
            # Deleting a contact already dropped its grants.
            return ShareRevoked(
                contact_id=contact_id, username=(username or "").strip(), removed=False
            )
        if isinstance(verdict, NotOwner):
            return verdict

        grantee = self._accounts.resolve(username)
        if isinstance(grantee, UsernameNotFound):
            return ShareRevoked(contact_id=contact_id, username=grantee.username, removed=False)
        username = clean_username(username)
        removed = self._repo.remove_grant(contact_id, principal, username)
        if removed:
            logger.info("Contact %s no longer shared with %s", contact_id, username)
        return ShareRevoked(contact_id=contact_id, username=username, removed=removed)

    def list_grantees(
        self, session: Session, contact_id: int
    ) -> Grantees | ContactNotFound | NotOwner | Unauthenticated:
        """Return the usernames a contact is shared with. Owner only."""
        principal = session.require_principal()
        if isinstance(principal, Unauthenticated):
            return principal
        verdict = self._gate.check(principal, contact_id, Operation.LIST_GRANTS)
        if not isinstance(verdict, Authorized):
            return verdict
        return Grantees(contact_id=contact_id, usernames=self._repo.grantees(contact_id))

"""Authorization gate: the single place that decides who may touch a contact."""

import logging

from contactshare.application.dto import Authorized, ContactNotFound, NotOwner
from contactshare.application.ports import AccountRepository, ContactRepository, GrantRepository
from contactshare.domain import AccessLevel, Contact, Operation

logger = logging.getLogger(__name__)


def authorize(
    principal: str,
    contact: Contact,
    operation: Operation,
    *,
    username: str | None = None,
    grantees: tuple[str, ...] | frozenset[str] = (),
) -> AccessLevel:
    """Owner may do anything; a grantee may only read; everybody else is denied."""
    if contact.owner == principal:
        return AccessLevel.OWNER
    if operation.read_only and username is not None and username in grantees:
        return AccessLevel.GRANTEE
    return AccessLevel.DENIED


class AuthorizationGate:
    """Loads ownership and grant state and runs authorize() on it."""

    def __init__(
        self,
        accounts: AccountRepository,
        contacts: ContactRepository,
        grants: GrantRepository,
    ) -> None:
        self._accounts = accounts
        self._contacts = contacts
        self._grants = grants

    def check(
        self, principal: str, contact_id: int, operation: Operation
    ) -> Authorized | ContactNotFound | NotOwner:
        """Return the contact and the caller's access level, or why access is refused.

        Refused reads report ContactNotFound so that strangers cannot probe ids.
        """
        contact = self._contacts.get_by_id(contact_id)
        if contact is None:
            return ContactNotFound(contact_id=contact_id)

        username: str | None = None
        grantees: tuple[str, ...] = ()
        if contact.owner != principal and operation.read_only:
            username = self._accounts.username_for(principal)
            if username is not None:
                grantees = self._grants.grantees(contact_id)

        access = authorize(
            principal, contact, operation, username=username, grantees=grantees
        )
        if access is AccessLevel.DENIED:
            logger.warning(
                "Denied %s on contact %s for principal %s",
                operation.value,
                contact_id,
                principal,
            )
            if operation.read_only:
                return ContactNotFound(contact_id=contact_id)
            return NotOwner(contact_id=contact_id)
        return Authorized(contact=contact, access=access)

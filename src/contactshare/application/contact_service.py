"""Contact store use cases: add, edit, delete, and read what the caller may see."""

import logging

from contactshare.application.authorization import AuthorizationGate, authorize
from contactshare.application.dto import (
    AccountRequired,
    Authorized,
    ContactCreated,
    ContactDeleted,
    ContactNotFound,
    ContactUpdated,
    ContactView,
    NotOwner,
    Unauthenticated,
)
from contactshare.application.ports import Repository
from contactshare.application.session import Session
from contactshare.domain import AccessLevel, Contact, ContactFields, Operation

logger = logging.getLogger(__name__)


def _to_view(contact: Contact, access: AccessLevel, grantees: tuple[str, ...]) -> ContactView:
    # Grantees never learn who else the contact is shared with.
    shared_with = tuple(sorted(grantees)) if access is AccessLevel.OWNER else ()
    return ContactView(
        contact_id=contact.id,
        name=contact.fields.name,
        email=contact.fields.email,
        phone=contact.fields.phone,
        access=access,
        shared_with=shared_with,
    )


class ContactService:
    """Contacts belong to the principal that created them. Only the owner mutates."""

    def __init__(
        self,
        repository: Repository,
        *,
        gate: AuthorizationGate | None = None,
    ) -> None:
        self._repo = repository
        self._gate = gate or AuthorizationGate(repository, repository, repository)

    def add_contact(
        self, session: Session, fields: ContactFields
    ) -> ContactCreated | AccountRequired | Unauthenticated:
        """Create a contact owned by the caller. Every call creates a new record."""
        principal = session.require_principal()
        if isinstance(principal, Unauthenticated):
            return principal
        if self._repo.username_for(principal) is None:
            return AccountRequired(principal=principal)
        contact = self._repo.add(principal, fields)
        return ContactCreated(contact_id=contact.id)

    def edit_contact(
        self, session: Session, contact_id: int, fields: ContactFields
    ) -> ContactUpdated | ContactNotFound | NotOwner | Unauthenticated:
        """Replace name, email and phone. Owner only."""
        principal = session.require_principal()
        if isinstance(principal, Unauthenticated):
            return principal
        verdict = self._gate.check(principal, contact_id, Operation.EDIT)
        if not isinstance(verdict, Authorized):
            return verdict
        if not self._repo.update_fields(contact_id, principal, fields):
            return ContactNotFound(contact_id=contact_id)
        return ContactUpdated(contact_id=contact_id)

    def delete_contact(
        self, session: Session, contact_id: int
    ) -> ContactDeleted | ContactNotFound | NotOwner | Unauthenticated:
        """Remove the contact and every grant on it. Owner only."""
        principal = session.require_principal()
        if isinstance(principal, Unauthenticated):
            return principal
        verdict = self._gate.check(principal, contact_id, Operation.DELETE)
        if not isinstance(verdict, Authorized):
            return verdict
        if not self._repo.delete(contact_id, principal):
            return ContactNotFound(contact_id=contact_id)
        logger.info("Contact %s deleted by %s", contact_id, principal)
        return ContactDeleted(contact_id=contact_id)

    def get_contact(
        self, session: Session, contact_id: int
    ) -> ContactView | ContactNotFound | Unauthenticated:
        """Return one contact if the caller owns it or holds a grant on it."""
        principal = session.require_principal()
        if isinstance(principal, Unauthenticated):
            return principal
        verdict = self._gate.check(principal, contact_id, Operation.READ)
        if not isinstance(verdict, Authorized):
            return ContactNotFound(contact_id=contact_id)
        grantees = ()
        if verdict.access is AccessLevel.OWNER:
            grantees = self._repo.grantees(contact_id)
        return _to_view(verdict.contact, verdict.access, grantees)

    def get_visible_contacts(self, session: Session) -> list[ContactView] | Unauthenticated:
        """Return owned contacts plus contacts shared with the caller, ordered by id."""
        principal = session.require_principal()
        if isinstance(principal, Unauthenticated):
            return principal
        username = self._repo.username_for(principal)
        out = []
        for contact, grantees in self._repo.list_visible(principal):
            access = authorize(
                principal, contact, Operation.READ, username=username, grantees=grantees
            )
            if access is AccessLevel.DENIED:
                continue
            out.append(_to_view(contact, access, grantees))
        return out

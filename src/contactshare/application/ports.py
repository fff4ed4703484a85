"""Application ports (interfaces). Implemented by infrastructure adapters.

Every method is atomic with respect to the account, contact and grant tables it
touches. Mutations of a contact are conditional on its owner, so a contact that
disappears between an authorization check and the write shows up as a False
return, never as a partial change.
"""

from enum import Enum
from typing import Protocol

from contactshare.domain import Contact, ContactFields


class BindOutcome(str, Enum):
    CREATED = "created"
    EXISTS = "exists"  # same principal already holds this username
    PRINCIPAL_BOUND = "principal_bound"  # principal holds a different username
    USERNAME_BOUND = "username_bound"  # username held by a different principal


class IdentityResolver(Protocol):
    """Turns an inbound credential into a principal. Trusted boundary."""

    async def resolve(self, credential: str) -> str | None:
        """Return the verified principal for the credential, or None."""
        ...


class AccountRepository(Protocol):
    """Bijective principal <-> username mapping."""

    def bind_username(self, principal: str, username: str) -> BindOutcome:
        """Bind username to principal unless either side is already bound."""
        ...

    def username_for(self, principal: str) -> str | None:
        """Return the principal's username, or None if unregistered."""
        ...

    def principal_for(self, username: str) -> str | None:
        """Return the principal bound to username, or None."""
        ...


class ContactRepository(Protocol):
    """Owns contact records keyed by id."""

    def add(self, owner: str, fields: ContactFields) -> Contact:
        """Store a new contact for owner under the next id and return it."""
        ...

    def get_by_id(self, contact_id: int) -> Contact | None:
        """Return the contact with the given id, or None."""
        ...

    def update_fields(self, contact_id: int, owner: str, fields: ContactFields) -> bool:
        """Replace the fields of owner's contact. False if no such contact."""
        ...

    def delete(self, contact_id: int, owner: str) -> bool:
        """Remove owner's contact together with every grant on it. False if absent."""
        ...

    def list_visible(self, principal: str) -> list[tuple[Contact, tuple[str, ...]]]:
        """Return (contact, grantee usernames) for contacts owned by or shared with principal, by id."""
        ...


class GrantRepository(Protocol):
    """Records which contacts are granted to which usernames."""

    def grantees(self, contact_id: int) -> tuple[str, ...]:
        """Return the usernames holding a grant on the contact, sorted."""
        ...

    def add_grant(self, contact_id: int, owner: str, username: str) -> bool:
        """Grant username read access to owner's contact. Idempotent.

        False if the contact (owned by owner) or the account for username is gone.
        """
        ...

    def remove_grant(self, contact_id: int, owner: str, username: str) -> bool:
        """Remove the grant if present. True if a grant was removed."""
        ...


class Repository(AccountRepository, ContactRepository, GrantRepository, Protocol):
    """One backing store for all three tables; cascades need them together."""

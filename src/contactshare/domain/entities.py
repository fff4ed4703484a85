"""Domain entities: Account, Contact, ContactFields, and ShareGrant."""

from dataclasses import dataclass

USERNAME_MAX_LENGTH = 64


def clean_username(raw: str | None) -> str:
    """Return the username with surrounding whitespace removed.

    Raises ValueError when the result is empty or too long.
    """
    username = (raw or "").strip()
    if not username:
        raise ValueError("Username must be non-empty.")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValueError(f"Username must be at most {USERNAME_MAX_LENGTH} chars.")
    return username


@dataclass(frozen=True)
class Account:
    """
    Binds an authenticated principal to the username other users share with.
    Never renamed or deleted once created.
    """

    principal: str
    username: str

    def __post_init__(self):
        if not self.principal:
            raise ValueError("Account principal must be non-empty.")
        object.__setattr__(self, "username", clean_username(self.username))


@dataclass(frozen=True)
class ContactFields:
    """Mutable, free-form fields of a contact. Stored verbatim; empty strings are valid."""

    name: str = ""
    email: str = ""
    phone: str = ""


@dataclass(frozen=True)
class Contact:
    """
    A contact record. The owner is fixed at creation; only the owner may change
    the fields or delete the record.
    """

    id: int
    owner: str
    fields: ContactFields = ContactFields()

    def __post_init__(self):
        if self.id < 1:
            raise ValueError("Contact id must be a positive integer.")
        if not self.owner:
            raise ValueError("Contact must have an owner.")

    def with_fields(self, fields: ContactFields) -> "Contact":
        return Contact(id=self.id, owner=self.owner, fields=fields)


@dataclass(frozen=True)
class ShareGrant:
    """Standing read permission on one contact for one username."""

    contact_id: int
    grantee_username: str

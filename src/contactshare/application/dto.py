"""Use-case results. Services return these instead of raising, one type per outcome."""

from dataclasses import dataclass, field

from contactshare.domain import AccessLevel, Contact

# --- failures ---


@dataclass(frozen=True)
class Unauthenticated:
    reason: str = "Not authenticated."


@dataclass(frozen=True)
class Invalid:
    reason: str


@dataclass(frozen=True)
class AccountRequired:
    principal: str


@dataclass(frozen=True)
class AlreadyRegistered:
    principal: str
    username: str


@dataclass(frozen=True)
class UsernameTaken:
    username: str


@dataclass(frozen=True)
class UsernameNotFound:
    username: str


@dataclass(frozen=True)
class ContactNotFound:
    contact_id: int


@dataclass(frozen=True)
class NotOwner:
    contact_id: int


@dataclass(frozen=True)
class InvalidGrant:
    contact_id: int
    reason: str


# --- successes ---


@dataclass(frozen=True)
class AccountCreated:
    principal: str
    username: str
    created: bool = True


@dataclass(frozen=True)
class WhoAmI:
    principal: str
    username: str | None = None


@dataclass(frozen=True)
class Authorized:
    contact: Contact
    access: AccessLevel


@dataclass(frozen=True)
class ContactCreated:
    contact_id: int


@dataclass(frozen=True)
class ContactUpdated:
    contact_id: int


@dataclass(frozen=True)
class ContactDeleted:
    contact_id: int


@dataclass(frozen=True)
class ContactView:
    """What a caller may see of a contact. shared_with is only filled in for the owner."""

    contact_id: int
    name: str
    email: str
    phone: str
    access: AccessLevel
    shared_with: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ContactShared:
    contact_id: int
    username: str


@dataclass(frozen=True)
class ShareRevoked:
    contact_id: int
    username: str
    removed: bool


@dataclass(frozen=True)
class Grantees:
    contact_id: int
    usernames: tuple[str, ...]

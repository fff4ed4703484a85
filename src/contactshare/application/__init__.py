"""Application layer: use cases, authorization gate, sessions, ports, and DTOs. Depends only on domain."""

from contactshare.application.account_service import AccountService
from contactshare.application.authorization import AuthorizationGate, authorize
from contactshare.application.contact_service import ContactService
from contactshare.application.dto import (
    AccountCreated,
    AccountRequired,
    AlreadyRegistered,
    Authorized,
    ContactCreated,
    ContactDeleted,
    ContactNotFound,
    ContactShared,
    ContactUpdated,
    ContactView,
    Grantees,
    Invalid,
    InvalidGrant,
    NotOwner,
    ShareRevoked,
    Unauthenticated,
    UsernameNotFound,
    UsernameTaken,
    WhoAmI,
)
from contactshare.application.ports import (
    AccountRepository,
    BindOutcome,
    ContactRepository,
    GrantRepository,
    IdentityResolver,
    Repository,
)
from contactshare.application.session import Session, authenticate
from contactshare.application.sharing_service import SharingService

__all__ = [
    "AccountCreated",
    "AccountRepository",
    "AccountRequired",
    "AccountService",
    "AlreadyRegistered",
    "AuthorizationGate",
    "Authorized",
    "BindOutcome",
    "ContactCreated",
    "ContactDeleted",
    "ContactNotFound",
    "ContactRepository",
    "ContactService",
    "ContactShared",
    "ContactUpdated",
    "ContactView",
    "GrantRepository",
    "Grantees",
    "IdentityResolver",
    "Invalid",
    "InvalidGrant",
    "NotOwner",
    "Repository",
    "Session",
    "ShareRevoked",
    "SharingService",
    "Unauthenticated",
    "UsernameNotFound",
    "UsernameTaken",
    "WhoAmI",
    "authenticate",
    "authorize",
]

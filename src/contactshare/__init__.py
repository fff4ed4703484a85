"""
contactshare core: clean-architecture layout.

- domain: entities (Account, Contact, ShareGrant), access levels. No outer dependencies.
- application: use cases (AccountService, ContactService, SharingService),
  authorization gate, sessions, ports, DTOs.
- infrastructure: adapters (InMemoryRepository, Neo4jRepository, TokenIdentityResolver).
"""

from contactshare.application import (
    AccountService,
    AuthorizationGate,
    ContactService,
    Session,
    SharingService,
    authenticate,
    authorize,
)
from contactshare.domain import AccessLevel, Account, Contact, ContactFields, Operation, ShareGrant
from contactshare.infrastructure import InMemoryRepository, Neo4jRepository, TokenIdentityResolver

__all__ = [
    "AccessLevel",
    "Account",
    "AccountService",
    "AuthorizationGate",
    "Contact",
    "ContactFields",
    "ContactService",
    "InMemoryRepository",
    "Neo4jRepository",
    "Operation",
    "Session",
    "ShareGrant",
    "SharingService",
    "TokenIdentityResolver",
    "authenticate",
    "authorize",
]

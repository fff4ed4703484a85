"""Domain layer: entities and value objects. No dependencies on outer layers."""

from contactshare.domain.access import AccessLevel, Operation
from contactshare.domain.entities import (
    Account,
    Contact,
    ContactFields,
    ShareGrant,
    clean_username,
)

__all__ = [
    "AccessLevel",
    "Account",
    "Contact",
    "ContactFields",
    "Operation",
    "ShareGrant",
    "clean_username",
]

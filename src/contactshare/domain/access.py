"""Access levels and the operations the authorization gate decides on."""

from enum import Enum


class AccessLevel(str, Enum):
    OWNER = "owner"
    GRANTEE = "grantee"
    DENIED = "denied"


class Operation(str, Enum):
    READ = "read"
    EDIT = "edit"
    DELETE = "delete"
    SHARE = "share"
    REVOKE = "revoke"
    LIST_GRANTS = "list_grants"

    @property
    def read_only(self) -> bool:
        return self is Operation.READ

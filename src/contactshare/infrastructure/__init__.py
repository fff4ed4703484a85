"""Infrastructure layer: concrete implementations of application ports."""

from contactshare.infrastructure.identity import (
    TokenIdentityResolver,
    generate_key,
    mint_token,
)
from contactshare.infrastructure.memory_repository import InMemoryRepository
from contactshare.infrastructure.persistence.neo4j_repository import (
    Neo4jRepository,
    ensure_constraints,
)

__all__ = [
    "InMemoryRepository",
    "Neo4jRepository",
    "TokenIdentityResolver",
    "ensure_constraints",
    "generate_key",
    "mint_token",
]

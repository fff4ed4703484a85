"""Runtime settings read from the environment (and .env, loaded by api.main)."""

import logging
import os
from dataclasses import dataclass, field

from contactshare.infrastructure import generate_key

logger = logging.getLogger(__name__)

STORE_MEMORY = "memory"
STORE_NEO4J = "neo4j"


@dataclass
class Neo4jSettings:
    uri: str = "bolt://localhost:7687"
    user: str = "neo4j"
    password: str = "password"


@dataclass
class Settings:
    store: str = STORE_MEMORY
    neo4j: Neo4jSettings = field(default_factory=Neo4jSettings)
    identity_token_key: str = ""
    identity_token_ttl: int | None = None

    @classmethod
    def from_env(cls) -> "Settings":
        store = os.environ.get("CONTACTSHARE_STORE", STORE_MEMORY).strip().lower()
        if store not in (STORE_MEMORY, STORE_NEO4J):
            raise ValueError(f"Unsupported CONTACTSHARE_STORE: {store!r}")

        key = os.environ.get("IDENTITY_TOKEN_KEY", "").strip()
        if not key:
            logger.warning(
                "IDENTITY_TOKEN_KEY not set; using an ephemeral key. "
                "Credentials will not survive a restart."
            )
            key = generate_key()

        ttl_raw = os.environ.get("IDENTITY_TOKEN_TTL", "").strip()
        ttl = int(ttl_raw) if ttl_raw else None

        return cls(
            store=store,
            neo4j=Neo4jSettings(
                uri=os.environ.get("NEO4J_URI", "bolt://localhost:7687").strip(),
                user=os.environ.get("NEO4J_USER", "neo4j").strip(),
                password=os.environ.get("NEO4J_PASSWORD", "password").strip(),
            ),
            identity_token_key=key,
            identity_token_ttl=ttl,
        )

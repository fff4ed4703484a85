"""Neo4j implementation of the repository ports.
Graph: (:Account {principal, username}), (:Contact {id, owner, name, email, phone}),
and (contact:Contact)-[:SHARED_WITH]->(grantee:Account) for each grant.
Contact ids come from a (:Sequence {name: "contact"}) counter node.
Each method is one statement or one managed write transaction.
"""

from datetime import datetime, timezone

from neo4j.exceptions import ConstraintError

from contactshare.application.ports import BindOutcome
from contactshare.domain import Contact, ContactFields

_CONSTRAINT_QUERIES = (
    """
    CREATE CONSTRAINT account_principal_unique IF NOT EXISTS
    FOR (a:Account) REQUIRE a.principal IS UNIQUE
    """,
    """
    CREATE CONSTRAINT account_username_unique IF NOT EXISTS
    FOR (a:Account) REQUIRE a.username IS UNIQUE
    """,
    """
    CREATE CONSTRAINT contact_id_unique IF NOT EXISTS
    FOR (c:Contact) REQUIRE c.id IS UNIQUE
    """,
    """
    CREATE CONSTRAINT sequence_name_unique IF NOT EXISTS
    FOR (s:Sequence) REQUIRE s.name IS UNIQUE
    """,
)

_ACCOUNT_LOOKUP_QUERY = """
OPTIONAL MATCH (byp:Account {principal: $principal})
OPTIONAL MATCH (byu:Account {username: $username})
RETURN byp.username AS current, byu.principal AS holder
"""

_CREATE_ACCOUNT_QUERY = """
CREATE (:Account {principal: $principal, username: $username, created_at: $created_at})
"""

_ADD_CONTACT_QUERY = """
MERGE (seq:Sequence {name: "contact"})
ON CREATE SET seq.value = 0
SET seq.value = seq.value + 1
WITH seq
CREATE (c:Contact {
    id: seq.value,
    owner: $owner,
    name: $name,
    email: $email,
    phone: $phone,
    created_at: $created_at
})
RETURN c
"""

_LIST_VISIBLE_QUERY = """
MATCH (c:Contact)
WHERE c.owner = $principal
   OR EXISTS { MATCH (c)-[:SHARED_WITH]->(:Account {principal: $principal}) }
OPTIONAL MATCH (c)-[:SHARED_WITH]->(g:Account)
WITH c, collect(DISTINCT g.username) AS grantees
RETURN c, grantees
ORDER BY c.id
"""


def ensure_constraints(driver) -> None:
    """Create uniqueness constraints for accounts, contacts and the id sequence if missing."""
    with driver.session() as session:
        for query in _CONSTRAINT_QUERIES:
            session.run(query)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _classify(current: str | None, holder: str | None, username: str) -> BindOutcome | None:
    if current is not None:
        return BindOutcome.EXISTS if current == username else BindOutcome.PRINCIPAL_BOUND
    if holder is not None:
        return BindOutcome.USERNAME_BOUND
    return None


class Neo4jRepository:
    """Stores accounts, contacts and grants in Neo4j. Call ensure_constraints at startup."""

    def __init__(self, driver: object) -> None:
        self._driver = driver

    # --- accounts ---

    def bind_username(self, principal: str, username: str) -> BindOutcome:
        def _bind(tx) -> BindOutcome:
            record = tx.run(
                _ACCOUNT_LOOKUP_QUERY, principal=principal, username=username
            ).single()
            outcome = _classify(record["current"], record["holder"], username)
            if outcome is not None:
                return outcome
            tx.run(
                _CREATE_ACCOUNT_QUERY,
                principal=principal,
                username=username,
                created_at=_now_iso(),
            )
            return BindOutcome.CREATED

        with self._driver.session() as session:
            try:
                return session.execute_write(_bind)
            except ConstraintError:
                # A concurrent bind won; report what it bound.
                record = session.run(
                    _ACCOUNT_LOOKUP_QUERY, principal=principal, username=username
                ).single()
        outcome = _classify(record["current"], record["holder"], username)
        if outcome is None:
            raise RuntimeError("bind_username: constraint violated but no account found")
        return outcome

    def username_for(self, principal: str) -> str | None:
        with self._driver.session() as session:
            record = session.run(
                "MATCH (a:Account {principal: $principal}) RETURN a.username AS username",
                principal=principal,
            ).single()
        return record["username"] if record else None

    def principal_for(self, username: str) -> str | None:
        with self._driver.session() as session:
            record = session.run(
                "MATCH (a:Account {username: $username}) RETURN a.principal AS principal",
                username=username,
            ).single()
        return record["principal"] if record else None

    # --- contacts ---

    def add(self, owner: str, fields: ContactFields) -> Contact:
        with self._driver.session() as session:
            record = session.run(
                _ADD_CONTACT_QUERY,
                owner=owner,
                name=fields.name,
                email=fields.email,
                phone=fields.phone,
                created_at=_now_iso(),
            ).single()
        if not record:
            raise RuntimeError("add: expected one result")
        return _node_to_contact(record["c"])

    def get_by_id(self, contact_id: int) -> Contact | None:
        with self._driver.session() as session:
            record = session.run(
                "MATCH (c:Contact {id: $id}) RETURN c", id=contact_id
            ).single()
        if not record:
            return None
        return _node_to_contact(record["c"])

    def update_fields(self, contact_id: int, owner: str, fields: ContactFields) -> bool:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (c:Contact {id: $id, owner: $owner})
                SET c.name = $name, c.email = $email, c.phone = $phone,
                    c.updated_at = $updated_at
                RETURN c.id AS id
                """,
                id=contact_id,
                owner=owner,
                name=fields.name,
                email=fields.email,
                phone=fields.phone,
                updated_at=_now_iso(),
            )
            return result.single() is not None

    def delete(self, contact_id: int, owner: str) -> bool:
        # DETACH DELETE drops the SHARED_WITH relationships in the same statement.
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (c:Contact {id: $id, owner: $owner})
                WITH c, c.id AS id
                DETACH DELETE c
                RETURN id
                """,
                id=contact_id,
                owner=owner,
            )
            return result.single() is not None

    def list_visible(self, principal: str) -> list[tuple[Contact, tuple[str, ...]]]:
        with self._driver.session() as session:
            result = session.run(_LIST_VISIBLE_QUERY, principal=principal)
            return [
                (_node_to_contact(rec["c"]), tuple(sorted(rec["grantees"])))
                for rec in result
            ]

    # --- grants ---

    def grantees(self, contact_id: int) -> tuple[str, ...]:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (:Contact {id: $id})-[:SHARED_WITH]->(g:Account)
                RETURN DISTINCT g.username AS username
                ORDER BY username
                """,
                id=contact_id,
            )
            return tuple(rec["username"] for rec in result)

    def add_grant(self, contact_id: int, owner: str, username: str) -> bool:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (c:Contact {id: $id, owner: $owner})
                MATCH (a:Account {username: $username})
                MERGE (c)-[s:SHARED_WITH]->(a)
                ON CREATE SET s.created_at = $created_at
                RETURN c.id AS id
                """,
                id=contact_id,
                owner=owner,
                username=username,
                created_at=_now_iso(),
            )
            return result.single() is not None

    def remove_grant(self, contact_id: int, owner: str, username: str) -> bool:
        with self._driver.session() as session:
            result = session.run(
                """
                MATCH (c:Contact {id: $id, owner: $owner})-[s:SHARED_WITH]->(:Account {username: $username})
                DELETE s
                RETURN count(s) AS removed
                """,
                id=contact_id,
                owner=owner,
                username=username,
            )
            record = result.single()
            return bool(record and record["removed"])


def _node_to_contact(node) -> Contact:
    return Contact(
        id=int(node["id"]),
        owner=node["owner"],
        fields=ContactFields(
            name=node.get("name") or "",
            email=node.get("email") or "",
            phone=node.get("phone") or "",
        ),
    )

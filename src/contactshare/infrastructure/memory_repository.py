"""In-memory implementation of the repository ports (no DB)."""

import threading

from contactshare.application.ports import BindOutcome
from contactshare.domain import Contact, ContactFields, ShareGrant


class InMemoryRepository:
    """Accounts, contacts and grants in plain dicts behind one lock.
    Every method runs under the lock, so a delete and its grant cascade are seen
    together or not at all. Contact ids start at 1 and are never reused.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._usernames: dict[str, str] = {}  # principal -> username
        self._principals: dict[str, str] = {}  # username -> principal
        self._contacts: dict[int, Contact] = {}
        self._grants: set[ShareGrant] = set()
        self._last_id = 0

    # --- accounts ---

    def bind_username(self, principal: str, username: str) -> BindOutcome:
        with self._lock:
            current = self._usernames.get(principal)
            if current is not None:
                return BindOutcome.EXISTS if current == username else BindOutcome.PRINCIPAL_BOUND
            if username in self._principals:
                return BindOutcome.USERNAME_BOUND
            self._usernames[principal] = username
            self._principals[username] = principal
            return BindOutcome.CREATED

    def username_for(self, principal: str) -> str | None:
        with self._lock:
            return self._usernames.get(principal)

    def principal_for(self, username: str) -> str | None:
        with self._lock:
            return self._principals.get(username)

    # --- contacts ---

    def add(self, owner: str, fields: ContactFields) -> Contact:
        with self._lock:
            self._last_id += 1
            contact = Contact(id=self._last_id, owner=owner, fields=fields)
            self._contacts[contact.id] = contact
            return contact

    def get_by_id(self, contact_id: int) -> Contact | None:
        with self._lock:
            return self._contacts.get(contact_id)

    def update_fields(self, contact_id: int, owner: str, fields: ContactFields) -> bool:
        with self._lock:
            contact = self._contacts.get(contact_id)
            if contact is None or contact.owner != owner:
                return False
            self._contacts[contact_id] = contact.with_fields(fields)
            return True

    def delete(self, contact_id: int, owner: str) -> bool:
        with self._lock:
            contact = self._contacts.get(contact_id)
            if contact is None or contact.owner != owner:
                return False
            del self._contacts[contact_id]
            self._grants = {g for g in self._grants if g.contact_id != contact_id}
            return True

    def list_visible(self, principal: str) -> list[tuple[Contact, tuple[str, ...]]]:
        with self._lock:
            username = self._usernames.get(principal)
            out = []
            for contact_id in sorted(self._contacts):
                contact = self._contacts[contact_id]
                grantees = self._grantees_locked(contact_id)
                if contact.owner == principal or (username is not None and username in grantees):
                    out.append((contact, grantees))
            return out

    # --- grants ---

    def _grantees_locked(self, contact_id: int) -> tuple[str, ...]:
        return tuple(sorted(g.grantee_username for g in self._grants if g.contact_id == contact_id))

    def grantees(self, contact_id: int) -> tuple[str, ...]:
        with self._lock:
            return self._grantees_locked(contact_id)

    def add_grant(self, contact_id: int, owner: str, username: str) -> bool:
        with self._lock:
            contact = self._contacts.get(contact_id)
            if contact is None or contact.owner != owner:
                return False
            if username not in self._principals:
                return False
            self._grants.add(ShareGrant(contact_id=contact_id, grantee_username=username))
            return True

    def remove_grant(self, contact_id: int, owner: str, username: str) -> bool:
        with self._lock:
            contact = self._contacts.get(contact_id)
            if contact is None or contact.owner != owner:
                return False
            grant = ShareGrant(contact_id=contact_id, grantee_username=username)
            if grant not in self._grants:
                return False
            self._grants.discard(grant)
            return True

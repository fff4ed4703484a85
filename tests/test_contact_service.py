"""Unit tests for ContactService. In-memory repo and explicit sessions only."""

from contactshare.application import (
    AccountRequired,
    AccountService,
    ContactCreated,
    ContactDeleted,
    ContactNotFound,
    ContactService,
    ContactUpdated,
    NotOwner,
    Session,
    SharingService,
    Unauthenticated,
)
from contactshare.domain import AccessLevel, ContactFields
from contactshare.infrastructure import InMemoryRepository

ALICE = Session.for_principal("p1")
CAROL = Session.for_principal("p2")
BOB_FIELDS = ContactFields(name="Bob", email="b@x.com", phone="555")


def _services() -> tuple[ContactService, SharingService]:
    repo = InMemoryRepository()
    accounts = AccountService(repo)
    accounts.create_account(ALICE, "alice")
    accounts.create_account(CAROL, "carol")
    return ContactService(repo), SharingService(repo)


def test_add_contact_returns_sequential_ids() -> None:
    contacts, _ = _services()
    first = contacts.add_contact(ALICE, BOB_FIELDS)
    second = contacts.add_contact(ALICE, BOB_FIELDS)
    assert first == ContactCreated(contact_id=1)
    assert second == ContactCreated(contact_id=2)


def test_add_contact_stores_fields_verbatim() -> None:
    contacts, _ = _services()
    fields = ContactFields(name="  Dana ", email="", phone="")
    created = contacts.add_contact(ALICE, fields)
    view = contacts.get_contact(ALICE, created.contact_id)
    assert view.name == "  Dana "
    assert view.email == ""
    assert view.phone == ""
    assert view.access is AccessLevel.OWNER


def test_add_contact_requires_account() -> None:
    contacts, _ = _services()
    result = contacts.add_contact(Session.for_principal("p3"), BOB_FIELDS)
    assert result == AccountRequired(principal="p3")


def test_add_contact_unauthenticated() -> None:
    contacts, _ = _services()
    assert isinstance(contacts.add_contact(Session(), BOB_FIELDS), Unauthenticated)
    assert isinstance(contacts.get_visible_contacts(Session()), Unauthenticated)


def test_edit_contact_by_owner() -> None:
    contacts, _ = _services()
    created = contacts.add_contact(ALICE, BOB_FIELDS)
    new_fields = ContactFields(name="Robert", email="r@x.com", phone="")
    assert contacts.edit_contact(ALICE, created.contact_id, new_fields) == ContactUpdated(
        contact_id=created.contact_id
    )
    view = contacts.get_contact(ALICE, created.contact_id)
    assert (view.name, view.email, view.phone) == ("Robert", "r@x.com", "")


def test_edit_unknown_contact() -> None:
    contacts, _ = _services()
    assert contacts.edit_contact(ALICE, 42, BOB_FIELDS) == ContactNotFound(contact_id=42)


def test_non_owner_cannot_edit_or_delete_even_with_grant() -> None:
    contacts, sharing = _services()
    created = contacts.add_contact(ALICE, BOB_FIELDS)
    cid = created.contact_id

    assert contacts.edit_contact(CAROL, cid, ContactFields(name="X")) == NotOwner(contact_id=cid)
    assert contacts.delete_contact(CAROL, cid) == NotOwner(contact_id=cid)

    sharing.share_contact(ALICE, cid, "carol")
    assert contacts.edit_contact(CAROL, cid, ContactFields(name="X")) == NotOwner(contact_id=cid)
    assert contacts.delete_contact(CAROL, cid) == NotOwner(contact_id=cid)
    assert contacts.get_contact(ALICE, cid).name == "Bob"


def test_delete_contact_removes_it() -> None:
    contacts, _ = _services()
    created = contacts.add_contact(ALICE, BOB_FIELDS)
    assert contacts.delete_contact(ALICE, created.contact_id) == ContactDeleted(
        contact_id=created.contact_id
    )
    assert contacts.get_contact(ALICE, created.contact_id) == ContactNotFound(
        contact_id=created.contact_id
    )
    assert contacts.delete_contact(ALICE, created.contact_id) == ContactNotFound(
        contact_id=created.contact_id
    )
    assert contacts.get_visible_contacts(ALICE) == []


def test_deleted_ids_are_not_reused() -> None:
    contacts, _ = _services()
    first = contacts.add_contact(ALICE, BOB_FIELDS)
    contacts.delete_contact(ALICE, first.contact_id)
    second = contacts.add_contact(ALICE, BOB_FIELDS)
    assert second.contact_id == first.contact_id + 1


def test_visible_contacts_ordered_by_id_owned_and_granted() -> None:
    contacts, sharing = _services()
    a1 = contacts.add_contact(ALICE, ContactFields(name="A1"))
    c1 = contacts.add_contact(CAROL, ContactFields(name="C1"))
    a2 = contacts.add_contact(ALICE, ContactFields(name="A2"))
    sharing.share_contact(ALICE, a2.contact_id, "carol")

    carol_view = contacts.get_visible_contacts(CAROL)
    assert [v.contact_id for v in carol_view] == [c1.contact_id, a2.contact_id]
    assert [v.access for v in carol_view] == [AccessLevel.OWNER, AccessLevel.GRANTEE]

    alice_view = contacts.get_visible_contacts(ALICE)
    assert [v.name for v in alice_view] == ["A1", "A2"]
    assert alice_view[0].contact_id == a1.contact_id


def test_owner_sees_grantees_grantee_does_not() -> None:
    repo = InMemoryRepository()
    accounts = AccountService(repo)
    dave = Session.for_principal("p4")
    for session, name in ((ALICE, "alice"), (CAROL, "carol"), (dave, "dave")):
        accounts.create_account(session, name)
    contacts, sharing = ContactService(repo), SharingService(repo)
    cid = contacts.add_contact(ALICE, BOB_FIELDS).contact_id
    sharing.share_contact(ALICE, cid, "dave")
    sharing.share_contact(ALICE, cid, "carol")

    assert contacts.get_contact(ALICE, cid).shared_with == ("carol", "dave")
    assert contacts.get_visible_contacts(ALICE)[0].shared_with == ("carol", "dave")
    assert contacts.get_contact(CAROL, cid).shared_with == ()
    assert contacts.get_visible_contacts(dave)[0].shared_with == ()


def test_stranger_read_looks_like_not_found() -> None:
    contacts, _ = _services()
    cid = contacts.add_contact(ALICE, BOB_FIELDS).contact_id
    assert contacts.get_contact(CAROL, cid) == ContactNotFound(contact_id=cid)
    assert contacts.get_visible_contacts(CAROL) == []


def test_grantee_reads_current_field_values() -> None:
    contacts, sharing = _services()
    cid = contacts.add_contact(ALICE, BOB_FIELDS).contact_id
    sharing.share_contact(ALICE, cid, "carol")
    contacts.edit_contact(ALICE, cid, ContactFields(name="Bobby", email="b@x.com", phone="556"))
    view = contacts.get_contact(CAROL, cid)
    assert view.name == "Bobby"
    assert view.phone == "556"
    assert view.access is AccessLevel.GRANTEE

"""Unit tests for AccountService. In-memory repo and explicit sessions only."""

from contactshare.application import (
    AccountCreated,
    AccountService,
    AlreadyRegistered,
    Invalid,
    Session,
    Unauthenticated,
    UsernameNotFound,
    UsernameTaken,
    WhoAmI,
)
from contactshare.infrastructure import InMemoryRepository


def _service() -> AccountService:
    return AccountService(repository=InMemoryRepository())


def test_create_account_binds_username() -> None:
    service = _service()
    result = service.create_account(Session.for_principal("p1"), "alice")
    assert isinstance(result, AccountCreated)
    assert result.principal == "p1"
    assert result.username == "alice"
    assert result.created is True


def test_create_account_same_pair_is_idempotent() -> None:
    service = _service()
    session = Session.for_principal("p1")
    service.create_account(session, "alice")
    again = service.create_account(session, "alice")
    assert isinstance(again, AccountCreated)
    assert again.created is False
    assert service.whoami(session) == WhoAmI(principal="p1", username="alice")


def test_create_account_twice_with_different_username_fails() -> None:
    service = _service()
    session = Session.for_principal("p1")
    service.create_account(session, "alice")
    result = service.create_account(session, "alicia")
    assert isinstance(result, AlreadyRegistered)
    assert result.username == "alice"
    assert service.resolve("alicia") == UsernameNotFound(username="alicia")


def test_username_taken_by_other_principal() -> None:
    service = _service()
    service.create_account(Session.for_principal("p1"), "alice")
    result = service.create_account(Session.for_principal("p2"), "alice")
    assert isinstance(result, UsernameTaken)
    assert result.username == "alice"
    assert service.whoami(Session.for_principal("p2")).username is None


def test_username_whitespace_stripped() -> None:
    service = _service()
    result = service.create_account(Session.for_principal("p1"), "  alice  ")
    assert isinstance(result, AccountCreated)
    assert result.username == "alice"
    assert service.resolve("alice") == "p1"


def test_invalid_usernames_rejected() -> None:
    service = _service()
    session = Session.for_principal("p1")
    assert isinstance(service.create_account(session, ""), Invalid)
    assert isinstance(service.create_account(session, "   "), Invalid)
    too_long = service.create_account(session, "x" * 65)
    assert isinstance(too_long, Invalid)
    assert "64" in too_long.reason
    assert service.whoami(session).username is None


def test_whoami_unregistered_is_not_an_error() -> None:
    service = _service()
    result = service.whoami(Session.for_principal("p9"))
    assert result == WhoAmI(principal="p9", username=None)


def test_anonymous_session_is_unauthenticated() -> None:
    service = _service()
    assert isinstance(service.whoami(Session()), Unauthenticated)
    assert isinstance(service.create_account(Session(), "alice"), Unauthenticated)
    assert isinstance(service.resolve("alice"), UsernameNotFound)


def test_resolve_unknown_username() -> None:
    service = _service()
    assert service.resolve("nobody") == UsernameNotFound(username="nobody")
    assert service.resolve("") == UsernameNotFound(username="")


def test_resolve_cleans_username_like_create_account() -> None:
    service = _service()
    service.create_account(Session.for_principal("p1"), "alice")
    assert service.resolve("  alice ") == "p1"
    too_long = "x" * 65
    assert service.resolve(too_long) == UsernameNotFound(username=too_long)

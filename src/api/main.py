"""
FastAPI backend: REST API over the contact sharing core.
Run with uvicorn: uvicorn api.main:app --reload
"""

import logging
from pathlib import Path

from dotenv import load_dotenv

# Load .env from repo root (when run from repo root or from Docker)
for path in (
    Path(__file__).resolve().parent.parent.parent / ".env",
    Path.cwd() / ".env",
):
    if path.exists():
        load_dotenv(path)
        break

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from neo4j import GraphDatabase
from pydantic import BaseModel

from api.settings import STORE_NEO4J, Settings
from contactshare.application import (
    AccountRequired,
    AccountService,
    AlreadyRegistered,
    ContactNotFound,
    ContactService,
    ContactView,
    Invalid,
    InvalidGrant,
    NotOwner,
    Repository,
    Session,
    SharingService,
    Unauthenticated,
    UsernameNotFound,
    UsernameTaken,
    authenticate,
)
from contactshare.domain import ContactFields
from contactshare.infrastructure import (
    InMemoryRepository,
    Neo4jRepository,
    TokenIdentityResolver,
    ensure_constraints,
)

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)
logger = logging.getLogger(__name__)


def _build_repository(settings: Settings, app: FastAPI) -> Repository:
    if settings.store == STORE_NEO4J:
        cfg = settings.neo4j
        app.state.driver = GraphDatabase.driver(cfg.uri, auth=(cfg.user, cfg.password))
        ensure_constraints(app.state.driver)
        return Neo4jRepository(app.state.driver)
    return InMemoryRepository()


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.driver = None
    settings = Settings.from_env()
    try:
        repo = _build_repository(settings, app)
        app.state.resolver = TokenIdentityResolver(
            settings.identity_token_key, max_age=settings.identity_token_ttl
        )
        app.state.accounts = AccountService(repo)
        app.state.contacts = ContactService(repo)
        app.state.sharing = SharingService(repo, accounts=app.state.accounts)
        logger.info("contactshare API ready (store=%s)", settings.store)
        yield
    finally:
        if getattr(app.state, "driver", None) is not None:
            app.state.driver.close()


app = FastAPI(title="contactshare API", lifespan=lifespan)


def _raise_for_failure(result) -> None:
    """Raise the HTTPException matching a failure result; return for successes."""
    if isinstance(result, Unauthenticated):
        raise HTTPException(
            status_code=401, detail=result.reason, headers={"WWW-Authenticate": "Bearer"}
        )
    if isinstance(result, Invalid):
        raise HTTPException(status_code=400, detail=result.reason)
    if isinstance(result, InvalidGrant):
        raise HTTPException(status_code=400, detail=result.reason)
    if isinstance(result, AccountRequired):
        raise HTTPException(status_code=403, detail="Create an account first")
    if isinstance(result, NotOwner):
        raise HTTPException(status_code=403, detail="Only the owner can do that")
    if isinstance(result, ContactNotFound):
        raise HTTPException(status_code=404, detail="Contact not found")
    if isinstance(result, UsernameNotFound):
        raise HTTPException(status_code=404, detail=f"No account named {result.username!r}")
    if isinstance(result, AlreadyRegistered):
        raise HTTPException(
            status_code=409, detail=f"Already registered as {result.username!r}"
        )
    if isinstance(result, UsernameTaken):
        raise HTTPException(status_code=409, detail="Username already taken")


async def current_session(
    request: Request,
    authorization: str | None = Header(None),
) -> Session:
    """Resolve the bearer credential into an authenticated Session."""
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer":
        token = ""
    result = await authenticate(request.app.state.resolver, token)
    _raise_for_failure(result)
    return result


# --- REST: health ---


@app.get("/health")
def health():
    return {"status": "ok"}


# --- REST: accounts ---


class CreateAccountBody(BaseModel):
    username: str


@app.get("/whoami")
def whoami(request: Request, session: Session = Depends(current_session)):
    result = request.app.state.accounts.whoami(session)
    _raise_for_failure(result)
    return {"principal": result.principal, "username": result.username}


@app.post("/accounts")
def create_account(
    body: CreateAccountBody,
    request: Request,
    session: Session = Depends(current_session),
):
    result = request.app.state.accounts.create_account(session, body.username)
    _raise_for_failure(result)
    return JSONResponse(
        content={"principal": result.principal, "username": result.username},
        status_code=201 if result.created else 200,
    )


# --- REST: contacts ---


class ContactBody(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""

    def to_fields(self) -> ContactFields:
        return ContactFields(name=self.name, email=self.email, phone=self.phone)


class ContactItem(BaseModel):
    contact_id: int
    name: str
    email: str
    phone: str
    access: str
    shared_with: list[str] = []


def _to_item(view: ContactView) -> ContactItem:
    return ContactItem(
        contact_id=view.contact_id,
        name=view.name,
        email=view.email,
        phone=view.phone,
        access=view.access.value,
        shared_with=list(view.shared_with),
    )


@app.get("/contacts")
def list_contacts(request: Request, session: Session = Depends(current_session)):
    result = request.app.state.contacts.get_visible_contacts(session)
    _raise_for_failure(result)
    return [_to_item(view) for view in result]


@app.post("/contacts")
def add_contact(
    body: ContactBody,
    request: Request,
    session: Session = Depends(current_session),
):
    result = request.app.state.contacts.add_contact(session, body.to_fields())
    _raise_for_failure(result)
    return JSONResponse(content={"contact_id": result.contact_id}, status_code=201)


@app.get("/contacts/{contact_id}")
def get_contact(
    contact_id: int,
    request: Request,
    session: Session = Depends(current_session),
):
    result = request.app.state.contacts.get_contact(session, contact_id)
    _raise_for_failure(result)
    return _to_item(result)


@app.put("/contacts/{contact_id}")
def edit_contact(
    contact_id: int,
    body: ContactBody,
    request: Request,
    session: Session = Depends(current_session),
):
    result = request.app.state.contacts.edit_contact(session, contact_id, body.to_fields())
    _raise_for_failure(result)
    return {"contact_id": result.contact_id}


@app.delete("/contacts/{contact_id}")
def delete_contact(
    contact_id: int,
    request: Request,
    session: Session = Depends(current_session),
):
    result = request.app.state.contacts.delete_contact(session, contact_id)
    _raise_for_failure(result)
    return {"contact_id": result.contact_id}


# --- REST: sharing ---


@app.get("/contacts/{contact_id}/shares")
def list_shares(
    contact_id: int,
    request: Request,
    session: Session = Depends(current_session),
):
    result = request.app.state.sharing.list_grantees(session, contact_id)
    _raise_for_failure(result)
    return {"contact_id": result.contact_id, "usernames": list(result.usernames)}


@app.put("/contacts/{contact_id}/shares/{username}")
def share_contact(
    contact_id: int,
    username: str,
    request: Request,
    session: Session = Depends(current_session),
):
    result = request.app.state.sharing.share_contact(session, contact_id, username)
    _raise_for_failure(result)
    return {"contact_id": result.contact_id, "username": result.username}


@app.delete("/contacts/{contact_id}/shares/{username}")
def revoke_shared_contact(
    contact_id: int,
    username: str,
    request: Request,
    session: Session = Depends(current_session),
):
    result = request.app.state.sharing.revoke_shared_contact(session, contact_id, username)
    _raise_for_failure(result)
    return {
        "contact_id": result.contact_id,
        "username": result.username,
        "removed": result.removed,
    }

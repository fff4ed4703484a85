"""
Caller sessions as explicit values, driven by an XState machine.

A Session is passed into every use case; there is no ambient "current user".
The machine is standard XState JSON (id, initial, states with on: { EVENT: target })
and xstate-python computes the transitions.
"""

import asyncio
import logging
from dataclasses import dataclass

from xstate.machine import Machine

from contactshare.application.dto import Unauthenticated
from contactshare.application.ports import IdentityResolver

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"
AUTHENTICATING = "authenticating"
AUTHENTICATED = "authenticated"
FAILED = "failed"

SESSION_MACHINE = {
    "id": "session",
    "initial": ANONYMOUS,
    "states": {
        ANONYMOUS: {"on": {"BEGIN": AUTHENTICATING}},
        AUTHENTICATING: {
            "on": {
                "RESOLVE": AUTHENTICATED,
                "REJECT": FAILED,
                "CANCEL": ANONYMOUS,
            }
        },
        AUTHENTICATED: {"on": {"LOGOUT": ANONYMOUS}},
        FAILED: {"on": {"BEGIN": AUTHENTICATING, "RESET": ANONYMOUS}},
    },
}

_machine: Machine | None = None


def _machine_instance() -> Machine:
    global _machine
    if _machine is None:
        _machine = Machine(SESSION_MACHINE)
    return _machine


def transition(state_value: str, event: str) -> str | None:
    """Return next state value for (state_value, event), or None if no transition."""
    try:
        instance = _machine_instance()
        state = instance.state_from(state_value)
        next_state = instance.transition(state, event)
        if next_state.value == state_value:
            return None
        return next_state.value
    except (ValueError, KeyError):
        return None


@dataclass(frozen=True)
class Session:
    """
    Who is calling. Only an authenticated session carries a principal; the
    credential handle is kept while authenticating and once authenticated.
    """

    state: str = ANONYMOUS
    principal: str | None = None
    credential: str | None = None

    def _advance(
        self, event: str, *, principal: str | None = None, credential: str | None = None
    ) -> "Session":
        target = transition(self.state, event)
        if target is None:
            raise ValueError(f"Session cannot {event} from {self.state}.")
        return Session(state=target, principal=principal, credential=credential)

    def begin(self, credential: str) -> "Session":
        return self._advance("BEGIN", credential=credential)

    def resolve(self, principal: str) -> "Session":
        if not principal:
            raise ValueError("A resolved session needs a principal.")
        return self._advance("RESOLVE", principal=principal, credential=self.credential)

    def reject(self) -> "Session":
        return self._advance("REJECT")

    def cancel(self) -> "Session":
        return self._advance("CANCEL")

    def reset(self) -> "Session":
        return self._advance("RESET")

    def logout(self) -> "Session":
        return self._advance("LOGOUT")

    @property
    def is_authenticated(self) -> bool:
        return self.state == AUTHENTICATED and bool(self.principal)

    def require_principal(self) -> str | Unauthenticated:
        if not self.is_authenticated:
            return Unauthenticated(reason=f"Session is {self.state}.")
        return self.principal

    @classmethod
    def for_principal(cls, principal: str, credential: str | None = None) -> "Session":
        """Authenticated session for a principal already verified upstream."""
        return cls().begin(credential or "").resolve(principal)


async def authenticate(
    resolver: IdentityResolver, credential: str | None
) -> Session | Unauthenticated:
    """Run one identity-provider exchange.

    Returns an authenticated Session or Unauthenticated. If the awaiting task is
    cancelled the pending attempt is discarded and CancelledError propagates.
    """
    credential = (credential or "").strip()
    if not credential:
        return Unauthenticated(reason="Missing credential.")
    session = Session().begin(credential)
    try:
        principal = await resolver.resolve(credential)
    except asyncio.CancelledError:
        discarded = session.cancel()
        logger.info("Authentication cancelled; session %s", discarded.state)
        raise
    if not principal:
        failed = session.reject()
        logger.warning("Credential rejected; session %s", failed.state)
        return Unauthenticated(reason="Invalid or expired credential.")
    return session.resolve(principal)

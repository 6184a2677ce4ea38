"""Session tickets recording when a user logged in.

A ticket is stored in the Flask session at login. Requests made with a session
whose ticket is missing, belongs to someone else, or has expired are treated as
stale even if the session still carries a user.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable, MutableMapping
from typing import Any, Protocol

from flask import current_app, session

from mailcraft.config import DEFAULT_SESSION_TICKET_TTL

TICKET_SESSION_KEY = "ticket"


class TicketValidator(Protocol):
    """Decides whether the current session ticket may still be used."""

    def is_current_ticket_valid(self) -> bool: ...


def issue_ticket(
    username: str,
    store: MutableMapping[str, Any] | None = None,
    clock: Callable[[], float] = time.time,
) -> dict[str, Any]:
    """Create a new ticket for username and put it into the session."""
    ticket = {"id": uuid.uuid4().hex, "user": username, "issued_at": clock()}
    (session if store is None else store)[TICKET_SESSION_KEY] = ticket
    return ticket


def revoke_ticket(store: MutableMapping[str, Any] | None = None) -> None:
    (session if store is None else store).pop(TICKET_SESSION_KEY, None)


class SessionTicketValidator:
    """Validates the ticket stored in the Flask session of the current request."""

    def __init__(
        self,
        ttl: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the validator.

        Args:
            ttl: Seconds a ticket stays valid. When None, SESSION_TICKET_TTL from
                the application config is used.
            clock: Source of the current time as a UNIX timestamp.
        """
        self.ttl = ttl
        self._clock = clock

    def _effective_ttl(self) -> int:
        if self.ttl is not None:
            return self.ttl
        return current_app.config.get("SESSION_TICKET_TTL", DEFAULT_SESSION_TICKET_TTL)

    def is_current_ticket_valid(self) -> bool:
        ticket = session.get(TICKET_SESSION_KEY)
        user = session.get("user")
        if not isinstance(ticket, dict) or not isinstance(user, dict):
            return False
        if ticket.get("user") != user.get("username"):
            return False

        issued_at = ticket.get("issued_at")
        if not isinstance(issued_at, (int, float)):
            return False
        return 0 <= self._clock() - issued_at < self._effective_ttl()

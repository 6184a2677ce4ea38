"""Role based authorization of editor actions."""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from flask import jsonify, make_response, session

from mailcraft import texts
from mailcraft.auth.tickets import SessionTicketValidator, TicketValidator

logger = logging.getLogger(__name__)

ADVANCED_USERS_ROLE = "campaign advanced users"
USERS_ROLE = "campaign users"


@dataclass(frozen=True)
class Caller:
    """The authenticated user making a request.

    Attributes:
        username: Login name of the user.
        roles: Roles the user is a member of.
        is_administrator: Administrators pass every role check.
    """

    username: str
    roles: frozenset[str] = frozenset()
    is_administrator: bool = False

    def is_in_any_role(self, roles: Iterable[str]) -> bool:
        return not self.roles.isdisjoint(roles)

    @classmethod
    def from_session(cls) -> Caller | None:
        """Build the caller from the user stored in the Flask session."""
        user = session.get("user")
        if not isinstance(user, dict) or not user.get("username"):
            return None
        return cls(
            username=user["username"],
            roles=frozenset(user.get("roles", ())),
            is_administrator=bool(user.get("is_admin", False)),
        )


def is_authorized(
    caller: Caller | None,
    required_roles: Iterable[str],
    admins_only: bool,
    ticket_validator: TicketValidator,
) -> bool:
    """Decide whether caller may run an action guarded by required_roles.

    Role members pass unless the action is restricted to administrators;
    administrators always pass. Either way the session ticket must be valid.
    """
    if caller is None:
        return False

    role_authorized = caller.is_in_any_role(required_roles) and not admins_only
    allowed = role_authorized or caller.is_administrator

    return allowed and ticket_validator.is_current_ticket_valid()


class AuthorizationGate:
    """Guards Flask views with a role check and a session ticket check.

    Can be used directly through check() or as a view decorator::

        gate = AuthorizationGate(ADVANCED_USERS_ROLE, USERS_ROLE)

        @blueprint.route("/add", methods=["POST"])
        @gate
        def add():
            ...

    Denied requests get a 401 response and the view is not called.
    """

    def __init__(
        self,
        *roles: str,
        admins_only: bool = False,
        ticket_validator: TicketValidator | None = None,
        caller_loader: Callable[[], Caller | None] = Caller.from_session,
    ) -> None:
        self.roles = frozenset(roles)
        self.admins_only = admins_only
        self.ticket_validator = ticket_validator or SessionTicketValidator()
        self.caller_loader = caller_loader

    def check(self, caller: Caller | None) -> bool:
        return is_authorized(caller, self.roles, self.admins_only, self.ticket_validator)

    def __call__(self, view: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(view)
        def guarded_view(*args: Any, **kwargs: Any) -> Any:
            caller = self.caller_loader()
            if not self.check(caller):
                logger.warning(
                    "Access to %s denied for %s",
                    view.__name__,
                    caller.username if caller else "anonymous user",
                )
                return make_response(
                    jsonify({"error": True, "errorMessage": texts.localize(texts.ACCESS_DENIED)}),
                    401,
                )
            return view(*args, **kwargs)

        return guarded_view

from mailcraft.auth.gate import (
    ADVANCED_USERS_ROLE,
    USERS_ROLE,
    AuthorizationGate,
    Caller,
    is_authorized,
)
from mailcraft.auth.tickets import (
    SessionTicketValidator,
    TicketValidator,
    issue_ticket,
    revoke_ticket,
)

__all__ = [
    "ADVANCED_USERS_ROLE",
    "USERS_ROLE",
    "AuthorizationGate",
    "Caller",
    "SessionTicketValidator",
    "TicketValidator",
    "is_authorized",
    "issue_ticket",
    "revoke_ticket",
]

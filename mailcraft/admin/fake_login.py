"""
Fake login functionality for development environments only.

WARNING: This module provides fake login functionality and should NEVER be used in production
environments as it bypasses proper authentication and authorization controls.
"""

import logging
from typing import Any

from flask import Blueprint, jsonify, make_response, session

from mailcraft.auth import ADVANCED_USERS_ROLE, USERS_ROLE, issue_ticket, revoke_ticket

logger = logging.getLogger(__name__)

FAKE_USERS: dict[str, dict[str, Any]] = {
    "admin": {"username": "admin", "roles": [], "is_admin": True},
    "advanced": {"username": "advanced", "roles": [ADVANCED_USERS_ROLE], "is_admin": False},
    "user": {"username": "user", "roles": [USERS_ROLE], "is_admin": False},
    "guest": {"username": "guest", "roles": [], "is_admin": False},
}


class DebugModeRequiredError(RuntimeError):
    """Raised when fake login routes are registered on a production app."""

    def __init__(self) -> None:
        super().__init__(
            "SECURITY ERROR: Fake login routes are enabled outside of a testing environment! "
            "Set DEBUG: true or TESTING: true in your config, or disable FAKE_LOGIN."
        )


def create_fake_login_blueprint() -> Blueprint:
    """Create routes that log in as one of the FAKE_USERS.

    Registration fails with DebugModeRequiredError unless the app is in
    debug or testing mode.
    """
    fake_login = Blueprint("fake_login", __name__, url_prefix="/admin")

    @fake_login.record_once
    def ensure_debug_mode(state) -> None:
        if not (state.app.config.get("DEBUG") or state.app.config.get("TESTING")):
            raise DebugModeRequiredError()

    @fake_login.route("/fake-login/<role>", methods=["POST"])
    def handle_fake_login(role: str) -> Any:
        user = FAKE_USERS.get(role)
        if user is None:
            valid_roles = ", ".join(FAKE_USERS)
            return make_response(
                jsonify({"error": True, "errorMessage": f"Invalid role: {role}. Must be one of: {valid_roles}"}),
                400,
            )
        session["user"] = dict(user)
        issue_ticket(user["username"])
        logger.warning("Fake login as %s", user["username"])
        return jsonify({"error": False, "user": session["user"]})

    @fake_login.route("/fake-logout", methods=["POST"])
    def handle_fake_logout() -> Any:
        session.pop("user", None)
        revoke_ticket()
        return jsonify({"error": False})

    return fake_login

"""Result types of the attach operation.

This module provides:
- ErrorKind: Category of a failed attach
- FollowUpAction: Suggested next step for the editor
- AttachResult: Outcome of a single attach call
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Why an attach did not succeed.

    Values:
        CONTRACT_VIOLATION: The request was missing required data (caller bug).
        NOT_FOUND: The message or the media item does not exist.
        STATE_CONFLICT: The message is not in an editable state.
        QUOTA_EXCEEDED: The total attachment size would exceed the configured limit.
        UNEXPECTED_FAILURE: Anything else; details are only logged.
    """

    CONTRACT_VIOLATION = "contract_violation"
    NOT_FOUND = "not_found"
    STATE_CONFLICT = "state_conflict"
    QUOTA_EXCEEDED = "quota_exceeded"
    UNEXPECTED_FAILURE = "unexpected_failure"


@dataclass(frozen=True)
class FollowUpAction:
    """A follow-up action the UI may offer after an attach.

    This is plain data; nothing is executed on the server.

    Attributes:
        action_link: Client command reference to run when the editor accepts.
        action_text: Label of the link.
        message: Text shown next to the link.
    """

    action_link: str
    action_text: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "actionLink": self.action_link,
            "actionText": self.action_text,
            "message": self.message,
        }


@dataclass(frozen=True)
class AttachResult:
    """Outcome of attaching a file to a message.

    Attributes:
        succeeded: Whether the file was attached.
        message: Localized text describing the outcome.
        error_kind: Failure category, None on success.
        follow_up_action: Optional suggestion to propagate the attachment.
    """

    succeeded: bool
    message: str
    error_kind: ErrorKind | None = None
    follow_up_action: FollowUpAction | None = None

    @classmethod
    def success(cls, message: str, follow_up_action: FollowUpAction | None = None) -> AttachResult:
        return cls(succeeded=True, message=message, follow_up_action=follow_up_action)

    @classmethod
    def failure(cls, error_kind: ErrorKind, message: str) -> AttachResult:
        return cls(succeeded=False, message=message, error_kind=error_kind)

    def to_response(self) -> dict[str, Any]:
        """Render the result in the shape the authoring UI expects."""
        return {
            "error": not self.succeeded,
            "errorMessage": self.message,
            "errorKind": self.error_kind.value if self.error_kind else None,
            "notificationMessages": (
                [self.follow_up_action.to_dict()] if self.follow_up_action else []
            ),
        }

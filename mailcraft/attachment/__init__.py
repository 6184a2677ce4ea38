"""Attaching media library files to campaign messages.

Example:
    >>> from mailcraft.attachment import AttachmentAttacher, AttachRequest
    >>> attacher = AttachmentAttacher(db, total_size_limit=5 * 1024 * 1024)
    >>> result = attacher.attach(
    ...     AttachRequest(
    ...         message_id="welcome-mail",
    ...         attachment_id="media-42",
    ...         file_name="brochure.pdf",
    ...         language="en",
    ...     )
    ... )
    >>> result.succeeded
    True
"""

from mailcraft.attachment.constants import (
    DEFAULT_ATTACHMENT_TOTAL_SIZE,
    ContractViolation,
)
from mailcraft.attachment.core import AttachmentAttacher, AttachRequest
from mailcraft.attachment.result import AttachResult, ErrorKind, FollowUpAction

__all__ = [
    "AttachRequest",
    "AttachResult",
    "AttachmentAttacher",
    "ContractViolation",
    "DEFAULT_ATTACHMENT_TOTAL_SIZE",
    "ErrorKind",
    "FollowUpAction",
]

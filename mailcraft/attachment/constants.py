"""Attachment size limits, naming constants and the contract violation error.

Size Limits:
    The default total attachment size per message is 10MB
    (DEFAULT_ATTACHMENT_TOTAL_SIZE), a common email attachment limit.
    It can be overridden with the ATTACHMENTS.TOTAL_SIZE_IN_BYTES setting.
"""

# Default maximum total size of all attachments of one message: 10MB
DEFAULT_ATTACHMENT_TOTAL_SIZE = 10 * 1024 * 1024

# Attached media items are renamed to this prefix followed by a timestamp
ATTACHMENT_NAME_PREFIX = "attachment"
ATTACHMENT_NAME_TIME_FORMAT = "%Y%m%dT%H%M%S"

# Client-side command that copies an attachment to every language version
ADD_TO_ALL_LANGUAGES_TRIGGER = "trigger:attachment:file:addtoalllanguages"


class ContractViolation(ValueError):
    """Raised when an attach request is missing required data.

    This is a caller bug rather than a business error, so it is raised instead of
    being reported through an AttachResult.

    Attributes:
        field_name: Name of the offending request field.
    """

    def __init__(self, field_name: str, message: str | None = None) -> None:
        self.field_name = field_name
        super().__init__(message or f"Could not get {field_name} from the attach request")
